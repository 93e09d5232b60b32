"""Patch files read by and written by a reroll."""

from reroller.patch.artifact import PatchArtifact
from reroller.patch.output import output_path

__all__ = ["PatchArtifact", "output_path"]
