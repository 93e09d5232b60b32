"""Reroller - regenerate git patches that no longer apply."""

__version__ = "0.1.0"
