"""Reroll session model and persistence."""

from reroller.session.model import Session, branch_name
from reroller.session.store import SessionStore

__all__ = ["Session", "SessionStore", "branch_name"]
