"""Models package - contains database models (SQLAlchemy ORM)."""

from .core import (
    Contest,
    Question,
    TestCase,
)
from .submission import Submission
from .violation import ContestViolation

__all__ = [
    "Contest",
    "Question",
    "TestCase",
    "Submission",
    "ContestViolation",
]
