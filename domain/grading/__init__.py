"""Grading package - chấm bài nộp qua remote runner và lưu submission."""

from .errors import GradingError, NoTestCasesError
from .store import SubmissionStore, TestCaseStore
from .workflow import Grader, grade

__all__ = [
    "GradingError",
    "NoTestCasesError",
    "SubmissionStore",
    "TestCaseStore",
    "Grader",
    "grade",
]
