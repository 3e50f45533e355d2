"""Structural grading failures. Raised before anything is executed or persisted."""


class GradingError(Exception):
    """Base class for errors that abort a whole grading call."""


class NoTestCasesError(GradingError):
    def __init__(self, contest_id: str, question_id: str):
        self.contest_id = contest_id
        self.question_id = question_id
        super().__init__("No testcases found for this question")
