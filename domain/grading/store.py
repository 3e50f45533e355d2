"""SQLAlchemy-backed stores used by the grading workflow.

Submissions are append-only: there is no update or delete here.
"""

from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from domain.models import Question, Submission, TestCase


class TestCaseStore:
    def __init__(self, db: Session):
        self.db = db

    def list_test_cases(self, contest_id: str, question_id: str) -> List[TestCase]:
        """Test cases of one question, ascending by `order`."""
        return (
            self.db.query(TestCase)
            .join(Question, TestCase.question_id == Question.id)
            .filter(Question.contest_id == contest_id, TestCase.question_id == question_id)
            .order_by(TestCase.order.asc(), TestCase.id.asc())
            .all()
        )


class SubmissionStore:
    def __init__(self, db: Session):
        self.db = db

    def create_submission(self, record: Dict[str, Any]) -> str:
        submission = Submission(**record)
        self.db.add(submission)
        self.db.commit()
        return submission.id

    def list_for_user(
        self,
        user_id: str,
        skip: int = 0,
        limit: int = 50,
        contest_id: Optional[str] = None,
        question_id: Optional[str] = None,
        status: Optional[str] = None,
    ) -> Tuple[int, List[Submission]]:
        query = self.db.query(Submission).filter(Submission.user_id == user_id)

        if contest_id:
            query = query.filter(Submission.contest_id == contest_id)
        if question_id:
            query = query.filter(Submission.question_id == question_id)
        if status:
            query = query.filter(Submission.status == status)

        total = query.count()
        rows = (
            query.order_by(Submission.submitted_at.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )
        return total, rows

    def get_for_user(self, submission_id: str, user_id: str) -> Optional[Submission]:
        return (
            self.db.query(Submission)
            .filter(Submission.id == submission_id, Submission.user_id == user_id)
            .first()
        )
