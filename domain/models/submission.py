"""
Submission database models.
Contains: Submission
"""
import uuid
from datetime import datetime

from sqlalchemy import Column, Integer, Boolean, String, Text, DateTime, ForeignKey, JSON

from app.db import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class Submission(Base):
    """Append-only record of one grading call. Never updated after insert."""
    __tablename__ = "submissions"

    id = Column(String(36), primary_key=True, index=True, default=_new_id)
    contest_id = Column(String(128), ForeignKey("contests.id"), nullable=False, index=True)
    question_id = Column(String(128), ForeignKey("questions.id"), nullable=False, index=True)
    user_id = Column(String(128), nullable=False, index=True)

    # Code submitted
    code = Column(Text, nullable=False)
    language = Column(String(64), nullable=False)

    # Results
    status = Column(String(16), nullable=False)  # "correct" | "incorrect"
    passed_count = Column(Integer, nullable=False, default=0)
    total = Column(Integer, nullable=False, default=0)
    results = Column(JSON, nullable=True)  # List of per-test-case results
    quick = Column(Boolean, default=False, nullable=False)

    # Audit
    submitted_at = Column(DateTime, default=datetime.utcnow)
    triggered_by = Column(String(128), nullable=False)
    created_by_admin = Column(String(128), nullable=True)  # set only for impersonated grading
