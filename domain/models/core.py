"""
Core database models.
Contains: Contest, Question, TestCase
"""
from datetime import datetime

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from app.db import Base


class Contest(Base):
    """Contest model - a timed set of questions"""
    __tablename__ = "contests"

    id = Column(String(128), primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    duration_minutes = Column(Integer, nullable=False, default=60)
    created_by = Column(String(128), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    questions = relationship("Question", back_populates="contest", cascade="all, delete-orphan")


class Question(Base):
    """Question model - one problem inside a contest"""
    __tablename__ = "questions"

    id = Column(String(128), primary_key=True, index=True)
    contest_id = Column(String(128), ForeignKey("contests.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    constraints = Column(Text, nullable=True)
    level = Column(Integer, nullable=False, default=1)  # 1 = easy, 2 = medium, 3 = hard
    sample_input = Column(Text, nullable=True)
    sample_output = Column(Text, nullable=True)

    # Relationships
    contest = relationship("Contest", back_populates="questions")
    testcases = relationship(
        "TestCase",
        back_populates="question",
        cascade="all, delete-orphan",
        order_by="TestCase.order",
    )


class TestCase(Base):
    """Hidden test case for a question. `order` decides evaluation order (0 runs first)."""
    __tablename__ = "test_cases"

    id = Column(Integer, primary_key=True, index=True)
    question_id = Column(String(128), ForeignKey("questions.id", ondelete="CASCADE"), nullable=False, index=True)
    order = Column(Integer, nullable=False, default=0)
    input = Column(Text, nullable=True)
    expected_output = Column(Text, nullable=True)
    runner_version = Column(String(64), nullable=True)  # None => "*"

    # Relationships
    question = relationship("Question", back_populates="testcases")
