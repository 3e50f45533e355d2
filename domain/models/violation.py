"""
Proctoring violation models.
Contains: ContestViolation
"""
from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime, JSON

from app.db import Base


class ContestViolation(Base):
    """Proctoring event reported by the contest page (tab switch, focus loss, ...)"""
    __tablename__ = "contest_violations"

    id = Column(Integer, primary_key=True, index=True)
    contest_id = Column(String(128), nullable=True, index=True)
    user_id = Column(String(128), nullable=True, index=True)
    tab_id = Column(String(128), nullable=True)
    type = Column(String(64), nullable=False, default="unknown")
    detail = Column(JSON, nullable=True)
    client_ts = Column(DateTime, nullable=True)
    server_ts = Column(DateTime, default=datetime.utcnow)
    ip = Column(String(255), nullable=True)
