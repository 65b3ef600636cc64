"""
SQLAlchemy model for per-file review edits.
"""

from datetime import datetime
from enum import Enum

from sqlalchemy import Column, String, Integer, DateTime

from app.db.database import Base


class ReviewStatus(str, Enum):
    """Review outcome for one dataset item."""
    NORMAL = "normal"
    DROP = "drop"


class ReviewRecord(Base):
    """
    Database model for a reviewed dataset item.

    Holds the edited transcript and review status of one audio file.
    Rows are keyed by the audio filename; at most one row exists per file.
    """

    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    filename = Column(String(1024), nullable=False, unique=True, index=True)
    text = Column(String(2048), nullable=False)
    status = Column(String(16), nullable=False, default=ReviewStatus.NORMAL.value, index=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<ReviewRecord(id={self.id}, filename='{self.filename}', status='{self.status}')>"
