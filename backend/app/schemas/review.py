"""
Pydantic schemas for review-related API requests and responses.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.models.review import ReviewStatus


class ReviewUpdateRequest(BaseModel):
    """Schema for upserting the review of one file."""
    filename: str = Field(..., min_length=1, max_length=1024)
    text: str = Field("", max_length=2048)
    status: ReviewStatus = ReviewStatus.NORMAL


class ReviewRecordResponse(BaseModel):
    """Schema for a stored review record."""
    id: int
    filename: str
    text: str
    status: ReviewStatus
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class MergedItem(BaseModel):
    """
    Schema for one dataset item as shown to the reviewer.

    Combines a metadata entry with its stored review, if any. Unreviewed
    items carry the reference text and no status or timestamps.
    """
    filename: str
    file: str
    text: Optional[str] = None
    text_src: Optional[str] = None
    id: Optional[int] = None
    status: Optional[ReviewStatus] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def reviewed(self) -> bool:
        return self.created_at is not None


class SummaryResponse(BaseModel):
    """Schema for aggregate review counts."""
    total: int = Field(..., ge=0)
    normal: int = Field(0, ge=0)
    drop: int = Field(0, ge=0)
    remaining: int
