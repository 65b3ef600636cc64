"""
Service layer for the review store.
Handles upserting, listing, and counting per-file review records.
"""

from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from app.models.review import ReviewRecord, ReviewStatus
from app.utils.logger import get_logger

logger = get_logger(__name__)


class ReviewService:
    """
    Service class for handling review record operations.

    The review table is keyed by filename; every write goes through
    upsert so a file never has more than one record.
    """

    def __init__(self, db: Session) -> None:
        """
        Initialize the review service.

        Args:
            db: Database session for operations
        """
        self.db: Session = db

    def get_by_filename(self, filename: str) -> Optional[ReviewRecord]:
        """
        Retrieve the review record of a file.

        Args:
            filename: Audio filename the record is keyed by

        Returns:
            ReviewRecord instance or None if the file has not been reviewed
        """
        return self.db.query(ReviewRecord).filter(ReviewRecord.filename == filename).first()

    def upsert(self, filename: str, text: str, status: ReviewStatus = ReviewStatus.NORMAL) -> ReviewRecord:
        """
        Insert or update the review record of a file.

        Args:
            filename: Audio filename the record is keyed by
            text: Edited transcript text
            status: Review outcome

        Returns:
            The stored record after the write

        Raises:
            IntegrityError: If the write violates a table constraint
        """
        status_value = ReviewStatus(status).value
        record = self.get_by_filename(filename)

        try:
            if record is None:
                now = datetime.utcnow()
                record = ReviewRecord(
                    filename=filename,
                    text=text,
                    status=status_value,
                    created_at=now,
                    updated_at=now,
                )
                self.db.add(record)
                action = "created"
            else:
                record.text = text
                record.status = status_value
                record.updated_at = datetime.utcnow()
                action = "updated"

            self.db.commit()
            self.db.refresh(record)

        except IntegrityError as e:
            self.db.rollback()
            logger.error("Database integrity error", filename=filename, error=str(e))
            raise

        logger.info("Review record " + action,
                    review_id=record.id,
                    filename=record.filename,
                    status=record.status)

        return record

    def list_all(self) -> List[ReviewRecord]:
        """
        List every review record.

        Returns:
            Records ordered by id
        """
        return self.db.query(ReviewRecord).order_by(ReviewRecord.id).all()

    def count_by_status(self) -> Dict[str, int]:
        """
        Count review records per status.

        Returns:
            Mapping of status value to record count; statuses without records are absent
        """
        rows = (
            self.db.query(ReviewRecord.status, func.count(ReviewRecord.id))
            .group_by(ReviewRecord.status)
            .all()
        )
        return {status: count for status, count in rows}
