"""
Service layer joining the dataset metadata with the review store.
Builds the merged item list and the review summary.
"""

import posixpath
from typing import Dict, List

from sqlalchemy.orm import Session

from app.config import get_settings
from app.models.review import ReviewRecord, ReviewStatus
from app.schemas.review import MergedItem, SummaryResponse
from app.services.review_service import ReviewService
from app.utils.metadata_reader import MetadataEntry, read_metadata
from app.utils.logger import get_logger

logger = get_logger(__name__)


def audio_url(filename: str, static_prefix: str = None, audio_dirname: str = None) -> str:
    """Relative URL the API serves a dataset audio file under."""
    settings = get_settings()
    static_prefix = settings.static_prefix if static_prefix is None else static_prefix
    audio_dirname = settings.audio_dirname if audio_dirname is None else audio_dirname
    return posixpath.join(static_prefix.strip("/"), audio_dirname, filename)


def merge_item(entry: MetadataEntry, record: ReviewRecord = None) -> MergedItem:
    """
    Combine one metadata entry with its review record.

    Args:
        entry: Metadata entry of the file
        record: Stored review of the file, if any

    Returns:
        MergedItem carrying the stored text and status when reviewed,
        otherwise the reference text and no status
    """
    file = audio_url(entry.filename)

    if record is None:
        return MergedItem(filename=entry.filename, file=file, text=entry.reference_text)

    return MergedItem(
        id=record.id,
        filename=record.filename,
        file=file,
        text=record.text,
        text_src=entry.reference_text,
        status=record.status,
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


class DatasetService:
    """
    Service class for dataset views.

    Metadata is re-read on every call so edits to the metadata file are
    picked up without restarting the server.
    """

    def __init__(self, db: Session, dataset_path: str) -> None:
        self.reviews: ReviewService = ReviewService(db)
        self.dataset_path: str = dataset_path

    async def get_values(self) -> List[MergedItem]:
        """
        Merge metadata entries with stored reviews by filename.

        Returns:
            One MergedItem per metadata entry, in metadata order
        """
        entries = await read_metadata(self.dataset_path)
        records = {record.filename: record for record in self.reviews.list_all()}

        items = [merge_item(entry, records.get(entry.filename)) for entry in entries]

        logger.info("Merged dataset values", entries=len(entries), reviewed=len(records))
        return items

    async def get_summary(self) -> SummaryResponse:
        """
        Count metadata entries and stored reviews per status.

        Returns:
            SummaryResponse where remaining is total minus all status counts
        """
        entries = await read_metadata(self.dataset_path)
        counts: Dict[str, int] = self.reviews.count_by_status()

        total = len(entries)
        remaining = total - sum(counts.values())

        logger.info("Computed review summary", total=total, remaining=remaining, **counts)

        return SummaryResponse(
            total=total,
            normal=counts.get(ReviewStatus.NORMAL.value, 0),
            drop=counts.get(ReviewStatus.DROP.value, 0),
            remaining=remaining,
        )
