"""
API routes for dataset review.
Handles listing merged dataset items, review summary counts, and review upserts.
"""

from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.config import get_settings
from app.db.database import get_db
from app.schemas.review import MergedItem, ReviewRecordResponse, ReviewUpdateRequest, SummaryResponse
from app.services.dataset_service import DatasetService
from app.services.review_service import ReviewService
from app.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/api", tags=["reviews"])


def get_dataset_path() -> str:
    """Dependency returning the dataset directory being reviewed."""
    return get_settings().dataset_path


@router.post("/update", response_model=ReviewRecordResponse)
def update_review(
    request: ReviewUpdateRequest,
    db: Session = Depends(get_db)
) -> ReviewRecordResponse:
    """
    Save the review of one file.

    Creates the record on first save and updates text and status in place
    afterwards. Returns the stored record.
    """
    logger.info("Update review request",
                filename=request.filename,
                status=request.status.value)

    service = ReviewService(db)
    record = service.upsert(request.filename, request.text, request.status)

    return ReviewRecordResponse.model_validate(record)


@router.get("/values", response_model=List[MergedItem])
async def list_values(
    db: Session = Depends(get_db),
    dataset_path: str = Depends(get_dataset_path)
) -> List[MergedItem]:
    """
    List every dataset item merged with its stored review.

    Items follow metadata order. Reviewed items carry the stored text,
    status and timestamps; the rest carry the reference transcript.
    """
    logger.info("List values request", dataset_path=dataset_path)

    service = DatasetService(db, dataset_path)
    return await service.get_values()


@router.get("/summary", response_model=SummaryResponse)
async def get_summary(
    db: Session = Depends(get_db),
    dataset_path: str = Depends(get_dataset_path)
) -> SummaryResponse:
    """Return total, per-status, and remaining item counts."""
    logger.info("Summary request", dataset_path=dataset_path)

    service = DatasetService(db, dataset_path)
    return await service.get_summary()
