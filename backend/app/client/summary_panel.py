"""
Summary panel of the review client.
"""

from typing import Dict, List, Optional

from app.client.api_client import ReviewApiClient
from app.client.list_view import ReviewListView
from app.schemas.review import MergedItem, SummaryResponse
from app.utils.logger import get_logger

logger = get_logger(__name__)

PLACEHOLDER = "-"


def last_reviewed_index(items: List[MergedItem]) -> int:
    """
    Index of the last item in the leading run of reviewed items.

    Only the contiguous prefix counts: reviews made out of order past the
    first unreviewed item are ignored. Returns 0 when the prefix is empty.
    """
    count = 0
    for item in items:
        if not item.reviewed:
            break
        count += 1
    return max(0, count - 1)


class SummaryPanel:
    """Aggregate review counts, fetched on load and on refresh."""

    def __init__(self, api: ReviewApiClient) -> None:
        self.api = api
        self.summary: Optional[SummaryResponse] = None

    def refresh(self) -> SummaryResponse:
        self.summary = self.api.get_summary()
        logger.info("Refreshed summary", **self.summary.model_dump())
        return self.summary

    def counts(self) -> Dict[str, str]:
        """Display values keyed by label; placeholders until the first fetch."""
        summary = self.summary
        return {
            "Total": str(summary.total) if summary else PLACEHOLDER,
            "Saved": str(summary.normal) if summary else PLACEHOLDER,
            "Drop": str(summary.drop) if summary else PLACEHOLDER,
            "Remaining": str(summary.remaining) if summary else PLACEHOLDER,
        }

    def jump_to_last(self, list_view: ReviewListView) -> Optional[int]:
        """
        Scroll the list to the end of the reviewed prefix.

        Returns:
            The row scrolled to, or None when there is nothing to jump past
        """
        index = last_reviewed_index(list_view.items)
        if index == 0:
            return None
        list_view.scroll_to(index)
        return index
