"""
Virtualized list of dataset items for the review client.

Rows have a fixed height; only the rows intersecting the viewport (plus a
small overscan margin) are mounted and rendered.
"""

import math
from typing import Dict, List, Optional, Tuple

from app.client.api_client import ReviewApiClient
from app.client.player import PlaybackCoordinator
from app.config import get_settings
from app.models.review import ReviewStatus
from app.schemas.review import MergedItem, ReviewRecordResponse
from app.utils.logger import get_logger

logger = get_logger(__name__)


class VirtualListWindow:
    """
    Scroll geometry of a fixed-row-height list.

    Args:
        row_height: Height of every row
        viewport_height: Height of the visible area
        overscan: Rows mounted beyond each edge of the viewport
    """

    def __init__(self, row_height: int, viewport_height: int, overscan: int = 2) -> None:
        if row_height <= 0:
            raise ValueError("row_height must be positive")
        self.row_height = row_height
        self.viewport_height = max(viewport_height, 0)
        self.overscan = max(overscan, 0)
        self.row_count = 0
        self.scroll_top = 0

    @property
    def total_height(self) -> int:
        return self.row_count * self.row_height

    @property
    def max_scroll_top(self) -> int:
        return max(0, self.total_height - self.viewport_height)

    def set_row_count(self, row_count: int) -> None:
        self.row_count = max(row_count, 0)
        self.scroll_to(self.scroll_top)

    def scroll_to(self, offset: float) -> int:
        """Scroll to an absolute offset, clamped to the list bounds."""
        self.scroll_top = int(min(max(offset, 0), self.max_scroll_top))
        return self.scroll_top

    def scroll_by(self, delta: float) -> int:
        return self.scroll_to(self.scroll_top + delta)

    def row_offset(self, index: int) -> int:
        return index * self.row_height

    def scroll_to_index(self, index: int, alignment: str = "center") -> int:
        """
        Scroll so that row ``index`` is visible.

        Args:
            index: Row to reveal
            alignment: "start" puts the row at the top of the viewport,
                "center" in its middle
        """
        offset = self.row_offset(index)
        if alignment == "center":
            offset -= (self.viewport_height - self.row_height) / 2
        elif alignment != "start":
            raise ValueError(f"Unknown alignment: {alignment}")
        return self.scroll_to(offset)

    def visible_range(self) -> Tuple[int, int]:
        """Rows intersecting the viewport as a half-open range."""
        if self.row_count == 0:
            return 0, 0
        start = self.scroll_top // self.row_height
        stop = math.ceil((self.scroll_top + self.viewport_height) / self.row_height)
        return min(start, self.row_count), min(max(stop, start + 1), self.row_count)

    def mounted_range(self) -> Tuple[int, int]:
        """Visible rows extended by the overscan margin."""
        start, stop = self.visible_range()
        if start == stop:
            return start, stop
        return max(0, start - self.overscan), min(self.row_count, stop + self.overscan)


class ReviewListView:
    """
    Client-side state of the review list.

    Holds the merged items fetched from the API, applies local text edits,
    and merges save/drop responses back into the matching item.
    """

    def __init__(
        self,
        api: ReviewApiClient,
        player: PlaybackCoordinator = None,
        window: VirtualListWindow = None,
    ) -> None:
        self.api = api
        self.player = player
        self.window = window or VirtualListWindow(get_settings().row_height, viewport_height=get_settings().row_height * 3)
        self.items: List[MergedItem] = []
        self._index: Dict[str, int] = {}

    def load(self) -> List[MergedItem]:
        """Fetch the merged items and reset the list to them."""
        self.set_items(self.api.get_values())
        logger.info("Loaded review items", count=len(self.items))
        return self.items

    def set_items(self, items: List[MergedItem]) -> None:
        self.items = list(items)
        self._index = {item.filename: i for i, item in enumerate(self.items)}
        self.window.set_row_count(len(self.items))

    def index_of(self, filename: str) -> int:
        try:
            return self._index[filename]
        except KeyError:
            raise KeyError(f"No item for {filename}") from None

    def get(self, filename: str) -> MergedItem:
        return self.items[self.index_of(filename)]

    def mounted_items(self) -> List[Tuple[int, MergedItem]]:
        """Items in the mounted range, with their list index."""
        start, stop = self.window.mounted_range()
        return [(i, self.items[i]) for i in range(start, stop)]

    def edit_text(self, filename: str, text: str) -> MergedItem:
        """Change an item's text locally; nothing is sent until save or drop."""
        index = self.index_of(filename)
        self.items[index] = self.items[index].model_copy(update={"text": text})
        return self.items[index]

    def save(self, filename: str) -> MergedItem:
        """Store the item's current text with status normal."""
        return self._submit(filename, ReviewStatus.NORMAL)

    def drop(self, filename: str) -> MergedItem:
        """Store the item's current text with status drop."""
        return self._submit(filename, ReviewStatus.DROP)

    def _submit(self, filename: str, status: ReviewStatus) -> MergedItem:
        item = self.get(filename)
        record = self.api.update(filename, item.text or "", status)
        merged = self.merge_record(record)
        logger.info("Saved review", filename=filename, status=status.value)
        return merged

    def merge_record(self, record: ReviewRecordResponse) -> MergedItem:
        """Overlay a stored record onto the item with the same filename."""
        index = self.index_of(record.filename)
        self.items[index] = self.items[index].model_copy(update=record.model_dump())
        return self.items[index]

    def play(self, filename: str) -> Optional[str]:
        """
        Play an item's audio, pausing the previously playing row, and
        center the row in the viewport.

        Returns:
            The audio URL being played, or None when no player is configured
        """
        index = self.index_of(filename)
        self.window.scroll_to_index(index, alignment="center")
        if self.player is None:
            return None
        source = self.api.file_url(self.items[index])
        self.player.play(source)
        return source

    def scroll_to(self, index: int) -> int:
        return self.window.scroll_to_index(index, alignment="start")

    def jump_to_top(self) -> int:
        return self.window.scroll_to(0)
