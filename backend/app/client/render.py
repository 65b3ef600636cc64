"""
Rich renderables for the terminal review client.
"""

from datetime import datetime, timezone
from typing import Optional

from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from app.client.list_view import ReviewListView
from app.client.summary_panel import SummaryPanel
from app.models.review import ReviewStatus
from app.schemas.review import MergedItem

STATUS_STYLES = {
    ReviewStatus.NORMAL: "blue",
    ReviewStatus.DROP: "dark_orange",
}

_UNITS = (
    ("year", 365 * 24 * 3600),
    ("month", 30 * 24 * 3600),
    ("day", 24 * 3600),
    ("hour", 3600),
    ("minute", 60),
)


def time_ago(moment: datetime, now: Optional[datetime] = None) -> str:
    """Human readable age of a timestamp; naive timestamps are taken as UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    seconds = int((now - moment).total_seconds())

    if seconds < 60:
        return "just now"
    for unit, size in _UNITS:
        if seconds >= size:
            value = seconds // size
            return f"{value} {unit}{'s' if value > 1 else ''} ago"
    return "just now"


def render_item(index: int, item: MergedItem, now: Optional[datetime] = None) -> Panel:
    """One list row: filename, review age, and the transcript text."""
    header = Text(f"#{index + 1} ", style="dim")
    header.append(item.filename, style="bold")
    if item.updated_at is not None:
        header.append(" ・ ", style="dim")
        header.append(time_ago(item.updated_at, now), style=STATUS_STYLES.get(item.status, ""))

    lines = [header, Text(item.text or "")]
    if item.text_src is not None and item.text_src != item.text:
        lines.append(Text(f"ref: {item.text_src}", style="dim italic"))

    return Panel(
        Group(*lines),
        border_style=STATUS_STYLES.get(item.status, "white"),
        title=item.status.value if item.status else None,
        title_align="right",
    )


def render_list(list_view: ReviewListView, now: Optional[datetime] = None) -> Group:
    """Render only the mounted rows of the list."""
    rows = [render_item(index, item, now) for index, item in list_view.mounted_items()]
    if not rows:
        return Group(Text("No items", style="dim"))
    return Group(*rows)


def render_summary(panel: SummaryPanel) -> Table:
    table = Table(title="Summary", show_edge=True)
    counts = panel.counts()
    for label in counts:
        table.add_column(label, justify="center")
    table.add_row(*counts.values())
    return table
