"""
Metadata parsing utilities for speech datasets.
Reads the tab-separated metadata file mapping audio filenames to reference transcripts.
"""

import os
import re
from dataclasses import dataclass
from typing import List, Optional

import aiofiles

from app.config import get_settings
from app.utils.logger import get_logger

logger = get_logger(__name__)

_LINE_BREAKS = re.compile(r"[\n\r]+")


class MetadataReadError(Exception):
    """Raised when the dataset metadata file cannot be read."""
    pass


@dataclass(frozen=True)
class MetadataEntry:
    """One line of the metadata file."""
    filename: str
    reference_text: Optional[str] = None


def parse_metadata(content: str) -> List[MetadataEntry]:
    """
    Parse metadata file content into entries.

    Content is split on runs of line breaks, each line is split on tabs and
    only the first two columns are kept. No quoting or escaping is applied.
    A short or empty line still yields an entry whose reference text is None,
    so a trailing newline produces one entry with an empty filename.

    Args:
        content: Raw text content of the metadata file

    Returns:
        Entries in file order
    """
    entries: List[MetadataEntry] = []
    for line in _LINE_BREAKS.split(content):
        columns = line.split("\t")
        reference_text = columns[1] if len(columns) > 1 else None
        entries.append(MetadataEntry(filename=columns[0], reference_text=reference_text))
    return entries


async def read_metadata(dataset_path: str, metadata_filename: str = None) -> List[MetadataEntry]:
    """
    Read and parse the metadata file of a dataset directory.

    Args:
        dataset_path: Dataset directory containing the metadata file
        metadata_filename: Name of the metadata file inside the directory
            (default: the configured metadata filename)

    Returns:
        Entries in file order

    Raises:
        MetadataReadError: If the file is missing or cannot be decoded
    """
    if metadata_filename is None:
        metadata_filename = get_settings().metadata_filename
    metadata_file = os.path.join(dataset_path, metadata_filename)

    try:
        async with aiofiles.open(metadata_file, "r", encoding="utf-8", newline="") as f:
            content = await f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.error("Failed to read metadata file", metadata_file=metadata_file, error=str(e))
        raise MetadataReadError(f"Failed to read metadata file {metadata_file}: {str(e)}") from e

    entries = parse_metadata(content)
    logger.debug("Parsed metadata file", metadata_file=metadata_file, entries=len(entries))
    return entries
