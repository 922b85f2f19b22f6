"""
Collection of schema locations from the command line or an input stream.
"""

from __future__ import annotations

import logging
from typing import TextIO

from .errors import InputReadError

logger = logging.getLogger(__name__)

LOCATION_SEPARATOR = " "
RECORD_DELIMITER = "\n"


def split_locations(inline: str) -> list[str]:
    """Split a space-separated location list.

    Splits on every single space, so consecutive spaces produce empty entries.
    """
    return inline.split(LOCATION_SEPARATOR)


def read_locations(stream: TextIO) -> list[str]:
    """Read newline-delimited locations until end of stream.

    Exactly one trailing delimiter is stripped from each record; empty records
    are kept. A final record that reaches end of stream without a delimiter
    is incomplete and dropped.

    Raises:
        InputReadError: If the stream fails for any reason other than EOF
    """
    locations = []
    try:
        for record in stream:
            if not record.endswith(RECORD_DELIMITER):
                logger.debug("Dropping unterminated last record %r", record)
                break
            locations.append(record[: -len(RECORD_DELIMITER)])
    except (OSError, UnicodeDecodeError) as e:
        raise InputReadError(f"Could not read input URLs from standard in: {e}") from e
    return locations


def collect_locations(inline: str | None, stream: TextIO) -> list[str]:
    """Return the inline locations if given, otherwise read them from the stream."""
    if inline is not None:
        locations = split_locations(inline)
    else:
        locations = read_locations(stream)
    logger.debug("Collected %d location(s): %s", len(locations), locations)
    return locations
