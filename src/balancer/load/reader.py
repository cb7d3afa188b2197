"""
Track-list reader.

Reads delimiter-separated track lists. Two kinds of rows are understood:
- plain entries:   time|title
- tagged records:  Album|time|"title, N sides"
                   Side|time|"title, N tracks"
                   Track|time|"title"
Tagged records are what the CSV formatter writes, so a balanced album can be
read back with its sides intact.
"""

import logging
import re
from pathlib import Path
from typing import List, Optional, Tuple, Union

from ..model import Album, Side, Track
from ..timecode import time_string_to_seconds

logger = logging.getLogger(__name__)

DEFAULT_SEPARATOR = "|"

ALBUM_TAG = "Album"
SIDE_TAG = "Side"
TRACK_TAG = "Track"

_COUNT_SUFFIX = re.compile(r",\s*\d+\s+(tracks|sides)$")


class TrackListError(Exception):
    """Raised when a track list cannot be read."""
    pass


def _unquote(text: str) -> str:
    text = text.strip()
    if len(text) >= 2 and text[0] == '"' and text[-1] == '"':
        return text[1:-1]
    return text


def _strip_count(title: str) -> str:
    return _COUNT_SUFFIX.sub("", title)


def parse_line(line: str, separator: str = DEFAULT_SEPARATOR) -> Optional[Tuple[str, str, int]]:
    """
    Parse a single row.

    Args:
        line: Raw line (leading indentation allowed)
        separator: Field separator

    Returns:
        (tag, title, seconds) where tag is "Album", "Side" or "Track", or
        None for blank lines and comments

    Raises:
        ValueError: If the row is not a recognizable entry
    """
    line = line.strip()
    if not line or line.startswith("#"):
        return None

    fields = [field.strip() for field in line.split(separator, 2)]

    if fields[0] in (ALBUM_TAG, SIDE_TAG, TRACK_TAG):
        if len(fields) < 3:
            raise ValueError(f"{fields[0]} record needs a time and a title: {line!r}")
        tag, time_text, title = fields
        seconds = time_string_to_seconds(time_text)
        title = _unquote(title)
        if tag != TRACK_TAG:
            title = _strip_count(title)
        return tag, title, seconds

    fields = [field.strip() for field in line.split(separator, 1)]
    if len(fields) < 2:
        raise ValueError(f"Expected time{separator}title: {line!r}")

    time_text, title = fields
    return TRACK_TAG, _unquote(title), time_string_to_seconds(time_text)


def read_album(path: Union[str, Path], separator: str = DEFAULT_SEPARATOR) -> Album:
    """
    Read a track list into an Album.

    Tracks listed before any Side record go onto an implicit first side.
    Unparseable rows are logged and skipped.

    Args:
        path: Track-list file
        separator: Field separator

    Returns:
        Album titled after the Album record, or the file stem

    Raises:
        TrackListError: If the file cannot be read
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise TrackListError(f"Failed to read track list {path}: {e}") from e

    album = Album(title=path.stem)
    skipped = 0

    for number, line in enumerate(text.splitlines(), start=1):
        try:
            parsed = parse_line(line, separator)
        except ValueError as e:
            logger.warning(f"{path.name}:{number}: skipping row ({e})")
            skipped += 1
            continue

        if parsed is None:
            continue

        tag, title, seconds = parsed
        if tag == ALBUM_TAG:
            album.title = title
        elif tag == SIDE_TAG:
            album.push(Side(title=title))
        else:
            if not len(album):
                album.push(Side())
            album.push_last(Track(title=title, seconds=seconds))

    track_count = sum(len(side) for side in album)
    logger.info(
        f"Read {track_count} tracks on {len(album)} sides from {path}"
        + (f" ({skipped} rows skipped)" if skipped else "")
    )
    return album


def read_tracks(path: Union[str, Path], separator: str = DEFAULT_SEPARATOR) -> List[Track]:
    """Read a track list as a flat list of tracks in file order."""
    return [track for side in read_album(path, separator) for track in side]
