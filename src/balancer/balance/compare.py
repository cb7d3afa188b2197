"""
Structural comparison of balanced albums.

Two albums are equal when they hold the same multiset of sides, each side
being the same multiset of track durations. Side order, track order and
titles are ignored.
"""

import logging
from pathlib import Path
from typing import Union

from ..load.reader import read_album
from ..model import Album, Side

logger = logging.getLogger(__name__)


def sides_equal(a: Side, b: Side) -> bool:
    """True if both sides hold the same multiset of track durations."""
    return a.structural_hash == b.structural_hash


def albums_equal(a: Album, b: Album) -> bool:
    """True if both albums hold the same multiset of sides, ignoring order and titles."""
    return a.structural_hash == b.structural_hash


def compare_files(
    path_a: Union[str, Path],
    path_b: Union[str, Path],
    separator: str = "|",
) -> bool:
    """
    Reload two track-list files and compare their albums structurally.

    Args:
        path_a: First track-list file
        path_b: Second track-list file
        separator: Field separator used by both files

    Returns:
        True if both files describe the same balancing

    Raises:
        TrackListError: If either file cannot be read
    """
    album_a = read_album(path_a, separator=separator)
    album_b = read_album(path_b, separator=separator)
    equal = albums_equal(album_a, album_b)

    logger.info(
        f"Compared {path_a} ({len(album_a)} sides) with {path_b} ({len(album_b)} sides): "
        f"{'equal' if equal else 'different'}"
    )
    return equal
