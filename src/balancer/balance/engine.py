"""
Side balancing engine.

Longest-processing-time-first (LPT) assignment:
- Tracks sorted by descending duration (stable on ties)
- Each track goes to the side with the smallest running total
- Sides are opened lazily, only once the smallest side would pass the ideal
  share (total / count), so equal-length material fills sides in input order
- Deterministic for a given input order and side count
"""

import logging
from typing import List, Sequence, Tuple

from ..model import Album, Side, Track
from .sizing import SizingPolicy, resolve_side_count

logger = logging.getLogger(__name__)

IndexedTrack = Tuple[int, Track]


def side_title(index: int) -> str:
    """Default title for the side at a 0-based index."""
    return f"Side {index + 1}"


def assign(indexed_tracks: Sequence[IndexedTrack], side_count: int) -> List[List[IndexedTrack]]:
    """
    Assign tracks to sides.

    Args:
        indexed_tracks: (position, track) pairs in feeding order; the feeding
            order breaks ties between equal durations
        side_count: Number of sides to fill (>= 1)

    Returns:
        side_count buckets of (position, track) pairs, in assignment order
    """
    total = sum(track.seconds for _, track in indexed_tracks)
    ideal = total / side_count

    ordered = sorted(indexed_tracks, key=lambda item: item[1].seconds, reverse=True)

    buckets: List[List[IndexedTrack]] = []
    totals: List[int] = []

    for item in ordered:
        seconds = item[1].seconds

        if not buckets:
            buckets.append([item])
            totals.append(seconds)
            continue

        smallest = min(range(len(totals)), key=totals.__getitem__)
        if len(buckets) < side_count and totals[smallest] + seconds > ideal:
            buckets.append([item])
            totals.append(seconds)
        else:
            buckets[smallest].append(item)
            totals[smallest] += seconds

    while len(buckets) < side_count:
        buckets.append([])

    return buckets


def build_album(buckets: Sequence[Sequence[IndexedTrack]], title: str = "") -> Album:
    """
    Materialize assigned buckets as an Album.

    Tracks inside each side are listed by their original position.
    """
    album = Album(title=title)
    for index, bucket in enumerate(buckets):
        side = Side(title=side_title(index))
        for _, track in sorted(bucket, key=lambda item: item[0]):
            side.push(track)
        album.push(side)
    return album


def balance(tracks: Sequence[Track], policy: SizingPolicy, title: str = "") -> Album:
    """
    Balance tracks across sides.

    Args:
        tracks: Tracks in original order
        policy: Sizing policy (side count or side duration)
        title: Album title

    Returns:
        Album with exactly the resolved number of sides; every track placed once

    Raises:
        InvalidConfiguration: If the policy cannot be resolved
    """
    total = sum(track.seconds for track in tracks)
    side_count = resolve_side_count(policy, total)

    buckets = assign(list(enumerate(tracks)), side_count)
    album = build_album(buckets, title=title)

    logger.debug(
        f"Balanced {len(tracks)} tracks ({total}s) onto {side_count} sides, spread {album.spread}s"
    )
    return album
