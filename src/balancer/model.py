"""
Album model: tracks, sides and albums.

A Side is an ordered bucket of tracks with a running duration total; an Album
is an ordered bucket of sides. Both carry a structural hash that ignores
ordering and titles, so two balancings of the same material compare equal
whenever they put the same durations together on the same number of sides.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)

_MASK64 = 0xFFFFFFFFFFFFFFFF


def scalar_hash(value: int) -> int:
    """
    Mix a non-negative integer into a well-spread 64-bit value (splitmix64).

    Stable across interpreter runs, unlike the builtin hash().
    """
    z = (value + 0x9E3779B97F4A7C15) & _MASK64
    z = ((z ^ (z >> 30)) * 0xBF58476D1CE4E5B9) & _MASK64
    z = ((z ^ (z >> 27)) * 0x94D049BB133111EB) & _MASK64
    return z ^ (z >> 31)


def multiset_hash(values: Iterable[int]) -> int:
    """
    Order-independent hash of a multiset of integers.

    Seeds with the element count, then folds in each value of the sorted
    multiset with a shift-and-xor step.

    Args:
        values: Child values (track durations or side hashes)

    Returns:
        64-bit hash
    """
    ordered = sorted(values)
    result = len(ordered)
    for value in ordered:
        result = ((result << 1) & _MASK64) ^ scalar_hash(value)
    return result


@dataclass(frozen=True)
class Track:
    """Immutable titled duration."""

    title: str
    seconds: int

    def __post_init__(self):
        if not isinstance(self.seconds, int) or isinstance(self.seconds, bool):
            raise TypeError(f"seconds must be an integer, got {type(self.seconds)}")
        if self.seconds < 0:
            raise ValueError(f"seconds must be non-negative, got {self.seconds}")


class Side:
    """Ordered sequence of tracks with a running total."""

    def __init__(self, title: str = "", tracks: Optional[Iterable[Track]] = None):
        self.title = title
        self._tracks: List[Track] = []
        self._seconds = 0
        self._hash: Optional[int] = None
        # Album holding this side; told about every change to the total
        self._album: Optional["Album"] = None
        for track in tracks or ():
            self.push(track)

    @property
    def seconds(self) -> int:
        return self._seconds

    @property
    def tracks(self) -> Tuple[Track, ...]:
        return tuple(self._tracks)

    def push(self, track: Track) -> None:
        self._tracks.append(track)
        self._changed(track.seconds)

    def pop(self) -> Track:
        """Remove and return the last track (IndexError when empty)."""
        if not self._tracks:
            raise IndexError("pop from empty side")
        track = self._tracks.pop()
        self._changed(-track.seconds)
        return track

    def clear(self) -> None:
        self._tracks.clear()
        self._changed(-self._seconds)

    def _changed(self, delta: int) -> None:
        self._seconds += delta
        self._hash = None
        if self._album is not None:
            self._album._side_changed(delta)

    @property
    def structural_hash(self) -> int:
        """Hash of the multiset of track durations (cached until mutated)."""
        if self._hash is None:
            self._hash = multiset_hash(track.seconds for track in self._tracks)
        return self._hash

    def __len__(self) -> int:
        return len(self._tracks)

    def __iter__(self) -> Iterator[Track]:
        return iter(self._tracks)

    def __repr__(self) -> str:
        return f"Side(title={self.title!r}, tracks={len(self)}, seconds={self._seconds})"


class Album:
    """
    Ordered sequence of sides with a running total.

    A side belongs to at most one album at a time. Changes made to a held
    side, including through album.sides, update the album total and drop its
    cached hash.
    """

    def __init__(self, title: str = "", sides: Optional[Iterable[Side]] = None):
        self.title = title
        self._sides: List[Side] = []
        self._seconds = 0
        self._hash: Optional[int] = None
        for side in sides or ():
            self.push(side)

    @property
    def seconds(self) -> int:
        return self._seconds

    @property
    def sides(self) -> Tuple[Side, ...]:
        return tuple(self._sides)

    @property
    def spread(self) -> int:
        """Gap between the longest and shortest side, 0 with no sides."""
        if not self._sides:
            return 0
        totals = [side.seconds for side in self._sides]
        return max(totals) - min(totals)

    def push(self, side: Side) -> None:
        """Append a side (ValueError if it already belongs to an album)."""
        if side._album is not None:
            raise ValueError(f"side {side.title!r} already belongs to an album")
        side._album = self
        self._sides.append(side)
        self._side_changed(side.seconds)

    def pop(self) -> Side:
        """Remove and return the last side (IndexError when empty)."""
        if not self._sides:
            raise IndexError("pop from empty album")
        side = self._sides.pop()
        side._album = None
        self._side_changed(-side.seconds)
        return side

    def push_last(self, track: Track) -> None:
        """Append a track to the last side."""
        if not self._sides:
            raise IndexError("push_last on album with no sides")
        self._sides[-1].push(track)

    def clear(self) -> None:
        for side in self._sides:
            side.clear()
            side._album = None
        self._sides.clear()
        self._seconds = 0
        self._hash = None

    def invalidate(self) -> None:
        """Recount the total from the sides and drop the cached hash."""
        self._seconds = sum(side.seconds for side in self._sides)
        self._hash = None

    def _side_changed(self, delta: int) -> None:
        self._seconds += delta
        self._hash = None

    @property
    def structural_hash(self) -> int:
        """Hash of the multiset of side hashes (cached until mutated)."""
        if self._hash is None:
            self._hash = multiset_hash(side.structural_hash for side in self._sides)
            logger.debug(f"Album {self.title!r} hash: {self._hash:#018x}")
        return self._hash

    def __len__(self) -> int:
        return len(self._sides)

    def __iter__(self) -> Iterator[Side]:
        return iter(self._sides)

    def __repr__(self) -> str:
        return f"Album(title={self.title!r}, sides={len(self)}, seconds={self._seconds})"
