"""
Balancing Module: spread tracks across sides of (nearly) equal length.

- sizing  : side count from an explicit count or a target side length
- engine  : greedy longest-first assignment
- shuffle : randomized trials keeping the best-balanced result
- compare : order-independent structural equality
"""

from .compare import albums_equal, compare_files, sides_equal
from .engine import assign, balance, build_album
from .shuffle import ShuffleSearch, SearchReport
from .sizing import InvalidConfiguration, SizingPolicy, resolve_side_count

__all__ = [
    "InvalidConfiguration",
    "SearchReport",
    "ShuffleSearch",
    "SizingPolicy",
    "albums_equal",
    "assign",
    "balance",
    "build_album",
    "compare_files",
    "resolve_side_count",
    "sides_equal",
]
