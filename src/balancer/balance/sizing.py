"""
Side-count resolution.

Turns a sizing policy (explicit side count, or target seconds per side) into
the number of sides the engine should fill.
"""

import logging
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)


class InvalidConfiguration(ValueError):
    """Raised when a sizing policy cannot be resolved to a side count."""
    pass


@dataclass(frozen=True)
class SizingPolicy:
    """
    How many sides to fill.

    Exactly one of side_count / side_seconds must be set. With side_seconds,
    even=True picks the whole number of sides closest to the target length
    instead of the smallest number of sides that can hold the total.
    """

    side_count: Optional[int] = None
    side_seconds: Optional[int] = None
    even: bool = False


def resolve_side_count(policy: SizingPolicy, total_seconds: int) -> int:
    """
    Resolve a policy against the total duration of the input.

    Args:
        policy: Sizing policy
        total_seconds: Sum of all track durations

    Returns:
        Number of sides (>= 1)

    Raises:
        InvalidConfiguration: If the policy is ambiguous, empty or out of range
    """
    for name in ("side_count", "side_seconds"):
        value = getattr(policy, name)
        if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
            raise InvalidConfiguration(f"{name} must be an integer, got {value!r}")

    if policy.side_count is not None and policy.side_seconds is not None:
        raise InvalidConfiguration(
            "Both a side count and a side duration were given; choose one"
        )

    if policy.side_count is not None:
        if policy.side_count < 1:
            raise InvalidConfiguration(f"Side count must be at least 1, got {policy.side_count}")
        return policy.side_count

    if policy.side_seconds is None:
        raise InvalidConfiguration("Either a side count or a side duration is required")

    target = policy.side_seconds
    if target < 0:
        raise InvalidConfiguration(f"Side duration must be non-negative, got {target}")
    if target == 0:
        if total_seconds:
            raise InvalidConfiguration(
                f"Side duration of 0 cannot hold {total_seconds} seconds of tracks"
            )
        return 1

    if policy.even:
        # Round half up: 2.5 target-lengths of material -> 3 sides
        count = (2 * total_seconds + target) // (2 * target)
    else:
        count = -(-total_seconds // target)

    count = max(1, count)
    logger.debug(
        f"Resolved {count} sides for {total_seconds}s at {target}s per side (even={policy.even})"
    )
    return count
