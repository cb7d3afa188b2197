"""
Shuffle search: randomized trials over the balancing engine.

Each trial feeds a random permutation of the tracks into the LPT assignment
(changing how ties between equal durations fall), optionally followed by a
few random swaps between the fullest and emptiest sides. The trial with the
smallest spread wins; ties go to the lowest trial index, so a fixed seed
always gives the same album whether trials run sequentially or on a pool.
"""

import logging
import random
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..model import Album, Track
from .engine import IndexedTrack, assign, build_album
from .sizing import SizingPolicy, resolve_side_count

logger = logging.getLogger(__name__)

DEFAULT_TRIALS = 500


@dataclass
class SearchReport:
    """Outcome of the last search run."""

    trials_run: int
    best_trial: int
    best_spread: int
    baseline_spread: int


def _spread(totals: Sequence[int]) -> int:
    return max(totals) - min(totals) if totals else 0


def refine_by_swaps(
    buckets: List[List[IndexedTrack]],
    rng: random.Random,
    attempts: int,
) -> List[List[IndexedTrack]]:
    """
    Try random swaps between the fullest and emptiest side.

    A swap is kept only when it strictly lowers the spread. Buckets are
    modified in place and returned.

    Args:
        buckets: Assigned (position, track) buckets
        rng: Random source for picking tracks to swap
        attempts: Number of swaps to try

    Returns:
        The refined buckets
    """
    if len(buckets) < 2:
        return buckets

    totals = [sum(track.seconds for _, track in bucket) for bucket in buckets]

    for _ in range(attempts):
        high = max(range(len(totals)), key=totals.__getitem__)
        low = min(range(len(totals)), key=totals.__getitem__)
        if high == low or not buckets[high]:
            break

        i = rng.randrange(len(buckets[high]))
        j = rng.randrange(len(buckets[low])) if buckets[low] else None

        moved_down = buckets[high][i][1].seconds
        moved_up = buckets[low][j][1].seconds if j is not None else 0

        before = _spread(totals)
        candidate = list(totals)
        candidate[high] += moved_up - moved_down
        candidate[low] += moved_down - moved_up
        if _spread(candidate) >= before:
            continue

        if j is None:
            # Emptiest side has nothing to give back; move instead of swapping
            buckets[low].append(buckets[high].pop(i))
        else:
            buckets[high][i], buckets[low][j] = buckets[low][j], buckets[high][i]
        totals = candidate

    return buckets


class ShuffleSearch:
    """
    Randomized improvement over the plain engine result.

    Trial 0 is always the unshuffled input, so the search never returns a
    worse album than the plain engine.
    """

    def __init__(
        self,
        trials: int = DEFAULT_TRIALS,
        rng: Optional[random.Random] = None,
        workers: int = 1,
        swap_attempts: int = 0,
    ):
        """
        Args:
            trials: Number of trials, including the unshuffled baseline (>= 1)
            rng: Injected random source; a fresh unseeded one if None
            workers: Thread pool size for evaluating trials (1 = sequential)
            swap_attempts: Random swaps tried after each assignment (0 = off)
        """
        if trials < 1:
            raise ValueError(f"trials must be at least 1, got {trials}")
        if workers < 1:
            raise ValueError(f"workers must be at least 1, got {workers}")
        if swap_attempts < 0:
            raise ValueError(f"swap_attempts must be non-negative, got {swap_attempts}")

        self.trials = trials
        self.rng = rng if rng is not None else random.Random()
        self.workers = workers
        self.swap_attempts = swap_attempts
        self.last_report: Optional[SearchReport] = None

    def _plan_trials(self, tracks: Sequence[Track]) -> List[Tuple[List[IndexedTrack], int]]:
        """Draw every trial's feeding order and swap seed up front."""
        baseline = list(enumerate(tracks))
        plans = [(baseline, self.rng.getrandbits(64))]
        for _ in range(1, self.trials):
            order = list(baseline)
            self.rng.shuffle(order)
            plans.append((order, self.rng.getrandbits(64)))
        return plans

    def _run_trial(
        self, order: List[IndexedTrack], swap_seed: int, side_count: int
    ) -> Tuple[int, List[List[IndexedTrack]]]:
        buckets = assign(order, side_count)
        if self.swap_attempts:
            refine_by_swaps(buckets, random.Random(swap_seed), self.swap_attempts)
        totals = [sum(track.seconds for _, track in bucket) for bucket in buckets]
        return _spread(totals), buckets

    def search(self, tracks: Sequence[Track], policy: SizingPolicy, title: str = "") -> Album:
        """
        Run the trials and return the best-balanced album.

        Args:
            tracks: Tracks in original order (never mutated)
            policy: Sizing policy
            title: Album title

        Returns:
            Album from the trial with the smallest spread

        Raises:
            InvalidConfiguration: If the policy cannot be resolved
        """
        total = sum(track.seconds for track in tracks)
        side_count = resolve_side_count(policy, total)

        plans = self._plan_trials(tracks)

        if self.workers > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                results = list(
                    executor.map(lambda plan: self._run_trial(plan[0], plan[1], side_count), plans)
                )
        else:
            results = []
            for order, swap_seed in plans:
                results.append(self._run_trial(order, swap_seed, side_count))
                if results[-1][0] == 0:
                    break

        best_index = min(range(len(results)), key=lambda index: (results[index][0], index))
        best_spread, best_buckets = results[best_index]

        self.last_report = SearchReport(
            trials_run=len(results),
            best_trial=best_index,
            best_spread=best_spread,
            baseline_spread=results[0][0],
        )
        logger.debug(
            f"Shuffle search: {len(results)} trials, best trial {best_index} "
            f"spread {best_spread}s (baseline {results[0][0]}s)"
        )
        return build_album(best_buckets, title=title)
