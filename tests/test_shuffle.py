"""
Unit tests for the shuffle search.

Tests determinism, thread-pool equivalence, baseline guarantee and swap
refinement.
"""

import random
from collections import Counter

import pytest

from balancer.balance.engine import balance
from balancer.balance.shuffle import ShuffleSearch, refine_by_swaps
from balancer.balance.sizing import InvalidConfiguration, SizingPolicy
from balancer.model import Track


def layout(album):
    return [[track.title for track in side] for side in album]


@pytest.fixture
def tied_tracks():
    """Many equal durations so shuffled feeding orders actually differ."""
    durations = [300, 300, 300, 240, 240, 240, 180, 180, 420, 420, 120, 60]
    return [Track(f"track-{i}", seconds) for i, seconds in enumerate(durations)]


@pytest.fixture
def random_tracks():
    rng = random.Random(11)
    return [Track(f"track-{i}", rng.randint(30, 900)) for i in range(25)]


class TestShuffleSearch:
    """Test search behaviour."""

    def test_same_seed_same_album(self, tied_tracks):
        """Same seed gives the same album."""
        policy = SizingPolicy(side_count=3)
        first = ShuffleSearch(trials=50, rng=random.Random(42)).search(tied_tracks, policy)
        second = ShuffleSearch(trials=50, rng=random.Random(42)).search(tied_tracks, policy)
        assert layout(first) == layout(second)

    def test_workers_match_sequential(self, random_tracks):
        """Pooled and sequential runs agree."""
        policy = SizingPolicy(side_count=4)
        sequential = ShuffleSearch(trials=80, rng=random.Random(5), swap_attempts=10)
        pooled = ShuffleSearch(trials=80, rng=random.Random(5), workers=4, swap_attempts=10)

        a = sequential.search(random_tracks, policy)
        b = pooled.search(random_tracks, policy)

        assert layout(a) == layout(b)
        assert sequential.last_report.best_trial == pooled.last_report.best_trial

    def test_never_worse_than_plain(self, random_tracks):
        """Shuffle spread never exceeds plain spread."""
        for side_count in (2, 3, 5, 7):
            policy = SizingPolicy(side_count=side_count)
            plain = balance(random_tracks, policy)
            search = ShuffleSearch(trials=40, rng=random.Random(side_count))
            shuffled = search.search(random_tracks, policy)

            assert shuffled.spread <= plain.spread
            assert search.last_report.baseline_spread == plain.spread
            assert search.last_report.best_spread == shuffled.spread

    def test_conservation(self, random_tracks):
        """Every track lands on exactly one side."""
        policy = SizingPolicy(side_count=6)
        album = ShuffleSearch(trials=30, rng=random.Random(3), swap_attempts=20).search(
            random_tracks, policy, title="Mix"
        )

        assert album.title == "Mix"
        assert len(album) == 6
        assert Counter(t for side in album for t in side) == Counter(random_tracks)
        assert album.seconds == sum(t.seconds for t in random_tracks)

    def test_single_trial_is_plain_engine(self, random_tracks):
        """One trial equals the plain engine."""
        policy = SizingPolicy(side_count=3)
        plain = balance(random_tracks, policy)
        shuffled = ShuffleSearch(trials=1, rng=random.Random(1)).search(random_tracks, policy)
        assert layout(shuffled) == layout(plain)

    def test_tracks_in_input_order_within_side(self, tied_tracks):
        """Winning sides keep input order."""
        album = ShuffleSearch(trials=25, rng=random.Random(9)).search(
            tied_tracks, SizingPolicy(side_count=3)
        )
        for side in album:
            positions = [tied_tracks.index(track) for track in side]
            assert positions == sorted(positions)

    def test_stops_early_on_perfect_balance(self):
        """Search stops at spread 0."""
        tracks = [Track(str(i), 100) for i in range(4)]
        search = ShuffleSearch(trials=100, rng=random.Random(0))
        search.search(tracks, SizingPolicy(side_count=2))
        assert search.last_report.trials_run == 1
        assert search.last_report.best_spread == 0

    def test_invalid_policy_before_trials(self, tied_tracks):
        """Bad policy raises before drawing from the RNG."""
        rng = random.Random(1)
        state = rng.getstate()
        with pytest.raises(InvalidConfiguration):
            ShuffleSearch(trials=10, rng=rng).search(tied_tracks, SizingPolicy(side_count=0))
        assert rng.getstate() == state

    def test_input_not_mutated(self, tied_tracks):
        """Input list is left alone."""
        snapshot = list(tied_tracks)
        ShuffleSearch(trials=20, rng=random.Random(2)).search(tied_tracks, SizingPolicy(side_count=2))
        assert tied_tracks == snapshot

    @pytest.mark.parametrize(
        "kwargs",
        [{"trials": 0}, {"workers": 0}, {"swap_attempts": -1}],
    )
    def test_invalid_arguments(self, kwargs):
        """Bad constructor arguments raise ValueError."""
        with pytest.raises(ValueError):
            ShuffleSearch(**kwargs)


class TestRefineBySwaps:
    """Test the swap refinement step."""

    def test_swap_reduces_spread(self):
        """A swap that lowers the spread is kept."""
        buckets = [
            [(0, Track("a", 10)), (1, Track("b", 1))],
            [(2, Track("c", 2))],
        ]
        refine_by_swaps(buckets, random.Random(0), attempts=60)

        totals = sorted(sum(t.seconds for _, t in bucket) for bucket in buckets)
        assert totals == [3, 10]

    def test_move_into_empty_side(self):
        """A track moves into an empty side."""
        buckets = [[(0, Track("a", 5)), (1, Track("b", 5))], []]
        refine_by_swaps(buckets, random.Random(0), attempts=5)
        assert [len(bucket) for bucket in buckets] == [1, 1]

    def test_no_change_when_balanced(self):
        """Balanced buckets are left alone."""
        buckets = [[(0, Track("a", 5))], [(1, Track("b", 5))]]
        refine_by_swaps(buckets, random.Random(0), attempts=5)
        assert [[pos for pos, _ in bucket] for bucket in buckets] == [[0], [1]]

    def test_single_bucket_untouched(self):
        """A single bucket is returned unchanged."""
        buckets = [[(0, Track("a", 5)), (1, Track("b", 3))]]
        assert refine_by_swaps(buckets, random.Random(0), attempts=5) == buckets
