"""
Unit tests for structural comparison.

Tests in-memory comparison and comparison of reloaded track-list files.
"""

import pytest

from balancer.balance.compare import albums_equal, compare_files, sides_equal
from balancer.balance.engine import balance
from balancer.balance.sizing import SizingPolicy
from balancer.model import Album, Side, Track
from balancer.render.formatter import format_album


def album_of(*sides):
    return Album(
        title="album",
        sides=[
            Side(f"Side {n}", [Track(title, seconds) for title, seconds in tracks])
            for n, tracks in enumerate(sides, start=1)
        ],
    )


def write_records(path, lines):
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


class TestInMemory:
    """Test comparison of albums built in memory."""

    def test_permuted_sides_and_tracks_equal(self):
        """Side and track order do not matter."""
        a = album_of([("a", 300), ("b", 200)], [("c", 250), ("d", 250)])
        b = album_of([("d", 250), ("c", 250)], [("b", 200), ("a", 300)])
        assert albums_equal(a, b)

    def test_titles_ignored(self):
        """Titles do not matter."""
        a = album_of([("a", 300)], [("b", 200)])
        b = album_of([("x", 300)], [("y", 200)])
        assert albums_equal(a, b)

    def test_moved_track_not_equal(self):
        """Equal side totals with different contents differ."""
        a = album_of([("a", 5), ("b", 5)], [("c", 1), ("d", 2), ("e", 3), ("f", 4)])
        b = album_of([("a", 5), ("c", 1), ("f", 4)], [("b", 5), ("d", 2), ("e", 3)])
        assert [s.seconds for s in a] == [s.seconds for s in b]
        assert not albums_equal(a, b)

    def test_extra_empty_side_not_equal(self):
        """An extra empty side differs."""
        a = album_of([("a", 5)])
        b = album_of([("a", 5)], [])
        assert not albums_equal(a, b)

    def test_sides_equal(self):
        """Sides compare by duration multiset."""
        assert sides_equal(Side("x", [Track("a", 1), Track("b", 2)]), Side("y", [Track("c", 2), Track("d", 1)]))
        assert not sides_equal(Side("x", [Track("a", 1)]), Side("y", [Track("a", 2)]))

    def test_balanced_album_equals_itself_reordered(self):
        """A balanced album equals its reversed copy."""
        tracks = [Track(f"t{i}", s) for i, s in enumerate([320, 180, 240, 200, 410, 90])]
        album = balance(tracks, SizingPolicy(side_count=3))
        reordered = Album(sides=[Side(s.title, reversed(s.tracks)) for s in reversed(album.sides)])
        assert albums_equal(album, reordered)


class TestCompareFiles:
    """Test comparison of track-list files."""

    @pytest.fixture
    def original(self, tmp_path):
        return write_records(tmp_path / "original.txt", [
            'Album|20|"Test, 2 sides"',
            '  Side|10|"Side 1, 2 tracks"',
            '    Track|5|"A"',
            '    Track|5|"B"',
            '  Side|10|"Side 2, 4 tracks"',
            '    Track|1|"C"',
            '    Track|2|"D"',
            '    Track|3|"E"',
            '    Track|4|"F"',
        ])

    def test_reordered_file_equal(self, tmp_path, original):
        """A reordered file equals the original."""
        reordered = write_records(tmp_path / "reordered.txt", [
            '  Side|10|"Side 1, 4 tracks"',
            '    Track|4|"F"',
            '    Track|2|"D"',
            '    Track|1|"C"',
            '    Track|3|"E"',
            '  Side|10|"Side 2, 2 tracks"',
            '    Track|5|"B"',
            '    Track|5|"A"',
        ])
        assert compare_files(original, reordered)

    def test_moved_track_file_not_equal(self, tmp_path, original):
        """A file with a moved track differs from the original."""
        moved = write_records(tmp_path / "moved.txt", [
            '  Side|10|"Side 1, 3 tracks"',
            '    Track|5|"A"',
            '    Track|1|"C"',
            '    Track|4|"F"',
            '  Side|10|"Side 2, 3 tracks"',
            '    Track|5|"B"',
            '    Track|2|"D"',
            '    Track|3|"E"',
        ])
        assert not compare_files(original, moved)

    def test_formatter_output_round_trip(self, tmp_path):
        """Formatter records load back equal."""
        tracks = [Track(f"t{i}", s) for i, s in enumerate([320, 180, 240, 200, 410, 90])]
        album = balance(tracks, SizingPolicy(side_count=2), title="rt")

        hms = tmp_path / "hms.txt"
        hms.write_text(format_album(album, csv=True), encoding="utf-8")
        plain = tmp_path / "plain.txt"
        plain.write_text(format_album(album, plain=True, csv=True, separator=";"), encoding="utf-8")

        assert compare_files(hms, hms)
        hms_semicolon = tmp_path / "hms_semicolon.txt"
        hms_semicolon.write_text(format_album(album, csv=True, separator=";"), encoding="utf-8")
        assert compare_files(plain, hms_semicolon, separator=";")
