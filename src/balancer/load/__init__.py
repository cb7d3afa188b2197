"""
Loading Module: turn track lists and audio folders into tracks.

- reader : delimiter-separated track lists (plain or tagged records)
- scan   : audio files, durations read with mutagen
"""

from .reader import TrackListError, parse_line, read_album, read_tracks
from .scan import scan_directory

__all__ = ["TrackListError", "parse_line", "read_album", "read_tracks", "scan_directory"]
