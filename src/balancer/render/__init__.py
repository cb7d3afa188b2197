"""
Render Module: text output for balanced albums.

- listing with HH:MM:SS or plain-second times
- tagged records (Album/Side/Track) that load back with the reader
- per-side summary
"""

from .formatter import format_album, format_side, format_summary, format_track

__all__ = ["format_album", "format_side", "format_summary", "format_track"]
