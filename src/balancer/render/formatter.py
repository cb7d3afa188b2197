"""
Album formatting.

Renders a balanced album as text: a readable listing, delimiter-separated
records (readable back by the track-list reader), or a one-line-per-side
summary. Times are HH:MM:SS, or raw seconds in plain mode.
"""

from typing import List

from ..model import Album, Side, Track
from ..timecode import seconds_to_time_string


def _time(seconds: int, plain: bool) -> str:
    return str(seconds) if plain else seconds_to_time_string(seconds)


def format_track(track: Track, plain: bool = False, csv: bool = False, separator: str = "|") -> str:
    time = _time(track.seconds, plain)
    if csv:
        return f'    Track{separator}{time}{separator}"{track.title}"'
    return f"    {time} - {track.title}"


def format_side(side: Side, plain: bool = False, csv: bool = False, separator: str = "|") -> List[str]:
    """Lines for one side: header, tracks and (listing only) the side total."""
    time = _time(side.seconds, plain)
    if csv:
        lines = [f'  Side{separator}{time}{separator}"{side.title}, {len(side)} tracks"']
    else:
        lines = [f"  {side.title} - {len(side)} tracks"]

    lines.extend(format_track(track, plain, csv, separator) for track in side)

    if not csv:
        lines.append(f"  {time}")
        lines.append("")
    return lines


def format_album(album: Album, plain: bool = False, csv: bool = False, separator: str = "|") -> str:
    """
    Render an album.

    Args:
        album: Album to render
        plain: Times as raw seconds instead of HH:MM:SS
        csv: Tagged records instead of a listing
        separator: Field separator for records

    Returns:
        Rendered text, newline terminated
    """
    time = _time(album.seconds, plain)
    if csv:
        lines = [f'Album{separator}{time}{separator}"{album.title}, {len(album)} sides"']
    else:
        lines = [f"{album.title}:"]

    for side in album:
        lines.extend(format_side(side, plain, csv, separator))

    if not csv:
        lines.append(time)

    return "\n".join(lines) + "\n"


def format_summary(album: Album, plain: bool = False) -> str:
    """One line per side: title, track count and total time."""
    lines = [f"{side.title} - {len(side)} tracks {_time(side.seconds, plain)}" for side in album]
    return "\n".join(lines) + "\n" if lines else ""
