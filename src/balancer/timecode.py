"""
Time string helpers.

Parses loose H:M:S / M:S / S strings and formats seconds as HH:MM:SS.
"""

import re

_DIGITS = re.compile(r"\d+")


def time_string_to_seconds(text: str) -> int:
    """
    Convert a time string to seconds.

    Takes the first three runs of digits found anywhere in the string and
    combines them as hours, minutes and seconds ("1:02:03"), minutes and
    seconds ("3:25", "3m 25s") or plain seconds ("205").

    Args:
        text: Time string

    Returns:
        Total number of seconds

    Raises:
        ValueError: If the string contains no digits
    """
    groups = _DIGITS.findall(text)[:3]
    if not groups:
        raise ValueError(f"No time found in {text!r}")

    seconds = 0
    for group in groups:
        seconds = seconds * 60 + int(group)
    return seconds


def seconds_to_time_string(seconds: int, sep: str = ":") -> str:
    """Format seconds as zero-padded HH:MM:SS."""
    hours, remainder = divmod(seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours:02d}{sep}{minutes:02d}{sep}{seconds:02d}"
