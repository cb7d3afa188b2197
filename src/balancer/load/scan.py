"""
Audio directory scanner.

Builds a track list from audio files, reading durations and titles with
mutagen. Files are taken in path order.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

import mutagen

from ..model import Track
from .reader import TrackListError

logger = logging.getLogger(__name__)

# Supported audio formats
AUDIO_FORMATS = {".mp3", ".m4a", ".flac", ".wav", ".aif", ".aiff", ".ogg"}


def _read_title(audio, fallback: str) -> str:
    """First title tag if the file has one, else the fallback."""
    tags = getattr(audio, "tags", None)
    if not tags:
        return fallback

    for key in ("title", "TIT2", "\xa9nam"):
        try:
            value = tags.get(key)
        except (KeyError, ValueError):
            continue
        if not value:
            continue
        if isinstance(value, (list, tuple)):
            value = value[0]
        text = getattr(value, "text", value)
        if isinstance(text, (list, tuple)):
            text = text[0] if text else ""
        text = str(text).strip()
        if text:
            return text

    return fallback


def read_track(file_path: Path) -> Optional[Track]:
    """
    Read one audio file as a Track.

    Args:
        file_path: Path to audio file

    Returns:
        Track, or None if mutagen cannot determine the duration
    """
    try:
        audio = mutagen.File(file_path)
    except Exception as e:
        logger.warning(f"Could not read {file_path.name}: {e}")
        return None

    if audio is None or getattr(audio, "info", None) is None:
        logger.warning(f"Unrecognized audio file: {file_path.name}")
        return None

    length = getattr(audio.info, "length", None)
    if length is None:
        logger.warning(f"Could not get duration for {file_path.name}")
        return None

    return Track(title=_read_title(audio, file_path.stem), seconds=int(round(length)))


def scan_directory(path: Union[str, Path], recursive: bool = False) -> List[Track]:
    """
    Build tracks from the audio files in a directory.

    Args:
        path: Directory to scan
        recursive: Descend into subdirectories

    Returns:
        Tracks sorted by file path; unreadable files are skipped

    Raises:
        TrackListError: If the directory does not exist
    """
    root = Path(path)
    if not root.is_dir():
        raise TrackListError(f"Not a directory: {root}")

    pattern = "**/*" if recursive else "*"
    files = sorted(
        p for p in root.glob(pattern) if p.is_file() and p.suffix.lower() in AUDIO_FORMATS
    )

    tracks = []
    for file_path in files:
        track = read_track(file_path)
        if track is not None:
            tracks.append(track)

    logger.info(f"Scanned {len(tracks)}/{len(files)} audio files in {root}")
    return tracks
