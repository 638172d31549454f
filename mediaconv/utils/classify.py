# mediaconv/utils/classify.py
import os
import stat
from pathlib import Path
from typing import NamedTuple

from ..models.node import MediaType

VIDEO_EXTENSIONS = {
    ".mp4", ".mkv", ".mov", ".avi", ".webm", ".m4v", ".wmv", ".flv",
    ".mpg", ".mpeg", ".ts", ".m2ts", ".3gp", ".ogv",
}
AUDIO_EXTENSIONS = {
    ".mp3", ".wav", ".flac", ".aac", ".m4a", ".ogg", ".opus", ".wma",
    ".aiff", ".alac",
}
IMAGE_EXTENSIONS = {
    ".jpg", ".jpeg", ".png", ".gif", ".bmp", ".webp", ".tif", ".tiff",
    ".heic",
}

DIRECTORY = "directory"
MEDIA = "media"
UNSUPPORTED = "unsupported"


class Classification(NamedTuple):
    kind: str                          # DIRECTORY, MEDIA or UNSUPPORTED
    media_type: MediaType | None = None


def media_type_for(path) -> MediaType | None:
    ext = Path(path).suffix.lower()
    if ext in VIDEO_EXTENSIONS:
        return MediaType.VIDEO
    if ext in AUDIO_EXTENSIONS:
        return MediaType.AUDIO
    if ext in IMAGE_EXTENSIONS:
        return MediaType.IMAGE
    return None


def classify(path, st: os.stat_result | None = None) -> Classification:
    """Directory by lstat, media by extension. File contents are never read."""
    if st is None:
        st = os.lstat(path)
    if stat.S_ISDIR(st.st_mode):
        return Classification(DIRECTORY)
    if stat.S_ISREG(st.st_mode) and (mt := media_type_for(path)):
        return Classification(MEDIA, mt)
    return Classification(UNSUPPORTED)
