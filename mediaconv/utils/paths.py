# mediaconv/utils/paths.py
import re
from pathlib import Path

from ..models.node import MediaType

DEFAULT_OUTPUT_FORMATS = {
    MediaType.VIDEO.value: "mp4",
    MediaType.AUDIO.value: "mp3",
    MediaType.IMAGE.value: "png",
}


def safe_name(s: str) -> str:
    s = re.sub(r'[\\/:*?"<>|]+', " ", s).strip()
    s = re.sub(r"\s+", " ", s)
    if not s.strip("."):
        return "Unnamed"  # "", "." and ".." would leave the parent folder
    return s


def unique_path(base: Path, taken: set[Path]) -> Path:
    """`base`, or `stem_001.ext`, `stem_002.ext`... if already in `taken`."""
    if base not in taken:
        return base
    n = 1
    while True:
        candidate = base.parent / f"{base.stem}_{n:03d}{base.suffix}"
        if candidate not in taken:
            return candidate
        n += 1


def output_name(name: str, media_type: MediaType, formats: dict | None = None) -> str:
    """input.mov -> input.mp4 (per media type, see DEFAULT_OUTPUT_FORMATS)."""
    formats = {**DEFAULT_OUTPUT_FORMATS, **(formats or {})}
    ext = formats[MediaType(media_type).value].lstrip(".")
    return f"{safe_name(Path(name).stem)}.{ext}"
