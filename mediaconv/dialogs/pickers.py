# mediaconv/dialogs/pickers.py
from pathlib import Path

from PySide6.QtWidgets import QFileDialog

from ..models.errors import SelectionCancelled
from ..utils.classify import AUDIO_EXTENSIONS, IMAGE_EXTENSIONS, VIDEO_EXTENSIONS

FILE = "file"
DIRECTORY = "directory"


def _media_filter() -> str:
    exts = sorted(VIDEO_EXTENSIONS | AUDIO_EXTENSIONS | IMAGE_EXTENSIONS)
    return "Media (" + " ".join(f"*{e}" for e in exts) + ");;All files (*)"


def request_roots(kind: str, parent=None, start_dir: str | None = None) -> list[str]:
    """Absolute paths the user picked, in dialog order."""
    start = start_dir or str(Path.home())
    if kind == FILE:
        files, _ = QFileDialog.getOpenFileNames(parent, "Select media files", start, _media_filter())
        if not files:
            raise SelectionCancelled("no files selected")
        return [str(Path(f).resolve()) for f in files]
    if kind == DIRECTORY:
        # Qt's native folder picker is single-select
        d = QFileDialog.getExistingDirectory(parent, "Select folder", start)
        if not d:
            raise SelectionCancelled("no folder selected")
        return [str(Path(d).resolve())]
    raise ValueError(f"unknown selection kind: {kind!r}")


def request_output_root(parent=None, start_dir: str | None = None) -> str:
    d = QFileDialog.getExistingDirectory(parent, "Choose output root", start_dir or str(Path.home()))
    if not d:
        raise SelectionCancelled("no output folder selected")
    return str(Path(d).resolve())
