# mediaconv/models/errors.py
from pathlib import Path


class MediaConvError(Exception):
    """Base class for everything mediaconv raises on purpose."""


class PathProcessingError(MediaConvError):
    """A single path could not be scanned.

    `children` holds whatever nodes had already resolved below the path when
    it failed; the scanner keeps them under a placeholder.
    """

    def __init__(self, path, cause: BaseException, children=()):
        self.path = Path(path)
        self.cause = cause
        self.children = tuple(children)
        super().__init__(f"Error processing path {self.path}: {cause}")


class ProbeError(MediaConvError):
    def __init__(self, path, detail: str):
        self.path = Path(path)
        self.detail = detail
        super().__init__(f"ffprobe failed for {self.path}: {detail}")


class OutputDirectoryError(MediaConvError):
    def __init__(self, path, cause: BaseException):
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"Cannot create output directory {self.path}: {cause}")


class SpawnError(MediaConvError):
    def __init__(self, path, cause: BaseException):
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"Cannot start transcode for {self.path}: {cause}")


class SupervisorError(MediaConvError):
    def __init__(self, command: list[str], returncode: int | None, detail: str = ""):
        self.command = list(command)
        self.returncode = returncode
        self.detail = detail
        msg = f"{' '.join(self.command)} failed"
        if returncode is not None:
            msg += f" (rc={returncode})"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class SelectionCancelled(MediaConvError):
    """The user closed a picker without choosing anything."""
