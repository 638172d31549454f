# mediaconv/workers/duration_probe.py
import asyncio
import logging

from ..models.errors import ProbeError
from ..models.node import NO_DURATION, MediaType
from ..parsers.ffprobe import parse_duration

log = logging.getLogger(__name__)


class DurationProbe:
    def __init__(self, ffprobe_path: str = "ffprobe"):
        self.ffprobe_path = ffprobe_path

    def command(self, path) -> list[str]:
        return [
            self.ffprobe_path, "-v", "error",
            "-show_entries", "format=duration",
            "-of", "default=noprint_wrappers=1:nokey=1",
            str(path),
        ]

    async def duration(self, path, media_type: MediaType) -> str:
        if media_type not in (MediaType.VIDEO, MediaType.AUDIO):
            return NO_DURATION
        try:
            proc = await asyncio.create_subprocess_exec(
                *self.command(path),
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise ProbeError(path, f"{self.ffprobe_path} not found") from e
        out, err = await proc.communicate()
        if proc.returncode != 0:
            detail = err.decode(errors="replace").strip() or f"rc={proc.returncode}"
            raise ProbeError(path, detail)
        secs = parse_duration(out.decode(errors="replace"))
        if secs is None:
            raise ProbeError(path, "no duration in ffprobe output")
        log.debug("duration %s: %s", path, secs)
        return secs
