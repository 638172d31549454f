# mediaconv/core.py
import asyncio
import logging
import subprocess

from .models.errors import PathProcessingError
from .models.job import ConversionJob, JobState
from .models.node import Node
from .utils.settings import load_settings
from .workers.duration_probe import DurationProbe
from .workers.scanner import TreeScanner
from .workers.supervisor import ProcessSupervisor, tool_name_from_path
from .workers.transcoder import ConversionOrchestrator

log = logging.getLogger(__name__)


class MediaConverter:
    """
    Entry point for a front end: scan, convert, poll, stop.

    Whether a finished job was stopped or ran to the end is decided here
    from the stop flag set by `request_stop`; the supervisor only reports
    whether anything is still running.
    """

    def __init__(self, settings: dict | None = None, supervisor: ProcessSupervisor | None = None,
                 probe: DurationProbe | None = None, popen=subprocess.Popen):
        self.settings = settings if settings is not None else load_settings()
        self.supervisor = supervisor or ProcessSupervisor(
            tool_name_from_path(self.settings.get("ffmpeg_path", "ffmpeg")),
            liveness=self.settings.get("liveness_mode", "process_name"),
        )
        self.probe = probe or DurationProbe(self.settings.get("ffprobe_path", "ffprobe"))
        self.orchestrator = ConversionOrchestrator(self.settings, self.supervisor, popen=popen)

        self.job: ConversionJob | None = None
        self.stop_requested = False
        self.scan_errors: list[PathProcessingError] = []
        self._state = JobState.IDLE

    @property
    def state(self) -> JobState:
        return self._state

    async def scan_async(self, paths) -> list[Node]:
        scanner = TreeScanner(self.probe, max_concurrency=self.settings.get("max_concurrency"))
        nodes = await scanner.scan(paths)
        self.scan_errors = scanner.errors
        return nodes

    def scan(self, paths) -> list[Node]:
        return asyncio.run(self.scan_async(paths))

    def start_conversion(self, tree: list[Node], output_root) -> ConversionJob:
        if self._state == JobState.RUNNING:
            log.warning("starting a new job while job %s may still be running", self.job.job_id)
        job = self.orchestrator.convert(tree, output_root)
        self.job, self.stop_requested, self._state = job, False, JobState.RUNNING
        return job

    def poll_liveness(self) -> bool:
        self.supervisor.reap()
        active = self.supervisor.is_any_active()
        if not active and self._state == JobState.RUNNING:
            self._state = JobState.STOPPED if self.stop_requested else JobState.COMPLETED
            if self.job:
                self.supervisor.release(self.job.job_id)
                log.info("job %s %s", self.job.job_id, self._state.value)
        return active

    def request_stop(self) -> None:
        self.stop_requested = True
        self.supervisor.stop_all()
