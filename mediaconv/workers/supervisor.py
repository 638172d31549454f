# mediaconv/workers/supervisor.py
import logging
import os
import subprocess
from pathlib import Path

from ..models.errors import SupervisorError

log = logging.getLogger(__name__)

PROCESS_NAME = "process_name"
HANDLES = "handles"

# taskkill: "process not found"; pkill: "no process matched"
_NO_MATCH_RC = {"nt": 128, "posix": 1}


def tool_name_from_path(tool_path: str) -> str:
    return Path(tool_path).stem or "ffmpeg"


class ProcessSupervisor:
    """
    Knows whether transcode processes are still running and can kill them.

    The registry keeps every Popen handle a job started, keyed by job id.
    In the default "process_name" mode liveness and stop go through the OS
    process table by image name, so unrelated processes with the same name
    count as active and get killed too. "handles" mode only looks at the
    processes this supervisor started.
    """

    def __init__(self, tool_name: str = "ffmpeg", liveness: str = PROCESS_NAME,
                 run=subprocess.run, os_name: str | None = None):
        if liveness not in (PROCESS_NAME, HANDLES):
            raise ValueError(f"unknown liveness mode: {liveness!r}")
        self.tool_name = tool_name
        self.liveness = liveness
        self._run = run
        self._os_name = os_name or os.name
        self._jobs: dict[str, list[subprocess.Popen]] = {}

    # -- registry --------------------------------------------------------

    def register(self, job_id: str, proc: subprocess.Popen) -> None:
        self._jobs.setdefault(job_id, []).append(proc)

    def handles(self, job_id: str) -> list[subprocess.Popen]:
        return list(self._jobs.get(job_id, []))

    def job_ids(self) -> list[str]:
        return list(self._jobs)

    def release(self, job_id: str) -> None:
        self._jobs.pop(job_id, None)

    def reap(self) -> list[str]:
        """Forget exited handles. Returns ids of jobs with nothing left running."""
        done = []
        for job_id, procs in list(self._jobs.items()):
            alive = [p for p in procs if p.poll() is None]
            if alive:
                self._jobs[job_id] = alive
            else:
                del self._jobs[job_id]
                done.append(job_id)
        return done

    # -- OS commands -----------------------------------------------------

    @property
    def image_name(self) -> str:
        return f"{self.tool_name}.exe" if self._os_name == "nt" else self.tool_name

    def query_command(self) -> list[str]:
        if self._os_name == "nt":
            return ["tasklist", "/FI", f"IMAGENAME eq {self.image_name}", "/NH"]
        return ["pgrep", "-x", self.image_name]

    def kill_command(self) -> list[str]:
        if self._os_name == "nt":
            return ["taskkill", "/F", "/IM", self.image_name]
        return ["pkill", "-9", "-x", self.image_name]

    def _exec(self, cmd: list[str]) -> subprocess.CompletedProcess:
        try:
            return self._run(cmd, capture_output=True, text=True)
        except OSError as e:
            raise SupervisorError(cmd, None, str(e)) from e

    # -- public API ------------------------------------------------------

    def is_any_active(self) -> bool:
        if self.liveness == HANDLES:
            return any(p.poll() is None for procs in self._jobs.values() for p in procs)
        cmd = self.query_command()
        res = self._exec(cmd)
        if self._os_name == "nt":
            if res.returncode != 0:
                raise SupervisorError(cmd, res.returncode, (res.stderr or "").strip())
            return self.image_name.lower() in (res.stdout or "").lower()
        if res.returncode == 0:
            return True
        if res.returncode == 1:
            return False
        raise SupervisorError(cmd, res.returncode, (res.stderr or "").strip())

    def stop_all(self) -> None:
        """Force-kill every matching process. Returns once the kill is issued."""
        if self.liveness == HANDLES:
            for job_id, procs in self._jobs.items():
                for p in procs:
                    if p.poll() is None:
                        try:
                            p.kill()
                        except ProcessLookupError:
                            pass
                        log.debug("killed pid %s (job %s)", p.pid, job_id)
            return
        cmd = self.kill_command()
        res = self._exec(cmd)
        if res.returncode == 0:
            log.info("stop: %s killed", self.image_name)
        elif res.returncode == _NO_MATCH_RC.get(self._os_name, 1):
            log.info("stop: no %s process running", self.image_name)
        else:
            detail = ((res.stderr or "") or (res.stdout or "")).strip()
            raise SupervisorError(cmd, res.returncode, detail)
