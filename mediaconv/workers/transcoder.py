# mediaconv/workers/transcoder.py
import logging
import os
import shlex
import subprocess
import uuid
from pathlib import Path

from ..models.errors import OutputDirectoryError, SpawnError
from ..models.job import ConversionJob, SpawnedProcess
from ..models.node import FileNode, Node
from ..utils.paths import output_name, safe_name, unique_path
from ..utils.tree_ops import iter_files
from .supervisor import ProcessSupervisor

log = logging.getLogger(__name__)


def _popen_kwargs() -> dict:
    kw = {
        "stdin": subprocess.DEVNULL,
        "stdout": subprocess.DEVNULL,
        "stderr": subprocess.DEVNULL,
    }
    if os.name == "nt":
        kw["creationflags"] = getattr(subprocess, "CREATE_NO_WINDOW", 0)
    return kw


class ConversionOrchestrator:
    """
    Replays a scanned tree under `<output_root>/converted`, one ffmpeg per file.

    The tree may have been edited since the scan; only what is in it now is
    mirrored. `convert` returns as soon as every process is started; use
    the supervisor to find out when they are done.
    """

    def __init__(self, settings: dict, supervisor: ProcessSupervisor, popen=subprocess.Popen):
        self.settings = settings
        self.supervisor = supervisor
        self._popen = popen

    def build_command(self, src, dst) -> list[str]:
        cmd = [self.settings.get("ffmpeg_path", "ffmpeg"), "-hide_banner", "-loglevel", "error",
               "-y", "-i", str(src)]
        if extra := (self.settings.get("extra_args") or "").strip():
            cmd.extend(shlex.split(extra))
        cmd.append(str(dst))
        return cmd

    def convert(self, tree: list[Node], output_root) -> ConversionJob:
        out_dir = Path(output_root) / self.settings.get("output_dir_name", "converted")
        try:
            out_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OutputDirectoryError(out_dir, e) from e

        job = ConversionJob(job_id=uuid.uuid4().hex[:12], output_dir=out_dir)
        log.info("job %s: output %s", job.job_id, out_dir)
        self._walk(tree, out_dir, job, set())
        log.info("job %s: %d process(es) started, %d failed",
                 job.job_id, len(job.spawned), len(job.errors))
        return job

    def _walk(self, nodes, dest: Path, job: ConversionJob, taken: set[Path]) -> None:
        for node in nodes:
            if isinstance(node, FileNode):
                self._spawn(node, dest, job, taken)
                continue
            sub = dest / safe_name(node.name)
            try:
                sub.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                log.warning("job %s: cannot create %s: %s", job.job_id, sub, e)
                job.errors.extend(SpawnError(f.path, e) for f in iter_files(node.children))
                continue
            self._walk(node.children, sub, job, taken)

    def _spawn(self, node: FileNode, dest: Path, job: ConversionJob, taken: set[Path]) -> None:
        formats = self.settings.get("output_formats")
        target = unique_path(dest / output_name(node.name, node.media_type, formats), taken)
        taken.add(target)
        cmd = self.build_command(node.path, target)
        try:
            proc = self._popen(cmd, **_popen_kwargs())
        except (OSError, ValueError, subprocess.SubprocessError) as e:
            log.warning("job %s: cannot start ffmpeg for %s: %s", job.job_id, node.path, e)
            job.errors.append(SpawnError(node.path, e))
            return
        self.supervisor.register(job.job_id, proc)
        job.spawned.append(SpawnedProcess(node.path, target, proc.pid, shlex.join(cmd)))
        log.debug("job %s: pid %s %s -> %s", job.job_id, proc.pid, node.path, target)
