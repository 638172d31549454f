# mediaconv/models/job.py
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .errors import SpawnError


class JobState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    STOPPED = "stopped"


@dataclass
class SpawnedProcess:
    source: Path
    target: Path
    pid: int
    cmdline: str = ""


@dataclass
class ConversionJob:
    job_id: str
    output_dir: Path
    spawned: list[SpawnedProcess] = field(default_factory=list)
    errors: list[SpawnError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors
