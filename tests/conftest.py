import asyncio
import itertools
from pathlib import Path

import pytest

from mediaconv.models.errors import ProbeError
from mediaconv.models.node import MediaType
from mediaconv.utils.settings import DEFAULT_SETTINGS


class FakeProbe:
    """Stands in for ffprobe. Keyed by file name."""

    def __init__(self, durations=None, fail=(), delays=None):
        self.durations = durations or {}
        self.fail = set(fail)
        self.delays = delays or {}
        self.calls = []

    async def duration(self, path, media_type):
        if media_type == MediaType.IMAGE:
            return "none"
        name = Path(path).name
        self.calls.append(name)
        if name in self.delays:
            await asyncio.sleep(self.delays[name])
        if name in self.fail:
            raise ProbeError(path, "corrupt file")
        return self.durations.get(name, "1.000000")


class FakeProc:
    _pids = itertools.count(1000)

    def __init__(self, cmd, **kwargs):
        self.cmd = cmd
        self.kwargs = kwargs
        self.pid = next(self._pids)
        self.returncode = None
        self.killed = False

    def poll(self):
        return self.returncode

    def kill(self):
        self.killed = True
        self.returncode = -9

    def finish(self, rc=0):
        self.returncode = rc


class FakePopen:
    """Callable used in place of subprocess.Popen; remembers every process."""

    def __init__(self, fail_for=()):
        self.procs: list[FakeProc] = []
        self.fail_for = {str(p) for p in fail_for}

    def __call__(self, cmd, **kwargs):
        src = cmd[cmd.index("-i") + 1]
        if src in self.fail_for:
            raise FileNotFoundError(2, "No such file or directory", cmd[0])
        proc = FakeProc(cmd, **kwargs)
        self.procs.append(proc)
        return proc


def write(path: Path, size: int = 0) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"x" * size)
    return path


@pytest.fixture
def probe():
    return FakeProbe()


@pytest.fixture
def fake_popen():
    return FakePopen()


@pytest.fixture
def settings():
    return {**DEFAULT_SETTINGS, "output_formats": dict(DEFAULT_SETTINGS["output_formats"])}


@pytest.fixture
def qapp():
    from PySide6.QtCore import QCoreApplication
    return QCoreApplication.instance() or QCoreApplication([])
