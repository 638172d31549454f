import subprocess

import pytest

from conftest import FakeProc
from mediaconv.models.errors import SupervisorError
from mediaconv.workers.supervisor import HANDLES, ProcessSupervisor, tool_name_from_path


class FakeRun:
    def __init__(self, rc=0, stdout="", stderr="", exc=None):
        self.rc, self.stdout, self.stderr, self.exc = rc, stdout, stderr, exc
        self.calls = []

    def __call__(self, cmd, **kwargs):
        self.calls.append(cmd)
        assert kwargs == {"capture_output": True, "text": True}
        if self.exc:
            raise self.exc
        return subprocess.CompletedProcess(cmd, self.rc, self.stdout, self.stderr)


def test_tool_name_from_path():
    assert tool_name_from_path("ffmpeg") == "ffmpeg"
    assert tool_name_from_path("/opt/ffmpeg-6/bin/ffmpeg") == "ffmpeg"
    assert tool_name_from_path("ffmpeg.exe") == "ffmpeg"


def test_unknown_liveness_mode():
    with pytest.raises(ValueError):
        ProcessSupervisor(liveness="psychic")


@pytest.mark.parametrize("rc, expected", [(0, True), (1, False)])
def test_posix_liveness_by_name(rc, expected):
    run = FakeRun(rc=rc)
    sup = ProcessSupervisor(run=run, os_name="posix")

    assert sup.is_any_active() is expected
    assert run.calls == [["pgrep", "-x", "ffmpeg"]]


def test_posix_liveness_query_failure():
    sup = ProcessSupervisor(run=FakeRun(rc=3, stderr="pgrep: bad"), os_name="posix")
    with pytest.raises(SupervisorError, match="pgrep: bad"):
        sup.is_any_active()


def test_windows_liveness_by_image_name():
    found = FakeRun(stdout="ffmpeg.exe   4242 Console   1   52,000 K\n")
    none = FakeRun(stdout="INFO: No tasks are running which match the specified criteria.\n")

    assert ProcessSupervisor(run=found, os_name="nt").is_any_active() is True
    assert ProcessSupervisor(run=none, os_name="nt").is_any_active() is False
    assert found.calls == [["tasklist", "/FI", "IMAGENAME eq ffmpeg.exe", "/NH"]]


def test_name_match_sees_processes_it_did_not_start():
    # nothing registered, yet an ffmpeg somewhere on the box counts
    sup = ProcessSupervisor(run=FakeRun(rc=0), os_name="posix")
    assert sup.job_ids() == []
    assert sup.is_any_active() is True


@pytest.mark.parametrize("os_name, rc, cmd", [
    ("posix", 0, ["pkill", "-9", "-x", "ffmpeg"]),
    ("posix", 1, ["pkill", "-9", "-x", "ffmpeg"]),
    ("nt", 0, ["taskkill", "/F", "/IM", "ffmpeg.exe"]),
    ("nt", 128, ["taskkill", "/F", "/IM", "ffmpeg.exe"]),
])
def test_stop_all_tolerates_no_match(os_name, rc, cmd):
    run = FakeRun(rc=rc)
    ProcessSupervisor(run=run, os_name=os_name).stop_all()
    assert run.calls == [cmd]


def test_stop_all_propagates_kill_failure():
    run = FakeRun(rc=3, stderr="pkill: operation not permitted")
    with pytest.raises(SupervisorError) as info:
        ProcessSupervisor(run=run, os_name="posix").stop_all()
    assert info.value.returncode == 3
    assert "not permitted" in str(info.value)


def test_stop_all_missing_command_is_chained():
    err = FileNotFoundError(2, "No such file or directory", "pkill")
    with pytest.raises(SupervisorError) as info:
        ProcessSupervisor(run=FakeRun(exc=err), os_name="posix").stop_all()
    assert info.value.__cause__ is err


def test_custom_tool_name():
    run = FakeRun(rc=1)
    ProcessSupervisor("avconv", run=run, os_name="posix").stop_all()
    assert run.calls == [["pkill", "-9", "-x", "avconv"]]


def test_handles_mode_tracks_own_processes():
    sup = ProcessSupervisor(liveness=HANDLES)
    a, b = FakeProc(["ffmpeg"]), FakeProc(["ffmpeg"])
    sup.register("job1", a)
    sup.register("job1", b)

    assert sup.is_any_active()
    a.finish()
    assert sup.is_any_active()
    b.finish(1)
    assert not sup.is_any_active()


def test_handles_mode_stop_kills_running_only():
    sup = ProcessSupervisor(liveness=HANDLES)
    done, running = FakeProc(["ffmpeg"]), FakeProc(["ffmpeg"])
    done.finish()
    sup.register("j", done)
    sup.register("j", running)

    sup.stop_all()

    assert running.killed and not done.killed
    assert not sup.is_any_active()


def test_reap_and_release():
    sup = ProcessSupervisor(liveness=HANDLES)
    p1, p2 = FakeProc(["ffmpeg"]), FakeProc(["ffmpeg"])
    sup.register("a", p1)
    sup.register("b", p2)
    p1.finish()

    assert sup.reap() == ["a"]
    assert sup.job_ids() == ["b"]
    assert sup.handles("b") == [p2]
    sup.release("b")
    assert sup.job_ids() == []
