import os

import pytest

from conftest import write
from mediaconv.models.node import MediaType
from mediaconv.parsers.ffprobe import format_duration, parse_duration
from mediaconv.utils import sizes
from mediaconv.utils.classify import DIRECTORY, MEDIA, UNSUPPORTED, classify, media_type_for


@pytest.mark.parametrize("name, expected", [
    ("a.mp4", MediaType.VIDEO),
    ("A.MKV", MediaType.VIDEO),
    ("b.Flac", MediaType.AUDIO),
    ("c.jpeg", MediaType.IMAGE),
    ("d.txt", None),
    ("noext", None),
])
def test_media_type_by_extension(name, expected):
    assert media_type_for(name) == expected


def test_classify(tmp_path):
    # content is never looked at, only the name
    video = write(tmp_path / "fake.mp4", 3)
    other = write(tmp_path / "notes.md", 3)

    assert classify(tmp_path).kind == DIRECTORY
    assert classify(video) == (MEDIA, MediaType.VIDEO)
    assert classify(other).kind == UNSUPPORTED


def test_classify_uses_given_stat(tmp_path):
    d = tmp_path / "dir.mp4"
    d.mkdir()
    assert classify(d, os.lstat(d)).kind == DIRECTORY


def test_human_size():
    assert sizes.human_size(0) == "0B"
    assert sizes.human_size(1023) == "1023B"
    assert sizes.human_size(1024) == "1KB"
    assert sizes.human_size(1536) == "1.5KB"
    assert sizes.human_size(int(2.25 * 1024**2)) == "2.25MB"


def test_size_of_file(tmp_path):
    assert sizes.size_of_file(write(tmp_path / "x.bin", 42)) == 42


def test_size_of_directory_skips_unreadable(tmp_path, monkeypatch):
    write(tmp_path / "a.txt", 10)
    write(tmp_path / "ok" / "b.mp4", 20)
    write(tmp_path / "locked" / "c.mp4", 999)

    real_scandir = os.scandir

    def scandir(path):
        if os.fspath(path).endswith("locked"):
            raise PermissionError(13, "Permission denied")
        return real_scandir(path)

    monkeypatch.setattr(sizes.os, "scandir", scandir)

    assert sizes.size_of_directory(tmp_path) == 30


def test_parse_duration():
    assert parse_duration("12.500000\n") == "12.500000"
    assert parse_duration("N/A\n3.0\n") == "3.0"
    assert parse_duration("") is None
    assert parse_duration("garbage") is None


def test_format_duration():
    assert format_duration("3725.4") == "1:02:05"
    assert format_duration("none") == ""
