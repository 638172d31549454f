# mediaconv/workers/scanner.py
import asyncio
import logging
import os
from pathlib import Path
from typing import NamedTuple

from ..models.errors import PathProcessingError
from ..models.node import FailedNode, FileNode, FolderNode, Node
from ..utils.classify import DIRECTORY, MEDIA, classify
from ..utils.sizes import size_of_directory
from .duration_probe import DurationProbe

log = logging.getLogger(__name__)


class ScanResult(NamedTuple):
    nodes: list[Node]
    errors: list[PathProcessingError]


def _display_name(path: Path) -> str:
    return path.name or str(path)


class TreeScanner:
    """
    Builds a tree of nodes from a list of root paths.

    Every root, and every entry of every directory, is scanned at the same
    time; each branch settles on its own so a failing path never takes its
    siblings down. Results come back in input order whatever order the I/O
    finishes in.

    A failed path is appended to `errors`. If it had resolved children
    before failing it is kept as a FailedNode holding them, otherwise it is
    left out. Files therefore vanish on failure while folders can leave a
    placeholder behind.

    With the default sizer, which skips whatever it cannot read, a folder
    only fails before its children resolve (stat or listing), so
    placeholders appear only when a custom `sizer` raises.

    Roots are made absolute. One scan per instance at a time; `errors` is
    reset by each `scan` call.
    """

    def __init__(self, probe: DurationProbe | None = None, max_concurrency: int | None = None,
                 sizer=size_of_directory):
        self.probe = probe or DurationProbe()
        self.max_concurrency = max_concurrency
        self.sizer = sizer
        self.errors: list[PathProcessingError] = []
        self._limit: asyncio.Semaphore | None = None

    async def scan(self, paths) -> list[Node]:
        self.errors = []
        self._limit = asyncio.Semaphore(self.max_concurrency) if self.max_concurrency else None
        return await self._scan_many([Path(p).absolute() for p in paths])

    async def _scan_many(self, paths: list[Path]) -> list[Node]:
        results = await asyncio.gather(*(self._scan_one(p) for p in paths), return_exceptions=True)
        nodes: list[Node] = []
        for path, res in zip(paths, results):
            if isinstance(res, PathProcessingError):
                self.errors.append(res)
                log.warning("%s", res)
                if res.children:
                    nodes.append(FailedNode(
                        path=path,
                        name=_display_name(path),
                        error=str(res.cause),
                        children=res.children,
                    ))
            elif isinstance(res, BaseException):
                # cancellation or interpreter exit, not a per-path failure
                raise res
            elif res is not None:
                nodes.append(res)
        return nodes

    async def _scan_one(self, path: Path) -> Node | None:
        try:
            st = await self._io(os.lstat, path)
            c = classify(path, st)
            if c.kind == DIRECTORY:
                return await self._scan_folder(path)
            if c.kind == MEDIA:
                duration = await self._probe(path, c.media_type)
                return FileNode(
                    path=path,
                    name=_display_name(path),
                    media_type=c.media_type,
                    size_bytes=st.st_size,
                    duration=duration,
                )
            log.debug("not media, skipping: %s", path)
            return None
        except PathProcessingError:
            raise
        except Exception as e:
            raise PathProcessingError(path, e) from e

    async def _scan_folder(self, path: Path) -> FolderNode:
        names = await self._io(os.listdir, path)
        children = await self._scan_many([path / n for n in names])
        try:
            size = await self._io(self.sizer, path)
        except Exception as e:
            raise PathProcessingError(path, e, children) from e
        return FolderNode(path=path, name=_display_name(path), size_bytes=size, children=tuple(children))

    async def _io(self, fn, *args):
        if self._limit is None:
            return await asyncio.to_thread(fn, *args)
        async with self._limit:
            return await asyncio.to_thread(fn, *args)

    async def _probe(self, path: Path, media_type) -> str:
        if self._limit is None:
            return await self.probe.duration(path, media_type)
        async with self._limit:
            return await self.probe.duration(path, media_type)


def scan_paths(paths, probe: DurationProbe | None = None, max_concurrency: int | None = None) -> ScanResult:
    """Blocking wrapper: run one scan on a fresh event loop."""
    scanner = TreeScanner(probe=probe, max_concurrency=max_concurrency)
    nodes = asyncio.run(scanner.scan(paths))
    return ScanResult(nodes, scanner.errors)
