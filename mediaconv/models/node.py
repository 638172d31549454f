# mediaconv/models/node.py
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Union

from ..utils.sizes import human_size


class MediaType(str, Enum):
    VIDEO = "video"
    AUDIO = "audio"
    IMAGE = "image"


NO_DURATION = "none"


@dataclass(frozen=True)
class FileNode:
    path: Path
    name: str
    media_type: MediaType
    size_bytes: int
    duration: str = NO_DURATION

    kind = "file"

    @property
    def size_label(self) -> str:
        return human_size(self.size_bytes)


@dataclass(frozen=True)
class FolderNode:
    path: Path
    name: str
    size_bytes: int
    children: tuple = ()
    expanded: bool = field(default=False, compare=False)  # UI state only

    kind = "folder"

    @property
    def size_label(self) -> str:
        return human_size(self.size_bytes)


@dataclass(frozen=True)
class FailedNode:
    """Stand-in for a folder that failed after some children resolved."""
    path: Path
    name: str
    error: str
    children: tuple = ()

    kind = "failed"

    @property
    def size_bytes(self) -> int:
        return sum(c.size_bytes for c in self.children)

    @property
    def size_label(self) -> str:
        return human_size(self.size_bytes)


Node = Union[FileNode, FolderNode, FailedNode]


def to_dict(node: Node) -> dict:
    d = {"kind": node.kind, "path": str(node.path), "name": node.name}
    if isinstance(node, FileNode):
        d.update(media_type=node.media_type.value, size=node.size_bytes, duration=node.duration)
    elif isinstance(node, FolderNode):
        d.update(size=node.size_bytes, expanded=node.expanded,
                 children=[to_dict(c) for c in node.children])
    else:
        d.update(error=node.error, children=[to_dict(c) for c in node.children])
    return d


def node_from_dict(d: dict) -> Node:
    kind = d.get("kind")
    path = Path(d["path"])
    name = d.get("name") or path.name
    if kind == "file":
        return FileNode(
            path=path,
            name=name,
            media_type=MediaType(d["media_type"]),
            size_bytes=int(d.get("size", 0)),
            duration=str(d.get("duration", NO_DURATION)),
        )
    children = tuple(node_from_dict(c) for c in d.get("children", []))
    if kind == "folder":
        return FolderNode(path=path, name=name, size_bytes=int(d.get("size", 0)),
                          children=children, expanded=bool(d.get("expanded", False)))
    if kind == "failed":
        return FailedNode(path=path, name=name, error=str(d.get("error", "")), children=children)
    raise ValueError(f"unknown node kind: {kind!r}")
