# mediaconv/utils/tree_ops.py
"""
Edits on a scanned tree. Nodes are frozen, so every function here returns a
new tree and leaves the one it was given untouched.
"""
from dataclasses import replace
from pathlib import Path

from ..models.node import FileNode, FolderNode, Node


def iter_files(nodes):
    for node in nodes:
        if isinstance(node, FileNode):
            yield node
        else:
            yield from iter_files(node.children)


def total_size(nodes) -> int:
    return sum(n.size_bytes for n in nodes)


def remove_node(nodes, path) -> list[Node]:
    path = Path(path)
    out = []
    for node in nodes:
        if node.path == path:
            continue
        if not isinstance(node, FileNode):
            node = replace(node, children=tuple(remove_node(node.children, path)))
        out.append(node)
    return out


def rename_node(nodes, path, new_name: str) -> list[Node]:
    path = Path(path)
    out = []
    for node in nodes:
        if node.path == path:
            node = replace(node, name=new_name)
        elif not isinstance(node, FileNode):
            node = replace(node, children=tuple(rename_node(node.children, path, new_name)))
        out.append(node)
    return out


def collapse_all(nodes) -> list[Node]:
    out = []
    for node in nodes:
        if isinstance(node, FolderNode):
            node = replace(node, expanded=False, children=tuple(collapse_all(node.children)))
        elif not isinstance(node, FileNode):
            node = replace(node, children=tuple(collapse_all(node.children)))
        out.append(node)
    return out


def toggle_expanded(nodes, path) -> list[Node]:
    """Flip a folder open/closed. Closing a folder closes everything under it."""
    path = Path(path)
    out = []
    for node in nodes:
        if isinstance(node, FolderNode) and node.path == path:
            if node.expanded:
                node = replace(node, expanded=False, children=tuple(collapse_all(node.children)))
            elif node.children:
                node = replace(node, expanded=True)
        elif not isinstance(node, FileNode):
            node = replace(node, children=tuple(toggle_expanded(node.children, path)))
        out.append(node)
    return out
