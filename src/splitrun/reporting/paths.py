"""Locate nodes in a runner's copy of a collection tree by id.

Runners assign ids to every folder and request at run time, only within
their own copy of the tree, and report executions as a flat list of
ids. These helpers map an id back to the chain of names above it.
"""

from __future__ import annotations

from collections.abc import Iterator

from splitrun.errors import PathResolutionError
from splitrun.models.collection import Collection, Folder, Request

UNNAMED = "(unnamed)"


def node_name(node: Collection | Folder | Request) -> str:
    return node.name or UNNAMED


def resolve_path(
    node: Collection | Folder,
    target_id: str,
    path_so_far: list[str],
) -> list[str] | None:
    """Return the names from the root down to the target's parent.

    Depth-first, pre-order search. The first node whose id matches wins;
    the target's own name is not included.

    Args:
        node: The tree (or subtree) to search.
        target_id: Runner-assigned id of the node to find.
        path_so_far: Names of the ancestors of `node`.

    Returns:
        Ancestor names in root-to-parent order, or None if not found.
    """
    if isinstance(node, Folder) and node.id == target_id:
        return list(path_so_far)

    path = [*path_so_far, node_name(node)]
    for child in node.item:
        if child.id == target_id:
            return path
        if isinstance(child, Folder):
            found = resolve_path(child, target_id, path)
            if found is not None:
                return found
    return None


def require_path(node: Collection | Folder, target_id: str) -> list[str]:
    """Like resolve_path from the root, but raise when the id is absent.

    Raises:
        PathResolutionError: If no node in the tree has target_id.
    """
    path = resolve_path(node, target_id, [])
    if path is None:
        raise PathResolutionError(target_id, tree_name=node.name)
    return path


def iter_nodes(node: Collection | Folder) -> Iterator[Folder | Request]:
    """Yield every descendant of node in pre-order."""
    for child in node.item:
        yield child
        if isinstance(child, Folder):
            yield from iter_nodes(child)


def index_by_id(node: Collection | Folder) -> dict[str, Folder | Request]:
    """Map each id in the tree to its node. The first occurrence wins."""
    index: dict[str, Folder | Request] = {}
    for child in iter_nodes(node):
        if child.id is not None:
            index.setdefault(child.id, child)
    return index
