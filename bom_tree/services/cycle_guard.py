from __future__ import annotations

from collections import defaultdict
from collections.abc import Sequence

from bom_tree.errors import CycleError
from bom_tree.models import Part


def _adjacency(parts: Sequence[Part]) -> dict[str, list[str]]:
    adjacency: dict[str, list[str]] = defaultdict(list)
    for part in parts:
        for usage in part.child_usages:
            adjacency[part.id].append(usage.child_part_id)
    return adjacency


def find_cycle_path(parts: Sequence[Part], parent_id: str, child_id: str) -> list[str] | None:
    """Return the cycle that edge ``parent_id -> child_id`` would close.

    The path starts and ends at ``parent_id``; ``None`` means the edge is
    safe to add. The walk keeps a visited set, so a snapshot that is already
    cyclic still terminates.
    """
    if parent_id == child_id:
        return [parent_id, child_id]

    adjacency = _adjacency(parts)
    visited: set[str] = {child_id}
    # Each frame: (part id, index of next child to try).
    stack: list[tuple[str, int]] = [(child_id, 0)]

    while stack:
        node, index = stack[-1]
        if node == parent_id:
            return [parent_id] + [frame[0] for frame in stack]

        children = adjacency.get(node, [])
        if index >= len(children):
            stack.pop()
            continue

        stack[-1] = (node, index + 1)
        nxt = children[index]
        if nxt not in visited:
            visited.add(nxt)
            stack.append((nxt, 0))

    return None


def ensure_can_add_usage(parts: Sequence[Part], parent_id: str, child_id: str) -> None:
    path = find_cycle_path(parts, parent_id, child_id)
    if path is None:
        return
    if len(path) == 2:
        raise CycleError(path, message=f"Part '{parent_id}' cannot use itself")
    raise CycleError(path)


def can_add_usage(parts: Sequence[Part], parent_id: str, child_id: str) -> bool:
    return find_cycle_path(parts, parent_id, child_id) is None
