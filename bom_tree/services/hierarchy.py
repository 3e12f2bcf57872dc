from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence

from bom_tree.config import DEFAULT_MAX_DEPTH
from bom_tree.models import DanglingReference, Forest, HierarchyNode, Part

logger = logging.getLogger(__name__)


def _index_parts(parts: Sequence[Part]) -> dict[str, Part]:
    by_id: dict[str, Part] = {}
    for part in parts:
        if part.id in by_id:
            logger.warning("Duplicate part id '%s' in snapshot; keeping the first record", part.id)
            continue
        by_id[part.id] = part
    return by_id


def _child_key(parent: HierarchyNode, usage_id: str, index: int) -> str:
    return f"{parent.key}/{usage_id or f'#{index}'}"


def assemble_forest(parts: Sequence[Part], *, max_depth: int = DEFAULT_MAX_DEPTH) -> Forest:
    """Build the occurrence tree for a flat part list, with diagnostics.

    Every usage edge whose child is present produces a fresh node, so a part
    used under several parents appears once per usage with its own subtree.
    Parts that are never a child become roots, in input order.

    A usage whose child already appears on the path from the root yields a
    ``cycle_detected`` node with no children, so cyclic input stays linear
    in the number of distinct paths. ``max_depth`` is a second bound: a node
    at that depth which still has children is flagged the same way.
    """
    if max_depth < 1:
        raise ValueError("max_depth must be >= 1")

    by_id = _index_parts(parts)
    forest = Forest()
    used_as_child: set[str] = set()

    for part in by_id.values():
        for usage in part.child_usages:
            if usage.child_part_id in by_id:
                used_as_child.add(usage.child_part_id)
            else:
                forest.dangling.append(DanglingReference(part.id, usage.child_part_id, usage.usage_id))
                logger.debug(
                    "Skipping usage %s: part '%s' uses missing part '%s'",
                    usage.usage_id,
                    part.id,
                    usage.child_part_id,
                )

    reached: set[str] = set()
    # Each entry carries the part ids on its path from the root, itself included.
    stack: list[tuple[HierarchyNode, frozenset[str]]] = []
    for part in by_id.values():
        if part.id in used_as_child:
            continue
        root = HierarchyNode(part=part, key=part.id)
        forest.roots.append(root)
        stack.append((root, frozenset((part.id,))))

    while stack:
        node, ancestors = stack.pop()
        reached.add(node.part.id)
        resolvable = [
            (index, usage)
            for index, usage in enumerate(node.part.child_usages)
            if usage.child_part_id in by_id
        ]
        if not resolvable:
            continue

        if node.depth >= max_depth:
            node.cycle_detected = True
            forest.truncated.append(node.key)
            logger.warning(
                "Stopped expanding '%s' at depth %d; the usage graph probably contains a cycle",
                node.key,
                node.depth,
            )
            continue

        for index, usage in resolvable:
            child = HierarchyNode(
                part=by_id[usage.child_part_id],
                key=_child_key(node, usage.usage_id, index),
                quantity=usage.quantity,
                usage_id=usage.usage_id,
                parent_id=node.part.id,
                depth=node.depth + 1,
            )
            node.children.append(child)
            if child.part.id in ancestors:
                child.cycle_detected = True
                forest.truncated.append(child.key)
                logger.warning("Usage cycle at '%s': '%s' already appears above it", child.key, child.part.id)
                continue
            stack.append((child, ancestors | {child.part.id}))

    forest.unreachable = [part_id for part_id in by_id if part_id not in reached]
    if forest.unreachable:
        logger.warning(
            "Parts unreachable from any root (cyclic component): %s",
            ", ".join(forest.unreachable),
        )
    return forest


def build_hierarchy(parts: Sequence[Part], *, max_depth: int = DEFAULT_MAX_DEPTH) -> list[HierarchyNode]:
    return assemble_forest(parts, max_depth=max_depth).roots


def iter_nodes(roots: Sequence[HierarchyNode]) -> Iterator[HierarchyNode]:
    """Depth-first, pre-order walk over every occurrence."""
    stack = list(reversed(roots))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def find_node(roots: Sequence[HierarchyNode], key: str) -> HierarchyNode | None:
    for node in iter_nodes(roots):
        if node.key == key:
            return node
    return None


def find_occurrences(roots: Sequence[HierarchyNode], part_id: str) -> list[HierarchyNode]:
    return [node for node in iter_nodes(roots) if node.part.id == part_id]
