from __future__ import annotations

from collections import defaultdict
from collections.abc import Sequence
from dataclasses import replace
from typing import Any

from bom_tree.models import HierarchyNode, Part, PartWhereUsed
from bom_tree.services.hierarchy import iter_nodes


def where_used(parts: Sequence[Part], part_id: str) -> list[PartWhereUsed]:
    entries: list[PartWhereUsed] = []
    for part in parts:
        for usage in part.child_usages:
            if usage.child_part_id == part_id:
                entries.append(PartWhereUsed(parent=part, usage_id=usage.usage_id, quantity=usage.quantity))
    return entries


def child_parts(parts: Sequence[Part], part_id: str) -> list[Part]:
    by_id = {part.id: part for part in parts}
    parent = by_id.get(part_id)
    if parent is None:
        return []
    return [by_id[usage.child_part_id] for usage in parent.child_usages if usage.child_part_id in by_id]


def _matches_text(part: Part, needle: str) -> bool:
    haystacks = (part.id, part.title, part.description, part.creator)
    return any(needle in (value or "").lower() for value in haystacks)


def search_parts(parts: Sequence[Part], query: str | None) -> list[Part]:
    needle = (query or "").strip().lower()
    if not needle:
        return list(parts)
    return [part for part in parts if _matches_text(part, needle)]


def filter_forest(
    roots: Sequence[HierarchyNode],
    search: str | None = None,
    status: str | None = None,
    stage: str | None = None,
) -> list[HierarchyNode]:
    """Prune the tree to occurrences that match, keeping their ancestors.

    A node survives when it matches every given criterion or when any of its
    descendants does. Survivors are copies; the input tree is not modified.
    """
    needle = (search or "").strip().lower()

    def matches(part: Part) -> bool:
        if status and part.status != status:
            return False
        if stage and part.stage != stage:
            return False
        return not needle or _matches_text(part, needle)

    def prune(node: HierarchyNode) -> HierarchyNode | None:
        kept_children = [copy for copy in (prune(child) for child in node.children) if copy is not None]
        if kept_children or matches(node.part):
            return replace(node, children=kept_children)
        return None

    return [copy for copy in (prune(root) for root in roots) if copy is not None]


def flatten_hierarchy(roots: Sequence[HierarchyNode]) -> list[dict[str, Any]]:
    """Indented table rows for the tree, with extended quantities.

    ``extended_quantity`` is the product of quantities from the root down to
    the occurrence, i.e. how many units one root assembly consumes there.
    """
    rows: list[dict[str, Any]] = []
    stack: list[tuple[HierarchyNode, int]] = [(root, 1) for root in reversed(roots)]
    while stack:
        node, multiplier = stack.pop()
        extended = multiplier * node.quantity
        rows.append(
            {
                "key": node.key,
                "level": node.depth,
                "part_id": node.part.id,
                "title": ("  " * node.depth) + node.part.title,
                "quantity": node.quantity,
                "extended_quantity": extended,
                "status": node.part.status,
                "stage": node.part.stage,
                "cycle_detected": node.cycle_detected,
            }
        )
        stack.extend((child, extended) for child in reversed(node.children))
    return rows


def explode_quantities(node: HierarchyNode) -> dict[str, int]:
    """Total units of each descendant part needed for one unit of ``node``."""
    totals: dict[str, int] = defaultdict(int)
    stack: list[tuple[HierarchyNode, int]] = [(child, child.quantity) for child in node.children]
    while stack:
        current, multiplier = stack.pop()
        totals[current.part.id] += multiplier
        stack.extend((child, multiplier * child.quantity) for child in current.children)
    return dict(sorted(totals.items()))


def count_occurrences(roots: Sequence[HierarchyNode]) -> int:
    return sum(1 for _ in iter_nodes(roots))
