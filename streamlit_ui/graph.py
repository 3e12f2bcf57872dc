from __future__ import annotations

from collections import deque
from typing import Any

from bom_tree.models import Part


def _escape_dot_label(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def build_usage_graph_dot(parts: list[Part], *, max_nodes: int, focus: str | None = None) -> dict[str, Any]:
    """Graphviz source for the part-usage graph (one node per part, not per occurrence).

    Nodes are taken breadth-first from ``focus`` when given, otherwise from
    the roots, until ``max_nodes`` is reached.
    """
    if max_nodes < 1:
        max_nodes = 1

    by_id = {part.id: part for part in parts}
    edges = [
        (part.id, usage.child_part_id, usage.quantity)
        for part in parts
        for usage in part.child_usages
        if usage.child_part_id in by_id
    ]
    total_edges = len(edges)

    if not by_id:
        return {
            "dot": 'digraph usages { label="No parts"; labelloc="t"; fontsize=14; }',
            "shown_nodes": 0,
            "total_nodes": 0,
            "shown_edges": 0,
            "total_edges": 0,
        }

    used_as_child = {child for _, child, _ in edges}
    if focus and focus in by_id:
        seeds = [focus]
    else:
        seeds = [part_id for part_id in by_id if part_id not in used_as_child] or list(by_id)

    ordered: list[str] = []
    selected: set[str] = set()
    queue = deque(seeds)
    while queue and len(ordered) < max_nodes:
        part_id = queue.popleft()
        if part_id in selected:
            continue
        selected.add(part_id)
        ordered.append(part_id)
        for usage in by_id[part_id].child_usages:
            if usage.child_part_id in by_id and usage.child_part_id not in selected:
                queue.append(usage.child_part_id)

    node_lines: list[str] = []
    for part_id in ordered:
        title = by_id[part_id].title
        label = part_id if not title else f"{part_id}\\n{title}"
        style = ' fillcolor="#FDE68A"' if part_id == focus else ""
        node_lines.append(f'  "{_escape_dot_label(part_id)}" [label="{_escape_dot_label(label)}"{style}];')

    edge_lines: list[str] = []
    for parent, child, quantity in edges:
        if parent not in selected or child not in selected:
            continue
        edge_lines.append(
            f'  "{_escape_dot_label(parent)}" -> "{_escape_dot_label(child)}" [label="x{quantity}"];'
        )

    dot = "\n".join(
        [
            "digraph usages {",
            "  rankdir=TB;",
            '  graph [bgcolor="transparent"];',
            '  node [shape=box style="rounded,filled" fillcolor="#E8E7FB" color="#4338CA" fontname="Helvetica"];',
            '  edge [color="#6B7280" fontname="Helvetica" fontsize=10];',
            *node_lines,
            *edge_lines,
            "}",
        ]
    )

    return {
        "dot": dot,
        "shown_nodes": len(ordered),
        "total_nodes": len(by_id),
        "shown_edges": len(edge_lines),
        "total_edges": total_edges,
    }
