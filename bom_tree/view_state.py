from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from bom_tree.models import HierarchyNode
from bom_tree.services.hierarchy import find_node


@dataclass
class SelectionState:
    """Which occurrence the detail panels should show.

    Only the occurrence key is stored. Nodes are looked up again in whatever
    tree is current, so a rebuild never leaves the panels pointing at a
    discarded node.
    """

    selected_key: str | None = None

    def select(self, key: str | None) -> None:
        self.selected_key = key or None

    def clear(self) -> None:
        self.selected_key = None

    def resolve(self, roots: Sequence[HierarchyNode]) -> HierarchyNode | None:
        if self.selected_key is None:
            return None
        node = find_node(roots, self.selected_key)
        if node is None:
            self.selected_key = None
        return node

    def selected_part_id(self, roots: Sequence[HierarchyNode]) -> str | None:
        node = self.resolve(roots)
        return node.part.id if node is not None else None
