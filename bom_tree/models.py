from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Usage:
    usage_id: str
    child_part_id: str
    quantity: int = 1


@dataclass(frozen=True)
class Part:
    id: str
    title: str = ""
    description: str | None = None
    creator: str | None = None
    stage: str | None = None
    status: str | None = None
    level: str | None = None
    child_usages: tuple[Usage, ...] = ()
    create_time: str | None = None
    update_time: str | None = None
    document_ids: tuple[str, ...] = ()


@dataclass
class HierarchyNode:
    """One occurrence of a part at a specific position in the tree.

    ``key`` is the occurrence path (root part id followed by the usage ids
    leading here), so the same input always yields the same keys.
    """

    part: Part
    key: str
    quantity: int = 1
    usage_id: str | None = None
    parent_id: str | None = None
    depth: int = 0
    children: list[HierarchyNode] = field(default_factory=list)
    cycle_detected: bool = False

    @property
    def part_id(self) -> str:
        return self.part.id

    @property
    def is_root(self) -> bool:
        return self.usage_id is None


@dataclass(frozen=True)
class DanglingReference:
    parent_id: str
    child_part_id: str
    usage_id: str


@dataclass
class Forest:
    roots: list[HierarchyNode] = field(default_factory=list)
    dangling: list[DanglingReference] = field(default_factory=list)
    truncated: list[str] = field(default_factory=list)
    unreachable: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class PartWhereUsed:
    parent: Part
    usage_id: str
    quantity: int
