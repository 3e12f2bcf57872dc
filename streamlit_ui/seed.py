from __future__ import annotations

from typing import Any

from bom_tree import BOMTreeBackend

SAMPLE_CREATOR = "demo"


def seed_demo_data(backend: BOMTreeBackend) -> list[tuple[str, dict[str, Any]]]:
    """Create a small motor assembly where the hex bolt is used in two places."""
    mutations = backend.mutations
    operations: list[tuple[str, dict[str, Any]]] = []

    top = mutations.create_part(
        {
            "title": "Electric Motor Assembly",
            "description": "AC motor with housing",
            "creator": SAMPLE_CREATOR,
            "stage": "DESIGN",
            "status": "DRAFT",
            "level": "1",
        }
    )
    operations.append(("Create motor assembly", top))
    if not top["ok"]:
        return operations
    top_id = top["data"]["part"]["id"]

    housing = mutations.create_child_part(
        top_id,
        {"title": "Motor Housing", "creator": SAMPLE_CREATOR, "stage": "DESIGN", "status": "DRAFT", "level": "2"},
    )
    operations.append(("Create housing under motor", housing))

    bolt = mutations.create_child_part(
        top_id,
        {"title": "M6x20 Hex Bolt", "creator": SAMPLE_CREATOR, "stage": "DESIGN", "status": "DRAFT", "level": "3"},
        quantity=8,
    )
    operations.append(("Create bolt under motor", bolt))

    if housing["ok"] and bolt["ok"]:
        operations.append(
            (
                "Reuse bolt in housing",
                mutations.add_child_usage(housing["data"]["part"]["id"], bolt["data"]["part"]["id"], 4),
            )
        )

    return operations
