from __future__ import annotations

from typing import Any

import streamlit as st

from bom_tree.models import Part

ERROR_HINTS = {
    "InvalidQuantity": "Quantities must be whole numbers of at least 1.",
    "CycleError": "A part cannot use one of its own assemblies.",
    "NotFound": "The part or usage no longer exists. Reload the tree.",
    "OrphanedPart": "The new part exists but is not linked. Link it manually or delete it.",
    "ValidationError": "Fill in the required fields.",
}


def part_rows(parts: list[Part]) -> list[dict[str, Any]]:
    return [
        {
            "id": part.id,
            "title": part.title,
            "creator": part.creator,
            "stage": part.stage,
            "status": part.status,
            "level": part.level,
            "child_usages": len(part.child_usages),
            "updated": part.update_time,
        }
        for part in parts
    ]


def part_options(parts: list[Part]) -> dict[str, str]:
    return {part.id: f"{part.id} - {part.title}" for part in parts}


def show_service_result(title: str, result: dict[str, Any], *, show_data: bool = False) -> None:
    if result.get("ok"):
        st.success(f"{title} succeeded")
    else:
        st.error(f"{title} failed")

    for warning in result.get("warnings", []):
        st.warning(warning)
    for error in result.get("errors", []):
        st.error(error)

    hint = ERROR_HINTS.get(result.get("error_type") or "")
    if hint:
        st.info(hint)
    if result.get("error_type") == "CycleError" and result.get("data", {}).get("path"):
        st.caption("Cycle: " + " -> ".join(result["data"]["path"]))

    if show_data and result.get("data"):
        st.json(result["data"])
