from __future__ import annotations

from typing import Any

from bom_tree.models import HierarchyNode, Part, PartWhereUsed, Usage
from bom_tree.utils.parsing import clean_text, parse_quantity

PART_FIELDS = ("title", "description", "creator", "stage", "status", "level")


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def usage_from_record(record: dict[str, Any]) -> Usage:
    quantity = parse_quantity(record.get("quantity"), default=1)
    return Usage(
        usage_id=clean_text(record.get("id")),
        child_part_id=clean_text(record.get("childPartId")),
        quantity=quantity if quantity is not None else 1,
    )


def usage_to_record(usage: Usage) -> dict[str, Any]:
    return {
        "id": usage.usage_id,
        "childPartId": usage.child_part_id,
        "quantity": usage.quantity,
    }


def part_from_record(record: dict[str, Any]) -> Part:
    usage_records = record.get("childUsages") or []
    return Part(
        id=clean_text(record.get("id")),
        title=clean_text(record.get("title")),
        description=_optional_text(record.get("description")),
        creator=_optional_text(record.get("creator")),
        stage=_optional_text(record.get("stage")),
        status=_optional_text(record.get("status")),
        level=_optional_text(record.get("level")),
        child_usages=tuple(usage_from_record(item) for item in usage_records),
        create_time=_optional_text(record.get("createTime")),
        update_time=_optional_text(record.get("updateTime")),
        document_ids=tuple(str(item) for item in record.get("documentIds") or []),
    )


def part_to_record(part: Part) -> dict[str, Any]:
    return {
        "id": part.id,
        "title": part.title,
        "description": part.description,
        "creator": part.creator,
        "stage": part.stage,
        "status": part.status,
        "level": part.level,
        "childUsages": [usage_to_record(usage) for usage in part.child_usages],
        "createTime": part.create_time,
        "updateTime": part.update_time,
        "documentIds": list(part.document_ids),
    }


def part_payload(data: dict[str, Any]) -> dict[str, Any]:
    """Request body for POST/PUT ``/parts``: only the editable fields."""
    payload: dict[str, Any] = {}
    for key in PART_FIELDS:
        value = data.get(key)
        if value is None:
            continue
        payload[key] = value.strip() if isinstance(value, str) else value
    return payload


def node_to_record(node: HierarchyNode) -> dict[str, Any]:
    return {
        "key": node.key,
        "part_id": node.part.id,
        "title": node.part.title,
        "quantity": node.quantity,
        "usage_id": node.usage_id,
        "parent_id": node.parent_id,
        "depth": node.depth,
        "cycle_detected": node.cycle_detected,
        "children": [node_to_record(child) for child in node.children],
    }


def where_used_to_record(entry: PartWhereUsed) -> dict[str, Any]:
    return {
        "parent_id": entry.parent.id,
        "parent_title": entry.parent.title,
        "usage_id": entry.usage_id,
        "quantity": entry.quantity,
    }
