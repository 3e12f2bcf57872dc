from __future__ import annotations

import logging
from typing import Any

from bom_tree.client import PartServiceClient
from bom_tree.config import BOMTreeSettings
from bom_tree.errors import BOMTreeError, InvalidQuantity, NotFound, OrphanedPartError, ValidationError
from bom_tree.models import Forest, Part
from bom_tree.result import ServiceResult, ok_result, service_guard
from bom_tree.serialization import PART_FIELDS, part_to_record
from bom_tree.services.cycle_guard import ensure_can_add_usage
from bom_tree.services.hierarchy import assemble_forest
from bom_tree.utils.parsing import clean_text, parse_quantity

logger = logging.getLogger(__name__)


def validated_quantity(raw: Any) -> int:
    quantity = parse_quantity(raw, default=1)
    if quantity is None or quantity <= 0:
        raise InvalidQuantity(raw)
    return quantity


def _required_id(value: Any, field: str) -> str:
    text = clean_text(value)
    if not text:
        raise ValidationError(field, f"{field} is required")
    return text


def _record(part: Part | None) -> dict[str, Any] | None:
    return part_to_record(part) if part is not None else None


class MutationCoordinator:
    """Applies usage and part mutations, then rebuilds from the service.

    The coordinator owns the only snapshot (``parts`` and ``forest``). A
    successful mutation replaces both wholesale with a fresh list from the
    Part service; a failed one leaves them untouched. When the write
    succeeds but the reload does not, the result is still ``ok`` with
    ``refreshed`` set to False and the old snapshot marked ``stale``.
    """

    def __init__(self, client: PartServiceClient, settings: BOMTreeSettings | None = None) -> None:
        self.client = client
        self.settings = settings or client.settings
        self.parts: list[Part] = []
        self.forest = Forest()
        self.loaded = False
        self.stale = False

    def _rebuild(self) -> Forest:
        parts = self.client.list_parts()
        forest = assemble_forest(parts, max_depth=self.settings.max_depth)
        self.parts = parts
        self.forest = forest
        self.loaded = True
        self.stale = False
        return forest

    def _refresh_after_write(self) -> list[str]:
        """Rebuild after a write; a failed reload becomes a warning.

        The old snapshot stays in place and is flagged ``stale`` until the
        next successful rebuild.
        """
        try:
            self._rebuild()
        except BOMTreeError as exc:
            self.stale = True
            logger.warning("Change saved but reloading parts failed: %s", exc)
            return [f"Saved, but refreshing the tree failed: {exc}"]
        return self.forest_warnings()

    def _snapshot(self) -> list[Part]:
        if not self.loaded:
            self._rebuild()
        return self.parts

    def get_part(self, part_id: str) -> Part | None:
        for part in self.parts:
            if part.id == part_id:
                return part
        return None

    def _require_known(self, part_id: str) -> Part:
        for part in self._snapshot():
            if part.id == part_id:
                return part
        raise NotFound("Part", part_id)

    def _refreshed_part(self, part_id: str, fallback: Part | None = None) -> tuple[Part | None, list[str]]:
        warnings = self._refresh_after_write()
        part = self.get_part(part_id)
        if self.stale:
            return fallback or part, warnings
        if part is None:
            raise NotFound("Part", part_id)
        return part, warnings

    def forest_warnings(self) -> list[str]:
        warnings: list[str] = []
        for ref in self.forest.dangling:
            warnings.append(
                f"Usage {ref.usage_id} of '{ref.parent_id}' points to missing part '{ref.child_part_id}'"
            )
        for key in self.forest.truncated:
            warnings.append(f"Expansion stopped at '{key}': usage cycle or depth limit")
        if self.forest.unreachable:
            warnings.append("Parts not reachable from any root: " + ", ".join(self.forest.unreachable))
        return warnings

    def _part_data(self, data: dict[str, Any] | None) -> dict[str, Any]:
        cleaned = {key: value for key, value in dict(data or {}).items() if key in PART_FIELDS}
        if not clean_text(cleaned.get("title")):
            raise ValidationError("title", "Part title is required")
        if not clean_text(cleaned.get("creator")) and self.settings.default_creator:
            cleaned["creator"] = self.settings.default_creator
        return cleaned

    @service_guard
    def refresh(self) -> ServiceResult:
        forest = self._rebuild()
        return ok_result(
            {"part_count": len(self.parts), "root_count": len(forest.roots)},
            warnings=self.forest_warnings(),
        )

    @service_guard
    def add_child_usage(self, parent_id: str, child_id: str, quantity: Any = 1) -> ServiceResult:
        parent_id = _required_id(parent_id, "parent_id")
        child_id = _required_id(child_id, "child_id")
        quantity_value = validated_quantity(quantity)

        # Self-usage is rejected before the snapshot is even needed.
        parts = [] if parent_id == child_id else self._snapshot()
        ensure_can_add_usage(parts, parent_id, child_id)
        self._require_known(parent_id)
        self._require_known(child_id)

        usage = self.client.add_usage(parent_id, child_id, quantity_value)
        logger.info("Added usage %s -> %s (qty %d)", parent_id, child_id, quantity_value)

        parent, warnings = self._refreshed_part(parent_id)
        return ok_result(
            {"part": _record(parent), "usage": usage, "refreshed": not self.stale},
            warnings=warnings,
        )

    @service_guard
    def remove_child_usage(self, parent_id: str, child_id: str) -> ServiceResult:
        parent_id = _required_id(parent_id, "parent_id")
        child_id = _required_id(child_id, "child_id")

        warnings: list[str] = []
        known_parent = self.get_part(parent_id)
        if known_parent is not None:
            matching = [usage for usage in known_parent.child_usages if usage.child_part_id == child_id]
            if len(matching) > 1:
                warnings.append(
                    f"Removing all {len(matching)} usages of '{child_id}' under '{parent_id}'"
                )

        self.client.remove_usage(parent_id, child_id)
        logger.info("Removed usage %s -> %s", parent_id, child_id)

        parent, refresh_warnings = self._refreshed_part(parent_id)
        return ok_result(
            {"part": _record(parent), "refreshed": not self.stale},
            warnings=warnings + refresh_warnings,
        )

    @service_guard
    def update_child_usage_quantity(self, parent_id: str, child_id: str, quantity: Any) -> ServiceResult:
        parent_id = _required_id(parent_id, "parent_id")
        child_id = _required_id(child_id, "child_id")
        quantity_value = validated_quantity(quantity)

        self.client.update_usage_quantity(parent_id, child_id, quantity_value)
        logger.info("Set usage %s -> %s to qty %d", parent_id, child_id, quantity_value)

        parent, warnings = self._refreshed_part(parent_id)
        return ok_result({"part": _record(parent), "refreshed": not self.stale}, warnings=warnings)

    @service_guard
    def create_part(self, data: dict[str, Any]) -> ServiceResult:
        payload = self._part_data(data)
        created = self.client.create_part(payload)
        logger.info("Created part %s", created.id)

        warnings = self._refresh_after_write()
        part = self.get_part(created.id) or created
        return ok_result({"part": part_to_record(part), "refreshed": not self.stale}, warnings=warnings)

    @service_guard
    def create_child_part(self, parent_id: str, data: dict[str, Any], quantity: Any = 1) -> ServiceResult:
        """Create a part and link it under ``parent_id`` in one call.

        The two requests are not atomic. If linking fails the new part is
        left in place and reported through ``OrphanedPartError``.
        """
        parent_id = _required_id(parent_id, "parent_id")
        quantity_value = validated_quantity(quantity)
        payload = self._part_data(data)
        self._require_known(parent_id)

        created = self.client.create_part(payload)
        logger.info("Created part %s for parent %s", created.id, parent_id)

        try:
            usage = self.client.add_usage(parent_id, created.id, quantity_value)
        except BOMTreeError as exc:
            logger.error("Part %s created but not linked under %s: %s", created.id, parent_id, exc)
            raise OrphanedPartError(part_to_record(created), parent_id, exc) from exc

        parent, warnings = self._refreshed_part(parent_id)
        part = self.get_part(created.id) or created
        return ok_result(
            {
                "part": part_to_record(part),
                "parent": _record(parent),
                "usage": usage,
                "refreshed": not self.stale,
            },
            warnings=warnings,
        )

    @service_guard
    def update_part(self, part_id: str, data: dict[str, Any]) -> ServiceResult:
        part_id = _required_id(part_id, "part_id")
        payload = self._part_data(data)
        updated = self.client.update_part(part_id, payload)
        logger.info("Updated part %s", part_id)

        part, warnings = self._refreshed_part(part_id, fallback=updated)
        return ok_result({"part": _record(part), "refreshed": not self.stale}, warnings=warnings)

    @service_guard
    def delete_part(self, part_id: str) -> ServiceResult:
        part_id = _required_id(part_id, "part_id")
        self.client.delete_part(part_id)
        logger.info("Deleted part %s", part_id)

        warnings = self._refresh_after_write()
        return ok_result(
            {"deleted": True, "part_id": part_id, "refreshed": not self.stale},
            warnings=warnings,
        )
