"""Error taxonomy for the part-usage engine.

Every error carries an ``error_type`` string so callers receiving a
``ServiceResult`` can tell quantity, cycle and transport failures apart
without inspecting message text.
"""

from __future__ import annotations

from typing import Any


class BOMTreeError(Exception):
    error_type = "BOMTreeError"

    def details(self) -> dict[str, Any]:
        return {}


class TransportError(BOMTreeError):
    """Network or HTTP failure talking to the Part service."""

    error_type = "TransportError"

    def __init__(self, operation: str, message: str, status: int | None = None) -> None:
        self.operation = operation
        self.message = message
        self.status = status
        super().__init__(f"Failed to {operation}: {message}")

    def details(self) -> dict[str, Any]:
        return {"operation": self.operation, "status": self.status, "message": self.message}


class ValidationError(BOMTreeError):
    error_type = "ValidationError"

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(message)

    def details(self) -> dict[str, Any]:
        return {"field": self.field}


class InvalidQuantity(ValidationError):
    error_type = "InvalidQuantity"

    def __init__(self, quantity: Any) -> None:
        self.quantity = quantity
        super().__init__("quantity", f"Quantity must be a positive integer, got {quantity!r}")

    def details(self) -> dict[str, Any]:
        return {"field": "quantity", "quantity": self.quantity}


class CycleError(BOMTreeError):
    """Adding the usage edge would make a part its own descendant.

    ``detected_by`` is ``"client"`` when the local guard caught it and
    ``"server"`` when the Part service rejected the edge.
    """

    error_type = "CycleError"

    def __init__(self, path: list[str], detected_by: str = "client", message: str | None = None) -> None:
        self.path = list(path)
        self.detected_by = detected_by
        if message is None:
            message = "Cycle detected: " + " -> ".join(self.path)
        super().__init__(message)

    def details(self) -> dict[str, Any]:
        return {"path": list(self.path), "detected_by": self.detected_by}


class NotFound(BOMTreeError):
    error_type = "NotFound"

    def __init__(self, resource: str, identifier: str, message: str | None = None) -> None:
        self.resource = resource
        self.identifier = identifier
        super().__init__(message or f"{resource} '{identifier}' not found")

    def details(self) -> dict[str, Any]:
        return {"resource": self.resource, "identifier": self.identifier}


class OrphanedPartError(BOMTreeError):
    """The part was created but linking it under its parent failed."""

    error_type = "OrphanedPart"

    def __init__(self, part: dict[str, Any], parent_id: str, cause: BOMTreeError) -> None:
        self.part = part
        self.parent_id = parent_id
        self.cause = cause
        super().__init__(
            f"Part '{part.get('id')}' was created but could not be added under '{parent_id}': {cause}"
        )

    def details(self) -> dict[str, Any]:
        return {
            "part": dict(self.part),
            "parent_id": self.parent_id,
            "cause_type": self.cause.error_type,
            "cause": self.cause.details(),
        }
