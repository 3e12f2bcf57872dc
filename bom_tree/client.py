"""Thin request/response wrapper around the external Part service.

No caching, retries or business rules live here: each method issues one
request and either returns the decoded payload or raises a typed error from
:mod:`bom_tree.errors`.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from bom_tree.config import BOMTreeSettings
from bom_tree.errors import CycleError, NotFound, TransportError
from bom_tree.models import Part
from bom_tree.serialization import part_from_record, part_payload

logger = logging.getLogger(__name__)

_CYCLE_MARKERS = ("circular", "cycle")


def _error_message(response: requests.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        payload = None

    if isinstance(payload, dict):
        for key in ("message", "error", "detail"):
            value = payload.get(key)
            if value:
                return str(value)

    text = (response.text or "").strip()
    if text:
        return text
    return response.reason or f"HTTP {response.status_code}"


class PartServiceClient:
    def __init__(
        self,
        settings: BOMTreeSettings | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.settings = settings or BOMTreeSettings()
        self.session = session or requests.Session()

    def _url(self, path: str) -> str:
        return f"{self.settings.base_url}{path}"

    def _send(
        self,
        operation: str,
        method: str,
        path: str,
        json_body: dict[str, Any] | None = None,
    ) -> requests.Response:
        url = self._url(path)
        logger.debug("%s %s (%s)", method, url, operation)
        try:
            response = self.session.request(
                method,
                url,
                json=json_body,
                timeout=self.settings.timeout_s,
            )
        except requests.RequestException as exc:
            raise TransportError(operation, str(exc)) from exc

        if response.status_code >= 400:
            message = _error_message(response)
            logger.debug("%s %s -> %s: %s", method, url, response.status_code, message)
            if response.status_code == 404:
                raise NotFound("Resource", path, message=f"Failed to {operation}: {message}")
            raise TransportError(operation, message, status=response.status_code)

        return response

    @staticmethod
    def _json(response: requests.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    def list_parts(self) -> list[Part]:
        payload = self._json(self._send("list parts", "GET", "/parts"))
        if not isinstance(payload, list):
            raise TransportError("list parts", f"expected a list of parts, got {type(payload).__name__}")
        return [part_from_record(item) for item in payload if isinstance(item, dict)]

    def get_part(self, part_id: str) -> Part:
        try:
            response = self._send(f"load part {part_id}", "GET", f"/parts/{part_id}")
        except NotFound as exc:
            raise NotFound("Part", part_id) from exc
        return part_from_record(self._json(response) or {})

    def create_part(self, data: dict[str, Any]) -> Part:
        response = self._send("create part", "POST", "/parts", part_payload(data))
        return part_from_record(self._json(response) or {})

    def update_part(self, part_id: str, data: dict[str, Any]) -> Part:
        try:
            response = self._send(f"update part {part_id}", "PUT", f"/parts/{part_id}", part_payload(data))
        except NotFound as exc:
            raise NotFound("Part", part_id) from exc
        return part_from_record(self._json(response) or {})

    def delete_part(self, part_id: str) -> None:
        try:
            self._send(f"delete part {part_id}", "DELETE", f"/parts/{part_id}")
        except NotFound as exc:
            raise NotFound("Part", part_id) from exc

    def add_usage(self, parent_id: str, child_id: str, quantity: int) -> dict[str, Any]:
        body = {"parentPartId": parent_id, "childPartId": child_id, "quantity": quantity}
        try:
            response = self._send("add part usage", "POST", "/parts/usage", body)
        except TransportError as exc:
            lowered = exc.message.lower()
            if exc.status is not None and exc.status < 500 and any(
                marker in lowered for marker in _CYCLE_MARKERS
            ):
                raise CycleError([parent_id, child_id, parent_id], detected_by="server", message=exc.message) from exc
            raise

        payload = self._json(response)
        if isinstance(payload, dict):
            return payload
        return {"message": payload}

    def remove_usage(self, parent_id: str, child_id: str) -> None:
        try:
            self._send("remove part usage", "DELETE", f"/parts/{parent_id}/usage/{child_id}")
        except NotFound as exc:
            raise NotFound("Usage", f"{parent_id}->{child_id}") from exc

    def update_usage_quantity(self, parent_id: str, child_id: str, quantity: int) -> None:
        path = f"/parts/{parent_id}/usage/{child_id}/quantity/{quantity}"
        try:
            self._send("update part usage quantity", "PATCH", path)
        except NotFound as exc:
            raise NotFound("Usage", f"{parent_id}->{child_id}") from exc
