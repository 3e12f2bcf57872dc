from __future__ import annotations

import unittest

import requests

from bom_tree.client import PartServiceClient
from bom_tree.config import BOMTreeSettings
from bom_tree.errors import CycleError, NotFound, TransportError
from fakes import BASE_URL, FakePartService, timeout_error


class TestPartServiceClient(unittest.TestCase):
    def setUp(self) -> None:
        self.service = FakePartService()
        self.settings = BOMTreeSettings(base_url=BASE_URL + "/", timeout_s=3.5)
        self.client = PartServiceClient(self.settings, session=self.service)

    def test_list_parts_decodes_usages_and_uses_timeout(self) -> None:
        self.service.seed("P1", "Bolt")
        self.service.seed("P2", "Bracket", usages=[("P1", 4)])

        parts = self.client.list_parts()

        self.assertEqual([part.id for part in parts], ["P1", "P2"])
        self.assertEqual(parts[1].child_usages[0].child_part_id, "P1")
        self.assertEqual(parts[1].child_usages[0].quantity, 4)
        self.assertEqual(self.service.requests, [("GET", "/parts", None)])
        self.assertEqual(self.service.timeouts, [3.5])

    def test_http_failure_is_transport_error_with_server_message(self) -> None:
        self.service.fail_next("GET", "/parts", (500, "database unavailable"))

        with self.assertRaises(TransportError) as ctx:
            self.client.list_parts()

        self.assertEqual(ctx.exception.status, 500)
        self.assertEqual(str(ctx.exception), "Failed to list parts: database unavailable")

    def test_timeout_is_transport_error_without_status(self) -> None:
        self.service.fail_next("GET", "/parts", timeout_error())

        with self.assertRaises(TransportError) as ctx:
            self.client.list_parts()

        self.assertIsNone(ctx.exception.status)
        self.assertIsInstance(ctx.exception.__cause__, requests.Timeout)

    def test_missing_part_is_not_found(self) -> None:
        with self.assertRaises(NotFound) as ctx:
            self.client.get_part("NOPE")

        self.assertEqual(ctx.exception.resource, "Part")
        self.assertEqual(ctx.exception.identifier, "NOPE")

    def test_server_cycle_rejection_becomes_cycle_error(self) -> None:
        self.service.seed("A", usages=[("B", 1)])
        self.service.seed("B")

        with self.assertRaises(CycleError) as ctx:
            self.client.add_usage("B", "A", 1)

        self.assertEqual(ctx.exception.detected_by, "server")
        self.assertEqual(ctx.exception.path, ["B", "A", "B"])
        self.assertIn("circular dependency", str(ctx.exception))

    def test_other_bad_request_stays_transport_error(self) -> None:
        self.service.seed("A")
        self.service.seed("B")
        self.service.fail_next("POST", "/parts/usage", (400, "Part usage relationship already exists"))

        with self.assertRaises(TransportError) as ctx:
            self.client.add_usage("A", "B", 1)

        self.assertEqual(ctx.exception.status, 400)

    def test_add_usage_accepts_plain_text_reply(self) -> None:
        self.service.seed("A")
        self.service.seed("B")

        reply = self.client.add_usage("A", "B", 2)

        self.assertEqual(reply, {"message": "Part usage added with ID: U-001"})
        self.assertEqual(
            self.service.requests[-1],
            ("POST", "/parts/usage", {"parentPartId": "A", "childPartId": "B", "quantity": 2}),
        )

    def test_create_part_sends_only_editable_fields(self) -> None:
        part = self.client.create_part(
            {"title": " Housing ", "creator": "jdoe", "stage": "DESIGN", "childUsages": [], "id": "X"}
        )

        self.assertEqual(part.id, "NEW-001")
        self.assertEqual(part.title, "Housing")
        method, path, body = self.service.requests[-1]
        self.assertEqual((method, path), ("POST", "/parts"))
        self.assertEqual(body, {"title": "Housing", "creator": "jdoe", "stage": "DESIGN"})

    def test_usage_routes(self) -> None:
        self.service.seed("A", usages=[("B", 1)])
        self.service.seed("B")

        self.client.update_usage_quantity("A", "B", 6)
        self.assertEqual(self.service.parts["A"]["childUsages"][0]["quantity"], 6)

        self.client.remove_usage("A", "B")
        self.assertEqual(self.service.parts["A"]["childUsages"], [])

        with self.assertRaises(NotFound):
            self.client.remove_usage("A", "B")

        self.assertEqual(
            [entry[:2] for entry in self.service.requests],
            [
                ("PATCH", "/parts/A/usage/B/quantity/6"),
                ("DELETE", "/parts/A/usage/B"),
                ("DELETE", "/parts/A/usage/B"),
            ],
        )


if __name__ == "__main__":
    unittest.main()
