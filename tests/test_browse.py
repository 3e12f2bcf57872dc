from __future__ import annotations

import unittest

from bom_tree.models import Part, Usage
from bom_tree.services.browse import (
    child_parts,
    count_occurrences,
    explode_quantities,
    filter_forest,
    flatten_hierarchy,
    search_parts,
    where_used,
)
from bom_tree.services.hierarchy import build_hierarchy


def sample_parts() -> list[Part]:
    return [
        Part(
            id="MOTOR",
            title="Electric Motor Assembly",
            creator="John Doe",
            stage="PRODUCTION",
            status="ACTIVE",
            child_usages=(Usage("u1", "HOUSING", 1), Usage("u2", "BOLT", 8)),
        ),
        Part(
            id="HOUSING",
            title="Motor Housing",
            stage="PRODUCTION",
            status="ACTIVE",
            child_usages=(Usage("u3", "BOLT", 4), Usage("u4", "GASKET", 2)),
        ),
        Part(id="BOLT", title="M6x20 Hex Bolt", stage="PRODUCTION", status="ACTIVE"),
        Part(id="GASKET", title="Housing Gasket", stage="DESIGN", status="DRAFT"),
        Part(id="PUMP", title="Pump", creator="Jane Roe", stage="DESIGN", status="DRAFT"),
    ]


class TestBrowse(unittest.TestCase):
    def setUp(self) -> None:
        self.parts = sample_parts()
        self.roots = build_hierarchy(self.parts)

    def test_where_used_lists_each_usage(self) -> None:
        entries = where_used(self.parts, "BOLT")

        self.assertEqual([(entry.parent.id, entry.quantity) for entry in entries], [("MOTOR", 8), ("HOUSING", 4)])
        self.assertEqual(where_used(self.parts, "PUMP"), [])

    def test_child_parts(self) -> None:
        self.assertEqual([part.id for part in child_parts(self.parts, "HOUSING")], ["BOLT", "GASKET"])
        self.assertEqual(child_parts(self.parts, "MISSING"), [])

    def test_search_parts_is_case_insensitive(self) -> None:
        self.assertEqual([part.id for part in search_parts(self.parts, "jane")], ["PUMP"])
        self.assertEqual(len(search_parts(self.parts, "  ")), len(self.parts))

    def test_filter_keeps_ancestors_of_matches(self) -> None:
        filtered = filter_forest(self.roots, search="gasket")

        self.assertEqual([root.part_id for root in filtered], ["MOTOR"])
        self.assertEqual([child.part_id for child in filtered[0].children], ["HOUSING"])
        self.assertEqual([child.part_id for child in filtered[0].children[0].children], ["GASKET"])
        self.assertEqual(len(self.roots[0].children), 2)

    def test_filter_by_status_and_stage(self) -> None:
        filtered = filter_forest(self.roots, status="DRAFT", stage="DESIGN")

        self.assertEqual([root.part_id for root in filtered], ["MOTOR", "PUMP"])
        self.assertEqual(count_occurrences(filtered), 4)

    def test_filter_without_criteria_copies_everything(self) -> None:
        filtered = filter_forest(self.roots)

        self.assertEqual(count_occurrences(filtered), count_occurrences(self.roots))
        self.assertIsNot(filtered[0], self.roots[0])
        self.assertIsNot(filtered[0].children[0], self.roots[0].children[0])

    def test_flatten_reports_extended_quantities(self) -> None:
        rows = flatten_hierarchy(self.roots)

        by_key = {row["key"]: row for row in rows}
        self.assertEqual([row["key"] for row in rows][:3], ["MOTOR", "MOTOR/u1", "MOTOR/u1/u3"])
        self.assertEqual(by_key["MOTOR/u1/u3"]["extended_quantity"], 4)
        self.assertEqual(by_key["MOTOR/u2"]["extended_quantity"], 8)
        self.assertEqual(by_key["MOTOR/u1/u4"]["level"], 2)

    def test_explode_quantities_sums_every_occurrence(self) -> None:
        totals = explode_quantities(self.roots[0])

        self.assertEqual(totals, {"BOLT": 12, "GASKET": 2, "HOUSING": 1})


if __name__ == "__main__":
    unittest.main()
