from __future__ import annotations

import unittest

from bom_tree.errors import CycleError
from bom_tree.models import Part, Usage
from bom_tree.services.cycle_guard import can_add_usage, ensure_can_add_usage, find_cycle_path


def make_part(part_id: str, *children: str) -> Part:
    return Part(
        id=part_id,
        child_usages=tuple(Usage(f"{part_id}-{child}", child, 1) for child in children),
    )


class TestCycleGuard(unittest.TestCase):
    def test_self_usage_is_rejected_on_any_graph(self) -> None:
        self.assertEqual(find_cycle_path([], "X", "X"), ["X", "X"])
        self.assertEqual(find_cycle_path([make_part("X"), make_part("Y", "X")], "X", "X"), ["X", "X"])

        with self.assertRaises(CycleError) as ctx:
            ensure_can_add_usage([], "X", "X")
        self.assertEqual(ctx.exception.path, ["X", "X"])
        self.assertEqual(ctx.exception.detected_by, "client")

    def test_closing_direct_edge_is_rejected(self) -> None:
        parts = [make_part("P1"), make_part("P2", "P1")]

        with self.assertRaises(CycleError) as ctx:
            ensure_can_add_usage(parts, "P1", "P2")

        self.assertEqual(ctx.exception.path, ["P1", "P2", "P1"])
        self.assertIn("P1 -> P2 -> P1", str(ctx.exception))

    def test_transitive_cycle_reports_path(self) -> None:
        parts = [make_part("A", "B"), make_part("B", "C"), make_part("C")]

        self.assertEqual(find_cycle_path(parts, "C", "A"), ["C", "A", "B", "C"])
        self.assertFalse(can_add_usage(parts, "C", "A"))

    def test_acyclic_additions_are_allowed(self) -> None:
        parts = [make_part("A", "B", "C"), make_part("B"), make_part("C")]

        self.assertIsNone(find_cycle_path(parts, "B", "C"))
        self.assertTrue(can_add_usage(parts, "A", "B"))
        self.assertTrue(can_add_usage(parts, "D", "A"))
        ensure_can_add_usage(parts, "C", "B")

    def test_terminates_on_snapshot_that_is_already_cyclic(self) -> None:
        parts = [make_part("X", "Y"), make_part("Y", "X"), make_part("Z")]

        self.assertTrue(can_add_usage(parts, "Z", "X"))
        self.assertEqual(find_cycle_path(parts, "X", "Y"), ["X", "Y", "X"])

    def test_follows_dangling_edges_without_error(self) -> None:
        parts = [make_part("A", "GHOST"), make_part("B")]

        self.assertTrue(can_add_usage(parts, "B", "A"))
        self.assertEqual(find_cycle_path(parts, "GHOST", "A"), ["GHOST", "A", "GHOST"])


if __name__ == "__main__":
    unittest.main()
