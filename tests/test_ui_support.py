from __future__ import annotations

import unittest
from unittest import mock

from bom_tree import BOMTreeBackend, BOMTreeSettings
from bom_tree.models import Part, Usage
from bom_tree.services.hierarchy import find_occurrences
from fakes import BASE_URL, FakePartService, timeout_error
from streamlit_ui.context import build_app_context
from streamlit_ui.graph import build_usage_graph_dot
from streamlit_ui.seed import seed_demo_data
from streamlit_ui.tabs import tree as tree_tab


class TestUsageGraphDot(unittest.TestCase):
    def test_graph_counts_and_labels(self) -> None:
        parts = [
            Part(id="A", title="Assembly", child_usages=(Usage("u1", "B", 2), Usage("u2", "GHOST", 1))),
            Part(id="B", title='Bolt "M6"'),
            Part(id="C", title="Loose"),
        ]

        graph = build_usage_graph_dot(parts, max_nodes=10)

        self.assertEqual(graph["total_nodes"], 3)
        self.assertEqual(graph["shown_nodes"], 3)
        self.assertEqual(graph["total_edges"], 1)
        self.assertIn('"A" -> "B" [label="x2"];', graph["dot"])
        self.assertIn('Bolt \\"M6\\"', graph["dot"])
        self.assertNotIn("GHOST", graph["dot"])

    def test_focus_limits_to_subtree(self) -> None:
        parts = [
            Part(id="A", child_usages=(Usage("u1", "B", 1),)),
            Part(id="B", child_usages=(Usage("u2", "C", 1),)),
            Part(id="C"),
        ]

        graph = build_usage_graph_dot(parts, max_nodes=2, focus="B")

        self.assertEqual(graph["shown_nodes"], 2)
        self.assertEqual(graph["shown_edges"], 1)
        self.assertNotIn('"A" ->', graph["dot"])

    def test_empty_graph(self) -> None:
        graph = build_usage_graph_dot([], max_nodes=5)
        self.assertEqual(graph["total_nodes"], 0)


class TestSeedDemoData(unittest.TestCase):
    def test_seed_builds_shared_bolt(self) -> None:
        service = FakePartService()
        backend = BOMTreeBackend(BOMTreeSettings(base_url=BASE_URL), session=service)

        operations = seed_demo_data(backend)

        self.assertTrue(all(result["ok"] for _, result in operations), operations)
        self.assertEqual(len(backend.forest.roots), 1)
        bolt_id = operations[2][1]["data"]["part"]["id"]
        quantities = sorted(node.quantity for node in find_occurrences(backend.forest.roots, bolt_id))
        self.assertEqual(quantities, [4, 8])


class TestTreeTab(unittest.TestCase):
    def setUp(self) -> None:
        self.service = FakePartService()
        self.service.seed("P1", "Bolt")
        self.service.seed("P2", "Bracket", usages=[("P1", 4)])
        self.backend = BOMTreeBackend(BOMTreeSettings(base_url=BASE_URL), session=self.service)
        self.assertTrue(self.backend.mutations.refresh()["ok"])

        st_patch = mock.patch.object(tree_tab, "st")
        self.st = st_patch.start()
        self.addCleanup(st_patch.stop)
        self.st.session_state = {}

        shown_patch = mock.patch.object(tree_tab, "show_service_result")
        self.shown = shown_patch.start()
        self.addCleanup(shown_patch.stop)

    def test_successful_edit_reruns_and_keeps_result(self) -> None:
        result = self.backend.mutations.update_child_usage_quantity("P2", "P1", 6)

        tree_tab._finish("Update quantity", result)

        self.st.rerun.assert_called_once_with()
        self.assertEqual(self.st.session_state["tree_last_result"], ("Update quantity", result))
        self.shown.assert_not_called()

    def test_failed_edit_is_shown_without_rerun(self) -> None:
        result = self.backend.mutations.update_child_usage_quantity("P2", "P1", 0)

        tree_tab._finish("Update quantity", result)

        self.st.rerun.assert_not_called()
        self.shown.assert_called_once_with("Update quantity", result)
        self.assertEqual(self.st.session_state, {})

    def test_render_shows_kept_result_and_stretches_graph(self) -> None:
        kept = ("Remove usage", {"ok": True, "data": {}, "errors": [], "warnings": []})
        self.st.session_state["tree_last_result"] = kept
        self.st.columns.return_value = (mock.MagicMock(), mock.MagicMock())
        self.st.radio.return_value = None
        self.st.slider.return_value = 25

        tree_tab.render_tree_tab(build_app_context(self.backend, reload=False))

        self.shown.assert_called_once_with(*kept)
        self.assertEqual(self.st.session_state, {})
        self.st.rerun.assert_not_called()
        self.assertEqual(self.st.graphviz_chart.call_args.kwargs, {"width": "stretch"})

    def test_context_warns_when_last_reload_failed(self) -> None:
        self.service.fail_next("GET", "/parts", timeout_error())
        self.assertTrue(self.backend.mutations.create_part({"title": "Spacer"})["ok"])

        ctx = build_app_context(self.backend, reload=False)

        self.assertIn("last loaded tree", ctx.refresh_result["warnings"][0])


if __name__ == "__main__":
    unittest.main()
