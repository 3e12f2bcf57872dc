from __future__ import annotations

import streamlit as st

from bom_tree.models import HierarchyNode
from bom_tree.serialization import where_used_to_record
from bom_tree.services.browse import explode_quantities, flatten_hierarchy, where_used
from streamlit_ui.context import AppContext
from streamlit_ui.graph import build_usage_graph_dot
from streamlit_ui.helpers import show_service_result

_LAST_RESULT_KEY = "tree_last_result"


def _occurrence_label(row: dict) -> str:
    marker = " [cycle?]" if row["cycle_detected"] else ""
    return f"{row['title']} ({row['part_id']}) x{row['quantity']}{marker}"


def _render_details(ctx: AppContext, node: HierarchyNode) -> None:
    part = node.part
    st.markdown(f"**{part.title or part.id}**")
    st.caption(f"Occurrence `{node.key}`")

    col_a, col_b, col_c = st.columns(3)
    col_a.metric("Quantity", node.quantity)
    col_b.metric("Depth", node.depth)
    col_c.metric("Direct children", len(node.children))

    st.json(
        {
            "id": part.id,
            "description": part.description,
            "creator": part.creator,
            "stage": part.stage,
            "status": part.status,
            "level": part.level,
            "created": part.create_time,
            "updated": part.update_time,
        }
    )

    st.markdown("**Where used**")
    parents = [where_used_to_record(entry) for entry in where_used(ctx.backend.parts, part.id)]
    if parents:
        st.dataframe(parents, width="stretch", hide_index=True)
    else:
        st.caption("Top-level part.")

    totals = explode_quantities(node)
    if totals:
        st.markdown("**Exploded quantities per unit**")
        st.dataframe(
            [{"part_id": part_id, "total_quantity": total} for part_id, total in totals.items()],
            width="stretch",
            hide_index=True,
        )

    if node.usage_id is not None and node.parent_id is not None:
        st.divider()
        with st.form("occurrence_quantity_form"):
            quantity = st.number_input("Quantity under parent", min_value=1, value=node.quantity, step=1)
            save = st.form_submit_button("Update quantity")
        if save:
            result = ctx.backend.mutations.update_child_usage_quantity(node.parent_id, part.id, int(quantity))
            _finish("Update quantity", result)

        if st.button(f"Remove '{part.id}' from '{node.parent_id}'", key="remove_occurrence_btn"):
            result = ctx.backend.mutations.remove_child_usage(node.parent_id, part.id)
            if result.get("ok"):
                ctx.backend.selection.clear()
            _finish("Remove usage", result)


def _finish(title: str, result: dict) -> None:
    """Show a failure in place; rerun on success so the tree reflects the change."""
    if not result.get("ok"):
        show_service_result(title, result)
        return
    st.session_state[_LAST_RESULT_KEY] = (title, result)
    st.rerun()


def render_tree_tab(ctx: AppContext) -> None:
    last = st.session_state.pop(_LAST_RESULT_KEY, None)
    if last is not None:
        show_service_result(*last)

    rows =flatten_hierarchy(ctx.visible_roots)
    if not rows:
        st.info("No parts match the current filters." if ctx.filtered else "No parts yet.")
        return

    tree_col, detail_col = st.columns([3, 2])
    with tree_col:
        st.subheader("Structure")
        labels = {row["key"]: _occurrence_label(row) for row in rows}
        keys = list(labels)
        current = ctx.selected.key if ctx.selected is not None else None
        chosen = st.radio(
            "Occurrences",
            keys,
            index=keys.index(current) if current in labels else None,
            format_func=lambda key: labels[key],
            label_visibility="collapsed",
            key="tree_selection_radio",
        )
        if chosen != current:
            ctx.backend.selection.select(chosen)
            st.rerun()

        with st.expander("Table view"):
            st.dataframe(rows, width="stretch", hide_index=True)

    with detail_col:
        st.subheader("Details")
        if ctx.selected is None:
            st.caption("Select an occurrence to see its details.")
        else:
            _render_details(ctx, ctx.selected)

    st.divider()
    st.subheader("Usage Graph")
    max_graph_nodes = st.slider("Max displayed parts", min_value=5, max_value=80, value=25, step=1)
    focus = ctx.selected.part.id if ctx.selected is not None else None
    graph_data = build_usage_graph_dot(ctx.backend.parts, max_nodes=max_graph_nodes, focus=focus)
    st.graphviz_chart(graph_data["dot"], width="stretch")
    st.caption(
        f"Showing {graph_data['shown_nodes']} of {graph_data['total_nodes']} parts and "
        f"{graph_data['shown_edges']} of {graph_data['total_edges']} usages."
    )
