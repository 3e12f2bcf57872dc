from __future__ import annotations

import streamlit as st

from bom_tree.serialization import where_used_to_record
from bom_tree.services.browse import child_parts, where_used
from bom_tree.services.cycle_guard import find_cycle_path
from streamlit_ui.context import AppContext
from streamlit_ui.helpers import part_options, show_service_result


def render_usages_tab(ctx: AppContext) -> None:
    mutations = ctx.backend.mutations
    options = part_options(ctx.backend.parts)
    keys = list(options)
    if not keys:
        st.info("Create parts before linking them.")
        return

    default_parent = ctx.selected.part.id if ctx.selected is not None else keys[0]

    st.subheader("Add Child Usage")
    with st.form("usage_add_form"):
        parent_id = st.selectbox(
            "Parent part",
            keys,
            index=keys.index(default_parent),
            format_func=lambda key: options[key],
        )
        child_id = st.selectbox("Child part", keys, format_func=lambda key: options[key])
        quantity = st.number_input("Quantity", min_value=1, value=1, step=1)
        submit_add = st.form_submit_button("Add Usage")

    if submit_add:
        result = mutations.add_child_usage(parent_id, child_id, int(quantity))
        show_service_result("Add usage", result)

    st.divider()
    st.subheader("Remove Child Usage")
    with st.form("usage_remove_form"):
        remove_parent = st.selectbox(
            "Parent part",
            keys,
            index=keys.index(default_parent),
            format_func=lambda key: options[key],
            key="usage_remove_parent",
        )
        remove_child = st.text_input("Child part id")
        st.caption("Every usage of the child under this parent is removed.")
        submit_remove = st.form_submit_button("Remove Usage")

    if submit_remove:
        show_service_result("Remove usage", mutations.remove_child_usage(remove_parent, remove_child))

    st.divider()
    st.subheader("Children and Where-Used Lookup")
    lookup_id = st.selectbox(
        "Part",
        keys,
        index=keys.index(default_parent),
        format_func=lambda key: options[key],
        key="usage_lookup_part",
    )
    col_a, col_b = st.columns(2)
    with col_a:
        st.markdown("**Children**")
        lookup_part = mutations.get_part(lookup_id)
        quantities = {usage.child_part_id: usage.quantity for usage in lookup_part.child_usages} if lookup_part else {}
        st.dataframe(
            [
                {"child_id": child.id, "title": child.title, "quantity": quantities.get(child.id)}
                for child in child_parts(ctx.backend.parts, lookup_id)
            ],
            width="stretch",
            hide_index=True,
        )
    with col_b:
        st.markdown("**Used by**")
        st.dataframe(
            [where_used_to_record(entry) for entry in where_used(ctx.backend.parts, lookup_id)],
            width="stretch",
            hide_index=True,
        )

    blocked = [
        key for key in keys if key != lookup_id and find_cycle_path(ctx.backend.parts, lookup_id, key) is not None
    ]
    if blocked:
        st.caption(f"Cannot be added under {lookup_id} (would form a cycle): " + ", ".join(blocked))
