from __future__ import annotations

import streamlit as st

from bom_tree.services.browse import search_parts
from streamlit_ui.context import AppContext
from streamlit_ui.helpers import part_options, part_rows, show_service_result

STAGES = ["DESIGN", "PROTOTYPE", "PRODUCTION", "OBSOLETE"]
STATUSES = ["DRAFT", "IN_WORK", "IN_REVIEW", "RELEASED", "ACTIVE"]


def _part_form_fields(prefix: str, defaults: dict | None = None) -> dict:
    defaults = defaults or {}
    stage_default = defaults.get("stage") if defaults.get("stage") in STAGES else STAGES[0]
    status_default = defaults.get("status") if defaults.get("status") in STATUSES else STATUSES[0]
    return {
        "title": st.text_input("Title", value=defaults.get("title") or "", key=f"{prefix}_title"),
        "description": st.text_area(
            "Description",
            value=defaults.get("description") or "",
            height=80,
            key=f"{prefix}_description",
        ),
        "creator": st.text_input("Creator", value=defaults.get("creator") or "", key=f"{prefix}_creator"),
        "stage": st.selectbox("Stage", STAGES, index=STAGES.index(stage_default), key=f"{prefix}_stage"),
        "status": st.selectbox("Status", STATUSES, index=STATUSES.index(status_default), key=f"{prefix}_status"),
        "level": st.text_input("Level", value=defaults.get("level") or "", key=f"{prefix}_level"),
    }


def render_parts_tab(ctx: AppContext) -> None:
    mutations = ctx.backend.mutations
    options = part_options(ctx.backend.parts)

    st.subheader("Create Part")
    parent_choices = [""] + list(options)
    with st.form("part_create_form"):
        data = _part_form_fields("create")
        parent_id = st.selectbox(
            "Use under parent (optional)",
            parent_choices,
            format_func=lambda key: options.get(key, "(top level)"),
        )
        quantity = st.number_input("Quantity under parent", min_value=1, value=1, step=1)
        submit_create = st.form_submit_button("Create Part")

    if submit_create:
        if parent_id:
            result = mutations.create_child_part(parent_id, data, quantity=int(quantity))
        else:
            result = mutations.create_part(data)
        show_service_result("Create part", result, show_data=True)

    st.divider()
    st.subheader("Edit Part")
    if not options:
        st.caption("No parts to edit.")
    else:
        default_id = ctx.selected.part.id if ctx.selected is not None else next(iter(options))
        edit_id = st.selectbox(
            "Part",
            list(options),
            index=list(options).index(default_id),
            format_func=lambda key: options[key],
            key="part_edit_select",
        )
        existing = mutations.get_part(edit_id)
        with st.form("part_update_form"):
            data = _part_form_fields(f"edit_{edit_id}", vars(existing) if existing else None)
            submit_update = st.form_submit_button("Save Changes")
        if submit_update:
            show_service_result("Update part", mutations.update_part(edit_id, data), show_data=True)

        with st.form("part_delete_form"):
            st.caption("Deleting a part also removes every usage that points to it.")
            confirm = st.checkbox(f"I understand, delete {edit_id}")
            submit_delete = st.form_submit_button("Delete Part")
        if submit_delete:
            if not confirm:
                st.warning("Tick the confirmation box first.")
            else:
                result = mutations.delete_part(edit_id)
                show_service_result("Delete part", result)
                if result.get("ok"):
                    ctx.backend.selection.clear()

    st.divider()
    st.subheader("Search Parts")
    part_query = st.text_input("Search by id, title, description or creator", key="part_search_query")
    st.dataframe(
        part_rows(search_parts(ctx.backend.parts, part_query)),
        width="stretch",
        hide_index=True,
    )
