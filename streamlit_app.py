from __future__ import annotations

import streamlit as st

from bom_tree.config import BOMTreeSettings
from bom_tree.logging_utils import configure_logging
from bom_tree.services.browse import count_occurrences
from streamlit_ui.context import build_app_context, get_backend
from streamlit_ui.helpers import show_service_result
from streamlit_ui.seed import seed_demo_data
from streamlit_ui.tabs import render_parts_tab, render_tree_tab, render_usages_tab
from streamlit_ui.theme import configure_page

configure_page()

defaults = BOMTreeSettings()
configure_logging(defaults.log_level)

st.title("BOM Tree")
st.caption("Browse and edit the part-usage structure held by the Part service.")

base_url = st.sidebar.text_input(
    "Part service URL",
    value=st.session_state.get("base_url", defaults.base_url),
)
st.session_state["base_url"] = base_url
backend = get_backend(base_url)
st.sidebar.caption(f"Requests time out after {backend.settings.timeout_s:g}s.")
st.sidebar.code("streamlit run streamlit_app.py", language="bash")

reload_requested = st.sidebar.button("Reload Tree", key="reload_tree_btn")
if st.sidebar.button("Seed Sample Data", key="seed_demo_data_btn"):
    for action_name, action_result in seed_demo_data(backend):
        show_service_result(action_name, action_result)

st.sidebar.divider()
search = st.sidebar.text_input("Filter tree", key="tree_filter_search")
status_filter = st.sidebar.selectbox(
    "Status",
    ["All", "DRAFT", "IN_WORK", "IN_REVIEW", "RELEASED", "ACTIVE"],
    key="tree_filter_status",
)
stage_filter = st.sidebar.selectbox(
    "Stage",
    ["All", "DESIGN", "PROTOTYPE", "PRODUCTION", "OBSOLETE"],
    key="tree_filter_stage",
)

ctx = build_app_context(
    backend,
    reload=reload_requested,
    search=search,
    status_filter=None if status_filter == "All" else status_filter,
    stage_filter=None if stage_filter == "All" else stage_filter,
)

if not ctx.refresh_result.get("ok"):
    show_service_result("Load parts", ctx.refresh_result)
for warning in ctx.refresh_result.get("warnings", []):
    st.warning(warning)

metric_col1, metric_col2, metric_col3, metric_col4 = st.columns(4)
metric_col1.metric("Parts", len(backend.parts))
metric_col2.metric("Top-level assemblies", len(ctx.roots))
metric_col3.metric("Usages", sum(len(part.child_usages) for part in backend.parts))
metric_col4.metric("Tree occurrences", count_occurrences(ctx.roots))

tab_tree, tab_parts, tab_usages = st.tabs(["Tree", "Parts", "Usages"])

with tab_tree:
    render_tree_tab(ctx)

with tab_parts:
    render_parts_tab(ctx)

with tab_usages:
    render_usages_tab(ctx)
