from streamlit_ui.tabs.parts import render_parts_tab
from streamlit_ui.tabs.tree import render_tree_tab
from streamlit_ui.tabs.usages import render_usages_tab

__all__ = [
    "render_parts_tab",
    "render_tree_tab",
    "render_usages_tab",
]
