from __future__ import annotations

import streamlit as st


CSS_THEME = """
<style>
@import url('https://fonts.googleapis.com/css2?family=Source+Sans+3:wght@400;600&family=Fira+Code:wght@500&display=swap');

:root {
  --tree-surface: #fbfaf7;
  --tree-ink: #1f2937;
  --tree-muted: #6b7280;
  --tree-rule: #d6d3ce;
  --tree-mark: #4338ca;
  --tree-mark-soft: #e8e7fb;
}

html, body {
  font-family: "Source Sans 3", "Helvetica Neue", sans-serif;
  color: var(--tree-ink);
}

section.main > div.block-container {
  padding-top: 1.25rem;
  max-width: 1280px;
}

section[data-testid="stSidebar"] {
  background: #1e1b4b;
}

section[data-testid="stSidebar"] label,
section[data-testid="stSidebar"] p,
section[data-testid="stSidebar"] h1,
section[data-testid="stSidebar"] h2 {
  color: #eef2ff !important;
}

/* Occurrence list: fixed width so depth indentation lines up. */
div[role="radiogroup"] label p {
  font-family: "Fira Code", monospace;
  white-space: pre;
  font-size: 0.85rem;
}

div[role="radiogroup"] label:has(input:checked) {
  background: var(--tree-mark-soft);
  box-shadow: inset 3px 0 0 var(--tree-mark);
  border-radius: 0.3rem;
}

div[data-testid="stMetric"] {
  background: var(--tree-surface);
  border: 1px solid var(--tree-rule);
  border-top: 3px solid var(--tree-mark);
  border-radius: 0.5rem;
  padding: 0.4rem 0.75rem;
}

div[data-testid="stMetric"] label {
  color: var(--tree-muted);
}
</style>
"""


def configure_page() -> None:
    st.set_page_config(page_title="BOM Tree", layout="wide")
    st.markdown(CSS_THEME, unsafe_allow_html=True)
