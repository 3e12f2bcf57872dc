from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import streamlit as st

from bom_tree import BOMTreeBackend, BOMTreeSettings
from bom_tree.models import HierarchyNode
from bom_tree.services.browse import filter_forest

BACKEND_KEY = "bom_tree_backend"


@dataclass
class AppContext:
    backend: BOMTreeBackend
    refresh_result: dict[str, Any]
    roots: list[HierarchyNode]
    visible_roots: list[HierarchyNode]
    selected: HierarchyNode | None
    search: str
    status_filter: str | None
    stage_filter: str | None

    @property
    def filtered(self) -> bool:
        return bool(self.search or self.status_filter or self.stage_filter)


def get_backend(base_url: str) -> BOMTreeBackend:
    """One backend per browser session, rebuilt when the service URL changes."""
    backend: BOMTreeBackend | None = st.session_state.get(BACKEND_KEY)
    if backend is None or backend.settings.base_url != base_url.rstrip("/"):
        backend = BOMTreeBackend(BOMTreeSettings(base_url=base_url))
        st.session_state[BACKEND_KEY] = backend
    return backend


def build_app_context(
    backend: BOMTreeBackend,
    *,
    reload: bool,
    search: str = "",
    status_filter: str | None = None,
    stage_filter: str | None = None,
) -> AppContext:
    if reload or not backend.mutations.loaded:
        refresh_result = backend.mutations.refresh()
    else:
        warnings = backend.mutations.forest_warnings()
        if backend.mutations.stale:
            warnings.insert(0, "Showing the last loaded tree; reloading after the last change failed")
        refresh_result = {"ok": True, "data": {}, "errors": [], "warnings": warnings}

    roots = backend.forest.roots
    visible_roots = filter_forest(roots, search=search, status=status_filter, stage=stage_filter)

    return AppContext(
        backend=backend,
        refresh_result=refresh_result,
        roots=roots,
        visible_roots=visible_roots,
        selected=backend.selection.resolve(roots),
        search=search,
        status_filter=status_filter,
        stage_filter=stage_filter,
    )
