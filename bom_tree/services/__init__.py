from bom_tree.services.browse import (
    child_parts,
    explode_quantities,
    filter_forest,
    flatten_hierarchy,
    search_parts,
    where_used,
)
from bom_tree.services.cycle_guard import can_add_usage, ensure_can_add_usage, find_cycle_path
from bom_tree.services.hierarchy import assemble_forest, build_hierarchy, find_node, iter_nodes
from bom_tree.services.mutations import MutationCoordinator

__all__ = [
    "MutationCoordinator",
    "assemble_forest",
    "build_hierarchy",
    "can_add_usage",
    "child_parts",
    "ensure_can_add_usage",
    "explode_quantities",
    "filter_forest",
    "find_cycle_path",
    "find_node",
    "flatten_hierarchy",
    "iter_nodes",
    "search_parts",
    "where_used",
]
