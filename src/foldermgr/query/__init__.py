"""Tree query engine: pure derivations over an ItemSnapshot (never mutates)."""

from __future__ import annotations

from .ancestry import (
    ancestor_ids,
    depth,
    descendant_ids,
    is_descendant,
    path_names,
    subtree_ids,
)
from .breadcrumbs import ROOT_CRUMB_ID, breadcrumb_path
from .listing import filter_items, list_children, matches, search_items
from .sorting import SortKey, SortOrder, sort_items, tie_break_key
from .tree import build_folder_tree, folder_options

__all__ = [
    "build_folder_tree",
    "folder_options",
    "list_children",
    "search_items",
    "filter_items",
    "matches",
    "breadcrumb_path",
    "ROOT_CRUMB_ID",
    "is_descendant",
    "ancestor_ids",
    "descendant_ids",
    "subtree_ids",
    "depth",
    "path_names",
    "SortKey",
    "SortOrder",
    "sort_items",
    "tie_break_key",
]
