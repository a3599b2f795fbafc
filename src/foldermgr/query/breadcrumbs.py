"""Breadcrumb derivation."""

from __future__ import annotations

from typing import Mapping, Optional

from foldermgr.errors import NotFoundError
from foldermgr.models import Breadcrumb
from foldermgr.store import ItemSnapshot
from foldermgr.util.categories import CATEGORY_LABELS, ROOT_LABEL, category_label

ROOT_CRUMB_ID: str = "root"


def breadcrumb_path(
    snapshot: ItemSnapshot,
    folder_id: Optional[str] = None,
    category: Optional[str] = None,
    *,
    root_label: str = ROOT_LABEL,
    category_labels: Mapping[str, str] = CATEGORY_LABELS,
) -> list[Breadcrumb]:
    """
    Path from the synthetic root down to `folder_id`, root first.

    The first segment has id 'root' and is labelled after the active
    category, or `root_label` when there is none.

    Raises:
        NotFoundError: folder_id is given but is not an existing folder.
    """
    crumbs = [
        Breadcrumb(id=ROOT_CRUMB_ID, name=category_label(category, category_labels, root_label))
    ]
    if folder_id is None:
        return crumbs

    folder = snapshot.find(folder_id)
    if folder is None or not folder.is_folder:
        raise NotFoundError(
            f"Folder does not exist: {folder_id}",
            details={"item_id": folder_id},
        )

    chain = [folder_id, *snapshot.iter_ancestor_ids(folder_id)]
    for cid in reversed(chain):
        item = snapshot.find(cid)
        if item is not None:
            crumbs.append(Breadcrumb(id=item.id, name=item.name))
    return crumbs
