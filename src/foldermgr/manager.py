"""FileManager: browsing state, selection and bulk operations over an ItemStore."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Iterable, Optional, Sequence
from urllib.parse import urlparse

from foldermgr.config import FileManagerConfig
from foldermgr.errors import FolderMgrError, NotFoundError, TypeMismatchError, ValidationError
from foldermgr.models import (
    Breadcrumb,
    BulkResult,
    FolderColor,
    FolderNode,
    Item,
    ItemKind,
    OperationResult,
    Permission,
    PrincipalType,
    Role,
    UploadedFile,
)
from foldermgr.query import (
    ROOT_CRUMB_ID,
    SortKey,
    SortOrder,
    breadcrumb_path,
    build_folder_tree,
    folder_options,
    list_children,
)
from foldermgr.storage import ItemStorage
from foldermgr.store import ItemSnapshot, ItemStore
from foldermgr.util.ids import IdFactory, new_item_id
from foldermgr.util.names import clean_name
from foldermgr.util.time import Clock, from_epoch_ms, now_utc

logger = logging.getLogger(__name__)

_LINK_SCHEMES: tuple[str, ...] = ("http", "https")


class FileManager:
    """
    High-level surface for a presentation layer.

    Holds the current view (folder, category, search text, sort) and the
    selection, delegates every mutation to the ItemStore, derives views with
    foldermgr.query and saves to storage after each successful mutation.
    """

    def __init__(
        self,
        store: Optional[ItemStore] = None,
        *,
        storage: Optional[ItemStorage] = None,
        config: Optional[FileManagerConfig] = None,
    ) -> None:
        self._config = config or FileManagerConfig()
        self._store = (
            store if store is not None else ItemStore(copy_suffix=self._config.copy_suffix)
        )
        self._storage = storage
        self._selection: dict[str, None] = {}

        self.current_folder_id: Optional[str] = None
        self.current_category: Optional[str] = None
        self.search_text: str = ""
        self.sort_key: SortKey = self._config.default_sort_key
        self.sort_order: SortOrder = SortOrder.default_for(self.sort_key)

    @classmethod
    def open(
        cls,
        storage: ItemStorage,
        config: Optional[FileManagerConfig] = None,
        *,
        id_factory: IdFactory = new_item_id,
        clock: Clock = now_utc,
    ) -> FileManager:
        """Load items from storage and build a manager around them."""
        cfg = config or FileManagerConfig()
        store = ItemStore(
            storage.load(),
            id_factory=id_factory,
            clock=clock,
            copy_suffix=cfg.copy_suffix,
        )
        return cls(store, storage=storage, config=cfg)

    @property
    def store(self) -> ItemStore:
        return self._store

    @property
    def config(self) -> FileManagerConfig:
        return self._config

    def snapshot(self) -> ItemSnapshot:
        return self._store.snapshot()

    # ----------------------------
    # Browsing state
    # ----------------------------
    def open_folder(self, folder_id: Optional[str]) -> None:
        """Navigate into a folder (None = root). Clears the selection."""
        if folder_id is not None:
            item = self._store.get(folder_id)
            if not item.is_folder:
                raise TypeMismatchError(
                    f"Cannot open a file as a folder: {folder_id}",
                    details={"item_id": folder_id},
                )
        self.current_folder_id = folder_id
        self._selection.clear()

    def select_category(self, category: Optional[str]) -> None:
        """Switch category; navigation goes back to root."""
        self.current_category = category or None
        self.current_folder_id = None

    def set_search(self, text: Optional[str]) -> None:
        self.search_text = text or ""

    def toggle_sort(self, key: SortKey | str) -> None:
        """Same key flips the direction; a new key starts in its default direction."""
        try:
            new_key = SortKey(key)
        except ValueError as exc:
            raise ValidationError(f"Unknown sort key: {key!r}", cause=exc) from exc
        if new_key is self.sort_key:
            self.sort_order = self.sort_order.flipped()
        else:
            self.sort_key = new_key
            self.sort_order = SortOrder.default_for(new_key)

    # ----------------------------
    # Views
    # ----------------------------
    def visible_items(self) -> list[Item]:
        return list_children(
            self.snapshot(),
            self.current_folder_id,
            self.current_category,
            self.search_text,
            self.sort_key,
            self.sort_order,
        )

    def folder_tree(self, excluded: Iterable[str] = ()) -> list[FolderNode]:
        """Sidebar tree, filtered by the current category."""
        return build_folder_tree(self.snapshot(), None, self.current_category, excluded)

    def destination_options(self, moving_ids: Iterable[str] = ()) -> list[tuple[int, Item]]:
        """Folders a move/copy may target: everything outside the moving subtrees."""
        return folder_options(self.snapshot(), excluded=moving_ids)

    def breadcrumbs(self) -> list[Breadcrumb]:
        """
        Breadcrumbs for the current folder.

        If the current folder no longer exists, navigation resets to root.
        """
        try:
            return breadcrumb_path(
                self.snapshot(),
                self.current_folder_id,
                self.current_category,
                root_label=self._config.root_label,
                category_labels=self._config.category_labels,
            )
        except NotFoundError:
            logger.debug("Current folder %s vanished; back to root", self.current_folder_id)
            self.current_folder_id = None
            return breadcrumb_path(
                self.snapshot(),
                None,
                self.current_category,
                root_label=self._config.root_label,
                category_labels=self._config.category_labels,
            )

    def navigate_crumb(self, crumb_id: str) -> None:
        self.open_folder(None if crumb_id == ROOT_CRUMB_ID else crumb_id)

    # ----------------------------
    # Selection
    # ----------------------------
    @property
    def selected_ids(self) -> list[str]:
        return list(self._selection)

    def select(self, item_id: str, selected: bool = True) -> None:
        if selected:
            self._store.get(item_id)
            self._selection[item_id] = None
        else:
            self._selection.pop(item_id, None)

    def select_all(self) -> None:
        for item in self.visible_items():
            self._selection[item.id] = None

    def clear_selection(self) -> None:
        self._selection.clear()

    # ----------------------------
    # Single-item operations
    # ----------------------------
    def create_folder(
        self,
        name: Optional[str] = None,
        parent_id: Optional[str] = None,
        *,
        team_id: Optional[str] = None,
        deal_id: Optional[str] = None,
    ) -> Item:
        """Create a folder in `parent_id`, defaulting to the current folder and category."""
        item = self._store.create(
            name if name is not None else self._config.default_folder_name,
            ItemKind.FOLDER,
            parent_id=parent_id if parent_id is not None else self.current_folder_id,
            category=self.current_category,
            team_id=team_id,
            deal_id=deal_id,
        )
        self._after_mutation()
        return item

    def rename(self, item_id: str, new_name: str) -> Item:
        item = self._store.rename(item_id, new_name)
        self._after_mutation()
        return item

    def move(self, item_id: str, target_parent_id: Optional[str]) -> Item:
        item = self._store.set_parent(item_id, target_parent_id)
        self._after_mutation()
        return item

    def copy(self, item_id: str, target_parent_id: Optional[str]) -> Item:
        item = self._store.copy_subtree(item_id, target_parent_id)
        self._after_mutation()
        return item

    def delete(self, item_id: str) -> list[str]:
        removed = self._store.remove(item_id)
        self._after_mutation()
        return removed

    def set_color(self, folder_id: str, color: Optional[FolderColor | str]) -> Item:
        item = self._store.set_attributes(folder_id, color=color)
        self._after_mutation()
        return item

    def set_category(self, item_id: str, category: Optional[str]) -> Item:
        item = self._store.set_attributes(item_id, category=category)
        self._after_mutation()
        return item

    def grant_permission(self, item_id: str, permission: Permission) -> Item:
        item = self._store.grant_permission(item_id, permission)
        self._after_mutation()
        return item

    def revoke_permission(
        self,
        item_id: str,
        principal_id: str,
        principal_type: PrincipalType = PrincipalType.USER,
    ) -> Item:
        item = self._store.revoke_permission(item_id, principal_id, principal_type)
        self._after_mutation()
        return item

    # ----------------------------
    # Ingestion
    # ----------------------------
    def upload_files(self, files: Iterable[UploadedFile]) -> list[Item]:
        """Create one file item per upload in the current folder, in order."""
        created: list[Item] = []
        try:
            for upload in files:
                created.append(self._create_upload(upload, self.current_folder_id))
        finally:
            if created:
                self._after_mutation()
        return created

    def upload_folder(self, files: Sequence[UploadedFile]) -> list[Item]:
        """
        Recreate a folder upload below the current folder.

        Each upload's relative_path ('a/b/file.txt') names its folder chain.
        All folders are created first (each path once), then the files.

        Returns:
            Created items: folders first, then files.
        """
        folder_ids: dict[str, str] = {}
        created: list[Item] = []

        try:
            for upload in files:
                parent_id = self.current_folder_id
                path = ""
                for part in _path_parts(upload)[:-1]:
                    path = f"{path}/{part}" if path else part
                    if path not in folder_ids:
                        folder = self._store.create(
                            part,
                            ItemKind.FOLDER,
                            parent_id=parent_id,
                            category=self.current_category,
                        )
                        folder_ids[path] = folder.id
                        created.append(folder)
                    parent_id = folder_ids[path]

            for upload in files:
                parts = _path_parts(upload)
                folder_path = "/".join(parts[:-1])
                parent_id = folder_ids.get(folder_path, self.current_folder_id)
                created.append(self._create_upload(upload, parent_id, name=parts[-1]))
        finally:
            if created:
                self._after_mutation()
        return created

    def create_link(self, url: str, name: Optional[str] = None) -> Item:
        """
        Create a link item in the current folder.

        Raises:
            ValidationError: url is not an absolute http(s) URL.
        """
        parsed = urlparse(url.strip()) if isinstance(url, str) else None
        if parsed is None or parsed.scheme not in _LINK_SCHEMES or not parsed.hostname:
            raise ValidationError("Invalid URL", details={"url": url})

        link_name = clean_name(name) or parsed.hostname or self._config.default_link_name
        item = self._store.create(
            link_name,
            ItemKind.FILE,
            parent_id=self.current_folder_id,
            category=self.current_category,
            file_type="link",
            url=url.strip(),
        )
        self._after_mutation()
        return item

    # ----------------------------
    # Bulk operations
    # ----------------------------
    def bulk_move(
        self,
        target_parent_id: Optional[str],
        item_ids: Optional[Iterable[str]] = None,
    ) -> BulkResult:
        def _move(item_id: str) -> None:
            self._store.set_parent(item_id, target_parent_id)

        return self._run_bulk("move", self._targets(item_ids), _move, deselect=True)

    def bulk_copy(
        self,
        target_parent_id: Optional[str],
        item_ids: Optional[Iterable[str]] = None,
    ) -> BulkResult:
        def _copy(item_id: str) -> str:
            return self._store.copy_subtree(item_id, target_parent_id).id

        return self._run_bulk("copy", self._targets(item_ids), _copy, deselect=False)

    def bulk_delete(self, item_ids: Optional[Iterable[str]] = None) -> BulkResult:
        """
        Delete each item (with its subtree).

        Items already removed by an ancestor's delete in the same batch are
        reported as skipped; any other unknown id fails the batch.
        """
        removed: set[str] = set()

        def _delete(item_id: str) -> None:
            removed.update(self._store.remove(item_id))

        return self._run_bulk(
            "delete",
            self._targets(item_ids),
            _delete,
            deselect=True,
            skip=lambda item_id: item_id in removed,
        )

    def bulk_share(
        self,
        users: Iterable[str] = (),
        teams: Iterable[str] = (),
        role: Role = Role.VIEWER,
        item_ids: Optional[Iterable[str]] = None,
    ) -> BulkResult:
        """Mark items shared and grant `role` to the given users and teams."""
        try:
            share_role = Role(role)
        except ValueError as exc:
            raise ValidationError(f"Unknown role: {role!r}", cause=exc) from exc
        if share_role is Role.OWNER:
            raise ValidationError("Sharing cannot grant ownership")

        grants: list[Permission] = []
        for principal_type, principals in (
            (PrincipalType.USER, users),
            (PrincipalType.TEAM, teams),
        ):
            for principal_id in principals:
                if clean_name(principal_id) is None:
                    raise ValidationError("Principal ids must be non-empty strings")
                grants.append(Permission(principal_id, principal_type, share_role))

        def _share(item_id: str) -> None:
            self._store.get(item_id)
            for grant in grants:
                self._store.grant_permission(item_id, grant)
            self._store.set_attributes(item_id, is_shared=True)

        return self._run_bulk("share", self._targets(item_ids), _share, deselect=True)

    # ----------------------------
    # Internals
    # ----------------------------
    def _targets(self, item_ids: Optional[Iterable[str]]) -> list[str]:
        ids = self.selected_ids if item_ids is None else list(item_ids)
        return list(dict.fromkeys(ids))

    def _run_bulk(
        self,
        action: str,
        item_ids: list[str],
        op: Callable[[str], Optional[str]],
        *,
        deselect: bool,
        skip: Optional[Callable[[str], bool]] = None,
    ) -> BulkResult:
        """
        Run `op` per item in order, stopping at the first failure.

        Policy:
            - FolderMgrError stops the batch; later items are 'skipped'.
            - Any other exception propagates.
            - Storage is saved once if at least one item succeeded.
        """
        results: list[OperationResult] = []
        stopped_item_id: Optional[str] = None

        for seq, item_id in enumerate(item_ids):
            if stopped_item_id is not None or (skip is not None and skip(item_id)):
                results.append(_skipped_result(item_id, seq, action))
                continue
            try:
                result_item_id = op(item_id)
            except FolderMgrError as exc:
                logger.warning("Bulk %s stopped at %s: %s", action, item_id, exc)
                results.append(_failed_result(item_id, seq, action, exc))
                stopped_item_id = item_id
                continue
            results.append(_success_result(item_id, seq, action, result_item_id))

        succeeded = [r.item_id for r in results if r.status == "success"]
        if deselect:
            for item_id in succeeded:
                self._selection.pop(item_id, None)
        if succeeded:
            self._after_mutation()

        return BulkResult(
            action=action,
            status="failed" if stopped_item_id is not None else "success",
            stopped_item_id=stopped_item_id,
            results=results,
            summary=_summarize_results(results),
        )

    def _create_upload(
        self,
        upload: UploadedFile,
        parent_id: Optional[str],
        name: Optional[str] = None,
    ) -> Item:
        return self._store.create(
            name if name is not None else upload.name,
            ItemKind.FILE,
            parent_id=parent_id,
            size=upload.size,
            modified_at=_upload_modified_at(upload),
            category=self.current_category,
            file_type=upload.file_type or self._config.default_file_type,
        )

    def _after_mutation(self) -> None:
        for item_id in list(self._selection):
            if not self._store.has(item_id):
                del self._selection[item_id]
        if self._storage is not None:
            self._storage.save(self._store.items())


def _upload_modified_at(upload: UploadedFile) -> Optional[datetime]:
    if upload.modified_at is not None:
        return upload.modified_at
    if upload.last_modified_ms is not None:
        try:
            return from_epoch_ms(upload.last_modified_ms)
        except (TypeError, ValueError, OverflowError, OSError) as e:
            raise ValidationError(
                "Invalid upload timestamp",
                details={"name": upload.name, "last_modified_ms": upload.last_modified_ms},
                cause=e,
            ) from e
    return None


def _path_parts(upload: UploadedFile) -> list[str]:
    path = upload.relative_path or upload.name
    parts = [p for p in path.split("/") if p]
    return parts or [upload.name]


def _success_result(
    item_id: str,
    seq: int,
    action: str,
    result_item_id: Optional[str],
) -> OperationResult:
    return OperationResult(
        item_id=item_id,
        seq=seq,
        action=action,
        status="success",
        result_item_id=result_item_id,
    )


def _skipped_result(item_id: str, seq: int, action: str) -> OperationResult:
    return OperationResult(item_id=item_id, seq=seq, action=action, status="skipped")


def _failed_result(item_id: str, seq: int, action: str, exc: FolderMgrError) -> OperationResult:
    return OperationResult(
        item_id=item_id,
        seq=seq,
        action=action,
        status="failed",
        error_type=exc.__class__.__name__,
        error_message=str(exc),
        error_details=getattr(exc, "details", None),
    )


def _summarize_results(results: list[OperationResult]) -> dict[str, int]:
    summary: dict[str, int] = {"success": 0, "failed": 0, "skipped": 0}
    for r in results:
        summary[r.status] = summary.get(r.status, 0) + 1
    return summary
