import unittest
from datetime import datetime, timezone

from foldermgr.errors import (
    CycleError,
    NotFoundError,
    TypeMismatchError,
    ValidationError,
)
from foldermgr.models import (
    FolderColor,
    Item,
    ItemKind,
    Permission,
    PrincipalType,
    Role,
)
from foldermgr.store import ItemStore
from foldermgr.util.ids import sequential_ids


class _TickClock:
    """Clock advancing one minute per call."""

    def __init__(self) -> None:
        self.calls = 0

    def __call__(self) -> datetime:
        self.calls += 1
        return datetime(2025, 1, 1, 0, self.calls, tzinfo=timezone.utc)


class TestItemStore(unittest.TestCase):
    def _make_store(self) -> ItemStore:
        """
        Layout:
            A/
              B/
                C/
                  deep.txt
              report.pdf
            notes.txt
        """
        items = [
            Item(id="A", name="A", kind=ItemKind.FOLDER),
            Item(id="B", name="B", kind=ItemKind.FOLDER, parent_id="A"),
            Item(id="C", name="C", kind=ItemKind.FOLDER, parent_id="B"),
            Item(id="deep", name="deep.txt", kind=ItemKind.FILE, parent_id="C", size=5),
            Item(id="pdf", name="report.pdf", kind=ItemKind.FILE, parent_id="A", size=10),
            Item(id="notes", name="notes.txt", kind=ItemKind.FILE, size=3),
        ]
        return ItemStore(items, id_factory=sequential_ids("n"), clock=_TickClock())

    # ----------------------------
    # Loading
    # ----------------------------
    def test_load_rejects_duplicate_ids(self) -> None:
        items = [
            Item(id="X", name="x", kind=ItemKind.FOLDER),
            Item(id="X", name="y", kind=ItemKind.FOLDER),
        ]
        with self.assertRaises(ValidationError):
            ItemStore(items)

    def test_load_rejects_file_parent(self) -> None:
        items = [
            Item(id="f", name="f.txt", kind=ItemKind.FILE),
            Item(id="g", name="g.txt", kind=ItemKind.FILE, parent_id="f"),
        ]
        with self.assertRaises(TypeMismatchError):
            ItemStore(items)

    def test_load_rejects_dangling_parent(self) -> None:
        with self.assertRaises(NotFoundError):
            ItemStore([Item(id="g", name="g.txt", kind=ItemKind.FILE, parent_id="nope")])

    def test_load_rejects_cycle(self) -> None:
        items = [
            Item(id="X", name="x", kind=ItemKind.FOLDER, parent_id="Y"),
            Item(id="Y", name="y", kind=ItemKind.FOLDER, parent_id="X"),
        ]
        with self.assertRaises(CycleError):
            ItemStore(items)

    def test_load_rejects_blank_name(self) -> None:
        with self.assertRaises(ValidationError):
            ItemStore([Item(id="X", name="  ", kind=ItemKind.FOLDER)])

    def test_load_rejects_naive_timestamp(self) -> None:
        aware = datetime(2025, 1, 1, tzinfo=timezone.utc)
        with self.assertRaises(ValidationError):
            ItemStore(
                [
                    Item(id="a", name="a.txt", kind=ItemKind.FILE, modified_at=datetime(2025, 1, 1)),
                    Item(id="b", name="b.txt", kind=ItemKind.FILE, modified_at=aware),
                ]
            )
        with self.assertRaises(ValidationError):
            ItemStore([Item(id="a", name="a.txt", kind=ItemKind.FILE, created_at=datetime(2025, 1, 1))])

    def test_load_rejects_bad_flag_and_duplicate_grants(self) -> None:
        with self.assertRaises(ValidationError):
            ItemStore([Item(id="a", name="a.txt", kind=ItemKind.FILE, is_shared="yes")])  # type: ignore[arg-type]
        grant = Permission("u1", PrincipalType.USER, Role.VIEWER)
        with self.assertRaises(ValidationError):
            ItemStore([Item(id="a", name="a.txt", kind=ItemKind.FILE, permissions=(grant, grant))])

    # ----------------------------
    # create
    # ----------------------------
    def test_create_assigns_fresh_id_and_timestamps(self) -> None:
        store = self._make_store()
        item = store.create("  New Folder ", ItemKind.FOLDER, parent_id="A")
        self.assertEqual(item.id, "n1")
        self.assertEqual(item.name, "New Folder")
        self.assertEqual(item.parent_id, "A")
        self.assertEqual(item.size, 0)
        self.assertIsNotNone(item.created_at)
        self.assertEqual(item.created_at, item.modified_at)
        self.assertIs(store.get("n1"), item)
        self.assertEqual(store.items()[-1], item)

    def test_create_accepts_kind_string_and_attrs(self) -> None:
        store = self._make_store()
        item = store.create(
            "clip.mp4",
            "file",
            size=42,
            category="videos",
            team_id="t1",
            file_type="video/mp4",
        )
        self.assertIs(item.kind, ItemKind.FILE)
        self.assertIsNone(item.parent_id)
        self.assertEqual(item.size, 42)
        self.assertEqual(item.category, "videos")
        self.assertEqual(item.team_id, "t1")

    def test_create_keeps_supplied_modified_at(self) -> None:
        store = self._make_store()
        stamp = datetime(2020, 6, 1, tzinfo=timezone.utc)
        item = store.create("old.txt", ItemKind.FILE, modified_at=stamp)
        self.assertEqual(item.modified_at, stamp)
        self.assertNotEqual(item.created_at, stamp)

    def test_create_validation_failures_leave_store_unchanged(self) -> None:
        store = self._make_store()
        before = store.items()

        with self.assertRaises(ValidationError):
            store.create("   ", ItemKind.FOLDER)
        with self.assertRaises(NotFoundError):
            store.create("x", ItemKind.FOLDER, parent_id="nope")
        with self.assertRaises(TypeMismatchError):
            store.create("x", ItemKind.FILE, parent_id="pdf")
        with self.assertRaises(ValidationError):
            store.create("x", ItemKind.FILE, size=-1)
        with self.assertRaises(ValidationError):
            store.create("x", ItemKind.FOLDER, size=10)
        with self.assertRaises(ValidationError):
            store.create("x", "symlink")
        with self.assertRaises(ValidationError):
            store.create("x", ItemKind.FILE, bogus=True)
        with self.assertRaises(TypeMismatchError):
            store.create("x", ItemKind.FILE, color="red")
        with self.assertRaises(ValidationError):
            store.create("x", ItemKind.FOLDER, color="pink")
        with self.assertRaises(ValidationError):
            store.create("x", ItemKind.FILE, modified_at=datetime(2020, 6, 1))

        self.assertEqual(store.items(), before)

    def test_create_rejects_reused_id(self) -> None:
        store = ItemStore(
            [Item(id="n1", name="x", kind=ItemKind.FOLDER)],
            id_factory=sequential_ids("n"),
        )
        with self.assertRaises(ValidationError):
            store.create("y", ItemKind.FOLDER)
        self.assertEqual(len(store), 1)

    def test_ids_not_reused_after_delete(self) -> None:
        ids = iter(["z1", "z1"])
        store = ItemStore(id_factory=lambda: next(ids))
        store.create("x", ItemKind.FOLDER)
        store.remove("z1")
        with self.assertRaises(ValidationError):
            store.create("y", ItemKind.FOLDER)

    def test_sequential_creates_keep_call_order(self) -> None:
        store = ItemStore(id_factory=sequential_ids("u"))
        for i in range(5):
            store.create(f"file{i}.txt", ItemKind.FILE)
        self.assertEqual([i.name for i in store.items()], [f"file{i}.txt" for i in range(5)])

    # ----------------------------
    # rename
    # ----------------------------
    def test_rename_file_preserves_extension(self) -> None:
        store = self._make_store()
        item = store.rename("pdf", "final")
        self.assertEqual(item.name, "final.pdf")

    def test_rename_file_new_name_with_dots_still_gets_extension(self) -> None:
        store = self._make_store()
        self.assertEqual(store.rename("pdf", "final.v2").name, "final.v2.pdf")

    def test_rename_folder_is_verbatim(self) -> None:
        store = ItemStore([Item(id="arc", name="Archive", kind=ItemKind.FOLDER)])
        self.assertEqual(store.rename("arc", "Old Archive").name, "Old Archive")

    def test_rename_folder_with_dot_is_verbatim(self) -> None:
        store = ItemStore([Item(id="v", name="v1.0", kind=ItemKind.FOLDER)])
        self.assertEqual(store.rename("v", "v2").name, "v2")

    def test_rename_dotfile_has_no_extension(self) -> None:
        store = ItemStore([Item(id="e", name=".env", kind=ItemKind.FILE)])
        self.assertEqual(store.rename("e", "config").name, "config")

    def test_rename_bumps_modified_at(self) -> None:
        store = self._make_store()
        before = store.get("pdf").modified_at
        after = store.rename("pdf", "x").modified_at
        self.assertNotEqual(before, after)

    def test_rename_failures(self) -> None:
        store = self._make_store()
        with self.assertRaises(ValidationError):
            store.rename("pdf", "   ")
        with self.assertRaises(NotFoundError):
            store.rename("nope", "x")
        self.assertEqual(store.get("pdf").name, "report.pdf")

    # ----------------------------
    # set_parent
    # ----------------------------
    def test_set_parent_moves_item(self) -> None:
        store = self._make_store()
        moved = store.set_parent("notes", "C")
        self.assertEqual(moved.parent_id, "C")
        self.assertIn("notes", store.snapshot().children_ids("C"))
        self.assertNotIn("notes", store.snapshot().children_ids(None))

    def test_set_parent_to_root(self) -> None:
        store = self._make_store()
        self.assertIsNone(store.set_parent("C", None).parent_id)

    def test_set_parent_into_self_rejected(self) -> None:
        store = self._make_store()
        with self.assertRaises(CycleError):
            store.set_parent("A", "A")

    def test_set_parent_into_descendant_rejected_and_unchanged(self) -> None:
        store = self._make_store()
        before = store.items()
        with self.assertRaises(CycleError):
            store.set_parent("A", "C")
        self.assertEqual(store.items(), before)

    def test_set_parent_target_must_be_folder(self) -> None:
        store = self._make_store()
        with self.assertRaises(TypeMismatchError):
            store.set_parent("notes", "pdf")
        with self.assertRaises(NotFoundError):
            store.set_parent("notes", "nope")
        with self.assertRaises(NotFoundError):
            store.set_parent("nope", "A")

    def test_cycle_check_sees_latest_state(self) -> None:
        store = self._make_store()
        store.create("X", ItemKind.FOLDER)  # n1
        store.set_parent("n1", "C")
        with self.assertRaises(CycleError):
            store.set_parent("A", "n1")
        store.set_parent("n1", None)
        store.set_parent("A", "n1")
        self.assertEqual(store.get("A").parent_id, "n1")

    # ----------------------------
    # remove
    # ----------------------------
    def test_remove_cascades_exactly_the_subtree(self) -> None:
        store = self._make_store()
        removed = store.remove("B")
        self.assertEqual(removed, ["B", "C", "deep"])
        self.assertEqual({i.id for i in store.items()}, {"A", "pdf", "notes"})

        remaining_ids = {i.id for i in store.items()}
        for item in store.items():
            self.assertTrue(item.parent_id is None or item.parent_id in remaining_ids)

    def test_remove_file(self) -> None:
        store = self._make_store()
        self.assertEqual(store.remove("notes"), ["notes"])
        self.assertFalse(store.has("notes"))

    def test_remove_unknown_is_error(self) -> None:
        store = self._make_store()
        with self.assertRaises(NotFoundError):
            store.remove("nope")
        store.remove("A")
        with self.assertRaises(NotFoundError):
            store.remove("B")

    # ----------------------------
    # copy_subtree
    # ----------------------------
    def test_copy_subtree_structure_and_fresh_ids(self) -> None:
        items = [
            Item(id="src", name="Src", kind=ItemKind.FOLDER),
            Item(id="f1", name="one.txt", kind=ItemKind.FILE, parent_id="src"),
            Item(id="f2", name="two.txt", kind=ItemKind.FILE, parent_id="src"),
            Item(id="sub", name="Sub", kind=ItemKind.FOLDER, parent_id="src"),
            Item(id="f3", name="three.txt", kind=ItemKind.FILE, parent_id="sub"),
            Item(id="dst", name="Dst", kind=ItemKind.FOLDER),
        ]
        store = ItemStore(items, id_factory=sequential_ids("c"))
        top = store.copy_subtree("src", "dst")

        self.assertEqual(top.id, "c1")
        self.assertEqual(top.name, "Src - Copy")
        self.assertEqual(top.parent_id, "dst")
        self.assertEqual(len(store), 11)

        snap = store.snapshot()
        clone_children = sorted(snap.get(cid).name for cid in snap.children_ids(top.id))
        self.assertEqual(clone_children, ["Sub", "one.txt", "two.txt"])

        sub_clone = [snap.get(c) for c in snap.children_ids(top.id) if snap.get(c).is_folder][0]
        self.assertNotEqual(sub_clone.id, "sub")
        self.assertEqual([snap.get(c).name for c in snap.children_ids(sub_clone.id)], ["three.txt"])

        new_ids = {"c1", "c2", "c3", "c4", "c5"}
        self.assertEqual({i.id for i in store.items()} - {i.id for i in items}, new_ids)

        # Originals untouched; clones are independent.
        store.rename(sub_clone.id, "Changed")
        self.assertEqual(store.get("sub").name, "Sub")
        self.assertEqual(store.get("src").parent_id, None)

    def test_copy_file_to_root(self) -> None:
        store = self._make_store()
        clone = store.copy_subtree("pdf", None)
        self.assertEqual(clone.name, "report.pdf - Copy")
        self.assertIsNone(clone.parent_id)
        self.assertEqual(clone.size, 10)
        self.assertEqual(store.get("pdf").parent_id, "A")

    def test_copy_into_own_subtree_rejected(self) -> None:
        store = self._make_store()
        before = store.items()
        with self.assertRaises(CycleError):
            store.copy_subtree("A", "A")
        with self.assertRaises(CycleError):
            store.copy_subtree("A", "C")
        self.assertEqual(store.items(), before)

    def test_copy_target_validation(self) -> None:
        store = self._make_store()
        with self.assertRaises(TypeMismatchError):
            store.copy_subtree("notes", "pdf")
        with self.assertRaises(NotFoundError):
            store.copy_subtree("nope", None)

    def test_copy_uses_custom_suffix(self) -> None:
        store = ItemStore(
            [Item(id="d", name="Docs", kind=ItemKind.FOLDER)],
            copy_suffix=" (copy)",
        )
        self.assertEqual(store.copy_subtree("d", None).name, "Docs (copy)")

    # ----------------------------
    # set_attributes
    # ----------------------------
    def test_set_attributes(self) -> None:
        store = self._make_store()
        item = store.set_attributes("A", color="green", is_shared=True, category="documents")
        self.assertIs(item.color, FolderColor.GREEN)
        self.assertTrue(item.is_shared)
        self.assertEqual(item.category, "documents")

        item = store.set_attributes("A", color=None)
        self.assertIsNone(item.color)
        self.assertTrue(item.is_shared)

    def test_set_attributes_failures(self) -> None:
        store = self._make_store()
        with self.assertRaises(ValidationError):
            store.set_attributes("A", name="x")
        with self.assertRaises(TypeMismatchError):
            store.set_attributes("pdf", color="blue")
        with self.assertRaises(ValidationError):
            store.set_attributes("A", is_shared="yes")
        with self.assertRaises(NotFoundError):
            store.set_attributes("nope", is_shared=True)
        self.assertIsNone(store.get("A").color)

    # ----------------------------
    # permissions
    # ----------------------------
    def test_grant_replaces_existing_grant(self) -> None:
        store = self._make_store()
        store.grant_permission("A", Permission("u1", PrincipalType.USER, Role.VIEWER))
        item = store.grant_permission("A", Permission("u1", PrincipalType.USER, Role.EDITOR))
        self.assertEqual(item.permissions, (Permission("u1", PrincipalType.USER, Role.EDITOR),))

    def test_owner_grant_cannot_be_replaced(self) -> None:
        store = self._make_store()
        owner = Permission("u1", PrincipalType.USER, Role.OWNER)
        store.grant_permission("A", owner)

        with self.assertRaises(ValidationError):
            store.grant_permission("A", Permission("u1", PrincipalType.USER, Role.VIEWER))
        self.assertEqual(store.get("A").permissions, (owner,))

        item = store.grant_permission("A", owner)
        self.assertEqual(item.permissions, (owner,))

    def test_revoke_permission(self) -> None:
        store = self._make_store()
        store.grant_permission("A", Permission("owner", PrincipalType.USER, Role.OWNER))
        store.grant_permission("A", Permission("t1", PrincipalType.TEAM, Role.VIEWER))

        item = store.revoke_permission("A", "t1", PrincipalType.TEAM)
        self.assertEqual([p.principal_id for p in item.permissions], ["owner"])

        with self.assertRaises(NotFoundError):
            store.revoke_permission("A", "t1", PrincipalType.TEAM)
        with self.assertRaises(ValidationError):
            store.revoke_permission("A", "owner")
        with self.assertRaises(ValidationError):
            store.revoke_permission("A", "owner", "robot")

    # ----------------------------
    # snapshots
    # ----------------------------
    def test_snapshot_does_not_see_later_mutations(self) -> None:
        store = self._make_store()
        snap = store.snapshot()
        store.rename("A", "Renamed")
        store.remove("notes")
        self.assertEqual(snap.get("A").name, "A")
        self.assertTrue(snap.has("notes"))
        self.assertEqual(store.snapshot().get("A").name, "Renamed")


if __name__ == "__main__":
    unittest.main()
