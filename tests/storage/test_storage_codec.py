import unittest
from datetime import datetime, timezone

from foldermgr.errors import StorageError
from foldermgr.models import FolderColor, Item, ItemKind, Permission, PrincipalType, Role
from foldermgr.storage import item_from_dict, item_to_dict


class TestCodec(unittest.TestCase):
    def test_item_to_dict_uses_camel_case_and_rfc3339(self) -> None:
        dt = datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        item = Item(
            id="d1",
            name="Docs",
            kind=ItemKind.FOLDER,
            parent_id="p",
            is_shared=True,
            color=FolderColor.BLUE,
            created_at=dt,
            modified_at=dt,
            team_id="t1",
            permissions=(Permission("u1", PrincipalType.USER, Role.OWNER),),
        )
        data = item_to_dict(item)
        self.assertEqual(data["type"], "folder")
        self.assertEqual(data["parentId"], "p")
        self.assertTrue(data["isShared"])
        self.assertEqual(data["color"], "blue")
        self.assertEqual(data["createdAt"], "2025-01-02T03:04:05.000000Z")
        self.assertEqual(data["teamId"], "t1")
        self.assertEqual(
            data["permissions"],
            [{"principalId": "u1", "principalType": "user", "role": "owner"}],
        )
        self.assertEqual(item_from_dict(data), item)

    def test_item_from_dict_minimal(self) -> None:
        item = item_from_dict({"id": "f", "name": "a.txt", "type": "file"})
        self.assertEqual(item, Item(id="f", name="a.txt", kind=ItemKind.FILE))

    def test_item_from_dict_rejects_coercible_size_and_flag(self) -> None:
        for entry in (
            {"id": "x", "name": "x", "type": "file", "size": "12"},
            {"id": "x", "name": "x", "type": "file", "size": True},
            {"id": "x", "name": "x", "type": "file", "isShared": "false"},
            {"id": "x", "name": "x", "type": "file", "isShared": 1},
        ):
            with self.assertRaises(StorageError):
                item_from_dict(entry)

        item = item_from_dict({"id": "x", "name": "x", "type": "file", "size": 12, "isShared": False})
        self.assertEqual((item.size, item.is_shared), (12, False))

    def test_item_from_dict_rejects_bad_entries(self) -> None:
        bad_entries = [
            "not a dict",
            {"name": "x", "type": "file"},
            {"id": "x", "type": "file"},
            {"id": "x", "name": "x", "type": "symlink"},
            {"id": "x", "name": "x", "type": "folder", "color": "pink"},
            {"id": "x", "name": "x", "type": "file", "createdAt": "yesterday"},
            {"id": "x", "name": "x", "type": "file", "permissions": [{"role": "owner"}]},
        ]
        for entry in bad_entries:
            with self.assertRaises(StorageError):
                item_from_dict(entry)  # type: ignore[arg-type]


if __name__ == "__main__":
    unittest.main()
