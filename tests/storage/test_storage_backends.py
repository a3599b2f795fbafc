import json
import os
import tempfile
import unittest

from foldermgr.errors import StorageError
from foldermgr.models import Item, ItemKind
from foldermgr.storage import ItemStorage, JsonFileStorage, MemoryStorage


class TestMemoryStorage(unittest.TestCase):
    def test_save_and_load(self) -> None:
        storage = MemoryStorage()
        self.assertEqual(storage.load(), [])
        items = [Item(id="a", name="A", kind=ItemKind.FOLDER)]
        storage.save(items)
        items.append(Item(id="b", name="B", kind=ItemKind.FOLDER))
        self.assertEqual([i.id for i in storage.load()], ["a"])
        self.assertEqual(storage.save_count, 1)
        self.assertIsInstance(storage, ItemStorage)


class TestJsonFileStorage(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.path = os.path.join(self._tmp.name, "sub", "items.json")

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_missing_file_loads_empty(self) -> None:
        self.assertEqual(JsonFileStorage(self.path).load(), [])

    def test_save_then_load(self) -> None:
        storage = JsonFileStorage(self.path)
        items = [
            Item(id="a", name="A", kind=ItemKind.FOLDER),
            Item(id="f", name="f.txt", kind=ItemKind.FILE, parent_id="a", size=7),
        ]
        storage.save(items)
        self.assertEqual(JsonFileStorage(self.path).load(), items)

        with open(self.path, encoding="utf-8") as f:
            payload = json.load(f)
        self.assertEqual(payload["version"], 1)
        self.assertEqual([e["id"] for e in payload["items"]], ["a", "f"])
        self.assertEqual(os.listdir(os.path.dirname(self.path)), ["items.json"])

    def test_malformed_file_raises(self) -> None:
        os.makedirs(os.path.dirname(self.path))
        with open(self.path, "w", encoding="utf-8") as f:
            f.write("{not json")
        with self.assertRaises(StorageError):
            JsonFileStorage(self.path).load()

        with open(self.path, "w", encoding="utf-8") as f:
            json.dump({"version": 99, "items": []}, f)
        with self.assertRaises(StorageError):
            JsonFileStorage(self.path).load()

    def test_blank_path_rejected(self) -> None:
        with self.assertRaises(StorageError):
            JsonFileStorage("  ")


if __name__ == "__main__":
    unittest.main()
