"""JSON-file ItemStorage."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from typing import Sequence

from foldermgr.errors import StorageError
from foldermgr.models import Item

from .codec import item_from_dict, item_to_dict

logger = logging.getLogger(__name__)

FORMAT_VERSION: int = 1


class JsonFileStorage:
    """
    Persist items as a single JSON document: {"version": 1, "items": [...]}.

    A missing file loads as an empty collection. Writes go to a temporary
    file in the same directory and are swapped in with os.replace.
    """

    def __init__(self, path: str) -> None:
        if not isinstance(path, str) or not path.strip():
            raise StorageError("path must be a non-empty string")
        self._path = path

    @property
    def path(self) -> str:
        return self._path

    def load(self) -> list[Item]:
        if not os.path.exists(self._path):
            return []

        try:
            with open(self._path, "r", encoding="utf-8") as f:
                payload = json.load(f)
        except (OSError, ValueError) as exc:
            raise StorageError(
                "Failed to read item file",
                details={"path": self._path},
                cause=exc,
            ) from exc

        if not isinstance(payload, dict) or not isinstance(payload.get("items"), list):
            raise StorageError("Malformed item file", details={"path": self._path})
        if payload.get("version") != FORMAT_VERSION:
            raise StorageError(
                "Unsupported item file version",
                details={"path": self._path, "version": payload.get("version")},
            )

        return [item_from_dict(entry) for entry in payload["items"]]

    def save(self, items: Sequence[Item]) -> None:
        payload = {
            "version": FORMAT_VERSION,
            "items": [item_to_dict(item) for item in items],
        }

        parent_dir = os.path.dirname(os.path.abspath(self._path))
        try:
            os.makedirs(parent_dir, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=parent_dir, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(payload, f, ensure_ascii=False, indent=2)
                os.replace(tmp_path, self._path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
                raise
        except OSError as exc:
            raise StorageError(
                "Failed to write item file",
                details={"path": self._path},
                cause=exc,
            ) from exc

        logger.debug("Saved %d items to %s", len(items), self._path)
