from __future__ import annotations

import uuid
from typing import Callable

IdFactory = Callable[[], str]


def new_uuid() -> str:
    """Generate a UUID4 string."""
    return str(uuid.uuid4())


def new_item_id() -> str:
    """Generate a new item id (default id factory of ItemStore)."""
    return new_uuid()


def sequential_ids(prefix: str = "item-", start: int = 1) -> IdFactory:
    """
    Return an id factory yielding prefix1, prefix2, ...

    Useful where deterministic ids are needed (tests, fixtures).
    """
    counter = [start]

    def _next() -> str:
        value = f"{prefix}{counter[0]}"
        counter[0] += 1
        return value

    return _next
