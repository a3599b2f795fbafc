from __future__ import annotations

from typing import Optional

COPY_SUFFIX: str = " - Copy"


def clean_name(name: object) -> Optional[str]:
    """Return the trimmed name, or None if it is not a non-blank string."""
    if not isinstance(name, str):
        return None
    trimmed = name.strip()
    return trimmed or None


def split_extension(name: str) -> tuple[str, str]:
    """
    Split a file name into (base, extension).

    The extension starts at the last '.' and is only recognized when that
    dot is not the first character ('.env' has no extension).
    """
    idx = name.rfind(".")
    if idx > 0:
        return name[:idx], name[idx:]
    return name, ""


def rename_keeping_extension(current_name: str, new_base: str) -> str:
    """Treat `new_base` as a base name and re-append the extension of `current_name`."""
    _, ext = split_extension(current_name)
    return new_base + ext


def copy_name(name: str, suffix: str = COPY_SUFFIX) -> str:
    return f"{name}{suffix}"
