from .categories import CATEGORY_LABELS, ROOT_LABEL, category_label
from .ids import IdFactory, new_item_id, new_uuid, sequential_ids
from .names import (
    COPY_SUFFIX,
    clean_name,
    copy_name,
    rename_keeping_extension,
    split_extension,
)
from .time import (
    Clock,
    fixed_clock,
    from_epoch_ms,
    normalize_dt,
    now_utc,
    parse_rfc3339,
    to_rfc3339,
)

__all__ = [
    "IdFactory",
    "new_uuid",
    "new_item_id",
    "sequential_ids",
    "Clock",
    "now_utc",
    "fixed_clock",
    "from_epoch_ms",
    "parse_rfc3339",
    "to_rfc3339",
    "normalize_dt",
    "COPY_SUFFIX",
    "clean_name",
    "split_extension",
    "rename_keeping_extension",
    "copy_name",
    "ROOT_LABEL",
    "CATEGORY_LABELS",
    "category_label",
]
