from __future__ import annotations

from pathlib import Path

import pandas as pd

from .config import DEFAULT_CATALOG_CONFIG
from .models import CatalogItem, Tag

TAG_COLUMNS = ["moods", "contexts", "scenarios", "best_for", "delivery_methods"]
NUMERIC_COLUMNS = [
    "current_price",
    "msrp",
    "portability_score",
    "discreetness_score",
    "ease_of_use_score",
    "expert_score",
    "user_rating",
]
TEXT_COLUMNS = ["manufacturer", "category", "heating_method", "temp_control"]

_items: list[CatalogItem] | None = None


def _split_tags(raw) -> tuple[Tag, ...]:
    """Comma-separated names -> ``Tag`` tuple; duplicates dropped, ids by position."""
    if not isinstance(raw, str):
        return ()
    names: list[str] = []
    for part in raw.split(","):
        name = part.strip().lower()
        if name and name not in names:
            names.append(name)
    return tuple(Tag(id=i + 1, name=n) for i, n in enumerate(names))


def _slugify(name: str) -> str:
    return "-".join(name.lower().split())


def _optional(value):
    return None if pd.isna(value) else value


def load_catalog(path: Path | str | None = None) -> list[CatalogItem]:
    """Read the catalog CSV; only ``id`` and ``name`` columns are required."""
    if path is None:
        path = DEFAULT_CATALOG_CONFIG.catalog_path
    df = pd.read_csv(path)

    for col in NUMERIC_COLUMNS:
        if col in df.columns:
            df[col] = pd.to_numeric(df[col], errors="coerce")

    items: list[CatalogItem] = []
    for _, row in df.iterrows():
        record = {
            "id": int(row["id"]),
            "name": str(row["name"]),
            "slug": _optional(row.get("slug")) or _slugify(str(row["name"])),
        }
        for col in NUMERIC_COLUMNS:
            value = _optional(row.get(col))
            record[col] = float(value) if value is not None else None
        for col in TEXT_COLUMNS:
            value = _optional(row.get(col))
            record[col] = str(value).strip() if value is not None else None
        # Enum-like columns are compared lowercased by the matchers
        for col in ("heating_method", "temp_control"):
            if record[col]:
                record[col] = record[col].lower()
        for col in TAG_COLUMNS:
            record[col] = _split_tags(row.get(col))
        items.append(CatalogItem(**record))
    return items


def get_catalog() -> list[CatalogItem]:
    """Return the in-memory catalog, loading it on first call."""
    global _items
    if _items is None:
        _items = load_catalog()
    return list(_items)


def get_item(item_id: int) -> CatalogItem | None:
    for item in get_catalog():
        if item.id == item_id:
            return item
    return None
