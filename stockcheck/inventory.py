# stockcheck/inventory.py
from typing import Dict, Iterable, List, Sequence

from .core.config import settings


def barcode_prefix(barcode: str, length: int = None) -> str:
    """
    Product type code of a barcode: its first `length` characters.
    "XYZ001" -> "XYZ"
    """
    length = length or settings.product_prefix_length
    return (barcode or "")[:length]


def group_by_prefix(items: Iterable[Dict], length: int = None) -> List[Dict]:
    """
    [{"barcode": "XYZ001", "item_code": "Tiles"}, ...]
      -> [{"prefix": "XYZ", "name": "Tiles", "count": 1}, ...]

    Items whose barcode is shorter than the prefix are skipped. The group name
    comes from the first item seen; groups are sorted by count, largest first.
    """
    length = length or settings.product_prefix_length
    groups: Dict[str, Dict] = {}
    for item in items:
        barcode = item.get("barcode") or ""
        if len(barcode) < length:
            continue
        prefix = barcode[:length]
        if prefix not in groups:
            groups[prefix] = {
                "prefix": prefix,
                "name": item.get("item_code") or f"Product {prefix}",
                "count": 0,
            }
        groups[prefix]["count"] += 1
    # sorted() is stable: ties keep first-seen order
    return sorted(groups.values(), key=lambda g: g["count"], reverse=True)


def filter_by_search(
    items: Iterable[Dict],
    term: str,
    fields: Sequence[str] = ("barcode", "item_code", "item_name"),
) -> List[Dict]:
    """
    Case-insensitive substring search over the given fields.
    An empty term returns every item.
    """
    items = list(items)
    needle = (term or "").strip().lower()
    if not needle:
        return items
    return [
        i for i in items
        if any(needle in str(i.get(f) or "").lower() for f in fields)
    ]
