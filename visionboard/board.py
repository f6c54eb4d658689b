"""
Pure operations on a board document.

Every function returns a new document and leaves its input untouched, so a
caller can compare before/after and persist the whole aggregate.
"""
import copy
from typing import Any, Dict, Optional, Union

from .schema import Collection, normalize_document

BoardDocument = Dict[str, Any]


def _name(collection: Union[str, Collection]) -> str:
    if isinstance(collection, Collection):
        return collection.value
    return Collection.from_str(collection).value


def _with_list(doc: BoardDocument, name: str, items: list) -> BoardDocument:
    new_doc = dict(normalize_document(doc))
    new_doc[name] = items
    return new_doc


def add_item(doc: BoardDocument, collection: Union[str, Collection], item: Any) -> BoardDocument:
    """Append one item. The item is stored as given, without validation."""
    name = _name(collection)
    items = list(normalize_document(doc)[name])
    items.append(copy.deepcopy(item))
    return _with_list(doc, name, items)


def update_item(
    doc: BoardDocument,
    collection: Union[str, Collection],
    item_id: str,
    updates: Dict[str, Any],
) -> BoardDocument:
    """Shallow-merge `updates` over every item with a matching id."""
    name = _name(collection)
    items = [
        {**item, **copy.deepcopy(updates)} if _matches(item, item_id) else item
        for item in normalize_document(doc)[name]
    ]
    return _with_list(doc, name, items)


def replace_item(
    doc: BoardDocument,
    collection: Union[str, Collection],
    item_id: str,
    item: Dict[str, Any],
) -> BoardDocument:
    """Swap matching items for `item`, keeping their place in the list."""
    name = _name(collection)
    items = [
        copy.deepcopy(item) if _matches(old, item_id) else old
        for old in normalize_document(doc)[name]
    ]
    return _with_list(doc, name, items)


def remove_item(doc: BoardDocument, collection: Union[str, Collection], item_id: str) -> BoardDocument:
    """Drop every item with a matching id. Missing ids are a no-op."""
    name = _name(collection)
    items = [item for item in normalize_document(doc)[name] if not _matches(item, item_id)]
    return _with_list(doc, name, items)


def move_item(
    doc: BoardDocument,
    collection: Union[str, Collection],
    item_id: str,
    dx: float,
    dy: float,
) -> BoardDocument:
    """Apply a drag offset to an item's position. No bounds clamping."""
    name = _name(collection)
    items = []
    for item in normalize_document(doc)[name]:
        if _matches(item, item_id):
            pos = item.get("position")
            if not isinstance(pos, dict):
                pos = {}
            item = {
                **item,
                "position": {
                    "x": _coord(pos.get("x")) + dx,
                    "y": _coord(pos.get("y")) + dy,
                },
            }
        items.append(item)
    return _with_list(doc, name, items)


def find_item(doc: BoardDocument, collection: Union[str, Collection], item_id: str) -> Optional[Dict[str, Any]]:
    name = _name(collection)
    for item in normalize_document(doc)[name]:
        if _matches(item, item_id):
            return item
    return None


def truncate_images(doc: BoardDocument, limit: int) -> BoardDocument:
    """
    Cut every sticker image to at most `limit` bytes of UTF-8.

    Lossy: a truncated data URL will usually no longer render. A multi-byte
    character straddling the limit is dropped whole.
    """
    stickers = []
    for sticker in normalize_document(doc)["stickers"]:
        if isinstance(sticker, dict) and isinstance(sticker.get("image"), str):
            encoded = sticker["image"].encode("utf-8")
            if len(encoded) > limit:
                image = encoded[:limit].decode("utf-8", errors="ignore")
                sticker = {**sticker, "image": image}
        stickers.append(sticker)
    return _with_list(doc, "stickers", stickers)


def _matches(item: Any, item_id: str) -> bool:
    return isinstance(item, dict) and item.get("id") == item_id


def _coord(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return value
