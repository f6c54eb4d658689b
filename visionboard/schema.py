"""
Vision board item schema.

Board document layout:
  { "stickers": [...], "cards": [...], "notes": [...] }

List order is display order. Items are plain dicts once stored; the
dataclasses below are only used to build new items with sane defaults.
"""
from enum import Enum
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List
import random
import time


COLLECTIONS = ("stickers", "cards", "notes")

DEFAULT_NOTE_TEXT = "Write your dreams here..."


class Collection(Enum):
    """The three item lists of a board document."""
    STICKERS = "stickers"
    CARDS = "cards"
    NOTES = "notes"

    @classmethod
    def from_str(cls, value: str) -> "Collection":
        try:
            return cls(value)
        except ValueError:
            raise UnknownCollection(value)


class UnknownCollection(KeyError):
    """Raised when a collection name is not one of COLLECTIONS."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Unknown collection: {self.name!r} (expected one of {', '.join(COLLECTIONS)})"


def default_document() -> Dict[str, List[Dict[str, Any]]]:
    """A fresh, empty board document."""
    return {"stickers": [], "cards": [], "notes": []}


def normalize_document(data: Any) -> Dict[str, Any]:
    """
    Coerce decoded JSON into board document shape.

    Raises ValueError if the top level is not an object. Missing or
    non-list collections become empty lists; extra keys are kept.
    """
    if not isinstance(data, dict):
        raise ValueError(f"Board document must be a JSON object, got {type(data).__name__}")
    doc = dict(data)
    for name in COLLECTIONS:
        if not isinstance(doc.get(name), list):
            doc[name] = []
    return doc


def new_item_id() -> str:
    """Creation time in milliseconds. Same-millisecond collisions are not guarded."""
    return str(int(time.time() * 1000))


def random_rotation(spread: float) -> str:
    """CSS angle uniformly drawn from [-spread, spread)."""
    return f"{random.random() * 2 * spread - spread}deg"


@dataclass
class Position:
    """Canvas coordinates. Unbounded: may be negative or off-screen."""
    x: float = 0.0
    y: float = 0.0

    @classmethod
    def random_within(cls, width: float, height: float) -> "Position":
        return cls(x=random.random() * width, y=random.random() * height)

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Position":
        data = data or {}
        return cls(x=float(data.get("x", 0) or 0), y=float(data.get("y", 0) or 0))


@dataclass
class Sticker:
    """A positioned image (data URL) with a rotation."""
    image: str
    id: str = field(default_factory=new_item_id)
    position: Position = field(default_factory=Position)
    rotation: str = "0deg"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "image": self.image,
            "position": self.position.to_dict(),
            "rotation": self.rotation,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Sticker":
        return cls(
            id=data.get("id", ""),
            image=data.get("image", ""),
            position=Position.from_dict(data.get("position")),
            rotation=data.get("rotation", "0deg"),
        )


@dataclass
class Note:
    """A positioned freeform text element. No length cap on text."""
    text: str = DEFAULT_NOTE_TEXT
    id: str = field(default_factory=new_item_id)
    position: Position = field(default_factory=Position)
    rotation: str = "0deg"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "position": self.position.to_dict(),
            "rotation": self.rotation,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Note":
        return cls(
            id=data.get("id", ""),
            text=data.get("text", ""),
            position=Position.from_dict(data.get("position")),
            rotation=data.get("rotation", "0deg"),
        )


@dataclass
class Card:
    """A goal card. `deadline` is free text, `image` may be missing."""
    title: str
    description: str = ""
    deadline: str = ""              # e.g. "Summer 2025", never parsed
    image: Optional[str] = None
    id: str = field(default_factory=new_item_id)
    position: Position = field(default_factory=Position)
    rotation: str = "0deg"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "deadline": self.deadline,
            "image": self.image,
            "position": self.position.to_dict(),
            "rotation": self.rotation,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Card":
        return cls(
            id=data.get("id", ""),
            title=data.get("title", ""),
            description=data.get("description", ""),
            deadline=data.get("deadline", ""),
            image=data.get("image"),
            position=Position.from_dict(data.get("position")),
            rotation=data.get("rotation", "0deg"),
        )
