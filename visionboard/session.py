"""
Board session: in-memory board state synchronized to a storage adapter.

The session loads once, then treats its own state as the source of truth
and writes the whole document after every change. State transitions are
pure (reduce); the session only sequences reduce -> persist.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Union

from . import board
from .config import Config
from .schema import (
    Card,
    Collection,
    Note,
    Position,
    Sticker,
    default_document,
    random_rotation,
)
from .store import BoardStore, LoadStatus

logger = logging.getLogger(__name__)

STICKER_SIZE = 200
NOTE_WIDTH, NOTE_HEIGHT = 300, 400


class ActionType(Enum):
    ADD = "add"            # payload: item dict
    MOVE = "move"          # payload: {"dx": .., "dy": ..}
    EDIT = "edit"          # payload: fields to merge
    REPLACE = "replace"    # payload: whole item
    DELETE = "delete"


@dataclass(frozen=True)
class Action:
    type: ActionType
    collection: Collection
    item_id: Optional[str] = None
    payload: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class BoardState:
    """Immutable snapshot of the board."""
    document: Dict[str, Any] = field(default_factory=default_document)

    def items(self, collection: Union[str, Collection]) -> list:
        return list(self.document[Collection.from_str(collection).value])


def reduce(state: BoardState, action: Action) -> BoardState:
    """Return the state that results from applying `action`."""
    doc = state.document
    if action.type == ActionType.ADD:
        doc = board.add_item(doc, action.collection, action.payload)
    elif action.type == ActionType.MOVE:
        doc = board.move_item(
            doc, action.collection, action.item_id,
            action.payload.get("dx", 0), action.payload.get("dy", 0),
        )
    elif action.type == ActionType.EDIT:
        doc = board.update_item(doc, action.collection, action.item_id, action.payload)
    elif action.type == ActionType.REPLACE:
        doc = board.replace_item(doc, action.collection, action.item_id, action.payload)
    elif action.type == ActionType.DELETE:
        doc = board.remove_item(doc, action.collection, action.item_id)
    else:
        raise ValueError(f"Unknown action type: {action.type}")
    return BoardState(doc)


class BoardSession:
    """Loads a board once and persists the full document on every change."""

    def __init__(self, store: BoardStore, config: Config = None):
        self.store = store
        self.config = config or Config()
        result = store.load()
        self.load_status: LoadStatus = result.status
        self.load_error: Optional[str] = result.error
        self.state = BoardState(result.document)
        if result.status == LoadStatus.FALLBACK:
            logger.warning(f"Board storage unreadable, starting empty: {result.error}")

    @property
    def document(self) -> Dict[str, Any]:
        return self.state.document

    def dispatch(self, action: Action) -> BoardState:
        """Apply an action and persist the result if anything changed."""
        new_state = reduce(self.state, action)
        if new_state.document == self.state.document:
            return self.state
        self.state = new_state
        # Write errors reach the caller; the in-memory change is kept
        self.store.write(new_state.document)
        return new_state

    # ── User actions ─────────────────────────────────────────────────────

    def _random_position(self, margin_x: int, margin_y: int) -> Position:
        return Position.random_within(
            max(self.config.viewport_width - margin_x, 0),
            max(self.config.viewport_height - margin_y, 0),
        )

    def add_sticker(self, image: str) -> Dict[str, Any]:
        sticker = Sticker(
            image=image,
            position=self._random_position(STICKER_SIZE, STICKER_SIZE),
            rotation=random_rotation(10),
        ).to_dict()
        self.dispatch(Action(ActionType.ADD, Collection.STICKERS, payload=sticker))
        return sticker

    def add_note(self, text: Optional[str] = None) -> Dict[str, Any]:
        note = Note(
            position=self._random_position(NOTE_WIDTH, NOTE_HEIGHT),
            rotation=random_rotation(5),
        )
        if text is not None:
            note.text = text
        item = note.to_dict()
        self.dispatch(Action(ActionType.ADD, Collection.NOTES, payload=item))
        return item

    def add_card(
        self,
        title: str,
        description: str = "",
        deadline: str = "",
        image: Optional[str] = None,
    ) -> Optional[Dict[str, Any]]:
        """Add a goal card. Cards without a title are ignored."""
        if not title:
            return None
        card = Card(
            title=title,
            description=description,
            deadline=deadline,
            image=image,
            position=self._random_position(NOTE_WIDTH, NOTE_HEIGHT),
            rotation=random_rotation(5),
        ).to_dict()
        self.dispatch(Action(ActionType.ADD, Collection.CARDS, payload=card))
        return card

    def move(self, collection: Collection, item_id: str, dx: float, dy: float) -> BoardState:
        return self.dispatch(Action(ActionType.MOVE, collection, item_id, {"dx": dx, "dy": dy}))

    def edit_note_text(self, item_id: str, text: str) -> BoardState:
        return self.dispatch(Action(ActionType.EDIT, Collection.NOTES, item_id, {"text": text}))

    def save_card(self, card: Dict[str, Any]) -> BoardState:
        """Replace a card wholesale, as the edit dialog does on save."""
        return self.dispatch(Action(ActionType.REPLACE, Collection.CARDS, card.get("id"), dict(card)))

    def delete(self, collection: Collection, item_id: str) -> BoardState:
        return self.dispatch(Action(ActionType.DELETE, collection, item_id))
