"""
Network-sync schema.

Events travel as JSON text: a tagged envelope {"type": ..., "payload": {...}} with camelCase keys.
Nothing is connected to a real transport yet; the schema exists so both sides agree on it.
"""

import json
import logging
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

from src.core.shared_types import AdventureType, GameMode
from src.xiangqi.actions import (
    Action,
    CloseAdventure,
    SetMode,
    SyncAdventure,
    SyncMove,
)
from src.xiangqi.square import BOARD_DIMENSIONS, Position
from src.xiangqi.state import MoveRecord

logger = logging.getLogger(__name__)

ROWS, COLS = BOARD_DIMENSIONS


class WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="forbid"
    )


class WirePosition(WireModel):
    r: int = Field(ge=0, lt=ROWS)
    c: int = Field(ge=0, lt=COLS)

    def to_position(self) -> Position:
        return Position(self.r, self.c)

    @classmethod
    def from_position(cls, position: Position) -> "WirePosition":
        return cls(r=position.row, c=position.col)


# --- PAYLOADS ---
class MovePayload(WireModel):
    from_: WirePosition = Field(alias="from")
    to: WirePosition
    capture: bool
    adventure_type: Optional[AdventureType] = None
    adventure_index: Optional[int] = None


class AdventureOpenPayload(WireModel):
    move_id: str
    adventure_type: AdventureType
    adventure_index: int


class AdventureResolvePayload(WireModel):
    move_id: str


class ResetPayload(WireModel):
    room_id: Optional[str] = None
    mode: GameMode


# --- ENVELOPES ---
class MoveEvent(WireModel):
    type: Literal["move"] = "move"
    payload: MovePayload


class AdventureOpenEvent(WireModel):
    type: Literal["adventure-open"] = "adventure-open"
    payload: AdventureOpenPayload


class AdventureResolveEvent(WireModel):
    type: Literal["adventure-resolve"] = "adventure-resolve"
    payload: AdventureResolvePayload


class ResetEvent(WireModel):
    type: Literal["reset"] = "reset"
    payload: ResetPayload


NetworkEvent = Annotated[
    Union[MoveEvent, AdventureOpenEvent, AdventureResolveEvent, ResetEvent],
    Field(discriminator="type"),
]
NETWORK_EVENT_ADAPTER: TypeAdapter[NetworkEvent] = TypeAdapter(NetworkEvent)


def serialize_event(event: NetworkEvent) -> str:
    return event.model_dump_json(by_alias=True)


def parse_event(raw: str | bytes) -> Optional[NetworkEvent]:
    """Fails closed: malformed JSON or anything not matching the schema gives None."""
    try:
        data = json.loads(raw)
        return NETWORK_EVENT_ADAPTER.validate_python(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning("Dropping network event that is not valid JSON: %s", e)
    except ValidationError as e:
        logger.warning(
            "Dropping network event that does not match the schema (%d errors)",
            e.error_count(),
        )
    return None


# --- CONVERSIONS ---
def move_event(record: MoveRecord) -> MoveEvent:
    """The event announcing a committed move to the other side."""
    return MoveEvent(
        payload=MovePayload(
            from_=WirePosition.from_position(record.from_),
            to=WirePosition.from_position(record.to),
            capture=record.capture,
            adventure_type=record.adventure_type,
            adventure_index=record.adventure_index,
        )
    )


def event_to_action(event: NetworkEvent) -> Action:
    """Which reducer action applies a received event to the local game."""
    match event:
        case MoveEvent(payload=payload):
            return SyncMove(
                from_=payload.from_.to_position(),
                to=payload.to.to_position(),
                capture=payload.capture,
                adventure_type=payload.adventure_type,
                adventure_index=payload.adventure_index,
            )
        case AdventureOpenEvent(payload=payload):
            return SyncAdventure(
                adventure_type=payload.adventure_type,
                adventure_index=payload.adventure_index,
            )
        case AdventureResolveEvent():
            return CloseAdventure()
        case ResetEvent(payload=payload):
            return SetMode(mode=payload.mode)
    raise TypeError(f"Not a network event: {event!r}")
