"""Network client placeholder: same interface a real sync client will have, but every call does nothing."""

from typing import Callable, Literal, Optional, Protocol

from src.api.events import (
    AdventureOpenPayload,
    AdventureResolvePayload,
    MovePayload,
    ResetPayload,
)

EventType = Literal["move", "adventure-open", "adventure-resolve", "reset"]
EventHandler = Callable[..., None]


class NetworkClient(Protocol):
    async def connect(self) -> None: ...

    async def disconnect(self) -> None: ...

    async def sync_move(self, payload: MovePayload) -> None: ...

    async def emit_adventure_open(self, payload: AdventureOpenPayload) -> None: ...

    async def emit_adventure_resolve(
        self, payload: AdventureResolvePayload
    ) -> None: ...

    async def emit_reset(self, payload: ResetPayload) -> None: ...

    def on(self, event_type: EventType, handler: EventHandler) -> None: ...

    def off(self, event_type: EventType, handler: EventHandler) -> None: ...

    def once(self, event_type: EventType, handler: EventHandler) -> None: ...


class NoopNetworkClient:
    def __init__(
        self, endpoint: Optional[str] = None, room_id: Optional[str] = None
    ) -> None:
        self.endpoint = endpoint
        self.room_id = room_id

    async def connect(self) -> None:
        pass

    async def disconnect(self) -> None:
        pass

    async def sync_move(self, payload: MovePayload) -> None:
        pass

    async def emit_adventure_open(self, payload: AdventureOpenPayload) -> None:
        pass

    async def emit_adventure_resolve(self, payload: AdventureResolvePayload) -> None:
        pass

    async def emit_reset(self, payload: ResetPayload) -> None:
        pass

    def on(self, event_type: EventType, handler: EventHandler) -> None:
        pass

    def off(self, event_type: EventType, handler: EventHandler) -> None:
        pass

    def once(self, event_type: EventType, handler: EventHandler) -> None:
        pass


def create_client(
    endpoint: Optional[str] = None, room_id: Optional[str] = None
) -> NetworkClient:
    return NoopNetworkClient(endpoint=endpoint, room_id=room_id)
