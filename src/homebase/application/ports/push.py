from __future__ import annotations

from typing import Any, Callable, Coroutine, Protocol

from homebase.application.dto.events import PushEvent
from homebase.domain.entities.message import Message

OnPushEvent = Callable[[PushEvent], Coroutine[Any, Any, None]]
OnConnectionChange = Callable[[bool], Coroutine[Any, Any, None]]


class PushChannel(Protocol):
    """Outbound half of the push channel.

    Sends are best effort: while disconnected they are dropped, never queued.
    """

    @property
    def connected(self) -> bool: ...

    async def join(self, conversation_id: str) -> None: ...

    async def leave(self, conversation_id: str) -> None: ...

    async def send_typing(self, conversation_id: str, is_typing: bool) -> None: ...

    async def mark_as_read(self, conversation_id: str, message_ids: list[str]) -> None: ...

    async def broadcast_message(self, conversation_id: str, message: Message) -> None: ...
