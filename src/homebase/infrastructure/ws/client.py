"""WebSocket push channel: reader task, reconnect loop, best-effort sends."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable

from pydantic import ValidationError as PydanticValidationError
from websockets.asyncio.client import ClientConnection, connect
from websockets.exceptions import ConnectionClosed, WebSocketException

from homebase.application.ports.push import OnConnectionChange, OnPushEvent
from homebase.config import settings
from homebase.domain.entities.message import Message
from homebase.infrastructure.http.mappers import message_to_schema
from homebase.infrastructure.ws.protocol import (
    ErrorFrame,
    JoinConversationFrame,
    LeaveConversationFrame,
    MarkReadFrame,
    NewMessageFrame,
    OutboundFrame,
    TypingFrame,
    encode_frame,
    frame_to_event,
    parse_inbound,
)

logger = logging.getLogger(__name__)


def calc_backoff(attempts: int, base: float, ceiling: float) -> float:
    return min(base * (2 ** attempts), ceiling)


class WebSocketPushChannel:
    """Implements application.ports.push.PushChannel over a single socket."""

    def __init__(
        self,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        heartbeat_seconds: float | None = None,
        reconnect_base_seconds: float | None = None,
        reconnect_max_seconds: float | None = None,
        connector: Callable[..., Any] = connect,
    ) -> None:
        self._url = url
        self._headers = headers or {}
        self._heartbeat = heartbeat_seconds if heartbeat_seconds is not None else settings.WS_HEARTBEAT_SECONDS
        self._backoff_base = (
            reconnect_base_seconds if reconnect_base_seconds is not None else settings.WS_RECONNECT_BASE_SECONDS
        )
        self._backoff_max = (
            reconnect_max_seconds if reconnect_max_seconds is not None else settings.WS_RECONNECT_MAX_SECONDS
        )
        self._connector = connector
        self._on_event: OnPushEvent | None = None
        self._on_connection_change: OnConnectionChange | None = None
        self._ws: ClientConnection | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def connected(self) -> bool:
        return self._ws is not None

    def bind(
        self,
        on_event: OnPushEvent,
        on_connection_change: OnConnectionChange | None = None,
    ) -> None:
        self._on_event = on_event
        self._on_connection_change = on_connection_change

    async def start(self) -> None:
        self._task = asyncio.create_task(self._run(), name="ws-push-channel")
        logger.info("Push channel started: %s", self._url)

    async def stop(self) -> None:
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
            logger.info("Push channel stopped")

    # -- outbound ----------------------------------------------------------

    async def join(self, conversation_id: str) -> None:
        await self._send(JoinConversationFrame(conversation_id=conversation_id))

    async def leave(self, conversation_id: str) -> None:
        await self._send(LeaveConversationFrame(conversation_id=conversation_id))

    async def send_typing(self, conversation_id: str, is_typing: bool) -> None:
        await self._send(TypingFrame(conversation_id=conversation_id, is_typing=is_typing))

    async def mark_as_read(self, conversation_id: str, message_ids: list[str]) -> None:
        await self._send(MarkReadFrame(conversation_id=conversation_id, message_ids=message_ids))

    async def broadcast_message(self, conversation_id: str, message: Message) -> None:
        await self._send(
            NewMessageFrame(conversation_id=conversation_id, message_data=message_to_schema(message))
        )

    async def _send(self, frame: OutboundFrame) -> None:
        ws = self._ws
        if ws is None:
            logger.debug("Push channel offline, dropping %s frame", frame.type)
            return
        try:
            await ws.send(encode_frame(frame))
        except ConnectionClosed:
            logger.debug("Socket closed while sending %s frame", frame.type)

    # -- inbound -----------------------------------------------------------

    async def handle_raw(self, raw: str | bytes) -> None:
        try:
            frame = parse_inbound(raw)
        except PydanticValidationError:
            logger.warning("Dropping malformed push frame: %.200r", raw)
            return

        if isinstance(frame, ErrorFrame):
            logger.warning("Push server error: %s", frame.message)
            return

        try:
            event = frame_to_event(frame)
        except ValueError:
            logger.warning("Dropping push frame without conversation id: %.200r", raw)
            return
        if event is None or self._on_event is None:
            return
        try:
            await self._on_event(event)
        except Exception:
            logger.exception("Error processing push event %s", frame.type)

    async def _run(self) -> None:
        attempts = 0
        while True:
            try:
                async with self._connector(
                    self._url,
                    additional_headers=self._headers,
                    ping_interval=self._heartbeat or None,  # 0 disables pings
                ) as ws:
                    attempts = 0
                    await self._set_connection(ws)
                    async for raw in ws:
                        await self.handle_raw(raw)
            except asyncio.CancelledError:
                await self._set_connection(None)
                raise
            except (OSError, WebSocketException) as exc:
                logger.warning("Push channel connection lost: %s", exc)
            await self._set_connection(None)

            delay = calc_backoff(attempts, self._backoff_base, self._backoff_max)
            attempts += 1
            logger.info("Reconnecting push channel in %.1fs", delay)
            await asyncio.sleep(delay)

    async def _set_connection(self, ws: ClientConnection | None) -> None:
        was_connected = self._ws is not None
        self._ws = ws
        if was_connected == (ws is not None) or self._on_connection_change is None:
            return
        try:
            await self._on_connection_change(ws is not None)
        except Exception:
            logger.exception("Connection change handler failed")
