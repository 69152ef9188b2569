"""Wires the REST client, push channel and ConversationSync into one session."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from homebase.config import settings
from homebase.infrastructure.http.rest_client import HttpMessagingApi
from homebase.infrastructure.ws.client import WebSocketPushChannel
from homebase.services.conversation_sync import ConversationSync

logger = logging.getLogger(__name__)


def build_session(
    viewer_id: str,
    *,
    api: HttpMessagingApi | None = None,
    push: WebSocketPushChannel | None = None,
) -> tuple[ConversationSync, HttpMessagingApi, WebSocketPushChannel]:
    api = api or HttpMessagingApi.from_settings()
    push = push or WebSocketPushChannel(settings.WS_URL, headers=settings.auth_headers)
    sync = ConversationSync(api, push, viewer_id=viewer_id)
    push.bind(sync.handle_event, sync.on_connection_change)
    return sync, api, push


@asynccontextmanager
async def open_messaging_session(
    viewer_id: str,
    *,
    api: HttpMessagingApi | None = None,
    push: WebSocketPushChannel | None = None,
) -> AsyncIterator[ConversationSync]:
    sync, api, push = build_session(viewer_id, api=api, push=push)
    await push.start()
    try:
        await sync.load_conversations()
        logger.info("Messaging session opened for viewer %s", viewer_id)
        yield sync
    finally:
        await sync.close()
        await push.stop()
        await api.aclose()
        logger.info("Messaging session closed for viewer %s", viewer_id)
