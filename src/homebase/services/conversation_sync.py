"""Client-side conversation state kept in step with REST and the push channel.

REST responses and push events all funnel through ``MessageCache``; the
thread loader's snapshot ``replace`` is only ever triggered by selection.
No method here lets a network failure escape: failures become stale state
or a ``Notice``.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Coroutine

from homebase.application.dto.events import (
    NewMessageEvent,
    PushEvent,
    ReadReceiptEvent,
    TypingEvent,
)
from homebase.application.dto.message import SendMessageDTO
from homebase.application.dto.notice import Notice
from homebase.application.exceptions import ApiError
from homebase.application.ports.api import MessagingApi
from homebase.application.ports.clock import Clock, SystemClock
from homebase.application.ports.push import PushChannel
from homebase.config import settings
from homebase.domain.entities.conversation import Conversation
from homebase.domain.entities.message import Message
from homebase.domain.value_objects.enums import ComposerStatus, ListStatus
from homebase.services.composer import Composer, read_attachment, read_attachments
from homebase.services.message_cache import MessageCache
from homebase.services.typing import TypingIndicator, TypingSignalEmitter

logger = logging.getLogger(__name__)


def _recency_key(conversation: Conversation) -> float:
    ts = conversation.activity_at
    return ts.timestamp() if ts is not None else float("-inf")


class ConversationSync:
    def __init__(
        self,
        api: MessagingApi,
        push: PushChannel,
        *,
        viewer_id: str | None,
        clock: Clock | None = None,
        typing_idle_seconds: float | None = None,
        typing_clear_seconds: float | None = None,
    ) -> None:
        self._api = api
        self._push = push
        self._clock = clock or SystemClock()
        self.viewer_id = viewer_id

        self.cache = MessageCache()
        self.composer = Composer()
        self.typing = TypingIndicator(
            typing_clear_seconds if typing_clear_seconds is not None else settings.TYPING_CLEAR_SECONDS,
        )
        self._emitter = TypingSignalEmitter(
            push,
            typing_idle_seconds if typing_idle_seconds is not None else settings.TYPING_IDLE_SECONDS,
        )

        self.selected_conversation_id: str | None = None
        self.notices: list[Notice] = []
        self._conversations: list[Conversation] = []
        self._conversations_loaded = False
        self._receipts_in_flight: dict[str, set[str]] = {}
        self._tasks: set[asyncio.Task[None]] = set()

    # -- read-only views ---------------------------------------------------

    @property
    def connected(self) -> bool:
        return self._push.connected

    @property
    def conversations(self) -> tuple[Conversation, ...]:
        return tuple(self._conversations)

    @property
    def conversation_list_status(self) -> ListStatus:
        if not self._conversations_loaded:
            return ListStatus.LOADING
        return ListStatus.READY if self._conversations else ListStatus.EMPTY

    @property
    def active_conversation(self) -> Conversation | None:
        for conversation in self._conversations:
            if conversation.id == self.selected_conversation_id:
                return conversation
        return None

    @property
    def messages(self) -> tuple[Message, ...]:
        if self.selected_conversation_id is None:
            return ()
        return self.cache.get(self.selected_conversation_id)

    @property
    def thread_status(self) -> ListStatus | None:
        conversation_id = self.selected_conversation_id
        if conversation_id is None:
            return None
        if conversation_id not in self.cache:
            return ListStatus.LOADING
        return ListStatus.READY if self.cache.get(conversation_id) else ListStatus.EMPTY

    def unread_count(self, conversation_id: str) -> int:
        if self.viewer_id is None:
            return 0
        return self.cache.unread_count(conversation_id, self.viewer_id)

    def dismiss_notice(self, index: int = 0) -> None:
        if 0 <= index < len(self.notices):
            del self.notices[index]

    # -- loaders -----------------------------------------------------------

    async def load_conversations(self) -> None:
        if self.viewer_id is None:
            return
        try:
            conversations = await self._api.list_conversations()
        except ApiError as exc:
            logger.warning("Failed to load conversations: %s", exc.detail)
            return
        self._conversations = sorted(conversations, key=_recency_key, reverse=True)
        self._conversations_loaded = True

    async def load_messages(self) -> None:
        conversation_id = self.selected_conversation_id
        if conversation_id is None:
            return
        try:
            messages = await self._api.list_messages(conversation_id)
        except ApiError as exc:
            logger.warning("Failed to load messages for %s: %s", conversation_id, exc.detail)
            return
        self.cache.replace(conversation_id, messages)
        self._receipts_in_flight.pop(conversation_id, None)
        if conversation_id == self.selected_conversation_id:
            await self.reconcile_read_receipts()

    # -- selection / lifecycle ---------------------------------------------

    async def select_conversation(self, conversation_id: str | None) -> None:
        previous = self.selected_conversation_id
        if conversation_id == previous:
            return

        # Close out the previous conversation before touching the new one.
        await self._emitter.stop()
        self.typing.reset()
        if previous is not None and self._push.connected:
            await self._push.leave(previous)

        self.selected_conversation_id = conversation_id
        if conversation_id is None:
            return
        if self._push.connected:
            await self._push.join(conversation_id)
        await self.load_messages()

    async def on_connection_change(self, connected: bool) -> None:
        logger.info("Push channel %s", "connected" if connected else "disconnected")
        if not connected:
            self._emitter.cancel()
            self.typing.reset()
            return
        if self.selected_conversation_id is not None:
            await self._push.join(self.selected_conversation_id)
            await self.reconcile_read_receipts()

    async def settle(self) -> None:
        """Wait for follow-up work started by push events to finish."""
        while self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    async def close(self) -> None:
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._emitter.cancel()
        self.typing.reset()
        if self.selected_conversation_id is not None and self._push.connected:
            await self._push.leave(self.selected_conversation_id)
        self.selected_conversation_id = None

    # -- read receipts -----------------------------------------------------

    async def reconcile_read_receipts(self) -> None:
        conversation_id = self.selected_conversation_id
        if conversation_id is None or self.viewer_id is None or not self._push.connected:
            return

        in_flight = self._receipts_in_flight.setdefault(conversation_id, set())
        ids = [
            m.id
            for m in self.cache.unread_for(conversation_id, self.viewer_id)
            if m.id not in in_flight
        ]
        if not ids:
            return

        in_flight.update(ids)
        try:
            await self._api.mark_read(conversation_id, ids)
        except ApiError as exc:
            logger.warning("mark-read failed for %s: %s", conversation_id, exc.detail)
            persisted = False
        else:
            persisted = True

        # The sender still gets the receipt; an unpersisted one is retried on the next trigger.
        await self._push.mark_as_read(conversation_id, ids)
        if persisted:
            self.cache.mark_read(conversation_id, ids, self._clock.now())
        in_flight.difference_update(ids)

    # -- push events -------------------------------------------------------

    async def handle_event(self, event: PushEvent) -> None:
        if isinstance(event, NewMessageEvent):
            await self.handle_new_message(event.conversation_id, event.message)
        elif isinstance(event, TypingEvent):
            self.handle_typing(event.conversation_id, event.user_id, event.is_typing)
        elif isinstance(event, ReadReceiptEvent):
            self.handle_read_receipt(event.conversation_id, event.message_ids, event.read_by)
        else:
            logger.debug("Ignoring unknown push event %r", event)

    async def handle_new_message(self, conversation_id: str, message: Message) -> None:
        """Merge right away; the REST follow-ups run in the background.

        The push reader is never held up by a slow list refresh or mark-read.
        """
        if not self.cache.merge(conversation_id, message):
            return
        self._spawn(self.load_conversations(), name="refresh-conversations")
        if conversation_id == self.selected_conversation_id:
            self._spawn(self.reconcile_read_receipts(), name=f"reconcile-{conversation_id}")

    def _spawn(self, coro: Coroutine[Any, Any, None], *, name: str) -> None:
        task = asyncio.create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)

    def _on_task_done(self, task: asyncio.Task[None]) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Background task %s failed", task.get_name(), exc_info=task.exception())

    def handle_typing(self, conversation_id: str, user_id: str, is_typing: bool) -> None:
        if conversation_id != self.selected_conversation_id or user_id == self.viewer_id:
            return
        self.typing.set(user_id, is_typing)

    def handle_read_receipt(
        self,
        conversation_id: str,
        message_ids: frozenset[str] | list[str],
        read_by: str | None = None,
    ) -> None:
        changed = self.cache.mark_read(conversation_id, message_ids, self._clock.now())
        if changed:
            logger.debug("%d messages in %s read by %s", len(changed), conversation_id, read_by)

    # -- composer ----------------------------------------------------------

    async def update_text(self, text: str) -> None:
        self.composer.text = text
        await self._emitter.on_text_change(self.selected_conversation_id, text)

    async def send(self) -> Message | None:
        """Run the upload-then-send pipeline for the current draft.

        Returns the created message, or None when nothing was sent.
        """
        conversation_id = self.selected_conversation_id
        composer = self.composer
        if conversation_id is None or not composer.has_content or composer.sending:
            return None

        composer.status = ComposerStatus.SENDING
        try:
            message = await self._upload_and_send(conversation_id)
        finally:
            composer.status = ComposerStatus.IDLE
        if message is None:
            return None

        self.cache.merge(conversation_id, message)
        if self._push.connected:
            await self._push.broadcast_message(conversation_id, message)
        composer.clear()
        await self.load_conversations()
        return message

    async def _upload_and_send(self, conversation_id: str) -> Message | None:
        composer = self.composer

        image_url: str | None = None
        if composer.image is not None:
            try:
                upload = await read_attachment(composer.image)
                image_url = await self._api.upload_message_image(upload.file_data)
            except (ApiError, OSError) as exc:
                logger.warning("Image upload failed: %s", exc)
                self._notify("Upload failed", "Failed to upload image. Please try again.")
                return None

        attachment_urls: list[str] = []
        if composer.files:
            try:
                uploads = await read_attachments(composer.files)
                attachment_urls = await self._api.upload_files(uploads)
            except (ApiError, OSError) as exc:
                logger.warning("File upload failed: %s", exc)
                self._notify("Upload failed", "Failed to upload files. Please try again.")
                return None

        data = SendMessageDTO(
            message=composer.text.strip(),
            image_url=image_url,
            attachments=attachment_urls,
        )
        try:
            return await self._api.send_message(conversation_id, data)
        except ApiError as exc:
            logger.warning("Send to %s failed: %s", conversation_id, exc.detail)
            self._notify("Message not sent", "Failed to send message. Please try again.")
            return None

    def _notify(self, title: str, description: str) -> None:
        self.notices.append(Notice(title=title, description=description))
