"""Typing indicator state (inbound) and typing signal debounce (outbound).

Both are driven by ``SingleShotTimer``: at most one pending timer per
purpose, restarted on every relevant event.
"""
from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable

from homebase.application.ports.push import PushChannel

logger = logging.getLogger(__name__)

TimerCallback = Callable[[], Awaitable[None] | None]


class SingleShotTimer:
    """Cancel-and-reschedule wrapper around ``loop.call_later``."""

    def __init__(self, delay: float, callback: TimerCallback, *, name: str = "timer") -> None:
        self._delay = delay
        self._callback = callback
        self._name = name
        self._handle: asyncio.TimerHandle | None = None
        self._tasks: set[asyncio.Task[Any]] = set()

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def start(self) -> None:
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self._delay, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        result = self._callback()
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._tasks.add(task)
            task.add_done_callback(self._on_task_done)

    def _on_task_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Timer %s callback failed", self._name, exc_info=task.exception())


class TypingIndicator:
    """Which remote users are typing in the active conversation.

    A ``True`` signal expires on its own after ``clear_after`` seconds, so a
    lost ``False`` signal never leaves the flag stuck.
    """

    def __init__(self, clear_after: float) -> None:
        self._clear_after = clear_after
        self._timers: dict[str, SingleShotTimer] = {}

    @property
    def typing_users(self) -> frozenset[str]:
        return frozenset(self._timers)

    def is_typing(self, user_id: str | None = None) -> bool:
        if user_id is None:
            return bool(self._timers)
        return user_id in self._timers

    def set(self, user_id: str, is_typing: bool) -> None:
        timer = self._timers.pop(user_id, None)
        if timer is not None:
            timer.cancel()
        if not is_typing:
            return
        timer = SingleShotTimer(
            self._clear_after,
            lambda: self._expire(user_id),
            name=f"typing-clear-{user_id}",
        )
        self._timers[user_id] = timer
        timer.start()

    def reset(self) -> None:
        for timer in self._timers.values():
            timer.cancel()
        self._timers.clear()

    def _expire(self, user_id: str) -> None:
        if self._timers.pop(user_id, None) is not None:
            logger.debug("Typing flag for %s expired", user_id)


class TypingSignalEmitter:
    """Debounces composer keystrokes into typing start/stop frames."""

    def __init__(self, push: PushChannel, idle_after: float) -> None:
        self._push = push
        self._idle = SingleShotTimer(idle_after, self._on_idle, name="typing-idle")
        self._conversation_id: str | None = None
        self._closing: asyncio.Future[None] | None = None

    @property
    def active(self) -> bool:
        return self._conversation_id is not None

    async def on_text_change(self, conversation_id: str | None, text: str) -> None:
        if conversation_id is None or not self._push.connected:
            return
        if self._conversation_id is None:
            if not text.strip():
                return
            self._conversation_id = conversation_id
            # A stop frame from the idle timer must reach the wire first.
            if self._closing is not None and not self._closing.done():
                await asyncio.shield(self._closing)
            await self._push.send_typing(conversation_id, True)
        self._idle.start()

    async def stop(self) -> None:
        """Close an open typing state right away (e.g. on send or switch)."""
        self._idle.cancel()
        conversation_id, self._conversation_id = self._conversation_id, None
        if conversation_id is not None and self._push.connected:
            await self._push.send_typing(conversation_id, False)

    def cancel(self) -> None:
        self._idle.cancel()
        self._conversation_id = None

    def _on_idle(self) -> asyncio.Future[None] | None:
        conversation_id, self._conversation_id = self._conversation_id, None
        if conversation_id is None or not self._push.connected:
            return None
        self._closing = asyncio.ensure_future(self._push.send_typing(conversation_id, False))
        return self._closing
