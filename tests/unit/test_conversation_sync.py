from __future__ import annotations

import asyncio
from datetime import timedelta

import pytest

from homebase.application.dto.events import NewMessageEvent, ReadReceiptEvent, TypingEvent
from homebase.domain.value_objects.enums import ListStatus
from homebase.services.conversation_sync import ConversationSync
from tests.conftest import (
    BASE_TIME,
    OTHER_ID,
    VIEWER_ID,
    FakeMessagingApi,
    make_conversation,
    make_message,
)


# -- conversation list -------------------------------------------------------


@pytest.mark.asyncio
async def test_conversations_sorted_by_recency_with_stable_ties(sync, api):
    t = BASE_TIME
    api.conversations = [
        make_conversation(conversation_id="old", last_message_at=t),
        make_conversation(conversation_id="tie-1", last_message_at=t + timedelta(hours=1)),
        make_conversation(conversation_id="new", last_message_at=t + timedelta(hours=2)),
        make_conversation(conversation_id="tie-2", last_message_at=t + timedelta(hours=1)),
    ]

    await sync.load_conversations()

    assert [c.id for c in sync.conversations] == ["new", "tie-1", "tie-2", "old"]
    assert sync.conversation_list_status == ListStatus.READY


@pytest.mark.asyncio
async def test_conversation_list_states(sync, api):
    assert sync.conversation_list_status == ListStatus.LOADING

    await sync.load_conversations()

    assert sync.conversation_list_status == ListStatus.EMPTY


@pytest.mark.asyncio
async def test_failed_first_load_stays_loading(sync, api):
    api.fail.add("list_conversations")

    await sync.load_conversations()

    assert sync.conversation_list_status == ListStatus.LOADING
    assert sync.conversations == ()


@pytest.mark.asyncio
async def test_failed_refresh_keeps_previous_list(sync, api):
    api.conversations = [make_conversation(conversation_id="c1")]
    await sync.load_conversations()
    api.fail.add("list_conversations")
    api.conversations = []

    await sync.load_conversations()

    assert [c.id for c in sync.conversations] == ["c1"]


@pytest.mark.asyncio
async def test_no_viewer_means_no_fetch(api, push):
    sync = ConversationSync(api, push, viewer_id=None)

    await sync.load_conversations()

    assert api.calls == []


# -- thread loader -----------------------------------------------------------


@pytest.mark.asyncio
async def test_thread_loader_disabled_without_selection(sync, api):
    await sync.load_messages()

    assert api.called("list_messages") == []
    assert sync.thread_status is None


@pytest.mark.asyncio
async def test_selection_replaces_thread_snapshot(sync, api):
    stale = make_message(message_id="stale", conversation_id="c1")
    sync.cache.merge("c1", stale)
    api.threads["c1"] = [make_message(message_id="m1", conversation_id="c1", is_read=True)]

    await sync.select_conversation("c1")

    assert [m.id for m in sync.messages] == ["m1"]
    assert sync.thread_status == ListStatus.READY


@pytest.mark.asyncio
async def test_thread_fetch_failure_keeps_cache(sync, api):
    sync.cache.merge("c1", make_message(message_id="m1", is_read=True))
    api.fail.add("list_messages")

    await sync.select_conversation("c1")

    assert [m.id for m in sync.messages] == ["m1"]


# -- read receipts -----------------------------------------------------------


@pytest.mark.asyncio
async def test_reconciliation_round_trip(sync, api, push):
    api.threads["c1"] = [make_message(message_id="m1", conversation_id="c1", sender_id=OTHER_ID)]

    await sync.select_conversation("c1")

    assert api.called("mark_read") == [("mark_read", "c1", ["m1"])]
    assert push.of_kind("mark_read") == [("mark_read", "c1", ["m1"])]

    sync.handle_read_receipt("c1", frozenset({"m1"}), read_by=OTHER_ID)
    (m1,) = sync.messages
    assert m1.is_read is True

    await sync.reconcile_read_receipts()

    assert len(api.called("mark_read")) == 1
    assert len(push.of_kind("mark_read")) == 1
    assert sync.unread_count("c1") == 0


@pytest.mark.asyncio
async def test_reconciliation_skips_own_messages(sync, api):
    api.threads["c1"] = [make_message(message_id="mine", conversation_id="c1", sender_id=VIEWER_ID)]

    await sync.select_conversation("c1")

    assert api.called("mark_read") == []


@pytest.mark.asyncio
async def test_reconciliation_requires_push_connection(sync, api, push):
    push.connected = False
    api.threads["c1"] = [make_message(message_id="m1", conversation_id="c1")]

    await sync.select_conversation("c1")

    assert api.called("mark_read") == []
    assert sync.unread_count("c1") == 1


@pytest.mark.asyncio
async def test_failed_mark_read_is_retried_later(sync, api, push):
    api.threads["c1"] = [make_message(message_id="m1", conversation_id="c1")]
    api.fail.add("mark_read")

    await sync.select_conversation("c1")

    assert push.of_kind("mark_read") == [("mark_read", "c1", ["m1"])]
    assert sync.unread_count("c1") == 1

    api.fail.clear()
    await sync.reconcile_read_receipts()

    assert len(api.called("mark_read")) == 2
    assert len(push.of_kind("mark_read")) == 2
    assert sync.unread_count("c1") == 0


@pytest.mark.asyncio
async def test_concurrent_reconciliation_does_not_double_send(api, push):
    gate = asyncio.Event()

    class SlowApi(FakeMessagingApi):
        async def mark_read(self, conversation_id, message_ids):
            await gate.wait()
            await super().mark_read(conversation_id, message_ids)

    slow = SlowApi()
    sync = ConversationSync(slow, push, viewer_id=VIEWER_ID)
    sync.selected_conversation_id = "c1"
    sync.cache.replace("c1", [make_message(message_id="m1", conversation_id="c1")])

    first = asyncio.create_task(sync.reconcile_read_receipts())
    await asyncio.sleep(0)
    await sync.reconcile_read_receipts()
    gate.set()
    await first

    assert slow.called("mark_read") == [("mark_read", "c1", ["m1"])]


# -- push events -------------------------------------------------------------


@pytest.mark.asyncio
async def test_new_message_for_background_conversation(sync, api):
    api.threads["c1"] = [make_message(message_id="m1", conversation_id="c1", is_read=True)]
    await sync.select_conversation("c1")
    calls_before = len(api.called("list_conversations"))

    incoming = make_message(message_id="m9", conversation_id="c2")
    await sync.handle_event(NewMessageEvent(conversation_id="c2", message=incoming))
    await sync.settle()

    assert [m.id for m in sync.cache.get("c2")] == ["m9"]
    assert [m.id for m in sync.messages] == ["m1"]
    assert len(api.called("list_conversations")) == calls_before + 1
    assert api.called("mark_read") == []


@pytest.mark.asyncio
async def test_duplicate_new_message_is_ignored(sync, api):
    msg = make_message(message_id="m1", conversation_id="c2")

    await sync.handle_new_message("c2", msg)
    await sync.settle()
    await sync.handle_new_message("c2", msg)
    await sync.settle()

    assert len(sync.cache.get("c2")) == 1
    assert len(api.called("list_conversations")) == 1


@pytest.mark.asyncio
async def test_new_message_in_active_conversation_is_acknowledged(sync, api, push):
    await sync.select_conversation("c1")

    await sync.handle_new_message("c1", make_message(message_id="m2", conversation_id="c1"))
    await sync.settle()

    assert api.called("mark_read") == [("mark_read", "c1", ["m2"])]
    assert sync.unread_count("c1") == 0


@pytest.mark.asyncio
async def test_typing_only_tracks_remote_user_in_active_conversation(sync):
    await sync.select_conversation("c1")

    await sync.handle_event(TypingEvent(conversation_id="c2", user_id=OTHER_ID, is_typing=True))
    await sync.handle_event(TypingEvent(conversation_id="c1", user_id=VIEWER_ID, is_typing=True))
    assert sync.typing.is_typing() is False

    await sync.handle_event(TypingEvent(conversation_id="c1", user_id=OTHER_ID, is_typing=True))
    assert sync.typing.is_typing(OTHER_ID) is True

    await asyncio.sleep(0.15)
    assert sync.typing.is_typing() is False


@pytest.mark.asyncio
async def test_read_receipt_event_only_touches_listed_ids(sync):
    sync.cache.replace(
        "c1",
        [
            make_message(message_id="a", conversation_id="c1", sender_id=VIEWER_ID),
            make_message(message_id="b", conversation_id="c1", sender_id=VIEWER_ID),
        ],
    )

    await sync.handle_event(ReadReceiptEvent(conversation_id="c1", message_ids=frozenset({"a"})))

    a, b = sync.cache.get("c1")
    assert a.is_read is True
    assert a.read_at is not None
    assert b.is_read is False


# -- selection & connection --------------------------------------------------


@pytest.mark.asyncio
async def test_switching_conversation_cancels_typing_and_orders_leave_join(sync, push):
    await sync.select_conversation("c1")
    await sync.update_text("on my way")
    push.sent.clear()

    await sync.select_conversation("c2")
    await asyncio.sleep(0.15)

    assert ("typing", "c2", False) not in push.sent
    assert ("typing", "c2", True) not in push.sent
    leave = push.sent.index(("leave", "c1"))
    join = push.sent.index(("join", "c2"))
    assert leave < join
    assert push.of_kind("typing") == [("typing", "c1", False)]


@pytest.mark.asyncio
async def test_deselect_and_close_leave_the_conversation(sync, push):
    await sync.select_conversation("c1")
    await sync.select_conversation(None)
    await sync.select_conversation("c2")
    await sync.close()

    assert push.of_kind("leave") == [("leave", "c1"), ("leave", "c2")]
    assert sync.selected_conversation_id is None


@pytest.mark.asyncio
async def test_reconnect_rejoins_and_reconciles(sync, api, push):
    push.connected = False
    api.threads["c1"] = [make_message(message_id="m1", conversation_id="c1")]
    await sync.select_conversation("c1")
    assert push.sent == []

    push.connected = True
    await sync.on_connection_change(True)

    assert push.of_kind("join") == [("join", "c1")]
    assert api.called("mark_read") == [("mark_read", "c1", ["m1"])]


@pytest.mark.asyncio
async def test_rest_still_works_while_disconnected(sync, api, push):
    push.connected = False
    await sync.select_conversation("c1")
    await sync.update_text("hello")

    sent = await sync.send()

    assert sent is not None
    assert [m.id for m in sync.messages] == [sent.id]
    assert push.sent == []


class BlockingListApi(FakeMessagingApi):
    def __init__(self) -> None:
        super().__init__()
        self.gate = asyncio.Event()

    async def list_conversations(self):
        await self.gate.wait()
        return await super().list_conversations()


@pytest.mark.asyncio
async def test_new_message_does_not_wait_for_the_list_refresh(push):
    api = BlockingListApi()
    sync = ConversationSync(api, push, viewer_id=VIEWER_ID)

    await asyncio.wait_for(sync.handle_new_message("c2", make_message(message_id="m1", conversation_id="c2")), 1)

    assert [m.id for m in sync.cache.get("c2")] == ["m1"]
    assert sync.conversation_list_status == ListStatus.LOADING

    api.gate.set()
    await sync.settle()

    assert sync.conversation_list_status == ListStatus.EMPTY


@pytest.mark.asyncio
async def test_close_cancels_pending_follow_ups(push):
    api = BlockingListApi()
    sync = ConversationSync(api, push, viewer_id=VIEWER_ID)
    await sync.handle_new_message("c2", make_message(message_id="m1", conversation_id="c2"))

    await asyncio.wait_for(sync.close(), 1)
    await sync.settle()

    assert sync.conversation_list_status == ListStatus.LOADING
