from __future__ import annotations

import base64

import pytest

from homebase.domain.value_objects.enums import AttachmentKind, ComposerStatus
from homebase.services.composer import Composer, read_attachments, to_data_url

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake"


@pytest.fixture
def photo(tmp_path):
    path = tmp_path / "leak.png"
    path.write_bytes(PNG_BYTES)
    return path


@pytest.fixture
def quote(tmp_path):
    path = tmp_path / "quote.pdf"
    path.write_bytes(b"%PDF-1.4 quote")
    return path


def test_to_data_url():
    assert to_data_url(b"hi", "text/plain") == "data:text/plain;base64,aGk="


def test_stage_image_rejects_non_images(quote):
    composer = Composer()

    with pytest.raises(ValueError):
        composer.stage_image(quote)

    assert composer.image is None
    assert composer.has_content is False


def test_staged_files_are_classified(photo, quote, tmp_path):
    notes = tmp_path / "notes.docx"
    notes.write_bytes(b"doc")
    composer = Composer()

    kinds = [composer.stage_file(p).kind for p in (photo, quote, notes)]

    assert kinds == [AttachmentKind.IMAGE, AttachmentKind.PDF, AttachmentKind.DOCUMENT]
    composer.remove_file(1)
    assert [f.name for f in composer.files] == ["leak.png", "notes.docx"]


@pytest.mark.asyncio
async def test_read_attachments_keeps_input_order(photo, quote):
    composer = Composer()
    composer.stage_file(quote)
    composer.stage_file(photo)

    uploads = await read_attachments(composer.files)

    assert [u.file_name for u in uploads] == ["quote.pdf", "leak.png"]
    assert uploads[1].file_type == "image/png"
    assert uploads[1].file_data == "data:image/png;base64," + base64.b64encode(PNG_BYTES).decode()


@pytest.mark.asyncio
async def test_send_text_and_image(sync, api, push, photo):
    await sync.select_conversation("c1")
    await sync.update_text("  Water under the sink  ")
    sync.composer.stage_image(photo)

    message = await sync.send()

    (upload_call,) = api.called("upload_message_image")
    assert upload_call[1].startswith("data:image/png;base64,")
    (send_call,) = api.called("send_message")
    data = send_call[2]
    assert data.message == "Water under the sink"
    assert data.image_url == "/public/message-images/x.png"
    assert data.attachments == []

    assert message is not None
    assert [m.id for m in sync.messages] == [message.id]
    assert ("new_message", "c1", message.id) in push.sent
    assert sync.composer.text == ""
    assert sync.composer.image is None
    assert sync.composer.status == ComposerStatus.IDLE


@pytest.mark.asyncio
async def test_send_with_files_uploads_them_in_one_batch(sync, api, photo, quote):
    await sync.select_conversation("c1")
    sync.composer.stage_file(photo)
    sync.composer.stage_file(quote)

    message = await sync.send()

    assert api.called("upload_files") == [("upload_files", 2)]
    assert message.attachments == (
        "/public/attachments/leak.png",
        "/public/attachments/quote.pdf",
    )
    assert sync.composer.files == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("failing", "description"),
    [
        ("upload_message_image", "Failed to upload image. Please try again."),
        ("upload_files", "Failed to upload files. Please try again."),
    ],
)
async def test_upload_failure_aborts_the_whole_send(sync, api, push, photo, quote, failing, description):
    await sync.select_conversation("c1")
    await sync.update_text("see attached")
    sync.composer.stage_image(photo)
    sync.composer.stage_file(quote)
    api.fail.add(failing)

    result = await sync.send()

    assert result is None
    assert api.called("send_message") == []
    assert sync.messages == ()
    assert push.of_kind("new_message") == []
    assert sync.notices[-1].title == "Upload failed"
    assert sync.notices[-1].description == description
    assert sync.composer.text == "see attached"
    assert sync.composer.image is not None
    assert len(sync.composer.files) == 1
    assert sync.composer.status == ComposerStatus.IDLE


@pytest.mark.asyncio
async def test_missing_file_is_reported_as_upload_failure(sync, api, tmp_path):
    await sync.select_conversation("c1")
    sync.composer.stage_file(tmp_path / "gone.pdf")

    assert await sync.send() is None

    assert api.called("upload_files") == []
    assert sync.notices[-1].description == "Failed to upload files. Please try again."


@pytest.mark.asyncio
async def test_send_failure_keeps_draft(sync, api):
    await sync.select_conversation("c1")
    await sync.update_text("Can you come Tuesday?")
    api.fail.add("send_message")

    assert await sync.send() is None

    assert sync.notices[-1].title == "Message not sent"
    assert sync.composer.text == "Can you come Tuesday?"
    assert sync.messages == ()


@pytest.mark.asyncio
async def test_send_is_a_noop_without_content_or_selection(sync, api):
    await sync.update_text("orphan")
    assert await sync.send() is None

    await sync.select_conversation("c1")
    await sync.update_text("   ")
    assert await sync.send() is None

    assert api.called("send_message") == []
    assert sync.notices == []


@pytest.mark.asyncio
async def test_send_is_a_noop_while_another_send_is_running(sync, api):
    await sync.select_conversation("c1")
    await sync.update_text("twice")
    sync.composer.status = ComposerStatus.SENDING

    assert await sync.send() is None
    assert api.called("send_message") == []


@pytest.mark.asyncio
async def test_echo_of_own_message_is_not_duplicated(sync, api):
    await sync.select_conversation("c1")
    await sync.update_text("hello")
    message = await sync.send()

    await sync.handle_new_message("c1", message)

    assert len(sync.messages) == 1


def test_dismiss_notice(sync):
    sync._notify("a", "b")
    sync.dismiss_notice()
    sync.dismiss_notice(3)

    assert sync.notices == []
