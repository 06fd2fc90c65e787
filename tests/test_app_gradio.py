import pytest
from PIL import Image

pytest.importorskip("gradio")

from src.analysis import AnalysisService
from src.capture import CaptureSessionSlot
from src.core import SessionState, DeviceNotFoundError
from src.storage import JsonRecordStore
from src.ui import app_gradio

from conftest import FakeCamera


@pytest.fixture
def wired(monkeypatch, tmp_path, make_extractor, sink, camera):
    extractor, factory = make_extractor("Outstanding, just perfect", 93)
    records = JsonRecordStore(path=str(tmp_path / "analyses.json"))
    service = AnalysisService(extractor, store=records, events=sink)
    slot = CaptureSessionSlot(camera, events=sink)
    monkeypatch.setattr(app_gradio, "get_analysis_service", lambda: service)
    monkeypatch.setattr(app_gradio, "get_record_store", lambda: records)
    monkeypatch.setattr(app_gradio, "get_session_slot", lambda: slot)
    return service, records, slot, factory


@pytest.mark.asyncio
async def test_text_handler_returns_result_dict(wired):
    payload = await app_gradio.analyze_text_ui("I love it")
    assert payload["sentiment"] == "positive"
    assert payload["source"] == "text"


@pytest.mark.asyncio
async def test_text_handler_returns_error_dict(wired):
    payload = await app_gradio.analyze_text_ui("   ")
    assert payload["error"]["code"] == "EMPTY_INPUT"


@pytest.mark.asyncio
async def test_file_handler_uses_content_type_from_name(wired, tmp_path):
    _, _, _, factory = wired
    note = tmp_path / "note.txt"
    note.write_text("awful, just awful", encoding="utf-8")
    payload = await app_gradio.analyze_file_ui(str(note))
    assert payload["sentiment"] == "negative"
    assert payload["ocr_confidence"] is None

    photo = tmp_path / "photo.png"
    Image.new("RGB", (8, 8)).save(photo)
    payload = await app_gradio.analyze_file_ui(str(photo))
    assert payload["source"] == "file"
    assert payload["ocr_confidence"] == 93
    assert len(factory.engines) == 1


@pytest.mark.asyncio
async def test_file_handler_without_file(wired):
    payload = await app_gradio.analyze_file_ui(None)
    assert payload["error"]["code"] == "EMPTY_INPUT"


@pytest.mark.asyncio
async def test_snapshot_handler_is_camera_source(wired):
    payload = await app_gradio.analyze_snapshot_ui(Image.new("RGB", (16, 16), "white"))
    assert payload["source"] == "camera"
    assert payload["ocr_confidence"] == 93


@pytest.mark.asyncio
async def test_camera_flow(wired, camera):
    _, records, slot, _ = wired
    status, preview, _ = await app_gradio.open_camera_ui()
    assert status == "Camera ready"

    status, preview, _ = app_gradio.capture_ui()
    assert status == "Photo captured"
    assert preview is not None

    status, preview, _ = app_gradio.retake_ui()
    assert preview is None
    assert slot.current.state is SessionState.STREAMING

    app_gradio.capture_ui()
    status, preview, payload = await app_gradio.use_photo_ui()
    assert payload["source"] == "camera"
    assert slot.current.state is SessionState.CLOSED
    assert len(camera.requests) == 1
    assert camera.handles[0].stop_calls == 1

    rows = app_gradio.history_ui()
    assert rows[0][2] == "camera"


@pytest.mark.asyncio
async def test_camera_error_message(wired, monkeypatch, sink):
    slot = CaptureSessionSlot(FakeCamera(error=DeviceNotFoundError()), events=sink)
    monkeypatch.setattr(app_gradio, "get_session_slot", lambda: slot)
    status, _, _ = await app_gradio.open_camera_ui()
    assert status == "Camera Error: No camera found on this device."
    status, _, _ = app_gradio.capture_ui()
    assert "error" in status
    app_gradio.cancel_camera_ui()
    assert slot.current.state is SessionState.CLOSED


def test_capture_before_open(wired):
    status, _, _ = app_gradio.capture_ui()
    assert status == "Open the camera first"


@pytest.mark.asyncio
async def test_history_search_and_delete(wired):
    _, records, _, _ = wired
    await app_gradio.analyze_text_ui("best day ever")
    await app_gradio.analyze_text_ui("worst day ever")
    assert len(app_gradio.history_ui()) == 2

    rows = app_gradio.history_ui("best")
    assert len(rows) == 1
    message, rows = app_gradio.delete_record_ui(rows[0][0])
    assert message == "Analysis deleted"
    assert len(rows) == 1
    message, _ = app_gradio.delete_record_ui("missing")
    assert message == "No analysis with id 'missing'"
