import asyncio
import io

import pytest
from PIL import Image

from src.capture import CaptureSession, CaptureSessionSlot, OpenCVCamera, devices
from src.core import (
    CameraConstraints,
    DeviceBusyError,
    DeviceNotFoundError,
    InvalidStateError,
    PermissionDeniedError,
    SessionState,
    UnknownCaptureError,
    UnsupportedPlatformError,
)

from conftest import FakeCamera, FakeCV2, FakeVideoCapture


async def _streaming(camera, **kwargs) -> CaptureSession:
    session = CaptureSession(camera, **kwargs)
    assert await session.open() is SessionState.STREAMING
    return session


def test_close_from_idle_makes_no_request(camera):
    session = CaptureSession(camera)
    session.close()
    assert session.state is SessionState.CLOSED
    assert camera.requests == []
    session.close()
    assert session.state is SessionState.CLOSED


def test_open_requires_running_loop(camera):
    session = CaptureSession(camera)
    with pytest.raises(RuntimeError):
        session.open()
    assert session.state is SessionState.IDLE


@pytest.mark.asyncio
async def test_open_moves_to_acquiring_then_streaming(camera):
    session = CaptureSession(camera)
    task = session.open()
    assert session.state is SessionState.ACQUIRING
    assert session.is_acquiring
    assert await task is SessionState.STREAMING
    assert session.state is SessionState.STREAMING
    assert session.device_handle is camera.handles[0]
    assert not session.is_acquiring


@pytest.mark.asyncio
async def test_open_sends_preferred_constraints(camera):
    await _streaming(camera)
    assert camera.requests == [CameraConstraints(width=1280, height=720, facing_mode="environment")]


@pytest.mark.asyncio
async def test_open_twice_is_rejected(camera):
    session = CaptureSession(camera)
    task = session.open()
    with pytest.raises(InvalidStateError):
        session.open()
    await task
    with pytest.raises(InvalidStateError):
        session.open()
    assert len(camera.requests) == 1


@pytest.mark.asyncio
async def test_capture_fills_preview_with_jpeg(camera):
    session = await _streaming(camera)
    data = session.capture()
    assert session.state is SessionState.CAPTURED
    assert session.preview_buffer == data
    with Image.open(io.BytesIO(data)) as img:
        assert img.format == "JPEG"
        assert img.size == camera.handles[0].frame_size


@pytest.mark.asyncio
async def test_capture_outside_streaming_is_rejected(camera):
    session = CaptureSession(camera)
    with pytest.raises(InvalidStateError):
        session.capture()
    session = await _streaming(camera)
    session.capture()
    with pytest.raises(InvalidStateError):
        session.capture()


@pytest.mark.asyncio
async def test_retake_reuses_device_handle(camera):
    session = await _streaming(camera)
    handle = session.device_handle
    session.capture()
    session.retake()
    assert session.state is SessionState.STREAMING
    assert session.preview_buffer is None
    assert session.device_handle is handle
    assert len(camera.requests) == 1
    assert handle.stop_calls == 0

    session.capture()
    assert handle.reads == 2


@pytest.mark.asyncio
async def test_retake_and_confirm_require_captured(camera):
    session = await _streaming(camera)
    with pytest.raises(InvalidStateError):
        session.retake()
    with pytest.raises(InvalidStateError):
        session.confirm()


@pytest.mark.asyncio
async def test_confirm_returns_image_and_closes(camera):
    session = await _streaming(camera)
    handle = session.device_handle
    session.capture()
    data = session.confirm()
    with Image.open(io.BytesIO(data)) as img:
        assert img.format == "JPEG"
    assert session.state is SessionState.CLOSED
    assert session.device_handle is None
    assert session.preview_buffer is None
    assert handle.stop_calls == 1


@pytest.mark.asyncio
async def test_close_releases_exactly_once(camera):
    session = await _streaming(camera)
    handle = session.device_handle
    session.close()
    session.close()
    assert handle.stop_calls == 1
    with pytest.raises(InvalidStateError):
        session.capture()


@pytest.mark.asyncio
async def test_close_while_acquiring_releases_late_handle():
    gate = asyncio.Event()
    camera = FakeCamera(gate=gate)
    session = CaptureSession(camera)
    task = session.open()
    await asyncio.sleep(0)
    session.close()
    assert session.state is SessionState.CLOSED

    gate.set()
    assert await task is SessionState.CLOSED
    assert session.device_handle is None
    assert camera.handles[0].stop_calls == 1


async def _settled(predicate, timeout: float = 2.0) -> None:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate() and loop.time() < deadline:
        await asyncio.sleep(0.01)


@pytest.mark.asyncio
async def test_cancelled_open_releases_thread_backed_device(monkeypatch):
    capture = FakeVideoCapture()
    monkeypatch.setattr(devices, "_load_cv2", lambda: FakeCV2(capture, delay=0.2))
    session = CaptureSession(OpenCVCamera())
    task = session.open()
    await asyncio.sleep(0.05)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    assert session.state is SessionState.CLOSED
    assert session.is_acquiring

    session.close()
    await _settled(lambda: capture.released > 0)
    assert capture.released == 1
    assert session.device_handle is None
    assert not session.is_acquiring


@pytest.mark.asyncio
async def test_open_cancelled_before_it_runs_releases_late_handle():
    gate = asyncio.Event()
    camera = FakeCamera(gate=gate)
    session = CaptureSession(camera)
    task = session.open()
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    assert session.state is SessionState.CLOSED

    gate.set()
    await _settled(lambda: not session.is_acquiring)
    assert camera.handles[0].stop_calls == 1
    assert session.device_handle is None
    assert len(camera.requests) == 1


@pytest.mark.asyncio
async def test_close_while_acquiring_then_failure_stays_closed(sink):
    gate = asyncio.Event()
    session = CaptureSession(FakeCamera(error=DeviceBusyError(), gate=gate), events=sink)
    task = session.open()
    session.close()
    gate.set()
    assert await task is SessionState.CLOSED
    assert session.last_error is None
    assert sink.events == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error, expected, message",
    [
        (PermissionDeniedError(), PermissionDeniedError, "Camera access denied"),
        (DeviceNotFoundError(), DeviceNotFoundError, "No camera found"),
        (DeviceBusyError(), DeviceBusyError, "already in use"),
        (UnsupportedPlatformError(), UnsupportedPlatformError, "not supported"),
        (OSError("driver crashed"), UnknownCaptureError, "Unable to access camera"),
    ],
)
async def test_acquisition_failures_are_classified(error, expected, message, sink):
    session = CaptureSession(FakeCamera(error=error), events=sink)
    assert await session.open() is SessionState.ERROR
    assert isinstance(session.last_error, expected)
    assert message in session.last_error.message
    assert sink.events == [("error", "Camera Error", session.last_error.message)]

    with pytest.raises(InvalidStateError):
        session.capture()
    session.close()
    assert session.state is SessionState.CLOSED


@pytest.mark.asyncio
async def test_unknown_failure_keeps_cause():
    cause = OSError("driver crashed")
    session = CaptureSession(FakeCamera(error=cause))
    await session.open()
    assert session.last_error.__cause__ is cause


@pytest.mark.asyncio
async def test_jpeg_quality_changes_output(camera):
    low = await _streaming(camera, jpeg_quality=0.1)
    high = await _streaming(camera, jpeg_quality=1.0)
    assert len(low.capture()) < len(high.capture())


@pytest.mark.asyncio
async def test_slot_keeps_one_session_open(camera):
    slot = CaptureSessionSlot(camera)
    first = slot.new_session()
    await first.open()
    second = slot.new_session()
    assert first.state is SessionState.CLOSED
    assert camera.handles[0].stop_calls == 1
    assert slot.current is second
    assert second.state is SessionState.IDLE
    slot.close()
    assert second.state is SessionState.CLOSED


class UnencodableFrame:
    def __init__(self):
        self.closed = False

    def convert(self, mode):
        raise OSError("broken pixel buffer")

    def close(self):
        self.closed = True


@pytest.mark.asyncio
async def test_encode_failure_leaves_session_streaming(camera):
    session = await _streaming(camera)
    handle = session.device_handle
    frame = UnencodableFrame()
    handle.read_frame = lambda: frame

    with pytest.raises(UnknownCaptureError):
        session.capture()
    assert frame.closed
    assert session.state is SessionState.STREAMING
    assert session.preview_buffer is None

    del handle.read_frame
    assert session.capture()
    assert session.state is SessionState.CAPTURED
