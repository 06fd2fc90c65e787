"""Camera capture session state machine"""
from __future__ import annotations

import asyncio
import io
from typing import Optional

from PIL import Image

from config import get_logger
from src.core import (
    AppError,
    CameraConstraints,
    CaptureError,
    InvalidStateError,
    SessionState,
    UnknownCaptureError,
)
from src.core.ports import CameraDevice, DeviceHandle, EventLevel, EventSink

log = get_logger("capture")

def _as_capture_error(error: Exception) -> CaptureError:
    if isinstance(error, CaptureError):
        return error
    wrapped = UnknownCaptureError()
    wrapped.__cause__ = error
    return wrapped

class CaptureSession:
    """
    Exclusive lifetime of one camera acquisition and one captured frame

    States: idle -> acquiring -> streaming <-> captured -> closed, with
    error reachable from acquiring. close() is valid everywhere and always
    ends in closed. Calls made from the wrong state raise InvalidStateError
    and leave the session untouched.

    Attributes:
        state: Current SessionState
        last_error: CaptureError that moved the session to error, if any
        preview_buffer: JPEG bytes of the captured frame (captured state only)
    """

    def __init__(
        self,
        camera: CameraDevice,
        constraints: Optional[CameraConstraints] = None,
        jpeg_quality: float = 0.8,
        events: Optional[EventSink] = None,
    ) -> None:
        self.camera = camera
        self.constraints = constraints or CameraConstraints()
        self.jpeg_quality = jpeg_quality
        self.events = events

        self.state = SessionState.IDLE
        self.last_error: Optional[CaptureError] = None
        self.preview_buffer: Optional[bytes] = None
        self._handle: Optional[DeviceHandle] = None
        self._frame: Optional[Image.Image] = None
        self._pending: Optional[asyncio.Task] = None
        self._request: Optional[asyncio.Future] = None

    @property
    def device_handle(self) -> Optional[DeviceHandle]:
        return self._handle

    @property
    def is_acquiring(self) -> bool:
        return self._request is not None

    def _require(self, expected: SessionState, operation: str) -> None:
        if self.state is not expected:
            raise InvalidStateError(
                message=f"Cannot {operation} while session is {self.state.value}",
                state=self.state.value,
            )

    def _publish(self, title: str, description: str, level: EventLevel = "info") -> None:
        if self.events is None:
            return
        try:
            self.events.publish(title, description, level)
        except Exception:
            log.exception("Failed to publish capture event")

    def _release(self, handle: DeviceHandle) -> None:
        try:
            handle.stop()
            log.info("Camera released")
        except Exception:
            log.exception("Failed to release camera")
            self._publish("Camera Error", "The camera could not be released cleanly.", "error")

    def _discard_frame(self) -> None:
        if self._frame is not None:
            self._frame.close()
        self._frame = None
        self.preview_buffer = None

    def _encode(self, frame: Image.Image) -> bytes:
        buffer = io.BytesIO()
        frame.convert("RGB").save(
            buffer,
            format="JPEG",
            quality=int(round(self.jpeg_quality * 100)),
        )
        return buffer.getvalue()

    def open(self) -> "asyncio.Task[SessionState]":
        """
        Start acquiring the camera

        The session moves to acquiring and the single device request is
        scheduled before this returns. The request settles on its own even if
        the returned task is cancelled, and a handle that arrives once the
        session has left acquiring is released immediately.

        Returns:
            Task resolving to the state reached when the request settles
            (streaming, error, or closed if close() won the race)

        Raises:
            InvalidStateError: If the session is not idle
            RuntimeError: If called without a running event loop
        """
        self._require(SessionState.IDLE, "open")
        loop = asyncio.get_running_loop()
        self.state = SessionState.ACQUIRING
        log.info(
            f"Requesting camera {self.constraints.width}x{self.constraints.height} "
            f"({self.constraints.facing_mode})"
        )
        self._request = asyncio.ensure_future(self.camera.request(self.constraints))
        self._request.add_done_callback(self._settle)
        self._pending = loop.create_task(self._acquire(self._request))
        self._pending.add_done_callback(self._abandon)
        return self._pending

    async def _acquire(self, request: "asyncio.Future[DeviceHandle]") -> SessionState:
        try:
            await asyncio.shield(request)
        except Exception:
            # outcome already recorded by _settle
            pass
        return self.state

    def _abandon(self, task: "asyncio.Task[SessionState]") -> None:
        self._pending = None
        if task.cancelled() and self.state is SessionState.ACQUIRING:
            log.info("Camera request abandoned; device will be released on arrival")
            self.state = SessionState.CLOSED

    def _settle(self, request: "asyncio.Future[DeviceHandle]") -> None:
        self._request = None
        if request.cancelled():
            if self.state is SessionState.ACQUIRING:
                self.state = SessionState.CLOSED
            return

        failure = request.exception()
        if failure is not None:
            error = _as_capture_error(failure)
            if self.state is SessionState.ACQUIRING:
                self.state = SessionState.ERROR
                self.last_error = error
                log.warning(f"Camera acquisition failed: {error}")
                self._publish("Camera Error", error.message, "error")
            else:
                log.info(f"Camera acquisition failed after session was {self.state.value}: {error}")
            return

        handle = request.result()
        if self.state is not SessionState.ACQUIRING:
            log.info("Camera acquired after session closed, releasing")
            self._release(handle)
            return

        self._handle = handle
        self.state = SessionState.STREAMING
        log.info(f"Camera streaming at {handle.frame_size[0]}x{handle.frame_size[1]}")

    def capture(self) -> bytes:
        """
        Grab the current frame into the preview buffer

        Returns:
            JPEG bytes of the frame, also kept as preview_buffer

        Raises:
            InvalidStateError: If not streaming or no device is held
            CaptureError: If the device fails to deliver a frame
        """
        self._require(SessionState.STREAMING, "capture")
        if self._handle is None:
            raise InvalidStateError(message="No camera stream is available")

        try:
            frame = self._handle.read_frame()
        except AppError:
            raise
        except Exception as e:
            log.exception("Failed to read frame")
            raise UnknownCaptureError(message="Failed to read a frame from the camera") from e

        try:
            encoded = self._encode(frame)
        except Exception as e:
            frame.close()
            log.exception("Failed to encode frame")
            raise UnknownCaptureError(message="Failed to encode the captured frame") from e

        self._frame = frame
        self.preview_buffer = encoded
        self.state = SessionState.CAPTURED
        log.debug(f"Captured frame ({len(self.preview_buffer)} bytes)")
        return self.preview_buffer

    def retake(self) -> None:
        """Drop the captured frame and go back to streaming on the same device"""
        self._require(SessionState.CAPTURED, "retake")
        self._discard_frame()
        self.state = SessionState.STREAMING

    def confirm(self) -> bytes:
        """
        Accept the captured frame and close the session

        Returns:
            JPEG bytes of the confirmed frame
        """
        self._require(SessionState.CAPTURED, "confirm")
        image = self._encode(self._frame) if self._frame is not None else self.preview_buffer
        self.close()
        return image

    def close(self) -> None:
        """
        Release the device, drop any frame and move to closed

        Safe to call from any state and more than once. If an acquisition is
        still in flight, its handle is released as soon as it arrives.
        """
        if self.state is SessionState.CLOSED:
            return

        previous = self.state
        handle, self._handle = self._handle, None
        self._discard_frame()
        self.state = SessionState.CLOSED

        if handle is not None:
            self._release(handle)
        if self._request is not None:
            log.info("Session closed during acquisition; device will be released on arrival")
        if previous is not SessionState.IDLE:
            log.debug(f"Session closed from {previous.value}")

class CaptureSessionSlot:
    """
    Holds the single capture session allowed at a time

    Starting a new session closes the previous one first.
    """

    def __init__(
        self,
        camera: CameraDevice,
        constraints: Optional[CameraConstraints] = None,
        jpeg_quality: float = 0.8,
        events: Optional[EventSink] = None,
    ) -> None:
        self.camera = camera
        self.constraints = constraints
        self.jpeg_quality = jpeg_quality
        self.events = events
        self.current: Optional[CaptureSession] = None

    def new_session(self) -> CaptureSession:
        self.close()
        self.current = CaptureSession(
            self.camera,
            constraints=self.constraints,
            jpeg_quality=self.jpeg_quality,
            events=self.events,
        )
        return self.current

    def close(self) -> None:
        if self.current is not None:
            self.current.close()
