"""Gradio web interface for text, file and camera sentiment analysis"""
from __future__ import annotations

import io
import mimetypes
from pathlib import Path
from typing import Any, List, Optional, Tuple

import gradio as gr
from PIL import Image

from config import logger, settings
from src.analysis import get_analysis_service, get_record_store, get_session_slot
from src.core import AnalysisInput, AppError, SessionState
from src.core.ports import IAnalysisService

HISTORY_COLUMNS = ["id", "created_at", "source", "sentiment", "confidence", "ocr_confidence", "text"]

CameraView = Tuple[str, Optional[Image.Image], dict]

async def _run(request: AnalysisInput) -> dict:
    srv: IAnalysisService = get_analysis_service()
    try:
        result = await srv.analyze(request)
        return result.model_dump()
    except AppError as e:
        logger.warning(f"AppError: {e}")
        return e.to_dict()

async def analyze_text_ui(text: str) -> dict:
    """
    Gradio handler for direct text entry

    Returns:
        Dictionary containing either:
            - AnalysisResult fields on success
            - Error dictionary with 'error' key on failure
    """
    logger.info("Received text request")
    return await _run(AnalysisInput.from_text(text or ""))

async def analyze_file_ui(file_path: Optional[str]) -> dict:
    """
    Gradio handler for uploaded files

    Image files go through OCR; anything else is read as UTF-8 text.
    """
    logger.info("Received file request")
    if not file_path:
        return await _run(AnalysisInput.from_file(b""))
    path = Path(file_path)
    content_type, _ = mimetypes.guess_type(path.name)
    return await _run(
        AnalysisInput.from_file(path.read_bytes(), content_type=content_type, filename=path.name)
    )

async def analyze_snapshot_ui(image: Optional[Image.Image]) -> dict:
    """Gradio handler for a browser webcam snapshot, treated as camera input"""
    logger.info("Received webcam snapshot")
    if image is None:
        return await _run(AnalysisInput.from_camera(b""))
    buffer = io.BytesIO()
    image.convert("RGB").save(buffer, format="JPEG", quality=int(round(settings.jpeg_quality * 100)))
    return await _run(AnalysisInput.from_camera(buffer.getvalue()))

def _preview(data: Optional[bytes]) -> Optional[Image.Image]:
    return Image.open(io.BytesIO(data)) if data else None

async def open_camera_ui() -> CameraView:
    """Start a new capture session on the host camera"""
    session = get_session_slot().new_session()
    state = await session.open()
    if state is SessionState.ERROR and session.last_error is not None:
        return f"Camera Error: {session.last_error.message}", None, {}
    return "Camera ready", None, {}

def capture_ui() -> CameraView:
    session = get_session_slot().current
    try:
        if session is None:
            return "Open the camera first", None, {}
        data = session.capture()
    except AppError as e:
        return e.message, None, {}
    return "Photo captured", _preview(data), {}

def retake_ui() -> CameraView:
    session = get_session_slot().current
    try:
        if session is None:
            return "Open the camera first", None, {}
        session.retake()
    except AppError as e:
        return e.message, None, {}
    return "Camera ready", None, {}

async def use_photo_ui() -> CameraView:
    """Confirm the captured photo and analyze it"""
    session = get_session_slot().current
    if session is None or session.state is not SessionState.CAPTURED:
        return "Capture a photo first", None, {}
    preview = _preview(session.preview_buffer)
    try:
        result = await get_analysis_service().analyze_capture(session)
    except AppError as e:
        logger.warning(f"AppError: {e}")
        return "Camera closed", preview, e.to_dict()
    return "Camera closed", preview, result.model_dump()

def cancel_camera_ui() -> CameraView:
    get_session_slot().close()
    return "Camera closed", None, {}

def history_ui(query: str = "") -> List[List[Any]]:
    """Saved analyses matching query, newest first"""
    try:
        records = get_record_store().search(query or "")
    except AppError as e:
        logger.warning(f"AppError: {e}")
        return []
    return [[getattr(r, col) for col in HISTORY_COLUMNS] for r in records]

def delete_record_ui(record_id: str, query: str = "") -> Tuple[str, List[List[Any]]]:
    try:
        deleted = get_record_store().delete((record_id or "").strip())
    except AppError as e:
        logger.warning(f"AppError: {e}")
        return e.message, history_ui(query)
    message = "Analysis deleted" if deleted else f"No analysis with id '{record_id}'"
    return message, history_ui(query)

with gr.Blocks(title="Tone Lens") as demo:
    gr.Markdown("# Tone Lens\nAnalyze the sentiment of typed text, uploaded files or camera captures")

    with gr.Tab("Text"):
        text_in = gr.Textbox(label="Text", lines=5, placeholder="Enter text to analyze...")
        text_btn = gr.Button("Analyze text", variant="primary")
        text_out = gr.JSON(label="Analysis result")
        text_btn.click(analyze_text_ui, inputs=text_in, outputs=text_out)

    with gr.Tab("File"):
        file_in = gr.File(label="Text or image file", type="filepath")
        file_btn = gr.Button("Analyze file", variant="primary")
        file_out = gr.JSON(label="Analysis result")
        file_btn.click(analyze_file_ui, inputs=file_in, outputs=file_out)

    with gr.Tab("Camera"):
        cam_status = gr.Textbox(label="Status", interactive=False)
        cam_preview = gr.Image(label="Captured photo", type="pil", interactive=False)
        cam_out = gr.JSON(label="Analysis result")
        with gr.Row():
            open_btn = gr.Button("Open camera")
            capture_btn = gr.Button("Capture photo", variant="primary")
            retake_btn = gr.Button("Retake")
            use_btn = gr.Button("Use photo", variant="primary")
            cancel_btn = gr.Button("Cancel")
        camera_outputs = [cam_status, cam_preview, cam_out]
        open_btn.click(open_camera_ui, outputs=camera_outputs)
        capture_btn.click(capture_ui, outputs=camera_outputs)
        retake_btn.click(retake_ui, outputs=camera_outputs)
        use_btn.click(use_photo_ui, outputs=camera_outputs)
        cancel_btn.click(cancel_camera_ui, outputs=camera_outputs)

        snapshot_in = gr.Image(label="Browser webcam", sources=["webcam"], type="pil")
        snapshot_btn = gr.Button("Analyze snapshot")
        snapshot_btn.click(analyze_snapshot_ui, inputs=snapshot_in, outputs=cam_out)

    with gr.Tab("History"):
        query_in = gr.Textbox(label="Search")
        history_table = gr.Dataframe(headers=HISTORY_COLUMNS, interactive=False)
        refresh_btn = gr.Button("Refresh")
        delete_id = gr.Textbox(label="Record id")
        delete_btn = gr.Button("Delete", variant="stop")
        delete_status = gr.Textbox(label="Status", interactive=False)
        refresh_btn.click(history_ui, inputs=query_in, outputs=history_table)
        query_in.submit(history_ui, inputs=query_in, outputs=history_table)
        delete_btn.click(delete_record_ui, inputs=[delete_id, query_in], outputs=[delete_status, history_table])
