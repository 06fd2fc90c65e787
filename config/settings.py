"""Application settings loaded from .env file"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import Optional, Literal

LOG_LEVEL = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
FACING_MODE = Literal["environment", "user"]

class Settings(BaseSettings):
    """
    Application configuration loaded from environment variables (.env)
    """
    # Logging configuration
    log_level: LOG_LEVEL = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL (default: INFO)"
    )
    log_format: str = Field(
        default="%(asctime)s | %(levelname)-8s | %(module)s:%(funcName)s:%(lineno)d - %(message)s",
        description="Default log format (can be customized if needed)"
    )
    log_date_format: str = Field(
        default="%Y-%m-%d %H:%M:%S",
        description="Date/time format for logs"
    )
    log_to_file: bool = Field(
        default=False,
        description="If true, enable logging to a file"
    )
    log_file_path: str = Field(
        default="logs/app.log",
        description="Path to log file"
    )
    log_file_rotation: str = Field(
        default="midnight",
        description="Log file rotation interval"
    )
    log_file_retention: int = Field(
        default=7,
        ge=1,
        description="Number of days to retain log files"
    )

    # Camera capture
    camera_index: int = Field(
        default=0,
        ge=0,
        description="OpenCV device index used by the default camera"
    )
    camera_width: int = Field(
        default=1280,
        gt=0,
        description="Preferred capture width in pixels"
    )
    camera_height: int = Field(
        default=720,
        gt=0,
        description="Preferred capture height in pixels"
    )
    camera_facing_mode: FACING_MODE = Field(
        default="environment",
        description="Preferred camera: 'environment' (rear) or 'user' (front)"
    )
    jpeg_quality: float = Field(
        default=0.8,
        gt=0.0,
        le=1.0,
        description="JPEG quality (0-1] for captured frames"
    )

    # OCR
    ocr_language: str = Field(
        default="eng",
        description="Tesseract language code"
    )
    tesseract_cmd: Optional[str] = Field(
        default=None,
        description="Path to the tesseract binary; PATH lookup is used when unset"
    )

    # Records and notifications
    records_path: str = Field(
        default="data/analyses.json",
        description="JSON file holding saved analyses"
    )
    auto_save: bool = Field(
        default=True,
        description="If true, every successful analysis is saved to the record store"
    )
    notifications_enabled: bool = Field(
        default=True,
        description="If false, analysis events are not published"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

settings = Settings()
