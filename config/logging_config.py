"""
Logging configuration helpers and shared logger instance
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import List

from config.settings import Settings, settings

# Third-party loggers that are chatty at DEBUG/INFO
_QUIET_LOGGERS = ("PIL", "httpx", "urllib3", "pytesseract")

def _build_handlers(cfg: Settings) -> List[logging.Handler]:
    """
    Create the console handler and, when enabled, a timed rotating file handler

    Args:
        cfg: Settings to read LOG_FORMAT, LOG_TO_FILE and LOG_FILE_* from

    Returns:
        Handlers sharing one formatter
    """
    formatter = logging.Formatter(fmt=cfg.log_format, datefmt=cfg.log_date_format)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    handlers: List[logging.Handler] = [console_handler]

    if cfg.log_to_file:
        log_path = Path(cfg.log_file_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.TimedRotatingFileHandler(
            filename=log_path,
            when=cfg.log_file_rotation,
            interval=1,
            backupCount=cfg.log_file_retention,
            encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    return handlers

def setup_logger(name: str = "tone-lens", cfg: Settings = settings) -> logging.Logger:
    """
    Configure and return a named logger with console and optional file output

    Handlers are attached only once, so repeated calls are safe

    Args:
        name: Logger name (default 'tone-lens')
        cfg: Settings instance (defaults to the module-level settings)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        logger.setLevel(getattr(logging, cfg.log_level.upper(), logging.INFO))
        for handler in _build_handlers(cfg):
            logger.addHandler(handler)

        for noisy in _QUIET_LOGGERS:
            logging.getLogger(noisy).setLevel(logging.WARNING)

    logger.propagate = False
    return logger

def get_logger(component: str) -> logging.Logger:
    """Return a child of the application logger, e.g. 'tone-lens.capture'"""
    return logger.getChild(component)

logger = setup_logger()
