"""Logging setup with Loguru."""

import logging
import sys
from pathlib import Path
from types import FrameType
from typing import Optional, Union

from loguru import logger

__all__ = ["setup_logging", "InterceptHandler"]

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)
TEXT_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"


class InterceptHandler(logging.Handler):
    """Route standard-library log records (playwright, asyncio, tenacity) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: Union[str, int] = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where originated the logged message
        frame: Optional[FrameType] = logging.currentframe()
        depth = 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(
    level: str = "INFO",
    json_format: bool = False,
    logs_dir: Union[str, Path, None] = "logs",
    diagnose: bool = False,
) -> None:
    """
    Setup Loguru logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: Serialise the rotating file sink as JSON lines
        logs_dir: Directory for file sinks; None disables file logging
        diagnose: Include variable values in tracebacks (never enable with real credentials)
    """
    level = level.upper()
    logger.remove()

    logger.add(sys.stdout, format=CONSOLE_FORMAT, level=level, colorize=True)

    if logs_dir is not None:
        logs_path = Path(logs_dir)
        logs_path.mkdir(parents=True, exist_ok=True)

        if json_format:
            logger.add(
                logs_path / "dvsa_checker.jsonl",
                format="{message}",
                level=level,
                rotation="10 MB",
                retention="30 days",
                compression="zip",
                serialize=True,
            )
        else:
            logger.add(
                logs_path / "dvsa_checker.log",
                format=TEXT_FORMAT,
                level=level,
                rotation="10 MB",
                retention="30 days",
                compression="zip",
            )

        logger.add(
            logs_path / "errors_{time:YYYY-MM-DD}.log",
            format=TEXT_FORMAT,
            level="ERROR",
            rotation="10 MB",
            retention="90 days",
            backtrace=True,
            diagnose=diagnose,
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    logging.root.setLevel(getattr(logging, level, logging.INFO))

    logger.info(f"Logging initialized (level={level}, json={json_format})")
