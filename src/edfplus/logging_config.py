"""Logging setup for the edfplus CLI. Library modules only use module loggers."""

import logging
import logging.config
import os
import sys

from pathlib import Path
from typing import Any

from edfplus import constants

_FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_configured = False


def get_log_dir() -> Path:
    """Log directory, created with owner-only permissions."""
    log_dir = constants.DEFAULT_LOG_DIR
    os.makedirs(log_dir, mode=0o700, exist_ok=True)
    return log_dir


def get_log_path() -> Path:
    return get_log_dir() / constants.DEFAULT_LOG_FILE


def _file_logging_settings() -> dict[str, Any]:
    """The ``[logging]`` table of the config file, or {}."""
    from edfplus.config import load_config

    section = load_config().get("logging", {})
    return section if isinstance(section, dict) else {}


def _rotating_file_handler(settings: dict[str, Any]) -> dict[str, Any]:
    max_size_mb = settings.get(
        "max_size_mb", constants.DEFAULT_LOG_MAX_BYTES // (1024 * 1024)
    )
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "level": str(settings.get("level", "DEBUG")).upper(),
        "formatter": "file",
        "filename": str(get_log_path()),
        "maxBytes": int(max_size_mb * 1024 * 1024),
        "backupCount": settings.get("backup_count", constants.DEFAULT_LOG_BACKUP_COUNT),
        "encoding": "utf-8",
    }


def _build_logging_config(
    verbose: bool = False,
    console_format: str | None = None,
) -> dict[str, Any]:
    """
    Build the dictConfig dictionary.

    The console handler writes to stderr at WARNING (DEBUG when verbose). A
    rotating file handler is added only when ``[logging] enabled = true``.
    """
    settings = _file_logging_settings()

    config: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "console": {"format": console_format or _FILE_FORMAT},
            "file": {"format": _FILE_FORMAT},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": "DEBUG" if verbose else "WARNING",
                "formatter": "console",
                "stream": "ext://sys.stderr",
            },
        },
        "root": {"level": "DEBUG", "handlers": ["console"]},
    }

    if settings.get("enabled", False):
        config["handlers"]["file"] = _rotating_file_handler(settings)
        config["root"]["handlers"].append("file")

    return config


def setup_logging(*, verbose: bool = False, console_format: str | None = None) -> None:
    """Configure root logging once per process; later calls are no-ops."""
    global _configured

    if _configured:
        return

    try:
        logging.config.dictConfig(
            _build_logging_config(verbose=verbose, console_format=console_format)
        )
    except (ValueError, TypeError, AttributeError, ImportError, OSError) as e:
        sys.stderr.write(f"WARNING: Failed to configure logging: {e}\n")
        logging.basicConfig(
            level=logging.DEBUG if verbose else logging.WARNING,
            format=console_format or "%(levelname)s: %(message)s",
        )

    _configured = True
