# src/todo_store/bootstrap.py

"""
Composition root.

Builds the one ListRegistry for the process from settings, and the
PathResolver that lookup notifications are routed through.
"""

from __future__ import annotations

import logging

from .config import get_settings
from .core.ports import LookupListener
from .core.state import AppState
from .logging_setup import setup_logging
from .tasks.registry import ListRegistry, PathResolver

logger = logging.getLogger(__name__)


def configure_logging(settings) -> None:
    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.log_dir, console_level=console_level)


def create_initial_state(*, settings=None, on_found: LookupListener | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    settings.root_dir.mkdir(parents=True, exist_ok=True)

    registry = ListRegistry(settings.root_dir, create_attempts=settings.create_attempts)
    resolver = PathResolver(registry, on_found=on_found)
    logger.info("Task store ready root=%s", registry.root)
    return AppState(settings=settings, registry=registry, resolver=resolver)
