# src/todo_store/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..tasks.registry import ListRegistry, PathResolver


@dataclass
class AppState:
    # Settings object (config.Settings or any object with the same attributes).
    settings: object

    registry: ListRegistry
    resolver: PathResolver
