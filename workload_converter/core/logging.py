from __future__ import annotations

import logging
import os

from rich.console import Console
from rich.logging import RichHandler


LOG_LEVEL_ENV = "WORKLOAD_CONVERTER_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"


def resolve_level(level: str | int | None = None) -> int:
    """Map a level name (or the environment default) to a logging level."""
    if isinstance(level, int):
        return level
    name = (level or os.getenv(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL).upper()
    return getattr(logging, name, logging.WARNING)


def setup_logging(level: str | int | None = None) -> None:
    """Configure the root logger once, sending records to stderr through rich.

    If handlers are already installed only the level is updated.
    """
    resolved = resolve_level(level)
    root = logging.getLogger()
    if root.handlers:
        root.setLevel(resolved)
        return

    logging.basicConfig(
        level=resolved,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )
