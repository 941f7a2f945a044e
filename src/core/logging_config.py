"""Configuración de logging.

Un único `RichHandler` en el root logger; los módulos usan
`logging.getLogger(__name__)`.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(level: int | str = logging.INFO, *, console: Console | None = None) -> None:
    """Configura el root logger (idempotente: reemplaza handlers previos)."""

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=False,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    logging.basicConfig(level=level, handlers=[handler], force=True)
