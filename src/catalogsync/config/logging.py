"""Shared logging helpers for catalogsync."""

from __future__ import annotations

import logging
import os


def configure_logging(*, level: int | str | None = None, force: bool = False) -> None:
    """Initialise the root logger once with sensible defaults.

    Parameters mirror ``logging.basicConfig`` with a simplified contract: the level
    defaults to ``CATALOGSYNC_LOG_LEVEL`` (or INFO) and the format is terse enough for
    CLI output. An unknown level name raises ``ValueError``. Pass ``force=True`` to
    reconfigure during tests or long-running entry points.
    """

    resolved = level if level is not None else os.getenv("CATALOGSYNC_LOG_LEVEL", "INFO")
    if isinstance(resolved, str):
        resolved = resolved.strip().upper() or "INFO"
        if resolved not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {resolved!r}")

    logging.basicConfig(
        level=resolved,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
