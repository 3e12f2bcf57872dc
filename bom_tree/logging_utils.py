from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | int = "INFO") -> None:
    """Install one stream handler on the root logger.

    Meant for the entry scripts only; repeated calls adjust the level
    without stacking handlers.
    """
    root = logging.getLogger()
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    if not any(getattr(handler, "_bom_tree_handler", False) for handler in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._bom_tree_handler = True  # type: ignore[attr-defined]
        root.addHandler(handler)

    root.setLevel(level)
