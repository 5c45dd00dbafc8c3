"""Route standard logging through rich so log lines can carry console markup."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_HANDLER_NAME = "agentguides-rich"


def configure_logging(level: int = logging.WARNING, *, console: Console | None = None) -> None:
    """Install (or re-level) the single rich handler on the root logger."""

    root = logging.getLogger()
    for handler in list(root.handlers):
        if handler.get_name() == _HANDLER_NAME:
            root.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        markup=True,
        rich_tracebacks=True,
        show_path=False,
        show_time=level <= logging.DEBUG,
    )
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(handler)
    root.setLevel(level)

