import logging
import os

from rich.console import Console
from rich.logging import RichHandler

DEBUG_ENV = "DIAGNAV_DEBUG"


def get_logger(name: str, show_time: bool = False) -> logging.Logger:
    """
    Return a logger writing through rich to stderr.
    Stdout is reserved for the language server stream and CLI output.
    """
    logger = logging.getLogger(name)

    debug_mode = os.environ.get(DEBUG_ENV) is not None
    logger.setLevel(logging.DEBUG if debug_mode else logging.INFO)

    if logger.handlers:
        return logger

    console = Console(stderr=True)
    handler = RichHandler(
        console=console,
        rich_tracebacks=True,
        show_path=False,
        show_level=True,
        show_time=show_time or debug_mode,
        tracebacks_width=None,
        tracebacks_code_width=None,
    )

    handler.setLevel(logging.DEBUG if debug_mode else logging.INFO)
    logger.addHandler(handler)
    logger.propagate = False

    return logger
