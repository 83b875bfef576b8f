"""Console helpers shared by CLI commands."""

import logging
from contextlib import contextmanager
from typing import Iterator

from wellness_record.logging_audit.logger import CONSOLE_HANDLER_NAME


@contextmanager
def console_logging_suppressed(enabled: bool = True) -> Iterator[None]:
    """Silence the console log handler, e.g. while printing JSON to stdout."""
    handler = None
    original_level = None
    if enabled:
        for candidate in logging.getLogger().handlers:
            if candidate.get_name() == CONSOLE_HANDLER_NAME:
                handler = candidate
                original_level = candidate.level
                candidate.setLevel(logging.CRITICAL + 1)
                break
    try:
        yield
    finally:
        if handler is not None:
            handler.setLevel(original_level)
