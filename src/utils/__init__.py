"""Shared helpers used by the keypad_overlay package.

    fs              YAML loading, atomic file output
    logging_config  root logger setup with context fields

Nothing here imports keypad_overlay.
"""

from . import fs, logging_config
from .logging_config import get_logger, pop_context, push_context, setup_logging

__all__ = ["fs", "logging_config", "get_logger", "pop_context", "push_context", "setup_logging"]
