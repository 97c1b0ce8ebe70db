"""Logging setup for the overlay command-line tools.

``setup_logging()`` attaches a console handler (stderr) and optionally a
file handler to the root logger.  Library modules never configure
logging; they only call ``logging.getLogger(__name__)``.

Every record is prefixed with the current *context*: key/value pairs such
as the model and output mode being generated, held in a ContextVar and
managed with ``push_context()`` / ``pop_context()``.

Line formats:
    human  2026-10-19T13:45:12.345Z | INFO     | model=voyager mode=cut | Tiling 4 overlay(s)
    json   {"t": "...", "lvl": "INFO", "name": "...", "model": "voyager", "msg": "..."}

Calling ``setup_logging()`` again replaces the handlers it installed
earlier and leaves handlers added by anyone else alone.
"""

import contextvars
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

_context: contextvars.ContextVar[Dict[str, Any]] = contextvars.ContextVar(
    "overlay_log_context", default={}
)

# Handlers owned by setup_logging(), removed on reconfiguration
_installed: List[logging.Handler] = []

_LEVEL_COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
}
_RESET = "\033[0m"


class ContextFormatter(logging.Formatter):
    """Render records with the active context fields.

    Parameters
    ----------
    fmt_mode : str
        ``"human"`` or ``"json"``.
    use_color : bool
        Colour the level name; only honoured when stderr is a terminal.
    tz : str
        ``"UTC"`` or ``"local"`` timestamps.
    """

    def __init__(self, fmt_mode: str = "human", use_color: bool = True, tz: str = "UTC"):
        super().__init__()
        if fmt_mode not in ("human", "json"):
            raise ValueError(f"Unknown log format: {fmt_mode}")
        self.fmt_mode = fmt_mode
        self.use_color = use_color and sys.stderr.isatty()
        self.tz = tz

    def _timestamp(self, record: logging.LogRecord) -> datetime:
        if self.tz == "UTC":
            return datetime.fromtimestamp(record.created, tz=timezone.utc)
        return datetime.fromtimestamp(record.created)

    def format(self, record: logging.LogRecord) -> str:
        ts = self._timestamp(record)
        fields = _context.get()

        if self.fmt_mode == "json":
            payload: Dict[str, Any] = {
                "t": ts.isoformat(),
                "lvl": record.levelname,
                "name": record.name,
                **fields,
                "msg": record.getMessage(),
            }
            if record.exc_info:
                payload["exc"] = self.formatException(record.exc_info)
            return json.dumps(payload)

        level = f"{record.levelname:8s}"
        if self.use_color:
            level = f"{_LEVEL_COLORS.get(record.levelname, '')}{level}{_RESET}"

        head = [ts.strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z", level]
        if fields:
            head.append(" ".join(f"{k}={v}" for k, v in fields.items()))
        line = " | ".join(head + [record.getMessage()])

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    *,
    json: bool = False,
    color: bool = True,
    to_stderr: bool = True,
    tz: str = "UTC",
    capture_warnings: bool = True,
    quiet_libs: Optional[List[str]] = None,
    context: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Configure the root logger.

    Parameters
    ----------
    log_level : str
        Level name, case-insensitive ("DEBUG", "info", ...).
    log_file : str, optional
        Also append records to this file; parent directories are created.
    json : bool
        Write JSON lines to the file instead of the human format.
    color : bool
        Colour level names on the console.
    to_stderr : bool
        Install the console handler.
    tz : str
        "UTC" (default) or "local".
    capture_warnings : bool
        Route ``warnings.warn`` through logging.
    quiet_libs : list[str], optional
        Loggers held at WARNING (e.g. ``["pypdf"]``).
    context : dict, optional
        Context fields to push before returning.

    Returns
    -------
    dict
        ``{"handlers": [...]}``, the handlers installed by this call.

    Raises
    ------
    ValueError
        If *log_level* is not a logging level name.
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {log_level}")

    root = logging.getLogger()
    while _installed:
        handler = _installed.pop()
        root.removeHandler(handler)
        handler.close()

    root.setLevel(level)

    if to_stderr:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(ContextFormatter("human", color, tz))
        _installed.append(console)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(
            ContextFormatter("json" if json else "human", use_color=False, tz=tz)
        )
        _installed.append(file_handler)

    for handler in _installed:
        root.addHandler(handler)

    for lib in quiet_libs or []:
        logging.getLogger(lib).setLevel(logging.WARNING)

    logging.captureWarnings(capture_warnings)

    if context:
        push_context(**context)

    return {"handlers": list(_installed)}


def get_logger(name: str) -> logging.Logger:
    """Get logger by name (typically ``__name__``)."""
    return logging.getLogger(name)


def push_context(**kwargs: Any) -> None:
    """Add fields to every subsequent record, e.g. ``push_context(model="dm1xl")``."""
    _context.set({**_context.get(), **kwargs})


def pop_context(keys: Optional[List[str]] = None) -> None:
    """Drop the named context fields, or all of them when *keys* is None."""
    if keys is None:
        _context.set({})
        return
    _context.set({k: v for k, v in _context.get().items() if k not in keys})
