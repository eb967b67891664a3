"""
Logging configuration for the a-la-carte CLI.

main.py calls ``setup_logging`` once per invocation. Handlers hang off
the ``alacarte`` logger, so every ``logging.getLogger(__name__)`` in the
package inherits them and the root logger is left alone.

Console level precedence:
    --debug > --verbose > --quiet > ALC_LOG_LEVEL > WARNING

ALC_LOG_FILE adds a detailed file log (level ALC_LOG_FILE_LEVEL, or the
console level). It is separate from ``provision --log-file``, which only
records install steps.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Mapping

APP_LOGGER = "alacarte"

ENV_LOG_LEVEL = "ALC_LOG_LEVEL"
ENV_LOG_FILE = "ALC_LOG_FILE"
ENV_LOG_FILE_LEVEL = "ALC_LOG_FILE_LEVEL"

# ── Format strings ──────────────────────────────────────────────

# Warnings and errors sit next to the CLI's own output
_FMT_MINIMAL = "a-la-carte: %(levelname)s: %(message)s"

_FMT_VERBOSE = "%(asctime)s [%(short_name)s] %(message)s"
_DATEFMT_VERBOSE = "%H:%M:%S"

_FMT_DEBUG = "%(asctime)s %(levelname)-5s %(short_name)s:%(lineno)d  %(message)s"
_DATEFMT_DEBUG = "%H:%M:%S"

_FMT_FILE = "%(asctime)s %(levelname)-5s %(short_name)s:%(lineno)d  %(message)s"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"

_HANDLER_PREFIX = "alacarte-"


class _ShortNameFormatter(logging.Formatter):
    """Adds ``short_name``: the logger name without ``alacarte.core.services.``."""

    _PREFIXES = (f"{APP_LOGGER}.core.services.", f"{APP_LOGGER}.core.", f"{APP_LOGGER}.")

    def format(self, record: logging.LogRecord) -> str:
        name = record.name
        for prefix in self._PREFIXES:
            if name.startswith(prefix):
                name = name[len(prefix):]
                break
        record.short_name = name
        return super().format(record)


def resolve_level(
    *,
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    environ: Mapping[str, str] | None = None,
) -> str:
    """Pick the console level from CLI flags, then the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    env = os.environ if environ is None else environ
    return env.get(ENV_LOG_LEVEL, "WARNING")


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> logging.Logger:
    """Configure the ``alacarte`` logger and return it.

    Safe to call again (``system.debugMode`` does): handlers installed
    by an earlier call are replaced. A log file that cannot be opened
    is reported on the console and skipped.
    """
    numeric_level = _parse_level(level)
    app = logging.getLogger(APP_LOGGER)
    for handler in list(app.handlers):
        if (handler.name or "").startswith(_HANDLER_PREFIX):
            app.removeHandler(handler)
            handler.close()

    if numeric_level <= logging.DEBUG:
        fmt, datefmt = _FMT_DEBUG, _DATEFMT_DEBUG
    elif numeric_level <= logging.INFO:
        fmt, datefmt = _FMT_VERBOSE, _DATEFMT_VERBOSE
    else:
        fmt, datefmt = _FMT_MINIMAL, None

    console = logging.StreamHandler(sys.stderr)
    console.set_name(f"{_HANDLER_PREFIX}console")
    console.setLevel(numeric_level)
    console.setFormatter(_ShortNameFormatter(fmt, datefmt=datefmt))
    app.addHandler(console)

    effective_level = numeric_level
    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else numeric_level
        fh = _file_handler(Path(log_file), app)
        if fh is not None:
            fh.setLevel(file_level)
            app.addHandler(fh)
            effective_level = min(effective_level, file_level)

    app.setLevel(effective_level)
    logging.raiseExceptions = False
    return app


def _file_handler(path: Path, app: logging.Logger) -> logging.FileHandler | None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(path, encoding="utf-8")
    except OSError as e:
        app.warning("Cannot open %s=%s: %s", ENV_LOG_FILE, path, e)
        return None
    fh.set_name(f"{_HANDLER_PREFIX}file")
    fh.setFormatter(_ShortNameFormatter(_FMT_FILE, datefmt=_DATEFMT_FILE))
    return fh


def _parse_level(level: str | None) -> int:
    """Convert a level name string to its numeric constant."""
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.WARNING
    return numeric
