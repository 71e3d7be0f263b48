"""
log.py

Logging helpers shared by the simulation and the headless trainer.

- `configure_logging(level, log_file=None)` : attach console (and optional
  file) handlers to the ``rocket_abm`` logger once.
- `safe_log_exception(msg, exc, **ctx)` : log an exception with context,
  falling back to stderr if logging itself fails.
"""

from typing import Any, Optional, Union
import os
import sys
import logging

PACKAGE_LOGGER = 'rocket_abm'

logger = logging.getLogger(__name__)


def configure_logging(level: Union[int, str] = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """Configure the package logger and return it.

    Handlers are only attached the first time so repeated calls (notebooks,
    several trainers in one process) do not duplicate output.
    """
    log = logging.getLogger(PACKAGE_LOGGER)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    if not log.handlers:
        h = logging.StreamHandler(sys.stdout)
        h.setFormatter(logging.Formatter('[%(levelname)s] %(message)s'))
        log.addHandler(h)
        if log_file:
            os.makedirs(os.path.dirname(os.path.abspath(log_file)), exist_ok=True)
            # delayed so the file is only created on the first record
            fh = logging.FileHandler(log_file, delay=True)
            fh.setFormatter(logging.Formatter('%(asctime)s [%(levelname)s] %(name)s: %(message)s'))
            log.addHandler(fh)
    for h in log.handlers:
        h.setLevel(level)
    log.setLevel(level)
    return log


def safe_log_exception(msg: str, exc: Exception, **ctx: Any) -> None:
    """Log ``exc`` at ERROR with its traceback and keyword context.

    I/O side channels (frame snapshots) call this instead of raising; a
    broken handler must not stop a training run, so the record goes to
    stderr when emitting it fails.
    """
    detail = ', '.join(f'{key}={ctx[key]!r}' for key in sorted(ctx))
    text = f'{msg}: {exc}' + (f' ({detail})' if detail else '')
    try:
        logger.error(text, exc_info=exc)
    except Exception:
        print(f'rocket_abm: could not log error: {text}', file=sys.stderr)
