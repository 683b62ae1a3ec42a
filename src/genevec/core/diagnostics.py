"""
Diagnostic output for genevec.

Warnings go to the ``genevec`` standard logger and to logfire, so they show up
both in plain console runs and in the observability backend.
"""

from typing import Any, Optional, Set

import logging
import threading

import logfire


logger = logging.getLogger("genevec")


def warning(message: str, **attributes: Any) -> None:
    """Emit a warning to the standard logger and to logfire."""
    logger.warning(message)
    logfire.warning(message, **attributes)


class WarningLedger:
    """
    Emits each distinct warning message at most once.

    One ledger lives for the duration of a species setup so that a message
    triggered by every gene is reported a single time.
    """

    def __init__(self):
        self._seen: Set[str] = set()
        self._lock = threading.Lock()

    def warn_once(self, message: str, **attributes: Any) -> bool:
        """Emit ``message`` unless it was already emitted; return True if emitted."""
        with self._lock:
            if message in self._seen:
                return False
            self._seen.add(message)
        warning(message, **attributes)
        return True

    def __contains__(self, message: str) -> bool:
        return message in self._seen

    def __len__(self) -> int:
        return len(self._seen)


def setup_logger(level: str = "INFO", name: Optional[str] = None) -> logging.Logger:
    """Attach a console handler to the genevec logger."""
    target = logging.getLogger(name or logger.name)
    target.setLevel(getattr(logging, level.upper()))

    if not target.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        handler.setFormatter(formatter)
        target.addHandler(handler)

    return target
