"""Durable append-only writer with a locked fallback path.

A failed write must never turn into a new fault in the host process, so
append() reports failure through its return value and never raises.
"""

import fcntl
import logging
import os
import threading

logger = logging.getLogger(__name__)

FILE_MODE = 0o644
# Lone surrogates from undecodable file names must not lose the record.
ENCODE_ERRORS = "backslashreplace"


class DurableLogWriter:
    def __init__(self):
        self._lock = threading.Lock()

    def _primary(self, path: str, text: str):
        with self._lock:
            with open(path, "a", encoding="utf-8", errors=ENCODE_ERRORS) as f:
                f.write(text)
                f.flush()

    def _fallback(self, path: str, text: str):
        """Raw descriptor write under an exclusive advisory lock."""
        data = text.encode("utf-8", errors=ENCODE_ERRORS)
        fd = os.open(path, os.O_WRONLY | os.O_APPEND | os.O_CREAT, FILE_MODE)
        try:
            fcntl.flock(fd, fcntl.LOCK_EX)
            try:
                view = memoryview(data)
                while view:
                    written = os.write(fd, view)
                    view = view[written:]
            finally:
                fcntl.flock(fd, fcntl.LOCK_UN)
        finally:
            os.close(fd)

    def append(self, path: str, text: str) -> bool:
        """Append text to path. Returns False only if both mechanisms fail."""
        try:
            self._primary(path, text)
            return True
        except Exception as e:
            logger.debug("Primary append to %s failed: %s", path, e)

        try:
            self._fallback(path, text)
            return True
        except Exception as e:
            logger.debug("Fallback append to %s failed: %s", path, e)
            return False


_default_writer = DurableLogWriter()


def append(path: str, text: str) -> bool:
    return _default_writer.append(path, text)
