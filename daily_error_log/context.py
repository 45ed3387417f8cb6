"""Per-thread capture context and the locale filters that consult it."""

import contextlib
import sys
import threading

CANONICAL_LOCALE = "en_US"

# Functions whose presence on the stack means an error message is being
# produced right now, even outside a capture.
ERROR_CONTEXT_FUNCTIONS = frozenset({
    "warn",
    "warn_explicit",
    "showwarning",
    "_showwarnmsg",
    "_showwarnmsg_impl",
})


class CaptureContext:
    """Thread-local in-flight flag with a nesting depth guard."""

    def __init__(self, max_depth: int = 1):
        self._max_depth = max(1, max_depth)
        self._local = threading.local()

    @property
    def depth(self) -> int:
        return getattr(self._local, "depth", 0)

    @property
    def active(self) -> bool:
        return self.depth > 0

    @contextlib.contextmanager
    def enter(self):
        """Yield True if this capture may proceed, False if it is too deeply nested.

        The flag is set before the body runs and cleared on every exit path.
        """
        if self.depth >= self._max_depth:
            yield False
            return
        self._local.depth = self.depth + 1
        try:
            yield True
        finally:
            self._local.depth -= 1


# Context consulted by the filters. Replaced by install() with the
# handlers' own context so both agree on what "in flight" means.
_current = CaptureContext()


def current_context() -> CaptureContext:
    return _current


def set_current_context(ctx: CaptureContext):
    global _current
    _current = ctx


def _in_error_call() -> bool:
    frame = sys._getframe(1)
    while frame is not None:
        if frame.f_code.co_name in ERROR_CONTEXT_FUNCTIONS:
            return True
        frame = frame.f_back
    return False


def filter_locale(locale: str, canonical: str = CANONICAL_LOCALE) -> str:
    """Force the canonical locale while an error is being captured or raised."""
    if _current.active or _in_error_call():
        return canonical
    return locale


def filter_gettext(translated: str, text: str, domain: str | None = None) -> str:
    """Hand back the untranslated source text while a capture is in flight."""
    if _current.active:
        return text
    return translated
