"""Severity table and message normalization.

Severity codes follow the classic bitmask layout so that a "last error"
report can be tested against a set of fatal-capable severities with a
single intersection.
"""

import logging
from enum import IntFlag

logger = logging.getLogger(__name__)


class Severity(IntFlag):
    ERROR = 1
    WARNING = 2
    PARSE = 4
    NOTICE = 8
    CORE_ERROR = 16
    CORE_WARNING = 32
    COMPILE_ERROR = 64
    COMPILE_WARNING = 128
    USER_ERROR = 256
    USER_WARNING = 512
    USER_NOTICE = 1024
    STRICT = 2048
    RECOVERABLE_ERROR = 4096
    DEPRECATED = 8192
    USER_DEPRECATED = 16384


FATAL_MASK = (
    Severity.ERROR
    | Severity.PARSE
    | Severity.CORE_ERROR
    | Severity.COMPILE_ERROR
    | Severity.RECOVERABLE_ERROR
)

LABELS = {int(member): member.name for member in Severity}
FATAL_LABELS = {code: name for code, name in LABELS.items() if code & FATAL_MASK}

# Checked in order; the first matching base class wins.
_WARNING_SEVERITIES = (
    (PendingDeprecationWarning, Severity.DEPRECATED),
    (DeprecationWarning, Severity.DEPRECATED),
    (FutureWarning, Severity.USER_DEPRECATED),
    (SyntaxWarning, Severity.COMPILE_WARNING),
    (ImportWarning, Severity.CORE_WARNING),
    (ResourceWarning, Severity.NOTICE),
    (BytesWarning, Severity.NOTICE),
    (UnicodeWarning, Severity.NOTICE),
    (UserWarning, Severity.USER_WARNING),
)


def classify(code: int) -> str:
    """Exact lookup of a severity code; unknown codes become UNKNOWN[<code>]."""
    return LABELS.get(int(code), f"UNKNOWN[{int(code)}]")


def classify_fatal(code: int) -> str:
    """Like classify(), but only the fatal-capable severities are recognized."""
    return FATAL_LABELS.get(int(code), f"FATAL_ERROR[{int(code)}]")


def is_fatal(code: int) -> bool:
    return bool(int(code) & FATAL_MASK)


def severity_for_warning(category) -> Severity:
    """Map a Python warning category onto the severity table."""
    if isinstance(category, type):
        for base, severity in _WARNING_SEVERITIES:
            if issubclass(category, base):
                return severity
    return Severity.WARNING


def recover_canonical_message(message: str) -> str:
    """Return the canonical-language form of an already-generated message.

    Reversing a translation needs a reverse-lookup table that no catalog
    format provides, so this is an identity pass-through. Canonical text
    comes from generating the message while the canonical locale is
    forced. Keep this a pass-through unless a real reverse lookup exists.
    """
    return message


def resolve_message(message) -> str:
    """Produce message text; callables are evaluated now, inside the capture."""
    if callable(message):
        try:
            message = message()
        except Exception as e:
            logger.debug("Message factory failed: %r", e)
            return f"<message unavailable: {type(e).__name__}>"
    return recover_canonical_message(str(message))
