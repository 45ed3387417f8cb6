"""Data model for captured errors — frames, records, and locale snapshots."""

from dataclasses import dataclass, field
from datetime import datetime

INTERNAL_FILE = "[internal]"
UNKNOWN_LINE = "-"


@dataclass(frozen=True)
class Frame:
    index: int                 # 0 = innermost
    file: str | None
    line: int | None
    class_name: str = ""
    call_type: str = ""        # "", "::" (class-level) or "->" (instance)
    function_name: str = ""


@dataclass(frozen=True)
class SourceLocation:
    file: str
    line: int | None = None

    @classmethod
    def from_raw(cls, file: str | None, line: int | None) -> "SourceLocation":
        """Normalize Windows separators so paths grep the same everywhere."""
        path = (file or INTERNAL_FILE).replace("\\", "/")
        if line is not None and line < 0:
            line = None
        return cls(file=path, line=line)

    def __str__(self) -> str:
        line = UNKNOWN_LINE if self.line is None else self.line
        return f"{self.file}:{line}"


@dataclass
class LogRecord:
    timestamp: datetime
    label: str
    message: str
    location: SourceLocation
    backtrace: list[Frame] = field(default_factory=list)


@dataclass(frozen=True)
class LocaleSnapshot:
    locale: str
    text_domains: tuple[str, ...] = ()
    process_locale: str | None = None
    switched: bool = False


@dataclass(frozen=True)
class LastError:
    severity: int
    message: str
    file: str
    line: int | None = None
