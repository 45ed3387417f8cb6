"""On-disk text of captured records."""

from datetime import datetime

from daily_error_log.backtrace import format_backtrace
from daily_error_log.models import Frame, LogRecord

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

BACKTRACE_HEADING = "-- Backtrace --"
RECOVERED_BACKTRACE_HEADING = "-- Recovered Backtrace --"
EXCEPTION_BACKTRACE_HEADING = "-- Exception Backtrace --"


def stamp(ts: datetime) -> str:
    return "[" + ts.strftime(TIMESTAMP_FORMAT) + "]"


def render_record(record: LogRecord, include_backtrace: bool = True) -> str:
    """Header plus, optionally, the inline backtrace. Always ends with a blank line."""
    text = f"{stamp(record.timestamp)} {record.label}\n{record.message} in {record.location}\n"
    trace = format_backtrace(record.backtrace) if include_backtrace else ""
    if trace:
        text += f"\n{BACKTRACE_HEADING}\n{trace}"
    return text + "\n"


def render_backtrace_block(ts: datetime, heading: str, frames: list[Frame]) -> str:
    """Separately timestamped backtrace block; "" when there are no frames."""
    trace = format_backtrace(frames)
    if not trace:
        return ""
    return f"{stamp(ts)} {heading}\n{trace}\n"
