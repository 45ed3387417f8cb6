"""Daily error log — locale-neutral capture of warnings, fatal errors and uncaught exceptions."""

from daily_error_log.backtrace import capture_stack, format_backtrace, frames_from_traceback
from daily_error_log.config import Config, load_config
from daily_error_log.context import CaptureContext, filter_gettext, filter_locale
from daily_error_log.handlers import CaptureHandlers, CaptureOutcome, install
from daily_error_log.host import GettextHost, LastErrorTracker, LocaleHost, NullLocaleHost, ProcessLocale
from daily_error_log.models import Frame, LastError, LocaleSnapshot, LogRecord, SourceLocation
from daily_error_log.neutralizer import LocaleNeutralizer
from daily_error_log.severity import Severity, classify, classify_fatal, recover_canonical_message
from daily_error_log.writer import DurableLogWriter, append

__all__ = [
    "CaptureContext",
    "CaptureHandlers",
    "CaptureOutcome",
    "Config",
    "DurableLogWriter",
    "Frame",
    "GettextHost",
    "LastError",
    "LastErrorTracker",
    "LocaleHost",
    "LocaleNeutralizer",
    "LocaleSnapshot",
    "LogRecord",
    "NullLocaleHost",
    "ProcessLocale",
    "Severity",
    "SourceLocation",
    "append",
    "capture_stack",
    "classify",
    "classify_fatal",
    "filter_gettext",
    "filter_locale",
    "format_backtrace",
    "frames_from_traceback",
    "install",
    "load_config",
    "recover_canonical_message",
]
