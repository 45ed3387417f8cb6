"""Capture handlers — the three interception points and their hooks.

Each capture runs the same bracket: enter the thread-local capture
context, force the canonical locale, build and append the record,
restore the locale, leave the context. The handlers only observe: the
warning path lets default handling continue, the exception path always
hands the exception back, and the shutdown path is terminal.
"""

import atexit
import contextlib
import logging
import sys
import threading
import warnings
from datetime import datetime
from enum import Enum

from daily_error_log.backtrace import capture_stack, frames_from_traceback, innermost_location
from daily_error_log.config import Config, load_config
from daily_error_log.context import CaptureContext, current_context, set_current_context
from daily_error_log.host import LastErrorTracker, NullLocaleHost, ProcessLocale
from daily_error_log.models import LogRecord, SourceLocation
from daily_error_log.neutralizer import LocaleNeutralizer
from daily_error_log.paths import daily_log_path, prepare_log_dir, resolve_log_dir
from daily_error_log.records import (
    EXCEPTION_BACKTRACE_HEADING,
    RECOVERED_BACKTRACE_HEADING,
    render_backtrace_block,
    render_record,
)
from daily_error_log.severity import (
    classify,
    classify_fatal,
    is_fatal,
    resolve_message,
    severity_for_warning,
)
from daily_error_log.writer import DurableLogWriter

logger = logging.getLogger(__name__)

UNCAUGHT_EXCEPTION_LABEL = "UNCAUGHT EXCEPTION"


class CaptureOutcome(Enum):
    CONTINUE = "continue"   # default handling should still run
    RETHROW = "rethrow"     # the caller must re-raise / delegate the exception


def describe_exception(exc: BaseException) -> str:
    text = str(exc)
    name = type(exc).__name__
    return f"{name}: {text}" if text else name


class CaptureHandlers:
    def __init__(self, log_path: str, neutralizer: LocaleNeutralizer | None = None,
                 writer: DurableLogWriter | None = None,
                 last_errors: LastErrorTracker | None = None,
                 context: CaptureContext | None = None, time_func=None):
        self._log_path = log_path
        self._neutralizer = neutralizer or LocaleNeutralizer(NullLocaleHost())
        self._writer = writer or DurableLogWriter()
        self._last_errors = last_errors or LastErrorTracker()
        self._context = context or current_context()
        self._time_func = time_func or datetime.now

        self._previous_showwarning = None
        self._previous_filters = None
        self._previous_excepthook = None
        self._previous_threading_excepthook = None
        self._shutdown_registered = False

    @property
    def log_path(self) -> str:
        return self._log_path

    @property
    def last_errors(self) -> LastErrorTracker:
        return self._last_errors

    @property
    def context(self) -> CaptureContext:
        return self._context

    @contextlib.contextmanager
    def _capture(self):
        """Yield True inside a canonical-locale bracket, or False if the capture is dropped."""
        with self._context.enter() as allowed:
            if not allowed:
                logger.debug("Nested capture dropped (depth %d)", self._context.depth)
                yield False
                return
            try:
                snapshot = self._neutralizer.snapshot_and_force_canonical()
            except Exception as e:
                logger.debug("Could not force canonical locale: %r", e)
                snapshot = None
            try:
                yield True
            finally:
                if snapshot is not None:
                    try:
                        self._neutralizer.restore(snapshot)
                    except Exception as e:
                        logger.debug("Could not restore locale: %r", e)

    def _append(self, text: str) -> bool:
        if not text:
            return False
        return self._writer.append(self._log_path, text)

    # -- entry points ---------------------------------------------------

    def handle_error(self, severity: int, message, file: str | None = None,
                     line: int | None = None) -> bool:
        """Log a non-fatal error with a fresh backtrace.

        Always returns False so that the host's default handling still runs.
        message may be a zero-argument callable; it is evaluated while the
        canonical locale is in force.
        """
        with self._capture() as allowed:
            if allowed:
                try:
                    text = resolve_message(message)
                    self._last_errors.record(severity, text, file or "", line)
                    record = LogRecord(
                        timestamp=self._time_func(),
                        label=classify(severity),
                        message=text,
                        location=SourceLocation.from_raw(file, line),
                        backtrace=capture_stack(),
                    )
                    self._append(render_record(record))
                except Exception as e:
                    logger.debug("Error capture failed: %r", e)
        return False

    def handle_shutdown(self):
        """Log the last error at exit if it was fatal; otherwise do nothing."""
        try:
            error = self._last_errors.get_last_fatal_error()
        except Exception as e:
            logger.debug("Could not read last error: %r", e)
            return
        if error is None or not is_fatal(error.severity):
            return

        with self._capture() as allowed:
            if not allowed:
                return
            try:
                record = LogRecord(
                    timestamp=self._time_func(),
                    label=classify_fatal(error.severity),
                    message=resolve_message(error.message),
                    location=SourceLocation.from_raw(error.file, error.line),
                )
                self._append(render_record(record, include_backtrace=False))
                self._append(render_backtrace_block(
                    self._time_func(), RECOVERED_BACKTRACE_HEADING, capture_stack()))
            except Exception as e:
                logger.debug("Shutdown capture failed: %r", e)

    def handle_exception(self, exc: BaseException) -> CaptureOutcome:
        """Log an uncaught exception with its own traceback.

        Returns CaptureOutcome.RETHROW; the exception is never swallowed.
        """
        with self._capture() as allowed:
            if allowed:
                try:
                    tb = exc.__traceback__
                    file, line = innermost_location(tb)
                    record = LogRecord(
                        timestamp=self._time_func(),
                        label=UNCAUGHT_EXCEPTION_LABEL,
                        message=resolve_message(lambda: describe_exception(exc)),
                        location=SourceLocation.from_raw(file, line),
                    )
                    self._append(render_record(record, include_backtrace=False))
                    self._append(render_backtrace_block(
                        self._time_func(), EXCEPTION_BACKTRACE_HEADING, frames_from_traceback(tb)))
                except Exception as e:
                    logger.debug("Exception capture failed: %r", e)
        return CaptureOutcome.RETHROW

    @contextlib.contextmanager
    def capturing(self):
        """Log any exception escaping the block, then re-raise it unchanged."""
        try:
            yield self
        except Exception as exc:
            if self.handle_exception(exc) is CaptureOutcome.RETHROW:
                raise

    # -- hooks ----------------------------------------------------------

    def _showwarning(self, message, category, filename, lineno, file=None, line=None):
        handled = self.handle_error(severity_for_warning(category), message, filename, lineno)
        if not handled and self._previous_showwarning is not None:
            self._previous_showwarning(message, category, filename, lineno, file, line)

    def _excepthook(self, exc_type, exc, tb):
        previous = self._previous_excepthook or sys.__excepthook__
        if exc is not None and not issubclass(exc_type, KeyboardInterrupt):
            if exc.__traceback__ is None and tb is not None:
                exc = exc.with_traceback(tb)
            if self.handle_exception(exc) is not CaptureOutcome.RETHROW:
                return
        # Hand the process back to the default behaviour for good.
        if sys.excepthook == self._excepthook:
            sys.excepthook = previous
        previous(exc_type, exc, tb)

    def _threading_excepthook(self, args):
        previous = self._previous_threading_excepthook or threading.__excepthook__
        if args.exc_value is not None and not issubclass(args.exc_type, SystemExit):
            if self.handle_exception(args.exc_value) is not CaptureOutcome.RETHROW:
                return
        previous(args)

    def install(self, capture_warnings: bool = True, capture_exceptions: bool = True,
                capture_shutdown: bool = True, capture_all: bool = False) -> "CaptureHandlers":
        """Install the hooks. Calling it again on the same instance changes nothing."""
        set_current_context(self._context)
        if capture_warnings and warnings.showwarning != self._showwarning:
            self._previous_showwarning = warnings.showwarning
            warnings.showwarning = self._showwarning
        if capture_all and self._previous_filters is None:
            # Categories the default filters ignore outside __main__ reach showwarning too.
            self._previous_filters = list(warnings.filters)
            warnings.simplefilter("default")
        if capture_exceptions:
            if sys.excepthook != self._excepthook:
                self._previous_excepthook = sys.excepthook
                sys.excepthook = self._excepthook
            if threading.excepthook != self._threading_excepthook:
                self._previous_threading_excepthook = threading.excepthook
                threading.excepthook = self._threading_excepthook
        if capture_shutdown and not self._shutdown_registered:
            atexit.register(self.handle_shutdown)
            self._shutdown_registered = True
        logger.info("Capturing errors to %s", self._log_path)
        return self

    def uninstall(self):
        """Put back whatever hooks were in place before install()."""
        if self._previous_showwarning is not None and warnings.showwarning == self._showwarning:
            warnings.showwarning = self._previous_showwarning
        if self._previous_filters is not None:
            warnings.resetwarnings()
            warnings.filters[:] = self._previous_filters
        if self._previous_excepthook is not None and sys.excepthook == self._excepthook:
            sys.excepthook = self._previous_excepthook
        if (self._previous_threading_excepthook is not None
                and threading.excepthook == self._threading_excepthook):
            threading.excepthook = self._previous_threading_excepthook
        if self._shutdown_registered:
            atexit.unregister(self.handle_shutdown)
            self._shutdown_registered = False
        self._previous_showwarning = None
        self._previous_filters = None
        self._previous_excepthook = None
        self._previous_threading_excepthook = None
        logger.info("Stopped capturing errors to %s", self._log_path)


def install(config: Config | None = None, host=None, process_locale=None) -> CaptureHandlers:
    """Resolve the daily log path once and install all configured hooks."""
    config = config or load_config()
    log_dir = prepare_log_dir(resolve_log_dir(config))
    log_path = daily_log_path(log_dir)

    neutralizer = LocaleNeutralizer(
        host or NullLocaleHost(),
        process_locale or ProcessLocale(),
        canonical_locale=config.canonical_locale,
        languages_dir=config.languages_dir,
        package_languages_dir=config.package_languages_dir,
    )
    handlers = CaptureHandlers(
        log_path,
        neutralizer=neutralizer,
        context=CaptureContext(max_depth=config.max_depth),
    )
    return handlers.install(
        capture_warnings=config.capture_warnings,
        capture_exceptions=config.capture_exceptions,
        capture_shutdown=config.capture_shutdown,
        capture_all=config.capture_all,
    )
