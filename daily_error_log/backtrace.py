"""Backtrace capture and rendering.

Frames are always ordered innermost first, matching the order a reader
scans when looking for the line that actually failed.
"""

import os
import sys
import traceback
from collections.abc import Mapping, Sequence

from daily_error_log.models import INTERNAL_FILE, UNKNOWN_LINE, Frame

_PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))


def _render(index, file, line, class_name, call_type, function_name) -> str:
    file = file or INTERNAL_FILE
    line = UNKNOWN_LINE if line is None else line
    return f"#{index} {file}:{line} -> {class_name}{call_type}{function_name}()\n"


def format_backtrace(frames) -> str:
    """Render frames one per line. Returns "" for empty or invalid input.

    Elements may be Frame objects or plain mappings with optional keys
    file, line, class, type and function. Missing fields fall back to
    "[internal]", "-" and "".
    """
    if not frames or isinstance(frames, (str, bytes)) or not isinstance(frames, Sequence):
        return ""

    out = []
    for position, frame in enumerate(frames):
        if isinstance(frame, Frame):
            out.append(_render(frame.index, frame.file, frame.line,
                               frame.class_name, frame.call_type, frame.function_name))
        elif isinstance(frame, Mapping):
            out.append(_render(position, frame.get("file"), frame.get("line"),
                               frame.get("class") or "", frame.get("type") or "",
                               frame.get("function") or ""))
    return "".join(out)


def _owner(frame) -> tuple[str, str]:
    """Guess (class_name, call_type) from the frame's bound locals."""
    f_locals = frame.f_locals
    if "self" in f_locals:
        return type(f_locals["self"]).__name__, "->"
    cls = f_locals.get("cls")
    if isinstance(cls, type):
        return cls.__name__, "::"
    return "", ""


def _to_frame(index: int, frame, lineno: int | None) -> Frame:
    code = frame.f_code
    class_name, call_type = _owner(frame)
    return Frame(
        index=index,
        file=code.co_filename or None,
        line=lineno,
        class_name=class_name,
        call_type=call_type,
        function_name=code.co_name,
    )


def _is_own_frame(frame) -> bool:
    filename = os.path.abspath(frame.f_code.co_filename)
    return os.path.dirname(filename) == _PACKAGE_DIR


def capture_stack(skip: int = 0) -> list[Frame]:
    """Snapshot the caller's stack, excluding this package's own frames."""
    frames = []
    frame = sys._getframe(1)
    while frame is not None:
        if not _is_own_frame(frame):
            if skip > 0:
                skip -= 1
            else:
                frames.append(_to_frame(len(frames), frame, frame.f_lineno))
        frame = frame.f_back
    return frames


def frames_from_traceback(tb) -> list[Frame]:
    """Frames carried by an exception traceback, innermost first."""
    if tb is None:
        return []
    walked = list(traceback.walk_tb(tb))
    walked.reverse()
    return [_to_frame(i, frame, lineno) for i, (frame, lineno) in enumerate(walked)]


def innermost_location(tb) -> tuple[str | None, int | None]:
    """File and line where an exception was raised."""
    last = None
    for frame, lineno in traceback.walk_tb(tb):
        last = (frame.f_code.co_filename, lineno)
    return last if last is not None else (None, None)
