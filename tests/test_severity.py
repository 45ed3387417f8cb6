"""Tests for severity classification and message normalization."""

import pytest

from daily_error_log.severity import (
    FATAL_MASK,
    Severity,
    classify,
    classify_fatal,
    is_fatal,
    recover_canonical_message,
    resolve_message,
    severity_for_warning,
)

KNOWN = {
    1: "ERROR",
    2: "WARNING",
    4: "PARSE",
    8: "NOTICE",
    16: "CORE_ERROR",
    32: "CORE_WARNING",
    64: "COMPILE_ERROR",
    128: "COMPILE_WARNING",
    256: "USER_ERROR",
    512: "USER_WARNING",
    1024: "USER_NOTICE",
    2048: "STRICT",
    4096: "RECOVERABLE_ERROR",
    8192: "DEPRECATED",
    16384: "USER_DEPRECATED",
}


class TestClassify:
    @pytest.mark.parametrize("code,label", sorted(KNOWN.items()))
    def test_known(self, code, label):
        assert classify(code) == label

    def test_enum_member(self):
        assert classify(Severity.USER_NOTICE) == "USER_NOTICE"

    @pytest.mark.parametrize("code", [0, 3, 32768, -1, 999999])
    def test_unknown(self, code):
        assert classify(code) == f"UNKNOWN[{code}]"


class TestClassifyFatal:
    def test_fatal_members(self):
        assert classify_fatal(Severity.ERROR) == "ERROR"
        assert classify_fatal(Severity.PARSE) == "PARSE"
        assert classify_fatal(Severity.CORE_ERROR) == "CORE_ERROR"
        assert classify_fatal(Severity.COMPILE_ERROR) == "COMPILE_ERROR"
        assert classify_fatal(Severity.RECOVERABLE_ERROR) == "RECOVERABLE_ERROR"

    def test_non_fatal_members_are_not_recognized(self):
        assert classify_fatal(Severity.WARNING) == "FATAL_ERROR[2]"
        assert classify_fatal(Severity.USER_ERROR) == "FATAL_ERROR[256]"
        assert classify_fatal(5) == "FATAL_ERROR[5]"

    def test_is_fatal(self):
        assert is_fatal(Severity.ERROR)
        assert is_fatal(Severity.ERROR | Severity.NOTICE)
        assert not is_fatal(Severity.NOTICE)
        assert not is_fatal(Severity.USER_ERROR)
        assert int(FATAL_MASK) == 1 | 4 | 16 | 64 | 4096


class TestWarningCategories:
    @pytest.mark.parametrize("category,severity", [
        (DeprecationWarning, Severity.DEPRECATED),
        (PendingDeprecationWarning, Severity.DEPRECATED),
        (FutureWarning, Severity.USER_DEPRECATED),
        (SyntaxWarning, Severity.COMPILE_WARNING),
        (ImportWarning, Severity.CORE_WARNING),
        (ResourceWarning, Severity.NOTICE),
        (UserWarning, Severity.USER_WARNING),
        (RuntimeWarning, Severity.WARNING),
        (Warning, Severity.WARNING),
    ])
    def test_mapping(self, category, severity):
        assert severity_for_warning(category) == severity

    def test_subclass(self):
        class MyDeprecation(DeprecationWarning):
            pass
        assert severity_for_warning(MyDeprecation) == Severity.DEPRECATED

    def test_not_a_class(self):
        assert severity_for_warning(None) == Severity.WARNING


class TestMessages:
    def test_recover_is_pass_through(self):
        assert recover_canonical_message("Variable non définie") == "Variable non définie"

    def test_resolve_string(self):
        assert resolve_message("Undefined variable") == "Undefined variable"

    def test_resolve_non_string(self):
        assert resolve_message(UserWarning("careful")) == "careful"

    def test_resolve_callable(self):
        assert resolve_message(lambda: "late message") == "late message"

    def test_resolve_failing_callable(self):
        def broken():
            raise KeyError("missing")
        assert resolve_message(broken) == "<message unavailable: KeyError>"
