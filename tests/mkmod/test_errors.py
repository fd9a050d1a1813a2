"""Tests for mkmod.errors: codes, exit codes, and OS error translation."""

from __future__ import annotations

import errno
import logging

import pytest

from mkmod.errors import (
    ErrorCode,
    FileOperationError,
    InvalidNameError,
    InvalidPathError,
    MkmodError,
    ModuleExistsError,
    PatternError,
    SettingsError,
    SuperFileNotFoundError,
    get_exit_code,
    wrap_os_error,
)


class TestErrorCode:
    """Tests for ErrorCode values and exit codes."""

    def test_codes_are_kebab_case(self) -> None:
        """Every code renders as its kebab-case value."""
        for code in ErrorCode:
            assert str(code) == code.value
            assert code.value == code.value.lower()
            assert "_" not in code.value

    @pytest.mark.parametrize(
        ("code", "expected"),
        [
            (ErrorCode.ALREADY_EXISTS, 1),
            (ErrorCode.NOT_FOUND, 2),
            (ErrorCode.IO_FAILURE, 2),
            (ErrorCode.CONFIGURATION_ERROR, 2),
        ],
    )
    def test_exit_codes(self, code: ErrorCode, expected: int) -> None:
        """Only an occupied path is a user error; the rest exit 2."""
        assert get_exit_code(code) == expected


class TestMkmodError:
    """Tests for the base exception."""

    def test_str_includes_class_and_code(self) -> None:
        """The string form names the class and the code."""
        error = MkmodError("rename failed")
        assert str(error) == "MkmodError[io-failure]: rename failed"
        assert error.log_level == logging.ERROR

    def test_str_mentions_cause(self) -> None:
        """A cause is named after the message."""
        error = MkmodError("rename failed", cause=PermissionError("denied"))
        assert str(error).endswith("(caused by: PermissionError)")
        assert isinstance(error.__cause__, PermissionError)

    def test_context_is_copied(self) -> None:
        """The context mapping is copied, not shared."""
        context = {"path": "src/lib.rs"}
        error = MkmodError("boom", context=context)
        context["path"] = "other"
        assert error.context == {"path": "src/lib.rs"}

    @pytest.mark.parametrize(
        ("error", "code"),
        [
            (ModuleExistsError("x"), ErrorCode.ALREADY_EXISTS),
            (InvalidNameError("x"), ErrorCode.INVALID_NAME),
            (InvalidPathError("x"), ErrorCode.INVALID_PATH),
            (SuperFileNotFoundError("x"), ErrorCode.NOT_FOUND),
            (FileOperationError("x"), ErrorCode.IO_FAILURE),
            (PatternError("x"), ErrorCode.PATTERN_ERROR),
            (SettingsError("x"), ErrorCode.CONFIGURATION_ERROR),
        ],
    )
    def test_subclass_codes(self, error: MkmodError, code: ErrorCode) -> None:
        """Each subclass carries its own code."""
        assert isinstance(error, MkmodError)
        assert error.code is code

    def test_settings_error_keeps_field_errors(self) -> None:
        """Field errors are merged into the context."""
        error = SettingsError("bad", errors=[{"field": "log_level", "issue": "unknown"}])
        assert error.context["errors"] == [{"field": "log_level", "issue": "unknown"}]
        assert error.log_level == logging.CRITICAL


class TestWrapOsError:
    """Tests for wrap_os_error and FileOperationError.from_os_error."""

    def test_file_exists_becomes_module_exists(self) -> None:
        """FileExistsError maps to ModuleExistsError."""
        exc = FileExistsError(errno.EEXIST, "File exists", "src/foo.rs")
        error = wrap_os_error(exc)

        assert isinstance(error, ModuleExistsError)
        assert error.exit_code == 1
        assert error.context == {"path": "src/foo.rs"}
        assert error.__cause__ is exc

    def test_other_os_errors_become_file_operation_errors(self) -> None:
        """Everything else is an I/O failure with errno in context."""
        exc = PermissionError(errno.EACCES, "Permission denied", "src/lib.rs")
        error = wrap_os_error(exc)

        assert isinstance(error, FileOperationError)
        assert error.message == "Permission denied: src/lib.rs"
        assert error.context == {"path": "src/lib.rs", "errno": errno.EACCES}

    def test_explicit_path_wins(self) -> None:
        """An explicit path overrides the exception's filename."""
        exc = OSError(errno.EIO, "I/O error", ".lib.rs.tmp")
        error = wrap_os_error(exc, path="src/lib.rs")
        assert error.context["path"] == "src/lib.rs"

    def test_decode_error(self) -> None:
        """Decode failures have no errno and use the exception text."""
        exc = UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")
        error = FileOperationError.from_os_error(exc, path="src/lib.rs")

        assert error.context == {"path": "src/lib.rs"}
        assert "invalid start byte" in error.message
