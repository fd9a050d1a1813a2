"""Typed exception hierarchy for the module scaffolding pipeline.

All mkmod exceptions inherit from :class:`MkmodError`, which carries a stable
:class:`~mkmod.errors.codes.ErrorCode`, a human-readable message and an
optional context mapping for log records.

Examples
--------
>>> from mkmod.errors import ErrorCode, SuperFileNotFoundError
>>> try:
...     raise SuperFileNotFoundError("parent module does not exist")
... except SuperFileNotFoundError as e:
...     assert e.code == ErrorCode.NOT_FOUND
...     assert e.exit_code == 2
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from mkmod.errors.codes import ErrorCode, get_exit_code

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

__all__ = [
    "FileOperationError",
    "InvalidNameError",
    "InvalidPathError",
    "MkmodError",
    "ModuleExistsError",
    "PatternError",
    "SettingsError",
    "SuperFileNotFoundError",
    "wrap_os_error",
]


class MkmodError(Exception):
    """Base exception for all mkmod errors.

    Parameters
    ----------
    message : str
        Human-readable error message.
    code : ErrorCode, optional
        Error code enum value. Defaults to ``ErrorCode.IO_FAILURE``.
    log_level : int, optional
        Logging level used when the error is reported. Defaults to
        ``logging.ERROR``.
    cause : BaseException | None, optional
        Underlying exception. Stored as ``__cause__``. Defaults to None.
    context : Mapping[str, object] | None, optional
        Additional structured details (paths, names). Defaults to None.

    Attributes
    ----------
    message : str
        Human-readable error message.
    code : ErrorCode
        Error code enum value.
    log_level : int
        Logging level for error reporting.
    context : dict[str, object]
        Structured details for log records.

    Examples
    --------
    >>> error = MkmodError("rename failed", code=ErrorCode.IO_FAILURE)
    >>> str(error)
    'MkmodError[io-failure]: rename failed'
    """

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode = ErrorCode.IO_FAILURE,
        log_level: int = logging.ERROR,
        cause: BaseException | None = None,
        context: Mapping[str, object] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.log_level = log_level
        self.context: dict[str, object] = dict(context) if context else {}
        if cause is not None:
            self.__cause__ = cause

    @property
    def exit_code(self) -> int:
        """Return the CLI exit code for this error.

        Returns
        -------
        int
            Exit code derived from :attr:`code`.
        """
        return get_exit_code(self.code)

    def __str__(self) -> str:
        """Return formatted error string.

        Returns
        -------
        str
            Formatted error string (e.g.,
            "SuperFileNotFoundError[not-found]: parent module does not exist").
        """
        base = f"{self.__class__.__name__}[{self.code.value}]: {self.message}"
        if self.__cause__:
            base += f" (caused by: {type(self.__cause__).__name__})"
        return base


class ModuleExistsError(MkmodError):
    """Raised when the module path or module file is already occupied.

    Uses error code ALREADY_EXISTS and INFO log level; the CLI reports it
    to the user directly.
    """

    def __init__(
        self,
        message: str,
        cause: BaseException | None = None,
        context: Mapping[str, object] | None = None,
    ) -> None:
        super().__init__(
            message,
            code=ErrorCode.ALREADY_EXISTS,
            log_level=logging.INFO,
            cause=cause,
            context=context,
        )


class InvalidNameError(MkmodError):
    """Raised when a module name cannot be derived from a path segment."""

    def __init__(
        self,
        message: str,
        cause: BaseException | None = None,
        context: Mapping[str, object] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.INVALID_NAME, cause=cause, context=context)


class InvalidPathError(MkmodError):
    """Raised when the parent or grandparent of a module path is undefined."""

    def __init__(
        self,
        message: str,
        cause: BaseException | None = None,
        context: Mapping[str, object] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.INVALID_PATH, cause=cause, context=context)


class SuperFileNotFoundError(MkmodError):
    """Raised when the super file a module should be registered in is missing.

    Parent modules are never created implicitly; callers must scaffold them
    first.
    """

    def __init__(
        self,
        message: str,
        cause: BaseException | None = None,
        context: Mapping[str, object] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.NOT_FOUND, cause=cause, context=context)


class FileOperationError(MkmodError):
    """Error raised when a filesystem read, write, or rename fails.

    Parameters
    ----------
    message : str
        Human-readable error message.
    cause : BaseException | None, optional
        Underlying ``OSError`` or ``UnicodeDecodeError``. Defaults to None.
    context : Mapping[str, object] | None, optional
        Additional context dictionary. Defaults to None.
    """

    def __init__(
        self,
        message: str,
        cause: BaseException | None = None,
        context: Mapping[str, object] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.IO_FAILURE, cause=cause, context=context)

    @classmethod
    def from_os_error(
        cls,
        exc: OSError | UnicodeError,
        *,
        path: Path | str | None = None,
    ) -> FileOperationError:
        """Create a FileOperationError describing ``exc``.

        Parameters
        ----------
        exc : OSError | UnicodeError
            Exception raised by the filesystem or the text decoder.
        path : Path | str | None, optional
            Path being operated on. Defaults to ``exc.filename`` when present.

        Returns
        -------
        FileOperationError
            New instance with the path and errno captured in context.

        Examples
        --------
        >>> err = FileOperationError.from_os_error(PermissionError(13, "denied", "lib.rs"))
        >>> err.context["path"]
        'lib.rs'
        """
        target = path if path is not None else getattr(exc, "filename", None)
        details: dict[str, object] = {}
        if target is not None:
            details["path"] = str(target)
        errno = getattr(exc, "errno", None)
        if errno is not None:
            details["errno"] = errno
        reason = getattr(exc, "strerror", None) or str(exc)
        message = f"{reason}: {target}" if target is not None else reason
        return cls(message, cause=exc, context=details)


class PatternError(MkmodError):
    """Raised when a line classification pattern fails to compile."""

    def __init__(
        self,
        message: str,
        cause: BaseException | None = None,
        context: Mapping[str, object] | None = None,
    ) -> None:
        super().__init__(
            message,
            code=ErrorCode.PATTERN_ERROR,
            log_level=logging.CRITICAL,
            cause=cause,
            context=context,
        )


class SettingsError(MkmodError):
    """Error raised when runtime settings validation fails.

    Parameters
    ----------
    message : str
        Human-readable error message describing the settings validation failure.
    errors : list[dict[str, object]] | None, optional
        Validation error dictionaries with field/issue details. Defaults to None.
    cause : BaseException | None, optional
        Underlying exception. Defaults to None.
    context : Mapping[str, object] | None, optional
        Additional context dictionary. Defaults to None.
    """

    def __init__(
        self,
        message: str,
        *,
        errors: list[dict[str, object]] | None = None,
        cause: BaseException | None = None,
        context: Mapping[str, object] | None = None,
    ) -> None:
        merged: dict[str, object] = dict(context) if context else {}
        if errors:
            merged["errors"] = errors
        super().__init__(
            message,
            code=ErrorCode.CONFIGURATION_ERROR,
            log_level=logging.CRITICAL,
            cause=cause,
            context=merged,
        )


def wrap_os_error(exc: OSError | UnicodeError, *, path: Path | str | None = None) -> MkmodError:
    """Translate a filesystem exception into the mkmod taxonomy.

    ``FileExistsError`` becomes :class:`ModuleExistsError`; everything else
    becomes :class:`FileOperationError`.

    Parameters
    ----------
    exc : OSError | UnicodeError
        Exception to translate.
    path : Path | str | None, optional
        Path being operated on. Defaults to None.

    Returns
    -------
    MkmodError
        Translated exception, ready to be raised ``from exc``.
    """
    if isinstance(exc, FileExistsError):
        target = path if path is not None else exc.filename
        return ModuleExistsError(
            f"file already exists: {target}",
            cause=exc,
            context={"path": str(target)},
        )
    return FileOperationError.from_os_error(exc, path=path)
