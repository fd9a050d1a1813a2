"""Stable error codes for mkmod failures.

Each code names one failure kind of the scaffolding pipeline. Codes are
kebab-case strings so they can be rendered directly in log records and CLI
messages.

Examples
--------
>>> from mkmod.errors.codes import ErrorCode
>>> code = ErrorCode.ALREADY_EXISTS
>>> assert code == "already-exists"
"""

from __future__ import annotations

from enum import StrEnum
from typing import Final

__all__ = [
    "EXIT_CODES",
    "UNHANDLED_EXIT_CODE",
    "ErrorCode",
    "get_exit_code",
]


class ErrorCode(StrEnum):
    """Stable error codes for mkmod exceptions.

    Attributes
    ----------
    ALREADY_EXISTS
        The module path (or the module file) is already occupied.
    INVALID_NAME
        A path segment cannot yield a module name, or is not valid text.
    INVALID_PATH
        The parent or grandparent of a module path cannot be computed.
    NOT_FOUND
        The expected super file does not exist.
    IO_FAILURE
        An underlying read, write, or rename failed.
    PATTERN_ERROR
        A line classification pattern failed to compile.
    CONFIGURATION_ERROR
        Runtime settings failed validation.
    """

    ALREADY_EXISTS = "already-exists"
    INVALID_NAME = "invalid-name"
    INVALID_PATH = "invalid-path"
    NOT_FOUND = "not-found"
    IO_FAILURE = "io-failure"
    PATTERN_ERROR = "pattern-error"
    CONFIGURATION_ERROR = "configuration-error"

    def __str__(self) -> str:
        """Return the code value as a string.

        Returns
        -------
        str
            The error code value (e.g., "already-exists").
        """
        return self.value


EXIT_CODES: Final[dict[ErrorCode, int]] = {
    ErrorCode.ALREADY_EXISTS: 1,
}
"""Process exit codes for error kinds the CLI reports as user errors."""

UNHANDLED_EXIT_CODE: Final[int] = 2


def get_exit_code(code: ErrorCode) -> int:
    """Return the process exit code for an error code.

    Parameters
    ----------
    code : ErrorCode
        Error code enum value.

    Returns
    -------
    int
        ``1`` for an occupied module path, ``2`` for every unclassified kind.

    Examples
    --------
    >>> get_exit_code(ErrorCode.ALREADY_EXISTS)
    1
    >>> get_exit_code(ErrorCode.NOT_FOUND)
    2
    """
    return EXIT_CODES.get(code, UNHANDLED_EXIT_CODE)
