"""Exception hierarchy and error codes.

Examples
--------
>>> from mkmod.errors import ErrorCode, ModuleExistsError
>>> try:
...     raise ModuleExistsError("file already exists")
... except ModuleExistsError as e:
...     assert e.code == ErrorCode.ALREADY_EXISTS
"""

from __future__ import annotations

from mkmod.errors.codes import ErrorCode, get_exit_code
from mkmod.errors.exceptions import (
    FileOperationError,
    InvalidNameError,
    InvalidPathError,
    MkmodError,
    ModuleExistsError,
    PatternError,
    SettingsError,
    SuperFileNotFoundError,
    wrap_os_error,
)

__all__ = [
    "ErrorCode",
    "FileOperationError",
    "InvalidNameError",
    "InvalidPathError",
    "MkmodError",
    "ModuleExistsError",
    "PatternError",
    "SettingsError",
    "SuperFileNotFoundError",
    "get_exit_code",
    "wrap_os_error",
]
