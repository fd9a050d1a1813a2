"""Scaffold new modules in a Rust crate and register them in their super module.

Examples
--------
>>> from pathlib import Path
>>> from mkmod import create_module
>>> create_module(Path("src/parser"))  # doctest: +SKIP
"""

from __future__ import annotations

from mkmod.classify import ClassificationResult, classify_file, classify_lines
from mkmod.create import Module, ModuleKind, add_to_super, create_module
from mkmod.errors import ErrorCode, MkmodError
from mkmod.insert import add_module_to, insert_module_at_line
from mkmod.paths import resolve_super_file

__all__ = [
    "ClassificationResult",
    "ErrorCode",
    "MkmodError",
    "Module",
    "ModuleKind",
    "add_module_to",
    "add_to_super",
    "classify_file",
    "classify_lines",
    "create_module",
    "insert_module_at_line",
    "resolve_super_file",
]
