"""Cargo layout conventions consumed and produced by mkmod."""

from __future__ import annotations

from typing import Final

__all__ = [
    "DIR_ENTRY",
    "LIB_ENTRY",
    "MAIN_ENTRY",
    "MANIFEST",
    "MOD_STEM",
    "SOURCE_EXTENSION",
    "TEST_SUFFIX",
    "source_file_name",
]

MANIFEST: Final[str] = "Cargo.toml"
"""Marker file whose presence in the grandparent identifies the crate source root."""

SOURCE_EXTENSION: Final[str] = "rs"

MOD_STEM: Final[str] = "mod"
"""Stem of a directory module's entry file."""

LIB_ENTRY: Final[str] = f"lib.{SOURCE_EXTENSION}"
MAIN_ENTRY: Final[str] = f"main.{SOURCE_EXTENSION}"
DIR_ENTRY: Final[str] = f"{MOD_STEM}.{SOURCE_EXTENSION}"

TEST_SUFFIX: Final[str] = "_test"


def source_file_name(stem: str) -> str:
    """Return ``stem`` with the source extension appended (``foo`` -> ``foo.rs``)."""
    return f"{stem}.{SOURCE_EXTENSION}"
