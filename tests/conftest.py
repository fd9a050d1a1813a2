"""Shared pytest fixtures for mkmod tests.

This module provides reusable fixtures for:
- Cargo crate layouts on disk
- Writing and reading source files
- Isolating tests from ``MKMOD_*`` environment variables
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


@dataclass(frozen=True)
class Crate:
    """A throwaway Cargo crate created under ``tmp_path``."""

    root: Path
    src: Path

    def write(self, relative: str, content: str = "") -> Path:
        """Write ``content`` to ``src/<relative>`` and return the path."""
        path = self.src / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content.encode("utf-8"))
        return path

    def read(self, relative: str) -> str:
        """Return the exact text of ``src/<relative>`` (newlines untranslated)."""
        return (self.src / relative).read_bytes().decode("utf-8")


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop any ``MKMOD_*`` variables inherited from the developer shell."""
    for key in list(os.environ):
        if key.upper().startswith("MKMOD_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def _restore_root_logging() -> Iterator[None]:
    """Undo ``setup_logging`` calls made by CLI invocations."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers and type(handler) is logging.StreamHandler:
            root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture
def crate(tmp_path: Path) -> Crate:
    """Return an empty crate: ``Cargo.toml`` next to an empty ``src/``.

    Returns
    -------
    Crate
        Crate handle with ``root`` and ``src`` paths.
    """
    root = tmp_path / "crate"
    src = root / "src"
    src.mkdir(parents=True)
    (root / "Cargo.toml").write_text('[package]\nname = "demo"\n', encoding="utf-8")
    return Crate(root=root, src=src)


@pytest.fixture
def lib_crate(crate: Crate) -> Crate:
    """Return a crate with both ``lib.rs`` and ``main.rs`` entry files."""
    crate.write("lib.rs", "//! Demo library.\n\npub mod util;\n\npub fn run() {}\n")
    crate.write("main.rs", "fn main() {}\n")
    return crate
