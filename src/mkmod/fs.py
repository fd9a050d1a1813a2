"""Filesystem helpers using pathlib for safe, typed operations.

The central helper is :func:`atomic_rewrite`, which hands out a scratch file
in the target's directory and renames it over the target only when the
``with`` block completes. Any exception inside the block removes the scratch
file and leaves the target untouched.

Examples
--------
>>> from pathlib import Path
>>> from mkmod.fs import atomic_rewrite
>>> target = Path("/tmp/lib.rs")
>>> with atomic_rewrite(target) as out:
...     out.write("pub mod foo;\\n")
"""

from __future__ import annotations

import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

from mkmod.errors import wrap_os_error
from mkmod.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Iterator
    from typing import TextIO

__all__ = [
    "atomic_rewrite",
    "create_new",
    "iter_lines",
]

logger = get_logger(__name__)


def create_new(path: Path, content: str = "", *, encoding: str = "utf-8") -> Path:
    """Create ``path`` exclusively and write ``content`` into it.

    Parameters
    ----------
    path : Path
        File to create. Must not exist.
    content : str, optional
        Initial text content. Defaults to an empty file.
    encoding : str, optional
        Text encoding. Defaults to "utf-8".

    Returns
    -------
    Path
        The created path (same as input).

    Raises
    ------
    ModuleExistsError
        If ``path`` already exists.
    FileOperationError
        If the file cannot be created or written.
    """
    try:
        with path.open("x", encoding=encoding, newline="") as handle:
            handle.write(content)
    except OSError as exc:
        raise wrap_os_error(exc, path=path) from exc
    return path


def iter_lines(path: Path, *, encoding: str = "utf-8") -> Iterator[str]:
    """Yield the lines of ``path`` with their terminators preserved.

    Lines end at ``\\n`` only; a lone ``\\r`` stays inside its line.

    Parameters
    ----------
    path : Path
        Text file to read.
    encoding : str, optional
        Text encoding. Defaults to "utf-8".

    Yields
    ------
    str
        Each line exactly as stored, including ``\\n`` or ``\\r\\n``.

    Raises
    ------
    FileOperationError
        If the file cannot be opened, read, or decoded.
    """
    try:
        with path.open(encoding=encoding, newline="") as handle:
            pending = ""
            for piece in handle:
                pending += piece
                if pending.endswith("\n"):
                    yield pending
                    pending = ""
            if pending:
                yield pending
    except (OSError, UnicodeDecodeError) as exc:
        raise wrap_os_error(exc, path=path) from exc


@contextmanager
def atomic_rewrite(path: Path, *, encoding: str = "utf-8") -> Iterator[TextIO]:
    """Rewrite ``path`` atomically through a scratch file.

    The scratch file is created in the same directory as ``path`` so the
    final :meth:`pathlib.Path.replace` is a same-filesystem rename. The
    target's permission bits are copied onto the scratch file before the
    rename.

    Parameters
    ----------
    path : Path
        Existing file to replace.
    encoding : str, optional
        Text encoding for the scratch file. Defaults to "utf-8".

    Yields
    ------
    TextIO
        Writable text handle (``newline=""``, so terminators are written
        verbatim).

    Raises
    ------
    FileOperationError
        If the scratch file cannot be created or written, or the rename fails.
    """
    tmp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding=encoding,
            newline="",
        ) as temp_file:
            tmp_path = Path(temp_file.name)
            yield temp_file
            temp_file.flush()
        shutil.copymode(path, tmp_path)
        tmp_path.replace(path)
        logger.debug(
            "Replaced file atomically",
            extra={"operation": "atomic_rewrite", "path": str(path)},
        )
        tmp_path = None
    except OSError as exc:
        raise wrap_os_error(exc, path=path) from exc
    finally:
        if tmp_path is not None:
            tmp_path.unlink(missing_ok=True)
