"""Insertion of ``mod`` declarations into an existing source file.

The file is streamed into a scratch file in the same directory with the new
declaration spliced in, then renamed over the original. Original lines are
copied verbatim, terminators included.
"""

from __future__ import annotations

from contextlib import closing
from typing import TYPE_CHECKING

from mkmod.classify import classify_file
from mkmod.fs import atomic_rewrite, iter_lines
from mkmod.logging import get_logger, with_fields

if TYPE_CHECKING:
    from pathlib import Path

    from mkmod.classify import LinePatterns

__all__ = [
    "add_module_to",
    "insert_module_at_line",
    "module_declaration",
]

logger = get_logger(__name__)


def module_declaration(name: str, *, public: bool = True) -> str:
    """Return the declaration line for module ``name``, without terminator.

    Examples
    --------
    >>> module_declaration("parser")
    'pub mod parser;'
    >>> module_declaration("parser", public=False)
    'mod parser;'
    """
    return f"pub mod {name};" if public else f"mod {name};"


def _newline_of(line: str) -> str | None:
    if line.endswith("\r\n"):
        return "\r\n"
    if line.endswith("\n"):
        return "\n"
    return None


def insert_module_at_line(
    name: str,
    insert: int | None,
    path: Path,
    *,
    public: bool = True,
    encoding: str = "utf-8",
) -> None:
    """Insert a declaration for module ``name`` into ``path``.

    Parameters
    ----------
    name : str
        Name of the module to declare.
    insert : int | None
        Zero-indexed line before which the declaration is written, or None
        to append it after the last line.
    path : Path
        File to rewrite.
    public : bool, optional
        Declare the module ``pub``. Defaults to True.
    encoding : str, optional
        Text encoding of ``path``. Defaults to "utf-8".

    Raises
    ------
    FileOperationError
        If reading, writing, or the final rename fails. ``path`` is left
        unchanged in that case.

    Notes
    -----
    The declaration is appended when ``insert`` is None, when the file is
    empty, or when ``insert`` lies past the last line. An unterminated last
    line receives a newline first so the declaration stays on its own line.
    The declaration uses the file's newline convention (``\\r\\n`` or
    ``\\n``), detected from the lines already copied.
    """
    declaration = module_declaration(name, public=public)
    newline: str | None = None
    inserted = False
    last_line: str | None = None

    with (
        atomic_rewrite(path, encoding=encoding) as out,
        closing(iter_lines(path, encoding=encoding)) as lines,
    ):
        for l_num, line in enumerate(lines):
            newline = newline or _newline_of(line)
            if insert == l_num:
                out.write(declaration + (newline or "\n"))
                inserted = True
            out.write(line)
            last_line = line

        if not inserted:
            if last_line is not None and _newline_of(last_line) is None:
                out.write(newline or "\n")
            out.write(declaration + (newline or "\n"))

    logger.debug(
        "Inserted module declaration",
        extra={
            "operation": "insert",
            "path": str(path),
            "module_name": name,
            "line": insert,
            "appended": not inserted,
        },
    )


def add_module_to(
    name: str,
    path: Path,
    *,
    public: bool = True,
    patterns: LinePatterns | None = None,
    encoding: str = "utf-8",
) -> int | None:
    """Register module ``name`` in the super file at ``path``.

    The declaration goes after the preamble, else after the header comment,
    else at the top of the file.

    Parameters
    ----------
    name : str
        Module name to declare.
    path : Path
        Super file to modify.
    public : bool, optional
        Declare the module ``pub``. Defaults to True.
    patterns : LinePatterns | None, optional
        Line matchers for classification. Defaults to the built-in patterns.
    encoding : str, optional
        Text encoding of ``path``. Defaults to "utf-8".

    Returns
    -------
    int | None
        The insertion point used (None when the declaration was appended).
    """
    with with_fields(
        logger, operation="add_module_to", path=str(path), module_name=name
    ) as log:
        result = classify_file(path, patterns=patterns, encoding=encoding)
        insert = result.insertion_point
        log.debug("Computed insertion point", extra={"line": insert})
        insert_module_at_line(name, insert, path, public=public, encoding=encoding)
    return insert
