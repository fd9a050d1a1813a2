"""Classification of the leading region of a Rust source file.

The classifier makes a single forward pass over a file's lines and reports
two leading segments:

* the **header comment**: ``//`` lines before any other content, after
  leading blank lines;
* the **preamble**: the first contiguous run of ``use`` / ``mod`` lines after
  the header comment.

Scanning stops as soon as the preamble ends. Only ``//`` line comments are
recognised; block comments (``/* ... */``) are treated as ordinary content.

Examples
--------
>>> result = classify_lines(["// header", "", "use a::b;", "mod x;", "fn main(){}"])
>>> result.header_comment_end, result.preamble_end
(0, 3)
>>> result.insertion_point
4
"""

from __future__ import annotations

import re
from contextlib import closing
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Final

from mkmod.errors import PatternError
from mkmod.fs import iter_lines
from mkmod.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

__all__ = [
    "COMMENT_PATTERN",
    "MODULE_PATTERN",
    "USE_PATTERN",
    "ClassificationResult",
    "LinePatterns",
    "classify_file",
    "classify_lines",
    "default_patterns",
]

logger = get_logger(__name__)

USE_PATTERN: Final[str] = r"^\s*use\s+"
MODULE_PATTERN: Final[str] = r"^\s*(?:pub)?\s*mod"
COMMENT_PATTERN: Final[str] = r"^\s*//"


@dataclass(frozen=True, slots=True)
class LinePatterns:
    """Compiled line-prefix matchers used by the classifier.

    Attributes
    ----------
    use : re.Pattern[str]
        Matches import lines.
    module : re.Pattern[str]
        Matches module declaration lines.
    comment : re.Pattern[str]
        Matches header comment lines.
    """

    use: re.Pattern[str]
    module: re.Pattern[str]
    comment: re.Pattern[str]

    @classmethod
    def compile(
        cls,
        *,
        use: str = USE_PATTERN,
        module: str = MODULE_PATTERN,
        comment: str = COMMENT_PATTERN,
    ) -> LinePatterns:
        """Compile the three line patterns.

        Parameters
        ----------
        use : str, optional
            Import line pattern. Defaults to :data:`USE_PATTERN`.
        module : str, optional
            Module declaration pattern. Defaults to :data:`MODULE_PATTERN`.
        comment : str, optional
            Comment line pattern. Defaults to :data:`COMMENT_PATTERN`.

        Returns
        -------
        LinePatterns
            Compiled patterns.

        Raises
        ------
        PatternError
            If any pattern is not a valid regular expression.
        """
        compiled: dict[str, re.Pattern[str]] = {}
        for field, source in (("use", use), ("module", module), ("comment", comment)):
            try:
                compiled[field] = re.compile(source)
            except re.error as exc:
                msg = f"invalid {field} pattern {source!r}: {exc}"
                raise PatternError(msg, cause=exc, context={"pattern": source}) from exc
        return cls(**compiled)

    def is_comment(self, line: str) -> bool:
        """Return True when ``line`` is a comment line."""
        return self.comment.match(line) is not None

    def is_preamble(self, line: str) -> bool:
        """Return True when ``line`` is an import or module declaration."""
        return self.use.match(line) is not None or self.module.match(line) is not None


@lru_cache(maxsize=1)
def default_patterns() -> LinePatterns:
    """Return the cached default :class:`LinePatterns`."""
    return LinePatterns.compile()


@dataclass(frozen=True, slots=True)
class ClassificationResult:
    """Leading-region metadata of a source file.

    Line numbers are zero-indexed. An ``*_end`` of None means the segment
    runs to the end of the file (or the segment does not exist).

    Attributes
    ----------
    preamble_exists : bool
        Whether a ``use`` / ``mod`` preamble was found.
    preamble_end : int | None
        Index of the last preamble line, or None when the preamble reaches
        the end of the file.
    header_comment_exists : bool
        Whether the file starts with a ``//`` comment block.
    header_comment_end : int | None
        Index of the last header comment line, or None when the comment block
        reaches the end of the file.
    """

    preamble_exists: bool = False
    preamble_end: int | None = None
    header_comment_exists: bool = False
    header_comment_end: int | None = None

    @property
    def insertion_point(self) -> int | None:
        """Line index at which a new module declaration belongs.

        After the preamble if there is one, otherwise after the header
        comment, otherwise at the top of the file. None means append at the
        end of the file.

        Returns
        -------
        int | None
            Zero-indexed line number, or None to append.
        """
        if self.preamble_exists:
            return None if self.preamble_end is None else self.preamble_end + 1
        if self.header_comment_exists:
            return None if self.header_comment_end is None else self.header_comment_end + 1
        return 0


def classify_lines(
    lines: Iterable[str], *, patterns: LinePatterns | None = None
) -> ClassificationResult:
    """Classify the leading region of a sequence of source lines.

    Parameters
    ----------
    lines : Iterable[str]
        Source lines, with or without line terminators. Consumed lazily;
        iteration stops once the preamble ends.
    patterns : LinePatterns | None, optional
        Line matchers. Defaults to :func:`default_patterns`.

    Returns
    -------
    ClassificationResult
        Header comment and preamble metadata.
    """
    patterns = patterns or default_patterns()

    preamble_exists = False
    preamble_end: int | None = None
    header_comment_exists = False
    header_comment_end: int | None = None
    content_started = False
    body_started = False

    for l_num, line in enumerate(lines):
        if not content_started and not line.strip():
            continue
        content_started = True

        if not body_started:
            if patterns.is_comment(line):
                header_comment_exists = True
                continue
            if header_comment_exists:
                header_comment_end = l_num - 1
            body_started = True

        if patterns.is_preamble(line):
            preamble_exists = True
        elif preamble_exists:
            preamble_end = l_num - 1
            break

    return ClassificationResult(
        preamble_exists=preamble_exists,
        preamble_end=preamble_end,
        header_comment_exists=header_comment_exists,
        header_comment_end=header_comment_end,
    )


def classify_file(
    path: Path,
    *,
    patterns: LinePatterns | None = None,
    encoding: str = "utf-8",
) -> ClassificationResult:
    """Classify the leading region of the file at ``path``.

    Parameters
    ----------
    path : Path
        Source file to scan.
    patterns : LinePatterns | None, optional
        Line matchers. Defaults to :func:`default_patterns`.
    encoding : str, optional
        Text encoding. Defaults to "utf-8".

    Returns
    -------
    ClassificationResult
        Header comment and preamble metadata.

    Raises
    ------
    FileOperationError
        If the file cannot be opened, read, or decoded.
    """
    with closing(iter_lines(path, encoding=encoding)) as lines:
        result = classify_lines(lines, patterns=patterns)
    logger.debug(
        "Classified file",
        extra={
            "operation": "classify",
            "path": str(path),
            "preamble_exists": result.preamble_exists,
            "preamble_end": result.preamble_end,
            "header_comment_exists": result.header_comment_exists,
            "header_comment_end": result.header_comment_end,
        },
    )
    return result
