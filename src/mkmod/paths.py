"""Module name derivation and super file resolution.

A module's super file is the file responsible for declaring it:

========================  ==================  ==========================
Location of the module    ``--main`` given    Super file
========================  ==================  ==========================
crate source root         no                  ``lib.rs``, else ``main.rs``
crate source root         yes                 ``main.rs``
nested directory module   either              ``mod.rs``
========================  ==================  ==========================

The crate source root is the directory whose parent contains ``Cargo.toml``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Final

from mkmod.conventions import DIR_ENTRY, LIB_ENTRY, MAIN_ENTRY, MANIFEST
from mkmod.errors import (
    InvalidNameError,
    InvalidPathError,
    SuperFileNotFoundError,
    wrap_os_error,
)
from mkmod.logging import get_logger

__all__ = [
    "is_crate_root",
    "module_name",
    "resolve_super_file",
]

logger = get_logger(__name__)

# (parent is crate root, use main entry) -> candidates, first existing wins,
# the last one is the fallback
_SUPER_CANDIDATES: Final[dict[tuple[bool, bool], tuple[str, ...]]] = {
    (True, False): (LIB_ENTRY, MAIN_ENTRY),
    (True, True): (MAIN_ENTRY,),
    (False, False): (DIR_ENTRY,),
    (False, True): (DIR_ENTRY,),
}


def module_name(path: Path, *, stem: bool = False) -> str:
    """Derive a module name from the final segment of ``path``.

    Parameters
    ----------
    path : Path
        Module path.
    stem : bool, optional
        Use the segment without its extension (``foo.rs`` -> ``foo``).
        Defaults to False.

    Returns
    -------
    str
        Module name.

    Raises
    ------
    InvalidNameError
        If the path has no final segment (``/``, ``.``, ``..``) or the segment
        is not representable as text.

    Examples
    --------
    >>> module_name(Path("src/parser"))
    'parser'
    >>> module_name(Path("src/parser.rs"), stem=True)
    'parser'
    """
    name = path.stem if stem else path.name
    if not name or name == "..":
        msg = f"module name could not be derived from path: {path}"
        raise InvalidNameError(msg, context={"path": str(path)})
    try:
        name.encode("utf-8")
    except UnicodeEncodeError as exc:
        msg = f"module name is not valid text: {name!r}"
        raise InvalidNameError(msg, cause=exc, context={"path": repr(path)}) from exc
    return name


def is_crate_root(directory: Path) -> bool:
    """Return True when ``directory`` is a crate source root."""
    return (directory.parent / MANIFEST).exists()


def _parents(path: Path) -> tuple[Path, Path]:
    try:
        abs_path = path.resolve(strict=True)
    except OSError as exc:
        raise wrap_os_error(exc, path=path) from exc

    parent = abs_path.parent
    if parent == abs_path:
        msg = f"parent could not be found from path: {path}"
        raise InvalidPathError(msg, context={"path": str(path)})
    grandparent = parent.parent
    if grandparent == parent:
        msg = f"grandparent could not be found from path: {path}"
        raise InvalidPathError(msg, context={"path": str(path)})
    return parent, grandparent


def resolve_super_file(path: Path, *, use_main_entry: bool = False) -> Path:
    """Return the super file that should declare the module at ``path``.

    Parameters
    ----------
    path : Path
        Existing module path: the ``.rs`` file of a file module, or the
        directory of a directory module.
    use_main_entry : bool, optional
        At the crate source root, target ``main.rs`` instead of ``lib.rs``.
        Ignored for nested modules. Defaults to False.

    Returns
    -------
    Path
        Absolute path of the super file.

    Raises
    ------
    FileOperationError
        If ``path`` cannot be resolved (for example it does not exist).
    InvalidPathError
        If ``path`` has no parent or grandparent.
    SuperFileNotFoundError
        If the selected super file does not exist.
    """
    parent, _ = _parents(path)
    at_root = is_crate_root(parent)

    candidates = _SUPER_CANDIDATES[at_root, use_main_entry]
    super_file = next(
        (parent / name for name in candidates if (parent / name).exists()),
        parent / candidates[-1],
    )
    if not super_file.exists():
        msg = f"parent module does not exist: {super_file}"
        raise SuperFileNotFoundError(
            msg, context={"path": str(path), "super_file": str(super_file)}
        )

    logger.debug(
        "Resolved super file",
        extra={
            "operation": "resolve_super_file",
            "path": str(path),
            "super_file": str(super_file),
            "crate_root": at_root,
        },
    )
    return super_file
