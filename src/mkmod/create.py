"""Creation of file and directory modules.

:func:`create_module` is the entry point used by the CLI. It creates the
module file (and optional companion test file), then registers the module in
its super file. Files created before a later failure are left on disk.

Examples
--------
>>> from pathlib import Path
>>> from mkmod.create import create_module
>>> module = create_module(Path("src/parser"), add_to_super=False)  # doctest: +SKIP
>>> module.path
PosixPath('src/parser.rs')
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Final

from mkmod.conventions import MOD_STEM, SOURCE_EXTENSION, TEST_SUFFIX, source_file_name
from mkmod.errors import ModuleExistsError, wrap_os_error
from mkmod.fs import create_new
from mkmod.insert import add_module_to
from mkmod.logging import get_logger, with_fields
from mkmod.paths import module_name, resolve_super_file

if TYPE_CHECKING:
    from pathlib import Path

__all__ = [
    "TEST_TEMPLATE",
    "Module",
    "ModuleKind",
    "add_to_super",
    "create_module",
    "make_module_dir",
    "make_module_file",
    "render_test_template",
]

logger = get_logger(__name__)

TEST_TEMPLATE: Final[str] = """
#[cfg(test)]
#[path = "./{test_file}"]
mod {test_module};
"""


class ModuleKind(StrEnum):
    """How a module is laid out on disk."""

    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True, slots=True)
class Module:
    """A module created by :func:`create_module`.

    Attributes
    ----------
    name : str
        Module name (final segment of the requested path).
    path : Path
        The module's ``.rs`` file, or its directory for a directory module.
    kind : ModuleKind
        File or directory module.
    has_test : bool
        Whether a companion test file was created.
    """

    name: str
    path: Path
    kind: ModuleKind
    has_test: bool


def render_test_template(name: str, *, test_file: str | None = None) -> str:
    """Return the module file body that links the companion test module.

    ``test_file`` defaults to ``<name>_test.rs``.

    Examples
    --------
    >>> print(render_test_template("parser"), end="")
    <BLANKLINE>
    #[cfg(test)]
    #[path = "./parser_test.rs"]
    mod parser_test;
    """
    test_module = f"{name}{TEST_SUFFIX}"
    test_file = test_file or source_file_name(test_module)
    return TEST_TEMPLATE.format(test_file=test_file, test_module=test_module)


def make_module_file(path: Path, *, with_test: bool = True, encoding: str = "utf-8") -> Path:
    """Create a file module.

    Parameters
    ----------
    path : Path
        Module path. Its extension, if any, is replaced (``src/parser`` and
        ``src/parser.rs`` both create ``src/parser.rs``).
    with_test : bool, optional
        Also create ``<path>_test.rs`` and link it from the module file.
        Defaults to True.
    encoding : str, optional
        Text encoding of the created files. Defaults to "utf-8".

    Returns
    -------
    Path
        Path of the created ``.rs`` file.

    Raises
    ------
    InvalidNameError
        If no module name can be derived from ``path``.
    ModuleExistsError
        If the ``.rs`` file already exists.
    FileOperationError
        If a file cannot be created or written.
    """
    module_name(path)
    mod_path = path.with_suffix(f".{SOURCE_EXTENSION}")
    name = module_name(mod_path, stem=True)
    create_new(mod_path, encoding=encoding)

    if with_test:
        test_path = path.with_name(source_file_name(f"{path.name}{TEST_SUFFIX}"))
        try:
            test_path.write_text("", encoding=encoding)
        except OSError as exc:
            raise wrap_os_error(exc, path=test_path) from exc
        try:
            with mod_path.open("a", encoding=encoding, newline="") as handle:
                handle.write(render_test_template(name, test_file=test_path.name))
        except OSError as exc:
            raise wrap_os_error(exc, path=mod_path) from exc

    logger.debug(
        "Created module file",
        extra={
            "operation": "make_module_file",
            "path": str(mod_path),
            "module_name": name,
            "with_test": with_test,
        },
    )
    return mod_path


def make_module_dir(path: Path, *, with_test: bool = True, encoding: str = "utf-8") -> Path:
    """Create a directory module with a ``mod.rs`` entry file.

    Parameters
    ----------
    path : Path
        Directory to create. Its parent must exist.
    with_test : bool, optional
        Also create ``mod_test.rs`` inside the directory. Defaults to True.
    encoding : str, optional
        Text encoding of the created files. Defaults to "utf-8".

    Returns
    -------
    Path
        The created directory.

    Raises
    ------
    ModuleExistsError
        If ``path`` already exists.
    FileOperationError
        If the directory or its files cannot be created.
    """
    try:
        path.mkdir()
    except OSError as exc:
        raise wrap_os_error(exc, path=path) from exc

    make_module_file(path / MOD_STEM, with_test=with_test, encoding=encoding)
    return path


def add_to_super(
    path: Path,
    *,
    use_main_entry: bool = False,
    public: bool = True,
    encoding: str = "utf-8",
) -> Path:
    """Register an existing module in its super file.

    Parameters
    ----------
    path : Path
        The module's ``.rs`` file, or its directory for a directory module.
    use_main_entry : bool, optional
        At the crate source root, register in ``main.rs`` instead of
        ``lib.rs``. Defaults to False.
    public : bool, optional
        Declare the module ``pub``. Defaults to True.
    encoding : str, optional
        Text encoding of the super file. Defaults to "utf-8".

    Returns
    -------
    Path
        The super file that was modified.

    Raises
    ------
    SuperFileNotFoundError
        If the super file does not exist.
    InvalidPathError
        If ``path`` has no parent or grandparent.
    InvalidNameError
        If no module name can be derived from ``path``.
    FileOperationError
        If the super file cannot be read or rewritten.
    """
    return _register_in_super(
        path, use_main_entry=use_main_entry, public=public, encoding=encoding
    )


def _register_in_super(
    path: Path, *, use_main_entry: bool, public: bool, encoding: str
) -> Path:
    super_file = resolve_super_file(path, use_main_entry=use_main_entry)
    name = module_name(path, stem=True)
    add_module_to(name, super_file, public=public, encoding=encoding)
    return super_file


def create_module(
    path: Path,
    *,
    is_directory: bool = False,
    with_test: bool = True,
    add_to_super: bool = True,
    use_main_entry: bool = False,
    is_public: bool = True,
    encoding: str = "utf-8",
) -> Module:
    """Create a new module and optionally register it in its super file.

    Parameters
    ----------
    path : Path
        Module path. For a file module an existing extension is replaced
        by ``.rs``.
    is_directory : bool, optional
        Create a directory module instead of a file module. Defaults to False.
    with_test : bool, optional
        Create a companion test file. Defaults to True.
    add_to_super : bool, optional
        Declare the module in its super file. Defaults to True.
    use_main_entry : bool, optional
        At the crate source root, register in ``main.rs`` instead of
        ``lib.rs``. Defaults to False.
    is_public : bool, optional
        Declare the module ``pub``. Defaults to True.
    encoding : str, optional
        Text encoding of created and modified files. Defaults to "utf-8".

    Returns
    -------
    Module
        Description of the created module.

    Raises
    ------
    ModuleExistsError
        If ``path`` already exists. Checked before anything is created.
    MkmodError
        Any error from module creation or registration. Already created
        files are not rolled back.
    """
    if path.exists():
        msg = f"file already exists: {path}"
        raise ModuleExistsError(msg, context={"path": str(path)})

    name = module_name(path, stem=True)
    kind = ModuleKind.DIRECTORY if is_directory else ModuleKind.FILE

    with with_fields(
        logger, operation="create", path=str(path), module_name=name
    ) as log:
        if kind is ModuleKind.DIRECTORY:
            mod_path = make_module_dir(path, with_test=with_test, encoding=encoding)
        else:
            mod_path = make_module_file(path, with_test=with_test, encoding=encoding)
        log.info("Created %s module", kind.value, extra={"module_path": str(mod_path)})

        if add_to_super:
            super_file = _register_in_super(
                mod_path, use_main_entry=use_main_entry, public=is_public, encoding=encoding
            )
            log.info("Registered module", extra={"super_file": str(super_file)})

    return Module(name=name, path=mod_path, kind=kind, has_test=with_test)

