"""Command line interface for adding modules to a Rust crate.

Success is silent. An occupied module path is reported as a one-line user
error; any other failure is unexpected and is reported loudly with its
traceback in the log.
"""

from __future__ import annotations

from functools import lru_cache
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as pkg_version
from pathlib import Path
from typing import Annotated, Final

import typer

from mkmod.create import create_module
from mkmod.errors import ErrorCode, MkmodError
from mkmod.logging import get_logger, setup_logging, with_fields
from mkmod.settings import MkmodSettings, load_settings

__all__ = [
    "app",
    "main",
]

CLI_COMMAND: Final[str] = "mkmod"
CLI_TITLE: Final[str] = "Create a new module in a Rust crate"

ALREADY_EXISTS_MESSAGE: Final[str] = "a file of that name already exists"

LOGGER = get_logger(__name__)


@lru_cache(maxsize=1)
def _resolve_cli_version() -> str:
    """Return the installed mkmod package version.

    Returns
    -------
    str
        Detected ``mkmod`` package version, or ``"0.0.0"`` when unavailable.
    """
    try:
        return pkg_version("mkmod")
    except PackageNotFoundError:  # pragma: no cover - source checkout without install
        return "0.0.0"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"{CLI_COMMAND} {_resolve_cli_version()}")
        raise typer.Exit


app = typer.Typer(help=CLI_TITLE, no_args_is_help=True, add_completion=False)


def _load_settings(log_level: str | None) -> MkmodSettings:
    overrides: dict[str, object] = {}
    if log_level is not None:
        overrides["log_level"] = log_level
    try:
        return load_settings(**overrides)
    except MkmodError as exc:
        typer.echo(f"An unhandled error occurred: {exc}", err=True)
        raise typer.Exit(code=exc.exit_code) from exc


@app.command(help=CLI_TITLE, no_args_is_help=True)
def main(
    path: Annotated[Path, typer.Argument(help="Path to the module, without extension.")],
    directory: Annotated[
        bool, typer.Option("--dir", help="Create the module as a directory.")
    ] = False,
    no_test: Annotated[bool, typer.Option("--no-test", help="Do not add a test file.")] = False,
    no_add: Annotated[
        bool, typer.Option("--no-add", help="Do not add the module to its super module.")
    ] = False,
    use_main: Annotated[
        bool,
        typer.Option(
            "--main",
            help=(
                "Add the module to main.rs instead of lib.rs "
                "(only applies when adding to the crate root)."
            ),
        ),
    ] = False,
    private: Annotated[
        bool,
        typer.Option(
            "--private",
            help="Add the module to its super module as private.",
        ),
    ] = False,
    log_level: Annotated[
        str | None,
        typer.Option(
            "--log-level",
            help="Logging level for diagnostics on stderr (overrides MKMOD_LOG_LEVEL).",
            metavar="LEVEL",
        ),
    ] = None,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show the version and exit.",
        ),
    ] = False,
) -> None:
    """Create a module at PATH and register it in its super module.

    Raises
    ------
    typer.Exit
        Raised with a non-zero exit code when the command fails.
    """
    del version
    settings = _load_settings(log_level)
    setup_logging(settings.log_level, json_format=settings.log_json)

    with with_fields(LOGGER, operation="create", path=str(path)) as logger:
        try:
            create_module(
                path,
                is_directory=directory,
                with_test=not no_test,
                add_to_super=not no_add,
                use_main_entry=use_main,
                is_public=not private,
                encoding=settings.encoding,
            )
        except MkmodError as exc:
            if exc.code is ErrorCode.ALREADY_EXISTS:
                logger.log(exc.log_level, "Module path is occupied", extra={"status": "error"})
                typer.echo(f"An error occurred: {ALREADY_EXISTS_MESSAGE}")
                raise typer.Exit(code=exc.exit_code) from exc

            logger.exception(
                "Unhandled error",
                extra={"status": "error", "code": exc.code.value, **_context_fields(exc)},
            )
            typer.echo(f"An unhandled error occurred: {exc}", err=True)
            raise typer.Exit(code=exc.exit_code) from exc


def _context_fields(exc: MkmodError) -> dict[str, object]:
    # "path" is already bound on the adapter
    return {f"error_{key}": value for key, value in exc.context.items()}


if __name__ == "__main__":  # pragma: no cover - manual execution entrypoint
    app()
