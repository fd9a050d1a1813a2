"""Runtime settings with typed configuration and fail-fast validation.

Settings are read from ``MKMOD_*`` environment variables. Ecosystem names
(``Cargo.toml``, ``lib.rs``, ``main.rs``, ``mod.rs``) are fixed conventions in
:mod:`mkmod.conventions` and are deliberately not configurable here.

Examples
--------
>>> from mkmod.settings import load_settings
>>> settings = load_settings(log_level="DEBUG")
>>> assert settings.encoding == "utf-8"
"""

from __future__ import annotations

import codecs
import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from mkmod.errors import SettingsError
from mkmod.logging import get_logger

__all__ = [
    "MkmodSettings",
    "load_settings",
]

logger = get_logger(__name__)


class MkmodSettings(BaseSettings):
    """Runtime configuration loaded from environment variables (``MKMOD_*``)."""

    model_config = SettingsConfigDict(
        env_prefix="MKMOD_",
        extra="forbid",
        case_sensitive=False,
    )

    log_level: str = Field(
        default="WARNING", description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )
    log_json: bool = Field(default=False, description="Emit log records as JSON lines")
    encoding: str = Field(
        default="utf-8", description="Text encoding used to read and rewrite super files"
    )

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            msg = f"unknown log level: {value}"
            raise ValueError(msg)
        return level

    @field_validator("encoding")
    @classmethod
    def _check_encoding(cls, value: str) -> str:
        try:
            codecs.lookup(value)
        except LookupError as exc:
            msg = f"unknown encoding: {value}"
            raise ValueError(msg) from exc
        return value

    def __init__(self, **overrides: object) -> None:
        """Initialise settings with fail-fast validation."""
        try:
            super().__init__(**overrides)  # type: ignore[arg-type]
        except Exception as exc:
            msg = f"Configuration validation failed: {exc}"
            logger.debug(
                "Settings validation failed",
                extra={"operation": "settings", "status": "error", "error": str(exc)},
            )
            errors = _validation_errors(exc)
            raise SettingsError(
                msg,
                errors=errors,
                cause=exc,
                context={"validation_error": str(exc)},
            ) from exc


def _validation_errors(exc: Exception) -> list[dict[str, object]] | None:
    errors = getattr(exc, "errors", None)
    if not callable(errors):
        return None
    return [
        {"field": ".".join(str(part) for part in err.get("loc", ())), "issue": err.get("msg")}
        for err in errors()
    ]


def load_settings(**overrides: object) -> MkmodSettings:
    """Load :class:`MkmodSettings` with optional overrides.

    Parameters
    ----------
    **overrides : object
        Field values that take precedence over the environment.

    Returns
    -------
    MkmodSettings
        Validated settings.

    Raises
    ------
    SettingsError
        If validation fails.
    """
    return MkmodSettings(**overrides)
