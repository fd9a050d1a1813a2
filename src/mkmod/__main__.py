"""Allow ``python -m mkmod``."""

from __future__ import annotations

from mkmod.cli import app

if __name__ == "__main__":  # pragma: no cover - manual execution entrypoint
    app(prog_name="mkmod")
