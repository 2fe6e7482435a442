"""Helpers shared by the command-line entry points."""

from __future__ import annotations

from typing import NoReturn, Optional

import typer

from artifact_cache.settings import Settings, get_settings


def load_settings(
    *,
    cache_dir: Optional[str] = None,
    artifactory_cli: Optional[str] = None,
    log_file: Optional[str] = None,
) -> Settings:
    """Environment settings with command line overrides applied."""
    overrides = {
        "cache_dir": cache_dir,
        "cli": artifactory_cli,
        "log_file": log_file,
    }
    settings = get_settings()
    return settings.model_copy(update={key: value for key, value in overrides.items() if value is not None})


def fail(exc: BaseException) -> NoReturn:
    """Report ``exc`` as a single ``ERROR:`` line on stderr and exit 1."""
    message = " ".join(str(exc).split()) or exc.__class__.__name__
    typer.echo(f"ERROR: {message}", err=True)
    raise typer.Exit(code=1)
