"""``artifactory-download``: fetch a prebuilt artifact into the cache directory."""

from __future__ import annotations

import logging
from typing import List, Optional

import typer

from artifact_cache.cli.common import fail, load_settings
from artifact_cache.domain import ArtifactCoordinates, parse_property_args
from artifact_cache.factory import create_session
from artifact_cache.logging_config import configure_logging

log = logging.getLogger(__name__)

app = typer.Typer(
    name="artifactory-download",
    help="Look up an artifact and download its files. Prints the files joined with ';'.",
    add_completion=False,
)


@app.command()
def download(
    repo: str = typer.Argument(..., help="Repository name"),
    group: str = typer.Argument(..., help="Dotted group id"),
    name: str = typer.Argument(..., help="Artifact id"),
    version: str = typer.Argument(..., help="Version; a -SNAPSHOT suffix selects the newest timestamped build"),
    properties: Optional[List[str]] = typer.Option(
        None, "--property", "-p", help="Identity property key=value used as filter (repeatable)"
    ),
    classifier: Optional[str] = typer.Option(None, "--classifier", help="Only fetch files with this classifier"),
    extension: Optional[str] = typer.Option(None, "--extension", help="Only fetch files with this extension"),
    cache_dir: Optional[str] = typer.Option(None, "--cache-dir", help="Cache root directory"),
    artifactory_cli: Optional[str] = typer.Option(None, "--artifactory-cli", help="Path to the jfrog executable"),
    log_file: Optional[str] = typer.Option(None, "--log", help="Append log output to this file"),
) -> None:
    """Download the newest matching artifact version."""
    try:
        settings = load_settings(cache_dir=cache_dir, artifactory_cli=artifactory_cli, log_file=log_file)
        configure_logging(settings.log_level, settings.log_file)
        coords = ArtifactCoordinates(repo=repo, groupid=group, artifactid=name, version=version)
        identity = parse_property_args(properties)
        session = create_session(settings)
        result = session.resolve(coords, identity, classifier=classifier, extension=extension)
    except Exception as exc:
        log.debug("Download failed", exc_info=True)
        fail(exc)
    typer.echo(result.joined(";") if result else "")


def main() -> None:  # pragma: no cover - console script
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
