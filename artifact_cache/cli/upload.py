"""``artifactory-upload``: publish build outputs of one artifact."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer

from artifact_cache.cli.common import fail, load_settings
from artifact_cache.domain import ArtifactCoordinates, UploadVersion, ValidationError, parse_property_args
from artifact_cache.factory import create_session
from artifact_cache.logging_config import configure_logging
from artifact_cache.publish import collect_local_files

log = logging.getLogger(__name__)

app = typer.Typer(
    name="artifactory-upload",
    help="Upload an artifact's files: main file, then descriptor, then the rest.",
    add_completion=False,
)


def expand_paths(paths: List[str], *, ignore_missing: bool) -> List[Path]:
    files: List[Path] = []
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            files.extend(collect_local_files(path))
        elif path.is_file():
            files.append(path)
        elif ignore_missing:
            log.info("Skipping missing path %s", raw)
        else:
            raise ValidationError(f"Local file {raw} does not exist")
    return files


@app.command()
def upload(
    repo: str = typer.Argument(..., help="Repository name"),
    group: str = typer.Argument(..., help="Dotted group id"),
    name: str = typer.Argument(..., help="Artifact id"),
    version: str = typer.Argument(..., help="Nominal version the local files are named with"),
    upload_version: str = typer.Argument(..., help="Concrete <base>-<timestamp>-<build> version"),
    paths: List[str] = typer.Argument(..., help="Files or directories holding the artifact files"),
    properties: Optional[List[str]] = typer.Option(
        None, "--property", "-p", help="Identity property key=value (repeatable)"
    ),
    info_properties: Optional[List[str]] = typer.Option(
        None, "--info-property", help="Informational property key=value, never used as filter (repeatable)"
    ),
    no_autogenerated_pom: bool = typer.Option(
        False, "--no-autogenerated-pom", help="Do not synthesize a descriptor when none is present"
    ),
    ignore_missing: bool = typer.Option(False, "--ignore-missing", help="Skip paths that do not exist"),
    artifactory_cli: Optional[str] = typer.Option(None, "--artifactory-cli", help="Path to the jfrog executable"),
    log_file: Optional[str] = typer.Option(None, "--log", help="Append log output to this file"),
) -> None:
    """Upload local artifact files in main -> descriptor -> rest order."""
    try:
        settings = load_settings(artifactory_cli=artifactory_cli, log_file=log_file)
        configure_logging(settings.log_level, settings.log_file)
        coords = ArtifactCoordinates(repo=repo, groupid=group, artifactid=name, version=version)
        concrete = UploadVersion(upload_version)
        identity = parse_property_args(properties)
        informational = parse_property_args(info_properties)
        files = expand_paths(paths, ignore_missing=ignore_missing)
        session = create_session(settings)
        result = session.publish_files(
            files,
            coords,
            concrete,
            identity,
            informational,
            generate_descriptor=not no_autogenerated_pom,
        )
    except Exception as exc:
        log.debug("Upload failed", exc_info=True)
        fail(exc)
    for record in result.uploads:
        log.info("Uploaded %s -> %s%s", record.local_file, repo, record.remote_file_path)


def main() -> None:  # pragma: no cover - console script
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
