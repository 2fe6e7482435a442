"""Maven2-layout coordinates and the names derived from them."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List

from .exceptions import ValidationError

SNAPSHOT_MARKER = "-SNAPSHOT"
DESCRIPTOR_EXTENSION = "pom"

INVALID_VERSION_CHARS = "/\\[]"
_UPLOAD_VERSION_RE = re.compile(r"^[^-]+-[^-]+-[^-]+$")


def _require(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} must not be empty")
    return value


def check_version(version: str, field_name: str = "version") -> str:
    """Reject versions that cannot be used as a single path component.

    ``*`` is allowed so one artifact can be shared between version numbers
    when it is also filtered by properties.
    """
    _require(version, field_name)
    bad = sorted({ch for ch in version if ch in INVALID_VERSION_CHARS})
    if bad:
        raise ValidationError(
            f"Version string '{version}' contains invalid characters {''.join(bad)!r}. "
            f"The following characters are not allowed in version strings: {INVALID_VERSION_CHARS}"
        )
    return version


@dataclass(frozen=True)
class ArtifactCoordinates:
    """Represents the (repo, group, artifact, version) tuple of one artifact."""

    repo: str
    groupid: str
    artifactid: str
    version: str

    def __post_init__(self) -> None:
        _require(self.repo, "repo")
        if "/" in self.repo or "\\" in self.repo:
            raise ValidationError(f"Repository name '{self.repo}' must not contain path separators")
        _require(self.groupid, "groupId")
        if "/" in self.groupid or "\\" in self.groupid:
            raise ValidationError(f"groupId '{self.groupid}' must use '.' as its only separator")
        _require(self.artifactid, "artifactId")
        if any(ch in self.artifactid for ch in INVALID_VERSION_CHARS):
            raise ValidationError(f"artifactId '{self.artifactid}' contains invalid characters")
        check_version(self.version)

    @property
    def path_segments(self) -> List[str]:
        return [*self.groupid.split("."), self.artifactid, self.version]

    @property
    def remote_path(self) -> str:
        return remote_path(self)

    @property
    def is_snapshot(self) -> bool:
        return self.version.endswith(SNAPSHOT_MARKER)


@dataclass(frozen=True)
class UploadVersion:
    """Concrete ``<base>-<timestamp>-<build>`` version used when publishing."""

    value: str

    def __post_init__(self) -> None:
        check_version(self.value, "upload version")
        if not _UPLOAD_VERSION_RE.match(self.value):
            raise ValidationError(
                f"Version string '{self.value}' does not follow the correct form. When uploading "
                "artifacts you must have a version string following the form 'NAME-YYYYMMDD.hhmmss-N', "
                "for example 'master-20160427.075407-1'. There must be no dashes in the base version "
                "string and exactly 2 dashes in the string as a whole."
            )

    @property
    def base(self) -> str:
        return self.value.split("-", 1)[0]

    def __str__(self) -> str:
        return self.value


def remote_path(coords: ArtifactCoordinates) -> str:
    """``/<group as dirs>/<artifactId>/<version>``, the listing and upload root."""
    return "/" + "/".join(coords.path_segments)


def descriptor_name(artifactid: str, version: str) -> str:
    return f"{artifactid}-{version}.{DESCRIPTOR_EXTENSION}"


def all_files_pattern(artifactid: str, version: str) -> str:
    return f"{artifactid}-{version}*"


def files_pattern(artifactid: str, version: str, classifier: str | None = None, extension: str | None = None) -> str:
    """Glob for ``<artifactId>-<version>[-<classifier>].<extension>``."""
    if classifier is None and extension is None:
        return all_files_pattern(artifactid, version)
    pattern = f"{artifactid}-{version}"
    if classifier is not None:
        pattern += f"-{classifier}"
    return f"{pattern}.{extension or '*'}"


def snapshot_pattern(version: str) -> str:
    """Turn ``1.0-SNAPSHOT`` into ``1.0-*``; other versions are returned as given."""
    if version.endswith(SNAPSHOT_MARKER):
        return version[: -len(SNAPSHOT_MARKER)] + "-*"
    return version
