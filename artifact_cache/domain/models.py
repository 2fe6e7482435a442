"""Dataclasses exchanged between the transport, resolver, fetcher and publisher."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Generic, List, Optional, TypeVar

from .descriptor import Descriptor
from .exceptions import TransportError

T = TypeVar("T")


@dataclass
class RemoteFile:
    """A file stored in the remote repository."""

    repo: str
    path: str
    name: str
    properties: Dict[str, List[str]] = field(default_factory=dict)

    @property
    def remote_file_path(self) -> str:
        return f"{self.path.rstrip('/')}/{self.name}"


@dataclass
class TransportResult(Generic[T]):
    """Structured outcome of one remote operation."""

    files: List[T] = field(default_factory=list)
    diagnostics: str = ""
    status: int = 0
    command: List[str] = field(default_factory=list)
    target: str = ""

    @property
    def ok(self) -> bool:
        return self.status == 0

    def raise_for_status(self) -> "TransportResult[T]":
        if not self.ok:
            raise TransportError(
                "Remote repository operation failed",
                command=self.command,
                target=self.target,
                diagnostics=self.diagnostics,
                status=self.status,
            )
        return self


@dataclass
class ArtifactFileSet:
    """Local files of one artifact version, main artifact first when known."""

    version: str
    files: List[Path] = field(default_factory=list)
    descriptor: Optional[Descriptor] = None

    @property
    def main(self) -> Optional[Path]:
        return self.files[0] if self.files else None

    def __bool__(self) -> bool:
        return bool(self.files)

    def joined(self, delimiter: str = ";") -> str:
        return delimiter.join(str(path) for path in self.files)


@dataclass
class ResolvedVersion:
    version: str
    descriptor: Descriptor
    descriptor_path: Path


@dataclass
class UploadRecord:
    local_file: Path
    remote_file_path: str
    properties: Dict[str, str] = field(default_factory=dict)
    generated: bool = False


@dataclass
class PublishResult:
    uploads: List[UploadRecord] = field(default_factory=list)
    skipped_reason: Optional[str] = None

    @property
    def published(self) -> bool:
        return bool(self.uploads)


@dataclass
class ArtifactOutcome:
    artifactid: str
    prebuilt: Optional[ArtifactFileSet] = None
    prebuilt_links: List[Path] = field(default_factory=list)
    publish: Optional[PublishResult] = None
    forced_build: bool = False
