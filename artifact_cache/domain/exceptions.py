"""Error taxonomy for artifact resolution and publishing."""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence


class ArtifactCacheError(RuntimeError):
    """Base class for every failure raised by the artifact cache."""


class ValidationError(ArtifactCacheError, ValueError):
    """Raised for bad coordinates, versions or property lists. Never follows network I/O."""


class TransportError(ArtifactCacheError):
    """Raised when a remote listing, download or upload fails."""

    def __init__(
        self,
        message: str,
        *,
        command: Optional[Sequence[str]] = None,
        target: str = "",
        diagnostics: str = "",
        status: int = 1,
    ) -> None:
        self.command = list(command or [])
        self.target = target
        self.diagnostics = diagnostics
        self.status = status
        parts = [message]
        if self.target:
            parts.append(f"target={self.target}")
        if self.command:
            parts.append(f"command={' '.join(self.command)}")
        parts.append(f"status={self.status}")
        if self.diagnostics:
            parts.append(f"output={' '.join(self.diagnostics.split())}")
        super().__init__(" ".join(parts))


class MalformedDescriptor(ArtifactCacheError):
    """The descriptor file has no project root or a broken required field."""


class MissingMainArtifact(ArtifactCacheError):
    """The descriptor names a main file that the download did not return."""

    def __init__(self, expected: str, downloaded: Iterable[str]) -> None:
        self.expected = expected
        self.downloaded = list(downloaded)
        super().__init__(
            f"Main artifact {expected} promised by the descriptor was not found among "
            f"downloaded files: {', '.join(self.downloaded) or '<none>'}"
        )


class ArtifactNameMismatch(ArtifactCacheError):
    """Local build outputs do not follow the artifact naming scheme."""

    def __init__(self, expected_prefixes: Sequence[str], files: Iterable[str]) -> None:
        self.expected_prefixes = list(expected_prefixes)
        self.files: List[str] = list(files)
        super().__init__(
            f"Files do not start with {' or '.join(self.expected_prefixes)}: {', '.join(self.files)}"
        )


class MainArtifactNotFound(ArtifactCacheError):
    """Every local file is a descriptor, so there is nothing to publish as main artifact."""
