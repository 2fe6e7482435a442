"""Contract for the remote repository client."""

from __future__ import annotations

from pathlib import Path
from typing import Mapping

from artifact_cache.domain import RemoteFile, TransportResult


class RemoteTransport:
    """Path-based file storage with glob listing and per-file properties.

    Property filters are permissive: files lacking a filtered property match.
    Implementations report failures through the returned result's status
    instead of raising, so callers decide when to call ``raise_for_status``.
    """

    def list(
        self,
        repo: str,
        path: str,
        pattern: str,
        properties: Mapping[str, str],
    ) -> TransportResult[RemoteFile]:
        raise NotImplementedError

    def download(
        self,
        repo: str,
        path: str,
        pattern: str,
        properties: Mapping[str, str],
        dest_dir: Path,
    ) -> TransportResult[Path]:
        raise NotImplementedError

    def upload(
        self,
        local_file: Path,
        repo: str,
        remote_file_path: str,
        properties: Mapping[str, str],
    ) -> TransportResult[str]:
        raise NotImplementedError
