"""Resolve a possibly wildcarded version to the concrete version of a remote artifact."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping, Optional

from artifact_cache.domain import (
    ArtifactCoordinates,
    MalformedDescriptor,
    ResolvedVersion,
    ValidationError,
    check_version,
    descriptor_name,
    read_descriptor,
    remote_path,
    snapshot_pattern,
)
from artifact_cache.fileget.comparators import TimestampLexicalComparator, VersionComparator
from artifact_cache.fileget.notifier import FetchNotifier
from artifact_cache.transport import RemoteTransport


class VersionResolver:
    """Picks the newest descriptor matching a version pattern and trusts its version."""

    def __init__(
        self,
        transport: RemoteTransport,
        cache_root: Path,
        comparator: Optional[VersionComparator] = None,
        notifier: Optional[FetchNotifier] = None,
    ) -> None:
        self.transport = transport
        self.cache_root = Path(cache_root)
        self.comparator = comparator or TimestampLexicalComparator()
        self.notifier = notifier
        self.log = logging.getLogger(self.__class__.__name__)

    def resolve(
        self,
        coords: ArtifactCoordinates,
        identity_properties: Optional[Mapping[str, str]] = None,
    ) -> Optional[ResolvedVersion]:
        """Return the resolved version, or ``None`` when no descriptor matches.

        Transport failures raise ``TransportError``; they are never reported
        as "not found".
        """
        pattern = snapshot_pattern(coords.version)
        path = remote_path(coords)
        name_pattern = descriptor_name(coords.artifactid, pattern)
        dest_dir = self.cache_root / path.lstrip("/")

        if self.notifier:
            self.notifier.notify()
        self.log.info("Looking up %s:%s:%s in %s%s", coords.groupid, coords.artifactid, pattern, coords.repo, path)
        result = self.transport.download(
            coords.repo, path, name_pattern, dict(identity_properties or {}), dest_dir
        ).raise_for_status()
        if not result.files:
            self.log.info("No descriptor matches %s%s/%s", coords.repo, path, name_pattern)
            return None

        by_name = {Path(local).name: Path(local) for local in result.files}
        newest = self.comparator.newest(by_name)
        descriptor_path = by_name[newest]
        descriptor = read_descriptor(descriptor_path)
        try:
            check_version(descriptor.version)
        except ValidationError as exc:
            raise MalformedDescriptor(f"{descriptor_path}: {exc}") from exc
        self.log.info(
            "Resolved %s:%s:%s to %s (%d candidate(s))",
            coords.groupid,
            coords.artifactid,
            coords.version,
            descriptor.version,
            len(by_name),
        )
        return ResolvedVersion(version=descriptor.version, descriptor=descriptor, descriptor_path=descriptor_path)
