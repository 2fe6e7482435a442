"""Download every file of a resolved artifact version into the local cache."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Mapping, Optional

from artifact_cache.domain import (
    ArtifactCoordinates,
    ArtifactFileSet,
    Descriptor,
    MissingMainArtifact,
    descriptor_name,
    files_pattern,
    read_descriptor,
    remote_path,
)
from artifact_cache.fileget.notifier import FetchNotifier
from artifact_cache.transport import RemoteTransport


class ArtifactFetcher:
    """Fetches ``<artifactId>-<version>*`` and returns the main artifact first."""

    def __init__(
        self,
        transport: RemoteTransport,
        cache_root: Path,
        notifier: Optional[FetchNotifier] = None,
    ) -> None:
        self.transport = transport
        self.cache_root = Path(cache_root)
        self.notifier = notifier
        self.log = logging.getLogger(self.__class__.__name__)

    def local_dir(self, coords: ArtifactCoordinates) -> Path:
        """Cache directory mirroring the remote path of ``coords``."""
        return self.cache_root / remote_path(coords).lstrip("/")

    def fetch(
        self,
        coords: ArtifactCoordinates,
        version: str,
        descriptor: Optional[Descriptor] = None,
        identity_properties: Optional[Mapping[str, str]] = None,
        *,
        classifier: Optional[str] = None,
        extension: Optional[str] = None,
    ) -> Optional[ArtifactFileSet]:
        """Return the downloaded files, or ``None`` when nothing was found.

        Without a classifier/extension filter the descriptor's main artifact
        must be among the downloaded files, otherwise ``MissingMainArtifact``.
        """
        path = remote_path(coords)
        pattern = files_pattern(coords.artifactid, version, classifier, extension)
        if self.notifier:
            self.notifier.notify()
        result = self.transport.download(
            coords.repo, path, pattern, dict(identity_properties or {}), self.local_dir(coords)
        ).raise_for_status()
        files: List[Path] = [Path(local) for local in result.files]
        if not files:
            self.log.warning(
                "Descriptor for %s:%s:%s exists but no files match %s%s/%s; treating as not prebuilt",
                coords.groupid,
                coords.artifactid,
                version,
                coords.repo,
                path,
                pattern,
            )
            return None

        if descriptor is None:
            descriptor = self._downloaded_descriptor(files, coords.artifactid, version)
        filtered = classifier is not None or extension is not None
        if descriptor is not None:
            main_name = descriptor.main_artifact_filename
            main_index = next((i for i, local in enumerate(files) if local.name == main_name), None)
            if main_index is None:
                if not filtered:
                    raise MissingMainArtifact(main_name, [local.name for local in files])
            else:
                files.insert(0, files.pop(main_index))
        else:
            self.log.debug("No descriptor for %s-%s; keeping listing order", coords.artifactid, version)

        self.log.info("Fetched %d file(s) for %s-%s", len(files), coords.artifactid, version)
        return ArtifactFileSet(version=version, files=files, descriptor=descriptor)

    def _downloaded_descriptor(self, files: List[Path], artifactid: str, version: str) -> Optional[Descriptor]:
        wanted = descriptor_name(artifactid, version)
        for local in files:
            if local.name == wanted:
                return read_descriptor(local)
        return None
