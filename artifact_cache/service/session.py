"""Build-orchestrator facing session: resolve before a build, publish after it."""

from __future__ import annotations

import dataclasses
import logging
import shutil
from pathlib import Path
from typing import Callable, List, Mapping, Optional, Union

from artifact_cache.domain import (
    ArtifactCoordinates,
    ArtifactFileSet,
    ArtifactOutcome,
    PublishResult,
    UploadVersion,
    check_version,
)
from artifact_cache.fileget import ArtifactFetcher, FetchNotifier, VersionComparator, VersionResolver
from artifact_cache.publish import PublishSequencer, collect_local_files
from artifact_cache.settings import Settings
from artifact_cache.transport import RemoteTransport

PREBUILT_DIR = "artifact-prebuilt"
OUTPUT_DIR = "artifact-output"

BuildCallback = Callable[[List[Path]], None]


class ArtifactCacheSession:
    """Owns one transport, one cache root and one fetch notifier.

    Nothing is cached in memory between calls; the cache directory is the cache.
    """

    def __init__(
        self,
        settings: Settings,
        transport: RemoteTransport,
        *,
        comparator: Optional[VersionComparator] = None,
        notifier: Optional[FetchNotifier] = None,
    ) -> None:
        self.settings = settings
        self.transport = transport
        self.cache_root = Path(settings.cache_dir)
        self.notifier = notifier or FetchNotifier()
        self.resolver = VersionResolver(transport, self.cache_root, comparator, self.notifier)
        self.fetcher = ArtifactFetcher(transport, self.cache_root, self.notifier)
        self.sequencer = PublishSequencer(transport)
        self.log = logging.getLogger(self.__class__.__name__)

    def resolve(
        self,
        coords: ArtifactCoordinates,
        identity_properties: Optional[Mapping[str, str]] = None,
        *,
        classifier: Optional[str] = None,
        extension: Optional[str] = None,
    ) -> Optional[ArtifactFileSet]:
        """Files of the newest matching version, main artifact first, or ``None``."""
        resolved = self.resolver.resolve(coords, identity_properties)
        if resolved is None:
            return None
        return self.fetcher.fetch(
            coords,
            resolved.version,
            resolved.descriptor,
            identity_properties,
            classifier=classifier,
            extension=extension,
        )

    def publish(
        self,
        local_directory: Path,
        coords: ArtifactCoordinates,
        upload_version: Union[UploadVersion, str],
        identity_properties: Optional[Mapping[str, str]] = None,
        informational_properties: Optional[Mapping[str, str]] = None,
        generate_descriptor: bool = True,
    ) -> PublishResult:
        return self.publish_files(
            collect_local_files(Path(local_directory)),
            coords,
            upload_version,
            identity_properties,
            informational_properties,
            generate_descriptor,
        )

    def publish_files(
        self,
        files: List[Path],
        coords: ArtifactCoordinates,
        upload_version: Union[UploadVersion, str],
        identity_properties: Optional[Mapping[str, str]] = None,
        informational_properties: Optional[Mapping[str, str]] = None,
        generate_descriptor: bool = True,
    ) -> PublishResult:
        if not isinstance(upload_version, UploadVersion):
            upload_version = UploadVersion(upload_version)
        return self.sequencer.publish(
            files,
            coords,
            upload_version,
            identity_properties,
            informational_properties,
            generate_descriptor=generate_descriptor,
        )

    def add_artifact(
        self,
        binary_dir: Path,
        coords: ArtifactCoordinates,
        download_version: str,
        upload_version: Union[UploadVersion, str],
        build: BuildCallback,
        identity_properties: Optional[Mapping[str, str]] = None,
        informational_properties: Optional[Mapping[str, str]] = None,
    ) -> ArtifactOutcome:
        """Use a prebuilt artifact when available, build, then publish fresh output.

        ``build`` receives the prebuilt files linked into ``artifact-prebuilt/``
        (empty when a full local build is needed). Output is expected in
        ``<binary_dir>/artifact-output/`` and is published only when nothing
        prebuilt was used and submitting is enabled.
        """
        check_version(download_version, "download version")
        if not isinstance(upload_version, UploadVersion):
            upload_version = UploadVersion(upload_version)
        binary_dir = Path(binary_dir)
        outcome = ArtifactOutcome(artifactid=coords.artifactid)

        outcome.forced_build = coords.artifactid in self.settings.always_build_names
        if outcome.forced_build:
            self.log.info("Forcing local build of %s", coords.artifactid)

        if self.settings.fetch and not outcome.forced_build:
            outcome.prebuilt = self.resolve(dataclasses.replace(coords, version=download_version), identity_properties)

        if outcome.prebuilt:
            outcome.prebuilt_links = self._link_prebuilt(outcome.prebuilt, binary_dir / PREBUILT_DIR)
            self.log.info(
                "Found prebuilt artifact(s) for %s: %s", coords.artifactid, outcome.prebuilt.joined()
            )
        else:
            self.log.info("No prebuilt artifacts found for %s", coords.artifactid)

        build(list(outcome.prebuilt_links))

        if not outcome.prebuilt and self.settings.submit:
            outcome.publish = self.publish(
                binary_dir / OUTPUT_DIR,
                coords,
                upload_version,
                identity_properties,
                informational_properties,
            )
        return outcome

    def clean(self, binary_dir: Path) -> List[Path]:
        """Remove every file from ``<binary_dir>/artifact-output/``."""
        removed = collect_local_files(Path(binary_dir) / OUTPUT_DIR)
        for path in removed:
            path.unlink()
        if removed:
            self.log.info("Removed %d artifact file(s) from %s", len(removed), Path(binary_dir) / OUTPUT_DIR)
        return removed

    def _link_prebuilt(self, prebuilt: ArtifactFileSet, target_dir: Path) -> List[Path]:
        target_dir.mkdir(parents=True, exist_ok=True)
        links: List[Path] = []
        for source in prebuilt.files:
            link = target_dir / source.name
            if link.is_symlink() or link.exists():
                link.unlink()
            try:
                link.symlink_to(Path(source).resolve())
            except OSError:
                self.log.debug("Symlink unsupported for %s, copying instead", link)
                shutil.copy2(source, link)
            links.append(link)
        return links
