"""Upload a locally built artifact in an order that never exposes partial state.

The main file goes first, then the descriptor, then every supplementary
file, one synchronous upload at a time. A resolver that sees the descriptor
can therefore always download the main file it names. Uploading several
same-named files concurrently or with the descriptor first is also known to
deadlock some repository backends.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from artifact_cache.domain import (
    DESCRIPTOR_EXTENSION,
    ArtifactCoordinates,
    ArtifactNameMismatch,
    Descriptor,
    MainArtifactNotFound,
    PublishResult,
    UploadRecord,
    UploadVersion,
    ValidationError,
    merge_properties,
    remote_path,
    write_descriptor_file,
)
from artifact_cache.transport import RemoteTransport

log = logging.getLogger(__name__)


def collect_local_files(directory: Path) -> List[Path]:
    """Regular files directly inside ``directory``, sorted by name. Missing directory -> []."""
    directory = Path(directory)
    if not directory.is_dir():
        return []
    return sorted((p for p in directory.iterdir() if p.is_file()), key=lambda p: p.name)


@dataclass
class _LocalEntry:
    path: Path
    suffix: str

    @property
    def is_descriptor(self) -> bool:
        return self.suffix == f".{DESCRIPTOR_EXTENSION}"

    @property
    def is_classified(self) -> bool:
        return not self.suffix.startswith(".")

    @property
    def can_be_main(self) -> bool:
        # The descriptor only records packaging, so the main file must be "<a>-<v>.<packaging>".
        return not self.is_descriptor and not self.is_classified and len(self.suffix) > 1


class PublishSequencer:
    """Validates local build outputs and uploads them main -> descriptor -> rest."""

    def __init__(self, transport: RemoteTransport) -> None:
        self.transport = transport
        self.log = logging.getLogger(self.__class__.__name__)

    def publish(
        self,
        files: Sequence[Path],
        coords: ArtifactCoordinates,
        upload_version: UploadVersion,
        identity_properties: Optional[Mapping[str, str]] = None,
        informational_properties: Optional[Mapping[str, str]] = None,
        *,
        generate_descriptor: bool = True,
    ) -> PublishResult:
        if not files:
            self.log.info("Nothing to publish for %s:%s", coords.groupid, coords.artifactid)
            return PublishResult(skipped_reason="no local files")

        entries = self._classify(files, coords, upload_version)
        descriptors = [entry for entry in entries if entry.is_descriptor]
        candidates = [entry for entry in entries if not entry.is_descriptor]
        main = next((entry for entry in candidates if entry.can_be_main), None)
        if main is None:
            raise MainArtifactNotFound(
                f"No main artifact among {', '.join(p.name for p in files)}; expected a file named "
                f"{coords.artifactid}-{coords.version}.<extension> or {coords.artifactid}-{upload_version}.<extension>"
            )
        remaining = [entry for entry in candidates if entry is not main]

        properties = merge_properties(identity_properties or {}, informational_properties or {})
        folder = remote_path(coords)
        temp_dir: Optional[Path] = None
        try:
            plan: List[tuple] = [(main, False)]
            if descriptors:
                plan.append((descriptors[0], False))
            elif generate_descriptor:
                temp_dir = Path(tempfile.mkdtemp(prefix="artifact-descriptor-"))
                descriptor = Descriptor(
                    groupid=coords.groupid,
                    artifactid=coords.artifactid,
                    version=upload_version.value,
                    packaging=self._packaging(main),
                    properties=dict(properties),
                )
                generated = write_descriptor_file(
                    descriptor, temp_dir / f"{coords.artifactid}-{upload_version}.{DESCRIPTOR_EXTENSION}"
                )
                plan.append((_LocalEntry(path=generated, suffix=f".{DESCRIPTOR_EXTENSION}"), True))
            plan.extend((entry, False) for entry in remaining)

            uploads: List[UploadRecord] = []
            for entry, is_generated in plan:
                remote_file = f"{folder}/{coords.artifactid}-{upload_version}{entry.suffix}"
                self.log.info("Uploading %s -> %s%s", entry.path.name, coords.repo, remote_file)
                self.transport.upload(entry.path, coords.repo, remote_file, properties).raise_for_status()
                uploads.append(
                    UploadRecord(
                        local_file=entry.path,
                        remote_file_path=remote_file,
                        properties=dict(properties),
                        generated=is_generated,
                    )
                )
        finally:
            if temp_dir:
                shutil.rmtree(temp_dir, ignore_errors=True)
        self.log.info("Published %d file(s) for %s-%s", len(uploads), coords.artifactid, upload_version)
        return PublishResult(uploads=uploads)

    def _classify(
        self,
        files: Iterable[Path],
        coords: ArtifactCoordinates,
        upload_version: UploadVersion,
    ) -> List[_LocalEntry]:
        # Longest prefix first so "foo-1.0-2021..." is not cut at "foo-1.0".
        prefixes = sorted(
            {f"{coords.artifactid}-{upload_version}", f"{coords.artifactid}-{coords.version}"},
            key=len,
            reverse=True,
        )
        entries: List[_LocalEntry] = []
        mismatched: List[str] = []
        for path in files:
            path = Path(path)
            prefix = next((p for p in prefixes if path.name.startswith(p)), None)
            if prefix is None:
                mismatched.append(path.name)
                continue
            entries.append(_LocalEntry(path=path, suffix=path.name[len(prefix):]))
        if mismatched:
            raise ArtifactNameMismatch(prefixes, mismatched)

        by_suffix: Dict[str, List[str]] = {}
        for entry in entries:
            by_suffix.setdefault(entry.suffix, []).append(entry.path.name)
        clashes = [names for names in by_suffix.values() if len(names) > 1]
        if clashes:
            raise ValidationError(
                f"Files would be uploaded under the same name {coords.artifactid}-{upload_version}<suffix>: "
                + "; ".join(", ".join(names) for names in clashes)
            )
        return entries

    @staticmethod
    def _packaging(main: _LocalEntry) -> str:
        return main.suffix[1:]
