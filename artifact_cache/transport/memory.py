"""In-memory repository implementation."""

from __future__ import annotations

import fnmatch
import posixpath
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple

from artifact_cache.domain import RemoteFile, TransportResult, matches_properties
from artifact_cache.transport.base import RemoteTransport


@dataclass
class StoredFile:
    content: bytes
    properties: Dict[str, List[str]] = field(default_factory=dict)


class InMemoryTransport(RemoteTransport):
    """Dict-backed store that records every call, so sequencing can be asserted."""

    def __init__(self) -> None:
        self.files: Dict[Tuple[str, str], StoredFile] = {}
        self.calls: List[Tuple[str, ...]] = []
        self.failures: Dict[Tuple[str, Optional[str]], str] = {}

    def add(
        self,
        repo: str,
        remote_file_path: str,
        content: bytes = b"",
        properties: Optional[Mapping[str, str]] = None,
    ) -> None:
        props = {key: [str(value)] for key, value in (properties or {}).items()}
        self.files[(repo, remote_file_path)] = StoredFile(content=content, properties=props)

    def fail(self, operation: str, diagnostics: str, name: Optional[str] = None) -> None:
        """Make ``operation`` fail, optionally only for one file name."""
        self.failures[(operation, name)] = diagnostics

    def _failure(self, operation: str, name: Optional[str] = None) -> Optional[str]:
        if name is not None and (operation, name) in self.failures:
            return self.failures[(operation, name)]
        return self.failures.get((operation, None))

    def _matching(self, repo: str, path: str, pattern: str, properties: Mapping[str, str]) -> List[RemoteFile]:
        folder = path.rstrip("/")
        found: List[RemoteFile] = []
        for (stored_repo, file_path), stored in self.files.items():
            directory, name = posixpath.split(file_path)
            if stored_repo != repo or directory != folder:
                continue
            if not fnmatch.fnmatchcase(name, pattern):
                continue
            if not matches_properties(stored.properties, properties):
                continue
            found.append(RemoteFile(repo=repo, path=folder, name=name, properties=stored.properties))
        return found

    def list(self, repo, path, pattern, properties) -> TransportResult[RemoteFile]:
        self.calls.append(("list", repo, path, pattern))
        command = ["list", f"{repo}{path}/{pattern}"]
        failure = self._failure("list")
        if failure is not None:
            return TransportResult(diagnostics=failure, status=1, command=command, target=path)
        return TransportResult(files=self._matching(repo, path, pattern, properties), command=command, target=path)

    def download(self, repo, path, pattern, properties, dest_dir) -> TransportResult[Path]:
        self.calls.append(("download", repo, path, pattern))
        command = ["download", f"{repo}{path}/{pattern}"]
        failure = self._failure("download")
        if failure is not None:
            return TransportResult(diagnostics=failure, status=1, command=command, target=path)
        dest_dir = Path(dest_dir)
        dest_dir.mkdir(parents=True, exist_ok=True)
        local: List[Path] = []
        for remote in self._matching(repo, path, pattern, properties):
            target = dest_dir / remote.name
            target.write_bytes(self.files[(repo, remote.remote_file_path)].content)
            local.append(target.resolve())
        return TransportResult(files=local, command=command, target=path)

    def upload(self, local_file, repo, remote_file_path, properties) -> TransportResult[str]:
        self.calls.append(("upload", repo, remote_file_path))
        command = ["upload", str(local_file), f"{repo}{remote_file_path}"]
        failure = self._failure("upload", posixpath.basename(remote_file_path))
        if failure is not None:
            return TransportResult(diagnostics=failure, status=1, command=command, target=remote_file_path)
        self.add(repo, remote_file_path, Path(local_file).read_bytes(), properties)
        return TransportResult(files=[remote_file_path], command=command, target=remote_file_path)

    @property
    def uploaded_names(self) -> List[str]:
        return [posixpath.basename(call[2]) for call in self.calls if call[0] == "upload"]
