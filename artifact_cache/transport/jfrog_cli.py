"""Remote transport backed by the ``jfrog rt`` command-line client.

All parsing of the client's text output happens here; the resolver, fetcher
and publisher only ever see ``TransportResult`` objects.
"""

from __future__ import annotations

import fnmatch
import json
import logging
import posixpath
import subprocess
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from artifact_cache.domain import RemoteFile, TransportResult, format_properties, matches_properties
from artifact_cache.transport.base import RemoteTransport


class JfrogCliTransport(RemoteTransport):
    """Runs jfrog commands synchronously, one at a time."""

    def __init__(
        self,
        cli: str = "jfrog",
        *,
        server_id: Optional[str] = None,
        timeout: Optional[int] = None,
    ) -> None:
        self.cli = cli
        self.server_id = server_id
        self.timeout = timeout
        self.log = logging.getLogger(self.__class__.__name__)

    def list(self, repo, path, pattern, properties) -> TransportResult[RemoteFile]:
        location = f"{repo}{path}/{pattern}"
        result, stdout = self._run(["search", location, "--recursive=false"], target=location)
        if not result.ok:
            return result
        try:
            items = json.loads(stdout or "[]")
        except ValueError as exc:
            result.status = 1
            result.diagnostics = f"Cannot parse search output: {exc}: {stdout.strip()}"
            return result
        if not isinstance(items, list):
            result.status = 1
            result.diagnostics = f"Unexpected search output: {stdout.strip()}"
            return result

        files: List[RemoteFile] = []
        for item in items:
            if not isinstance(item, dict) or item.get("type", "file") != "file":
                continue
            remote = self._to_remote_file(item)
            if remote is None or remote.repo != repo:
                continue
            if not fnmatch.fnmatchcase(remote.name, pattern):
                continue
            if not matches_properties(remote.properties, properties):
                self.log.debug("Skip %s: properties %s do not match", remote.name, remote.properties)
                continue
            files.append(remote)
        result.files = files
        return result

    def download(self, repo, path, pattern, properties, dest_dir) -> TransportResult[Path]:
        listing = self.list(repo, path, pattern, properties)
        if not listing.ok:
            return TransportResult(
                diagnostics=listing.diagnostics,
                status=listing.status,
                command=listing.command,
                target=listing.target,
            )
        dest_dir = Path(dest_dir)
        dest_dir.mkdir(parents=True, exist_ok=True)
        local: List[Path] = []
        for remote in listing.files:
            location = f"{repo}{remote.remote_file_path}"
            result, _ = self._run(["download", location, f"{dest_dir}/", "--flat=true"], target=location)
            if not result.ok:
                result.files = local
                return result
            local.append((dest_dir / remote.name).resolve())
        return TransportResult(files=local, command=listing.command, target=listing.target)

    def upload(self, local_file, repo, remote_file_path, properties) -> TransportResult[str]:
        location = f"{repo}{remote_file_path}"
        args = ["upload", str(local_file), location, "--flat=true"]
        if properties:
            args.append(f"--target-props={format_properties(properties)}")
        result, _ = self._run(args, target=location)
        if result.ok:
            result.files = [remote_file_path]
        return result

    def _to_remote_file(self, item: Dict) -> Optional[RemoteFile]:
        full_path = str(item.get("path") or "").strip("/")
        if "/" not in full_path:
            return None
        repo, _, rest = full_path.partition("/")
        directory, name = posixpath.split(rest)
        props: Dict[str, List[str]] = {}
        for key, value in (item.get("props") or {}).items():
            props[key] = [str(v) for v in value] if isinstance(value, list) else [str(value)]
        return RemoteFile(repo=repo, path="/" + directory if directory else "", name=name, properties=props)

    def _run(self, args: List[str], *, target: str) -> Tuple[TransportResult, str]:
        command = [self.cli, "rt", *args]
        if self.server_id:
            command.append(f"--server-id={self.server_id}")
        self.log.info("Executing jfrog cmd=%s", command)
        try:
            completed = subprocess.run(
                command,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                stdin=subprocess.DEVNULL,
            )
        except subprocess.TimeoutExpired:
            self.log.error("jfrog command timeout after %ss cmd=%s", self.timeout, command)
            return TransportResult(
                diagnostics=f"timed out after {self.timeout}s", status=124, command=command, target=target
            ), ""
        except OSError as exc:
            self.log.error("jfrog command could not start cmd=%s: %s", command, exc)
            return TransportResult(diagnostics=str(exc), status=127, command=command, target=target), ""

        stdout = completed.stdout or ""
        stderr = completed.stderr or ""
        if stderr:
            self.log.debug("jfrog stderr: %s", stderr.strip())
        if completed.returncode != 0:
            self.log.warning("jfrog exited with %s cmd=%s", completed.returncode, command)
            diagnostics = "\n".join(part.strip() for part in (stderr, stdout) if part.strip())
            return TransportResult(
                diagnostics=diagnostics, status=completed.returncode, command=command, target=target
            ), stdout
        return TransportResult(diagnostics=stderr.strip(), command=command, target=target), stdout
