"""HTTP client to interact with Artifactory repositories."""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Dict, List, Optional
from urllib.parse import quote

import httpx

from artifact_cache.domain import RemoteFile, TransportResult, matches_properties
from artifact_cache.transport.base import RemoteTransport


class ArtifactoryHttpTransport(RemoteTransport):
    """List, download and upload files through the Artifactory REST API."""

    def __init__(
        self,
        base_url: str,
        *,
        username: Optional[str] = None,
        password: Optional[str] = None,
        access_token: Optional[str] = None,
        timeout: float = 30,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.log = logging.getLogger(self.__class__.__name__)
        auth = None
        if username and password:
            auth = (username, password)
        self._auth = auth
        headers = {"Authorization": f"Bearer {access_token}"} if access_token else None
        self._client = client or httpx.Client(timeout=timeout, verify=True, headers=headers)

    def _file_url(self, repo: str, remote_file_path: str) -> str:
        return f"{self.base_url}/{repo}{remote_file_path}"

    def list(self, repo, path, pattern, properties) -> TransportResult[RemoteFile]:
        criteria = {
            "repo": repo,
            "path": path.strip("/") or ".",
            "name": {"$match": pattern},
            "type": "file",
        }
        query = f'items.find({json.dumps(criteria)}).include("repo","path","name","property")'
        url = f"{self.base_url}/api/search/aql"
        command = ["POST", url]
        target = f"{repo}{path}/{pattern}"
        self.log.info("Searching %s", target)
        try:
            resp = self._client.post(url, content=query, headers={"Content-Type": "text/plain"}, auth=self._auth)
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPStatusError as exc:
            return self._failed(exc.response, command, target)
        except (httpx.HTTPError, ValueError) as exc:
            return TransportResult(diagnostics=str(exc), status=1, command=command, target=target)

        files: List[RemoteFile] = []
        for item in data.get("results") or []:
            props: Dict[str, List[str]] = {}
            for prop in item.get("properties") or []:
                props.setdefault(prop.get("key"), []).append(str(prop.get("value", "")))
            remote = RemoteFile(
                repo=item.get("repo", repo),
                path="/" + str(item.get("path", "")).strip("/"),
                name=item.get("name", ""),
                properties=props,
            )
            if matches_properties(remote.properties, properties):
                files.append(remote)
        return TransportResult(files=files, command=command, target=target)

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
            url = self._file_url(repo, remote.remote_file_path)
            target = dest_dir / remote.name
            command = ["GET", url]
            self.log.info("Downloading %s -> %s", url, target)
            start_time = time.time()
            downloaded = 0
            try:
                with self._client.stream("GET", url, auth=self._auth) as response:
                    if response.is_error:
                        response.read()
                        result = self._failed(response, command, remote.remote_file_path)
                        result.files = local
                        return result
                    with open(target, "wb") as fh:
                        for chunk in response.iter_bytes(65536):
                            fh.write(chunk)
                            downloaded += len(chunk)
            except httpx.HTTPError as exc:
                self.log.warning("Download of %s failed after %d bytes: %s", url, downloaded, exc)
                target.unlink(missing_ok=True)
                return TransportResult(
                    files=local, diagnostics=str(exc), status=1, command=command, target=remote.remote_file_path
                )
            elapsed = max(time.time() - start_time, 1e-3)
            self.log.info("Downloaded %s (%d bytes, %.2fs)", target, downloaded, elapsed)
            local.append(target.resolve())
        return TransportResult(files=local, command=listing.command, target=listing.target)

    def upload(self, local_file, repo, remote_file_path, properties) -> TransportResult[str]:
        matrix = "".join(f";{quote(str(k), safe='')}={quote(str(v), safe='')}" for k, v in properties.items())
        url = self._file_url(repo, remote_file_path) + matrix
        command = ["PUT", url]
        self.log.info("Uploading %s -> %s", local_file, url)
        try:
            with open(local_file, "rb") as fh:
                resp = self._client.put(url, content=fh.read(), auth=self._auth)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            return self._failed(exc.response, command, remote_file_path)
        except (httpx.HTTPError, OSError) as exc:
            return TransportResult(diagnostics=str(exc), status=1, command=command, target=remote_file_path)
        return TransportResult(files=[remote_file_path], command=command, target=remote_file_path)

    def _failed(self, response: httpx.Response, command: List[str], target: str) -> TransportResult:
        self.log.warning("Artifactory answered %s for %s", response.status_code, " ".join(command))
        return TransportResult(
            diagnostics=response.text.strip(),
            status=response.status_code,
            command=command,
            target=target,
        )
