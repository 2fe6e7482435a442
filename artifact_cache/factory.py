"""Wire settings, transport and session together."""

from __future__ import annotations

from typing import Optional

from .domain import ValidationError
from .service import ArtifactCacheSession
from .settings import Settings, get_settings
from .transport import ArtifactoryHttpTransport, JfrogCliTransport, RemoteTransport


def build_transport(settings: Settings) -> RemoteTransport:
    kind = settings.transport.lower()
    if kind == "cli":
        return JfrogCliTransport(settings.cli, server_id=settings.server_id)
    if kind == "http":
        if not settings.url:
            raise ValidationError("ARTIFACTORY_URL is required for the http transport")
        return ArtifactoryHttpTransport(
            settings.url,
            username=settings.username,
            password=settings.password,
            access_token=settings.access_token,
            timeout=settings.timeout,
        )
    raise ValidationError(f"Unknown transport '{settings.transport}', expected 'cli' or 'http'")


def create_session(
    settings: Optional[Settings] = None,
    transport: Optional[RemoteTransport] = None,
) -> ArtifactCacheSession:
    settings = settings or get_settings()
    return ArtifactCacheSession(settings, transport or build_transport(settings))
