"""Remote transport exports."""

from .artifactory_http import ArtifactoryHttpTransport
from .base import RemoteTransport
from .jfrog_cli import JfrogCliTransport
from .memory import InMemoryTransport

__all__ = [
    "ArtifactoryHttpTransport",
    "InMemoryTransport",
    "JfrogCliTransport",
    "RemoteTransport",
]
