"""Service exports for convenient imports."""

from .session import OUTPUT_DIR, PREBUILT_DIR, ArtifactCacheSession

__all__ = ["ArtifactCacheSession", "OUTPUT_DIR", "PREBUILT_DIR"]
