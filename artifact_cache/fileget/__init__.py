"""Resolution and download of prebuilt artifacts."""

from .comparators import TimestampLexicalComparator, VersionComparator
from .fetcher import ArtifactFetcher
from .notifier import FETCH_MESSAGE, FetchNotifier
from .resolver import VersionResolver

__all__ = [
    "ArtifactFetcher",
    "FETCH_MESSAGE",
    "FetchNotifier",
    "TimestampLexicalComparator",
    "VersionComparator",
    "VersionResolver",
]
