"""Strategies that decide which of several matching descriptors is the newest."""

from __future__ import annotations

from typing import Iterable, List, Optional


class VersionComparator:
    """Orders descriptor filenames newest first."""

    def newest_first(self, names: Iterable[str]) -> List[str]:
        raise NotImplementedError

    def newest(self, names: Iterable[str]) -> Optional[str]:
        ordered = self.newest_first(names)
        return ordered[0] if ordered else None


class TimestampLexicalComparator(VersionComparator):
    """Descending lexical order of filenames.

    Snapshot builds are named ``<artifact>-<base>-YYYYMMDD.HHMMSS-<build>``,
    so for a shared base version the lexically largest name is the latest
    build. Names that do not follow that timestamp format sort arbitrarily.
    """

    def newest_first(self, names: Iterable[str]) -> List[str]:
        return sorted(names, reverse=True)
