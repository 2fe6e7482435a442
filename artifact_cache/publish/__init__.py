"""Publishing of locally built artifacts."""

from .sequencer import PublishSequencer, collect_local_files

__all__ = ["PublishSequencer", "collect_local_files"]
