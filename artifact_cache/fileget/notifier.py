"""One-shot progress notice for a resolution session."""

from __future__ import annotations

import logging
from typing import Callable, Optional

FETCH_MESSAGE = "Looking for prebuilt artifacts on Artifactory server:"


class FetchNotifier:
    """Tells the user once per session that network I/O is about to start.

    Lookups can hang for a while when the server is unreachable, so the first
    one is announced; later lookups in the same session stay quiet.
    """

    def __init__(
        self,
        message: str = FETCH_MESSAGE,
        emit: Optional[Callable[[str], None]] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.message = message
        self.log = logger or logging.getLogger(self.__class__.__name__)
        self._emit = emit or self.log.info
        self.notified = False

    def notify(self) -> bool:
        if self.notified:
            return False
        self.notified = True
        self._emit(self.message)
        return True
