"""In-memory calculation history, newest entry first."""

import logging
from typing import NamedTuple

logger = logging.getLogger(__name__)


class HistoryEntry(NamedTuple):
    expression: str
    result: str

    def __str__(self):
        return f"{self.expression} = {self.result}"


class HistoryLedger:
    """Successful (expression, result) pairs for one session.

    Entries are only ever added at the front or dropped all at once.
    """

    def __init__(self):
        self._entries = []

    def record(self, expression: str, result: str) -> None:
        if not expression:
            raise ValueError("expression must be non-empty text")
        self._entries.insert(0, HistoryEntry(expression, result))
        logger.debug(f"Recorded {expression!r} = {result!r} ({len(self._entries)} entries)")

    def clear(self) -> None:
        self._entries = []
        logger.debug("History cleared")

    def list(self):
        """Snapshot of all entries, most recent first."""
        return list(self._entries)

    def latest(self):
        return self._entries[0] if self._entries else None

    def __len__(self):
        return len(self._entries)

    def __iter__(self):
        return iter(list(self._entries))

    def __repr__(self):
        return f"HistoryLedger({len(self._entries)} entries)"
