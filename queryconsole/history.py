"""
Query history log.

Submissions are recorded in two phases: a pending placeholder is appended when
the submission starts and is replaced in place once it resolves. Resolution is
keyed by submission id rather than position, so overlapping submissions each
land on their own entry.
"""

import logging
from collections import deque
from dataclasses import replace
from typing import Deque, Iterator, List, Optional

from .models import EntryStatus, QueryHistoryEntry

logger = logging.getLogger(__name__)

PENDING_RESULT = "Executing query..."


class HistoryLog:
    """Bounded, most-recent-last sequence of history entries."""

    def __init__(self, limit: int = 500):
        if limit <= 0:
            raise ValueError("history limit must be positive")
        self.limit = limit
        self._entries: Deque[QueryHistoryEntry] = deque(maxlen=limit)

    def begin(self, query: str) -> QueryHistoryEntry:
        """
        Append a pending placeholder for a new submission.

        Args:
            query: The submitted query text.

        Returns:
            The placeholder entry. Its submission_id is the handle for resolve().
        """
        entry = QueryHistoryEntry(query=query, result=PENDING_RESULT, pending=True)
        self._entries.append(entry)
        return entry

    def resolve(
        self,
        submission_id: str,
        status: EntryStatus,
        result: str,
        query: Optional[str] = None,
    ) -> QueryHistoryEntry:
        """
        Replace the placeholder for `submission_id` with its final outcome.

        The original timestamp and position are kept. If the placeholder has
        already been evicted by the retention limit, the resolved entry is
        appended instead.
        """
        for index, entry in enumerate(self._entries):
            if entry.submission_id == submission_id:
                resolved = replace(
                    entry,
                    status=status,
                    result=result,
                    pending=False,
                    query=entry.query if query is None else query,
                )
                self._entries[index] = resolved
                return resolved

        logger.warning(
            f"History placeholder {submission_id} was evicted before it resolved; appending"
        )
        resolved = QueryHistoryEntry(
            query=query or "",
            result=result,
            status=status,
            submission_id=submission_id,
        )
        self._entries.append(resolved)
        return resolved

    def get(self, submission_id: str) -> Optional[QueryHistoryEntry]:
        for entry in self._entries:
            if entry.submission_id == submission_id:
                return entry
        return None

    def last(self) -> Optional[QueryHistoryEntry]:
        return self._entries[-1] if self._entries else None

    def entries(self) -> List[QueryHistoryEntry]:
        return list(self._entries)

    @property
    def executed_count(self) -> int:
        """Number of entries that have resolved, successfully or not."""
        return sum(1 for entry in self._entries if not entry.pending)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[QueryHistoryEntry]:
        return iter(list(self._entries))
