"""
Query submission pipeline.

A submission sends the editor text to the generation endpoint, forwards the
structured query it gets back to the execution endpoint, and records the
outcome in the console state: a history entry always, a new table only when
the result is a list of flat records.
"""

import json
import logging
from typing import Any, Optional

from .errors import QueryConsoleError
from .models import EntryStatus, QueryHistoryEntry
from .query_client import QueryClient
from .state import ConsoleState
from .table import derive_table

logger = logging.getLogger(__name__)


def format_result(payload: Any) -> str:
    """Pretty-print a decoded JSON value with a two-space indent."""
    return json.dumps(payload, indent=2, ensure_ascii=False, default=str)


class QueryPipeline:
    """Runs editor submissions against a QueryClient and a ConsoleState."""

    def __init__(self, state: ConsoleState, client: QueryClient):
        self.state = state
        self.client = client

    async def submit(self, text: Optional[str] = None) -> QueryHistoryEntry:
        """
        Submits a query and records its outcome.

        Errors from either network call are caught here, never re-raised:
        the history entry is resolved with status "error", the message is
        stored as the state's last_error and the table is left untouched.
        No retry is attempted and a failed generation step never reaches
        the execution endpoint.

        Args:
            text: Query text to submit. Defaults to the editor buffer.

        Returns:
            The resolved history entry.
        """
        query_text = self.state.editor_text if text is None else text
        placeholder = self.state.history.begin(query_text)
        self.state.begin_run()
        self.state.clear_error()

        try:
            generated = await self.client.generate(query_text)
            payload = await self.client.execute(generated.query, generated.endpoint)

            table = derive_table(payload)
            if table is not None:
                self.state.replace_table(table)
                logger.info(
                    f"Result tabulated: {len(table.columns)} column(s), {len(table.rows)} row(s)"
                )
            else:
                logger.debug("Result is not a list of flat records; table left as is")

            return self.state.history.resolve(
                placeholder.submission_id, EntryStatus.SUCCESS, format_result(payload), query_text
            )
        except QueryConsoleError as e:
            logger.error(f"Query submission {placeholder.submission_id} failed: {e}")
            self.state.record_error(str(e))
            return self.state.history.resolve(
                placeholder.submission_id, EntryStatus.ERROR, f"Error: {e}", query_text
            )
        finally:
            self.state.end_run()
