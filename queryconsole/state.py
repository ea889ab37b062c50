import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from .config import ConsoleSettings
from .connections import ConnectionRegistry
from .history import HistoryLog
from .models import TableData
from .schema_draft import SchemaDraftStore

logger = logging.getLogger(__name__)

DEFAULT_EDITOR_TEXT = """// Example:
const query = await db.collection('users')
  .find({ age: { $gt: 21 }})
  .limit(10);"""

DATABASES = ["users_db", "products_db", "orders_db"]


class Stage(str, Enum):
    """Steps of the console, in the order a user walks through them."""

    LANDING = "landing"
    CONNECT = "connect"
    SCHEMA = "schema"
    EDITOR = "editor"


_NEXT_STAGE = {
    Stage.LANDING: Stage.CONNECT,
    Stage.CONNECT: Stage.SCHEMA,
    Stage.SCHEMA: Stage.EDITOR,
}


class ConsoleState:
    """
    The in-memory state of one console session.

    Every entity the console works with lives here and nothing is persisted.
    The query pipeline receives this object by reference and reads and writes
    through its methods instead of module-level variables.
    """

    def __init__(self, settings: Optional[ConsoleSettings] = None):
        """
        Initializes the state with empty connections, the default schema
        template and the example editor text.
        """
        self.settings = settings or ConsoleSettings.from_env()
        self.stage = Stage.LANDING

        self.connections = ConnectionRegistry(submit_delay=self.settings.submit_delay)
        self.schema = SchemaDraftStore(submit_delay=self.settings.submit_delay)
        self.history = HistoryLog(limit=self.settings.history_limit)

        self.editor_text = DEFAULT_EDITOR_TEXT
        self.selected_database = DATABASES[0]
        self.table = TableData()
        self.last_error: Optional[str] = None
        self._in_flight = 0

    # --- navigation ---

    def advance(self) -> Stage:
        """
        Moves to the next stage.

        Raises:
            ValueError: If the console is already in the editor.
        """
        if self.stage not in _NEXT_STAGE:
            raise ValueError(f"No stage after {self.stage.value}")
        previous = self.stage
        self.stage = _NEXT_STAGE[self.stage]
        logger.info(f"Console moved from {previous.value} to {self.stage.value}")
        return self.stage

    # --- editor ---

    def set_editor_text(self, text: str) -> None:
        self.editor_text = text

    def select_database(self, name: str) -> None:
        """
        Selects the database shown in the editor status line.

        Raises:
            ValueError: If the name is not one of the known databases.
        """
        if name not in DATABASES:
            raise ValueError(f"Unknown database: {name} (expected one of {', '.join(DATABASES)})")
        self.selected_database = name

    # --- submission bookkeeping used by the pipeline ---

    def begin_run(self) -> None:
        self._in_flight += 1

    def end_run(self) -> None:
        self._in_flight = max(0, self._in_flight - 1)

    @property
    def is_running(self) -> bool:
        """True while at least one submission is outstanding."""
        return self._in_flight > 0

    @property
    def in_flight(self) -> int:
        return self._in_flight

    def replace_table(self, table: TableData) -> None:
        self.table = table

    def record_error(self, message: str) -> None:
        self.last_error = message

    def clear_error(self) -> None:
        self.last_error = None

    def get_full_state(self) -> Dict[str, Any]:
        """
        Returns a snapshot of the whole state as plain data.
        """
        return {
            "stage": self.stage.value,
            "connections": self.connections.to_dict()["connections"],
            "schema": self.schema.text,
            "editor_text": self.editor_text,
            "selected_database": self.selected_database,
            "table": self.table.to_dict(),
            "history": [entry.to_dict() for entry in self.history],
            "is_running": self.is_running,
            "last_error": self.last_error,
        }

    def available_databases(self) -> List[str]:
        return list(DATABASES)
