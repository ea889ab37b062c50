"""
queryconsole

Client and console for a database query platform: connection setup, schema
drafting, and a query editor backed by external generation and execution
endpoints.
"""

from .config import Config, ConsoleSettings
from .connections import ConnectionRegistry
from .errors import (
    ExecutionError,
    GenerationError,
    InvalidGenerationResponse,
    ParseError,
    QueryConsoleError,
)
from .history import HistoryLog
from .models import (
    ConnectionDescriptor,
    DatastoreType,
    EntryStatus,
    QueryHistoryEntry,
    TableData,
)
from .pipeline import QueryPipeline
from .query_client import QueryClient
from .schema_draft import SchemaDraftStore
from .state import ConsoleState, Stage
from .table import derive_table

__version__ = "0.1.0"

__all__ = [
    "Config",
    "ConsoleSettings",
    "ConnectionRegistry",
    "ExecutionError",
    "GenerationError",
    "InvalidGenerationResponse",
    "ParseError",
    "QueryConsoleError",
    "HistoryLog",
    "ConnectionDescriptor",
    "DatastoreType",
    "EntryStatus",
    "QueryHistoryEntry",
    "TableData",
    "QueryPipeline",
    "QueryClient",
    "SchemaDraftStore",
    "ConsoleState",
    "Stage",
    "derive_table",
]
