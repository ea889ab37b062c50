"""
Data model for the query console.

Entities owned by the console state are plain dataclasses. Bodies exchanged
with the generation endpoint are pydantic models so that a malformed response
is rejected before anything is sent to the execution endpoint.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DatastoreType(str, Enum):
    """Datastore types a connection descriptor may target."""

    MONGODB = "mongodb"
    POSTGRESQL = "postgresql"
    MYSQL = "mysql"
    REDIS = "redis"

    @property
    def label(self) -> str:
        return {
            DatastoreType.MONGODB: "MongoDB",
            DatastoreType.POSTGRESQL: "PostgreSQL",
            DatastoreType.MYSQL: "MySQL",
            DatastoreType.REDIS: "Redis",
        }[self]


class EntryStatus(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class ConnectionDescriptor:
    """A user-entered (type, connection string) pair. Never dialed."""

    id: int
    value: str = ""
    type: DatastoreType = DatastoreType.MONGODB

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "value": self.value, "type": self.type.value}


@dataclass
class QueryHistoryEntry:
    """One submitted query and its outcome."""

    query: str
    result: str
    status: EntryStatus = EntryStatus.SUCCESS
    pending: bool = False
    timestamp: datetime = field(default_factory=datetime.now)
    submission_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def display_time(self) -> str:
        """Local wall-clock time, e.g. 14:03:27."""
        return self.timestamp.strftime("%H:%M:%S")

    @property
    def is_error(self) -> bool:
        return self.status == EntryStatus.ERROR

    def to_dict(self) -> Dict[str, Any]:
        return {
            "submission_id": self.submission_id,
            "timestamp": self.display_time,
            "query": self.query,
            "result": self.result,
            "status": self.status.value,
            "pending": self.pending,
        }


@dataclass
class TableData:
    """Column names plus row tuples projected over those columns."""

    columns: List[str] = field(default_factory=list)
    rows: List[List[Any]] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.columns

    def to_dict(self) -> Dict[str, Any]:
        return {"columns": list(self.columns), "rows": [list(r) for r in self.rows]}


# --- Wire models for the generation endpoint ---


class GenerateRequest(BaseModel):
    """Body sent to POST /api/generate."""

    prompt: str


class GeneratedQuery(BaseModel):
    """The structured query and the execution path it should be sent to."""

    model_config = ConfigDict(extra="allow")

    query: Any = Field(..., description="Structured query, forwarded verbatim")
    endpoint: Optional[str] = Field(None, description="Path suffix under /api")

    @field_validator("query")
    @classmethod
    def query_must_be_present(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("query must not be null")
        return value

    @field_validator("endpoint")
    @classmethod
    def endpoint_must_be_a_path(cls, value: Optional[str]) -> Optional[str]:
        # Empty means "use /api/query"; anything else is appended to /api as-is
        if not value:
            return value
        if not value.startswith("/") or not value.isprintable():
            raise ValueError(f"endpoint must be a printable path starting with '/': {value!r}")
        return value


class GenerateResponse(BaseModel):
    """Body returned by POST /api/generate."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    generated: GeneratedQuery = Field(..., alias="json")
