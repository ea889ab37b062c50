"""Plain-text rendering for the interactive console and the CLI."""

from typing import Any, Iterable, List

from .connections import ConnectionRegistry
from .models import QueryHistoryEntry, TableData
from .state import ConsoleState


def _cell(value: Any) -> str:
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def render_table(table: TableData) -> str:
    """Render a table with left-aligned, space-padded columns."""
    if table.is_empty:
        return "(no table)"

    cells: List[List[str]] = [[_cell(v) for v in row] for row in table.rows]
    widths = [len(column) for column in table.columns]
    for row in cells:
        for i, value in enumerate(row[: len(widths)]):
            widths[i] = max(widths[i], len(value))

    def line(values: Iterable[str]) -> str:
        return " | ".join(v.ljust(w) for v, w in zip(values, widths)).rstrip()

    out = [line(table.columns), "-+-".join("-" * w for w in widths)]
    out.extend(line(row) for row in cells)
    out.append(f"({len(table.rows)} row{'s' if len(table.rows) != 1 else ''})")
    return "\n".join(out)


def render_entry(entry: QueryHistoryEntry) -> str:
    marker = "..." if entry.pending else ("ERR" if entry.is_error else "OK")
    return "\n".join([f"[{entry.display_time}] {marker}", entry.query, "---", entry.result])


def render_history(entries: Iterable[QueryHistoryEntry]) -> str:
    blocks = [render_entry(entry) for entry in entries]
    return "\n\n".join(blocks) if blocks else "(no queries yet)"


def render_connections(registry: ConnectionRegistry) -> str:
    if not len(registry):
        return "No connections added yet"
    return "\n".join(
        f"#{c.id} [{c.type.label}] {c.value or '<empty>'}" for c in registry
    )


def render_status(state: ConsoleState) -> str:
    """Status line: selected database and number of executed queries."""
    running = " (running)" if state.is_running else ""
    return (
        f"Connected to: {state.selected_database}{running} | "
        f"{state.history.executed_count} Queries executed"
    )
