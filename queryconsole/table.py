"""Derivation of tabular results from decoded execution responses."""

from typing import Any, Optional

from .models import TableData

SCALAR_TYPES = (str, int, float, bool, type(None))


def is_flat_record(value: Any) -> bool:
    """True for a dict whose values are all scalars or None."""
    return isinstance(value, dict) and all(isinstance(v, SCALAR_TYPES) for v in value.values())


def is_record_list(payload: Any) -> bool:
    """True for a non-empty list made only of flat records."""
    return (
        isinstance(payload, list)
        and len(payload) > 0
        and all(is_flat_record(item) for item in payload)
    )


def derive_table(payload: Any) -> Optional[TableData]:
    """
    Build a TableData from an execution response.

    Columns come from the keys of the first record, in order. Each record is
    projected over those columns; keys missing from a record become None and
    keys absent from the first record are dropped.

    Returns:
        The derived table, or None when the payload is not a list of flat
        records (the caller keeps whatever table it already had).
    """
    if not is_record_list(payload):
        return None

    columns = [str(key) for key in payload[0].keys()]
    rows = [[record.get(column) for column in columns] for record in payload]
    return TableData(columns=columns, rows=rows)
