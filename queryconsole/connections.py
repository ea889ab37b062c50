"""
Connection registry for the connect step.

Holds the ordered list of connection descriptors the user has entered. Nothing
here dials a datastore: submit() only waits out the configured delay before
the console moves on to the schema step.
"""

import asyncio
import logging
from typing import Any, Dict, Iterator, List, Optional, Union

from .models import ConnectionDescriptor, DatastoreType

logger = logging.getLogger(__name__)


def parse_datastore_type(value: Union[str, DatastoreType]) -> DatastoreType:
    """
    Coerce a user-supplied type tag to a DatastoreType.

    Raises:
        ValueError: If the tag is not one of the allowed datastore types.
    """
    if isinstance(value, DatastoreType):
        return value
    try:
        return DatastoreType(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(t.value for t in DatastoreType)
        raise ValueError(f"Unsupported datastore type: {value!r} (expected one of {allowed})")


class ConnectionRegistry:
    """
    Ordered, id-keyed list of connection descriptors.

    Ids are assigned from a counter that only moves forward, so an id is never
    handed out twice even after the entry holding it is removed.
    """

    def __init__(self, submit_delay: float = 1.0):
        self._connections: List[ConnectionDescriptor] = []
        self._next_id = 1
        self.submit_delay = submit_delay
        self.is_connecting = False

    def add(self) -> ConnectionDescriptor:
        """Append a blank descriptor with a fresh id and the default type."""
        descriptor = ConnectionDescriptor(id=self._next_id)
        self._connections.append(descriptor)
        self._next_id += 1
        logger.debug(f"Added connection descriptor {descriptor.id}")
        return descriptor

    def get(self, connection_id: int) -> Optional[ConnectionDescriptor]:
        for descriptor in self._connections:
            if descriptor.id == connection_id:
                return descriptor
        return None

    def update(self, connection_id: int, value: str) -> bool:
        """
        Set the connection string of the matching descriptor.

        Returns:
            True if a descriptor was updated, False if the id is unknown.
        """
        descriptor = self.get(connection_id)
        if descriptor is None:
            return False
        descriptor.value = value
        return True

    def set_type(self, connection_id: int, datastore_type: Union[str, DatastoreType]) -> bool:
        """
        Set the datastore type of the matching descriptor.

        The type is validated before the lookup, so an unknown tag raises even
        when the id does not exist.

        Raises:
            ValueError: If the type is not an allowed datastore type.
        """
        new_type = parse_datastore_type(datastore_type)
        descriptor = self.get(connection_id)
        if descriptor is None:
            return False
        descriptor.type = new_type
        return True

    def remove(self, connection_id: int) -> bool:
        """Remove the descriptor with the given id."""
        before = len(self._connections)
        self._connections = [c for c in self._connections if c.id != connection_id]
        removed = len(self._connections) != before
        if removed:
            logger.debug(f"Removed connection descriptor {connection_id}")
        return removed

    def descriptors(self) -> List[ConnectionDescriptor]:
        """Return a shallow copy of the descriptor list."""
        return list(self._connections)

    async def submit(self) -> bool:
        """
        Simulate establishing the connections.

        No connection is attempted and no credential is checked; this waits
        for the configured delay and reports success.
        """
        self.is_connecting = True
        try:
            logger.info(f"Connecting {len(self._connections)} datastore(s)")
            await asyncio.sleep(self.submit_delay)
            return True
        finally:
            self.is_connecting = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "next_id": self._next_id,
            "connections": [c.to_dict() for c in self._connections],
        }

    def __len__(self) -> int:
        return len(self._connections)

    def __iter__(self) -> Iterator[ConnectionDescriptor]:
        return iter(list(self._connections))

    def __repr__(self) -> str:
        return f"ConnectionRegistry(connections={len(self._connections)}, next_id={self._next_id})"
