"""
Schema draft store for the schema step.

The draft is a single JSON text blob. Only well-formedness is checked; field
types and index names are not interpreted.
"""

import asyncio
import json
import logging
from typing import Any

from .errors import ParseError

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA = """{
  "collection": "users",
  "fields": {
    "id": "string",
    "name": "string",
    "email": "string",
    "age": "number",
    "isActive": "boolean"
  },
  "indexes": ["email", "id"]
}"""

INVALID_SCHEMA_MESSAGE = "Invalid JSON schema format"


class SchemaDraftStore:
    """Holds the schema draft text and the last submit error."""

    def __init__(self, text: str = DEFAULT_SCHEMA, submit_delay: float = 1.0):
        self._text = text
        self.submit_delay = submit_delay
        self.error: str = ""
        self.is_submitting = False

    @property
    def text(self) -> str:
        return self._text

    @property
    def character_count(self) -> int:
        return len(self._text)

    def update(self, text: str) -> None:
        """Overwrite the draft. No validation happens until submit."""
        self._text = text

    def reset(self) -> None:
        """Restore the default template and clear any error."""
        self._text = DEFAULT_SCHEMA
        self.error = ""

    def parse(self) -> Any:
        """
        Parse the draft as JSON.

        Returns:
            The decoded schema document.

        Raises:
            ParseError: If the draft is not well-formed JSON.
        """
        try:
            return json.loads(self._text)
        except json.JSONDecodeError as e:
            raise ParseError(f"{INVALID_SCHEMA_MESSAGE}: {e}") from e

    async def submit(self) -> bool:
        """
        Validate the draft and, if it parses, wait out the submit delay.

        Returns:
            True if the console may proceed to the editor, False if the draft
            is malformed. On failure `error` holds the fixed message and the
            draft text is left as it was.
        """
        self.error = ""
        self.is_submitting = True
        try:
            self.parse()
            await asyncio.sleep(self.submit_delay)
            return True
        except ParseError as e:
            logger.warning(f"Schema draft rejected: {e}")
            self.error = INVALID_SCHEMA_MESSAGE
            return False
        finally:
            self.is_submitting = False
