"""
Error types raised by the query console.

Every error is caught at the action that triggered it (schema submit, query
submit, CLI command) and turned into a user-visible message.
"""

from typing import Optional


class QueryConsoleError(Exception):
    """Base class for all query console errors."""


class ParseError(QueryConsoleError):
    """The schema draft is not well-formed JSON."""


class GenerationError(QueryConsoleError):
    """The generation endpoint failed or could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class InvalidGenerationResponse(GenerationError):
    """The generation endpoint answered 2xx with a body of the wrong shape."""


class ExecutionError(QueryConsoleError):
    """The execution endpoint failed or could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
