"""Typed exception hierarchy for query engine errors.

Parse errors are raised before any network call is made. Usage errors and
unimplemented operations are raised by operation handlers. Any failure of a
statement inside a batch reaches the caller wrapped in StatementError, which
names the operation and keeps the original exception as its cause.
"""

from src.confluence_client.errors import ConfluenceMgmtError


class QueryError(ConfluenceMgmtError):
    """Base exception for all query engine errors."""
    pass


class ParseError(QueryError):
    """Raised when a query string is malformed or names an unknown operation/field.

    The message shows the query with a caret under the offending position.
    """

    def __init__(self, message: str, query: str = "", position: int = -1):
        self.query = query
        self.position = position
        self.reason = message
        if position >= 0 and query:
            pointer = " " * position + "^"
            message = f"{message}\n  {query}\n  {pointer}"
        super().__init__(message)


class UsageError(QueryError):
    """Raised when a statement lacks the arguments its operation requires."""
    pass


class OperationNotImplementedError(QueryError):
    """Raised by operations the grammar declares but the engine does not run."""

    def __init__(self, operation: str):
        super().__init__(f"{operation} operation not yet implemented")
        self.operation = operation


class StatementError(QueryError):
    """Raised when one statement of a query fails.

    Attributes:
        index: Zero-based position of the statement in the query
        operation: Operation name of the failing statement
        cause: The original exception
    """

    def __init__(self, index: int, operation: str, cause: Exception):
        super().__init__(f"{operation}: {cause}")
        self.index = index
        self.operation = operation
        self.cause = cause
