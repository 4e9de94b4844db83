"""Query engine.

Parses the compact query language (e.g. `get(12345){minimal}; children(12345)`)
and executes each statement against a ConfluenceClient, projecting pages
through a field schema.
"""

from .errors import (
    QueryError,
    ParseError,
    UsageError,
    OperationNotImplementedError,
    StatementError,
)
from .executor import Executor
from .models import Arg, Query, Statement, TreeNode
from .parser import OPERATIONS, QueryParser, parse_query
from .schema import FieldSchema, build_page_schema
from .tree_builder import TreeBuilder

__all__ = [
    "QueryError",
    "ParseError",
    "UsageError",
    "OperationNotImplementedError",
    "StatementError",
    "Executor",
    "Arg",
    "Query",
    "Statement",
    "TreeNode",
    "OPERATIONS",
    "QueryParser",
    "parse_query",
    "FieldSchema",
    "build_page_schema",
    "TreeBuilder",
]
