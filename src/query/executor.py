"""Query executor: dispatches parsed statements to operation handlers.

Statements run one after another in source order. The first failing
statement stops the batch and surfaces as a StatementError naming its
operation.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from src.confluence_client.client import ConfluenceClient
from src.confluence_client.errors import ConfluenceMgmtError, PageNotFoundError
from src.models import SearchResult

from .errors import OperationNotImplementedError, StatementError, UsageError
from .models import Query, Statement
from .parser import QueryParser
from .schema import FieldSchema, build_page_schema
from .tree_builder import DEFAULT_DEPTH, TreeBuilder

logger = logging.getLogger(__name__)

SEARCH_LIMIT = 25
LABEL_SEARCH_LIMIT = 50

Handler = Callable[[Statement], Any]


def cql_quote(value: str) -> str:
    """Quote a value as a CQL string literal."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def search_to_excerpts(result: SearchResult) -> List[Dict[str, Any]]:
    return [item.to_excerpt() for item in result.results]


class Executor:
    """Runs queries against a ConfluenceClient.

    Example:
        >>> executor = Executor(client)
        >>> executor.run('get(12345){minimal}')
        {'id': '12345', 'title': 'Home', 'status': 'current'}
        >>> executor.run('spaces(){minimal}; get(12345){minimal}')
        [[{'id': '1', 'key': 'DEV', 'status': 'current'}], {...}]
    """

    def __init__(self, client: ConfluenceClient, schema: Optional[FieldSchema] = None):
        self._client = client
        self._schema = schema or build_page_schema()
        self._parser = QueryParser(self._schema)
        self._tree_builder = TreeBuilder(client, self._schema)
        self._operations: Dict[str, Handler] = {
            'get': self._get,
            'list': self._list,
            'search': self._search,
            'children': self._children,
            'ancestors': self._ancestors,
            'tree': self._tree,
            'spaces': self._spaces,
            'history': self._history,
        }

    @property
    def schema(self) -> FieldSchema:
        return self._schema

    def run(self, text: str) -> Any:
        """Parse and execute a query string.

        Returns:
            The bare result for a single statement, a list of per-statement
            results for a batch

        Raises:
            ParseError: If the query is malformed (nothing is executed)
            StatementError: If a statement fails
        """
        return self.run_query(self._parser.parse(text))

    def run_query(self, query: Query) -> Any:
        """Execute a parsed query; a single statement yields its bare result."""
        results = self.execute(query)
        if len(results) == 1:
            return results[0]
        return results

    def execute(self, query: Query) -> List[Any]:
        """Execute every statement of a parsed query, in order.

        Raises:
            StatementError: Wrapping the first failure, with the operation name
        """
        results: List[Any] = []
        for index, statement in enumerate(query.statements):
            logger.debug(f"Executing statement {index}: {statement.operation}")
            try:
                results.append(self._dispatch(statement))
            except ConfluenceMgmtError as e:
                logger.debug(f"Statement {index} ({statement.operation}) failed: {e}")
                raise StatementError(index, statement.operation, e) from e
        return results

    def _dispatch(self, statement: Statement) -> Any:
        handler = self._operations.get(statement.operation)
        if handler is None:
            raise UsageError(f"unknown operation {statement.operation!r}")
        return handler(statement)

    # --- Operation handlers ---

    def _get(self, stmt: Statement) -> Dict[str, Any]:
        page_id = stmt.positional(0)
        if page_id:
            page = self._client.get_page(page_id, stmt.has_field("body"))
            return self._schema.apply(page, stmt.fields)

        space_key = stmt.named("space")
        title = stmt.named("title")
        if space_key and title:
            pages = self._client.list_pages(space_key, title, limit=1)
            if not pages:
                raise PageNotFoundError(title=title, space_key=space_key)
            return self._schema.apply(pages[0], stmt.fields)

        raise UsageError("get requires a page ID or space+title args")

    def _list(self, stmt: Statement) -> List[Dict[str, Any]]:
        space_key = stmt.named("space")
        if not space_key:
            raise UsageError("list requires space=KEY")

        label = stmt.named("label")
        if label:
            # No label filter on the page listing endpoints; go through CQL
            cql = f"type=page AND space={cql_quote(space_key)} AND label={cql_quote(label)}"
            return search_to_excerpts(self._client.search_cql(cql, LABEL_SEARCH_LIMIT))

        pages = self._client.list_pages(space_key)
        title = stmt.named("title")
        if title:
            pages = [page for page in pages if title in page.title]
        return [self._schema.apply(page, stmt.fields) for page in pages]

    def _search(self, stmt: Statement) -> List[Dict[str, Any]]:
        cql = stmt.positional(0)
        if not cql:
            raise UsageError("search requires a CQL query string")
        return search_to_excerpts(self._client.search_cql(cql, SEARCH_LIMIT))

    def _children(self, stmt: Statement) -> List[Dict[str, Any]]:
        page_id = stmt.positional(0)
        if not page_id:
            raise UsageError("children requires a page ID")
        children = self._client.get_children(page_id)
        return [self._schema.apply(child, stmt.fields) for child in children]

    def _ancestors(self, stmt: Statement) -> List[Dict[str, Any]]:
        page_id = stmt.positional(0)
        if not page_id:
            raise UsageError("ancestors requires a page ID")
        # Ancestors are not pages: returned as-is, never projected
        return [ancestor.to_dict() for ancestor in self._client.get_ancestors(page_id)]

    def _tree(self, stmt: Statement) -> Dict[str, Any]:
        page_id = stmt.positional(0)
        if not page_id:
            raise UsageError("tree requires a page ID")

        depth = DEFAULT_DEPTH
        raw_depth = stmt.named("depth")
        if raw_depth is not None:
            try:
                depth = int(raw_depth)
            except ValueError:
                raise UsageError(f"tree depth must be an integer, got {raw_depth!r}")

        return self._tree_builder.build(page_id, depth, stmt.fields).to_dict()

    def _spaces(self, stmt: Statement) -> List[Dict[str, Any]]:
        fields = stmt.fields
        results = []
        for space in self._client.list_spaces():
            item: Dict[str, Any] = {'id': space.id, 'key': space.key}
            if fields is None or "name" in fields:
                item['name'] = space.name
            if stmt.has_field("type"):
                item['type'] = space.type
            if stmt.has_field("status"):
                item['status'] = space.status
            if stmt.has_field("homepageId"):
                item['homepageId'] = space.homepage_id
            results.append(item)
        return results

    def _history(self, stmt: Statement) -> Any:
        raise OperationNotImplementedError(stmt.operation)
