"""Tree builder for the tree() query operation.

Walks a page hierarchy depth-first with one request per page and one per
children listing. Only the root fetch is fatal: a child whose subtree cannot
be fetched is left out of its parent's children, and a page whose children
cannot be listed becomes a leaf.
"""

import logging
from typing import Optional, Sequence

from src.confluence_client.client import ConfluenceClient
from src.confluence_client.errors import ConfluenceError

from .models import TreeNode
from .schema import FieldSchema

logger = logging.getLogger(__name__)

DEFAULT_DEPTH = 3
MAX_DEPTH = 10


class TreeBuilder:
    """Builds projected page trees through a ConfluenceClient.

    Example:
        >>> builder = TreeBuilder(client, build_page_schema())
        >>> root = builder.build("123456", depth=2, fields=["id", "title"])
        >>> print(f"Root page has {len(root.children)} children")
    """

    def __init__(self, client: ConfluenceClient, schema: FieldSchema):
        self._client = client
        self._schema = schema

    def build(
        self,
        page_id: str,
        depth: int = DEFAULT_DEPTH,
        fields: Optional[Sequence[str]] = None,
    ) -> TreeNode:
        """Build the tree rooted at page_id.

        Args:
            page_id: Root page ID
            depth: Levels of children to fetch below the root, clamped to
                the range 0..MAX_DEPTH
            fields: Projection applied to every node (schema default when None)

        Returns:
            Root TreeNode

        Raises:
            ConfluenceError: If the root page itself cannot be fetched
        """
        max_depth = max(0, min(depth, MAX_DEPTH))
        if depth > MAX_DEPTH:
            logger.debug(f"Tree depth {depth} capped at {MAX_DEPTH}")

        include_body = fields is not None and "body" in fields
        return self._build_node(page_id, fields, include_body, max_depth, 0)

    def _build_node(
        self,
        page_id: str,
        fields: Optional[Sequence[str]],
        include_body: bool,
        max_depth: int,
        current_depth: int,
    ) -> TreeNode:
        page = self._client.get_page(page_id, include_body)
        node = TreeNode(page=self._schema.apply(page, fields))

        if current_depth >= max_depth:
            return node

        try:
            children = self._client.get_children(page_id)
        except ConfluenceError as e:
            logger.warning(f"Could not list children of page {page_id}: {e}")
            return node

        for child in children:
            try:
                child_node = self._build_node(
                    child.id, fields, include_body, max_depth, current_depth + 1
                )
            except ConfluenceError as e:
                logger.warning(f"Omitting page {child.id} from tree: {e}")
                continue
            node.children.append(child_node)

        return node
