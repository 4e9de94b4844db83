"""Canonical entity models shared by both Confluence API dialects."""

from src.models.confluence_page import Ancestor, Label, Page, PageBody, Version
from src.models.confluence_space import Space
from src.models.search_result import ContentSummary, SearchResult, SearchResultItem

__all__ = [
    'Page',
    'PageBody',
    'Version',
    'Label',
    'Ancestor',
    'Space',
    'SearchResult',
    'SearchResultItem',
    'ContentSummary',
]
