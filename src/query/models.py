"""Data models for parsed queries.

A query string parses into an immutable Query: an ordered tuple of
Statements, each naming an operation, its arguments and an optional field
selection.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class Arg:
    """One statement argument.

    Attributes:
        value: Argument value (quoted strings keep backslash escapes verbatim)
        key: Argument name for `key=value` arguments, None for positional ones
    """
    value: str
    key: Optional[str] = None

    @property
    def is_positional(self) -> bool:
        return self.key is None


@dataclass(frozen=True)
class Statement:
    """One operation invocation within a (possibly batched) query.

    Attributes:
        operation: Operation name (get, list, search, ...)
        args: Arguments in source order
        fields: Selected field names with presets expanded and duplicates
            removed, or None when no `{...}` block was given (the schema's
            default preset then applies)

    Example:
        >>> stmt = Statement("tree", (Arg("123"), Arg("5", key="depth")))
        >>> stmt.positional(0), stmt.named("depth")
        ('123', '5')
    """
    operation: str
    args: Tuple[Arg, ...] = ()
    fields: Optional[Tuple[str, ...]] = None

    def positional(self, index: int) -> Optional[str]:
        """Value of the index-th unkeyed argument, None when absent."""
        count = 0
        for arg in self.args:
            if arg.is_positional:
                if count == index:
                    return arg.value
                count += 1
        return None

    def named(self, name: str) -> Optional[str]:
        """Value of the first argument keyed `name`, None when absent."""
        for arg in self.args:
            if arg.key == name:
                return arg.value
        return None

    def has_field(self, name: str) -> bool:
        """True only when fields were given explicitly and include `name`."""
        return self.fields is not None and name in self.fields


@dataclass(frozen=True)
class Query:
    """Ordered sequence of statements parsed from one input string."""
    statements: Tuple[Statement, ...]
    source: str = ""

    def __len__(self) -> int:
        return len(self.statements)


@dataclass
class TreeNode:
    """One node of a tree() result: a projected page and its subtree."""
    page: Dict[str, Any]
    children: List['TreeNode'] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'page': self.page,
            'children': [child.to_dict() for child in self.children],
        }
