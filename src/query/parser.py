"""Recursive-descent parser for the query language.

Grammar:
    query     := statement (';' statement)* ';'?
    statement := operation '(' args? ')' ('{' fields '}')?
    args      := arg (',' arg)*
    arg       := identifier '=' value | value
    value     := '"' (char | '\\' char)* '"' | bare
    fields    := name ((',' | whitespace) name)*

A field name may also be a preset, which expands in place. Field names are
validated against the schema while parsing, so a bad field fails before any
network call.
"""

import logging
from typing import List, Optional, Tuple

from .errors import ParseError
from .models import Arg, Query, Statement
from .schema import FieldSchema, build_page_schema

logger = logging.getLogger(__name__)

OPERATIONS = frozenset({
    "get", "list", "search", "children", "ancestors", "tree", "spaces", "history",
})

_BARE_STOP = ",()"


def _is_ident_start(ch: str) -> bool:
    return ch.isalpha() or ch == "_"


def _is_ident_char(ch: str) -> bool:
    return ch.isalnum() or ch in "_-"


class QueryParser:
    """Parses query strings into Query objects.

    Example:
        >>> parser = QueryParser(build_page_schema())
        >>> query = parser.parse('get(space=DEV, title="My Page"){minimal}')
        >>> query.statements[0].named("title")
        'My Page'
    """

    def __init__(self, schema: FieldSchema):
        self._schema = schema
        self._text = ""
        self._pos = 0

    def parse(self, text: str) -> Query:
        """Parse a query string.

        Raises:
            ParseError: If the input is empty or malformed, or names an
                unknown operation or field
        """
        self._text = text or ""
        self._pos = 0

        if not self._text.strip():
            raise ParseError("empty query")

        statements: List[Statement] = [self._statement()]
        self._skip_ws()
        while self._peek() == ";":
            self._pos += 1
            self._skip_ws()
            if self._at_end():
                break
            statements.append(self._statement())
            self._skip_ws()

        if not self._at_end():
            self._fail(f"unexpected {self._peek()!r}")

        logger.debug(f"Parsed {len(statements)} statement(s) from query")
        return Query(statements=tuple(statements), source=self._text)

    # --- Productions ---

    def _statement(self) -> Statement:
        self._skip_ws()
        start = self._pos
        operation = self._identifier()
        if not operation:
            if self._at_end() or self._peek() == ";":
                self._fail("empty statement")
            self._fail(f"expected operation name, found {self._peek()!r}")
        if operation not in OPERATIONS:
            self._fail(f"unknown operation {operation!r}", start)

        self._skip_ws()
        self._expect("(")
        args = self._args()
        self._expect(")")

        fields: Optional[Tuple[str, ...]] = None
        self._skip_ws()
        if self._peek() == "{":
            fields = self._fields()

        return Statement(operation=operation, args=tuple(args), fields=fields)

    def _args(self) -> List[Arg]:
        args: List[Arg] = []
        self._skip_ws()
        if self._peek() == ")":
            return args

        while True:
            args.append(self._arg())
            self._skip_ws()
            if self._peek() != ",":
                return args
            self._pos += 1

    def _arg(self) -> Arg:
        self._skip_ws()
        mark = self._pos
        key = self._identifier()
        if key:
            self._skip_ws()
            if self._peek() == "=":
                self._pos += 1
                return Arg(value=self._value(), key=key)
        # Not `key=`: rewind and read the whole thing as a positional value
        self._pos = mark
        return Arg(value=self._value())

    def _value(self) -> str:
        self._skip_ws()
        if self._peek() == '"':
            return self._quoted()

        start = self._pos
        while not self._at_end() and self._peek() not in _BARE_STOP:
            self._pos += 1
        value = self._text[start:self._pos].strip()
        if not value:
            self._fail("empty argument value", start)
        return value

    def _quoted(self) -> str:
        start = self._pos
        self._pos += 1
        chars: List[str] = []
        while not self._at_end():
            ch = self._text[self._pos]
            if ch == "\\" and self._pos + 1 < len(self._text):
                # Escapes are kept verbatim for the server to interpret (CQL)
                chars.append(self._text[self._pos:self._pos + 2])
                self._pos += 2
                continue
            if ch == '"':
                self._pos += 1
                return "".join(chars)
            chars.append(ch)
            self._pos += 1
        self._fail("unterminated string", start)

    def _fields(self) -> Tuple[str, ...]:
        open_pos = self._pos
        self._expect("{")
        names: List[str] = []
        while True:
            self._skip_ws(extra=",")
            if self._peek() == "}":
                self._pos += 1
                break
            if self._at_end():
                self._fail("unterminated field list", open_pos)

            start = self._pos
            name = self._identifier()
            if not name:
                self._fail(f"unexpected {self._peek()!r} in field list")

            if self._schema.is_preset(name):
                names.extend(self._schema.preset_fields(name))
            elif self._schema.is_field(name):
                names.append(name)
            else:
                self._fail(f"unknown field {name!r}", start)

        if not names:
            self._fail("empty field list", open_pos)
        return tuple(dict.fromkeys(names))

    # --- Scanner helpers ---

    def _identifier(self) -> str:
        start = self._pos
        if self._at_end() or not _is_ident_start(self._text[self._pos]):
            return ""
        self._pos += 1
        while not self._at_end() and _is_ident_char(self._text[self._pos]):
            self._pos += 1
        return self._text[start:self._pos]

    def _expect(self, ch: str) -> None:
        self._skip_ws()
        if self._peek() != ch:
            found = repr(self._peek()) if not self._at_end() else "end of input"
            self._fail(f"expected {ch!r}, found {found}")
        self._pos += 1

    def _skip_ws(self, extra: str = "") -> None:
        while not self._at_end() and (self._text[self._pos].isspace() or self._text[self._pos] in extra):
            self._pos += 1

    def _peek(self) -> str:
        return self._text[self._pos] if self._pos < len(self._text) else ""

    def _at_end(self) -> bool:
        return self._pos >= len(self._text)

    def _fail(self, message: str, position: Optional[int] = None):
        raise ParseError(message, self._text, self._pos if position is None else position)


def parse_query(text: str, schema: Optional[FieldSchema] = None) -> Query:
    """Parse a query string against `schema` (the page schema when omitted)."""
    return QueryParser(schema or build_page_schema()).parse(text)
