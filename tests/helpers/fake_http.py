"""Scripted stand-in for requests.Session.

Routes are keyed by HTTP method and the URL path relative to the instance
base URL. Each route holds a queue of responses: they are served in order
and the last one repeats. Every request is recorded for assertions.
"""

import json
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple
from unittest.mock import Mock
from urllib.parse import urlparse


@dataclass
class RecordedCall:
    """One request as seen by the fake session."""
    method: str
    path: str
    params: Dict[str, Any]
    body: Any
    headers: Dict[str, str]
    timeout: Any
    verify: Any


def make_response(status: int = 200, json_body: Any = None, raw: Optional[bytes] = None) -> Mock:
    """Build a Mock response with status_code and content."""
    if raw is None:
        raw = b"" if json_body is None else json.dumps(json_body).encode("utf-8")
    response = Mock()
    response.status_code = status
    response.content = raw
    return response


class FakeSession:
    """Fake requests.Session serving scripted responses.

    Example:
        >>> session = FakeSession("https://example.atlassian.net/wiki")
        >>> session.add("GET", "/api/v2/pages/123", json_body={"id": "123"})
        >>> session.add("GET", "/api/v2/pages/9", status=500)
    """

    def __init__(self, base_url: str):
        self._base_path = urlparse(base_url).path.rstrip("/")
        self._routes: Dict[Tuple[str, str], List[Any]] = defaultdict(list)
        self.calls: List[RecordedCall] = []

    def add(
        self,
        method: str,
        path: str,
        json_body: Any = None,
        status: int = 200,
        raw: Optional[bytes] = None,
        exc: Optional[Exception] = None,
    ) -> 'FakeSession':
        """Queue one response (or an exception to raise) for method + path."""
        entry = exc if exc is not None else make_response(status, json_body, raw)
        self._routes[(method.upper(), path)].append(entry)
        return self

    def request(self, method, url, params=None, data=None, headers=None, timeout=None, verify=None):
        path = urlparse(url).path
        if path.startswith(self._base_path):
            path = path[len(self._base_path):]

        body = json.loads(data.decode("utf-8")) if data else None
        self.calls.append(RecordedCall(
            method=method,
            path=path,
            params=dict(params or {}),
            body=body,
            headers=dict(headers or {}),
            timeout=timeout,
            verify=verify,
        ))

        queue = self._routes.get((method.upper(), path))
        if not queue:
            raise AssertionError(f"unexpected request: {method} {path}")
        entry = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(entry, Exception):
            raise entry
        return entry

    def calls_to(self, method: str, path: str) -> List[RecordedCall]:
        return [c for c in self.calls if c.method == method and c.path == path]
