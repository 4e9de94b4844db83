"""HTTP transport for the Confluence REST API.

This module performs authenticated requests against the two versioned path
families of a Confluence instance (modern /api/v2 and legacy /rest/api),
retries transient failures through retry_logic, and translates everything
else into the typed exception hierarchy.
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional

import requests
from requests.exceptions import ConnectionError, RequestException, Timeout

from .auth import AuthType, build_auth_header
from .errors import (
    APIError,
    APIUnreachableError,
    ClientConfigError,
    ConfluenceError,
    ResponseParseError,
)
from .models import ClientConfig
from .retry_logic import retry_on_transient

logger = logging.getLogger(__name__)

V2_PATH = "/api/v2"    # Relative to base URL (which includes /wiki for Cloud)
V1_PATH = "/rest/api"


def sanitize_credentials(text: str) -> str:
    """Mask credentials in text that is about to be logged or surfaced.

    Masks user:password pairs in URLs, Authorization header values,
    Basic/Bearer tokens, token=... pairs, and the local part of email
    addresses.

    Example:
        >>> sanitize_credentials("Authorization: Bearer abc123")
        'Authorization: ***REDACTED***'
    """
    if not text:
        return text

    sanitized = re.sub(r'://([\w.-]+):([\w.-]+)@', r'://***:***@', text)
    sanitized = re.sub(
        r'Authorization:\s*[^\n\r]+',
        'Authorization: ***REDACTED***',
        sanitized,
        flags=re.IGNORECASE,
    )
    sanitized = re.sub(
        r'\b(Bearer|Basic)\s+[^\s\n\r]+',
        r'\1 ***REDACTED***',
        sanitized,
        flags=re.IGNORECASE,
    )
    sanitized = re.sub(
        r'(api_?token|token)["\']?\s*[:=]\s*["\']?([^"\'\s&]+)',
        r'\1=***REDACTED***',
        sanitized,
        flags=re.IGNORECASE,
    )
    sanitized = re.sub(
        r'\b[\w.-]+@([\w.-]+\.[a-z]{2,})\b',
        r'***@\1',
        sanitized,
        flags=re.IGNORECASE,
    )
    return sanitized


def parse_api_error(status_code: int, body: bytes) -> APIError:
    """Build an APIError from an error response of either dialect.

    Handles the v2 shape ({"errors": [{"title", "detail"}]}), the v1 shape
    ({"message"} or {"errorMessage"}) and non-JSON bodies.

    Args:
        status_code: HTTP status of the response
        body: Raw response body

    Returns:
        APIError carrying the status code and the best available message
    """
    if not body:
        return APIError(status_code, f"HTTP {status_code}")

    try:
        payload = json.loads(body.decode('utf-8'))
    except (ValueError, UnicodeDecodeError):
        text = body.decode('utf-8', errors='replace')
        return APIError(status_code, f"HTTP {status_code}: {text}")

    message = ""
    if isinstance(payload, dict):
        message = payload.get('message') or payload.get('errorMessage') or ""
        errors = payload.get('errors')
        if not message and isinstance(errors, list) and errors:
            first = errors[0]
            if isinstance(first, dict):
                message = first.get('detail') or first.get('title') or ""

    if not message:
        message = f"HTTP {status_code}"
    return APIError(status_code, message)


def decode_json(data: bytes, context: str) -> Any:
    """Decode a successful response body.

    Args:
        data: Raw response body
        context: What was requested, for the error message (e.g. "page")

    Raises:
        ResponseParseError: If the body is not valid JSON
    """
    try:
        return json.loads(data.decode('utf-8'))
    except (ValueError, UnicodeDecodeError) as e:
        raise ResponseParseError(context, str(e)) from e


def _json_type(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    return "object"


def decode_object(data: bytes, context: str) -> Dict[str, Any]:
    """Decode a successful response body that must be a JSON object.

    Raises:
        ResponseParseError: If the body is not valid JSON or not an object
    """
    payload = decode_json(data, context)
    if not isinstance(payload, dict):
        raise ResponseParseError(context, f"expected a JSON object, got {_json_type(payload)}")
    return payload


def result_items(payload: Dict[str, Any], context: str) -> List[Dict[str, Any]]:
    """Items of a paginated response ({"results": [...]}) of either dialect.

    A missing or null "results" means no items.

    Raises:
        ResponseParseError: If "results" is not an array of objects
    """
    results = payload.get('results')
    if results is None:
        return []
    if not isinstance(results, list):
        raise ResponseParseError(context, f"expected results array, got {_json_type(results)}")
    for item in results:
        if not isinstance(item, dict):
            raise ResponseParseError(context, f"expected result object, got {_json_type(item)}")
    return results


def decode_results(data: bytes, context: str) -> List[Dict[str, Any]]:
    """Decode a paginated response body and return its result items."""
    return result_items(decode_object(data, context), context)


class Transport:
    """Authenticated, retrying HTTP transport for one Confluence instance.

    The transport validates its configuration up front so a missing base URL,
    token or email fails at construction time rather than on the first
    request. Every request carries the same Authorization header.

    Retry policy:
        - 2xx: body returned verbatim as bytes
        - 429 and 5xx: retried up to 3 times with 1s, 2s, 4s pauses
        - other 4xx: raised immediately as APIError
        - DNS failure, refused connection, timeout: raised immediately as
          APIUnreachableError with a connectivity hint

    Example:
        >>> transport = Transport(ClientConfig(base_url=url, token=token, email=email))
        >>> data = transport.get_v2("pages/12345")
    """

    def __init__(self, config: ClientConfig, session: Optional[requests.Session] = None):
        """Initialize the transport.

        Args:
            config: Connection settings
            session: Optional pre-built requests session (tests inject fakes here)

        Raises:
            ClientConfigError: If base URL, token or (for basic auth) email is missing
        """
        if not config.base_url:
            raise ClientConfigError("base URL is required")
        if not config.token:
            raise ClientConfigError("token is required")

        if config.auth_type:
            try:
                auth_type = AuthType(config.auth_type)
            except ValueError:
                raise ClientConfigError(f"unsupported auth type {config.auth_type!r}")
        else:
            auth_type = AuthType.BASIC if config.email else AuthType.BEARER

        self._base_url = config.base_url.rstrip('/')
        self._auth_type = auth_type
        self._auth_header = build_auth_header(auth_type, config.token, config.email)
        self._timeout = config.timeout
        self._verify = not config.tls_skip_verify
        self._session = session if session is not None else requests.Session()

        if not self._verify:
            logger.warning(f"TLS certificate verification is disabled for {self._base_url}")

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def auth_type(self) -> AuthType:
        return self._auth_type

    # --- Path builders ---

    def v2_url(self, *segments: str) -> str:
        """Build a full URL under the v2 (Cloud) path family."""
        return f"{self._base_url}{V2_PATH}/" + "/".join(segments)

    def v1_url(self, *segments: str) -> str:
        """Build a full URL under the v1 path family."""
        return f"{self._base_url}{V1_PATH}/" + "/".join(segments)

    # --- Convenience methods (versioned) ---

    def get_v2(self, path: str, params: Optional[Dict[str, Any]] = None) -> bytes:
        return self.request("GET", self.v2_url(path), params=params)

    def get_v1(self, path: str, params: Optional[Dict[str, Any]] = None) -> bytes:
        return self.request("GET", self.v1_url(path), params=params)

    def post_v2(self, path: str, body: Any) -> bytes:
        return self.request("POST", self.v2_url(path), body=body)

    def post_v1(self, path: str, body: Any) -> bytes:
        return self.request("POST", self.v1_url(path), body=body)

    def put_v2(self, path: str, body: Any) -> bytes:
        return self.request("PUT", self.v2_url(path), body=body)

    def put_v1(self, path: str, body: Any) -> bytes:
        return self.request("PUT", self.v1_url(path), body=body)

    def delete_v2(self, path: str) -> bytes:
        return self.request("DELETE", self.v2_url(path))

    def delete_v1(self, path: str) -> bytes:
        return self.request("DELETE", self.v1_url(path))

    def get_raw(self, path: str, params: Optional[Dict[str, Any]] = None) -> bytes:
        """GET an arbitrary path relative to the base URL (e.g. "/rest/api/user/current")."""
        if not path.startswith('/'):
            path = '/' + path
        return self.request("GET", self._base_url + path, params=params)

    # --- Core request ---

    def request(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        body: Any = None,
    ) -> bytes:
        """Perform an authenticated request with the retry policy applied.

        Args:
            method: HTTP method
            url: Absolute URL, or a path relative to the base URL
            params: Optional query parameters
            body: Optional JSON-serializable request body

        Returns:
            Raw response body of the first 2xx response

        Raises:
            APIError: Non-2xx response (after retries for 429/5xx)
            APIUnreachableError: Network-level failure (never retried)
            ConfluenceError: Body not serializable or request not sendable
        """
        if not url.startswith(('http://', 'https://')):
            url = self._base_url + ('' if url.startswith('/') else '/') + url

        data = None
        if body is not None:
            try:
                data = json.dumps(body).encode('utf-8')
            except (TypeError, ValueError) as e:
                raise ConfluenceError(f"confluence: failed to marshal request body: {e}") from e

        return retry_on_transient(self._send_once, method, url, params, data)

    def _send_once(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, Any]],
        data: Optional[bytes],
    ) -> bytes:
        """Send a single attempt; see request() for the error contract."""
        headers = {
            'Authorization': self._auth_header,
            'Accept': 'application/json',
        }
        if data is not None:
            headers['Content-Type'] = 'application/json'

        logger.debug(f"{method} {url}")
        try:
            response = self._session.request(
                method,
                url,
                params=params,
                data=data,
                headers=headers,
                timeout=self._timeout,
                verify=self._verify,
            )
        except (ConnectionError, Timeout) as e:
            reason = sanitize_credentials(str(e))
            logger.warning(f"Confluence unreachable at {self._base_url}: {reason}")
            raise APIUnreachableError(self._base_url, reason) from e
        except RequestException as e:
            raise ConfluenceError(
                f"confluence: request failed: {sanitize_credentials(str(e))}"
            ) from e

        if 200 <= response.status_code < 300:
            return response.content

        error = parse_api_error(response.status_code, response.content)
        logger.debug(f"{method} {url} -> HTTP {error.status_code}: {sanitize_credentials(error.message)}")
        raise error
