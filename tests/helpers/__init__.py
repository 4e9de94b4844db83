"""Test helper modules.

- fake_http: scripted requests.Session stand-in with call recording
- builders: JSON payload builders for v2 and v1 API responses
"""

from .fake_http import FakeSession, RecordedCall, make_response

__all__ = [
    'FakeSession',
    'RecordedCall',
    'make_response',
]
