"""API dialects: one canonical operation surface over the v2 and v1 APIs.

A client picks exactly one dialect at construction time (Cloud -> v2,
Server/DC -> v1) and never re-checks the instance type per call.
"""

from .base import Dialect
from .cloud import CloudDialect
from .server import ServerDialect

__all__ = [
    'Dialect',
    'CloudDialect',
    'ServerDialect',
]
