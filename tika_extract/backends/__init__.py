"""
Tika backend implementations.

Both backends implement BaseTikaBackend, so callers can depend on the
abstraction and swap transports without code changes.

Available Backends:
    - local: spawns the Tika application JAR per call
    - remote: talks to a Tika Server over HTTP
"""

from .base import BaseTikaBackend
from .factory import TikaBackendFactory
from .local import LocalTikaBackend
from .remote import RemoteTikaBackend

__all__ = [
    "BaseTikaBackend",
    "LocalTikaBackend",
    "RemoteTikaBackend",
    "TikaBackendFactory",
]
