"""
Text, HTML, MIME type and metadata extraction through Apache Tika.

Two interchangeable backends share one interface:

Usage:
    from tika_extract import FilePath, LocalTikaBackend, RemoteTikaBackend, Url

    # Bundled JAR, run with the local Java for every call
    with LocalTikaBackend(FilePath("report.pdf"), ocr=False) as tika:
        text = await tika.text()

    # Tika Server over HTTP
    async with RemoteTikaBackend("http://tika:9998") as tika:
        tika.set_input(Url("https://example.com/report.pdf"))
        mime = await tika.mimetype()

All failures raise a subclass of TikaExtractError.
"""

from .backends import BaseTikaBackend, LocalTikaBackend, RemoteTikaBackend, TikaBackendFactory
from .config_models import TikaConfig
from .errors import (
    InputNotSetError,
    IoError,
    MissingContentError,
    ParseError,
    ProcessError,
    TikaExtractError,
    TransportError,
)
from .models import FilePath, Input, ResultMap, Url

__all__ = [
    # Input model
    "FilePath",
    "Url",
    "Input",
    "ResultMap",
    # Backends
    "BaseTikaBackend",
    "LocalTikaBackend",
    "RemoteTikaBackend",
    "TikaBackendFactory",
    "TikaConfig",
    # Errors
    "TikaExtractError",
    "ParseError",
    "ProcessError",
    "TransportError",
    "InputNotSetError",
    "MissingContentError",
    "IoError",
]

__version__ = "0.1.0"
