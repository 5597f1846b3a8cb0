"""
Input and output data model shared by the Tika backends.

An input is one of two frozen variants:

    FilePath("report.pdf")              # never checked for existence
    Url("https://example.com/a.pdf")    # must be an absolute URL

Backends dispatch on the variant with isinstance checks; the variants carry
no extraction behavior of their own.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Union
from urllib.parse import urlsplit

import httpx

from .errors import ParseError

# Normalized backend output: field name -> JSON-like value.
ResultMap = Dict[str, Any]

# Well-known keys
RESULT_KEY = "result"
CONTENT_KEY = "X-TIKA:content"
CONTENT_TYPE_KEY = "Content-Type"

# Schemes whose URLs always carry a network host
HOST_SCHEMES = frozenset({"http", "https", "ftp", "ws", "wss"})

_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")
_FORBIDDEN_HOST_CHARS = frozenset(" \t\n\r<>\"{}|\\^`[]")


class Format(Enum):
    """Dispatch key selecting request shape and response parsing."""

    HTML = "html"
    TEXT = "text"
    MIME = "mime"
    METADATA = "metadata"


@dataclass(frozen=True)
class FilePath:
    """A document on the local filesystem."""

    path: Path

    def __init__(self, path: Union[str, "os.PathLike[str]"]):
        object.__setattr__(self, "path", Path(path))

    def __str__(self) -> str:
        return str(self.path)


@dataclass(frozen=True)
class Url:
    """
    A document reachable at an absolute URL.

    Any scheme is accepted (``https:``, ``file:``, ``mailto:``, ``urn:``...).
    Schemes with a network authority (http, https, ftp, ws, wss) must name a
    host. Hosts may not contain whitespace or forbidden host characters, and a
    port must be in 0-65535.
    """

    url: str

    def __init__(self, url: str):
        url = url.strip()
        try:
            httpx.URL(url)
            parts = urlsplit(url)
            parts.port  # raises ValueError when out of range or not numeric
        except (httpx.InvalidURL, ValueError) as exc:
            raise ParseError(f"Invalid URL {url!r}: {exc}") from exc

        if not _SCHEME_RE.match(parts.scheme):
            raise ParseError(f"URL must be absolute: {url!r}")
        if any(c.isspace() or ord(c) < 0x20 or ord(c) == 0x7F for c in parts.netloc):
            raise ParseError(f"Invalid URL {url!r}: whitespace in authority")
        host = parts.hostname or ""
        if any(c in _FORBIDDEN_HOST_CHARS for c in host):
            raise ParseError(f"Invalid URL {url!r}: forbidden character in host")
        if parts.scheme.lower() in HOST_SCHEMES and not host:
            raise ParseError(f"URL must include a host: {url!r}")
        object.__setattr__(self, "url", url)

    @property
    def scheme(self) -> str:
        return urlsplit(self.url).scheme.lower()

    @property
    def host(self) -> str:
        return urlsplit(self.url).hostname or ""

    def __str__(self) -> str:
        return self.url


Input = Union[FilePath, Url]


def input_argument(source: Input) -> str:
    """Resolve an input to the single string handed to the engine."""
    if isinstance(source, FilePath):
        return str(source.path)
    if isinstance(source, Url):
        return source.url
    raise TypeError(f"Unsupported input type: {type(source).__name__}")
