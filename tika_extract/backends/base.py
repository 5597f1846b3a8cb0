"""
Base abstraction for Tika extraction backends.

This module defines the abstract base class that both backends implement,
so callers can depend on one interface and swap the local JAR for a Tika
Server (or back) without code changes.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from ..models import Input, ResultMap


class BaseTikaBackend(ABC):
    """
    Abstract base class for Tika extraction backends.

    All backends must implement this interface to provide:
    - Plain text, HTML, MIME type and metadata extraction
    - Health/connectivity checks
    - Backend metadata

    Subclasses should implement:
    - text(), html(), mimetype(), metadata()
    - test_connection(): Verify the engine is usable
    - aclose(): Release backend resources
    """

    def __init__(self) -> None:
        self._logger = logging.getLogger(f"tika_extract.backends.{self.backend_type}")

    @property
    @abstractmethod
    def backend_type(self) -> str:
        """
        Backend type identifier.

        Returns:
            Backend type string ('local' or 'remote')
        """
        pass

    @property
    @abstractmethod
    def display_name(self) -> str:
        """
        Human-readable backend name.

        Returns:
            Display name
        """
        pass

    @property
    @abstractmethod
    def input(self) -> Optional[Input]:
        """The document the next extraction call will read."""
        pass

    @abstractmethod
    async def text(self) -> str:
        """
        Extract the document's plain text.

        Raises:
            MissingContentError: If the engine returned no text content
        """
        pass

    @abstractmethod
    async def html(self) -> str:
        """
        Extract the document as XHTML.

        Raises:
            MissingContentError: If the engine returned no HTML content
        """
        pass

    @abstractmethod
    async def mimetype(self) -> str:
        """
        Detect the document's MIME type.

        Raises:
            MissingContentError: If Content-Type is absent
            ParseError: If Content-Type is not a valid media type
        """
        pass

    @abstractmethod
    async def metadata(self) -> ResultMap:
        """
        Extract every metadata entry the engine reports.

        Returns:
            Dict of metadata field name to JSON value
        """
        pass

    @abstractmethod
    async def test_connection(self) -> Dict[str, Any]:
        """
        Check that the engine can be reached and run.

        Returns:
            Dict with status information:
                {
                    "success": bool,
                    "status": "healthy" | "unhealthy",
                    "message": str,
                    "details": dict
                }
        """
        pass

    async def aclose(self) -> None:
        """Release resources held by the backend."""

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    def get_metadata(self) -> Dict[str, Any]:
        """
        Get backend metadata.

        Returns:
            Dict with backend information
        """
        return {
            "backend_type": self.backend_type,
            "display_name": self.display_name,
            "input": str(self.input) if self.input is not None else None,
        }

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(input={self.input})>"
