"""
Remote Tika backend.

Talks to a Tika Server hosted elsewhere. This avoids shelling out and the JVM
start-up time, at the cost of networking and running the server.

Tika Server REST API used here:
- PUT /tika/html - Extract XHTML      (Accept: application/json)
- PUT /tika/text - Extract plain text (Accept: application/json)
- PUT /meta      - Extract metadata   (Accept: application/json)
- GET /tika      - Server greeting, used as a health check

Reference: https://cwiki.apache.org/confluence/display/TIKA/TikaServer
"""

from typing import Any, Dict, Optional

import httpx

from ..config import settings
from ..errors import InputNotSetError, IoError, ParseError, TransportError
from ..models import CONTENT_KEY, CONTENT_TYPE_KEY, FilePath, Format, Input, ResultMap, Url
from ..normalize import filter_result, parse_json_object, parse_mime_type, string_field
from .base import BaseTikaBackend

HTML_PATH = "tika/html"
TEXT_PATH = "tika/text"
META_PATH = "meta"

# Schemes the backend can fetch a Url input over, and serve from
HTTP_SCHEMES = ("http", "https")


class RemoteTikaBackend(BaseTikaBackend):
    """
    Extraction backend for a Tika Server reached over HTTP.

    Example:
        async with RemoteTikaBackend("http://tika:9998") as tika:
            tika.set_input(Url("https://example.com/report.pdf"))
            meta = await tika.metadata()
    """

    def __init__(
        self,
        service_url: Optional[str] = None,
        input: Optional[Input] = None,
        timeout: Optional[float] = None,
        verify_ssl: Optional[bool] = None,
        api_key: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the remote backend.

        Args:
            service_url: Tika Server base URL (default: settings.tika_server_url)
            input: Optional document to extract from; see set_input()
            timeout: Request timeout in seconds (default: settings.tika_timeout)
            verify_ssl: Whether to verify SSL certificates (default: settings.tika_verify_ssl)
            api_key: Optional bearer token (default: settings.tika_api_key)
            http_client: Client to use instead of creating (and owning) one

        Raises:
            ParseError: If service_url is not an absolute http(s) URL with a host
        """
        super().__init__()
        base = Url(service_url or settings.tika_server_url)
        if base.scheme not in HTTP_SCHEMES:
            raise ParseError(f"Tika Server URL must be http or https: {base.url!r}")
        self.service_url = base.url.rstrip("/")
        self.timeout = timeout if timeout is not None else settings.tika_timeout
        self.verify_ssl = verify_ssl if verify_ssl is not None else settings.tika_verify_ssl
        self.api_key = api_key or settings.tika_api_key
        self._input = input
        self._last_output: Optional[ResultMap] = None

        self._client = http_client or httpx.AsyncClient(
            timeout=self.timeout,
            verify=self.verify_ssl,
        )
        self._owns_client = http_client is None

    @property
    def backend_type(self) -> str:
        return "remote"

    @property
    def display_name(self) -> str:
        return "Apache Tika Server"

    @property
    def input(self) -> Optional[Input]:
        return self._input

    @property
    def last_output(self) -> Optional[ResultMap]:
        """Most recent result, after the per-format rules; cleared by set_input()."""
        return self._last_output

    def set_input(self, input: Input) -> None:
        """Replace the current input and forget the previous result."""
        self._input = input
        self._last_output = None

    async def aclose(self) -> None:
        if self._owns_client and not self._client.is_closed:
            await self._client.aclose()

    # ------------------------------------------------------------------
    # public API
    # ------------------------------------------------------------------
    async def html(self) -> str:
        return string_field(await self._request(HTML_PATH, Format.HTML), CONTENT_KEY)

    async def text(self) -> str:
        return string_field(await self._request(TEXT_PATH, Format.TEXT), CONTENT_KEY)

    async def mimetype(self) -> str:
        result = await self._request(META_PATH, Format.MIME)
        return parse_mime_type(string_field(result, CONTENT_TYPE_KEY))

    async def metadata(self) -> ResultMap:
        return await self._request(META_PATH, Format.METADATA)

    async def test_connection(self) -> Dict[str, Any]:
        """
        Test connectivity to the Tika Server.

        Tika Server responds to GET /tika with a plain-text greeting.
        """
        url = f"{self.service_url}/tika"
        try:
            response = await self._client.get(url, headers=self._auth_headers())
        except httpx.HTTPError as exc:
            return {
                "success": False,
                "status": "unhealthy",
                "message": f"Cannot reach Tika Server: {exc}",
                "details": {"url": url},
            }

        if response.status_code != 200:
            return {
                "success": False,
                "status": "unhealthy",
                "message": f"Tika Server returned HTTP {response.status_code}",
                "details": {"url": url, "status_code": response.status_code},
            }

        return {
            "success": True,
            "status": "healthy",
            "message": response.text.strip() or "Tika Server is available",
            "details": {"url": url, "status_code": response.status_code},
        }

    def get_metadata(self) -> Dict[str, Any]:
        meta = super().get_metadata()
        meta.update(
            {
                "service_url": self.service_url,
                "timeout": self.timeout,
                "verify_ssl": self.verify_ssl,
            }
        )
        return meta

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------
    def _auth_headers(self) -> Dict[str, str]:
        if self.api_key:
            return {"Authorization": f"Bearer {self.api_key}"}
        return {}

    async def _input_data(self) -> bytes:
        if self._input is None:
            raise InputNotSetError("Input not set")

        if isinstance(self._input, FilePath):
            try:
                with self._input.path.open("rb") as f:
                    return f.read()
            except OSError as exc:
                raise IoError(f"Cannot read {self._input.path}: {exc}") from exc

        if isinstance(self._input, Url):
            if self._input.scheme not in HTTP_SCHEMES:
                raise TransportError(
                    f"Cannot fetch {self._input.url}: only http and https inputs are supported"
                )
            self._logger.debug("Fetching input %s", self._input.url)
            try:
                response = await self._client.get(self._input.url, follow_redirects=True)
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                raise TransportError(
                    f"Fetching {self._input.url} failed: HTTP {exc.response.status_code}",
                    status_code=exc.response.status_code,
                ) from exc
            except httpx.HTTPError as exc:
                raise TransportError(f"Fetching {self._input.url} failed: {exc}") from exc
            return response.content

        raise TypeError(f"Unsupported input type: {type(self._input).__name__}")

    async def _request(self, path: str, fmt: Format) -> ResultMap:
        data = await self._input_data()
        url = f"{self.service_url}/{path}"
        headers = {"Accept": "application/json", **self._auth_headers()}

        self._logger.debug("PUT %s (%d bytes)", url, len(data))
        try:
            response = await self._client.put(url, headers=headers, content=data)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise TransportError(
                f"HTTP {exc.response.status_code}: {exc.response.text[:200]}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"Tika request to {url} failed: {exc}") from exc

        result = filter_result(parse_json_object(response.text), fmt)
        self._last_output = result
        return result
