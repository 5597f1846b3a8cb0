"""
Local Tika backend.

Runs the Apache Tika application JAR with the local system's Java for every
extraction call. Simpler than operating a Tika Server, but each call pays the
JVM start-up cost.

Each backend instance owns a scratch directory holding exactly two files:

    tika-app.jar      copied once, at construction
    tika-config.xml   rewritten before every call from the OCR or non-OCR
                      template, so it always matches ``ocr``

The directory is removed by ``close()`` (or on leaving a ``with`` /
``async with`` block). Calls on one instance share the config file and must
not run concurrently.
"""

import asyncio
import os
import shutil
import tempfile
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from ..config import RESOURCES_DIR, settings
from ..errors import IoError, ProcessError, TransportError
from ..models import CONTENT_TYPE_KEY, RESULT_KEY, Format, Input, ResultMap, input_argument
from ..normalize import normalize_output, parse_mime_type, string_field
from .base import BaseTikaBackend

TIKA_JAR_NAME = "tika-app.jar"
TIKA_CONFIG_NAME = "tika-config.xml"
TIKA_OCR_CONFIG = RESOURCES_DIR / "tika-config.xml"
TIKA_NO_OCR_CONFIG = RESOURCES_DIR / "tika-config-without-ocr.xml"

_FORMAT_ARGS = {
    Format.HTML: "-h",
    Format.TEXT: "-t",
    Format.MIME: "-j",
    Format.METADATA: "-j",
}


def java_bin() -> str:
    """Java executable: ``$JAVA_HOME/bin/java`` if set, else ``java`` on PATH."""
    java_home = os.environ.get("JAVA_HOME")
    if java_home:
        return str(Path(java_home) / "bin" / "java")
    return "java"


def format_arg(fmt: Format) -> str:
    return _FORMAT_ARGS[fmt]


@lru_cache(maxsize=2)
def config_template(ocr: bool) -> bytes:
    """Bundled Tika configuration for the given OCR mode."""
    path = TIKA_OCR_CONFIG if ocr else TIKA_NO_OCR_CONFIG
    try:
        return path.read_bytes()
    except OSError as exc:
        raise IoError(f"Cannot read bundled Tika config {path}: {exc}") from exc


class LocalTikaBackend(BaseTikaBackend):
    """
    Extraction backend that spawns the Tika JAR as a subprocess.

    Example:
        with LocalTikaBackend(FilePath("report.pdf"), ocr=True) as tika:
            text = await tika.text()
    """

    def __init__(
        self,
        input: Input,
        ocr: Optional[bool] = None,
        jar_path: Optional[Union[str, Path]] = None,
        scratch_prefix: Optional[str] = None,
    ):
        """
        Stage the Tika JAR in a fresh scratch directory.

        Args:
            input: Document to extract from
            ocr: Use the OCR-enabled config (default: settings.tika_ocr)
            jar_path: Tika JAR to copy (default: settings.tika_jar_path)
            scratch_prefix: Temp directory prefix (default: settings.tika_scratch_prefix)

        Raises:
            IoError: If the directory cannot be created or the JAR copied
        """
        super().__init__()
        self._input = input
        self._ocr = settings.tika_ocr if ocr is None else ocr
        source = Path(jar_path) if jar_path is not None else settings.jar_path

        try:
            self._scratch: Optional[tempfile.TemporaryDirectory] = tempfile.TemporaryDirectory(
                prefix=scratch_prefix or settings.tika_scratch_prefix
            )
        except OSError as exc:
            raise IoError(f"Cannot create scratch directory: {exc}") from exc

        try:
            shutil.copyfile(source, self.jar_path)
        except OSError as exc:
            self.close()
            raise IoError(f"Cannot stage Tika JAR from {source}: {exc}") from exc

        self._logger.info(
            "Staged Tika JAR in %s (ocr=%s, input=%s)", self.scratch_dir, self._ocr, input
        )

    @property
    def backend_type(self) -> str:
        return "local"

    @property
    def display_name(self) -> str:
        return "Apache Tika (bundled JAR)"

    @property
    def input(self) -> Input:
        return self._input

    @property
    def ocr(self) -> bool:
        return self._ocr

    @property
    def closed(self) -> bool:
        return self._scratch is None

    @property
    def scratch_dir(self) -> Path:
        if self._scratch is None:
            raise IoError("Local Tika backend is closed; scratch directory removed")
        return Path(self._scratch.name)

    @property
    def jar_path(self) -> Path:
        return self.scratch_dir / TIKA_JAR_NAME

    @property
    def config_path(self) -> Path:
        return self.scratch_dir / TIKA_CONFIG_NAME

    # ------------------------------------------------------------------
    # lifecycle
    # ------------------------------------------------------------------
    def close(self) -> None:
        """Remove the scratch directory. Safe to call more than once."""
        if self._scratch is not None:
            scratch, self._scratch = self._scratch, None
            scratch.cleanup()
            self._logger.debug("Removed scratch directory %s", scratch.name)

    async def aclose(self) -> None:
        self.close()

    def __enter__(self) -> "LocalTikaBackend":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ------------------------------------------------------------------
    # public API
    # ------------------------------------------------------------------
    async def text(self) -> str:
        return string_field(await self._process(Format.TEXT), RESULT_KEY)

    async def html(self) -> str:
        return string_field(await self._process(Format.HTML), RESULT_KEY)

    async def mimetype(self) -> str:
        result = await self._process(Format.MIME)
        return parse_mime_type(string_field(result, CONTENT_TYPE_KEY))

    async def metadata(self) -> ResultMap:
        return await self._process(Format.METADATA)

    async def test_connection(self) -> Dict[str, Any]:
        """Run ``tika-app.jar --version`` with the configured Java."""
        details = {"java": java_bin(), "jar": None, "ocr": self._ocr}
        try:
            details["jar"] = str(self.jar_path)
            returncode, stdout, stderr = await self._run(["--version"])
        except (IoError, ProcessError) as exc:
            return {
                "success": False,
                "status": "unhealthy",
                "message": str(exc),
                "details": details,
            }

        if returncode != 0:
            return {
                "success": False,
                "status": "unhealthy",
                "message": f"Tika exited with status {returncode}",
                "details": {**details, "stderr": stderr.strip()},
            }

        version = stdout.decode("utf-8", errors="replace").strip()
        return {
            "success": True,
            "status": "healthy",
            "message": f"Tika is available: {version}",
            "details": {**details, "version": version},
        }

    def get_metadata(self) -> Dict[str, Any]:
        meta = super().get_metadata()
        meta.update({"ocr": self._ocr, "scratch_dir": None if self.closed else str(self.scratch_dir)})
        return meta

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------
    def _write_config(self) -> Path:
        path = self.config_path
        try:
            path.write_bytes(config_template(self._ocr))
        except OSError as exc:
            raise IoError(f"Cannot write Tika config {path}: {exc}") from exc
        return path

    async def _run(self, args: List[str]) -> Tuple[int, bytes, str]:
        """Run the JAR headless with extra ``args``; return (code, stdout, stderr)."""
        argv = [java_bin(), "-Djava.awt.headless=true", "-jar", str(self.jar_path), *args]
        self._logger.debug("Running Tika: %s", " ".join(argv))
        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise ProcessError(f"Error spawning Tika process {argv[0]!r}: {exc}") from exc

        try:
            stdout, stderr = await proc.communicate()
        except asyncio.CancelledError:
            # Do not leave the JVM running against a scratch dir about to go away
            try:
                proc.kill()
            except ProcessLookupError:
                pass
            await proc.wait()
            raise
        return proc.returncode, stdout, stderr.decode("utf-8", errors="replace")

    async def _process(self, fmt: Format) -> ResultMap:
        config = self._write_config()
        returncode, stdout, stderr = await self._run(
            [f"--config={config}", format_arg(fmt), input_argument(self._input)]
        )
        if returncode != 0:
            raise ProcessError(
                f"Tika exited with status {returncode} for {self._input}",
                returncode=returncode,
                stderr=stderr,
            )

        try:
            output = stdout.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise TransportError(f"Tika produced non-UTF-8 output: {exc}") from exc
        return normalize_output(output, fmt)
