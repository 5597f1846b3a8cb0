# ============================================================================
# tika-extract - Library Configuration
# ============================================================================
"""
Library configuration using Pydantic Settings.

Defaults for both backends are read from environment variables (or a local
``.env`` file). Explicit constructor arguments always win over settings.

Environment Variables:
    TIKA_JAR_PATH         Path to the Tika application JAR (local backend)
    TIKA_SERVER_URL       Base URL of a Tika Server (remote backend)
    TIKA_TIMEOUT          HTTP timeout in seconds (remote backend)
    TIKA_VERIFY_SSL       Verify TLS certificates (remote backend)
    TIKA_API_KEY          Optional bearer token (remote backend)
    TIKA_OCR              Default OCR mode (local backend)
    TIKA_SCRATCH_PREFIX   Prefix of the local backend's scratch directory

JAVA_HOME is deliberately not a setting: it is looked up on every engine
invocation (see ``tika_extract.backends.local.java_bin``).

Usage:
    from tika_extract.config import settings
    jar = settings.jar_path
"""

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings

RESOURCES_DIR = Path(__file__).resolve().parent / "resources"


class Settings(BaseSettings):
    # =========================================================================
    # LOCAL BACKEND
    # =========================================================================
    tika_jar_path: str = Field(
        default=str(RESOURCES_DIR / "tika-app.jar"),
        description="Tika application JAR copied into each scratch directory",
    )
    tika_ocr: bool = Field(default=False, description="Enable OCR by default")
    tika_scratch_prefix: str = Field(
        default="tika_jar_",
        description="Prefix for the local backend's temporary directory",
    )

    # =========================================================================
    # REMOTE BACKEND
    # =========================================================================
    tika_server_url: str = Field(
        default="http://localhost:9998",
        description="Base URL of the Tika Server",
    )
    tika_timeout: float = Field(default=300.0, description="Timeout (s) for Tika requests")
    tika_verify_ssl: bool = Field(default=True, description="Verify SSL for Tika requests")
    tika_api_key: Optional[str] = Field(default=None, description="Bearer token for Tika Server")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"

    @property
    def jar_path(self) -> Path:
        return Path(self.tika_jar_path)


# Global settings instance (imported elsewhere)
settings = Settings()
