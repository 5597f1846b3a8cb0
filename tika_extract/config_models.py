"""
Pydantic models for YAML backend configuration.

A backend can be described declaratively, for example in config.yml:

    tika:
      backend: remote
      service_url: ${TIKA_SERVER_URL:-http://localhost:9998}
      timeout: 120

or

    tika:
      backend: local
      ocr: true
      jar_path: /opt/tika/tika-app-2.9.2.jar

Usage:
    from tika_extract.config_models import TikaConfig
    config = TikaConfig.from_yaml("config.yml")
    backend = TikaBackendFactory.from_config(config, input=FilePath("a.pdf"))
"""

import os
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

_LOCAL_OPTIONS = ("ocr", "jar_path", "scratch_prefix")
_REMOTE_OPTIONS = ("service_url", "timeout", "verify_ssl", "api_key")


class TikaConfig(BaseModel):
    """Configuration for a single Tika backend."""
    model_config = ConfigDict(extra='forbid')

    backend: Literal["local", "remote"] = Field(
        description="Backend type (determines transport)"
    )

    # Local backend
    ocr: Optional[bool] = Field(
        default=None,
        description="Use the OCR-enabled Tika config (local only)"
    )
    jar_path: Optional[str] = Field(
        default=None,
        description="Path to the Tika application JAR (local only)"
    )
    scratch_prefix: Optional[str] = Field(
        default=None,
        description="Prefix of the scratch directory (local only)"
    )

    # Remote backend
    service_url: Optional[str] = Field(
        default=None,
        description="Tika Server base URL (remote only)"
    )
    timeout: Optional[float] = Field(
        default=None,
        gt=0,
        le=3600,
        description="Request timeout in seconds (remote only)"
    )
    verify_ssl: Optional[bool] = Field(
        default=None,
        description="Verify SSL certificates (remote only)"
    )
    api_key: Optional[str] = Field(
        default=None,
        description="Optional bearer token (remote only)"
    )

    @model_validator(mode="after")
    def check_backend_options(self) -> "TikaConfig":
        """Reject options that belong to the other backend."""
        foreign = _REMOTE_OPTIONS if self.backend == "local" else _LOCAL_OPTIONS
        misplaced = [name for name in foreign if getattr(self, name) is not None]
        if misplaced:
            raise ValueError(
                f"Options not valid for the {self.backend} backend: {', '.join(misplaced)}"
            )
        return self

    def backend_options(self) -> Dict[str, Any]:
        """Keyword arguments for the backend constructor (unset options omitted)."""
        names = _LOCAL_OPTIONS if self.backend == "local" else _REMOTE_OPTIONS
        return {name: getattr(self, name) for name in names if getattr(self, name) is not None}

    @classmethod
    def from_yaml(cls, yaml_path: str, section: str = "tika") -> "TikaConfig":
        """
        Load and parse backend configuration from a YAML file.

        Args:
            yaml_path: Path to the YAML file
            section: Top-level key holding the backend configuration

        Returns:
            Validated TikaConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If the section is missing or validation fails
        """
        import yaml

        if not os.path.exists(yaml_path):
            raise FileNotFoundError(f"Configuration file not found: {yaml_path}")

        with open(yaml_path, 'r') as f:
            raw_config = yaml.safe_load(f) or {}

        if section not in raw_config:
            raise ValueError(f"Configuration section '{section}' not found in {yaml_path}")

        return cls(**cls._resolve_env_vars(raw_config[section]))

    @classmethod
    def _resolve_env_vars(cls, obj: Any) -> Any:
        """
        Recursively resolve ${ENV_VAR} references in configuration.

        Supports ${VAR_NAME} or ${VAR_NAME:-default} syntax. Unset variables
        without a default resolve to None.
        """
        if isinstance(obj, dict):
            return {k: cls._resolve_env_vars(v) for k, v in obj.items()}
        elif isinstance(obj, list):
            return [cls._resolve_env_vars(item) for item in obj]
        elif isinstance(obj, str):
            if obj.startswith("${") and obj.endswith("}"):
                inner = obj[2:-1]
                if ":-" in inner:
                    var_name, default_value = inner.split(":-", 1)
                    return os.getenv(var_name, default_value)
                return os.getenv(inner)
            return obj
        else:
            return obj
