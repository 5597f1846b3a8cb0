"""
Tests for TikaBackendFactory, TikaConfig and settings, plus a cross-backend
equivalence check.
"""

import httpx
import pytest
from pydantic import ValidationError

from conftest import FAKE_METADATA
from tika_extract.backends.base import BaseTikaBackend
from tika_extract.backends.factory import TikaBackendFactory
from tika_extract.backends.local import LocalTikaBackend
from tika_extract.backends.remote import RemoteTikaBackend
from tika_extract.config import Settings
from tika_extract.config_models import TikaConfig
from tika_extract.models import FilePath

# =============================================================================
# Settings
# =============================================================================


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self, monkeypatch):
        for name in ("TIKA_SERVER_URL", "TIKA_OCR", "TIKA_JAR_PATH"):
            monkeypatch.delenv(name, raising=False)
        settings = Settings(_env_file=None)

        assert settings.tika_server_url == "http://localhost:9998"
        assert settings.tika_ocr is False
        assert settings.jar_path.name == "tika-app.jar"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("TIKA_SERVER_URL", "http://tika:9998")
        monkeypatch.setenv("TIKA_OCR", "true")
        monkeypatch.setenv("TIKA_TIMEOUT", "12.5")

        settings = Settings(_env_file=None)

        assert settings.tika_server_url == "http://tika:9998"
        assert settings.tika_ocr is True
        assert settings.tika_timeout == 12.5


# =============================================================================
# TikaConfig
# =============================================================================


class TestTikaConfig:
    """Tests for YAML backend configuration."""

    def test_from_yaml_resolves_env_vars(self, tmp_path, monkeypatch):
        monkeypatch.setenv("TIKA_TEST_URL", "http://tika.internal:9998")
        monkeypatch.delenv("TIKA_TEST_KEY", raising=False)
        path = tmp_path / "config.yml"
        path.write_text(
            "tika:\n"
            "  backend: remote\n"
            "  service_url: ${TIKA_TEST_URL}\n"
            "  api_key: ${TIKA_TEST_KEY:-dev-key}\n"
            "  timeout: 60\n"
        )

        config = TikaConfig.from_yaml(str(path))

        assert config.backend_options() == {
            "service_url": "http://tika.internal:9998",
            "timeout": 60.0,
            "api_key": "dev-key",
        }

    def test_from_yaml_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            TikaConfig.from_yaml(str(tmp_path / "absent.yml"))

    def test_from_yaml_missing_section(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("llm:\n  model: x\n")

        with pytest.raises(ValueError):
            TikaConfig.from_yaml(str(path))

    def test_rejects_foreign_options(self):
        with pytest.raises(ValidationError):
            TikaConfig(backend="local", service_url="http://tika:9998")

    def test_rejects_unknown_keys(self):
        with pytest.raises(ValidationError):
            TikaConfig(backend="remote", retries=3)

    def test_rejects_unknown_backend(self):
        with pytest.raises(ValidationError):
            TikaConfig(backend="docling")


# =============================================================================
# TikaBackendFactory
# =============================================================================


class TestTikaBackendFactory:
    """Tests for TikaBackendFactory."""

    def test_get_supported_backends(self):
        backends = TikaBackendFactory.get_supported_backends()

        assert "local" in backends
        assert "remote" in backends

    def test_is_supported(self):
        assert TikaBackendFactory.is_supported("local") is True
        assert TikaBackendFactory.is_supported("remote") is True
        assert TikaBackendFactory.is_supported("nonexistent") is False

    def test_create_unknown_backend(self):
        with pytest.raises(ValueError, match="Unsupported backend type"):
            TikaBackendFactory.create_backend("nonexistent")

    def test_local_requires_input(self):
        with pytest.raises(ValueError):
            TikaBackendFactory.create_backend("local")

    def test_create_local(self, fake_jar, text_file):
        backend = TikaBackendFactory.create_backend(
            "local", input=FilePath(text_file), ocr=True, jar_path=fake_jar
        )
        try:
            assert isinstance(backend, LocalTikaBackend)
            assert backend.ocr is True
        finally:
            backend.close()

    def test_create_remote_from_config(self):
        backend = TikaBackendFactory.from_config(
            {"backend": "remote", "service_url": "http://tika:9998", "verify_ssl": False}
        )

        assert isinstance(backend, RemoteTikaBackend)
        assert backend.service_url == "http://tika:9998"
        assert backend.verify_ssl is False
        assert backend.input is None

    def test_register_backend_requires_base_class(self):
        with pytest.raises(TypeError):
            TikaBackendFactory.register_backend("bogus", dict)

    def test_register_backend(self, monkeypatch):
        monkeypatch.setattr(TikaBackendFactory, "_backends", dict(TikaBackendFactory._backends))

        class StubBackend(RemoteTikaBackend):
            pass

        TikaBackendFactory.register_backend("stub", StubBackend)

        assert TikaBackendFactory.is_supported("stub")
        assert issubclass(StubBackend, BaseTikaBackend)


# =============================================================================
# Cross-backend equivalence
# =============================================================================


class TestBackendEquivalence:
    """Both backends yield the same metadata for an equivalent engine."""

    @pytest.mark.asyncio
    async def test_metadata_matches(self, fake_jar, text_file, java_home):
        source = FilePath(text_file)
        remote_body = {**FAKE_METADATA, "resourceName": text_file.name}
        http_client = httpx.AsyncClient(
            transport=httpx.MockTransport(lambda request: httpx.Response(200, json=remote_body))
        )

        backends = [
            TikaBackendFactory.create_backend("local", input=source, jar_path=fake_jar),
            TikaBackendFactory.create_backend(
                "remote", input=source, service_url="http://tika.test:9998", http_client=http_client
            ),
        ]
        try:
            local_meta, remote_meta = [await backend.metadata() for backend in backends]
            local_mime, remote_mime = [await backend.mimetype() for backend in backends]
        finally:
            for backend in backends:
                await backend.aclose()
            await http_client.aclose()

        assert local_meta == remote_meta
        assert local_mime == remote_mime == "text/plain; charset=UTF-8"
