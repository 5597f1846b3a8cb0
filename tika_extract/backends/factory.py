"""
Tika backend factory.

This module provides a factory for creating backend instances by type name,
either directly or from a TikaConfig loaded from YAML.
"""

import logging
from typing import Any, Dict, Optional, Union

from ..config_models import TikaConfig
from ..models import Input
from .base import BaseTikaBackend
from .local import LocalTikaBackend
from .remote import RemoteTikaBackend

logger = logging.getLogger(__name__)


class TikaBackendFactory:
    """
    Factory for creating Tika backend instances.

    Instantiates the backend class registered for a backend_type.
    """

    # Registry of available backend types
    _backends = {
        "local": LocalTikaBackend,
        "remote": RemoteTikaBackend,
    }

    @classmethod
    def create_backend(
        cls,
        backend_type: str,
        input: Optional[Input] = None,
        **options: Any,
    ) -> BaseTikaBackend:
        """
        Create a backend instance.

        Args:
            backend_type: Type of backend ('local' or 'remote')
            input: Document to extract from (required for 'local')
            **options: Backend-specific constructor arguments

        Returns:
            Instantiated backend

        Raises:
            ValueError: If backend_type is not supported, or a local
                backend is requested without an input
        """
        backend_class = cls._backends.get(backend_type)

        if not backend_class:
            available = ", ".join(cls._backends.keys())
            raise ValueError(
                f"Unsupported backend type: {backend_type}. "
                f"Available backends: {available}"
            )

        if input is None and issubclass(backend_class, LocalTikaBackend):
            raise ValueError("The local backend requires an input")

        backend = backend_class(input=input, **options)
        logger.info("Created %s backend: %r", backend_type, backend)
        return backend

    @classmethod
    def from_config(
        cls,
        config: Union[TikaConfig, Dict[str, Any]],
        input: Optional[Input] = None,
    ) -> BaseTikaBackend:
        """
        Create a backend from a configuration.

        Args:
            config: TikaConfig, or a dict validated into one
            input: Document to extract from

        Returns:
            Instantiated backend

        Example:
            >>> config = {"backend": "remote", "service_url": "http://tika:9998"}
            >>> backend = TikaBackendFactory.from_config(config)
        """
        if not isinstance(config, TikaConfig):
            config = TikaConfig(**config)
        return cls.create_backend(config.backend, input=input, **config.backend_options())

    @classmethod
    def register_backend(cls, backend_type: str, backend_class: type):
        """
        Register a new backend type.

        Raises:
            TypeError: If backend_class doesn't inherit from BaseTikaBackend
        """
        if not issubclass(backend_class, BaseTikaBackend):
            raise TypeError(
                f"Backend class must inherit from BaseTikaBackend, "
                f"got {backend_class.__name__}"
            )

        if backend_type in cls._backends:
            logger.warning(
                "Overriding existing backend type: %s (was: %s, now: %s)",
                backend_type,
                cls._backends[backend_type].__name__,
                backend_class.__name__
            )

        cls._backends[backend_type] = backend_class
        logger.info("Registered backend type: %s -> %s", backend_type, backend_class.__name__)

    @classmethod
    def get_supported_backends(cls) -> list[str]:
        return list(cls._backends.keys())

    @classmethod
    def is_supported(cls, backend_type: str) -> bool:
        return backend_type in cls._backends
