"""
Registry for translation backends.

Backends register under the TranslationService they implement, and
format translators look them up from the options of each call. This
decouples the engine from the concrete providers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from translate_fields.core.errors import ConfigurationError
from translate_fields.core.models import TranslationOptions, TranslationService

if TYPE_CHECKING:
    from translate_fields.services.base import TranslationBackend


class RegistryError(ConfigurationError):
    """Raised when there's an error with the registry."""
    pass


class BackendRegistry:
    """
    Central registry for translation backends.

    One instance per TranslationService. The default registry is filled
    with the built-in backends the first time it is requested.
    """

    def __init__(self):
        self._backends: dict[TranslationService, TranslationBackend] = {}

    def register(self, backend: TranslationBackend, replace: bool = False) -> None:
        """Register a backend for its service."""
        if backend.service in self._backends and not replace:
            raise RegistryError(f"Backend '{backend.service.value}' is already registered")
        self._backends[backend.service] = backend

    def get(self, service: TranslationService | str | None) -> TranslationBackend:
        """Get the backend for a service."""
        if service is None:
            raise ConfigurationError("No translation service added in the settings")
        try:
            service = TranslationService(service)
        except ValueError:
            raise ConfigurationError(f"Unknown translation service '{service}'") from None
        if service not in self._backends:
            raise RegistryError(f"Backend '{service.value}' not found")
        return self._backends[service]

    def for_options(self, options: TranslationOptions) -> TranslationBackend:
        """Backend selected by a set of options (mock switch included)."""
        return self.get(options.service)

    def list_services(self) -> list[str]:
        """List all registered service IDs."""
        return [service.value for service in self._backends]


# Singleton registry for the application
_default_registry: BackendRegistry | None = None


def get_registry() -> BackendRegistry:
    """Get the default registry, with the built-in backends registered."""
    global _default_registry
    if _default_registry is None:
        from translate_fields.services import register_default_backends

        _default_registry = BackendRegistry()
        register_default_backends(_default_registry)
    return _default_registry


def reset_registry() -> None:
    """Reset the default registry (useful for testing)."""
    global _default_registry
    _default_registry = None
