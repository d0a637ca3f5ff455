"""
Base class for all translation backends.

A backend turns one source string into one translated string. Format
translators call it once per leaf, so it holds no per-document state.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx

from translate_fields.config import get_settings
from translate_fields.core.errors import ConfigurationError
from translate_fields.core.models import TranslationOptions, TranslationService


class TranslationBackend(ABC):
    """
    Base class for all translation backends.

    Example:
        class EchoBackend(TranslationBackend):
            service = TranslationService.MOCK

            async def translate(self, text, options, convert_currency=False):
                return text
    """

    # Provider name shown in configuration errors
    label = "Translation"

    @property
    @abstractmethod
    def service(self) -> TranslationService:
        """Service this backend implements."""
        pass

    @abstractmethod
    async def translate(
        self,
        text: str,
        options: TranslationOptions,
        convert_currency: bool = False,
    ) -> str:
        """
        Translate text from options.from_locale to options.to_locale.

        Raises:
            ConfigurationError: The backend cannot run with these options
            RemoteServiceError: The provider answered with a failure
        """
        pass

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(service={self.service.value})>"


class HttpBackend(TranslationBackend):
    """
    A backend talking to a provider over HTTP.

    A shared httpx.AsyncClient may be injected; otherwise every request
    opens its own short-lived client.
    """

    def __init__(self, client: httpx.AsyncClient | None = None):
        self._client = client

    @asynccontextmanager
    async def http(self) -> AsyncIterator[httpx.AsyncClient]:
        """Client to issue requests with."""
        if self._client is not None:
            yield self._client
            return
        async with httpx.AsyncClient(timeout=get_settings().http_timeout) as client:
            yield client

    def require_api_key(self, options: TranslationOptions) -> str:
        """The API key from options, or ConfigurationError when unset."""
        if not options.api_key:
            raise ConfigurationError(f"Set {self.label} API key in the settings")
        return options.api_key
