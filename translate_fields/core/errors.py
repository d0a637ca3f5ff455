"""
Error kinds raised by the translation engine.

Every error derives from TranslationError so callers at the top boundary
can collapse them into a single user-visible message.
"""

from __future__ import annotations


class TranslationError(Exception):
    """Base class for all translation failures."""
    pass


class ConfigurationError(TranslationError):
    """No usable backend selected, missing API key or currency setup."""
    pass


class RemoteServiceError(TranslationError):
    """A provider or the FX endpoint answered with a non-success status."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class MalformedResponseError(TranslationError):
    """The model response lacks the contracted code-fence shape."""
    pass


class EvaluationError(TranslationError):
    """The fenced payload could not be evaluated into a translated string."""
    pass


class ValidationError(TranslationError):
    """
    The source locale has nothing to translate.

    Non-fatal: the message is shown to the editor as guidance.
    """
    pass
