"""Error kinds raised by the extraction and storage layers."""

from __future__ import annotations


class PixelError(Exception):
    """Base class for every error this package raises on purpose."""


class ExtractionError(PixelError):
    """The language model failed, or its answer could not be parsed/validated.

    ``raw_text`` keeps the model output (when there was one) for diagnostics.
    """

    def __init__(self, message: str, raw_text: str | None = None) -> None:
        super().__init__(message)
        self.raw_text = raw_text


class LLMNotConfiguredError(PixelError):
    pass


class StoreError(PixelError):
    """Base for vector store failures."""


class StoreConfigurationError(StoreError):
    """Missing or invalid store/provider credentials. Fix config, don't retry."""


class StorePermissionError(StoreError):
    pass


class StoreTransientError(StoreError):
    """Network or availability problem. Safe to retry."""


class PixelValidationError(PixelError):
    """A malformed import entry or an out-of-range stage value."""
