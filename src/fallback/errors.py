"""Exception hierarchy for fallback."""

from __future__ import annotations


class FallbackError(Exception):
    """Base exception for all fallback errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class CapabilityError(FallbackError, TypeError):
    """A value does not satisfy the capability a holder was declared against."""

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        capability: type | None = None,
        missing: tuple[str, ...] = (),
    ) -> None:
        super().__init__(message, hint=hint)
        self.capability = capability
        self.missing = missing


class ConsumedError(FallbackError, RuntimeError):
    """A holder was used after its single ``to`` call."""


class ConfigurationError(FallbackError):
    """Configuration validation or resolution failed."""
