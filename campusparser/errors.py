"""Exceptions raised by the extraction engine."""

from __future__ import annotations


class ExtractionError(RuntimeError):
    """Base class for engine errors."""


class ConfigError(ExtractionError):
    """Raised for malformed field configuration.

    Attributes:
        step  -- the offending step text, when the error comes from a step
        field -- the field path being evaluated, when known
    """

    def __init__(
        self,
        message: str,
        step: str | None = None,
        field: str | None = None,
    ) -> None:
        super().__init__(message)
        self.step = step
        self.field = field

    def with_field(self, field: str) -> ConfigError:
        """Return a copy of this error annotated with *field*."""
        if self.field:
            return self
        return ConfigError(f"{field}: {self}", step=self.step, field=field)
