"""Exception types raised by the config generator."""

from __future__ import annotations


class SnmpGenError(Exception):
    """Base class for all generator errors."""


class GenerationError(SnmpGenError):
    """Raised when a module cannot be generated from its request."""

    def __init__(self, message: str, module: str | None = None) -> None:
        super().__init__(message)
        self.module = module


class ConfigError(SnmpGenError):
    """Raised when the generator configuration is invalid."""


class TreeLoadError(SnmpGenError):
    """Raised when a MIB node tree cannot be loaded."""
