"""Domain-specific errors for fluentconv."""

from __future__ import annotations


class FluentConvError(Exception):
    """Base error for fluentconv."""


class ConfigError(FluentConvError):
    """Raised when a conversion configuration value is invalid."""


class EncodeError(FluentConvError):
    """Raised when a converted record cannot be packed to MessagePack."""
