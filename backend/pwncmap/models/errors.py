"""Validation errors raised while resolving options and building ramps."""

from __future__ import annotations


class PwnError(ValueError):
    pass


class RangeError(PwnError):
    pass


class LevelError(PwnError):
    pass


class ColorSpecError(PwnError):
    pass


class LoginessError(PwnError):
    pass


class LabelError(PwnError):
    pass


class InvalidArgumentError(PwnError):
    pass


class OutputRequestError(PwnError):
    """Raised when a colorbar handle is requested from a suppressed call."""
