"""Typed failures raised by the computation engine.

All engine errors derive from :class:`DomainError`, itself a
``ValueError``, so callers that only care about "bad input" can catch
``ValueError`` while UI layers can branch on the concrete subclass
(e.g. clamp the offending slider and retry).
"""

from __future__ import annotations


class DomainError(ValueError):
    pass


class InvalidFrequencyError(DomainError):
    """A signal or sampling frequency was zero, negative or non-finite."""


class InvalidTransformSizeError(DomainError):
    """An FFT size below 2 was requested or supplied."""


class EmptyOutputRequestedError(DomainError):
    """Zero points were requested where a non-empty curve is required."""
