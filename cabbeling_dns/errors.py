"""
Errors raised while configuring a two-layer experiment.

All of them signal a configuration problem and are raised immediately.
"""


class CabbelingDNSError(Exception):
    """Base class for configuration errors."""


class InvalidParameter(CabbelingDNSError, ValueError):
    """Non-finite or out of range physical input."""


class DegenerateStretching(CabbelingDNSError, ValueError):
    """Vertical stretching rate too close to zero to build a grid."""


class InvalidCoordinate(CabbelingDNSError, ValueError):
    """Non-finite spatial sample passed to a profile."""


class DegenerateRatio(CabbelingDNSError, ValueError):
    """Zero denominator in a non-dimensional number."""


class SetupError(CabbelingDNSError, RuntimeError):
    """The output artifact could not be prepared."""
