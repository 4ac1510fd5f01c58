"""Error types raised by the transform.

All errors are raised at call entry, before any FFT is computed. They
subclass ValueError so callers catching ValueError keep working.
"""

from __future__ import annotations

import math
import numbers


class CWTError(ValueError):
    """Base class for invalid transform configuration or input."""


class InvalidParameter(CWTError):
    """Non-positive or non-finite numeric configuration.

    Raised for the wavelet bandwidth, the sampling rate, the number of
    scales, the padding policy and bad settings values.
    """


class InvalidRange(CWTError):
    """Frequency bounds violating 0 < f_min < f_max <= Nyquist."""


class EmptyInput(CWTError):
    """Zero-length input signal."""


def require_positive_finite(name: str, value: object) -> float:
    """Return ``value`` as a float, or raise InvalidParameter."""
    if (
        isinstance(value, bool)
        or not isinstance(value, numbers.Real)
        or not math.isfinite(value)
        or value <= 0
    ):
        raise InvalidParameter(f"{name} must be a positive finite number, got {value!r}")
    return float(value)


def require_positive_int(name: str, value: object) -> int:
    """Return ``value`` as an int, or raise InvalidParameter."""
    if isinstance(value, bool) or not isinstance(value, numbers.Integral) or value < 1:
        raise InvalidParameter(f"{name} must be a positive integer, got {value!r}")
    return int(value)
