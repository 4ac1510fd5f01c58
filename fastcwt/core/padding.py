"""Transform length policy for FFT-based convolution.

The signal is zero-padded to at least twice its length so the circular
convolution performed by the FFT never wraps filter tails back onto the
samples that are kept. The first ``signal_length`` outputs of the inverse
transform are then exactly the linear-convolution result.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal

import scipy.fft

from fastcwt.errors import InvalidParameter, require_positive_int

logger = logging.getLogger(__name__)

PaddingPolicy = Literal["pow2", "fast"]
PADDING_POLICIES: tuple[str, ...] = ("pow2", "fast")


@dataclass(frozen=True)
class PaddingPlan:
    """Padded transform length and the window of usable output samples.

    Attributes:
        padded_length: FFT length (>= 2 * signal_length)
        valid_offset: First usable output sample (always 0)
        valid_length: Number of usable output samples (the signal length)
    """

    padded_length: int
    valid_offset: int
    valid_length: int

    @property
    def window(self) -> slice:
        """Slice selecting the valid output samples."""
        return slice(self.valid_offset, self.valid_offset + self.valid_length)


def next_power_of_two(n: int) -> int:
    """Smallest power of two >= n (n >= 1)."""
    return 1 << (n - 1).bit_length()


def plan(signal_length: int, policy: PaddingPolicy = "pow2") -> PaddingPlan:
    """Choose the padded FFT length for a signal.

    Args:
        signal_length: Number of input samples (>= 1)
        policy: 'pow2' for the next power of two, 'fast' for the next
            length scipy.fft transforms efficiently (5-smooth and similar)

    Returns:
        PaddingPlan with padded_length >= 2 * signal_length

    Raises:
        InvalidParameter: If signal_length < 1 or policy is unknown

    Example:
        >>> plan(1000)
        PaddingPlan(padded_length=2048, valid_offset=0, valid_length=1000)
        >>> plan(1000, policy="fast").padded_length
        2000
    """
    signal_length = require_positive_int("signal_length", signal_length)
    target = 2 * signal_length
    if policy == "pow2":
        padded_length = next_power_of_two(target)
    elif policy == "fast":
        padded_length = scipy.fft.next_fast_len(target)
    else:
        raise InvalidParameter(
            f"padding policy must be one of {PADDING_POLICIES}, got {policy!r}"
        )

    logger.debug(
        "Padding %d samples to %d (policy=%s)", signal_length, padded_length, policy
    )
    return PaddingPlan(
        padded_length=padded_length,
        valid_offset=0,
        valid_length=signal_length,
    )
