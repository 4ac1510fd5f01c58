"""Analytic Morlet wavelet, defined directly in the frequency domain."""

from __future__ import annotations

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from fastcwt.errors import require_positive_finite

# Peak value of the envelope: sqrt(2*pi) * pi**(-1/4)
MORLET_NORM = float(np.sqrt(2.0 * np.pi) * np.pi ** -0.25)

# Normalized frequency of the envelope peak
CENTER_FREQUENCY = 1.0


class Wavelet(BaseModel):
    """Morlet generating wavelet evaluated in the frequency domain.

    The envelope is a Gaussian in normalized frequency ``nu`` (frequency
    divided by the center frequency of the scale being analysed):

        psi_hat(nu) = MORLET_NORM * exp(-(2*pi*bandwidth*(nu - 1))**2 / 2)

    for ``nu > 0`` and zero otherwise, so the filter passes positive
    frequencies only and the transform of a real signal is complex
    (analytic).

    Larger bandwidth narrows the envelope in frequency and widens the
    wavelet in time: better frequency resolution, worse time resolution.

    Attributes:
        bandwidth: Shape parameter (positive, finite)
    """

    model_config = ConfigDict(frozen=True)

    bandwidth: float = Field(gt=0.0, allow_inf_nan=False)

    @classmethod
    def create(cls, bandwidth: float) -> Wavelet:
        """Create a wavelet from its bandwidth.

        Raises:
            InvalidParameter: If bandwidth is not a positive finite number

        Example:
            >>> w = Wavelet.create(2.0)
            >>> round(w.evaluate(1.0), 4)
            1.8827
        """
        return cls(bandwidth=require_positive_finite("bandwidth", bandwidth))

    @property
    def center_frequency(self) -> float:
        """Normalized frequency of the envelope peak."""
        return CENTER_FREQUENCY

    def evaluate(self, nu: float | np.ndarray) -> float | np.ndarray:
        """Envelope weight at normalized frequency ``nu``.

        Accepts a scalar or an array; scalars return a float.
        """
        nu_arr = np.asarray(nu, dtype=np.float64)
        arg = 2.0 * np.pi * self.bandwidth * (nu_arr - self.center_frequency)
        weight = np.where(nu_arr > 0.0, MORLET_NORM * np.exp(-0.5 * arg * arg), 0.0)
        if weight.ndim == 0:
            return float(weight)
        return weight
