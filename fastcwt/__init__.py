"""Fast continuous wavelet transform for real-valued signals.

This package computes the CWT with FFT-based convolution (the fCWT
algorithm of Arts & van den Broek, Nat Comput Sci 2, 47-58, 2022):
- One forward FFT of the zero-padded signal
- Per scale, an analytic Morlet filter applied in the frequency domain
  and one inverse FFT
- Scales filtered in parallel on a thread pool, sharing the spectrum
  read-only

Quick Start:
    >>> import numpy as np
    >>> from fastcwt import ScaleGrid, ScaleType, TransformContext, Wavelet
    >>>
    >>> fs = 48000.0
    >>> t = np.arange(48000) / fs
    >>> samples = np.sin(2 * np.pi * 1000.0 * t)
    >>>
    >>> context = TransformContext.create(Wavelet.create(2.0), normalize=True)
    >>> scales = ScaleGrid.create(ScaleType.LIN_FREQ, fs, 20.0, 20000.0, 50)
    >>> coefs = context.cwt(fs, samples, scales)  # (50, 48000) complex128

For one-off calls:
    >>> from fastcwt import cwt
    >>> freqs, coefs = cwt(samples, fs, 20.0, 20000.0, 50, scale_type="log")
"""

__version__ = "0.1.0"

from fastcwt.api import TransformContext, cwt
from fastcwt.components.scales import ScaleGrid, ScalePoint, Scales, ScaleType
from fastcwt.components.wavelet import Wavelet
from fastcwt.config import TransformSettings, load_settings
from fastcwt.errors import CWTError, EmptyInput, InvalidParameter, InvalidRange

__all__ = [
    "__version__",
    "cwt",
    "TransformContext",
    "Wavelet",
    "ScaleGrid",
    "Scales",
    "ScalePoint",
    "ScaleType",
    "TransformSettings",
    "load_settings",
    "CWTError",
    "InvalidParameter",
    "InvalidRange",
    "EmptyInput",
]
