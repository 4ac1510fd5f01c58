"""High-level API for the continuous wavelet transform.

TransformContext runs the ECS pipeline (ForwardFFT -> WaveletFilterBank)
in a World of its own for every call, so contexts can be reused and shared
across threads. cwt() builds everything from plain arguments.
"""

from __future__ import annotations

import logging

import numpy as np

from fastcwt.components.scales import ScaleGrid, ScaleType
from fastcwt.components.signal import Scalogram
from fastcwt.components.wavelet import Wavelet
from fastcwt.config import TransformSettings, load_settings
from fastcwt.core.arena import Arena
from fastcwt.core.padding import PADDING_POLICIES, PaddingPolicy, plan
from fastcwt.core.world import World
from fastcwt.errors import (
    EmptyInput,
    InvalidParameter,
    require_positive_finite,
    require_positive_int,
)
from fastcwt.systems.fft import ForwardFFT
from fastcwt.systems.filterbank import WaveletFilterBank

logger = logging.getLogger(__name__)


class TransformContext:
    """Reusable transform configuration: wavelet, normalization, workers.

    Attributes:
        wavelet: Generating wavelet
        normalize: Calibrate rows so a tone's magnitude equals its amplitude
        threads: Filter-bank worker threads (None: CPU count)
        padding: Padding policy, 'pow2' or 'fast'
        fft_workers: Threads for the forward FFT

    Example:
        >>> ctx = TransformContext.create(Wavelet.create(2.0), normalize=True)
        >>> grid = ScaleGrid.create(ScaleType.LIN_FREQ, 48000.0, 20.0, 20000.0, 50)
        >>> coefs = ctx.cwt(48000.0, samples, grid)
        >>> coefs.shape
        (50, 48000)
    """

    def __init__(
        self,
        wavelet: Wavelet,
        normalize: bool = True,
        threads: int | None = None,
        padding: PaddingPolicy = "pow2",
        fft_workers: int = 1,
    ) -> None:
        if not isinstance(wavelet, Wavelet):
            raise TypeError(f"Expected Wavelet, got {type(wavelet)}")
        if threads is not None:
            threads = require_positive_int("threads", threads)
        if padding not in PADDING_POLICIES:
            raise InvalidParameter(
                f"padding policy must be one of {PADDING_POLICIES}, got {padding!r}"
            )
        self.wavelet = wavelet
        self.normalize = bool(normalize)
        self.threads = threads
        self.padding = padding
        self.fft_workers = require_positive_int("fft_workers", fft_workers)

    @classmethod
    def create(
        cls,
        wavelet: Wavelet,
        normalize: bool = True,
        threads: int | None = None,
        padding: PaddingPolicy = "pow2",
        fft_workers: int = 1,
    ) -> TransformContext:
        """Create a context; see the class docstring for arguments."""
        return cls(
            wavelet,
            normalize=normalize,
            threads=threads,
            padding=padding,
            fft_workers=fft_workers,
        )

    @classmethod
    def from_settings(cls, settings: TransformSettings) -> TransformContext:
        """Create a context from loaded settings."""
        return cls(
            Wavelet.create(settings.bandwidth),
            normalize=settings.normalize,
            threads=settings.threads,
            padding=settings.padding,
            fft_workers=settings.fft_workers,
        )

    @classmethod
    def from_config(cls, config_path: str | None = None) -> TransformContext:
        """Create a context from fastcwt.toml (defaults when none is found)."""
        return cls.from_settings(load_settings(config_path))

    def cwt(
        self,
        sampling_rate: float,
        samples: np.ndarray,
        scales: ScaleGrid,
    ) -> np.ndarray:
        """Continuous wavelet transform of a real signal.

        Args:
            sampling_rate: Sampling rate of ``samples`` in Hz
            samples: 1-D real samples
            scales: Scale grid; row i of the result is scales[i]

        Returns:
            Read-only complex128 array of shape (len(scales), len(samples)).
            It is a view into the call's arena, so the coefficients are never
            copied; the arena's O(len(samples)) work buffers stay allocated
            while the result is referenced.

        Raises:
            InvalidParameter: Bad sampling rate or samples that are not 1-D real
            EmptyInput: No samples
            TypeError: If scales is not a ScaleGrid
        """
        sampling_rate = require_positive_finite("sampling_rate", sampling_rate)
        samples = np.asarray(samples)
        if samples.ndim != 1:
            raise InvalidParameter(f"Expected 1-D samples, got shape {samples.shape}")
        if samples.size == 0:
            raise EmptyInput("Input signal has no samples")
        if np.iscomplexobj(samples):
            raise InvalidParameter(f"Expected real samples, got dtype {samples.dtype}")
        if not isinstance(scales, ScaleGrid):
            raise TypeError(f"Expected ScaleGrid, got {type(scales)}")
        if not np.isclose(sampling_rate, scales.sampling_rate):
            # Scale factors are dimensionless; rows analyse sampling_rate / scale
            logger.warning(
                "Scale grid was built for %g Hz but the signal is sampled at %g Hz; "
                "center frequencies shift by a factor of %g",
                scales.sampling_rate,
                sampling_rate,
                sampling_rate / scales.sampling_rate,
            )

        padding_plan = plan(samples.size, self.padding)
        world = World(
            arena_bytes=_arena_bytes(samples.size, padding_plan.padded_length, len(scales))
        )
        eid = world.spawn_signal(samples, sampling_rate)

        scalogram = (
            world.pipe(eid)
            .to(ForwardFFT(padding=self.padding, workers=self.fft_workers))
            .to(
                WaveletFilterBank(
                    self.wavelet, scales, normalize=self.normalize, threads=self.threads
                )
            )
            .out(Scalogram)
        )

        # The World is private to this call; the view keeps its arena alive
        return world.arena.view(scalogram.coefs, readonly=True)

    def __repr__(self) -> str:
        return (
            f"TransformContext(bandwidth={self.wavelet.bandwidth}, normalize={self.normalize}, "
            f"threads={self.threads}, padding={self.padding}, fft_workers={self.fft_workers})"
        )


def cwt(
    samples: np.ndarray,
    sampling_rate: float,
    f_min: float,
    f_max: float,
    n_scales: int,
    scale_type: ScaleType | str = ScaleType.LIN_FREQ,
    bandwidth: float | None = None,
    normalize: bool | None = None,
    config_path: str | None = None,
) -> tuple[np.ndarray, np.ndarray]:
    """Transform a signal in one call.

    Arguments left as None fall back to the loaded settings.

    Args:
        samples: 1-D real samples
        sampling_rate: Sampling rate in Hz
        f_min: Lowest center frequency in Hz
        f_max: Highest center frequency in Hz (at most Nyquist)
        n_scales: Number of scales
        scale_type: 'linfreq' or 'log' spacing
        bandwidth: Morlet bandwidth
        normalize: Calibrate rows so a tone's magnitude equals its amplitude
        config_path: Path to fastcwt.toml (auto-detected if None)

    Returns:
        (frequencies, coefficients): center frequencies in Hz, and the
        complex (n_scales, len(samples)) coefficient matrix

    Example:
        >>> t = np.arange(1000) / 1000.0
        >>> freqs, coefs = cwt(np.sin(2 * np.pi * 50 * t), 1000.0, 10.0, 100.0, 10)
        >>> float(freqs[np.abs(coefs).mean(axis=1).argmax()])
        50.0
    """
    settings = load_settings(config_path)
    if bandwidth is not None or normalize is not None:
        settings = settings.model_copy(
            update={
                key: value
                for key, value in (("bandwidth", bandwidth), ("normalize", normalize))
                if value is not None
            }
        )

    context = TransformContext.from_settings(settings)
    scales = ScaleGrid.create(scale_type, sampling_rate, f_min, f_max, n_scales)
    return scales.get_frequencies(), context.cwt(sampling_rate, samples, scales)


def _arena_bytes(signal_length: int, padded_length: int, n_scales: int) -> int:
    """Arena size for one call: samples, padded buffer, spectrum, coefficients."""
    return Arena.bytes_for(
        ((signal_length,), np.float64),
        ((padded_length,), np.float64),
        ((padded_length,), np.complex128),
        ((n_scales, signal_length), np.complex128),
    )
