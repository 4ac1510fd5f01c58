"""Wavelet filter bank system: Spectrum -> Scalogram.

For each scale the Morlet envelope is sampled over the positive frequency
bins, multiplied into a private copy of the shared spectrum, and brought
back to the time domain with one inverse FFT. Scales are independent, so
they are split into contiguous chunks and run on a thread pool; scipy.fft
releases the GIL during the transforms.

Every chunk writes only its own rows of the pre-allocated coefficient
matrix, so row i is scale i whatever order the chunks finish in.
"""

from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING

import numpy as np
import scipy.fft

from fastcwt.components.scales import ScaleGrid
from fastcwt.components.signal import Scalogram, Spectrum
from fastcwt.components.wavelet import Wavelet
from fastcwt.core.system import System
from fastcwt.errors import require_positive_int

if TYPE_CHECKING:
    from fastcwt.core.world import World

logger = logging.getLogger(__name__)


class WaveletFilterBank(System):
    """FFT-based continuous wavelet transform over a scale grid.

    Input: Spectrum component
    Output: Scalogram component, (n_scales, valid_length) complex128

    Attributes:
        wavelet: Generating wavelet, shared read-only by all workers
        scales: Scale grid; output row order follows it
        normalize: Calibrate rows to signal amplitude (see _filter_rows)
        threads: Maximum number of worker threads
    """

    def __init__(
        self,
        wavelet: Wavelet,
        scales: ScaleGrid,
        normalize: bool = True,
        threads: int | None = None,
    ) -> None:
        """Initialize the filter bank.

        Args:
            wavelet: Wavelet to analyse with
            scales: Scale grid
            normalize: Give every daughter filter unit peak gain for the
                real sinusoid at its center frequency, so a tone of
                amplitude A reads |coef| = A on its own row whatever the scale
            threads: Worker threads (default: CPU count)
        """
        if not isinstance(wavelet, Wavelet):
            raise TypeError(f"Expected Wavelet, got {type(wavelet)}")
        if not isinstance(scales, ScaleGrid):
            raise TypeError(f"Expected ScaleGrid, got {type(scales)}")
        self.wavelet = wavelet
        self.scales = scales
        self.normalize = bool(normalize)
        if threads is None:
            threads = os.cpu_count() or 1
        self.threads = require_positive_int("threads", threads)

    def required_components(self) -> list[type]:
        return [Spectrum]

    def produced_components(self) -> list[type]:
        return [Scalogram]

    def run(self, world: World, eids: list[int]) -> None:
        """Filter each entity's spectrum at every scale.

        Args:
            world: World containing entities
            eids: List of entity IDs to process
        """
        n_scales = len(self.scales)
        for eid in eids:
            spectrum = world.get_component(eid, Spectrum)
            # Workers only ever see this read-only view
            shared = world.arena.view(spectrum.data, readonly=True)

            coefs_ref = world.arena.alloc_tensor(
                (n_scales, spectrum.valid_length), np.complex128
            )
            coefs = world.arena.view(coefs_ref)

            chunks = np.array_split(np.arange(n_scales), min(self.threads, n_scales))
            logger.debug(
                "Entity %d: filtering %d scales in %d chunk(s)", eid, n_scales, len(chunks)
            )

            if len(chunks) == 1:
                self._filter_rows(shared, spectrum, coefs, chunks[0])
            else:
                with ThreadPoolExecutor(max_workers=len(chunks)) as executor:
                    # list() re-raises the first worker exception
                    list(
                        executor.map(
                            lambda rows: self._filter_rows(shared, spectrum, coefs, rows),
                            chunks,
                        )
                    )

            world.add_component(
                eid,
                Scalogram(coefs=coefs_ref, scales=self.scales, normalized=self.normalize),
            )

    def _filter_rows(
        self,
        shared: np.ndarray,
        spectrum: Spectrum,
        out: np.ndarray,
        rows: np.ndarray,
    ) -> None:
        """Compute output rows ``rows`` into ``out``."""
        padded_length = spectrum.padded_length
        window = slice(spectrum.valid_offset, spectrum.valid_offset + spectrum.valid_length)

        # Bins 0..padded_length//2 are DC up to Nyquist; the rest stay zero
        n_positive = padded_length // 2 + 1
        bin_ratio = np.arange(n_positive, dtype=np.float64) / padded_length
        multiplier = np.zeros(padded_length, dtype=np.float64)

        # A real tone puts half its amplitude on the positive bins, and the
        # envelope peaks at psi_hat(1) for every dilation
        gain = 1.0
        if self.normalize:
            gain = 2.0 / self.wavelet.evaluate(self.wavelet.center_frequency)

        for i in rows:
            # nu = bin frequency / center frequency = k * scale / padded_length
            multiplier[:n_positive] = gain * self.wavelet.evaluate(
                bin_ratio * self.scales.scales[i]
            )
            out[i] = scipy.fft.ifft(shared * multiplier, norm="backward")[window]

    def __repr__(self) -> str:
        return (
            f"WaveletFilterBank(bandwidth={self.wavelet.bandwidth}, "
            f"n_scales={len(self.scales)}, normalize={self.normalize}, threads={self.threads})"
        )
