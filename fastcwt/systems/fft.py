"""Forward FFT system: Signal -> Spectrum.

Zero-pads each signal to the planned length and computes one forward
transform with scipy.fft. The result is the only input of the filter bank
and is never written again after this system runs.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np
import scipy.fft

from fastcwt.components.signal import Signal, Spectrum
from fastcwt.core.padding import PADDING_POLICIES, PaddingPolicy, plan
from fastcwt.core.system import System
from fastcwt.errors import InvalidParameter, require_positive_int

if TYPE_CHECKING:
    from fastcwt.core.world import World

logger = logging.getLogger(__name__)


class ForwardFFT(System):
    """Padded forward FFT of a real signal.

    Uses norm="backward": the forward transform is unscaled and the inverse
    divides by the padded length, so ifft(fft(x)) == x.

    Input: Signal component, (N,) float64
    Output: Spectrum component, (padded_length,) complex128
    """

    def __init__(self, padding: PaddingPolicy = "pow2", workers: int = 1) -> None:
        """Initialize forward FFT system.

        Args:
            padding: Padding policy ('pow2' or 'fast')
            workers: Threads scipy.fft may use for this single transform
        """
        if padding not in PADDING_POLICIES:
            raise InvalidParameter(
                f"padding policy must be one of {PADDING_POLICIES}, got {padding!r}"
            )
        self.padding = padding
        self.workers = require_positive_int("workers", workers)

    def required_components(self) -> list[type]:
        return [Signal]

    def produced_components(self) -> list[type]:
        return [Spectrum]

    def run(self, world: World, eids: list[int]) -> None:
        """Compute the forward spectrum of each signal.

        Args:
            world: World containing entities
            eids: List of entity IDs to process
        """
        for eid in eids:
            signal = world.get_component(eid, Signal)
            samples = world.arena.view(signal.samples, readonly=True)
            padding_plan = plan(samples.shape[0], self.padding)

            # Original samples first, zeros after
            buffer_ref = world.arena.zeros_tensor((padding_plan.padded_length,), np.float64)
            buffer = world.arena.view(buffer_ref)
            buffer[padding_plan.window] = samples

            spectrum_ref = world.arena.alloc_tensor(
                (padding_plan.padded_length,), np.complex128
            )
            world.arena.view(spectrum_ref)[:] = scipy.fft.fft(
                buffer, norm="backward", workers=self.workers
            )
            logger.debug(
                "Entity %d: forward FFT of %d samples at length %d",
                eid,
                samples.shape[0],
                padding_plan.padded_length,
            )

            world.add_component(
                eid,
                Spectrum(
                    data=spectrum_ref,
                    sampling_rate=signal.sampling_rate,
                    padded_length=padding_plan.padded_length,
                    valid_offset=padding_plan.valid_offset,
                    valid_length=padding_plan.valid_length,
                ),
            )

    def __repr__(self) -> str:
        return f"ForwardFFT(padding={self.padding}, workers={self.workers})"
