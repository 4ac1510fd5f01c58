"""Tests for the wavelet filter bank system."""

from __future__ import annotations

import numpy as np
import pytest

from fastcwt.components.scales import ScaleGrid, ScaleType
from fastcwt.components.signal import Scalogram, Spectrum
from fastcwt.components.wavelet import MORLET_NORM, Wavelet
from fastcwt.core.world import World
from fastcwt.errors import InvalidParameter
from fastcwt.systems.fft import ForwardFFT
from fastcwt.systems.filterbank import WaveletFilterBank


@pytest.fixture
def grid() -> ScaleGrid:
    """Twelve log-spaced scales at 1 kHz."""
    return ScaleGrid.create(ScaleType.LOG, 1000.0, 5.0, 400.0, 12)


@pytest.fixture
def samples() -> np.ndarray:
    """Reproducible noise."""
    return np.random.default_rng(7).standard_normal(500)


def run_bank(samples, bank):
    world = World()
    eid = world.spawn_signal(samples, sampling_rate=1000.0)
    scalogram = world.pipe(eid).to(ForwardFFT()).to(bank).out(Scalogram)
    return world.arena.view(scalogram.coefs).copy(), world, eid


class TestWaveletFilterBank:
    """Test WaveletFilterBank system."""

    def test_init(self, grid):
        """Test stored configuration."""
        wavelet = Wavelet.create(2.0)
        bank = WaveletFilterBank(wavelet, grid, normalize=False, threads=3)

        assert bank.wavelet is wavelet
        assert bank.scales is grid
        assert bank.normalize is False
        assert bank.threads == 3

    def test_init_default_threads(self, grid):
        """Test threads default to at least one."""
        bank = WaveletFilterBank(Wavelet.create(2.0), grid)
        assert bank.threads >= 1

    def test_init_invalid(self, grid):
        """Test argument type and range checks."""
        with pytest.raises(TypeError, match="Wavelet"):
            WaveletFilterBank(2.0, grid)  # type: ignore[arg-type]
        with pytest.raises(TypeError, match="ScaleGrid"):
            WaveletFilterBank(Wavelet.create(2.0), [1.0, 2.0])  # type: ignore[arg-type]
        with pytest.raises(InvalidParameter, match="threads"):
            WaveletFilterBank(Wavelet.create(2.0), grid, threads=0)

    def test_components(self, grid):
        """Test declared inputs and outputs."""
        bank = WaveletFilterBank(Wavelet.create(2.0), grid)
        assert bank.required_components() == [Spectrum]
        assert bank.produced_components() == [Scalogram]

    def test_shape_and_dtype(self, grid, samples):
        """Test one row per scale, one column per input sample."""
        coefs, _, _ = run_bank(samples, WaveletFilterBank(Wavelet.create(2.0), grid))
        assert coefs.shape == (12, 500)
        assert coefs.dtype == np.complex128

    def test_thread_count_does_not_change_result(self, grid, samples):
        """Test rows are identical whatever the chunking."""
        wavelet = Wavelet.create(2.0)
        serial, _, _ = run_bank(samples, WaveletFilterBank(wavelet, grid, threads=1))
        parallel, _, _ = run_bank(samples, WaveletFilterBank(wavelet, grid, threads=4))
        oversubscribed, _, _ = run_bank(samples, WaveletFilterBank(wavelet, grid, threads=64))

        np.testing.assert_array_equal(serial, parallel)
        np.testing.assert_array_equal(serial, oversubscribed)

    def test_row_matches_direct_computation(self, grid, samples):
        """Test one row against an explicit multiply and inverse FFT."""
        wavelet = Wavelet.create(1.5)
        coefs, _, _ = run_bank(samples, WaveletFilterBank(wavelet, grid, normalize=False))

        n_fft = 1024
        spectrum = np.fft.fft(samples, n_fft)
        k = np.arange(n_fft)
        multiplier = np.where(k <= n_fft // 2, wavelet.evaluate(k * grid.scales[5] / n_fft), 0.0)
        expected = np.fft.ifft(spectrum * multiplier)[:500]

        np.testing.assert_allclose(coefs[5], expected, atol=1e-9)

    def test_normalization_factor(self, grid, samples):
        """Test normalized rows carry a constant gain of 2 / psi_hat(1)."""
        wavelet = Wavelet.create(2.0)
        raw, _, _ = run_bank(samples, WaveletFilterBank(wavelet, grid, normalize=False))
        calibrated, _, _ = run_bank(samples, WaveletFilterBank(wavelet, grid, normalize=True))

        np.testing.assert_allclose(calibrated, raw * (2.0 / MORLET_NORM), rtol=1e-12, atol=1e-14)

    def test_equal_tones_equal_magnitude(self):
        """Test equal-amplitude tones far apart in frequency read the same on their rows."""
        fs = 8000.0
        grid = ScaleGrid.create(ScaleType.LOG, fs, 50.0, 4000.0, 50)
        low = grid.nearest(100.0)
        high = grid.nearest(2000.0)
        t = np.arange(8000) / fs
        samples = 0.5 * np.sin(2 * np.pi * grid.frequencies[low] * t) + 0.5 * np.sin(
            2 * np.pi * grid.frequencies[high] * t
        )

        world = World()
        eid = world.spawn_signal(samples, sampling_rate=fs)
        scalogram = (
            world.pipe(eid).to(ForwardFFT()).to(WaveletFilterBank(Wavelet.create(2.0), grid))
        ).out(Scalogram)
        coefs = world.arena.view(scalogram.coefs)

        np.testing.assert_allclose(np.abs(coefs[low, 2000:6000]), 0.5, rtol=1e-3)
        np.testing.assert_allclose(np.abs(coefs[high, 2000:6000]), 0.5, rtol=1e-3)

    def test_ridge_on_fine_grid(self):
        """Test a wide envelope on a dense grid still peaks at the tone's row."""
        fs = 1000.0
        grid = ScaleGrid.create(ScaleType.LOG, fs, 10.0, 400.0, 200)
        t = np.arange(4000) / fs
        coefs, _, _ = run_bank(
            np.sin(2 * np.pi * 100.0 * t), WaveletFilterBank(Wavelet.create(0.5), grid)
        )

        magnitude = np.abs(coefs[:, 1000:3000]).mean(axis=1)
        assert int(np.argmax(magnitude)) == grid.nearest(100.0)

    def test_analytic_rows(self):
        """Test a real cosine gives a near-constant magnitude at its own scale."""
        fs = 1000.0
        t = np.arange(4000) / fs
        grid = ScaleGrid.create(ScaleType.LIN_FREQ, fs, 50.0, 100.0, 2)
        coefs, _, _ = run_bank(
            np.cos(2 * np.pi * 50.0 * t), WaveletFilterBank(Wavelet.create(2.0), grid)
        )

        middle = np.abs(coefs[0, 1000:3000])
        assert middle.std() < 1e-3 * middle.mean()

    def test_spectrum_unchanged(self, grid, samples):
        """Test the shared spectrum is not written by the workers."""
        world = World()
        eid = world.spawn_signal(samples, sampling_rate=1000.0)
        world.pipe(eid).to(ForwardFFT()).execute()
        spectrum = world.get_component(eid, Spectrum)
        before = world.arena.view(spectrum.data).copy()

        world.pipe(eid).to(WaveletFilterBank(Wavelet.create(2.0), grid, threads=4)).execute()

        np.testing.assert_array_equal(world.arena.view(spectrum.data), before)

    def test_repr(self, grid):
        """Test repr."""
        bank = WaveletFilterBank(Wavelet.create(2.0), grid, threads=2)
        assert repr(bank) == (
            "WaveletFilterBank(bandwidth=2.0, n_scales=12, normalize=True, threads=2)"
        )
