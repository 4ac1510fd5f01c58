#!/usr/bin/env python3
"""Example demonstrating the fluent pipeline API.

This example shows how to drive the transform systems directly on a
World, add a custom system to the chain, and reuse one World for
several signals.
"""

import numpy as np

from fastcwt.components.scales import ScaleGrid, ScaleType
from fastcwt.components.signal import Component, Scalogram, Spectrum
from fastcwt.components.wavelet import Wavelet
from fastcwt.core.system import System
from fastcwt.core.world import World
from fastcwt.systems.fft import ForwardFFT
from fastcwt.systems.filterbank import WaveletFilterBank


class Ridge(Component):
    """Index of the strongest row at each time step."""

    rows: list[int]


class RidgeSystem(System):
    """Extract the ridge (per-sample argmax over scales) of a scalogram."""

    def required_components(self):
        return [Scalogram]

    def produced_components(self):
        return [Ridge]

    def run(self, world: World, eids: list[int]) -> None:
        for eid in eids:
            scalogram = world.get_component(eid, Scalogram)
            coefs = world.arena.view(scalogram.coefs, readonly=True)
            rows = np.abs(coefs).argmax(axis=0)
            world.add_component(eid, Ridge(rows=rows.tolist()))


def main() -> None:
    """Demonstrate fluent pipeline API."""
    print("=== Fluent Pipeline API Example ===\n")

    world = World(arena_bytes=128 << 20)  # 128 MB
    print("[OK] Created World with 128 MB arena\n")

    fs = 8000.0
    t = np.arange(8000) / fs
    samples = np.sin(2 * np.pi * 440.0 * t) * (t < 0.5) + np.sin(2 * np.pi * 880.0 * t) * (t >= 0.5)
    grid = ScaleGrid.create(ScaleType.LOG, fs, 100.0, 2000.0, 64)
    wavelet = Wavelet.create(2.0)

    entity = world.spawn_signal(samples, sampling_rate=fs)
    print(f"[OK] Created signal entity {entity} with {len(samples)} samples\n")

    # Example 1: Transform with .to()
    print("Example 1: ForwardFFT -> WaveletFilterBank")
    print("-" * 40)
    scalogram = (
        world.pipe(entity)
        .to(ForwardFFT())
        .to(WaveletFilterBank(wavelet, grid))
        .out(Scalogram)
    )
    spectrum = world.get_component(entity, Spectrum)
    print(f"[OK] Padded length {spectrum.padded_length}")
    print(f"[OK] Scalogram shape {world.arena.view(scalogram.coefs).shape}\n")

    # Example 2: Custom system appended with |
    print("Example 2: Custom ridge system")
    print("-" * 40)
    world.clear()
    entity = world.spawn_signal(samples, sampling_rate=fs)
    ridge = (
        world.pipe(entity)
        .to(ForwardFFT(padding="fast"))
        | WaveletFilterBank(wavelet, grid)
        | RidgeSystem()
    ).out(Ridge)
    first = grid.frequencies[ridge.rows[2000]]
    second = grid.frequencies[ridge.rows[6000]]
    print(f"[OK] Ridge at 0.25 s: {first:.1f} Hz, at 0.75 s: {second:.1f} Hz\n")

    # Example 3: Missing dependencies are reported before running
    print("Example 3: Dependency checking")
    print("-" * 40)
    world.clear()
    entity = world.spawn_signal(samples, sampling_rate=fs)
    try:
        world.pipe(entity).to(WaveletFilterBank(wavelet, grid)).execute()
    except RuntimeError as e:
        print(f"[OK] Caught expected error: {e}\n")

    print(world)


if __name__ == "__main__":
    main()
