#!/usr/bin/env python3
"""Quickstart example using the high-level transform API.

This example demonstrates the simplest way to use the library:
- Load a WAV file (or synthesize a test signal)
- Transform it with fastcwt.cwt()
- Report the strongest frequency over time

The high-level API hides the ECS pipeline and provides a one-call
interface for the transform.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

import numpy as np

from fastcwt import ScaleType, cwt


def _load_wav(path: Path) -> tuple[np.ndarray, float] | None:
    if not path.exists():
        return None
    from scipy.io import wavfile

    sampling_rate, data = wavfile.read(path)
    if data.ndim > 1:
        data = data.mean(axis=1)
    return data.astype(np.float64), float(sampling_rate)


def _chirp(sampling_rate: float, seconds: float, f0: float, f1: float) -> np.ndarray:
    t = np.arange(int(sampling_rate * seconds)) / sampling_rate
    # Exponential sweep from f0 to f1
    k = (f1 / f0) ** (1.0 / seconds)
    return np.sin(2 * np.pi * f0 * (k**t - 1) / np.log(k))


def main() -> None:
    parser = argparse.ArgumentParser(description="Quickstart transform example")
    parser.add_argument("--input", type=Path, default=None, help="Input WAV file")
    parser.add_argument(
        "--sampling-rate",
        type=float,
        default=16000.0,
        help="Sampling rate of the synthetic chirp if no input is given",
    )
    parser.add_argument("--f-min", type=float, default=50.0, help="Lowest frequency (Hz)")
    parser.add_argument("--f-max", type=float, default=4000.0, help="Highest frequency (Hz)")
    parser.add_argument("--scales", type=int, default=128, help="Number of scales")
    parser.add_argument(
        "--scale-type",
        choices=[t.value for t in ScaleType],
        default=ScaleType.LOG.value,
        help="Frequency spacing",
    )
    parser.add_argument("--bandwidth", type=float, default=None, help="Morlet bandwidth")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to fastcwt.toml (auto-detected if omitted)",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    loaded = _load_wav(args.input) if args.input else None
    if loaded is None:
        sampling_rate = args.sampling_rate
        samples = _chirp(sampling_rate, 2.0, args.f_min, args.f_max)
        print(f"Synthesized {len(samples)} sample chirp at {sampling_rate:g} Hz")
    else:
        samples, sampling_rate = loaded
        print(f"Loaded {len(samples)} samples at {sampling_rate:g} Hz from {args.input}")

    print("Transforming...")
    freqs, coefs = cwt(
        samples,
        sampling_rate,
        args.f_min,
        min(args.f_max, sampling_rate / 2),
        args.scales,
        scale_type=args.scale_type,
        bandwidth=args.bandwidth,
        config_path=str(args.config) if args.config else None,
    )
    print(f"Coefficients: {coefs.shape} {coefs.dtype}")

    # Strongest row in ten equal time slices
    magnitude = np.abs(coefs)
    for block in np.array_split(np.arange(magnitude.shape[1]), 10):
        t = block[0] / sampling_rate
        peak = freqs[magnitude[:, block].mean(axis=1).argmax()]
        print(f"  t={t:6.3f}s  peak={peak:8.1f} Hz")


if __name__ == "__main__":
    main()
