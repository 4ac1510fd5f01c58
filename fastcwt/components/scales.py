"""Scale grid: the center frequencies analysed by the transform."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, NamedTuple

import numpy as np

from fastcwt.components.wavelet import CENTER_FREQUENCY
from fastcwt.errors import (
    InvalidParameter,
    InvalidRange,
    require_positive_finite,
    require_positive_int,
)


class ScaleType(str, Enum):
    """Spacing law for center frequencies between f_min and f_max."""

    LIN_FREQ = "linfreq"
    LOG = "log"

    @classmethod
    def _missing_(cls, value: object) -> ScaleType | None:
        # Accept "LinFreq", "LIN_FREQ", "lin-freq", "Log"
        if isinstance(value, str):
            key = value.strip().lower().replace("_", "").replace("-", "")
            for member in cls:
                if member.value == key:
                    return member
        return None


class ScalePoint(NamedTuple):
    """One grid entry: dimensionless scale factor and its frequency in Hz."""

    scale: float
    frequency: float


@dataclass(frozen=True, eq=False)
class ScaleGrid:
    """Ordered scale factors and center frequencies, immutable.

    Entry ``i`` is output row ``i`` of the transform. Frequencies run from
    f_min to f_max, and ``scale = CENTER_FREQUENCY * sampling_rate / frequency``.

    Attributes:
        scale_type: Spacing law used to build the grid
        sampling_rate: Sampling rate in Hz the grid was built for
        scales: Scale factors, read-only float64 array
        frequencies: Center frequencies in Hz, read-only float64 array

    Example:
        >>> grid = ScaleGrid.create(ScaleType.LOG, 1000.0, 1.0, 100.0, 3)
        >>> grid.get_frequencies()
        array([  1.,  10., 100.])
        >>> grid[2]
        ScalePoint(scale=10.0, frequency=100.0)
    """

    scale_type: ScaleType
    sampling_rate: float
    scales: np.ndarray
    frequencies: np.ndarray

    def __post_init__(self) -> None:
        if self.scales.shape != self.frequencies.shape or self.scales.ndim != 1:
            raise ValueError(
                f"scales and frequencies must be 1-D with equal length: "
                f"scales={self.scales.shape}, frequencies={self.frequencies.shape}"
            )
        self.scales.flags.writeable = False
        self.frequencies.flags.writeable = False

    @classmethod
    def create(
        cls,
        scale_type: ScaleType | str,
        sampling_rate: float,
        f_min: float,
        f_max: float,
        n_scales: int,
    ) -> ScaleGrid:
        """Build a grid of ``n_scales`` center frequencies.

        Args:
            scale_type: LIN_FREQ for equal spacing in Hz, LOG for a
                geometric progression
            sampling_rate: Sampling rate in Hz
            f_min: Lowest center frequency in Hz (first entry)
            f_max: Highest center frequency in Hz, at most Nyquist
            n_scales: Number of scales (>= 1); a single scale sits at f_min

        Raises:
            InvalidParameter: Bad sampling rate, scale type or scale count
            InvalidRange: Unless 0 < f_min < f_max <= sampling_rate / 2
        """
        try:
            scale_type = ScaleType(scale_type)
        except ValueError as exc:
            raise InvalidParameter(
                f"scale_type must be one of {[t.value for t in ScaleType]}, got {scale_type!r}"
            ) from exc

        sampling_rate = require_positive_finite("sampling_rate", sampling_rate)
        nyquist = sampling_rate / 2.0
        if not (0.0 < f_min < f_max <= nyquist):
            raise InvalidRange(
                f"frequency range must satisfy 0 < f_min < f_max <= {nyquist} (Nyquist), "
                f"got f_min={f_min!r}, f_max={f_max!r}"
            )
        n_scales = require_positive_int("n_scales", n_scales)

        if scale_type is ScaleType.LIN_FREQ:
            frequencies = np.linspace(f_min, f_max, n_scales)
        else:
            frequencies = np.geomspace(f_min, f_max, n_scales)
        # Pin the bounds against rounding in geomspace
        frequencies[0] = f_min
        if n_scales > 1:
            frequencies[-1] = f_max

        scales = CENTER_FREQUENCY * sampling_rate / frequencies
        return cls(
            scale_type=scale_type,
            sampling_rate=sampling_rate,
            scales=scales,
            frequencies=frequencies.astype(np.float64),
        )

    def get_scales(self) -> np.ndarray:
        """Copy of the scale factors."""
        return self.scales.copy()

    def get_frequencies(self) -> np.ndarray:
        """Copy of the center frequencies in Hz."""
        return self.frequencies.copy()

    def nearest(self, frequency: float) -> int:
        """Index of the entry whose center frequency is closest to ``frequency``."""
        return int(np.argmin(np.abs(self.frequencies - frequency)))

    def __len__(self) -> int:
        return int(self.scales.shape[0])

    def __getitem__(self, index: int) -> ScalePoint:
        return ScalePoint(float(self.scales[index]), float(self.frequencies[index]))

    def __iter__(self) -> Iterator[ScalePoint]:
        for i in range(len(self)):
            yield self[i]

    def __repr__(self) -> str:
        return (
            f"ScaleGrid(scale_type={self.scale_type.value}, sampling_rate={self.sampling_rate}, "
            f"n_scales={len(self)}, f_min={self.frequencies[0]:g}, f_max={self.frequencies[-1]:g})"
        )


# fCWT naming
Scales = ScaleGrid
