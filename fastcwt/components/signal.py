"""Signal components: Signal, Spectrum, Scalogram."""

from pydantic import BaseModel, Field

from fastcwt.components.scales import ScaleGrid
from fastcwt.core.arena import TensorRef


class Component(BaseModel):
    """Base class for all ECS components.

    Components are data containers using Pydantic for validation and type safety.
    All array data is stored as TensorRef handles pointing into the arena.
    """

    model_config = {"arbitrary_types_allowed": True}


class Signal(Component):
    """Real-valued input signal.

    Attributes:
        samples: TensorRef to the samples (N,) float64
        sampling_rate: Sampling rate in Hz
    """

    samples: TensorRef
    sampling_rate: float = Field(gt=0.0, allow_inf_nan=False)


class Spectrum(Component):
    """Forward FFT of the zero-padded signal.

    Shared read-only by every scale of the filter bank.

    Attributes:
        data: TensorRef to the spectrum (padded_length,) complex128
        sampling_rate: Sampling rate in Hz of the transformed signal
        padded_length: FFT length; bin k is k * sampling_rate / padded_length Hz
        valid_offset: First output sample free of wraparound
        valid_length: Number of output samples kept (the signal length)
    """

    data: TensorRef
    sampling_rate: float = Field(gt=0.0, allow_inf_nan=False)
    padded_length: int = Field(ge=2)
    valid_offset: int = Field(default=0, ge=0)
    valid_length: int = Field(ge=1)


class Scalogram(Component):
    """Complex wavelet coefficients, one row per scale.

    Attributes:
        coefs: TensorRef to the coefficients (n_scales, N) complex128
        scales: Grid the rows correspond to (row i is scales[i])
        normalized: Whether rows are calibrated to signal amplitude
    """

    coefs: TensorRef
    scales: ScaleGrid
    normalized: bool = Field(default=True)
