"""Arena allocator and TensorRef for per-call transform buffers.

Every cwt() call allocates its arrays (input samples, zero-padded buffer,
forward spectrum, output matrix) from one contiguous Arena. Components
hold TensorRefs (offset, shape, dtype) rather than arrays, and systems
obtain numpy views on demand.

Key Features:
- Zero-copy: views share the arena buffer
- Read-only views: the forward spectrum is handed to worker threads
  through views with the writeable flag cleared
- Aligned allocation: respects dtype alignment requirements
- Generation counter: detects stale TensorRefs after arena reset

Example:
    >>> arena = Arena(size_bytes=Arena.bytes_for(((8,), np.complex128)))
    >>> ref = arena.alloc_tensor((8,), np.complex128)
    >>> arena.view(ref)[:] = 1.0
    >>> frozen = arena.view(ref, readonly=True)
    >>> frozen.flags.writeable
    False
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np


@dataclass(frozen=True)
class TensorRef:
    """Lightweight handle pointing to tensor data in an Arena.

    Attributes:
        offset: Byte offset into arena buffer
        shape: Tensor dimensions
        dtype: NumPy data type
        strides: Byte strides for each dimension
        generation: Arena generation counter (for staleness detection)
    """

    offset: int
    shape: tuple[int, ...]
    dtype: np.dtype[Any]
    strides: tuple[int, ...]
    generation: int

    def __post_init__(self) -> None:
        if self.offset < 0:
            raise ValueError(f"offset must be non-negative, got {self.offset}")
        if len(self.shape) != len(self.strides):
            raise ValueError(
                f"shape and strides must have same length: "
                f"shape={self.shape}, strides={self.strides}"
            )
        if self.generation < 0:
            raise ValueError(f"generation must be non-negative, got {self.generation}")

    @property
    def ndim(self) -> int:
        """Number of dimensions."""
        return len(self.shape)

    @property
    def size(self) -> int:
        """Total number of elements."""
        return int(np.prod(self.shape))

    @property
    def nbytes(self) -> int:
        """Span in bytes from the first to one past the last element."""
        if self.size == 0:
            return 0
        last_offset = sum((s - 1) * st for s, st in zip(self.shape, self.strides))
        return last_offset + self.dtype.itemsize


class Arena:
    """Contiguous memory allocator with bump allocation strategy.

    The Arena manages a pre-allocated bytearray buffer and allocates tensors
    sequentially. All allocations are aligned to dtype requirements.

    Attributes:
        size: Total arena size in bytes
        offset: Current allocation offset (bump pointer)
        generation: Incremented on reset() to invalidate old TensorRefs

    Example:
        >>> arena = Arena(size_bytes=1 << 20)
        >>> samples = arena.copy_tensor(np.zeros(1000))
        >>> spectrum = arena.alloc_tensor((2048,), np.complex128)
        >>> print(f"Allocated {arena.offset} / {arena.size} bytes")
    """

    def __init__(self, size_bytes: int):
        """Create arena with specified size.

        Args:
            size_bytes: Total size in bytes
        """
        if size_bytes <= 0:
            raise ValueError(f"size_bytes must be positive, got {size_bytes}")

        self._buffer = bytearray(size_bytes)
        self._size = size_bytes
        self._offset = 0
        self._generation = 0

    @staticmethod
    def bytes_for(*specs: tuple[tuple[int, ...], Any]) -> int:
        """Bytes needed to allocate the given (shape, dtype) specs in order.

        Includes worst-case alignment padding, so an arena of this size
        never runs out of memory for the same sequence of allocations.

        Example:
            >>> Arena.bytes_for(((100,), np.float64), ((3, 100), np.complex128))
            5624
        """
        total = 0
        for shape, dtype in specs:
            dt = np.dtype(dtype)
            total += int(np.prod(shape)) * dt.itemsize + dt.alignment
        return max(total, 1)

    @property
    def size(self) -> int:
        """Total arena size in bytes."""
        return self._size

    @property
    def offset(self) -> int:
        """Current allocation offset (bytes used)."""
        return self._offset

    @property
    def generation(self) -> int:
        """Current generation counter."""
        return self._generation

    @property
    def available(self) -> int:
        """Remaining bytes available for allocation."""
        return self._size - self._offset

    def reset(self) -> None:
        """Reset arena for reuse. Invalidates all existing TensorRefs."""
        self._offset = 0
        self._generation += 1

    def alloc_tensor(
        self,
        shape: tuple[int, ...],
        dtype: np.dtype[Any] | type | str,
    ) -> TensorRef:
        """Allocate a tensor in the arena.

        The contents are whatever the buffer held before; use zeros_tensor()
        when the caller relies on zero fill.

        Args:
            shape: Tensor dimensions
            dtype: NumPy data type

        Returns:
            TensorRef handle to the allocated tensor

        Raises:
            ValueError: If allocation would exceed arena size
        """
        dt = np.dtype(dtype)
        nbytes = int(np.prod(shape)) * dt.itemsize

        alignment = dt.alignment
        aligned_offset = (self._offset + alignment - 1) // alignment * alignment

        end_offset = aligned_offset + nbytes
        if end_offset > self._size:
            raise ValueError(
                f"Arena out of memory: need {nbytes} bytes at offset {aligned_offset}, "
                f"but arena size is {self._size} (available: {self.available})"
            )

        # C-contiguous strides
        strides = []
        stride = dt.itemsize
        for dim_size in reversed(shape):
            strides.append(stride)
            stride *= dim_size
        strides.reverse()

        ref = TensorRef(
            offset=aligned_offset,
            shape=tuple(shape),
            dtype=dt,
            strides=tuple(strides),
            generation=self._generation,
        )
        self._offset = end_offset
        return ref

    def zeros_tensor(
        self,
        shape: tuple[int, ...],
        dtype: np.dtype[Any] | type | str,
    ) -> TensorRef:
        """Allocate a tensor and fill it with zeros."""
        ref = self.alloc_tensor(shape, dtype)
        self.view(ref).fill(0)
        return ref

    def view(self, ref: TensorRef, readonly: bool = False) -> np.ndarray:
        """Get a NumPy array view of a TensorRef.

        Args:
            ref: TensorRef to view
            readonly: Clear the writeable flag on the returned view. Writes
                through it raise ValueError; other views are unaffected.

        Returns:
            NumPy array backed by arena memory (zero-copy)

        Raises:
            ValueError: If TensorRef is stale or out of bounds
        """
        if ref.generation != self._generation:
            raise ValueError(
                f"Stale TensorRef: arena was reset (current generation {self._generation}, "
                f"ref is from generation {ref.generation})"
            )

        end_offset = ref.offset + ref.nbytes
        if end_offset > self._size:
            raise ValueError(
                f"TensorRef out of bounds: offset={ref.offset}, nbytes={ref.nbytes}, "
                f"arena size={self._size}"
            )

        arr = np.ndarray(
            shape=ref.shape,
            dtype=ref.dtype,
            buffer=self._buffer,
            offset=ref.offset,
            strides=ref.strides,
        )
        if readonly:
            arr.flags.writeable = False
        return arr

    def copy_tensor(self, arr: np.ndarray) -> TensorRef:
        """Allocate tensor and copy data from array.

        Args:
            arr: NumPy array to copy

        Returns:
            TensorRef pointing to the copied data
        """
        ref = self.alloc_tensor(arr.shape, arr.dtype)
        self.view(ref)[:] = arr
        return ref

    def __repr__(self) -> str:
        return (
            f"Arena(size={self._size}, offset={self._offset}, "
            f"generation={self._generation}, available={self.available})"
        )
