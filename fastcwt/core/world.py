"""World: Entity-Component-System manager.

The World is the central ECS registry that manages:
- Entity creation (integer IDs, one per signal)
- Component storage (type -> entity -> component mapping)
- Component queries (find entities with specific component combinations)
- Arena memory management

Example:
    >>> world = World()
    >>> eid = world.spawn_signal(np.sin(np.arange(1000) * 0.1), sampling_rate=100.0)
    >>> world.add_component(eid, Spectrum(...))
    >>> entities = world.query(Signal, Spectrum)
    >>> world.clear()  # Reset for the next signal
"""

from __future__ import annotations

from typing import Any, TypeVar

import numpy as np
from pydantic import BaseModel

from fastcwt.core.arena import Arena
from fastcwt.errors import EmptyInput, InvalidParameter, require_positive_finite

Component = BaseModel

T = TypeVar("T", bound=Component)


class World:
    """Central ECS registry managing entities, components, and memory.

    The World owns:
    - Arena: Allocator for samples, spectra and coefficient matrices
    - Entity registry: Integer entity IDs
    - Component stores: Mappings from (component_type, entity_id) to component
    - Metadata: Arbitrary key-value data per entity

    Attributes:
        arena: Memory arena for tensor allocation
        metadata: Per-entity metadata dict

    Example:
        >>> world = World(arena_bytes=64 << 20)  # 64 MB
        >>> eid = world.spawn_signal(samples, sampling_rate=48000.0)
        >>> has_spectrum = world.has_component(eid, Spectrum)
        >>> world.clear()
    """

    def __init__(self, arena_bytes: int = 64 << 20):
        """Create World with specified arena size.

        Args:
            arena_bytes: Arena size in bytes (default 64 MB)
        """
        self.arena = Arena(size_bytes=arena_bytes)
        self._next_eid = 0
        self._components: dict[type[Component], dict[int, Component]] = {}
        self.metadata: dict[int, dict[str, Any]] = {}

    def new_entity(self) -> int:
        """Create a new entity and return its ID.

        Returns:
            Entity ID (monotonically increasing integer)
        """
        eid = self._next_eid
        self._next_eid += 1
        self.metadata[eid] = {}
        return eid

    def spawn_signal(self, samples: np.ndarray, sampling_rate: float) -> int:
        """Ingest a real-valued signal into the world.

        Args:
            samples: 1-D array of real samples (copied as float64)
            sampling_rate: Sampling rate in Hz

        Returns:
            Entity ID with Signal component attached

        Raises:
            InvalidParameter: If samples are not 1-D real values or the
                sampling rate is not positive and finite
            EmptyInput: If there are no samples
        """
        # Import here to avoid circular dependency
        from fastcwt.components.signal import Signal

        sampling_rate = require_positive_finite("sampling_rate", sampling_rate)
        samples = np.asarray(samples)
        if samples.ndim != 1:
            raise InvalidParameter(
                f"Expected 1-D samples, got shape {samples.shape}"
            )
        if samples.size == 0:
            raise EmptyInput("Input signal has no samples")
        if np.iscomplexobj(samples):
            raise InvalidParameter(f"Expected real samples, got dtype {samples.dtype}")

        eid = self.new_entity()

        samples_ref = self.arena.copy_tensor(samples.astype(np.float64, copy=False))
        self.add_component(eid, Signal(samples=samples_ref, sampling_rate=sampling_rate))

        return eid

    def clear(self) -> None:
        """Reset arena and clear all entities/components for reuse.

        After clear(), all TensorRefs from previous entities are invalidated.
        """
        self.arena.reset()
        self._next_eid = 0
        self._components.clear()
        self.metadata.clear()

    def add_component(self, eid: int, component: Component) -> None:
        """Attach a component to an entity.

        Raises:
            ValueError: If entity does not exist
        """
        if eid not in self.metadata:
            raise ValueError(f"Entity {eid} does not exist")

        self._components.setdefault(type(component), {})[eid] = component

    def get_component(self, eid: int, comp_type: type[T]) -> T:
        """Retrieve a component from an entity.

        Raises:
            KeyError: If entity does not have the component
        """
        if comp_type not in self._components:
            raise KeyError(f"No entities have component type {comp_type.__name__}")
        if eid not in self._components[comp_type]:
            raise KeyError(f"Entity {eid} does not have component {comp_type.__name__}")

        return self._components[comp_type][eid]  # type: ignore

    def has_component(self, eid: int, comp_type: type[Component]) -> bool:
        """Check if entity has a specific component type."""
        return (
            comp_type in self._components
            and eid in self._components[comp_type]
        )

    def remove_component(self, eid: int, comp_type: type[Component]) -> None:
        """Remove a component from an entity.

        Raises:
            KeyError: If entity does not have the component
        """
        if not self.has_component(eid, comp_type):
            raise KeyError(f"Entity {eid} does not have component {comp_type.__name__}")

        del self._components[comp_type][eid]

    def query(self, *comp_types: type[Component]) -> list[int]:
        """Query entities that have ALL specified component types.

        Example:
            >>> # Signals that already have a forward spectrum
            >>> eids = world.query(Signal, Spectrum)
        """
        if not comp_types:
            return list(self.metadata.keys())

        result_set = set(self._components.get(comp_types[0], {}).keys())
        for comp_type in comp_types[1:]:
            if comp_type not in self._components:
                return []
            result_set &= set(self._components[comp_type].keys())

        return sorted(result_set)

    def destroy_entity(self, eid: int) -> None:
        """Remove entity and all its components.

        Note:
            This does not free arena memory (use clear() for that).
        """
        if eid not in self.metadata:
            raise ValueError(f"Entity {eid} does not exist")

        for comp_store in self._components.values():
            comp_store.pop(eid, None)

        del self.metadata[eid]

    def pipe(self, entity: int) -> Any:
        """Create a pipeline for the given entity.

        Example:
            >>> scalogram = (
            ...     world.pipe(entity)
            ...     .to(ForwardFFT())
            ...     .to(WaveletFilterBank(wavelet, scales))
            ...     .out(Scalogram)
            ... )
        """
        from fastcwt.core.pipeline import Pipe

        return Pipe(world=self, entity=entity)

    def __repr__(self) -> str:
        num_entities = len(self.metadata)
        num_comp_types = len(self._components)
        return (
            f"World(entities={num_entities}, component_types={num_comp_types}, "
            f"arena={self.arena})"
        )
