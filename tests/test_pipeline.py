"""Tests for Pipe and the System base class."""

import numpy as np
import pytest

from fastcwt.components.scales import ScaleGrid, ScaleType
from fastcwt.components.signal import Component, Scalogram, Signal, Spectrum
from fastcwt.components.wavelet import Wavelet
from fastcwt.core.pipeline import Pipe
from fastcwt.core.system import System
from fastcwt.core.world import World
from fastcwt.systems.fft import ForwardFFT
from fastcwt.systems.filterbank import WaveletFilterBank


class MockEnergy(Component):
    """Mock component holding the signal energy."""

    energy: float


class MockEnergySystem(System):
    """Mock system computing the energy of a Signal."""

    def required_components(self) -> list[type]:
        return [Signal]

    def produced_components(self) -> list[type]:
        return [MockEnergy]

    def run(self, world: World, eids: list[int]) -> None:
        for eid in eids:
            samples = world.arena.view(world.get_component(eid, Signal).samples)
            world.add_component(eid, MockEnergy(energy=float(np.sum(samples**2))))


@pytest.fixture
def grid() -> ScaleGrid:
    """Small log grid at 1 kHz."""
    return ScaleGrid.create(ScaleType.LOG, 1000.0, 10.0, 200.0, 6)


class TestSystemBase:
    """Tests for System base class."""

    def test_abstract(self) -> None:
        """Test System cannot be instantiated directly."""
        with pytest.raises(TypeError):
            System()  # type: ignore[abstract]

    def test_can_run(self) -> None:
        """Test can_run checks required components."""
        world = World()
        empty = world.new_entity()
        eid = world.spawn_signal(np.ones(4), sampling_rate=10.0)
        system = MockEnergySystem()

        assert system.can_run(world, eid)
        assert not system.can_run(world, empty)

    def test_repr(self) -> None:
        """Test default repr."""
        assert repr(MockEnergySystem()) == "MockEnergySystem()"


class TestPipeBasics:
    """Test basic Pipe construction and chaining."""

    def test_pipe_creation(self) -> None:
        """Test creating a pipe."""
        world = World()
        entity = world.new_entity()
        pipe = world.pipe(entity)

        assert isinstance(pipe, Pipe)
        assert pipe.entities == [entity]
        assert pipe.systems == []

    def test_pipe_to_chaining(self) -> None:
        """Test .to() method chains systems."""
        world = World()
        entity = world.new_entity()
        fft = ForwardFFT()

        pipe = world.pipe(entity).to(fft)

        assert pipe.systems == [fft]

    def test_pipe_mixed_operators(self, grid: ScaleGrid) -> None:
        """Test mixing .to() and | operators."""
        world = World()
        entity = world.new_entity()
        fft = ForwardFFT()
        bank = WaveletFilterBank(Wavelet.create(2.0), grid)

        pipe = world.pipe(entity).to(fft) | bank

        assert pipe.systems == [fft, bank]


class TestPipeExecution:
    """Test pipeline execution."""

    def test_out_single_system(self) -> None:
        """Test .out() runs the systems and returns the component."""
        world = World()
        entity = world.spawn_signal(np.array([1.0, 2.0, 2.0]), sampling_rate=10.0)

        result = world.pipe(entity).to(MockEnergySystem()).out(MockEnergy)

        assert result.energy == pytest.approx(9.0)

    def test_full_transform(self, grid: ScaleGrid) -> None:
        """Test ForwardFFT then WaveletFilterBank produces a Scalogram."""
        world = World()
        entity = world.spawn_signal(np.random.default_rng(0).standard_normal(300), 1000.0)

        scalogram = (
            world.pipe(entity)
            .to(ForwardFFT())
            .to(WaveletFilterBank(Wavelet.create(2.0), grid, threads=2))
            .out(Scalogram)
        )

        assert world.has_component(entity, Spectrum)
        assert world.arena.view(scalogram.coefs).shape == (6, 300)
        assert scalogram.scales is grid

    def test_execute_without_out(self) -> None:
        """Test .execute() attaches components without returning them."""
        world = World()
        entity = world.spawn_signal(np.ones(16), sampling_rate=100.0)

        world.pipe(entity).to(ForwardFFT()).execute()

        assert world.has_component(entity, Spectrum)

    def test_missing_signal(self) -> None:
        """Test running ForwardFFT on an entity without a Signal."""
        world = World()
        entity = world.new_entity()

        with pytest.raises(RuntimeError, match="ForwardFFT cannot run"):
            world.pipe(entity).to(ForwardFFT()).execute()

    def test_missing_spectrum(self, grid: ScaleGrid) -> None:
        """Test the filter bank needs a Spectrum first."""
        world = World()
        entity = world.spawn_signal(np.ones(16), sampling_rate=1000.0)

        with pytest.raises(RuntimeError, match=r"WaveletFilterBank cannot run.*\['Spectrum'\]"):
            world.pipe(entity).to(WaveletFilterBank(Wavelet.create(2.0), grid)).out(Scalogram)

    def test_out_missing_component(self) -> None:
        """Test requesting a component that was never produced."""
        world = World()
        entity = world.spawn_signal(np.ones(16), sampling_rate=100.0)

        with pytest.raises(KeyError):
            world.pipe(entity).to(ForwardFFT()).out(Scalogram)
