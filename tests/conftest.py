"""Shared fixtures for the antrails test suite."""

from __future__ import annotations

import math

import numpy as np
import pytest
from numpy.random import Generator

from antrails.simulation.config import (
    AntParams,
    ArenaConfig,
    MapParams,
    SensorParams,
    SimulationConfig,
    SimulationParameters,
    TrailParams,
)
from antrails.world.arena import Arena


@pytest.fixture
def rng() -> Generator:
    """A deterministic random generator for reproducible tests."""
    return np.random.default_rng(seed=12345)


@pytest.fixture
def small_arena() -> Arena:
    """A 160x128 arena tiled by 16-unit cells (10x8 grid)."""
    return Arena(width=160.0, height=128.0, cell_size=16.0)


@pytest.fixture
def quiet_params() -> SimulationParameters:
    """Parameters with no obstacles, no wandering, and no trail sensing."""
    return SimulationParameters(
        ant=AntParams(speed=40.0, wandering=0.0),
        map=MapParams(octaves=0),
        trail=TrailParams(spawn_period=0.25, initial_strength=1.0, decay_rate=1.0),
        sensor=SensorParams(
            angle=math.pi / 4,
            distance=10.0,
            radius=0.0,
            turning_coefficient=1.0,
        ),
    )


@pytest.fixture
def quiet_config(quiet_params: SimulationParameters) -> SimulationConfig:
    """A 400x300 open arena using ``quiet_params``."""
    return SimulationConfig(
        seed=7,
        arena=ArenaConfig(width=400.0, height=300.0, cell_size=16.0, ant_size=5.0),
        params=quiet_params,
    )


@pytest.fixture
def default_config() -> SimulationConfig:
    """Default simulation config (no YAML file needed)."""
    return SimulationConfig()
