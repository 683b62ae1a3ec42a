"""
PyTest configuration and fixtures for genevec.

This module provides shared test fixtures: parameter stores for common
species layouts, seeded random sources, and set-up species.
"""

import os
import sys

import pytest
import logfire

# Add the project root to the Python path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from src.genevec.core.genome import FloatVectorGenome, Precision
from src.genevec.core.parameters import ParameterStore
from src.genevec.core.random_source import RandomSource
from src.genevec.core.species import FloatVectorSpecies

# Keep spans local during tests
logfire.configure(send_to_logfire=False, console=False)


BASE = "pop.subpop.0.species"


@pytest.fixture
def base():
    """Parameter base used by the species fixtures."""
    return BASE


@pytest.fixture
def rng():
    """Seeded random source."""
    return RandomSource(seed=42)


@pytest.fixture
def gauss_params():
    """Three-gene gaussian species bounded to [0, 100]."""
    return {
        f"{BASE}.genome-size": "3",
        f"{BASE}.min-gene": "0",
        f"{BASE}.max-gene": "100",
        f"{BASE}.mutation-type": "gauss",
        f"{BASE}.mutation-stdev": "0.5",
        f"{BASE}.mutation-bounded": "true",
    }


@pytest.fixture
def gauss_store(gauss_params):
    return ParameterStore(gauss_params)


@pytest.fixture
def gauss_species(gauss_store):
    """Species set up from ``gauss_params``."""
    return FloatVectorSpecies().setup(gauss_store, BASE)


@pytest.fixture
def segmented_params():
    """
    Ten-gene species with two segments.

    Segment 0 (genes 0-4) inherits the global gaussian settings, segment 1
    (genes 5-9) switches to an integer random walk over [-10, 10].
    """
    return {
        f"{BASE}.genome-size": "10",
        f"{BASE}.min-gene": "-5",
        f"{BASE}.max-gene": "5",
        f"{BASE}.mutation-type": "gauss",
        f"{BASE}.mutation-stdev": "1.0",
        f"{BASE}.mutation-bounded": "true",
        f"{BASE}.num-segments": "2",
        f"{BASE}.segment-type": "start",
        f"{BASE}.segment.0.start": "0",
        f"{BASE}.segment.1.start": "5",
        f"{BASE}.segment.1.mutation-type": "integer-random-walk",
        f"{BASE}.segment.1.random-walk-probability": "0.5",
        f"{BASE}.segment.1.min-gene": "-10",
        f"{BASE}.segment.1.max-gene": "10",
    }


@pytest.fixture
def segmented_species(segmented_params):
    return FloatVectorSpecies().setup(ParameterStore(segmented_params), BASE)


@pytest.fixture
def double_genome():
    return FloatVectorGenome([50.0, 50.0, 50.0], Precision.DOUBLE)


@pytest.fixture
def mock_logfire(mocker):
    """Mock logfire warnings for testing."""
    return mocker.patch("src.genevec.core.diagnostics.logfire")
