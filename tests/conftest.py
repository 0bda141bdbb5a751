"""
Pytest configuration and fixtures for FSSP tests.
"""

import matplotlib

matplotlib.use("Agg")

import pytest

from fssp.catalog import StateCatalog
from fssp.config import Config
from fssp.simulation import run_simulation
from fssp.state import History


@pytest.fixture(scope="session")
def catalog() -> StateCatalog:
    """Catalog built with the identity symbol assignment."""
    return StateCatalog.build()


@pytest.fixture
def default_config() -> Config:
    """Default configuration for tests."""
    return Config()


@pytest.fixture
def small_config() -> Config:
    """Short line for fast tests."""
    return Config(n=5)


@pytest.fixture
def reference_history(catalog: StateCatalog) -> History:
    """Default run for the reference line of 24 soldiers."""
    return run_simulation(24, catalog=catalog)
