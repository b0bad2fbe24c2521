"""Shared fixtures for planet generator tests."""

import pytest

from planet_generator import WorldParams, build_world_fields


@pytest.fixture(scope="session")
def small_world():
    """A 64x32 world with seed 42 and default parameters."""
    return build_world_fields(64, 32, 42)


@pytest.fixture(scope="session")
def square_world():
    """A 48x48 world with a different seed, shared by range checks."""
    return build_world_fields(48, 48, 7)


@pytest.fixture
def default_params():
    return WorldParams()
