"""
Pytest configuration and fixtures for the test suite.

Defines markers for selective test execution:
    pytest -m unit          # Fast unit tests
    pytest -m integration   # Pipeline tests across several components

Model builders are centralized in tests/fixtures/ for reuse across all test modules.
"""

import os
import sys

import pytest

# Add src to path for imports
src_dir = os.path.join(os.path.dirname(__file__), '..', 'src')
if src_dir not in sys.path:
    sys.path.insert(0, src_dir)

# Add tests directory to path for fixtures import
tests_dir = os.path.dirname(__file__)
if tests_dir not in sys.path:
    # Ensure src directory stays ahead of tests for module resolution
    sys.path.insert(1, tests_dir)

from fixtures import (
    PACKAGE,
    build_animal_model,
    build_association_model,
    build_shop_model,
)

from ecore_dl.core.config import ConverterConfig
from ecore_dl.core.naming import NamingScheme


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Fast unit tests")
    config.addinivalue_line("markers", "integration: Pipeline tests across several components")


# =============================================================================
# Model Fixtures
# =============================================================================

@pytest.fixture
def shop_model():
    """Order/Item/Category model with attributes, associations and an enumeration."""
    return build_shop_model()


@pytest.fixture
def animal_model():
    """Animal hierarchy (Dog, Cat) with a Person -> Animal association."""
    return build_animal_model()


@pytest.fixture
def association_model():
    """A.r -> B with opposite B.rOpposite [1..3]."""
    return build_association_model(1, 3)


# =============================================================================
# Naming and Configuration Fixtures
# =============================================================================

@pytest.fixture
def naming():
    """Naming scheme of the fixture package with the default ontology IRI."""
    return NamingScheme(package=PACKAGE)


@pytest.fixture
def config():
    """Default configuration without the memory guard."""
    return ConverterConfig(check_memory=False)
