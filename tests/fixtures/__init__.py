"""
Centralized test fixtures for the Ecore to DL converter test suite.

This package provides reusable model builders:
- a shop model (attributes of every multiplicity, associations, enumeration)
- an animal hierarchy with an association for instance tests
- a two-class association with configurable opposite bounds

Usage:
    from fixtures import build_shop_model, PACKAGE

Or use the pytest fixtures in conftest.py which build fresh models per test.
"""

from .model_fixtures import (
    PACKAGE,
    build_animal_model,
    build_association_model,
    build_shop_model,
)

__all__ = [
    "PACKAGE",
    "build_animal_model",
    "build_association_model",
    "build_shop_model",
]
