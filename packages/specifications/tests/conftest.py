"""Shared fixtures for specifications tests."""

from __future__ import annotations

import pytest

from aninexus_specifications.operators_memory import build_default_registry


@pytest.fixture
def registry():
    """A fresh in-memory operator registry, safe to mutate per test."""
    return build_default_registry()
