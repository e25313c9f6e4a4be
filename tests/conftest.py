"""Shared pytest fixtures for modeljoins unit and integration tests."""
from __future__ import annotations

import pytest

from modeljoins.options import JoinOptions
from modeljoins.schema.snapshot import SchemaSnapshot
from tests.fixtures import load_schema_snapshot


@pytest.fixture(scope="session")
def snapshot() -> SchemaSnapshot:
    """Canonical schema snapshot shared across all tests."""
    return load_schema_snapshot()


@pytest.fixture(scope="session")
def validating_options(snapshot: SchemaSnapshot) -> JoinOptions:
    """Join options that check ON columns against the snapshot."""
    return JoinOptions(snapshot=snapshot)


@pytest.fixture(scope="session")
def lenient_options() -> JoinOptions:
    """Join options with the legacy silent pass-through for unjoinable relationships."""
    return JoinOptions(strict_relationships=False)
