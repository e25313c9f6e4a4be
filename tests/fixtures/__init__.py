"""Blog schema used across the suite: DDL, snapshot JSON and models."""

from __future__ import annotations

import json
from pathlib import Path

from modeljoins.schema.snapshot import SchemaSnapshot

_HERE = Path(__file__).parent


def load_schema_snapshot() -> SchemaSnapshot:
    """The hand-written snapshot in ``schema.json``; mirrors ``ddl_sqlite.sql``."""
    return SchemaSnapshot.model_validate(json.loads((_HERE / "schema.json").read_text()))


def load_ddl(target: str = "sqlite") -> str:
    """DDL script for ``target``.  Statements are separated by ``;``."""
    return (_HERE / f"ddl_{target}.sql").read_text()
