"""Build a SchemaSnapshot from SQLAlchemy metadata.

SQLAlchemy is an optional dependency::

    pip install "modeljoins[sqlalchemy]"

Reflect a live database::

    from sqlalchemy import create_engine
    from modeljoins import JoinOptions, schema_from_sqlalchemy

    engine = create_engine("sqlite:///blog.db")
    options = JoinOptions(snapshot=schema_from_sqlalchemy(engine))

or reuse ``Table`` objects the application already declares::

    options = JoinOptions(snapshot=schema_from_metadata(Base.metadata))
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from modeljoins.schema.snapshot import ColumnInfo, SchemaSnapshot, TableInfo

if TYPE_CHECKING:
    from sqlalchemy import Column, Engine, MetaData, Table

_INSTALL_HINT = 'Install it with: pip install "modeljoins[sqlalchemy]"'


def schema_from_sqlalchemy(
    engine: Engine,
    *,
    include_tables: list[str] | None = None,
    schema: str | None = None,
) -> SchemaSnapshot:
    """Reflect ``engine`` into a :class:`SchemaSnapshot`.

    Args:
        engine: Engine to reflect through.  One connection is opened and
            closed again.
        include_tables: Reflect only these tables.  ``None`` reflects all.
        schema: Database schema to reflect from (``"public"`` and so on),
            handed to :meth:`sqlalchemy.schema.MetaData.reflect`.

    Raises:
        ImportError: If SQLAlchemy is not installed.
    """
    try:
        from sqlalchemy import MetaData
    except ImportError as exc:
        raise ImportError(f"schema_from_sqlalchemy() needs SQLAlchemy. {_INSTALL_HINT}") from exc

    metadata = MetaData(schema=schema)
    with engine.connect() as conn:
        metadata.reflect(bind=conn, only=include_tables)
    return schema_from_metadata(metadata)


def schema_from_metadata(metadata: MetaData) -> SchemaSnapshot:
    """Snapshot every table of ``metadata`` in dependency order."""
    return SchemaSnapshot(tables=[_table_info(t) for t in metadata.sorted_tables])


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _table_info(table: Table) -> TableInfo:
    return TableInfo(
        name=table.name,
        columns=[_column_info(c) for c in table.columns],
        primary_key=[c.name for c in table.primary_key.columns],
    )


def _column_info(column: Column) -> ColumnInfo:
    # reflected columns may leave nullable unset; treat that as NULL-able
    return ColumnInfo(name=column.name, type=str(column.type), nullable=column.nullable is not False)
