"""Built-in dialects: PostgreSQL, SQLite and MySQL.

=========  ===============  ========  ======
dialect    placeholder      quoting   ILIKE
=========  ===============  ========  ======
postgres   ``%(name)s``     double    native
sqlite     ``:name``        double    LIKE
mysql      ``%(name)s``     backtick  LIKE
=========  ===============  ========  ======

The placeholder styles match the named-parameter execution of ``psycopg``,
``sqlite3`` and ``PyMySQL`` / ``mysqlclient`` respectively.
"""
from __future__ import annotations

from modeljoins.compile.base import SQLCompiler
from modeljoins.compile.registry import CompilerFactory


@CompilerFactory.register("postgres")
class PostgresCompiler(SQLCompiler):
    dialect_name = "postgres"
    supports_ilike = True


@CompilerFactory.register("sqlite")
class SQLiteCompiler(SQLCompiler):
    # SQLite's LIKE is already case-insensitive for ASCII
    dialect_name = "sqlite"
    placeholder_format = ":{name}"


@CompilerFactory.register("mysql")
class MySQLCompiler(SQLCompiler):
    dialect_name = "mysql"
    quote_char = "`"
