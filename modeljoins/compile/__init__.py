"""modeljoins compilation layer: QueryBuilder → parameterized SQL."""
from modeljoins.compile.base import CompiledSQL, SQLCompiler
from modeljoins.compile.registry import CompilerFactory
from modeljoins.compile.dialects import MySQLCompiler, PostgresCompiler, SQLiteCompiler

__all__ = [
    "CompiledSQL",
    "SQLCompiler",
    "CompilerFactory",
    "MySQLCompiler",
    "PostgresCompiler",
    "SQLiteCompiler",
]
