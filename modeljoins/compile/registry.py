"""Dialect registry.

``to_sql("sqlite")`` looks the compiler up here, so a new dialect only has
to be registered once::

    @CompilerFactory.register("duckdb")
    class DuckDBCompiler(SQLCompiler):
        dialect_name = "duckdb"
        placeholder_format = "${name}"
"""

from __future__ import annotations

from collections.abc import Callable
from typing import ClassVar

from modeljoins.compile.base import SQLCompiler
from modeljoins.errors import CompilationError

_C = Callable[[type[SQLCompiler]], type[SQLCompiler]]


class CompilerFactory:
    """Maps dialect names to :class:`SQLCompiler` classes."""

    _compilers: ClassVar[dict[str, type[SQLCompiler]]] = {}

    @classmethod
    def register(cls, name: str) -> _C:
        """Class decorator registering a compiler under ``name``.

        A later registration under the same name replaces the earlier one.
        """

        def decorator(compiler_cls: type[SQLCompiler]) -> type[SQLCompiler]:
            cls._compilers[name] = compiler_cls
            return compiler_cls

        return decorator

    @classmethod
    def create(cls, name: str) -> SQLCompiler:
        """Instantiate the compiler registered under ``name``.

        Raises:
            CompilationError: If nothing is registered under ``name``.
        """
        try:
            compiler_cls = cls._compilers[name]
        except KeyError:
            raise CompilationError(
                f"Unsupported dialect target: '{name}'. "
                f"Registered targets: {cls.registered_targets()}."
            ) from None
        return compiler_cls()

    @classmethod
    def resolve(cls, dialect: str | SQLCompiler) -> SQLCompiler:
        """Accept either a registered name or a ready compiler instance."""
        if isinstance(dialect, SQLCompiler):
            return dialect
        return cls.create(dialect)

    @classmethod
    def registered_targets(cls) -> list[str]:
        return sorted(cls._compilers)
