"""Compiler abstractions: CompiledSQL and the SQLCompiler base class.

``QueryGrammar`` renders every clause the same way for all databases and
asks the injected ``SQLCompiler`` only for the three things that differ:
how a bound parameter is written, how an identifier is quoted and whether
``ILIKE`` exists.  A dialect is usually just a set of class attributes::

    class DuckDBCompiler(SQLCompiler):
        dialect_name = "duckdb"
        placeholder_format = "${name}"
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar


@dataclass
class CompiledSQL:
    """A compiled statement.

    Attributes:
        sql: SQL text with named placeholders.
        params: Bound values keyed by placeholder name (``param_0`` …).
        dialect: Name of the dialect the SQL was rendered for.
    """

    sql: str
    params: dict[str, Any]
    dialect: str

    def ordered_params(self) -> list[Any]:
        """Bound values in placeholder order, for positional drivers."""
        return [self.params[name] for name in sorted(self.params, key=_param_index)]


def _param_index(name: str) -> int:
    return int(name.rsplit("_", 1)[1])


class SQLCompiler:
    """Dialect strategy used by :class:`~modeljoins.compile.grammar.QueryGrammar`.

    Attributes:
        dialect_name: Canonical name, also the registry key.
        placeholder_format: ``str.format`` pattern with a ``name`` field.
        quote_char: Identifier quote; embedded quotes are doubled.
        supports_ilike: When ``False``, ``ILIKE`` renders as ``LIKE``.
    """

    dialect_name: ClassVar[str]
    placeholder_format: ClassVar[str] = "%({name})s"
    quote_char: ClassVar[str] = '"'
    supports_ilike: ClassVar[bool] = False

    def param_placeholder(self, name: str) -> str:
        return self.placeholder_format.format(name=name)

    def like_operator(self, op: str) -> str:
        """Map ``LIKE`` / ``ILIKE`` / ``NOT …`` onto what the dialect supports."""
        if self.supports_ilike:
            return op
        return op.replace("ILIKE", "LIKE")

    def quote_identifier(self, name: str) -> str:
        q = self.quote_char
        return f"{q}{name.replace(q, q + q)}{q}"

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.dialect_name}>"
