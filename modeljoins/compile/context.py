"""State shared by the clause builders of one ``QueryGrammar.compile`` call.

``CompilationContext`` is fixed for the run (the dialect);
``RuntimeContext`` collects bound values as the SQL text is produced.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from modeljoins.compile.base import SQLCompiler


@dataclass(frozen=True)
class CompilationContext:
    compiler: SQLCompiler


@dataclass
class RuntimeContext:
    """Bound values of one statement, keyed ``param_0``, ``param_1`` …

    Join ON clauses and the WHERE clause share one instance, so numbers
    never repeat and follow the textual order of the placeholders.
    """

    params: dict[str, Any] = field(default_factory=dict)

    def add_value(self, value: Any) -> str:
        """Bind ``value`` and return the new placeholder name."""
        name = f"param_{len(self.params)}"
        self.params[name] = value
        return name
