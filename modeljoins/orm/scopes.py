"""Query scopes: reusable predicate fragments.

A scope adds predicates to a builder when it is applied.  It receives the
model it should qualify columns with, which is not always the builder's own
model: ``join_one`` applies a joined model's scopes to the outer query,
passing the (possibly aliased) joined model.

Example::

    class PublishedScope(Scope):
        def apply(self, builder, model):
            builder.where(model.qualify_column("published"), True)

    Post.add_global_scope("published", PublishedScope())
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from modeljoins.orm.builder import Builder
    from modeljoins.orm.model import Model


class Scope(ABC):
    """Base class for global scopes."""

    @abstractmethod
    def apply(self, builder: Builder, model: Model) -> None:
        """Add this scope's predicates to ``builder``.

        Args:
            builder: The builder to constrain.
            model: The model whose table the predicates refer to.
        """


class CallableScope(Scope):
    """Adapts a plain ``fn(builder, model)`` function to the Scope interface."""

    def __init__(self, callback: Callable[[Builder, Model], Any]) -> None:
        self.callback = callback

    def apply(self, builder: Builder, model: Model) -> None:
        self.callback(builder, model)

    def __repr__(self) -> str:
        return f"CallableScope({getattr(self.callback, '__name__', self.callback)!r})"


def as_scope(scope: Scope | Callable[[Builder, Model], Any]) -> Scope:
    """Return ``scope`` as a :class:`Scope`, wrapping plain callables."""
    if isinstance(scope, Scope):
        return scope
    if callable(scope):
        return CallableScope(scope)
    raise TypeError(f"Expected a Scope or a callable, got {type(scope).__name__}.")
