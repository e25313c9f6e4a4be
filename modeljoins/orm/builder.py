"""Model-aware query builder.

``Builder`` wraps a :class:`~modeljoins.query.builder.QueryBuilder` and ties
it to a model instance.  It keeps the model's global scopes pending until
the query is compiled (or until another builder folds this one into a join),
and it carries the relationship-join API through the
:class:`~modeljoins.joins.mixin.JoinsModels` mixin.

Example::

    sql = (
        User.query()
        .join_many(Post, alias="p")
        .where("users.active", True)
        .to_sql("sqlite")
    )
"""
from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any

from modeljoins.compile.base import CompiledSQL, SQLCompiler
from modeljoins.joins.mixin import JoinsModels
from modeljoins.options import JoinOptions
from modeljoins.orm.scopes import Scope, as_scope
from modeljoins.query.builder import JoinClause, QueryBuilder
from modeljoins.schema.column_reference import TableRef

if TYPE_CHECKING:
    from modeljoins.orm.model import Model


class Builder(JoinsModels):
    """Query builder bound to a model.

    Args:
        query: The underlying SQL builder.
        options: Join options; defaults to ``JoinOptions()``.
    """

    def __init__(self, query: QueryBuilder, options: JoinOptions | None = None) -> None:
        self._query = query
        self._model: Model | None = None
        self._scopes: dict[str, Scope] = {}
        self._options = options or JoinOptions()

    # ------------------------------------------------------------------
    # Model and options
    # ------------------------------------------------------------------

    def set_model(self, model: Model) -> Builder:
        """Bind ``model`` and select from its table (or its aliased view)."""
        self._model = model
        alias = model.get_table() if model.is_aliased() else None
        self._query.from_(TableRef(model.get_table_name(), alias))
        return self

    def get_model(self) -> Model:
        if self._model is None:
            raise RuntimeError("Builder has no model; call set_model() first.")
        return self._model

    def get_query(self) -> QueryBuilder:
        return self._query

    @property
    def join_options(self) -> JoinOptions:
        return self._options

    def with_join_options(self, options: JoinOptions) -> Builder:
        self._options = options
        return self

    # ------------------------------------------------------------------
    # Scopes
    # ------------------------------------------------------------------

    def with_global_scope(
        self, name: str, scope: Scope | Callable[[Builder, Model], Any]
    ) -> Builder:
        self._scopes[name] = as_scope(scope)
        return self

    def without_global_scope(self, scope: str | Scope | type[Scope]) -> Builder:
        """Remove a pending scope by name, by instance, or by scope class."""
        if isinstance(scope, str):
            self._scopes.pop(scope, None)
        elif isinstance(scope, type):
            self._scopes = {
                name: value for name, value in self._scopes.items() if not isinstance(value, scope)
            }
        else:
            self._scopes = {name: value for name, value in self._scopes.items() if value is not scope}
        return self

    def without_global_scopes(self, names: Iterable[str] | None = None) -> Builder:
        """Remove the named scopes, or all of them when ``names`` is ``None``."""
        if names is None:
            self._scopes = {}
        else:
            for name in names:
                self._scopes.pop(name, None)
        return self

    def get_scopes(self) -> dict[str, Scope]:
        return dict(self._scopes)

    def apply_scopes(self) -> Builder:
        """Return a builder with the pending scopes applied.

        The scopes are applied to a copy, so this builder keeps them pending.
        Without pending scopes the builder itself is returned.
        """
        if not self._scopes:
            return self
        builder = self.clone()
        for scope in self._scopes.values():
            scope.apply(builder, builder.get_model())
        builder._scopes = {}
        return builder

    # ------------------------------------------------------------------
    # Query API
    # ------------------------------------------------------------------

    def where(self, column: str | Callable[[Builder], Any], *args: Any, **kwargs: Any) -> Builder:
        """Forward to :meth:`QueryBuilder.where`.

        A callable receives a scope-free builder over the same model; its
        predicates are added as one nested group.
        """
        if callable(column):
            nested = self.get_model().new_query_without_scopes()
            column(nested)
            self._query.add_nested_where_query(nested.get_query(), kwargs.get("boolean", "and"))
            return self
        self._query.where(column, *args, **kwargs)
        return self

    def or_where(self, column: str | Callable[[Builder], Any], *args: Any) -> Builder:
        if callable(column):
            return self.where(column, boolean="or")
        self._query.or_where(column, *args)
        return self

    def where_column(self, *args: Any, **kwargs: Any) -> Builder:
        self._query.where_column(*args, **kwargs)
        return self

    def where_null(self, *args: Any, **kwargs: Any) -> Builder:
        self._query.where_null(*args, **kwargs)
        return self

    def where_not_null(self, *args: Any, **kwargs: Any) -> Builder:
        self._query.where_not_null(*args, **kwargs)
        return self

    def where_in(self, *args: Any, **kwargs: Any) -> Builder:
        self._query.where_in(*args, **kwargs)
        return self

    def where_not_in(self, *args: Any, **kwargs: Any) -> Builder:
        self._query.where_not_in(*args, **kwargs)
        return self

    def where_raw(self, *args: Any, **kwargs: Any) -> Builder:
        self._query.where_raw(*args, **kwargs)
        return self

    def select(self, *columns: str) -> Builder:
        self._query.select(*columns)
        return self

    def add_select(self, *columns: str) -> Builder:
        self._query.add_select(*columns)
        return self

    def distinct(self) -> Builder:
        self._query.distinct()
        return self

    def join(
        self,
        table: str | TableRef,
        first: str | Callable[[JoinClause], Any] | None = None,
        operator: str | None = None,
        second: str | None = None,
        type: str = "inner",
    ) -> Builder:
        self._query.join(table, first, operator, second, type=type)
        return self

    def left_join(self, *args: Any) -> Builder:
        self._query.left_join(*args)
        return self

    def right_join(self, *args: Any) -> Builder:
        self._query.right_join(*args)
        return self

    def order_by(self, column: str, direction: str = "asc") -> Builder:
        self._query.order_by(column, direction)
        return self

    def limit(self, value: int) -> Builder:
        self._query.limit(value)
        return self

    def offset(self, value: int) -> Builder:
        self._query.offset(value)
        return self

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def clone(self) -> Builder:
        clone = Builder(self._query.clone(), options=self._options)
        clone._model = self._model
        clone._scopes = dict(self._scopes)
        return clone

    def to_sql(self, dialect: str | SQLCompiler | None = None) -> CompiledSQL:
        """Apply pending scopes and compile.

        Args:
            dialect: Registered dialect name or compiler instance; defaults
                to ``join_options.dialect``.
        """
        return self.apply_scopes().get_query().to_sql(dialect or self._options.dialect)

    def __repr__(self) -> str:
        model = type(self._model).__name__ if self._model is not None else None
        return f"<Builder model={model} scopes={list(self._scopes)} query={self._query!r}>"
