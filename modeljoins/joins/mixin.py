"""Relationship joins for model-aware builders.

Mixed into :class:`~modeljoins.orm.builder.Builder`::

    # INNER JOIN "posts" ON "posts"."user_id" = "users"."id"
    User.query().join_many(Post)

    # INNER JOIN "users" AS "author" ON "author"."id" = "posts"."user_id"
    Post.query().join_one(User, alias="author")

    # LEFT JOIN "users" AS "author" ON "author"."id" = "posts"."author_id"
    Post.query().join_relation("author", "left", alias_as_relation=True)
"""
from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from modeljoins.joins.planner import JoinPlanner
from modeljoins.joins.queryable import Queryable, resolve_queryable
from modeljoins.joins.spec import JoinSpec
from modeljoins.query.builder import JoinClause

if TYPE_CHECKING:
    from modeljoins.orm.builder import Builder
    from modeljoins.orm.model import Model
    from modeljoins.orm.scopes import Scope


class JoinsModels:
    """Adds ``join_many``, ``join_one`` and ``join_relation`` to a builder.

    The host class provides ``get_model()``, ``join()`` and
    ``join_options``.  Every method mutates the builder and returns it.
    """

    def join_many(
        self,
        model: Any,
        join_type: str = "inner",
        base_column: str | None = None,
        join_column: str | None = None,
        alias: str | None = None,
    ) -> Builder:
        """Join a model whose table holds a foreign key to this one.

        Args:
            model: Model name, class or instance, builder or relation.
            join_type: ``inner``, ``left``, ``right`` or ``full``.
            base_column: Column of this table; defaults to its primary key.
            join_column: Column of the joined table; defaults to
                ``<singular table>_<primary key>`` of this table.
            alias: Alias for the joined table.

        Predicates and scopes of the joined query go into the ON clause.
        """
        spec = self.join_planner().plan_many(
            self._as_queryable(), resolve_queryable(model), join_type, base_column, join_column, alias
        )
        return self.apply_join_spec(spec)

    def join_one(
        self,
        model: Any,
        join_type: str = "inner",
        base_column: str | None = None,
        alias: str | None = None,
        *,
        join_column: str | None = None,
    ) -> Builder:
        """Join a model this table holds a foreign key to.

        Args:
            model: Model name, class or instance, builder or relation.
            join_type: ``inner``, ``left``, ``right`` or ``full``.
            base_column: Column of this table; defaults to
                ``<singular joined table>_<primary key>``.
            alias: Alias for the joined table.
            join_column: Column of the joined table; defaults to its
                primary key.

        Predicates and scopes of the joined query go into the ON clause, and
        the scopes are applied to this query as well.
        """
        spec = self.join_planner().plan_one(
            self._as_queryable(), resolve_queryable(model), join_type, base_column, join_column, alias
        )
        return self.apply_join_spec(spec)

    def join_relation(
        self,
        relation: str,
        join_type: str = "inner",
        alias_as_relation: bool = False,
    ) -> Builder:
        """Join the relationship ``relation`` of this builder's model.

        Has-one and has-many relationships join like :meth:`join_many`,
        belongs-to like :meth:`join_one`, with the keys the relationship
        declares.  With ``alias_as_relation`` the relationship name is the
        table alias.
        """
        spec = self.join_planner().plan_relation(
            self._as_queryable(), relation, join_type, alias_as_relation
        )
        if spec is None:
            return self
        return self.apply_join_spec(spec)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def join_planner(self) -> JoinPlanner:
        return JoinPlanner(self.join_options)

    def apply_join_spec(self, spec: JoinSpec) -> Builder:
        """Add the join described by ``spec`` to this builder."""
        nested = spec.nested_query()

        def on_clause(join: JoinClause) -> None:
            join.on(spec.first, spec.operator, spec.second).add_nested_where_query(nested)

        self.join(spec.table, on_clause, type=spec.join_type)
        if spec.outer_scopes:
            self.apply_scopes_with(spec.outer_scopes, spec.scope_model)
        return self

    def apply_scopes_with(self, scopes: Iterable[Scope], model: Model) -> Builder:
        """Apply ``scopes`` to this builder, qualifying with ``model``."""
        for scope in scopes:
            scope.apply(self, model)
        return self

    def _as_queryable(self) -> Queryable:
        return Queryable(self)
