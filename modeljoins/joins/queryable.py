"""Uniform handle over anything that can be joined.

``join_many`` / ``join_one`` accept a model name, a model class, a model
instance, a model-aware builder or a relation.  :func:`resolve_queryable`
turns each of those into a :class:`Queryable` once, so the planner only ever
deals with one shape.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

from modeljoins.errors import UnsupportedQueryableError
from modeljoins.orm.registry import ModelRegistry
from modeljoins.orm.relations import Relation
from modeljoins.query.predicates import Where, requalify_wheres
from modeljoins.schema.column_reference import TableRef, qualify_column

if TYPE_CHECKING:
    from modeljoins.orm.builder import Builder
    from modeljoins.orm.model import Model
    from modeljoins.orm.scopes import Scope


@dataclass(frozen=True)
class Queryable:
    """A model-aware builder seen as a join operand.

    The alias is held here rather than written onto the model, so aliasing
    never changes the builder or the model it came from.

    Attributes:
        builder: Builder over the model, possibly carrying predicates and
            pending scopes.
        alias: Table alias the join should use, or ``None``.
    """

    builder: Builder
    alias: str | None = None

    @property
    def model(self) -> Model:
        return self.builder.get_model()

    @property
    def table(self) -> str:
        """The real table name."""
        return self.model.get_table_name()

    @property
    def identity(self) -> str:
        """The name column references use: alias, else the model's table."""
        return self.alias or self.model.get_table()

    @property
    def primary_key(self) -> str:
        return self.model.get_key_name()

    @property
    def scopes(self) -> dict[str, Scope]:
        return self.builder.get_scopes()

    @property
    def table_ref(self) -> TableRef:
        identity = self.identity
        return TableRef(self.table, identity if identity != self.table else None)

    def aliased(self, alias: str) -> Queryable:
        """Join under ``alias``; the model's own table name means no alias."""
        if alias == self.model.get_table():
            return replace(self, alias=None)
        return replace(self, alias=alias)

    def view_model(self) -> Model:
        """The model as seen under this handle's identity."""
        if self.alias:
            return self.model.aliased(self.alias)
        return self.model

    def qualify(self, column: str) -> str:
        return qualify_column(column, self.identity)

    def folded_wheres(self) -> tuple[Where, ...]:
        """Predicates of the builder plus its applied scopes, on the identity.

        Scopes are applied against :meth:`view_model`, so they qualify with
        the alias directly; predicates that were already on the builder are
        moved from the name the model was queried under onto the alias.
        """
        builder = self.builder.clone().set_model(self.view_model()).apply_scopes()
        return requalify_wheres(tuple(builder.get_query().wheres), self.model.get_table(), self.identity)


def resolve_queryable(ref: Any) -> Queryable:
    """Resolve a join target into a :class:`Queryable`.

    Args:
        ref: Registered model name, model class, model instance, builder,
            relation, or an existing :class:`Queryable`.

    Raises:
        UnsupportedQueryableError: For any other value.
        UnknownModelError: If a model name is not registered.
    """
    from modeljoins.orm.builder import Builder  # avoid circular import
    from modeljoins.orm.model import Model

    if isinstance(ref, Queryable):
        return ref
    if isinstance(ref, str):
        return Queryable(ModelRegistry.resolve(ref).query())
    if isinstance(ref, type) and issubclass(ref, Model):
        return Queryable(ref.query())
    if isinstance(ref, Model):
        return Queryable(ref.new_query())
    if isinstance(ref, Builder):
        return Queryable(ref)
    if isinstance(ref, Relation):
        return Queryable(ref.get_query())
    raise UnsupportedQueryableError(ref)
