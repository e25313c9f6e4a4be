"""Relationships between models.

Relationships are declared as class attributes of a model::

    class User(Model):
        posts = has_many("Post")
        profile = has_one("Profile")
        roles = belongs_to_many("Role")

    class Post(Model):
        author = belongs_to("User")

Accessing the attribute on an instance returns a :class:`Relation` bound to
that instance: its query selects the related rows of that parent
(``user.posts.get_query()`` is constrained to ``posts.user_id = <user.id>``).
:meth:`Relation.no_constraints` builds a relation without those parent
constraints, which is how the join planner reads relationship metadata.

Key defaults
------------
has_one / has_many
    foreign key ``<snake parent class>_<parent pk>`` on the related table,
    local key the parent's primary key.
belongs_to
    foreign key ``<relation name>_<related pk>`` on the child table, owner
    key the related primary key.
belongs_to_many
    pivot table of the two singular snake-case class names in alphabetical
    order (``role_user``), pivot keys from each model's foreign key.
"""
from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, ClassVar, TypeVar

from modeljoins.naming import snake_case
from modeljoins.orm.registry import ModelRegistry
from modeljoins.schema.column_reference import ColumnReference

if TYPE_CHECKING:
    from modeljoins.orm.builder import Builder
    from modeljoins.orm.model import Model

R = TypeVar("R")


class Relation:
    """Base class of all relationships.

    Args:
        query: Builder over the related model.
        parent: The model instance the relationship belongs to.
    """

    kind: ClassVar[str] = "relation"

    _constraints: ClassVar[bool] = True

    def __init__(self, query: Builder, parent: Model) -> None:
        self._query = query
        self._parent = parent
        self._related = query.get_model()
        if Relation._constraints:
            self.add_constraints()

    @classmethod
    def no_constraints(cls, callback: Callable[[], R]) -> R:
        """Run ``callback`` with parent constraints disabled for new relations."""
        previous = Relation._constraints
        Relation._constraints = False
        try:
            return callback()
        finally:
            Relation._constraints = previous

    def add_constraints(self) -> None:
        """Restrict the related query to rows of the parent instance."""
        raise NotImplementedError

    def get_query(self) -> Builder:
        return self._query

    def get_parent(self) -> Model:
        return self._parent

    def get_related(self) -> Model:
        return self._related

    def __repr__(self) -> str:
        return (
            f"<{type(self).__name__} {type(self._parent).__name__} -> "
            f"{type(self._related).__name__}>"
        )


class HasOneOrMany(Relation):
    """The related table holds a foreign key to the parent."""

    def __init__(self, query: Builder, parent: Model, foreign_key: str, local_key: str) -> None:
        self._foreign_key = foreign_key
        self._local_key = local_key
        super().__init__(query, parent)

    def add_constraints(self) -> None:
        self._query.where(self._foreign_key, "=", self.get_parent_key())
        self._query.where_not_null(self._foreign_key)

    def get_parent_key(self) -> Any:
        return self._parent.get_attribute(self._local_key)

    def get_foreign_key_name(self) -> str:
        return ColumnReference.parse(self._foreign_key).column

    def get_qualified_foreign_key_name(self) -> str:
        return self._foreign_key

    def get_local_key_name(self) -> str:
        return self._local_key

    def get_qualified_parent_key_name(self) -> str:
        return self._parent.qualify_column(self._local_key)


class HasOne(HasOneOrMany):
    kind = "has_one"


class HasMany(HasOneOrMany):
    kind = "has_many"


class BelongsTo(Relation):
    """The parent (child side) holds a foreign key to the related table."""

    kind = "belongs_to"

    def __init__(
        self,
        query: Builder,
        child: Model,
        foreign_key: str,
        owner_key: str,
        relation_name: str,
    ) -> None:
        self._foreign_key = foreign_key
        self._owner_key = owner_key
        self._relation_name = relation_name
        super().__init__(query, child)

    def add_constraints(self) -> None:
        self._query.where(
            self._related.qualify_column(self._owner_key),
            "=",
            self._parent.get_attribute(self._foreign_key),
        )

    def get_child(self) -> Model:
        return self._parent

    def get_foreign_key_name(self) -> str:
        return self._foreign_key

    def get_qualified_foreign_key_name(self) -> str:
        return self._parent.qualify_column(self._foreign_key)

    def get_owner_key_name(self) -> str:
        return self._owner_key

    def get_qualified_owner_key_name(self) -> str:
        return self._related.qualify_column(self._owner_key)

    def get_relation_name(self) -> str:
        return self._relation_name


class BelongsToMany(Relation):
    """Many-to-many through a pivot table."""

    kind = "belongs_to_many"

    def __init__(
        self,
        query: Builder,
        parent: Model,
        table: str,
        foreign_pivot_key: str,
        related_pivot_key: str,
        parent_key: str,
        related_key: str,
    ) -> None:
        self._table = table
        self._foreign_pivot_key = foreign_pivot_key
        self._related_pivot_key = related_pivot_key
        self._parent_key = parent_key
        self._related_key = related_key
        super().__init__(query, parent)
        # the pivot join is part of the relation itself, constrained or not
        self._query.join(
            self._table,
            self._related.qualify_column(self._related_key),
            "=",
            self.get_qualified_related_pivot_key_name(),
        )

    def add_constraints(self) -> None:
        self._query.where(
            self.get_qualified_foreign_pivot_key_name(),
            "=",
            self._parent.get_attribute(self._parent_key),
        )

    def get_table(self) -> str:
        return self._table

    def get_foreign_pivot_key_name(self) -> str:
        return self._foreign_pivot_key

    def get_qualified_foreign_pivot_key_name(self) -> str:
        return f"{self._table}.{self._foreign_pivot_key}"

    def get_related_pivot_key_name(self) -> str:
        return self._related_pivot_key

    def get_qualified_related_pivot_key_name(self) -> str:
        return f"{self._table}.{self._related_pivot_key}"


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------

#: ``(parent, related, relation_name) -> Relation``
RelationFactory = Callable[["Model", "Model", str], Relation]


class RelationProperty:
    """Descriptor declaring a relationship on a model class.

    On the class it returns itself; on an instance it builds a fresh
    :class:`Relation` bound to that instance.
    """

    def __init__(self, related: str | type[Model], factory: RelationFactory) -> None:
        self.related = related
        self.factory = factory
        self.name: str | None = None

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, instance: Model | None, owner: type) -> Any:
        if instance is None:
            return self
        return self.make(instance)

    def related_model(self) -> type[Model]:
        if isinstance(self.related, str):
            return ModelRegistry.resolve(self.related)
        return self.related

    def make(self, parent: Model) -> Relation:
        related = self.related_model()()
        return self.factory(parent, related, self.name or "")

    def __repr__(self) -> str:
        related = self.related if isinstance(self.related, str) else self.related.__name__
        return f"<RelationProperty {self.name} -> {related}>"


def has_one(
    related: str | type[Model],
    foreign_key: str | None = None,
    local_key: str | None = None,
) -> RelationProperty:
    def factory(parent: Model, instance: Model, name: str) -> Relation:
        return HasOne(
            instance.new_query(),
            parent,
            instance.qualify_column(foreign_key or parent.get_foreign_key()),
            local_key or parent.get_key_name(),
        )

    return RelationProperty(related, factory)


def has_many(
    related: str | type[Model],
    foreign_key: str | None = None,
    local_key: str | None = None,
) -> RelationProperty:
    def factory(parent: Model, instance: Model, name: str) -> Relation:
        return HasMany(
            instance.new_query(),
            parent,
            instance.qualify_column(foreign_key or parent.get_foreign_key()),
            local_key or parent.get_key_name(),
        )

    return RelationProperty(related, factory)


def belongs_to(
    related: str | type[Model],
    foreign_key: str | None = None,
    owner_key: str | None = None,
) -> RelationProperty:
    def factory(child: Model, instance: Model, name: str) -> Relation:
        owner = owner_key or instance.get_key_name()
        return BelongsTo(
            instance.new_query(),
            child,
            foreign_key or f"{snake_case(name)}_{owner}",
            owner,
            name,
        )

    return RelationProperty(related, factory)


def belongs_to_many(
    related: str | type[Model],
    table: str | None = None,
    foreign_pivot_key: str | None = None,
    related_pivot_key: str | None = None,
    parent_key: str | None = None,
    related_key: str | None = None,
) -> RelationProperty:
    def factory(parent: Model, instance: Model, name: str) -> Relation:
        pivot = table or "_".join(
            sorted([snake_case(type(parent).__name__), snake_case(type(instance).__name__)])
        )
        return BelongsToMany(
            instance.new_query(),
            parent,
            pivot,
            foreign_pivot_key or parent.get_foreign_key(),
            related_pivot_key or instance.get_foreign_key(),
            parent_key or parent.get_key_name(),
            related_key or instance.get_key_name(),
        )

    return RelationProperty(related, factory)
