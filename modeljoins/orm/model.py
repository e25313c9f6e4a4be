"""Model base class.

A model names a table and its primary key, carries the global scopes every
query over that table starts with, and declares relationships::

    class Post(Model):
        __tablename__ = "posts"      # default: plural snake case of the class
        __primary_key__ = "id"       # default: "id"

        author = belongs_to("User")

    Post.add_global_scope("published", PublishedScope())

    Post.query().where("posts.title", "like", "%python%").to_sql()

Instances hold attribute values (used by relationship constraints) and
never change their table: :meth:`Model.aliased` returns a separate view
whose table identity is the alias.
"""
from __future__ import annotations

import copy
from collections.abc import Callable
from typing import Any, ClassVar

from modeljoins.errors import RelationshipNotFoundError
from modeljoins.naming import plural, snake_case
from modeljoins.options import JoinOptions
from modeljoins.orm.builder import Builder
from modeljoins.orm.registry import ModelRegistry
from modeljoins.orm.relations import Relation, RelationProperty
from modeljoins.orm.scopes import Scope, as_scope
from modeljoins.query.builder import QueryBuilder
from modeljoins.schema.column_reference import qualify_column


class Model:
    """Base class for models.

    Attributes:
        __tablename__: Table name; derived from the class name when ``None``.
        __primary_key__: Primary-key column name.
        join_options: Options copied onto every builder of this model.
    """

    __tablename__: ClassVar[str | None] = None
    __primary_key__: ClassVar[str] = "id"

    join_options: ClassVar[JoinOptions] = JoinOptions()

    _global_scopes: ClassVar[dict[str, Scope]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        # subclasses start from their parent's scopes but never share the dict
        cls._global_scopes = dict(cls._global_scopes)
        ModelRegistry.register(cls)

    def __init__(self, **attributes: Any) -> None:
        self.attributes: dict[str, Any] = dict(attributes)
        self._table: str | None = None

    # ------------------------------------------------------------------
    # Table and keys
    # ------------------------------------------------------------------

    @classmethod
    def get_table_name(cls) -> str:
        """The class-level table name."""
        return cls.__tablename__ or plural(snake_case(cls.__name__))

    def get_table(self) -> str:
        """The table identity of this instance: the alias for aliased views."""
        return self._table or self.get_table_name()

    def is_aliased(self) -> bool:
        return self._table is not None

    def get_key_name(self) -> str:
        return self.__primary_key__

    def get_key(self) -> Any:
        return self.get_attribute(self.get_key_name())

    def get_qualified_key_name(self) -> str:
        return self.qualify_column(self.get_key_name())

    def get_foreign_key(self) -> str:
        """Default foreign-key name other tables use for this model."""
        return f"{snake_case(type(self).__name__)}_{self.get_key_name()}"

    def qualify_column(self, column: str) -> str:
        """Qualify ``column`` with this instance's table identity (idempotent)."""
        return qualify_column(column, self.get_table())

    def aliased(self, alias: str) -> Model:
        """Return a view of this model whose table identity is ``alias``.

        The view shares the attribute values; this instance is unchanged.
        """
        view = copy.copy(self)
        view._table = alias
        return view

    # ------------------------------------------------------------------
    # Attributes
    # ------------------------------------------------------------------

    def get_attribute(self, key: str) -> Any:
        return self.attributes.get(key)

    def set_attribute(self, key: str, value: Any) -> Model:
        self.attributes[key] = value
        return self

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @classmethod
    def query(cls) -> Builder:
        """Return a new builder over this model with its global scopes."""
        return cls().new_query()

    def new_query(self) -> Builder:
        builder = self.new_query_without_scopes()
        for name, scope in self.get_global_scopes().items():
            builder.with_global_scope(name, scope)
        return builder

    def new_query_without_scopes(self) -> Builder:
        return Builder(QueryBuilder(), options=self.join_options).set_model(self)

    # ------------------------------------------------------------------
    # Global scopes
    # ------------------------------------------------------------------

    @classmethod
    def add_global_scope(
        cls,
        name: str,
        scope: Scope | Callable[[Builder, Model], Any],
    ) -> None:
        """Register a scope applied to every query of this model."""
        cls._global_scopes[name] = as_scope(scope)

    @classmethod
    def remove_global_scope(cls, name: str) -> None:
        cls._global_scopes.pop(name, None)

    @classmethod
    def get_global_scopes(cls) -> dict[str, Scope]:
        return dict(cls._global_scopes)

    # ------------------------------------------------------------------
    # Relationships
    # ------------------------------------------------------------------

    @classmethod
    def relation_names(cls) -> list[str]:
        """Names of all relationships declared on this class and its parents."""
        names: set[str] = set()
        for klass in cls.__mro__:
            names.update(
                name for name, value in vars(klass).items() if isinstance(value, RelationProperty)
            )
        return sorted(names)

    def relation(self, name: str) -> Relation:
        """Return the relationship ``name`` bound to this instance.

        Raises:
            RelationshipNotFoundError: If no relationship has that name.
        """
        prop = getattr(type(self), name, None)
        if not isinstance(prop, RelationProperty):
            raise RelationshipNotFoundError(
                name, type(self).__name__, self.relation_names()
            )
        return prop.make(self)

    def __repr__(self) -> str:
        alias = f" as {self._table}" if self._table else ""
        return f"<{type(self).__name__} table={self.get_table_name()}{alias} {self.attributes}>"
