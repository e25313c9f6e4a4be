"""Unit tests for the ORM layer: models, builders, relationships and scopes."""

from __future__ import annotations

import pytest

from modeljoins.errors import RelationshipNotFoundError, UnknownModelError
from modeljoins.options import JoinOptions
from modeljoins.orm.model import Model
from modeljoins.orm.registry import ModelRegistry
from modeljoins.orm.relations import (
    BelongsTo,
    BelongsToMany,
    HasMany,
    HasOne,
    Relation,
    RelationProperty,
    has_many,
)
from modeljoins.orm.scopes import CallableScope, Scope, as_scope
from tests.fixtures.models import ActiveScope, Comment, Post, Profile, Role, User


class OrderItem(Model):
    __primary_key__ = "item_id"


class Warehouse(Model):
    __tablename__ = "depots"
    join_options = JoinOptions(dialect="sqlite")

    items = has_many(OrderItem, foreign_key="depot_ref", local_key="code")


def _flag_scope(builder, model):
    builder.where(model.qualify_column("flagged"), True)


class Ticket(Model):
    pass


Ticket.add_global_scope("flagged", _flag_scope)


# ---------------------------------------------------------------------------
# Model
# ---------------------------------------------------------------------------

def test_table_name_defaults():
    assert Post.get_table_name() == "posts"
    assert Profile.get_table_name() == "profiles"
    assert OrderItem.get_table_name() == "order_items"
    assert Warehouse.get_table_name() == "depots"


def test_keys():
    assert OrderItem().get_key_name() == "item_id"
    assert OrderItem().get_foreign_key() == "order_item_item_id"
    assert User(id=7).get_key() == 7
    assert User().get_qualified_key_name() == "users.id"


def test_qualify_column_is_idempotent():
    user = User()
    assert user.qualify_column("name") == "users.name"
    assert user.qualify_column("users.name") == "users.name"
    assert user.qualify_column("other.name") == "other.name"


def test_aliased_view_leaves_original_untouched():
    user = User(id=1)
    view = user.aliased("author")
    assert view.get_table() == "author"
    assert view.get_table_name() == "users"
    assert view.qualify_column("id") == "author.id"
    assert view.is_aliased()
    assert user.get_table() == "users"
    assert not user.is_aliased()


def test_registry_resolves_names():
    assert ModelRegistry.resolve("Post") is Post
    assert ModelRegistry.resolve("tests.fixtures.models.Post") is Post
    with pytest.raises(UnknownModelError):
        ModelRegistry.resolve("Invoice")


def test_model_options_reach_builder():
    r = Warehouse.query().where("depots.code", "A").to_sql()
    assert r.dialect == "sqlite"
    assert ":param_0" in r.sql


def test_callable_global_scope():
    r = Ticket.query().to_sql()
    assert 'WHERE "tickets"."flagged" = %(param_0)s' in r.sql
    assert isinstance(Ticket.get_global_scopes()["flagged"], CallableScope)


def test_global_scopes_are_per_class():
    assert "active" in User.get_global_scopes()
    assert "active" not in Post.get_global_scopes()
    assert Model.get_global_scopes() == {}


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------

def test_scopes_stay_pending_until_compile():
    builder = User.query()
    assert builder.get_query().wheres == []
    assert 'WHERE "users"."active"' in builder.to_sql().sql
    assert builder.get_query().wheres == []


def test_without_global_scope_by_name_instance_and_class():
    assert User.query().without_global_scope("active").get_scopes() == {}
    scope = User.get_global_scopes()["active"]
    assert User.query().without_global_scope(scope).get_scopes() == {}
    assert User.query().without_global_scope(ActiveScope).get_scopes() == {}


def test_without_global_scopes_by_names():
    builder = User.query().with_global_scope("named", _flag_scope)
    builder.without_global_scopes(["active"])
    assert list(builder.get_scopes()) == ["named"]


def test_apply_scopes_returns_new_builder():
    builder = User.query()
    applied = builder.apply_scopes()
    assert applied is not builder
    assert applied.get_scopes() == {}
    assert len(applied.get_query().wheres) == 1
    assert builder.without_global_scopes().apply_scopes() is builder


def test_builder_nested_where_uses_unscoped_model_builder():
    r = Comment.query().where(lambda q: q.where("comments.id", 1).or_where("comments.id", 2)).to_sql()
    assert (
        'WHERE ("comments"."id" = %(param_0)s OR "comments"."id" = %(param_1)s) '
        'AND "comments"."deleted_at" IS NULL'
    ) in r.sql


def test_builder_forwarding_returns_builder():
    builder = Post.query()
    assert builder.select("posts.id").where_in("posts.id", [1]).order_by("posts.id").limit(5) is builder


def test_apply_scopes_with():
    r = Post.query().apply_scopes_with([ActiveScope()], User().aliased("author")).to_sql()
    assert 'WHERE "author"."active" = %(param_0)s' in r.sql


def test_get_model_without_model():
    from modeljoins.orm.builder import Builder
    from modeljoins.query.builder import QueryBuilder

    with pytest.raises(RuntimeError):
        Builder(QueryBuilder()).get_model()


# ---------------------------------------------------------------------------
# Relationships
# ---------------------------------------------------------------------------

def test_relation_property_on_class():
    assert isinstance(User.posts, RelationProperty)
    assert User.posts.name == "posts"
    assert User.posts.related_model() is Post


def test_has_many_defaults_and_constraints():
    relation = User(id=3).posts
    assert isinstance(relation, HasMany)
    assert relation.kind == "has_many"
    assert relation.get_foreign_key_name() == "user_id"
    assert relation.get_qualified_foreign_key_name() == "posts.user_id"
    assert relation.get_qualified_parent_key_name() == "users.id"
    r = relation.get_query().to_sql()
    assert 'WHERE "posts"."user_id" = %(param_0)s AND "posts"."user_id" IS NOT NULL' in r.sql
    assert r.params["param_0"] == 3


def test_has_many_custom_keys():
    relation = Warehouse(code="A").items
    assert relation.get_foreign_key_name() == "depot_ref"
    assert relation.get_qualified_parent_key_name() == "depots.code"
    assert relation.get_parent_key() == "A"


def test_has_one():
    relation = User(id=1).profile
    assert isinstance(relation, HasOne)
    assert relation.get_qualified_foreign_key_name() == "profiles.user_id"


def test_belongs_to_defaults():
    relation = Post(author_id=9).author
    assert isinstance(relation, BelongsTo)
    assert relation.get_foreign_key_name() == "author_id"
    assert relation.get_owner_key_name() == "id"
    assert relation.get_qualified_owner_key_name() == "users.id"
    assert relation.get_qualified_foreign_key_name() == "posts.author_id"
    assert relation.get_relation_name() == "author"
    r = relation.get_query().to_sql()
    assert 'WHERE "users"."id" = %(param_0)s AND "users"."active" = %(param_1)s' in r.sql


def test_belongs_to_many_defaults():
    relation = User(id=1).roles
    assert isinstance(relation, BelongsToMany)
    assert relation.get_table() == "role_user"
    assert relation.get_foreign_pivot_key_name() == "user_id"
    assert relation.get_related_pivot_key_name() == "role_id"
    r = relation.get_query().to_sql()
    assert 'INNER JOIN "role_user" ON "roles"."id" = "role_user"."role_id"' in r.sql
    assert 'WHERE "role_user"."user_id" = %(param_0)s' in r.sql
    assert Role(id=1).users.get_table() == "role_user"


def test_no_constraints():
    relation = Relation.no_constraints(lambda: User(id=3).posts)
    assert relation.get_query().get_query().wheres == []
    assert User(id=3).posts.get_query().get_query().wheres != []


def test_no_constraints_restores_flag_on_error():
    def boom():
        raise KeyError("boom")

    with pytest.raises(KeyError):
        Relation.no_constraints(boom)
    assert Relation._constraints is True


def test_model_relation_lookup():
    assert isinstance(Comment().relation("post"), BelongsTo)
    assert User.relation_names() == ["posts", "profile", "roles"]
    with pytest.raises(RelationshipNotFoundError):
        User().relation("get_table")


# ---------------------------------------------------------------------------
# Scopes
# ---------------------------------------------------------------------------

def test_as_scope():
    scope = ActiveScope()
    assert as_scope(scope) is scope
    assert isinstance(as_scope(_flag_scope), CallableScope)
    with pytest.raises(TypeError):
        as_scope("active")


def test_scope_is_abstract():
    with pytest.raises(TypeError):
        Scope()
