"""Unit tests for Builder.join_one (to-one joins)."""

from __future__ import annotations

import pytest

from modeljoins.errors import InvalidJoinSpecError, UnsupportedQueryableError
from tests.fixtures.models import Comment, Post, Profile, User


def _where_clause(sql: str) -> str:
    return sql.split("\nWHERE ", 1)[1] if "\nWHERE " in sql else ""


def test_default_columns():
    r = Post.query().join_one(User).to_sql()
    assert 'INNER JOIN "users" ON "users"."id" = "posts"."user_id"' in r.sql


def test_alias_keeps_real_table_in_default_base_column():
    r = Post.query().join_one(User, alias="author").to_sql()
    assert (
        'INNER JOIN "users" AS "author" ON "author"."id" = "posts"."user_id" '
        'AND ("author"."active" = %(param_0)s)'
    ) in r.sql
    assert _where_clause(r.sql) == '"author"."active" = %(param_1)s'
    assert r.params == {"param_0": True, "param_1": True}


def test_alias_equal_to_table_name_means_no_alias():
    r = Post.query().join_one(User, alias="users").to_sql()
    assert 'INNER JOIN "users" ON "users"."id" = "posts"."user_id"' in r.sql
    assert " AS " not in r.sql
    assert _where_clause(r.sql) == '"users"."active" = %(param_1)s'


def test_already_aliased_model_moves_to_the_new_alias():
    target = User().aliased("a").new_query().where("a.name", "Ada")
    r = Post.query().join_one(target, alias="b").to_sql()
    assert 'INNER JOIN "users" AS "b" ON "b"."id" = "posts"."user_id" AND ("b"."name" = %(param_0)s' in r.sql
    assert '"a".' not in r.sql


def test_scopes_reach_outer_where():
    r = Post.query().join_one(User).to_sql()
    assert 'AND ("users"."active" = %(param_0)s)' in r.sql
    assert _where_clause(r.sql) == '"users"."active" = %(param_1)s'


def test_only_scopes_are_reapplied():
    target = User.query().where("users.name", "Ada")
    r = Post.query().join_one(target, alias="author").to_sql()
    assert 'AND ("author"."name" = %(param_0)s AND "author"."active" = %(param_1)s)' in r.sql
    assert _where_clause(r.sql) == '"author"."active" = %(param_2)s'
    assert r.params["param_0"] == "Ada"


def test_target_without_scopes_adds_no_where():
    r = Post.query().join_one(User.query().without_global_scopes()).to_sql()
    assert r.sql.endswith('INNER JOIN "users" ON "users"."id" = "posts"."user_id"')


def test_base_column_override():
    r = Post.query().join_one(User, base_column="author_id", alias="author").to_sql()
    assert 'ON "author"."id" = "posts"."author_id"' in r.sql


def test_join_column_override():
    r = Post.query().join_one(Profile, base_column="user_id", join_column="user_id").to_sql()
    assert 'INNER JOIN "profiles" ON "profiles"."user_id" = "posts"."user_id"' in r.sql


def test_base_scopes_are_applied_at_compile_time():
    r = Comment.query().join_one(Post).to_sql()
    assert 'INNER JOIN "posts" ON "posts"."id" = "comments"."post_id"' in r.sql
    assert _where_clause(r.sql) == '"comments"."deleted_at" IS NULL'


def test_left_join():
    r = Post.query().join_one(User, "left", alias="author").to_sql("sqlite")
    assert 'LEFT JOIN "users" AS "author" ON "author"."id" = "posts"."user_id"' in r.sql
    assert 'WHERE "author"."active" = :param_1' in r.sql


def test_scopes_receive_the_aliased_model():
    seen: list[str] = []

    def spy(builder, model):
        seen.append(model.get_table())

    target = User.query().without_global_scopes().with_global_scope("spy", spy)
    Post.query().join_one(target, alias="author")
    assert seen == ["author", "author"]


def test_alias_does_not_touch_the_target():
    user = User()
    Post.query().join_one(user, alias="author")
    assert user.get_table() == "users"
    assert User().get_table() == "users"


def test_model_name_reference():
    r = Post.query().join_one("User", alias="writer", base_column="author_id").to_sql()
    assert 'INNER JOIN "users" AS "writer" ON "writer"."id" = "posts"."author_id"' in r.sql


def test_returns_same_builder():
    builder = Post.query()
    assert builder.join_one(User) is builder


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

def test_unsupported_reference_kind():
    with pytest.raises(UnsupportedQueryableError):
        Post.query().join_one(object())


def test_both_columns_on_one_side():
    with pytest.raises(InvalidJoinSpecError):
        Post.query().join_one(User, join_column="posts.id")
