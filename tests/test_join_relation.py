"""Unit tests for Builder.join_relation."""

from __future__ import annotations

import logging

import pytest

from modeljoins.errors import RelationshipNotFoundError, UnsupportedRelationshipKindError
from tests.fixtures.models import Comment, Post, User


def test_has_many_matches_join_many():
    by_relation = User.query().join_relation("posts").to_sql()
    direct = User.query().join_many(Post).to_sql()
    assert by_relation.sql == direct.sql
    assert by_relation.params == direct.params


def test_has_many_folds_related_scopes():
    r = Post.query().join_relation("comments").to_sql()
    assert (
        'INNER JOIN "comments" ON "comments"."post_id" = "posts"."id" '
        'AND ("comments"."deleted_at" IS NULL)'
    ) in r.sql


def test_relationship_constraints_are_not_applied():
    r = User.query().join_relation("posts").to_sql()
    assert "IS NOT NULL" not in r.sql
    assert "IS NULL" not in r.sql


def test_has_one():
    r = User.query().join_relation("profile", "left").to_sql()
    assert 'LEFT JOIN "profiles" ON "profiles"."user_id" = "users"."id"' in r.sql


def test_belongs_to_uses_declared_foreign_key():
    r = Post.query().join_relation("author").to_sql()
    assert 'INNER JOIN "users" ON "users"."id" = "posts"."author_id"' in r.sql


def test_belongs_to_matches_join_one():
    by_relation = Post.query().join_relation("user").to_sql()
    direct = Post.query().join_one(User).to_sql()
    assert by_relation.sql == direct.sql


def test_alias_as_relation_name():
    r = Post.query().join_relation("author", alias_as_relation=True).to_sql()
    assert (
        'INNER JOIN "users" AS "author" ON "author"."id" = "posts"."author_id" '
        'AND ("author"."active" = %(param_0)s)'
    ) in r.sql
    assert 'WHERE "author"."active" = %(param_1)s' in r.sql


def test_alias_equal_to_table_name_is_not_rendered():
    r = Post.query().join_relation("comments", "left", alias_as_relation=True).to_sql()
    assert 'LEFT JOIN "comments" ON "comments"."post_id" = "posts"."id"' in r.sql
    assert " AS " not in r.sql


def test_same_relation_twice_under_aliases():
    r = (
        Post.query()
        .join_relation("author", alias_as_relation=True)
        .join_relation("user", "left", alias_as_relation=True)
        .to_sql()
    )
    assert 'INNER JOIN "users" AS "author" ON "author"."id" = "posts"."author_id"' in r.sql
    assert 'LEFT JOIN "users" AS "user" ON "user"."id" = "posts"."user_id"' in r.sql


def test_belongs_to_from_child_with_scopes():
    r = Comment.query().join_relation("post").to_sql()
    assert 'INNER JOIN "posts" ON "posts"."id" = "comments"."post_id"' in r.sql
    assert r.sql.endswith('WHERE "comments"."deleted_at" IS NULL')


# ---------------------------------------------------------------------------
# Unsupported kinds and names
# ---------------------------------------------------------------------------

def test_belongs_to_many_raises_in_strict_mode():
    with pytest.raises(UnsupportedRelationshipKindError) as exc_info:
        User.query().join_relation("roles")
    details = exc_info.value.details
    assert details["kind"] == "belongs_to_many"
    assert details["supported_kinds"] == ["has_one", "has_many", "belongs_to"]


def test_belongs_to_many_passes_through_in_lenient_mode(lenient_options, caplog):
    builder = User.query().with_join_options(lenient_options)
    with caplog.at_level(logging.WARNING, logger="modeljoins.joins.planner"):
        result = builder.join_relation("roles")
    assert result is builder
    assert builder.get_query().joins == []
    assert "roles" in caplog.text


def test_unknown_relationship():
    with pytest.raises(RelationshipNotFoundError) as exc_info:
        User.query().join_relation("invoices")
    assert exc_info.value.details["available_relationships"] == ["posts", "profile", "roles"]


def test_dotted_path_is_not_supported():
    with pytest.raises(RelationshipNotFoundError) as exc_info:
        User.query().join_relation("posts.comments")
    assert "Nested relationship paths" in str(exc_info.value)


def test_unknown_relationship_in_lenient_mode_still_raises(lenient_options):
    with pytest.raises(RelationshipNotFoundError):
        User.query().with_join_options(lenient_options).join_relation("invoices")
