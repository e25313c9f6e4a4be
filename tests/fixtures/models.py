"""Sample blog models matching ``ddl_sqlite.sql``.

Global scopes:
    User     -> ``users.active = True``
    Comment  -> ``comments.deleted_at IS NULL``

Post, Profile and Role carry no scopes.
"""
from __future__ import annotations

from modeljoins import (
    Model,
    Scope,
    belongs_to,
    belongs_to_many,
    has_many,
    has_one,
)


class ActiveScope(Scope):
    def apply(self, builder, model):
        builder.where(model.qualify_column("active"), True)


class SoftDeletingScope(Scope):
    def apply(self, builder, model):
        builder.where_null(model.qualify_column("deleted_at"))


class User(Model):
    __tablename__ = "users"

    posts = has_many("Post")
    profile = has_one("Profile")
    roles = belongs_to_many("Role")


class Post(Model):
    author = belongs_to("User")
    user = belongs_to("User")
    comments = has_many("Comment")


class Comment(Model):
    post = belongs_to("Post")


class Profile(Model):
    user = belongs_to("User")


class Role(Model):
    users = belongs_to_many("User")


ACTIVE = ActiveScope()
SOFT_DELETES = SoftDeletingScope()

User.add_global_scope("active", ACTIVE)
Comment.add_global_scope("soft_deletes", SOFT_DELETES)
