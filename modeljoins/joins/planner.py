"""Join planner: relationship metadata -> :class:`JoinSpec`.

The planner decides which table to join (and under which alias), which two
columns to equate and which predicates ride along in the ON clause.  It does
not touch the outer builder; :class:`~modeljoins.joins.mixin.JoinsModels`
applies the returned spec.

Column defaults follow the naming convention:

- ``plan_many``: joined column ``<singular base table>_<base pk>``, base
  column the base pk.
- ``plan_one``: joined column the target pk, base column
  ``<singular target table>_<target pk>``.

Both columns are qualified with their side's identity (the alias for an
aliased target); already-qualified overrides are kept as given.
"""
from __future__ import annotations

import logging
import re
from collections.abc import Iterator

from modeljoins.errors import (
    InvalidJoinSpecError,
    InvalidJoinTypeError,
    RelationshipNotFoundError,
    UnsupportedRelationshipKindError,
)
from modeljoins.joins.queryable import Queryable
from modeljoins.joins.spec import JoinSpec
from modeljoins.naming import singular
from modeljoins.options import JoinOptions, normalize_join_type
from modeljoins.orm.relations import BelongsTo, HasOneOrMany, Relation
from modeljoins.query.predicates import NestedWhere, RawWhere, Where
from modeljoins.schema.column_reference import ColumnReference

logger = logging.getLogger(__name__)

#: Relationship kinds ``plan_relation`` can join.
SUPPORTED_RELATION_KINDS: tuple[str, ...] = ("has_one", "has_many", "belongs_to")

#: A relationship join always has an ON clause, so ``cross`` is excluded.
RELATION_JOIN_TYPES: tuple[str, ...] = ("inner", "left", "right", "full")


class JoinPlanner:
    """Builds join specs for one base query.

    Args:
        options: Join options; ``strict_relationships`` and ``snapshot``
            are consulted.
    """

    def __init__(self, options: JoinOptions | None = None) -> None:
        self.options = options or JoinOptions()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def plan_many(
        self,
        base: Queryable,
        target: Queryable,
        join_type: str = "inner",
        base_column: str | None = None,
        join_column: str | None = None,
        alias: str | None = None,
    ) -> JoinSpec:
        """Plan a to-many join: ``target`` holds a key to ``base``.

        Target predicates and scopes are folded into the ON clause only.
        """
        if alias:
            target = target.aliased(alias)
        join_column = join_column or f"{singular(base.table)}_{base.primary_key}"
        base_column = base_column or base.primary_key
        return self._build(
            base,
            target,
            join_type,
            first=target.qualify(join_column),
            second=base.qualify(base_column),
        )

    def plan_one(
        self,
        base: Queryable,
        target: Queryable,
        join_type: str = "inner",
        base_column: str | None = None,
        join_column: str | None = None,
        alias: str | None = None,
    ) -> JoinSpec:
        """Plan a to-one join: ``base`` holds a key to ``target``.

        Target predicates and scopes are folded into the ON clause, and the
        target's scopes are also returned for the outer query.
        """
        if alias:
            target = target.aliased(alias)
        join_column = join_column or target.primary_key
        base_column = base_column or f"{singular(target.table)}_{target.primary_key}"
        return self._build(
            base,
            target,
            join_type,
            first=target.qualify(join_column),
            second=base.qualify(base_column),
            reapply_scopes=True,
        )

    def plan_relation(
        self,
        base: Queryable,
        name: str,
        join_type: str = "inner",
        alias_as_relation: bool = False,
    ) -> JoinSpec | None:
        """Plan a join for the relationship ``name`` of the base model.

        Returns:
            The planned :class:`JoinSpec`, or ``None`` when the relationship
            kind is not joinable and ``strict_relationships`` is off.

        Raises:
            RelationshipNotFoundError: Unknown or dotted relationship name.
            UnsupportedRelationshipKindError: Unsupported kind in strict mode.
        """
        model = base.model
        if "." in name:
            raise RelationshipNotFoundError(
                name,
                type(model).__name__,
                model.relation_names(),
                reason="Nested relationship paths are not supported; join each relationship separately.",
            )

        relation: Relation = Relation.no_constraints(lambda: model.relation(name))
        target = Queryable(relation.get_query())
        alias = name if alias_as_relation else None

        if isinstance(relation, HasOneOrMany):
            return self.plan_many(
                base,
                target,
                join_type,
                base_column=relation.get_qualified_parent_key_name(),
                join_column=relation.get_foreign_key_name(),
                alias=alias,
            )
        if isinstance(relation, BelongsTo):
            return self.plan_one(
                base,
                target,
                join_type,
                base_column=relation.get_foreign_key_name(),
                join_column=relation.get_owner_key_name(),
                alias=alias,
            )

        if self.options.strict_relationships:
            raise UnsupportedRelationshipKindError(
                name, relation.kind, list(SUPPORTED_RELATION_KINDS)
            )
        logger.warning(
            "Skipping join_relation(%r) on %s: relationship kind %r is not joinable",
            name,
            type(model).__name__,
            relation.kind,
        )
        return None

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _build(
        self,
        base: Queryable,
        target: Queryable,
        join_type: str,
        first: str,
        second: str,
        reapply_scopes: bool = False,
    ) -> JoinSpec:
        join_type = normalize_join_type(join_type)
        if join_type not in RELATION_JOIN_TYPES:
            raise InvalidJoinTypeError(join_type, list(RELATION_JOIN_TYPES))

        self._check_sides(base, target, first, second)
        if self.options.snapshot is not None:
            self._validate_columns(base, target, first, second)

        nested = target.folded_wheres()
        self._check_raw_wheres(target, nested, first, second)

        spec = JoinSpec(
            table=target.table_ref,
            join_type=join_type,
            first=first,
            second=second,
            nested=nested,
            outer_scopes=tuple(target.scopes.values()) if reapply_scopes else (),
            scope_model=target.view_model() if reapply_scopes else None,
        )
        logger.debug(
            "Planned %s join %s ON %s = %s (%d nested, %d outer scopes)",
            spec.join_type,
            spec.table,
            spec.first,
            spec.second,
            len(spec.nested),
            len(spec.outer_scopes),
        )
        return spec

    @staticmethod
    def _check_sides(base: Queryable, target: Queryable, first: str, second: str) -> None:
        if target.identity == base.identity:
            return
        first_table = ColumnReference.parse(first).table
        second_table = ColumnReference.parse(second).table
        if first_table == second_table:
            raise InvalidJoinSpecError(
                f"Join columns '{first}' and '{second}' reference the same table; "
                "one column must come from each side.",
                first,
                second,
            )
        hides_table = target.identity != target.table and target.table != base.identity
        if hides_table and target.table in (first_table, second_table):
            raise InvalidJoinSpecError(
                f"Table '{target.table}' is joined as '{target.identity}'; "
                "join columns must use the alias.",
                first,
                second,
            )

    @staticmethod
    def _check_raw_wheres(target: Queryable, wheres: tuple[Where, ...], first: str, second: str) -> None:
        # raw SQL is never rewritten, so it must not name a table the join hides
        hidden = {target.table, target.model.get_table()} - {target.identity}
        if not hidden:
            return
        names = "|".join(re.escape(name) for name in sorted(hidden))
        pattern = re.compile(rf"(?<![\w.])[\"`]?({names})[\"`]?\.")
        for raw in _raw_wheres(wheres):
            match = pattern.search(raw.sql)
            if match:
                raise InvalidJoinSpecError(
                    f"Raw predicate '{raw.sql}' references '{match.group(1)}', "
                    f"but the table is joined as '{target.identity}'.",
                    first,
                    second,
                )

    def _validate_columns(self, base: Queryable, target: Queryable, first: str, second: str) -> None:
        snapshot = self.options.snapshot
        ColumnReference.parse(first).requalify(target.identity, target.table).validate_against(snapshot)
        ColumnReference.parse(second).requalify(base.identity, base.table).validate_against(snapshot)


def _raw_wheres(wheres: tuple[Where, ...]) -> Iterator[RawWhere]:
    for where in wheres:
        if isinstance(where, RawWhere):
            yield where
        elif isinstance(where, NestedWhere):
            yield from _raw_wheres(where.wheres)
