"""Custom exception hierarchy for modeljoins.

All public errors inherit from ModelJoinsError so callers can catch the base
class for any modeljoins-specific failure.
"""
from __future__ import annotations

from typing import Any


class ModelJoinsError(Exception):
    """Base exception for all modeljoins errors."""


class ValidationError(ModelJoinsError):
    """Raised when a join request or query fragment is rejected.

    Args:
        message: Human-readable description.
        code: Machine-readable error code (e.g. UNSUPPORTED_QUERYABLE).
        details: Extra context describing what was rejected.
    """

    def __init__(
        self,
        message: str,
        code: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details: dict[str, Any] = details or {}

    def to_error_response(self) -> dict[str, Any]:
        """Returns a structured error response."""
        return {
            "error": self.code,
            "message": str(self),
            "details": self.details,
        }


class UnsupportedQueryableError(ValidationError):
    """Raised when a join target is not a model, builder or relation."""

    def __init__(self, value: object) -> None:
        type_name = type(value).__name__
        super().__init__(
            f"Cannot join on a value of type '{type_name}'; expected a model "
            "name, model class, model instance, builder or relation.",
            code="UNSUPPORTED_QUERYABLE",
            details={"type": type_name},
        )


class UnknownModelError(ValidationError):
    """Raised when a model is referenced by a name that was never registered."""

    def __init__(self, name: str, registered: list[str]) -> None:
        super().__init__(
            f"Unknown model: '{name}'.",
            code="UNKNOWN_MODEL",
            details={"model": name, "registered_models": registered},
        )


class RelationshipNotFoundError(ValidationError):
    """Raised when a model has no relationship with the requested name."""

    def __init__(
        self,
        relation: str,
        model: str,
        available: list[str],
        reason: str | None = None,
    ) -> None:
        message = f"Model '{model}' has no relationship named '{relation}'."
        if reason:
            message = f"{message} {reason}"
        super().__init__(
            message,
            code="RELATIONSHIP_NOT_FOUND",
            details={
                "relation": relation,
                "model": model,
                "available_relationships": available,
            },
        )


class UnsupportedRelationshipKindError(ValidationError):
    """Raised when ``join_relation`` meets a relationship it cannot join."""

    def __init__(self, relation: str, kind: str, supported: list[str]) -> None:
        super().__init__(
            f"Relationship '{relation}' of kind '{kind}' cannot be joined.",
            code="UNSUPPORTED_RELATIONSHIP_KIND",
            details={
                "relation": relation,
                "kind": kind,
                "supported_kinds": supported,
            },
        )


class InvalidJoinSpecError(ValidationError):
    """Raised when the ON column pair does not reference one column per side."""

    def __init__(self, message: str, first: str, second: str) -> None:
        super().__init__(
            message,
            code="INVALID_JOIN_SPEC",
            details={"first": first, "second": second},
        )


class InvalidJoinTypeError(ValidationError):
    """Raised when an unknown SQL join type is requested."""

    def __init__(self, join_type: str, allowed: list[str]) -> None:
        super().__init__(
            f"Unsupported join type: '{join_type}'.",
            code="INVALID_JOIN_TYPE",
            details={"join_type": join_type, "allowed_join_types": allowed},
        )


class InvalidOperatorError(ValidationError):
    """Raised when a where clause uses an operator the grammar cannot render."""

    def __init__(self, operator: str, allowed: list[str]) -> None:
        super().__init__(
            f"Unsupported operator: '{operator}'.",
            code="INVALID_OPERATOR",
            details={"operator": operator, "allowed_operators": allowed},
        )


class SchemaError(ValidationError):
    """Raised when a join references an unknown table or column."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code="SCHEMA_ERROR", details=details or {})


class CompilationError(ModelJoinsError):
    """Raised when SQL compilation fails for an unexpected reason.

    Args:
        message: Human-readable description.
        clause: The SQL clause being compiled when the error occurred.
    """

    def __init__(self, message: str, clause: str | None = None) -> None:
        super().__init__(message)
        self.clause = clause
