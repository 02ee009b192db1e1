"""RowShape exception hierarchy.

Every error raised by RowShape derives from ``RowShapeError``. Errors are
raised to the immediate caller and never retried internally.
"""

from __future__ import annotations

from typing import Any


class RowShapeError(Exception):
    """Base exception for all RowShape errors."""


class ArgumentMissingError(RowShapeError, ValueError):
    """Raised when a required argument is absent."""

    def __init__(self, argument: str) -> None:
        self.argument = argument
        super().__init__(f"Argument missing: '{argument}'")


# --- Paging ---


class PagingError(RowShapeError, ValueError):
    """Raised for an invalid page request."""


# --- Keys ---


class KeyResolutionError(RowShapeError):
    """Base for record key errors."""


class MissingKeyError(KeyResolutionError):
    """Raised when a relation declares no identity columns."""

    def __init__(self, relation: str) -> None:
        self.relation = relation
        super().__init__(f"Relation '{relation}' has no primary key columns")


# --- Accessors ---


class AccessorError(RowShapeError):
    """Base for property accessor errors."""


class MissingAccessorError(AccessorError):
    """Raised when no getter or setter exists for a property name."""

    def __init__(self, target_class: str, name: str, kind: str = "getter") -> None:
        self.target_class = target_class
        self.name = name
        self.kind = kind
        super().__init__(f"No {kind} for property '{name}' on {target_class} or its bases")


class AccessorInvocationError(AccessorError):
    """Raised when a resolved accessor fails while being invoked."""

    def __init__(self, target_class: str, name: str, detail: str) -> None:
        self.target_class = target_class
        self.name = name
        super().__init__(f"Accessor for '{name}' on {target_class} failed: {detail}")


# --- Mapping ---


class MappingError(RowShapeError):
    """Base for projection and grouping errors."""


class UnsupportedExpressionError(MappingError):
    """Raised when an expression cannot be bound to a property."""

    def __init__(self, expression: Any) -> None:
        self.expression = expression
        super().__init__(
            f"Unsupported expression {expression!r} ({type(expression).__name__}); "
            "expected a column, a labelled expression or a table"
        )


class ColumnMismatchError(MappingError):
    """Raised when bound values cannot construct the target class."""

    def __init__(self, target_class: str, missing_fields: list[str]) -> None:
        self.target_class = target_class
        self.missing_fields = missing_fields
        super().__init__(f"Cannot map to {target_class}: {missing_fields}")


class PlanCompilationError(MappingError):
    """Raised when a OneToManyPlan fails validation during build()."""


# --- Execution ---


class MultipleRowsError(RowShapeError):
    """Raised when fetch_one encounters more than one row."""

    def __init__(self, row_count: int) -> None:
        self.row_count = row_count
        super().__init__(f"fetch_one returned {row_count} rows (expected 0 or 1)")
