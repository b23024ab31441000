"""Typed failures raised by the persistence layer."""

from collections.abc import Mapping
from typing import Any


class FoodGraphError(Exception):
    """Base class for every failure surfaced to callers.

    Attributes:
        message: human-readable message
        details: optional mapping with extra context
        code: machine-readable error code
        http_status: suggested HTTP status code for handlers
    """

    http_status = 500
    default_message = "Internal error"
    default_code = "internal_error"

    def __init__(
        self,
        message: str | None = None,
        details: Mapping[str, Any] | None = None,
        code: str | None = None,
    ):
        self.message = message or self.default_message
        super().__init__(self.message)
        self.details = details
        self.code = code or self.default_code

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"message": self.message, "code": self.code}
        if self.details:
            payload["details"] = dict(self.details)
        return payload

    def __str__(self) -> str:
        return self.message


class NotFoundError(FoodGraphError):
    """Raised when a target entity is absent or soft-deleted."""

    http_status = 404
    default_message = "Not found"
    default_code = "not_found"

    def __init__(self, label: str, resource_id: str):
        super().__init__(
            f"{label} '{resource_id}' not found",
            details={"label": label, "id": resource_id},
        )
        self.label = label
        self.resource_id = resource_id


class _IngredientSetError(FoodGraphError):
    http_status = 422

    def __init__(self, message: str, ingredient_ids: set[str]):
        ordered = sorted(ingredient_ids)
        super().__init__(message, details={"ingredient_ids": ordered})
        self.ingredient_ids = frozenset(ingredient_ids)


class UnknownIngredientError(_IngredientSetError):
    """Raised when an added relationship target is not a live Ingredient."""

    default_code = "unknown_ingredient"

    def __init__(self, ingredient_ids: set[str]):
        super().__init__(
            f"Unknown ingredient(s): {', '.join(sorted(ingredient_ids))}", ingredient_ids
        )


class DuplicateIngredientError(_IngredientSetError):
    """Raised when the desired ingredient list references a target more than once."""

    default_code = "duplicate_ingredient"

    def __init__(self, ingredient_ids: set[str]):
        super().__init__(
            f"Ingredient(s) listed more than once: {', '.join(sorted(ingredient_ids))}",
            ingredient_ids,
        )


class EmptyLabelSetError(FoodGraphError, ValueError):
    """Raised when an id is requested for a label set with no usable labels."""

    default_message = "Cannot generate an id without at least one non-empty label"
    default_code = "empty_label_set"


class StoreError(FoodGraphError):
    """Raised when the backing graph store fails. The driver error is chained as __cause__."""

    http_status = 503
    default_message = "Graph store failure"
    default_code = "store_error"
