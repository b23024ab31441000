"""
Reconciliation of a recipe's ingredient edges.

Given the live CONTAINS_INGREDIENT edges of a recipe and the caller's full
replacement list, work out the smallest set of edge mutations that turns one
into the other:

- target only in the existing set -> REMOVE (soft-delete the edge)
- target only in the desired set  -> ADD (create a new edge)
- target in both, unit/amount differ -> UPDATE
- target in both, unchanged -> left alone

Edges are matched on ingredient id only. Newly referenced ingredients must
resolve to live Ingredient nodes before anything is written.
"""

from collections import Counter
from collections.abc import Awaitable, Callable, Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from foodgraph.exceptions import DuplicateIngredientError, UnknownIngredientError
from foodgraph.graph.models import ContainsIngredient
from foodgraph.logging_config import get_logger

logger = get_logger(__name__)

LiveIdResolver = Callable[[set[str]], Awaitable[set[str]]]


# Mutation records handed to the store adapter


@dataclass(frozen=True)
class RemoveEdge:
    ingredient_id: str
    op: str = field(default="remove", init=False)

    def to_parameters(self) -> dict[str, Any]:
        return {"op": self.op, "ingredient_id": self.ingredient_id, "unit": None, "amount": None}


@dataclass(frozen=True)
class AddEdge:
    ingredient_id: str
    unit: str
    amount: int
    op: str = field(default="add", init=False)

    def to_parameters(self) -> dict[str, Any]:
        return {
            "op": self.op,
            "ingredient_id": self.ingredient_id,
            "unit": self.unit,
            "amount": self.amount,
        }


@dataclass(frozen=True)
class UpdateEdge:
    ingredient_id: str
    unit: str
    amount: int
    op: str = field(default="update", init=False)

    def to_parameters(self) -> dict[str, Any]:
        return {
            "op": self.op,
            "ingredient_id": self.ingredient_id,
            "unit": self.unit,
            "amount": self.amount,
        }


EdgeMutation = RemoveEdge | AddEdge | UpdateEdge


@dataclass(frozen=True)
class Partition:
    """Three-way split of ingredient ids between existing and desired sets."""

    removed: frozenset[str]
    added: frozenset[str]
    kept: frozenset[str]


@dataclass
class MutationPlan:
    """Edge changes needed to move a recipe from its existing to its desired ingredients."""

    removed: frozenset[str] = frozenset()
    added: list[ContainsIngredient] = field(default_factory=list)
    updated: list[ContainsIngredient] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.removed or self.added or self.updated)

    @property
    def added_ids(self) -> set[str]:
        return {edge.ingredient_id for edge in self.added}

    @property
    def summary(self) -> dict[str, int]:
        return {
            "removed": len(self.removed),
            "added": len(self.added),
            "updated": len(self.updated),
        }

    def mutations(self) -> list[EdgeMutation]:
        """Flatten the plan into typed mutation records, ordered by ingredient id."""
        records: list[EdgeMutation] = [RemoveEdge(target) for target in sorted(self.removed)]
        records.extend(AddEdge(e.ingredient_id, e.unit, e.amount) for e in self.added)
        records.extend(UpdateEdge(e.ingredient_id, e.unit, e.amount) for e in self.updated)
        return records


def find_duplicates(desired: Iterable[ContainsIngredient]) -> set[str]:
    counts = Counter(edge.ingredient_id for edge in desired)
    return {ingredient_id for ingredient_id, count in counts.items() if count > 1}


def ensure_unique(desired: Iterable[ContainsIngredient]) -> None:
    """Raise DuplicateIngredientError if any ingredient id appears more than once."""
    duplicates = find_duplicates(desired)
    if duplicates:
        raise DuplicateIngredientError(duplicates)


def partition(existing_ids: set[str], desired_ids: set[str]) -> Partition:
    return Partition(
        removed=frozenset(existing_ids - desired_ids),
        added=frozenset(desired_ids - existing_ids),
        kept=frozenset(existing_ids & desired_ids),
    )


def plan_ingredient_changes(
    existing: Iterable[ContainsIngredient],
    desired: Sequence[ContainsIngredient],
) -> MutationPlan:
    """
    Compute the mutation plan between two ingredient sets.

    Args:
        existing: Live edges currently stored for the recipe.
        desired: Caller-supplied full replacement list.

    Returns:
        MutationPlan with removed ids and added/updated edges (sorted by id).

    Raises:
        DuplicateIngredientError: if ``desired`` lists an ingredient twice.
    """
    ensure_unique(desired)

    existing_by_id = {edge.ingredient_id: edge for edge in existing}
    desired_by_id = {edge.ingredient_id: edge for edge in desired}

    split = partition(set(existing_by_id), set(desired_by_id))

    updated = [
        desired_by_id[ingredient_id]
        for ingredient_id in sorted(split.kept)
        if not existing_by_id[ingredient_id].same_attributes(desired_by_id[ingredient_id])
    ]

    return MutationPlan(
        removed=split.removed,
        added=[desired_by_id[ingredient_id] for ingredient_id in sorted(split.added)],
        updated=updated,
    )


async def validate_plan(plan: MutationPlan, resolve_live_ids: LiveIdResolver) -> None:
    """
    Check that every newly referenced ingredient is a live Ingredient node.

    Only added targets are checked; kept and removed targets were validated
    when their edges were created.

    Raises:
        UnknownIngredientError: naming every added id that did not resolve.
    """
    added_ids = plan.added_ids
    if not added_ids:
        return

    live_ids = await resolve_live_ids(added_ids)
    missing = added_ids - set(live_ids)
    if missing:
        logger.warning(f"Rejected ingredient plan, unknown ingredients: {sorted(missing)}")
        raise UnknownIngredientError(missing)


async def reconcile(
    existing: Iterable[ContainsIngredient],
    desired: Sequence[ContainsIngredient],
    resolve_live_ids: LiveIdResolver,
) -> MutationPlan:
    """Plan and validate in one step; nothing is written by this function."""
    plan = plan_ingredient_changes(existing, desired)
    await validate_plan(plan, resolve_live_ids)
    logger.debug(f"Ingredient plan: {plan.summary}")
    return plan
