"""Business logic service layer for graph entities.

Each public operation runs in exactly one store transaction. Recipe updates
read the current aggregate, plan and validate the ingredient changes, and only
then write, all inside that transaction.
"""

from functools import partial
from typing import Generic, TypeVar

from neo4j import AsyncTransaction

from foodgraph.exceptions import NotFoundError
from foodgraph.graph.database import GraphDatabase
from foodgraph.graph.models import BaseNode, Food, Ingredient, Recipe, RecipePatch
from foodgraph.graph.reconciliation import MutationPlan, ensure_unique, reconcile
from foodgraph.graph.repository import (
    FoodRepository,
    IngredientRepository,
    NodeRepository,
    RecipeRepository,
)
from foodgraph.graph.resource import generate_id, utc_now
from foodgraph.logging_config import get_logger

logger = get_logger(__name__)

N = TypeVar("N", bound=BaseNode)


class EntityService(Generic[N]):
    """Entity store operations for one node type, one transaction per call."""

    def __init__(self, db: GraphDatabase, repo: NodeRepository[N]):
        self.db = db
        self.repo = repo

    @property
    def label(self) -> str:
        return self.repo.label

    def _new_node(self, node: N) -> N:
        """Copy of ``node`` with a fresh id and creation time, and no other timestamps."""
        return node.model_copy(
            update={
                "id": generate_id(node.LABELS),
                "created": utc_now(),
                "last_modified": None,
                "deleted": None,
            }
        )

    async def get_all(self) -> list[N]:
        async with self.db.transaction() as tx:
            return await self.repo.fetch_all(tx)

    async def get_by_id(self, node_id: str) -> N | None:
        async with self.db.transaction() as tx:
            return await self.repo.fetch_by_id(tx, node_id)

    async def create(self, node: N) -> N:
        new_node = self._new_node(node)
        async with self.db.transaction() as tx:
            created = await self.repo.insert(tx, new_node)
        logger.info(f"Created {self.label} {created.id}")
        return created

    async def update(self, node: N) -> N:
        """
        Overwrite the mutable fields provided on ``node``.

        Raises:
            NotFoundError: if the node is missing or soft-deleted.
        """
        async with self.db.transaction() as tx:
            updated = await self.repo.update_fields(tx, node, utc_now())
            if updated is None:
                raise NotFoundError(self.label, node.id)
        logger.info(f"Updated {self.label} {updated.id}")
        return updated

    async def delete(self, node_id: str) -> str:
        """
        Soft-delete a node and cascade to its live relationships.

        Repeated deletes of the same id return the id again.

        Raises:
            NotFoundError: if no node with this id was ever stored.
        """
        async with self.db.transaction() as tx:
            deleted_id = await self.repo.soft_delete(tx, node_id, utc_now())
            if deleted_id is None:
                raise NotFoundError(self.label, node_id)
        return deleted_id


class FoodService(EntityService[Food]):
    def __init__(self, db: GraphDatabase):
        super().__init__(db, FoodRepository())


class IngredientService(EntityService[Ingredient]):
    def __init__(self, db: GraphDatabase):
        super().__init__(db, IngredientRepository())


class RecipeService(EntityService[Recipe]):
    """Recipe aggregates: the recipe node and its ingredient edges change together."""

    repo: RecipeRepository

    def __init__(self, db: GraphDatabase):
        super().__init__(db, RecipeRepository())
        self.ingredients = IngredientRepository()

    async def create(self, recipe: Recipe) -> Recipe:
        """
        Create a recipe and all of its ingredient edges atomically.

        Raises:
            DuplicateIngredientError: if an ingredient is listed twice.
            UnknownIngredientError: if any ingredient is not a live Ingredient.
        """
        ensure_unique(recipe.ingredients)

        new_recipe = self._new_node(recipe)
        async with self.db.transaction() as tx:
            plan = await reconcile([], recipe.ingredients, partial(self.ingredients.live_ids, tx))
            await self.repo.insert(tx, new_recipe)
            await self.repo.apply_mutations(
                tx, new_recipe.id, plan.mutations(), new_recipe.created
            )
            created = await self.repo.fetch_by_id(tx, new_recipe.id)

        logger.info(f"Created recipe {new_recipe.id} with {len(plan.added)} ingredient(s)")
        return created

    async def update(self, recipe: Recipe) -> Recipe:
        """
        Replace a recipe's fields and ingredient list.

        Raises:
            NotFoundError: if the recipe is missing or soft-deleted.
            DuplicateIngredientError: if an ingredient is listed twice.
            UnknownIngredientError: if a newly added ingredient is not live.
        """
        ensure_unique(recipe.ingredients)

        async with self.db.transaction() as tx:
            current = await self.repo.fetch_by_id(tx, recipe.id)
            if current is None:
                raise NotFoundError(self.label, recipe.id)

            updated, plan = await self._apply(tx, current, recipe)

        logger.info(f"Updated recipe {recipe.id}, ingredient changes: {plan.summary}")
        return updated

    async def patch(self, recipe_id: str, changes: RecipePatch) -> Recipe:
        """Update only the provided fields; omitted ingredients keep the current set."""
        if changes.ingredients is not None:
            ensure_unique(changes.ingredients)

        async with self.db.transaction() as tx:
            current = await self.repo.fetch_by_id(tx, recipe_id)
            if current is None:
                raise NotFoundError(self.label, recipe_id)

            updated, plan = await self._apply(tx, current, changes.apply_to(current))

        logger.info(f"Patched recipe {recipe_id}, ingredient changes: {plan.summary}")
        return updated

    async def _apply(
        self, tx: AsyncTransaction, current: Recipe, desired: Recipe
    ) -> tuple[Recipe, MutationPlan]:
        # validation happens before the first write
        plan = await reconcile(
            current.ingredients, desired.ingredients, partial(self.ingredients.live_ids, tx)
        )

        now = utc_now()
        await self.repo.update_fields(tx, desired, now)
        await self.repo.apply_mutations(tx, current.id, plan.mutations(), now)
        updated = await self.repo.fetch_by_id(tx, current.id)
        return updated, plan
