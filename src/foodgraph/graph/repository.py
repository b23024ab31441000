"""Repositories for graph nodes and recipe ingredient edges, expressed as Cypher.

Every method takes the transaction it runs in, so services can compose several
of them into one atomic unit. Every read filters out soft-deleted records
through ``live()``.
"""

from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Any, Generic, TypeVar

from neo4j import AsyncTransaction

from foodgraph.graph.models import (
    CONTAINS_INGREDIENT,
    INGREDIENT_LABEL,
    RECIPE_LABEL,
    RESOURCE_LABEL,
    BaseNode,
    Food,
    Ingredient,
    Recipe,
)
from foodgraph.graph.reconciliation import EdgeMutation
from foodgraph.graph.resource import CREATED, DELETED, LAST_MODIFIED, live
from foodgraph.logging_config import get_logger

logger = get_logger(__name__)

N = TypeVar("N", bound=BaseNode)


def label_expression(labels: Iterable[str]) -> str:
    return "".join(f":`{label}`" for label in labels)


class NodeRepository(Generic[N]):
    """Create/read/update/soft-delete for one labeled node type."""

    model: type[N]

    def __init__(self, model: type[N]):
        self.model = model
        self.label = model.LABELS[0]

    @property
    def name(self) -> str:
        return self.label.lower()

    async def _run(
        self,
        tx: AsyncTransaction,
        operation: str,
        query: str,
        params: dict[str, Any],
    ) -> list[dict[str, Any]]:
        result = await tx.run(query, params)
        records = await result.data()
        logger.debug(
            f"{operation}: {len(records)} record(s)",
            extra={"extra_data": {"query": query, "params": params}},
        )
        return records

    def _parse(self, record: dict[str, Any]) -> N:
        return self.model.from_neo4j(record["node"])

    # =========================================================================
    # Reads
    # =========================================================================

    async def fetch_all(self, tx: AsyncTransaction) -> list[N]:
        query = f"""
        MATCH (n:`{self.label}`) WHERE {live("n")}
        RETURN properties(n) AS node
        ORDER BY n.{CREATED}, n.id
        """
        records = await self._run(tx, f"get all {self.name}s", query, {})
        return [self._parse(record) for record in records]

    async def fetch_by_id(self, tx: AsyncTransaction, node_id: str) -> N | None:
        query = f"""
        MATCH (n:`{self.label}` {{id: $id}}) WHERE {live("n")}
        RETURN properties(n) AS node
        """
        records = await self._run(tx, f"get {self.name}", query, {"id": node_id})
        return self._parse(records[0]) if records else None

    async def live_ids(self, tx: AsyncTransaction, node_ids: Iterable[str]) -> set[str]:
        """Subset of ``node_ids`` that resolve to live nodes of this label."""
        query = f"""
        MATCH (n:`{self.label}`) WHERE n.id IN $ids AND {live("n")}
        RETURN n.id AS id
        """
        records = await self._run(
            tx, f"resolve {self.name} ids", query, {"ids": sorted(set(node_ids))}
        )
        return {record["id"] for record in records}

    # =========================================================================
    # Writes
    # =========================================================================

    async def insert(self, tx: AsyncTransaction, node: N) -> N:
        """Create the node exactly as given (id and created already assigned)."""
        query = f"""
        CREATE (n{label_expression(node.LABELS)})
        SET n = $props
        RETURN properties(n) AS node
        """
        records = await self._run(
            tx, f"create {self.name}", query, {"props": node.to_neo4j_properties()}
        )
        return self._parse(records[0])

    async def update_fields(self, tx: AsyncTransaction, node: N, now: datetime) -> N | None:
        """Overwrite the provided mutable fields of a live node and bump lastModified."""
        query = f"""
        MATCH (n:`{self.label}` {{id: $id}}) WHERE {live("n")}
        SET n += $props,
            n.{LAST_MODIFIED} = CASE
                WHEN n.{LAST_MODIFIED} IS NULL OR n.{LAST_MODIFIED} < $now THEN $now
                ELSE n.{LAST_MODIFIED}
            END
        RETURN properties(n) AS node
        """
        params = {"id": node.id, "props": node.mutable_properties(), "now": now}
        records = await self._run(tx, f"update {self.name}", query, params)
        return self._parse(records[0]) if records else None

    async def soft_delete(self, tx: AsyncTransaction, node_id: str, now: datetime) -> str | None:
        """
        Soft-delete a node and every live relationship touching it, with one timestamp.

        Deleting an already-deleted node changes nothing and still returns its id.

        Returns:
            The node id, or None if no node with that id was ever stored.
        """
        query = f"""
        MATCH (n:`{self.label}` {{id: $id}})
        OPTIONAL MATCH (n)-[rel]-(:`{RESOURCE_LABEL}`) WHERE {live("n")} AND {live("rel")}
        SET rel.{DELETED} = $now
        WITH n, count(rel) AS cascaded
        SET n.{DELETED} = coalesce(n.{DELETED}, $now)
        RETURN n.id AS id, cascaded
        """
        records = await self._run(tx, f"delete {self.name}", query, {"id": node_id, "now": now})
        if not records:
            return None
        cascaded = records[0]["cascaded"]
        logger.info(f"Soft-deleted {self.name} {node_id}, cascaded to {cascaded} edge(s)")
        return records[0]["id"]


class FoodRepository(NodeRepository[Food]):
    def __init__(self) -> None:
        super().__init__(Food)


class IngredientRepository(NodeRepository[Ingredient]):
    def __init__(self) -> None:
        super().__init__(Ingredient)


class RecipeRepository(NodeRepository[Recipe]):
    """Recipe nodes read as aggregates together with their live ingredient edges."""

    def __init__(self) -> None:
        super().__init__(Recipe)

    def _parse(self, record: dict[str, Any]) -> Recipe:
        return Recipe.from_neo4j(record["node"], ingredients=record.get("ingredients"))

    def _aggregate_query(self, match: str) -> str:
        return f"""
        {match}
        OPTIONAL MATCH (r)-[ci:`{CONTAINS_INGREDIENT}`]->(i:`{INGREDIENT_LABEL}`)
            WHERE {live("ci")} AND {live("i")}
        WITH r, ci, i ORDER BY i.id
        WITH r, collect(ci {{.*, ingredient_id: i.id}}) AS ingredients
        RETURN properties(r) AS node, ingredients
        ORDER BY r.{CREATED}, r.id
        """

    async def fetch_all(self, tx: AsyncTransaction) -> list[Recipe]:
        query = self._aggregate_query(f"MATCH (r:`{RECIPE_LABEL}`) WHERE {live('r')}")
        records = await self._run(tx, "get all recipes", query, {})
        return [self._parse(record) for record in records]

    async def fetch_by_id(self, tx: AsyncTransaction, node_id: str) -> Recipe | None:
        query = self._aggregate_query(
            f"MATCH (r:`{RECIPE_LABEL}` {{id: $id}}) WHERE {live('r')}"
        )
        records = await self._run(tx, "get recipe", query, {"id": node_id})
        return self._parse(records[0]) if records else None

    async def insert(self, tx: AsyncTransaction, node: Recipe) -> Recipe:
        """Create the recipe node only; edges go through apply_mutations."""
        query = f"""
        CREATE (r{label_expression(node.LABELS)})
        SET r = $props
        RETURN properties(r) AS node, [] AS ingredients
        """
        params = {"props": node.to_neo4j_properties()}
        records = await self._run(tx, "create recipe", query, params)
        return self._parse(records[0])

    async def apply_mutations(
        self,
        tx: AsyncTransaction,
        recipe_id: str,
        mutations: Sequence[EdgeMutation],
        now: datetime,
    ) -> int:
        """
        Apply a batch of ingredient edge mutations in a single statement.

        Removals soft-delete the live edge, additions create a fresh edge (a
        previously removed edge stays behind as history), updates overwrite
        unit/amount. Each mutation targets a distinct ingredient, so the order
        inside the batch does not matter.

        Returns:
            Number of mutation records processed.
        """
        if not mutations:
            return 0

        query = f"""
        MATCH (r:`{RECIPE_LABEL}` {{id: $recipe_id}})
        UNWIND $mutations AS m
        MATCH (i:`{INGREDIENT_LABEL}` {{id: m.ingredient_id}})
        OPTIONAL MATCH (r)-[ci:`{CONTAINS_INGREDIENT}`]->(i) WHERE {live("ci")}
        FOREACH (_ IN CASE WHEN m.op = 'remove' AND ci IS NOT NULL THEN [1] ELSE [] END |
            SET ci.{DELETED} = $now)
        FOREACH (_ IN CASE WHEN m.op = 'update' AND ci IS NOT NULL THEN [1] ELSE [] END |
            SET ci.unit = m.unit, ci.amount = m.amount, ci.{LAST_MODIFIED} = $now)
        FOREACH (_ IN CASE WHEN m.op = 'add' AND ci IS NULL THEN [1] ELSE [] END |
            CREATE (r)-[:`{CONTAINS_INGREDIENT}` {{
                unit: m.unit, amount: m.amount, {CREATED}: $now
            }}]->(i))
        RETURN count(m) AS applied
        """
        params = {
            "recipe_id": recipe_id,
            "mutations": [mutation.to_parameters() for mutation in mutations],
            "now": now,
        }
        records = await self._run(tx, "apply ingredient mutations", query, params)
        return records[0]["applied"] if records else 0
