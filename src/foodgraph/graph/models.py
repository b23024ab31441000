"""Pydantic models for graph nodes and relationships."""

from collections.abc import Mapping
from typing import Any, ClassVar

from pydantic import BaseModel, Field

from foodgraph.graph.resource import Resource, parse_resource

# Node labels
RESOURCE_LABEL = "Resource"
FOOD_LABEL = "Food"
INGREDIENT_LABEL = "Ingredient"
RECIPE_LABEL = "Recipe"

# Largest integer a Neo4j property can hold
MAX_STORED_INT = 2**63 - 1

# Relationship types
CONTAINS_INGREDIENT = "CONTAINS_INGREDIENT"


class BaseNode(Resource):
    """Base class for all graph nodes."""

    LABELS: ClassVar[tuple[str, ...]] = (RESOURCE_LABEL,)
    MUTABLE_FIELDS: ClassVar[tuple[str, ...]] = ()

    id: str = ""

    def node_properties(self) -> dict[str, Any]:
        """Entity-specific properties, without id or timestamps."""
        return {}

    def to_neo4j_properties(self) -> dict[str, Any]:
        """Convert to Neo4j node properties."""
        return {"id": self.id, **self.node_properties(), **self.resource_properties()}

    def mutable_properties(self) -> dict[str, Any]:
        """Mutable properties the caller actually provided."""
        props = self.node_properties()
        return {
            name: props[name] for name in self.MUTABLE_FIELDS if name in self.model_fields_set
        }

    @classmethod
    def from_neo4j(cls, properties: Mapping[str, Any], **extra: Any) -> "BaseNode":
        raise NotImplementedError


class Food(BaseNode):
    """Generic food node."""

    LABELS: ClassVar[tuple[str, ...]] = (FOOD_LABEL, RESOURCE_LABEL)
    MUTABLE_FIELDS: ClassVar[tuple[str, ...]] = ("name",)

    name: str

    def node_properties(self) -> dict[str, Any]:
        return {"name": self.name}

    @classmethod
    def from_neo4j(cls, properties: Mapping[str, Any], **extra: Any) -> "Food":
        return cls(id=properties["id"], name=properties["name"], **parse_resource(properties))


class Ingredient(BaseNode):
    """Ingredient node, shared by every recipe that references it."""

    LABELS: ClassVar[tuple[str, ...]] = (INGREDIENT_LABEL, RESOURCE_LABEL)
    MUTABLE_FIELDS: ClassVar[tuple[str, ...]] = ("name",)

    name: str

    def node_properties(self) -> dict[str, Any]:
        return {"name": self.name}

    @classmethod
    def from_neo4j(cls, properties: Mapping[str, Any], **extra: Any) -> "Ingredient":
        return cls(id=properties["id"], name=properties["name"], **parse_resource(properties))


# Relationship models


class ContainsIngredient(Resource):
    """CONTAINS_INGREDIENT relationship from a Recipe to an Ingredient.

    Identified within its recipe by ``ingredient_id`` alone; ``unit`` and
    ``amount`` are mutable attributes of the edge.
    """

    unit: str
    amount: int = Field(ge=0, le=MAX_STORED_INT)
    ingredient_id: str

    def same_attributes(self, other: "ContainsIngredient") -> bool:
        return self.unit == other.unit and self.amount == other.amount

    def equivalent(self, other: "ContainsIngredient") -> bool:
        """Equal on unit, amount and target, ignoring timestamps."""
        return self.ingredient_id == other.ingredient_id and self.same_attributes(other)

    def to_neo4j_properties(self) -> dict[str, Any]:
        """Convert to Neo4j relationship properties."""
        return {"unit": self.unit, "amount": self.amount, **self.resource_properties()}


def parse_relationship(raw: Mapping[str, Any]) -> ContainsIngredient:
    """
    Rebuild a ContainsIngredient from a stored edge.

    ``raw`` is the edge's property map projected together with the id of the
    ingredient it points at, under ``ingredient_id``.
    """
    return ContainsIngredient(
        unit=raw["unit"],
        amount=int(raw["amount"]),
        ingredient_id=raw["ingredient_id"],
        **parse_resource(raw),
    )


class Recipe(BaseNode):
    """Recipe aggregate: the recipe node plus its live ingredient edges."""

    LABELS: ClassVar[tuple[str, ...]] = (RECIPE_LABEL, RESOURCE_LABEL)
    MUTABLE_FIELDS: ClassVar[tuple[str, ...]] = ("title", "description", "steps")

    title: str
    description: str | None = None
    steps: list[str] = Field(default_factory=list)
    ingredients: list[ContainsIngredient] = Field(default_factory=list)

    def node_properties(self) -> dict[str, Any]:
        return {"title": self.title, "description": self.description, "steps": self.steps}

    @classmethod
    def from_neo4j(
        cls,
        properties: Mapping[str, Any],
        ingredients: list[Mapping[str, Any]] | None = None,
        **extra: Any,
    ) -> "Recipe":
        return cls(
            id=properties["id"],
            title=properties["title"],
            description=properties.get("description"),
            steps=list(properties.get("steps") or []),
            ingredients=[parse_relationship(raw) for raw in ingredients or []],
            **parse_resource(properties),
        )


class RecipePatch(BaseModel):
    """Partial recipe update. Omitted fields keep their current value."""

    title: str | None = None
    description: str | None = None
    steps: list[str] | None = None
    ingredients: list[ContainsIngredient] | None = None

    def apply_to(self, recipe: Recipe) -> Recipe:
        """Merge the provided fields over ``recipe``, returning a new aggregate."""
        changes = {
            name: getattr(self, name)
            for name in ("title", "description", "steps", "ingredients")
            if getattr(self, name) is not None
        }
        return recipe.model_copy(update=changes)
