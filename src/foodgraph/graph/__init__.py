"""Graph database module for the recipe/ingredient store."""

from foodgraph.graph.database import GraphDatabase, get_graph_db
from foodgraph.graph.models import (
    ContainsIngredient,
    Food,
    Ingredient,
    Recipe,
    RecipePatch,
    parse_relationship,
)
from foodgraph.graph.reconciliation import (
    AddEdge,
    MutationPlan,
    RemoveEdge,
    UpdateEdge,
    plan_ingredient_changes,
    reconcile,
)
from foodgraph.graph.resource import Resource, generate_id
from foodgraph.graph.service import FoodService, IngredientService, RecipeService

__all__ = [
    "AddEdge",
    "ContainsIngredient",
    "Food",
    "FoodService",
    "GraphDatabase",
    "Ingredient",
    "IngredientService",
    "MutationPlan",
    "Recipe",
    "RecipePatch",
    "RecipeService",
    "RemoveEdge",
    "Resource",
    "UpdateEdge",
    "generate_id",
    "get_graph_db",
    "parse_relationship",
    "plan_ingredient_changes",
    "reconcile",
]
