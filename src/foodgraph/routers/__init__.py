"""API routers for the foodgraph application."""

from foodgraph.routers.foods import router as foods_router
from foodgraph.routers.ingredients import router as ingredients_router
from foodgraph.routers.recipes import router as recipes_router

__all__ = [
    "foods_router",
    "ingredients_router",
    "recipes_router",
]
