"""API routes for recipes and their ingredient lists."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from foodgraph.exceptions import NotFoundError
from foodgraph.graph.database import GraphDatabase, get_graph_db
from foodgraph.graph.models import RECIPE_LABEL, Recipe
from foodgraph.graph.service import RecipeService
from foodgraph.schemas import (
    CreateRecipeRequest,
    DeleteResponse,
    RecipeListResponse,
    UpdateRecipeRequest,
)

router = APIRouter(prefix="/recipe", tags=["recipes"])


async def get_recipe_service(
    db: Annotated[GraphDatabase, Depends(get_graph_db)],
) -> RecipeService:
    return RecipeService(db)


RecipeServiceDep = Annotated[RecipeService, Depends(get_recipe_service)]


@router.get("", response_model=RecipeListResponse)
async def list_recipes(service: RecipeServiceDep) -> RecipeListResponse:
    """List all live recipes with their live ingredients."""
    return RecipeListResponse(recipes=await service.get_all())


@router.get("/{recipe_id}", response_model=Recipe)
async def get_recipe(recipe_id: str, service: RecipeServiceDep) -> Recipe:
    recipe = await service.get_by_id(recipe_id)
    if recipe is None:
        raise NotFoundError(RECIPE_LABEL, recipe_id)
    return recipe


@router.post("", response_model=Recipe, status_code=status.HTTP_201_CREATED)
async def create_recipe(body: CreateRecipeRequest, service: RecipeServiceDep) -> Recipe:
    """Create a recipe. Every listed ingredient must already exist."""
    return await service.create(body.to_recipe())


@router.put("/{recipe_id}", response_model=Recipe)
async def replace_recipe(
    recipe_id: str, body: CreateRecipeRequest, service: RecipeServiceDep
) -> Recipe:
    """Replace a recipe, including its full ingredient list."""
    return await service.update(body.to_recipe(recipe_id))


@router.patch("/{recipe_id}", response_model=Recipe)
async def update_recipe(
    recipe_id: str, body: UpdateRecipeRequest, service: RecipeServiceDep
) -> Recipe:
    """Update the provided fields only; omit ``ingredients`` to keep the current list."""
    return await service.patch(recipe_id, body.to_patch())


@router.delete("/{recipe_id}", response_model=DeleteResponse)
async def delete_recipe(recipe_id: str, service: RecipeServiceDep) -> DeleteResponse:
    return DeleteResponse(id=await service.delete(recipe_id))
