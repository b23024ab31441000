"""API routes for ingredients."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from foodgraph.exceptions import NotFoundError
from foodgraph.graph.database import GraphDatabase, get_graph_db
from foodgraph.graph.models import INGREDIENT_LABEL, Ingredient
from foodgraph.graph.service import IngredientService
from foodgraph.schemas import DeleteResponse, IngredientListResponse, NameRequest

router = APIRouter(prefix="/ingredient", tags=["ingredients"])


async def get_ingredient_service(
    db: Annotated[GraphDatabase, Depends(get_graph_db)],
) -> IngredientService:
    return IngredientService(db)


IngredientServiceDep = Annotated[IngredientService, Depends(get_ingredient_service)]


@router.get("", response_model=IngredientListResponse)
async def list_ingredients(service: IngredientServiceDep) -> IngredientListResponse:
    """List all live ingredients."""
    return IngredientListResponse(ingredients=await service.get_all())


@router.get("/{ingredient_id}", response_model=Ingredient)
async def get_ingredient(ingredient_id: str, service: IngredientServiceDep) -> Ingredient:
    ingredient = await service.get_by_id(ingredient_id)
    if ingredient is None:
        raise NotFoundError(INGREDIENT_LABEL, ingredient_id)
    return ingredient


@router.post("", response_model=Ingredient, status_code=status.HTTP_201_CREATED)
async def create_ingredient(body: NameRequest, service: IngredientServiceDep) -> Ingredient:
    return await service.create(body.to_ingredient())


@router.put("/{ingredient_id}", response_model=Ingredient)
async def replace_ingredient(
    ingredient_id: str, body: NameRequest, service: IngredientServiceDep
) -> Ingredient:
    return await service.update(body.to_ingredient(ingredient_id))


@router.delete("/{ingredient_id}", response_model=DeleteResponse)
async def delete_ingredient(ingredient_id: str, service: IngredientServiceDep) -> DeleteResponse:
    """Soft-delete an ingredient; it drops out of every recipe that used it."""
    return DeleteResponse(id=await service.delete(ingredient_id))
