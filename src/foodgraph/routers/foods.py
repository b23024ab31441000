"""API routes for foods."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from foodgraph.exceptions import NotFoundError
from foodgraph.graph.database import GraphDatabase, get_graph_db
from foodgraph.graph.models import FOOD_LABEL, Food
from foodgraph.graph.service import FoodService
from foodgraph.schemas import DeleteResponse, FoodListResponse, NameRequest

router = APIRouter(prefix="/food", tags=["foods"])


async def get_food_service(db: Annotated[GraphDatabase, Depends(get_graph_db)]) -> FoodService:
    return FoodService(db)


FoodServiceDep = Annotated[FoodService, Depends(get_food_service)]


@router.get("", response_model=FoodListResponse)
async def list_foods(service: FoodServiceDep) -> FoodListResponse:
    """List all live foods."""
    return FoodListResponse(foods=await service.get_all())


@router.get("/{food_id}", response_model=Food)
async def get_food(food_id: str, service: FoodServiceDep) -> Food:
    food = await service.get_by_id(food_id)
    if food is None:
        raise NotFoundError(FOOD_LABEL, food_id)
    return food


@router.post("", response_model=Food, status_code=status.HTTP_201_CREATED)
async def create_food(body: NameRequest, service: FoodServiceDep) -> Food:
    return await service.create(body.to_food())


@router.put("/{food_id}", response_model=Food)
async def replace_food(food_id: str, body: NameRequest, service: FoodServiceDep) -> Food:
    return await service.update(body.to_food(food_id))


@router.delete("/{food_id}", response_model=DeleteResponse)
async def delete_food(food_id: str, service: FoodServiceDep) -> DeleteResponse:
    return DeleteResponse(id=await service.delete(food_id))
