"""Request and response schemas for the HTTP surface."""

from pydantic import BaseModel, Field, field_validator

from foodgraph.graph.models import (
    MAX_STORED_INT,
    ContainsIngredient,
    Food,
    Ingredient,
    Recipe,
    RecipePatch,
)


def _clean(value: str | None, field_name: str) -> str | None:
    if value is None:
        return None
    value = value.strip()
    if not value:
        raise ValueError(f"{field_name} must not be blank")
    return value


class NameRequest(BaseModel):
    """Create or replace a named entity (food or ingredient)."""

    name: str

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return _clean(v, "name")

    def to_food(self, food_id: str = "") -> Food:
        return Food(id=food_id, name=self.name)

    def to_ingredient(self, ingredient_id: str = "") -> Ingredient:
        return Ingredient(id=ingredient_id, name=self.name)


class IngredientLine(BaseModel):
    """One desired ingredient edge of a recipe."""

    ingredient_id: str
    unit: str
    amount: int = Field(ge=0, le=MAX_STORED_INT)

    @field_validator("ingredient_id", "unit")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()

    def to_edge(self) -> ContainsIngredient:
        return ContainsIngredient(
            ingredient_id=self.ingredient_id, unit=self.unit, amount=self.amount
        )


class CreateRecipeRequest(BaseModel):
    """Full recipe body, used for create (POST) and replace (PUT)."""

    title: str
    description: str | None = None
    steps: list[str] = Field(default_factory=list)
    ingredients: list[IngredientLine] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        return _clean(v, "title")

    @field_validator("description")
    @classmethod
    def strip_description(cls, v: str | None) -> str | None:
        return v.strip() if v is not None else None

    def to_recipe(self, recipe_id: str = "") -> Recipe:
        # every mutable field is passed explicitly so a replace overwrites all of them
        return Recipe(
            id=recipe_id,
            title=self.title,
            description=self.description,
            steps=self.steps,
            ingredients=[line.to_edge() for line in self.ingredients],
        )


class UpdateRecipeRequest(BaseModel):
    """Partial recipe body (PATCH)."""

    title: str | None = None
    description: str | None = None
    steps: list[str] | None = None
    ingredients: list[IngredientLine] | None = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str | None) -> str | None:
        return _clean(v, "title")

    @field_validator("description")
    @classmethod
    def strip_description(cls, v: str | None) -> str | None:
        return v.strip() if v is not None else None

    def to_patch(self) -> RecipePatch:
        return RecipePatch(
            title=self.title,
            description=self.description,
            steps=self.steps,
            ingredients=(
                [line.to_edge() for line in self.ingredients]
                if self.ingredients is not None
                else None
            ),
        )


class FoodListResponse(BaseModel):
    foods: list[Food]


class IngredientListResponse(BaseModel):
    ingredients: list[Ingredient]


class RecipeListResponse(BaseModel):
    recipes: list[Recipe]


class DeleteResponse(BaseModel):
    id: str
