"""Tests for graph database models."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from foodgraph.graph.models import (
    MAX_STORED_INT,
    ContainsIngredient,
    Food,
    Ingredient,
    Recipe,
    RecipePatch,
    parse_relationship,
)

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


class TestFoodAndIngredient:
    """Tests for the simple named nodes."""

    def test_food_to_neo4j(self):
        """Test converting a food to Neo4j properties."""
        food = Food(id="f1", name="Apple", created=T0)

        props = food.to_neo4j_properties()

        assert props == {
            "id": "f1",
            "name": "Apple",
            "created": T0,
            "lastModified": None,
            "deleted": None,
        }

    def test_ingredient_from_neo4j(self):
        ingredient = Ingredient.from_neo4j({"id": "i1", "name": "Salt", "created": T0})

        assert ingredient.id == "i1"
        assert ingredient.name == "Salt"
        assert ingredient.created == T0
        assert ingredient.is_live

    def test_labels(self):
        assert Food.LABELS == ("Food", "Resource")
        assert Ingredient.LABELS == ("Ingredient", "Resource")
        assert Recipe.LABELS == ("Recipe", "Resource")


class TestContainsIngredient:
    """Tests for CONTAINS_INGREDIENT edges."""

    def test_equivalent_ignores_timestamps(self):
        a = ContainsIngredient(ingredient_id="i1", unit="g", amount=10, created=T0)
        b = ContainsIngredient(ingredient_id="i1", unit="g", amount=10)

        assert a.equivalent(b)

    def test_same_attributes(self):
        a = ContainsIngredient(ingredient_id="i1", unit="g", amount=10)

        assert not a.same_attributes(ContainsIngredient(ingredient_id="i1", unit="kg", amount=10))
        assert not a.same_attributes(ContainsIngredient(ingredient_id="i1", unit="g", amount=11))

    @pytest.mark.parametrize("amount", [-1, 10**20])
    def test_amount_outside_storable_range_rejected(self, amount):
        with pytest.raises(ValidationError):
            ContainsIngredient(ingredient_id="i1", unit="g", amount=amount)

    def test_largest_storable_amount_accepted(self):
        edge = ContainsIngredient(ingredient_id="i1", unit="g", amount=MAX_STORED_INT)
        assert edge.amount == 2**63 - 1

    def test_edge_properties_exclude_target(self):
        edge = ContainsIngredient(ingredient_id="i1", unit="g", amount=10)

        props = edge.to_neo4j_properties()

        assert "ingredient_id" not in props
        assert props["unit"] == "g"
        assert props["amount"] == 10

    def test_parse_relationship(self):
        edge = parse_relationship(
            {"unit": "cup", "amount": 2, "ingredient_id": "i9", "created": T0}
        )

        assert edge.ingredient_id == "i9"
        assert edge.unit == "cup"
        assert edge.amount == 2
        assert edge.created == T0


class TestRecipe:
    """Tests for the recipe aggregate."""

    def test_recipe_defaults(self):
        """Test recipe default values."""
        recipe = Recipe(title="Toast")

        assert recipe.id == ""
        assert recipe.description is None
        assert recipe.steps == []
        assert recipe.ingredients == []

    def test_to_neo4j_excludes_ingredients(self):
        recipe = Recipe(
            id="r1",
            title="Soup",
            steps=["boil"],
            ingredients=[ContainsIngredient(ingredient_id="i1", unit="g", amount=1)],
        )

        props = recipe.to_neo4j_properties()

        assert "ingredients" not in props
        assert props["steps"] == ["boil"]

    def test_from_neo4j_with_ingredients(self):
        recipe = Recipe.from_neo4j(
            {"id": "r1", "title": "Soup", "steps": ["boil"], "created": T0},
            ingredients=[{"unit": "g", "amount": 5, "ingredient_id": "i1"}],
        )

        assert recipe.title == "Soup"
        assert recipe.description is None
        assert len(recipe.ingredients) == 1
        assert recipe.ingredients[0].ingredient_id == "i1"

    def test_from_neo4j_without_steps(self):
        recipe = Recipe.from_neo4j({"id": "r1", "title": "Soup"})
        assert recipe.steps == []

    def test_mutable_properties_only_provided_fields(self):
        """Fields the caller left out are not overwritten on update."""
        recipe = Recipe(id="r1", title="Soup")

        assert recipe.mutable_properties() == {"title": "Soup"}

    def test_mutable_properties_include_explicit_none(self):
        recipe = Recipe(id="r1", title="Soup", description=None, steps=[])

        assert recipe.mutable_properties() == {"title": "Soup", "description": None, "steps": []}


class TestRecipePatch:
    """Tests for partial recipe updates."""

    def test_omitted_fields_keep_current_values(self, stored_recipe):
        patched = RecipePatch(title="French onion soup").apply_to(stored_recipe)

        assert patched.title == "French onion soup"
        assert patched.description == stored_recipe.description
        assert patched.steps == stored_recipe.steps
        assert patched.ingredients == stored_recipe.ingredients

    def test_empty_ingredient_list_clears(self, stored_recipe):
        patched = RecipePatch(ingredients=[]).apply_to(stored_recipe)

        assert patched.ingredients == []

    def test_apply_does_not_mutate_current(self, stored_recipe):
        RecipePatch(title="Other").apply_to(stored_recipe)

        assert stored_recipe.title == "Onion soup"

    def test_patched_title_is_written(self, stored_recipe):
        patched = RecipePatch(title="Other").apply_to(stored_recipe)

        assert patched.mutable_properties()["title"] == "Other"
