"""Pytest configuration and shared fixtures."""

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock

import pytest

from foodgraph.graph.models import RECIPE_LABEL, ContainsIngredient, Recipe
from foodgraph.graph.repository import IngredientRepository, RecipeRepository

# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (require a running Neo4j)"
    )
    config.addinivalue_line("markers", "slow: marks tests as slow running")


# =============================================================================
# Domain Fixtures
# =============================================================================


def edge(ingredient_id: str, unit: str, amount: int) -> ContainsIngredient:
    """Shorthand for a ContainsIngredient without timestamps."""
    return ContainsIngredient(ingredient_id=ingredient_id, unit=unit, amount=amount)


@pytest.fixture
def known_ingredient_ids():
    """Ids of live ingredients in the fake store."""
    return {"ing-a", "ing-b", "ing-c"}


@pytest.fixture
def stored_recipe():
    """A persisted recipe with two ingredient edges."""
    return Recipe(
        id="grn:tm-food:recipe:resource:abc123",
        title="Onion soup",
        description="Slow cooked",
        steps=["slice onions", "cook for an hour"],
        ingredients=[edge("ing-a", "g", 10), edge("ing-b", "cup", 1)],
    )


# =============================================================================
# Neo4j Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_neo4j_driver():
    """Mock Neo4j async driver with one session and one transaction."""
    driver = AsyncMock()
    driver.verify_connectivity = AsyncMock()
    driver.close = AsyncMock()

    tx = AsyncMock()
    session = AsyncMock()
    session.begin_transaction = AsyncMock(return_value=tx)
    driver.session = MagicMock(return_value=session)

    return driver


class FakeGraphDatabase:
    """Stand-in for GraphDatabase that records commits and rollbacks."""

    def __init__(self):
        self.tx = MagicMock(name="tx")
        self.committed = 0
        self.rolled_back = 0

    @asynccontextmanager
    async def transaction(self, database=None):
        try:
            yield self.tx
        except Exception:
            self.rolled_back += 1
            raise
        self.committed += 1


@pytest.fixture
def fake_db():
    return FakeGraphDatabase()


@pytest.fixture
def recipe_repo():
    """RecipeRepository with every store call mocked."""
    repo = MagicMock(spec=RecipeRepository)
    repo.label = RECIPE_LABEL
    repo.fetch_all = AsyncMock(return_value=[])
    repo.fetch_by_id = AsyncMock(return_value=None)
    repo.insert = AsyncMock(side_effect=lambda tx, node: node)
    repo.update_fields = AsyncMock(side_effect=lambda tx, node, now: node)
    repo.apply_mutations = AsyncMock(
        side_effect=lambda tx, recipe_id, mutations, now: len(mutations)
    )
    repo.soft_delete = AsyncMock(return_value=None)
    return repo


@pytest.fixture
def ingredient_repo(known_ingredient_ids):
    """IngredientRepository that resolves ids against ``known_ingredient_ids``."""

    async def live_ids(tx, ids):
        return set(ids) & known_ingredient_ids

    repo = MagicMock(spec=IngredientRepository)
    repo.live_ids = AsyncMock(side_effect=live_ids)
    return repo
