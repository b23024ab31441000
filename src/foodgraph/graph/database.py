"""Neo4j database connection and transaction management."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from neo4j import AsyncDriver, AsyncGraphDatabase, AsyncSession, AsyncTransaction
from neo4j.exceptions import DriverError, Neo4jError

from foodgraph.config import get_settings
from foodgraph.exceptions import StoreError
from foodgraph.graph.models import BaseNode, Food, Ingredient, Recipe
from foodgraph.logging_config import get_logger

logger = get_logger(__name__)

STORE_ERRORS = (Neo4jError, DriverError)


class GraphDatabase:
    """Neo4j database connection manager."""

    def __init__(
        self,
        uri: str | None = None,
        user: str | None = None,
        password: str | None = None,
        database: str | None = None,
    ):
        settings = get_settings()
        self.uri = uri or settings.neo4j_uri
        self.user = user or settings.neo4j_user
        self.password = password or settings.neo4j_password
        self.database = database or settings.neo4j_database
        self._driver: AsyncDriver | None = None

    async def connect(self) -> None:
        """Establish connection to Neo4j."""
        if self._driver is None:
            logger.info(f"Connecting to Neo4j at {self.uri}")
            driver = AsyncGraphDatabase.driver(
                self.uri,
                auth=(self.user, self.password),
            )
            try:
                await driver.verify_connectivity()
            except STORE_ERRORS as e:
                await driver.close()
                raise StoreError(f"Cannot connect to Neo4j at {self.uri}: {e}") from e
            self._driver = driver
            logger.info("Neo4j connection established")

    async def close(self) -> None:
        """Close the Neo4j connection."""
        if self._driver:
            logger.info("Closing Neo4j connection")
            await self._driver.close()
            self._driver = None

    @property
    def driver(self) -> AsyncDriver:
        """Get the Neo4j driver instance."""
        if self._driver is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self._driver

    @asynccontextmanager
    async def session(self, database: str | None = None) -> AsyncIterator[AsyncSession]:
        """Get a database session as async context manager."""
        session = self.driver.session(database=database or self.database)
        try:
            yield session
        finally:
            await session.close()

    @asynccontextmanager
    async def transaction(self, database: str | None = None) -> AsyncIterator[AsyncTransaction]:
        """
        Run a block inside one explicit transaction.

        Commits when the block exits cleanly and rolls back on any exception.
        Driver failures surface as StoreError; nothing is retried.
        """
        try:
            async with self.session(database) as session:
                tx = await session.begin_transaction()
                try:
                    yield tx
                    await tx.commit()
                finally:
                    # no-op after a successful commit, rollback otherwise
                    await tx.close()
        except STORE_ERRORS as e:
            logger.error(f"Graph transaction failed: {e}")
            raise StoreError(f"Graph transaction failed: {e}") from e

    async def execute_query(
        self,
        query: str,
        parameters: dict[str, Any] | None = None,
        database: str | None = None,
    ) -> list[dict[str, Any]]:
        """
        Execute a Cypher query and return results.

        Args:
            query: Cypher query string.
            parameters: Query parameters.
            database: Database name.

        Returns:
            List of result records as dictionaries.
        """
        async with self.transaction(database) as tx:
            result = await tx.run(query, parameters or {})
            return await result.data()

    async def execute_write(
        self,
        query: str,
        parameters: dict[str, Any] | None = None,
        database: str | None = None,
    ) -> dict[str, Any]:
        """
        Execute a write query and return summary.

        Returns:
            Query execution summary with counters.
        """
        async with self.transaction(database) as tx:
            result = await tx.run(query, parameters or {})
            summary = await result.consume()
            return {
                "nodes_created": summary.counters.nodes_created,
                "relationships_created": summary.counters.relationships_created,
                "properties_set": summary.counters.properties_set,
            }

    async def health_check(self) -> bool:
        """Check if Neo4j is reachable and responsive."""
        try:
            if self._driver is None:
                await self.connect()
            await self.driver.verify_connectivity()
            return True
        except (StoreError, *STORE_ERRORS) as e:
            logger.warning(f"Neo4j health check failed: {e}")
            return False

    async def setup_constraints(self) -> None:
        """Create a unique id constraint for every entity label."""
        node_types: tuple[type[BaseNode], ...] = (Food, Ingredient, Recipe)

        logger.info("Setting up Neo4j constraints")
        for node_type in node_types:
            label = node_type.LABELS[0]
            await self.execute_write(
                f"CREATE CONSTRAINT {label.lower()}_id IF NOT EXISTS "
                f"FOR (n:`{label}`) REQUIRE n.id IS UNIQUE"
            )

        logger.info("Neo4j constraints configured")

    async def __aenter__(self) -> "GraphDatabase":
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit."""
        await self.close()


# Global instance for dependency injection
_graph_db: GraphDatabase | None = None


async def get_graph_db() -> GraphDatabase:
    """
    Get the global GraphDatabase instance.

    Creates and connects if not already initialized.
    """
    global _graph_db
    if _graph_db is None:
        db = GraphDatabase()
        await db.connect()
        _graph_db = db
    return _graph_db


async def close_graph_db() -> None:
    """Close the global GraphDatabase instance."""
    global _graph_db
    if _graph_db is not None:
        await _graph_db.close()
        _graph_db = None
