"""FastAPI application entry point."""

import uuid
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from foodgraph import __version__
from foodgraph.config import get_settings
from foodgraph.exceptions import FoodGraphError
from foodgraph.graph.database import close_graph_db, get_graph_db
from foodgraph.logging_config import LoggingContext, configure_logging, get_logger
from foodgraph.routers import foods_router, ingredients_router, recipes_router

settings = get_settings()

# Configure logging on module load
configure_logging(settings.log_level)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup and shutdown events."""
    logger.info("Starting Foodgraph API")

    graph_db = await get_graph_db()
    await graph_db.setup_constraints()
    logger.info("Neo4j graph database initialized")

    yield

    logger.info("Shutting down Foodgraph API")
    await close_graph_db()


app = FastAPI(
    title="Foodgraph API",
    description="Recipes, ingredients and foods stored as a labeled graph",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Tag every log line of a request with its request id."""
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    with LoggingContext(request_id=request_id, operation=f"{request.method} {request.url.path}"):
        response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


@app.exception_handler(FoodGraphError)
async def foodgraph_error_handler(request: Request, exc: FoodGraphError) -> JSONResponse:
    if exc.http_status >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(status_code=exc.http_status, content=exc.to_dict())


app.include_router(foods_router)
app.include_router(ingredients_router)
app.include_router(recipes_router)


@app.get("/health")
async def health_check() -> dict:
    """Basic health check endpoint."""
    return {"status": "ok", "service": "foodgraph-api"}


@app.get("/")
async def root() -> dict:
    """Root endpoint with API information."""
    return {
        "name": "Foodgraph API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
    }


def run() -> None:
    """Serve the API with uvicorn."""
    import uvicorn

    uvicorn.run("foodgraph.main:app", host="0.0.0.0", port=8080, reload=settings.is_development)
