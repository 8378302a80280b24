"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from recipes_api.api import recipes, users
from recipes_api.api.dependencies import TOKEN_HEADER
from recipes_api.config import get_settings
from recipes_api.database import init_db
from recipes_api.exceptions import RecipesApiError

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    init_db()
    logger.info(f"Recipes API started ({settings.environment})")
    yield


app = FastAPI(
    title="Recipes API",
    description="User-scoped recipe management with token authentication",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware for development
if settings.is_development:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[TOKEN_HEADER],
    )


@app.exception_handler(RecipesApiError)
async def handle_recipes_api_error(request: Request, exc: RecipesApiError):
    """Render application errors as structured JSON with their status code."""
    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=exc.headers)


# Register routers
app.include_router(users.router)
app.include_router(recipes.router)

# Uploaded images are served as-is; the directory must exist before mounting
Path(settings.image_dir).mkdir(parents=True, exist_ok=True)
app.mount("/recipe-images", StaticFiles(directory=settings.image_dir), name="recipe-images")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "environment": settings.environment}
