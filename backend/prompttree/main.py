"""Prompt Tree FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from prompttree.auth import require_api_key
from prompttree.config import load_settings
from prompttree.db.connection import Database
from prompttree.db.repository import PromptRepository
from prompttree.db.seed import seed_if_empty
from prompttree.errors import PersistError
from prompttree.events.notifier import ChangeNotifier
from prompttree.events.router import get_notifier
from prompttree.events.router import router as events_router
from prompttree.prompts.router import get_prompt_service
from prompttree.prompts.router import router as prompts_router
from prompttree.prompts.service import PromptService
from prompttree.tree.assembler import TreeAssembler
from prompttree.tree.importer import TreeImporter
from prompttree.tree.registry import SavedTreeRegistry
from prompttree.tree.router import (
    get_saved_tree_registry,
    get_tree_assembler,
    get_tree_importer,
)
from prompttree.tree.router import router as tree_router

logger = logging.getLogger(__name__)

# .env lives in the backend/ directory
load_dotenv(Path(__file__).resolve().parent.parent / ".env")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage database lifecycle and service wiring."""
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    db = await Database.connect(settings.database_path)
    logger.info("Connected to database at %s", settings.database_path)

    repo = PromptRepository(db)
    notifier = ChangeNotifier(queue_size=settings.subscriber_queue_size)
    assembler = TreeAssembler(repo)
    importer = TreeImporter(db, repo, notifier)
    registry = SavedTreeRegistry(repo, assembler, importer)
    prompt_service = PromptService(repo, notifier)

    if settings.seed_on_startup:
        await seed_if_empty(repo, importer)

    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_tree_assembler] = lambda: assembler
    app.dependency_overrides[get_tree_importer] = lambda: importer
    app.dependency_overrides[get_saved_tree_registry] = lambda: registry
    app.dependency_overrides[get_prompt_service] = lambda: prompt_service

    app.state.settings = settings
    app.state.db = db
    if settings.api_key:
        logger.info("API key required for requests from non-whitelisted origins")
    yield

    await db.close()


app = FastAPI(
    title="Prompt Tree API",
    description="API for exploring and annotating hierarchical prompt trees",
    version="1.0.0",
    lifespan=lifespan,
)

_startup_settings = load_settings()

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(_startup_settings.allowed_origins),
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

_protected = [Depends(require_api_key)]
app.include_router(tree_router, dependencies=_protected)
app.include_router(prompts_router, dependencies=_protected)
app.include_router(events_router, dependencies=_protected)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    messages = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        messages.append(f"{location}: {err.get('msg')}" if location else err.get("msg"))
    return JSONResponse(status_code=400, content={"error": "; ".join(messages)})


@app.exception_handler(PersistError)
async def persist_exception_handler(request: Request, exc: PersistError) -> JSONResponse:
    logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"error": str(exc)})


@app.get("/health")
async def health() -> dict:
    return {"status": "ok", "message": "Prompt Tree API is running"}


if __name__ == "__main__":
    import argparse

    import uvicorn

    parser = argparse.ArgumentParser(description="Run the Prompt Tree API")
    parser.add_argument("--port", type=int, default=_startup_settings.port, help="Port to run the service on")
    parser.add_argument("--host", type=str, default=_startup_settings.host, help="Host to bind to")
    args = parser.parse_args()

    uvicorn.run(app, host=args.host, port=args.port)
