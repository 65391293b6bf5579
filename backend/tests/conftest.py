"""Shared pytest fixtures for Prompt Tree tests."""

import pytest
from httpx import ASGITransport, AsyncClient

from prompttree.db.connection import Database
from prompttree.db.repository import PromptRepository
from prompttree.events.notifier import ChangeNotifier
from prompttree.events.router import get_notifier
from prompttree.main import app
from prompttree.prompts.router import get_prompt_service
from prompttree.prompts.service import PromptService
from prompttree.tree.assembler import TreeAssembler
from prompttree.tree.importer import TreeImporter
from prompttree.tree.registry import SavedTreeRegistry
from prompttree.tree.router import (
    get_saved_tree_registry,
    get_tree_assembler,
    get_tree_importer,
)


@pytest.fixture
async def db():
    """In-memory database for tests."""
    database = await Database.connect(":memory:")
    yield database
    await database.close()


@pytest.fixture
async def repo(db):
    return PromptRepository(db)


@pytest.fixture
def notifier():
    return ChangeNotifier(queue_size=8)


@pytest.fixture
async def assembler(repo):
    return TreeAssembler(repo)


@pytest.fixture
async def importer(db, repo, notifier):
    return TreeImporter(db, repo, notifier)


@pytest.fixture
async def registry(repo, assembler, importer):
    return SavedTreeRegistry(repo, assembler, importer)


@pytest.fixture
async def prompt_service(repo, notifier):
    return PromptService(repo, notifier)


@pytest.fixture
async def client(notifier, assembler, importer, registry, prompt_service):
    """Async test client with in-memory DB wired into the app."""
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_tree_assembler] = lambda: assembler
    app.dependency_overrides[get_tree_importer] = lambda: importer
    app.dependency_overrides[get_saved_tree_registry] = lambda: registry
    app.dependency_overrides[get_prompt_service] = lambda: prompt_service
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client
    app.dependency_overrides.clear()
