"""Saved-tree registry: named snapshots of the live tree.

Loading a snapshot is a full replace through TreeImporter, with the same
consequences as a direct import (prompts, nodes and notes are rebuilt).
"""

import json
import logging
from datetime import UTC, datetime

import pydantic

from prompttree.db.repository import PromptRepository
from prompttree.errors import PersistError, SavedTreeNotFoundError, ValidationError
from prompttree.tree.assembler import TreeAssembler
from prompttree.tree.importer import TreeImporter
from prompttree.tree.schemas import SavedTreeInfo, Tree

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(UTC).isoformat()


def _require_name(name: str) -> None:
    if not name:
        raise ValidationError("name is required")


class SavedTreeRegistry:
    def __init__(
        self,
        repo: PromptRepository,
        assembler: TreeAssembler,
        importer: TreeImporter,
    ) -> None:
        self._repo = repo
        self._assembler = assembler
        self._importer = importer

    async def save(self, name: str) -> None:
        """Snapshot the current tree under ``name``, overwriting any snapshot of that name."""
        _require_name(name)
        tree = await self._assembler.get_tree()
        tree_data = json.dumps(tree.model_dump(mode="json", by_alias=True))
        await self._repo.upsert_saved_tree(name, tree_data, _now())
        logger.info("Saved tree %r (%d prompts)", name, len(tree.prompts))

    async def load(self, name: str) -> Tree:
        """Replace the live tree with the snapshot stored under ``name``."""
        _require_name(name)
        row = await self._repo.get_saved_tree(name)
        if row is None:
            raise SavedTreeNotFoundError(name)

        try:
            tree = Tree.model_validate_json(row["tree_data"])
        except pydantic.ValidationError as e:
            raise PersistError(f"saved tree {name!r} is unreadable: {e}") from e

        await self._importer.import_tree(tree)
        logger.info("Loaded saved tree %r", name)
        return tree

    async def list_trees(self) -> list[SavedTreeInfo]:
        """All snapshots' metadata, most recently updated first."""
        rows = await self._repo.list_saved_trees()
        return [
            SavedTreeInfo(
                name=row["name"],
                created_at=row["created_at"],
                updated_at=row["updated_at"],
            )
            for row in rows
        ]

    async def delete(self, name: str) -> None:
        _require_name(name)
        if not await self._repo.delete_saved_tree(name):
            raise SavedTreeNotFoundError(name)
        logger.info("Deleted saved tree %r", name)
