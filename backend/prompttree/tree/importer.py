"""Tree importer: validates a Tree and replaces the live tree with it atomically."""

import logging

from prompttree.db.connection import Database
from prompttree.db.repository import PromptRepository
from prompttree.errors import PersistError, ValidationError
from prompttree.events.notifier import ChangeNotifier
from prompttree.tree.schemas import Tree

logger = logging.getLogger(__name__)


def validate_tree(tree: Tree) -> None:
    """Raise ValidationError naming the first missing field. Touches no storage."""
    if not tree.project:
        raise ValidationError("project name is required")
    if not tree.prompts:
        raise ValidationError("at least one prompt is required")
    for prompt in tree.prompts:
        if not prompt.title:
            raise ValidationError("all prompts must have a title")
        for node in prompt.nodes:
            if not node.name:
                raise ValidationError("all nodes must have a name")


class TreeImporter:
    """Full replace of project settings, prompts and nodes in one transaction.

    Existing prompts are deleted, and with them (by cascade) their nodes
    and notes. Incoming prompt and node ids are ignored; the store assigns
    fresh ones. Saved-tree snapshots are not touched.
    """

    def __init__(
        self,
        db: Database,
        repo: PromptRepository,
        notifier: ChangeNotifier | None = None,
    ) -> None:
        self._db = db
        self._repo = repo
        self._notifier = notifier

    async def import_tree(self, tree: Tree) -> None:
        validate_tree(tree)

        logger.info(
            "Importing tree with project: %s, prompts: %d",
            tree.project, len(tree.prompts),
        )
        try:
            async with self._db.transaction() as tx:
                await self._repo.upsert_project_settings(
                    tree.project, tree.main_request, conn=tx,
                )
                await self._repo.clear_prompts(conn=tx)
                for prompt in tree.prompts:
                    prompt_id = await self._repo.insert_prompt(
                        prompt.title, prompt.description, tree.project, conn=tx,
                    )
                    for node in prompt.nodes:
                        await self._repo.insert_node(
                            prompt_id, node.name, node.action, conn=tx,
                        )
        except PersistError:
            logger.exception("Tree import failed, transaction rolled back")
            raise
        logger.info("Tree imported successfully")

        if self._notifier is not None:
            self._notifier.tree_changed()
