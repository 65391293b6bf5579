"""Tree assembler: the read path that composes the full hierarchy."""

import logging

from prompttree.db.repository import PromptRepository
from prompttree.db.schema import DEFAULT_MAIN_REQUEST, DEFAULT_PROJECT_NAME
from prompttree.errors import PersistError
from prompttree.tree.schemas import Tree, TreeNode, TreePrompt

logger = logging.getLogger(__name__)


class TreeAssembler:
    """Builds the Tree view from prompts, their nodes and the project settings."""

    def __init__(self, repo: PromptRepository) -> None:
        self._repo = repo

    async def get_tree(self) -> Tree:
        """Read all prompts (ascending id) and, per prompt, its nodes (ascending id).

        One query for prompts plus one per prompt. If the project settings
        cannot be read, the default project name and request are used instead
        of failing the call.
        """
        prompts: list[TreePrompt] = []
        for row in await self._repo.list_prompts():
            node_rows = await self._repo.list_nodes(row["id"])
            prompts.append(TreePrompt(
                id=row["id"],
                title=row["title"],
                description=row["description"] or "",
                nodes=[
                    TreeNode(id=n["id"], name=n["name"], action=n["action"] or "")
                    for n in node_rows
                ],
            ))

        project, main_request = await self._project_metadata()
        return Tree(project=project, main_request=main_request, prompts=prompts)

    async def _project_metadata(self) -> tuple[str, str]:
        try:
            settings = await self._repo.get_project_settings()
        except PersistError as e:
            logger.warning("Failed to read project settings, using defaults: %s", e)
            return DEFAULT_PROJECT_NAME, DEFAULT_MAIN_REQUEST
        if settings is None:
            logger.warning("Project settings row missing, using defaults")
            return DEFAULT_PROJECT_NAME, DEFAULT_MAIN_REQUEST
        return settings["project_name"], settings["main_request"]
