"""Prompt service: CRUD for prompts and the nodes and notes they own."""

from prompttree.db.repository import Patch, PromptRepository
from prompttree.db.schema import DEFAULT_PROJECT_NAME
from prompttree.errors import NodeNotFoundError, NoteNotFoundError, PromptNotFoundError
from prompttree.events.notifier import ChangeNotifier
from prompttree.prompts.schemas import (
    CreateNodeRequest,
    CreateNoteRequest,
    CreatePromptRequest,
    NodeResponse,
    NoteResponse,
    PromptResponse,
    UpdateNodeRequest,
    UpdateNoteRequest,
    UpdatePromptRequest,
)


def _patch_from(request, columns: tuple[str, ...]) -> Patch:
    """Collect (column, value) pairs for fields explicitly present and non-null."""
    return [
        (column, getattr(request, column))
        for column in columns
        if column in request.model_fields_set and getattr(request, column) is not None
    ]


class PromptService:
    """Existence checks, store calls and change notifications for the CRUD surface."""

    def __init__(self, repo: PromptRepository, notifier: ChangeNotifier) -> None:
        self._repo = repo
        self._notifier = notifier

    # -- Prompts --

    async def get_prompt(self, prompt_id: int) -> PromptResponse:
        row = await self._repo.get_prompt(prompt_id)
        if row is None:
            raise PromptNotFoundError(prompt_id)
        return self._prompt_from_row(row)

    async def create_prompt(self, request: CreatePromptRequest) -> PromptResponse:
        settings = await self._repo.get_project_settings()
        project_name = settings["project_name"] if settings else DEFAULT_PROJECT_NAME
        prompt_id = await self._repo.insert_prompt(
            request.title, request.description, project_name,
        )
        self._notifier.tree_changed()
        return PromptResponse(
            id=prompt_id,
            title=request.title,
            description=request.description,
            project_name=project_name,
        )

    async def update_prompt(
        self, prompt_id: int, request: UpdatePromptRequest
    ) -> PromptResponse:
        if not await self._repo.prompt_exists(prompt_id):
            raise PromptNotFoundError(prompt_id)
        await self._repo.update_prompt(
            prompt_id, _patch_from(request, ("title", "description"))
        )
        row = await self._repo.get_prompt(prompt_id)
        if row is None:
            raise PromptNotFoundError(prompt_id)
        self._notifier.prompt_changed(prompt_id)
        return self._prompt_from_row(row)

    async def delete_prompt(self, prompt_id: int) -> None:
        """Delete a prompt; its nodes and notes are removed by cascade."""
        if not await self._repo.prompt_exists(prompt_id):
            raise PromptNotFoundError(prompt_id)
        await self._repo.delete_prompt(prompt_id)
        self._notifier.tree_changed()

    # -- Nodes --

    async def get_prompt_nodes(self, prompt_id: int) -> list[NodeResponse]:
        if not await self._repo.prompt_exists(prompt_id):
            raise PromptNotFoundError(prompt_id)
        rows = await self._repo.list_nodes(prompt_id)
        return [self._node_from_row(r) for r in rows]

    async def create_node(
        self, prompt_id: int, request: CreateNodeRequest
    ) -> NodeResponse:
        if not await self._repo.prompt_exists(prompt_id):
            raise PromptNotFoundError(prompt_id)
        node_id = await self._repo.insert_node(prompt_id, request.name, request.action)
        self._notifier.node_changed(prompt_id)
        return NodeResponse(
            id=node_id, prompt_id=prompt_id, name=request.name, action=request.action,
        )

    async def update_node(
        self, prompt_id: int, node_id: int, request: UpdateNodeRequest
    ) -> NodeResponse:
        if await self._repo.get_node(prompt_id, node_id) is None:
            raise NodeNotFoundError(node_id)
        await self._repo.update_node(node_id, _patch_from(request, ("name", "action")))
        row = await self._repo.get_node(prompt_id, node_id)
        if row is None:
            raise NodeNotFoundError(node_id)
        self._notifier.node_changed(prompt_id)
        return self._node_from_row(row)

    async def delete_node(self, prompt_id: int, node_id: int) -> None:
        if await self._repo.get_node(prompt_id, node_id) is None:
            raise NodeNotFoundError(node_id)
        await self._repo.delete_node(node_id)
        self._notifier.node_changed(prompt_id)

    # -- Notes --

    async def get_notes(self, prompt_id: int) -> list[NoteResponse]:
        if not await self._repo.prompt_exists(prompt_id):
            raise PromptNotFoundError(prompt_id)
        rows = await self._repo.list_notes(prompt_id)
        return [self._note_from_row(r) for r in rows]

    async def create_note(
        self, prompt_id: int, request: CreateNoteRequest
    ) -> NoteResponse:
        if not await self._repo.prompt_exists(prompt_id):
            raise PromptNotFoundError(prompt_id)
        note_id = await self._repo.insert_note(prompt_id, request.content)
        row = await self._repo.get_note(prompt_id, note_id)
        assert row is not None
        self._notifier.note_changed(prompt_id)
        return self._note_from_row(row)

    async def update_note(
        self, prompt_id: int, note_id: int, request: UpdateNoteRequest
    ) -> NoteResponse:
        """Replace a note's content. created_at is left as it was."""
        if await self._repo.get_note(prompt_id, note_id) is None:
            raise NoteNotFoundError(note_id)
        await self._repo.update_note(note_id, [("content", request.content)])
        row = await self._repo.get_note(prompt_id, note_id)
        if row is None:
            raise NoteNotFoundError(note_id)
        self._notifier.note_changed(prompt_id)
        return self._note_from_row(row)

    async def delete_note(self, prompt_id: int, note_id: int) -> None:
        if await self._repo.get_note(prompt_id, note_id) is None:
            raise NoteNotFoundError(note_id)
        await self._repo.delete_note(note_id)
        self._notifier.note_changed(prompt_id)

    @staticmethod
    def _prompt_from_row(row: dict) -> PromptResponse:
        return PromptResponse(
            id=row["id"],
            title=row["title"],
            description=row["description"] or "",
            project_name=row["project_name"] or "",
        )

    @staticmethod
    def _node_from_row(row: dict) -> NodeResponse:
        return NodeResponse(
            id=row["id"],
            prompt_id=row["prompt_id"],
            name=row["name"],
            action=row["action"] or "",
        )

    @staticmethod
    def _note_from_row(row: dict) -> NoteResponse:
        return NoteResponse(
            id=row["id"],
            prompt_id=row["prompt_id"],
            content=row["content"],
            created_at=row["created_at"],
        )
