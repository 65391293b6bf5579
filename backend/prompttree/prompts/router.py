"""FastAPI routes for prompt, node and note CRUD."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, Response, status

from prompttree.errors import NodeNotFoundError, NoteNotFoundError, PromptNotFoundError
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
from prompttree.prompts.service import PromptService

router = APIRouter(prefix="/prompts", tags=["prompts"])

PromptId = Annotated[int, Path(ge=1, description="Prompt ID")]
NodeId = Annotated[int, Path(ge=1, description="Node ID")]
NoteId = Annotated[int, Path(ge=1, description="Note ID")]


def get_prompt_service() -> PromptService:
    """Dependency placeholder, replaced at app startup."""
    raise RuntimeError("PromptService not initialized")


@router.get("/{prompt_id}")
async def get_prompt(
    prompt_id: PromptId,
    service: PromptService = Depends(get_prompt_service),
) -> PromptResponse:
    try:
        return await service.get_prompt(prompt_id)
    except PromptNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{prompt_id}", status_code=status.HTTP_201_CREATED)
async def create_prompt(
    prompt_id: int,
    request: CreatePromptRequest,
    service: PromptService = Depends(get_prompt_service),
) -> PromptResponse:
    # The path id is ignored; the store assigns one.
    return await service.create_prompt(request)


@router.put("/{prompt_id}")
async def update_prompt(
    prompt_id: PromptId,
    request: UpdatePromptRequest,
    service: PromptService = Depends(get_prompt_service),
) -> PromptResponse:
    try:
        return await service.update_prompt(prompt_id, request)
    except PromptNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{prompt_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_prompt(
    prompt_id: PromptId,
    service: PromptService = Depends(get_prompt_service),
) -> Response:
    try:
        await service.delete_prompt(prompt_id)
    except PromptNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# -- Nodes --


@router.get("/{prompt_id}/nodes")
async def get_prompt_nodes(
    prompt_id: PromptId,
    service: PromptService = Depends(get_prompt_service),
) -> list[NodeResponse]:
    try:
        return await service.get_prompt_nodes(prompt_id)
    except PromptNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{prompt_id}/nodes", status_code=status.HTTP_201_CREATED)
async def create_node(
    prompt_id: PromptId,
    request: CreateNodeRequest,
    service: PromptService = Depends(get_prompt_service),
) -> NodeResponse:
    try:
        return await service.create_node(prompt_id, request)
    except PromptNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/{prompt_id}/nodes/{node_id}")
async def update_node(
    prompt_id: PromptId,
    node_id: NodeId,
    request: UpdateNodeRequest,
    service: PromptService = Depends(get_prompt_service),
) -> NodeResponse:
    try:
        return await service.update_node(prompt_id, node_id, request)
    except NodeNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{prompt_id}/nodes/{node_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_node(
    prompt_id: PromptId,
    node_id: NodeId,
    service: PromptService = Depends(get_prompt_service),
) -> Response:
    try:
        await service.delete_node(prompt_id, node_id)
    except NodeNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# -- Notes --


@router.get("/{prompt_id}/notes")
async def get_notes(
    prompt_id: PromptId,
    service: PromptService = Depends(get_prompt_service),
) -> list[NoteResponse]:
    try:
        return await service.get_notes(prompt_id)
    except PromptNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{prompt_id}/notes", status_code=status.HTTP_201_CREATED)
async def create_note(
    prompt_id: PromptId,
    request: CreateNoteRequest,
    service: PromptService = Depends(get_prompt_service),
) -> NoteResponse:
    try:
        return await service.create_note(prompt_id, request)
    except PromptNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/{prompt_id}/notes/{note_id}")
async def update_note(
    prompt_id: PromptId,
    note_id: NoteId,
    request: UpdateNoteRequest,
    service: PromptService = Depends(get_prompt_service),
) -> NoteResponse:
    try:
        return await service.update_note(prompt_id, note_id, request)
    except NoteNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{prompt_id}/notes/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_note(
    prompt_id: PromptId,
    note_id: NoteId,
    service: PromptService = Depends(get_prompt_service),
) -> Response:
    try:
        await service.delete_note(prompt_id, note_id)
    except NoteNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
