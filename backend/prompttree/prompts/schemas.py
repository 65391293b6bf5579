"""Request and response schemas for prompt, node and note endpoints."""

from pydantic import BaseModel, Field

# -- Requests --


class CreatePromptRequest(BaseModel):
    title: str = Field(min_length=1)
    description: str = ""


class UpdatePromptRequest(BaseModel):
    """Fields to update on a prompt. Only fields present in the request body are changed."""

    title: str | None = Field(default=None, min_length=1)
    description: str | None = None


class CreateNodeRequest(BaseModel):
    name: str = Field(min_length=1)
    action: str = ""


class UpdateNodeRequest(BaseModel):
    """Fields to update on a node. Only fields present in the request body are changed."""

    name: str | None = Field(default=None, min_length=1)
    action: str | None = None


class CreateNoteRequest(BaseModel):
    content: str = Field(min_length=1)


class UpdateNoteRequest(BaseModel):
    content: str = Field(min_length=1)


# -- Responses --


class PromptResponse(BaseModel):
    id: int
    title: str
    description: str
    project_name: str


class NodeResponse(BaseModel):
    id: int
    prompt_id: int
    name: str
    action: str


class NoteResponse(BaseModel):
    id: int
    prompt_id: int
    content: str
    created_at: str
