"""Request and response schemas for the whole-tree endpoints."""

from pydantic import BaseModel, ConfigDict, Field


class TreeNode(BaseModel):
    id: int | None = None
    name: str = ""
    action: str = ""


class TreePrompt(BaseModel):
    id: int | None = None
    title: str = ""
    description: str = ""
    nodes: list[TreeNode] = Field(default_factory=list)


class Tree(BaseModel):
    """The full assembled hierarchy. Collections are never null."""

    model_config = ConfigDict(populate_by_name=True)

    project: str = ""
    main_request: str = Field(default="", alias="mainRequest")
    prompts: list[TreePrompt] = Field(default_factory=list)


# -- Requests --


class ImportTreeRequest(BaseModel):
    tree: Tree


class SaveTreeRequest(BaseModel):
    name: str = ""


# -- Responses --


class MessageResponse(BaseModel):
    message: str


class SavedTreeInfo(BaseModel):
    name: str
    created_at: str
    updated_at: str


class SavedTreeListResponse(BaseModel):
    trees: list[SavedTreeInfo]
