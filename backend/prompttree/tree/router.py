"""FastAPI routes for whole-tree view, import/export and saved trees."""

from fastapi import APIRouter, Depends, HTTPException, Response, status

from prompttree.errors import SavedTreeNotFoundError, ValidationError
from prompttree.tree.assembler import TreeAssembler
from prompttree.tree.importer import TreeImporter
from prompttree.tree.registry import SavedTreeRegistry
from prompttree.tree.schemas import (
    ImportTreeRequest,
    MessageResponse,
    SavedTreeListResponse,
    SaveTreeRequest,
    Tree,
)

router = APIRouter(prefix="/tree", tags=["tree"])


def get_tree_assembler() -> TreeAssembler:
    """Dependency placeholder, replaced at app startup."""
    raise RuntimeError("TreeAssembler not initialized")


def get_tree_importer() -> TreeImporter:
    """Dependency placeholder, replaced at app startup."""
    raise RuntimeError("TreeImporter not initialized")


def get_saved_tree_registry() -> SavedTreeRegistry:
    """Dependency placeholder, replaced at app startup."""
    raise RuntimeError("SavedTreeRegistry not initialized")


@router.get("")
async def get_tree(
    assembler: TreeAssembler = Depends(get_tree_assembler),
) -> Tree:
    return await assembler.get_tree()


@router.get("/export")
async def export_tree(
    assembler: TreeAssembler = Depends(get_tree_assembler),
) -> Tree:
    return await assembler.get_tree()


@router.post("/import", status_code=status.HTTP_201_CREATED)
async def import_tree(
    request: ImportTreeRequest,
    importer: TreeImporter = Depends(get_tree_importer),
) -> MessageResponse:
    try:
        await importer.import_tree(request.tree)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return MessageResponse(message="Tree imported successfully")


@router.post("/save", status_code=status.HTTP_201_CREATED)
async def save_tree(
    request: SaveTreeRequest,
    registry: SavedTreeRegistry = Depends(get_saved_tree_registry),
) -> MessageResponse:
    try:
        await registry.save(request.name)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return MessageResponse(message="Tree saved successfully")


@router.get("/saves")
async def list_saved_trees(
    registry: SavedTreeRegistry = Depends(get_saved_tree_registry),
) -> SavedTreeListResponse:
    return SavedTreeListResponse(trees=await registry.list_trees())


@router.post("/load/{name}", status_code=status.HTTP_201_CREATED)
async def load_tree(
    name: str,
    registry: SavedTreeRegistry = Depends(get_saved_tree_registry),
) -> MessageResponse:
    try:
        await registry.load(name)
    except SavedTreeNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return MessageResponse(message="Tree loaded successfully")


@router.delete("/saves/{name}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_saved_tree(
    name: str,
    registry: SavedTreeRegistry = Depends(get_saved_tree_registry),
) -> Response:
    try:
        await registry.delete(name)
    except SavedTreeNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
