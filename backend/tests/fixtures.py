"""Shared test helpers."""

from typing import Any

from httpx import AsyncClient

from prompttree.tree.schemas import Tree


def make_tree_payload(
    project: str = "P",
    main_request: str = "M",
    prompts: list[dict[str, Any]] | None = None,
) -> dict:
    """Build an import body in wire format (``mainRequest`` key)."""
    if prompts is None:
        prompts = [
            {
                "title": "A",
                "description": "first",
                "nodes": [
                    {"name": "n1", "action": "a1"},
                    {"name": "n2", "action": "a2"},
                ],
            },
            {"title": "B", "description": "", "nodes": []},
        ]
    return {"project": project, "mainRequest": main_request, "prompts": prompts}


def make_tree(**kwargs: Any) -> Tree:
    return Tree.model_validate(make_tree_payload(**kwargs))


def tree_shape(tree: dict | Tree) -> tuple:
    """Everything about a tree except its ids, for comparing across imports."""
    if isinstance(tree, Tree):
        tree = tree.model_dump(by_alias=True)
    return (
        tree["project"],
        tree["mainRequest"],
        [
            (
                p["title"],
                p["description"],
                [(n["name"], n["action"]) for n in p["nodes"]],
            )
            for p in tree["prompts"]
        ],
    )


async def create_test_prompt(
    client: AsyncClient,
    title: str = "Test Prompt",
    description: str = "A prompt for testing",
) -> dict:
    """Create a prompt via the API and return the response JSON."""
    resp = await client.post("/prompts/0", json={
        "title": title,
        "description": description,
    })
    assert resp.status_code == 201
    return resp.json()


async def create_prompt_with_children(
    client: AsyncClient,
    n_nodes: int = 2,
    n_notes: int = 2,
) -> dict:
    """Create a prompt with N nodes and M notes.

    Returns {"prompt_id": int, "node_ids": [int, ...], "note_ids": [int, ...]}
    in creation order.
    """
    prompt = await create_test_prompt(client)
    prompt_id = prompt["id"]

    node_ids: list[int] = []
    for i in range(n_nodes):
        resp = await client.post(f"/prompts/{prompt_id}/nodes", json={
            "name": f"Node {i + 1}",
            "action": f"Do step {i + 1}",
        })
        assert resp.status_code == 201
        node_ids.append(resp.json()["id"])

    note_ids: list[int] = []
    for i in range(n_notes):
        resp = await client.post(f"/prompts/{prompt_id}/notes", json={
            "content": f"Note {i + 1}",
        })
        assert resp.status_code == 201
        note_ids.append(resp.json()["id"])

    return {"prompt_id": prompt_id, "node_ids": node_ids, "note_ids": note_ids}
