"""PromptRepository: every SQL statement the service runs.

No business rules live here. Methods take an optional ``conn`` so that
callers can run several of them inside one ``Database.transaction()``.
"""

from datetime import UTC, datetime
from typing import Any

from prompttree.db.connection import Database, Transaction

Executor = Database | Transaction

# (column, value) pairs for a partial UPDATE. Columns are checked
# against the whitelists below before any SQL is built.
Patch = list[tuple[str, Any]]

_PROMPT_COLUMNS = frozenset({"title", "description"})
_NODE_COLUMNS = frozenset({"name", "action"})
_NOTE_COLUMNS = frozenset({"content"})


def _set_clause(patch: Patch, allowed: frozenset[str]) -> tuple[str, tuple]:
    for column, _ in patch:
        if column not in allowed:
            raise ValueError(f"Column not updatable: {column}")
    clause = ", ".join(f"{column} = ?" for column, _ in patch)
    return clause, tuple(value for _, value in patch)


def _now() -> str:
    return datetime.now(UTC).isoformat()


class PromptRepository:
    def __init__(self, db: Database) -> None:
        self._db = db

    # -- Prompts --

    async def list_prompts(self, *, conn: Executor | None = None) -> list[dict]:
        rows = await (conn or self._db).fetchall(
            "SELECT id, title, description, project_name FROM prompts ORDER BY id"
        )
        return [dict(r) for r in rows]

    async def get_prompt(self, prompt_id: int, *, conn: Executor | None = None) -> dict | None:
        row = await (conn or self._db).fetchone(
            "SELECT id, title, description, project_name FROM prompts WHERE id = ?",
            (prompt_id,),
        )
        return dict(row) if row is not None else None

    async def prompt_exists(self, prompt_id: int) -> bool:
        row = await self._db.fetchone(
            "SELECT EXISTS(SELECT 1 FROM prompts WHERE id = ?) AS found", (prompt_id,)
        )
        return bool(row and row["found"])

    async def count_prompts(self) -> int:
        row = await self._db.fetchone("SELECT COUNT(*) AS cnt FROM prompts")
        return row["cnt"] if row else 0

    async def insert_prompt(
        self,
        title: str,
        description: str,
        project_name: str,
        *,
        conn: Executor | None = None,
    ) -> int:
        cursor = await (conn or self._db).execute(
            "INSERT INTO prompts (title, description, project_name) VALUES (?, ?, ?)",
            (title, description, project_name),
        )
        assert cursor.lastrowid is not None
        return cursor.lastrowid

    async def update_prompt(self, prompt_id: int, patch: Patch) -> None:
        if not patch:
            return
        clause, values = _set_clause(patch, _PROMPT_COLUMNS)
        await self._db.execute(
            f"UPDATE prompts SET {clause} WHERE id = ?", (*values, prompt_id)
        )

    async def delete_prompt(self, prompt_id: int) -> None:
        await self._db.execute("DELETE FROM prompts WHERE id = ?", (prompt_id,))

    async def clear_prompts(self, *, conn: Executor | None = None) -> None:
        """Delete every prompt. Nodes and notes go with them via ON DELETE CASCADE."""
        await (conn or self._db).execute("DELETE FROM prompts")

    # -- Nodes --

    async def list_nodes(self, prompt_id: int, *, conn: Executor | None = None) -> list[dict]:
        rows = await (conn or self._db).fetchall(
            "SELECT id, prompt_id, name, action FROM nodes WHERE prompt_id = ? ORDER BY id",
            (prompt_id,),
        )
        return [dict(r) for r in rows]

    async def get_node(self, prompt_id: int, node_id: int) -> dict | None:
        row = await self._db.fetchone(
            "SELECT id, prompt_id, name, action FROM nodes WHERE id = ? AND prompt_id = ?",
            (node_id, prompt_id),
        )
        return dict(row) if row is not None else None

    async def insert_node(
        self,
        prompt_id: int,
        name: str,
        action: str,
        *,
        conn: Executor | None = None,
    ) -> int:
        cursor = await (conn or self._db).execute(
            "INSERT INTO nodes (prompt_id, name, action) VALUES (?, ?, ?)",
            (prompt_id, name, action),
        )
        assert cursor.lastrowid is not None
        return cursor.lastrowid

    async def update_node(self, node_id: int, patch: Patch) -> None:
        if not patch:
            return
        clause, values = _set_clause(patch, _NODE_COLUMNS)
        await self._db.execute(
            f"UPDATE nodes SET {clause} WHERE id = ?", (*values, node_id)
        )

    async def delete_node(self, node_id: int) -> None:
        await self._db.execute("DELETE FROM nodes WHERE id = ?", (node_id,))

    # -- Notes --

    async def list_notes(self, prompt_id: int) -> list[dict]:
        rows = await self._db.fetchall(
            "SELECT id, prompt_id, content, created_at FROM notes "
            "WHERE prompt_id = ? ORDER BY created_at DESC, id DESC",
            (prompt_id,),
        )
        return [dict(r) for r in rows]

    async def get_note(self, prompt_id: int, note_id: int) -> dict | None:
        row = await self._db.fetchone(
            "SELECT id, prompt_id, content, created_at FROM notes WHERE id = ? AND prompt_id = ?",
            (note_id, prompt_id),
        )
        return dict(row) if row is not None else None

    async def insert_note(self, prompt_id: int, content: str) -> int:
        cursor = await self._db.execute(
            "INSERT INTO notes (prompt_id, content, created_at) VALUES (?, ?, ?)",
            (prompt_id, content, _now()),
        )
        assert cursor.lastrowid is not None
        return cursor.lastrowid

    async def update_note(self, note_id: int, patch: Patch) -> None:
        if not patch:
            return
        clause, values = _set_clause(patch, _NOTE_COLUMNS)
        await self._db.execute(
            f"UPDATE notes SET {clause} WHERE id = ?", (*values, note_id)
        )

    async def delete_note(self, note_id: int) -> None:
        await self._db.execute("DELETE FROM notes WHERE id = ?", (note_id,))

    # -- Project settings (singleton row id = 1) --

    async def get_project_settings(self, *, conn: Executor | None = None) -> dict | None:
        row = await (conn or self._db).fetchone(
            "SELECT project_name, main_request FROM project_settings WHERE id = 1"
        )
        return dict(row) if row is not None else None

    async def upsert_project_settings(
        self,
        project_name: str,
        main_request: str,
        *,
        conn: Executor | None = None,
    ) -> None:
        await (conn or self._db).execute(
            """
            INSERT INTO project_settings (id, project_name, main_request)
            VALUES (1, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                project_name = excluded.project_name,
                main_request = excluded.main_request
            """,
            (project_name, main_request),
        )

    # -- Saved trees --

    async def list_saved_trees(self) -> list[dict]:
        rows = await self._db.fetchall(
            "SELECT name, created_at, updated_at FROM saved_trees "
            "ORDER BY updated_at DESC, name"
        )
        return [dict(r) for r in rows]

    async def get_saved_tree(self, name: str) -> dict | None:
        row = await self._db.fetchone(
            "SELECT name, tree_data, created_at, updated_at FROM saved_trees WHERE name = ?",
            (name,),
        )
        return dict(row) if row is not None else None

    async def upsert_saved_tree(self, name: str, tree_data: str, now: str) -> None:
        """Insert a snapshot, or overwrite its data and bump updated_at. created_at is kept."""
        await self._db.execute(
            """
            INSERT INTO saved_trees (name, tree_data, created_at, updated_at)
            VALUES (?, ?, ?, ?)
            ON CONFLICT(name) DO UPDATE SET
                tree_data = excluded.tree_data,
                updated_at = excluded.updated_at
            """,
            (name, tree_data, now, now),
        )

    async def delete_saved_tree(self, name: str) -> bool:
        """Delete by name. Returns False when no row matched."""
        cursor = await self._db.execute(
            "DELETE FROM saved_trees WHERE name = ?", (name,)
        )
        return cursor.rowcount > 0
