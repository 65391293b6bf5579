"""Database schema DDL. All tables use CREATE IF NOT EXISTS for idempotency."""

DEFAULT_PROJECT_NAME = "Personal Finance Copilot"
DEFAULT_MAIN_REQUEST = (
    "Build a web app that helps users track spending, set goals, and get"
    " AI-powered budgeting advice from categorized transactions."
)

SCHEMA_SQL = f"""
CREATE TABLE IF NOT EXISTS prompts (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT NOT NULL,
    description TEXT,
    project_name TEXT
);

CREATE TABLE IF NOT EXISTS nodes (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    prompt_id INTEGER NOT NULL REFERENCES prompts(id) ON DELETE CASCADE,
    name TEXT NOT NULL,
    action TEXT
);

CREATE INDEX IF NOT EXISTS idx_nodes_prompt_id ON nodes(prompt_id);

CREATE TABLE IF NOT EXISTS notes (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    prompt_id INTEGER NOT NULL REFERENCES prompts(id) ON DELETE CASCADE,
    content TEXT NOT NULL,
    created_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_notes_prompt_id ON notes(prompt_id);

CREATE TABLE IF NOT EXISTS project_settings (
    id INTEGER PRIMARY KEY CHECK (id = 1),
    project_name TEXT NOT NULL,
    main_request TEXT NOT NULL DEFAULT ''
);

INSERT OR IGNORE INTO project_settings (id, project_name, main_request)
VALUES (1, '{DEFAULT_PROJECT_NAME}', '{DEFAULT_MAIN_REQUEST}');

CREATE TABLE IF NOT EXISTS saved_trees (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL UNIQUE,
    tree_data TEXT NOT NULL CHECK (json_valid(tree_data)),
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
"""
