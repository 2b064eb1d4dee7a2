"""SQLite schema management (code-first approach)."""

import logging

from yearpeer.core.db_client import get_connection


logger = logging.getLogger(__name__)


# Central list of all collections in the schema, in dependency order
COLLECTIONS = [
    "users",
    "goals",
    "tasks",
]

# Relation fields cleared when the referenced record is deleted: {referenced: [(collection, field)]}
SET_NULL_RELATIONS: dict[str, list[tuple[str, str]]] = {
    "goals": [("tasks", "goal_id")],
}


_SCHEMAS: dict[str, str] = {
    "users": """
        CREATE TABLE IF NOT EXISTS users (
            id TEXT PRIMARY KEY,
            email TEXT NOT NULL,
            first_name TEXT NOT NULL DEFAULT '',
            last_name TEXT NOT NULL DEFAULT '',
            picture_url TEXT,
            external_id TEXT,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        )
    """,
    "goals": """
        CREATE TABLE IF NOT EXISTS goals (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL REFERENCES users (id) ON DELETE CASCADE,
            title TEXT NOT NULL CHECK (length(title) <= 255),
            description TEXT NOT NULL DEFAULT '',
            start_date TEXT NOT NULL,
            end_date TEXT NOT NULL,
            color TEXT NOT NULL CHECK (length(color) = 7),
            impact INTEGER NOT NULL CHECK (impact BETWEEN 1 AND 5),
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL,
            CHECK (end_date >= start_date)
        )
    """,
    "tasks": """
        CREATE TABLE IF NOT EXISTS tasks (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL REFERENCES users (id) ON DELETE RESTRICT,
            goal_id TEXT REFERENCES goals (id) ON DELETE SET NULL,
            title TEXT NOT NULL CHECK (length(title) <= 255),
            description TEXT,
            date TEXT NOT NULL,
            completed INTEGER NOT NULL DEFAULT 0,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        )
    """,
}

_INDEXES: dict[str, list[str]] = {
    "users": [
        "CREATE UNIQUE INDEX IF NOT EXISTS idx_users_email ON users (email)",
    ],
    "goals": [
        "CREATE INDEX IF NOT EXISTS idx_goals_user ON goals (user_id)",
        "CREATE INDEX IF NOT EXISTS idx_goals_user_range ON goals (user_id, start_date, end_date)",
    ],
    "tasks": [
        "CREATE INDEX IF NOT EXISTS idx_tasks_user ON tasks (user_id)",
        "CREATE INDEX IF NOT EXISTS idx_tasks_goal ON tasks (goal_id)",
        "CREATE INDEX IF NOT EXISTS idx_tasks_user_date ON tasks (user_id, date)",
    ],
}


def get_collection_schema(collection_name: str) -> str:
    """Get the CREATE TABLE statement for a collection."""
    return _SCHEMAS[collection_name]


async def init_db(*, db_path: str | None = None) -> None:
    """Create all tables and indexes (idempotent)."""
    logger.info("Starting SQLite schema sync...")
    conn = await get_connection(db_path=db_path)

    for collection_name in COLLECTIONS:
        await conn.execute(get_collection_schema(collection_name))
        for index_sql in _INDEXES[collection_name]:
            await conn.execute(index_sql)
        logger.info("Ensured collection: %s", collection_name)

    await conn.commit()
    logger.info("SQLite schema sync complete")
