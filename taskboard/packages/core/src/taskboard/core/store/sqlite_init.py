"""SQLite 数据库初始化 -- PRAGMA 配置 + 版本化 schema 迁移

schema 版本记录在 PRAGMA user_version 中，迁移按版本号顺序执行且可重复调用。
迁移 2 为 task_comments 追加 modified_at / deleted_at 两列，
迁移前写入的旧行读出时这两列均为 NULL。
"""

from dataclasses import dataclass

import aiosqlite
import structlog

log = structlog.get_logger()

# tasks 表 DDL
_TASKS_DDL = """
CREATE TABLE IF NOT EXISTS tasks (
    id                  INTEGER PRIMARY KEY AUTOINCREMENT,
    parent_task_id      INTEGER NULL,
    number              TEXT NOT NULL DEFAULT '',
    title               TEXT NOT NULL DEFAULT '',
    description         TEXT NOT NULL DEFAULT '',
    status              INTEGER NOT NULL,
    created_at          TEXT NOT NULL,
    created_by_user_id  INTEGER NOT NULL,
    assigned_to_user_id INTEGER NULL,
    completed_at        TEXT NULL,

    FOREIGN KEY (parent_task_id) REFERENCES tasks(id)
);
"""

# task_comments 表 DDL（初始版本，不含审计列）
_TASK_COMMENTS_DDL = """
CREATE TABLE IF NOT EXISTS task_comments (
    id             INTEGER PRIMARY KEY AUTOINCREMENT,
    task_id        INTEGER NOT NULL,
    author_user_id INTEGER NOT NULL,
    message        TEXT NOT NULL DEFAULT '',
    at             TEXT NOT NULL,

    FOREIGN KEY (task_id) REFERENCES tasks(id)
);
"""


@dataclass(frozen=True)
class Migration:
    """单个 schema 迁移"""

    version: int
    name: str
    statements: tuple[str, ...]


MIGRATIONS: tuple[Migration, ...] = (
    Migration(
        version=1,
        name="create_tasks_and_task_comments",
        statements=(
            _TASKS_DDL,
            _TASK_COMMENTS_DDL,
            "CREATE INDEX IF NOT EXISTS idx_tasks_parent_task_id ON tasks(parent_task_id);",
            "CREATE INDEX IF NOT EXISTS idx_task_comments_task_at ON task_comments(task_id, at DESC);",
        ),
    ),
    Migration(
        version=2,
        name="add_modified_at_and_deleted_at_in_task_comments",
        # SQLite 每条 ALTER TABLE 只能追加一列
        statements=(
            "ALTER TABLE task_comments ADD COLUMN modified_at TEXT NULL;",
            "ALTER TABLE task_comments ADD COLUMN deleted_at TEXT NULL;",
        ),
    ),
)

LATEST_SCHEMA_VERSION: int = MIGRATIONS[-1].version


async def get_schema_version(conn: aiosqlite.Connection) -> int:
    """读取当前 schema 版本（PRAGMA user_version）"""
    cursor = await conn.execute("PRAGMA user_version;")
    row = await cursor.fetchone()
    return row[0] if row else 0


async def migrate(
    conn: aiosqlite.Connection,
    target_version: int = LATEST_SCHEMA_VERSION,
) -> int:
    """按顺序执行未应用的迁移

    每个迁移在独立的 IMMEDIATE 事务中执行并同步更新 user_version。
    事务内重新读取版本号，并发迁移同一数据库时已被他方应用的迁移会跳过。

    Args:
        conn: aiosqlite 数据库连接
        target_version: 迁移到的目标版本

    Returns:
        迁移后的 schema 版本
    """
    current = await get_schema_version(conn)
    for migration in MIGRATIONS:
        if migration.version <= current or migration.version > target_version:
            continue
        # 显式事务：DDL 在 sqlite3 默认模式下不会隐式开启事务
        await conn.execute("BEGIN IMMEDIATE;")
        try:
            current = await get_schema_version(conn)
            if migration.version <= current:
                await conn.rollback()
                continue
            for statement in migration.statements:
                await conn.execute(statement)
            # PRAGMA 不支持参数绑定，version 来自常量表
            await conn.execute(f"PRAGMA user_version = {migration.version};")
            await conn.commit()
        except Exception:
            await conn.rollback()
            raise
        log.info(
            "schema_migrated",
            version=migration.version,
            migration=migration.name,
        )
        current = migration.version
    return current


async def init_db(conn: aiosqlite.Connection) -> None:
    """初始化数据库：设置 PRAGMA + 执行全部迁移

    Args:
        conn: aiosqlite 数据库连接
    """
    await conn.execute("PRAGMA journal_mode = WAL;")
    await conn.execute("PRAGMA foreign_keys = ON;")
    await migrate(conn)


async def verify_wal_mode(conn: aiosqlite.Connection) -> bool:
    """验证 WAL 模式是否生效

    Returns:
        True 如果 WAL 模式已启用
    """
    cursor = await conn.execute("PRAGMA journal_mode;")
    row = await cursor.fetchone()
    return row is not None and row[0].lower() == "wal"
