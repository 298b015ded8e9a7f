"""taskboard Core Store -- SQLite 持久化实现

提供工厂函数创建共享连接提供者的 Store 实例组。
"""

from ..config import StoreConfig
from .comment_store import SqliteCommentStore
from .connection import SqliteConnectionProvider, ensure_db_dir
from .sqlite_init import LATEST_SCHEMA_VERSION, get_schema_version, init_db, migrate
from .task_store import SqliteTaskStore


class StoreGroup:
    """Store 实例组 -- 共享同一个连接提供者（连接本身按操作分配）"""

    def __init__(
        self,
        provider: SqliteConnectionProvider,
        command_timeout_s: float,
    ) -> None:
        self.provider = provider
        self.task_store = SqliteTaskStore(provider, command_timeout_s)
        self.comment_store = SqliteCommentStore(provider, command_timeout_s)


async def create_store_group(config: StoreConfig) -> StoreGroup:
    """创建 Store 实例组

    确保数据库目录存在并执行全部 schema 迁移。

    Args:
        config: 存储层配置

    Returns:
        StoreGroup 实例
    """
    ensure_db_dir(config.db_path)

    provider = SqliteConnectionProvider.from_config(config)
    async with provider.connection() as conn:
        await init_db(conn)

    return StoreGroup(provider=provider, command_timeout_s=config.command_timeout_s)


__all__ = [
    "StoreGroup",
    "create_store_group",
    "SqliteConnectionProvider",
    "SqliteTaskStore",
    "SqliteCommentStore",
    "init_db",
    "migrate",
    "get_schema_version",
    "LATEST_SCHEMA_VERSION",
]
