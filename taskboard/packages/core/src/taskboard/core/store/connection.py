"""SQLite 连接提供者

每次 Store 操作获取独立连接，操作结束即关闭；
并发连接数由 asyncio.Semaphore 限制。
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from ..config import StoreConfig


class SqliteConnectionProvider:
    """按操作分配 aiosqlite 连接

    连接不在操作之间复用，因此未提交的事务会随连接关闭而丢弃。
    """

    def __init__(
        self,
        db_path: str,
        max_connections: int = 8,
        busy_timeout_ms: int = 5000,
    ) -> None:
        self._db_path = db_path
        self._busy_timeout_ms = busy_timeout_ms
        self._semaphore = asyncio.Semaphore(max_connections)

    @classmethod
    def from_config(cls, config: StoreConfig) -> "SqliteConnectionProvider":
        return cls(
            db_path=config.db_path,
            max_connections=config.max_connections,
            busy_timeout_ms=config.busy_timeout_ms,
        )

    @property
    def db_path(self) -> str:
        return self._db_path

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[aiosqlite.Connection]:
        """获取一个已配置 PRAGMA 的连接，退出时关闭"""
        async with self._semaphore:
            conn = await aiosqlite.connect(self._db_path)
            try:
                conn.row_factory = aiosqlite.Row
                await conn.execute("PRAGMA foreign_keys = ON;")
                await conn.execute(f"PRAGMA busy_timeout = {int(self._busy_timeout_ms)};")
                yield conn
            finally:
                await conn.close()


def ensure_db_dir(db_path: str) -> None:
    """确保数据库文件所在目录存在"""
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
