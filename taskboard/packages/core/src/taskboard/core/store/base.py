"""Store 公共基类 -- 连接作用域、命令超时与错误转换"""

import asyncio
import sqlite3
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from datetime import UTC, datetime

import aiosqlite
import structlog

from ..exceptions import InvariantViolationError, StorageError, StorageTimeoutError
from ..models.timestamps import ensure_utc
from .protocols import ConnectionProvider

log = structlog.get_logger()

DEFAULT_COMMAND_TIMEOUT_S: float = 30.0


def utcnow() -> datetime:
    return datetime.now(UTC)


def to_db_ts(value: datetime) -> str:
    """datetime -> UTC ISO-8601 文本

    统一到 UTC 且固定微秒精度，保证文本序与时间序一致。
    naive datetime 视为 UTC。
    """
    return ensure_utc(value).astimezone(UTC).isoformat(timespec="microseconds")


def to_db_ts_or_none(value: datetime | None) -> str | None:
    return to_db_ts(value) if value is not None else None


def from_db_ts(value: str | None) -> datetime | None:
    """UTC ISO-8601 文本 -> aware datetime；不带偏移的旧格式文本按 UTC 解释"""
    return ensure_utc(datetime.fromisoformat(value)) if value is not None else None


def single_id(rows: Sequence[aiosqlite.Row], operation: str) -> int:
    """单行 INSERT ... RETURNING 必须恰好返回一个 ID"""
    if len(rows) != 1:
        raise InvariantViolationError(
            f"{operation}: 单行插入应返回 1 个 ID，实际返回 {len(rows)} 个"
        )
    return rows[0][0]


class SqliteStoreBase:
    """SQLite Store 基类

    每个操作通过 _connection() 获取独立连接；
    超时转换为 StorageTimeoutError，sqlite3.Error 转换为 StorageError。
    asyncio.CancelledError 原样传播。
    """

    def __init__(
        self,
        provider: ConnectionProvider,
        command_timeout_s: float = DEFAULT_COMMAND_TIMEOUT_S,
    ) -> None:
        self._provider = provider
        self._command_timeout_s = command_timeout_s

    @asynccontextmanager
    async def _connection(self, operation: str) -> AsyncIterator[aiosqlite.Connection]:
        """获取操作级连接

        Args:
            operation: 操作名，用于日志与异常上下文
        """
        try:
            async with asyncio.timeout(self._command_timeout_s):
                async with self._provider.connection() as conn:
                    yield conn
        except TimeoutError as exc:
            log.warning(
                "storage_timeout",
                operation=operation,
                timeout_s=self._command_timeout_s,
            )
            raise StorageTimeoutError(operation, self._command_timeout_s) from exc
        except sqlite3.Error as exc:
            log.warning(
                "storage_error",
                operation=operation,
                error_type=type(exc).__name__,
                error=str(exc),
            )
            raise StorageError(f"{operation} 失败: {exc}", operation=operation) from exc
