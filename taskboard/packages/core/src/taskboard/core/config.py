"""配置模块 -- 可通过环境变量覆盖

包含数据库路径、命令超时、连接池大小等存储层配置。
"""

import os
from pathlib import Path

import structlog
from pydantic import BaseModel, Field

log = structlog.get_logger()

_DEFAULT_COMMAND_TIMEOUT_S = 30.0
_DEFAULT_MAX_CONNECTIONS = 8
_DEFAULT_BUSY_TIMEOUT_MS = 5000


def _get_base_dir() -> Path:
    """获取项目 data 基础目录"""
    return Path(os.environ.get("TASKBOARD_DATA_DIR", "data"))


def get_db_path() -> str:
    """获取 SQLite 数据库路径"""
    return os.environ.get(
        "TASKBOARD_DB_PATH",
        str(_get_base_dir() / "sqlite" / "taskboard.db"),
    )


class StoreConfig(BaseModel):
    """存储层配置

    环境变量:
        TASKBOARD_DB_PATH: SQLite 数据库文件路径
        TASKBOARD_COMMAND_TIMEOUT_S: 单次操作超时（秒，默认 30）
        TASKBOARD_MAX_CONNECTIONS: 并发连接上限（默认 8）
        TASKBOARD_BUSY_TIMEOUT_MS: SQLite busy_timeout（毫秒，默认 5000）
    """

    db_path: str = Field(description="SQLite 数据库文件路径")
    command_timeout_s: float = Field(
        default=_DEFAULT_COMMAND_TIMEOUT_S,
        gt=0,
        description="单次 Store 操作超时（秒）",
    )
    max_connections: int = Field(
        default=_DEFAULT_MAX_CONNECTIONS,
        ge=1,
        description="同时打开的连接上限",
    )
    busy_timeout_ms: int = Field(
        default=_DEFAULT_BUSY_TIMEOUT_MS,
        ge=0,
        description="SQLite 锁等待时间（毫秒）",
    )


def _read_number(env_var: str, cast: type, default: float | int) -> float | int | None:
    """读取数值型环境变量，非法值记录警告并返回 None（使用默认值）"""
    val = os.environ.get(env_var)
    if not val:
        return None
    try:
        return cast(val)
    except ValueError:
        log.warning(
            "invalid_store_config",
            env_var=env_var,
            value=val,
            fallback=default,
        )
        return None


def load_store_config() -> StoreConfig:
    """从环境变量加载存储配置

    Returns:
        StoreConfig 实例
    """
    kwargs: dict = {"db_path": get_db_path()}

    timeout = _read_number(
        "TASKBOARD_COMMAND_TIMEOUT_S", float, _DEFAULT_COMMAND_TIMEOUT_S
    )
    if timeout is not None:
        kwargs["command_timeout_s"] = timeout

    max_connections = _read_number(
        "TASKBOARD_MAX_CONNECTIONS", int, _DEFAULT_MAX_CONNECTIONS
    )
    if max_connections is not None:
        kwargs["max_connections"] = max_connections

    busy_timeout = _read_number(
        "TASKBOARD_BUSY_TIMEOUT_MS", int, _DEFAULT_BUSY_TIMEOUT_MS
    )
    if busy_timeout is not None:
        kwargs["busy_timeout_ms"] = busy_timeout

    return StoreConfig(**kwargs)
