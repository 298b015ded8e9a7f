"""全局 pytest 配置 -- 临时 SQLite 数据库 fixture"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest_asyncio


@pytest_asyncio.fixture
async def tmp_db_path(tmp_path: Path) -> Path:
    """提供临时 SQLite 数据库路径"""
    return tmp_path / "sqlite" / "test.db"


@pytest_asyncio.fixture
async def store_group(tmp_db_path: Path) -> AsyncGenerator:
    """提供已完成迁移的 StoreGroup"""
    from taskboard.core.config import StoreConfig
    from taskboard.core.store import create_store_group

    group = await create_store_group(StoreConfig(db_path=str(tmp_db_path)))
    yield group
