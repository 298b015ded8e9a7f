"""packages/core 测试配置 -- Store fixture"""

import pytest_asyncio


@pytest_asyncio.fixture
async def task_store(store_group):
    """TaskStore 实例"""
    return store_group.task_store


@pytest_asyncio.fixture
async def comment_store(store_group):
    """CommentStore 实例"""
    return store_group.comment_store


@pytest_asyncio.fixture
async def provider(store_group):
    """连接提供者（用于直接执行 SQL 构造异常数据）"""
    return store_group.provider
