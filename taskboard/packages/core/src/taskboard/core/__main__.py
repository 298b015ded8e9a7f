"""CLI 入口模块 -- python -m taskboard.core <command>

支持的命令：
  migrate         对配置的数据库执行全部 schema 迁移
  schema-version  打印当前 schema 版本
"""

import asyncio
import sys

from .config import load_store_config
from .logging_config import setup_logging

_USAGE = """用法: python -m taskboard.core <command>
命令:
  migrate         执行 schema 迁移
  schema-version  打印当前 schema 版本"""


def main(argv: list[str] | None = None) -> int:
    """CLI 主入口

    Returns:
        进程退出码
    """
    args = sys.argv[1:] if argv is None else argv
    if not args:
        print(_USAGE)
        return 1

    command = args[0]
    setup_logging()

    if command == "migrate":
        version = asyncio.run(run_migrations())
        print(f"迁移完成，当前 schema 版本: {version}")
        return 0
    if command == "schema-version":
        version = asyncio.run(read_schema_version())
        print(version)
        return 0

    print(f"未知命令: {command}")
    print("可用命令: migrate, schema-version")
    return 1


async def run_migrations() -> int:
    """对配置的数据库执行迁移，返回迁移后的版本"""
    from .store import create_store_group, get_schema_version

    config = load_store_config()
    print(f"数据库路径: {config.db_path}")

    store_group = await create_store_group(config)
    async with store_group.provider.connection() as conn:
        return await get_schema_version(conn)


async def read_schema_version() -> int:
    """读取当前 schema 版本（不执行迁移）"""
    from .store import SqliteConnectionProvider, get_schema_version

    provider = SqliteConnectionProvider.from_config(load_store_config())
    async with provider.connection() as conn:
        return await get_schema_version(conn)


if __name__ == "__main__":
    sys.exit(main())
