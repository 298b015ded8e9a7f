"""Store Protocol 接口定义

定义 ConnectionProvider、TaskStore、CommentStore 的抽象接口，
使用 Python Protocol 实现结构化子类型（duck typing）。
"""

from collections.abc import Sequence
from contextlib import AbstractAsyncContextManager
from typing import Protocol

import aiosqlite

from ..models.comment import TaskComment
from ..models.enums import TaskStatus
from ..models.queries import (
    AssignTaskModel,
    TaskCommentGetModel,
    TaskCommentUpdateModel,
    TaskGetModel,
)
from ..models.task import SubTask, Task


class ConnectionProvider(Protocol):
    """按操作提供数据库连接"""

    def connection(self) -> AbstractAsyncContextManager[aiosqlite.Connection]:
        """获取一个操作级连接，退出上下文时释放"""
        ...


class TaskStore(Protocol):
    """Task 存储接口"""

    async def add(self, tasks: Sequence[Task]) -> list[int]:
        """批量创建任务，返回与输入顺序一致的 ID 列表"""
        ...

    async def get(self, query: TaskGetModel) -> list[Task]:
        """按 ID 集合查询任务"""
        ...

    async def assign(self, model: AssignTaskModel) -> None:
        """更新指派人与状态"""
        ...

    async def get_sub_tasks_in_status(
        self,
        parent_task_id: int,
        statuses: Sequence[TaskStatus],
    ) -> list[SubTask]:
        """递归查询指定状态的子任务"""
        ...


class CommentStore(Protocol):
    """TaskComment 存储接口

    评论只做软删除，不提供物理删除。
    """

    async def add(self, comment: TaskComment) -> int:
        """创建评论，返回 ID"""
        ...

    async def get(self, query: TaskCommentGetModel) -> list[TaskComment]:
        """查询任务评论，按创建时间倒序"""
        ...

    async def set_deleted(self, comment_id: int) -> None:
        """软删除评论"""
        ...

    async def update(self, model: TaskCommentUpdateModel | TaskComment) -> None:
        """编辑评论内容并记录 modified_at"""
        ...
