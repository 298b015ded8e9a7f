"""taskboard Core Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .comment import TaskComment
from .enums import TERMINAL_STATUSES, TaskStatus, is_terminal
from .message import TaskMessage, to_messages
from .queries import (
    AssignTaskModel,
    TaskCommentGetModel,
    TaskCommentUpdateModel,
    TaskGetModel,
)
from .task import SubTask, Task

__all__ = [
    # 枚举
    "TaskStatus",
    "TERMINAL_STATUSES",
    "is_terminal",
    # Task
    "Task",
    "SubTask",
    # Comment
    "TaskComment",
    "TaskMessage",
    "to_messages",
    # 查询模型
    "TaskGetModel",
    "AssignTaskModel",
    "TaskCommentGetModel",
    "TaskCommentUpdateModel",
]
