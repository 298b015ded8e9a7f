"""枚举定义 -- TaskStatus 序号编码

TaskStatus 以整数序号持久化到 tasks.status 列。
序号一经发布不可修改，新增状态只能追加到末尾，否则历史数据会被静默重映射。
"""

from enum import IntEnum


class TaskStatus(IntEnum):
    """Task 生命周期状态（整数序号编码）"""

    DRAFT = 1
    TO_DO = 2
    IN_PROGRESS = 3
    DONE = 4
    CANCELED = 5


# 终态集合（供调用方策略使用，Store 层不校验状态流转）
TERMINAL_STATUSES: frozenset[TaskStatus] = frozenset(
    {
        TaskStatus.DONE,
        TaskStatus.CANCELED,
    }
)


def is_terminal(status: TaskStatus) -> bool:
    """判断状态是否为终态"""
    return status in TERMINAL_STATUSES
