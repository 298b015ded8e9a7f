"""存储层异常体系

StorageError 及其子类表示可由调用方处理的存储失败（连接、超时、约束）。
InvariantViolationError 表示程序缺陷，不属于 StorageError。
"""


class StorageError(Exception):
    """存储层基础异常"""

    def __init__(self, message: str, operation: str = "") -> None:
        """
        Args:
            message: 错误描述
            operation: 失败的 Store 操作名，如 "task_store.add"
        """
        super().__init__(message)
        self.operation = operation


class StorageTimeoutError(StorageError):
    """操作超过命令超时时间"""

    def __init__(self, operation: str, timeout_s: float) -> None:
        super().__init__(
            f"{operation} 超时（{timeout_s}s）",
            operation=operation,
        )
        self.timeout_s = timeout_s


class CycleDetectedError(StorageError):
    """子树遍历时发现环

    tasks 树中 task_id 在同一路径上出现两次，数据完整性已被破坏。
    """

    def __init__(self, parent_task_id: int, task_id: int, path: list[int]) -> None:
        """
        Args:
            parent_task_id: 遍历的根节点
            task_id: 被重复访问的节点
            path: 检测到环时的路径
        """
        super().__init__(
            f"任务树存在环: root={parent_task_id}, task_id={task_id}, path={path}",
            operation="task_store.get_sub_tasks_in_status",
        )
        self.parent_task_id = parent_task_id
        self.task_id = task_id
        self.path = path


class InvariantViolationError(AssertionError):
    """内部不变量被破坏（程序缺陷信号，不应被当作业务错误恢复）"""
