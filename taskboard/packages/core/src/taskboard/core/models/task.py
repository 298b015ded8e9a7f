"""Task Domain Model

tasks 表中的一行对应一个 Task，parent_task_id 构成森林结构。
创建后 id / created_at / created_by_user_id 不可变，
只有 status 与 assigned_to_user_id 会通过 assign 操作修改。
"""

from pydantic import BaseModel, Field

from .enums import TaskStatus
from .timestamps import UtcDatetime


class Task(BaseModel):
    """Task 数据模型

    id 由数据库分配；插入前保持默认值 0，写入时忽略。
    """

    id: int = Field(default=0, description="数据库分配的唯一标识")
    parent_task_id: int | None = Field(default=None, description="父任务 ID")
    number: str = Field(description="展示序号，由调用方分配，不校验唯一性")
    title: str = Field(description="任务标题")
    description: str = Field(default="", description="任务描述")
    status: TaskStatus = Field(description="当前状态（整数序号）")
    created_at: UtcDatetime = Field(description="创建时间")
    created_by_user_id: int = Field(description="创建者用户 ID")
    assigned_to_user_id: int | None = Field(default=None, description="指派的用户 ID")
    completed_at: UtcDatetime | None = Field(default=None, description="完成时间")

    def with_id(self, task_id: int) -> "Task":
        return self.model_copy(update={"id": task_id})

    def with_parent_task_id(self, parent_task_id: int | None) -> "Task":
        return self.model_copy(update={"parent_task_id": parent_task_id})

    def with_title(self, title: str) -> "Task":
        return self.model_copy(update={"title": title})

    def with_status(self, status: TaskStatus) -> "Task":
        return self.model_copy(update={"status": status})

    def with_assigned_to_user_id(self, user_id: int | None) -> "Task":
        return self.model_copy(update={"assigned_to_user_id": user_id})


class SubTask(BaseModel):
    """子树遍历结果

    parent_task_ids 为从查询根节点到当前节点（含）的完整路径。
    """

    task_id: int = Field(description="任务 ID")
    title: str = Field(description="任务标题")
    status: TaskStatus = Field(description="任务状态")
    parent_task_ids: list[int] = Field(
        default_factory=list,
        description="根节点 -> 当前节点的 ID 路径",
    )
