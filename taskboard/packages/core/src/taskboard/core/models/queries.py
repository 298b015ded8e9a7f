"""查询 / 输入模型

Store 操作消费的纯数据结构，不携带行为。
"""

from pydantic import BaseModel, Field

from .enums import TaskStatus


class TaskGetModel(BaseModel):
    """按 ID 集合查询任务

    task_ids 为空时不做 ID 限制（返回全部任务）。
    """

    task_ids: list[int] = Field(default_factory=list, description="任务 ID 集合")


class AssignTaskModel(BaseModel):
    """指派任务并设置状态"""

    task_id: int
    assign_to_user_id: int
    status: TaskStatus


class TaskCommentGetModel(BaseModel):
    """查询任务评论"""

    task_id: int
    include_deleted: bool = Field(default=False, description="是否包含已软删除的评论")


class TaskCommentUpdateModel(BaseModel):
    """编辑评论内容"""

    id: int
    message: str
