"""TaskMessage 读模型

任务消息流的扁平化视图，由 TaskComment 投影而来。
"""

from pydantic import BaseModel, Field

from .comment import TaskComment
from .timestamps import UtcDatetime


class TaskMessage(BaseModel):
    """任务消息（评论的展示形态）"""

    task_id: int = Field(description="关联的 Task ID")
    comment: str = Field(description="评论内容")
    is_deleted: bool = Field(description="是否已软删除")
    at: UtcDatetime = Field(description="评论创建时间")

    @classmethod
    def from_comment(cls, comment: TaskComment) -> "TaskMessage":
        return cls(
            task_id=comment.task_id,
            comment=comment.message,
            is_deleted=comment.is_deleted,
            at=comment.at,
        )


def to_messages(comments: list[TaskComment]) -> list[TaskMessage]:
    """批量投影，保持输入顺序"""
    return [TaskMessage.from_comment(c) for c in comments]
