"""TaskComment Domain Model

评论只做软删除：deleted_at 为可空时间戳，记录"何时"删除而不仅是"是否"删除。
modified_at 与 deleted_at 相互独立，一条评论可以先编辑后删除。
"""

from pydantic import BaseModel, Field

from .timestamps import UtcDatetime


class TaskComment(BaseModel):
    """TaskComment 数据模型"""

    id: int = Field(default=0, description="数据库分配的唯一标识")
    task_id: int = Field(description="关联的 Task ID")
    author_user_id: int = Field(description="作者用户 ID")
    message: str = Field(description="评论内容")
    at: UtcDatetime = Field(description="创建时间")
    modified_at: UtcDatetime | None = Field(default=None, description="最后编辑时间")
    deleted_at: UtcDatetime | None = Field(default=None, description="软删除时间")

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def with_id(self, comment_id: int) -> "TaskComment":
        return self.model_copy(update={"id": comment_id})

    def with_task_id(self, task_id: int) -> "TaskComment":
        return self.model_copy(update={"task_id": task_id})

    def with_message(self, message: str) -> "TaskComment":
        return self.model_copy(update={"message": message})
