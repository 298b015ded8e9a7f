"""CommentStore SQLite 实现

task_comments 只追加、软删除：set_deleted 写 deleted_at，update 写 modified_at，
两者都不清空另一列，也不提供恢复删除。
"""

import structlog

from ..models.comment import TaskComment
from ..models.queries import TaskCommentGetModel, TaskCommentUpdateModel
from .base import (
    SqliteStoreBase,
    from_db_ts,
    single_id,
    to_db_ts,
    to_db_ts_or_none,
    utcnow,
)

log = structlog.get_logger()


class SqliteCommentStore(SqliteStoreBase):
    """CommentStore 的 SQLite 实现"""

    async def add(self, comment: TaskComment) -> int:
        """创建评论

        modified_at / deleted_at 按调用方传入值原样写入，不在此处打时间戳。

        Returns:
            数据库分配的评论 ID
        """
        async with self._connection("comment_store.add") as conn:
            cursor = await conn.execute(
                """
                INSERT INTO task_comments (task_id, author_user_id, message, at,
                                           modified_at, deleted_at)
                VALUES (?, ?, ?, ?, ?, ?)
                RETURNING id
                """,
                (
                    comment.task_id,
                    comment.author_user_id,
                    comment.message,
                    to_db_ts(comment.at),
                    to_db_ts_or_none(comment.modified_at),
                    to_db_ts_or_none(comment.deleted_at),
                ),
            )
            rows = await cursor.fetchall()
            comment_id = single_id(rows, "comment_store.add")
            await conn.commit()

        log.info("comment_added", comment_id=comment_id, task_id=comment.task_id)
        return comment_id

    async def get(self, query: TaskCommentGetModel) -> list[TaskComment]:
        """查询任务评论，按 at 倒序

        include_deleted=False 时只返回 deleted_at 为 NULL 的评论。
        """
        async with self._connection("comment_store.get") as conn:
            cursor = await conn.execute(
                """
                SELECT id, task_id, author_user_id, message, at, modified_at, deleted_at
                  FROM task_comments
                 WHERE task_id = ?
                   AND (? OR deleted_at IS NULL)
                 ORDER BY at DESC, id DESC
                """,
                (query.task_id, query.include_deleted),
            )
            rows = await cursor.fetchall()
        return [
            TaskComment(
                id=row["id"],
                task_id=row["task_id"],
                author_user_id=row["author_user_id"],
                message=row["message"],
                at=from_db_ts(row["at"]),
                modified_at=from_db_ts(row["modified_at"]),
                deleted_at=from_db_ts(row["deleted_at"]),
            )
            for row in rows
        ]

    async def set_deleted(self, comment_id: int) -> None:
        """软删除评论

        无条件将 deleted_at 写为当前时间；重复调用会刷新时间戳。
        comment_id 不存在时静默无操作。
        """
        deleted_at = utcnow()
        async with self._connection("comment_store.set_deleted") as conn:
            cursor = await conn.execute(
                "UPDATE task_comments SET deleted_at = ? WHERE id = ?",
                (to_db_ts(deleted_at), comment_id),
            )
            affected = cursor.rowcount
            await conn.commit()

        log.info("comment_soft_deleted", comment_id=comment_id, affected=affected)

    async def update(self, model: TaskCommentUpdateModel | TaskComment) -> None:
        """编辑评论内容，modified_at 写为当前时间

        不检查 deleted_at：是否允许编辑已删除评论由调用方决定。
        """
        modified_at = utcnow()
        async with self._connection("comment_store.update") as conn:
            cursor = await conn.execute(
                """
                UPDATE task_comments
                   SET message = ?,
                       modified_at = ?
                 WHERE id = ?
                """,
                (model.message, to_db_ts(modified_at), model.id),
            )
            affected = cursor.rowcount
            await conn.commit()

        log.info("comment_updated", comment_id=model.id, affected=affected)
