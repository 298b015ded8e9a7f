"""CommentStore 单元测试

测试内容：
1. 创建评论与外键约束
2. include_deleted 过滤与 at 倒序
3. 软删除单调性
4. 编辑审计时间戳
5. 端到端：创建 -> 编辑 -> 软删除
"""

from datetime import UTC, datetime, timedelta

import pytest
import pytest_asyncio
from fakers import generate_comments, generate_tasks
from taskboard.core.exceptions import StorageError
from taskboard.core.models import TaskCommentGetModel, TaskCommentUpdateModel


@pytest_asyncio.fixture
async def task_id(task_store) -> int:
    [task_id] = await task_store.add(generate_tasks(1))
    return task_id


class TestAdd:
    """创建评论"""

    async def test_add_returns_positive_id(self, comment_store, task_id):
        [comment] = generate_comments(1, task_id=task_id)

        comment_id = await comment_store.add(comment)

        assert comment_id > 0

    async def test_add_unknown_task_raises_storage_error(self, comment_store):
        [comment] = generate_comments(1, task_id=424_242)

        with pytest.raises(StorageError) as exc_info:
            await comment_store.add(comment)

        assert exc_info.value.operation == "comment_store.add"

    async def test_add_stores_audit_columns_verbatim(self, comment_store, task_id):
        """调用方传入的 modified_at / deleted_at 原样写入"""
        at = datetime(2024, 10, 11, 18, 0, tzinfo=UTC)
        [comment] = generate_comments(1, task_id=task_id)
        comment = comment.model_copy(
            update={
                "at": at,
                "modified_at": at + timedelta(minutes=5),
                "deleted_at": at + timedelta(minutes=10),
            }
        )

        comment_id = await comment_store.add(comment)

        [stored] = await comment_store.get(
            TaskCommentGetModel(task_id=task_id, include_deleted=True)
        )
        assert stored == comment.with_id(comment_id)


class TestGet:
    """查询评论"""

    async def test_get_returns_all_comments_of_task(self, comment_store, task_id, task_store):
        [other_task_id] = await task_store.add(generate_tasks(1))
        comments = generate_comments(2, task_id=task_id)
        for comment in comments:
            await comment_store.add(comment)
        await comment_store.add(generate_comments(1, task_id=other_task_id)[0])

        results = await comment_store.get(
            TaskCommentGetModel(task_id=task_id, include_deleted=True)
        )

        assert len(results) == 2
        assert {(r.task_id, r.message) for r in results} == {
            (c.task_id, c.message) for c in comments
        }

    async def test_get_orders_by_at_descending(self, comment_store, task_id):
        now = datetime.now(UTC)
        comments = generate_comments(3, task_id=task_id)
        offsets = [2, 3, 1]
        ids = []
        for comment, hours in zip(comments, offsets, strict=True):
            ids.append(
                await comment_store.add(
                    comment.model_copy(update={"at": now - timedelta(hours=hours)})
                )
            )

        results = await comment_store.get(
            TaskCommentGetModel(task_id=task_id, include_deleted=True)
        )

        assert [r.id for r in results] == [ids[2], ids[0], ids[1]]
        assert results[0].at > results[1].at > results[2].at

    async def test_get_excludes_deleted_by_default(self, comment_store, task_id):
        first, second = generate_comments(2, task_id=task_id)
        first_id = await comment_store.add(first)
        second_id = await comment_store.add(second)

        await comment_store.set_deleted(first_id)

        results = await comment_store.get(TaskCommentGetModel(task_id=task_id))
        assert [r.id for r in results] == [second_id]
        assert all(r.deleted_at is None for r in results)

    async def test_get_unknown_task_returns_empty(self, comment_store):
        assert await comment_store.get(TaskCommentGetModel(task_id=777)) == []


class TestSetDeleted:
    """软删除"""

    async def test_set_deleted_stamps_deleted_at(self, comment_store, task_id):
        [comment] = generate_comments(1, task_id=task_id)
        comment_id = await comment_store.add(comment)

        await comment_store.set_deleted(comment_id)

        [stored] = await comment_store.get(
            TaskCommentGetModel(task_id=task_id, include_deleted=True)
        )
        assert stored.deleted_at is not None
        assert stored.is_deleted
        assert await comment_store.get(TaskCommentGetModel(task_id=task_id)) == []

    async def test_set_deleted_twice_restamps_and_stays_deleted(self, comment_store, task_id):
        [comment] = generate_comments(1, task_id=task_id)
        comment_id = await comment_store.add(comment)
        query = TaskCommentGetModel(task_id=task_id, include_deleted=True)

        await comment_store.set_deleted(comment_id)
        [first] = await comment_store.get(query)
        await comment_store.set_deleted(comment_id)
        [second] = await comment_store.get(query)

        assert second.deleted_at is not None
        assert second.deleted_at >= first.deleted_at
        assert await comment_store.get(TaskCommentGetModel(task_id=task_id)) == []

    async def test_update_does_not_clear_deleted_at(self, comment_store, task_id):
        [comment] = generate_comments(1, task_id=task_id)
        comment_id = await comment_store.add(comment)
        await comment_store.set_deleted(comment_id)

        await comment_store.update(TaskCommentUpdateModel(id=comment_id, message="edited"))

        [stored] = await comment_store.get(
            TaskCommentGetModel(task_id=task_id, include_deleted=True)
        )
        assert stored.message == "edited"
        assert stored.deleted_at is not None
        assert stored.modified_at is not None

    async def test_set_deleted_unknown_comment_is_noop(self, comment_store, task_id):
        [comment] = generate_comments(1, task_id=task_id)
        await comment_store.add(comment)

        await comment_store.set_deleted(31_337)

        assert len(await comment_store.get(TaskCommentGetModel(task_id=task_id))) == 1


class TestUpdate:
    """编辑评论"""

    async def test_update_sets_message_and_modified_at(self, comment_store, task_id):
        [comment] = generate_comments(1, task_id=task_id)
        comment = comment.with_message("oldMessage")
        comment_id = await comment_store.add(comment)

        await comment_store.update(comment.with_id(comment_id).with_message("updateMessage"))

        [stored] = await comment_store.get(
            TaskCommentGetModel(task_id=task_id, include_deleted=True)
        )
        assert stored.message == "updateMessage"
        assert stored.modified_at is not None
        assert stored.modified_at >= stored.at
        assert stored.at == comment.at
        assert stored.deleted_at is None

    async def test_update_row_stored_without_offset(self, comment_store, task_id, provider):
        """不带时区偏移写入的行按 UTC 读回，可与 modified_at 比较"""
        async with provider.connection() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO task_comments (task_id, author_user_id, message, at)
                VALUES (?, 7, 'legacy', '2024-10-01T01:00:00')
                RETURNING id
                """,
                (task_id,),
            )
            [(comment_id,)] = await cursor.fetchall()
            await conn.commit()

        await comment_store.update(TaskCommentUpdateModel(id=comment_id, message="edited"))

        [stored] = await comment_store.get(TaskCommentGetModel(task_id=task_id))
        assert stored.at == datetime(2024, 10, 1, 1, 0, tzinfo=UTC)
        assert stored.modified_at >= stored.at
        assert stored.message == "edited"

    async def test_update_unknown_comment_is_noop(self, comment_store, task_id):
        [comment] = generate_comments(1, task_id=task_id)
        await comment_store.add(comment)

        await comment_store.update(TaskCommentUpdateModel(id=31_337, message="ghost"))

        [stored] = await comment_store.get(TaskCommentGetModel(task_id=task_id))
        assert stored.message == comment.message
        assert stored.modified_at is None


class TestCommentLifecycle:
    """端到端：创建 -> 编辑 -> 软删除"""

    async def test_create_edit_delete(self, comment_store, task_id):
        [comment] = generate_comments(1, task_id=task_id)
        comment_id = await comment_store.add(comment.with_message("hello"))

        await comment_store.update(TaskCommentUpdateModel(id=comment_id, message="hello v2"))
        [edited] = await comment_store.get(TaskCommentGetModel(task_id=task_id))
        assert edited.message == "hello v2"
        assert edited.modified_at is not None

        await comment_store.set_deleted(comment_id)

        assert await comment_store.get(TaskCommentGetModel(task_id=task_id)) == []
        [deleted] = await comment_store.get(
            TaskCommentGetModel(task_id=task_id, include_deleted=True)
        )
        assert deleted.id == comment_id
        assert deleted.modified_at is not None
        assert deleted.deleted_at is not None
