"""TaskStore SQLite 实现

tasks 表构成森林（parent_task_id）。创建后仅 status 与 assigned_to_user_id 可变，
不提供删除。子树查询以 WITH RECURSIVE 下推到数据库执行。
"""

import json
from collections.abc import Sequence

import aiosqlite
import structlog

from ..exceptions import CycleDetectedError
from ..models.enums import TaskStatus
from ..models.queries import AssignTaskModel, TaskGetModel
from ..models.task import SubTask, Task
from .base import (
    SqliteStoreBase,
    from_db_ts,
    single_id,
    to_db_ts,
    to_db_ts_or_none,
)

log = structlog.get_logger()

_INSERT_TASK_SQL = """
INSERT INTO tasks (parent_task_id, number, title, description, status,
                   created_at, created_by_user_id, assigned_to_user_id, completed_at)
VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
RETURNING id
"""

_SELECT_TASKS_SQL = """
SELECT id, parent_task_id, number, title, description, status,
       created_at, created_by_user_id, assigned_to_user_id, completed_at
  FROM tasks
"""

# 锚点：parent_task_id 的直接子节点；递归：已接纳节点的子节点。
# 每一层都按状态过滤，不匹配的节点连同其整棵子树被剪枝。
# path 为逗号分隔的 ID 路径，is_cycle 标记当前节点已在自身路径上出现过，
# 带环标记的行不再向下展开。
_SUB_TASKS_SQL = """
WITH RECURSIVE tasks_tree (id, title, status, path, is_cycle) AS (
    SELECT t.id,
           t.title,
           t.status,
           t.parent_task_id || ',' || t.id,
           t.id = t.parent_task_id
      FROM tasks t
     WHERE t.parent_task_id = :parent_task_id
       AND t.status IN (SELECT value FROM json_each(:statuses))
    UNION ALL
    SELECT t.id,
           t.title,
           t.status,
           tt.path || ',' || t.id,
           instr(',' || tt.path || ',', ',' || t.id || ',') > 0
      FROM tasks t
      JOIN tasks_tree tt ON tt.id = t.parent_task_id
     WHERE t.status IN (SELECT value FROM json_each(:statuses))
       AND NOT tt.is_cycle
)
SELECT id AS task_id, title, status, path AS parent_task_ids, is_cycle
  FROM tasks_tree
"""


class SqliteTaskStore(SqliteStoreBase):
    """TaskStore 的 SQLite 实现"""

    async def add(self, tasks: Sequence[Task]) -> list[int]:
        """批量创建任务

        所有行在同一连接的同一事务内写入，任一行违反约束则整批回滚。

        Args:
            tasks: 待插入任务（id 字段被忽略）

        Returns:
            数据库分配的 ID，长度与顺序与输入一致
        """
        if not tasks:
            return []

        async with self._connection("task_store.add") as conn:
            ids: list[int] = []
            try:
                for task in tasks:
                    cursor = await conn.execute(_INSERT_TASK_SQL, self._task_params(task))
                    rows = await cursor.fetchall()
                    ids.append(single_id(rows, "task_store.add"))
                await conn.commit()
            except Exception:
                await conn.rollback()
                raise

        log.info("tasks_added", count=len(ids), first_id=ids[0], last_id=ids[-1])
        return ids

    async def get(self, query: TaskGetModel) -> list[Task]:
        """按 ID 集合查询任务

        task_ids 为空时不做 ID 限制，返回全部任务。
        """
        sql = _SELECT_TASKS_SQL
        params: tuple = ()
        if query.task_ids:
            sql += " WHERE id IN (SELECT value FROM json_each(?))"
            params = (json.dumps(list(query.task_ids)),)
        else:
            log.debug("task_get_without_id_filter")
        sql += " ORDER BY id"

        async with self._connection("task_store.get") as conn:
            cursor = await conn.execute(sql, params)
            rows = await cursor.fetchall()
        return [self._row_to_task(row) for row in rows]

    async def assign(self, model: AssignTaskModel) -> None:
        """更新指派人与状态

        task_id 不存在时静默无操作。
        """
        async with self._connection("task_store.assign") as conn:
            cursor = await conn.execute(
                """
                UPDATE tasks
                   SET assigned_to_user_id = ?,
                       status = ?
                 WHERE id = ?
                """,
                (model.assign_to_user_id, int(model.status), model.task_id),
            )
            affected = cursor.rowcount
            await conn.commit()

        log.info(
            "task_assigned",
            task_id=model.task_id,
            assign_to_user_id=model.assign_to_user_id,
            status=model.status.name,
            affected=affected,
        )

    async def get_sub_tasks_in_status(
        self,
        parent_task_id: int,
        statuses: Sequence[TaskStatus],
    ) -> list[SubTask]:
        """递归查询子任务

        从 parent_task_id 的直接子节点开始（根节点本身不返回），
        仅接纳状态在 statuses 中的节点并继续展开其子节点。

        Args:
            parent_task_id: 遍历根节点
            statuses: 接纳的状态集合

        Returns:
            SubTask 列表（无序），parent_task_ids 为根 -> 节点的完整路径

        Raises:
            CycleDetectedError: 遍历路径上出现重复节点
        """
        if not statuses:
            return []

        params = {
            "parent_task_id": parent_task_id,
            "statuses": json.dumps(sorted({int(s) for s in statuses})),
        }
        async with self._connection("task_store.get_sub_tasks_in_status") as conn:
            cursor = await conn.execute(_SUB_TASKS_SQL, params)
            rows = await cursor.fetchall()

        sub_tasks: list[SubTask] = []
        for row in rows:
            path = [int(part) for part in row["parent_task_ids"].split(",")]
            if row["is_cycle"]:
                log.error(
                    "task_tree_cycle_detected",
                    parent_task_id=parent_task_id,
                    task_id=row["task_id"],
                    path=path,
                )
                raise CycleDetectedError(parent_task_id, row["task_id"], path)
            sub_tasks.append(
                SubTask(
                    task_id=row["task_id"],
                    title=row["title"],
                    status=TaskStatus(row["status"]),
                    parent_task_ids=path,
                )
            )
        return sub_tasks

    @staticmethod
    def _task_params(task: Task) -> tuple:
        return (
            task.parent_task_id,
            task.number,
            task.title,
            task.description,
            int(task.status),
            to_db_ts(task.created_at),
            task.created_by_user_id,
            task.assigned_to_user_id,
            to_db_ts_or_none(task.completed_at),
        )

    @staticmethod
    def _row_to_task(row: aiosqlite.Row) -> Task:
        """将数据库行转换为 Task 模型"""
        return Task(
            id=row["id"],
            parent_task_id=row["parent_task_id"],
            number=row["number"],
            title=row["title"],
            description=row["description"],
            status=TaskStatus(row["status"]),
            created_at=from_db_ts(row["created_at"]),
            created_by_user_id=row["created_by_user_id"],
            assigned_to_user_id=row["assigned_to_user_id"],
            completed_at=from_db_ts(row["completed_at"]),
        )
