from datetime import datetime, timedelta
from typing import List, Optional, Tuple

import structlog
from sqlalchemy import case, func, or_
from sqlalchemy.orm import Session

from app.core.exceptions import TodoAccessDenied, TodoNotFound
from app.models.todo import Todo, TodoPriority, TodoStatus
from app.schemas.todo import TodoCreate, TodoUpdate

logger = structlog.get_logger()

UPCOMING_WINDOW = timedelta(days=3)

PRIORITY_RANK = case(
    (Todo.priority == TodoPriority.HIGH, 3),
    (Todo.priority == TodoPriority.MEDIUM, 2),
    else_=1,
)

SORT_ORDERS = {
    "dueDate": (Todo.due_date.asc(),),
    "priority": (PRIORITY_RANK.desc(),),
    "title": (Todo.title.asc(),),
}
DEFAULT_SORT = (Todo.created_at.desc(), Todo.id.desc())


def _set_status(todo: Todo, new_status: TodoStatus) -> None:
    if new_status == TodoStatus.COMPLETED:
        if not todo.completed_at:
            todo.completed_at = datetime.utcnow()
    else:
        todo.completed_at = None
    todo.status = new_status


class TodoService:

    @staticmethod
    def list_todos(
        db: Session,
        user_id: int,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        search: Optional[str] = None,
        sort_by: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Tuple[List[Todo], int]:
        """Owner-scoped listing with filters, substring search and pagination.

        Unknown ``status``/``priority``/``sort_by`` values are ignored.
        """
        query = db.query(Todo).filter(Todo.user_id == user_id)

        if status in {s.value for s in TodoStatus}:
            query = query.filter(Todo.status == TodoStatus(status))

        if priority in {p.value for p in TodoPriority}:
            query = query.filter(Todo.priority == TodoPriority(priority))

        if search:
            pattern = f"%{search.strip()}%"
            query = query.filter(or_(Todo.title.ilike(pattern), Todo.description.ilike(pattern)))

        total = query.count()
        todos = (
            query.order_by(*SORT_ORDERS.get(sort_by, DEFAULT_SORT))
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return todos, total

    @staticmethod
    def get_todo(db: Session, todo_id: int, user_id: int, action: str = "access") -> Todo:
        todo = db.query(Todo).filter(Todo.id == todo_id).first()
        if not todo:
            raise TodoNotFound()
        if todo.user_id != user_id:
            logger.warning("todo_access_denied", todo_id=todo_id, user_id=user_id, action=action)
            raise TodoAccessDenied(action)
        return todo

    @staticmethod
    def create_todo(db: Session, user_id: int, todo_in: TodoCreate) -> Todo:
        todo = Todo(
            user_id=user_id,
            title=todo_in.title,
            description=todo_in.description,
            priority=todo_in.priority,
            due_date=todo_in.due_date,
            tags=todo_in.tags,
            status=TodoStatus.PENDING,
        )
        _set_status(todo, todo_in.status)

        db.add(todo)
        db.commit()
        db.refresh(todo)

        logger.info("todo_created", todo_id=todo.id, user_id=user_id)
        return todo

    @staticmethod
    def update_todo(db: Session, todo_id: int, user_id: int, todo_update: TodoUpdate) -> Todo:
        todo = TodoService.get_todo(db, todo_id, user_id, action="update")

        update_data = todo_update.model_dump(exclude_unset=True)
        new_status = update_data.pop("status", None)
        for field, value in update_data.items():
            if field in {"title", "priority", "tags"} and value is None:
                continue
            setattr(todo, field, value)
        if new_status is not None:
            _set_status(todo, new_status)

        db.commit()
        db.refresh(todo)
        return todo

    @staticmethod
    def update_status(db: Session, todo_id: int, user_id: int, new_status: TodoStatus) -> Todo:
        todo = TodoService.get_todo(db, todo_id, user_id, action="update")
        _set_status(todo, new_status)
        db.commit()
        db.refresh(todo)
        return todo

    @staticmethod
    def delete_todo(db: Session, todo_id: int, user_id: int) -> None:
        todo = TodoService.get_todo(db, todo_id, user_id, action="delete")
        db.delete(todo)
        db.commit()
        logger.info("todo_deleted", todo_id=todo_id, user_id=user_id)

    @staticmethod
    def get_stats(db: Session, user_id: int, now: Optional[datetime] = None) -> dict:
        """Counts by status plus overdue and due-within-three-days totals."""
        now = now or datetime.utcnow()

        stats = {
            "total": 0,
            TodoStatus.PENDING.value: 0,
            TodoStatus.IN_PROGRESS.value: 0,
            TodoStatus.COMPLETED.value: 0,
        }
        rows = (
            db.query(Todo.status, func.count(Todo.id))
            .filter(Todo.user_id == user_id)
            .group_by(Todo.status)
            .all()
        )
        for todo_status, count in rows:
            stats[TodoStatus(todo_status).value] = count
            stats["total"] += count

        open_todos = db.query(Todo).filter(
            Todo.user_id == user_id,
            Todo.status != TodoStatus.COMPLETED,
        )
        stats["overdue"] = open_todos.filter(Todo.due_date < now).count()
        stats["upcoming"] = open_todos.filter(
            Todo.due_date >= now,
            Todo.due_date <= now + UPCOMING_WINDOW,
        ).count()
        return stats
