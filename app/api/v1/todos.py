from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.db.session import get_db
from app.models.user import User
from app.schemas.todo import TodoCreate, TodoResponse, TodoStatusUpdate, TodoUpdate
from app.services.todo_service import TodoService
from app.utils.response import paginated_response, success

router = APIRouter()


def _serialize(todo) -> TodoResponse:
    return TodoResponse.model_validate(todo)


@router.get("/", response_model=dict)
def list_todos(
    status_filter: Optional[str] = Query(None, alias="status"),
    priority: Optional[str] = None,
    search: Optional[str] = None,
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """List the caller's todos with filters, search, sorting and pagination"""
    todos, total = TodoService.list_todos(
        db,
        current_user.id,
        status=status_filter,
        priority=priority,
        search=search,
        sort_by=sort_by,
        page=page,
        limit=limit,
    )
    return paginated_response(
        [_serialize(todo) for todo in todos],
        total=total,
        page=page,
        limit=limit,
        message="Todos retrieved",
    )


@router.post("/", response_model=dict, status_code=status.HTTP_201_CREATED)
def create_todo(
    todo_in: TodoCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    todo = TodoService.create_todo(db, current_user.id, todo_in)
    return success(data=_serialize(todo), message="Todo created")


@router.get("/stats", response_model=dict)
def get_todo_stats(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    stats = TodoService.get_stats(db, current_user.id)
    return success(data=stats, message="Todo statistics retrieved")


@router.get("/{todo_id}", response_model=dict)
def get_todo(
    todo_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    todo = TodoService.get_todo(db, todo_id, current_user.id)
    return success(data=_serialize(todo), message="Todo retrieved")


@router.put("/{todo_id}", response_model=dict)
def update_todo(
    todo_id: int,
    todo_update: TodoUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    todo = TodoService.update_todo(db, todo_id, current_user.id, todo_update)
    return success(data=_serialize(todo), message="Todo updated")


@router.patch("/{todo_id}/status", response_model=dict)
def update_todo_status(
    todo_id: int,
    status_update: TodoStatusUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update only the status of a todo"""
    todo = TodoService.update_status(db, todo_id, current_user.id, status_update.status)
    return success(data=_serialize(todo), message="Todo status updated")


@router.delete("/{todo_id}", response_model=dict)
def delete_todo(
    todo_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    TodoService.delete_todo(db, todo_id, current_user.id)
    return success(data={}, message="Todo deleted")
