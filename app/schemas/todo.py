from pydantic import BaseModel, field_validator
from typing import List, Optional
from datetime import datetime, timezone

from app.models.todo import TodoPriority, TodoStatus


def clean_title(value):
    if value is None:
        return value
    value = value.strip()
    if not 2 <= len(value) <= 100:
        raise ValueError("Title must be between 2 and 100 characters")
    return value


def clean_description(value):
    if value is None:
        return value
    value = value.strip()
    if len(value) > 500:
        raise ValueError("Description cannot be more than 500 characters")
    return value


def clean_tags(value):
    if value is None:
        return value
    tags = [tag.strip() for tag in value]
    if any(len(tag) > 20 for tag in tags):
        raise ValueError("Tags must be 20 characters or less")
    return tags


def naive_utc(value):
    # Stored datetimes are naive UTC.
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class TodoCreate(BaseModel):
    title: str
    description: Optional[str] = None
    status: TodoStatus = TodoStatus.PENDING
    priority: TodoPriority = TodoPriority.MEDIUM
    due_date: Optional[datetime] = None
    tags: List[str] = []

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        return clean_title(v)

    @field_validator("description")
    @classmethod
    def validate_description(cls, v):
        return clean_description(v)

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v):
        return clean_tags(v)

    @field_validator("due_date")
    @classmethod
    def validate_due_date(cls, v):
        return naive_utc(v)


class TodoUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[TodoStatus] = None
    priority: Optional[TodoPriority] = None
    due_date: Optional[datetime] = None
    tags: Optional[List[str]] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        return clean_title(v)

    @field_validator("description")
    @classmethod
    def validate_description(cls, v):
        return clean_description(v)

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v):
        return clean_tags(v)

    @field_validator("due_date")
    @classmethod
    def validate_due_date(cls, v):
        return naive_utc(v)


class TodoStatusUpdate(BaseModel):
    status: TodoStatus


class TodoResponse(BaseModel):
    id: int
    user_id: int
    title: str
    description: Optional[str] = None
    status: TodoStatus
    priority: TodoPriority
    due_date: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    tags: List[str] = []
    is_overdue: bool
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
