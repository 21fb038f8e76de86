from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Enum, Index, JSON
from sqlalchemy.orm import relationship
from datetime import datetime
import enum
from app.db.base_class import Base


class TodoStatus(str, enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class TodoPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Todo(Base):
    __tablename__ = "todos"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    title = Column(String(100), nullable=False)
    description = Column(String(500), nullable=True)
    status = Column(
        Enum(TodoStatus, values_callable=_enum_values),
        default=TodoStatus.PENDING,
        nullable=False,
    )
    priority = Column(
        Enum(TodoPriority, values_callable=_enum_values),
        default=TodoPriority.MEDIUM,
        nullable=False,
    )
    due_date = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    tags = Column(JSON, default=list, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="todos")

    __table_args__ = (
        Index("ix_todos_user_created", "user_id", "created_at"),
    )

    @property
    def is_overdue(self) -> bool:
        if not self.due_date:
            return False
        return self.status != TodoStatus.COMPLETED and datetime.utcnow() > self.due_date
