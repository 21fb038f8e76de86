from app.models.user import User, UserRole
from app.models.todo import Todo, TodoPriority, TodoStatus
from app.models.token_denylist import TokenDenylist
