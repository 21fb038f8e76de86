from fastapi import status
from typing import Any, Dict, List, Optional


class APIError(Exception):
    def __init__(
        self,
        status_code: int,
        message: str,
        errors: Optional[List[Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.errors = errors or []
        self.headers = headers


class UserAlreadyExists(APIError):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            message="User already exists",
        )


class EmailInUse(APIError):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            message="Email already in use",
        )


class InvalidCredentials(APIError):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            message="Invalid email or password",
        )


class IncorrectPassword(APIError):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            message="Current password is incorrect",
        )


class UserNotFound(APIError):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            message="User not found",
        )


class TodoNotFound(APIError):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            message="Todo not found",
        )


class TodoAccessDenied(APIError):
    def __init__(self, action: str = "access"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            message=f"Not authorized to {action} this todo",
        )
