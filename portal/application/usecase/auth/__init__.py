"""Authentication use cases."""

from .begin_login import BeginLoginUseCase
from .get_current_user import GetCurrentUserUseCase
from .login import LoginUseCase
from .logout import LogoutUseCase
from .refresh_session import RefreshSessionUseCase

__all__ = [
    "BeginLoginUseCase",
    "GetCurrentUserUseCase",
    "LoginUseCase",
    "LogoutUseCase",
    "RefreshSessionUseCase",
]
