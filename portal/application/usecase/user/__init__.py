"""User use cases."""

from .remove_user import RemoveUserUseCase

__all__ = ["RemoveUserUseCase"]
