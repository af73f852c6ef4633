"""
Repository Pattern for Database Operations

- UserRepository: user records, their orders and their persisted cart
"""
from .user_repo import UserRepository

__all__ = ["UserRepository"]
