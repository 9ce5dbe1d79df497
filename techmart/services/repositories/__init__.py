"""Supabase repositories."""
from .base import BaseRepository
from .product_repo import ProductRepository
from .privilege_repo import PrivilegeRepository
from .user_repo import UserRepository

__all__ = [
    "BaseRepository",
    "ProductRepository",
    "PrivilegeRepository",
    "UserRepository",
]
