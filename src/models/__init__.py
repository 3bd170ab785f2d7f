"""Database models."""

from .base import Base
from .user import UserModel
from .card import CardModel
from .user_card_state import UserCardStateModel

__all__ = ["Base", "UserModel", "CardModel", "UserCardStateModel"]
