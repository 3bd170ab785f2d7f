from sqlalchemy import Boolean, Column, ForeignKey, Integer

from .base import Base


class UserCardStateModel(Base):
    __tablename__ = "user_cards"

    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    card_id = Column(
        Integer,
        ForeignKey("cards.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
    is_active = Column(Boolean, nullable=False, default=True)
