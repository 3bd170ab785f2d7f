"""Conversions between ORM rows and schema objects."""

from typing import Optional

from models.card import CardModel
from models.user import UserModel
from schemas.card import CardWithState
from schemas.user import Principal, User


def model_to_user(model: UserModel) -> User:
    return User.model_validate(model)


def user_to_principal(user: User) -> Principal:
    """Project a stored user onto the attributes a request is authorized by."""
    return Principal(
        id=user.id,
        email=user.email,
        role=user.role,
        guardian_id=user.guardian_id or 0,
        class_name=user.class_name or "",
        institution=user.institution or "",
    )


def model_to_card_with_state(model: CardModel, is_active: Optional[bool]) -> CardWithState:
    """Attach a user's flag to a card; a missing flag means active."""
    return CardWithState(
        id=model.id,
        question=model.question,
        answer=model.answer,
        owner_teacher_id=model.owner_teacher_id,
        class_scope=model.class_scope,
        is_active=True if is_active is None else bool(is_active),
    )
