"""Card schema definitions."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from config import MAX_ROW_ID


class Card(BaseModel):
    """A globally defined question/answer card."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    question: str
    answer: str
    owner_teacher_id: Optional[int] = None
    class_scope: Optional[str] = None


class CardWithState(Card):
    """A card as seen by one user, with that user's activation flag."""

    is_active: bool = Field(
        default=True,
        description="The user's own flag; true when the user never recorded one.",
    )


class CreateCardRequest(BaseModel):
    question: str
    answer: str
    class_scope: Optional[str] = Field(
        default=None,
        description="Class the card is published to ('ALL' for every class). Teachers only.",
    )


class UpdateCardRequest(BaseModel):
    question: str
    answer: str


class ToggleArchiveRequest(BaseModel):
    is_active: bool


class ArchiveUpdate(BaseModel):
    card_id: int = Field(ge=1, le=MAX_ROW_ID)
    is_active: bool


class BatchArchiveRequest(BaseModel):
    # Emptiness is checked by the card manager so it reports a ValidationError
    updates: List[ArchiveUpdate]


class ArchiveResult(BaseModel):
    success: bool = True
    card_id: int
    is_active: bool


class BatchArchiveResult(BaseModel):
    success: bool = True
    updated: int
