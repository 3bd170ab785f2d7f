"""Card routes."""

from typing import Annotated, List

from fastapi import APIRouter, Path, status

from config import MAX_ROW_ID
from core.dependencies import CardManagerDep, CurrentPrincipal
from schemas.card import (
    ArchiveResult,
    BatchArchiveRequest,
    BatchArchiveResult,
    Card,
    CardWithState,
    CreateCardRequest,
    ToggleArchiveRequest,
    UpdateCardRequest,
)

router = APIRouter(prefix="/cards", tags=["Cards"])

CardId = Annotated[int, Path(ge=1, le=MAX_ROW_ID, description="Card id")]


@router.get("", response_model=List[CardWithState], summary="List visible cards")
def list_cards(
    card_manager: CardManagerDep,
    principal: CurrentPrincipal,
    active_only: bool = False,
) -> List[CardWithState]:
    """List every card the current user can see with their own active flag.

    Args:
        card_manager: Injected CardManager instance.
        principal: Current authenticated user.
        active_only: Only return cards the user has not archived.
    """
    return card_manager.list_visible_cards(principal, active_only=active_only)


@router.post(
    "",
    response_model=CardWithState,
    status_code=status.HTTP_201_CREATED,
    summary="Create a card",
)
def create_card(
    req: CreateCardRequest,
    card_manager: CardManagerDep,
    principal: CurrentPrincipal,
) -> CardWithState:
    return card_manager.create_card(
        principal, req.question, req.answer, class_scope=req.class_scope
    )


@router.put("/{card_id}", response_model=Card, summary="Update a card")
def update_card(
    card_id: CardId,
    req: UpdateCardRequest,
    card_manager: CardManagerDep,
    principal: CurrentPrincipal,
) -> Card:
    return card_manager.update_card(principal, card_id, req.question, req.answer)


@router.patch(
    "/{card_id}/archive",
    response_model=ArchiveResult,
    summary="Archive or activate a card",
)
def toggle_archive(
    card_id: CardId,
    req: ToggleArchiveRequest,
    card_manager: CardManagerDep,
    principal: CurrentPrincipal,
) -> ArchiveResult:
    card_manager.toggle_archive(principal, card_id, req.is_active)
    return ArchiveResult(card_id=card_id, is_active=req.is_active)


@router.post(
    "/archive/batch",
    response_model=BatchArchiveResult,
    summary="Archive or activate several cards",
)
def batch_toggle_archive(
    req: BatchArchiveRequest,
    card_manager: CardManagerDep,
    principal: CurrentPrincipal,
) -> BatchArchiveResult:
    """Apply several archive flags atomically.

    Either all entries are applied or, if one fails, none of them.
    """
    updated = card_manager.batch_toggle_archive(principal, req.updates)
    return BatchArchiveResult(updated=updated)
