"""Card visibility and per-user state management.

CardManager resolves which cards a principal can see and applies the card
mutations: create-and-activate, content update, archive toggle and batch
archive toggle. Every mutation is validated before the first write and runs
inside one transaction.
"""

import logging
from collections.abc import Mapping, Sequence
from typing import Any, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from config import MAX_ROW_ID
from core.database import atomic
from core.exceptions import CardNotFoundError, NotFoundError, ValidationError
from schemas.card import Card, CardWithState
from schemas.user import Principal
from utils.card_store import CardStore
from utils.converters import model_to_card_with_state

logger = logging.getLogger(__name__)


def _require_text(value: Optional[str], field: str) -> str:
    text = value.strip() if isinstance(value, str) else ""
    if not text:
        raise ValidationError(f"{field} cannot be empty")
    return text


def _parse_update(entry: Any) -> Tuple[int, bool]:
    if isinstance(entry, Mapping):
        card_id, is_active = entry.get("card_id"), entry.get("is_active")
    else:
        card_id = getattr(entry, "card_id", None)
        is_active = getattr(entry, "is_active", None)
    if isinstance(card_id, bool) or not isinstance(card_id, int):
        raise ValidationError("Each update needs an integer card_id")
    if not 1 <= card_id <= MAX_ROW_ID:
        raise ValidationError(f"card_id out of range: {card_id}")
    if not isinstance(is_active, bool):
        raise ValidationError("Each update needs a boolean is_active")
    return card_id, is_active


class CardManager:
    """Visibility resolution and state mutations for cards."""

    def __init__(self, db: Session):
        """Initialize CardManager.

        Args:
            db: SQLAlchemy Session.
        """
        self.db = db
        self.store = CardStore(db)

    def list_visible_cards(
        self, principal: Principal, active_only: bool = False
    ) -> List[CardWithState]:
        """List the cards a principal may see with their own activation flag.

        Args:
            principal: The authenticated user.
            active_only: Drop cards the user archived.

        Returns:
            Visible cards ordered by id.
        """
        cards = self.store.query_visible_cards(
            user_id=principal.id,
            role=principal.role,
            guardian_id=principal.guardian_id,
            class_name=principal.class_name,
        )
        if active_only:
            cards = [card for card in cards if card.is_active]
        return cards

    def create_card(
        self,
        principal: Principal,
        question: str,
        answer: str,
        class_scope: Optional[str] = None,
    ) -> CardWithState:
        """Create a card and activate it for its creator.

        The card row and the creator's state row are written in the same
        transaction; if either fails neither exists afterwards.

        Args:
            principal: The creating user.
            question: Card question, trimmed.
            answer: Card answer, trimmed.
            class_scope: Class to publish to; ignored unless the creator is a
                teacher.

        Returns:
            The new card, active for its creator.

        Raises:
            ValidationError: If question or answer is empty.
            StoreError: If the database rejects either write.
        """
        question = _require_text(question, "question")
        answer = _require_text(answer, "answer")

        owner_teacher_id = None
        scope = None
        if principal.is_teacher:
            owner_teacher_id = principal.id
            if isinstance(class_scope, str) and class_scope.strip():
                scope = class_scope.strip()

        with atomic(self.db):
            card = self.store.insert_card(
                question, answer, owner_teacher_id=owner_teacher_id, class_scope=scope
            )
            self.store.upsert_user_card_state(principal.id, card.id, True)
            result = model_to_card_with_state(card, True)

        logger.info(
            "User %s created card %s (class_scope=%s)", principal.id, result.id, scope
        )
        return result

    def update_card(
        self, principal: Principal, card_id: int, question: str, answer: str
    ) -> Card:
        """Overwrite a card's question and answer.

        Any authenticated user may edit any card; visibility links and
        per-user flags are untouched.

        Raises:
            ValidationError: If question or answer is empty.
            CardNotFoundError: If the card does not exist.
        """
        question = _require_text(question, "question")
        answer = _require_text(answer, "answer")

        with atomic(self.db):
            model = self.store.update_card(card_id, question, answer)
            result = Card.model_validate(model)

        logger.info("User %s updated card %s", principal.id, card_id)
        return result

    def toggle_archive(self, principal: Principal, card_id: int, is_active: bool) -> None:
        """Set the principal's own activation flag for a card.

        Repeating the call with the same value leaves the same state.

        Raises:
            CardNotFoundError: If the card does not exist.
        """
        if not isinstance(is_active, bool):
            raise ValidationError("is_active must be a boolean")

        with atomic(self.db):
            try:
                self.store.upsert_user_card_state(principal.id, card_id, is_active)
            except IntegrityError as exc:
                # The principal row exists, so only the card key can be dangling
                raise CardNotFoundError(card_id) from exc

        logger.info(
            "User %s set card %s active=%s", principal.id, card_id, is_active
        )

    def batch_toggle_archive(self, principal: Principal, updates: Sequence[Any]) -> int:
        """Set several of the principal's flags at once.

        Either every entry takes effect or none does. When a card id occurs
        more than once the last entry wins.

        Args:
            principal: The user whose flags change.
            updates: Non-empty sequence of {card_id, is_active} entries.

        Returns:
            Number of distinct cards written.

        Raises:
            ValidationError: If updates is empty, not a sequence, or holds a
                malformed entry.
            NotFoundError: If a card id does not exist; nothing is applied.
            StoreError: If any upsert fails; nothing is applied.
        """
        if isinstance(updates, (str, bytes, Mapping)) or not isinstance(updates, Sequence):
            raise ValidationError("updates must be a list")
        if not updates:
            raise ValidationError("updates cannot be empty")
        pairs = [_parse_update(entry) for entry in updates]

        with atomic(self.db):
            try:
                written = self.store.upsert_many(principal.id, pairs)
            except IntegrityError as exc:
                raise NotFoundError("One or more cards in the batch do not exist") from exc

        logger.info("User %s batch-updated %s cards", principal.id, written)
        return written
