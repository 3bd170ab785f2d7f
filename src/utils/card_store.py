"""Persistence primitives for cards and per-user card state.

CardStore never commits; callers wrap its writes in ``core.database.atomic``
so that several primitives form one transaction.
"""

import logging
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import and_, or_
from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlalchemy.orm import Session

from config import ALL_CLASSES_SCOPE, ROLE_STUDENT, ROLE_TEACHER, UNASSIGNED_GUARDIAN_ID
from core.exceptions import CardNotFoundError, StoreError
from models.card import CardModel
from models.user_card_state import UserCardStateModel
from schemas.card import CardWithState
from utils.converters import model_to_card_with_state

logger = logging.getLogger(__name__)


class CardStore:
    """Card table and user-card state table behind one session."""

    def __init__(self, db: Session):
        self.db = db

    def insert_card(
        self,
        question: str,
        answer: str,
        owner_teacher_id: Optional[int] = None,
        class_scope: Optional[str] = None,
    ) -> CardModel:
        """Insert a card and flush so its id is assigned.

        Args:
            question: Card question.
            answer: Card answer.
            owner_teacher_id: Authoring teacher, None for shared cards.
            class_scope: Class the card is published to, or 'ALL'.

        Returns:
            The flushed CardModel.
        """
        model = CardModel(
            question=question,
            answer=answer,
            owner_teacher_id=owner_teacher_id,
            class_scope=class_scope,
        )
        self.db.add(model)
        self.db.flush()
        return model

    def get_card(self, card_id: int) -> Optional[CardModel]:
        return self.db.query(CardModel).filter(CardModel.id == card_id).first()

    def update_card(self, card_id: int, question: str, answer: str) -> CardModel:
        """Overwrite a card's content in place.

        Raises:
            CardNotFoundError: If no card has this id.
        """
        model = self.get_card(card_id)
        if model is None:
            raise CardNotFoundError(card_id)
        model.question = question
        model.answer = answer
        self.db.flush()
        return model

    def _state_insert(self):
        dialect = self.db.get_bind().dialect.name
        if dialect == "sqlite":
            return sqlite.insert(UserCardStateModel.__table__)
        if dialect == "postgresql":
            return postgresql.insert(UserCardStateModel.__table__)
        if dialect in ("mysql", "mariadb"):
            return mysql.insert(UserCardStateModel.__table__)
        raise StoreError(f"Upsert is not supported on '{dialect}'")

    def _upsert_rows(self, rows: List[dict]) -> None:
        stmt = self._state_insert().values(rows)
        if hasattr(stmt, "on_duplicate_key_update"):
            stmt = stmt.on_duplicate_key_update(is_active=stmt.inserted.is_active)
        else:
            stmt = stmt.on_conflict_do_update(
                index_elements=[
                    UserCardStateModel.__table__.c.user_id,
                    UserCardStateModel.__table__.c.card_id,
                ],
                set_={"is_active": stmt.excluded.is_active},
            )
        self.db.execute(stmt)

    def upsert_user_card_state(self, user_id: int, card_id: int, is_active: bool) -> None:
        """Insert the (user, card) flag, or overwrite it when it exists."""
        self._upsert_rows(
            [{"user_id": user_id, "card_id": card_id, "is_active": bool(is_active)}]
        )

    def upsert_many(self, user_id: int, updates: Iterable[Tuple[int, bool]]) -> int:
        """Upsert several flags of one user in a single statement.

        Later entries for the same card replace earlier ones, so the outcome
        matches applying the updates one by one in order.

        Args:
            user_id: Owner of every flag written.
            updates: (card_id, is_active) pairs in application order.

        Returns:
            Number of distinct cards written.
        """
        latest = {}
        for card_id, is_active in updates:
            # Re-insert so the dict keeps last-write order
            latest.pop(card_id, None)
            latest[card_id] = bool(is_active)
        if not latest:
            return 0
        rows = [
            {"user_id": user_id, "card_id": card_id, "is_active": is_active}
            for card_id, is_active in latest.items()
        ]
        self._upsert_rows(rows)
        return len(rows)

    def get_user_card_state(self, user_id: int, card_id: int) -> Optional[bool]:
        model = (
            self.db.query(UserCardStateModel)
            .filter(
                UserCardStateModel.user_id == user_id,
                UserCardStateModel.card_id == card_id,
            )
            .first()
        )
        return None if model is None else model.is_active

    def query_visible_cards(
        self,
        user_id: int,
        role: str,
        guardian_id: Optional[int] = None,
        class_name: Optional[str] = None,
    ) -> List[CardWithState]:
        """Resolve every card a user may see together with its flag.

        A card is visible when the user has a state row for it, when the
        user is a teacher who authored it, or when the user is a student and
        the card belongs to their guardian and is scoped to their class or to
        all classes. The outer join on the user's own state row yields at
        most one row per card, so the union needs no de-duplication.

        Args:
            user_id: The viewing user.
            role: The viewing user's role.
            guardian_id: Student's teacher, 0/None when unassigned.
            class_name: Student's class.

        Returns:
            Cards ordered by id, each with the effective is_active flag.
        """
        conditions = [UserCardStateModel.user_id.isnot(None)]
        if role == ROLE_TEACHER:
            conditions.append(CardModel.owner_teacher_id == user_id)
        elif role == ROLE_STUDENT and guardian_id and guardian_id != UNASSIGNED_GUARDIAN_ID:
            scopes = [ALL_CLASSES_SCOPE]
            if class_name:
                scopes.append(class_name)
            conditions.append(
                and_(
                    CardModel.owner_teacher_id == guardian_id,
                    CardModel.class_scope.in_(scopes),
                )
            )

        rows = (
            self.db.query(CardModel, UserCardStateModel.is_active)
            .outerjoin(
                UserCardStateModel,
                and_(
                    UserCardStateModel.card_id == CardModel.id,
                    UserCardStateModel.user_id == user_id,
                ),
            )
            .filter(or_(*conditions))
            .order_by(CardModel.id)
            .all()
        )
        return [model_to_card_with_state(card, is_active) for card, is_active in rows]
