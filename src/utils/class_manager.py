"""Class roster management utilities."""

import logging
from typing import Dict, Iterable, List, Optional, Union

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from config import ROLE_STUDENT, STUDENT_SEARCH_LIMIT, UNASSIGNED_GUARDIAN_ID
from core.database import atomic
from core.exceptions import ForbiddenError, NotFoundError, ValidationError
from models.user import UserModel
from schemas.user import Principal

logger = logging.getLogger(__name__)


class StudentNotInClassError(NotFoundError):
    """Raised when a student is not assigned to the requesting teacher."""

    def __init__(self, student_id: int):
        self.student_id = student_id
        super().__init__(f"Student '{student_id}' is not in your classes")


def _require_teacher(principal: Principal) -> None:
    if not principal.is_teacher:
        raise ForbiddenError("Only teachers can manage classes.")


def _normalize_class_name(class_name: str) -> str:
    return class_name.strip() if isinstance(class_name, str) else ""


class ClassManager:
    """Manages the teacher/class assignment of students."""

    def __init__(self, db: Session):
        self.db = db

    def update_where_id_in(
        self,
        user_ids: Iterable[int],
        institution: str,
        values: Dict[str, Union[int, str]],
        role: Optional[str] = None,
    ) -> int:
        """Bulk-update users by id, restricted to one institution.

        Ids belonging to another institution, or holding a different role
        when ``role`` is given, are left untouched.

        Returns:
            Number of rows updated.
        """
        ids = list(user_ids)
        if not ids:
            return 0
        query = self.db.query(UserModel).filter(
            UserModel.id.in_(ids), UserModel.institution == institution
        )
        if role is not None:
            query = query.filter(UserModel.role == role)
        return query.update(values, synchronize_session=False)

    def assign_students_to_class(
        self, teacher: Principal, class_name: str, student_ids: List[int]
    ) -> int:
        """Put students under a teacher and into one of their classes.

        Ids outside the teacher's institution, and ids of non-students, are
        skipped without an error; the return value tells how many were
        actually assigned.

        Args:
            teacher: The requesting teacher.
            class_name: Target class.
            student_ids: Users to assign.

        Returns:
            Number of students assigned.

        Raises:
            ForbiddenError: If the principal is not a teacher.
            ValidationError: If the class name or id list is empty.
        """
        _require_teacher(teacher)
        class_name = _normalize_class_name(class_name)
        if not class_name:
            raise ValidationError("Class name cannot be empty.")
        if not isinstance(student_ids, (list, tuple)) or not student_ids:
            raise ValidationError("student_ids must be a non-empty list")
        if any(isinstance(i, bool) or not isinstance(i, int) for i in student_ids):
            raise ValidationError("student_ids must contain integer ids")

        with atomic(self.db):
            updated = self.update_where_id_in(
                student_ids,
                teacher.institution,
                {"guardian_id": teacher.id, "class_name": class_name},
                role=ROLE_STUDENT,
            )

        logger.info(
            "Teacher %s assigned %s/%s students to class %s",
            teacher.id,
            updated,
            len(student_ids),
            class_name,
        )
        return updated

    def remove_student_from_class(self, teacher: Principal, student_id: int) -> None:
        """Unassign a student, only if they are under this teacher.

        Raises:
            ForbiddenError: If the principal is not a teacher.
            StudentNotInClassError: If the student is not assigned to the teacher.
        """
        _require_teacher(teacher)
        with atomic(self.db):
            updated = (
                self.db.query(UserModel)
                .filter(UserModel.id == student_id, UserModel.guardian_id == teacher.id)
                .update(
                    {"guardian_id": UNASSIGNED_GUARDIAN_ID, "class_name": ""},
                    synchronize_session=False,
                )
            )
            if not updated:
                raise StudentNotInClassError(student_id)
        logger.info("Teacher %s removed student %s", teacher.id, student_id)

    def list_classes(self, teacher: Principal) -> List[dict]:
        _require_teacher(teacher)
        rows = (
            self.db.query(UserModel.class_name, func.count(UserModel.id))
            .filter(UserModel.guardian_id == teacher.id, UserModel.class_name != "")
            .group_by(UserModel.class_name)
            .order_by(UserModel.class_name)
            .all()
        )
        return [{"class_name": name, "student_count": count} for name, count in rows]

    def list_students_in_class(self, teacher: Principal, class_name: str) -> List[UserModel]:
        _require_teacher(teacher)
        class_name = _normalize_class_name(class_name)
        return (
            self.db.query(UserModel)
            .filter(
                UserModel.guardian_id == teacher.id,
                UserModel.class_name == class_name,
            )
            .order_by(UserModel.name, UserModel.id)
            .all()
        )

    def search_students(self, teacher: Principal, query_text: str) -> List[UserModel]:
        """Find students of the teacher's institution by email or name.

        Matching is a case-insensitive substring match; at most
        STUDENT_SEARCH_LIMIT rows are returned.

        Raises:
            ForbiddenError: If the principal is not a teacher.
            ValidationError: If the query is blank.
        """
        _require_teacher(teacher)
        text = query_text.strip().lower() if isinstance(query_text, str) else ""
        if not text:
            raise ValidationError("Search query cannot be empty.")
        return (
            self.db.query(UserModel)
            .filter(
                UserModel.role == ROLE_STUDENT,
                UserModel.institution == teacher.institution,
                or_(
                    func.lower(UserModel.email).contains(text, autoescape=True),
                    func.lower(UserModel.name).contains(text, autoescape=True),
                ),
            )
            .order_by(UserModel.name, UserModel.id)
            .limit(STUDENT_SEARCH_LIMIT)
            .all()
        )
