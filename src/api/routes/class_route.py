"""Class roster routes."""

from typing import Annotated, List

from fastapi import APIRouter, Path, Query

from config import MAX_ROW_ID
from core.dependencies import ClassManagerDep, CurrentPrincipal
from schemas.class_schema import (
    AssignStudentsRequest,
    AssignStudentsResponse,
    ClassInfo,
    StudentInfo,
)

router = APIRouter(prefix="/classes", tags=["Class"])

StudentId = Annotated[int, Path(ge=1, le=MAX_ROW_ID, description="Student user id")]


@router.get("", response_model=List[ClassInfo], summary="List classes")
def list_classes(
    class_manager: ClassManagerDep,
    principal: CurrentPrincipal,
) -> List[ClassInfo]:
    return [ClassInfo(**row) for row in class_manager.list_classes(principal)]


@router.get(
    "/students/search",
    response_model=List[StudentInfo],
    summary="Search students of the institution",
)
def search_students(
    class_manager: ClassManagerDep,
    principal: CurrentPrincipal,
    q: str = Query(..., description="Part of the student's email or name"),
) -> List[StudentInfo]:
    return [
        StudentInfo.model_validate(model)
        for model in class_manager.search_students(principal, q)
    ]


@router.delete("/students/{student_id}", summary="Remove a student from their class")
def remove_student(
    student_id: StudentId,
    class_manager: ClassManagerDep,
    principal: CurrentPrincipal,
) -> dict:
    """Unassign a student from the current teacher.

    Args:
        student_id: Student to remove.
        class_manager: Injected ClassManager instance.
        principal: Current authenticated teacher.

    Returns:
        Dictionary with success message.

    Raises:
        StudentNotInClassError: If the student is not assigned to this teacher.
    """
    class_manager.remove_student_from_class(principal, student_id)
    return {"success": True, "message": "Student removed from class"}


@router.post(
    "/{class_name}/students",
    response_model=AssignStudentsResponse,
    summary="Assign students to a class",
)
def assign_students(
    class_name: str,
    req: AssignStudentsRequest,
    class_manager: ClassManagerDep,
    principal: CurrentPrincipal,
) -> AssignStudentsResponse:
    """Assign students to one of the current teacher's classes.

    Students from other institutions are skipped; ``updated`` reports how
    many were assigned.
    """
    updated = class_manager.assign_students_to_class(principal, class_name, req.student_ids)
    return AssignStudentsResponse(class_name=class_name.strip(), updated=updated)


@router.get(
    "/{class_name}/students",
    response_model=List[StudentInfo],
    summary="List students of a class",
)
def list_students(
    class_name: str,
    class_manager: ClassManagerDep,
    principal: CurrentPrincipal,
) -> List[StudentInfo]:
    return [
        StudentInfo.model_validate(model)
        for model in class_manager.list_students_in_class(principal, class_name)
    ]
