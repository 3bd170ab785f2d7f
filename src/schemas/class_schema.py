"""Class roster schema definitions."""

from typing import Annotated, List

from pydantic import BaseModel, ConfigDict, Field

from config import MAX_ROW_ID


class ClassInfo(BaseModel):
    class_name: str
    student_count: int


class StudentInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str
    institution: str = ""
    class_name: str = ""


class AssignStudentsRequest(BaseModel):
    student_ids: List[Annotated[int, Field(ge=1, le=MAX_ROW_ID)]]


class AssignStudentsResponse(BaseModel):
    success: bool = True
    class_name: str
    updated: int
