"""
Student Records Core Types
--------------------------
Pydantic models for student records and the grade conversion used by
``add_student``.
"""

import math
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, Field, field_validator

from student_records.core.errors import InvalidGradeError


class StudentRecord(BaseModel):
    id: Optional[str] = None
    name: str = Field(min_length=1)
    subjects: Dict[str, float] = Field(default_factory=dict)

    @field_validator("subjects")
    @classmethod
    def _grades_are_finite(cls, value: Dict[str, float]) -> Dict[str, float]:
        for subject, grade in value.items():
            if not math.isfinite(grade):
                raise ValueError(f"grade for {subject} must be finite")
        return value

    def average(self) -> Optional[float]:
        """Mean grade, or None when no subjects are recorded."""
        if not self.subjects:
            return None
        return sum(self.subjects.values()) / len(self.subjects)


def parse_grade(subject: str, value: Any) -> float:
    """
    Convert one grade to a float.

    Accepts ints and floats (not bools) and strings holding a decimal number.
    Anything else, and any non-finite result, raises InvalidGradeError.
    """
    if isinstance(value, bool):
        raise InvalidGradeError(subject, value)
    if isinstance(value, (int, float)):
        try:
            grade = float(value)
        except OverflowError:
            raise InvalidGradeError(subject, value) from None
    elif isinstance(value, str):
        try:
            grade = float(value)
        except ValueError:
            raise InvalidGradeError(subject, value) from None
    else:
        raise InvalidGradeError(subject, value)
    if not math.isfinite(grade):
        raise InvalidGradeError(subject, value)
    return grade


def convert_grades(subjects: Mapping[str, Any]) -> Dict[str, float]:
    """Convert every grade, failing on the first invalid one."""
    return {subject: parse_grade(subject, value) for subject, value in subjects.items()}
