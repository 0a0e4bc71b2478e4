"""
Typed tool arguments.

Each tool's untyped ``arguments`` object is validated into one of the models
below before the dispatcher touches the store. ``parse_arguments`` either
returns the model or raises ToolArgumentError naming the first bad field.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Type

from pydantic import BaseModel, Field, StrictStr, ValidationError

from student_records.core.errors import ToolArgumentError, UnknownToolError


class NoArguments(BaseModel):
    pass


class NameArguments(BaseModel):
    name: StrictStr


class SubjectArguments(BaseModel):
    subject: StrictStr


class AddStudentArguments(BaseModel):
    name: StrictStr = Field(min_length=1)
    # Raw grades; converted one by one in the dispatcher
    subjects: Dict[str, Any]


TOOL_ARGUMENT_MODELS: Dict[str, Type[BaseModel]] = {
    "list_students": NoArguments,
    "get_student_by_name": NameArguments,
    "get_student_grades": NameArguments,
    "get_subject_grades": SubjectArguments,
    "calculate_student_average": NameArguments,
    "add_student": AddStudentArguments,
}

_TYPE_NAMES = {
    "string_type": "a string",
    "dict_type": "an object",
}


def _argument_error(exc: ValidationError) -> ToolArgumentError:
    first = exc.errors()[0]
    loc = first.get("loc") or ("arguments",)
    field = str(loc[0])
    kind = first.get("type", "")
    if kind == "missing":
        return ToolArgumentError(f"Parameter '{field}' is required", field=field)
    if kind in _TYPE_NAMES:
        return ToolArgumentError(
            f"Parameter '{field}' is required and must be {_TYPE_NAMES[kind]}",
            field=field,
        )
    if kind == "string_too_short":
        return ToolArgumentError(f"Parameter '{field}' must not be empty", field=field)
    return ToolArgumentError(f"Invalid parameter '{field}': {first.get('msg')}", field=field)


def parse_arguments(tool: str, arguments: Mapping[str, Any]) -> BaseModel:
    model = TOOL_ARGUMENT_MODELS.get(tool)
    if model is None:
        raise UnknownToolError(tool)
    try:
        return model.model_validate(dict(arguments))
    except ValidationError as exc:
        raise _argument_error(exc) from None
