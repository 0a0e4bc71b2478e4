import logging
from typing import Any, Callable, Dict, List, Mapping

from pydantic import BaseModel

from student_records.core.errors import UnknownToolError
from student_records.core.types import StudentRecord, convert_grades
from student_records.store.base import RecordStore

from .arguments import (
    AddStudentArguments,
    NameArguments,
    SubjectArguments,
    parse_arguments,
)

logger = logging.getLogger("StudentRecords.mcp.dispatcher")


def _public_record(record: StudentRecord) -> Dict[str, Any]:
    return record.model_dump(exclude_none=True)


class ToolDispatcher:
    """
    Maps a tool name to its implementation.

    Arguments are validated before any store access, so a bad call never
    reaches the store. Store exceptions propagate unchanged; the session turns
    them into JSON-RPC errors.
    """

    def __init__(self, store: RecordStore):
        self.store = store
        self._handlers: Dict[str, Callable[[Any], Any]] = {
            "list_students": self._do_list_students,
            "get_student_by_name": self._do_get_student_by_name,
            "get_student_grades": self._do_get_student_grades,
            "get_subject_grades": self._do_get_subject_grades,
            "calculate_student_average": self._do_calculate_student_average,
            "add_student": self._do_add_student,
        }

    def dispatch(self, name: str, arguments: Mapping[str, Any]) -> Any:
        handler = self._handlers.get(name)
        if handler is None:
            raise UnknownToolError(name)
        args = parse_arguments(name, arguments)
        return handler(args)

    def _do_list_students(self, args: BaseModel) -> List[Dict[str, Any]]:
        return [_public_record(r) for r in self.store.find_all()]

    def _do_get_student_by_name(self, args: NameArguments) -> Dict[str, Any]:
        return _public_record(self.store.find_by_name(args.name))

    def _do_get_student_grades(self, args: NameArguments) -> Dict[str, Any]:
        student = self.store.find_by_name(args.name)
        return {"student": args.name, "grades": student.subjects}

    def _do_get_subject_grades(self, args: SubjectArguments) -> Dict[str, Any]:
        grades = [
            {"student": student.name, "grade": student.subjects[args.subject]}
            for student in self.store.find_all()
            if args.subject in student.subjects
        ]
        return {"subject": args.subject, "grades": grades}

    def _do_calculate_student_average(self, args: NameArguments) -> Dict[str, Any]:
        student = self.store.find_by_name(args.name)
        average = student.average()
        if average is None:
            return {"student": args.name, "average": 0, "message": "No grades recorded"}
        return {
            "student": args.name,
            "average": average,
            "total_grades": len(student.subjects),
        }

    def _do_add_student(self, args: AddStudentArguments) -> Dict[str, Any]:
        subjects = convert_grades(args.subjects)
        student_id = self.store.insert(args.name, subjects)
        logger.info("Added student %r with %d subjects (id=%s)", args.name, len(subjects), student_id)
        return {
            "message": "Student added successfully",
            "student_id": student_id,
            "name": args.name,
            "subjects": subjects,
        }
