"""Tests for student_records.core.types: records and grade conversion."""

import pytest
from pydantic import ValidationError

from student_records.core.errors import (
    InvalidGradeError,
    RecordStoreError,
    StudentNotFoundError,
    ToolArgumentError,
    UnknownToolError,
)
from student_records.core.types import StudentRecord, convert_grades, parse_grade
from student_records.mcp.protocol import INTERNAL_ERROR, INVALID_PARAMS


class TestStudentRecord:
    def test_defaults(self):
        record = StudentRecord(name="Ana")
        assert record.id is None
        assert record.subjects == {}

    def test_empty_name_rejected(self):
        with pytest.raises(ValidationError):
            StudentRecord(name="", subjects={})

    def test_non_finite_grade_rejected(self):
        with pytest.raises(ValidationError):
            StudentRecord(name="Ana", subjects={"math": float("nan")})

    def test_average(self):
        record = StudentRecord(name="Ana", subjects={"math": 8.0, "history": 9.0})
        assert record.average() == pytest.approx(8.5)

    def test_average_without_subjects(self):
        assert StudentRecord(name="Ana").average() is None

    def test_dump_omits_missing_id(self):
        dumped = StudentRecord(name="Ana", subjects={"math": 9}).model_dump(exclude_none=True)
        assert dumped == {"name": "Ana", "subjects": {"math": 9.0}}


class TestParseGrade:
    @pytest.mark.parametrize("value, expected", [
        (9, 9.0),
        (8.5, 8.5),
        ("7.25", 7.25),
        ("10", 10.0),
        ("-1", -1.0),
    ])
    def test_accepts_numbers_and_numeric_strings(self, value, expected):
        assert parse_grade("math", value) == expected

    def test_non_numeric_string(self):
        with pytest.raises(InvalidGradeError) as exc_info:
            parse_grade("matematicas", "abc")
        assert str(exc_info.value) == "Invalid grade for matematicas: abc"
        assert exc_info.value.subject == "matematicas"

    @pytest.mark.parametrize("value", [True, False, None, [9], {"v": 9}])
    def test_wrong_type(self, value):
        with pytest.raises(InvalidGradeError) as exc_info:
            parse_grade("historia", value)
        assert str(exc_info.value) == "Invalid grade type for historia"

    @pytest.mark.parametrize("value", ["nan", "inf", "-Infinity", float("inf")])
    def test_non_finite_rejected(self, value):
        with pytest.raises(InvalidGradeError):
            parse_grade("math", value)

    def test_huge_integer_rejected(self):
        with pytest.raises(InvalidGradeError):
            parse_grade("math", 10 ** 400)


class TestConvertGrades:
    def test_converts_every_grade(self):
        assert convert_grades({"math": 9, "history": "8.5"}) == {"math": 9.0, "history": 8.5}

    def test_empty(self):
        assert convert_grades({}) == {}

    def test_first_bad_grade_fails_whole_call(self):
        with pytest.raises(InvalidGradeError) as exc_info:
            convert_grades({"math": 9, "history": "abc", "science": "x"})
        assert exc_info.value.subject == "history"


class TestErrorCodes:
    def test_validation_errors_are_invalid_params(self):
        assert ToolArgumentError("bad").code == INVALID_PARAMS
        assert InvalidGradeError("math", "x").code == INVALID_PARAMS
        assert UnknownToolError("nope").code == INVALID_PARAMS

    def test_domain_and_store_errors_are_internal(self):
        assert StudentNotFoundError("Ana").code == INTERNAL_ERROR
        assert RecordStoreError("down").code == INTERNAL_ERROR

    def test_not_found_message(self):
        assert str(StudentNotFoundError("Pedro")) == "Student 'Pedro' not found"

    def test_invalid_grade_is_a_tool_argument_error(self):
        assert isinstance(InvalidGradeError("math", "x"), ToolArgumentError)

    def test_protocol_reexports_error_codes(self):
        from student_records.core import errors
        from student_records.mcp import protocol
        assert (protocol.PARSE_ERROR, protocol.METHOD_NOT_FOUND) == (-32700, -32601)
        assert protocol.INVALID_PARAMS == errors.INVALID_PARAMS == -32602
        assert protocol.INTERNAL_ERROR == errors.INTERNAL_ERROR == -32603

    def test_mcp_package_exports_session_stack(self):
        import student_records.mcp as mcp
        from student_records.mcp.session import McpSession
        assert mcp.McpSession is McpSession
        assert len(mcp.list_tools()) == 6
