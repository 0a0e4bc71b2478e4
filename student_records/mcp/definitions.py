import copy
from typing import List, Dict, Any

TOOLS_SCHEMAS: List[Dict[str, Any]] = [
    {
        "name": "list_students",
        "description": "List every student in the database with their subjects and grades.",
        "inputSchema": {
            "type": "object",
            "properties": {},
        }
    },
    {
        "name": "get_student_by_name",
        "description": "Look up a single student by exact name.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "name": {"type": "string", "description": "Name of the student to look up"}
            },
            "required": ["name"]
        }
    },
    {
        "name": "get_student_grades",
        "description": "Get the grades of a specific student.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "name": {"type": "string", "description": "Name of the student"}
            },
            "required": ["name"]
        }
    },
    {
        "name": "get_subject_grades",
        "description": "Get every student's grade for a specific subject. Students without that subject are omitted.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "subject": {"type": "string", "description": "Name of the subject"}
            },
            "required": ["subject"]
        }
    },
    {
        "name": "calculate_student_average",
        "description": "Calculate a student's average grade across all of their subjects.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "name": {"type": "string", "description": "Name of the student"}
            },
            "required": ["name"]
        }
    },
    {
        "name": "add_student",
        "description": "Add a new student to the database.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "name": {"type": "string", "description": "Name of the student"},
                "subjects": {
                    "type": "object",
                    "description": (
                        "Subjects and grades of the student. Grades may be numbers or numeric "
                        "strings (format: {\"matematicas\": 8.5, \"historia\": \"9.0\"})"
                    ),
                    "additionalProperties": {"type": ["number", "string"]}
                }
            },
            "required": ["name", "subjects"]
        }
    },
]

TOOL_NAMES = tuple(schema["name"] for schema in TOOLS_SCHEMAS)


def list_tools() -> List[Dict[str, Any]]:
    """Tool descriptors in registry order. Callers get their own copy."""
    return copy.deepcopy(TOOLS_SCHEMAS)
