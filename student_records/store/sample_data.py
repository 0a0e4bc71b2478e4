"""Sample students used by ``student-records-mcp seed``."""

from typing import List

from student_records.core.types import StudentRecord

SAMPLE_STUDENTS: List[dict] = [
    {
        "name": "Juan Pérez",
        "subjects": {
            "matematicas": 8.5,
            "historia": 9.0,
            "ciencias": 7.5,
            "literatura": 8.8,
            "ingles": 8.2,
        },
    },
    {
        "name": "María García",
        "subjects": {
            "matematicas": 9.2,
            "historia": 8.7,
            "ciencias": 9.5,
            "literatura": 8.9,
            "ingles": 9.1,
        },
    },
    {
        "name": "Carlos López",
        "subjects": {
            "matematicas": 7.8,
            "historia": 8.2,
            "ciencias": 8.0,
            "literatura": 7.9,
            "ingles": 8.5,
        },
    },
    {
        "name": "Ana Martínez",
        "subjects": {
            "matematicas": 9.5,
            "historia": 9.3,
            "ciencias": 9.0,
            "literatura": 9.4,
            "ingles": 9.2,
        },
    },
    {
        "name": "Luis Rodríguez",
        "subjects": {
            "matematicas": 7.2,
            "historia": 7.8,
            "ciencias": 7.5,
            "literatura": 8.1,
            "ingles": 7.9,
        },
    },
]


def sample_records() -> List[StudentRecord]:
    return [StudentRecord(**student) for student in SAMPLE_STUDENTS]
