from student_records.core.config import AppConfig
from student_records.core.types import StudentRecord

__all__ = ["AppConfig", "StudentRecord"]
