"""
数据访问层（Repository）包
"""
from .course_repository import CourseRepository
from .student_repository import StudentRepository
from .template_repository import TemplateRepository
from .audit_repository import AuditRepository
from .data_provider import SqlDataProvider, InMemoryDataProvider

__all__ = [
    'CourseRepository',
    'StudentRepository',
    'TemplateRepository',
    'AuditRepository',
    'SqlDataProvider',
    'InMemoryDataProvider',
]
