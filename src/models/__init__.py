"""
数据模型包
"""
from sqlalchemy.orm import declarative_base

# 创建 ORM 基类
Base = declarative_base()

# 导出所有模型：课程相关
from .subject import Subject
from .course import Course
from .course_prerequisite import CoursePrerequisite

# 导出所有模型：学生相关
from .student import Student
from .enrollment import Enrollment
from .transfer_credit import TransferCredit
from .course_substitution import CourseSubstitution

# 导出所有模型：学位要求相关
from .degree_requirement_template import DegreeRequirementTemplate
from .requirement_category import RequirementCategory
from .degree_requirement import DegreeRequirement
from .conditional_requirement import ConditionalRequirement
from .prerequisite_link import PrerequisiteLink

# 导出所有模型：审核缓存
from .student_degree_audit import StudentDegreeAudit
from .category_progress import CategoryProgress

__all__ = [
    'Base',
    # 课程相关
    'Subject',
    'Course',
    'CoursePrerequisite',
    # 学生相关
    'Student',
    'Enrollment',
    'TransferCredit',
    'CourseSubstitution',
    # 学位要求相关
    'DegreeRequirementTemplate',
    'RequirementCategory',
    'DegreeRequirement',
    'ConditionalRequirement',
    'PrerequisiteLink',
    # 审核缓存
    'StudentDegreeAudit',
    'CategoryProgress',
]
