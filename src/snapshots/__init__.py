"""
审核器使用的内存快照（dataclass）包
"""
from .course import (
    course_level,
    CourseInfo,
    CompletedCourse,
    TransferCredit,
    Substitution,
    StudentRecord,
)
from .requirement import (
    RequirementType,
    PrerequisiteLink,
    ConditionalRequirement,
    DegreeRequirement,
    SpecificCourseRequirement,
    CourseGroupRequirement,
    ConditionalGroupRequirement,
    SequencedCoursesRequirement,
    CreditHoursRequirement,
    REQUIREMENT_CLASSES,
    RequirementCategory,
    DegreeTemplate,
)
from .results import (
    ValidationResult,
    SequenceValidationResult,
    SatisfactionResult,
    ConditionalEvaluation,
    ConditionalPath,
    PathResult,
    SatisfiedRequirement,
    OutstandingRequirement,
    CategoryProgressResult,
    ProcessedSubstitution,
    DegreeAuditResult,
    CategoryImpact,
    WhatIfResult,
)

__all__ = [
    # 课程 / 学生
    'course_level',
    'CourseInfo',
    'CompletedCourse',
    'TransferCredit',
    'Substitution',
    'StudentRecord',
    # 要求
    'RequirementType',
    'PrerequisiteLink',
    'ConditionalRequirement',
    'DegreeRequirement',
    'SpecificCourseRequirement',
    'CourseGroupRequirement',
    'ConditionalGroupRequirement',
    'SequencedCoursesRequirement',
    'CreditHoursRequirement',
    'REQUIREMENT_CLASSES',
    'RequirementCategory',
    'DegreeTemplate',
    # 结果
    'ValidationResult',
    'SequenceValidationResult',
    'SatisfactionResult',
    'ConditionalEvaluation',
    'ConditionalPath',
    'PathResult',
    'SatisfiedRequirement',
    'OutstandingRequirement',
    'CategoryProgressResult',
    'ProcessedSubstitution',
    'DegreeAuditResult',
    'CategoryImpact',
    'WhatIfResult',
]
