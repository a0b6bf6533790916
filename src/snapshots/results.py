"""
审核器输出的结果对象

全部是审核时现算的值，不回写到输入快照或 ORM 对象。
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass
class ValidationResult:
    """结构校验结果：errors 阻止保存，warnings 仅提示"""
    errors: list = field(default_factory=list)
    warnings: list = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def add_error(self, message):
        self.errors.append(message)

    def add_warning(self, message):
        self.warnings.append(message)

    def merge(self, other, prefix=""):
        """合并另一个结果，可选地给每条消息加前缀"""
        self.errors.extend(f"{prefix}{m}" for m in other.errors)
        self.warnings.extend(f"{prefix}{m}" for m in other.warnings)


@dataclass
class SequenceValidationResult:
    is_valid: bool = False
    has_cycle: bool = False
    cycle: Optional[list] = None
    sequence_length: int = 0
    levels: list = field(default_factory=list)
    semester_mapping: dict = field(default_factory=dict)
    errors: list = field(default_factory=list)


@dataclass
class SatisfactionResult:
    """单个要求的满足情况"""
    requirement_id: Optional[int]
    description: str
    is_satisfied: bool
    credits_satisfied: Decimal
    credits_required: int
    progress_percentage: int
    satisfying_course_ids: list = field(default_factory=list)
    satisfied_alternative_ids: list = field(default_factory=list)
    sequence_violations: list = field(default_factory=list)


@dataclass
class ConditionalEvaluation:
    """
    单个备选条件的评估细节

    is_satisfied 按“学分阈值 AND 门数阈值 AND GPA 门槛”判断，
    overall_progress 取两个进度的较小值。
    """
    alternative_id: Optional[int]
    condition: str
    is_satisfied: bool
    gpa_gate_passed: bool
    completed_credits: Decimal
    completed_courses: int
    credit_progress: int
    course_progress: int
    overall_progress: int
    remaining_credits: Decimal
    remaining_courses: int
    applicable_course_ids: list = field(default_factory=list)


@dataclass
class ConditionalPath:
    """补足一个备选条件所需的最少额外课程"""
    alternative_id: Optional[int]
    condition: str
    additional_credits_needed: Decimal
    selected_courses: list = field(default_factory=list)
    total_effort: Decimal = Decimal("0")
    is_closable: bool = True

    @property
    def selected_course_ids(self) -> list:
        return [c.id for c in self.selected_courses]


@dataclass
class PathResult:
    requirement_id: Optional[int]
    description: str
    alternative_paths: list = field(default_factory=list)
    recommended_path: Optional[ConditionalPath] = None
    recommended_course_ids: list = field(default_factory=list)
    total_additional_credits: Decimal = Decimal("0")
    estimated_semesters: int = 0
    errors: list = field(default_factory=list)

    @property
    def is_path_available(self) -> bool:
        return self.recommended_path is not None


@dataclass
class SatisfiedRequirement:
    requirement_id: Optional[int]
    description: str
    satisfied_by: list
    credits_satisfied: Decimal


@dataclass
class OutstandingRequirement:
    requirement_id: Optional[int]
    description: str
    credits_needed: Decimal
    progress_percentage: int
    suggested_courses: list = field(default_factory=list)


@dataclass
class CategoryProgressResult:
    category_id: Optional[int]
    category_name: str
    credits_required: int
    credits_completed: Decimal = Decimal("0")
    credits_remaining: Decimal = Decimal("0")
    completion_percentage: Decimal = Decimal("0")
    is_complete: bool = False
    satisfied_requirements: list = field(default_factory=list)
    outstanding_requirements: list = field(default_factory=list)


@dataclass
class ProcessedSubstitution:
    substitution_id: Optional[int]
    original_course_id: int
    original_course_name: str
    substitute_course_id: int
    substitute_course_name: str
    reason: str
    approved_by: str
    credit_hours_difference: Decimal
    is_effective: bool


@dataclass
class DegreeAuditResult:
    student_id: int
    degree_code: str
    degree_template_id: Optional[int]
    audit_date: datetime
    total_credits_completed: Decimal
    total_credits_required: int
    remaining_credits_needed: Decimal
    completion_percentage: Decimal
    current_gpa: Decimal
    required_gpa: Decimal
    gpa_deficiency: Decimal
    is_eligible_for_graduation: bool
    category_progress: list = field(default_factory=list)
    satisfied_requirements: list = field(default_factory=list)
    outstanding_requirements: list = field(default_factory=list)
    processed_substitutions: list = field(default_factory=list)
    recommendations: list = field(default_factory=list)


@dataclass
class CategoryImpact:
    category_name: str
    current_progress: Decimal
    projected_progress: Decimal
    progress_gain: Decimal
    additional_requirements_satisfied: int


@dataclass
class WhatIfResult:
    student_id: int
    prospective_course_ids: list
    current: DegreeAuditResult
    projected: DegreeAuditResult
    credit_impact: Decimal
    progress_impact: Decimal
    requirements_satisfied: int
    category_impacts: list = field(default_factory=list)
    unknown_course_ids: list = field(default_factory=list)
    recommendations: list = field(default_factory=list)
