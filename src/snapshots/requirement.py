"""
学位要求快照

DegreeRequirement 是一个封闭的 tagged union，五种变体各自一个 dataclass：

    SpecificCourseRequirement     指定课程
    CourseGroupRequirement        按学科 + 级别范围筛选的课程组
    ConditionalGroupRequirement   多个备选条件，满足任意一个即可
    SequencedCoursesRequirement   有先修顺序的课程链
    CreditHoursRequirement        只看总学分

RequirementCategory 把若干要求归为一组（如 General Education），
DegreeTemplate 按学位代码持有所有分类。
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import ClassVar, Optional

from config import MIN_COURSE_LEVEL, MAX_COURSE_LEVEL


class RequirementType(str, Enum):
    """要求类型（数据库和 YAML 中存的字符串值）"""
    SPECIFIC_COURSE = "specific_course"
    COURSE_GROUP = "course_group"
    CONDITIONAL_GROUP = "conditional_group"
    SEQUENCED_COURSES = "sequenced_courses"
    CREDIT_HOURS = "credit_hours"


@dataclass
class PrerequisiteLink:
    """先修边：course_id 的先修课是 prerequisite_course_id（None 表示链的起点）"""
    course_id: int
    prerequisite_course_id: Optional[int] = None
    sequence_order: int = 0
    notes: Optional[str] = None

    def is_starting_course(self) -> bool:
        return self.prerequisite_course_id is None


@dataclass
class ConditionalRequirement:
    """
    条件组中的一个备选条件

    适用课程 = course_ids 中的课程 ∪ (subject_codes 中学科且级别在范围内的课程)。
    course_ids 和 subject_codes 都为空时，级别范围内的任何课程都适用。
    """
    id: Optional[int] = None
    condition: str = ""
    course_ids: list = field(default_factory=list)
    subject_codes: list = field(default_factory=list)
    min_level: int = MIN_COURSE_LEVEL
    max_level: int = MAX_COURSE_LEVEL
    credits_required: int = 0
    courses_required: int = 0
    minimum_gpa: Optional[Decimal] = None
    priority: int = 1

    def applies_to(self, course) -> bool:
        """
        判断一门课（CourseInfo 或 CompletedCourse）是否计入这个条件
        """
        course_id = getattr(course, 'course_id', None)
        if course_id is None:
            course_id = course.id
        in_level_range = self.min_level <= course.level <= self.max_level

        if not self.course_ids and not self.subject_codes:
            return in_level_range
        if course_id in self.course_ids:
            return True
        return course.subject_code in self.subject_codes and in_level_range


@dataclass
class DegreeRequirement:
    """所有要求变体的公共字段"""
    requirement_type: ClassVar[RequirementType]

    id: Optional[int] = None
    description: str = ""
    credits_required: int = 0
    is_required: bool = True
    display_order: int = 0


@dataclass
class SpecificCourseRequirement(DegreeRequirement):
    requirement_type: ClassVar[RequirementType] = RequirementType.SPECIFIC_COURSE

    course_ids: list = field(default_factory=list)


@dataclass
class CourseGroupRequirement(DegreeRequirement):
    requirement_type: ClassVar[RequirementType] = RequirementType.COURSE_GROUP

    subject_codes: list = field(default_factory=list)
    min_level: int = MIN_COURSE_LEVEL
    max_level: int = MAX_COURSE_LEVEL


@dataclass
class ConditionalGroupRequirement(DegreeRequirement):
    requirement_type: ClassVar[RequirementType] = RequirementType.CONDITIONAL_GROUP

    alternatives: list = field(default_factory=list)


@dataclass
class SequencedCoursesRequirement(DegreeRequirement):
    """
    course_ids 为空时，链上出现的所有课程（含先修课）都计入学分
    """
    requirement_type: ClassVar[RequirementType] = RequirementType.SEQUENCED_COURSES

    chain: list = field(default_factory=list)
    course_ids: list = field(default_factory=list)

    def sequence_course_ids(self) -> list:
        if self.course_ids:
            return list(self.course_ids)
        ordered = []
        for link in sorted(self.chain, key=lambda item: item.sequence_order):
            for cid in (link.prerequisite_course_id, link.course_id):
                if cid is not None and cid not in ordered:
                    ordered.append(cid)
        return ordered


@dataclass
class CreditHoursRequirement(DegreeRequirement):
    requirement_type: ClassVar[RequirementType] = RequirementType.CREDIT_HOURS


REQUIREMENT_CLASSES = {
    RequirementType.SPECIFIC_COURSE: SpecificCourseRequirement,
    RequirementType.COURSE_GROUP: CourseGroupRequirement,
    RequirementType.CONDITIONAL_GROUP: ConditionalGroupRequirement,
    RequirementType.SEQUENCED_COURSES: SequencedCoursesRequirement,
    RequirementType.CREDIT_HOURS: CreditHoursRequirement,
}


@dataclass
class RequirementCategory:
    """要求分类，credits_required 是该分类的学分上限"""
    id: Optional[int] = None
    name: str = ""
    credits_required: int = 0
    requirements: list = field(default_factory=list)
    description: Optional[str] = None
    display_order: int = 0
    is_required: bool = True


@dataclass
class DegreeTemplate:
    """某个学位代码的要求模板"""
    id: Optional[int] = None
    degree_code: str = ""
    degree_name: str = ""
    total_credits_required: int = 0
    minimum_gpa: Decimal = Decimal("2.0")
    effective_date: Optional[datetime] = None
    expiration_date: Optional[datetime] = None
    is_active: bool = True
    categories: list = field(default_factory=list)

    def all_requirements(self) -> list:
        return [r for c in self.categories for r in c.requirements]

    def category_credits_sum(self) -> int:
        return sum(c.credits_required for c in self.categories)

    def is_currently_effective(self, now=None) -> bool:
        now = now or datetime.now()
        if not self.is_active:
            return False
        if self.effective_date is not None and self.effective_date > now:
            return False
        return self.expiration_date is None or self.expiration_date > now
