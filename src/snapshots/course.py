"""
课程 / 学生记录快照

审核器只接收这些内存中的不可变数据，不直接接触 ORM 对象。
由 repositories.data_provider 负责从数据库（或 YAML 文件）物化。
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from utils.grade_utils import calculate_gpa, to_decimal


def course_level(course_number) -> int:
    """
    从课程号计算课程级别：首位数字 × 100

    Examples:
        >>> course_level("301")
        300
        >>> course_level("X10")
        0
    """
    try:
        return int(str(course_number)[0]) * 100
    except (ValueError, IndexError):
        return 0


@dataclass(frozen=True)
class CourseInfo:
    """目录中的一门课程"""
    id: int
    subject_code: str
    course_number: str
    credit_hours: Decimal
    title: str = ""
    prerequisite_ids: tuple = ()

    @property
    def level(self) -> int:
        return course_level(self.course_number)

    @property
    def display_name(self) -> str:
        return f"{self.subject_code} {self.course_number}"


@dataclass(frozen=True)
class CompletedCourse:
    """
    学生已修完的一门课程（一条获得期末成绩的选课记录）

    subject_code / course_number 来自课程目录，供按学科、级别筛选的要求使用。
    term 为学期代码（如 "FA25"），转学分或假设课程可以为 None。
    """
    course_id: int
    grade: Optional[str]
    credit_hours: Decimal
    term: Optional[str] = None
    subject_code: str = ""
    course_number: str = ""
    title: str = ""

    @property
    def level(self) -> int:
        return course_level(self.course_number)

    @classmethod
    def from_course(cls, course: CourseInfo, grade, term=None):
        """用目录课程构造一条完成记录（学分取目录学分）"""
        return cls(
            course_id=course.id,
            grade=grade,
            credit_hours=to_decimal(course.credit_hours),
            term=term,
            subject_code=course.subject_code,
            course_number=course.course_number,
            title=course.title,
        )


@dataclass(frozen=True)
class TransferCredit:
    """转学分；course_equivalent_id 不为空时按等价课程参与要求匹配"""
    credit_hours: Decimal
    grade: str = ""
    institution: str = ""
    course_equivalent_id: Optional[int] = None


@dataclass(frozen=True)
class Substitution:
    """
    已批准的课程替代：original → substitute

    生效窗口：effective_date ≤ now ≤ expiration_date，
    expiration_date 为 None 表示长期有效。
    """
    original_course_id: int
    substitute_course_id: int
    id: Optional[int] = None
    reason: str = ""
    approved_by: str = ""
    approval_date: Optional[datetime] = None
    effective_date: Optional[datetime] = None
    expiration_date: Optional[datetime] = None
    is_active: bool = True

    def is_currently_valid(self, now=None) -> bool:
        now = now or datetime.now()
        if not self.is_active:
            return False
        if self.effective_date is not None and self.effective_date > now:
            return False
        return self.expiration_date is None or now <= self.expiration_date


@dataclass
class StudentRecord:
    """
    一个学生的学业记录快照

    cumulative_gpa 为 None 时由 completed_courses 现算。
    """
    student_id: int
    degree_code: str = ""
    completed_courses: list = field(default_factory=list)
    transfer_credits: list = field(default_factory=list)
    substitutions: list = field(default_factory=list)
    cumulative_gpa: Optional[Decimal] = None

    @property
    def current_gpa(self) -> Decimal:
        if self.cumulative_gpa is not None:
            return to_decimal(self.cumulative_gpa)
        return calculate_gpa(self.completed_courses)
