"""
审核数据提供者

审核服务只通过下面这组方法拿数据：
    get_course(course_id)                   -> CourseInfo | None
    list_courses()                          -> [CourseInfo]
    get_completed_courses(student_id)       -> [CompletedCourse]
    get_transfer_credits(student_id)        -> [TransferCredit]
    get_approved_substitutions(student_id)  -> [Substitution]
    get_student_record(student_id)          -> StudentRecord | None
    get_template(degree_code, now)          -> DegreeTemplate | None

SqlDataProvider 从数据库物化快照；InMemoryDataProvider 直接持有快照（YAML 文件模式和测试用）。
"""

import snapshots
from config import MIN_COURSE_LEVEL, MAX_COURSE_LEVEL
from utils import to_decimal
from .course_repository import CourseRepository
from .student_repository import StudentRepository
from .template_repository import TemplateRepository


# =============================================================================
# ORM → 快照
# =============================================================================

def course_to_info(course):
    """Course → CourseInfo"""
    return snapshots.CourseInfo(
        id=course.id,
        subject_code=course.subject_code,
        course_number=course.course_number,
        credit_hours=to_decimal(course.credit_hours),
        title=course.title or "",
        prerequisite_ids=tuple(p.prerequisite_course_id for p in course.prerequisites),
    )


def enrollment_to_completed(enrollment):
    """Enrollment → CompletedCourse（学分为空时取目录学分）"""
    course = enrollment.course
    credit_hours = enrollment.credit_hours
    if credit_hours is None:
        credit_hours = course.credit_hours
    return snapshots.CompletedCourse(
        course_id=enrollment.course_id,
        grade=enrollment.grade,
        credit_hours=to_decimal(credit_hours),
        term=enrollment.term,
        subject_code=course.subject_code,
        course_number=course.course_number,
        title=course.title or "",
    )


def transfer_to_snapshot(credit):
    return snapshots.TransferCredit(
        credit_hours=to_decimal(credit.credit_hours),
        grade=credit.grade or "",
        institution=credit.institution,
        course_equivalent_id=credit.course_equivalent_id,
    )


def substitution_to_snapshot(substitution):
    return snapshots.Substitution(
        id=substitution.id,
        original_course_id=substitution.original_course_id,
        substitute_course_id=substitution.substitute_course_id,
        reason=substitution.reason or "",
        approved_by=substitution.approved_by,
        approval_date=substitution.approval_date,
        effective_date=substitution.effective_date,
        expiration_date=substitution.expiration_date,
        is_active=substitution.is_active,
    )


def _level_bounds(row):
    min_level = row.min_level if row.min_level is not None else MIN_COURSE_LEVEL
    max_level = row.max_level if row.max_level is not None else MAX_COURSE_LEVEL
    return min_level, max_level


def alternative_to_snapshot(row):
    min_level, max_level = _level_bounds(row)
    return snapshots.ConditionalRequirement(
        id=row.id,
        condition=row.condition or "",
        course_ids=list(row.course_ids or []),
        subject_codes=list(row.subject_codes or []),
        min_level=min_level,
        max_level=max_level,
        credits_required=row.credits_required,
        courses_required=row.courses_required,
        minimum_gpa=to_decimal(row.minimum_gpa) if row.minimum_gpa is not None else None,
        priority=row.priority,
    )


def requirement_to_snapshot(row):
    """
    DegreeRequirement 行 → 对应的要求变体

    Raises:
        ValueError: requirement_type 不是已知类型
    """
    try:
        requirement_type = snapshots.RequirementType(row.requirement_type)
    except ValueError:
        raise ValueError(f"Unknown requirement type: {row.requirement_type}")

    common = dict(
        id=row.id,
        description=row.description,
        credits_required=row.credits_required,
        is_required=row.is_required,
        display_order=row.display_order,
    )

    if requirement_type == snapshots.RequirementType.SPECIFIC_COURSE:
        return snapshots.SpecificCourseRequirement(course_ids=list(row.course_ids or []), **common)

    if requirement_type == snapshots.RequirementType.COURSE_GROUP:
        min_level, max_level = _level_bounds(row)
        return snapshots.CourseGroupRequirement(
            subject_codes=list(row.subject_codes or []),
            min_level=min_level,
            max_level=max_level,
            **common,
        )

    if requirement_type == snapshots.RequirementType.CONDITIONAL_GROUP:
        return snapshots.ConditionalGroupRequirement(
            alternatives=[alternative_to_snapshot(a) for a in row.alternatives],
            **common,
        )

    if requirement_type == snapshots.RequirementType.SEQUENCED_COURSES:
        chain = [
            snapshots.PrerequisiteLink(
                course_id=link.course_id,
                prerequisite_course_id=link.prerequisite_course_id,
                sequence_order=link.sequence_order,
                notes=link.notes,
            )
            for link in row.prerequisite_links
        ]
        return snapshots.SequencedCoursesRequirement(
            chain=chain,
            course_ids=list(row.course_ids or []),
            **common,
        )

    return snapshots.CreditHoursRequirement(**common)


def template_to_snapshot(template):
    """DegreeRequirementTemplate（含分类和要求）→ DegreeTemplate"""
    categories = [
        snapshots.RequirementCategory(
            id=category.id,
            name=category.name,
            credits_required=category.credits_required,
            requirements=[requirement_to_snapshot(r) for r in category.requirements],
            description=category.description,
            display_order=category.display_order,
            is_required=category.is_required,
        )
        for category in template.categories
    ]
    return snapshots.DegreeTemplate(
        id=template.id,
        degree_code=template.degree_code,
        degree_name=template.degree_name,
        total_credits_required=template.total_credits_required,
        minimum_gpa=to_decimal(template.minimum_gpa),
        effective_date=template.effective_date,
        expiration_date=template.expiration_date,
        is_active=template.is_active,
        categories=categories,
    )


# =============================================================================
# 数据提供者
# =============================================================================

class SqlDataProvider:
    """从数据库物化审核快照"""

    def __init__(self, session):
        """
        Args:
            session: SQLAlchemy 数据库会话
        """
        self.courses = CourseRepository(session)
        self.students = StudentRepository(session)
        self.templates = TemplateRepository(session)

    def get_course(self, course_id):
        course = self.courses.get_by_id(course_id)
        return course_to_info(course) if course is not None else None

    def list_courses(self):
        return [course_to_info(c) for c in self.courses.get_all(active_only=True)]

    def get_completed_courses(self, student_id):
        """所有有成绩的记录（是否通过由审核决定）"""
        return [
            enrollment_to_completed(e)
            for e in self.students.get_graded_enrollments(student_id)
        ]

    def get_transfer_credits(self, student_id):
        return [transfer_to_snapshot(t) for t in self.students.get_transfer_credits(student_id)]

    def get_approved_substitutions(self, student_id):
        return [substitution_to_snapshot(s) for s in self.students.get_substitutions(student_id)]

    def get_student_record(self, student_id):
        """
        组装学生记录快照

        Returns:
            StudentRecord；学生不存在返回 None
        """
        student = self.students.get_by_id(student_id)
        if student is None:
            return None
        gpa = student.cumulative_gpa
        return snapshots.StudentRecord(
            student_id=student.id,
            degree_code=student.degree_code or "",
            completed_courses=self.get_completed_courses(student_id),
            transfer_credits=self.get_transfer_credits(student_id),
            substitutions=self.get_approved_substitutions(student_id),
            cumulative_gpa=to_decimal(gpa) if gpa is not None else None,
        )

    def get_template(self, degree_code, now=None):
        template = self.templates.get_current(degree_code, now)
        return template_to_snapshot(template) if template is not None else None


class InMemoryDataProvider:
    """
    直接持有快照的数据提供者

    Args:
        courses: CourseInfo 列表
        records: StudentRecord 列表
        templates: DegreeTemplate 列表（同一学位可以有多个，按生效窗口选取）
    """

    def __init__(self, courses=(), records=(), templates=()):
        self._courses = {c.id: c for c in courses}
        self._records = {r.student_id: r for r in records}
        self._templates = list(templates)

    def get_course(self, course_id):
        return self._courses.get(course_id)

    def list_courses(self):
        return list(self._courses.values())

    def get_completed_courses(self, student_id):
        record = self._records.get(student_id)
        return list(record.completed_courses) if record else []

    def get_transfer_credits(self, student_id):
        record = self._records.get(student_id)
        return list(record.transfer_credits) if record else []

    def get_approved_substitutions(self, student_id):
        record = self._records.get(student_id)
        return [s for s in record.substitutions if s.is_active] if record else []

    def get_student_record(self, student_id):
        return self._records.get(student_id)

    def get_template(self, degree_code, now=None):
        effective = [
            t for t in self._templates
            if t.degree_code == degree_code and t.is_currently_effective(now)
        ]
        if not effective:
            return None
        # effective_date 为空的模板排在最前，取最晚生效的一个
        return max(effective, key=lambda t: (t.effective_date is not None, t.effective_date or 0))
