"""
学位审核汇总（纯计算）

audit(record, template, course_lookup, available_courses, now) 的流程：

1. 过滤出获得学分的成绩记录（挂科 / 退课 / 未完成不算），同一门课只保留最后一次
2. 应用当前生效的课程替代：原课程换成替代课程，成绩和学期沿用原记录
3. 有等价课程的转学分按等价课程加入评估集合
4. 逐分类评估每个要求；分类学分 = min(满足的要求学分之和, 分类学分上限)
5. 汇总总学分（已修 + 转学分）、完成度、GPA 差距、毕业资格、建议

what_if() 在假设选修若干课程（成绩按 ASSUMED_GRADE，学分按目录）后重新审核并比较。
"""
from datetime import datetime
from decimal import Decimal

from config import ASSUMED_GRADE, MAX_SUGGESTED_COURSES
from snapshots import (
    SpecificCourseRequirement,
    CourseGroupRequirement,
    ConditionalGroupRequirement,
    SequencedCoursesRequirement,
    CompletedCourse,
    StudentRecord,
    SatisfiedRequirement,
    OutstandingRequirement,
    CategoryProgressResult,
    ProcessedSubstitution,
    DegreeAuditResult,
    CategoryImpact,
    WhatIfResult,
)
from utils import to_decimal, round2, is_passing, term_sort_key
from .requirement_evaluator import evaluate, sum_credits
from .path_optimizer import find_conditional_paths

ZERO = Decimal("0")


def _no_lookup(course_id):
    return None


def _course_name(course_id, course_lookup) -> str:
    course = course_lookup(course_id)
    if course is None:
        return f"Course {course_id}"
    return course.display_name


def _describe(course) -> str:
    """CourseInfo / CompletedCourse → "CS 201 - Title" """
    subject = getattr(course, 'subject_code', '')
    number = getattr(course, 'course_number', '')
    title = getattr(course, 'title', '')
    name = f"{subject} {number}".strip()
    if not name:
        course_id = getattr(course, 'course_id', None) or getattr(course, 'id', None)
        name = f"Course {course_id}"
    return f"{name} - {title}" if title else name


def percentage(part, whole) -> Decimal:
    """round(part / whole × 100, 2)；whole ≤ 0 视为已完成，返回 100"""
    whole = to_decimal(whole)
    if whole <= 0:
        return round2(100)
    return round2(to_decimal(part) / whole * 100)


def earned_courses(completed_courses) -> list:
    """
    获得学分的课程记录

    挂科等成绩被剔除；同一门课通过多次时保留学期最晚的一条。
    """
    latest = {}
    for course in completed_courses:
        if not is_passing(course.grade):
            continue
        current = latest.get(course.course_id)
        if current is None or term_sort_key(course.term) >= term_sort_key(current.term):
            latest[course.course_id] = course
    return list(latest.values())


def _substitute_record(substitute_id, substitute, completed_original):
    """
    替代课程的完成记录：成绩、学期沿用原记录

    目录中查不到替代课程时，学分也沿用原记录，学科和课程号留空
    （这时只有按课程 id 匹配的要求能计入它）。
    """
    if substitute is not None:
        return CompletedCourse.from_course(
            substitute, completed_original.grade, completed_original.term
        )
    return CompletedCourse(
        course_id=substitute_id,
        grade=completed_original.grade,
        credit_hours=completed_original.credit_hours,
        term=completed_original.term,
    )


def apply_substitutions(courses, substitutions, course_lookup=_no_lookup, now=None):
    """
    应用生效中的课程替代

    只有当前生效（is_currently_valid）的替代会被处理。原课程在已修集合中时
    替代生效：原记录被替换为替代课程的记录。

    Args:
        courses: CompletedCourse 列表（已过滤为获得学分的记录）
        substitutions: Substitution 列表
        course_lookup: course_id → CourseInfo | None
        now: 判断生效窗口的时刻

    Returns:
        tuple: (新的 CompletedCourse 列表, ProcessedSubstitution 列表)
    """
    now = now or datetime.now()
    by_id = {c.course_id: c for c in courses}
    processed = []

    for substitution in substitutions:
        if not substitution.is_currently_valid(now):
            continue

        original = course_lookup(substitution.original_course_id)
        substitute = course_lookup(substitution.substitute_course_id)
        completed_original = by_id.get(substitution.original_course_id)
        is_effective = completed_original is not None

        if is_effective:
            del by_id[substitution.original_course_id]
            replacement = _substitute_record(
                substitution.substitute_course_id, substitute, completed_original
            )
            by_id.setdefault(replacement.course_id, replacement)

        if original is not None:
            original_credits = to_decimal(original.credit_hours)
        elif completed_original is not None:
            original_credits = to_decimal(completed_original.credit_hours)
        else:
            original_credits = ZERO
        if substitute is not None:
            substitute_credits = to_decimal(substitute.credit_hours)
        else:
            # 目录中没有替代课程时沿用原课程学分
            substitute_credits = original_credits if completed_original is not None else ZERO
        processed.append(ProcessedSubstitution(
            substitution_id=substitution.id,
            original_course_id=substitution.original_course_id,
            original_course_name=_course_name(substitution.original_course_id, course_lookup),
            substitute_course_id=substitution.substitute_course_id,
            substitute_course_name=_course_name(substitution.substitute_course_id, course_lookup),
            reason=substitution.reason,
            approved_by=substitution.approved_by,
            credit_hours_difference=substitute_credits - original_credits,
            is_effective=is_effective,
        ))

    return list(by_id.values()), processed


def transfer_equivalents(transfer_credits, existing_ids, course_lookup=_no_lookup) -> list:
    """有等价课程的转学分 → CompletedCourse（学分取转学分本身的学分）"""
    equivalents = []
    for credit in transfer_credits:
        if credit.course_equivalent_id is None or credit.course_equivalent_id in existing_ids:
            continue
        course = course_lookup(credit.course_equivalent_id)
        if course is None:
            continue
        equivalents.append(CompletedCourse(
            course_id=course.id,
            grade=credit.grade or None,
            credit_hours=to_decimal(credit.credit_hours),
            subject_code=course.subject_code,
            course_number=course.course_number,
            title=course.title,
        ))
        existing_ids.add(course.id)
    return equivalents


def suggest_courses(requirement, completed_ids, available_courses, completed_courses=()) -> list:
    """
    为未满足的要求推荐课程（最多 MAX_SUGGESTED_COURSES 条）

    Args:
        requirement: 未满足的要求
        completed_ids: 已修课程 id 集合
        available_courses: CourseInfo 列表
        completed_courses: CompletedCourse 列表（条件组路径推荐用）

    Returns:
        list[str]: "CS 201 - Title" 形式的课程描述
    """
    catalog = {c.id: c for c in available_courses}
    candidates = []

    if isinstance(requirement, SpecificCourseRequirement):
        candidates = [
            catalog[cid] for cid in requirement.course_ids
            if cid not in completed_ids and cid in catalog
        ]
    elif isinstance(requirement, CourseGroupRequirement):
        subject_codes = set(requirement.subject_codes)
        candidates = sorted(
            (
                c for c in available_courses
                if c.id not in completed_ids
                and c.subject_code in subject_codes
                and requirement.min_level <= c.level <= requirement.max_level
            ),
            key=lambda c: (c.subject_code, c.course_number),
        )
    elif isinstance(requirement, SequencedCoursesRequirement):
        candidates = [
            catalog[cid] for cid in requirement.sequence_course_ids()
            if cid not in completed_ids and cid in catalog
        ]
    elif isinstance(requirement, ConditionalGroupRequirement):
        paths = find_conditional_paths(requirement, available_courses, completed_courses)
        if paths.recommended_path is not None:
            candidates = paths.recommended_path.selected_courses

    return [_describe(c) for c in candidates[:MAX_SUGGESTED_COURSES]]


def audit_category(category, courses, student_gpa=None, available_courses=()) -> CategoryProgressResult:
    """
    评估一个分类

    分类已完成学分被截断在 credits_required 以内。非必修要求满足时计入学分，
    未满足时不列入 outstanding。
    """
    result = CategoryProgressResult(
        category_id=category.id,
        category_name=category.name,
        credits_required=category.credits_required,
    )
    completed_ids = {c.course_id for c in courses}
    by_id = {c.course_id: c for c in courses}
    total = ZERO

    for requirement in category.requirements:
        satisfaction = evaluate(requirement, courses, student_gpa)

        if satisfaction.is_satisfied:
            total += satisfaction.credits_satisfied
            result.satisfied_requirements.append(SatisfiedRequirement(
                requirement_id=requirement.id,
                description=requirement.description,
                satisfied_by=[_describe(by_id[cid]) for cid in satisfaction.satisfying_course_ids],
                credits_satisfied=satisfaction.credits_satisfied,
            ))
        elif requirement.is_required:
            result.outstanding_requirements.append(OutstandingRequirement(
                requirement_id=requirement.id,
                description=requirement.description,
                credits_needed=max(ZERO, to_decimal(requirement.credits_required)
                                   - satisfaction.credits_satisfied),
                progress_percentage=satisfaction.progress_percentage,
                suggested_courses=suggest_courses(
                    requirement, completed_ids, available_courses, courses
                ),
            ))

    result.credits_completed = min(total, to_decimal(category.credits_required))
    result.credits_remaining = to_decimal(category.credits_required) - result.credits_completed
    result.completion_percentage = percentage(result.credits_completed, category.credits_required)
    result.is_complete = result.credits_remaining <= 0
    return result


def build_recommendations(result) -> list:
    """根据完成度、GPA 和薄弱分类生成文字建议"""
    recommendations = []
    completion = result.completion_percentage

    if completion < 25:
        recommendations.append(
            "Focus on completing foundational courses in your degree program"
        )
    elif completion < 50:
        recommendations.append(
            "Continue with core requirements and consider declaring a concentration"
        )
    elif completion < 75:
        recommendations.append(
            "Focus on advanced courses and major-specific requirements"
        )
    else:
        recommendations.append(
            "You're close to graduation! Review remaining requirements carefully"
        )

    if result.gpa_deficiency > 0:
        recommendations.append(
            f"Improve GPA by {result.gpa_deficiency} points to meet the "
            f"{result.required_gpa} minimum requirement"
        )

    for category in result.category_progress:
        if category.completion_percentage < 50 and not category.is_complete:
            recommendations.append(
                f"Prioritize {category.category_name} requirements "
                f"({category.credits_remaining} credits remaining)"
            )

    return recommendations


def audit(record, template, course_lookup=None, available_courses=(), now=None) -> DegreeAuditResult:
    """
    对一个学生按一个学位模板做完整审核

    Args:
        record: StudentRecord
        template: DegreeTemplate
        course_lookup: course_id → CourseInfo | None，用于替代课程和转学分等价课程
        available_courses: CourseInfo 列表，用于推荐课程
        now: 审核时刻（替代生效窗口、audit_date），默认当前时间

    Returns:
        DegreeAuditResult: 每次现算，不修改输入
    """
    now = now or datetime.now()
    course_lookup = course_lookup or _no_lookup
    available_courses = list(available_courses or ())

    earned = earned_courses(record.completed_courses)
    courses, processed = apply_substitutions(earned, record.substitutions, course_lookup, now)
    courses.extend(transfer_equivalents(
        record.transfer_credits, {c.course_id for c in courses}, course_lookup
    ))

    current_gpa = round2(record.current_gpa)
    required_gpa = to_decimal(template.minimum_gpa)

    categories = [
        audit_category(category, courses, current_gpa, available_courses)
        for category in template.categories
    ]

    total_credits = sum_credits(earned) + sum(
        (to_decimal(t.credit_hours) for t in record.transfer_credits), ZERO
    )
    required = to_decimal(template.total_credits_required)
    gpa_deficiency = round2(max(ZERO, required_gpa - current_gpa))

    satisfied = [s for c in categories for s in c.satisfied_requirements]
    outstanding = [o for c in categories for o in c.outstanding_requirements]

    result = DegreeAuditResult(
        student_id=record.student_id,
        degree_code=template.degree_code,
        degree_template_id=template.id,
        audit_date=now,
        total_credits_completed=total_credits,
        total_credits_required=template.total_credits_required,
        remaining_credits_needed=max(ZERO, required - total_credits),
        completion_percentage=percentage(total_credits, required),
        current_gpa=current_gpa,
        required_gpa=required_gpa,
        gpa_deficiency=gpa_deficiency,
        is_eligible_for_graduation=(
            total_credits >= required
            and current_gpa >= required_gpa
            and not outstanding
        ),
        category_progress=categories,
        satisfied_requirements=satisfied,
        outstanding_requirements=outstanding,
        processed_substitutions=processed,
    )
    result.recommendations = build_recommendations(result)
    return result


def what_if(record, template, prospective_course_ids, course_lookup=None,
            available_courses=(), now=None) -> WhatIfResult:
    """
    假设再修若干课程后的审核结果

    假设课程成绩为 ASSUMED_GRADE、学分取目录学分；GPA 保持当前值不变。
    目录中找不到的课程 id 列在 unknown_course_ids，不参与计算。

    Returns:
        WhatIfResult
    """
    now = now or datetime.now()
    course_lookup = course_lookup or _no_lookup

    current = audit(record, template, course_lookup, available_courses, now)

    existing_ids = {c.course_id for c in earned_courses(record.completed_courses)}
    hypothetical = []
    unknown = []
    for course_id in prospective_course_ids:
        course = course_lookup(course_id)
        if course is None:
            unknown.append(course_id)
        elif course_id not in existing_ids:
            hypothetical.append(CompletedCourse.from_course(course, ASSUMED_GRADE))
            existing_ids.add(course_id)

    projected_record = StudentRecord(
        student_id=record.student_id,
        degree_code=record.degree_code,
        completed_courses=list(record.completed_courses) + hypothetical,
        transfer_credits=list(record.transfer_credits),
        substitutions=list(record.substitutions),
        cumulative_gpa=record.current_gpa,
    )
    projected = audit(projected_record, template, course_lookup, available_courses, now)

    impacts = []
    for before, after in zip(current.category_progress, projected.category_progress):
        impacts.append(CategoryImpact(
            category_name=before.category_name,
            current_progress=before.completion_percentage,
            projected_progress=after.completion_percentage,
            progress_gain=after.completion_percentage - before.completion_percentage,
            additional_requirements_satisfied=(
                len(after.satisfied_requirements) - len(before.satisfied_requirements)
            ),
        ))

    newly_satisfied = len(projected.satisfied_requirements) - len(current.satisfied_requirements)
    result = WhatIfResult(
        student_id=record.student_id,
        prospective_course_ids=list(prospective_course_ids),
        current=current,
        projected=projected,
        credit_impact=projected.total_credits_completed - current.total_credits_completed,
        progress_impact=projected.completion_percentage - current.completion_percentage,
        requirements_satisfied=newly_satisfied,
        category_impacts=impacts,
        unknown_course_ids=unknown,
    )

    if newly_satisfied > 0:
        result.recommendations.append(
            f"These courses would satisfy {newly_satisfied} additional requirement(s)"
        )
    else:
        result.recommendations.append(
            "These courses do not complete any additional requirements"
        )
    if projected.is_eligible_for_graduation and not current.is_eligible_for_graduation:
        result.recommendations.append("Completing these courses would make you eligible to graduate")
    if unknown:
        result.recommendations.append(
            "Unknown course ids ignored: " + ", ".join(str(cid) for cid in unknown)
        )

    return result
