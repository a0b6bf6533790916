"""
要求满足度评估

evaluate(requirement, completed_courses, student_gpa) 按要求变体分派到对应的评估函数：

    SpecificCourse     已修课程 ∩ 指定课程，学分之和 ≥ 要求
    CourseGroup        学科匹配 且 级别在 [min_level, max_level]，学分之和 ≥ 要求
    ConditionalGroup   任意一个备选条件满足即可（进度只有 0 / 100）
    SequencedCourses   学分之和 ≥ 要求 且 没有任何一门课先于其先修课完成
    CreditHours        所有已修课程学分之和 ≥ 要求

进度 = min(100, floor(学分 × 100 / 要求学分))。
本模块是纯计算：不修改输入，不打印，不访问数据库。
"""
from decimal import Decimal

from snapshots import (
    SpecificCourseRequirement,
    CourseGroupRequirement,
    ConditionalGroupRequirement,
    SequencedCoursesRequirement,
    CreditHoursRequirement,
    SatisfactionResult,
    ConditionalEvaluation,
)
from utils import to_decimal, is_valid_term, compare_terms


def unique_courses(completed_courses) -> list:
    """按 course_id 去重（保留第一次出现的记录）"""
    seen = set()
    result = []
    for course in completed_courses:
        if course.course_id in seen:
            continue
        seen.add(course.course_id)
        result.append(course)
    return result


def sum_credits(courses) -> Decimal:
    return sum((to_decimal(c.credit_hours) for c in courses), Decimal("0"))


def progress_percentage(credits, required) -> int:
    """
    min(100, floor(credits × 100 / required))；required ≤ 0 视为已完成

    Examples:
        >>> progress_percentage(3, 6)
        50
        >>> progress_percentage(125, 120)
        100
    """
    if required <= 0:
        return 100
    return min(100, int(to_decimal(credits) * 100 / to_decimal(required)))


def _credit_result(requirement, courses) -> SatisfactionResult:
    """按学分阈值判断的通用结果"""
    credits = sum_credits(courses)
    required = requirement.credits_required
    return SatisfactionResult(
        requirement_id=requirement.id,
        description=requirement.description,
        is_satisfied=credits >= required,
        credits_satisfied=credits,
        credits_required=required,
        progress_percentage=progress_percentage(credits, required),
        satisfying_course_ids=[c.course_id for c in courses],
    )


def _evaluate_specific_course(requirement, completed, student_gpa):
    required_ids = set(requirement.course_ids)
    matched = [c for c in completed if c.course_id in required_ids]
    return _credit_result(requirement, matched)


def _evaluate_course_group(requirement, completed, student_gpa):
    subject_codes = set(requirement.subject_codes)
    matched = [
        c for c in completed
        if c.subject_code in subject_codes
        and requirement.min_level <= c.level <= requirement.max_level
    ]
    return _credit_result(requirement, matched)


def _evaluate_conditional_group(requirement, completed, student_gpa):
    evaluations = [
        evaluate_alternative(alternative, completed, student_gpa)
        for alternative in requirement.alternatives
    ]
    satisfied = [e for e in evaluations if e.is_satisfied]

    # 学分取各备选条件中适用学分的最大值
    credits = max((e.completed_credits for e in evaluations), default=Decimal("0"))

    satisfying_ids = []
    for evaluation in satisfied:
        for course_id in evaluation.applicable_course_ids:
            if course_id not in satisfying_ids:
                satisfying_ids.append(course_id)

    return SatisfactionResult(
        requirement_id=requirement.id,
        description=requirement.description,
        is_satisfied=bool(satisfied),
        credits_satisfied=credits,
        credits_required=requirement.credits_required,
        progress_percentage=100 if satisfied else 0,
        satisfying_course_ids=satisfying_ids,
        satisfied_alternative_ids=[e.alternative_id for e in satisfied],
    )


def find_sequence_violations(requirement, completed) -> list:
    """
    找出先修顺序被破坏的边

    对链上每条 course → prerequisite 边，若 course 已完成：
    - prerequisite 未完成 → 违规
    - 两者学期都可解析且 prerequisite 晚于 course → 违规（同一学期算“同时修”，不违规）

    Returns:
        list: [(course_id, prerequisite_course_id), ...]
    """
    by_id = {c.course_id: c for c in completed}
    violations = []

    for link in sorted(requirement.chain, key=lambda item: item.sequence_order):
        course = by_id.get(link.course_id)
        if course is None or link.prerequisite_course_id is None:
            continue

        prereq = by_id.get(link.prerequisite_course_id)
        if prereq is None:
            violations.append((link.course_id, link.prerequisite_course_id))
        elif is_valid_term(course.term) and is_valid_term(prereq.term):
            if compare_terms(prereq.term, course.term) > 0:
                violations.append((link.course_id, link.prerequisite_course_id))

    return violations


def _evaluate_sequenced_courses(requirement, completed, student_gpa):
    sequence_ids = set(requirement.sequence_course_ids())
    matched = [c for c in completed if c.course_id in sequence_ids]
    result = _credit_result(requirement, matched)

    violations = find_sequence_violations(requirement, completed)
    if violations:
        result.is_satisfied = False
        result.sequence_violations = violations
    return result


def _evaluate_credit_hours(requirement, completed, student_gpa):
    return _credit_result(requirement, completed)


_EVALUATORS = {
    SpecificCourseRequirement: _evaluate_specific_course,
    CourseGroupRequirement: _evaluate_course_group,
    ConditionalGroupRequirement: _evaluate_conditional_group,
    SequencedCoursesRequirement: _evaluate_sequenced_courses,
    CreditHoursRequirement: _evaluate_credit_hours,
}


def evaluate(requirement, completed_courses, student_gpa=None) -> SatisfactionResult:
    """
    评估一个要求的满足情况

    Args:
        requirement: 五种要求变体之一
        completed_courses: CompletedCourse 列表（重复的 course_id 只算一次）
        student_gpa: 学生 GPA，只用于条件组的 GPA 门槛

    Returns:
        SatisfactionResult

    Raises:
        TypeError: 不是已知的要求变体
    """
    evaluator = _EVALUATORS.get(type(requirement))
    if evaluator is None:
        raise TypeError(f"Unknown requirement variant: {type(requirement).__name__}")
    return evaluator(requirement, unique_courses(completed_courses), student_gpa)


def evaluate_alternative(alternative, completed_courses, student_gpa=None) -> ConditionalEvaluation:
    """
    评估条件组中的一个备选条件

    策略：学分阈值 AND 门数阈值 AND GPA 门槛（如有）。
    阈值为 0 视为已达到；两个进度都会返回，overall_progress 取较小值。

    Args:
        alternative: ConditionalRequirement
        completed_courses: CompletedCourse 列表
        student_gpa: 学生 GPA；设置了 minimum_gpa 但 GPA 未知时门槛不通过

    Returns:
        ConditionalEvaluation
    """
    applicable = [c for c in unique_courses(completed_courses) if alternative.applies_to(c)]
    credits = sum_credits(applicable)
    count = len(applicable)

    if alternative.minimum_gpa is None:
        gpa_gate_passed = True
    else:
        gpa_gate_passed = (
            student_gpa is not None
            and to_decimal(student_gpa) >= to_decimal(alternative.minimum_gpa)
        )

    credit_progress = progress_percentage(credits, alternative.credits_required)
    course_progress = progress_percentage(count, alternative.courses_required)

    return ConditionalEvaluation(
        alternative_id=alternative.id,
        condition=alternative.condition,
        is_satisfied=(
            gpa_gate_passed
            and credits >= alternative.credits_required
            and count >= alternative.courses_required
        ),
        gpa_gate_passed=gpa_gate_passed,
        completed_credits=credits,
        completed_courses=count,
        credit_progress=credit_progress,
        course_progress=course_progress,
        overall_progress=min(credit_progress, course_progress),
        remaining_credits=max(Decimal("0"), to_decimal(alternative.credits_required) - credits),
        remaining_courses=max(0, alternative.courses_required - count),
        applicable_course_ids=[c.course_id for c in applicable],
    )
