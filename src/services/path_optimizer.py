"""
条件组路径推荐

对条件组的每个备选条件，算出补足剩余学分 / 门数所需的最少额外课程：

1. additional = max(0, 要求学分 - 已适用学分)
2. 从未修过且适用的课程中，按学分从小到大贪心选课，直到学分和门数缺口都补上
3. effort = 选课门数 + additional / EFFORT_CREDIT_WEIGHT

贪心不保证最优（先选小学分课程，会倾向于多修几门），这里接受这种近似。
路径按 effort 升序排列，补不满的路径排在最后；第一条为推荐路径。
"""
import math
from decimal import Decimal

from config import CREDITS_PER_SEMESTER, EFFORT_CREDIT_WEIGHT
from snapshots import ConditionalGroupRequirement, ConditionalPath, PathResult
from utils import to_decimal
from .requirement_evaluator import evaluate_alternative, sum_credits


def evaluate_path(alternative, available_courses, completed_courses) -> ConditionalPath:
    """
    计算一个备选条件的补课路径

    Args:
        alternative: ConditionalRequirement
        available_courses: CourseInfo 列表（可选课程目录）
        completed_courses: CompletedCourse 列表

    Returns:
        ConditionalPath
    """
    evaluation = evaluate_alternative(alternative, completed_courses)
    additional = evaluation.remaining_credits
    completed_ids = {c.course_id for c in completed_courses}

    candidates = sorted(
        (
            c for c in available_courses
            if c.id not in completed_ids and alternative.applies_to(c)
        ),
        key=lambda c: (to_decimal(c.credit_hours), c.id),
    )

    selected = []
    credits_left = additional
    courses_left = evaluation.remaining_courses
    for course in candidates:
        if credits_left <= 0 and courses_left <= 0:
            break
        selected.append(course)
        credits_left -= to_decimal(course.credit_hours)
        courses_left -= 1

    return ConditionalPath(
        alternative_id=alternative.id,
        condition=alternative.condition,
        additional_credits_needed=additional,
        selected_courses=selected,
        total_effort=Decimal(len(selected)) + additional / EFFORT_CREDIT_WEIGHT,
        is_closable=credits_left <= 0 and courses_left <= 0,
    )


def estimate_semesters(courses, credits_per_semester=CREDITS_PER_SEMESTER) -> int:
    """按每学期固定学分估算需要的学期数（向上取整）"""
    total = sum_credits(courses)
    if total <= 0:
        return 0
    return math.ceil(total / Decimal(credits_per_semester))


def find_conditional_paths(requirement, available_courses, completed_courses) -> PathResult:
    """
    为条件组要求生成所有备选路径并排序

    Args:
        requirement: ConditionalGroupRequirement
        available_courses: CourseInfo 列表
        completed_courses: CompletedCourse 列表

    Returns:
        PathResult: 非条件组要求时 errors 非空、没有路径
    """
    result = PathResult(
        requirement_id=requirement.id,
        description=requirement.description,
    )

    if not isinstance(requirement, ConditionalGroupRequirement):
        result.errors.append("Requirement must be a conditional group")
        return result

    paths = [
        (alternative.priority, evaluate_path(alternative, available_courses, completed_courses))
        for alternative in requirement.alternatives
    ]
    paths.sort(key=lambda item: (not item[1].is_closable, item[1].total_effort, item[0]))
    result.alternative_paths = [path for _, path in paths]

    if result.alternative_paths:
        best = result.alternative_paths[0]
        result.recommended_path = best
        result.recommended_course_ids = best.selected_course_ids
        result.total_additional_credits = best.additional_credits_needed
        result.estimated_semesters = estimate_semesters(best.selected_courses)

    return result
