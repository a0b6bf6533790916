"""
学位要求结构校验

所有问题都收集到 ValidationResult 里返回，不抛异常：
- errors: 结构错误（缺字段、范围非法、先修链有环），阻止保存 / 导入
- warnings: 引用不到的课程 id、学科代码，评估时这些引用只是匹配不到
"""
from collections import defaultdict
from datetime import datetime
from decimal import Decimal

from snapshots import (
    SpecificCourseRequirement,
    CourseGroupRequirement,
    ConditionalGroupRequirement,
    SequencedCoursesRequirement,
    CreditHoursRequirement,
    ValidationResult,
    SequenceValidationResult,
)
from utils import to_decimal
from .prerequisite_graph import (
    build_prerequisite_graph,
    detect_cycle,
    graph_nodes,
    topological_levels,
    semester_mapping,
)

MAX_GPA = Decimal("4.0")


def _format_cycle(cycle) -> str:
    return " -> ".join(str(course_id) for course_id in cycle)


def _check_course_refs(result, course_ids, known_course_ids):
    if known_course_ids is None:
        return
    for course_id in course_ids:
        if course_id not in known_course_ids:
            result.add_warning(f"Course {course_id} not found in catalog")


def _check_subject_refs(result, subject_codes, known_subject_codes):
    if known_subject_codes is None:
        return
    for code in subject_codes:
        if code not in known_subject_codes:
            result.add_warning(f"Subject {code} not found")


def _check_level_range(result, min_level, max_level, label="Course level"):
    if min_level < 0 or max_level < 0:
        result.add_error(f"{label} bounds must not be negative")
    if min_level > max_level:
        result.add_error(f"{label} minimum ({min_level}) exceeds maximum ({max_level})")


def validate_sequence(requirement) -> SequenceValidationResult:
    """
    校验先修链并给出分层和学期安排

    Args:
        requirement: SequencedCoursesRequirement

    Returns:
        SequenceValidationResult: 有环时 cycle 为环路径，levels 为空
    """
    result = SequenceValidationResult()
    chain = list(requirement.chain)

    if not chain:
        result.errors.append("Prerequisite chain is empty")
        return result

    graph = build_prerequisite_graph(chain)
    cycle = detect_cycle(graph)
    result.sequence_length = len(graph_nodes(graph))

    if cycle is not None:
        result.has_cycle = True
        result.cycle = cycle
        result.errors.append(
            f"Circular dependency detected in prerequisite chain: {_format_cycle(cycle)}"
        )
        return result

    result.levels = topological_levels(graph)
    result.semester_mapping = semester_mapping(result.levels)
    result.is_valid = True
    return result


def _validate_specific_course(requirement, result, known_course_ids, known_subject_codes):
    if not requirement.course_ids:
        result.add_error("At least one course must be specified")
    _check_course_refs(result, requirement.course_ids, known_course_ids)


def _validate_course_group(requirement, result, known_course_ids, known_subject_codes):
    if not requirement.subject_codes:
        result.add_error("At least one subject code must be specified")
    _check_level_range(result, requirement.min_level, requirement.max_level)
    _check_subject_refs(result, requirement.subject_codes, known_subject_codes)


def _validate_conditional_group(requirement, result, known_course_ids, known_subject_codes):
    if not requirement.alternatives:
        result.add_error("At least one alternative must be specified")

    for index, alternative in enumerate(requirement.alternatives, start=1):
        label = f"Alternative {index}"
        if alternative.credits_required <= 0 and alternative.courses_required <= 0:
            result.add_error(f"{label}: must require credits or courses")
        if alternative.credits_required < 0 or alternative.courses_required < 0:
            result.add_error(f"{label}: thresholds must not be negative")
        _check_level_range(result, alternative.min_level, alternative.max_level,
                           label=f"{label}: course level")
        if alternative.minimum_gpa is not None:
            gpa = to_decimal(alternative.minimum_gpa)
            if gpa < 0 or gpa > MAX_GPA:
                result.add_error(f"{label}: minimum GPA must be between 0.0 and 4.0")
        _check_course_refs(result, alternative.course_ids, known_course_ids)
        _check_subject_refs(result, alternative.subject_codes, known_subject_codes)


def _validate_sequenced_courses(requirement, result, known_course_ids, known_subject_codes):
    sequence = validate_sequence(requirement)
    for message in sequence.errors:
        result.add_error(message)
    _check_course_refs(result, requirement.sequence_course_ids(), known_course_ids)


def _validate_credit_hours(requirement, result, known_course_ids, known_subject_codes):
    if requirement.credits_required <= 0:
        result.add_error("Credit hours requirement must be positive")


_VALIDATORS = {
    SpecificCourseRequirement: _validate_specific_course,
    CourseGroupRequirement: _validate_course_group,
    ConditionalGroupRequirement: _validate_conditional_group,
    SequencedCoursesRequirement: _validate_sequenced_courses,
    CreditHoursRequirement: _validate_credit_hours,
}


def validate_requirement(requirement, known_course_ids=None, known_subject_codes=None) -> ValidationResult:
    """
    校验单个要求

    Args:
        requirement: 五种要求变体之一
        known_course_ids: 目录中的课程 id 集合；None 表示不检查引用
        known_subject_codes: 已知学科代码集合；None 表示不检查引用

    Returns:
        ValidationResult

    Raises:
        TypeError: 不是已知的要求变体
    """
    validator = _VALIDATORS.get(type(requirement))
    if validator is None:
        raise TypeError(f"Unknown requirement variant: {type(requirement).__name__}")

    result = ValidationResult()
    if not (requirement.description or "").strip():
        result.add_error("Description is required")
    if requirement.credits_required < 0:
        result.add_error("Credits required must not be negative")

    validator(requirement, result, known_course_ids, known_subject_codes)
    return result


def validate_template(template, known_course_ids=None, known_subject_codes=None) -> ValidationResult:
    """
    校验整个学位模板（模板字段 + 每个分类 + 每个要求）

    Args:
        template: DegreeTemplate
        known_course_ids: 课程 id 集合，可选
        known_subject_codes: 学科代码集合，可选

    Returns:
        ValidationResult: 消息带 "分类名 / 要求描述: " 前缀
    """
    result = ValidationResult()

    if not (template.degree_code or "").strip():
        result.add_error("Degree code is required")
    if not (template.degree_name or "").strip():
        result.add_error("Degree name is required")
    if template.total_credits_required <= 0:
        result.add_error("Total credits required must be positive")

    gpa = to_decimal(template.minimum_gpa)
    if gpa < 0 or gpa > MAX_GPA:
        result.add_error("Minimum GPA must be between 0.0 and 4.0")

    if (template.effective_date is not None and template.expiration_date is not None
            and template.expiration_date <= template.effective_date):
        result.add_error("Expiration date must be after effective date")

    if not template.categories:
        result.add_warning("Template has no requirement categories")
    elif template.category_credits_sum() != template.total_credits_required:
        result.add_warning(
            f"Category credits ({template.category_credits_sum()}) do not match "
            f"total credits required ({template.total_credits_required})"
        )

    for category in template.categories:
        name = (category.name or "").strip()
        if not name:
            result.add_error("Category name is required")
            name = f"Category {category.id}"
        if category.credits_required < 0:
            result.add_error(f"{name}: credits required must not be negative")
        if not category.requirements:
            result.add_warning(f"{name}: category has no requirements")

        for requirement in category.requirements:
            label = requirement.description or f"Requirement {requirement.id}"
            result.merge(
                validate_requirement(requirement, known_course_ids, known_subject_codes),
                prefix=f"{name} / {label}: ",
            )

    return result


def check_single_effective(templates, now=None) -> ValidationResult:
    """
    同一学位代码在 now 时刻最多只能有一个生效模板

    Args:
        templates: DegreeTemplate 列表（可以混有多个学位代码）
        now: 检查时刻，默认当前时间

    Returns:
        ValidationResult
    """
    now = now or datetime.now()
    result = ValidationResult()

    effective = defaultdict(list)
    for template in templates:
        if template.is_currently_effective(now):
            effective[template.degree_code].append(template)

    for degree_code, matches in sorted(effective.items()):
        if len(matches) > 1:
            ids = ", ".join(str(t.id) for t in matches)
            result.add_error(
                f"Degree {degree_code} has {len(matches)} effective templates: {ids}"
            )

    return result
