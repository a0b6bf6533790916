"""
条件组路径推荐测试
"""
from decimal import Decimal

from snapshots import (
    ConditionalGroupRequirement,
    ConditionalRequirement,
    CreditHoursRequirement,
)
from services.path_optimizer import find_conditional_paths, evaluate_path, estimate_semesters
from conftest import take, make_course


def _requirement():
    return ConditionalGroupRequirement(
        id=3,
        description="Electives",
        credits_required=6,
        alternatives=[
            ConditionalRequirement(
                id=1, condition="Six upper CS credits",
                subject_codes=["CS"], min_level=300, max_level=499,
                credits_required=6, priority=1,
            ),
            ConditionalRequirement(
                id=2, condition="Two history courses",
                subject_codes=["HIST"], credits_required=6, courses_required=2, priority=2,
            ),
        ],
    )


def test_greedy_picks_cheapest_courses_first(catalog):
    """CS 350(2) 先于 CS 301(3)、CS 310/410(4)"""
    alternative = _requirement().alternatives[0]
    path = evaluate_path(alternative, list(catalog.values()), [])

    assert path.additional_credits_needed == Decimal("6")
    assert path.selected_course_ids == [350, 301, 310]
    assert path.total_effort == Decimal("3") + Decimal("6") / Decimal("3")
    assert path.is_closable


def test_completed_courses_reduce_the_gap(catalog):
    alternative = _requirement().alternatives[0]
    path = evaluate_path(alternative, list(catalog.values()), [take(catalog[410])])

    assert path.additional_credits_needed == Decimal("2")
    assert path.selected_course_ids == [350]
    assert 410 not in path.selected_course_ids


def test_paths_sorted_by_effort(catalog):
    """历史方向已修一门，只差一门，effort 更低"""
    completed = [take(catalog[3101])]
    result = find_conditional_paths(_requirement(), list(catalog.values()), completed)

    efforts = [p.total_effort for p in result.alternative_paths]
    assert efforts == sorted(efforts)
    assert result.recommended_path.alternative_id == 2
    assert result.recommended_course_ids == [3210]
    assert result.total_additional_credits == Decimal("3")
    assert result.estimated_semesters == 1
    assert result.is_path_available


def test_unclosable_paths_rank_last(catalog):
    requirement = _requirement()
    requirement.alternatives.append(ConditionalRequirement(
        id=3, condition="Physics", subject_codes=["PHYS"], credits_required=1, priority=3,
    ))
    result = find_conditional_paths(requirement, list(catalog.values()), [])

    last = result.alternative_paths[-1]
    assert last.alternative_id == 3
    assert not last.is_closable
    assert result.recommended_path.is_closable


def test_satisfied_alternative_needs_nothing(catalog):
    completed = [take(catalog[3101]), take(catalog[3210])]
    result = find_conditional_paths(_requirement(), list(catalog.values()), completed)

    assert result.recommended_path.alternative_id == 2
    assert result.recommended_course_ids == []
    assert result.recommended_path.total_effort == Decimal("0")
    assert result.estimated_semesters == 0


def test_non_conditional_requirement_is_an_error(catalog):
    result = find_conditional_paths(CreditHoursRequirement(credits_required=3), list(catalog.values()), [])
    assert result.errors
    assert not result.is_path_available


def test_estimate_semesters_rounds_up():
    courses = [make_course(i, "CS", "300", 4) for i in range(4)]
    assert estimate_semesters(courses) == 2
    assert estimate_semesters(courses[:1]) == 1
    assert estimate_semesters([]) == 0
