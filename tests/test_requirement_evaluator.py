"""
要求满足度评估测试
"""
import random
from decimal import Decimal

import pytest

from snapshots import (
    SpecificCourseRequirement,
    CourseGroupRequirement,
    ConditionalGroupRequirement,
    ConditionalRequirement,
    SequencedCoursesRequirement,
    CreditHoursRequirement,
    PrerequisiteLink,
    DegreeRequirement,
)
from services.requirement_evaluator import (
    evaluate,
    evaluate_alternative,
    progress_percentage,
    find_sequence_violations,
)
from conftest import take, make_course


def test_progress_percentage_floors_and_caps():
    assert progress_percentage(Decimal("3"), 6) == 50
    assert progress_percentage(Decimal("5"), 6) == 83
    assert progress_percentage(Decimal("125"), 120) == 100
    assert progress_percentage(Decimal("0"), 0) == 100


def test_specific_course_partial(catalog):
    """需要 {501, 502} 中 6 学分，只修了 501"""
    requirement = SpecificCourseRequirement(
        id=1, description="Graduate topics", credits_required=6, course_ids=[501, 502]
    )
    result = evaluate(requirement, [take(catalog[501])])

    assert not result.is_satisfied
    assert result.credits_satisfied == Decimal("3")
    assert result.progress_percentage == 50
    assert result.satisfying_course_ids == [501]


def test_specific_course_ignores_unresolved_ids(catalog):
    requirement = SpecificCourseRequirement(credits_required=3, course_ids=[501, 99999])
    result = evaluate(requirement, [take(catalog[501])])
    assert result.is_satisfied


def test_credit_hours_capped_at_100(catalog):
    """需要 120 学分，已修 125"""
    requirement = CreditHoursRequirement(description="Total", credits_required=120)
    courses = [take(catalog[101], credits=60), take(catalog[201], credits=65)]

    result = evaluate(requirement, courses)

    assert result.is_satisfied
    assert result.credits_satisfied == Decimal("125")
    assert result.progress_percentage == 100


def test_duplicate_course_ids_count_once(catalog):
    requirement = CreditHoursRequirement(credits_required=6)
    result = evaluate(requirement, [take(catalog[101], "F", "FA23"), take(catalog[101], "A", "SP24")])
    assert result.credits_satisfied == Decimal("3")


def test_course_group_matches_subject_and_level(catalog):
    requirement = CourseGroupRequirement(
        description="Upper CS", credits_required=6,
        subject_codes=["CS"], min_level=300, max_level=499,
    )
    courses = [take(catalog[c]) for c in (101, 201, 301, 410, 1220)]

    result = evaluate(requirement, courses)

    assert result.is_satisfied
    assert sorted(result.satisfying_course_ids) == [301, 410]
    assert result.credits_satisfied == Decimal("7")


def test_course_group_level_bounds_are_inclusive(catalog):
    requirement = CourseGroupRequirement(
        credits_required=3, subject_codes=["CS"], min_level=300, max_level=300,
    )
    assert evaluate(requirement, [take(catalog[301])]).is_satisfied
    assert not evaluate(requirement, [take(catalog[410])]).is_satisfied


def _conditional():
    return ConditionalGroupRequirement(
        id=9,
        description="Science",
        credits_required=6,
        alternatives=[
            ConditionalRequirement(
                id=1, condition="Two history courses",
                subject_codes=["HIST"], credits_required=6, courses_required=2,
            ),
            ConditionalRequirement(
                id=2, condition="Linear algebra with GPA 3.0",
                course_ids=[1220], credits_required=3, courses_required=1,
                minimum_gpa=Decimal("3.0"),
            ),
        ],
    )


def test_conditional_group_any_alternative_satisfies(catalog):
    requirement = _conditional()
    result = evaluate(requirement, [take(catalog[1220])], student_gpa=Decimal("3.2"))

    assert result.is_satisfied
    assert result.progress_percentage == 100
    assert result.satisfied_alternative_ids == [2]
    assert result.satisfying_course_ids == [1220]


def test_conditional_group_gpa_gate(catalog):
    requirement = _conditional()

    low = evaluate(requirement, [take(catalog[1220])], student_gpa=Decimal("2.9"))
    unknown = evaluate(requirement, [take(catalog[1220])])

    assert not low.is_satisfied
    assert low.progress_percentage == 0
    assert not unknown.is_satisfied


def test_conditional_group_progress_is_binary(catalog):
    requirement = _conditional()
    result = evaluate(requirement, [take(catalog[3101])], student_gpa=Decimal("4.0"))
    assert not result.is_satisfied
    assert result.progress_percentage == 0
    assert result.credits_satisfied == Decimal("3")


def test_alternative_requires_both_thresholds(catalog):
    """学分够但门数不够时不满足，两个进度都报告"""
    alternative = ConditionalRequirement(
        condition="Two courses, 4 credits", credits_required=4, courses_required=2,
        subject_codes=["CS"],
    )
    evaluation = evaluate_alternative(alternative, [take(catalog[310])])

    assert not evaluation.is_satisfied
    assert evaluation.credit_progress == 100
    assert evaluation.course_progress == 50
    assert evaluation.overall_progress == 50
    assert evaluation.remaining_credits == Decimal("0")
    assert evaluation.remaining_courses == 1


def test_alternative_without_filters_applies_to_level_range(catalog):
    alternative = ConditionalRequirement(min_level=200, max_level=299, courses_required=1)
    evaluation = evaluate_alternative(alternative, [take(catalog[101]), take(catalog[3210])])
    assert evaluation.applicable_course_ids == [3210]
    assert evaluation.is_satisfied


def _sequence():
    return SequencedCoursesRequirement(
        id=5,
        description="Programming sequence",
        credits_required=9,
        chain=[
            PrerequisiteLink(101, None, 1),
            PrerequisiteLink(201, 101, 2),
            PrerequisiteLink(301, 201, 3),
        ],
    )


def test_sequence_in_order_is_satisfied(catalog):
    courses = [
        take(catalog[101], term="FA23"),
        take(catalog[201], term="SP24"),
        take(catalog[301], term="SP24"),
    ]
    result = evaluate(_sequence(), courses)

    assert result.is_satisfied
    assert result.progress_percentage == 100
    assert result.sequence_violations == []


def test_sequence_out_of_order_fails_even_with_credits(catalog):
    courses = [
        take(catalog[101], term="FA24"),
        take(catalog[201], term="SP24"),
        take(catalog[301], term="SP25"),
    ]
    result = evaluate(_sequence(), courses)

    assert not result.is_satisfied
    assert result.credits_satisfied == Decimal("9")
    assert result.sequence_violations == [(201, 101)]


def test_sequence_missing_prerequisite_is_violation(catalog):
    courses = [take(catalog[201], term="SP24")]
    assert find_sequence_violations(_sequence(), courses) == [(201, 101)]


def test_sequence_unknown_terms_are_not_compared(catalog):
    courses = [take(catalog[101]), take(catalog[201], term="SP24"), take(catalog[301])]
    assert evaluate(_sequence(), courses).is_satisfied


def test_unknown_variant_raises_type_error():
    with pytest.raises(TypeError):
        evaluate(DegreeRequirement(description="bare"), [])


def test_adding_a_course_never_lowers_progress(catalog):
    """已修课程集合增大时，进度和满足状态都不会下降"""
    requirements = [
        SpecificCourseRequirement(credits_required=6, course_ids=[501, 502]),
        CourseGroupRequirement(credits_required=9, subject_codes=["CS", "MATH"], min_level=200, max_level=499),
        _conditional(),
        CreditHoursRequirement(credits_required=30),
    ]
    pool = list(catalog.values()) + [make_course(9000 + i, "ART", str(100 + i)) for i in range(5)]
    rng = random.Random(3)

    for _ in range(30):
        rng.shuffle(pool)
        taken = []
        previous = {id(r): (False, -1, Decimal("-1")) for r in requirements}
        for course in pool:
            taken.append(take(course))
            for requirement in requirements:
                result = evaluate(requirement, taken, student_gpa=Decimal("3.5"))
                was_satisfied, was_progress, was_credits = previous[id(requirement)]
                assert result.progress_percentage >= was_progress
                assert result.credits_satisfied >= was_credits
                assert result.is_satisfied or not was_satisfied
                previous[id(requirement)] = (
                    result.is_satisfied, result.progress_percentage, result.credits_satisfied
                )
