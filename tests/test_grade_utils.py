"""
成绩换算和 GPA 计算测试
"""
from decimal import Decimal

import pytest

from snapshots import CompletedCourse
from utils import (
    letter_to_points,
    numeric_to_letter,
    letter_to_numeric,
    counts_toward_gpa,
    is_passing,
    quality_points,
    calculate_gpa,
    academic_standing,
    round2,
    to_decimal,
)


@pytest.mark.parametrize("grade, points", [
    ("A+", "4.0"), ("A", "4.0"), ("A-", "3.7"),
    ("B+", "3.3"), ("B", "3.0"), ("C-", "1.7"),
    ("D-", "0.7"), ("F", "0.0"), (" b+ ", "3.3"),
])
def test_letter_to_points(grade, points):
    assert letter_to_points(grade) == Decimal(points)


def test_letter_to_points_unknown_grade_is_zero():
    assert letter_to_points("P") == Decimal("0")
    assert letter_to_points(None) == Decimal("0")


@pytest.mark.parametrize("score, letter", [
    (100, "A+"), (97, "A+"), (96.9, "A"), (93, "A"), (90, "A-"),
    (87, "B+"), (83, "B"), (80, "B-"), (72, "C-"), (60, "D-"), (59.99, "F"), (0, "F"),
])
def test_numeric_to_letter(score, letter):
    assert numeric_to_letter(score) == letter


def test_letter_to_numeric():
    assert letter_to_numeric("A") == 94
    assert letter_to_numeric("F") == 50
    assert letter_to_numeric("W") == 0


def test_only_letter_grades_count_toward_gpa():
    assert counts_toward_gpa("F")
    assert counts_toward_gpa("c+")
    assert not counts_toward_gpa("P")
    assert not counts_toward_gpa("W")
    assert not counts_toward_gpa(None)


def test_is_passing():
    assert is_passing("A")
    assert is_passing("P")
    assert is_passing("d-")
    for grade in ["F", "W", "I", "NP", "NC", "", None]:
        assert not is_passing(grade)


def test_quality_points():
    assert quality_points("B+", 3) == Decimal("9.9")


def _graded(grade, credits):
    return CompletedCourse(course_id=1, grade=grade, credit_hours=Decimal(str(credits)))


def test_calculate_gpa_weights_by_credits():
    """GPA = Σ(绩点 × 学分) / Σ(学分)"""
    courses = [_graded("A", 4), _graded("C", 2)]
    # (16 + 4) / 6 = 3.333...
    assert calculate_gpa(courses) == Decimal("3.33")


def test_calculate_gpa_ignores_pass_fail_and_withdrawals():
    courses = [_graded("B", 3), _graded("P", 3), _graded("W", 4)]
    assert calculate_gpa(courses) == Decimal("3.00")


def test_calculate_gpa_counts_failures():
    courses = [_graded("A", 3), _graded("F", 3)]
    assert calculate_gpa(courses) == Decimal("2.00")


def test_calculate_gpa_without_credits_is_zero():
    assert calculate_gpa([]) == Decimal("0.00")


def test_round2_uses_bankers_rounding():
    assert round2(Decimal("2.345")) == Decimal("2.34")
    assert round2(Decimal("2.355")) == Decimal("2.36")


def test_to_decimal_converts_floats_exactly():
    assert to_decimal(0.1) == Decimal("0.1")
    assert to_decimal(None) == Decimal("0")


@pytest.mark.parametrize("gpa, standing", [
    ("3.5", "good"), ("2.0", "good"), ("1.99", "warning"),
    ("1.5", "warning"), ("1.2", "probation"), ("0.5", "suspension"),
])
def test_academic_standing(gpa, standing):
    assert academic_standing(Decimal(gpa)) == standing
