"""
要求结构校验测试
"""
from datetime import datetime
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
    RequirementCategory,
    DegreeTemplate,
    DegreeRequirement,
)
from services.requirement_validator import (
    validate_sequence,
    validate_requirement,
    validate_template,
    check_single_effective,
)


def _chain(*edges):
    return SequencedCoursesRequirement(
        description="Chain",
        credits_required=9,
        chain=[PrerequisiteLink(course, prereq, order) for order, (course, prereq) in enumerate(edges)],
    )


class TestValidateSequence:

    def test_linear_chain_levels_and_semesters(self):
        result = validate_sequence(_chain((101, None), (201, 101), (301, 201)))

        assert result.is_valid
        assert not result.has_cycle
        assert result.sequence_length == 3
        assert result.levels == [[101], [201], [301]]
        assert result.semester_mapping == {101: 1, 201: 2, 301: 3}

    def test_three_course_cycle(self):
        result = validate_sequence(_chain((101, 301), (201, 101), (301, 201)))

        assert not result.is_valid
        assert result.has_cycle
        assert result.cycle[0] == result.cycle[-1]
        assert set(result.cycle) == {101, 201, 301}
        assert result.levels == []
        assert result.errors[0].startswith("Circular dependency detected in prerequisite chain: ")

    def test_empty_chain(self):
        result = validate_sequence(_chain())
        assert not result.is_valid
        assert result.errors == ["Prerequisite chain is empty"]


class TestValidateRequirement:

    def test_specific_course_needs_courses(self):
        result = validate_requirement(SpecificCourseRequirement(description="Core", credits_required=3))
        assert "At least one course must be specified" in result.errors

    def test_unknown_course_is_warning(self):
        requirement = SpecificCourseRequirement(description="Core", credits_required=3, course_ids=[101, 999])
        result = validate_requirement(requirement, known_course_ids={101})

        assert result.is_valid
        assert result.warnings == ["Course 999 not found in catalog"]

    def test_course_group_checks(self):
        requirement = CourseGroupRequirement(
            description="Upper", credits_required=6, subject_codes=["ZZZ"], min_level=400, max_level=300,
        )
        result = validate_requirement(requirement, known_subject_codes={"CS"})

        assert not result.is_valid
        assert any("exceeds maximum" in e for e in result.errors)
        assert result.warnings == ["Subject ZZZ not found"]

    def test_conditional_group_alternatives(self):
        empty = ConditionalGroupRequirement(description="Pick one", credits_required=3)
        assert "At least one alternative must be specified" in validate_requirement(empty).errors

        requirement = ConditionalGroupRequirement(
            description="Pick one",
            credits_required=3,
            alternatives=[
                ConditionalRequirement(condition="ok", credits_required=3),
                ConditionalRequirement(condition="nothing"),
                ConditionalRequirement(condition="gpa", courses_required=1, minimum_gpa=Decimal("4.5")),
            ],
        )
        errors = validate_requirement(requirement).errors

        assert "Alternative 2: must require credits or courses" in errors
        assert "Alternative 3: minimum GPA must be between 0.0 and 4.0" in errors
        assert not any(e.startswith("Alternative 1") for e in errors)

    def test_sequenced_cycle_is_error(self):
        result = validate_requirement(_chain((101, 201), (201, 101)))
        assert any(e.startswith("Circular dependency") for e in result.errors)

    def test_credit_hours_must_be_positive(self):
        result = validate_requirement(CreditHoursRequirement(description="Total", credits_required=0))
        assert "Credit hours requirement must be positive" in result.errors

    def test_description_required(self):
        result = validate_requirement(CreditHoursRequirement(description="  ", credits_required=3))
        assert "Description is required" in result.errors

    def test_unknown_variant(self):
        with pytest.raises(TypeError):
            validate_requirement(DegreeRequirement(description="bare"))


def _template(**overrides):
    values = dict(
        id=1,
        degree_code="BSCS",
        degree_name="BS Computer Science",
        total_credits_required=9,
        minimum_gpa=Decimal("2.0"),
        categories=[
            RequirementCategory(
                name="Core",
                credits_required=9,
                requirements=[SpecificCourseRequirement(description="Intro", credits_required=3, course_ids=[101])],
            ),
        ],
    )
    values.update(overrides)
    return DegreeTemplate(**values)


class TestValidateTemplate:

    def test_valid_template(self):
        result = validate_template(_template(), known_course_ids={101})
        assert result.is_valid
        assert result.warnings == []

    def test_template_field_errors(self):
        template = _template(
            degree_code="",
            total_credits_required=0,
            minimum_gpa=Decimal("5"),
            effective_date=datetime(2025, 1, 1),
            expiration_date=datetime(2024, 1, 1),
        )
        errors = validate_template(template).errors

        assert "Degree code is required" in errors
        assert "Total credits required must be positive" in errors
        assert "Minimum GPA must be between 0.0 and 4.0" in errors
        assert "Expiration date must be after effective date" in errors

    def test_category_sum_mismatch_is_warning(self):
        result = validate_template(_template(total_credits_required=12))
        assert result.is_valid
        assert any("do not match" in w for w in result.warnings)

    def test_requirement_messages_are_prefixed(self):
        template = _template()
        template.categories[0].requirements.append(
            SpecificCourseRequirement(description="Empty", credits_required=3)
        )
        errors = validate_template(template).errors
        assert errors == ["Core / Empty: At least one course must be specified"]


def test_single_effective_template_per_degree():
    now = datetime(2025, 6, 1)
    current = _template(id=1, effective_date=datetime(2024, 8, 1))
    overlapping = _template(id=2, effective_date=datetime(2025, 1, 1))
    expired = _template(id=3, effective_date=datetime(2020, 1, 1), expiration_date=datetime(2024, 8, 1))
    other = _template(id=4, degree_code="BSMA")

    assert check_single_effective([current, expired, other], now).is_valid

    result = check_single_effective([current, overlapping, expired], now)
    assert result.errors == ["Degree BSCS has 2 effective templates: 1, 2"]
