"""
数据库导入、数据提供者和审核缓存测试（SQLite 内存数据库）
"""
import os
from datetime import datetime
from decimal import Decimal

import pytest

from models import Enrollment, StudentDegreeAudit, DegreeRequirementTemplate
from repositories import (
    CourseRepository,
    StudentRepository,
    TemplateRepository,
    AuditRepository,
    SqlDataProvider,
)
from services import DegreeAuditService, TemplateService

NOW = datetime(2025, 6, 1)


@pytest.fixture
def imported(session, data_dir):
    """导入示例目录、模板和学生"""
    service = TemplateService(session)
    catalog_stats = service.import_catalog(os.path.join(data_dir, 'catalog.yml'))
    template_stats = service.import_from_yaml(os.path.join(data_dir, 'bscs.yml'))
    student_stats = service.import_student(os.path.join(data_dir, 'student.yml'))
    return catalog_stats, template_stats, student_stats


def test_import_stats(imported):
    catalog_stats, template_stats, student_stats = imported

    assert catalog_stats['courses'] == 18
    assert catalog_stats['subjects'] == 5
    assert catalog_stats['prerequisites'] == 13
    assert catalog_stats['courses_not_found'] == []

    assert template_stats['categories'] == 5
    assert template_stats['requirements'] == 8
    assert template_stats['expired_templates'] == 0
    assert template_stats['template_id'] is not None

    assert student_stats['saved']
    assert student_stats['enrollments'] == 9
    assert student_stats['transfer_credits'] == 2
    assert student_stats['substitutions'] == 1


def test_course_repository(session, imported):
    repo = CourseRepository(session)

    assert repo.get_by_code("CS", "301").id == 301
    assert repo.get_by_code("CS", "999") is None
    assert repo.get_subject_codes() == {"CS", "MATH", "ENGL", "HIST", "PHYS"}
    assert repo.get_by_id(301).level == 300


def test_reimporting_student_replaces_records(session, imported, data_dir):
    TemplateService(session).import_student(os.path.join(data_dir, 'student.yml'))

    assert session.query(Enrollment).count() == 9
    student = StudentRepository(session).get_by_number("S0001")
    assert student.id == 1
    assert len(student.transfer_credits) == 2


def test_reimporting_template_expires_previous(session, imported, data_dir):
    _, first, _ = imported
    second = TemplateService(session).import_from_yaml(os.path.join(data_dir, 'bscs.yml'))

    assert second['expired_templates'] == 1
    repo = TemplateRepository(session)
    assert repo.get_current("BSCS", NOW).id == second['template_id']
    assert len(repo.get_by_degree_code("BSCS")) == 2
    assert repo.get_by_id(first['template_id']).expiration_date == datetime(2024, 8, 1)


def test_invalid_template_is_rejected(session, imported, tmp_path):
    path = tmp_path / "no_courses.yml"
    path.write_text(
        "template:\n"
        "  degree_code: BSX\n"
        "  degree_name: Test\n"
        "  total_credits_required: 3\n"
        "categories:\n"
        "  - name: Core\n"
        "    credits_required: 3\n"
        "    requirements:\n"
        "      - type: specific_course\n"
        "        description: Nothing listed\n"
        "        credits_required: 3\n",
        encoding='utf-8',
    )
    with pytest.raises(ValueError):
        TemplateService(session).import_from_yaml(str(path))
    assert session.query(DegreeRequirementTemplate).filter_by(degree_code="BSX").count() == 0


def test_sql_provider_materializes_snapshots(session, imported):
    provider = SqlDataProvider(session)

    record = provider.get_student_record(1)
    assert record.degree_code == "BSCS"
    assert len(record.completed_courses) == 9
    assert provider.get_student_record(404) is None

    template = provider.get_template("BSCS", NOW)
    assert template.total_credits_required == 120
    assert len(template.all_requirements()) == 8
    assert provider.get_template("BSCS", datetime(2020, 1, 1)) is None

    assert provider.get_course(201).prerequisite_ids == (101,)
    assert len(provider.list_courses()) == 18


def test_audit_from_database_and_upsert(session, imported):
    service = DegreeAuditService(SqlDataProvider(session), AuditRepository(session))

    result = service.run_audit(1, audited_by="registrar", now=NOW)
    assert result.total_credits_completed == Decimal("36")

    service.run_audit(1, audited_by="advisor", now=NOW)
    assert session.query(StudentDegreeAudit).count() == 1

    cached = AuditRepository(session).get_latest(1)
    assert cached.audited_by == "advisor"
    assert cached.outstanding_requirements_count == len(result.outstanding_requirements)
    assert len(cached.category_progress) == 5


def test_save_audit_requires_auditor(session, imported):
    result = DegreeAuditService(SqlDataProvider(session)).run_audit(1, now=NOW)
    with pytest.raises(ValueError):
        AuditRepository(session).save_audit(result, "")
