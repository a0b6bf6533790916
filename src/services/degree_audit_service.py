"""
DegreeAudit 业务逻辑服务
负责取数、调用纯计算的审核函数、按需写入审核缓存
"""
from datetime import datetime

from .degree_audit import audit, what_if
from .exceptions import NotFoundError


class DegreeAuditService:
    """学位审核服务"""

    def __init__(self, provider, audit_repo=None):
        """
        初始化服务

        Args:
            provider: 数据提供者（SqlDataProvider / InMemoryDataProvider）
            audit_repo: AuditRepository，不需要保存结果时可以为 None
        """
        self.provider = provider
        self.audit_repo = audit_repo

    def _load(self, student_id, degree_code, now):
        """
        取学生记录和生效模板

        Raises:
            NotFoundError: 学生不存在、学生没有学位代码或没有生效模板
        """
        record = self.provider.get_student_record(student_id)
        if record is None:
            raise NotFoundError(f"Student {student_id} not found")

        degree_code = degree_code or record.degree_code
        if not degree_code:
            raise NotFoundError(f"Student {student_id} has no degree program")

        template = self.provider.get_template(degree_code, now)
        if template is None:
            raise NotFoundError(f"No effective degree template for {degree_code}")

        return record, template

    def run_audit(self, student_id, degree_code=None, audited_by=None, now=None):
        """
        审核一个学生

        Args:
            student_id: 学生 ID
            degree_code: 学位代码，默认取学生自己的学位
            audited_by: 操作人；给出时把结果写入审核缓存
            now: 审核时刻，默认当前时间

        Returns:
            DegreeAuditResult

        Raises:
            NotFoundError: 学生或模板不存在
            ValueError: 需要保存但没有配置 audit_repo
        """
        now = now or datetime.now()
        record, template = self._load(student_id, degree_code, now)

        result = audit(
            record,
            template,
            course_lookup=self.provider.get_course,
            available_courses=self.provider.list_courses(),
            now=now,
        )

        print(f"✓ 审核完成: 学生 {student_id} / {template.degree_code} "
              f"({result.completion_percentage}% 完成)")

        if audited_by is not None:
            self.save_audit(result, audited_by)

        return result

    def save_audit(self, result, audited_by):
        """
        写入审核缓存

        Returns:
            bool: 是否保存成功
        """
        if self.audit_repo is None:
            raise ValueError("No audit repository configured")

        saved = self.audit_repo.save_audit(result, audited_by)
        if saved is None:
            print(f"✗ 审核结果保存失败: 学生 {result.student_id}")
            return False
        print(f"✓ 审核结果已保存: 学生 {result.student_id} (操作人: {audited_by})")
        return True

    def run_what_if(self, student_id, prospective_course_ids, degree_code=None, now=None):
        """
        what-if 分析：假设再修 prospective_course_ids 后的审核结果

        Returns:
            WhatIfResult

        Raises:
            NotFoundError: 学生或模板不存在
        """
        now = now or datetime.now()
        record, template = self._load(student_id, degree_code, now)

        result = what_if(
            record,
            template,
            prospective_course_ids,
            course_lookup=self.provider.get_course,
            available_courses=self.provider.list_courses(),
            now=now,
        )

        if result.unknown_course_ids:
            print(f"⚠️ 未找到课程: {result.unknown_course_ids}")
        return result
