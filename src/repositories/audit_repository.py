"""
StudentDegreeAudit 数据访问层
审核结果缓存：每个 (学生, 模板) 一行，重新审核时覆盖
"""
from sqlalchemy.exc import SQLAlchemyError
from models import StudentDegreeAudit, CategoryProgress


class AuditRepository:
    """审核缓存数据访问类"""

    def __init__(self, session):
        self.session = session

    def get(self, student_id, degree_template_id):
        return self.session.query(StudentDegreeAudit).filter(
            StudentDegreeAudit.student_id == student_id,
            StudentDegreeAudit.degree_template_id == degree_template_id,
        ).first()

    def get_latest(self, student_id):
        """
        学生最近一次的审核缓存（不论模板）

        Returns:
            StudentDegreeAudit 对象或 None
        """
        return self.session.query(StudentDegreeAudit).filter(
            StudentDegreeAudit.student_id == student_id
        ).order_by(StudentDegreeAudit.audit_date.desc()).first()

    def save_audit(self, result, audited_by):
        """
        保存审核结果（upsert），分类进度整体重建

        Args:
            result: DegreeAuditResult
            audited_by: 操作人，必须显式给出

        Returns:
            StudentDegreeAudit 对象；保存失败返回 None

        Raises:
            ValueError: audited_by 为空，或 result 没有模板 id
        """
        if not audited_by:
            raise ValueError("audited_by is required to save an audit")
        if result.degree_template_id is None:
            raise ValueError("Audit result has no degree template id")

        record = self.get(result.student_id, result.degree_template_id)
        if record is None:
            record = StudentDegreeAudit(
                student_id=result.student_id,
                degree_template_id=result.degree_template_id,
            )
            self.session.add(record)

        record.audit_date = result.audit_date
        record.total_credits_completed = result.total_credits_completed
        record.total_credits_required = result.total_credits_required
        record.completion_percentage = result.completion_percentage
        record.current_gpa = result.current_gpa
        record.gpa_deficiency = result.gpa_deficiency
        record.is_eligible_for_graduation = result.is_eligible_for_graduation
        record.outstanding_requirements_count = len(result.outstanding_requirements)
        record.recommendations = list(result.recommendations)
        record.audited_by = audited_by

        # 删除重建策略：clear() 触发 delete-orphan
        record.category_progress.clear()
        for category in result.category_progress:
            if category.category_id is None:
                continue
            record.category_progress.append(CategoryProgress(
                category_id=category.category_id,
                credits_completed=category.credits_completed,
                credits_required=category.credits_required,
                completion_percentage=category.completion_percentage,
                is_complete=category.is_complete,
            ))

        try:
            self.session.commit()
            return record
        except SQLAlchemyError as e:
            self.session.rollback()
            print(f"保存审核结果失败 student={result.student_id}: {e}")
            return None
