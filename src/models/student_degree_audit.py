"""
StudentDegreeAudit 数据模型
最近一次学位审核结果的缓存

每个 (student_id, degree_template_id) 只保留一行，重新审核时覆盖，不保留历史版本。
"""
from sqlalchemy import (
    Column, String, Integer, Numeric, Boolean, DateTime, ForeignKey, JSON, UniqueConstraint
)
from sqlalchemy.orm import relationship
from datetime import datetime
from . import Base


class StudentDegreeAudit(Base):
    """学位审核缓存表"""
    __tablename__ = 'student_degree_audits'

    id = Column(Integer, primary_key=True, autoincrement=True)

    student_id = Column(Integer, ForeignKey('students.id', ondelete='CASCADE'), nullable=False, index=True)
    degree_template_id = Column(
        Integer,
        ForeignKey('degree_requirement_templates.id', ondelete='CASCADE'),
        nullable=False
    )

    # 汇总结果
    audit_date = Column(DateTime, nullable=False)
    total_credits_completed = Column(Numeric(6, 2), nullable=False)
    total_credits_required = Column(Integer, nullable=False)
    completion_percentage = Column(Numeric(5, 2), nullable=False)
    current_gpa = Column(Numeric(3, 2), nullable=False)
    gpa_deficiency = Column(Numeric(3, 2), nullable=False, default=0)
    is_eligible_for_graduation = Column(Boolean, nullable=False, default=False)
    outstanding_requirements_count = Column(Integer, nullable=False, default=0)
    recommendations = Column(JSON, nullable=True)

    # 审核操作人（显式传入，不使用默认的系统用户）
    audited_by = Column(String(100), nullable=False)

    # 时间戳
    created_at = Column(DateTime, default=datetime.now, nullable=False)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now, nullable=False)

    # 关系
    student = relationship("Student", back_populates="audits")
    template = relationship("DegreeRequirementTemplate")
    category_progress = relationship(
        "CategoryProgress",
        back_populates="audit",
        cascade="all, delete-orphan"  # 每次保存时整体重建
    )

    __table_args__ = (
        UniqueConstraint('student_id', 'degree_template_id', name='uq_audit_student_template'),
    )

    def __repr__(self):
        return f"<StudentDegreeAudit student={self.student_id} template={self.degree_template_id}>"
