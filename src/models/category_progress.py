"""
CategoryProgress 数据模型
审核缓存中每个要求分类的进度
"""
from sqlalchemy import Column, Integer, Numeric, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from . import Base


class CategoryProgress(Base):
    """分类进度表"""
    __tablename__ = 'category_progress'

    id = Column(Integer, primary_key=True, autoincrement=True)

    audit_id = Column(
        Integer,
        ForeignKey('student_degree_audits.id', ondelete='CASCADE'),
        nullable=False,
        index=True
    )
    category_id = Column(
        Integer,
        ForeignKey('requirement_categories.id', ondelete='CASCADE'),
        nullable=False
    )

    credits_completed = Column(Numeric(6, 2), nullable=False)
    credits_required = Column(Integer, nullable=False)
    completion_percentage = Column(Numeric(5, 2), nullable=False)
    is_complete = Column(Boolean, nullable=False, default=False)

    audit = relationship("StudentDegreeAudit", back_populates="category_progress")
    category = relationship("RequirementCategory")

    def __repr__(self):
        return f"<CategoryProgress audit={self.audit_id} category={self.category_id}>"
