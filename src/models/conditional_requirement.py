"""
ConditionalRequirement 数据模型
条件组要求中的一个备选条件
"""
from sqlalchemy import Column, String, Integer, Numeric, ForeignKey, JSON
from sqlalchemy.orm import relationship
from . import Base


class ConditionalRequirement(Base):
    """条件组备选条件表"""
    __tablename__ = 'conditional_requirements'

    id = Column(Integer, primary_key=True, autoincrement=True)

    requirement_id = Column(
        Integer,
        ForeignKey('degree_requirements.id', ondelete='CASCADE'),
        nullable=False,
        index=True
    )

    condition = Column(String(255), nullable=False, default="")
    course_ids = Column(JSON, nullable=True)
    subject_codes = Column(JSON, nullable=True)
    min_level = Column(Integer, nullable=True)
    max_level = Column(Integer, nullable=True)
    credits_required = Column(Integer, nullable=False, default=0)
    courses_required = Column(Integer, nullable=False, default=0)
    minimum_gpa = Column(Numeric(3, 2), nullable=True)
    priority = Column(Integer, nullable=False, default=1)

    requirement = relationship("DegreeRequirement", back_populates="alternatives")

    def __repr__(self):
        return f"<ConditionalRequirement {self.id}: {self.condition}>"
