"""
RequirementCategory 数据模型
模板中的要求分类（如 General Education、Major Core），credits_required 是分类学分上限
"""
from sqlalchemy import Column, String, Integer, Boolean, Text, ForeignKey
from sqlalchemy.orm import relationship
from . import Base


class RequirementCategory(Base):
    """要求分类表"""
    __tablename__ = 'requirement_categories'

    id = Column(Integer, primary_key=True, autoincrement=True)

    template_id = Column(
        Integer,
        ForeignKey('degree_requirement_templates.id', ondelete='CASCADE'),
        nullable=False,
        index=True
    )

    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    credits_required = Column(Integer, nullable=False, default=0)
    display_order = Column(Integer, nullable=False, default=0)
    is_required = Column(Boolean, default=True, nullable=False)

    # 关系
    template = relationship("DegreeRequirementTemplate", back_populates="categories")
    requirements = relationship(
        "DegreeRequirement",
        back_populates="category",
        order_by="DegreeRequirement.display_order",
        cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"<RequirementCategory {self.id}: {self.name}>"
