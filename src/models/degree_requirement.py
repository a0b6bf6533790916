"""
DegreeRequirement 数据模型
分类中的一条要求

requirement_type 决定哪些列有意义：
    specific_course     course_ids
    course_group        subject_codes, min_level, max_level
    conditional_group   alternatives（ConditionalRequirement）
    sequenced_courses   prerequisite_links（PrerequisiteLink），course_ids 可选
    credit_hours        只用 credits_required

course_ids / subject_codes 存 JSON 数组，引用不到的 id 只产生校验警告。
"""
from sqlalchemy import Column, String, Integer, Boolean, Text, ForeignKey, JSON
from sqlalchemy.orm import relationship
from . import Base


class DegreeRequirement(Base):
    """学位要求表"""
    __tablename__ = 'degree_requirements'

    id = Column(Integer, primary_key=True, autoincrement=True)

    category_id = Column(
        Integer,
        ForeignKey('requirement_categories.id', ondelete='CASCADE'),
        nullable=False,
        index=True
    )

    requirement_type = Column(String(30), nullable=False)
    description = Column(Text, nullable=False)
    credits_required = Column(Integer, nullable=False, default=0)
    is_required = Column(Boolean, default=True, nullable=False)
    display_order = Column(Integer, nullable=False, default=0)

    # 变体数据
    course_ids = Column(JSON, nullable=True)  # [501, 502]
    subject_codes = Column(JSON, nullable=True)  # ["CS", "MATH"]
    min_level = Column(Integer, nullable=True)
    max_level = Column(Integer, nullable=True)

    # 关系
    category = relationship("RequirementCategory", back_populates="requirements")
    alternatives = relationship(
        "ConditionalRequirement",
        back_populates="requirement",
        order_by="ConditionalRequirement.priority",
        cascade="all, delete-orphan"
    )
    prerequisite_links = relationship(
        "PrerequisiteLink",
        back_populates="requirement",
        order_by="PrerequisiteLink.sequence_order",
        cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"<DegreeRequirement {self.id}: {self.requirement_type}>"

    def __str__(self):
        return f"{self.id} - {self.description} ({self.requirement_type})"
