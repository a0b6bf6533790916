"""
DegreeRequirementTemplate 数据模型
一个学位（按 degree_code）的毕业要求模板

同一 degree_code 可以有多个历史模板，但在任一时刻最多只有一个生效：
is_active 且 effective_date ≤ now < expiration_date（为空表示长期有效）。
"""
from sqlalchemy import Column, String, Integer, Numeric, Boolean, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime
from . import Base


class DegreeRequirementTemplate(Base):
    """学位要求模板表"""
    __tablename__ = 'degree_requirement_templates'

    id = Column(Integer, primary_key=True, autoincrement=True)

    # 学位信息
    degree_code = Column(String(20), nullable=False, index=True)  # "BSCS"
    degree_name = Column(String(255), nullable=False)
    total_credits_required = Column(Integer, nullable=False)
    minimum_gpa = Column(Numeric(3, 2), nullable=False, default=2.0)

    # 生效窗口
    effective_date = Column(DateTime, nullable=True)
    expiration_date = Column(DateTime, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    # 时间戳
    created_at = Column(DateTime, default=datetime.now, nullable=False)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now, nullable=False)

    # 关系：一对多 → RequirementCategory
    categories = relationship(
        "RequirementCategory",
        back_populates="template",
        order_by="RequirementCategory.display_order",
        cascade="all, delete-orphan"  # 删除模板时级联删除分类及其要求
    )

    def __repr__(self):
        return f"<DegreeRequirementTemplate {self.id}: {self.degree_code}>"

    def __str__(self):
        return f"{self.degree_code} - {self.degree_name}"
