"""
PrerequisiteLink 数据模型
顺序课程要求中的一条先修边：course_id 需要先修 prerequisite_course_id

prerequisite_course_id 为空表示链的起点；sequence_order 只用于展示。
"""
from sqlalchemy import Column, Integer, Text, ForeignKey
from sqlalchemy.orm import relationship
from . import Base


class PrerequisiteLink(Base):
    """先修链表"""
    __tablename__ = 'prerequisite_links'

    id = Column(Integer, primary_key=True, autoincrement=True)

    requirement_id = Column(
        Integer,
        ForeignKey('degree_requirements.id', ondelete='CASCADE'),
        nullable=False,
        index=True
    )

    course_id = Column(Integer, nullable=False)
    prerequisite_course_id = Column(Integer, nullable=True)
    sequence_order = Column(Integer, nullable=False, default=0)
    notes = Column(Text, nullable=True)

    requirement = relationship("DegreeRequirement", back_populates="prerequisite_links")

    def __repr__(self):
        return f"<PrerequisiteLink {self.course_id} -> {self.prerequisite_course_id}>"
