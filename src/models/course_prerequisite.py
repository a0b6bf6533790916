"""
CoursePrerequisite 数据模型
课程目录中的先修关系：course_id 需要先修 prerequisite_course_id
"""
from sqlalchemy import Column, Integer, ForeignKey
from sqlalchemy.orm import relationship
from . import Base


class CoursePrerequisite(Base):
    """课程先修关系表"""
    __tablename__ = 'course_prerequisites'

    # 复合主键
    course_id = Column(Integer, ForeignKey('courses.id', ondelete='CASCADE'), primary_key=True)
    prerequisite_course_id = Column(Integer, ForeignKey('courses.id', ondelete='CASCADE'), primary_key=True)

    # 关系
    course = relationship("Course", foreign_keys=[course_id], back_populates="prerequisites")
    prerequisite = relationship("Course", foreign_keys=[prerequisite_course_id])

    def __repr__(self):
        return f"<CoursePrerequisite {self.course_id} -> {self.prerequisite_course_id}>"
