"""
CourseSubstitution 数据模型
已批准的课程替代：审核时用 substitute_course 顶替 original_course

生效窗口：effective_date ≤ 审核时刻 ≤ expiration_date（expiration_date 为空表示长期有效）
"""
from sqlalchemy import Column, String, Integer, Boolean, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from . import Base


class CourseSubstitution(Base):
    """课程替代表"""
    __tablename__ = 'course_substitutions'

    id = Column(Integer, primary_key=True, autoincrement=True)

    student_id = Column(Integer, ForeignKey('students.id', ondelete='CASCADE'), nullable=False, index=True)
    original_course_id = Column(Integer, ForeignKey('courses.id', ondelete='RESTRICT'), nullable=False)
    substitute_course_id = Column(Integer, ForeignKey('courses.id', ondelete='RESTRICT'), nullable=False)

    reason = Column(Text, nullable=False, default="")
    approved_by = Column(String(100), nullable=False)
    approval_date = Column(DateTime, default=datetime.now, nullable=False)
    effective_date = Column(DateTime, nullable=True)
    expiration_date = Column(DateTime, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    # 关系
    student = relationship("Student", back_populates="substitutions")
    original_course = relationship("Course", foreign_keys=[original_course_id])
    substitute_course = relationship("Course", foreign_keys=[substitute_course_id])

    def __repr__(self):
        return (f"<CourseSubstitution student={self.student_id} "
                f"{self.original_course_id} -> {self.substitute_course_id}>")
