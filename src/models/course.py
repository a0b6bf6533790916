"""
Course 数据模型
课程目录中的一门课程

级别（100 / 200 / ...）由课程号首位数字推导，不入库。
"""
from sqlalchemy import Column, String, Integer, Numeric, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from snapshots import course_level
from . import Base


class Course(Base):
    """课程表"""
    __tablename__ = 'courses'

    # 主键：自增整数
    id = Column(Integer, primary_key=True, autoincrement=True)

    # 基本信息
    subject_code = Column(String(10), ForeignKey('subjects.code', ondelete='RESTRICT'), nullable=False, index=True)
    course_number = Column(String(10), nullable=False)
    title = Column(String(255), nullable=False, default="")
    description = Column(Text)
    credit_hours = Column(Numeric(4, 2), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    # 时间戳
    created_at = Column(DateTime, default=datetime.now, nullable=False)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now, nullable=False)

    # 关系
    subject = relationship("Subject", back_populates="courses")
    prerequisites = relationship(
        "CoursePrerequisite",
        back_populates="course",
        foreign_keys="CoursePrerequisite.course_id",
        cascade="all, delete-orphan"  # 删除课程时删除它自己的先修记录
    )
    enrollments = relationship("Enrollment", back_populates="course")

    @property
    def level(self):
        return course_level(self.course_number)

    @property
    def display_name(self):
        return f"{self.subject_code} {self.course_number}"

    def __repr__(self):
        return f"<Course {self.id}: {self.display_name}>"

    def __str__(self):
        return f"{self.display_name} - {self.title}"
