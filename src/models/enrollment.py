"""
Enrollment 数据模型
学生的选课记录

grade 为空表示课程还在进行中；credit_hours 为空时使用课程目录学分。
同一门课可以重修，所以 (student_id, course_id, term) 才唯一。
"""
from sqlalchemy import Column, String, Integer, Numeric, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from . import Base


class Enrollment(Base):
    """选课记录表"""
    __tablename__ = 'enrollments'

    # 主键：自增整数
    id = Column(Integer, primary_key=True, autoincrement=True)

    # 外键
    student_id = Column(Integer, ForeignKey('students.id', ondelete='CASCADE'), nullable=False, index=True)
    course_id = Column(Integer, ForeignKey('courses.id', ondelete='RESTRICT'), nullable=False, index=True)

    # 选课信息
    term = Column(String(10), nullable=True)  # "FA25"
    grade = Column(String(5), nullable=True)  # "A-" / "P" / "W"
    credit_hours = Column(Numeric(4, 2), nullable=True)

    # 时间戳
    created_at = Column(DateTime, default=datetime.now, nullable=False)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now, nullable=False)

    # 关系
    student = relationship("Student", back_populates="enrollments")
    course = relationship("Course", back_populates="enrollments")

    __table_args__ = (
        UniqueConstraint('student_id', 'course_id', 'term', name='uq_enrollment_student_course_term'),
    )

    def __repr__(self):
        return f"<Enrollment student={self.student_id} course={self.course_id} [{self.grade}]>"

    def __str__(self):
        return f"{self.course_id} ({self.term or 'no term'}) - {self.grade or 'in progress'}"
