"""
Student 数据模型
表示一个学生及其所攻读的学位
"""
from sqlalchemy import Column, String, Integer, Numeric, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime
from . import Base


class Student(Base):
    """学生表"""
    __tablename__ = 'students'

    # 主键：自增整数
    id = Column(Integer, primary_key=True, autoincrement=True)

    # 学号和个人信息
    student_number = Column(String(20), unique=True, nullable=False)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)

    # 学位代码（对应 DegreeRequirementTemplate.degree_code）
    degree_code = Column(String(20), nullable=True, index=True)

    # 教务系统给出的累计 GPA；为空时由成绩记录计算
    cumulative_gpa = Column(Numeric(3, 2), nullable=True)

    # 时间戳
    created_at = Column(DateTime, default=datetime.now, nullable=False)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now, nullable=False)

    # 关系
    enrollments = relationship(
        "Enrollment",
        back_populates="student",
        cascade="all, delete-orphan"  # 删除学生时级联删除选课记录
    )
    transfer_credits = relationship(
        "TransferCredit",
        back_populates="student",
        cascade="all, delete-orphan"
    )
    substitutions = relationship(
        "CourseSubstitution",
        back_populates="student",
        cascade="all, delete-orphan"
    )
    audits = relationship(
        "StudentDegreeAudit",
        back_populates="student",
        cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"<Student {self.id}: {self.student_number}>"

    def __str__(self):
        return f"{self.student_number} - {self.first_name} {self.last_name}"
