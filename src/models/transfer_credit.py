"""
TransferCredit 数据模型
学生从其他学校转入的学分

course_equivalent_id 不为空时，这份学分按本校的等价课程参与要求匹配。
"""
from sqlalchemy import Column, String, Integer, Numeric, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from . import Base


class TransferCredit(Base):
    """转学分表"""
    __tablename__ = 'transfer_credits'

    id = Column(Integer, primary_key=True, autoincrement=True)

    student_id = Column(Integer, ForeignKey('students.id', ondelete='CASCADE'), nullable=False, index=True)
    course_equivalent_id = Column(Integer, ForeignKey('courses.id', ondelete='SET NULL'), nullable=True)

    institution = Column(String(255), nullable=False)
    course_title = Column(String(255), nullable=True)
    credit_hours = Column(Numeric(4, 2), nullable=False)
    grade = Column(String(5), nullable=True)

    created_at = Column(DateTime, default=datetime.now, nullable=False)

    # 关系
    student = relationship("Student", back_populates="transfer_credits")
    course_equivalent = relationship("Course")

    def __repr__(self):
        return f"<TransferCredit student={self.student_id} {self.credit_hours} from {self.institution}>"
