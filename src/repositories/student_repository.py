"""
Student 数据访问层
负责学生、选课记录、转学分和课程替代的读写
"""
from sqlalchemy.exc import SQLAlchemyError
from models import Student, Enrollment, TransferCredit, CourseSubstitution


class StudentRepository:
    """Student 数据访问类"""

    def __init__(self, session):
        self.session = session

    def save(self, student):
        """
        保存或更新学生

        Returns:
            bool: 是否保存成功
        """
        try:
            self.session.merge(student)
            self.session.commit()
            return True
        except SQLAlchemyError as e:
            self.session.rollback()
            print(f"保存学生失败 {student.student_number}: {e}")
            return False

    def add_enrollment(self, enrollment):
        """
        新增一条选课记录

        Returns:
            bool: 是否保存成功
        """
        try:
            self.session.add(enrollment)
            self.session.commit()
            return True
        except SQLAlchemyError as e:
            self.session.rollback()
            print(f"保存选课记录失败 student={enrollment.student_id} course={enrollment.course_id}: {e}")
            return False

    def get_by_id(self, student_id):
        return self.session.get(Student, student_id)

    def get_by_number(self, student_number):
        return self.session.query(Student).filter(
            Student.student_number == student_number
        ).first()

    def get_graded_enrollments(self, student_id):
        """
        所有已有成绩的选课记录（不论是否通过）

        Returns:
            Enrollment 对象列表，按学期、课程排序
        """
        return self.session.query(Enrollment).filter(
            Enrollment.student_id == student_id,
            Enrollment.grade.isnot(None),
        ).order_by(Enrollment.term, Enrollment.course_id).all()

    def get_transfer_credits(self, student_id):
        return self.session.query(TransferCredit).filter(
            TransferCredit.student_id == student_id
        ).all()

    def get_substitutions(self, student_id, active_only=True):
        """
        学生的课程替代记录

        Args:
            student_id: 学生 ID
            active_only: 只返回 is_active 的记录（生效窗口由审核时判断）

        Returns:
            CourseSubstitution 对象列表
        """
        query = self.session.query(CourseSubstitution).filter(
            CourseSubstitution.student_id == student_id
        )
        if active_only:
            query = query.filter(CourseSubstitution.is_active.is_(True))
        return query.order_by(CourseSubstitution.approval_date).all()
