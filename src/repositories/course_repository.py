"""
Course 数据访问层
负责所有与 Course / Subject / CoursePrerequisite 表相关的数据库操作
"""
from sqlalchemy.exc import SQLAlchemyError
from models import Course, CoursePrerequisite, Subject


class CourseRepository:
    """Course 数据访问类"""

    def __init__(self, session):
        """
        初始化 Repository

        Args:
            session: SQLAlchemy 数据库会话
        """
        self.session = session

    def save(self, course):
        """
        保存或更新课程

        Args:
            course: Course 对象

        Returns:
            bool: 是否保存成功
        """
        try:
            self.session.merge(course)  # merge 会自动判断是插入还是更新
            self.session.commit()
            return True
        except SQLAlchemyError as e:
            self.session.rollback()
            print(f"保存课程失败 {course.subject_code} {course.course_number}: {e}")
            return False

    def save_subject(self, subject):
        """保存或更新学科"""
        try:
            self.session.merge(subject)
            self.session.commit()
            return True
        except SQLAlchemyError as e:
            self.session.rollback()
            print(f"保存学科失败 {subject.code}: {e}")
            return False

    def add_prerequisite(self, course_id, prerequisite_course_id):
        """
        登记一条目录先修关系（已存在时直接返回 True）

        Returns:
            bool: 是否保存成功
        """
        existing = self.session.get(CoursePrerequisite, (course_id, prerequisite_course_id))
        if existing is not None:
            return True
        try:
            self.session.add(CoursePrerequisite(
                course_id=course_id,
                prerequisite_course_id=prerequisite_course_id,
            ))
            self.session.commit()
            return True
        except SQLAlchemyError as e:
            self.session.rollback()
            print(f"保存先修关系失败 {course_id} -> {prerequisite_course_id}: {e}")
            return False

    def get_by_id(self, course_id):
        """
        根据 ID 获取课程

        Returns:
            Course 对象或 None
        """
        return self.session.get(Course, course_id)

    def get_by_code(self, subject_code, course_number):
        """
        根据学科 + 课程号获取课程

        Args:
            subject_code: 学科代码 (如 "CS")
            course_number: 课程号 (如 "201")

        Returns:
            Course 对象或 None
        """
        return self.session.query(Course).filter(
            Course.subject_code == subject_code,
            Course.course_number == course_number,
        ).first()

    def get_by_subject(self, subject_code):
        """
        根据学科获取所有课程

        Returns:
            Course 对象列表
        """
        return self.session.query(Course).filter(Course.subject_code == subject_code).all()

    def get_all(self, active_only=False):
        """
        获取所有课程

        Args:
            active_only: 只返回仍在开设的课程

        Returns:
            Course 对象列表
        """
        query = self.session.query(Course)
        if active_only:
            query = query.filter(Course.is_active.is_(True))
        return query.order_by(Course.subject_code, Course.course_number).all()

    def get_subject_codes(self):
        """
        所有学科代码

        Returns:
            set: {"CS", "MATH", ...}
        """
        return {code for (code,) in self.session.query(Subject.code).all()}

    def get_course_ids(self):
        """所有课程 id 的集合"""
        return {course_id for (course_id,) in self.session.query(Course.id).all()}

    def count(self):
        """
        获取课程总数

        Returns:
            int: 课程数量
        """
        return self.session.query(Course).count()

    def exists(self, course_id):
        """
        检查课程是否存在

        Returns:
            bool: 是否存在
        """
        return self.session.query(Course).filter(Course.id == course_id).count() > 0
