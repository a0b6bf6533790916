"""
DegreeRequirementTemplate 数据访问层
"""
from datetime import datetime
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from models import DegreeRequirementTemplate


class TemplateRepository:
    """学位要求模板数据访问类"""

    def __init__(self, session):
        self.session = session

    def save(self, template):
        """
        保存模板（连同分类、要求等子对象）

        Returns:
            bool: 是否保存成功
        """
        try:
            self.session.add(template)
            self.session.commit()
            return True
        except SQLAlchemyError as e:
            self.session.rollback()
            print(f"保存学位模板失败 {template.degree_code}: {e}")
            return False

    def get_by_id(self, template_id):
        return self.session.get(DegreeRequirementTemplate, template_id)

    def get_by_degree_code(self, degree_code):
        """
        某学位代码的所有模板（含历史模板）

        Returns:
            DegreeRequirementTemplate 对象列表，按生效日期排序
        """
        return self.session.query(DegreeRequirementTemplate).filter(
            DegreeRequirementTemplate.degree_code == degree_code
        ).order_by(DegreeRequirementTemplate.effective_date).all()

    def get_all(self):
        return self.session.query(DegreeRequirementTemplate).order_by(
            DegreeRequirementTemplate.degree_code,
            DegreeRequirementTemplate.effective_date,
        ).all()

    def get_current(self, degree_code, now=None):
        """
        当前生效的模板

        生效条件：is_active，effective_date 为空或 ≤ now，expiration_date 为空或 > now。
        多个同时生效时取 effective_date 最晚的一个（这种情况由 check_single_effective 报错）。

        Returns:
            DegreeRequirementTemplate 对象或 None
        """
        now = now or datetime.now()
        return self.session.query(DegreeRequirementTemplate).filter(
            DegreeRequirementTemplate.degree_code == degree_code,
            DegreeRequirementTemplate.is_active.is_(True),
            or_(
                DegreeRequirementTemplate.effective_date.is_(None),
                DegreeRequirementTemplate.effective_date <= now,
            ),
            or_(
                DegreeRequirementTemplate.expiration_date.is_(None),
                DegreeRequirementTemplate.expiration_date > now,
            ),
        ).order_by(DegreeRequirementTemplate.effective_date.desc()).first()

    def expire_current(self, degree_code, expiration_date):
        """
        把某学位当前生效的模板在 expiration_date 截止

        Returns:
            int: 被截止的模板数量
        """
        templates = self.session.query(DegreeRequirementTemplate).filter(
            DegreeRequirementTemplate.degree_code == degree_code,
            DegreeRequirementTemplate.is_active.is_(True),
            or_(
                DegreeRequirementTemplate.expiration_date.is_(None),
                DegreeRequirementTemplate.expiration_date > expiration_date,
            ),
        ).all()
        for template in templates:
            template.expiration_date = expiration_date
        try:
            self.session.commit()
            return len(templates)
        except SQLAlchemyError as e:
            self.session.rollback()
            print(f"截止旧模板失败 {degree_code}: {e}")
            return 0
