"""
Template 业务逻辑服务
负责读取 / 校验 YAML 数据文件（学位模板、课程目录、学生记录），
把它们变成审核快照，或导入数据库

YAML 中的课程一律用 "学科 课程号" 引用（如 "CS 201"），由调用方提供的
resolve(subject_code, course_number) -> course_id | None 解析成课程 id。
解析不到的引用被丢弃，记在 courses_not_found 里。
"""
import json
from datetime import date, datetime

import yaml
from jsonschema import Draft7Validator

import snapshots
from config import TEMPLATE_SCHEMA_PATH, MIN_COURSE_LEVEL, MAX_COURSE_LEVEL
from models import (
    Subject, Course,
    Student, Enrollment, TransferCredit, CourseSubstitution,
    DegreeRequirementTemplate, RequirementCategory, DegreeRequirement,
    ConditionalRequirement, PrerequisiteLink,
)
from repositories import CourseRepository, StudentRepository, TemplateRepository
from repositories.data_provider import course_to_info
from utils import to_decimal
from .requirement_validator import validate_template


TEMPLATE_FILE = 'template_file'
CATALOG_FILE = 'catalog_file'
STUDENT_FILE = 'student_file'

_SCHEMA = None  # 延迟加载


def _load_schema():
    """加载 JSON Schema（只读一次，缓存在模块级别）"""
    global _SCHEMA
    if _SCHEMA is None:
        with open(TEMPLATE_SCHEMA_PATH, 'r', encoding='utf-8') as f:
            _SCHEMA = json.load(f)
    return _SCHEMA


def _stringify_dates(value):
    """YAML 会把未加引号的日期解析成 date，统一转回 ISO 字符串再做 schema 校验"""
    if isinstance(value, dict):
        return {k: _stringify_dates(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_stringify_dates(v) for v in value]
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


def _parse_date(value):
    if value is None:
        return None
    return datetime.fromisoformat(value)


def parse_course_code(code):
    """
    "CS 201" → ("CS", "201")

    Raises:
        ValueError: 格式不对
    """
    parts = code.split()
    if len(parts) != 2:
        raise ValueError(f"Invalid course code: {code}. Expected format: 'SUBJ 123'")
    return parts[0], parts[1]


class _CourseResolver:
    """把课程代码列表解析成 id 列表，并记录解析不到的代码"""

    def __init__(self, resolve):
        self.resolve = resolve
        self.not_found = []

    def one(self, code):
        if code is None:
            return None
        course_id = self.resolve(*parse_course_code(code))
        if course_id is None and code not in self.not_found:
            self.not_found.append(code)
        return course_id

    def many(self, codes):
        ids = []
        for code in codes or []:
            course_id = self.one(code)
            if course_id is not None and course_id not in ids:
                ids.append(course_id)
        return ids


class TemplateService:
    """YAML 数据文件的读取、校验和导入服务"""

    # =========================================================================
    # 读取 / 校验
    # =========================================================================

    @staticmethod
    def validate_data(data, kind=TEMPLATE_FILE):
        """
        按 schema 校验已读入的数据

        Args:
            data: yaml.safe_load 的结果
            kind: TEMPLATE_FILE / CATALOG_FILE / STUDENT_FILE

        Returns:
            list[str]: 校验错误列表，空列表表示通过
        """
        schema = _load_schema()
        validator = Draft7Validator({
            'definitions': schema['definitions'],
            '$ref': f'#/definitions/{kind}',
        })
        errors = sorted(validator.iter_errors(data), key=lambda e: list(e.path))

        messages = []
        for err in errors:
            path = ' -> '.join(str(p) for p in err.absolute_path) or '(root)'
            messages.append(f"  [{path}] {err.message}")
        return messages

    @staticmethod
    def validate_yaml(yaml_path, kind=TEMPLATE_FILE):
        """
        校验一个 YAML 文件是否符合 schema

        Returns:
            list[str]: 校验错误列表，空列表表示通过

        Raises:
            FileNotFoundError: YAML 或 schema 文件不存在
        """
        with open(yaml_path, 'r', encoding='utf-8') as f:
            data = _stringify_dates(yaml.safe_load(f))
        return TemplateService.validate_data(data, kind)

    @staticmethod
    def load_yaml(yaml_path, kind=TEMPLATE_FILE):
        """
        读取并校验 YAML 文件

        Returns:
            dict: 校验通过的数据（日期已转为字符串）

        Raises:
            ValueError: schema 校验失败
        """
        with open(yaml_path, 'r', encoding='utf-8') as f:
            data = _stringify_dates(yaml.safe_load(f))

        errors = TemplateService.validate_data(data, kind)
        if errors:
            error_msg = '\n'.join(errors)
            raise ValueError(f"YAML 文件校验失败：{yaml_path}\n{error_msg}")
        return data

    # =========================================================================
    # YAML 数据 → 快照
    # =========================================================================

    @staticmethod
    def build_catalog(data):
        """
        课程目录数据 → CourseInfo 列表（先修课代码在目录内解析）

        Returns:
            tuple: (CourseInfo 列表, 解析不到的先修课代码列表)
        """
        by_code = {(c['subject'], c['number']): c['id'] for c in data['courses']}
        resolver = _CourseResolver(lambda subject, number: by_code.get((subject, number)))

        courses = [
            snapshots.CourseInfo(
                id=c['id'],
                subject_code=c['subject'],
                course_number=c['number'],
                credit_hours=to_decimal(c['credits']),
                title=c.get('title', ''),
                prerequisite_ids=tuple(resolver.many(c.get('prerequisites'))),
            )
            for c in data['courses']
        ]
        return courses, resolver.not_found

    @staticmethod
    def _build_requirement(data, resolver, display_order):
        requirement_type = snapshots.RequirementType(data['type'])
        common = dict(
            description=data['description'],
            credits_required=data.get('credits_required', 0),
            is_required=data.get('is_required', True),
            display_order=display_order,
        )

        if requirement_type == snapshots.RequirementType.SPECIFIC_COURSE:
            return snapshots.SpecificCourseRequirement(
                course_ids=resolver.many(data.get('courses')), **common
            )

        if requirement_type == snapshots.RequirementType.COURSE_GROUP:
            return snapshots.CourseGroupRequirement(
                subject_codes=list(data.get('subjects', [])),
                min_level=data.get('min_level', MIN_COURSE_LEVEL),
                max_level=data.get('max_level', MAX_COURSE_LEVEL),
                **common,
            )

        if requirement_type == snapshots.RequirementType.CONDITIONAL_GROUP:
            alternatives = []
            for index, alt in enumerate(data.get('alternatives', []), start=1):
                gpa = alt.get('minimum_gpa')
                alternatives.append(snapshots.ConditionalRequirement(
                    condition=alt.get('condition', ''),
                    course_ids=resolver.many(alt.get('courses')),
                    subject_codes=list(alt.get('subjects', [])),
                    min_level=alt.get('min_level', MIN_COURSE_LEVEL),
                    max_level=alt.get('max_level', MAX_COURSE_LEVEL),
                    credits_required=alt.get('credits_required', 0),
                    courses_required=alt.get('courses_required', 0),
                    minimum_gpa=to_decimal(gpa) if gpa is not None else None,
                    priority=alt.get('priority', index),
                ))
            return snapshots.ConditionalGroupRequirement(alternatives=alternatives, **common)

        if requirement_type == snapshots.RequirementType.SEQUENCED_COURSES:
            chain = []
            for order, link in enumerate(data.get('chain', []), start=1):
                course_id = resolver.one(link['course'])
                if course_id is None:
                    continue
                chain.append(snapshots.PrerequisiteLink(
                    course_id=course_id,
                    prerequisite_course_id=resolver.one(link.get('prerequisite')),
                    sequence_order=order,
                    notes=link.get('notes'),
                ))
            return snapshots.SequencedCoursesRequirement(
                chain=chain,
                course_ids=resolver.many(data.get('courses')),
                **common,
            )

        return snapshots.CreditHoursRequirement(**common)

    @staticmethod
    def build_template(data, resolve):
        """
        模板数据 → DegreeTemplate 快照

        Args:
            data: 校验过的模板数据
            resolve: (subject_code, course_number) -> course_id | None

        Returns:
            tuple: (DegreeTemplate, 解析不到的课程代码列表)
        """
        resolver = _CourseResolver(resolve)
        info = data['template']

        categories = []
        for order, category in enumerate(data['categories'], start=1):
            requirements = [
                TemplateService._build_requirement(r, resolver, index)
                for index, r in enumerate(category.get('requirements', []), start=1)
            ]
            categories.append(snapshots.RequirementCategory(
                name=category['name'],
                credits_required=category['credits_required'],
                requirements=requirements,
                description=category.get('description'),
                display_order=order,
                is_required=category.get('is_required', True),
            ))

        gpa = info.get('minimum_gpa')
        template = snapshots.DegreeTemplate(
            degree_code=info['degree_code'],
            degree_name=info['degree_name'],
            total_credits_required=info['total_credits_required'],
            minimum_gpa=to_decimal(gpa) if gpa is not None else to_decimal("2.0"),
            effective_date=_parse_date(info.get('effective_date')),
            expiration_date=_parse_date(info.get('expiration_date')),
            categories=categories,
        )
        return template, resolver.not_found

    @staticmethod
    def build_student_record(data, course_lookup, resolve):
        """
        学生数据 → StudentRecord 快照

        Args:
            data: 校验过的学生数据
            course_lookup: course_id -> CourseInfo | None（取学科、课程号、默认学分）
            resolve: (subject_code, course_number) -> course_id | None

        Returns:
            tuple: (StudentRecord, 解析不到的课程代码列表)
        """
        resolver = _CourseResolver(resolve)
        student = data['student']

        completed = []
        for item in data.get('completed', []):
            course = course_lookup(resolver.one(item['course']))
            if course is None:
                continue
            credits = item.get('credits', course.credit_hours)
            completed.append(snapshots.CompletedCourse(
                course_id=course.id,
                grade=item['grade'],
                credit_hours=to_decimal(credits),
                term=item.get('term'),
                subject_code=course.subject_code,
                course_number=course.course_number,
                title=course.title,
            ))

        transfers = [
            snapshots.TransferCredit(
                credit_hours=to_decimal(item['credits']),
                grade=item.get('grade', ''),
                institution=item['institution'],
                course_equivalent_id=resolver.one(item.get('equivalent')),
            )
            for item in data.get('transfer_credits', [])
        ]

        substitutions = []
        for item in data.get('substitutions', []):
            original_id = resolver.one(item['original'])
            substitute_id = resolver.one(item['substitute'])
            if original_id is None or substitute_id is None:
                continue
            substitutions.append(snapshots.Substitution(
                original_course_id=original_id,
                substitute_course_id=substitute_id,
                reason=item.get('reason', ''),
                approved_by=item['approved_by'],
                effective_date=_parse_date(item.get('effective_date')),
                expiration_date=_parse_date(item.get('expiration_date')),
                is_active=item.get('is_active', True),
            ))

        gpa = student.get('cumulative_gpa')
        record = snapshots.StudentRecord(
            student_id=student['id'],
            degree_code=student.get('degree_code', ''),
            completed_courses=completed,
            transfer_credits=transfers,
            substitutions=substitutions,
            cumulative_gpa=to_decimal(gpa) if gpa is not None else None,
        )
        return record, resolver.not_found

    # =========================================================================
    # 导入数据库
    # =========================================================================

    def __init__(self, session):
        """
        初始化服务

        Args:
            session: SQLAlchemy 数据库会话
        """
        self.session = session
        self.course_repo = CourseRepository(session)
        self.student_repo = StudentRepository(session)
        self.template_repo = TemplateRepository(session)

    def _resolve(self, subject_code, course_number):
        course = self.course_repo.get_by_code(subject_code, course_number)
        return course.id if course is not None else None

    def import_catalog(self, yaml_path):
        """
        导入课程目录（学科、课程、目录先修关系）

        课程按 YAML 中的 id 写入（merge），重复导入会覆盖已有课程。

        Returns:
            dict: 统计信息
        """
        data = self.load_yaml(yaml_path, CATALOG_FILE)
        courses, not_found = self.build_catalog(data)

        stats = {'subjects': 0, 'courses': 0, 'prerequisites': 0, 'courses_not_found': not_found}

        known_subjects = self.course_repo.get_subject_codes()
        for subject in data.get('subjects', []):
            if self.course_repo.save_subject(Subject(code=subject['code'], name=subject['name'])):
                known_subjects.add(subject['code'])
                stats['subjects'] += 1

        for info in courses:
            if info.subject_code not in known_subjects:
                # 目录中没列出的学科用代码本身作为名称
                self.course_repo.save_subject(Subject(code=info.subject_code, name=info.subject_code))
                known_subjects.add(info.subject_code)
                stats['subjects'] += 1
            course = Course(
                id=info.id,
                subject_code=info.subject_code,
                course_number=info.course_number,
                title=info.title,
                credit_hours=info.credit_hours,
            )
            if self.course_repo.save(course):
                stats['courses'] += 1

        for info in courses:
            for prereq_id in info.prerequisite_ids:
                if self.course_repo.add_prerequisite(info.id, prereq_id):
                    stats['prerequisites'] += 1

        print(f"✓ 课程目录导入完成: {stats['courses']} 门课程, "
              f"{stats['subjects']} 个学科, {stats['prerequisites']} 条先修关系")
        if not_found:
            print(f"⚠️ 未找到的先修课程: {', '.join(not_found)}")
        return stats

    def import_from_yaml(self, yaml_path, replace_current=True):
        """
        从 YAML 文件导入学位模板

        流程：
        1. schema 校验
        2. 解析课程代码，构建模板快照
        3. 结构校验（有错误则拒绝导入）
        4. 可选：把该学位当前生效的模板在新模板生效时截止
        5. 写入模板、分类、要求

        Args:
            yaml_path: YAML 文件路径
            replace_current: 是否截止旧模板，保证同一时刻只有一个生效模板

        Returns:
            dict: 统计信息

        Raises:
            ValueError: schema 校验或结构校验失败
        """
        data = self.load_yaml(yaml_path, TEMPLATE_FILE)
        template, not_found = self.build_template(data, self._resolve)

        print(f"\n{'='*60}")
        print(f"导入学位模板: {template.degree_code} - {template.degree_name}")
        print(f"{'='*60}")

        validation = validate_template(
            template,
            known_subject_codes=self.course_repo.get_subject_codes(),
        )
        for warning in validation.warnings:
            print(f"  ⚠️ {warning}")
        if not validation.is_valid:
            error_msg = '\n'.join(f"  {e}" for e in validation.errors)
            raise ValueError(f"学位模板结构校验失败：{yaml_path}\n{error_msg}")

        stats = {
            'degree_code': template.degree_code,
            'template_id': None,
            'categories': len(template.categories),
            'requirements': len(template.all_requirements()),
            'expired_templates': 0,
            'courses_not_found': not_found,
        }

        if replace_current:
            cutoff = template.effective_date or datetime.now()
            stats['expired_templates'] = self.template_repo.expire_current(template.degree_code, cutoff)

        row = template_to_orm(template)
        if not self.template_repo.save(row):
            raise ValueError(f"学位模板保存失败：{template.degree_code}")
        stats['template_id'] = row.id

        print(f"✓ 导入完成: {stats['categories']} 个分类, {stats['requirements']} 条要求")
        if stats['expired_templates']:
            print(f"  已截止旧模板: {stats['expired_templates']} 个")
        if not_found:
            print(f"⚠️ 未找到的课程: {', '.join(not_found)}")
        return stats

    def import_student(self, yaml_path):
        """
        导入学生及其成绩、转学分、课程替代

        已存在（同一 id）的学生，其成绩、转学分和课程替代会被整体替换。

        Returns:
            dict: 统计信息
        """
        data = self.load_yaml(yaml_path, STUDENT_FILE)

        def lookup(course_id):
            course = self.course_repo.get_by_id(course_id) if course_id is not None else None
            return course_to_info(course) if course is not None else None

        record, not_found = self.build_student_record(data, lookup, self._resolve)
        info = data['student']
        student_number = info.get('student_number', str(record.student_id))

        student = self.student_repo.get_by_id(record.student_id)
        if student is None:
            student = Student(id=record.student_id)
        else:
            # 先删旧记录再插入，避免 (student, course, term) 唯一约束冲突
            student.enrollments.clear()
            student.transfer_credits.clear()
            student.substitutions.clear()
            self.session.flush()

        student.student_number = student_number
        student.first_name = info.get("first_name", "")
        student.last_name = info.get("last_name", "")
        student.degree_code = record.degree_code or None
        student.cumulative_gpa = record.cumulative_gpa
        student.enrollments = [
            Enrollment(
                course_id=c.course_id,
                term=c.term,
                grade=c.grade,
                credit_hours=c.credit_hours,
            )
            for c in record.completed_courses
        ]
        student.transfer_credits = [
            TransferCredit(
                institution=t.institution,
                credit_hours=t.credit_hours,
                grade=t.grade or None,
                course_equivalent_id=t.course_equivalent_id,
            )
            for t in record.transfer_credits
        ]
        student.substitutions = [
            CourseSubstitution(
                original_course_id=s.original_course_id,
                substitute_course_id=s.substitute_course_id,
                reason=s.reason,
                approved_by=s.approved_by,
                effective_date=s.effective_date,
                expiration_date=s.expiration_date,
                is_active=s.is_active,
            )
            for s in record.substitutions
        ]

        stats = {
            'student_id': record.student_id,
            'enrollments': len(student.enrollments),
            'transfer_credits': len(student.transfer_credits),
            'substitutions': len(student.substitutions),
            'courses_not_found': not_found,
            'saved': self.student_repo.save(student),
        }

        if stats['saved']:
            print(f"✓ 学生导入完成: {student_number} ({stats['enrollments']} 条成绩)")
        else:
            print(f"✗ 学生导入失败: {student_number}")
        if not_found:
            print(f"⚠️ 未找到的课程: {', '.join(not_found)}")
        return stats


# =============================================================================
# 快照 → ORM
# =============================================================================

def requirement_to_orm(requirement):
    """要求快照 → DegreeRequirement 行（含备选条件 / 先修链）"""
    row = DegreeRequirement(
        requirement_type=requirement.requirement_type.value,
        description=requirement.description,
        credits_required=requirement.credits_required,
        is_required=requirement.is_required,
        display_order=requirement.display_order,
    )

    if isinstance(requirement, snapshots.SpecificCourseRequirement):
        row.course_ids = list(requirement.course_ids)
    elif isinstance(requirement, snapshots.CourseGroupRequirement):
        row.subject_codes = list(requirement.subject_codes)
        row.min_level = requirement.min_level
        row.max_level = requirement.max_level
    elif isinstance(requirement, snapshots.ConditionalGroupRequirement):
        row.alternatives = [
            ConditionalRequirement(
                condition=alt.condition,
                course_ids=list(alt.course_ids),
                subject_codes=list(alt.subject_codes),
                min_level=alt.min_level,
                max_level=alt.max_level,
                credits_required=alt.credits_required,
                courses_required=alt.courses_required,
                minimum_gpa=alt.minimum_gpa,
                priority=alt.priority,
            )
            for alt in requirement.alternatives
        ]
    elif isinstance(requirement, snapshots.SequencedCoursesRequirement):
        row.course_ids = list(requirement.course_ids)
        row.prerequisite_links = [
            PrerequisiteLink(
                course_id=link.course_id,
                prerequisite_course_id=link.prerequisite_course_id,
                sequence_order=link.sequence_order,
                notes=link.notes,
            )
            for link in requirement.chain
        ]

    return row


def template_to_orm(template):
    """DegreeTemplate 快照 → DegreeRequirementTemplate 行（含分类和要求）"""
    row = DegreeRequirementTemplate(
        degree_code=template.degree_code,
        degree_name=template.degree_name,
        total_credits_required=template.total_credits_required,
        minimum_gpa=template.minimum_gpa,
        effective_date=template.effective_date,
        expiration_date=template.expiration_date,
        is_active=template.is_active,
    )
    row.categories = [
        RequirementCategory(
            name=category.name,
            description=category.description,
            credits_required=category.credits_required,
            display_order=category.display_order,
            is_required=category.is_required,
            requirements=[requirement_to_orm(r) for r in category.requirements],
        )
        for category in template.categories
    ]
    return row
