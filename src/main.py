"""
主程序入口
学位审核命令行工具

子命令：
  init-db            创建数据表
  import             导入课程目录 / 学位模板 / 学生记录（YAML）
  audit              审核一个学生（数据库模式或 YAML 文件模式）
  validate-template  校验学位模板文件
  sequence           输出先修关系分层和学期安排，或报告环
"""
import sys
import argparse

from config import TEMPLATES_DIR
from repositories import InMemoryDataProvider
from services import (
    NotFoundError,
    DegreeAuditService,
    TemplateService,
    validate_template,
    validate_sequence,
    build_catalog_graph,
    detect_cycle,
    topological_levels,
)
from services.template_service import CATALOG_FILE, STUDENT_FILE, parse_course_code
from snapshots import SequencedCoursesRequirement
from utils import academic_standing


def parse_args(argv=None):
    """解析命令行参数"""
    parser = argparse.ArgumentParser(
        description='学位要求审核系统',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
使用示例:
  python src/main.py init-db
  python src/main.py import --catalog {TEMPLATES_DIR}/catalog.yml --template {TEMPLATES_DIR}/bscs.yml
  python src/main.py audit --student-id 1 --save --audited-by registrar
  python src/main.py audit --template {TEMPLATES_DIR}/bscs.yml --catalog {TEMPLATES_DIR}/catalog.yml \\
                           --student {TEMPLATES_DIR}/student.yml --what-if "CS 301" "CS 310"
  python src/main.py validate-template {TEMPLATES_DIR}/bscs.yml --catalog {TEMPLATES_DIR}/catalog.yml
  python src/main.py sequence --catalog {TEMPLATES_DIR}/catalog.yml
        """
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    # init-db
    init_db = subparsers.add_parser('init-db', help='创建数据表')
    init_db.add_argument('--reset', action='store_true', help='删除并重建所有表（清空数据！）')

    # import
    import_cmd = subparsers.add_parser('import', help='导入 YAML 数据到数据库')
    import_cmd.add_argument('--catalog', help='课程目录 YAML')
    import_cmd.add_argument('--template', nargs='+', default=[], help='学位模板 YAML')
    import_cmd.add_argument('--student', nargs='+', default=[], help='学生记录 YAML')
    import_cmd.add_argument('--keep-current', action='store_true', help='不截止当前生效的模板')

    # audit
    audit_cmd = subparsers.add_parser('audit', help='审核一个学生')
    audit_cmd.add_argument('--student-id', type=int, help='数据库模式：学生 ID')
    audit_cmd.add_argument('--degree', help='学位代码（默认取学生自己的学位）')
    audit_cmd.add_argument('--save', action='store_true', help='数据库模式：保存审核结果')
    audit_cmd.add_argument('--audited-by', help='保存时记录的操作人')
    audit_cmd.add_argument('--template', help='文件模式：学位模板 YAML')
    audit_cmd.add_argument('--catalog', help='文件模式：课程目录 YAML')
    audit_cmd.add_argument('--student', help='文件模式：学生记录 YAML')
    audit_cmd.add_argument('--what-if', nargs='+', metavar='COURSE', help='假设再修这些课程（如 "CS 301"）')

    # validate-template
    validate_cmd = subparsers.add_parser('validate-template', help='校验学位模板文件')
    validate_cmd.add_argument('template', help='学位模板 YAML')
    validate_cmd.add_argument('--catalog', help='课程目录 YAML（用于检查课程引用）')

    # sequence
    sequence_cmd = subparsers.add_parser('sequence', help='先修关系分层 / 学期安排')
    sequence_cmd.add_argument('--catalog', required=True, help='课程目录 YAML')
    sequence_cmd.add_argument('--template', help='只看该模板中的顺序课程要求')

    args = parser.parse_args(argv)

    if args.command == 'audit':
        file_mode = any([args.template, args.catalog, args.student])
        if file_mode and not all([args.template, args.catalog, args.student]):
            parser.error('文件模式需要同时提供 --template --catalog --student')
        if not file_mode and args.student_id is None:
            parser.error('需要 --student-id（数据库模式）或 --template/--catalog/--student（文件模式）')
        if args.save and (file_mode or not args.audited_by):
            parser.error('--save 只用于数据库模式，并且需要 --audited-by')

    return args


# =============================================================================
# 输出
# =============================================================================

def print_audit(result):
    """打印审核结果"""
    print("=" * 60)
    print(f"学位审核: 学生 {result.student_id} / {result.degree_code}")
    print("=" * 60)
    print(f"学分: {result.total_credits_completed} / {result.total_credits_required} "
          f"({result.completion_percentage}%)，还需 {result.remaining_credits_needed}")
    print(f"GPA: {result.current_gpa}（要求 {result.required_gpa}，"
          f"学业状态 {academic_standing(result.current_gpa)}）")
    if result.gpa_deficiency > 0:
        print(f"  ⚠️ GPA 差距: {result.gpa_deficiency}")
    marker = "✓" if result.is_eligible_for_graduation else "✗"
    print(f"{marker} 毕业资格: {'满足' if result.is_eligible_for_graduation else '不满足'}")

    for category in result.category_progress:
        marker = "✓" if category.is_complete else "•"
        print(f"\n{marker} {category.category_name}: "
              f"{category.credits_completed} / {category.credits_required} "
              f"({category.completion_percentage}%)")
        for item in category.satisfied_requirements:
            print(f"    ✓ {item.description}")
        for item in category.outstanding_requirements:
            print(f"    ✗ {item.description} ({item.progress_percentage}%，还需 {item.credits_needed} 学分)")
            for suggestion in item.suggested_courses:
                print(f"        → {suggestion}")

    if result.processed_substitutions:
        print("\n课程替代:")
        for sub in result.processed_substitutions:
            marker = "✓" if sub.is_effective else "⚠️"
            print(f"  {marker} {sub.original_course_name} → {sub.substitute_course_name} "
                  f"({sub.credit_hours_difference:+} 学分)")

    print("\n建议:")
    for recommendation in result.recommendations:
        print(f"  • {recommendation}")


def print_what_if(result):
    """打印 what-if 分析结果"""
    print("\n" + "=" * 60)
    print("What-if 分析")
    print("=" * 60)
    print(f"学分变化: +{result.credit_impact}")
    print(f"完成度变化: +{result.progress_impact}%")
    print(f"新满足的要求: {result.requirements_satisfied}")
    for impact in result.category_impacts:
        if impact.progress_gain > 0:
            print(f"  • {impact.category_name}: {impact.current_progress}% → {impact.projected_progress}%")
    for recommendation in result.recommendations:
        print(f"  • {recommendation}")


# =============================================================================
# 子命令
# =============================================================================

def _open_database():
    from database import Database

    db = Database()
    if not db.test_connection():
        print("\n数据库连接失败，请检查 .env 配置")
        return None
    return db


def _load_catalog(path):
    data = TemplateService.load_yaml(path, CATALOG_FILE)
    courses, not_found = TemplateService.build_catalog(data)
    if not_found:
        print(f"⚠️ 目录中未找到的先修课程: {', '.join(not_found)}")
    return courses


def _catalog_resolver(courses):
    by_code = {(c.subject_code, c.course_number): c.id for c in courses}
    return lambda subject, number: by_code.get((subject, number))


def _load_template(path, courses):
    data = TemplateService.load_yaml(path)
    template, not_found = TemplateService.build_template(data, _catalog_resolver(courses))
    if not_found:
        print(f"⚠️ 模板中未找到的课程: {', '.join(not_found)}")
    return template


def cmd_init_db(args):
    db = _open_database()
    if db is None:
        return 1
    ok = db.reset_tables() if args.reset else db.create_tables()
    return 0 if ok else 1


def cmd_import(args):
    db = _open_database()
    if db is None or not db.create_tables():
        return 1

    session = db.get_session()
    service = TemplateService(session)
    failures = 0
    try:
        if args.catalog:
            service.import_catalog(args.catalog)
        for path in args.template:
            try:
                service.import_from_yaml(path, replace_current=not args.keep_current)
            except ValueError as e:
                print(f"✗ {e}")
                failures += 1
        for path in args.student:
            if not service.import_student(path)['saved']:
                failures += 1
    finally:
        session.close()
    return 1 if failures else 0


def _resolve_codes(codes, resolve):
    ids = []
    for code in codes:
        course_id = resolve(*parse_course_code(code))
        if course_id is None:
            print(f"⚠️ 未找到课程: {code}")
        else:
            ids.append(course_id)
    return ids


def cmd_audit(args):
    if args.template:
        courses = _load_catalog(args.catalog)
        template = _load_template(args.template, courses)
        catalog = InMemoryDataProvider(courses=courses)
        data = TemplateService.load_yaml(args.student, STUDENT_FILE)
        record, not_found = TemplateService.build_student_record(
            data, catalog.get_course, _catalog_resolver(courses)
        )
        if not_found:
            print(f"⚠️ 学生记录中未找到的课程: {', '.join(not_found)}")
        provider = InMemoryDataProvider(courses=courses, records=[record], templates=[template])
        return _run_audit(DegreeAuditService(provider), record.student_id, args,
                          _catalog_resolver(courses))

    from repositories import SqlDataProvider, AuditRepository, CourseRepository

    db = _open_database()
    if db is None:
        return 1
    session = db.get_session()
    try:
        service = DegreeAuditService(SqlDataProvider(session), AuditRepository(session))
        course_repo = CourseRepository(session)

        def resolve(subject, number):
            course = course_repo.get_by_code(subject, number)
            return course.id if course is not None else None

        return _run_audit(service, args.student_id, args, resolve)
    finally:
        session.close()


def _run_audit(service, student_id, args, resolve):
    audited_by = args.audited_by if args.save else None
    try:
        result = service.run_audit(student_id, args.degree, audited_by=audited_by)
        print_audit(result)
        if args.what_if:
            course_ids = _resolve_codes(args.what_if, resolve)
            print_what_if(service.run_what_if(student_id, course_ids, args.degree))
    except NotFoundError as e:
        print(f"✗ {e}")
        return 1
    return 0


def cmd_validate_template(args):
    errors = TemplateService.validate_yaml(args.template)
    if errors:
        print(f"✗ Schema 校验失败: {args.template}")
        for msg in errors:
            print(msg)
        return 1

    courses = _load_catalog(args.catalog) if args.catalog else []
    if args.catalog:
        template = _load_template(args.template, courses)
        known_course_ids = {c.id for c in courses}
        known_subjects = {c.subject_code for c in courses}
    else:
        # 没有目录时课程代码无法解析，只检查模板本身
        template, _ = TemplateService.build_template(
            TemplateService.load_yaml(args.template), lambda subject, number: None
        )
        known_course_ids = None
        known_subjects = None

    result = validate_template(template, known_course_ids, known_subjects)
    for warning in result.warnings:
        print(f"  ⚠️ {warning}")
    for error in result.errors:
        print(f"  ✗ {error}")

    if result.is_valid:
        print(f"✓ {template.degree_code} 模板校验通过")
        return 0
    print(f"✗ {template.degree_code} 模板有 {len(result.errors)} 个错误")
    return 1


def _print_levels(levels, names):
    for semester, course_ids in enumerate(levels, start=1):
        labels = ", ".join(names.get(cid, str(cid)) for cid in course_ids)
        print(f"  第 {semester} 学期: {labels}")


def cmd_sequence(args):
    courses = _load_catalog(args.catalog)
    names = {c.id: c.display_name for c in courses}

    def label(cycle):
        return " -> ".join(names.get(cid, str(cid)) for cid in cycle)

    if not args.template:
        graph = build_catalog_graph(courses)
        cycle = detect_cycle(graph)
        if cycle is not None:
            print(f"✗ 课程目录先修关系有环: {label(cycle)}")
            return 1
        print("✓ 课程目录先修关系分层:")
        _print_levels(topological_levels(graph), names)
        return 0

    template = _load_template(args.template, courses)
    exit_code = 0
    for requirement in template.all_requirements():
        if not isinstance(requirement, SequencedCoursesRequirement):
            continue
        result = validate_sequence(requirement)
        if result.has_cycle:
            print(f"✗ {requirement.description}: 有环 {label(result.cycle)}")
            exit_code = 1
        elif not result.is_valid:
            print(f"✗ {requirement.description}: {'; '.join(result.errors)}")
            exit_code = 1
        else:
            print(f"✓ {requirement.description}（{result.sequence_length} 门课程）")
            _print_levels(result.levels, names)
    return exit_code


COMMANDS = {
    'init-db': cmd_init_db,
    'import': cmd_import,
    'audit': cmd_audit,
    'validate-template': cmd_validate_template,
    'sequence': cmd_sequence,
}


def main(argv=None):
    """主函数"""
    args = parse_args(argv)
    try:
        return COMMANDS[args.command](args)
    except (ValueError, FileNotFoundError) as e:
        print(f"✗ {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
