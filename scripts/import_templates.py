#!/usr/bin/env python3
"""
学位模板导入脚本
把 data/templates/ 下的模板文件（可选先导入课程目录）写入数据库

使用方法：
  python scripts/import_templates.py BSCS --catalog data/templates/catalog.yml
  python scripts/import_templates.py                     # 全部模板
  python scripts/import_templates.py --check             # 只校验，不连数据库
"""
import sys
import os
import argparse
import glob

# 添加 src 目录到 Python 路径
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from config import TEMPLATES_DIR
from database import Database
from services import TemplateService, validate_template
from services.template_service import CATALOG_FILE

# 目录下不是学位模板的数据文件
NON_TEMPLATE_FILES = {'catalog.yml', 'student.yml'}


def template_files(degree_codes=None):
    """
    学位代码 → 模板文件路径（文件名为小写学位代码）

    Returns:
        dict: {degree_code: yaml_path}；指定的代码找不到文件时打印警告并跳过
    """
    available = {
        os.path.splitext(os.path.basename(path))[0].upper(): path
        for path in sorted(glob.glob(os.path.join(TEMPLATES_DIR, '*.yml')))
        if os.path.basename(path) not in NON_TEMPLATE_FILES
    }
    if not degree_codes:
        return available

    selected = {}
    for code in degree_codes:
        code = code.upper()
        if code in available:
            selected[code] = available[code]
        else:
            print(f"⚠️ 没有 {code} 的模板文件")
    return selected


def check_files(files, catalog_path=None):
    """
    schema 校验 + 结构校验（给出目录时同时检查课程引用）

    Returns:
        int: 有错误的文件数
    """
    courses = []
    if catalog_path:
        courses, _ = TemplateService.build_catalog(TemplateService.load_yaml(catalog_path, CATALOG_FILE))
    by_code = {(c.subject_code, c.course_number): c.id for c in courses}

    failed = 0
    for code, path in files.items():
        errors = TemplateService.validate_yaml(path)
        if not errors:
            template, not_found = TemplateService.build_template(
                TemplateService.load_yaml(path),
                lambda subject, number: by_code.get((subject, number)),
            )
            if courses:
                result = validate_template(template, set(by_code.values()), {c.subject_code for c in courses})
                errors = [f"  {e}" for e in result.errors]
                errors += [f"  未找到课程: {c}" for c in not_found]

        if errors:
            failed += 1
            print(f"✗ {code}")
            for message in errors:
                print(message)
        else:
            print(f"✓ {code}")
    return failed


def import_files(files, catalog_path=None, keep_current=False):
    """
    导入目录和模板

    Returns:
        int: 导入失败的模板数；数据库不可用时返回模板总数
    """
    db = Database()
    if not db.test_connection() or not db.create_tables():
        return len(files)

    session = db.get_session()
    service = TemplateService(session)
    failed = 0
    try:
        if catalog_path:
            service.import_catalog(catalog_path)
        for code, path in files.items():
            try:
                service.import_from_yaml(path, replace_current=not keep_current)
            except ValueError as e:
                print(f"✗ {code}: {e}")
                failed += 1
    finally:
        session.close()
    return failed


def parse_args():
    """解析命令行参数"""
    parser = argparse.ArgumentParser(description='导入学位模板（YAML → 数据库）')
    parser.add_argument('degrees', nargs='*', metavar='CODE', help='学位代码，不指定则处理全部模板')
    parser.add_argument('--catalog', metavar='PATH', help='课程目录 YAML（导入前先导入目录）')
    parser.add_argument('--check', action='store_true', help='只做校验，不写数据库')
    parser.add_argument('--keep-current', action='store_true', help='不截止当前生效的模板')
    return parser.parse_args()


def main():
    args = parse_args()
    files = template_files(args.degrees)
    if not files:
        print("没有找到任何模板文件")
        return 1

    print(f"模板文件: {', '.join(files)}")
    if args.check:
        failed = check_files(files, args.catalog)
    else:
        failed = import_files(files, args.catalog, args.keep_current)

    print(f"\n完成：{len(files) - failed} 个成功，{failed} 个失败")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
