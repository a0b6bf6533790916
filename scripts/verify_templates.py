#!/usr/bin/env python3
"""
学位模板完整性检查脚本
检查数据库中的模板：结构是否合法、引用的课程和学科是否存在、
同一学位是否有多个同时生效的模板、课程目录的先修关系是否有环
"""
import sys
import os
import argparse
from collections import defaultdict

# 添加 src 目录到 Python 路径
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from database import Database
from repositories import CourseRepository, TemplateRepository
from repositories.data_provider import course_to_info, template_to_snapshot
from services import (
    validate_template,
    check_single_effective,
    build_catalog_graph,
    detect_cycle,
)


class TemplateIntegrityChecker:
    """模板完整性检查器"""

    def __init__(self, degree_codes=None):
        self.degree_codes = set(degree_codes or [])
        db = Database()
        self.session = db.get_session()
        self.course_repo = CourseRepository(self.session)
        self.template_repo = TemplateRepository(self.session)

        # 问题记录
        self.issues = {
            'structural_errors': defaultdict(list),
            'warnings': defaultdict(list),
            'effective_conflicts': [],
            'catalog_cycle': None,
        }

    def run(self):
        """运行完整性检查"""
        print(f"\n{'='*70}")
        print("学位模板完整性检查")
        print(f"{'='*70}\n")

        print("步骤 1: 读取模板和课程目录...")
        print("-" * 70)
        templates = [
            template_to_snapshot(t) for t in self.template_repo.get_all()
            if not self.degree_codes or t.degree_code in self.degree_codes
        ]
        course_ids = self.course_repo.get_course_ids()
        subject_codes = self.course_repo.get_subject_codes()
        print(f"  模板: {len(templates)}")
        print(f"  课程: {len(course_ids)}")
        print(f"  学科: {len(subject_codes)}")

        print("\n步骤 2: 检查模板结构...")
        print("-" * 70)
        for template in templates:
            key = f"{template.degree_code} (#{template.id})"
            result = validate_template(template, course_ids, subject_codes)
            self.issues['structural_errors'][key].extend(result.errors)
            self.issues['warnings'][key].extend(result.warnings)
            marker = "✓" if result.is_valid else "✗"
            print(f"  {marker} {key}: {len(result.errors)} 个错误, {len(result.warnings)} 个警告")

        print("\n步骤 3: 检查生效模板唯一性...")
        print("-" * 70)
        conflicts = check_single_effective(templates)
        self.issues['effective_conflicts'] = conflicts.errors
        if conflicts.is_valid:
            print("  ✓ 每个学位最多一个生效模板")
        for message in conflicts.errors:
            print(f"  ✗ {message}")

        print("\n步骤 4: 检查课程目录先修关系...")
        print("-" * 70)
        catalog = [course_to_info(c) for c in self.course_repo.get_all()]
        cycle = detect_cycle(build_catalog_graph(catalog))
        self.issues['catalog_cycle'] = cycle
        if cycle is None:
            print("  ✓ 先修关系无环")
        else:
            print(f"  ✗ 先修关系有环: {' -> '.join(str(c) for c in cycle)}")

        self._generate_summary()
        self.session.close()
        return self.has_errors()

    def has_errors(self):
        return (
            any(self.issues['structural_errors'].values())
            or bool(self.issues['effective_conflicts'])
            or self.issues['catalog_cycle'] is not None
        )

    def _generate_summary(self):
        """汇总报告"""
        print(f"\n{'='*70}")
        print("汇总")
        print(f"{'='*70}")

        for key, errors in self.issues['structural_errors'].items():
            for message in errors:
                print(f"  ✗ {key}: {message}")
        for key, warnings in self.issues['warnings'].items():
            for message in warnings:
                print(f"  ⚠️ {key}: {message}")

        if self.has_errors():
            print("\n发现问题，请修复后重新导入 ✗")
        else:
            print("\n所有检查通过 ✓")


def parse_args():
    """解析命令行参数"""
    parser = argparse.ArgumentParser(description='检查数据库中的学位模板')
    parser.add_argument(
        '--degrees',
        nargs='+',
        metavar='CODE',
        help='只检查指定学位代码（不指定则检查全部）'
    )
    return parser.parse_args()


def main():
    args = parse_args()
    checker = TemplateIntegrityChecker(args.degrees)
    if checker.run():
        sys.exit(1)


if __name__ == "__main__":
    main()
