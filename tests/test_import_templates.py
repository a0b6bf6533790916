"""
模板导入脚本测试（只覆盖不需要数据库的部分）
"""
import importlib.util
import os

import pytest

SCRIPT_PATH = os.path.join(os.path.dirname(__file__), '..', 'scripts', 'import_templates.py')


@pytest.fixture(scope='module')
def script():
    module_spec = importlib.util.spec_from_file_location('import_templates', SCRIPT_PATH)
    module = importlib.util.module_from_spec(module_spec)
    module_spec.loader.exec_module(module)
    return module


def test_template_files_skip_data_files(script):
    files = script.template_files()
    assert list(files) == ['BSCS']
    assert files['BSCS'].endswith('bscs.yml')


def test_template_files_by_code(script, capsys):
    assert list(script.template_files(['bscs', 'BSMA'])) == ['BSCS']
    assert "没有 BSMA 的模板文件" in capsys.readouterr().out


def test_check_files_with_catalog(script, data_dir):
    files = script.template_files(['BSCS'])
    assert script.check_files(files, os.path.join(data_dir, 'catalog.yml')) == 0


def test_check_files_reports_structural_errors(script, data_dir, tmp_path, capsys):
    path = tmp_path / "bsx.yml"
    path.write_text(
        "template:\n"
        "  degree_code: BSX\n"
        "  degree_name: Test\n"
        "  total_credits_required: 3\n"
        "categories:\n"
        "  - name: Core\n"
        "    credits_required: 3\n"
        "    requirements:\n"
        "      - type: specific_course\n"
        "        description: Missing course\n"
        "        credits_required: 3\n"
        "        courses: [\"CS 999\"]\n",
        encoding='utf-8',
    )
    failed = script.check_files({'BSX': str(path)}, os.path.join(data_dir, 'catalog.yml'))

    output = capsys.readouterr().out
    assert failed == 1
    assert "未找到课程: CS 999" in output
    assert "At least one course must be specified" in output
