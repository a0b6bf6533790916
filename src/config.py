"""
审核系统配置常量

集中管理学位审核用到的策略常量。数据库连接配置见 database.py，
可调参数可以通过 .env 覆盖。
"""
import os
from decimal import Decimal
from dotenv import load_dotenv

# 加载 .env 文件中的环境变量
load_dotenv()


# =============================================================================
# 文件路径
# =============================================================================

BASE_DIR = os.path.normpath(os.path.join(os.path.dirname(__file__), '..'))
TEMPLATES_DIR = os.path.join(BASE_DIR, 'data', 'templates')
TEMPLATE_SCHEMA_PATH = os.path.join(TEMPLATES_DIR, 'schema.json')


# =============================================================================
# 成绩定义
# =============================================================================

# 计入“已完成”的成绩之外的成绩：挂科、退课、未完成、不通过
FAILING_GRADES = {"F", "W", "I", "NP", "NC"}

# 路径推荐 / what-if 分析中假设的成绩
ASSUMED_GRADE = "B"


# =============================================================================
# 课程级别
# =============================================================================

MIN_COURSE_LEVEL = 0
MAX_COURSE_LEVEL = 999


# =============================================================================
# 可调参数（可通过 .env 覆盖）
# =============================================================================

# 估算学期数时每学期的学分
CREDITS_PER_SEMESTER = int(os.getenv('AUDIT_CREDITS_PER_SEMESTER', '15'))

# 路径 effort = 课程数 + 额外学分 / EFFORT_CREDIT_WEIGHT
EFFORT_CREDIT_WEIGHT = Decimal(os.getenv('AUDIT_EFFORT_CREDIT_WEIGHT', '3'))

# 推荐课程的最大条数
MAX_SUGGESTED_COURSES = 5
