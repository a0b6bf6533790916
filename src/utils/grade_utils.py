"""
成绩 / 学分换算工具函数

- 字母成绩 → 绩点（A = 4.0 ... F = 0.0）
- 百分制成绩 → 字母成绩
- 字母成绩 → 百分制代表分
- GPA = Σ(绩点 × 学分) / Σ(学分)

只有出现在 GRADE_POINTS 中的字母成绩参与 GPA；P / W / I 等不计入分母。
"""
from decimal import Decimal, ROUND_HALF_EVEN

from config import FAILING_GRADES

GRADE_POINTS = {
    "A+": Decimal("4.0"), "A": Decimal("4.0"), "A-": Decimal("3.7"),
    "B+": Decimal("3.3"), "B": Decimal("3.0"), "B-": Decimal("2.7"),
    "C+": Decimal("2.3"), "C": Decimal("2.0"), "C-": Decimal("1.7"),
    "D+": Decimal("1.3"), "D": Decimal("1.0"), "D-": Decimal("0.7"),
    "F": Decimal("0.0"),
}

# 百分制下限 → 字母成绩（从高到低匹配）
NUMERIC_CUTOFFS = [
    (97, "A+"), (93, "A"), (90, "A-"),
    (87, "B+"), (83, "B"), (80, "B-"),
    (77, "C+"), (73, "C"), (70, "C-"),
    (67, "D+"), (63, "D"), (60, "D-"),
]

LETTER_TO_NUMERIC = {
    "A+": 97, "A": 94, "A-": 90,
    "B+": 87, "B": 84, "B-": 80,
    "C+": 77, "C": 74, "C-": 70,
    "D+": 67, "D": 64, "D-": 60,
    "F": 50,
}

TWO_PLACES = Decimal("0.01")


def to_decimal(value) -> Decimal:
    """把 int / float / str / Decimal 统一转换成 Decimal（float 先转 str 避免二进制误差）"""
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def round2(value) -> Decimal:
    """保留两位小数（银行家舍入）"""
    return to_decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_EVEN)


def normalize_grade(grade):
    """去空格、转大写；None 保持 None"""
    if grade is None:
        return None
    return grade.strip().upper()


def letter_to_points(grade) -> Decimal:
    """
    字母成绩转绩点，未知成绩（P、W、I 等）返回 0

    Examples:
        >>> letter_to_points("B+")
        Decimal('3.3')
    """
    return GRADE_POINTS.get(normalize_grade(grade), Decimal("0.0"))


def numeric_to_letter(score) -> str:
    """
    百分制成绩转字母成绩

    Examples:
        >>> numeric_to_letter(91)
        'A-'
        >>> numeric_to_letter(59.5)
        'F'
    """
    score = to_decimal(score)
    for cutoff, letter in NUMERIC_CUTOFFS:
        if score >= cutoff:
            return letter
    return "F"


def letter_to_numeric(grade) -> int:
    """字母成绩转百分制代表分，未知成绩返回 0"""
    return LETTER_TO_NUMERIC.get(normalize_grade(grade), 0)


def counts_toward_gpa(grade) -> bool:
    """只有字母成绩（含 F）计入 GPA"""
    return normalize_grade(grade) in GRADE_POINTS


def is_passing(grade) -> bool:
    """
    判断成绩是否算作“已完成”（获得学分）

    没有成绩的记录不算完成。
    """
    grade = normalize_grade(grade)
    if not grade:
        return False
    return grade not in FAILING_GRADES


def quality_points(grade, credit_hours) -> Decimal:
    """绩点 × 学分"""
    return letter_to_points(grade) * to_decimal(credit_hours)


def calculate_gpa(graded_courses) -> Decimal:
    """
    计算 GPA

    Args:
        graded_courses: 带 grade 和 credit_hours 属性的对象列表

    Returns:
        Decimal: 保留两位小数的 GPA；没有可计入的课程时返回 0.00
    """
    total_points = Decimal("0")
    total_credits = Decimal("0")

    for course in graded_courses:
        if not counts_toward_gpa(course.grade):
            continue
        credits = to_decimal(course.credit_hours)
        total_points += quality_points(course.grade, credits)
        total_credits += credits

    if total_credits <= 0:
        return round2(0)
    return round2(total_points / total_credits)


def academic_standing(gpa) -> str:
    """
    根据 GPA 判断学业状态

    Returns:
        str: "good" / "warning" / "probation" / "suspension"
    """
    gpa = to_decimal(gpa)
    if gpa >= Decimal("2.0"):
        return "good"
    if gpa >= Decimal("1.5"):
        return "warning"
    if gpa >= Decimal("1.0"):
        return "probation"
    return "suspension"
