"""
学期代码解析和比较工具函数

学期格式：两位季节代码 + 两位年份
- WI26: Winter 2026
- SP26: Spring 2026
- SU26: Summer 2026
- FA25: Fall 2025

学期顺序：... < FA25 < WI26 < SP26 < SU26 < FA26 < WI27 < ...

成绩记录中的 term 也可能是 None 或 "TRANSFER" 等非学期值，
这类值一律视为“无法比较”。
"""

SEASON_ORDER = {
    "WI": 0,  # Winter - 年初
    "SP": 1,  # Spring
    "SU": 2,  # Summer
    "FA": 3,  # Fall - 年末
}


def parse_term(term_code: str) -> tuple:
    """
    解析学期代码为可比较的元组

    Args:
        term_code: 学期代码，如 "WI26", "SP26", "SU26", "FA25"

    Returns:
        tuple: (year, season_order)

    Raises:
        ValueError: 如果学期代码格式不正确

    Examples:
        >>> parse_term("SP26")
        (2026, 1)
        >>> parse_term("FA25")
        (2025, 3)
    """
    if not isinstance(term_code, str) or len(term_code) != 4:
        raise ValueError(f"Invalid term format: {term_code}. Expected format: XX##")

    season = term_code[:2].upper()
    year_suffix = term_code[2:]

    if not year_suffix.isdigit():
        raise ValueError(f"Invalid year in term: {term_code}")

    if season not in SEASON_ORDER:
        raise ValueError(
            f"Invalid season: {season}. Must be one of: WI, SP, SU, FA"
        )

    return (2000 + int(year_suffix), SEASON_ORDER[season])


def is_valid_term(term_code) -> bool:
    """
    验证学期代码格式是否正确

    Examples:
        >>> is_valid_term("SP26")
        True
        >>> is_valid_term("TRANSFER")
        False
    """
    try:
        parse_term(term_code)
        return True
    except ValueError:
        return False


def compare_terms(term1: str, term2: str) -> int:
    """
    比较两个学期的先后顺序

    Returns:
        int: -1 (term1 更早) / 0 (相同) / 1 (term1 更晚)
    """
    parsed1 = parse_term(term1)
    parsed2 = parse_term(term2)

    if parsed1 < parsed2:
        return -1
    elif parsed1 > parsed2:
        return 1
    else:
        return 0


def is_earlier_or_equal(term1: str, term2: str) -> bool:
    """
    判断 term1 是否早于或等于 term2

    Examples:
        >>> is_earlier_or_equal("FA25", "SP26")
        True
        >>> is_earlier_or_equal("SP26", "SP26")
        True
    """
    return compare_terms(term1, term2) <= 0


def term_sort_key(term_code) -> tuple:
    """
    排序用的 key：无法解析的学期（None、"TRANSFER" 等）排在最前
    """
    if is_valid_term(term_code):
        return (1,) + parse_term(term_code)
    return (0, 0, 0)
