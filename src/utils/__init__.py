"""
工具函数模块
"""
from .term_utils import (
    parse_term,
    is_valid_term,
    compare_terms,
    is_earlier_or_equal,
    term_sort_key,
)
from .grade_utils import (
    to_decimal,
    round2,
    letter_to_points,
    numeric_to_letter,
    letter_to_numeric,
    counts_toward_gpa,
    is_passing,
    quality_points,
    calculate_gpa,
    academic_standing,
)

__all__ = [
    'parse_term',
    'is_valid_term',
    'compare_terms',
    'is_earlier_or_equal',
    'term_sort_key',
    'to_decimal',
    'round2',
    'letter_to_points',
    'numeric_to_letter',
    'letter_to_numeric',
    'counts_toward_gpa',
    'is_passing',
    'quality_points',
    'calculate_gpa',
    'academic_standing',
]
