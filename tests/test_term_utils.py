"""
学期代码工具测试
"""
import pytest

from utils import parse_term, is_valid_term, compare_terms, is_earlier_or_equal, term_sort_key


def test_parse_term():
    assert parse_term("SP26") == (2026, 1)
    assert parse_term("fa25") == (2025, 3)


@pytest.mark.parametrize("term", ["SP2026", "XX26", "SPab", "", None, "TRANSFER"])
def test_parse_term_rejects_invalid(term):
    with pytest.raises(ValueError):
        parse_term(term)


def test_is_valid_term():
    assert is_valid_term("WI26")
    assert not is_valid_term(None)


def test_term_order_within_year():
    """WI < SP < SU < FA"""
    assert compare_terms("WI26", "SP26") == -1
    assert compare_terms("SU26", "SP26") == 1
    assert compare_terms("FA25", "WI26") == -1
    assert compare_terms("FA25", "FA25") == 0


def test_is_earlier_or_equal():
    assert is_earlier_or_equal("FA25", "SP26")
    assert is_earlier_or_equal("SP26", "SP26")
    assert not is_earlier_or_equal("FA26", "SP26")


def test_term_sort_key_puts_unknown_terms_first():
    terms = ["FA25", None, "SP24", "TRANSFER"]
    ordered = sorted(terms, key=term_sort_key)
    assert ordered[2:] == ["SP24", "FA25"]
