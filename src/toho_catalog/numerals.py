"""
Chinese numeral normalization for volume names and declared volume counts.
"""

import jaconv

_DIGITS = {
    "〇": 0,
    "零": 0,
    "一": 1,
    "二": 2,
    "兩": 2,
    "三": 3,
    "四": 4,
    "五": 5,
    "六": 6,
    "七": 7,
    "八": 8,
    "九": 9,
}
_UNITS = {"十": 10, "百": 100, "千": 1000}
_MYRIADS = {"萬": 10_000, "万": 10_000}

# Character class shared by every pattern that captures a numeral token.
NUMERAL_CHARS = "〇零一二兩三四五六七八九十百千萬万0-9０-９"


def parse_chinese_number(token: str, default: int = 0) -> int:
    """
    Convert a Chinese numeral token to an integer.

    Plain digit strings (half- or fullwidth) are read as decimals. Otherwise
    digits accumulate into a pending value, 十/百/千 multiply it (a bare unit
    counts as one of itself) and 萬 closes a myriad section. Characters that
    are not numerals are skipped, so malformed input yields a partial value.
    `default` is returned when nothing numeric is found.

    >>> parse_chinese_number("20")
    20
    >>> parse_chinese_number("十")
    10
    >>> parse_chinese_number("一百五十")
    150
    >>> parse_chinese_number("三千二百")
    3200
    >>> parse_chinese_number("十一") == parse_chinese_number("一十一") == 11
    True
    >>> parse_chinese_number("卷", default=1)
    1
    """
    text = jaconv.z2h(token.strip(), kana=False, ascii=False, digit=True)
    if text.isascii() and text.isdigit():
        return int(text)

    total = 0
    section = 0
    pending: int | None = None
    for ch in text:
        if ch in _DIGITS or (ch.isascii() and ch.isdigit()):
            d = _DIGITS[ch] if ch in _DIGITS else int(ch)
            pending = d if pending is None else pending * 10 + d
        elif ch in _UNITS:
            section += (1 if pending is None else pending) * _UNITS[ch]
            pending = None
        elif ch in _MYRIADS:
            section += pending or 0
            total += (section or 1) * _MYRIADS[ch]
            section = 0
            pending = None
    result = total + section + (pending or 0)
    return result or default


def declared_volume_count(volumes: str | None) -> int:
    """Integer value of a declared count like "二十卷"; "不分卷" counts as 1."""
    if not volumes:
        return 0
    return parse_chinese_number(volumes.removesuffix("卷"), default=1)
