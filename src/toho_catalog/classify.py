"""
Heuristic classification of catalog entries from their title and the free-text
bibliographic note that follows the link in a listing.

Each rule is a separate pure function so it can be exercised on its own;
`parse_book_info` applies all of them. The keyword tables encode the habits of
the catalog's compilers and are matched literally.
"""

import re
from dataclasses import dataclass, field
from typing import Literal

BookType = Literal["manuscript", "printed", "rubbing", "unknown"]
BOOK_TYPES: tuple[BookType, ...] = ("manuscript", "printed", "rubbing", "unknown")

_VOLUME_COUNT_RE = re.compile(r"([一二三四五六七八九十百千万不分]+卷)")

# Checked in order; the first group with a hit decides the edition type.
_EDITION_KEYWORDS: list[tuple[BookType, tuple[str, ...]]] = [
    ("manuscript", ("鈔本", "手稿", "手簡")),
    ("printed", ("刊本", "活字印本", "石印本")),
    ("rubbing", ("拓本",)),
]

_INCOMPLETE_TITLE_MARKERS = ("殘", "零片")
_INCOMPLETE_NOTE_MARKERS = ("残", "存卷")
_SEAL_MARKERS = ("圖記", "印記")
_NOTE_MARKERS = ("識語", "题跋", "校語")

_DYNASTY_RE = re.compile(
    r"(漢|魏|晉|南北朝|隋|唐|五代|宋|遼|金|元|明|淸|清|民國)"
)

# 撰 authored, 輯 compiled, 注 annotated, 疏 sub-commented, 集 collected
_AUTHOR_ROLE_PATTERNS = [
    re.compile(r"([^　\s]+)撰"),
    re.compile(r"([^　\s]+)輯"),
    re.compile(r"([^　\s]+)注"),
    re.compile(r"([^　\s]+)疏"),
    re.compile(r"([^　\s]+)集"),
]


@dataclass
class BookInfo:
    publication_info: str
    volumes: str | None = None
    authors: list[str] = field(default_factory=list)
    dynasty: str | None = None
    collection_info: str = ""
    book_type: BookType = "unknown"
    is_incomplete: bool = False
    has_seals: bool = False
    has_notes: bool = False


def extract_volume_count(title: str) -> str | None:
    """
    First "<numeral>卷" phrase of the title, verbatim.

    >>> extract_volume_count("尚書正義二十卷")
    '二十卷'
    >>> extract_volume_count("論語集解不分卷")
    '不分卷'
    >>> extract_volume_count("說文解字") is None
    True
    """
    m = _VOLUME_COUNT_RE.search(title)
    return m.group(1) if m else None


def is_incomplete(title: str, description: str) -> bool:
    return any(marker in title for marker in _INCOMPLETE_TITLE_MARKERS) or any(
        marker in description for marker in _INCOMPLETE_NOTE_MARKERS
    )


def classify_edition(description: str) -> BookType:
    for book_type, keywords in _EDITION_KEYWORDS:
        if any(keyword in description for keyword in keywords):
            return book_type
    return "unknown"


def has_seals(description: str) -> bool:
    return any(marker in description for marker in _SEAL_MARKERS)


def has_annotations(description: str) -> bool:
    """Colophons, inscriptions or collation notes are mentioned."""
    return any(marker in description for marker in _NOTE_MARKERS)


def extract_dynasty(description: str) -> str | None:
    m = _DYNASTY_RE.search(description)
    return m.group(1) if m else None


def extract_authors(description: str) -> list[str]:
    """
    Names preceding a role suffix, in order of first appearance per pattern pass.

    >>> extract_authors("漢 孔安國傳　唐 孔穎達疏　宋 朱熹撰")
    ['朱熹', '孔穎達']
    """
    authors: list[str] = []
    for pattern in _AUTHOR_ROLE_PATTERNS:
        for m in pattern.finditer(description):
            author = m.group(1).strip()
            if author and author not in authors:
                authors.append(author)
    return authors


def parse_book_info(title: str, description: str) -> BookInfo:
    """Apply every classification rule to one catalog entry."""
    return BookInfo(
        publication_info=description,
        volumes=extract_volume_count(title),
        authors=extract_authors(description),
        dynasty=extract_dynasty(description),
        book_type=classify_edition(description),
        is_incomplete=is_incomplete(title, description),
        has_seals=has_seals(description),
        has_notes=has_annotations(description),
    )
