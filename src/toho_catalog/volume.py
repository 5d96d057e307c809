"""
Volume documents embed their description as script variables, e.g.

    var bookNum = "A045";
    var volNum = 3;
    var volName = "尚書正義卷第三";
    var volStartPos = 121;
    var volMaxPage = 58;

`volNum` and `volName` are mandatory; a document without them is skipped.
"""

import logging
import re
from pathlib import Path

from toho_catalog.documents import read_document
from toho_catalog.numerals import NUMERAL_CHARS, parse_chinese_number
from toho_catalog.schemas import BookVolume

_VOL_NUM_RE = re.compile(r"var\s+volNum\s*=\s*(\d+)")
_VOL_NAME_RE = re.compile(r"""var\s+volName\s*=\s*["'](.*?)["']""")
_VOL_START_POS_RE = re.compile(r"var\s+volStartPos\s*=\s*(\d+)")
_VOL_MAX_PAGE_RE = re.compile(r"var\s+volMaxPage\s*=\s*(\d+)")
_BOOK_NUM_RE = re.compile(r"""var\s+bookNum\s*=\s*["']([^"']+)["']""")

_VOLUME_PHRASE_RE = re.compile(rf"卷第([{NUMERAL_CHARS}]+)")
_CHAPTER_PHRASE_RE = re.compile(rf"第([{NUMERAL_CHARS}]+)册")
_FILE_SEQUENCE_RE = re.compile(r"(\d{4})\.html$")


def _optional_int(pattern: re.Pattern, text: str) -> int | None:
    m = pattern.search(text)
    return int(m.group(1)) if m else None


def parse_volume_text(text: str, filename: str) -> BookVolume | None:
    """
    Build a volume record from the text of a volume document.

    Returns None when `volNum` or `volName` is not declared.
    """
    vol_num = _optional_int(_VOL_NUM_RE, text)
    name_match = _VOL_NAME_RE.search(text)
    if vol_num is None or name_match is None:
        return None
    vol_name = name_match.group(1)
    book_num = _BOOK_NUM_RE.search(text)

    # 卷第N in the name is more reliable than the declared counter
    volume_number = vol_num
    chapter_number = None
    if m := _VOLUME_PHRASE_RE.search(vol_name):
        volume_number = parse_chinese_number(m.group(1), default=1)
    if m := _CHAPTER_PHRASE_RE.search(vol_name):
        chapter_number = parse_chinese_number(m.group(1), default=1)

    seq_match = _FILE_SEQUENCE_RE.search(filename)
    sequence = int(seq_match.group(1)) if seq_match else vol_num

    return BookVolume(
        id=filename.removesuffix(".html"),
        title=vol_name,
        url=filename,
        volume_number=volume_number,
        chapter_number=chapter_number,
        start_page=_optional_int(_VOL_START_POS_RE, text),
        max_page=_optional_int(_VOL_MAX_PAGE_RE, text),
        book_number=book_num.group(1) if book_num else "",
        sequence=sequence,
    )


def parse_volume_file(path: Path) -> BookVolume | None:
    """Parse one volume document; None if it is missing, unreadable or malformed."""
    if not path.is_file():
        logging.debug(f"Volume document not found: {path}")
        return None
    try:
        text = read_document(path)
    except OSError as e:
        logging.warning(f"Could not read volume document {path}: {e}")
        return None

    volume = parse_volume_text(text, path.name)
    if volume is None:
        logging.warning(f"Missing volNum/volName declaration in {path}, skipping")
    return volume
