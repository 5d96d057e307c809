"""
Expand a book entry into its volumes.

The book's menu document (`{prefix}menu.html`) links every volume document.
When the menu is missing or links nothing, volume files are probed by their
conventional names `{prefix}{seq:04d}.html` instead.
"""

import logging
import os
import re
from pathlib import Path

from toho_catalog import settings
from toho_catalog.documents import parse_html, read_document, resolve_link
from toho_catalog.schemas import BookVolume
from toho_catalog.volume import parse_volume_file

_BOOK_PREFIX_RE = re.compile(r"([A-Z]\d{3})")
_VOLUME_LINK_RE = re.compile(r"[A-Z]\d{7}\.html")


def book_prefix(url: str) -> str | None:
    """
    Four-character book prefix (letter + 3 digits) embedded in a URL.

    >>> book_prefix("A045top.html")
    'A045'
    >>> book_prefix("Z100/B0010001.html")
    'B001'
    >>> book_prefix("ShiSanJingZhuShu/index.html") is None
    True
    """
    # the file name decides; a matching directory name is only a fallback
    m = _BOOK_PREFIX_RE.search(Path(url).name) or _BOOK_PREFIX_RE.search(url)
    return m.group(1) if m else None


def entry_path(book_url: str, html_root: Path) -> Path:
    return Path(os.path.normpath(html_root / book_url))


def menu_path_for(book_url: str, html_root: Path) -> Path:
    """Menu document expected for a book entry URL (relative to `html_root`)."""
    entry = entry_path(book_url, html_root)
    if settings.MENU_SUFFIX not in book_url and settings.LISTING_SUFFIX not in book_url:
        prefix = book_prefix(book_url)
        if prefix:
            return entry.parent / f"{prefix}{settings.MENU_SUFFIX}"
    return entry


def extract_volume_links(menu_text: str, menu_path: Path) -> list[Path]:
    """Volume documents linked from a menu, in link order, without repeats."""
    soup = parse_html(menu_text)
    links: dict[str, Path] = {}
    for anchor in soup.find_all("a", href=True):
        href = anchor["href"]
        if _VOLUME_LINK_RE.search(href):
            path = resolve_link(menu_path, href)
            links.setdefault(path.name, path)
    return list(links.values())


def scan_volume_files(
    book_url: str,
    html_root: Path,
    limit: int = settings.SCAN_LIMIT,
    miss_window: int = settings.SCAN_MISS_WINDOW,
) -> list[BookVolume]:
    """
    Probe `{prefix}0001.html` upwards in the directory of the entry URL.

    After the first miss at most `miss_window` further probes are issued,
    whether or not they hit.
    """
    prefix = book_prefix(book_url)
    if prefix is None:
        logging.warning(f"No book prefix in {book_url}, cannot scan for volumes")
        return []

    directory = entry_path(book_url, html_root).parent
    volumes: list[BookVolume] = []
    missed = False
    probes_after_miss = 0
    for seq in range(1, limit + 1):
        if missed:
            if probes_after_miss >= miss_window:
                break
            probes_after_miss += 1
        volume = parse_volume_file(directory / f"{prefix}{seq:04d}.html")
        if volume is not None:
            volumes.append(volume)
        else:
            missed = True
    logging.debug(f"Found {len(volumes)} volume files for {prefix} by scanning")
    return volumes


def sort_volumes(volumes: list[BookVolume]) -> list[BookVolume]:
    return sorted(volumes, key=lambda v: v.volume_number or 0)


def _resolve(book_url: str, html_root: Path, limit: int, miss_window: int):
    menu_path = menu_path_for(book_url, html_root)
    if not menu_path.is_file():
        logging.warning(f"Menu document not found: {menu_path}, scanning volume files")
        return scan_volume_files(book_url, html_root, limit, miss_window)

    links = extract_volume_links(read_document(menu_path), menu_path)
    if not links:
        logging.warning(f"No volume links in {menu_path}, scanning volume files")
        return scan_volume_files(book_url, html_root, limit, miss_window)

    volumes = []
    for path in links:
        volume = parse_volume_file(path)
        if volume is None:
            logging.warning(f"Skipping volume {path.name} listed in {menu_path.name}")
            continue
        volumes.append(volume)
    return volumes


def resolve_book_structure(
    book_url: str,
    html_root: Path = settings.HTML_ROOT,
    limit: int = settings.SCAN_LIMIT,
    miss_window: int = settings.SCAN_MISS_WINDOW,
) -> list[BookVolume]:
    """
    Volumes of one book sorted by volume number (ties keep discovery order).

    Never raises: a failure for this book is logged and yields an empty list.
    """
    logging.info(f"Resolving book structure: {book_url}")
    try:
        volumes = _resolve(book_url, html_root, limit, miss_window)
    except Exception:
        logging.warning(f"Failed to resolve structure of {book_url}", exc_info=True)
        return []
    return sort_volumes(volumes)
