"""
Catalog traversal.

Listings are walked in document order: an <h2> sets the category for the rest
of the listing (and for sub-listings linked after it), a link to another
`*top.html` descends into that listing, and any other link under a category is
a book. Discovery and identifier assignment are sequential; resolving each
book's volumes may run on a thread pool since it only reads files.
"""

import logging
import os
import re
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from functools import partial
from itertools import count
from pathlib import Path
from typing import Iterator

from bs4 import Comment, NavigableString, Tag
from tqdm import tqdm

from toho_catalog import settings
from toho_catalog.classify import parse_book_info
from toho_catalog.documents import (
    link_target,
    parse_html,
    read_document,
    resolve_link,
)
from toho_catalog.schemas import BookEntry, BookVolume
from toho_catalog.structure import resolve_book_structure

HEADING_TAGS = ("h2",)

_BOOK_ID_RE = re.compile(r"([A-Z]\d{3})")

# Collections published outside the lettered numbering scheme.
_SPECIAL_ID_PREFIXES = [
    ("ShiSanJingZhuShu", "SJ"),
    ("BaoJuanWuShiZhong", "BJ"),
]


@dataclass
class CatalogLink:
    """A book link found in a listing, before its volumes are resolved."""

    id: str
    category: str
    title: str
    description: str
    url: str
    # entry document relative to the HTML root, used to locate its volumes
    location: str


@dataclass
class TraversalContext:
    html_root: Path
    links: list[CatalogLink] = field(default_factory=list)
    visited: set[Path] = field(default_factory=set)
    book_index: Iterator[int] = field(default_factory=count)
    assigned_ids: set[str] = field(default_factory=set)

    def next_book_id(self, url: str) -> str:
        book_id = generate_book_id(url, next(self.book_index))
        if book_id in self.assigned_ids:
            base = book_id
            n = 2
            while f"{base}_{n}" in self.assigned_ids:
                n += 1
            book_id = f"{base}_{n}"
            logging.warning(
                f"Book id {base} already assigned, using {book_id} for {url}"
            )
        self.assigned_ids.add(book_id)
        return book_id


def generate_book_id(url: str, index: int) -> str:
    """
    >>> generate_book_id("A045menu.html", 7)
    'A045'
    >>> generate_book_id("ShiSanJingZhuShu/index.html", 7)
    'SJ007'
    >>> generate_book_id("misc/index.html", 12)
    'UNKNOWN012'
    """
    m = _BOOK_ID_RE.search(url)
    if m:
        return m.group(1)
    for marker, prefix in _SPECIAL_ID_PREFIXES:
        if marker in url:
            return f"{prefix}{index:03d}"
    return f"UNKNOWN{index:03d}"


def _trailing_description(anchor: Tag) -> str:
    """Text after a book link, opened by an ideographic space, up to the line end."""
    sibling = anchor.next_sibling
    if not isinstance(sibling, NavigableString) or isinstance(sibling, Comment):
        return ""
    text = str(sibling).lstrip(" \t\r\n")
    if not text.startswith("　"):
        return ""
    return text.split("\n", 1)[0].strip()


def walk_listing(
    path: Path, ctx: TraversalContext, category: str = "", is_root: bool = False
) -> None:
    """Collect book links from one listing document and the listings it links."""
    path = path.resolve()
    if path in ctx.visited:
        logging.warning(f"Listing already visited, not descending again: {path}")
        return
    ctx.visited.add(path)

    logging.info(f"Reading listing: {path}")
    try:
        text = read_document(path)
    except OSError as e:
        if is_root:
            raise RuntimeError(f"Cannot read root catalog listing {path}: {e}") from e
        logging.warning(f"Skipping unreadable listing {path}: {e}")
        return

    soup = parse_html(text)
    for element in soup.find_all([*HEADING_TAGS, "a"]):
        if element.name in HEADING_TAGS:
            heading = element.get_text(strip=True)
            if heading:
                category = heading
                logging.info(f"Category: {category}")
            continue

        href = element.get("href")
        title = element.get_text(strip=True)
        if not href or not title:
            continue
        if not category:
            logging.debug(f"Ignoring link before any category heading: {href}")
            continue

        if link_target(href).endswith(settings.LISTING_SUFFIX):
            walk_listing(resolve_link(path, href), ctx, category)
            continue

        ctx.links.append(
            CatalogLink(
                id=ctx.next_book_id(href),
                category=category,
                title=title,
                description=_trailing_description(element),
                url=href,
                location=os.path.relpath(
                    resolve_link(path, href), ctx.html_root.resolve()
                ),
            )
        )


def build_book(link: CatalogLink, structure: list[BookVolume]) -> BookEntry:
    info = parse_book_info(link.title, link.description)
    return BookEntry(
        id=link.id,
        category=link.category,
        title=link.title,
        url=link.url,
        volumes=info.volumes,
        authors=info.authors,
        dynasty=info.dynasty,
        publication_info=info.publication_info,
        collection_info=info.collection_info,
        book_type=info.book_type,
        is_incomplete=info.is_incomplete,
        has_seals=info.has_seals,
        has_notes=info.has_notes,
        structure=structure,
        total_volumes=len(structure),
    )


def walk_catalog(
    html_root: Path = settings.HTML_ROOT,
    root_listing: str = settings.ROOT_LISTING,
    workers: int = 1,
    scan_limit: int = settings.SCAN_LIMIT,
    miss_window: int = settings.SCAN_MISS_WINDOW,
) -> list[BookEntry]:
    """
    Walk the catalog from its root listing and build every book entry.

    Books are returned in discovery order regardless of `workers`.
    Raises RuntimeError if the root listing cannot be read.
    """
    ctx = TraversalContext(html_root=html_root)
    walk_listing(html_root / root_listing, ctx, is_root=True)
    logging.info(f"Discovered {len(ctx.links)} books in {len(ctx.visited)} listings")

    resolve = partial(
        resolve_book_structure,
        html_root=html_root,
        limit=scan_limit,
        miss_window=miss_window,
    )
    urls = [link.location for link in ctx.links]
    if workers > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            structures = list(
                tqdm(executor.map(resolve, urls), total=len(urls), desc="Books")
            )
    else:
        structures = [resolve(url) for url in tqdm(urls, desc="Books")]

    return [build_book(link, s) for link, s in zip(ctx.links, structures)]
