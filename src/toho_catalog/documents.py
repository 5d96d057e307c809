"""Reading catalog documents from the local mirror."""

import os
from pathlib import Path

from bs4 import BeautifulSoup


def read_document(path: Path) -> str:
    """Read a catalog document; undecodable bytes become U+FFFD. Raises OSError."""
    return path.read_text(encoding="utf-8", errors="replace")


def parse_html(text: str) -> BeautifulSoup:
    return BeautifulSoup(text, "html.parser")


def link_target(href: str) -> str:
    """
    Link without its fragment or query.

    >>> link_target("sub/top.html#kei")
    'sub/top.html'
    >>> link_target("A045menu.html?v=2")
    'A045menu.html'
    """
    return href.split("#", 1)[0].split("?", 1)[0]


def resolve_link(base: Path, href: str) -> Path:
    """
    Resolve a relative link against the directory of the document containing it.

    >>> resolve_link(Path("/m/html/top.html"), "sub/top.html").as_posix()
    '/m/html/sub/top.html'
    >>> resolve_link(Path("/m/html/sub/top.html"), "../A0450001.html").as_posix()
    '/m/html/A0450001.html'
    """
    return Path(os.path.normpath(base.parent / link_target(href)))
