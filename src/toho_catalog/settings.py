"""Fixed locations and limits of the catalog extraction run."""

from pathlib import Path

# Root of the mirrored catalog tree; every relative link resolves against it.
HTML_ROOT = Path("html/html")
ROOT_LISTING = "top.html"

# Nested listings share the root listing's file name suffix.
LISTING_SUFFIX = "top.html"
MENU_SUFFIX = "menu.html"

SNAPSHOT_PATH = Path("toho-data.json")
LIBRARY_TITLE = "東方學デジタル圖書館"

# Sequential scan used when a book has no usable menu document.
SCAN_LIMIT = 100
SCAN_MISS_WINDOW = 10
