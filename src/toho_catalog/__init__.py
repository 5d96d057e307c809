from pathlib import Path

from toho_catalog import settings
from toho_catalog.aggregate import build_dataset
from toho_catalog.schemas import LibraryDataset
from toho_catalog.snapshot import read_snapshot, write_snapshot  # noqa: F401
from toho_catalog.walker import walk_catalog


def run(
    html_root: Path = settings.HTML_ROOT,
    out: Path = settings.SNAPSHOT_PATH,
    root_listing: str = settings.ROOT_LISTING,
    workers: int = 1,
) -> LibraryDataset:
    """Extract the catalog once and write the snapshot, replacing any previous one."""
    books = walk_catalog(html_root, root_listing, workers=workers)
    dataset = build_dataset(books)
    write_snapshot(dataset, out)
    return dataset
