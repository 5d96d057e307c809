"""Fold the finished book list into the snapshot's statistics and metadata."""

from collections import Counter

from toho_catalog import settings
from toho_catalog.classify import BOOK_TYPES
from toho_catalog.schemas import (
    VOLUME_BUCKETS,
    BookEntry,
    LibraryDataset,
    LibraryMetadata,
    LibraryStatistics,
)


def volume_bucket(volume_count: int) -> str:
    """
    >>> [volume_bucket(n) for n in (0, 1, 5, 6, 20, 21, 50, 51)]
    ['0', '1-5', '1-5', '6-10', '11-20', '21-50', '21-50', '50+']
    """
    if volume_count == 0:
        return "0"
    if volume_count <= 5:
        return "1-5"
    if volume_count <= 10:
        return "6-10"
    if volume_count <= 20:
        return "11-20"
    if volume_count <= 50:
        return "21-50"
    return "50+"


def distinct_categories(books: list[BookEntry]) -> list[str]:
    return list(dict.fromkeys(book.category for book in books))


def build_statistics(books: list[BookEntry]) -> LibraryStatistics:
    by_category = Counter(book.category for book in books)
    by_book_type = Counter(book.book_type for book in books)
    by_volume_count = Counter(volume_bucket(book.total_volumes or 0) for book in books)
    return LibraryStatistics(
        by_category={c: by_category[c] for c in distinct_categories(books)},
        by_book_type={t: by_book_type[t] for t in BOOK_TYPES},
        by_dynasty=dict(Counter(book.dynasty for book in books if book.dynasty)),
        by_volume_count={
            b: by_volume_count[b] for b in VOLUME_BUCKETS if b in by_volume_count
        },
    )


def build_dataset(
    books: list[BookEntry], title: str = settings.LIBRARY_TITLE
) -> LibraryDataset:
    return LibraryDataset(
        metadata=LibraryMetadata(
            title=title,
            total_books=len(books),
            categories=distinct_categories(books),
            total_volumes=sum(book.total_volumes or 0 for book in books),
        ),
        books=books,
        statistics=build_statistics(books),
    )
