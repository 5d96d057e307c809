"""
Human-readable summaries of a snapshot: the end-of-run report and a flat
per-book table for spreadsheet review.
"""

from pathlib import Path
from typing import Any

import polars as pl

from toho_catalog.numerals import declared_volume_count
from toho_catalog.schemas import LibraryDataset

BOOK_TABLE_COLUMNS = [
    "id",
    "category",
    "title",
    "volumes",
    "declaredVolumes",
    "totalVolumes",
    "authors",
    "dynasty",
    "bookType",
    "isIncomplete",
    "hasSeals",
    "hasNotes",
    "url",
]


def detailed_report(dataset: LibraryDataset) -> dict[str, Any]:
    books = dataset.books
    total_volumes = dataset.metadata.total_volumes
    counts = [book.total_volumes or 0 for book in books]
    return {
        "totalBooks": len(books),
        "totalVolumes": total_volumes,
        "categories": len(dataset.metadata.categories),
        "completeBooks": sum(not book.is_incomplete for book in books),
        "incompleteBooks": sum(book.is_incomplete for book in books),
        "withSeals": sum(book.has_seals for book in books),
        "withNotes": sum(book.has_notes for book in books),
        "printed": dataset.statistics.by_book_type.get("printed", 0),
        "manuscript": dataset.statistics.by_book_type.get("manuscript", 0),
        "rubbing": dataset.statistics.by_book_type.get("rubbing", 0),
        "withStructure": sum(bool(book.structure) for book in books),
        "maxVolumes": max(counts, default=0),
        "meanVolumes": round(total_volumes / len(books), 2) if books else 0.0,
        "declaredVolumes": sum(declared_volume_count(book.volumes) for book in books),
    }


def structure_samples(
    dataset: LibraryDataset, n_books: int = 3, n_volumes: int = 5
) -> list[str]:
    """A few books with resolved volumes, formatted as an indented outline."""
    lines: list[str] = []
    samples = [book for book in dataset.books if book.structure][:n_books]
    for book in samples:
        structure = book.structure or []
        lines.append(f"{book.title} ({book.total_volumes}卷册):")
        lines.extend(f"  - {v.title} ({v.url})" for v in structure[:n_volumes])
        if len(structure) > n_volumes:
            lines.append(f"  ... {len(structure) - n_volumes} more volumes")
    return lines


def books_table(dataset: LibraryDataset) -> pl.DataFrame:
    records = [
        {
            "id": book.id,
            "category": book.category,
            "title": book.title,
            "volumes": book.volumes,
            "declaredVolumes": declared_volume_count(book.volumes),
            "totalVolumes": book.total_volumes or 0,
            "authors": "、".join(book.authors),
            "dynasty": book.dynasty,
            "bookType": book.book_type,
            "isIncomplete": book.is_incomplete,
            "hasSeals": book.has_seals,
            "hasNotes": book.has_notes,
            "url": book.url,
        }
        for book in dataset.books
    ]
    return pl.DataFrame(records, schema=BOOK_TABLE_COLUMNS)


def export_books_table(dataset: LibraryDataset, file_name: Path) -> None:
    books_table(dataset).write_csv(file_name)
