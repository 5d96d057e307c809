"""
Records produced by the extraction run and serialized into the snapshot.

Field names are snake_case in Python and camelCase in the snapshot, which is
the shape the manifest generator, index renderer and schema generator read.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from toho_catalog.classify import BookType

VOLUME_BUCKETS = ("0", "1-5", "6-10", "11-20", "21-50", "50+")


class _SnapshotModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BookVolume(_SnapshotModel):
    """One fascicle of a book, read from its volume document."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    url: str
    volume_number: Optional[int] = None
    chapter_number: Optional[int] = None
    start_page: Optional[int] = None
    max_page: Optional[int] = None
    book_number: Optional[str] = None
    sequence: Optional[int] = None


class BookEntry(_SnapshotModel):
    id: str
    category: str
    title: str
    volumes: Optional[str] = None
    authors: list[str] = Field(default_factory=list)
    dynasty: Optional[str] = None
    publication_info: str = ""
    collection_info: str = ""
    url: str
    book_type: BookType = "unknown"
    is_incomplete: bool = False
    has_seals: bool = False
    has_notes: bool = False
    structure: Optional[list[BookVolume]] = None
    total_volumes: Optional[int] = None

    @model_validator(mode="after")
    def _check_structure(self) -> "BookEntry":
        if len(set(self.authors)) != len(self.authors):
            raise ValueError(f"Duplicate author in book {self.id}: {self.authors}")
        if self.structure is not None:
            ids = [volume.id for volume in self.structure]
            if len(set(ids)) != len(ids):
                raise ValueError(f"Duplicate volume id in book {self.id}")
            if self.total_volumes is not None and self.total_volumes != len(ids):
                raise ValueError(
                    f"totalVolumes={self.total_volumes} but {len(ids)} volumes"
                    f" in {self.id}"
                )
        return self


class LibraryMetadata(_SnapshotModel):
    title: str
    total_books: int
    categories: list[str]
    extracted_at: str = Field(
        default_factory=lambda: datetime.now(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )
    total_volumes: int


class LibraryStatistics(_SnapshotModel):
    by_category: dict[str, int]
    by_book_type: dict[str, int]
    by_dynasty: dict[str, int]
    by_volume_count: dict[str, int]


class LibraryDataset(_SnapshotModel):
    metadata: LibraryMetadata
    books: list[BookEntry]
    statistics: LibraryStatistics

    @model_validator(mode="after")
    def _check_totals(self) -> "LibraryDataset":
        n = len(self.books)
        if self.metadata.total_books != n:
            raise ValueError(f"totalBooks={self.metadata.total_books} but {n} books")
        unknown = set(self.statistics.by_category) - set(self.metadata.categories)
        if unknown:
            raise ValueError(f"Categories missing from metadata: {sorted(unknown)}")
        if sum(self.statistics.by_volume_count.values()) != n:
            raise ValueError("Volume-count buckets do not partition the book list")
        ids = [book.id for book in self.books]
        if len(set(ids)) != len(ids):
            raise ValueError("Duplicate book id in dataset")
        return self
