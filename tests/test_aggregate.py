import pytest
from pydantic import ValidationError

from toho_catalog.aggregate import build_dataset, build_statistics, volume_bucket
from toho_catalog.schemas import BookEntry, BookVolume, LibraryDataset


def make_book(book_id, category, n_volumes, book_type="unknown", dynasty=None):
    structure = [
        BookVolume(
            id=f"{book_id}{i:04d}", title=f"卷{i}", url=f"{book_id}{i:04d}.html"
        )
        for i in range(1, n_volumes + 1)
    ]
    return BookEntry(
        id=book_id,
        category=category,
        title=book_id,
        url=f"{book_id}menu.html",
        book_type=book_type,
        dynasty=dynasty,
        structure=structure,
        total_volumes=n_volumes,
    )


@pytest.fixture
def books():
    return [
        make_book("A001", "經部", 0, "printed", "宋"),
        make_book("A002", "史部", 3, "manuscript", "明"),
        make_book("A003", "經部", 12, "printed", "宋"),
        make_book("A004", "子部", 51),
        make_book("A005", "史部", 6, "rubbing"),
    ]


@pytest.mark.parametrize(
    "count,bucket",
    [(0, "0"), (1, "1-5"), (5, "1-5"), (6, "6-10"), (10, "6-10"), (11, "11-20"),
     (20, "11-20"), (21, "21-50"), (50, "21-50"), (51, "50+"), (400, "50+")],
)
def test_volume_bucket(count, bucket):
    assert volume_bucket(count) == bucket


def test_statistics(books):
    stats = build_statistics(books)
    assert list(stats.by_category.items()) == [
        ("經部", 2),
        ("史部", 2),
        ("子部", 1),
    ]
    assert stats.by_book_type == {
        "manuscript": 1,
        "printed": 2,
        "rubbing": 1,
        "unknown": 1,
    }
    assert stats.by_dynasty == {"宋": 2, "明": 1}
    assert stats.by_volume_count == {"0": 1, "1-5": 1, "6-10": 1, "11-20": 1, "50+": 1}


def test_dataset_invariants(books):
    dataset = build_dataset(books, title="テスト")
    assert dataset.metadata.title == "テスト"
    assert dataset.metadata.total_books == len(books)
    assert dataset.metadata.categories == ["經部", "史部", "子部"]
    assert dataset.metadata.total_volumes == 72
    assert sum(dataset.statistics.by_volume_count.values()) == len(books)
    assert sum(dataset.statistics.by_category.values()) == len(books)
    assert dataset.metadata.extracted_at.endswith("Z")


def test_empty_dataset():
    dataset = build_dataset([])
    assert dataset.metadata.total_books == 0
    assert dataset.metadata.categories == []
    assert dataset.statistics.by_book_type == {
        "manuscript": 0,
        "printed": 0,
        "rubbing": 0,
        "unknown": 0,
    }
    assert dataset.statistics.by_volume_count == {}


def test_dataset_rejects_wrong_totals(books):
    dataset = build_dataset(books)
    data = dataset.model_dump()
    data["metadata"]["total_books"] = 99
    with pytest.raises(ValidationError):
        LibraryDataset.model_validate(data)


def test_book_rejects_mismatched_total():
    with pytest.raises(ValidationError):
        BookEntry(
            id="A001",
            category="經部",
            title="x",
            url="A001menu.html",
            structure=[BookVolume(id="A0010001", title="卷一", url="A0010001.html")],
            total_volumes=2,
        )


def test_volume_is_immutable():
    volume = BookVolume(id="A0010001", title="卷一", url="A0010001.html")
    with pytest.raises(ValidationError):
        volume.title = "卷二"
