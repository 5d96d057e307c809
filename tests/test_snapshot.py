from pathlib import Path

import orjson
import pytest

from toho_catalog.aggregate import build_dataset
from toho_catalog.snapshot import read_snapshot, write_snapshot
from toho_catalog.walker import walk_catalog


def test_snapshot_shape(html_root, tmp_path):
    dataset = build_dataset(walk_catalog(html_root))
    path = tmp_path / "toho-data.json"
    path.write_text("stale", encoding="utf-8")
    write_snapshot(dataset, path)

    raw = path.read_text(encoding="utf-8")
    assert "尚書正義" in raw  # not ASCII-escaped
    data = orjson.loads(raw)
    assert set(data) == {"metadata", "books", "statistics"}
    assert data["metadata"]["totalBooks"] == 3
    assert data["metadata"]["totalVolumes"] == 4
    assert set(data["statistics"]) == {
        "byCategory",
        "byBookType",
        "byDynasty",
        "byVolumeCount",
    }

    book = data["books"][0]
    assert book["bookType"] == "printed"
    assert book["isIncomplete"] is False
    assert book["publicationInfo"] == "宋刊本 孔穎達疏 有圖記"
    assert book["collectionInfo"] == ""
    assert book["totalVolumes"] == 2
    volume = book["structure"][0]
    assert volume["volumeNumber"] == 1
    assert volume["maxPage"] == 40
    assert volume["bookNumber"] == "A045"
    assert "chapterNumber" not in volume
    assert "startPage" not in volume
    assert "dynasty" not in data["books"][2]


def test_round_trip(html_root, tmp_path):
    dataset = build_dataset(walk_catalog(html_root))
    path = tmp_path / "out" / "toho-data.json"
    write_snapshot(dataset, path)
    assert read_snapshot(path) == dataset


def test_failed_write_leaves_no_temp_file(html_root, tmp_path, monkeypatch):
    dataset = build_dataset(walk_catalog(html_root))
    path = tmp_path / "toho-data.json"
    path.write_text("previous", encoding="utf-8")

    def fail(self, data):
        self.open("wb").close()
        raise OSError("disk full")

    monkeypatch.setattr(Path, "write_bytes", fail)
    with pytest.raises(OSError, match="disk full"):
        write_snapshot(dataset, path)
    assert not (tmp_path / "toho-data.json.tmp").exists()
    assert path.read_text(encoding="utf-8") == "previous"
