"""Snapshot file written once per run and read by the downstream generators."""

import logging
from pathlib import Path

import orjson

from toho_catalog.schemas import LibraryDataset


def dataset_to_json(dataset: LibraryDataset) -> bytes:
    return orjson.dumps(
        dataset.model_dump(mode="json", by_alias=True, exclude_none=True),
        option=orjson.OPT_INDENT_2 | orjson.OPT_APPEND_NEWLINE,
    )


def write_snapshot(dataset: LibraryDataset, path: Path) -> None:
    """Write the snapshot, replacing any previous one."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(path.name + ".tmp")
    try:
        tmp_path.write_bytes(dataset_to_json(dataset))
        tmp_path.replace(path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
    logging.info(f"Wrote snapshot with {dataset.metadata.total_books} books to {path}")


def read_snapshot(path: Path) -> LibraryDataset:
    with open(path, "rb") as f:
        return LibraryDataset.model_validate(orjson.loads(f.read()))
