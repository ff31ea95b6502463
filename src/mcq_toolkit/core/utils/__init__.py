"""Serialization helpers for question snapshots."""

from .serialization import (
    SnapshotError,
    deserialize_items,
    load_snapshot,
    save_snapshot,
    serialize_items,
    snapshot_paths,
)

__all__ = [
    "SnapshotError",
    "deserialize_items",
    "load_snapshot",
    "save_snapshot",
    "serialize_items",
    "snapshot_paths",
]
