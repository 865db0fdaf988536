#!/usr/bin/env python3
"""Content fingerprints of a generated directory tree, persisted between runs."""
from __future__ import annotations

import hashlib
import json
from pathlib import Path

from content_io import write_text_atomic

Snapshot = dict[str, str]

CHUNK_SIZE = 64 * 1024


class SnapshotCorruptError(RuntimeError):
    pass


def calculate_file_hash(path: Path, seed: str) -> str:
    """SHA-256 of the file content followed by ``seed``, its path relative to the snapshot root."""
    digest = hashlib.sha256()
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(CHUNK_SIZE), b""):
            digest.update(chunk)
    digest.update(seed.encode("utf-8"))
    return digest.hexdigest()


def relative_seed(path: Path, root: Path) -> str:
    return path.relative_to(root).as_posix()


def take_snapshot(root: Path) -> Snapshot:
    """Fingerprint every file below ``root``.

    Keys are bare file names, so names must be unique across the tree.
    """
    snapshot: Snapshot = {}
    if not root.is_dir():
        return snapshot

    for path in sorted(root.rglob("*")):
        if path.is_file():
            snapshot[path.name] = calculate_file_hash(path, relative_seed(path, root))
    return snapshot


def read_snapshot(path: Path) -> Snapshot:
    if not path.exists():
        return {}

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise SnapshotCorruptError(f"{path} could not be read: {exc}") from exc

    if not isinstance(data, dict) or not all(
        isinstance(key, str) and isinstance(value, str) for key, value in data.items()
    ):
        raise SnapshotCorruptError(f"{path} must contain an object of file names to hashes")

    return data


def write_snapshot(path: Path, snapshot: Snapshot) -> None:
    write_text_atomic(path, json.dumps(snapshot, indent=2, sort_keys=True) + "\n")
