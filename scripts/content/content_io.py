#!/usr/bin/env python3
from __future__ import annotations

import os
from pathlib import Path


def load_file(path: Path, errors: list[str] | None = None) -> str | None:
    """Read a UTF-8 text file, returning None when it is absent or unreadable."""
    if not path.is_file():
        return None
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        if errors is not None:
            errors.append(f"could not read {path}: {exc}")
        return None


def write_text_atomic(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(path.name + ".tmp")
    try:
        tmp.write_text(content, encoding="utf-8")
        os.replace(tmp, path)
    finally:
        if tmp.exists():
            tmp.unlink()
