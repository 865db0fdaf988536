#!/usr/bin/env python3
from __future__ import annotations

from pathlib import Path
from typing import Callable, TypeVar

from content_io import load_file
from quiz_locales import DEFAULT_CONFIG, CorpusConfig

T = TypeVar("T")


def locale_variant_path(path: Path, locale: str) -> Path:
    """info.yml -> info.<locale>.yml, next to the canonical file."""
    return path.with_name(f"{path.stem}.{locale}{path.suffix}")


def _load_variant(
    path: Path,
    preprocessor: Callable[[str], T | None],
    errors: list[str]
) -> T | None:
    text = load_file(path, errors)
    if text is None:
        return None
    try:
        value = preprocessor(text)
    except ValueError as exc:
        errors.append(f"could not parse {path}: {exc}")
        return None
    return value or None


def load_locale_variations(
    path: Path,
    preprocessor: Callable[[str], T | None],
    errors: list[str],
    config: CorpusConfig = DEFAULT_CONFIG
) -> dict[str, T]:
    """Load one value per locale for the canonical file at ``path``.

    Every supported locale is looked up as a suffixed sibling
    (``info.ja.yml``). When no suffixed file produced a value for the
    default locale, the unsuffixed canonical file stands in for it.
    Missing, unreadable or unparsable files contribute no entry; their
    diagnostics are appended to ``errors``.
    """
    data: dict[str, T] = {}

    for locale in config.supported_locales:
        value = _load_variant(locale_variant_path(path, locale), preprocessor, errors)
        if value:
            data[locale] = value

    if config.default_locale not in data:
        value = _load_variant(path, preprocessor, errors)
        if value:
            data[config.default_locale] = value

    return data
