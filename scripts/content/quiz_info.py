#!/usr/bin/env python3
from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any

import yaml

from quiz_locales import DEFAULT_CONFIG, CorpusConfig

DIFFICULTY_RANK = ("warm", "easy", "medium", "hard", "extreme")
DIFFICULTIES = DIFFICULTY_RANK + ("pending",)
LIST_KEYS = ("tags", "related")


@dataclass(frozen=True)
class PartialQuizInfo:
    """Metadata of one locale variant; every field may be missing."""

    title: str | None = None
    author: dict[str, Any] | None = None
    difficulty: str | None = None
    tags: list[str] | str | None = None
    related: list[str] | None = None
    tsconfig: dict[str, Any] | None = None
    original_issues: list[int] | None = None
    recommended_solutions: list[int] | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> PartialQuizInfo:
        known = {item.name for item in fields(cls)} - {"extra"}
        values = {key: value for key, value in data.items() if key in known}
        extra = {str(key): value for key, value in data.items() if key not in known}
        return cls(**values, extra=extra)

    def present_fields(self) -> dict[str, Any]:
        return {
            item.name: getattr(self, item.name)
            for item in fields(self)
            if item.name != "extra" and getattr(self, item.name) is not None
        }


@dataclass(frozen=True)
class ResolvedQuizInfo:
    title: str | None = None
    author: dict[str, Any] | None = None
    difficulty: str | None = None
    tags: list[str] = field(default_factory=list)
    related: list[str] = field(default_factory=list)
    tsconfig: dict[str, Any] | None = None
    original_issues: list[int] | None = None
    recommended_solutions: list[int] | None = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Quiz:
    no: int
    difficulty: str
    path: str
    info: dict[str, PartialQuizInfo]
    readme: dict[str, str]
    template: str
    tests: str | None = None

    @property
    def slug(self) -> str:
        parts = self.path.split("-", 2)
        return parts[2] if len(parts) == 3 else ""


def split_list(value: object) -> list[str]:
    if isinstance(value, (list, tuple)):
        items = [str(item) for item in value if item is not None]
    else:
        items = str(value).split(",")
    return [item.strip() for item in items if item.strip()]


def _normalize_text_field(data: dict[str, Any], key: str) -> None:
    value = data.get(key)
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise ValueError(f"{key} must be a string")
    data[key] = str(value)


def _normalize_author(data: dict[str, Any]) -> None:
    author = data.get("author")
    if author is None or isinstance(author, dict):
        return
    if isinstance(author, str) and author.strip():
        data["author"] = {"name": author.strip()}
        return
    raise ValueError("author must be a mapping or a name")


def load_info(text: str) -> PartialQuizInfo | None:
    """Parse an info.yml document; raises ValueError when it is malformed.

    Scalar titles such as ``title: 2048`` become strings and a bare
    ``author: Jane`` becomes ``{"name": "Jane"}``.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ValueError(f"invalid YAML: {exc}") from exc

    if not data:
        return None
    if not isinstance(data, dict):
        raise ValueError("metadata must be a mapping")

    _normalize_text_field(data, "title")
    _normalize_text_field(data, "difficulty")
    _normalize_author(data)

    for key in LIST_KEYS:
        raw = data.get(key)
        items = split_list(raw) if raw not in (None, "", []) else []
        data[key] = items or None

    return PartialQuizInfo.from_mapping(data)


def _pick_list(key: str, *sources: PartialQuizInfo | None) -> object:
    for source in sources:
        if source is not None and getattr(source, key) is not None:
            return getattr(source, key)
    return []


def resolve_info(
    quiz: Quiz,
    locale: str | None = None,
    config: CorpusConfig = DEFAULT_CONFIG
) -> ResolvedQuizInfo:
    """Merge the default-locale metadata of ``quiz`` with its ``locale`` variant.

    Present fields of the target locale win over the default locale one
    level deep: nested mappings such as ``author`` are replaced, not merged.
    ``tags`` and ``related`` come whole from the first locale that defines
    them (target, then default) and are never concatenated.
    """
    locale = locale or config.default_locale
    default_info = quiz.info.get(config.default_locale)
    locale_info = quiz.info.get(locale)

    merged: dict[str, Any] = {}
    extra: dict[str, Any] = {}
    for source in (default_info, locale_info):
        if source is None:
            continue
        merged.update(source.present_fields())
        extra.update(source.extra)

    tags = _pick_list("tags", locale_info, default_info)
    related = _pick_list("related", locale_info, default_info)
    merged["tags"] = split_list(tags) if isinstance(tags, str) else list(tags)
    merged["related"] = [str(item) for item in related] if isinstance(related, (list, tuple)) else split_list(related)

    return ResolvedQuizInfo(**merged, extra=extra)
