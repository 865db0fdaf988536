#!/usr/bin/env python3
from __future__ import annotations

import html
from typing import Any, Iterable
from urllib.parse import quote

from quiz_info import Quiz, resolve_info
from quiz_locales import DEFAULT_CONFIG, CorpusConfig, locale_file_name, t

BADGE_BASE_URL = "https://img.shields.io/badge/"

DIFFICULTY_COLORS = {
    "warm": "teal",
    "easy": "7aad0c",
    "medium": "d9901a",
    "hard": "de3d37",
    "extreme": "b11b8d"
}
FALLBACK_COLOR = "gray"


def escape_html(value: str) -> str:
    return html.escape(value, quote=True)


def to_badge_url(label: str, text: str, color: str, args: str = "") -> str:
    label_part = quote(label.replace("-", "--"), safe="")
    text_part = quote(text.replace("-", "--"), safe="")
    return f"{BADGE_BASE_URL}{label_part}-{text_part}-{color}{args}"


def to_badge(label: str, text: str, color: str, args: str = "") -> str:
    return f'<img src="{to_badge_url(label, text, color, args)}" alt="{escape_html(text)}"/>'


def to_badge_link(url: str, label: str, text: str, color: str, args: str = "") -> str:
    return f'<a href="{url}" target="_blank">{to_badge(label, text, color, args)}</a> '


def to_plain_text_link(url: str, text: str) -> str:
    return f'<a href="{url}" target="_blank">{escape_html(text)}</a> '


def to_author_info(author: dict[str, Any] | None) -> str:
    author = author or {}
    name = escape_html(str(author.get("name") or ""))
    github = author.get("github")
    if github:
        return f'by {name} <a href="https://github.com/{github}" target="_blank">@{escape_html(str(github))}</a>'
    return f"by {name}"


def difficulty_color(difficulty: str) -> str:
    return DIFFICULTY_COLORS.get(difficulty, FALLBACK_COLOR)


def to_difficulty_badge(difficulty: str, locale: str) -> str:
    return to_badge("", t(locale, f"difficulty.{difficulty}"), difficulty_color(difficulty))


def to_difficulty_badge_inverted(difficulty: str, locale: str, count: int) -> str:
    return to_badge(t(locale, f"difficulty.{difficulty}"), str(count), difficulty_color(difficulty))


def to_difficulty_plain_text(difficulty: str, locale: str, count: int) -> str:
    return f"{t(locale, f'difficulty.{difficulty}')} ({count})"


def to_tag_badge(tag: str) -> str:
    return to_badge("", f"#{tag}", "999")


def to_play_short(no: int, locale: str, config: CorpusConfig = DEFAULT_CONFIG) -> str:
    if locale != config.default_locale:
        return f"{config.short_url}/{no}/play/{locale}"
    return f"{config.short_url}/{no}/play"


def to_answer_short(no: int, locale: str, config: CorpusConfig = DEFAULT_CONFIG) -> str:
    if locale != config.default_locale:
        return f"{config.short_url}/{no}/answer/{locale}"
    return f"{config.short_url}/{no}/answer"


def to_solutions_short(no: int, config: CorpusConfig = DEFAULT_CONFIG) -> str:
    return f"{config.short_url}/{no}/solutions"


def to_quiz_readme(quiz: Quiz, locale: str, absolute: bool = False, config: CorpusConfig = DEFAULT_CONFIG) -> str:
    if locale not in quiz.readme:
        locale = config.default_locale
    prefix = f"{config.repo_url}/blob/main" if absolute else "."
    return f"{prefix}/questions/{quiz.path}/{locale_file_name('README', locale, 'md', config)}"


def to_nearby_readme(locale: str, config: CorpusConfig = DEFAULT_CONFIG) -> str:
    return f"./{locale_file_name('README', locale, 'md', config)}"


def quiz_title(quiz: Quiz, locale: str, config: CorpusConfig = DEFAULT_CONFIG) -> str:
    return resolve_info(quiz, locale, config).title or quiz.slug


def quiz_to_badge(
    quiz: Quiz,
    locale: str,
    absolute: bool = False,
    badge: bool = True,
    config: CorpusConfig = DEFAULT_CONFIG
) -> str:
    url = to_quiz_readme(quiz, locale, absolute, config)
    text = f"{quiz.no}・{quiz_title(quiz, locale, config)}"
    if badge:
        return to_badge_link(url, "", text, difficulty_color(quiz.difficulty))
    return to_plain_text_link(url, text)


def quiz_no_to_badges(
    ids: Iterable[str | int],
    quizzes: list[Quiz],
    locale: str,
    absolute: bool = False,
    config: CorpusConfig = DEFAULT_CONFIG
) -> str:
    by_no = {quiz.no: quiz for quiz in quizzes}
    badges: list[str] = []
    for raw in ids:
        try:
            quiz = by_no.get(int(raw))
        except (TypeError, ValueError):
            continue
        if quiz is not None:
            badges.append(quiz_to_badge(quiz, locale, absolute, config=config))
    return " ".join(badges)
