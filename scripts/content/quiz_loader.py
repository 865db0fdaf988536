#!/usr/bin/env python3
from __future__ import annotations

import re
from pathlib import Path

from content_io import load_file
from locale_variations import load_locale_variations
from quiz_info import DIFFICULTIES, Quiz, load_info
from quiz_locales import DEFAULT_CONFIG, ROOT_DIR, CorpusConfig
from readme_regions import strip_regions

QUIZ_ROOT = ROOT_DIR / "questions"
QUIZ_DIR_GLOB = "[0-9]*-*"
QUIZ_DIR_PATTERN = re.compile(r"^(\d+)-([a-z]+)-(.+)$")

INFO_FILE = "info.yml"
README_FILE = "README.md"
TEMPLATE_FILE = "template.ts"
TESTS_FILE = "test-cases.ts"


def parse_quiz_dir_name(name: str, errors: list[str]) -> tuple[int, str] | None:
    match = QUIZ_DIR_PATTERN.match(name)
    if not match:
        errors.append(f"{name} does not match <number>-<difficulty>-<slug>")
        return None
    difficulty = match.group(2)
    if difficulty not in DIFFICULTIES:
        allowed = ", ".join(DIFFICULTIES)
        errors.append(f"{name} has unknown difficulty {difficulty}; use one of: {allowed}")
        return None
    return int(match.group(1)), difficulty


def list_quiz_dirs(quiz_root: Path = QUIZ_ROOT) -> list[str]:
    if not quiz_root.is_dir():
        return []
    return sorted(path.name for path in quiz_root.glob(QUIZ_DIR_GLOB) if path.is_dir())


def load_quiz(
    dir_name: str,
    errors: list[str],
    quiz_root: Path = QUIZ_ROOT,
    config: CorpusConfig = DEFAULT_CONFIG
) -> Quiz | None:
    parsed = parse_quiz_dir_name(dir_name, errors)
    if parsed is None:
        return None
    no, difficulty = parsed

    quiz_dir = quiz_root / dir_name
    return Quiz(
        no=no,
        difficulty=difficulty,
        path=dir_name,
        info=load_locale_variations(quiz_dir / INFO_FILE, load_info, errors, config),
        readme=load_locale_variations(quiz_dir / README_FILE, strip_regions, errors, config),
        template=load_file(quiz_dir / TEMPLATE_FILE, errors) or "",
        tests=load_file(quiz_dir / TESTS_FILE, errors)
    )


def load_quizzes(
    quiz_root: Path = QUIZ_ROOT,
    config: CorpusConfig = DEFAULT_CONFIG
) -> tuple[list[Quiz], list[str]]:
    """Load every quiz folder under ``quiz_root``, sorted by number.

    A folder that cannot be loaded is reported in the returned errors and
    left out; the remaining quizzes are still returned.
    """
    quizzes: list[Quiz] = []
    errors: list[str] = []
    seen: dict[int, str] = {}

    for dir_name in list_quiz_dirs(quiz_root):
        quiz = load_quiz(dir_name, errors, quiz_root, config)
        if quiz is None:
            continue
        existing = seen.get(quiz.no)
        if existing:
            errors.append(f"duplicate quiz number {quiz.no} in {existing} and {dir_name}")
            continue
        seen[quiz.no] = dir_name
        quizzes.append(quiz)

    quizzes.sort(key=lambda quiz: quiz.no)
    return quizzes, errors


def load_quiz_by_no(
    no: int,
    quiz_root: Path = QUIZ_ROOT,
    config: CorpusConfig = DEFAULT_CONFIG
) -> tuple[Quiz | None, list[str]]:
    errors: list[str] = []
    for dir_name in list_quiz_dirs(quiz_root):
        match = QUIZ_DIR_PATTERN.match(dir_name)
        if match and int(match.group(1)) == no:
            return load_quiz(dir_name, errors, quiz_root, config), errors
    errors.append(f"quiz #{no} not found in {quiz_root}")
    return None, errors
