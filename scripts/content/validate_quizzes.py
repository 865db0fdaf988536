#!/usr/bin/env python3
from __future__ import annotations

import argparse
import sys
from pathlib import Path

from quiz_info import Quiz, resolve_info
from quiz_loader import QUIZ_ROOT, load_quizzes
from quiz_locales import CONFIG_PATH, DEFAULT_CONFIG, CorpusConfig, load_corpus_config


def validate_quiz(
    quiz: Quiz,
    known_numbers: set[int],
    errors: list[str],
    config: CorpusConfig = DEFAULT_CONFIG
) -> None:
    label = quiz.path
    default_locale = config.default_locale

    if default_locale not in quiz.info:
        errors.append(f"{label} is missing {default_locale} metadata (info.yml)")
    if default_locale not in quiz.readme:
        errors.append(f"{label} is missing a {default_locale} README")
    if not quiz.template.strip():
        errors.append(f"{label} is missing template.ts")

    info = resolve_info(quiz, default_locale, config)
    if not isinstance(info.title, str) or not info.title.strip():
        errors.append(f"{label}.info.title must be a non-empty string")
    if info.difficulty is not None and info.difficulty != quiz.difficulty:
        errors.append(
            f"{label}.info.difficulty {info.difficulty} does not match folder difficulty {quiz.difficulty}"
        )

    for locale, variant in quiz.info.items():
        if variant.title is not None and (not isinstance(variant.title, str) or not variant.title.strip()):
            errors.append(f"{label}.info.{locale}.title must be a non-empty string")

    for related in info.related:
        if not related.isdigit():
            errors.append(f"{label}.info.related entry {related} must be a quiz number")
        elif int(related) not in known_numbers:
            errors.append(f"{label}.info.related references missing quiz {related}")


def validate_quizzes(
    quiz_root: Path = QUIZ_ROOT,
    config: CorpusConfig = DEFAULT_CONFIG
) -> tuple[int, list[str]]:
    quizzes, errors = load_quizzes(quiz_root, config)
    known_numbers = {quiz.no for quiz in quizzes}
    for quiz in quizzes:
        validate_quiz(quiz, known_numbers, errors, config)
    return len(quizzes), errors


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Validate quiz folders, metadata and README variants.")
    parser.add_argument("--quiz-root", type=Path, default=QUIZ_ROOT, help="Directory holding the quiz folders")
    parser.add_argument("--config", type=Path, default=CONFIG_PATH, help="Path to corpus.json")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)

    config, config_error = load_corpus_config(args.config)
    if config_error:
        print(f"ERROR: {config_error}", file=sys.stderr)
        return 2

    if not args.quiz_root.exists():
        print(f"ERROR: quiz root not found: {args.quiz_root}", file=sys.stderr)
        return 2

    count, errors = validate_quizzes(args.quiz_root, config)
    if errors:
        for message in errors:
            print(f"ERROR: {message}", file=sys.stderr)
        return 1

    print(f"Quiz validation passed ({count} quizzes checked).")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
