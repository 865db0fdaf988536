#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import os
import re
import sys
from http.client import HTTPException
from pathlib import Path
from typing import Callable
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode
from urllib.request import Request, urlopen

from batch_report import FAILED, SKIPPED, UPDATED, BatchReport, ItemResult
from content_io import write_text_atomic
from quiz_info import Quiz
from quiz_loader import QUIZ_ROOT, load_quiz_by_no, load_quizzes
from quiz_locales import (
    CONFIG_PATH,
    DEFAULT_CONFIG,
    CorpusConfig,
    load_corpus_config,
    locale_file_name,
    normalize_locale_tag,
    t,
)

TRANSLATE_URL = os.getenv("QUIZ_TRANSLATE_URL", "https://translate.googleapis.com/translate_a/single")
REQUEST_TIMEOUT = 60

CODE_BLOCK_RE = re.compile(r"```.+?```", re.DOTALL)
PLACEHOLDER_RE = re.compile(r"__\s*(\d+)\s*__")

Translator = Callable[[str, str, str], "str | None"]


def replace_code_blocks(text: str) -> tuple[str, list[str]]:
    blocks: list[str] = []

    def sub(match: re.Match) -> str:
        blocks.append(match.group(0))
        return f"__{len(blocks) - 1}__"

    return CODE_BLOCK_RE.sub(sub, text), blocks


def restore_code_blocks(text: str, blocks: list[str]) -> str:
    def sub(match: re.Match) -> str:
        index = int(match.group(1))
        return blocks[index] if index < len(blocks) else match.group(0)

    return PLACEHOLDER_RE.sub(sub, text)


def fetch_json(request: Request) -> object:
    try:
        with urlopen(request, timeout=REQUEST_TIMEOUT) as response:
            return json.loads(response.read().decode("utf-8"))
    except HTTPError as exc:
        payload = exc.read().decode("utf-8", errors="replace") if exc.fp else ""
        raise RuntimeError(f"translation request failed: {payload or exc.reason}") from exc
    except URLError as exc:
        raise RuntimeError(f"translation request failed: {exc.reason}") from exc
    except (OSError, HTTPException) as exc:
        raise RuntimeError(f"translation request failed: {exc!r}") from exc
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise RuntimeError(f"translation response is not valid JSON: {exc}") from exc


def google_translate(text: str, from_locale: str, to_locale: str) -> str | None:
    params = urlencode({"client": "gtx", "sl": from_locale, "tl": to_locale, "dt": "t"})
    request = Request(
        f"{TRANSLATE_URL}?{params}",
        data=urlencode({"q": text}).encode("utf-8"),
        headers={
            "Accept": "application/json",
            "Content-Type": "application/x-www-form-urlencoded;charset=utf-8"
        }
    )
    payload = fetch_json(request)
    if not isinstance(payload, list) or not payload or not isinstance(payload[0], list):
        return None
    pieces = [
        segment[0] for segment in payload[0]
        if isinstance(segment, list) and segment and isinstance(segment[0], str)
    ]
    return "".join(pieces) or None


def translate_markdown(text: str, from_locale: str, to_locale: str, translator: Translator) -> str | None:
    source, blocks = replace_code_blocks(text)
    result = translator(source, from_locale, to_locale)
    if not result:
        return None
    return restore_code_blocks(result, blocks)


def translate_quiz(
    quiz: Quiz,
    from_locale: str,
    to_locale: str,
    translator: Translator = google_translate,
    quiz_root: Path = QUIZ_ROOT,
    config: CorpusConfig = DEFAULT_CONFIG
) -> ItemResult:
    item = f"#{quiz.no}"
    source = quiz.readme.get(from_locale)
    if not source:
        return ItemResult(item, SKIPPED, f"no {from_locale} README")

    try:
        translated = translate_markdown(source, from_locale, to_locale, translator)
    except RuntimeError as exc:
        return ItemResult(item, FAILED, str(exc))
    if not translated:
        return ItemResult(item, FAILED, "empty translation")

    path = quiz_root / quiz.path / locale_file_name("README", to_locale, "md", config)
    content = f"> {t(to_locale, 'readme.machine-translated', config)}\n\n{translated.strip()}\n"
    try:
        write_text_atomic(path, content)
    except OSError as exc:
        return ItemResult(item, FAILED, str(exc))

    print(f"Translated {item} {from_locale} -> {to_locale}: {path}")
    return ItemResult(item, UPDATED, str(path))


def translate_all_quizzes(
    quizzes: list[Quiz],
    from_locale: str,
    to_locale: str,
    translator: Translator = google_translate,
    quiz_root: Path = QUIZ_ROOT,
    config: CorpusConfig = DEFAULT_CONFIG
) -> BatchReport:
    report = BatchReport(f"Translation {from_locale} -> {to_locale}")
    for quiz in quizzes:
        if quiz.readme.get(to_locale):
            report.add(ItemResult(f"#{quiz.no}", SKIPPED, f"already has a {to_locale} README"))
            continue
        if not quiz.readme.get(from_locale):
            report.add(ItemResult(f"#{quiz.no}", SKIPPED, f"no {from_locale} README"))
            continue
        report.add(translate_quiz(quiz, from_locale, to_locale, translator, quiz_root, config))
    return report


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Machine-translate quiz READMEs into another locale.")
    parser.add_argument("--from", dest="from_locale", required=True, help="Source locale")
    parser.add_argument("--to", dest="to_locale", required=True, help="Target locale")
    parser.add_argument("--no", type=int, help="Only translate the quiz with this number")
    parser.add_argument("--quiz-root", type=Path, default=QUIZ_ROOT, help="Directory holding the quiz folders")
    parser.add_argument("--config", type=Path, default=CONFIG_PATH, help="Path to corpus.json")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)

    config, config_error = load_corpus_config(args.config)
    if config_error:
        print(f"ERROR: {config_error}", file=sys.stderr)
        return 2

    from_locale = normalize_locale_tag(args.from_locale, config)
    to_locale = normalize_locale_tag(args.to_locale, config)
    if not from_locale or not to_locale or from_locale == to_locale:
        allowed = ", ".join(config.supported_locales)
        print(f"ERROR: --from and --to must be two different locales of: {allowed}", file=sys.stderr)
        return 2

    if args.no is not None:
        quiz, errors = load_quiz_by_no(args.no, args.quiz_root, config)
        if quiz is None:
            for error in errors:
                print(f"ERROR: {error}", file=sys.stderr)
            return 1
        for error in errors:
            print(f"WARNING: {error}", file=sys.stderr)
        result = translate_quiz(quiz, from_locale, to_locale, quiz_root=args.quiz_root, config=config)
        report = BatchReport(f"Translation {from_locale} -> {to_locale}", [result])
    else:
        quizzes, errors = load_quizzes(args.quiz_root, config)
        for error in errors:
            print(f"WARNING: {error}", file=sys.stderr)
        report = translate_all_quizzes(quizzes, from_locale, to_locale, quiz_root=args.quiz_root, config=config)

    report.print_summary()
    return 1 if report.failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
