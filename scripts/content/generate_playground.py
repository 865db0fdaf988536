#!/usr/bin/env python3
from __future__ import annotations

import argparse
import re
import shutil
import sys
import unicodedata
from pathlib import Path

import badges
from batch_report import FAILED, SKIPPED, UPDATED, BatchReport, ItemResult
from content_io import write_text_atomic
from quiz_info import Quiz, ResolvedQuizInfo, resolve_info
from quiz_loader import QUIZ_ROOT, load_quizzes
from quiz_locales import (
    CONFIG_PATH,
    DEFAULT_CONFIG,
    ROOT_DIR,
    CorpusConfig,
    load_corpus_config,
    normalize_locale_tag,
    t,
)
from snapshot_cache import (
    Snapshot,
    SnapshotCorruptError,
    calculate_file_hash,
    read_snapshot,
    relative_seed,
    take_snapshot,
    write_snapshot,
)

PLAYGROUND_PATH = ROOT_DIR / "playground"
PLAYGROUND_CACHE_PATH = ROOT_DIR / ".playgroundcache"
CODE_EXTENSION = ".ts"

SLUG_STRIP_RE = re.compile(r"<.*>")
SLUG_SEPARATOR_RE = re.compile(r"[^a-z0-9]+")


def slugify(text: str) -> str:
    value = SLUG_STRIP_RE.sub("", text.replace(".", "-"))
    value = unicodedata.normalize("NFKD", value)
    value = "".join(char for char in value if unicodedata.category(char) != "Mn")
    return SLUG_SEPARATOR_RE.sub("-", value.lower()).strip("-")


def get_question_full_name(no: int, difficulty: str, title: str, fallback_slug: str = "") -> str:
    slug = slugify(title) or fallback_slug
    return f"{no:05d}-{difficulty}-{slug}"


def calculate_overridable_files(cache: Snapshot, snapshot: Snapshot) -> Snapshot:
    """Files whose on-disk fingerprint still matches the one recorded at the last generation."""
    return {name: digest for name, digest in snapshot.items() if cache.get(name) == digest}


def is_quiz_writable(name: str, overridable_files: Snapshot, playground_snapshot: Snapshot) -> bool:
    return name in overridable_files or name not in playground_snapshot


def to_comment_block(text: str) -> str:
    lines = "\n".join(f"  {line}".rstrip() for line in text.splitlines())
    return f"/*\n{lines}\n*/\n"


def to_info_header(quiz: Quiz, info: ResolvedQuizInfo, locale: str) -> str:
    author = info.author or {}
    github = f" (@{author['github']})" if author.get("github") else ""
    tags = " ".join(f"#{tag}" for tag in info.tags)
    byline = f"by {author.get('name', '')}{github} #{t(locale, f'difficulty.{quiz.difficulty}')} {tags}".rstrip()
    title_line = f"{quiz.no} - {info.title}"
    return f"{title_line}\n{'-' * len(title_line)}\n{byline}\n\n### Question\n\n"


def format_to_code(quiz: Quiz, locale: str, config: CorpusConfig = DEFAULT_CONFIG) -> str:
    info = resolve_info(quiz, locale, config)
    readme = quiz.readme.get(locale) or quiz.readme.get(config.default_locale, "")
    view_on_github = f"> {t(locale, 'code.view-on-github')}: {badges.to_quiz_readme(quiz, locale, True, config)}"
    further_steps = (
        f"  > {t(locale, 'code.share-your-solutions')}: {badges.to_answer_short(quiz.no, locale, config)}\n"
        f"  > {t(locale, 'code.view-solutions')}: {badges.to_solutions_short(quiz.no, config)}\n"
        f"  > {t(locale, 'code.more-challenges')}: {config.repo_url}"
    )
    return (
        to_comment_block(f"{to_info_header(quiz, info, locale)}{readme.strip()}\n\n{view_on_github}")
        + f"\n/* _____________ {t(locale, 'code.your-code-here')} _____________ */\n\n"
        + f"{quiz.template.strip()}\n\n"
        + f"/* _____________ {t(locale, 'code.test-cases')} _____________ */\n"
        + f"{(quiz.tests or '').strip()}\n\n"
        + f"/* _____________ {t(locale, 'code.further-steps')} _____________ */\n"
        + f"/*\n{further_steps}\n*/\n"
    )


def generate_playground(
    quizzes: list[Quiz],
    locale: str,
    playground_path: Path = PLAYGROUND_PATH,
    cache_path: Path = PLAYGROUND_CACHE_PATH,
    keep_changes: bool = False,
    config: CorpusConfig = DEFAULT_CONFIG
) -> BatchReport:
    """Write one code file per quiz into ``playground_path``.

    With ``keep_changes`` a file is only rewritten when its current content
    still matches the fingerprint stored in ``cache_path`` at the last
    generation, or when it does not exist yet. Without it the playground is
    rebuilt from scratch. Raises SnapshotCorruptError before touching any file
    when the stored fingerprints cannot be read.
    """
    report = BatchReport(f"Playground ({locale})")
    current_cache = read_snapshot(cache_path)

    playground_snapshot: Snapshot = {}
    overridable_files: Snapshot = {}
    if keep_changes:
        playground_snapshot = take_snapshot(playground_path)
        overridable_files = calculate_overridable_files(current_cache, playground_snapshot)
    elif playground_path.exists():
        shutil.rmtree(playground_path)
    playground_path.mkdir(parents=True, exist_ok=True)

    # Files already written must reach the cache even if a later item raises.
    incoming_cache: Snapshot = {}
    try:
        for quiz in quizzes:
            report.add(
                _generate_quiz_file(
                    quiz, locale, playground_path, keep_changes,
                    overridable_files, playground_snapshot, incoming_cache, config
                )
            )
    finally:
        write_snapshot(cache_path, {**current_cache, **incoming_cache})
    return report


def _generate_quiz_file(
    quiz: Quiz,
    locale: str,
    playground_path: Path,
    keep_changes: bool,
    overridable_files: Snapshot,
    playground_snapshot: Snapshot,
    incoming_cache: Snapshot,
    config: CorpusConfig
) -> ItemResult:
    info = resolve_info(quiz, locale, config)
    if info.title is None or info.difficulty is None:
        return ItemResult(f"#{quiz.no}", SKIPPED, f"no {locale.upper()} version")

    file_name = get_question_full_name(quiz.no, info.difficulty, info.title, quiz.slug) + CODE_EXTENSION
    target = playground_path / info.difficulty / file_name

    if keep_changes and not is_quiz_writable(file_name, overridable_files, playground_snapshot):
        return ItemResult(file_name, SKIPPED, "kept local changes")

    try:
        write_text_atomic(target, format_to_code(quiz, locale, config))
        incoming_cache[file_name] = calculate_file_hash(target, relative_seed(target, playground_path))
    except OSError as exc:
        return ItemResult(file_name, FAILED, str(exc))
    return ItemResult(file_name, UPDATED)


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate the local playground of quiz code files.")
    parser.add_argument("--locale", help="Locale of the generated files (default: the default locale)")
    parser.add_argument(
        "-K",
        "--keep-changes",
        action="store_true",
        help="Keep files edited since the last generation"
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Rebuild an existing playground from scratch, discarding local edits"
    )
    parser.add_argument("--quiz-root", type=Path, default=QUIZ_ROOT, help="Directory holding the quiz folders")
    parser.add_argument("--playground", type=Path, default=PLAYGROUND_PATH, help="Output directory")
    parser.add_argument("--cache", type=Path, default=PLAYGROUND_CACHE_PATH, help="Path to the fingerprint cache")
    parser.add_argument("--config", type=Path, default=CONFIG_PATH, help="Path to corpus.json")
    parser.add_argument("-v", "--verbose", action="store_true", help="List every generated file")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)

    config, config_error = load_corpus_config(args.config)
    if config_error:
        print(f"ERROR: {config_error}", file=sys.stderr)
        return 2

    locale = config.default_locale
    if args.locale:
        locale = normalize_locale_tag(args.locale, config)
        if not locale:
            allowed = ", ".join(config.supported_locales)
            print(f"ERROR: locale {args.locale} is not supported; use one of: {allowed}", file=sys.stderr)
            return 2

    playground_path: Path = args.playground
    if not args.keep_changes and not args.force and playground_path.exists():
        print(
            f"ERROR: {playground_path} already exists and may contain your answers. "
            "Re-run with --keep-changes to preserve them or --force to overwrite.",
            file=sys.stderr
        )
        return 2

    quizzes, errors = load_quizzes(args.quiz_root, config)
    for error in errors:
        print(f"WARNING: {error}", file=sys.stderr)

    if args.keep_changes:
        print("Keeping your changes while generating.")

    try:
        report = generate_playground(
            quizzes,
            locale,
            playground_path=playground_path,
            cache_path=args.cache,
            keep_changes=args.keep_changes,
            config=config
        )
    except SnapshotCorruptError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        print(
            "ERROR: cannot generate the playground without risking your changes; "
            f"remove {args.cache} and run a full generation with --force.",
            file=sys.stderr
        )
        return 1

    report.print_summary(verbose=args.verbose)
    print(f"Local playground generated at: {playground_path}")
    return 1 if report.failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
