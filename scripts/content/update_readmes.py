#!/usr/bin/env python3
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import badges
from batch_report import BatchReport
from quiz_info import DIFFICULTY_RANK, Quiz, resolve_info
from quiz_loader import QUIZ_ROOT, load_quizzes
from quiz_locales import (
    CONFIG_PATH,
    DEFAULT_CONFIG,
    ROOT_DIR,
    CorpusConfig,
    load_corpus_config,
    locale_file_name,
    t,
)
from readme_regions import CHALLENGES_END, CHALLENGES_START, update_readme_file, update_region_file

TAG_TABLE_SPACER = "<code>" + "&nbsp;" * 10 + "</code>"


def ranked_quizzes(quizzes: list[Quiz]) -> list[Quiz]:
    ranked = [quiz for quiz in quizzes if quiz.difficulty in DIFFICULTY_RANK]
    return sorted(ranked, key=lambda quiz: (DIFFICULTY_RANK.index(quiz.difficulty), quiz.no))


def get_all_tags(quizzes: list[Quiz], locale: str, config: CorpusConfig = DEFAULT_CONFIG) -> list[str]:
    tags: set[str] = set()
    for quiz in quizzes:
        tags.update(resolve_info(quiz, locale, config).tags)
    return sorted(tags)


def get_quizzes_by_tag(
    quizzes: list[Quiz],
    locale: str,
    tag: str,
    config: CorpusConfig = DEFAULT_CONFIG
) -> list[Quiz]:
    return [quiz for quiz in quizzes if tag in resolve_info(quiz, locale, config).tags]


def build_quiz_header(quiz: Quiz, locale: str, config: CorpusConfig = DEFAULT_CONFIG) -> str:
    info = resolve_info(quiz, locale, config)
    available_locales = [
        other for other in config.supported_locales
        if other != locale and other in quiz.readme
    ]

    tag_badges = " ".join(badges.to_tag_badge(tag) for tag in info.tags)
    header = (
        f"<h1>{badges.escape_html(info.title or '')} "
        f"{badges.to_difficulty_badge(quiz.difficulty, locale)} {tag_badges}</h1>"
        f"<blockquote><p>{badges.to_author_info(info.author)}</p></blockquote>"
        "<p>"
        + badges.to_badge_link(
            badges.to_play_short(quiz.no, locale, config),
            "",
            t(locale, "badge.take-the-challenge", config),
            "3178c6",
            "?logo=typescript&logoColor=white"
        )
    )
    if available_locales:
        header += "&nbsp;&nbsp;&nbsp;" + " ".join(
            badges.to_badge_link(badges.to_nearby_readme(other, config), "", t(other, "display", config), "gray")
            for other in available_locales
        )
    return header + "</p>"


def build_quiz_footer(
    quiz: Quiz,
    locale: str,
    quizzes: list[Quiz],
    config: CorpusConfig = DEFAULT_CONFIG
) -> str:
    info = resolve_info(quiz, locale, config)
    footer = (
        "<br>"
        + badges.to_badge_link(
            f"../../{locale_file_name('README', locale, 'md', config)}",
            "",
            t(locale, "badge.back", config),
            "grey"
        )
        + badges.to_badge_link(
            badges.to_answer_short(quiz.no, locale, config),
            "",
            t(locale, "badge.share-your-solutions", config),
            "teal"
        )
        + badges.to_badge_link(
            badges.to_solutions_short(quiz.no, config),
            "",
            t(locale, "badge.checkout-solutions", config),
            "de5a77",
            "?logo=awesome-lists&logoColor=white"
        )
    )
    if info.related:
        footer += (
            f"<hr><h3>{t(locale, 'readme.related-challenges', config)}</h3>"
            + badges.quiz_no_to_badges(info.related, quizzes, locale, absolute=True, config=config)
        )
    return footer


def build_challenges_index(quizzes: list[Quiz], locale: str, config: CorpusConfig = DEFAULT_CONFIG) -> str:
    ranked = ranked_quizzes(quizzes)
    counts: dict[str, int] = {}
    for quiz in ranked:
        counts[quiz.difficulty] = counts.get(quiz.difficulty, 0) + 1

    parts: list[str] = []
    prev = ""
    for quiz in ranked:
        if quiz.difficulty != prev:
            if prev:
                parts.append("<br><br>")
            parts.append(badges.to_difficulty_badge_inverted(quiz.difficulty, locale, counts[quiz.difficulty]) + "<br>")
        parts.append(badges.quiz_to_badge(quiz, locale, config=config))
        prev = quiz.difficulty

    parts.append(f"<br><details><summary>{t(locale, 'readme.by-tags', config)}</summary><br><table><tbody>")
    for tag in get_all_tags(ranked, locale, config):
        parts.append(f"<tr><td>{badges.to_tag_badge(tag)}</td><td>")
        for quiz in get_quizzes_by_tag(ranked, locale, tag, config):
            parts.append(badges.quiz_to_badge(quiz, locale, config=config))
        parts.append("</td></tr>")
    parts.append(f"<tr><td>{TAG_TABLE_SPACER}</td><td></td></tr>")
    parts.append("</tbody></table></details>")

    parts.append(f"<br><details><summary>{t(locale, 'readme.by-plain-text', config)}</summary><br>")
    prev = ""
    for quiz in ranked:
        if quiz.difficulty != prev:
            if prev:
                parts.append("</ul>")
            heading = badges.to_difficulty_plain_text(quiz.difficulty, locale, counts[quiz.difficulty])
            parts.append(f"<h3>{heading}</h3><ul>")
        parts.append(f"<li>{badges.quiz_to_badge(quiz, locale, badge=False, config=config)}</li>")
        prev = quiz.difficulty
    if prev:
        parts.append("</ul>")
    parts.append("</details><br>")

    return "".join(parts)


def update_index_readmes(
    quizzes: list[Quiz],
    root_dir: Path = ROOT_DIR,
    config: CorpusConfig = DEFAULT_CONFIG
) -> BatchReport:
    report = BatchReport("Index READMEs")
    for locale in config.supported_locales:
        path = root_dir / locale_file_name("README", locale, "md", config)
        content = build_challenges_index(quizzes, locale, config)
        report.add(update_region_file(path, CHALLENGES_START, CHALLENGES_END, f"\n{content}\n"))
    return report


def update_quiz_readmes(
    quizzes: list[Quiz],
    quiz_root: Path = QUIZ_ROOT,
    config: CorpusConfig = DEFAULT_CONFIG
) -> BatchReport:
    report = BatchReport("Quiz READMEs")
    for quiz in quizzes:
        for locale in config.supported_locales:
            path = quiz_root / quiz.path / locale_file_name("README", locale, "md", config)
            report.add(
                update_readme_file(
                    path,
                    build_quiz_header(quiz, locale, config),
                    build_quiz_footer(quiz, locale, quizzes, config)
                )
            )
    return report


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Regenerate the generated regions of the index and quiz READMEs."
    )
    parser.add_argument(
        "target",
        nargs="?",
        choices=["quiz", "index"],
        help="Only update quiz READMEs or only the index READMEs (default: both)"
    )
    parser.add_argument("--root-dir", type=Path, default=ROOT_DIR, help="Directory holding the index READMEs")
    parser.add_argument("--quiz-root", type=Path, default=QUIZ_ROOT, help="Directory holding the quiz folders")
    parser.add_argument("--config", type=Path, default=CONFIG_PATH, help="Path to corpus.json")
    parser.add_argument("-v", "--verbose", action="store_true", help="List every processed file")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)

    config, config_error = load_corpus_config(args.config)
    if config_error:
        print(f"ERROR: {config_error}", file=sys.stderr)
        return 2

    quizzes, errors = load_quizzes(args.quiz_root, config)
    for error in errors:
        print(f"WARNING: {error}", file=sys.stderr)

    reports: list[BatchReport] = []
    if args.target in (None, "index"):
        reports.append(update_index_readmes(quizzes, args.root_dir, config))
    if args.target in (None, "quiz"):
        reports.append(update_quiz_readmes(quizzes, args.quiz_root, config))

    for report in reports:
        report.print_summary(verbose=args.verbose)

    return 1 if any(report.failed for report in reports) else 0


if __name__ == "__main__":
    raise SystemExit(main())
