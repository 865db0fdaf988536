#!/usr/bin/env python3
"""Marker-delimited regions of generated HTML inside hand-written READMEs.

Only the text strictly between a start and an end marker is machine-owned;
everything around the markers belongs to the author and is kept verbatim.
"""
from __future__ import annotations

import re
from pathlib import Path

from batch_report import FAILED, MISSING_TARGET, SKIPPED, UNCHANGED, UPDATED, ItemResult
from content_io import write_text_atomic

HEADER_START = "<!--info-header-start-->"
HEADER_END = "<!--info-header-end-->"
FOOTER_START = "<!--info-footer-start-->"
FOOTER_END = "<!--info-footer-end-->"
CHALLENGES_START = "<!--challenges-start-->"
CHALLENGES_END = "<!--challenges-end-->"

HEADER_RE = re.compile(re.escape(HEADER_START) + r".*?" + re.escape(HEADER_END), re.DOTALL)
FOOTER_RE = re.compile(re.escape(FOOTER_START) + r".*?" + re.escape(FOOTER_END), re.DOTALL)


def find_region(text: str, start_marker: str, end_marker: str) -> tuple[int, int] | None:
    """Return the (start, end) offsets of the content between a marker pair."""
    start = text.find(start_marker)
    if start == -1:
        return None
    content_start = start + len(start_marker)
    end = text.find(end_marker, content_start)
    if end == -1:
        return None
    return content_start, end


def replace_region(text: str, start_marker: str, end_marker: str, content: str) -> str | None:
    region = find_region(text, start_marker, end_marker)
    if region is None:
        return None
    content_start, content_end = region
    return text[:content_start] + content + text[content_end:]


def ensure_regions(text: str) -> str:
    if find_region(text, HEADER_START, HEADER_END) is None:
        text = f"{HEADER_START}{HEADER_END}\n\n{text}"
    if find_region(text, FOOTER_START, FOOTER_END) is None:
        text = f"{text}\n\n{FOOTER_START}{FOOTER_END}"
    return text


def apply_regions(text: str, header_html: str, footer_html: str) -> str:
    text = ensure_regions(text)
    text = replace_region(text, HEADER_START, HEADER_END, header_html) or text
    return replace_region(text, FOOTER_START, FOOTER_END, footer_html) or text


def strip_regions(text: str) -> str:
    text = HEADER_RE.sub("", text, count=1)
    text = FOOTER_RE.sub("", text, count=1)
    return text.strip()


def update_readme_file(path: Path, header_html: str, footer_html: str) -> ItemResult:
    if not path.is_file():
        return ItemResult(str(path), SKIPPED, MISSING_TARGET)

    try:
        text = path.read_text(encoding="utf-8")
        updated = apply_regions(text, header_html, footer_html)
        if updated == text:
            return ItemResult(str(path), SKIPPED, UNCHANGED)
        write_text_atomic(path, updated)
    except (OSError, UnicodeDecodeError) as exc:
        return ItemResult(str(path), FAILED, str(exc))

    return ItemResult(str(path), UPDATED)


def update_region_file(path: Path, start_marker: str, end_marker: str, content: str) -> ItemResult:
    if not path.is_file():
        return ItemResult(str(path), SKIPPED, MISSING_TARGET)

    try:
        text = path.read_text(encoding="utf-8")
        updated = replace_region(text, start_marker, end_marker, content)
        if updated is None:
            return ItemResult(str(path), SKIPPED, f"no {start_marker} region")
        if updated == text:
            return ItemResult(str(path), SKIPPED, UNCHANGED)
        write_text_atomic(path, updated)
    except (OSError, UnicodeDecodeError) as exc:
        return ItemResult(str(path), FAILED, str(exc))

    return ItemResult(str(path), UPDATED)
