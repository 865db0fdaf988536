#!/usr/bin/env python3
from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

ROOT_DIR = Path(__file__).resolve().parents[2]
CONFIG_PATH = ROOT_DIR / "config" / "corpus.json"

DEFAULT_LOCALE = "en"
SUPPORTED_LOCALES = ("en", "zh-CN", "ja", "ko", "pt-BR")
DEFAULT_REPO_URL = "https://github.com/quiz-corpus/quizzes"
DEFAULT_SHORT_URL = "https://quiz-corpus.dev"

MESSAGES: dict[str, dict[str, str]] = {
    "en": {
        "display": "English",
        "difficulty.warm": "warm-up",
        "difficulty.easy": "easy",
        "difficulty.medium": "medium",
        "difficulty.hard": "hard",
        "difficulty.extreme": "extreme",
        "difficulty.pending": "pending",
        "badge.take-the-challenge": "Take the Challenge",
        "badge.back": "Back",
        "badge.share-your-solutions": "Share your Solutions",
        "badge.checkout-solutions": "Check out Solutions",
        "readme.related-challenges": "Related Challenges",
        "readme.by-tags": "By Tags",
        "readme.by-plain-text": "By Plain Text",
        "readme.machine-translated": "This README was translated automatically; improvements are welcome.",
        "code.your-code-here": "Your Code Here",
        "code.test-cases": "Test Cases",
        "code.further-steps": "Further Steps",
        "code.view-on-github": "View on GitHub",
        "code.share-your-solutions": "Share your solutions",
        "code.view-solutions": "View solutions",
        "code.more-challenges": "More Challenges"
    },
    "zh-CN": {
        "display": "简体中文",
        "difficulty.warm": "热身",
        "difficulty.easy": "简单",
        "difficulty.medium": "中等",
        "difficulty.hard": "困难",
        "difficulty.extreme": "地狱",
        "difficulty.pending": "待定",
        "badge.take-the-challenge": "接受挑战",
        "badge.back": "返回首页",
        "badge.share-your-solutions": "分享你的解答",
        "badge.checkout-solutions": "查看解答",
        "readme.related-challenges": "相关挑战",
        "readme.by-tags": "按标签",
        "readme.by-plain-text": "纯文本",
        "readme.machine-translated": "此 README 为机器翻译，欢迎改进。",
        "code.your-code-here": "你的代码",
        "code.test-cases": "测试用例",
        "code.further-steps": "下一步",
        "code.view-on-github": "在 GitHub 上查看",
        "code.share-your-solutions": "分享你的解答",
        "code.view-solutions": "查看解答",
        "code.more-challenges": "更多挑战"
    },
    "ja": {
        "display": "日本語",
        "difficulty.warm": "ウォームアップ",
        "difficulty.easy": "初級",
        "difficulty.medium": "中級",
        "difficulty.hard": "上級",
        "difficulty.extreme": "最上級",
        "difficulty.pending": "保留",
        "badge.take-the-challenge": "挑戦する",
        "badge.back": "戻る",
        "badge.share-your-solutions": "解答を共有",
        "badge.checkout-solutions": "解答を確認",
        "readme.related-challenges": "関連する課題",
        "readme.by-tags": "タグ別",
        "readme.by-plain-text": "プレーンテキスト",
        "readme.machine-translated": "この README は機械翻訳されています。改善を歓迎します。",
        "code.your-code-here": "ここにコードを記入",
        "code.test-cases": "テストケース",
        "code.further-steps": "次のステップ",
        "code.view-on-github": "GitHub で確認する",
        "code.share-your-solutions": "解答を共有",
        "code.view-solutions": "解答を確認",
        "code.more-challenges": "その他の課題"
    },
    "ko": {
        "display": "한국어",
        "difficulty.warm": "워밍업",
        "difficulty.easy": "쉬움",
        "difficulty.medium": "보통",
        "difficulty.hard": "어려움",
        "difficulty.extreme": "매우 어려움",
        "difficulty.pending": "보류",
        "badge.take-the-challenge": "도전하기",
        "badge.back": "돌아가기",
        "badge.share-your-solutions": "정답 공유하기",
        "badge.checkout-solutions": "정답 보기",
        "readme.related-challenges": "관련된 문제들",
        "readme.by-tags": "태그별",
        "readme.by-plain-text": "일반 텍스트",
        "readme.machine-translated": "이 README는 기계 번역되었습니다. 개선을 환영합니다.",
        "code.your-code-here": "여기에 코드 입력",
        "code.test-cases": "테스트 케이스",
        "code.further-steps": "다음 단계",
        "code.view-on-github": "GitHub에서 보기",
        "code.share-your-solutions": "정답 공유하기",
        "code.view-solutions": "정답 보기",
        "code.more-challenges": "다른 문제들"
    },
    "pt-BR": {
        "display": "Português (BR)",
        "difficulty.warm": "aquecimento",
        "difficulty.easy": "fácil",
        "difficulty.medium": "médio",
        "difficulty.hard": "difícil",
        "difficulty.extreme": "extremo",
        "difficulty.pending": "pendente",
        "badge.take-the-challenge": "Aceite o desafio",
        "badge.back": "Voltar",
        "badge.share-your-solutions": "Compartilhe sua solução",
        "badge.checkout-solutions": "Ver soluções",
        "readme.related-challenges": "Desafios relacionados",
        "readme.by-tags": "Por tags",
        "readme.by-plain-text": "Texto simples",
        "readme.machine-translated": "Este README foi traduzido automaticamente; melhorias são bem-vindas.",
        "code.your-code-here": "Seu código aqui",
        "code.test-cases": "Casos de teste",
        "code.further-steps": "Próximos passos",
        "code.view-on-github": "Ver no GitHub",
        "code.share-your-solutions": "Compartilhe sua solução",
        "code.view-solutions": "Ver soluções",
        "code.more-challenges": "Mais desafios"
    }
}


@dataclass(frozen=True)
class CorpusConfig:
    default_locale: str = DEFAULT_LOCALE
    supported_locales: tuple[str, ...] = SUPPORTED_LOCALES
    repo_url: str = DEFAULT_REPO_URL
    short_url: str = DEFAULT_SHORT_URL


DEFAULT_CONFIG = CorpusConfig()


def normalize_locale_tag(value: object, config: CorpusConfig = DEFAULT_CONFIG) -> str | None:
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    if not trimmed:
        return None
    for locale in config.supported_locales:
        if locale.lower() == trimmed.lower():
            return locale
    return None


def locale_file_name(name: str, locale: str, ext: str, config: CorpusConfig = DEFAULT_CONFIG) -> str:
    """Return the file name of a locale variant: README.md for the default locale, README.ja.md otherwise."""
    if locale == config.default_locale:
        return f"{name}.{ext}"
    return f"{name}.{locale}.{ext}"


def t(locale: str, key: str, config: CorpusConfig = DEFAULT_CONFIG) -> str:
    messages = MESSAGES.get(locale, {})
    if key in messages:
        return messages[key]
    return MESSAGES.get(config.default_locale, {}).get(key, key)


def _string_value(data: dict[str, Any], key: str, default: str, errors: list[str]) -> str:
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, str) or not value.strip():
        errors.append(f"{key} must be a non-empty string")
        return default
    return value.strip()


def load_corpus_config(path: Path = CONFIG_PATH) -> tuple[CorpusConfig, str | None]:
    if not path.exists():
        return DEFAULT_CONFIG, None

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        return DEFAULT_CONFIG, f"{path} is not valid JSON: {exc}"

    if not isinstance(data, dict):
        return DEFAULT_CONFIG, f"{path} must contain a top-level object"

    errors: list[str] = []
    supported = data.get("supported_locales", list(SUPPORTED_LOCALES))
    if not isinstance(supported, list) or not supported or not all(
        isinstance(locale, str) and locale.strip() for locale in supported
    ):
        errors.append("supported_locales must be a non-empty array of strings")
        supported = list(SUPPORTED_LOCALES)
    supported_locales = tuple(dict.fromkeys(locale.strip() for locale in supported))

    default_locale = _string_value(data, "default_locale", DEFAULT_LOCALE, errors)
    if default_locale not in supported_locales:
        errors.append(f"default_locale {default_locale} must be listed in supported_locales")

    config = CorpusConfig(
        default_locale=default_locale,
        supported_locales=supported_locales,
        repo_url=_string_value(data, "repo_url", DEFAULT_REPO_URL, errors).rstrip("/"),
        short_url=_string_value(data, "short_url", DEFAULT_SHORT_URL, errors).rstrip("/")
    )
    if errors:
        return DEFAULT_CONFIG, f"{path}: " + "; ".join(errors)
    return config, None
