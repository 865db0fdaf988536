import sys
import unittest
from pathlib import Path
from tempfile import TemporaryDirectory
from unittest import mock

CONTENT_DIR = Path(__file__).resolve().parent
sys.path.insert(0, str(CONTENT_DIR))

import translate_quizzes
from batch_report import FAILED, SKIPPED, UPDATED
from quiz_info import PartialQuizInfo, Quiz

README = "Implement `Pick`.\n\n```ts\ntype A = MyPick<Todo, 'title'>\n```\n\nGood luck."


def make_quiz(no: int, readme: dict[str, str]) -> Quiz:
    return Quiz(
        no=no,
        difficulty="easy",
        path=f"{no:05d}-easy-pick",
        info={"en": PartialQuizInfo(title="Pick")},
        readme=readme,
        template=""
    )


def shouting_translator(text: str, from_locale: str, to_locale: str) -> str:
    return text.upper()


class TranslateQuizzesTest(unittest.TestCase):
    def test_code_blocks_are_protected(self) -> None:
        calls: list[str] = []

        def translator(text: str, from_locale: str, to_locale: str) -> str:
            calls.append(text)
            return text.upper().replace("__0__", "__ 0 __")

        result = translate_quizzes.translate_markdown(README, "en", "ja", translator)

        self.assertNotIn("MyPick", calls[0])
        self.assertIn("__0__", calls[0])
        self.assertIn("```ts\ntype A = MyPick<Todo, 'title'>\n```", result)
        self.assertIn("GOOD LUCK.", result)

    def test_translate_quiz_writes_locale_readme(self) -> None:
        with TemporaryDirectory() as temp_dir:
            quiz_root = Path(temp_dir)
            quiz = make_quiz(4, {"en": README})
            (quiz_root / quiz.path).mkdir()

            result = translate_quizzes.translate_quiz(quiz, "en", "ja", shouting_translator, quiz_root)

            self.assertEqual(result.status, UPDATED)
            text = (quiz_root / quiz.path / "README.ja.md").read_text(encoding="utf-8")
            self.assertTrue(text.startswith("> "))
            self.assertIn("GOOD LUCK.", text)
            self.assertIn("MyPick<Todo, 'title'>", text)

    def test_empty_translation_fails_that_quiz_only(self) -> None:
        with TemporaryDirectory() as temp_dir:
            quiz_root = Path(temp_dir)
            quizzes = [make_quiz(1, {"en": "One"}), make_quiz(2, {"en": "Two"})]
            for quiz in quizzes:
                (quiz_root / quiz.path).mkdir(exist_ok=True)

            def flaky(text: str, from_locale: str, to_locale: str) -> str | None:
                return None if text == "One" else "Deux"

            report = translate_quizzes.translate_all_quizzes(quizzes, "en", "fr", flaky, quiz_root)

            self.assertEqual([result.status for result in report.results], [FAILED, UPDATED])
            self.assertEqual(report.results[0].detail, "empty translation")

    def test_existing_or_missing_sources_are_skipped(self) -> None:
        with TemporaryDirectory() as temp_dir:
            quizzes = [make_quiz(1, {"en": "One", "ja": "一"}), make_quiz(2, {"ko": "둘"})]

            report = translate_quizzes.translate_all_quizzes(
                quizzes, "en", "ja", shouting_translator, Path(temp_dir)
            )

            self.assertEqual([result.status for result in report.results], [SKIPPED, SKIPPED])

    def test_network_error_is_reported(self) -> None:
        with TemporaryDirectory() as temp_dir:
            quiz_root = Path(temp_dir)
            quiz = make_quiz(1, {"en": "One"})

            def offline(text: str, from_locale: str, to_locale: str) -> str:
                raise RuntimeError("translation request failed: offline")

            result = translate_quizzes.translate_quiz(quiz, "en", "ja", offline, quiz_root)

            self.assertEqual(result.status, FAILED)
            self.assertIn("offline", result.detail)
            self.assertFalse((quiz_root / quiz.path / "README.ja.md").exists())


class TimingOutResponse:
    def __enter__(self) -> "TimingOutResponse":
        return self

    def __exit__(self, *exc_info: object) -> None:
        return None

    def read(self) -> bytes:
        raise TimeoutError("The read operation timed out")


class FetchJsonTest(unittest.TestCase):
    def test_read_timeout_fails_only_that_quiz(self) -> None:
        with TemporaryDirectory() as temp_dir:
            quiz_root = Path(temp_dir)
            quizzes = [make_quiz(1, {"en": "One"}), make_quiz(2, {"en": "Two"})]

            with mock.patch.object(translate_quizzes, "urlopen", return_value=TimingOutResponse()) as urlopen:
                report = translate_quizzes.translate_all_quizzes(quizzes, "en", "ja", quiz_root=quiz_root)

            self.assertEqual(urlopen.call_count, 2)
            self.assertEqual([result.status for result in report.results], [FAILED, FAILED])
            self.assertIn("timed out", report.results[0].detail)

    def test_dropped_connection_is_wrapped(self) -> None:
        with mock.patch.object(
            translate_quizzes, "urlopen", side_effect=translate_quizzes.HTTPException("remote end closed")
        ):
            with self.assertRaises(RuntimeError):
                translate_quizzes.google_translate("One", "en", "ja")


if __name__ == "__main__":
    unittest.main()
