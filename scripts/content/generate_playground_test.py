import json
import sys
import unittest
from pathlib import Path
from tempfile import TemporaryDirectory

CONTENT_DIR = Path(__file__).resolve().parent
sys.path.insert(0, str(CONTENT_DIR))

import generate_playground
import quiz_loader
import snapshot_cache
from batch_report import FAILED, SKIPPED, UPDATED
from quiz_info import PartialQuizInfo, Quiz


def make_quiz(
    no: int,
    title: str | None,
    template: str = "type A = any",
    ja_title: str | None = None,
    difficulty: str = "easy"
) -> Quiz:
    info = {"en": PartialQuizInfo(title=title, difficulty=difficulty, author={"name": "Ann", "github": "ann"})}
    if ja_title:
        info["ja"] = PartialQuizInfo(title=ja_title)
    return Quiz(
        no=no,
        difficulty=difficulty,
        path=f"{no:05d}-{difficulty}-{(title or 'untitled').lower()}",
        info=info,
        readme={"en": f"Solve {title}."},
        template=template,
        tests="type cases = []"
    )


class SnapshotCacheTest(unittest.TestCase):
    def test_snapshot_round_trip(self) -> None:
        with TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / ".playgroundcache"
            snapshot = {"00001-easy-foo.ts": "abc123", "00002-easy-bar.ts": "def456"}

            snapshot_cache.write_snapshot(path, snapshot)

            self.assertEqual(snapshot_cache.read_snapshot(path), snapshot)

    def test_missing_snapshot_is_empty(self) -> None:
        with TemporaryDirectory() as temp_dir:
            self.assertEqual(snapshot_cache.read_snapshot(Path(temp_dir) / "absent"), {})

    def test_corrupt_snapshot_is_fatal(self) -> None:
        with TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / ".playgroundcache"
            path.write_text("{not json", encoding="utf-8")
            with self.assertRaises(snapshot_cache.SnapshotCorruptError):
                snapshot_cache.read_snapshot(path)

            path.write_text(json.dumps(["a", "b"]), encoding="utf-8")
            with self.assertRaises(snapshot_cache.SnapshotCorruptError):
                snapshot_cache.read_snapshot(path)

    def test_identical_content_at_different_paths_hashes_differently(self) -> None:
        with TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            (root / "easy").mkdir()
            (root / "hard").mkdir()
            (root / "easy" / "one.ts").write_text("same", encoding="utf-8")
            (root / "hard" / "two.ts").write_text("same", encoding="utf-8")

            snapshot = snapshot_cache.take_snapshot(root)

            self.assertEqual(set(snapshot.keys()), {"one.ts", "two.ts"})
            self.assertNotEqual(snapshot["one.ts"], snapshot["two.ts"])


class OverridableFilesTest(unittest.TestCase):
    def test_edited_file_is_not_overridable(self) -> None:
        cache = {"easy-1-foo.ts": "H1"}
        current = {"easy-1-foo.ts": "H2"}

        overridable = generate_playground.calculate_overridable_files(cache, current)

        self.assertEqual(overridable, {})
        self.assertFalse(generate_playground.is_quiz_writable("easy-1-foo.ts", overridable, current))

    def test_untouched_file_is_overridable(self) -> None:
        cache = {"easy-1-foo.ts": "H1"}
        current = {"easy-1-foo.ts": "H1"}

        overridable = generate_playground.calculate_overridable_files(cache, current)

        self.assertEqual(overridable, {"easy-1-foo.ts": "H1"})
        self.assertTrue(generate_playground.is_quiz_writable("easy-1-foo.ts", overridable, current))

    def test_new_file_is_always_writable(self) -> None:
        self.assertTrue(generate_playground.is_quiz_writable("easy-2-new.ts", {}, {"easy-1-foo.ts": "H2"}))


class GeneratePlaygroundTest(unittest.TestCase):
    def setUp(self) -> None:
        self._temp_dir = TemporaryDirectory()
        root = Path(self._temp_dir.name)
        self.playground = root / "playground"
        self.cache = root / ".playgroundcache"

    def tearDown(self) -> None:
        self._temp_dir.cleanup()

    def generate(self, quizzes: list[Quiz], keep_changes: bool, locale: str = "en"):
        return generate_playground.generate_playground(
            quizzes,
            locale,
            playground_path=self.playground,
            cache_path=self.cache,
            keep_changes=keep_changes
        )

    def test_full_generation_writes_files_and_cache(self) -> None:
        report = self.generate([make_quiz(1, "Foo")], keep_changes=False)

        target = self.playground / "easy" / "00001-easy-foo.ts"
        self.assertTrue(target.exists())
        code = target.read_text(encoding="utf-8")
        self.assertIn("Solve Foo.", code)
        self.assertIn("type A = any", code)
        self.assertIn("type cases = []", code)
        cache = snapshot_cache.read_snapshot(self.cache)
        self.assertEqual(cache, snapshot_cache.take_snapshot(self.playground))
        self.assertEqual([result.status for result in report.results], [UPDATED])

    def test_keep_changes_preserves_edited_file(self) -> None:
        self.generate([make_quiz(1, "Foo")], keep_changes=False)
        target = self.playground / "easy" / "00001-easy-foo.ts"
        target.write_text("my answer", encoding="utf-8")

        report = self.generate([make_quiz(1, "Foo", template="type B = any")], keep_changes=True)

        self.assertEqual(target.read_text(encoding="utf-8"), "my answer")
        self.assertEqual(report.results[0].status, SKIPPED)
        current = snapshot_cache.take_snapshot(self.playground)
        previous = snapshot_cache.read_snapshot(self.cache)
        self.assertNotIn("00001-easy-foo.ts", generate_playground.calculate_overridable_files(previous, current))

    def test_keep_changes_overwrites_untouched_file(self) -> None:
        self.generate([make_quiz(1, "Foo")], keep_changes=False)
        target = self.playground / "easy" / "00001-easy-foo.ts"

        report = self.generate([make_quiz(1, "Foo", template="type B = any")], keep_changes=True)

        self.assertIn("type B = any", target.read_text(encoding="utf-8"))
        self.assertEqual(report.results[0].status, UPDATED)
        self.assertEqual(snapshot_cache.read_snapshot(self.cache), snapshot_cache.take_snapshot(self.playground))

    def test_keep_changes_writes_brand_new_items(self) -> None:
        self.generate([make_quiz(1, "Foo")], keep_changes=False)
        edited = self.playground / "easy" / "00001-easy-foo.ts"
        edited.write_text("my answer", encoding="utf-8")
        self.cache.unlink()

        self.generate([make_quiz(1, "Foo"), make_quiz(2, "Bar")], keep_changes=True)

        self.assertEqual(edited.read_text(encoding="utf-8"), "my answer")
        self.assertTrue((self.playground / "easy" / "00002-easy-bar.ts").exists())
        cache = snapshot_cache.read_snapshot(self.cache)
        self.assertEqual(set(cache.keys()), {"00002-easy-bar.ts"})

    def test_untouched_entries_stay_in_cache(self) -> None:
        snapshot_cache.write_snapshot(self.cache, {"00009-easy-old.ts": "H9"})

        self.generate([make_quiz(1, "Foo")], keep_changes=True)

        cache = snapshot_cache.read_snapshot(self.cache)
        self.assertEqual(cache["00009-easy-old.ts"], "H9")
        self.assertIn("00001-easy-foo.ts", cache)

    def test_full_generation_discards_edits(self) -> None:
        self.generate([make_quiz(1, "Foo")], keep_changes=False)
        stray = self.playground / "notes.txt"
        stray.write_text("scratch", encoding="utf-8")

        self.generate([make_quiz(1, "Foo")], keep_changes=False)

        self.assertFalse(stray.exists())

    def test_corrupt_cache_aborts_before_writing(self) -> None:
        self.cache.write_text("not json", encoding="utf-8")

        with self.assertRaises(snapshot_cache.SnapshotCorruptError):
            self.generate([make_quiz(1, "Foo")], keep_changes=True)

        self.assertFalse(self.playground.exists())
        self.assertEqual(self.cache.read_text(encoding="utf-8"), "not json")

    def test_quiz_without_title_is_skipped(self) -> None:
        report = self.generate([make_quiz(1, None), make_quiz(2, "Bar")], keep_changes=False)

        self.assertEqual([result.status for result in report.results], [SKIPPED, UPDATED])
        self.assertEqual(report.results[0].detail, "no EN version")

    def test_locale_title_names_the_file(self) -> None:
        self.generate([make_quiz(1, "Foo", ja_title="フー")], keep_changes=False, locale="ja")

        self.assertTrue((self.playground / "easy" / "00001-easy-foo.ts").exists())

    def test_unwritable_target_fails_only_that_item(self) -> None:
        self.playground.mkdir()
        (self.playground / "easy").write_text("not a directory", encoding="utf-8")

        report = self.generate(
            [make_quiz(1, "Foo"), make_quiz(2, "Bar", difficulty="medium")],
            keep_changes=True
        )

        self.assertEqual([result.status for result in report.results], [FAILED, UPDATED])
        self.assertTrue((self.playground / "medium" / "00002-medium-bar.ts").exists())
        self.assertEqual(set(snapshot_cache.read_snapshot(self.cache).keys()), {"00002-medium-bar.ts"})

    def test_cache_records_files_written_before_an_error(self) -> None:
        with self.assertRaises(AttributeError):
            self.generate([make_quiz(1, "Foo"), make_quiz(2, "Bar", template=None)], keep_changes=True)

        cache = snapshot_cache.read_snapshot(self.cache)
        self.assertEqual(set(cache.keys()), {"00001-easy-foo.ts"})
        self.assertEqual(cache, snapshot_cache.take_snapshot(self.playground))

    def test_loosely_typed_metadata_is_generated(self) -> None:
        quiz_root = Path(self._temp_dir.name) / "questions"
        corpus = {
            "00001-easy-pick": "title: Pick\ndifficulty: easy\n",
            "00002-easy-game": "title: 2048\ndifficulty: easy\nauthor: Jane\n",
            "00003-easy-omit": "title: Omit\ndifficulty: easy\nauthor:\n  - Ann\n  - Bob\n",
            "00004-easy-readonly": "title: Readonly\ndifficulty: easy\n"
        }
        for name, info in corpus.items():
            quiz_dir = quiz_root / name
            quiz_dir.mkdir(parents=True)
            (quiz_dir / "info.yml").write_text(info, encoding="utf-8")
            (quiz_dir / "README.md").write_text("Solve it.\n", encoding="utf-8")
            (quiz_dir / "template.ts").write_text("type A = any\n", encoding="utf-8")

        quizzes, errors = quiz_loader.load_quizzes(quiz_root)
        report = self.generate(quizzes, keep_changes=False)

        self.assertEqual(len(errors), 1)
        self.assertIn("00003-easy-omit", errors[0])
        self.assertEqual(
            [result.status for result in report.results],
            [UPDATED, UPDATED, SKIPPED, UPDATED]
        )
        code = (self.playground / "easy" / "00002-easy-2048.ts").read_text(encoding="utf-8")
        self.assertIn("2 - 2048", code)
        self.assertIn("by Jane", code)
        self.assertEqual(len(snapshot_cache.read_snapshot(self.cache)), 3)

    def test_question_full_name(self) -> None:
        self.assertEqual(
            generate_playground.get_question_full_name(12, "medium", "Chainable Options"),
            "00012-medium-chainable-options"
        )
        self.assertEqual(
            generate_playground.get_question_full_name(3, "easy", "Omit<T, K>.v2"),
            "00003-easy-omit-v2"
        )


if __name__ == "__main__":
    unittest.main()
