from __future__ import annotations

import json
import os
import tempfile
import threading
import unittest
from pathlib import Path
from unittest.mock import patch

from globcrawl import GlobConfigError, GlobOptions, glob, glob_sync
from globcrawl.fs import walker as walker_module
from globcrawl.runtime_logging import configure_runtime_logging


def build_fixture(root: Path) -> None:
    for relative in (
        "a/a.txt",
        "a/b.txt",
        "b/a.txt",
        "b/b.txt",
        ".a/a/a.txt",
        ".[a]/a.txt",
        ".deep/a/a/a.txt",
    ):
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(relative, encoding="utf-8")

    if hasattr(os, "symlink"):
        links = root / ".symlink"
        links.mkdir()
        os.symlink("../a/a.txt", links / "file")
        os.symlink("../a", links / "dir")
        os.symlink("..", links / ".recursive")


class _FixtureMixin:
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.cwd = os.path.abspath(self._tmp.name)
        build_fixture(Path(self.cwd))

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def sub(self, *parts: str) -> str:
        return os.path.join(self.cwd, *parts)


class GlobScenarioTests(_FixtureMixin, unittest.TestCase):
    def test_directory_expansion(self) -> None:
        self.assertEqual(sorted(glob_sync("a", cwd=self.cwd)), ["a/a.txt", "a/b.txt"])

    def test_negation(self) -> None:
        self.assertEqual(sorted(glob_sync(["**/a.txt", "!b/a.txt"], cwd=self.cwd)), ["a/a.txt"])

    def test_only_directories(self) -> None:
        self.assertEqual(glob_sync("a", cwd=self.cwd, only_directories=True), ["a/"])

    def test_parent_directory_root(self) -> None:
        files = glob_sync("../b/*.txt", cwd=self.sub("a"))
        self.assertEqual(sorted(files), ["../b/a.txt", "../b/b.txt"])

    def test_empty_pattern_list_skips_the_walk(self) -> None:
        with patch("globcrawl.crawler.walk") as walk_mock:
            self.assertEqual(glob_sync([], cwd=self.cwd), [])
        walk_mock.assert_not_called()

    def test_deep_zero(self) -> None:
        self.assertEqual(sorted(glob_sync("*.txt", cwd=self.sub("a"), deep=0)), ["a.txt", "b.txt"])
        self.assertEqual(glob_sync("a/*.txt", cwd=self.cwd, deep=0), [])


class GlobOptionTests(_FixtureMixin, unittest.TestCase):
    def test_empty_string_matches_nothing(self) -> None:
        self.assertEqual(glob_sync("", cwd=self.cwd, expand_directories=False), [])

    def test_default_patterns(self) -> None:
        expected = ["a/a.txt", "a/b.txt", "b/a.txt", "b/b.txt"]
        self.assertEqual(sorted(glob_sync(cwd=self.cwd)), expected)
        self.assertEqual(sorted(glob_sync("**", cwd=self.cwd)), expected)
        self.assertEqual(sorted(glob_sync("**/*", cwd=self.cwd)), expected)

    def test_patterns_inside_options(self) -> None:
        self.assertEqual(sorted(glob_sync(patterns=["a/*.txt"], cwd=self.cwd)), ["a/a.txt", "a/b.txt"])
        self.assertEqual(
            sorted(glob_sync({"patterns": "b/*.txt", "cwd": self.cwd})),
            ["b/a.txt", "b/b.txt"],
        )
        options = GlobOptions(cwd=self.cwd, patterns=["a/a.txt"], absolute=True)
        self.assertEqual(glob_sync(options), [f"{self.cwd}/a/a.txt"])

    def test_conflicting_pattern_sources(self) -> None:
        with self.assertRaises(GlobConfigError):
            glob_sync("a/*.txt", patterns="whoops!", cwd=self.cwd)

    def test_invalid_options(self) -> None:
        with self.assertRaises(GlobConfigError):
            glob_sync("a", cwd=self.cwd, bogus=True)
        with self.assertRaises(ValueError):
            glob_sync("a", cwd=self.cwd, deep="very")

    def test_no_directory_expansion(self) -> None:
        self.assertEqual(glob_sync("a", cwd=self.cwd, expand_directories=False), [])
        self.assertEqual(glob_sync("a/a.txt", cwd=self.cwd, expand_directories=False), ["a/a.txt"])
        self.assertEqual(glob_sync("a/a.txt", cwd=self.cwd), ["a/a.txt"])

    def test_ignore_option(self) -> None:
        self.assertEqual(glob_sync("**/a.txt", cwd=self.cwd, ignore=["b/a.txt"]), ["a/a.txt"])
        self.assertEqual(glob_sync("**/a.txt", cwd=self.cwd, ignore="b/a.txt"), ["a/a.txt"])
        self.assertEqual(sorted(glob_sync("**/a.txt", cwd=self.cwd, ignore="")), ["a/a.txt", "b/a.txt"])

    def test_ignored_directories_are_not_entered(self) -> None:
        with patch.object(walker_module, "_read_dir", wraps=walker_module._read_dir) as read:
            glob_sync("**/*.txt", cwd=self.cwd, ignore=["b"])
        read_paths = [call.args[0].path for call in read.call_args_list]
        self.assertFalse(any(path.rstrip("/").endswith("/b") for path in read_paths))

    def test_unrelated_subtrees_are_not_entered(self) -> None:
        with patch.object(walker_module, "_read_dir", wraps=walker_module._read_dir) as read:
            files = glob_sync("a/*.txt", cwd=self.cwd, expand_directories=False)
        self.assertEqual(sorted(files), ["a/a.txt", "a/b.txt"])
        read_paths = [call.args[0].path for call in read.call_args_list]
        self.assertEqual(read_paths, [f"{self.sub('a')}/"])

    def test_case_sensitivity(self) -> None:
        self.assertEqual(sorted(glob_sync("**/A.TXT", cwd=self.cwd, case_sensitive_match=False)), ["a/a.txt", "b/a.txt"])
        self.assertEqual(glob_sync("**/A.TXT", cwd=self.cwd), [])
        self.assertEqual(
            glob_sync("**/A.TXT", cwd=self.cwd, ignore="B/**", caseSensitiveMatch=False),
            ["a/a.txt"],
        )

    def test_only_files_and_directories(self) -> None:
        self.assertEqual(sorted(glob_sync("a", cwd=self.cwd, only_files=False)), ["a/", "a/a.txt", "a/b.txt"])
        self.assertEqual(glob_sync("a", cwd=self.cwd, only_directories=True, only_files=True), ["a/"])
        self.assertEqual(glob_sync("a", cwd=self.cwd, only_files=False, expand_directories=False), ["a/"])
        self.assertEqual(sorted(glob_sync(cwd=self.cwd, only_directories=True)), ["a/", "b/"])

    def test_cwd_itself(self) -> None:
        self.assertEqual(glob_sync(".", cwd=self.cwd, expand_directories=False, only_directories=True), ["."])
        self.assertEqual(
            glob_sync(".", cwd=self.cwd, absolute=True, expand_directories=False, only_directories=True),
            [f"{self.cwd}/"],
        )
        self.assertEqual(
            sorted(glob_sync([".", ".a/*"], cwd=self.cwd, only_directories=True, expand_directories=False)),
            [".", ".a/a/"],
        )

    def test_signal(self) -> None:
        signal = threading.Event()
        signal.set()
        self.assertEqual(glob_sync("**", cwd=self.cwd, signal=signal, expand_directories=False), [])

    def test_large_brace_range(self) -> None:
        Path(self.sub("a", "f4321.txt")).write_text("f", encoding="utf-8")
        self.assertEqual(glob_sync("a/f{1..5000}.txt", cwd=self.cwd), ["a/f4321.txt"])
        self.assertEqual(glob_sync("f{1..5000}.txt", cwd=self.cwd), [])

    def test_brace_expansion_and_extglob(self) -> None:
        self.assertEqual(glob_sync("a/{a,b}.txt", cwd=self.cwd), ["a/a.txt", "a/b.txt"])
        self.assertEqual(glob_sync("a/{a,b}.txt", cwd=self.cwd, brace_expansion=False), [])
        self.assertEqual(glob_sync("a/+(a|b).txt", cwd=self.cwd), ["a/a.txt", "a/b.txt"])
        self.assertEqual(glob_sync("a/+(a|b).txt", cwd=self.cwd, extglob=False), [])
        self.assertEqual(sorted(glob_sync("{.a/a,a}/a.txt", cwd=self.cwd)), [".a/a/a.txt", "a/a.txt"])

    def test_bracket_expressions(self) -> None:
        self.assertEqual(
            sorted(glob_sync("**/[a-c].txt", cwd=self.cwd)),
            ["a/a.txt", "a/b.txt", "b/a.txt", "b/b.txt"],
        )
        self.assertEqual(sorted(glob_sync("**/[!a].*", cwd=self.cwd)), ["a/b.txt", "b/b.txt"])

    def test_dot_and_common_path(self) -> None:
        self.assertEqual(glob_sync("a/a.txt", cwd=self.sub(".a"), dot=True), ["a/a.txt"])
        self.assertEqual(
            sorted(glob_sync([".deep/a/a/*.txt", "a/a.*"], cwd=self.cwd)),
            [".deep/a/a/a.txt", "a/a.txt"],
        )

    def test_deep(self) -> None:
        self.assertEqual(glob_sync(".deep/a/a/*.txt", cwd=self.cwd, deep=3), [".deep/a/a/a.txt"])
        self.assertEqual(glob_sync(".deep/a/a/*.txt", cwd=self.cwd, deep=2), [])
        self.assertEqual(glob_sync(".deep/a/a/*.txt", cwd=self.cwd, deep=1), [])

    def test_fractional_deep_rounds_half_up(self) -> None:
        expected = ["a/a.txt", "a/b.txt", "b/a.txt", "b/b.txt"]
        self.assertEqual(sorted(glob_sync("**/*.txt", cwd=self.cwd, deep=0.5)), expected)
        self.assertEqual(glob_sync("**/*.txt", cwd=self.cwd, deep=0.4), [])
        self.assertIn(".a/a/a.txt", glob_sync("**/*.txt", cwd=self.cwd, deep=1.5, dot=True))
        self.assertNotIn(".a/a/a.txt", glob_sync("**/*.txt", cwd=self.cwd, deep=1.4, dot=True))

    def test_deep_with_parent_patterns(self) -> None:
        cwd = self.sub("a")
        patterns = ["../.deep/a/a/*.txt", "a.txt"]
        self.assertEqual(sorted(glob_sync(patterns, cwd=cwd, deep=3)), ["../.deep/a/a/a.txt", "a.txt"])
        self.assertEqual(sorted(glob_sync(patterns, cwd=cwd, deep=2)), ["../.deep/a/a/a.txt", "a.txt"])
        self.assertEqual(glob_sync(patterns, cwd=cwd, deep=1), ["a.txt"])

    def test_globstar_disabled(self) -> None:
        self.assertEqual(glob_sync(".deep/**/*.txt", cwd=self.cwd, expand_directories=False, globstar=False), [])
        self.assertEqual(glob_sync(".deep", cwd=self.cwd, globstar=False), [])

    def test_absolute_output(self) -> None:
        self.assertEqual(glob_sync("a/a.txt", cwd=self.cwd, absolute=True), [f"{self.cwd}/a/a.txt"])
        self.assertEqual(
            glob_sync("a/a.txt", cwd=self.sub(".a"), absolute=True, dot=True),
            [f"{self.cwd}/.a/a/a.txt"],
        )
        self.assertEqual(
            sorted(glob_sync("a/**.txt", cwd=self.cwd, absolute=True, expand_directories=False)),
            [f"{self.cwd}/a/a.txt", f"{self.cwd}/a/b.txt"],
        )

    def test_absolute_patterns(self) -> None:
        self.assertEqual(glob_sync(f"{self.cwd}/a/a.txt", cwd=self.cwd), ["a/a.txt"])
        self.assertEqual(
            sorted(glob_sync([f"{self.cwd}/a/a.txt", f"{self.cwd}/b/a.txt"], cwd=self.sub("a"))),
            ["../b/a.txt", "a.txt"],
        )
        self.assertEqual(
            glob_sync(f"{self.cwd}/.\\[a\\]/a.txt", cwd=self.sub(".[a]"), absolute=True),
            [f"{self.cwd}/.[a]/a.txt"],
        )

    def test_negated_absolute_patterns(self) -> None:
        self.assertEqual(
            sorted(glob_sync([f"{self.cwd}/**/*.txt", f"!{self.cwd}/**/b.txt"], cwd=self.cwd)),
            ["a/a.txt", "b/a.txt"],
        )

    def test_parent_directory_variants(self) -> None:
        cwd = self.sub("a")
        self.assertEqual(
            glob_sync("../.a/*", cwd=cwd, only_directories=True, expand_directories=False),
            ["../.a/a/"],
        )
        self.assertEqual(
            sorted(glob_sync(["../b/*.txt", "a.txt"], cwd=cwd)),
            ["../b/a.txt", "../b/b.txt", "a.txt"],
        )
        self.assertEqual(
            sorted(glob_sync("../b/*.txt", cwd=cwd, absolute=True)),
            [f"{self.cwd}/b/a.txt", f"{self.cwd}/b/b.txt"],
        )

    def test_relative_self_references(self) -> None:
        cwd = self.sub("a")
        self.assertEqual(sorted(glob_sync("../a/*", cwd=cwd, expand_directories=False)), ["a.txt", "b.txt"])
        self.assertEqual(
            glob_sync("../../.a/a/*", cwd=self.sub(".a", "a"), expand_directories=False),
            ["a.txt"],
        )
        self.assertEqual(glob_sync("../a", cwd=cwd, only_directories=True, expand_directories=False), ["."])
        self.assertEqual(
            sorted(glob_sync(["../.a", "a/a.txt"], cwd=self.sub(".a"), only_files=False, expand_directories=False)),
            [".", "a/a.txt"],
        )

    def test_pattern_spellings_agree(self) -> None:
        expected = glob_sync("a", cwd=self.cwd)
        self.assertEqual(glob_sync("a/", cwd=self.cwd), expected)
        self.assertEqual(glob_sync("./a", cwd=self.cwd), expected)

    def test_negated_entries_in_ignore_are_skipped(self) -> None:
        self.assertEqual(
            sorted(glob_sync("**/*", cwd=self.cwd, ignore=["**/b.txt", "!a/b.txt"])),
            ["a/a.txt", "b/a.txt"],
        )
        self.assertEqual(
            sorted(glob_sync(["**/*", "!**/b.txt", "!!a/b.txt"], cwd=self.cwd)),
            ["a/a.txt", "b/a.txt"],
        )

    def test_double_negation_matches_a_literal_bang(self) -> None:
        Path(self.sub("!bang.txt")).write_text("!", encoding="utf-8")
        self.assertEqual(glob_sync("!!bang.txt", cwd=self.cwd), ["!bang.txt"])

    def test_results_are_unique(self) -> None:
        files = glob_sync(["**/*.txt", "a/**", "*/a.txt"], cwd=self.cwd, dot=True)
        self.assertEqual(len(files), len(set(files)))

    def test_sort_option(self) -> None:
        self.assertEqual(
            glob_sync(["b/*.txt", "a/*.txt"], cwd=self.cwd, sort="pattern"),
            ["b/a.txt", "b/b.txt", "a/a.txt", "a/b.txt"],
        )
        self.assertEqual(
            glob_sync("**/*.txt", cwd=self.cwd, sort="desc"),
            ["b/b.txt", "b/a.txt", "a/b.txt", "a/a.txt"],
        )


@unittest.skipUnless(hasattr(os, "symlink"), "symlinks unavailable")
class GlobSymlinkTests(_FixtureMixin, unittest.TestCase):
    def test_symlinks(self) -> None:
        self.assertEqual(
            sorted(glob_sync(".symlink/**", cwd=self.cwd)),
            [".symlink/dir/a.txt", ".symlink/dir/b.txt", ".symlink/file"],
        )
        self.assertEqual(
            sorted(glob_sync(".symlink/**", cwd=self.cwd, absolute=True)),
            [
                f"{self.cwd}/.symlink/dir/a.txt",
                f"{self.cwd}/.symlink/dir/b.txt",
                f"{self.cwd}/.symlink/file",
            ],
        )

    def test_recursive_symlinks(self) -> None:
        files = glob_sync([".symlink/.recursive/**", "!.symlink/.recursive/**/.{a,deep}"], cwd=self.cwd, dot=True)
        self.assertEqual(
            sorted(files),
            [
                ".symlink/.recursive/.[a]/a.txt",
                ".symlink/.recursive/.symlink/file",
                ".symlink/.recursive/a/a.txt",
                ".symlink/.recursive/a/b.txt",
                ".symlink/.recursive/b/a.txt",
                ".symlink/.recursive/b/b.txt",
            ],
        )

    def test_symlinks_excluded_when_not_followed(self) -> None:
        files = glob_sync(
            ".symlink/**",
            cwd=self.cwd,
            dot=True,
            follow_symbolic_links=False,
            expand_directories=False,
        )
        self.assertEqual(files, [])

    def test_linked_directory_survives_a_broader_root(self) -> None:
        links = Path(self.sub("links"))
        links.mkdir()
        os.symlink("../a", links / "dir")

        narrow = glob_sync("links/**", cwd=self.cwd)
        broad = glob_sync("**", cwd=self.cwd)
        self.assertEqual(sorted(narrow), ["links/dir/a.txt", "links/dir/b.txt"])
        for path in narrow:
            with self.subTest(path=path):
                self.assertIn(path, broad)
        self.assertIn("a/a.txt", broad)


class GlobDebugTests(_FixtureMixin, unittest.TestCase):
    def test_debug_events_reach_the_runtime_log(self) -> None:
        log_path = Path(self.cwd) / "runtime.jsonl"
        with patch("globcrawl.runtime_logging._runtime_logger", None):
            configure_runtime_logging(level="warning", log_file=log_path)
            files = glob_sync("a", cwd=self.cwd, debug=True)

        self.assertEqual(sorted(files), ["a/a.txt", "a/b.txt"])
        events = [json.loads(line)["event"] for line in log_path.read_text(encoding="utf-8").splitlines()]
        for event in ("glob.options", "glob.patterns", "glob.properties", "crawl.matched", "crawl.crawling", "crawl.skipped"):
            self.assertIn(event, events)

    def test_debug_from_environment(self) -> None:
        with patch.dict(os.environ, {"GLOBCRAWL_DEBUG": "1"}):
            self.assertTrue(GlobOptions(cwd=self.cwd).debug)
        with patch.dict(os.environ, {"GLOBCRAWL_DEBUG": ""}):
            self.assertFalse(GlobOptions(cwd=self.cwd).debug)


class AsyncGlobTests(_FixtureMixin, unittest.IsolatedAsyncioTestCase):
    async def test_async_glob(self) -> None:
        files = await glob("a/*.txt", cwd=self.cwd)
        self.assertEqual(sorted(files), ["a/a.txt", "a/b.txt"])

    async def test_async_empty_list(self) -> None:
        self.assertEqual(await glob([], cwd=self.cwd), [])

    async def test_async_conflict_raises_on_await(self) -> None:
        pending = glob("a/*.txt", patterns="whoops!", cwd=self.cwd)
        with self.assertRaises(GlobConfigError):
            await pending

    async def test_async_parent_root(self) -> None:
        files = await glob("../b/*.txt", cwd=self.sub("a"))
        self.assertEqual(sorted(files), ["../b/a.txt", "../b/b.txt"])


if __name__ == "__main__":
    unittest.main()
