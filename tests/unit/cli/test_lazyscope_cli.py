from __future__ import annotations

import contextlib
import io
import json
import logging
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from lazyscope import cli
from lazyscope.runtime.config import Settings


def _run(argv: list[str], settings: Settings | None = None) -> str:
    out = io.StringIO()
    with mock.patch("lazyscope.cli.load_settings", return_value=settings or Settings()):
        with contextlib.redirect_stdout(out):
            cli.main(argv)
    return out.getvalue()


class LoadSeedTests(unittest.TestCase):
    def test_expression_is_evaluated_in_namespace(self) -> None:
        namespace = {"base": 2}

        self.assertEqual(cli.load_seed(None, "[base] * 3", namespace), [2, 2, 2])

    def test_json_file_is_parsed(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "data.json"
            path.write_text(json.dumps({"items": [1, 2]}), encoding="utf-8")

            self.assertEqual(cli.load_seed(str(path), None, {}), {"items": [1, 2]})

    def test_usage_errors_exit_with_message(self) -> None:
        cases = [
            ((None, None), "Provide a JSON PATH"),
            (("a.json", "1"), "Cannot combine"),
            (("/no/such/file.json", None), "Path not found"),
            ((None, "1 +"), "Could not evaluate --expr"),
        ]
        for (path, expr), message in cases:
            with self.subTest(message=message):
                with self.assertRaises(SystemExit) as ctx:
                    cli.load_seed(path, expr, {})
                self.assertIn(message, str(ctx.exception))

    def test_malformed_json_exits(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "bad.json"
            path.write_text("{oops", encoding="utf-8")

            with self.assertRaises(SystemExit) as ctx:
                cli.load_seed(str(path), None, {})

        self.assertIn("Could not read JSON", str(ctx.exception))


class MainTests(unittest.TestCase):
    def test_scripted_run_prints_returned_value(self) -> None:
        self.assertEqual(_run(["--expr", "[10, 20, 30]", "--actions", "l j j ENTER"]), "20\n")

    def test_selection_is_printed_as_list(self) -> None:
        output = _run(["--expr", "{'a': 1, 'b': 2}", "--actions", "l j - j - < ENTER", "--no-color"])

        self.assertEqual(output, "['a', 'b']\n")

    def test_quit_prints_nothing(self) -> None:
        self.assertEqual(_run(["--expr", "1", "--actions", "q"]), "")

    def test_resume_continues_the_first_run(self) -> None:
        output = _run(["--expr", "[1, 2]", "--actions", "l j", "--resume", "j ENTER"])

        self.assertEqual(output, "2\n")

    def test_invalid_settings_exit_with_prefix(self) -> None:
        with self.assertRaises(SystemExit) as ctx:
            _run(["--expr", "1", "--actions", "q"], settings=Settings(alert_seconds=0))

        self.assertTrue(str(ctx.exception).startswith("lazyscope: "))

    def test_log_file_handler_is_attached(self) -> None:
        package_logger = logging.getLogger("lazyscope")
        before = list(package_logger.handlers)
        with tempfile.TemporaryDirectory() as tmp:
            log_path = Path(tmp) / "lazyscope.log"
            try:
                _run(["--expr", "1", "--actions", "q", "--log-file", str(log_path), "--log-level", "DEBUG"])
                added = [handler for handler in package_logger.handlers if handler not in before]

                self.assertEqual(len(added), 1)
                self.assertEqual(package_logger.level, logging.DEBUG)
                self.assertTrue(log_path.exists())
            finally:
                for handler in package_logger.handlers[:]:
                    if handler not in before:
                        package_logger.removeHandler(handler)
                        handler.close()
                package_logger.setLevel(logging.NOTSET)


if __name__ == "__main__":
    unittest.main()
