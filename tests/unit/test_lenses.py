from __future__ import annotations

import unittest

from lazyscope.lenses import (
    BUILTIN_LENS_NAMES,
    LensRegistry,
    MembersLens,
    PrettyLens,
    ReprLens,
    SourceLens,
    builtin_lenses,
    highlight_python,
)


class Broken:
    def __repr__(self) -> str:
        raise RuntimeError("repr exploded")


class Sample:
    limit = 3

    def run(self, count: int) -> None:
        pass


class BuiltinLensTests(unittest.TestCase):
    def test_builtin_order_follows_names(self) -> None:
        lenses = builtin_lenses(BUILTIN_LENS_NAMES, no_color=True)

        self.assertEqual([lens.name for lens in lenses], ["Pretty Print", "repr", "str", "Members", "Source"])
        self.assertEqual([lens.name for lens in builtin_lenses(["str", "bogus", "repr"])], ["str", "repr"])

    def test_pretty_without_color_is_pformat(self) -> None:
        self.assertEqual(PrettyLens(no_color=True).apply({"b": [1, 2]}), "{'b': [1, 2]}")

    def test_highlight_adds_escape_sequences(self) -> None:
        text = highlight_python("x = 1")

        self.assertIn("\x1b[", text)
        self.assertFalse(text.endswith("\n"))
        self.assertEqual(highlight_python("x = 1", no_color=True), "x = 1")

    def test_unknown_style_falls_back(self) -> None:
        self.assertIn("\x1b[", highlight_python("x = 1", style="no-such-style"))

    def test_members_lists_data_and_callables(self) -> None:
        text = MembersLens().apply(Sample())

        self.assertIn("  limit: int", text)
        self.assertIn("  run(count: int) -> None", text)
        self.assertIn("ATTRIBUTES (1)", text)
        self.assertIn("METHODS (1)", text)

    def test_source_uses_class_of_instances(self) -> None:
        text = SourceLens(no_color=True).apply(Sample())

        self.assertTrue(text.startswith("# "))
        self.assertIn("class Sample:", text)


class LensRegistryTests(unittest.TestCase):
    def test_index_wraps_modulo_lens_count(self) -> None:
        registry = LensRegistry([ReprLens(), PrettyLens(no_color=True)])

        self.assertEqual(registry.resolve_index(5), 1)
        self.assertEqual(registry.lens_at(-1).name, "Pretty Print")
        self.assertEqual(registry.render(2, "x").text, "'x'")

    def test_failing_lens_yields_traceback_text(self) -> None:
        result = LensRegistry([ReprLens()]).render(0, Broken())

        self.assertFalse(result.ok)
        self.assertIn("Traceback", result.text)
        self.assertIn("RuntimeError: repr exploded", result.text)

    def test_empty_registry_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            LensRegistry([])


if __name__ == "__main__":
    unittest.main()
