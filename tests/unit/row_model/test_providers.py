from __future__ import annotations

import itertools
import unittest

from lazyscope.row_model.providers import (
    DefaultSmartEnumerableProvider,
    InstanceAttributeProvider,
    NamespaceHandleSaver,
    ProviderNotApplicable,
    ProviderSet,
    PythonExpressionProvider,
    RelationshipPolicy,
)


class Slotted:
    __slots__ = ("left", "right")

    def __init__(self) -> None:
        self.left = 1


class Mixed(Slotted):
    def __init__(self) -> None:
        super().__init__()
        self.extra = "x"


class AttributeProviderTests(unittest.TestCase):
    def test_instance_dict_entries_in_insertion_order(self) -> None:
        class Point:
            def __init__(self) -> None:
                self.x = 1
                self.y = 2

        self.assertEqual(list(InstanceAttributeProvider().expand(Point())), [("x", 1), ("y", 2)])

    def test_unset_slots_are_skipped(self) -> None:
        self.assertEqual(list(InstanceAttributeProvider().expand(Slotted())), [("left", 1)])

    def test_dict_entries_come_before_inherited_slots(self) -> None:
        self.assertEqual(
            list(InstanceAttributeProvider().expand(Mixed())),
            [("extra", "x"), ("left", 1)],
        )

    def test_builtins_without_attributes_yield_nothing(self) -> None:
        self.assertEqual(list(InstanceAttributeProvider().expand(42)), [])


class SmartEnumerableProviderTests(unittest.TestCase):
    def test_mapping_is_keyed(self) -> None:
        result = DefaultSmartEnumerableProvider().expand({"a": 1, "b": 2})

        self.assertTrue(result.keyed)
        self.assertEqual(list(result.items), [("a", 1), ("b", 2)])

    def test_iterables_are_keyless_and_lazy(self) -> None:
        consumed = []

        class Numbers:
            def __iter__(self):
                for n in range(3):
                    consumed.append(n)
                    yield n

        result = DefaultSmartEnumerableProvider().expand(Numbers())

        self.assertFalse(result.keyed)
        self.assertEqual(consumed, [])
        self.assertEqual(list(result.items), [0, 1, 2])

    def test_one_shot_iterators_are_not_applicable(self) -> None:
        provider = DefaultSmartEnumerableProvider()
        numbers = (n for n in range(3))
        for subject in (numbers, itertools.count(), iter([1, 2])):
            with self.subTest(subject=subject):
                with self.assertRaises(ProviderNotApplicable):
                    provider.expand(subject)

        self.assertEqual(list(numbers), [0, 1, 2])

    def test_text_and_scalars_are_not_applicable(self) -> None:
        provider = DefaultSmartEnumerableProvider()
        for subject in ("text", b"bytes", 7, None):
            with self.subTest(subject=subject):
                with self.assertRaises(ProviderNotApplicable):
                    provider.expand(subject)

    def test_not_applicable_is_a_type_error(self) -> None:
        self.assertTrue(issubclass(ProviderNotApplicable, TypeError))


class ExpressionProviderTests(unittest.TestCase):
    def test_subject_is_bound_to_underscore(self) -> None:
        self.assertEqual(PythonExpressionProvider().evaluate([1, 2, 3], "len(_) * 2"), 6)

    def test_leading_dot_applies_to_subject(self) -> None:
        self.assertEqual(PythonExpressionProvider().evaluate({"a": 1}, " .get('a')"), 1)

    def test_namespace_is_visible_to_expressions(self) -> None:
        provider = PythonExpressionProvider({"offset": 10})

        self.assertEqual(provider.evaluate(5, "_ + offset"), 15)

    def test_subject_is_visible_in_nested_scopes(self) -> None:
        provider = PythonExpressionProvider({})

        self.assertEqual(provider.evaluate({"a": 1, "b": 2}, "sum(_[k] for k in _)"), 3)
        self.assertEqual(provider.evaluate([1, 2], "[x * len(_) for x in _]"), [2, 4])
        self.assertEqual(provider.evaluate(3, "(lambda n: n + _)(4)"), 7)

    def test_underscore_binding_does_not_leak(self) -> None:
        namespace: dict = {}
        PythonExpressionProvider(namespace).evaluate(1, "_ + 1")
        self.assertNotIn("_", namespace)

        namespace = {"_": "previous"}
        PythonExpressionProvider(namespace).evaluate(1, "_ + 1")
        self.assertEqual(namespace["_"], "previous")

    def test_underscore_is_restored_after_errors(self) -> None:
        namespace = {"_": "previous"}
        with self.assertRaises(ZeroDivisionError):
            PythonExpressionProvider(namespace).evaluate(1, "_ / 0")
        self.assertEqual(namespace["_"], "previous")

    def test_expressions_can_mutate_the_namespace(self) -> None:
        namespace = {"seen": []}
        PythonExpressionProvider(namespace).evaluate(5, "seen.append(_)")

        self.assertEqual(namespace["seen"], [5])

    def test_errors_propagate(self) -> None:
        with self.assertRaises(ZeroDivisionError):
            PythonExpressionProvider().evaluate(1, "_ / 0")
        with self.assertRaises(SyntaxError):
            PythonExpressionProvider().evaluate(1, "_ +")


class HandleSaverTests(unittest.TestCase):
    def test_single_subject_is_saved_bare_and_many_as_list(self) -> None:
        namespace: dict = {}
        saver = NamespaceHandleSaver(namespace)

        self.assertTrue(saver.save([1], "one").ok)
        self.assertTrue(saver.save([1, 2], "both").ok)
        self.assertEqual(namespace, {"one": 1, "both": [1, 2]})

    def test_invalid_or_existing_names_are_refused(self) -> None:
        namespace = {"taken": 0}
        saver = NamespaceHandleSaver(namespace)

        for name in ("taken", "class", "2fast", "has space"):
            with self.subTest(name=name):
                self.assertFalse(saver.save([1], name).ok)
        self.assertEqual(namespace, {"taken": 0})


class ProviderSetTests(unittest.TestCase):
    def test_for_namespace_shares_one_namespace(self) -> None:
        namespace: dict = {}
        providers = ProviderSet.for_namespace(namespace, RelationshipPolicy(include_empty=True))

        providers.handles.save(["saved"], "handle")

        self.assertEqual(providers.expressions.evaluate(None, "handle"), "saved")
        self.assertTrue(providers.relationship_policy.include_empty)
        self.assertFalse(providers.relationships.available)


if __name__ == "__main__":
    unittest.main()
