"""
Tests for the internal helpers.

This module verifies:
- Unset singleton identity, falsy semantics and finality.
- coalesce() replacing only Unset.
- rename() in both its direct and decorator forms.
- fluent() steps on an immutable builder.
- Representable repr/rich-repr rendering.
"""
import copy
import pickle
import unittest
from threading import Lock, Thread
from unittest import TestCase

from argstack.utils import *


class UnsetTest(TestCase):
    """
    Test suite for the `Unset` sentinel.
    """

    def testSingleton(self) -> None:
        """
        The constructor returns the exported instance on every call.
        """
        self.assertIs(UnsetType(), Unset)
        self.assertIs(UnsetType(), UnsetType())

    def testFalsyButDistinct(self) -> None:
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)
        self.assertNotEqual(Unset, 0)
        self.assertNotEqual(Unset, "")

    def testRepr(self) -> None:
        self.assertEqual(repr(Unset), "Unset")

    def testUnionWithTypes(self) -> None:
        """
        `str | Unset` builds a union usable by isinstance().
        """
        self.assertTrue(isinstance("x", str | Unset))
        self.assertTrue(isinstance(Unset, str | Unset))
        self.assertFalse(isinstance(1, str | Unset))

    def testCopyPreservesIdentity(self) -> None:
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testThreadSafety(self) -> None:
        """
        Concurrent constructions all observe the same instance.
        """
        seen, lock = set(), Lock()

        def construct():
            instance = UnsetType()
            with lock:
                seen.add(id(instance))

        threads = [Thread(target=construct) for _ in range(16)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        self.assertEqual(seen, {id(Unset)})

    def testFinal(self) -> None:
        with self.assertRaises(TypeError):
            type("Subclass", (UnsetType,), {})


class CoalesceTest(TestCase):

    def testReplacesOnlyUnset(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))
        for value in (None, 0, "", [], False):
            with self.subTest(value=value):
                self.assertIs(coalesce(value, "fallback"), value)


class RenameTest(TestCase):

    def testDirectForm(self) -> None:
        function = rename(lambda: None, "named")
        self.assertEqual(function.__name__, "named")
        self.assertEqual(function.__qualname__, "named")

    def testDecoratorForm(self) -> None:
        @rename("named")
        def function():
            pass

        self.assertEqual(function.__name__, "named")

    def testRejectsBadArguments(self) -> None:
        with self.assertRaises(TypeError):
            rename(1, "named")
        with self.assertRaises(TypeError):
            rename(lambda: None, 1)
        with self.assertRaises(TypeError):
            rename(1)
        with self.assertRaises(TypeError):
            rename()
        with self.assertRaises(TypeError):
            rename(print, "named")


class FluentTest(TestCase):
    """
    fluent() steps on a minimal immutable builder.
    """

    class Builder:
        __slots__ = ("_label", "_tags")

        def __init__(self, label=Unset, tags=()):
            self._label = label
            self._tags = tuple(tags)

        def __replace__(self, **changes):
            return type(self)(**{"label": self._label, "tags": self._tags} | changes)

        label = fluent("label")
        tag = rename(fluent("tags", extend=True), "tag")

    def testStepReturnsNewBuilder(self) -> None:
        base = self.Builder()
        labelled = base.label("x")
        self.assertIsNot(base, labelled)
        self.assertIs(base._label, Unset)
        self.assertEqual(labelled._label, "x")

    def testExtendAccumulates(self) -> None:
        builder = self.Builder().tag("a").tag("b", "c")
        self.assertEqual(builder._tags, ("a", "b", "c"))

    def testSingleValueStep(self) -> None:
        with self.assertRaises(TypeError):
            self.Builder().label()
        with self.assertRaises(TypeError):
            self.Builder().label("a", "b")

    def testStepNames(self) -> None:
        self.assertEqual(self.Builder.label.__name__, "label")
        self.assertEqual(self.Builder.tag.__name__, "tag")

    def testRejectsNonStringField(self) -> None:
        with self.assertRaises(TypeError):
            fluent(1)


class RepresentableTest(TestCase):

    class PairOfThings(Representable):
        __slots__ = ("left", "right")
        __introspectable__ = ("left", "right")

        def __init__(self, left, right):
            self.left = left
            self.right = right

    def testTypename(self) -> None:
        self.assertEqual(self.PairOfThings.__typename__, "pair-of-things")

    def testRepr(self) -> None:
        self.assertEqual(repr(self.PairOfThings(1, "b")), "pair-of-things(left=1, right='b')")

    def testRichRepr(self) -> None:
        self.assertEqual(list(self.PairOfThings(1, "b").__rich_repr__()), [("left", 1), ("right", "b")])


if __name__ == "__main__":
    unittest.main()
