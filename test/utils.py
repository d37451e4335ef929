"""
Utils module behavioral tests (sentinel, coalescing, naming, wording helpers).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import copy
import unittest
from types import MappingProxyType
from unittest import TestCase

from argpool.utils import Unset, UnsetType, coalesce, mirror, ordinal, pluralize, rename


class TestUnset(TestCase):
    """Behavioral tests for the Unset sentinel."""

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testFalsyAndDistinctFromNone(self):
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)
        self.assertNotEqual(Unset, None)

    def testRepr(self):
        self.assertEqual(repr(Unset), "Unset")

    def testCopies(self):
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)

    def testNotSubclassable(self):
        with self.assertRaises(TypeError):
            class Other(UnsetType):  # NOQA: F-841
                pass

    def testUnion(self):
        self.assertIsInstance(Unset, str | UnsetType)
        self.assertIsInstance(Unset, UnsetType | str)


class TestHelpers(TestCase):
    """Behavioral tests for coalesce/rename/mirror/pluralize/ordinal."""

    def testCoalesce(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 1), 0)

    def testRenameFunctionForm(self):
        def function():
            pass

        self.assertIs(rename(function, "other"), function)
        self.assertEqual(function.__name__, "other")
        self.assertEqual(function.__qualname__, "other")

    def testRenameDecoratorForm(self):
        @rename("other")
        def function():
            pass

        self.assertEqual(function.__name__, "other")

    def testRenameRejectsBadArguments(self):
        with self.assertRaises(TypeError):
            rename()
        with self.assertRaises(TypeError):
            rename(1, "name")
        with self.assertRaises(TypeError):
            rename(1)

    def testMirrorFreezesContainers(self):
        class Holder:
            items = mirror("items")
            mapping = mirror("mapping")
            text = mirror("text")

            def __init__(self):
                self._items = [1, 2]
                self._mapping = {"a": 1}
                self._text = "abc"

        holder = Holder()
        self.assertEqual(holder.items, (1, 2))
        self.assertIsInstance(holder.mapping, MappingProxyType)
        self.assertEqual(holder.text, "abc")
        with self.assertRaises(AttributeError):
            holder.items = ()

    def testPluralize(self):
        self.assertEqual(pluralize("argument"), "arguments")
        self.assertEqual(pluralize("required argument"), "required arguments")
        self.assertEqual(pluralize("Entry"), "Entries")
        self.assertEqual(pluralize("match"), "matches")

    def testOrdinal(self):
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(3), "third")
        self.assertEqual(ordinal(10), "tenth")
        self.assertEqual(ordinal(11), "11th")
        self.assertEqual(ordinal(21), "21st")
        self.assertEqual(ordinal(22), "22nd")
        self.assertEqual(ordinal(23), "23rd")
        self.assertEqual(ordinal(112), "112th")


if __name__ == "__main__":
    unittest.main()
