"""
Faults module behavioral tests (codes, options, rendering, triggering).

Scope
- Validate fault codes and host relabeling through __main__.__codes__.
- Validate message/options handling and copy.replace() support.
- Validate rich rendering in plain and fancy modes.
- Validate trigger() for exceptions and warnings, in library and shell modes.

Conventions
- Test method names follow CamelCase per project convention.
- Rendering is captured with a recording Console, never the real stderr.
"""

from __future__ import annotations

import copy
import sys
import unittest
from unittest import TestCase, mock

from rich.console import Console

import argpool.faults
from argpool.faults import (
    FaultCode,
    ParsingException,
    ParsingWarning,
    LexicalError,
    MalformedTokenError,
    UnknownOptionError,
    ConversionError,
    EmptyInlineValueWarning,
    getdoc,
    trigger,
)


def _render(renderable, **options):
    console = Console(record=True, color_system=None, width=100, **options)
    console.print(renderable)
    return console.export_text()


class TestFaultCode(TestCase):
    """Behavioral tests for FaultCode."""

    def testCodesAreUnique(self):
        self.assertEqual(len({code.value for code in FaultCode}), len(FaultCode))

    def testNormalize(self):
        self.assertEqual(FaultCode.MALFORMED_TOKEN.normalize(), "21101")

    def testNormalizeWithHostCodes(self):
        main = sys.modules["__main__"]
        with mock.patch.object(main, "__codes__", {FaultCode.MALFORMED_TOKEN: "E-TOKEN"}, create=True):
            self.assertEqual(FaultCode.MALFORMED_TOKEN.normalize(), "E-TOKEN")

    def testGetdoc(self):
        self.assertIsNone(getdoc(FaultCode.UNKNOWN_OPTION))
        main = sys.modules["__main__"]
        with mock.patch.object(main, "__docs__", {FaultCode.UNKNOWN_OPTION: "see --help"}, create=True):
            self.assertEqual(getdoc(FaultCode.UNKNOWN_OPTION), "see --help")

    def testGetdocRejectsNonCodes(self):
        with self.assertRaises(TypeError):
            getdoc(21101)


class TestFaults(TestCase):
    """Behavioral tests for fault state and copy.replace()."""

    def testDefaultsFromClass(self):
        fault = MalformedTokenError()
        self.assertEqual(fault.message, "malformed option token")
        self.assertIs(fault.code, FaultCode.MALFORMED_TOKEN)
        self.assertIsNone(fault.hint)
        self.assertIsNone(fault.index)

    def testOptions(self):
        fault = UnknownOptionError("unknown option '--x'", hint="try --y", index=3, input="--x")
        self.assertEqual(str(fault), "unknown option '--x'")
        self.assertEqual(fault.hint, "try --y")
        self.assertEqual(fault.index, 3)
        self.assertEqual(fault.input, "--x")
        with self.assertRaises(TypeError):
            fault.options["hint"] = "other"  # type: ignore[index]

    def testTitleAndCodeOverrides(self):
        fault = LexicalError("bad", title="custom title", code=FaultCode.UNTERMINATED_STRING)
        self.assertEqual(fault.title, "custom title")
        self.assertIs(fault.code, FaultCode.UNTERMINATED_STRING)

    def testMessageMustBeString(self):
        with self.assertRaises(TypeError):
            ParsingException(1)  # type: ignore[arg-type]

    def testReplaceMergesOptions(self):
        fault = ConversionError("bad value", input="x")
        replica = copy.replace(fault, index=2)
        self.assertIsInstance(replica, ConversionError)
        self.assertEqual(replica.message, "bad value")
        self.assertEqual(replica.input, "x")
        self.assertEqual(replica.index, 2)
        self.assertIsNone(fault.index)

    def testReplaceKeepsCause(self):
        try:
            try:
                int("x")
            except ValueError as exception:
                raise ConversionError("bad value") from exception
        except ConversionError as fault:
            replica = copy.replace(fault, shell=False)
        self.assertIsInstance(replica.__cause__, ValueError)

    def testHierarchy(self):
        self.assertTrue(issubclass(MalformedTokenError, LexicalError))
        self.assertTrue(issubclass(LexicalError, ParsingException))
        self.assertTrue(issubclass(EmptyInlineValueWarning, ParsingWarning))
        self.assertTrue(issubclass(ParsingWarning, Warning))


class TestRendering(TestCase):
    """Behavioral tests for rich rendering."""

    def testPlainRendering(self):
        text = _render(UnknownOptionError("unknown option '--x' at first position", hint="did you mean '--y'?"))
        self.assertIn("[ argpool — 21201 | Unknown Option ]", text)
        self.assertIn("unknown option '--x' at first position", text)
        self.assertIn("→ did you mean '--y'?", text)

    def testProgramName(self):
        main = sys.modules["__main__"]
        with mock.patch.object(main, "__prog__", "tool", create=True):
            text = _render(MalformedTokenError("bad"))
        self.assertIn("[ tool — 21101 |", text)

    def testFancyRendering(self):
        text = _render(MalformedTokenError("bad token", fancy=True))
        self.assertIn("Malformed Option Token", text)
        self.assertIn("bad token", text)
        self.assertIn("╭", text)

    def testColorlessRendering(self):
        text = _render(MalformedTokenError("bad token", colorful=False))
        self.assertIn("bad token", text)

    def testWarningRendering(self):
        text = _render(EmptyInlineValueWarning("empty inline value for '--x' at first position"))
        self.assertIn("22101 | Empty Inline Value", text)


class TestTrigger(TestCase):
    """Behavioral tests for trigger()."""

    def testRaisesWithOptions(self):
        with self.assertRaises(MalformedTokenError) as context:
            trigger(MalformedTokenError("bad"), hint="fix it")
        self.assertEqual(context.exception.hint, "fix it")

    def testWarns(self):
        with self.assertWarns(EmptyInlineValueWarning):
            trigger(EmptyInlineValueWarning("empty"))

    def testShellExits(self):
        console = Console(record=True, color_system=None, width=100)
        with mock.patch.object(argpool.faults, "console", console):
            with self.assertRaises(SystemExit) as context:
                trigger(MalformedTokenError("bad token"), shell=True)
        self.assertEqual(context.exception.code, 1)
        self.assertIn("bad token", console.export_text())

    def testShellWarningPrints(self):
        console = Console(record=True, color_system=None, width=100)
        with mock.patch.object(argpool.faults, "console", console):
            trigger(EmptyInlineValueWarning("empty"), shell=True)
        self.assertIn("empty", console.export_text())

    def testRejectsNonFaults(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("plain"))


if __name__ == "__main__":
    unittest.main()
