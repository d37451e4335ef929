"""
Arguments module behavioral tests.

Scope
- Validate declarations (Argument, Option): construction, sanitization, defaults, markers.
- Validate conversion and validation through calling a declaration.
- Validate decorator/factory helpers (argument/option): single application.
- Validate identity semantics, representation and sealing.

Conventions
- Test method names follow CamelCase per project convention.
- Never pass explicit None for metadata parameters; omit instead.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argpool import (
    INT,
    Argument,
    Option,
    ConversionError,
    ValidationError,
    argument,
    option,
)


class TestArgument(TestCase):
    """Behavioral tests for Argument declarations."""

    def testDefaults(self):
        a = Argument()
        self.assertIs(a.type, str)
        self.assertFalse(a.optional)
        self.assertIsNone(a.validator)
        self.assertIsNone(a.default)
        self.assertFalse(a.has_default)
        self.assertIsNone(a.metavar)
        self.assertIsNone(a.descr)

    def testNoneDefaultIsADefault(self):
        a = Argument(default=None)
        self.assertTrue(a.has_default)
        self.assertIsNone(a.default)

    def testOptionalAndDefault(self):
        a = Argument(INT, optional=True, default=3)
        self.assertTrue(a.optional)
        self.assertEqual(a.default, 3)

    def testTypeMustBeCallable(self):
        with self.assertRaises(TypeError):
            Argument("int")  # type: ignore[arg-type]

    def testValidatorMustBeCallable(self):
        with self.assertRaises(TypeError):
            Argument(validator=1)  # type: ignore[arg-type]

    def testMetavarTrimmedAndNonEmpty(self):
        self.assertEqual(Argument(metavar="  FILE ").metavar, "FILE")
        with self.assertRaises(ValueError):
            Argument(metavar="  ")
        with self.assertRaises(TypeError):
            Argument(metavar=1)  # type: ignore[arg-type]

    def testDescrNonEmpty(self):
        with self.assertRaises(ValueError):
            Argument(descr="")

    def testCallConverts(self):
        self.assertEqual(Argument(INT)("12"), 12)

    def testCallWrapsValueError(self):
        with self.assertRaises(ConversionError) as context:
            Argument(int)("twelve")
        self.assertIsInstance(context.exception.__cause__, ValueError)
        self.assertEqual(context.exception.input, "twelve")

    def testCallWrapsValidatorValueError(self):
        def positive(value):
            if value <= 0:
                raise ValueError("must be positive")

        with self.assertRaises(ValidationError) as context:
            Argument(INT, validator=positive)("-3")
        self.assertEqual(context.exception.message, "must be positive")

    def testCallKeepsValidationError(self):
        def reject(value):
            raise ValidationError("nope", hint="try again")

        with self.assertRaises(ValidationError) as context:
            Argument(validator=reject)("x")
        self.assertEqual(context.exception.hint, "try again")

    def testIdentitySemantics(self):
        self.assertNotEqual(Argument(), Argument())
        self.assertEqual(len({Argument(), Argument()}), 2)

    def testReadOnly(self):
        a = Argument()
        with self.assertRaises(AttributeError):
            a.optional = True

    def testRepr(self):
        self.assertTrue(repr(Argument(INT)).startswith("argument(type="))

    def testSealed(self):
        with self.assertRaises(TypeError):
            class Custom(Argument):  # NOQA: F-841
                pass


class TestOption(TestCase):
    """Behavioral tests for Option declarations."""

    def testDefaults(self):
        o = Option("name")
        self.assertEqual(o.long, "name")
        self.assertIsNone(o.short)
        self.assertIs(o.type, str)
        self.assertFalse(o.has_default)
        self.assertFalse(o.has_marker)
        self.assertIsNone(o.marker)
        self.assertFalse(o.marker_only)

    def testShortAndMarker(self):
        o = Option("verbose", "v", marker=True)
        self.assertEqual(o.short, "v")
        self.assertTrue(o.has_marker)
        self.assertIs(o.marker, True)

    def testDigitShortToken(self):
        self.assertEqual(Option("one", "1").short, "1")

    def testLongMustBeAlphanumeric(self):
        for long in ("", "with-dash", "--name", "a b", "é"):
            with self.subTest(long=long), self.assertRaises(ValueError):
                Option(long)

    def testLongMustBeString(self):
        with self.assertRaises(TypeError):
            Option(1)  # type: ignore[arg-type]

    def testShortMustBeSingleCharacter(self):
        with self.assertRaises(ValueError):
            Option("name", "nm")
        with self.assertRaises(ValueError):
            Option("name", "-")
        with self.assertRaises(TypeError):
            Option("name", 1)  # type: ignore[arg-type]

    def testMarkerOnlyRequiresMarker(self):
        with self.assertRaises(TypeError):
            Option("quiet", marker_only=True)
        self.assertTrue(Option("quiet", marker=True, marker_only=True).marker_only)

    def testNoneMarkerIsAMarker(self):
        self.assertTrue(Option("reset", marker=None).has_marker)

    def testCallConvertsAndValidates(self):
        seen = []
        o = Option("count", type=INT, validator=seen.append)
        self.assertEqual(o("5"), 5)
        self.assertEqual(seen, [5])

    def testRepr(self):
        text = repr(Option("verbose", "v", marker=True))
        self.assertTrue(text.startswith("option("))
        self.assertIn("long='verbose'", text)
        self.assertIn("short='v'", text)

    def testRichRepr(self):
        fields = dict(Option("verbose", "v", default=False).__rich_repr__())
        self.assertEqual(fields["long"], "verbose")
        self.assertIs(fields["default"], False)

    def testSealed(self):
        with self.assertRaises(TypeError):
            class Custom(Option):  # NOQA: F-841
                pass


class TestDecorators(TestCase):
    """Behavioral tests for the argument()/option() decorators."""

    def testArgumentBindsValidator(self):
        @argument(INT)
        def level(value):
            if value > 9:
                raise ValidationError("too high")

        self.assertIsInstance(level, Argument)
        self.assertEqual(level("9"), 9)
        with self.assertRaises(ValidationError):
            level("10")

    def testOptionBindsValidator(self):
        @option("threads", "t", type=INT, default=1)
        def threads(value):
            if value < 1:
                raise ValueError("threads must be positive")

        self.assertIsInstance(threads, Option)
        self.assertEqual(threads.default, 1)
        with self.assertRaises(ValidationError):
            threads("0")

    def testDecoratorRejectsNonCallable(self):
        with self.assertRaises(TypeError):
            option("name")(1)

    def testDecoratorSingleApplication(self):
        wrapper = argument()
        wrapper(lambda value: None)
        with self.assertRaises(TypeError):
            wrapper(lambda value: None)

    def testDecoratorRejectsPresetValidator(self):
        with self.assertRaises(TypeError):
            option("name", validator=print)(lambda value: None)


if __name__ == "__main__":
    unittest.main()
