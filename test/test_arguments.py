"""
Arguments module behavioral tests.

Scope
- Validate the base contract: naming, parenting, formatting, binding.
- Validate the leaves (StringArgument, IntegerArgument) and their faults.
- Validate optional backtracking and default-value fallbacks in isolation.

Conventions
- Test method names follow CamelCase per project convention.
- Arguments are exercised directly against a reader and a fresh context.
"""
import unittest
from unittest import TestCase

from quiver import (
    ArgumentsReader,
    CommandContext,
    CommandInput,
    DefaultValueFallback,
    FallbackEscalation,
    IntegerArgument,
    InvalidArgumentError,
    MissingArgumentError,
    OptionalArgument,
    StringArgument,
)


def _parse(argument, *tokens):
    reader = ArgumentsReader(tokens)
    context = CommandContext()
    value = argument.parse(CommandInput(tokens), context, reader)
    return value, context, reader


class TestArgument(TestCase):
    """Behavioral tests for the shared Argument contract."""

    def testNameValidation(self):
        with self.assertRaises(ValueError):
            StringArgument("")
        with self.assertRaises(ValueError):
            StringArgument("two words")
        with self.assertRaises(TypeError):
            StringArgument(3)

    def testDisplayName(self):
        self.assertEqual(StringArgument("name").display_name, "name")
        self.assertEqual(StringArgument("name", display="player name").display_name, "player name")
        with self.assertRaises(ValueError):
            StringArgument("name", display="  ")

    def testFormat(self):
        self.assertEqual(StringArgument("name").format(), "<name>")
        self.assertEqual(OptionalArgument(StringArgument("name")).format(), "[name]")

    def testParentIsSetOnce(self):
        child = StringArgument("name")
        wrapper = OptionalArgument(child)
        self.assertIs(child.parent, wrapper)
        self.assertIs(child.root, wrapper)
        with self.assertRaises(ValueError):
            OptionalArgument(child)
        with self.assertRaises(ValueError):
            child.set_parent(None)

    def testWrapperRejectsNonArguments(self):
        with self.assertRaises(TypeError):
            OptionalArgument("name")
        with self.assertRaises(TypeError):
            DefaultValueFallback(object(), 1)

    def testParseBindsValue(self):
        value, context, reader = _parse(StringArgument("name"), "alice", "bob")
        self.assertEqual(value, "alice")
        self.assertEqual(context["name"], "alice")
        self.assertEqual(reader.cursor, 0)

    def testMissingArgument(self):
        with self.assertRaises(MissingArgumentError) as caught:
            _parse(StringArgument("name"))
        self.assertEqual(str(caught.exception), "missing argument 'name'")


class TestIntegerArgument(TestCase):
    """Behavioral tests for IntegerArgument."""

    def testParsesSignedIntegers(self):
        self.assertEqual(_parse(IntegerArgument("n"), "-12")[0], -12)
        self.assertEqual(_parse(IntegerArgument("n"), "+7")[0], 7)

    def testInvalidLeavesCursor(self):
        reader = ArgumentsReader(["abc"])
        with self.assertRaises(InvalidArgumentError) as caught:
            IntegerArgument("n").parse(CommandInput(["abc"]), CommandContext(), reader)
        self.assertEqual(reader.cursor, -1)
        self.assertEqual(caught.exception.input, "abc")

    def testBounds(self):
        argument = IntegerArgument("n", minimum=1, maximum=5)
        self.assertEqual(_parse(argument, "5")[0], 5)
        with self.assertRaises(InvalidArgumentError) as caught:
            _parse(argument, "6")
        self.assertIn("between 1 and 5", str(caught.exception))

    def testRangeDescriptions(self):
        self.assertEqual(IntegerArgument("n", minimum=1).describe_range(), "at least 1")
        self.assertEqual(IntegerArgument("n", maximum=1).describe_range(), "at most 1")
        self.assertEqual(IntegerArgument("n").describe_range(), "any integer")

    def testBoundsValidation(self):
        with self.assertRaises(ValueError):
            IntegerArgument("n", minimum=5, maximum=1)
        with self.assertRaises(TypeError):
            IntegerArgument("n", minimum=True)


class TestOptionalArgument(TestCase):
    """Behavioral tests for OptionalArgument backtracking."""

    def testMissingYieldsNone(self):
        value, context, reader = _parse(OptionalArgument(IntegerArgument("n")))
        self.assertIsNone(value)
        self.assertNotIn("n", context)

    def testFailureRestoresCursor(self):
        tokens = ("abc", "def")
        reader = ArgumentsReader(tokens)
        input, context = CommandInput(tokens), CommandContext()
        before = reader.cursor
        self.assertIsNone(OptionalArgument(IntegerArgument("n")).parse(input, context, reader))
        self.assertEqual(reader.cursor, before)

        # A sibling behaves as if the optional argument never ran.
        fresh = ArgumentsReader(tokens)
        self.assertEqual(
            StringArgument("word").parse(input, context, reader),
            StringArgument("other").parse(input, CommandContext(), fresh)
        )
        self.assertEqual(reader.cursor, fresh.cursor)

    def testDelegatesMessages(self):
        child = IntegerArgument("n", minimum=1)
        optional = OptionalArgument(child)
        self.assertEqual(optional.missing_message(), child.missing_message())
        self.assertEqual(optional.invalid_message("x"), child.invalid_message("x"))

    def testWrapsChildEscalation(self):
        inner = DefaultValueFallback(IntegerArgument("n"), 1)
        optional = OptionalArgument(inner)
        reader = ArgumentsReader(["abc"])
        with self.assertRaises(FallbackEscalation) as caught:
            optional.parse(CommandInput(["abc"]), CommandContext(), reader)
        self.assertIs(caught.exception.argument, optional)
        self.assertIs(caught.exception.original.argument, inner)
        self.assertEqual(reader.cursor, -1)


class TestDefaultValueFallback(TestCase):
    """Behavioral tests for DefaultValueFallback in isolation."""

    def testParsesChild(self):
        self.assertEqual(_parse(DefaultValueFallback(IntegerArgument("n"), 1), "4")[0], 4)

    def testFailureEscalates(self):
        argument = DefaultValueFallback(IntegerArgument("n"), 1)
        reader = ArgumentsReader(["abc"])
        with self.assertRaises(FallbackEscalation) as caught:
            argument.parse(CommandInput(["abc"]), CommandContext(), reader)
        self.assertIsInstance(caught.exception.original, InvalidArgumentError)
        self.assertEqual(reader.cursor, -1)

    def testMissingEscalates(self):
        with self.assertRaises(FallbackEscalation) as caught:
            _parse(DefaultValueFallback(IntegerArgument("n"), 1))
        self.assertIsInstance(caught.exception.original, MissingArgumentError)

    def testFallbackValue(self):
        argument = DefaultValueFallback(IntegerArgument("n"), lambda input, context: len(input.tokens))
        reader = ArgumentsReader(["a", "b"])
        input = CommandInput(["a", "b"])
        try:
            argument.parse(input, CommandContext(), reader)
        except FallbackEscalation as escalation:
            value = argument.parse_fallback(input, CommandContext(), reader, escalation, False)
        self.assertEqual(value, 2)

    def testFailedFallbackReportsOriginal(self):
        argument = DefaultValueFallback(IntegerArgument("n"), 1)
        reader = ArgumentsReader(["abc"])
        input = CommandInput(["abc"])
        with self.assertRaises(FallbackEscalation) as caught:
            argument.parse(input, CommandContext(), reader)
        with self.assertRaises(InvalidArgumentError):
            argument.parse_fallback(input, CommandContext(), reader, caught.exception, True)


if __name__ == "__main__":
    unittest.main()
