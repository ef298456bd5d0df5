"""
Fault model tests (codes, replacement, triggering and rendering).

Conventions
- Test method names follow CamelCase per project convention.
- Rendering is checked through a recording rich Console, never by snapshots.
"""
import unittest
from unittest import TestCase

from rich.console import Console

from quiver import StringArgument, message
from quiver.faults import *


def _render(fault):
    console = Console(record=True, width=120, color_system=None)
    console.print(fault)
    return console.export_text()


class FaultTest(TestCase):

    def testCodes(self):
        error = MissingArgumentError(StringArgument("name"), message("missing-argument", argument="name"))
        self.assertEqual(error.code, FaultCode.MISSING_ARGUMENT)
        self.assertEqual(FaultCode.MISSING_ARGUMENT.normalize(), "11201")

    def testStrRendersMessage(self):
        error = InvalidArgumentError(
            StringArgument("id"),
            message("invalid-argument", argument="id", input="x"),
            input="x"
        )
        self.assertEqual(str(error), "invalid value 'x' for argument 'id'")
        self.assertEqual(error.input, "x")

    def testMessageMustBeMessage(self):
        with self.assertRaises(TypeError):
            CommandException("plain text")

    def testTriggerRaisesOutsideShell(self):
        error = EndOfInputError(message("end-of-input"))
        with self.assertRaises(EndOfInputError) as caught:
            trigger(error, hint="retry")
        self.assertEqual(caught.exception.options["hint"], "retry")
        self.assertIsNot(caught.exception, error)

    def testTriggerKeepsArgument(self):
        argument = StringArgument("name")
        error = MissingArgumentError(argument, argument.missing_message())
        with self.assertRaises(MissingArgumentError) as caught:
            trigger(error)
        self.assertIs(caught.exception.argument, argument)

    def testTriggerWarnsOutsideShell(self):
        warning = AliasCollisionWarning(message("alias-collision", alias="g", command="get", owner="give"))
        with self.assertWarns(AliasCollisionWarning):
            trigger(warning)

    def testTriggerRejectsPlainObjects(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("x"))

    def testEscalationCarriesOriginal(self):
        argument = StringArgument("name")
        original = argument.invalid_error("x")
        inner = FallbackEscalation(argument, original)
        outer = FallbackEscalation(StringArgument("wrapper"), inner)
        self.assertIs(outer.original, inner)
        self.assertIs(outer.root, original)
        self.assertEqual(outer.input, "x")
        self.assertEqual(outer.message, original.message)

    def testEscalationNeedsParseError(self):
        with self.assertRaises(TypeError):
            FallbackEscalation(StringArgument("name"), EndOfInputError(message("end-of-input")))

    def testRenderHeaderAndHint(self):
        error = EndOfInputError(message("end-of-input"), hint="type more", colorful=False)
        text = _render(error)
        self.assertIn("11101", text)
        self.assertIn("End Of Input", text)
        self.assertIn("no more input to read", text)
        self.assertIn("type more", text)

    def testRenderFancyPanel(self):
        error = EndOfInputError(message("end-of-input"), fancy=True, colorful=False)
        self.assertIn("no more input to read", _render(error))

    def testGetdocWithoutHostDocs(self):
        self.assertIsNone(getdoc(FaultCode.END_OF_INPUT))
        with self.assertRaises(TypeError):
            getdoc(11101)


if __name__ == "__main__":
    unittest.main()
