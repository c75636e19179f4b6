"""
Faults behavioral tests (codes, rendering, triggering).

Scope
- Validation errors carry field identity and stable messages.
- Session exceptions default their message to the title.
- trigger() raises in strict mode and prints through rich otherwise.
- ValidationExit groups errors and renders one line per error.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase
from unittest.mock import patch

from rich.console import Console

from cliform import (
    FieldDescriptor,
    FaultCode,
    FieldRequiredError,
    AtLeastOneValueRequiredError,
    ModuleNotReadyError,
    InvocationError,
    ValidationExit,
    trigger,
)
from cliform import faults


def _capture(renderable):
    console = Console(color_system=None, force_terminal=False, width=120)
    with console.capture() as capture:
        console.print(renderable)
    return capture.get()


class TestValidationErrors(TestCase):
    """Behavioral tests for ValidationError subclasses."""

    def testFieldIdentity(self):
        field = FieldDescriptor("arg1", label="Argument")
        error = FieldRequiredError(field, "sub1")
        self.assertIs(error.field, field)
        self.assertEqual(error.key, "sub1-arg1")
        self.assertEqual(error.message, 'Field "Argument": Required field is empty')
        self.assertEqual(str(error), error.message)

    def testEquality(self):
        field = FieldDescriptor("tags", "tag", kind="Vec")
        self.assertEqual(AtLeastOneValueRequiredError(field), AtLeastOneValueRequiredError(field))
        self.assertNotEqual(AtLeastOneValueRequiredError(field), FieldRequiredError(field))

    def testCodes(self):
        field = FieldDescriptor("x")
        self.assertIs(FieldRequiredError(field).__code__, FaultCode.FIELD_REQUIRED)
        self.assertIs(AtLeastOneValueRequiredError(field).__code__, FaultCode.AT_LEAST_ONE_VALUE_REQUIRED)

    def testRendering(self):
        output = _capture(FieldRequiredError(FieldDescriptor("x"), colorful=False))
        self.assertIn("21101", output)
        self.assertIn("Field Required", output)
        self.assertIn('Field "x": Required field is empty', output)


class TestSessionExceptions(TestCase):
    """Behavioral tests for SessionException subclasses."""

    def testMessageDefaultsToTitle(self):
        self.assertEqual(ModuleNotReadyError().message, "module not ready")

    def testInvocationErrorWrapsCause(self):
        cause = ValueError("boom")
        fault = InvocationError.wrap(cause)
        self.assertEqual(fault.message, "boom")
        self.assertIs(fault.cause, cause)
        self.assertIs(fault.__cause__, cause)

    def testInvocationErrorWithoutMessageUsesTypeName(self):
        self.assertEqual(InvocationError.wrap(KeyboardInterrupt()).message, "KeyboardInterrupt")

    def testHintRendered(self):
        output = _capture(ModuleNotReadyError("wait", hint="retry shortly", colorful=False))
        self.assertIn("wait", output)
        self.assertIn("retry shortly", output)


class TestTrigger(TestCase):
    """Behavioral tests for trigger."""

    def testStrictRaises(self):
        with self.assertRaises(ModuleNotReadyError):
            trigger(ModuleNotReadyError(), strict=True)

    def testNonStrictPrints(self):
        console = Console(color_system=None, force_terminal=False, width=120)
        with patch.object(faults, "console", console), console.capture() as capture:
            trigger(ModuleNotReadyError("not yet"), colorful=False)
        self.assertIn("not yet", capture.get())

    def testReplaceKeepsOriginalUntouched(self):
        fault = ModuleNotReadyError("x")
        clone = fault.__replace__(strict=True)
        self.assertNotIn("strict", fault.options)
        self.assertTrue(clone.options["strict"])
        self.assertEqual(clone.message, "x")

    def testRejectsNonFaults(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("plain"))


class TestValidationExit(TestCase):
    """Behavioral tests for ValidationExit."""

    def setUp(self):
        self.errors = [
            FieldRequiredError(FieldDescriptor("a")),
            AtLeastOneValueRequiredError(FieldDescriptor("b", "b", kind="Vec")),
        ]

    def testLines(self):
        self.assertEqual(ValidationExit(self.errors).lines(), [
            'Field "a": Required field is empty',
            'Field "b": At least one value is required',
        ])

    def testStrictTriggerRaisesGroup(self):
        with self.assertRaises(ValidationExit) as context:
            trigger(ValidationExit(self.errors), strict=True)
        self.assertEqual(len(context.exception.exceptions), 2)

    def testRendering(self):
        output = _capture(ValidationExit(self.errors, colorful=False))
        self.assertIn("Validation Error", output)
        self.assertIn('Field "b": At least one value is required', output)


if __name__ == "__main__":
    unittest.main()
