"""
Validation engine behavioral tests.

Scope
- Required-ness per field kind (Bool/Counter exempt, scalars trimmed, Vec non-empty).
- Subcommand scoping: only the live field set is validated.
- Exhaustive collection and field identity carried by each error.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from cliform import (
    FieldDescriptor,
    FieldKind,
    SubcommandDescriptor,
    Schema,
    Selection,
    FieldRequiredError,
    AtLeastOneValueRequiredError,
    check,
    validate,
)


class TestCheck(TestCase):
    """Behavioral tests for single-field checks."""

    def testOptionalFieldNeverFails(self):
        self.assertIsNone(check(FieldDescriptor("path"), ""))

    def testExemptKinds(self):
        for kind in (FieldKind.BOOL, FieldKind.COUNTER):
            with self.subTest(kind=kind):
                self.assertIsNone(check(FieldDescriptor("x", "x", required=True, kind=kind), ""))

    def testWhitespaceOnlyScalarFails(self):
        for kind in (FieldKind.STRING, FieldKind.INTEGER, FieldKind.ENUM):
            with self.subTest(kind=kind):
                error = check(FieldDescriptor("x", required=True, kind=kind), "   ")
                self.assertIsInstance(error, FieldRequiredError)

    def testFilledScalarPasses(self):
        self.assertIsNone(check(FieldDescriptor("x", required=True), " a "))

    def testEmptyVecFails(self):
        error = check(FieldDescriptor("tags", "tag", required=True, kind=FieldKind.VEC), ())
        self.assertIsInstance(error, AtLeastOneValueRequiredError)


class TestValidate(TestCase):
    """Behavioral tests for validate."""

    def setUp(self):
        self.schema = Schema(
            [
                FieldDescriptor("path", required=True),
                FieldDescriptor("tags", "tag", required=True, kind=FieldKind.VEC),
                FieldDescriptor("verbose", "verbose", required=True, kind=FieldKind.COUNTER),
            ],
            [
                SubcommandDescriptor("sub", [FieldDescriptor("x", "x", required=True)]),
                SubcommandDescriptor("other", [FieldDescriptor("y", "y", required=True)]),
            ],
        )

    def testAllErrorsCollected(self):
        errors = validate(self.schema, {"path": " ", "tags": [], "verbose": ""})
        self.assertEqual([type(error) for error in errors], [FieldRequiredError, AtLeastOneValueRequiredError])
        self.assertEqual([error.key for error in errors], ["path", "tags"])

    def testMessages(self):
        errors = validate(self.schema, {"path": "", "tags": []})
        self.assertEqual(
            [error.message for error in errors],
            ['Field "path": Required field is empty', 'Field "tags": At least one value is required'],
        )

    def testAbsentFieldsSkipped(self):
        self.assertEqual(validate(self.schema, {}), [])

    def testVecRequiredEmptyRaisesExactlyOneError(self):
        errors = validate(self.schema, {"path": "a", "tags": []})
        self.assertEqual(len(errors), 1)
        self.assertIsInstance(errors[0], AtLeastOneValueRequiredError)
        self.assertEqual(errors[0].label, "tags")

    def testUnselectedSubcommandNotValidated(self):
        widgets = {"path": "a", "tags": ["t"], "sub-x": ""}
        self.assertEqual(validate(self.schema, widgets), [])

    def testSelectedSubcommandValidated(self):
        widgets = {"path": "a", "tags": ["t"], "sub-x": "", "other-y": ""}
        errors = validate(self.schema, widgets, "sub")
        self.assertEqual(len(errors), 1)
        self.assertIsInstance(errors[0], FieldRequiredError)
        self.assertEqual(errors[0].key, "sub-x")
        self.assertEqual(errors[0].subcommand, "sub")
        self.assertIs(errors[0].field, self.schema.subcommand("sub").fields[0])

    def testSelectionObjectAccepted(self):
        selection = Selection(self.schema, "other")
        errors = validate(self.schema, {"other-y": ""}, selection)
        self.assertEqual([error.key for error in errors], ["other-y"])

    def testErrorsAreReturnedNotRaised(self):
        errors = validate(self.schema, {"path": ""})
        self.assertIsInstance(errors, list)
        self.assertIsInstance(errors[0], Exception)


if __name__ == "__main__":
    unittest.main()
