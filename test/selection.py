"""
Selection state machine behavioral tests.

Scope
- NoSelection/Selected transitions, including the lenient unknown-name no-op.
- Live field set ordering and exclusion of non-selected subcommands.
- Coercion of names/None into selections.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from cliform import FieldDescriptor, SubcommandDescriptor, Schema, Selection


def _schema():
    return Schema(
        [FieldDescriptor("path"), FieldDescriptor("verbose", "verbose", kind="Bool")],
        [
            SubcommandDescriptor("build", [FieldDescriptor("target", "target")]),
            SubcommandDescriptor("clean", [FieldDescriptor("all", "all", kind="Bool")]),
        ],
    )


class TestSelection(TestCase):
    """Behavioral tests for Selection."""

    def setUp(self):
        self.schema = _schema()
        self.selection = Selection(self.schema)

    def testStartsWithNoSelection(self):
        self.assertIsNone(self.selection.active)
        self.assertIsNone(self.selection.subcommand)

    def testSelectKnownSubcommand(self):
        self.assertEqual(self.selection.select("build"), "build")
        self.assertIs(self.selection.subcommand, self.schema.subcommand("build"))

    def testSelectSwitchesExclusively(self):
        self.selection.select("build")
        self.selection.select("clean")
        self.assertTrue(self.selection.is_live("clean"))
        self.assertFalse(self.selection.is_live("build"))

    def testSelectNoneDeselects(self):
        self.selection.select("build")
        self.selection.select(None)
        self.assertIsNone(self.selection.active)

    def testSelectEmptyStringDeselects(self):
        self.selection.select("build")
        self.selection.select("")
        self.assertIsNone(self.selection.active)

    def testUnknownNameIsNoOp(self):
        self.selection.select("build")
        self.assertEqual(self.selection.select("deploy"), "build")
        self.assertEqual(self.selection.active, "build")

    def testUnknownNameFromNoSelection(self):
        self.selection.select("deploy")
        self.assertIsNone(self.selection.active)

    def testClear(self):
        self.selection.select("clean")
        self.selection.clear()
        self.assertIsNone(self.selection.active)

    def testFieldsMainOnlyWithoutSelection(self):
        self.assertEqual(
            [(scope, field.name) for scope, field in self.selection.fields()],
            [(None, "path"), (None, "verbose")],
        )

    def testFieldsIncludeOnlySelectedSubcommand(self):
        self.selection.select("clean")
        pairs = [(getattr(scope, "name", None), field.name) for scope, field in self.selection.fields()]
        self.assertEqual(pairs, [(None, "path"), (None, "verbose"), ("clean", "all")])

    def testIsLiveNone(self):
        self.assertFalse(self.selection.is_live(None))

    def testRepr(self):
        self.assertEqual(repr(self.selection), "selection(NoSelection)")
        self.selection.select("build")
        self.assertEqual(repr(self.selection), "selection(Selected('build'))")


class TestCoerce(TestCase):
    """Behavioral tests for Selection.coerce."""

    def testCoerceName(self):
        schema = _schema()
        self.assertEqual(Selection.coerce(schema, "build").active, "build")

    def testCoerceNone(self):
        self.assertIsNone(Selection.coerce(_schema(), None).active)

    def testCoerceKeepsSelection(self):
        schema = _schema()
        selection = Selection(schema, "clean")
        self.assertIs(Selection.coerce(schema, selection), selection)

    def testCoerceRejectsForeignSelection(self):
        with self.assertRaises(ValueError):
            Selection.coerce(_schema(), Selection(_schema()))

    def testCoerceRejectsOtherTypes(self):
        with self.assertRaises(TypeError):
            Selection.coerce(_schema(), 3)

    def testSchemaRequired(self):
        with self.assertRaises(TypeError):
            Selection({"fields": []})


if __name__ == "__main__":
    unittest.main()
