"""
Binding behavioral tests (printed-output capture).

Scope
- Captured stdout is returned in place of the return value.
- Return values pass through when nothing was printed.
- Optional token parser and decorator forms.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import argparse
import unittest
from unittest import TestCase

from cliform import bind


class TestBind(TestCase):
    """Behavioral tests for bind."""

    def testCapturesPrintedOutput(self):
        @bind
        def greet(tokens):
            print("\x1b[32mhello\x1b[0m", *tokens)

        self.assertEqual(greet(["world"]), "\x1b[32mhello\x1b[0m world\n")

    def testReturnValuePassesThrough(self):
        @bind
        def answer(tokens):
            return {"tokens": tokens}

        self.assertEqual(answer(("a", "b")), {"tokens": ["a", "b"]})

    def testNothingPrintedNothingReturned(self):
        self.assertIsNone(bind(lambda tokens: None)([]))

    def testParserConvertsTokens(self):
        parser = argparse.ArgumentParser()
        parser.add_argument("-v", "--verbose", action="count", default=0)
        parser.add_argument("path")

        @bind(parse=parser.parse_args)
        def show(namespace):
            print(namespace.path, namespace.verbose)

        self.assertEqual(show(["-v", "-v", "file.txt"]), "file.txt 2\n")

    def testExceptionsPropagate(self):
        @bind
        def broken(tokens):
            print("partial")
            raise RuntimeError("broken")

        with self.assertRaises(RuntimeError):
            broken([])

    def testKeepsName(self):
        @bind
        def process(tokens):
            pass

        self.assertEqual(process.__name__, "process")

    def testNonCallableRejected(self):
        with self.assertRaises(TypeError):
            bind(42)


if __name__ == "__main__":
    unittest.main()
