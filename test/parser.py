"""
Parser behavioral tests (collection, positional arguments, reporting).

Scope
- Validate the options mapping and the positional remainder.
- Validate program name, start index, sys.argv default and construction errors.
- Validate fault reporting in shell (rich) and non-shell (warnings) modes.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import sys
import unittest
import warnings
from unittest import TestCase
from unittest.mock import patch

from rich.console import Console

from optscan import Grammar, Parser, parse
from optscan import faults
from optscan.faults import UnknownOptionWarning, MissingValueWarning


LONG = [
    ("id", True),
    ("name", True),
    ("verbose", False, "v"),
    ("output", True, "o"),
]


class TestCollection(TestCase):
    """Options mapping and positional arguments."""

    def testMixedCommandLine(self):
        parser = Parser("vho:a", LONG, [
            "md2epub", "-va", "--id", "42", "--name=book", "-o", "out.epub", "in.md", "--verbose"
        ])
        self.assertEqual(parser.options(), {"v": True, "a": True, "id": "42", "name": "book", "o": "out.epub"})
        self.assertEqual(parser.arguments(), ["in.md", "--verbose"])

    def testProgram(self):
        parser = Parser("v", [], ["md2epub", "-v"])
        self.assertEqual(parser.program, "md2epub")

    def testLastOccurrenceWins(self):
        parser = Parser("o:", LONG, ["prog", "-o", "a", "--output", "b"])
        self.assertEqual(parser.options(), {"o": "b"})

    def testMissingValueIsFalse(self):
        parser = Parser("o:", [], ["prog", "-o"])
        self.assertEqual(parser.options(), {"o": False})
        self.assertEqual(parser.arguments(), [])

    def testUnknownProducesNoEntry(self):
        parser = Parser("v", [], ["prog", "-x", "-v", "file"])
        self.assertEqual(parser.options(), {"v": True})
        self.assertEqual(parser.arguments(), ["file"])

    def testArgumentsBeforeOptions(self):
        parser = Parser("v", [], ["prog", "-v", "file"])
        self.assertEqual(parser.arguments(), ["-v", "file"])

    def testStartSkipsCommand(self):
        parser = Parser("v", [], ["prog", "build", "-v", "target"])
        self.assertEqual(parser.options(2), {"v": True})
        self.assertEqual(parser.arguments(), ["target"])

    def testStartZeroIsOne(self):
        parser = Parser("v", [], ["prog", "-v", "target"])
        self.assertEqual(parser.options(0), {"v": True})
        self.assertEqual(parser.optind, 2)

    def testOptionsCanBeCalledAgain(self):
        parser = Parser("v", [], ["prog", "build", "-v"])
        self.assertEqual(parser.options(), {})
        self.assertEqual(parser.arguments(), ["build", "-v"])
        self.assertEqual(parser.options(2), {"v": True})
        self.assertEqual(parser.arguments(), [])

    def testGrammarInstance(self):
        grammar = Grammar("vf:")
        parser = Parser(grammar, argv=["prog", "-fv", "out.txt"])
        self.assertIs(parser.grammar, grammar)
        self.assertEqual(parser.options(), {"f": False, "v": True})
        self.assertEqual(parser.arguments(), ["out.txt"])

    def testDefaultsToSysArgv(self):
        with patch.object(sys, "argv", ["tool", "--verbose", "x"]):
            parser = Parser("", LONG)
        self.assertEqual(parser.program, "tool")
        self.assertEqual(parser.options(), {"v": True})
        self.assertEqual(parser.arguments(), ["x"])

    def testLongOptionsCanBeOmitted(self):
        parser = Parser("v", argv=["prog", "-v", "--verbose"])
        self.assertEqual(parser.grammar.longs, ())
        self.assertEqual(parser.options(), {"v": True})
        self.assertEqual(parser.arguments(), [])

    def testParseConvenience(self):
        options, arguments = parse("vf:", [], ["prog", "-vf", "out.txt", "in.txt"])
        self.assertEqual(options, {"v": True, "f": "out.txt"})
        self.assertEqual(arguments, ["in.txt"])


class TestConstruction(TestCase):
    """Construction errors."""

    def testGrammarWithLongRejected(self):
        with self.assertRaises(TypeError):
            Parser(Grammar("v"), ["prog", "-v"])

    def testEmptyArgvRejected(self):
        with self.assertRaises(ValueError):
            Parser("v", [], [])

    def testStringArgvRejected(self):
        with self.assertRaises(TypeError):
            Parser("v", [], "prog -v")

    def testNonStringTokenRejected(self):
        with self.assertRaises(TypeError):
            Parser("v", [], ["prog", None])


class TestReporting(TestCase):
    """Fault reporting."""

    def testFaultsAreRecorded(self):
        parser = Parser("o:", [], ["prog", "-x", "-o"])
        parser.options()
        self.assertEqual([type(fault) for fault in parser.faults], [UnknownOptionWarning, MissingValueWarning])

    def testNoFaults(self):
        parser = Parser("v", [], ["prog", "-v"])
        parser.options()
        self.assertEqual(parser.faults, [])
        self.assertEqual(parser.report(), 0)

    def testReportWarnsOutsideShell(self):
        parser = Parser("v", [], ["prog", "-x"])
        parser.options()
        with self.assertWarns(UnknownOptionWarning) as caught:
            count = parser.report()
        self.assertEqual(count, 1)
        self.assertIn("unknown option '-x' at first position", str(caught.warning))

    def testReportWarningsCanBeEscalated(self):
        parser = Parser("v", [], ["prog", "-x"])
        parser.options()
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            with self.assertRaises(UnknownOptionWarning):
                parser.report()

    def testReportRendersInShell(self):
        parser = Parser("o:", [], ["prog", "-o"], shell=True, colorful=False)
        parser.options()
        console = Console(color_system=None, force_terminal=False, width=120)
        with patch.object(faults, "console", console):
            with console.capture() as capture:
                self.assertEqual(parser.report(), 1)
        output = capture.get()
        self.assertIn("[ prog — 12121 | Missing Option Value ]", output)
        self.assertIn("option '-o' at first position requires a value", output)
        self.assertIn("→ pass the value right after the option", output)

    def testReportFancyPanel(self):
        parser = Parser("v", [], ["prog", "-x"], shell=True, colorful=False, fancy=True)
        parser.options()
        console = Console(color_system=None, force_terminal=False, width=120)
        with patch.object(faults, "console", console):
            with console.capture() as capture:
                parser.report()
        output = capture.get()
        self.assertIn("Unknown Option", output)
        self.assertIn("unknown option '-x' at first position", output)

    def testPresentationOptions(self):
        parser = Parser("v", [], ["prog"], shell=True, fancy=True)
        self.assertTrue(parser.shell)
        self.assertTrue(parser.colorful)
        self.assertTrue(parser.fancy)


if __name__ == "__main__":
    unittest.main()
