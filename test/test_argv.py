"""
Argument vector tests (disambiguation and leaf classification).

Scope
- Validate long option expansion, normalization to "--name=value" and its faults.
- Validate "--" passthrough and options_first in both passes.
- Validate argv-mode leaves: bound values, stacked shorts, undeclared options.

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from unittest import TestCase

from docline.argv import disambiguate, expand, parse_argv
from docline.faults import (
    AmbiguousOptionError,
    MissingArgumentError,
    UnexpectedArgumentError,
    UnparsableOptionError,
)
from docline.patterns import Argument, OptionDef, OptionRef
from docline.values import Absent, Boolean, Text

VERBOSE = OptionDef("-v", "--verbose", 0, Boolean(False))
VERSION = OptionDef("", "--version", 0, Boolean(False))
SPEED = OptionDef("", "--speed", 1, Text("10"))
OUTPUT = OptionDef("-o", "--output", 1, Absent)


def loose(*values):
    return [Argument("", Text(value)) for value in values]


class TestExpand(TestCase):
    """Abbreviation resolution."""

    def testUniquePrefixExpands(self):
        self.assertEqual(expand("--verb", [VERBOSE, SPEED]), "--verbose")

    def testExactNameWins(self):
        exact = OptionDef("", "--ver", 0, Boolean(False))
        self.assertEqual(expand("--ver", [exact, VERBOSE, VERSION]), "--ver")

    def testUnknownNameIsKept(self):
        self.assertEqual(expand("--colour", [VERBOSE]), "--colour")

    def testAmbiguousPrefixRaises(self):
        with self.assertRaises(AmbiguousOptionError) as context:
            expand("--ver", [VERBOSE, VERSION], index=3)
        self.assertEqual(context.exception.options["suggestions"], ("--verbose", "--version"))
        self.assertEqual(context.exception.options["index"], 3)


class TestDisambiguate(TestCase):
    """Long option normalization over raw argv."""

    def testSpacedValueIsJoined(self):
        self.assertEqual(disambiguate(["--speed", "20", "ship"], [SPEED]), ["--speed=20", "ship"])

    def testAbbreviationIsExpanded(self):
        self.assertEqual(disambiguate(["--verb", "--sp=5"], [VERBOSE, SPEED]), ["--verbose", "--speed=5"])

    def testDoubleDashStopsRewriting(self):
        self.assertEqual(disambiguate(["--", "--verb"], [VERBOSE]), ["--", "--verb"])

    def testOptionsFirstStopsAtPositional(self):
        self.assertEqual(disambiguate(["go", "--verb"], [VERBOSE], options_first=True), ["go", "--verb"])

    def testShortValueIsKeptVerbatim(self):
        self.assertEqual(disambiguate(["-o", "--verb"], [OUTPUT, VERBOSE]), ["-o", "--verb"])

    def testFlagWithValueRaises(self):
        with self.assertRaises(UnexpectedArgumentError) as context:
            disambiguate(["a", "--verbose=1"], [VERBOSE])
        self.assertEqual(context.exception.options["index"], 2)

    def testMissingValueRaises(self):
        with self.assertRaises(MissingArgumentError):
            disambiguate(["--speed"], [SPEED])

    def testNamelessLongRaises(self):
        with self.assertRaises(UnparsableOptionError):
            disambiguate(["--=x"], [])


class TestParseArgv(TestCase):
    """Leaf classification."""

    def testBoundLeaves(self):
        _, leaves = parse_argv(["-v", "--speed", "20", "file"], [VERBOSE, SPEED])
        self.assertEqual(leaves, [
            OptionRef("-v", "--verbose", 0, Boolean(True)),
            OptionRef("", "--speed", 1, Text("20")),
            *loose("file"),
        ])

    def testShortValueForms(self):
        _, leaves = parse_argv(["-ofile", "-o", "other"], [OUTPUT])
        self.assertEqual(leaves, [
            OptionRef("-o", "--output", 1, Text("file")),
            OptionRef("-o", "--output", 1, Text("other")),
        ])

    def testEmptyInlineValue(self):
        _, leaves = parse_argv(["--speed="], [SPEED])
        self.assertEqual(leaves, [OptionRef("", "--speed", 1, Text(""))])

    def testUndeclaredStackIsRegistered(self):
        options, leaves = parse_argv(["-abc"])
        self.assertEqual([leaf.name for leaf in leaves], ["-a", "-b", "-c"])
        self.assertTrue(all(leaf.value == Boolean(True) for leaf in leaves))
        self.assertEqual(len(options), 3)

    def testUndeclaredLongWithValue(self):
        options, leaves = parse_argv(["--name=x"])
        self.assertEqual(leaves, [OptionRef("", "--name", 1, Text("x"))])
        self.assertEqual(options, [OptionDef("", "--name", 1, Absent)])

    def testDoubleDashPassthrough(self):
        _, leaves = parse_argv(["a", "--", "-v", "--speed"], [VERBOSE, SPEED])
        self.assertEqual(leaves, loose("a", "--", "-v", "--speed"))

    def testLoneDashIsPositional(self):
        _, leaves = parse_argv(["-"])
        self.assertEqual(leaves, loose("-"))

    def testOptionsFirst(self):
        _, leaves = parse_argv(["-v", "go", "-v"], [VERBOSE], True)
        self.assertEqual(leaves, [OptionRef("-v", "--verbose", 0, Boolean(True)), *loose("go", "-v")])

    def testMissingShortValueRaises(self):
        with self.assertRaises(MissingArgumentError):
            parse_argv(["-o"], [OUTPUT])

    def testArgvIsNotMutated(self):
        argv = ["--verb"]
        parse_argv(argv, [VERBOSE])
        self.assertEqual(argv, ["--verb"])


if __name__ == "__main__":
    unittest.main()
