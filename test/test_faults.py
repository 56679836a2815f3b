"""
Fault layer tests (codes, taxonomy, rendering, triggering).

Scope
- Validate fault codes and their normalized labels.
- Validate the exception taxonomy callers rely on.
- Validate option merging through copy.replace() and trigger().
- Validate shell-mode rendering (stderr report, usage, exit status) and warnings.

Conventions
- Test method names follow CamelCase per project convention.
- Rendering is captured from a colorless rich Console swapped in for stderr.
"""
import copy
import io
import unittest
from unittest import TestCase
from unittest.mock import patch

from rich.console import Console
from rich.panel import Panel

from docline import faults
from docline.faults import *


def render(renderable):
    console = Console(file=io.StringIO(), color_system=None, width=200)
    console.print(renderable)
    return console.file.getvalue()


class TestFaultCodes(TestCase):

    def testCodesAreGroupedByDomain(self):
        self.assertEqual(FaultCode.USAGE_NOT_FOUND, 21101)
        self.assertEqual(FaultCode.MISSING_ENCLOSURE, 21201)
        self.assertEqual(FaultCode.AMBIGUOUS_OPTION, 21304)
        self.assertEqual(FaultCode.UNCONSUMED_ARGV, 21402)
        self.assertEqual(FaultCode.IGNORED_DEFAULT, 22101)

    def testNormalizeDefaultsToNumber(self):
        self.assertEqual(FaultCode.PATTERN_NOT_MATCHED.normalize(), "21401")

    def testGetdoc(self):
        self.assertIsNone(getdoc(FaultCode.PATTERN_NOT_MATCHED))
        with self.assertRaises(TypeError):
            getdoc(21401)


class TestTaxonomy(TestCase):

    def testFamilies(self):
        for error in (UsageNotFoundError, DuplicateUsageError):
            self.assertTrue(issubclass(error, SpecificationError))
        for error in (MissingEnclosureError, UnconsumedTokensError):
            self.assertTrue(issubclass(error, GrammarError))
        for error in (
                UnexpectedArgumentError,
                MissingArgumentError,
                UnparsableOptionError,
                AmbiguousOptionError,
                DuplicateOptionError,
        ):
            self.assertTrue(issubclass(error, OptionError))
        for error in (PatternNotMatchedError, UnconsumedArgvError):
            self.assertTrue(issubclass(error, MatchError))
        for family in (SpecificationError, GrammarError, OptionError, MatchError):
            self.assertTrue(issubclass(family, DoclineException))

    def testUnconsumedArgvIsAPatternMismatch(self):
        self.assertTrue(issubclass(UnconsumedArgvError, PatternNotMatchedError))

    def testWarnings(self):
        self.assertTrue(issubclass(IgnoredDefaultWarning, DoclineWarning))
        self.assertTrue(issubclass(DoclineWarning, Warning))


class TestFaultObject(TestCase):

    def setUp(self):
        self.fault = PatternNotMatchedError(
            "the arguments do not match any usage pattern",
            title="pattern not matched",
            code=FaultCode.PATTERN_NOT_MATCHED,
            hint="compare the command line with the usage section",
        )

    def testMessageAndStr(self):
        self.assertEqual(str(self.fault), "the arguments do not match any usage pattern")
        self.assertEqual(self.fault.args, ("the arguments do not match any usage pattern",))

    def testMessageIsOptional(self):
        self.assertEqual(str(MatchError()), "")

    def testOptionsAreReadOnly(self):
        with self.assertRaises(TypeError):
            self.fault.options["title"] = "other"  # type: ignore[index]

    def testReplaceMergesOptions(self):
        replaced = copy.replace(self.fault, prog="naval_fate", hint="try --help")
        self.assertIsInstance(replaced, PatternNotMatchedError)
        self.assertEqual(replaced.message, self.fault.message)
        self.assertEqual(replaced.options["prog"], "naval_fate")
        self.assertEqual(replaced.options["hint"], "try --help")
        self.assertEqual(self.fault.options["hint"], "compare the command line with the usage section")

    def testPlainRendering(self):
        output = render(copy.replace(self.fault, prog="naval_fate", colorful=False))
        self.assertIn("[ naval_fate — 21401 | Pattern Not Matched ]", output)
        self.assertIn("the arguments do not match any usage pattern", output)
        self.assertIn("→ compare the command line with the usage section", output)

    def testFancyRenderingIsAPanel(self):
        self.assertIsInstance(copy.replace(self.fault, fancy=True).__rich__(), Panel)

    def testMissingCodeRendersDash(self):
        self.assertIn("— - |", render(MatchError("nope", colorful=False)))


class TestTrigger(TestCase):

    def testNonShellRaisesMergedCopy(self):
        fault = MissingArgumentError("option '--speed' requires an argument", code=FaultCode.MISSING_ARGUMENT)
        with self.assertRaises(MissingArgumentError) as context:
            trigger(fault, prog="naval_fate")
        self.assertEqual(context.exception.options["prog"], "naval_fate")
        self.assertEqual(context.exception.options["code"], FaultCode.MISSING_ARGUMENT)

    def testShellPrintsUsageAndExits(self):
        stderr = Console(file=io.StringIO(), color_system=None, width=200)
        fault = PatternNotMatchedError("the arguments do not match any usage pattern", title="pattern not matched")
        with patch.object(faults, "console", stderr):
            with self.assertRaises(SystemExit) as context:
                trigger(fault, shell=True, usage="usage: prog go", prog="prog")
        self.assertEqual(context.exception.code, 1)
        output = stderr.file.getvalue()
        self.assertIn("the arguments do not match any usage pattern", output)
        self.assertIn("usage: prog go", output)

    def testWarningIsEmitted(self):
        with self.assertWarns(IgnoredDefaultWarning):
            trigger(IgnoredDefaultWarning("default ignored"))

    def testShellWarningIsPrinted(self):
        stderr = Console(file=io.StringIO(), color_system=None, width=200)
        with patch.object(faults, "console", stderr):
            trigger(IgnoredDefaultWarning("default ignored", code=FaultCode.IGNORED_DEFAULT), shell=True)
        self.assertIn("default ignored", stderr.file.getvalue())
        self.assertIn("22101", stderr.file.getvalue())

    def testRejectsNonFaults(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("plain"))


if __name__ == "__main__":
    unittest.main()
