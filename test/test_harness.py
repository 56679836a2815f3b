"""
Fixture harness and command-line tests.

Scope
- Validate reading of the golden case file format.
- Validate that every golden case passes and that failures are reported.
- Validate the `python -m docline` parse and check subcommands.

Conventions
- Test method names follow CamelCase per project convention.
- Output is captured by redirecting stdout; rich consoles created by the code
  under test write to whatever sys.stdout is at print time.
"""
import contextlib
import io
import json
import tempfile
import unittest
from pathlib import Path
from unittest import TestCase
from unittest.mock import patch

from rich.console import Console

from docline import faults
from docline.__main__ import main
from docline.harness import *
from docline.values import Bindings, Boolean

FIXTURE = Path(__file__).parent / "fixtures" / "testcases.docopt"


def render(renderable):
    console = Console(file=io.StringIO(), color_system=None, width=200)
    console.print(renderable)
    return console.file.getvalue()


class TestLoadCases(TestCase):

    def setUp(self):
        self.cases = load_cases(FIXTURE.read_text())

    def testEveryInvocationIsACase(self):
        self.assertEqual(len(self.cases), 24)
        self.assertEqual(max(case.index for case in self.cases), 8)

    def testFirstCase(self):
        self.assertEqual(self.cases[0], Case(1, "Usage: prog\n\n", "prog", (), {}))

    def testUserErrorAndArguments(self):
        case = self.cases[1]
        self.assertEqual(case.argv, ("--xxx",))
        self.assertEqual(case.expected, USER_ERROR)

    def testInlineSource(self):
        source = 'r"""Usage: prog <x>\n\n"""\n$ prog a\n{"<x>": "a"}\n'
        self.assertEqual(load_cases(source), [Case(1, "Usage: prog <x>\n\n", "prog", ("a",), {"<x>": "a"})])


class TestRunCases(TestCase):

    def setUp(self):
        self.cases = load_cases(FIXTURE.read_text())

    def testGoldenCasesPass(self):
        results = run_cases(self.cases)
        failed = [(result.case.index, result.case.argv, result.actual) for result in results if not result.passed]
        self.assertEqual(failed, [])

    def testOnlySelectsByIndex(self):
        results = run_cases(self.cases, only={2})
        self.assertEqual(len(results), 3)
        self.assertTrue(all(result.case.index == 2 for result in results))

    def testFaultIsKept(self):
        result = run_case(Case(1, "Usage: prog", "prog", ("-x",), USER_ERROR))
        self.assertTrue(result.passed)
        self.assertIsInstance(result.fault, faults.PatternNotMatchedError)

    def testSerialize(self):
        self.assertEqual(serialize(Bindings({"go": Boolean(True)})), {"go": True})


class TestReport(TestCase):

    def testFailuresAreListed(self):
        case = Case(4, "Usage: prog\n\n", "prog", ("-a",), {"-a": True})
        fault = faults.PatternNotMatchedError("the arguments do not match any usage pattern")
        output = render(report([Result(case, USER_ERROR, fault), Result(case, {"-a": True})]))
        self.assertIn("4: UNEXPECTED ERROR", output)
        self.assertIn("$ prog -a", output)
        self.assertIn('expected> {"-a": true}', output)

    def testMismatchIsFailed(self):
        case = Case(2, "Usage: prog\n\n", "prog", (), {})
        self.assertIn("2: FAILED", render(report([Result(case, {"x": 1})], fancy=True)))


class TestMain(TestCase):

    def run_main(self, *argv):
        stdout = io.StringIO()
        stderr = Console(file=io.StringIO(), color_system=None, width=200)
        with (
            contextlib.redirect_stdout(stdout),
            patch.object(faults, "console", stderr),
            patch("docline.__main__.stderr", stderr),
        ):
            status = main(list(argv))
        return status, stdout.getvalue()

    def testCheckFixture(self):
        status, output = self.run_main("check", str(FIXTURE))
        self.assertEqual(status, 0)
        self.assertIn("docline cases", output)

    def testCheckOnly(self):
        status, _ = self.run_main("check", str(FIXTURE), "--only=1,2")
        self.assertEqual(status, 0)

    def testParsePrintsBindings(self):
        with tempfile.TemporaryDirectory() as directory:
            docfile = Path(directory) / "doc.txt"
            docfile.write_text("Usage: prog [-a] <x>\n")
            status, output = self.run_main("parse", str(docfile), "--", "-a", "file")
        self.assertEqual(status, 0)
        self.assertEqual(json.loads(output), {"-a": True, "<x>": "file"})

    def testParseNeedsSeparatorBeforeDashedArguments(self):
        with tempfile.TemporaryDirectory() as directory:
            docfile = Path(directory) / "doc.txt"
            docfile.write_text("Usage: prog [-v] <x>\n")
            with self.assertRaises(SystemExit) as context:
                self.run_main("parse", str(docfile), "file", "-v")
            status, output = self.run_main("parse", str(docfile), "--", "file", "-v")
        self.assertEqual(context.exception.code, 1)
        self.assertEqual(status, 0)
        self.assertEqual(json.loads(output), {"-v": True, "<x>": "file"})

    def testParseReportsUserError(self):
        with tempfile.TemporaryDirectory() as directory:
            docfile = Path(directory) / "doc.txt"
            docfile.write_text("Usage: prog go\n")
            status, output = self.run_main("parse", str(docfile), "stop")
        self.assertEqual(status, 1)
        self.assertEqual(json.loads(output), USER_ERROR)

    def testBadInvocationExits(self):
        with self.assertRaises(SystemExit) as context:
            self.run_main("frobnicate")
        self.assertEqual(context.exception.code, 1)


if __name__ == "__main__":
    unittest.main()
