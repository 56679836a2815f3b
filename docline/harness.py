r'''
Docline fixture harness: golden-file runner and JSON serialization.

Case file format (the docopt "testcases" layout)
- lines starting with "#" are comments;
- each docstring is written as r"""...""";
- after it, one or more invocations, each "$ prog <args>" followed by the
  expected JSON bindings, or "user-error" when the parse must fail.

    r"""Usage: prog [-a]

    """
    $ prog
    {"-a": false}

    $ prog -a -a
    "user-error"

Arguments are split on whitespace (no shell quoting), so a case reads exactly
like the command line it describes.

Public helpers
- serialize(bindings): plain, key-sorted, JSON-ready dict.
- load_cases(source): parse a case file's text into Case records.
- run_case(case) / run_cases(cases, only=None): execute cases into Result records.
- report(results, fancy=False): rich renderable summarizing failures.
'''
import json
import re
from dataclasses import dataclass

from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .core import parse
from .faults import DoclineException

USER_ERROR = "user-error"


def serialize(bindings, /):
    """
    turn Bindings into plain Python objects sorted by name.
    """
    return bindings.native()


@dataclass(frozen=True, slots=True)
class Case:
    index: int
    doc: str
    prog: str
    argv: tuple[str, ...]
    expected: object


@dataclass(frozen=True, slots=True)
class Result:
    case: Case
    actual: object
    fault: DoclineException | None = None

    @property
    def passed(self):
        return self.actual == self.case.expected


def load_cases(source, /):
    """
    read every (doc, invocation, expected) triple from a case file's text.

    cases are numbered from 1 in file order, one number per docstring; all the
    invocations of a docstring share its number.
    """
    source = "\n".join(line for line in source.splitlines() if not line.startswith("#"))
    cases = []

    for index, block in enumerate(source.split('r"""')[1:], start=1):
        doc, _, body = block.partition('"""')
        for invocation in re.split(r"^\$ ", body.strip(), flags=re.MULTILINE):
            if not invocation.strip():
                continue
            command, _, expected = invocation.strip().partition("\n")
            prog, *argv = command.split()
            cases.append(Case(index, doc, prog, tuple(argv), json.loads(expected)))

    return cases


def run_case(case, /):
    try:
        return Result(case, serialize(parse(case.doc, case.argv)))
    except DoclineException as fault:
        return Result(case, USER_ERROR, fault)


def run_cases(cases, /, only=None):
    """
    run the cases whose index is in `only` (all of them when None).
    """
    return [run_case(case) for case in cases if only is None or case.index in only]


def report(results, /, *, fancy=False):
    """
    build a rich renderable: one block per failure, then a summary table.
    """
    failures = [result for result in results if not result.passed]
    blocks = []

    for result in failures:
        case = result.case
        body = Group(
            Text('r"""%s"""' % case.doc, style="dim"),
            Text("$ %s" % " ".join((case.prog,) + case.argv), style="bold"),
            Text.assemble(("result>   ", "#FF4DA6"), json.dumps(result.actual, sort_keys=True)),
            Text.assemble(("expected> ", "#9CE19C"), json.dumps(case.expected, sort_keys=True)),
        )
        title = "%d: %s" % (case.index, "UNEXPECTED ERROR" if result.fault and case.expected != USER_ERROR else "FAILED")
        blocks.append(Panel(body, title=title, title_align="left") if fancy else Group(Text("===== %s =====" % title), body))

    summary = Table(title="docline cases")
    summary.add_column("total", justify="right")
    summary.add_column("passed", justify="right", style="green")
    summary.add_column("failed", justify="right", style="red")
    summary.add_row(str(len(results)), str(len(results) - len(failures)), str(len(failures)))

    return Group(*blocks, summary)


__all__ = (
    "USER_ERROR",
    "serialize",
    "Case",
    "Result",
    "load_cases",
    "run_case",
    "run_cases",
    "report",
)
