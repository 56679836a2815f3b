"""Docline harness.

Usage:
  docline parse <docfile> [--options-first] [--verbose] [--] [<argv>...]
  docline check <casefile> [--only=<ids>] [--fancy] [--verbose]
  docline (-h | --help)
  docline --version

Arguments for the parsed program that start with a dash go after "--", as in
  docline parse doc.txt -- -v file
otherwise they are read as options of docline itself.

Options:
  -h --help        Show this screen.
  --version        Show version.
  --options-first  Stop option recognition at the first positional argument.
  --only=<ids>     Comma-separated case numbers to run.
  --fancy          Draw failures inside panels.
  --verbose        Trace the parsing stages on stderr.

"""
import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .core import docopt, parse
from .faults import DoclineException, console as stderr
from .harness import USER_ERROR, load_cases, report, run_cases, serialize


def main(argv=None, /):
    arguments = docopt(__doc__, sys.argv[1:] if argv is None else argv, version=__version__, shell=True)
    stdout = Console(soft_wrap=True)

    if arguments["--verbose"].native:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=stderr, show_path=False)],
        )

    if arguments["parse"].native:
        doc = Path(arguments["<docfile>"].native).read_text()
        try:
            bindings = parse(doc, arguments["<argv>"].native, arguments["--options-first"].native)
        except DoclineException as fault:
            stderr.print(fault)
            stdout.print_json(json.dumps(USER_ERROR))
            return 1
        stdout.print_json(json.dumps(serialize(bindings)))
        return 0

    cases = load_cases(Path(arguments["<casefile>"].native).read_text())
    only = arguments["--only"].native
    results = run_cases(cases, only={int(index) for index in only.split(",")} if only else None)
    stdout.print(report(results, fancy=arguments["--fancy"].native))
    return 0 if all(result.passed for result in results) else 1


if __name__ == "__main__":
    sys.exit(main())
