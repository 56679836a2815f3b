"""
Docline entry points: docstring + argument vector → bindings.

What this module provides
- parse(doc, argv, options_first=False): the pure contract. Builds the option
  table and the pattern tree from the docstring, classifies argv, matches, and
  returns a Bindings map (name → Value). Every problem raises a DoclineException
  subclass; nothing is printed.
- docopt(doc, argv=Unset, ...): the front door for programs. Accepts argv as a
  shell-like string or any iterable of strings (sys.argv[1:] when omitted),
  handles --help / --version, and routes faults through faults.trigger() so shell
  mode prints a friendly report plus the usage and exits.

Pipeline
    doc ──► usage_section ─► formal_usage ─► Parser ─► tree ─► fix ─┐
     └───► parse_options ─────────────────────┘ (table)             ├─► match_argv ─► Bindings
    argv ─► disambiguate ─► ArgvParser ─► leaves ───────────────────┘

Quick start
    '''Naval Fate.

    Usage:
      naval_fate ship <name> move <x> <y> [--speed=<kn>]
      naval_fate -h | --help

    Options:
      -h --help     Show this screen.
      --speed=<kn>  Speed in knots [default: 10].
    '''
    from docline import docopt
    arguments = docopt(__doc__, shell=True)
"""
import logging
import shlex
import sys
import warnings
from collections.abc import Iterable
from warnings import catch_warnings

from rich.console import Console

from .argv import parse_argv
from .faults import *
from .fixer import fix, flatten
from .grammar import parse_pattern
from .matcher import match_argv
from .tokens import formal_usage, parse_options, usage_section
from .utils import Unset
from .values import Absent

log = logging.getLogger(__name__)


def parse(doc, argv, /, options_first=False):
    """
    match an argument vector against the usage described by a docstring.

    parameters
    - doc: str, the docstring holding exactly one "usage:" section and, optionally,
      option descriptions.
    - argv: Iterable[str], already shell-split tokens (program name excluded).
    - options_first: stop option recognition at the first positional token.

    returns
    - Bindings: every leaf name of the usage (arguments, commands, options) mapped
      to its matched value or its declared default.

    raises
    - SpecificationError, GrammarError, OptionError, MatchError subclasses.
    """
    usage = usage_section(doc)
    options, pattern = parse_pattern(formal_usage(usage), parse_options(doc))
    fixed = fix(pattern, options)
    log.debug("fixed pattern: %r", fixed)

    _, leaves = parse_argv(argv, options, options_first)
    collected = match_argv(fixed, leaves)

    bindings = flatten(fixed)
    bindings.update((leaf.name, leaf.value) for leaf in collected)
    return bindings


def _tokens(argv):
    """
    normalize the argv accepted by docopt() into a list[str].
    """
    if argv is Unset:
        return sys.argv[1:]
    if isinstance(argv, str):
        return shlex.split(argv)
    if isinstance(argv, Iterable):
        tokens = list(argv)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("docopt() argv must be a string or an iterable of strings")
        return tokens
    raise TypeError("docopt() argv must be a string or an iterable of strings")


def docopt(doc, argv=Unset, /, *, help=True, version=Unset, options_first=False,
           shell=False, fancy=False, colorful=True):
    """
    parse argv against doc the way a program wants it.

    parameters
    - doc, options_first: as for parse().
    - argv: Unset (sys.argv[1:]), a shell-like str (split with shlex), or Iterable[str].
    - help: when -h or --help is bound, print the doc and exit with status 0.
    - version: when given and --version is bound, print it and exit with status 0.
    - shell: render faults with rich on stderr (plus the usage) and exit with
      status 1 instead of raising them.
    - fancy / colorful: panel chrome and colors of the rendered faults.

    returns
    - Bindings, as parse().
    """
    tokens = _tokens(argv)
    context = {"shell": shell, "fancy": fancy, "colorful": colorful}

    try:
        with catch_warnings(record=True) as caught:
            warnings.simplefilter("always", DoclineWarning)
            bindings = parse(doc, tokens, options_first)
    except DoclineException as fault:
        try:
            usage = usage_section(doc)
        except SpecificationError:
            usage = None
        prog = usage.split()[0] if usage else "docline"
        trigger(fault, usage=usage and "usage: " + usage, prog=prog, **context)
        raise

    for warning in caught:
        if isinstance(warning.message, DoclineWarning):
            trigger(warning.message, **context)
        else:
            warnings.warn_explicit(warning.message, warning.category, warning.filename, warning.lineno)

    console = Console(soft_wrap=True, highlight=False)
    if help and (bindings.get("-h", Absent).native or bindings.get("--help", Absent).native):
        console.print(doc.strip("\n"), markup=False)
        sys.exit(0)
    if version is not Unset and bindings.get("--version", Absent).native:
        console.print(str(version), markup=False)
        sys.exit(0)

    return bindings


__all__ = (
    "parse",
    "docopt",
)
