r"""
Docline lexical layer: docstring sections, pattern tokens, option table.

What this module provides
- usage_section(doc): the text after the single "usage:" marker, up to the first
  blank line (an "Options:" header also ends it).
- formal_usage(section): the section rewritten as one pattern expression, each
  program-name occurrence starting a new alternative:
      "prog a | b\n prog c"  →  "( a | b ) | ( c )"
- Tokens / tokenize(source): structural symbols ( ) [ ] | ... isolated first,
  whitespace split second.
- parse_option(line) / parse_options(doc): the option table read from every
  line that starts with "-" (the "Options:" header itself is skipped).

Option line shape
    -o FILE --output=FILE  Where to write [default: out.txt].
    └─── option part ───┘└──────── description ───────────┘
  The first double space separates option part and description (a missing description
  is tolerated). In the option part, "," and "=" act as spaces: "--x" is the long form,
  "-x" the short form, and any bare word means the option takes one argument.
  "[default: <value>]" (case-insensitive) gives an arity-1 option its default,
  verbatim.
"""
import logging
import re

from .faults import *
from .patterns import OptionDef
from .values import Absent, Boolean, Text

log = logging.getLogger(__name__)

_DEFAULT = re.compile(r"\[default: (.*)\]", flags=re.IGNORECASE)


def usage_section(doc, /):
    """
    extract the usage section (without its "usage:" marker) from a docstring.

    errors
    - UsageNotFoundError when the marker is missing or nothing follows it.
    - DuplicateUsageError when the marker appears more than once.
    """
    parts = re.split(r"(?i)usage:", re.sub(r"(?i)\n[ \t]*options:", "\n\n", doc))

    if len(parts) < 2:
        raise UsageNotFoundError(
            "'usage:' (case-insensitive) not found in the docstring",
            title="usage not found",
            code=FaultCode.USAGE_NOT_FOUND,
            hint="start the grammar with a line such as 'Usage: prog [options] <file>'",
            docs=getdoc(FaultCode.USAGE_NOT_FOUND)
        )
    if len(parts) > 2:
        raise DuplicateUsageError(
            "'usage:' (case-insensitive) appears %d times in the docstring" % (len(parts) - 1),
            title="more than one usage",
            code=FaultCode.DUPLICATE_USAGE,
            hint="keep a single 'usage:' marker and list every invocation below it",
            docs=getdoc(FaultCode.DUPLICATE_USAGE)
        )

    section = re.split(r"\n\s*\n", parts[1])[0].strip()
    if not section:
        raise UsageNotFoundError(
            "'usage:' is not followed by a program name",
            title="empty usage",
            code=FaultCode.USAGE_NOT_FOUND,
            hint="write the program name right after 'usage:'",
            docs=getdoc(FaultCode.USAGE_NOT_FOUND)
        )
    return section


def formal_usage(section, /):
    """
    join all usage lines into one expression, one parenthesized alternative per line.
    """
    program, *words = section.split()
    return "( " + " ".join(") | (" if word == program else word for word in words) + " )"


class Tokens(list):
    """
    token list with a read cursor at its head.

    current() peeks (None when exhausted), move() pops (None when exhausted);
    index counts the tokens moved so far, for position-first messages.
    """

    index = 0

    @classmethod
    def from_pattern(cls, source, /):
        return cls(tokenize(source))

    def current(self):
        return self[0] if self else None

    def move(self):
        if not self:
            return None
        self.index += 1
        return self.pop(0)


def tokenize(source, /):
    """
    split a usage pattern into grammar tokens.

    two separate passes: isolate the structural symbols by surrounding them with
    spaces, then split on whitespace (dropping empty tokens).
    """
    spaced = re.sub(r"([\[\]()|]|\.\.\.)", r" \1 ", source)
    return spaced.split()


def parse_option(line, /):
    """
    parse one option line of the docstring into an OptionDef.

    returns
    - OptionDef(short, long, arity, default) where default is Text for a declared
      "[default: ...]", Absent for an arity-1 option without one, Boolean(False)
      for flags.

    warnings
    - IgnoredDefaultWarning when a flag declares a default (flags only ever bind
      true/false, so the text is dropped).
    """
    spec, _, description = line.strip().partition("  ")

    short, long, arity = "", "", 0
    for token in spec.replace(",", " ").replace("=", " ").split():
        if token.startswith("--"):
            long = token
        elif token.startswith("-"):
            short = token
        else:
            arity = 1

    match = _DEFAULT.search(description)
    if arity:
        default = Text(match[1]) if match else Absent
    else:
        default = Boolean(False)
        if match:
            trigger(IgnoredDefaultWarning(
                "default %r ignored for flag %r, which takes no argument" % (match[1], long or short),
                title="default ignored",
                code=FaultCode.IGNORED_DEFAULT,
                hint="add an argument name (for example: %s=<value>) or drop the default" % (long or short),
                line=line,
                docs=getdoc(FaultCode.IGNORED_DEFAULT)
            ))

    return OptionDef(short, long, arity, default)


def parse_options(doc, /):
    """
    scan a whole docstring for option lines and build the ordered option table.

    every line beginning with optional whitespace followed by "-" is a candidate;
    any "...Options:" header is removed first (text after it on the same line
    still counts as an option line).
    """
    source = re.sub(r"(?i)\n[a-z ]*options:", "\n", doc)
    table = [parse_option(line) for line in re.findall(r"\n[\t ]*(-\S+[^\n]*)", source)]
    log.debug("option table: %d definition(s) from the docstring", len(table))
    return table


__all__ = (
    "usage_section",
    "formal_usage",
    "Tokens",
    "tokenize",
    "parse_option",
    "parse_options",
)
