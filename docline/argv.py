r"""
Docline argv layer: raw argument vector → flat, ordered leaf list.

Two passes
1. disambiguate(argv, options): rewrite long options against the option table.
   • "--" ends option processing; it and everything after it pass through untouched.
   • abbreviations expand to the single long name they prefix ("--verb" → "--verbose");
     a prefix shared by several long names is an AmbiguousOptionError.
   • "--file VALUE" is normalized to "--file=VALUE"; a flag given "=value" is an
     UnexpectedArgumentError; an arity-1 option at the end of argv is a
     MissingArgumentError.
   • the value token after a short stack ending on an arity-1 option ("-o --x")
     is kept verbatim.
2. ArgvParser.parse(tokens): classify every normalized token.
   • "--" and everything after it: loose Argument leaves with their literal text
     (the "--" itself included, so a usage pattern matches it with a '--' command).
   • "--name[=value]": one OptionRef leaf bound to the value (or true for a flag).
   • "-abc": one OptionRef per character, as in the grammar, bound to values.
   • anything else: a loose Argument leaf; with options_first, that token and
     every following one.

Known limitation
- after "--", tokens are plain positionals; nothing further is inferred from the
  pattern about them.
"""
import logging

from .faults import *
from .grammar import OptionReader
from .patterns import Argument
from .tokens import Tokens
from .utils import ordinal
from .values import Text

log = logging.getLogger(__name__)


def expand(long, options, /, *, index=0):
    """
    resolve a possibly abbreviated long option name against the table.

    returns the exact name when declared, the single long name it prefixes, or the
    name unchanged when nothing matches.
    """
    if any(option.long == long for option in options):
        return long

    similar = list(dict.fromkeys(option.long for option in options if option.long.startswith(long)))
    match len(similar):
        case 0:
            return long
        case 1:
            log.debug("expanded %r to %r", long, similar[0])
            return similar[0]
        case _:
            raise AmbiguousOptionError(
                "option %r at %s position is ambiguous: it could be %s" % (
                    long, ordinal(index), ", ".join(map(repr, similar))
                ),
                title="ambiguous option",
                code=FaultCode.AMBIGUOUS_OPTION,
                hint="type more of the name (for example: %s)" % similar[0],
                token=long,
                index=index,
                suggestions=tuple(similar),
                docs=getdoc(FaultCode.AMBIGUOUS_OPTION)
            )


def _awaits_value(token, options):
    # "-abo" ending on an arity-1 short takes the next token verbatim
    for position, char in enumerate(token[1:], start=1):
        definition = next((option for option in options if option.short == "-" + char), None)
        if definition is not None and definition.arity:
            return position == len(token) - 1
    return False


def disambiguate(argv, options, /, *, options_first=False):
    """
    normalize long options of a raw argument vector against the option table.

    parameters
    - argv: Iterable[str] of already shell-split tokens.
    - options: the option table (Iterable[OptionDef]).
    - options_first: stop rewriting at the first positional token.

    returns
    - list[str] of normalized tokens ("--name" or "--name=value" for known long options).
    """
    tokens = Tokens(argv)
    result = []

    while tokens:
        token = tokens.move()

        if token == "--":
            return result + [token] + tokens

        if not token.startswith("--"):
            result.append(token)
            if options_first and (token == "-" or not token.startswith("-")):
                return result + tokens
            if token != "-" and token.startswith("-") and tokens and _awaits_value(token, options):
                result.append(tokens.move())
            continue

        long, eq, value = token.partition("=")
        if eq and long == "--":
            raise UnparsableOptionError(
                "cannot read option %r at %s position: the name before '=' is empty" % (token, ordinal(tokens.index)),
                title="unparsable option",
                code=FaultCode.UNPARSABLE_OPTION,
                hint="write long options as --name or --name=value",
                token=token,
                index=tokens.index,
                docs=getdoc(FaultCode.UNPARSABLE_OPTION)
            )

        long = expand(long, options, index=tokens.index)
        definition = next((option for option in options if option.long == long), None)

        if definition is None:
            result.append(token)
        elif definition.arity == 0:
            if eq:
                raise UnexpectedArgumentError(
                    "option %r at %s position takes no argument, but %r was given" % (long, ordinal(tokens.index), value),
                    title="unexpected argument",
                    code=FaultCode.UNEXPECTED_ARGUMENT,
                    hint="remove everything from '=' (for example: %s)" % long,
                    token=token,
                    index=tokens.index,
                    docs=getdoc(FaultCode.UNEXPECTED_ARGUMENT)
                )
            result.append(long)
        elif eq:
            result.append(long + "=" + value)
        elif tokens:
            result.append(long + "=" + tokens.move())
        else:
            raise MissingArgumentError(
                "option %r at %s position requires an argument" % (long, ordinal(tokens.index)),
                title="missing argument",
                code=FaultCode.MISSING_ARGUMENT,
                hint="pass a value (for example: %s=<value>)" % long,
                token=token,
                index=tokens.index,
                docs=getdoc(FaultCode.MISSING_ARGUMENT)
            )

    return result


class ArgvParser(OptionReader):
    """
    argv-mode leaf classification over normalized tokens.

    leaves keep the argv order; the matcher consumes them in that order. options
    never seen before are registered in .options (flags, or arity 1 when written
    as "--name=value").
    """
    __argv__ = True

    def parse(self, argv, /, options_first=False):
        tokens = Tokens(argv)
        parsed = []

        while tokens:
            token = tokens.current()
            if token == "--":
                return parsed + [Argument("", Text(value)) for value in tokens]
            elif token.startswith("--"):
                parsed += self.read_long(tokens)
            elif token.startswith("-") and token != "-":
                parsed += self.read_shorts(tokens)
            elif options_first:
                return parsed + [Argument("", Text(value)) for value in tokens]
            else:
                parsed.append(Argument("", Text(tokens.move())))

        return parsed


def parse_argv(argv, options=(), /, options_first=False):
    """
    disambiguate and classify an argument vector; returns (option table, leaves).
    """
    argv = list(argv)
    parser = ArgvParser(options)
    leaves = parser.parse(disambiguate(argv, parser.options, options_first=options_first), options_first)
    log.debug("argv %r parsed into %r", argv, leaves)
    return parser.options, leaves


__all__ = (
    "expand",
    "disambiguate",
    "ArgvParser",
    "parse_argv",
)
