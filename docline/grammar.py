r"""
Docline grammar: usage pattern → pattern tree.

Grammar (over the tokens produced by docline.tokens.tokenize)
    expr  := seq ( '|' seq )*
    seq   := ( atom [ '...' ] )*
    atom  := '(' expr ')' | '[' expr ']' | 'options'
           | '--' | '-' | LONG | SHORTS | ARGUMENT | COMMAND

Building rules
- several branches of an expr become an Alternative; a branch with more than one
  atom is wrapped in a Sequence first.
- '( ... )' is a Sequence, '[ ... ]' an Optional, 'options' the AnyRemainingOptions
  placeholder, and 'atom ...' wraps the atom's leaves in a Repeated.
- "<name>" or words made only of uppercase letters ("FILE", but not "INPUT_FILE"
  or "X1") are Argument leaves; other bare words (and the lone '--' / '-') are
  Command leaves.

Option readers
- OptionReader holds the option table of one parse call and reads long options
  ("--name", "--name=value") and stacked short options ("-abc") from a token list.
- In pattern mode (Parser) the leaves carry the table defaults; in argv mode
  (docline.argv.ArgvParser) they carry the supplied values. Options met for the
  first time are registered in the table either way.
"""
import logging

from .faults import *
from .patterns import *
from .tokens import Tokens
from .utils import ordinal
from .values import Absent, Boolean, Text

log = logging.getLogger(__name__)

RESERVED = frozenset(("]", ")", "|"))


def is_argument(token, /):
    """
    tell an Argument token ("<name>" or "NAME") from a Command token.
    """
    return (token.startswith("<") and token.endswith(">")) or (token.isalpha() and token.isupper())


class OptionReader:
    """
    shared long/short option reading over a per-call option table.

    mode
    - __argv__ = False: pattern mode. leaves are bound to the table defaults; an
      arity-1 option may be followed by a placeholder word ("-o FILE"), which is
      skipped.
    - __argv__ = True: argv mode. leaves are bound to literal values; flags bind
      true, arity-1 options bind the inline value or the next token.

    the table is copied on construction and grows as unknown options are met;
    read it back from .options once parsing is done.
    """
    __argv__ = False

    def __init__(self, options=(), /):
        self.options = list(options)

    def _where(self, tokens):
        if self.__argv__:
            return "at %s position" % ordinal(tokens.index)
        return "in the usage pattern"

    def _lookup(self, field, name, tokens):
        similar = [option for option in self.options if getattr(option, field) == name]
        if len(similar) > 1:
            raise DuplicateOptionError(
                "option %r is not unique: it is declared %d times" % (name, len(similar)),
                title="option is not unique",
                code=FaultCode.DUPLICATE_OPTION,
                hint="keep a single declaration of %r in the options section" % name,
                token=name,
                index=tokens.index,
                docs=getdoc(FaultCode.DUPLICATE_OPTION)
            )
        return similar[0] if similar else None

    def _placeholder(self, tokens):
        # pattern mode only skips a real word, never structure
        current = tokens.current()
        if self.__argv__:
            return current is not None
        return current is not None and current not in RESERVED and current != "..."

    def read_long(self, tokens):
        """
        read one long option token (and, for arity 1, possibly its value token).

        errors
        - UnparsableOptionError for a nameless "--=value".
        - UnexpectedArgumentError when a flag is given "=value".
        - MissingArgumentError (argv mode) when an arity-1 option has no value.
        - DuplicateOptionError when the table declares the name more than once.
        """
        token = tokens.move()
        long, eq, value = token.partition("=")

        if eq and long == "--":
            raise UnparsableOptionError(
                "cannot read option %r %s: the name before '=' is empty" % (token, self._where(tokens)),
                title="unparsable option",
                code=FaultCode.UNPARSABLE_OPTION,
                hint="write long options as --name or --name=value",
                token=token,
                index=tokens.index,
                docs=getdoc(FaultCode.UNPARSABLE_OPTION)
            )

        definition = self._lookup("long", long, tokens)

        if definition is None:
            arity = 1 if eq else 0
            definition = OptionDef("", long, arity, Absent if arity else Boolean(False))
            self.options.append(definition)
            log.debug("registered undeclared option %r (arity %d)", long, arity)
            if not self.__argv__:
                return [definition.ref()]
            return [definition.ref(Text(value) if arity else Boolean(True))]

        if definition.arity == 0:
            if eq:
                raise UnexpectedArgumentError(
                    "option %r %s takes no argument, but %r was given" % (long, self._where(tokens), value),
                    title="unexpected argument",
                    code=FaultCode.UNEXPECTED_ARGUMENT,
                    hint="remove everything from '=' (for example: %s)" % long,
                    token=token,
                    index=tokens.index,
                    docs=getdoc(FaultCode.UNEXPECTED_ARGUMENT)
                )
            return [definition.ref(Boolean(True)) if self.__argv__ else definition.ref()]

        if not eq:
            if self._placeholder(tokens):
                value = tokens.move()
            elif self.__argv__:
                raise MissingArgumentError(
                    "option %r %s requires an argument" % (long, self._where(tokens)),
                    title="missing argument",
                    code=FaultCode.MISSING_ARGUMENT,
                    hint="pass a value (for example: %s=<value>)" % long,
                    token=token,
                    index=tokens.index,
                    docs=getdoc(FaultCode.MISSING_ARGUMENT)
                )
        return [definition.ref(Text(value)) if self.__argv__ else definition.ref()]

    def read_shorts(self, tokens):
        """
        read one token of stacked short options ("-abc" → -a, -b, -c).

        an arity-1 option takes the rest of the token as its value ("-ofile"), or
        the next token when it ends the stack ("-o file"); reading stops there.
        """
        token = tokens.move()
        left = token[1:]
        parsed = []

        while left:
            short, left = "-" + left[0], left[1:]
            definition = self._lookup("short", short, tokens)

            if definition is None:
                definition = OptionDef(short, "", 0, Boolean(False))
                self.options.append(definition)
                log.debug("registered undeclared option %r", short)
                parsed.append(definition.ref(Boolean(True)) if self.__argv__ else definition.ref())
                continue

            if definition.arity == 0:
                parsed.append(definition.ref(Boolean(True)) if self.__argv__ else definition.ref())
                continue

            if left:
                value, left = left, ""
            elif self._placeholder(tokens):
                value = tokens.move()
            elif self.__argv__:
                raise MissingArgumentError(
                    "option %r %s requires an argument" % (short, self._where(tokens)),
                    title="missing argument",
                    code=FaultCode.MISSING_ARGUMENT,
                    hint="pass a value right after it (for example: %s <value>)" % short,
                    token=token,
                    index=tokens.index,
                    docs=getdoc(FaultCode.MISSING_ARGUMENT)
                )
            parsed.append(definition.ref(Text(value)) if self.__argv__ else definition.ref())

        return parsed


class Parser(OptionReader):
    """
    recursive-descent parser for a formal usage pattern (pattern mode).

    one instance per parse call: it owns the growing option table, so nothing
    leaks between docstrings.

    usage
        parser = Parser(parse_options(doc))
        tree = parser.parse(formal_usage(usage_section(doc)))
        options = parser.options   # declared + discovered inline
    """

    def parse(self, source, /):
        tokens = Tokens.from_pattern(source)
        result = self._expr(tokens)

        if tokens:
            if tokens.current() in (")", "]"):
                raise MissingEnclosureError(
                    "unmatched %r in the usage pattern" % tokens.current(),
                    title="missing enclosure",
                    code=FaultCode.MISSING_ENCLOSURE,
                    hint="open it with %r or remove it" % {")": "(", "]": "["}[tokens.current()],
                    token=tokens.current(),
                    docs=getdoc(FaultCode.MISSING_ENCLOSURE)
                )
            raise UnconsumedTokensError(
                "unexpected tokens left in the usage pattern: %s" % " ".join(tokens),
                title="unconsumed tokens",
                code=FaultCode.UNCONSUMED_TOKENS,
                hint="check the brackets and '|' separators of the usage section",
                tokens=tuple(tokens),
                docs=getdoc(FaultCode.UNCONSUMED_TOKENS)
            )

        tree = Sequence(*result)
        log.debug("usage pattern %r parsed into %r", source, tree)
        return tree

    def _expr(self, tokens):
        seq = self._seq(tokens)
        if tokens.current() != "|":
            return seq

        result = [Sequence(*seq)] if len(seq) > 1 else seq
        while tokens.current() == "|":
            tokens.move()
            seq = self._seq(tokens)
            result += [Sequence(*seq)] if len(seq) > 1 else seq
        return [Alternative(*result)] if len(result) > 1 else result

    def _seq(self, tokens):
        result = []
        while tokens.current() is not None and tokens.current() not in RESERVED:
            atom = self._atom(tokens)
            if tokens.current() == "...":
                atom = [Repeated(*atom)]
                tokens.move()
            result += atom
        return result

    def _atom(self, tokens):
        token = tokens.current()
        match token:
            case "(" | "[":
                tokens.move()
                closing, node = (")", Sequence) if token == "(" else ("]", Optional)
                result = node(*self._expr(tokens))
                if tokens.move() != closing:
                    raise MissingEnclosureError(
                        "unmatched %r in the usage pattern" % token,
                        title="missing enclosure",
                        code=FaultCode.MISSING_ENCLOSURE,
                        hint="close it with %r" % closing,
                        token=token,
                        docs=getdoc(FaultCode.MISSING_ENCLOSURE)
                    )
                return [result]
            case "options":
                tokens.move()
                return [AnyRemainingOptions()]
            case "--" | "-":
                tokens.move()
                return [Command(token)]
            case _ if token.startswith("--"):
                return self.read_long(tokens)
            case _ if token.startswith("-"):
                return self.read_shorts(tokens)
            case _ if is_argument(token):
                tokens.move()
                return [Argument(token)]
            case _:
                tokens.move()
                return [Command(token)]


def parse_pattern(source, options=(), /):
    """
    parse a formal usage pattern; returns (option table, Sequence tree).
    """
    parser = Parser(options)
    tree = parser.parse(source)
    return parser.options, tree


__all__ = (
    "RESERVED",
    "is_argument",
    "OptionReader",
    "Parser",
    "parse_pattern",
)
