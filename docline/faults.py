"""
Docline faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every issue the parser can
  report. Codes are grouped by domain to keep copy consistent and make
  logs/searches predictable.
- DoclineException / DoclineWarning: base types that carry message + options and
  know how to render themselves in a friendly, lowercased, and actionable way.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).
- getdoc(): optional description lookup for a code from the host application.

Taxonomy
- specification errors: the docstring has no (or more than one) "usage:" marker.
- grammar errors: the usage pattern itself is malformed.
- option errors: an option is used or declared with the wrong shape.
- match errors: the argument vector does not satisfy the usage pattern.

Every fault aborts the whole parse; there is no partial result. The core only
classifies; the caller decides whether a fault is user-facing (print usage and
exit) or a genuine bug in the docstring.

Integration
- The parsing stages raise the concrete exception classes directly.
- docopt() routes caught faults through trigger(fault, **ctx): in non-shell mode
  the exception propagates, in shell mode it is rendered via rich and the
  process exits.
"""
import copy
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the parser (stable identifiers).

    grouping (by high-level domain)
    - specification (211xx)
      • USAGE_NOT_FOUND, DUPLICATE_USAGE
    - grammar (212xx)
      • MISSING_ENCLOSURE, UNCONSUMED_TOKENS
    - options (213xx)
      • UNEXPECTED_ARGUMENT, MISSING_ARGUMENT, UNPARSABLE_OPTION,
        AMBIGUOUS_OPTION, DUPLICATE_OPTION
    - matching (214xx)
      • PATTERN_NOT_MATCHED, UNCONSUMED_ARGV
    - warnings (22xxx)
      • IGNORED_DEFAULT

    rationale
    - codes are discoverable (searchable in logs and docs) and normalized to a string
      via normalize() so hosts can remap them if desired (e.g., to shorter labels).
    """
    # --- specification errors (211xx) ---
    USAGE_NOT_FOUND             = 21101
    DUPLICATE_USAGE             = 21102

    # --- grammar errors (212xx) ---
    MISSING_ENCLOSURE           = 21201
    UNCONSUMED_TOKENS           = 21202

    # --- option errors (213xx) ---
    UNEXPECTED_ARGUMENT         = 21301
    MISSING_ARGUMENT            = 21302
    UNPARSABLE_OPTION           = 21303
    AMBIGUOUS_OPTION            = 21304
    DUPLICATE_OPTION            = 21305

    # --- match errors (214xx) ---
    PATTERN_NOT_MATCHED         = 21401
    UNCONSUMED_ARGV             = 21402

    # --- warnings (22xxx) ---
    IGNORED_DEFAULT             = 22101

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class _Fault:
    """
    rendering and triggering shared by exceptions and warnings.

    subclasses provide __palette__ (default styles) and __kind__ (the style key
    of the title: "error-title" or "warning-title").
    """
    __palette__ = {}
    __kind__ = "error-title"

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return "" if self.message is Unset else self.message

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, self.__palette__ | getattr(main, "__styles__", {}))
        colorful = self.options.get("colorful", True)

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        prog = text(getattr(main, "__prog__", self.options.get("prog", "docline")), styler("prog-name"))
        code = self.options.get("code")
        title = self.options.get("title", type(self).__name__)

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(code.normalize() if isinstance(code, FaultCode) else "-", styler("code")),
            " | ",
            text(title.title(), styler(self.__kind__)),
            " ]"
        )
        message = text(str(self), styler("message"))
        parts = [message]
        if hint := self.options.get("hint"):
            parts.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

        if self.options.get("fancy", False):
            return Panel(Group(*parts), title=header, title_align="left")

        return Group(header, *parts)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class DoclineException(_Fault, Exception):
    __palette__ = {
        # header parts
        "prog-name": "bold #E6E6F0",  # near-white program name
        "code": "bold #00E5FF",  # neon cyan fault code
        "error-title": "bold #FF4DA6",  # friendly pinky title

        # body
        "message": "#C8C8D0",  # soft light gray message
        "hint-arrow": "#9CE19C dim",  # gentle green arrow
        "hint": "italic #9CE19C",  # gentle green hint text
        "usage": "#8A8FA3",  # muted usage block
    }

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        if usage := self.options.get("usage"):
            console.print(Text(usage, style=self.__palette__["usage"] if self.options.get("colorful", True) else ""))
        sys.exit(1)


class SpecificationError(DoclineException): ...
class UsageNotFoundError(SpecificationError): ...
class DuplicateUsageError(SpecificationError): ...

class GrammarError(DoclineException): ...
class MissingEnclosureError(GrammarError): ...
class UnconsumedTokensError(GrammarError): ...

class OptionError(DoclineException): ...
class UnexpectedArgumentError(OptionError): ...
class MissingArgumentError(OptionError): ...
class UnparsableOptionError(OptionError): ...
class AmbiguousOptionError(OptionError): ...
class DuplicateOptionError(OptionError): ...

class MatchError(DoclineException): ...
class PatternNotMatchedError(MatchError): ...
class UnconsumedArgvError(PatternNotMatchedError): ...


class DoclineWarning(_Fault, Warning):
    __palette__ = {
        # header parts
        "prog-name": "bold #E6E6F0",  # near-white program name
        "code": "bold #FFB400",  # amber fault code for warnings
        "warning-title": "bold #FFC2E0",  # softer pinky title for warnings

        # body
        "message": "#D6D6DE",  # slightly lighter gray body
        "hint-arrow": "#B8EFAF dim",  # softer green arrow
        "hint": "italic #B8EFAF",  # softer green hint text
    }
    __kind__ = "warning-title"

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=4)
        console.print(self)


class IgnoredDefaultWarning(DoclineWarning): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via copy.replace(fault, **options) before triggering.
    - in shell mode, rendering happens via rich console; otherwise exceptions are
      raised and warnings go through the warnings module.

    typical options
    - shell, fancy, colorful, prog, usage, title, code, hint, and any other
      context the reporter may want to show (e.g., token/index).
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    lookup
    - the host application may expose a __docs__ mapping in __main__ where keys
      are FaultCode instances and values are short documentation strings.
    - when not found, returns None (renderers treat docs as optional).
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "DoclineException",
    "SpecificationError",
    "UsageNotFoundError",
    "DuplicateUsageError",
    "GrammarError",
    "MissingEnclosureError",
    "UnconsumedTokensError",
    "OptionError",
    "UnexpectedArgumentError",
    "MissingArgumentError",
    "UnparsableOptionError",
    "AmbiguousOptionError",
    "DuplicateOptionError",
    "MatchError",
    "PatternNotMatchedError",
    "UnconsumedArgvError",
    "DoclineWarning",
    "IgnoredDefaultWarning",
    "FaultCode",
    "trigger",
    "getdoc",
)
