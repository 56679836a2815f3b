"""
Docline utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the parsing stages and the fault layer.

Overview
- UnsetType / Unset
  • Singleton sentinel to represent “value not provided” without conflating with None.
  • Falsey (bool(Unset) is False), printable as "Unset", and non-subclassable.

- ordinal(number)
  • Human-friendly ordinal label for a 1-based position ("first", "second", "11th").
    Fault messages lead with it so users learn where the offending token sits.

Stability and contract
- These utilities are re-exported via __all__.
- Names not in __all__ are internal and may change without notice.

Quick examples
    >>> ordinal(2), ordinal(12), ordinal(23)
    ('second', '12th', '23rd')
"""
import functools
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    Used where None is a legitimate user value (e.g. a version string that may
    be None) but the API needs to tell “not provided” apart.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset".
    - Non-subclassable and a process-wide singleton.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in annotations (e.g., str | UnsetType).
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


@functools.cache  # Memoize to avoid recomputing common ordinals in messages
def ordinal(number, /):
    """
    Return a human-friendly ordinal label for a 1-based position.

    - 1..10 are rendered as words ("first"…"tenth") for nicer phrasing in messages.
    - Other numbers use numeric ordinals with correct English suffixes.
    """
    if not isinstance(number, int) or isinstance(number, bool):
        raise TypeError("ordinal() argument must be an integer")

    # Prefer word forms for the first ten positions
    try:
        return {
            1: "first",
            2: "second",
            3: "third",
            4: "fourth",
            5: "fifth",
            6: "sixth",
            7: "seventh",
            8: "eighth",
            9: "ninth",
            10: "tenth",
        }[number]
    except KeyError:
        pass

    # Handle the “teens” exception: 11th, 12th, 13th (and 111th, 112th, 113th, …)
    if 10 < number % 100 < 20:
        return f"{number}th"

    return f'{number}%s' % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


Unset = UnsetType()
"""
Internal sentinel for “not provided”.

Typical pattern: a keyword default of Unset (docopt's argv and version) tells
"not provided" apart from an explicit None or "".
"""


__all__ = (
    # Functions
    "ordinal",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
