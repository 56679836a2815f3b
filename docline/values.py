"""
Docline value model.

Every default declared in a docstring and every value bound by a successful
match is one of five shapes:

- Absent            → nothing was supplied and no default was declared
- Boolean(bool)     → presence of a flag or a command
- Text(str)         → raw string value of an argument or a value-taking option
- List(tuple[str])  → values collected by a repeating argument/option
- Count(int)        → how many times a repeating flag/command occurred

Values are immutable and compare structurally. `.native` turns any of them into
a plain Python object (None, bool, str, list[str], int), which is what the
serialization layer emits.

Bindings is the final name → value map returned by a parse.
"""
import functools
from dataclasses import dataclass
from typing import final

from rich.text import Text as RichText


@final
class AbsentType:
    """
    Singleton marking the absence of a value.

    Notes
    - Falsy, printable as "Absent", rendered dim by rich.
    - Instances are singletons per interpreter; pickling preserves identity.
    """
    __slots__ = ()

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    @property
    def native(self):
        return None

    def __bool__(self):
        return False

    def __repr__(self):
        return "Absent"

    def __rich__(self):
        return RichText(repr(self), style="dim")

    def __reduce__(self):
        return "Absent"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'AbsentType' is not an acceptable base type")


Absent = AbsentType()


@dataclass(frozen=True, slots=True)
class Boolean:
    value: bool

    @property
    def native(self):
        return self.value


@dataclass(frozen=True, slots=True)
class Text:
    value: str

    @property
    def native(self):
        return self.value


@dataclass(frozen=True, slots=True)
class List:
    items: tuple[str, ...] = ()

    def __post_init__(self):
        # accept any iterable of strings but always store a tuple
        object.__setattr__(self, "items", tuple(self.items))

    @property
    def native(self):
        return list(self.items)


@dataclass(frozen=True, slots=True)
class Count:
    value: int = 0

    @property
    def native(self):
        return self.value


Value = AbsentType | Boolean | Text | List | Count


def accumulate(current, increment, /):
    """
    Fold one more occurrence into an accumulating value.

    Counts add up, lists concatenate. Any other combination is a programming
    error in the matcher and raises TypeError.
    """
    match current, increment:
        case Count(total), Count(step):
            return Count(total + step)
        case List(items), List(more):
            return List(items + more)
    raise TypeError("cannot accumulate %r into %r" % (increment, current))


class Bindings(dict):
    """
    Final name → Value map of a successful match.

    Ordered by insertion like any dict; `native()` returns a plain dict sorted by
    name, ready for json.dumps.
    """

    def native(self):
        return {name: self[name].native for name in sorted(self)}

    def __repr__(self):
        return "{%s}" % ",\n ".join("%r: %r" % item for item in sorted(self.items()))

    def __rich_repr__(self):
        for name in sorted(self):
            yield name, self[name]


__all__ = (
    "AbsentType",
    "Absent",
    "Boolean",
    "Text",
    "List",
    "Count",
    "Value",
    "accumulate",
    "Bindings",
)
