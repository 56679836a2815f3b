"""
Docline pattern tree.

Overview
- OptionDef: one row of the option table (short form, long form, arity, default).
- Leaves (a single concrete token slot)
  • Argument(name, value): positional value; name is "<name>"/UPPER, or "" for the
    loose positionals produced by the argv parser.
  • Command(name, value): a literal word that must appear verbatim.
  • OptionRef(short, long, arity, value): reference to an option of the table.
- Branches (combine children)
  • Sequence: all children, in order ("required" grouping).
  • Optional: each child zero or one time; never fails.
  • Alternative: exactly one child; the one consuming the most input wins.
  • Repeated: the children, one or more times.
  • AnyRemainingOptions: the "[options]" placeholder; empty until the fixer fills
    it with every table option not referenced elsewhere in the tree.

Invariants
- Trees are immutable (frozen dataclasses holding tuples). Transformations such as
  rebuild() always return new trees, so a parsed tree can be kept around untouched
  next to its fixed counterpart.
- Leaf equality is structural. OptionRef identity for matching is (short, long).
"""
from dataclasses import dataclass

from .utils import Unset
from .values import Absent, Boolean


@dataclass(frozen=True, slots=True)
class OptionDef:
    short: str = ""
    long: str = ""
    arity: int = 0
    default: object = Boolean(False)

    def __post_init__(self):
        if self.arity not in (0, 1):
            raise ValueError("option arity must be 0 or 1, got %r" % (self.arity,))

    @property
    def name(self):
        return self.long or self.short

    @property
    def identity(self):
        return self.short, self.long

    def ref(self, value=Unset):
        """
        Build a leaf referencing this option, bound to `value` (default: the declared default).
        """
        return OptionRef(self.short, self.long, self.arity, self.default if value is Unset else value)


@dataclass(frozen=True, slots=True)
class Argument:
    name: str
    value: object = Absent


@dataclass(frozen=True, slots=True)
class Command:
    name: str
    value: object = Boolean(False)


@dataclass(frozen=True, slots=True)
class OptionRef:
    short: str = ""
    long: str = ""
    arity: int = 0
    value: object = Boolean(False)

    @property
    def name(self):
        return self.long or self.short

    @property
    def identity(self):
        return self.short, self.long


class _Branch:
    """
    base of branch nodes: an immutable, ordered tuple of children.
    """
    __slots__ = ("children",)

    def __init__(self, *children):
        object.__setattr__(self, "children", tuple(children))

    def __setattr__(self, name, value, /):
        raise AttributeError("%s is immutable" % type(self).__name__)

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return self.children == other.children

    def __hash__(self):
        return hash((type(self).__name__, self.children))

    def __repr__(self):
        return "%s(%s)" % (type(self).__name__, ", ".join(map(repr, self.children)))

    def __rich_repr__(self):
        yield from self.children

    def __reduce__(self):
        return type(self), self.children


class Sequence(_Branch):
    __slots__ = ()


class Optional(_Branch):
    __slots__ = ()


class Alternative(_Branch):
    __slots__ = ()


class Repeated(_Branch):
    __slots__ = ()


class AnyRemainingOptions(_Branch):
    __slots__ = ()


BRANCHES = (Sequence, Optional, Alternative, Repeated, AnyRemainingOptions)


def flat(pattern, /, *types):
    """
    Pre-order enumeration of a tree.

    Without types, every leaf is returned. With types, nodes of those types are
    returned (without descending into them) along with nothing else.
    """
    if type(pattern) in types:
        return [pattern]
    if isinstance(pattern, _Branch):
        return [node for child in pattern.children for node in flat(child, *types)]
    return [] if types else [pattern]


def rebuild(pattern, leaf, /):
    """
    Structural map over the leaves of a tree; branches are rebuilt with the same shape.
    """
    if isinstance(pattern, _Branch):
        return type(pattern)(*(rebuild(child, leaf) for child in pattern.children))
    return leaf(pattern)


__all__ = (
    "OptionDef",
    "Argument",
    "Command",
    "OptionRef",
    "Sequence",
    "Optional",
    "Alternative",
    "Repeated",
    "AnyRemainingOptions",
    "BRANCHES",
    "flat",
    "rebuild",
)
