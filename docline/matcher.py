"""
Docline pattern matching: fixed tree + argv leaves → collected bindings.

match_pattern(pattern, left, collected=()) is a pure function over immutable
tuples. It returns an Outcome(left, collected) on success, or None; a failed
attempt is rolled back by simply dropping its result.

Leaves
- Argument takes the first Argument leaf left and binds its text under its own name.
- Command requires the next Argument leaf to be its own name; binds true.
- OptionRef takes the first option leaf with the same (short, long) identity.
- A leaf whose pattern value is a List or a Count accumulates into the binding
  of the same name instead of adding a second one.

Branches
- Sequence: every child in order, all or nothing.
- Optional (and a resolved AnyRemainingOptions): each child may match; never fails.
- Alternative: every child is tried from the same input; the success leaving the
  fewest leaves wins, declaration order breaking ties.
- Repeated: the children as a sequence, again and again until an attempt fails or
  stops consuming; at least one success is required.

match_argv() is the top level: a failed match is a PatternNotMatchedError, leaves
left over after a successful one an UnconsumedArgvError.
"""
import dataclasses
from typing import NamedTuple

from .faults import *
from .patterns import *
from .values import Boolean, Count, List, Text, accumulate


class Outcome(NamedTuple):
    left: tuple
    collected: tuple


def _single(pattern, left):
    match pattern:
        case Command(name=name):
            for index, leaf in enumerate(left):
                if isinstance(leaf, Argument):
                    if leaf.value == Text(name):
                        return index, Command(name, Boolean(True))
                    break
        case Argument(name=name):
            for index, leaf in enumerate(left):
                if isinstance(leaf, Argument):
                    return index, Argument(name, leaf.value)
        case OptionRef():
            for index, leaf in enumerate(left):
                if isinstance(leaf, OptionRef) and leaf.identity == pattern.identity:
                    return index, leaf
    return None, None


def _match_leaf(pattern, left, collected):
    index, found = _single(pattern, left)
    if found is None:
        return None
    left = left[:index] + left[index + 1:]

    match pattern.value:
        case Count():
            increment = Count(1)
        case List():
            increment = found.value if isinstance(found.value, List) else List((found.value.native,))
        case _:
            return Outcome(left, collected + (found,))

    for position, bound in enumerate(collected):
        if bound.name == pattern.name:
            bound = dataclasses.replace(bound, value=accumulate(bound.value, increment))
            return Outcome(left, collected[:position] + (bound,) + collected[position + 1:])
    return Outcome(left, collected + (dataclasses.replace(found, value=increment),))


def _match_sequence(children, left, collected):
    outcome = Outcome(left, collected)
    for child in children:
        outcome = match_pattern(child, *outcome)
        if outcome is None:
            return None
    return outcome


def match_pattern(pattern, left, collected=(), /):
    """
    match one tree node against the leaves left; see the module docstring.
    """
    left, collected = tuple(left), tuple(collected)

    match pattern:
        case Argument() | Command() | OptionRef():
            return _match_leaf(pattern, left, collected)

        case Sequence():
            return _match_sequence(pattern.children, left, collected)

        case Optional() | AnyRemainingOptions():
            for child in pattern.children:
                left, collected = match_pattern(child, left, collected) or (left, collected)
            return Outcome(left, collected)

        case Alternative():
            outcomes = [
                outcome for child in pattern.children
                if (outcome := match_pattern(child, left, collected)) is not None
            ]
            return min(outcomes, key=lambda outcome: len(outcome.left)) if outcomes else None

        case Repeated():
            current, times = Outcome(left, collected), 0
            while (attempt := _match_sequence(pattern.children, *current)) is not None:
                times += 1
                progressed = len(attempt.left) < len(current.left)
                current = attempt
                if not progressed:
                    break
            return current if times else None

    raise TypeError("cannot match %r: not a pattern node" % (pattern,))


def describe(leaf, /):
    """
    argv spelling of a leaf, for messages.
    """
    match leaf:
        case OptionRef(arity=1, value=Text(value)):
            return "%s=%s" % (leaf.name, value)
        case OptionRef():
            return leaf.name
        case _:
            return str(leaf.value.native)


def match_argv(pattern, leaves, /):
    """
    match a whole argument vector; returns the collected leaf bindings.

    errors
    - PatternNotMatchedError when no invocation of the usage fits.
    - UnconsumedArgvError when one fits but arguments are left over.
    """
    outcome = match_pattern(pattern, leaves)

    if outcome is None:
        raise PatternNotMatchedError(
            "the arguments do not match any usage pattern",
            title="pattern not matched",
            code=FaultCode.PATTERN_NOT_MATCHED,
            hint="compare the command line with the usage section",
            docs=getdoc(FaultCode.PATTERN_NOT_MATCHED)
        )
    if outcome.left:
        extra = " ".join(map(describe, outcome.left))
        raise UnconsumedArgvError(
            "unexpected arguments left after matching the usage: %s" % extra,
            title="unconsumed arguments",
            code=FaultCode.UNCONSUMED_ARGV,
            hint="remove %r or check the usage section for where it belongs" % extra,
            leaves=outcome.left,
            docs=getdoc(FaultCode.UNCONSUMED_ARGV)
        )
    return outcome.collected


__all__ = (
    "Outcome",
    "match_pattern",
    "match_argv",
    "describe",
)
