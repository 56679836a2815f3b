"""
Docline pattern fixing: parsed tree → tree ready for matching.

Passes (each returns a new tree; the parsed tree is never touched)
1. resolve_options(tree, options)
   Every empty AnyRemainingOptions node ("[options]") receives one OptionRef per
   table option not referenced anywhere else in the tree, carrying its default.
   Nodes that already hold options are left alone, so resolving twice yields the
   same tree.
2. fix_repetitions(tree)
   Leaves that can occur more than once in a single invocation accumulate:
   arguments and value-taking options collect a List, commands and flags a Count.
   "Can occur more than once" is decided on the expansion of the tree into its
   plain alternatives, where a Repeated node counts twice:
       ((-a | -b) <x>...)  →  (-a <x> <x>) | (-b <x> <x>)
3. flatten(tree)
   Bindings holding the default value of every leaf name of the fixed tree; the
   matched values are laid over it, so names the argument vector never mentions
   keep their defaults.
"""
import dataclasses

from .patterns import *
from .values import Bindings, Count, List, Text


def _referenced(pattern):
    # explicit option references, ignoring anything already resolved into a shortcut
    if isinstance(pattern, AnyRemainingOptions):
        return set()
    if isinstance(pattern, BRANCHES):
        return set().union(*map(_referenced, pattern.children))
    if isinstance(pattern, OptionRef):
        return {pattern.identity}
    return set()


def resolve_options(pattern, options, /):
    """
    fill every "[options]" placeholder with the options not used explicitly.
    """
    referenced = _referenced(pattern)
    remaining = {}
    for definition in options:
        if definition.identity not in referenced:
            remaining.setdefault(definition.identity, definition.ref())

    def resolve(node):
        if isinstance(node, AnyRemainingOptions):
            return node if node.children else AnyRemainingOptions(*remaining.values())
        if isinstance(node, BRANCHES):
            return type(node)(*map(resolve, node.children))
        return node

    return resolve(pattern)


def alternatives(pattern, /):
    """
    expand a tree into the list of its plain alternatives (lists of leaves).

    Example: ((-a | -b) (-c | -d)) → [-a -c], [-a -d], [-b -c], [-b -d]
    Quirks: [-a] → (-a), (-a...) → (-a -a)
    """
    result = []
    groups = [[pattern]]
    while groups:
        children = groups.pop(0)
        branch = next((child for child in children if isinstance(child, BRANCHES)), None)
        if branch is None:
            result.append(children)
            continue
        children.remove(branch)
        match branch:
            case Alternative():
                groups.extend([child] + children for child in branch.children)
            case Repeated():
                groups.append(list(branch.children) * 2 + children)
            case _:
                groups.append(list(branch.children) + children)
    return result


def _accumulating(leaf):
    match leaf:
        case Argument() | OptionRef(arity=1):
            match leaf.value:
                case List():
                    return leaf
                case Text(raw):
                    return dataclasses.replace(leaf, value=List(raw.split()))
                case _:
                    return dataclasses.replace(leaf, value=List())
        case Command() | OptionRef(arity=0):
            return dataclasses.replace(leaf, value=Count(0))
    return leaf


def fix_repetitions(pattern, /):
    """
    switch leaves that may match several times to accumulating values.
    """
    repeating = set()
    for case in alternatives(pattern):
        repeating.update(leaf for leaf in case if case.count(leaf) > 1)
    return rebuild(pattern, lambda leaf: _accumulating(leaf) if leaf in repeating else leaf)


def flatten(pattern, /):
    """
    seed bindings: every leaf name of a fixed tree mapped to its default value.
    """
    return Bindings((leaf.name, leaf.value) for leaf in flat(pattern))


def fix(pattern, options, /):
    """
    resolve "[options]" placeholders, then accumulating leaves.
    """
    return fix_repetitions(resolve_options(pattern, options))


__all__ = (
    "resolve_options",
    "alternatives",
    "fix_repetitions",
    "flatten",
    "fix",
)
