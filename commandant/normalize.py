"""
Commandant argument normalization passes.

Both passes are pure: they read a token list and return a new one, so a parse
never depends on (or leaks into) the caller's vector.

hoist_globals(tokens, glob, commands)
- drops a literal "global" token, then moves every global option to the front
  right after a synthetic "global" marker, keeping the relative order in which
  the global tokens were given:
    ["build", "-d", "clean"] → ["global", "-d", "build", "clean"]
- tokens before the first command name are global (positionals or values);
  after that, a token is only hoisted when the most recently seen command does
  not own it itself. sub-command names are resolved along the command path
  being read, so two sub-commands sharing a name are never confused.

expand_chains(tokens, commands)
- a command given with no tokens of its own and declaring options is "chained":
  it borrows matching tokens from the next command that has a non-empty block.
    ["global", "clean", "build", "foo"] → ["global", "clean", "foo", "build", "foo"]
- named options are matched before positionals and move to the chained command
  (the donor loses them), so a donor's named option value is never mistaken for
  a positional of the chained command.
"""
import itertools
from collections import deque

from .builder import HELP

GLOBAL = "global"


def _separate(option, token, /):
    """True when option takes its value from the token following token."""
    return not option.type.is_flag and "=" not in token


def _descend(path, token, tops, /):
    """
    the command path once token is read, or None when token names no command.

    a top-level name starts a new path; any other name is looked up among the
    sub-commands of the path, innermost command first.
    """
    if token in tops:
        return [tops[token]]
    for depth in range(len(path), 0, -1):
        if (child := path[depth - 1].children.get(token)) is not None:
            return [*path[:depth], child]
    return None


def hoist_globals(tokens, glob, commands, /):
    """
    move global options to the front of the vector.

    parameters
    - tokens: Iterable[str], the raw argument vector.
    - glob: Command, the built "global" command.
    - commands: Iterable[Command], the built top-level commands (global excluded).

    returns
    - list[str]: ["global", <global tokens in original order>, <everything else>]
    """
    tokens = list(tokens)
    if GLOBAL in tokens:
        tokens.remove(GLOBAL)
    tops = {command.name: command for command in commands}

    hoisted = list(itertools.takewhile(lambda token: token not in tops, tokens))
    rest = deque(tokens[len(hoisted):])
    remaining = []
    path = []
    while rest:
        token = rest.popleft()
        if (descended := _descend(path, token, tops)) is not None:
            path = descended
            remaining.append(token)
            continue
        # the command being read keeps its own options (and their values)
        if path and (option := path[-1].find(token)):
            remaining.append(token)
            if _separate(option, token) and rest:
                remaining.append(rest.popleft())
            continue
        if option := glob.find(token):
            hoisted.append(token)
            if _separate(option, token) and rest:
                hoisted.append(rest.popleft())
            continue
        remaining.append(token)
    return [GLOBAL, *hoisted, *remaining]


def _donate(chained, donor, block, /):
    """
    tokens of a donor block that a chained command should receive a copy of.

    named options of the chained command go first: they are taken out of block
    (with their separate values) so the donor does not see them again. then one
    positional-looking token per positional slot of the chained command is
    copied from what is left, skipping the values of the donor's own options.
    """
    donated = []

    position = 0
    while position < len(block):
        option = chained.find(block[position])
        if option is None or option is HELP:
            position += 1
            continue
        token = block.pop(position)
        donated.append(token)
        if _separate(option, token) and position < len(block):
            donated.append(block.pop(position))

    slots = len(chained.positionals)
    position = 0
    while position < len(block) and slots:
        token = block[position]
        position += 1
        if token.startswith("-"):
            if (option := donor.find(token)) and _separate(option, token):
                position += 1
            continue
        donated.append(token)
        slots -= 1
    return donated


def expand_chains(tokens, commands, /):
    """
    copy options from later commands onto earlier chained ones.

    parameters
    - tokens: Iterable[str], a vector already processed by hoist_globals().
    - commands: Mapping[str, Command], the built top-level commands by name
      (the "global" command included, it never chains).

    returns
    - list[str]: command₁ [options₁] command₂ [options₂] … in original command order.
    """
    tokens = list(tokens)
    leading = list(itertools.takewhile(lambda token: token not in commands, tokens))

    segments = []
    for token in tokens[len(leading):]:
        if token in commands:
            segments.append((token, []))
        else:
            segments[-1][1].append(token)

    chained = []
    for name, block in segments:
        if name == GLOBAL:
            continue
        command = commands[name]
        if not block:
            if any(option is not HELP for option in command.options):
                chained.append((command, block))
            continue
        for target, target_block in chained:
            target_block.extend(_donate(target, command, block))
        chained.clear()

    return [*leading, *itertools.chain.from_iterable((name, *block) for name, block in segments)]


__all__ = (
    "GLOBAL",
    "hoist_globals",
    "expand_chains",
)
