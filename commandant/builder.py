"""
Commandant tree builder.

Turns declared Command nodes into built ones: validated, with the shared help
option injected, options in display order and help text composed. Declared
nodes are never mutated; every built node is a fresh copy.

Rules enforced (all raise ValueError immediately, leaving nothing half-built)
- command names use lowercase letters and hyphens only
- sibling sub-commands have distinct names
- options of one command have distinct short/long spellings
- "-h"/"--help" are reserved for the injected help option anywhere in the tree
"""
import copy
import re

from .commands import Command, compose_help
from .options import Option

HELP = Option("-h|--help", "Print command/options help")


def _validate_options(command, path, /):
    spellings = set()
    for option in command.named:
        for spelling in (option.short, option.long):
            if spelling in (HELP.short, HELP.long):
                raise ValueError(f"command {' '.join(path)!r} cannot declare {spelling!r}, 'help' is reserved")
            if spelling in spellings:
                raise ValueError(f"command {' '.join(path)!r} declares {spelling!r} more than once")
            if spelling:
                spellings.add(spelling)


def build(command, hierarchy=(), /, *, app, banner=""):
    """
    validate and assemble one command (and, recursively, its sub-commands).

    parameters
    - command: declared Command.
    - hierarchy: names of the ancestors of this command, top-level first.
    - app, banner: forwarded to compose_help() for the usage line and header.

    returns
    - Command: the built node; its nodes are positionals (declaration order),
      named options sorted by key (help included), then built sub-commands.
    """
    if not isinstance(command, Command):
        raise TypeError(f"build() argument must be a command, not {command!r}")
    path = (*hierarchy, command.name)
    if not re.fullmatch(r"[a-z-]+", command.name):
        raise ValueError(f"command {' '.join(path)!r} name must contain only lowercase letters and hyphens")
    _validate_options(command, path)

    children = []
    for node in command.nodes:
        if not isinstance(node, Command):
            continue
        if any(child.name == node.name for child in children):
            raise ValueError(f"command {' '.join(path)!r} declares sub-command {node.name!r} more than once")
        children.append(build(node, path, app=app, banner=banner))

    named = sorted((*command.named, HELP), key=lambda option: option.key)
    built = copy.replace(command, nodes=(*command.positionals, *named, *children))
    return copy.replace(built, help=compose_help(built, path, app=app, banner=banner))


__all__ = (
    "HELP",
    "build",
)
