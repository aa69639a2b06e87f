"""
Commandant commander: the host-facing surface of the library.

A Commander owns the declared command tree of one application:
- add(name, descr, nodes): declare a top-level command (built and validated at once).
- add_global(*options): merge options into the synthetic "global" command, the
  container for options that may precede (or float between) commands.
- parse(argv): normalize and parse an argument vector into a result tree.
- commander[key] / key in commander: hash-like access to the last result.

Runtime flags
- shell: print faults/help with rich and exit (1 on errors, 0 for help) instead
  of raising them; meant for the CLI entry point of the host application.
- colorful: style rendered faults (palette overridable via __styles__ in __main__).

Quick example:
    >>> from commandant import Commander, Command, Option, OptionType
    >>> cmdr = Commander("reduce", "1.0.0")
    >>> cmdr.add_global(Option("-d|--debug", "Debug mode"))
    >>> cmdr.add("clean", "Clean components", [
    ...     Option(None, "Components to clean", type=OptionType.LIST, required=True, allowed=("iso", "image")),
    ... ])
    >>> cmdr.parse(["clean", "-d", "iso,image"])
    {'global': {'debug': True}, 'clean': {'clean0': ['iso', 'image']}}
"""
import os
import shlex
import sys
from collections.abc import Iterable

from .builder import HELP, build
from .commands import Command, WIDTH, describe
from .faults import trigger
from .normalize import GLOBAL, expand_chains, hoist_globals
from .options import Option
from .parser import Parser
from .utils import *


class Commander:
    """
    Declarative command tree plus parser entry point for one application.

    Lifecycle
    - configuration time: add()/add_global() build immutable command nodes;
      any declaration error raises TypeError/ValueError right away.
    - parse time: every parse() works on a private copy of the vector and
      returns (and remembers) a fresh result tree.
    """

    app = mirror("app")
    version = mirror("version")
    examples = mirror("examples")
    shell = mirror("shell")
    colorful = mirror("colorful")
    cmds = mirror("cmds")

    def __init__(self, app=Unset, version=Unset, examples=Unset, *, shell=False, colorful=False):
        """
        Parameters
        - app: str, application name used in usage lines (defaults to the script name).
        - version: str, appended to the banner as "<app>_v<version>".
        - examples: str, free text printed in the application help before the usage line.
        - shell, colorful: runtime flags (see module docstring).
        """
        for name, value in (("app", app), ("version", version), ("examples", examples)):
            if not isinstance(value, str | Unset):
                raise TypeError(f"commander {name!r} must be a string")
        self._app = coalesce(app, os.path.basename(sys.argv[0]) or "app")
        self._version = coalesce(version)
        self._examples = coalesce(examples)
        self._shell = bool(shell)
        self._colorful = bool(colorful)
        self._commands = {}
        self._global = build(Command(GLOBAL, "Global options"), app=self._app, banner=self.banner)
        self._cmds = {}

    @property
    def banner(self):
        """'<app>_v<version>' (or '<app>') underlined by an 80 columns rule."""
        title = self._app + ("_v" + self._version if self._version else "")
        return title + "\n" + "-" * 80

    @property
    def commands(self):
        """built top-level commands by name, "global" first."""
        return {GLOBAL: self._global} | self._commands

    @property
    def help(self):
        """application help: global options and the list of top-level commands."""
        lines = [self.banner]
        if self._examples:
            lines.append(self._examples)
        lines.append("Usage: ./%s [commands] [options]" % self._app)
        lines.append("OPTIONS:")
        for index, option in enumerate(self._global.positionals):
            lines.append(describe(option, GLOBAL + str(index)))
        lines.extend(describe(option, option.key) for option in self._global.named)
        lines.append("")
        lines.append("COMMANDS:")
        for command in sorted(self._commands.values(), key=lambda command: command.name):
            if not command.hidden:
                lines.append("    " + command.name.ljust(WIDTH) + command.descr)
        lines.append("")
        lines.append("see './%s COMMAND --help' for specific command help" % self._app)
        return "\n".join(lines)

    def add(self, name, descr="", nodes=(), /, *, hidden=False):
        """
        Declare a top-level command.

        Raises
        - ValueError: reserved ("global") or duplicate name, invalid command names
          or reserved help options anywhere in nodes.
        - TypeError: nodes that are neither options nor commands.
        """
        if name == GLOBAL:
            raise ValueError(f"command name {GLOBAL!r} is reserved")
        if name in self._commands:
            raise ValueError(f"command {name!r} was already added")
        self._commands[name] = build(Command(name, descr, nodes, hidden=hidden), app=self._app, banner=self.banner)
        return self._commands[name]

    def add_global(self, *options):
        """
        Merge options into the synthetic "global" command.

        Options accumulate across calls; positionals keep their declaration order.
        """
        for option in options:
            if not isinstance(option, Option):
                raise TypeError(f"add_global() arguments must be options, not {option!r}")
        declared = [option for option in self._global.options if option is not HELP]
        self._global = build(
            Command(GLOBAL, self._global.descr, [*declared, *options]),
            app=self._app,
            banner=self.banner,
        )
        return self._global

    def trigger(self, fault, /, **options):
        """surface a parse fault with this commander's runtime flags."""
        trigger(fault, tool=self, shell=self._shell, colorful=self._colorful, **options)

    def parse(self, argv=Unset, /):
        """
        Parse an argument vector.

        Parameters
        - argv:
          • Unset: read tokens from sys.argv[1:].
          • str: shell-like string; will be split via shlex.split.
          • Iterable[str]: pre-tokenized sequence.

        Behavior
        - An empty vector asks for the application help.
        - The vector is hoisted, chain-expanded and parsed; the input is never mutated.

        Returns
        - dict: the result tree, also kept for commander[key] lookups.
        """
        if argv is Unset:
            tokens = sys.argv[1:]
        elif isinstance(argv, str):
            tokens = shlex.split(argv)
        elif isinstance(argv, Iterable):
            tokens = list(argv)
            for token in tokens:
                if not isinstance(token, str):
                    raise TypeError("parse() argument must be a string or an iterable of strings")
        else:
            raise TypeError("parse() argument must be a string or an iterable of strings")

        tokens = hoist_globals(tokens or [HELP.short], self._global, self._commands.values())
        tokens = expand_chains(tokens, self.commands)
        self._cmds = Parser(self).parse(tokens)
        return self._cmds

    def __getitem__(self, key):
        return self._cmds.get(key)

    def __contains__(self, key):
        return key in self._cmds


__all__ = (
    "Commander",
)
