"""
Commandant command nodes and help composition.

Overview
- Command: immutable tree node owning an ordered mix of child Options and
  child Commands (sub-commands), plus the help text composed for it when the
  tree is built.
- compose_help(command, hierarchy, ...): deterministic, column-aligned help
  text for one node of the tree.

Layout of a command help
    <banner, when the application declares one>
    <description>

    Usage: ./<app> <command path> [commands] [options]
    COMMANDS:
        <sub-command padded to WIDTH><description>

    OPTIONS:
        <key padded to WIDTH><description> (<allowed,values>): <Type>, Required

The "[commands]" usage part and the COMMANDS block only appear when the command
has visible sub-commands. Positional options are listed under their result key
("<command symbol><index>") since they have no spelling of their own.
"""
from .options import Option
from .utils import *
from .utils import NodeType

# Column where descriptions start in COMMANDS/OPTIONS listings.
WIDTH = 40


class Command(metaclass=NodeType):
    """
    Named node of the command tree.

    Responsibilities
    - Ownership: holds its options and sub-commands in declaration order; a node
      belongs to exactly one parent (the tree has no back-references).
    - Lookup: exposes options split by kind and sub-commands by name, and finds
      the named option matching a raw token.
    - Help: carries the help text composed by the tree builder (empty until built).

    Notes
    - Commands are frozen: the builder derives new nodes with copy.replace()
      rather than mutating the declared ones.
    """

    __introspectable__ = (
        "name",
        "descr",
        "nodes",
        "hidden",
        "help",
    )

    __displayable__ = (
        "name",
        "descr",
        "nodes",
        "hidden",
    )

    def __new__(cls, name, descr="", nodes=(), /, *, hidden=False):
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} 'name' must be a string")
        elif not name:
            raise ValueError(f"{cls.__typename__} 'name' cannot be empty")
        if not isinstance(descr, str):
            raise TypeError(f"{cls.__typename__} 'descr' must be a string")
        if not isinstance(hidden, bool):
            raise TypeError(f"{cls.__typename__} 'hidden' must be a boolean")
        if isinstance(nodes, Option | Command):
            nodes = (nodes,)
        for node in nodes:
            if not isinstance(node, Option | Command):
                raise TypeError(f"{cls.__typename__} {name!r} nodes must be options or commands, not {node!r}")

        self = super().__new__(cls)
        self._name = name
        self._descr = descr.strip()
        self._nodes = list(nodes)
        self._hidden = hidden
        self._help = ""
        return self

    @property
    def symbol(self):
        return symbolize(self._name)

    @property
    def options(self):
        return tuple(node for node in self._nodes if isinstance(node, Option))

    @property
    def positionals(self):
        return tuple(node for node in self._nodes if isinstance(node, Option) and node.positional)

    @property
    def named(self):
        return tuple(node for node in self._nodes if isinstance(node, Option) and node.named)

    @property
    def children(self):
        """sub-commands by name, in declaration order (first declaration wins)."""
        children = {}
        for node in self._nodes:
            if isinstance(node, Command):
                children.setdefault(node.name, node)
        return children

    def find(self, token, /):
        """
        Return the named option selected by token, or None.
        """
        for option in self.named:
            if option.matches(token):
                return option
        return None

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        clone = type(self)(
            overrides.get("name", self._name),
            overrides.get("descr", self._descr),
            overrides.get("nodes", self._nodes),
            hidden=overrides.get("hidden", self._hidden),
        )
        clone._help = overrides.get("help", self._help)
        return clone


def describe(option, key, /):
    line = "    " + key.ljust(WIDTH) + option.descr
    if option.allowed:
        line += " (%s)" % ",".join(map(str, option.allowed))
    line += ": " + option.type.label
    if option.required:
        line += ", Required"
    return line


def compose_help(command, hierarchy, /, *, app, banner=""):
    """
    compose the help text of a command.

    parameters
    - command: Command whose nodes are already in display order.
    - hierarchy: sequence of command names from the top-level command down to
      (and including) this one; used for the usage line.
    - app: application name shown in the usage line.
    - banner: optional application banner printed first.
    """
    lines = [banner] if banner else []
    lines.append(command.descr)
    lines.append("")

    children = sorted((child for child in command.children.values() if not child.hidden), key=lambda child: child.name)
    usage = "Usage: ./%s %s" % (app, " ".join(hierarchy))
    if children:
        usage += " [commands]"
    lines.append(usage + " [options]")

    if children:
        lines.append("COMMANDS:")
        lines.extend("    " + child.name.ljust(WIDTH) + child.descr for child in children)
        lines.append("")

    lines.append("OPTIONS:")
    for index, option in enumerate(command.positionals):
        lines.append(describe(option, command.symbol + str(index)))
    for option in command.named:
        lines.append(describe(option, option.key))
    return "\n".join(lines)


__all__ = (
    "Command",
    "compose_help",
    "describe",
    "WIDTH",
)
