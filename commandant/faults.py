"""
Commandant parse faults, help requests and their rich rendering.

Contents
- FaultCode: stable numeric identifier of every user-facing parse fault.
- CommandException: message plus frozen keyword context; renders itself with
  rich (header, message, hint) followed by the help of the command being parsed.
- HelpRequest: the non-error outcome of a matched help option.
- trigger(fault, **ctx): merge runtime context into a fault and surface it.
- getdoc(code): documentation string the host application attached to a code.

Declaration mistakes (malformed option keys, reserved or repeated names) are
not faults: they are raised on the spot as TypeError/ValueError while the host
builds its command tree.

Surfacing
- shell=False: the fault is raised, the caller decides.
- shell=True: the fault is printed (stderr for errors, stdout for help) and the
  process exits with status 1 for errors, 0 for help requests.

Host hooks (module attributes of __main__)
- __prog__: program name shown in fault headers.
- __styles__: palette overrides for colorful rendering.
- __codes__: FaultCode -> label overrides.
- __docs__: FaultCode -> documentation string.
"""
import copy
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)
output = Console()

PALETTE = {
    "prog-name": "bold #F0F0F0",
    "code": "bold #5FD7FF",
    "error-title": "bold #FF5F87",
    "error-message": "#D0D0D0",
    "hint-arrow": "dim #87D787",
    "hint": "italic #87D787",
    "help": "",
}


class FaultCode(IntEnum):
    """
    parse fault identifiers, grouped by what went wrong.

    - 1110x: help
    - 1111x: named options (missing, missing value, unknown)
    - 1112x: positional options (missing, extra)
    - 1113x: values (conversion, allowed set)
    """
    HELP_REQUEST       = 11101

    MISSING_OPTION     = 11111
    MISSING_VALUE      = 11112
    INVALID_OPTION     = 11113

    MISSING_POSITIONAL = 11121
    INVALID_POSITIONAL = 11122

    INVALID_VALUE      = 11131

    def normalize(self):
        """label of this code: the host's __codes__ entry, else the number."""
        labels = getattr(__import__("__main__"), "__codes__", {})
        return str(labels.get(self, self.value))


class CommandException(Exception):
    """
    base class of parse faults.

    the context (title, code, hint, help, token, command, tool, shell,
    colorful, ...) is frozen in options; copy.replace() derives a new fault
    with extra context, which is how the commander attaches its runtime flags.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message or ""

    @property
    def help(self):
        """help text of the command that was being parsed when the fault happened."""
        return self.options.get("help", "")

    def __rich__(self):
        main = __import__("__main__")
        styles = defaultdict(str, PALETTE | getattr(main, "__styles__", {}))
        colorful = self.options.get("colorful", False)

        def styled(fragment, style):
            return Text(str(fragment or ""), styles[style] if colorful else "")

        code = self.options.get("code")
        prog = getattr(main, "__prog__", getattr(self.options.get("tool"), "app", ""))
        parts = [
            Text.assemble(
                "[ ", styled(prog, "prog-name"),
                " — ", styled(code.normalize() if code else "", "code"),
                " | ", styled(self.options.get("title", "error").title(), "error-title"),
                " ]",
            ),
            styled(self.message, "error-message"),
        ]
        if hint := self.options.get("hint"):
            parts.append(Text.assemble(styled(" → ", "hint-arrow"), styled(hint, "hint")))
        if self.help:
            parts += [Text(""), styled(self.help, "help")]
        return Group(*parts)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self, soft_wrap=True)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **(dict(self.options) | overrides))


class HelpRequest(CommandException):
    """
    outcome of a matched help option.

    the message is the help text itself; in shell mode it is printed verbatim
    on stdout and the process exits successfully.
    """

    @property
    def help(self):
        return self.options.get("help", self.message)

    def __rich__(self):
        return Text(self.help)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        output.print(self, soft_wrap=True)
        sys.exit(0)


class MissingOptionError(CommandException): ...
class MissingValueError(CommandException): ...
class InvalidOptionError(CommandException): ...
class MissingPositionalError(CommandException): ...
class InvalidPositionalError(CommandException): ...
class InvalidValueError(CommandException): ...


def trigger(fault, /, **options):
    """
    surface fault once options are merged into its context.

    fault must implement __replace__ (context merge) and __trigger__ (raise or
    print and exit, depending on its "shell" option).
    """
    for method in ("__replace__", "__trigger__"):
        if not callable(getattr(fault, method, None)):
            raise TypeError("trigger() argument must implement %s()" % method)
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """documentation the host attached to code through __docs__, or None."""
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    return getattr(__import__("__main__"), "__docs__", {}).get(code)


__all__ = (
    "CommandException",
    "HelpRequest",
    "MissingOptionError",
    "MissingValueError",
    "InvalidOptionError",
    "MissingPositionalError",
    "InvalidPositionalError",
    "InvalidValueError",
    "FaultCode",
    "trigger",
    "getdoc",
)
