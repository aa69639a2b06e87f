"""
Commandant recursive parser.

The parser walks the built command tree against a normalized vector (see
normalize.py). The vector is an owned deque threaded explicitly through the
recursion: tokens are removed as they are matched and never put back, there
is no backtracking.

Per command, in this order
1. window: every token up to the next sibling command name.
2. split the window into the command's own leading tokens and the trailing
   run that starts with a sub-command name.
3. recurse into each sub-command of the trailing run, left to right; tokens a
   sub-command could not use are pushed back in front of the own tokens.
4. a help option short-circuits everything (HelpRequest).
5. every required named option must be present.
6. named options are consumed left to right (inline "=value", flag presence,
   or the next token as a separate value).
7. there must be at least as many positional-looking tokens left as required
   positional options.
8. positional options are consumed left to right in declaration order and
   stored under "<command symbol><index>".
9. what is left goes back to the parent; at a top-level command it is a fault.

Results
- dict keyed by command symbol; each value a dict of option symbol → typed
  value, with invoked sub-commands nested under their own symbol. The "global"
  entry always exists.
"""
import itertools
from collections import deque

from .builder import HELP
from .faults import *
from .normalize import GLOBAL
from .options import Option, convert


class Parser:
    """
    state machine over one normalized argument vector.

    a parser is bound to a commander (for the command tree, the application
    help and fault surfacing) and holds no state between parse() calls.
    """

    def __init__(self, commander):
        self._commander = commander

    def parse(self, tokens, /):
        """
        parse a normalized vector into a fresh result tree.

        parameters
        - tokens: Iterable[str], the output of expand_chains().

        returns
        - dict[str, dict]: the result tree (see module docstring).
        """
        tokens = deque(tokens)
        commands = self._commander.commands
        results = {GLOBAL: {}}
        # every window runs up to the next top-level name, so this drains tokens
        while tokens and tokens[0] in commands:
            command = commands[tokens.popleft()]
            siblings = [name for name in commands if name != command.name]
            self._consume(command, None, siblings, tokens, results)
        return results

    def _help(self, command, /):
        return self._commander.help if command.name == GLOBAL else command.help

    def _trigger(self, fault, command, /, **options):
        self._commander.trigger(fault, help=self._help(command), command=command.name, **options)

    def _reject(self, command, leftovers, /):
        token = leftovers[0]
        kind = "named" if token.startswith("-") else "positional"
        self._trigger(
            InvalidOptionError(
                "invalid %s option %r" % (kind, token),
                title="invalid option",
                code=FaultCode.INVALID_OPTION,
                token=token,
                leftover=leftovers,
                hint="remove the extra input or run with --help to see valid forms",
                docs=getdoc(FaultCode.INVALID_OPTION),
            ),
            command,
        )

    def _convert(self, command, option, raw, /):
        try:
            return convert(option, raw)
        except InvalidValueError as fault:
            self._trigger(fault, command)

    def _consume(self, command, parent, siblings, tokens, results, /):
        """
        consume the window of one command (and its sub-commands) from tokens.

        returns
        - list[str]: tokens this command could not use, for its parent.
        """
        window = []
        while tokens and tokens[0] not in siblings:
            window.append(tokens.popleft())

        children = command.children
        opts = list(itertools.takewhile(lambda token: token not in children, window))
        rest = deque(window[len(opts):])
        entry = results.setdefault(command.symbol, {})

        # sub-commands are resolved before this command's own options
        bubbled = []
        while rest:
            child = children[rest.popleft()]
            others = [name for name in children if name != child.name]
            bubbled.extend(self._consume(child, command, others, rest, entry))
        opts[:0] = bubbled

        if any(HELP.matches(token) for token in opts):
            self._commander.trigger(HelpRequest(
                self._help(command),
                title="help",
                code=FaultCode.HELP_REQUEST,
                command=command.name,
            ))

        for option in command.named:
            if option.required and not any(option.matches(token) for token in opts):
                self._trigger(
                    MissingOptionError(
                        "required option %r was not given" % option.key,
                        title="missing option",
                        code=FaultCode.MISSING_OPTION,
                        token=option.long,
                        hint="add %s to the %r command" % (option.long, command.name),
                        docs=getdoc(FaultCode.MISSING_OPTION),
                    ),
                    command,
                )

        position = 0
        while position < len(opts):
            token = opts[position]
            if not token.startswith("-") or (option := command.find(token)) is None:
                position += 1
                continue
            del opts[position]
            name, inline = Option.split(token)
            if option.type.is_flag:
                entry[option.symbol] = True
                continue
            if inline is not None:
                raw = inline
            elif position < len(opts):
                raw = opts.pop(position)
            else:
                self._trigger(
                    MissingValueError(
                        "value not found for option %r" % name,
                        title="missing value",
                        code=FaultCode.MISSING_VALUE,
                        token=name,
                        hint="pass a value with %s=<%s> or %s <%s>" % (name, option.hint, name, option.hint),
                        docs=getdoc(FaultCode.MISSING_VALUE),
                    ),
                    command,
                )
            entry[option.symbol] = self._convert(command, option, raw)

        positionals = command.positionals
        required = sum(1 for option in positionals if option.required)
        if sum(1 for token in opts if not token.startswith("-")) < required:
            self._trigger(
                MissingPositionalError(
                    "positional option required for %r" % command.name,
                    title="missing positional",
                    code=FaultCode.MISSING_POSITIONAL,
                    hint="pass %d positional option(s) to the %r command" % (required, command.name),
                    docs=getdoc(FaultCode.MISSING_POSITIONAL),
                ),
                command,
            )

        leftovers = []
        slots = iter(enumerate(positionals))
        for token in opts:
            if token.startswith("-"):
                leftovers.append(token)
            elif (slot := next(slots, None)) is not None:
                index, option = slot
                entry[command.symbol + str(index)] = self._convert(command, option, token)
            elif parent is None:
                self._trigger(
                    InvalidPositionalError(
                        "invalid positional option %r" % token,
                        title="invalid positional",
                        code=FaultCode.INVALID_POSITIONAL,
                        token=token,
                        hint="remove this extra value or run with --help to see the expected usage",
                        docs=getdoc(FaultCode.INVALID_POSITIONAL),
                    ),
                    command,
                )
            else:
                leftovers.append(token)

        if leftovers and parent is None:
            self._reject(command, leftovers)
        return leftovers


__all__ = (
    "Parser",
)
