r"""
Commandant option specifications and value conversion.

Overview
- OptionType: closed enumeration of the value kinds an option can carry
  (string, integer, false/true-default flags, comma-delimited list).
- Option: immutable specification of one named flag/option or one positional
  option, declared with a compact key grammar.
- convert(option, raw): turn a raw token into the option's typed value,
  validating it against the option's allowed values.

Key grammar (named options)
- "--long"                 flag
- "--long=HINT"            value-bearing option, HINT is the help placeholder
- "-s|--long"              flag with a single-letter short form
- "-s|--long=HINT"         value-bearing option with a short form
A positional option is declared with a None key and is later addressed by its
owning command symbol and zero-based index (e.g. "clean0").

Validation highlights
- A hint requires a non-flag type, and a non-flag named option requires a hint.
- An unset type defaults to OptionType.FLAG for named options and
  OptionType.STRING for positionals.
- Allowed values must all share one Python type; flags take no allowed values.

Quick example:
    >>> from commandant.options import Option, OptionType
    >>> skip = Option("-s|--skip=COMPONENTS", "skip components", type=OptionType.LIST, allowed=("iso", "image"))
    >>> skip.short, skip.long, skip.hint, skip.symbol
    ('-s', '--skip', 'COMPONENTS', 'skip')
"""
import re
from collections.abc import Iterable
from enum import Enum

from .faults import FaultCode, InvalidValueError, getdoc
from .utils import *
from .utils import NodeType

_KEY = re.compile(r"(?:(?P<short>-[A-Za-z0-9])\|)?(?P<long>--[A-Za-z0-9]+(?:-[A-Za-z0-9]+)*)(?:=(?P<hint>[^\s=|]+))?")


class OptionType(Enum):
    """
    value kinds supported by an option.

    each member carries the label used in help output; the remaining
    attributes are derived from it.
    """
    STRING = "String"
    INTEGER = "Integer"
    FLAG = "Flag(false)"
    TRUE_FLAG = "Flag(true)"
    LIST = "Array"

    @property
    def label(self):
        return self.value

    @property
    def noun(self):
        """lowercase noun used in diagnostics (e.g. "invalid array value")."""
        return "flag" if self.is_flag else self.value.lower()

    @property
    def is_flag(self):
        return self in (OptionType.FLAG, OptionType.TRUE_FLAG)

    @property
    def default(self):
        return {OptionType.FLAG: False, OptionType.TRUE_FLAG: True}.get(self)


def _parse_key(cls, key, /):
    """
    Internal: split a key into (short, long, hint), raising ValueError with the
    most specific reason when the key does not follow the grammar.
    """
    if not isinstance(key, str):
        raise TypeError(f"{cls.__typename__} 'key' must be a string or None")
    if key.count("=") > 1:
        raise ValueError(f"{cls.__typename__} key {key!r} cannot contain more than one '='")
    if key.count("|") > 1:
        raise ValueError(f"{cls.__typename__} key {key!r} cannot contain more than one '|'")
    if not re.search(r"(^|\|)--", key.split("=")[0]):
        raise ValueError(f"{cls.__typename__} key {key!r} must declare a long form (e.g. --name)")
    if not (match := _KEY.fullmatch(key)):
        raise ValueError(f"{cls.__typename__} key {key!r} must look like '-s|--long=HINT'")
    return match["short"], match["long"], match["hint"]


def _sanitize_allowed(cls, allowed, type, /):
    """
    Internal: validate the allowed values collection and freeze it into a tuple.

    - must be iterable (strings are rejected, they would iterate characters)
    - members must share one Python type
    - duplicates are rejected, declaration order is preserved
    """
    if isinstance(allowed, str) or not isinstance(allowed, Iterable):
        raise TypeError(f"{cls.__typename__} 'allowed' must be an iterable of values")
    sanitized = []
    for value in allowed:
        if sanitized and value.__class__ is not sanitized[0].__class__:
            raise TypeError(f"{cls.__typename__} 'allowed' values must all be of the same type")
        if value in sanitized:
            raise ValueError(f"{cls.__typename__} 'allowed' cannot contain duplicates")
        sanitized.append(value)
    if sanitized and type.is_flag:
        raise ValueError(f"{cls.__typename__} flags cannot declare allowed values")
    return tuple(sanitized)


class Option(metaclass=NodeType):
    """
    Named or positional option specification.

    An Option is a frozen description: which spellings select it, what kind of
    value it carries, whether it must be given, and which values are accepted.
    Parsing never mutates it; the parser only reads from it.

    Properties
    - The names listed in __introspectable__ are exposed as read-only attributes.
    - symbol: key used in parse results (long form without dashes, hyphens as
      underscores); None for positionals, which are keyed by position instead.
    """

    __introspectable__ = (
        "key",
        "short",
        "long",
        "hint",
        "descr",
        "type",
        "required",
        "allowed",
    )

    __displayable__ = (
        "key",
        "type",
        "required",
        "allowed",
    )

    def __new__(cls, key, descr="", /, type=Unset, required=False, allowed=()):
        """
        Build and validate an option specification.

        Parameters
        - key: str | None
          the option grammar (see module docstring), None for a positional option.
        - descr: str
          free help text (trimmed).
        - type: OptionType | Unset
          value kind; defaults to FLAG for named options, STRING for positionals.
        - required: bool
          whether the option must be present on the command line.
        - allowed: Iterable
          closed set of permitted values (homogeneously typed).

        Raises
        - TypeError on wrong parameter types, unsupported type tokens or mixed allowed values.
        - ValueError on malformed keys and inconsistent type/hint pairings.
        """
        if key is None:
            short = long = hint = None
        else:
            short, long, hint = _parse_key(cls, key)

        if not isinstance(descr, str):
            raise TypeError(f"{cls.__typename__} 'descr' must be a string")
        if not isinstance(required, bool):
            raise TypeError(f"{cls.__typename__} 'required' must be a boolean")

        if type is Unset:
            if hint:
                raise ValueError(f"{cls.__typename__} {key!r} declares a hint so it must set a non-flag type")
            type = OptionType.FLAG if key else OptionType.STRING
        elif not isinstance(type, OptionType):
            raise TypeError(f"{cls.__typename__} 'type' must be an option-type, not {type!r}")

        if key is None and type.is_flag:
            raise ValueError(f"{cls.__typename__} positional options cannot be flags")
        if key is not None and type.is_flag and hint:
            raise ValueError(f"{cls.__typename__} {key!r} is a flag so it cannot declare a hint")
        if key is not None and not type.is_flag and not hint:
            raise ValueError(f"{cls.__typename__} {key!r} carries a value so it must declare a hint")

        self = super().__new__(cls)
        self._key = key
        self._short = short
        self._long = long
        self._hint = hint
        self._descr = descr.strip()
        self._type = type
        self._required = required
        self._allowed = _sanitize_allowed(cls, allowed, type)
        return self

    @property
    def positional(self):
        return self._key is None

    @property
    def named(self):
        return self._key is not None

    @property
    def symbol(self):
        return symbolize(self._long) if self._long else None

    def matches(self, token, /):
        """
        Return True when token selects this named option, either bare
        ("-s", "--skip") or with an inline value ("-s=x", "--skip=x").
        """
        if self.positional or not isinstance(token, str):
            return False
        name = token.split("=", 1)[0]
        return name in (self._short, self._long)

    @staticmethod
    def split(token, /):
        """
        Split a token into (name, inline) where inline is the text after the
        first '=' or None when the token carries no inline value.
        """
        name, separator, inline = token.partition("=")
        return name, inline if separator else None

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        fields = {
            "key": self._key,
            "descr": self._descr,
            "type": self._type,
            "required": self._required,
            "allowed": self._allowed,
        } | overrides
        return type(self)(fields.pop("key"), fields.pop("descr"), **fields)


def _check_allowed(option, value, raw, /):
    if option.allowed and value not in option.allowed:
        raise InvalidValueError(
            "invalid %s value %r" % (option.type.noun, raw),
            title="invalid value",
            code=FaultCode.INVALID_VALUE,
            token=raw,
            hint="use one of: %s" % ", ".join(map(str, option.allowed)),
            docs=getdoc(FaultCode.INVALID_VALUE),
        )
    return value


def convert(option, raw, /):
    """
    convert a raw token into the typed value of an option.

    behavior
    - STRING: passed through, checked against allowed values.
    - INTEGER: parsed as base-10; non-numeric tokens are invalid.
    - LIST: split on ',' and each element checked against allowed values.
    - flags: presence-only, never converted (returns True).

    raises
    - InvalidValueError ("invalid <type> value '<raw>'") on a failed conversion
      or a value outside a non-empty allowed set.
    """
    if not isinstance(option, Option):
        raise TypeError("convert() first argument must be an option")
    match option.type:
        case OptionType.STRING:
            return _check_allowed(option, raw, raw)
        case OptionType.INTEGER:
            try:
                value = int(raw, 10)
            except ValueError:
                raise InvalidValueError(
                    "invalid %s value %r" % (option.type.noun, raw),
                    title="invalid value",
                    code=FaultCode.INVALID_VALUE,
                    token=raw,
                    hint="pass a base-10 integer",
                    docs=getdoc(FaultCode.INVALID_VALUE),
                ) from None
            return _check_allowed(option, value, raw)
        case OptionType.LIST:
            return [_check_allowed(option, element, element) for element in raw.split(",")]
        case _:
            return True


__all__ = (
    "OptionType",
    "Option",
    "convert",
)
