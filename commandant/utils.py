"""
Commandant utilities shared by the option, command and commander layers.

Contents
- Unset: "not given" sentinel for parameters where None already means something
  (a positional option is declared with a None key).
- coalesce(value, default): resolve Unset, keeping every other value (falsey included).
- mirror("attr"): read-only property over self._attr; containers come back as
  immutable views so built nodes stay frozen.
- symbolize(text): result key for a dashed spelling ("--dry-run" -> "dry_run").
- NodeType: metaclass of the tree nodes (read-only fields, repr, rich repr).

Examples
    >>> coalesce(Unset, "fallback"), coalesce(None, "fallback")
    ('fallback', None)
    >>> symbolize("fix-links")
    'fix_links'
"""
import functools
import re
from collections.abc import Mapping, Sequence, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Type of the Unset sentinel.

    Only one instance ever exists; it is falsey, prints as "Unset" and can be
    combined in unions ("str | Unset") for isinstance checks.
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __or__(self, other, /):
        return type(self) | other

    def __ror__(self, other, /):
        return other | type(self)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


Unset = UnsetType()


def coalesce(object, default=None, /):
    """Return default when object is Unset, object otherwise."""
    return default if object is Unset else object


def _named(function, name, /):
    function.__name__ = function.__qualname__ = name
    return function


def _view(object):
    if isinstance(object, Sequence) and not isinstance(object, str):
        return tuple(object)
    if isinstance(object, Mapping):
        return MappingProxyType(object)
    if isinstance(object, Set):
        return frozenset(object)
    return object


def mirror(name, /):
    """
    Build a read-only property exposing self._<name>.

    Lists come back as tuples, dicts as mapping proxies and sets as frozensets
    (shallow), anything else as-is.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")
    return property(_named(lambda self: _view(getattr(self, "_" + name)), name))


@functools.cache
def symbolize(text, /):
    """Strip the leading dashes of a spelling and turn inner hyphens into underscores."""
    if not isinstance(text, str):
        raise TypeError("symbolize() argument must be a string")
    return text.lstrip("-").replace("-", "_")


class NodeType(type):
    """
    Metaclass of the command tree nodes.

    - every name in __introspectable__ becomes a mirror() property;
    - __typename__ is the hyphenated lowercase class name, used to prefix
      configuration errors ("option 'descr' must be a string");
    - __repr__ and __rich_repr__ list the __displayable__ fields (or all the
      introspectable ones when __displayable__ is not set).
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        fields = namespace.get("__introspectable__", ())
        namespace = namespace | {field: mirror(field) for field in fields}
        namespace["__typename__"] = re.sub(r"(?<!^)(?=[A-Z])", "-", name).lower()
        self = super().__new__(cls, name, bases, namespace, **options)

        def __rich_repr__(self):
            for field in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield field, getattr(self, field)

        def __repr__(self):
            return "%s(%s)" % (
                type(self).__typename__,
                ", ".join("%s=%r" % pair for pair in self.__rich_repr__()),
            )

        self.__rich_repr__ = __rich_repr__
        self.__repr__ = __repr__
        return self


__all__ = (
    "UnsetType",
    "Unset",
    "coalesce",
    "mirror",
    "symbolize",
)
