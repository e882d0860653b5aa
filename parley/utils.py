"""
Parley utilities (internal helpers shared by every layer).

Overview
- UnsetType / Unset
  • Singleton sentinel for “nothing here”: a missing keyword, an exhausted token
    stream, a flag that did not match. Distinct from None, which is a valid
    user-facing value in several places (e.g. an option that was not given).
- coalesce(value, default=None)
  • Materialize Unset into a concrete default while keeping None/0/""/[] as-is.
- rename(callable, name) / @rename("name")
  • Stable __name__/__qualname__ for generated callables.
- mirror("attr")
  • Read-only property over a private backing field (self._attr); containers are
    handed out as immutable snapshots so trees and specs cannot be mutated
    through their public attributes during dispatch.
- pluralize(word, count)
  • Tiny English pluralizer for user-facing messages ("1 character", "3 characters").

Stability
- Names listed in __all__ are re-used across the package; anything else is private.
"""
import builtins
import functools
from collections.abc import Sequence, Mapping, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset".
    - Non-subclassable and a process-wide singleton.

    Typical use
    - Default for keyword parameters where None is meaningful.
    - Miss indicator of TokenStream.next()/peek() on an exhausted stream.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in isinstance checks (e.g., str | Unset).
        """
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __reduce__(self):
        # Pickling must preserve identity.
        return type(self), ()

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Falsy values like None, 0, "" or () are preserved; only Unset is replaced.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(None, "fallback")   -> None
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator that will.

    Forms
    - rename(callable, name) -> callable (renamed in place)
    - rename(name)           -> decorator
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _freeze(object):
    """
    Shallow, read-only snapshot of a container.

    - Sequence (non-string) → tuple
    - Mapping               → MappingProxyType over a copy
    - Set                   → frozenset
    - anything else         → as-is
    """
    if isinstance(object, Sequence) and not isinstance(object, str):
        return tuple(object)
    if isinstance(object, Mapping):
        return MappingProxyType(dict(object))
    if isinstance(object, Set):
        return frozenset(object)
    return object


def mirror(name, /):
    """
    Define a read-only property that mirrors the private attribute "_{name}".

    Containers are returned as immutable snapshots (see _freeze), so callers can
    iterate a tree's children or a spec's aliases but never mutate them.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _freeze(getattr(self, "_" + name))

    return property(getter)


@functools.cache
def pluralize(word, count=2, /):
    """
    Best-effort English plural of a single word, chosen by count.

    Only the handful of forms our messages need are covered:
    consonant+y → -ies, s/sh/ch/x/z → +es, otherwise +s.

    Examples
    - pluralize("character", 1) -> "character"
    - pluralize("character", 3) -> "characters"
    - pluralize("entry")        -> "entries"
    """
    if not isinstance(word, str):
        raise TypeError("pluralize() argument must be a string")
    if count == 1 or not word:
        return word
    lower = word.lower()
    if lower.endswith("y") and len(lower) > 1 and lower[-2] not in "aeiou":
        return word[:-1] + "ies"
    if lower.endswith(("s", "sh", "ch", "x", "z")):
        return word + "es"
    return word + "s"


Unset = UnsetType()
"""
Internal sentinel for “not provided” / “nothing left”.

Notes
- Singleton: there is only one Unset instance.
- Falsy, but never equal to None, 0 or "".
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "pluralize",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
