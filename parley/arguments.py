r"""
Parley argument specifications: declarative metadata for leaves.

Overview
- Specs
  • Argument: positional value read through a resolver (e.g. "integer"), in order.
  • Option: named, value-bearing switch (--name=value), with aliases.
  • Flag: named, presence-only switch (--name), with aliases.

  Specs describe; they never parse. The classification strategy and the Args
  facade do the work; specs feed strategy derivation (every option/flag name
  and alias of a tree is allow-listed) and help generation.

- Introspection & representation
  • ArgumentType metaclass provides stable __repr__/__rich_repr__ and exposes
    the fields listed in __introspectable__ as read-only properties.

Metadata (sanitized on construction)
- Shared
  • descr: Unset | str | Text (short help), non-empty when provided.
- Argument only
  • name: display name, e.g. "remote".
  • type: resolver name in the registry, e.g. "string", "integer".
  • required: bool; optional arguments render as [name] in usage.
  • context: mapping of resolver options (minimum, maximum, enum, ...).
- Option/Flag
  • name + aliases: given without prefix ("force", "f"); a name starts with a
    letter and may contain letters, digits, "_" and "-". Duplicates are rejected.
  • metavar (Option only): value label in help, defaults to the upper-cased name.

Quick example:
    >>> from parley.arguments import Argument, Option, Flag
    >>> Argument("count", "integer", context={"minimum": 1})
    argument(name='count', type='integer', required=True, context=mappingproxy({'minimum': 1}), descr=None)
    >>> Flag("force", "f", descr="Overwrite an existing remote")
    flag(name='force', aliases=('f',), descr='Overwrite an existing remote')
"""
import functools
import operator
import re
from collections.abc import Mapping

from rich.text import Text

from .utils import *

NAME = re.compile(r"[^\W\d_][\w-]*(?<!-)")


class ArgumentType(type):
    """
    Metaclass that turns specs into introspectable, read-only records.

    Responsibilities
    - Derive __typename__ from the class name (camel-case split with hyphens),
      used in messages and help output.
    - Expose the names listed in __introspectable__ via mirror().
    - Provide stable __repr__/__rich_repr__ implementations.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_descr(cls, descr, /):
    """
    Internal: validate a short description; Unset becomes None.
    """
    if not isinstance(descr, str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    return coalesce(descr)


def _sanitize_names(cls, name, aliases, /):
    """
    Internal: validate a switch name and its aliases (no prefixes, no duplicates).
    """
    names = []
    for entry in (name, *aliases):
        if not isinstance(entry, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
        elif not (entry := entry.strip()):
            raise ValueError(f"{cls.__typename__} names cannot be empty-strings")
        elif not NAME.fullmatch(entry):
            raise ValueError(f"{cls.__typename__} names must start with a letter and hold no prefix, got {entry!r}")
        elif entry in names:
            raise ValueError(f"{cls.__typename__} names cannot contain duplicates")
        names.append(entry)
    return names[0], tuple(names[1:])


class Argument(metaclass=ArgumentType):
    """
    Positional argument read through a resolver.

    Parameters
    - name: str
      Display name in usage and help.
    - type: str
      Resolver name, looked up in the dispatcher's registry at pick time.
    - required: bool
      Optional arguments are shown as [name].
    - context: Mapping
      Resolver options forwarded to Args.pick (minimum, maximum, enum, ...).
    - descr: Unset | str
      Short description for help.
    """

    __introspectable__ = (
        "name",
        "type",
        "required",
        "context",
        "descr",
    )

    def __init__(self, name, type="string", /, required=True, *, context=None, descr=Unset):
        if not isinstance(name, str):
            raise TypeError(f"{self.__typename__} 'name' must be a string")
        elif not (name := name.strip()) or any(char.isspace() for char in name):
            raise ValueError(f"{self.__typename__} 'name' must be a non-empty word")
        if not isinstance(type, str) or not type:
            raise TypeError(f"{self.__typename__} 'type' must be a resolver name")
        if not isinstance(required, bool):
            raise TypeError(f"{self.__typename__} 'required' must be a boolean")
        if not isinstance(context := {} if context is None else context, Mapping):
            raise TypeError(f"{self.__typename__} 'context' must be a mapping")

        self._name = name
        self._type = type
        self._required = required
        self._context = dict(context)
        self._descr = _sanitize_descr(self.__class__, descr)

    @property
    def label(self):
        """
        Usage label: <name> when required, [name] otherwise.
        """
        return f"<{self._name}>" if self._required else f"[{self._name}]"

    async def pick(self, args, /, **context):
        """
        Resolve this argument from the next positional of args.
        """
        return await args.pick(self._type, **(self._context | context))


class Flag(metaclass=ArgumentType):
    """
    Named, presence-only switch.

    Parameters
    - name, *aliases: str (no prefix; the strategy owns prefixes)
    - descr: Unset | str
    """

    __introspectable__ = (
        "name",
        "aliases",
        "descr",
    )

    def __init__(self, name, /, *aliases, descr=Unset):
        self._name, self._aliases = _sanitize_names(type(self), name, aliases)
        self._descr = _sanitize_descr(type(self), descr)

    @property
    def names(self):
        return (self._name, *self._aliases)

    def present(self, args, /):
        """
        True when any of the flag's names was given.
        """
        return args.has_flags(*self.names)


class Option(metaclass=ArgumentType):
    """
    Named, value-bearing switch (value glued with a separator: --name=value).

    Parameters
    - name, *aliases: str (no prefix)
    - metavar: Unset | str, value label in help (defaults to NAME)
    - descr: Unset | str
    """

    __introspectable__ = (
        "name",
        "aliases",
        "metavar",
        "descr",
    )

    def __init__(self, name, /, *aliases, metavar=Unset, descr=Unset):
        self._name, self._aliases = _sanitize_names(type(self), name, aliases)
        if not isinstance(metavar, str | Unset):
            raise TypeError(f"{self.__typename__} 'metavar' must be a string")
        elif isinstance(metavar, str) and not (metavar := metavar.strip()):
            raise ValueError(f"{self.__typename__} 'metavar' cannot be empty")
        self._metavar = coalesce(metavar, self._name.upper().replace("-", "_"))
        self._descr = _sanitize_descr(type(self), descr)

    @property
    def names(self):
        return (self._name, *self._aliases)

    def value(self, args, /, default=None):
        """
        Last value given under any of the option's names, or default.
        """
        value = args.get_option(*self.names)
        return default if value is None else value

    def values(self, args, /):
        """
        Every value given under any of the option's names (possibly empty).
        """
        return args.get_options(*self.names) or ()


__all__ = (
    "Argument",
    "Option",
    "Flag",
)
