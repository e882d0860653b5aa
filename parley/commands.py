r"""
Parley command tree: declarative subcommands and their registration.

Overview
- Subcommand: shared metadata (name, aliases, descr, permission, can_run,
  default, options, flags).
  • Leaf:  executable node, run(args, resolution) plus declared arguments.
  • Group: container node holding a sibling set of further subcommands.
  Leaf and Group are explicit variants; code walking a tree matches on them:

      match node:
          case Leaf(): ...
          case Group(): ...

- CommandTree: a root node (Leaf or Group) plus the classification Strategy.
  Without an explicit strategy, every option/flag name and alias declared
  anywhere in the tree is allow-listed.
- build(mapping): the same tree from a plain recursive mapping
  {name, aliases?, description, default?, options?, flags?, permission?,
   canRun?|can_run?, children | run, arguments?}.
- @leaf(...): decorator turning a handler into a Leaf.

Validation (fails fast, at construction)
- names and aliases: non-empty words; unique within one sibling set (names
  and aliases share a namespace).
- at most one default child per sibling set; a Group needs children.
- run and can_run must be callable; a mapping gives exactly one of run/children.

Quick example:
    >>> async def add(args, resolution): ...
    >>> tree = CommandTree(Group("git", [
    ...     Group("remote", [Leaf("add", add, arguments=["name", "url"], flags=["force"])]),
    ... ]))
    >>> tree.strategy
    Strategy(flags=['force'], options=[], prefixes=('--', '-', '—'), separators=('=', ':'))
"""
import functools
import inspect
import operator
import re
from collections.abc import Iterable, Mapping

from rich.text import Text

from .arguments import *
from .permissions import *
from .strategy import *
from .utils import *

NAME = re.compile(r"[^\W_][\w\-]*")


class CommandType(type):
    """
    Metaclass shared by every tree node.

    - __typename__: hyphenated lowercase class name, used in messages.
    - fields in __introspectable__ become read-only properties (mirror()).
    - __repr__/__rich_repr__ show the fields in __displayable__ (or all of them).
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        introspectable = namespace.get("__introspectable__", ())
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in introspectable
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
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_name(cls, name, kind="name"):
    if not isinstance(name, str):
        raise TypeError(f"{cls.__typename__} {kind} must be a string")
    elif not NAME.fullmatch(name := name.strip()):
        raise ValueError(f"{cls.__typename__} {kind} must be a non-empty word, got {name!r}")
    return name


def _sanitize_switches(cls, kind, spec, values):
    """
    Normalize declared options/flags into spec instances (plain names allowed).
    """
    if isinstance(values, str) or not isinstance(values, Iterable):
        raise TypeError(f"{cls.__typename__} {kind!r} must be an iterable")
    switches, seen = [], set()
    for value in values:
        if isinstance(value, str):
            value = spec(value)
        elif not isinstance(value, spec):
            raise TypeError(f"{cls.__typename__} {kind!r} must contain names or {spec.__typename__} specs")
        for name in value.names:
            if name in seen:
                raise ValueError(f"{cls.__typename__} {kind} name {name!r} is declared twice")
            seen.add(name)
        switches.append(value)
    return tuple(switches)


class Subcommand(metaclass=CommandType):
    """
    Metadata shared by Leaf and Group.

    Parameters
    - name: str, canonical name (what the resolved path records).
    - descr: Unset | str | Text, one-line description for help.
    - aliases: Iterable[str], alternative names.
    - options / flags: Iterable[str | Option] / Iterable[str | Flag].
    - permission: None | PermissionLevel (int or level name accepted).
    - can_run: None | callable(args, subcommand) -> Allow | Deny (or an awaitable of one).
    - default: bool, chosen by its parent when no sibling name matches.
    """

    __introspectable__ = (
        "name",
        "aliases",
        "descr",
        "permission",
        "can_run",
        "default",
        "options",
        "flags",
    )

    __displayable__ = (
        "name",
        "aliases",
        "descr",
        "permission",
        "default",
    )

    def __init__(
            self,
            name,
            /,
            descr=Unset,
            *,
            aliases=(),
            options=(),
            flags=(),
            permission=None,
            can_run=None,
            default=False
    ):
        cls = type(self)
        if cls is Subcommand:
            raise TypeError("Subcommand is abstract, use Leaf or Group")

        self._name = _sanitize_name(cls, name)

        if isinstance(aliases, str) or not isinstance(aliases, Iterable):
            raise TypeError(f"{cls.__typename__} 'aliases' must be an iterable of strings")
        self._aliases = []
        for alias in aliases:
            alias = _sanitize_name(cls, alias, "alias")
            if alias == self._name or alias in self._aliases:
                raise ValueError(f"{cls.__typename__} alias {alias!r} is declared twice")
            self._aliases.append(alias)

        if not isinstance(descr, str | Text | Unset):
            raise TypeError(f"{cls.__typename__} 'descr' must be a string")
        elif isinstance(descr, str) and not (descr := descr.strip()):
            raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
        self._descr = coalesce(descr)

        self._options = _sanitize_switches(cls, "options", Option, options)
        self._flags = _sanitize_switches(cls, "flags", Flag, flags)

        self._permission = None if permission is None else PermissionLevel.parse(permission)

        if can_run is not None and not callable(can_run):
            raise TypeError(f"{cls.__typename__} 'can_run' must be callable")
        self._can_run = can_run

        if not isinstance(default, bool):
            raise TypeError(f"{cls.__typename__} 'default' must be a boolean")
        self._default = default

    @property
    def names(self):
        """
        Canonical name followed by the aliases.
        """
        return (self._name, *self._aliases)

    def matches(self, token, /):
        return token in self.names


class Leaf(Subcommand):
    """
    Executable subcommand.

    Parameters
    - name, run, /, descr
    - arguments: Iterable[str | Argument], declared positionals for help
      (a plain string declares a required "string" argument).
    - **metadata: see Subcommand.

    run(args, resolution) may be a plain or a coroutine function.
    """

    __introspectable__ = Subcommand.__introspectable__ + (
        "run",
        "arguments",
    )

    __displayable__ = Subcommand.__displayable__ + (
        "arguments",
    )

    def __init__(self, name, run, /, descr=Unset, *, arguments=(), **metadata):
        super().__init__(name, descr, **metadata)
        if not callable(run):
            raise TypeError(f"{self.__typename__} 'run' must be callable")
        self._run = run

        if isinstance(arguments, str) or not isinstance(arguments, Iterable):
            raise TypeError(f"{self.__typename__} 'arguments' must be an iterable")
        self._arguments = []
        for argument in arguments:
            if isinstance(argument, str):
                argument = Argument(argument)
            elif not isinstance(argument, Argument):
                raise TypeError(f"{self.__typename__} 'arguments' must contain names or argument specs")
            if any(argument.name == other.name for other in self._arguments):
                raise ValueError(f"{self.__typename__} argument {argument.name!r} is declared twice")
            self._arguments.append(argument)


class Group(Subcommand):
    """
    Container subcommand holding one sibling set.

    Parameters
    - name, children, /, descr
    - **metadata: see Subcommand.

    Raises
    - ValueError: no children, a name/alias used twice among the children, or
      more than one default child.
    """

    __introspectable__ = Subcommand.__introspectable__ + (
        "children",
    )

    __displayable__ = Subcommand.__displayable__ + (
        "children",
    )

    def __init__(self, name, children, /, descr=Unset, **metadata):
        super().__init__(name, descr, **metadata)
        if isinstance(children, str | Mapping) or not isinstance(children, Iterable):
            raise TypeError(f"{self.__typename__} 'children' must be an iterable of subcommands")

        self._children = []
        self._index = {}
        for child in children:
            if not isinstance(child, Subcommand):
                raise TypeError(f"{self.__typename__} 'children' must contain Leaf or Group nodes")
            if child in self._children:
                raise ValueError(f"{self.__typename__} {self._name!r} lists {child.name!r} twice")
            for key in child.names:
                if self._index.setdefault(key, child) is not child:
                    raise ValueError(f"{self.__typename__} {self._name!r} has two children named {key!r}")
            self._children.append(child)

        if not self._children:
            raise ValueError(f"{self.__typename__} {self._name!r} must have at least one child")
        if sum(child.default for child in self._children) > 1:
            raise ValueError(f"{self.__typename__} {self._name!r} has more than one default child")

    def child(self, token, /):
        """
        The child named (or aliased) token, or None.
        """
        return self._index.get(token)

    @property
    def fallback(self):
        """
        The default child, or None.
        """
        return next((child for child in self._children if child.default), None)


def _walk(node, path=()):
    yield path, node
    if isinstance(node, Group):
        for child in node.children:
            yield from _walk(child, (*path, child.name))


class CommandTree:
    """
    A root node plus the classification strategy used to parse its invocations.

    Parameters
    - root: Leaf | Group | Mapping (built with build()).
    - strategy: Unset | Strategy; derived from the tree when Unset.
    """

    def __init__(self, root, /, strategy=Unset):
        if isinstance(root, Mapping):
            root = build(root)
        if not isinstance(root, Subcommand):
            raise TypeError("CommandTree() root must be a Leaf, a Group or a mapping")
        if not isinstance(strategy, Strategy | Unset):
            raise TypeError("CommandTree() strategy must be a Strategy")
        self._root = root
        self._strategy = coalesce(strategy) or self._derive()

    root = mirror("root")
    strategy = mirror("strategy")

    @property
    def name(self):
        return self._root.name

    @property
    def children(self):
        """
        The top-level sibling set (empty for a Leaf root).
        """
        return self._root.children if isinstance(self._root, Group) else ()

    def _derive(self):
        flags, options = set(), set()
        for _, node in _walk(self._root):
            for flag in node.flags:
                flags.update(flag.names)
            for option in node.options:
                options.update(option.names)
        return Strategy(flags=flags, options=options)

    def walk(self):
        """
        Yield (path, node) for every node, depth-first, root first with path ().
        """
        return _walk(self._root)

    def find(self, path=(), /):
        """
        Node at the given path of canonical names (or aliases).

        Raises
        - ValueError: a segment names no child (a programming error).
        """
        node = self._root
        for segment in path:
            if not isinstance(node, Group) or (node := node.child(segment)) is None:
                raise ValueError("unknown subcommand path %r" % (tuple(path),))
        return node

    def chain(self, path=(), /):
        """
        Nodes from the root down to the node at path, inclusive.
        """
        nodes, node = [self._root], self._root
        for segment in path:
            if not isinstance(node, Group) or (node := node.child(segment)) is None:
                raise ValueError("unknown subcommand path %r" % (tuple(path),))
            nodes.append(node)
        return tuple(nodes)

    def __repr__(self):
        return "%s(%r, strategy=%r)" % (type(self).__name__, self._root, self._strategy)


def build(structure, /):
    """
    Build a Leaf or Group from a recursive mapping.

    Keys
    - name (required), description, aliases, default, options, flags,
      permission, canRun or can_run
    - exactly one of: run (with optional arguments) | children (list of mappings)
    """
    if not isinstance(structure, Mapping):
        raise TypeError("build() argument must be a mapping")

    known = {
        "name", "description", "descr", "aliases", "default", "options", "flags",
        "permission", "canRun", "can_run", "run", "arguments", "children",
    }
    if unknown := set(structure) - known:
        raise ValueError("build() got unknown keys: %s" % ", ".join(sorted(map(str, unknown))))
    if "name" not in structure:
        raise ValueError("build() mapping requires a 'name'")
    if ("run" in structure) == ("children" in structure):
        raise ValueError("build() mapping %r needs exactly one of 'run' or 'children'" % structure["name"])
    if "canRun" in structure and "can_run" in structure:
        raise ValueError("build() mapping %r gives both 'canRun' and 'can_run'" % structure["name"])

    metadata = dict(
        aliases=structure.get("aliases", ()),
        options=structure.get("options", ()),
        flags=structure.get("flags", ()),
        permission=structure.get("permission"),
        can_run=structure.get("can_run", structure.get("canRun")),
        default=structure.get("default", False),
    )
    descr = structure.get("description", structure.get("descr", Unset))

    if "run" in structure:
        return Leaf(structure["name"], structure["run"], descr, arguments=structure.get("arguments", ()), **metadata)
    if "arguments" in structure:
        raise ValueError("build() mapping %r declares arguments on a group" % structure["name"])
    children = structure["children"]
    if isinstance(children, Mapping):
        raise TypeError("build() 'children' must be a list of mappings")
    return Group(structure["name"], [child if isinstance(child, Subcommand) else build(child) for child in children], descr, **metadata)


def leaf(name=Unset, /, descr=Unset, **metadata):
    """
    Decorator factory turning a handler into a Leaf.

    The handler's __name__ is the default name and the first line of its
    docstring the default description.

        @leaf(aliases=["rm"], flags=["force"])
        async def remove(args, resolution):
            ...
    """
    def wrapper(callback, /):
        if not callable(callback):
            raise TypeError("@leaf() must be applied to a callable")
        description = descr
        if description is Unset and (doc := inspect.getdoc(callback)):
            description = doc.strip().splitlines()[0]
        return Leaf(coalesce(name, callback.__name__.replace("_", "-")), callback, description, **metadata)

    if callable(name):
        callback, name = name, Unset
        return wrapper(callback)
    return rename(wrapper, "leaf")


__all__ = (
    "Subcommand",
    "Leaf",
    "Group",
    "CommandTree",
    "build",
    "leaf",
)
