"""
Parley dispatch: walk a command tree and run the selected leaf.

Resolution walk
- gate the root (permission, then can_run).
- while the current node is a Group:
  • save(), next(): the token is a speculative subcommand name.
  • it names a child (name or alias): run the child's gates; on success
    discard() (commit the token) and descend; on rejection restore() and
    return the gate error.
  • it names no child (or the stream is empty): restore(). A default child is
    entered without consuming anything (its gates still apply); otherwise the
    walk fails with SubcommandRequired and close-match suggestions.
- on a Leaf: Ok(Resolution(tree, path, leaf, args)); the tokens left in the
  stream belong to the leaf.

Gates
- permission: permits(required, level) must hold, else Preconditions.PermissionLevel.
- can_run(args, subcommand): Allow() passes; Deny(reason) fails with
  Preconditions.Custom carrying the reason. May be a coroutine function.

Router
- maps command names and aliases to dispatchers, strips a configured prefix
  and splits the command name from its parameters.
"""
import difflib
import inspect
import logging

from .args import *
from .commands import *
from .faults import *
from .helper import *
from .lexer import *
from .permissions import *
from .permissions import permits as default_permits
from .resolvers import *
from .results import *
from .stream import *
from .utils import *

logger = logging.getLogger(__name__)


class Resolution:
    """
    Outcome of a successful walk: where the invocation landed.

    Attributes
    - tree: CommandTree
    - path: tuple of canonical subcommand names (root excluded)
    - node: the Leaf that will run
    - args: the Args facade positioned after the last subcommand token
    """
    __slots__ = ("tree", "path", "node", "args")

    def __init__(self, tree, path, node, args):
        self.tree = tree
        self.path = tuple(path)
        self.node = node
        self.args = args

    def __repr__(self):
        return "%s(path=%r, node=%r)" % (type(self).__name__, self.path, self.node.name)

    def __rich_repr__(self):
        yield "path", self.path
        yield "node", self.node.name


class Dispatcher:
    """
    Binds a CommandTree to a resolver registry, a lexer and a permission hook.

    Parameters
    - tree: CommandTree
    - registry: ResolverRegistry (defaults to ResolverRegistry.default())
    - lexer: Lexer (defaults to Lexer())
    - permits: callable(required, level) -> bool, default level >= required
    """

    def __init__(self, tree, registry=Unset, /, *, lexer=Unset, permits=default_permits):
        if not isinstance(tree, CommandTree):
            raise TypeError("Dispatcher() first argument must be a CommandTree")
        if not isinstance(registry := ResolverRegistry.default() if registry is Unset else registry, ResolverRegistry):
            raise TypeError("Dispatcher() registry must be a ResolverRegistry")
        if not isinstance(lexer := Lexer() if lexer is Unset else lexer, Lexer):
            raise TypeError("Dispatcher() lexer must be a Lexer")
        if not callable(permits):
            raise TypeError("Dispatcher() permits must be callable")
        self._tree = tree
        self._registry = registry
        self._lexer = lexer
        self._permits = permits

    tree = mirror("tree")
    registry = mirror("registry")
    lexer = mirror("lexer")

    def parse(self, text, /):
        """
        Lex and classify text into a fresh TokenStream.
        """
        return TokenStream(self._tree.strategy.run(self._lexer.run(text)))

    def args(self, text, /, *, caller=None, level=PermissionLevel.REGULAR):
        """
        Fresh Args facade for one invocation of text.
        """
        return Args(self.parse(text), self._registry, caller=caller, level=level)

    async def _gate(self, args, node):
        if node.permission is not None and not self._permits(node.permission, args.level):
            logger.debug("permission gate rejected %r: needs %r, caller has %r", node.name, node.permission, args.level)
            return Err(UserError(
                Identifier.PRECONDITION_PERMISSION,
                "You need the %s permission level to use %r." % (node.permission.name.lower(), node.name),
                context={"subcommand": node.name, "required": node.permission, "level": args.level}
            ))
        if node.can_run is not None:
            verdict = node.can_run(args, node)
            if inspect.isawaitable(verdict):
                verdict = await verdict
            match verdict:
                case Allow():
                    pass
                case Deny(reason):
                    logger.debug("custom gate rejected %r: %s", node.name, reason)
                    return Err(UserError(Identifier.PRECONDITION_CUSTOM, reason, context={"subcommand": node.name}))
                case _:
                    raise TypeError("can_run of %r must return Allow or Deny, got %r" % (node.name, verdict))
        return Ok(None)

    def _required(self, group, token):
        names = [name for child in group.children for name in child.names]
        hint = Unset
        if token is not Unset and (matches := difflib.get_close_matches(token, names, n=3)):
            hint = "did you mean %s?" % " or ".join(repr(match) for match in matches)
        message = (
            "A subcommand is required: %s." % ", ".join(child.name for child in group.children)
            if token is Unset else
            "%r is not a subcommand of %r; expected one of: %s." % (
                str(token), group.name, ", ".join(child.name for child in group.children)
            )
        )
        return Err(UserError(
            Identifier.SUBCOMMAND_REQUIRED,
            message,
            context={"group": group.name, "token": coalesce(token), "choices": tuple(names)},
            hint=hint
        ))

    async def resolve(self, source, /, *, caller=None, level=PermissionLevel.REGULAR):
        """
        Walk the tree for source (raw text or an Args facade).

        Returns
        - Ok(Resolution) when a leaf is reached.
        - Err(UserError) on a gate rejection or a missing subcommand; the
          stream is left where the failing step started.

        Raises
        - RuntimeError: source is an Args facade that was already resolved.
        """
        args = source if isinstance(source, Args) else self.args(source, caller=caller, level=level)
        if args.path:
            raise RuntimeError("Args facade was already resolved to %r" % (args.path,))
        node = self._tree.root

        if (gate := await self._gate(args, node)).is_err():
            return gate

        while isinstance(node, Group):
            args.save()
            token = args.next()
            child = node.child(token) if token is not Unset else None

            if child is None:
                args.restore()
                if (child := node.fallback) is None:
                    return self._required(node, token)
                logger.debug("no child of %r matched %r, falling back to %r", node.name, token, child.name)
                if (gate := await self._gate(args, child)).is_err():
                    return gate
            else:
                if (gate := await self._gate(args, child)).is_err():
                    args.restore()
                    return gate
                args.discard()

            args._enter(child.name)
            node = child
            logger.debug("descended into %r (path=%r)", node.name, args.path)

        return Ok(Resolution(self._tree, args.path, node, args))

    async def dispatch(self, source, /, *, caller=None, level=PermissionLevel.REGULAR):
        """
        Resolve source and run the leaf.

        Returns
        - the handler's own Ok/Err result, or Ok(value) wrapping any other return value.
        - Err(UserError) when resolution fails or the handler raises a UserError.
          Any other exception propagates.
        """
        match await self.resolve(source, caller=caller, level=level):
            case Err() as error:
                return error
            case Ok(resolution):
                logger.debug("running %r", resolution.node.name)
                try:
                    result = resolution.node.run(resolution.args, resolution)
                    if inspect.isawaitable(result):
                        result = await result
                except UserError as error:
                    return Err(error)
                if isinstance(result, Ok | Err):
                    return result
                return Ok(result)

    def help(self, path=(), /, *, budget=Unset):
        """
        Help lines for the node at path, packed into messages when a budget is given.
        """
        lines = describe(self._tree, path)
        if budget is Unset:
            return lines
        return chunk(lines, budget)

    def __repr__(self):
        return "%s(%r)" % (type(self).__name__, self._tree.name)


class Router:
    """
    Prefix-aware front door for several command trees.

    Parameters
    - prefixes: Iterable[str], e.g. ("!", "?"); the longest matching prefix is stripped.
    - registry, lexer, permits: shared by every registered dispatcher.

    Behavior
    - route(text) -> (dispatcher, parameters), Err(UnknownCommand), or None when
      text does not start with a prefix (not a command).
    - dispatch(text) -> the dispatcher's result, Err(UnknownCommand), or None.
    """

    def __init__(self, prefixes=("!",), /, *, registry=Unset, lexer=Unset, permits=default_permits):
        if isinstance(prefixes, str):
            prefixes = (prefixes,)
        prefixes = tuple(prefixes)
        if not prefixes or not all(isinstance(prefix, str) for prefix in prefixes):
            raise TypeError("Router() prefixes must be a non-empty iterable of strings")
        self._prefixes = tuple(sorted(set(prefixes), key=len, reverse=True))
        self._registry = ResolverRegistry.default() if registry is Unset else registry
        self._lexer = Lexer() if lexer is Unset else lexer
        self._permits = permits
        self._dispatchers = {}
        self._lookup = {}

    prefixes = mirror("prefixes")
    registry = mirror("registry")

    def register(self, tree, /):
        """
        Add a tree; its root name and root aliases become command names.
        """
        if isinstance(tree, Dispatcher):
            tree = tree.tree
        dispatcher = Dispatcher(tree, self._registry, lexer=self._lexer, permits=self._permits)
        for name in tree.root.names:
            if name in self._lookup:
                raise ValueError("command name %r is already registered" % name)
        self._dispatchers[tree.name] = dispatcher
        for name in tree.root.names:
            self._lookup[name] = dispatcher
        return dispatcher

    def unregister(self, name, /):
        dispatcher = self.get(name)
        del self._dispatchers[dispatcher.tree.name]
        for key in dispatcher.tree.root.names:
            del self._lookup[key]
        return dispatcher

    def get(self, name, /):
        try:
            return self._lookup[name]
        except KeyError:
            raise KeyError("no command registered under %r" % (name,)) from None

    def __contains__(self, name):
        return name in self._lookup

    def __iter__(self):
        return iter(self._dispatchers.values())

    def __len__(self):
        return len(self._dispatchers)

    def split(self, text, /):
        """
        (prefix, name, parameters) for text, or None when no prefix matches.
        """
        for prefix in self._prefixes:
            if text.startswith(prefix):
                break
        else:
            return None
        match text[len(prefix):].split(None, 1):
            case []:
                return prefix, "", ""
            case [name]:
                return prefix, name, ""
            case [name, parameters]:
                return prefix, name, parameters.strip()

    def route(self, text, /):
        if (parts := self.split(text)) is None:
            return None
        _, name, parameters = parts
        if name not in self._lookup:
            matches = difflib.get_close_matches(name, list(self._lookup), n=3) if name else []
            return Err(UserError(
                Identifier.UNKNOWN_COMMAND,
                "Unknown command %r." % name if name else "No command name was given.",
                context={"name": name, "suggestions": tuple(matches)},
                hint="did you mean %s?" % " or ".join(map(repr, matches)) if matches else Unset
            ))
        logger.debug("routed %r to %r", name, self._lookup[name])
        return self._lookup[name], parameters

    async def dispatch(self, text, /, *, caller=None, level=PermissionLevel.REGULAR):
        match self.route(text):
            case None:
                return None
            case Err() as error:
                return error
            case (dispatcher, parameters):
                return await dispatcher.dispatch(parameters, caller=caller, level=level)

    def __repr__(self):
        return "%s(%r, commands=%r)" % (type(self).__name__, self._prefixes, sorted(self._dispatchers))


__all__ = (
    "Resolution",
    "Dispatcher",
    "Router",
)
