"""
Parley Args facade: typed extraction over one invocation's token stream.

Args combines a TokenStream with a ResolverRegistry. Handlers use it to read
positionals through named resolvers and to query flags and options.

Extraction semantics
- pick(type):   resolve the next positional. Ok advances the cursor by one;
                Err leaves it untouched so the same token stays available for
                another attempt or for error reporting.
- repeat(type): pick until the first failure, the end, or `times` values.
- rest(type):   resolve every remaining positional joined with one space;
                all-or-nothing.
- an empty stream yields Err(UserError(ArgsMissing)).
- an unknown resolver name raises KeyError (a programming error).

Example
    match await args.pick("integer", minimum=1, maximum=10):
        case Ok(count):
            ...
        case Err(error):
            return Err(error)
"""
import logging
import math

from .contexts import *
from .faults import *
from .permissions import *
from .results import *
from .stream import *
from .utils import *

logger = logging.getLogger(__name__)


def _missing():
    return Err(UserError(
        Identifier.ARGS_MISSING,
        "There are no more arguments to read.",
        hint="check the command usage with the help command"
    ))


class Args:
    """
    Per-invocation facade.

    Parameters
    - stream: TokenStream
    - registry: ResolverRegistry
    - caller: opaque caller identity, forwarded to resolvers in their context.
    - level: PermissionLevel of the caller, used by permission gates.
    """

    def __init__(self, stream, registry, /, *, caller=None, level=PermissionLevel.REGULAR):
        if not isinstance(stream, TokenStream):
            raise TypeError("Args() first argument must be a TokenStream")
        self._stream = stream
        self._registry = registry
        self._caller = caller
        self._level = level
        self._path = []

    stream = mirror("stream")
    registry = mirror("registry")
    level = mirror("level")

    @property
    def caller(self):
        return self._caller

    @property
    def path(self):
        """
        Canonical names of the subcommands resolved so far (root excluded).
        """
        return tuple(self._path)

    def _enter(self, name, /):
        self._path.append(name)

    # --- stream delegation ------------------------------------------------------

    @property
    def finished(self):
        return self._stream.finished

    @property
    def index(self):
        return self._stream.index

    def save(self):
        self._stream.save()

    def restore(self):
        self._stream.restore()

    def discard(self):
        self._stream.discard()

    def next(self):
        return self._stream.next()

    def peek(self):
        return self._stream.peek()

    def remaining(self):
        """
        Remaining positionals, without consuming them.
        """
        return self._stream.rest()

    def has_flags(self, *names):
        return self._stream.has_flags(*names)

    def has_options(self, *names):
        return self._stream.has_options(*names)

    def get_option(self, *names):
        return self._stream.get_option(*names)

    def get_options(self, *names):
        return self._stream.get_options(*names)

    # --- extraction -------------------------------------------------------------

    def _context(self, type, context):
        return ArgumentContext(context, argument=self._registry.get(type), args=self, caller=self._caller)

    async def _resolve(self, type, parameter, context):
        result = await self._registry.run(type, parameter, self._context(type, context))
        logger.debug("resolved %r as %s: %r", parameter, type, result)
        return result

    async def pick(self, type, /, **context):
        """
        Resolve the next positional with resolver `type`; advance only on success.
        """
        self._registry.get(type)
        if (parameter := self._stream.peek()) is Unset:
            return _missing()
        result = await self._resolve(type, parameter, context)
        if result.is_ok():
            self._stream.advance()
        return result

    async def peek_result(self, type, /, **context):
        """
        Resolve the next positional with resolver `type` without consuming it.
        """
        self._registry.get(type)
        if (parameter := self._stream.peek()) is Unset:
            return _missing()
        return await self._resolve(type, parameter, context)

    async def repeat(self, type, /, *, times=math.inf, **context):
        """
        Pick repeatedly; Ok(list) of at least one value, else the first error.
        """
        if not (isinstance(times, int) or times == math.inf) or times < 1:
            raise ValueError("repeat() 'times' must be a positive integer")
        values = []
        while len(values) < times:
            match await self.pick(type, **context):
                case Ok(value):
                    values.append(value)
                case Err() as error:
                    if not values:
                        return error
                    break
        return Ok(values)

    async def rest(self, type, /, **context):
        """
        Resolve every remaining positional joined with a single space.
        """
        self._registry.get(type)
        if self._stream.finished:
            return _missing()
        parameters = self._stream.rest()
        result = await self._resolve(type, " ".join(parameters), context)
        if result.is_ok():
            self._stream.advance(len(parameters))
        return result

    def __repr__(self):
        return "%s(path=%r, stream=%r, level=%r)" % (type(self).__name__, self.path, self._stream, self._level)


__all__ = (
    "Args",
)
