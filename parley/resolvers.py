"""
Parley resolvers: turn one raw parameter into a typed value.

Layers
- resolve_*(parameter, ...) pure functions
  • Return Ok(value) or Err(Identifier). No messages, no context, no I/O.
- Resolver[T]
  • Named, pluggable unit: run(parameter, context) -> Ok(value) | Err(ArgumentError)
    (or an awaitable of that). Built-ins wrap a pure function and map the
    identifier to a human message built from the context.
- ResolverRegistry
  • Explicit name → resolver table (names and aliases share one namespace).
    ResolverRegistry.default() holds every built-in.

Built-ins
- string     length bounds (minimum/maximum)
- integer    integral numbers; "1e3" and "4.0" count as integers
- float      finite numbers
- number     int when integral, float otherwise
- boolean    truths/falses word lists, case-insensitive
- date       ISO-8601 or RFC 2822 → aware datetime (naive input is UTC)
- enum       one of context.enum, optionally case-insensitive
- hyperlink  absolute URL (alias "url") → urllib.parse.SplitResult

Bounds
- numeric and date bounds are inclusive unless the context says inclusive=False.
- NaN and infinities never resolve as numbers.
"""
import email.utils
import inspect
import logging
import math
import re
from datetime import UTC, datetime
from urllib.parse import SplitResult, urlsplit

from .faults import *
from .results import *
from .utils import *

logger = logging.getLogger(__name__)

INTEGER = re.compile(r"[+-]?\d+", re.ASCII)
DECIMAL = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)
SCHEME = re.compile(r"[A-Za-z][A-Za-z0-9+.\-]*")

DEFAULT_TRUTHS = ("1", "true", "+", "t", "yes", "y")
DEFAULT_FALSES = ("0", "false", "-", "f", "no", "n")


# --- pure resolve functions -----------------------------------------------------

def _outside(value, minimum, maximum, inclusive):
    """
    Return "small", "large" or None for value against optional bounds.
    """
    if minimum is not None and (value < minimum if inclusive else value <= minimum):
        return "small"
    if maximum is not None and (value > maximum if inclusive else value >= maximum):
        return "large"
    return None


def _parse_decimal(parameter):
    """
    Parse a finite decimal literal, or return None.
    """
    text = parameter.strip()
    if not DECIMAL.fullmatch(text):
        return None
    try:
        value = float(text)
    except (OverflowError, ValueError):
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return value


def _parse_integer(text):
    """
    Parse an integer literal, or return None (also past the int/str digit limit).
    """
    if not INTEGER.fullmatch(text):
        return None
    try:
        return int(text)
    except ValueError:
        return None


def resolve_string(parameter, /, *, minimum=None, maximum=None, inclusive=True):
    match _outside(len(parameter), minimum, maximum, inclusive):
        case "small":
            return Err(Identifier.ARGUMENT_STRING_TOO_SHORT)
        case "large":
            return Err(Identifier.ARGUMENT_STRING_TOO_LONG)
    return Ok(parameter)


def resolve_integer(parameter, /, *, minimum=None, maximum=None, inclusive=True):
    text = parameter.strip()
    if (value := _parse_integer(text)) is None:
        if INTEGER.fullmatch(text) or (number := _parse_decimal(text)) is None or not number.is_integer():
            return Err(Identifier.ARGUMENT_INTEGER_ERROR)
        value = int(number)
    match _outside(value, minimum, maximum, inclusive):
        case "small":
            return Err(Identifier.ARGUMENT_INTEGER_TOO_SMALL)
        case "large":
            return Err(Identifier.ARGUMENT_INTEGER_TOO_LARGE)
    return Ok(value)


def resolve_float(parameter, /, *, minimum=None, maximum=None, inclusive=True):
    if (value := _parse_decimal(parameter)) is None:
        return Err(Identifier.ARGUMENT_FLOAT_ERROR)
    match _outside(value, minimum, maximum, inclusive):
        case "small":
            return Err(Identifier.ARGUMENT_FLOAT_TOO_SMALL)
        case "large":
            return Err(Identifier.ARGUMENT_FLOAT_TOO_LARGE)
    return Ok(value)


def resolve_number(parameter, /, *, minimum=None, maximum=None, inclusive=True):
    text = parameter.strip()
    if (value := _parse_integer(text)) is None:
        if INTEGER.fullmatch(text) or (value := _parse_decimal(text)) is None:
            return Err(Identifier.ARGUMENT_NUMBER_ERROR)
        if value.is_integer():
            value = int(value)
    match _outside(value, minimum, maximum, inclusive):
        case "small":
            return Err(Identifier.ARGUMENT_NUMBER_TOO_SMALL)
        case "large":
            return Err(Identifier.ARGUMENT_NUMBER_TOO_LARGE)
    return Ok(value)


def resolve_boolean(parameter, /, *, truths=None, falses=None):
    """
    Case-insensitive lookup in the default word lists merged with the extra ones.
    """
    word = parameter.strip().casefold()
    if word in {truth.casefold() for truth in (*DEFAULT_TRUTHS, *(truths or ()))}:
        return Ok(True)
    if word in {false.casefold() for false in (*DEFAULT_FALSES, *(falses or ()))}:
        return Ok(False)
    return Err(Identifier.ARGUMENT_BOOLEAN_ERROR)


def _instant(bound):
    """
    Normalize a date bound (datetime or epoch seconds) to an aware datetime.
    """
    if bound is None:
        return None
    if isinstance(bound, datetime):
        return bound if bound.tzinfo is not None else bound.replace(tzinfo=UTC)
    if isinstance(bound, int | float) and not isinstance(bound, bool):
        return datetime.fromtimestamp(bound, UTC)
    raise TypeError("date bounds must be datetimes or epoch seconds")


def _parse_date(parameter):
    text = parameter.strip()
    if not text:
        return None
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    try:
        return email.utils.parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError):
        return None


def resolve_date(parameter, /, *, minimum=None, maximum=None, inclusive=True):
    if (value := _parse_date(parameter)) is None:
        return Err(Identifier.ARGUMENT_DATE_ERROR)
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    match _outside(value, _instant(minimum), _instant(maximum), inclusive):
        case "small":
            return Err(Identifier.ARGUMENT_DATE_TOO_EARLY)
        case "large":
            return Err(Identifier.ARGUMENT_DATE_TOO_FAR)
    return Ok(value)


def resolve_enum(parameter, /, *, enum=None, case_insensitive=False):
    """
    Return the canonical enum value equal to parameter (optionally ignoring case).
    """
    values = tuple(enum or ())
    if not values:
        return Err(Identifier.ARGUMENT_ENUM_EMPTY_ERROR)
    for value in values:
        if value == parameter:
            return Ok(value)
    if case_insensitive:
        for value in values:
            if value.casefold() == parameter.casefold():
                return Ok(value)
    return Err(Identifier.ARGUMENT_ENUM_ERROR)


def resolve_hyperlink(parameter, /):
    text = parameter.strip()
    if not text or any(char.isspace() for char in text):
        return Err(Identifier.ARGUMENT_HYPERLINK_ERROR)
    try:
        url = urlsplit(text)
    except ValueError:
        return Err(Identifier.ARGUMENT_HYPERLINK_ERROR)
    if not SCHEME.fullmatch(url.scheme) or not (url.netloc or url.path):
        return Err(Identifier.ARGUMENT_HYPERLINK_ERROR)
    return Ok(url)


# --- resolver protocol ----------------------------------------------------------

def _sanitize_name(name, kind="resolver name"):
    if not isinstance(name, str):
        raise TypeError(f"{kind} must be a string")
    if not name or name != name.strip() or any(char.isspace() for char in name):
        raise ValueError(f"{kind} must be a non-empty word, got {name!r}")
    return name


class Resolver[_T]:
    """
    Base class of every resolver.

    Subclasses set `name` (and optionally `aliases`) and implement run().
    run() returns Ok(value) or Err(ArgumentError), synchronously or as an
    awaitable; expected validation failures never raise.

    Example
        >>> class Color(Resolver):
        ...     name = "color"
        ...     def run(self, parameter, context):
        ...         if parameter in ("red", "green", "blue"):
        ...             return self.ok(parameter)
        ...         return self.error("ArgumentColorError", "Not a color.", parameter=parameter, context=context)
    """
    name = Unset
    aliases = ()

    def __init__(self, name=Unset, /, *, aliases=Unset):
        name = coalesce(name, type(self).name)
        if name is Unset:
            raise TypeError("%s requires a name" % type(self).__name__)
        self.name = _sanitize_name(name)
        aliases = coalesce(aliases, type(self).aliases)
        if isinstance(aliases, str):
            raise TypeError("resolver aliases must be an iterable of strings")
        self.aliases = tuple(_sanitize_name(alias, "resolver alias") for alias in aliases)
        if self.name in self.aliases:
            raise ValueError("resolver %r lists its own name as an alias" % self.name)

    def run(self, parameter, context, /):
        raise NotImplementedError("%s.run() is not implemented" % type(self).__name__)

    def ok(self, value, /):
        return Ok(value)

    def error(self, identifier, message=Unset, /, *, parameter, context=None, hint=Unset):
        return Err(ArgumentError(identifier, message, argument=self, parameter=parameter, context=context, hint=hint))

    def __repr__(self):
        return "<%s %r>" % (type(self).__name__, self.name)


class PureResolver[_T](Resolver[_T]):
    """
    Resolver backed by a pure resolve function and a message table.

    - options: context keys forwarded to the function as keyword arguments.
    - messages: identifier → callable(context) -> str.
    """
    options = ()
    messages = {}

    @staticmethod
    def resolve(parameter, /, **options):
        raise NotImplementedError

    def run(self, parameter, context, /):
        options = {key: context[key] for key in self.options if context.get(key) is not None}
        match self.resolve(parameter, **options):
            case Ok() as result:
                return result
            case Err(identifier):
                logger.debug("resolver %r rejected %r: %s", self.name, parameter, identifier)
                return self.error(
                    identifier,
                    self.messages[identifier](context),
                    parameter=parameter,
                    context=context
                )


def _bound(inclusive, minimum=True):
    if minimum:
        return "at least" if inclusive else "greater than"
    return "at most" if inclusive else "less than"


def _iso(bound):
    return _instant(bound).isoformat()


class StringResolver(PureResolver[str]):
    name = "string"
    options = ("minimum", "maximum", "inclusive")
    resolve = staticmethod(resolve_string)
    messages = {
        Identifier.ARGUMENT_STRING_TOO_SHORT: lambda context: "The argument must be %s %d %s long." % (
            _bound(context.inclusive), context.minimum, pluralize("character", context.minimum)
        ),
        Identifier.ARGUMENT_STRING_TOO_LONG: lambda context: "The argument must be %s %d %s long." % (
            _bound(context.inclusive, False), context.maximum, pluralize("character", context.maximum)
        ),
    }


class IntegerResolver(PureResolver[int]):
    name = "integer"
    options = ("minimum", "maximum", "inclusive")
    resolve = staticmethod(resolve_integer)
    messages = {
        Identifier.ARGUMENT_INTEGER_ERROR: lambda context: "The argument did not resolve to a valid integer.",
        Identifier.ARGUMENT_INTEGER_TOO_SMALL: lambda context: "The given number must be %s %s." % (
            _bound(context.inclusive), context.minimum
        ),
        Identifier.ARGUMENT_INTEGER_TOO_LARGE: lambda context: "The given number must be %s %s." % (
            _bound(context.inclusive, False), context.maximum
        ),
    }


class FloatResolver(PureResolver[float]):
    name = "float"
    options = ("minimum", "maximum", "inclusive")
    resolve = staticmethod(resolve_float)
    messages = {
        Identifier.ARGUMENT_FLOAT_ERROR: lambda context: "The argument did not resolve to a valid decimal number.",
        Identifier.ARGUMENT_FLOAT_TOO_SMALL: lambda context: "The given number must be %s %s." % (
            _bound(context.inclusive), context.minimum
        ),
        Identifier.ARGUMENT_FLOAT_TOO_LARGE: lambda context: "The given number must be %s %s." % (
            _bound(context.inclusive, False), context.maximum
        ),
    }


class NumberResolver(PureResolver[int | float]):
    name = "number"
    options = ("minimum", "maximum", "inclusive")
    resolve = staticmethod(resolve_number)
    messages = {
        Identifier.ARGUMENT_NUMBER_ERROR: lambda context: "The argument did not resolve to a valid number.",
        Identifier.ARGUMENT_NUMBER_TOO_SMALL: lambda context: "The given number must be %s %s." % (
            _bound(context.inclusive), context.minimum
        ),
        Identifier.ARGUMENT_NUMBER_TOO_LARGE: lambda context: "The given number must be %s %s." % (
            _bound(context.inclusive, False), context.maximum
        ),
    }


class BooleanResolver(PureResolver[bool]):
    name = "boolean"
    options = ("truths", "falses")
    resolve = staticmethod(resolve_boolean)
    messages = {
        Identifier.ARGUMENT_BOOLEAN_ERROR: lambda context: "The argument did not resolve to a boolean.",
    }


class DateResolver(PureResolver[datetime]):
    name = "date"
    options = ("minimum", "maximum", "inclusive")
    resolve = staticmethod(resolve_date)
    messages = {
        Identifier.ARGUMENT_DATE_ERROR: lambda context: "The argument did not resolve to a date.",
        Identifier.ARGUMENT_DATE_TOO_EARLY: lambda context: "The given date must be %s %s." % (
            "on or after" if context.inclusive else "after", _iso(context.minimum)
        ),
        Identifier.ARGUMENT_DATE_TOO_FAR: lambda context: "The given date must be %s %s." % (
            "on or before" if context.inclusive else "before", _iso(context.maximum)
        ),
    }


class EnumResolver(PureResolver[str]):
    name = "enum"
    options = ("enum", "case_insensitive")
    resolve = staticmethod(resolve_enum)
    messages = {
        Identifier.ARGUMENT_ENUM_EMPTY_ERROR: lambda context: "No values were provided to choose from.",
        Identifier.ARGUMENT_ENUM_ERROR: lambda context: "The argument must have one of the following values: %s" % (
            ", ".join(context.enum)
        ),
    }


class HyperlinkResolver(PureResolver[SplitResult]):
    name = "hyperlink"
    aliases = ("url",)
    resolve = staticmethod(resolve_hyperlink)
    messages = {
        Identifier.ARGUMENT_HYPERLINK_ERROR: lambda context: "The argument did not resolve to a valid URL.",
    }


BUILTINS = (
    StringResolver,
    IntegerResolver,
    FloatResolver,
    NumberResolver,
    BooleanResolver,
    DateResolver,
    EnumResolver,
    HyperlinkResolver,
)


class ResolverRegistry:
    """
    Explicit name → resolver table.

    - register(resolver) raises ValueError when its name or an alias is taken.
    - get(name) raises KeyError for unknown names (a programming error at the
      call site, never user input).
    """

    def __init__(self, resolvers=()):
        self._resolvers = {}
        self._lookup = {}
        for resolver in resolvers:
            self.register(resolver)

    @classmethod
    def default(cls):
        """
        A fresh registry holding one instance of every built-in resolver.
        """
        return cls(resolver() for resolver in BUILTINS)

    def register(self, resolver, /):
        if not isinstance(resolver, Resolver):
            raise TypeError("register() argument must be a Resolver instance")
        for key in (resolver.name, *resolver.aliases):
            if key in self._lookup:
                raise ValueError("resolver name %r is already registered" % key)
        self._resolvers[resolver.name] = resolver
        for key in (resolver.name, *resolver.aliases):
            self._lookup[key] = resolver
        return resolver

    def unregister(self, name, /):
        resolver = self.get(name)
        del self._resolvers[resolver.name]
        for key in (resolver.name, *resolver.aliases):
            del self._lookup[key]
        return resolver

    def get(self, name, /):
        try:
            return self._lookup[name]
        except KeyError:
            raise KeyError("no resolver registered under %r" % (name,)) from None

    async def run(self, name, parameter, context, /):
        """
        Run the named resolver, awaiting its result when it is asynchronous.
        """
        result = self.get(name).run(parameter, context)
        if inspect.isawaitable(result):
            result = await result
        if not isinstance(result, Ok | Err):
            raise TypeError("resolver %r must return Ok or Err, got %r" % (name, result))
        return result

    def __contains__(self, name):
        return name in self._lookup

    def __iter__(self):
        return iter(self._resolvers.values())

    def __len__(self):
        return len(self._resolvers)

    def __repr__(self):
        return "%s(%r)" % (type(self).__name__, sorted(self._resolvers))


__all__ = (
    "DEFAULT_TRUTHS",
    "DEFAULT_FALSES",
    "resolve_string",
    "resolve_integer",
    "resolve_float",
    "resolve_number",
    "resolve_boolean",
    "resolve_date",
    "resolve_enum",
    "resolve_hyperlink",
    "Resolver",
    "PureResolver",
    "StringResolver",
    "IntegerResolver",
    "FloatResolver",
    "NumberResolver",
    "BooleanResolver",
    "DateResolver",
    "EnumResolver",
    "HyperlinkResolver",
    "ResolverRegistry",
)
