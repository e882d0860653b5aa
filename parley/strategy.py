"""
Parley classification strategy: label each piece as positional, flag or option.

Configuration
- prefixes:   strings introducing a switch, e.g. ("--", "-", "—"). Longest prefix wins.
- separators: strings splitting an option's name from its value, e.g. ("=", ":").
- flags / options, independently:
  • True                → allow-all
  • False / None / ()   → allow-none
  • iterable of names   → allow-listed (names are given without prefix)

Matching (per piece)
- option first: prefix + name + separator + non-empty value, all inside one piece.
  The option form is the stricter superset pattern, hence checked first.
- flag next: prefix + name, no separator anywhere in the name.
- a syntactic match whose name is not allowed is a non-match → positional.
- names never start with a digit, so "-5" stays a (negative number) positional.
- a piece that started with a quote is always positional: quoting escapes the
  switch syntax ("--force" in quotes is the literal text --force).
- values never span two pieces: "--opt value" is not an option.

Output
- ParsedArguments: ordered positionals, a frozenset of flag names, and a mapping
  option name → tuple of values (input order; the last one wins for get_option).
"""
import logging
from collections.abc import Iterable
from types import MappingProxyType

from .utils import *

logger = logging.getLogger(__name__)

DEFAULT_PREFIXES = ("--", "-", "—")
DEFAULT_SEPARATORS = ("=", ":")


class ParsedArguments:
    """
    Result of classifying one invocation.

    Attributes
    - positionals: tuple[str, ...]   order is significant
    - flags:       frozenset[str]    order is not
    - options:     Mapping[str, tuple[str, ...]]
    """
    __slots__ = ("positionals", "flags", "options")

    def __init__(self, positionals=(), flags=(), options=None):
        self.positionals = tuple(positionals)
        self.flags = frozenset(flags)
        self.options = MappingProxyType({name: tuple(values) for name, values in dict(options or {}).items()})

    def __eq__(self, other):
        if not isinstance(other, ParsedArguments):
            return NotImplemented
        return (
            self.positionals == other.positionals and
            self.flags == other.flags and
            dict(self.options) == dict(other.options)
        )

    __hash__ = None

    def __repr__(self):
        return "%s(positionals=%r, flags=%r, options=%r)" % (
            type(self).__name__, list(self.positionals), sorted(self.flags), dict(self.options)
        )

    def __rich_repr__(self):
        yield "positionals", list(self.positionals)
        yield "flags", sorted(self.flags)
        yield "options", dict(self.options)


def _sanitize_allowance(kind, value):
    """
    Normalize an allow-spec into True (all) or a frozenset of names (possibly empty).
    """
    if value is True:
        return True
    if value is False or value is None:
        return frozenset()
    if isinstance(value, str) or not isinstance(value, Iterable):
        raise TypeError(f"strategy {kind!r} must be a boolean or an iterable of names")
    names = set()
    for name in value:
        if not isinstance(name, str):
            raise TypeError(f"strategy {kind!r} names must be strings")
        if not (name := name.strip()):
            raise ValueError(f"strategy {kind!r} names cannot be empty")
        names.add(name)
    return frozenset(names)


def _sanitize_markers(kind, value):
    """
    Validate prefixes/separators; returned sorted longest-first so "--" beats "-".
    """
    if isinstance(value, str) or not isinstance(value, Iterable):
        raise TypeError(f"strategy {kind!r} must be an iterable of strings")
    markers = []
    for marker in value:
        if not isinstance(marker, str):
            raise TypeError(f"strategy {kind!r} must contain strings")
        if not marker or marker != marker.strip():
            raise ValueError(f"strategy {kind!r} cannot contain empty or padded strings")
        if marker not in markers:
            markers.append(marker)
    return tuple(sorted(markers, key=len, reverse=True))


class Strategy:
    """
    Prefix/separator based classifier with independent flag and option allow-lists.

    Parameters
    - flags:      True | False | None | Iterable[str]
    - options:    True | False | None | Iterable[str]
    - prefixes:   Iterable[str], default ("--", "-", "—")
    - separators: Iterable[str], default ("=", ":")

    Example
        >>> strategy = Strategy(flags=["force"], options=["reason"])
        >>> strategy.run(["add", "--force", "--reason=typo", "--other"])
        ParsedArguments(positionals=['add', '--other'], flags=['force'], options={'reason': ('typo',)})
    """

    def __init__(self, flags=(), options=(), prefixes=DEFAULT_PREFIXES, separators=DEFAULT_SEPARATORS):
        self._flags = _sanitize_allowance("flags", flags)
        self._options = _sanitize_allowance("options", options)
        self._prefixes = _sanitize_markers("prefixes", prefixes)
        self._separators = _sanitize_markers("separators", separators)
        if not self._prefixes and (self._flags or self._options):
            raise ValueError("strategy needs at least one prefix to match flags or options")

    flags = mirror("flags")
    options = mirror("options")
    prefixes = mirror("prefixes")
    separators = mirror("separators")

    @staticmethod
    def _allowed(allowance, name):
        return allowance is True or name in allowance

    def _strip(self, piece):
        """
        Return the text after the longest matching prefix, or Unset.
        """
        if getattr(piece, "quoted", False):
            return Unset
        for prefix in self._prefixes:
            if piece.startswith(prefix):
                return piece[len(prefix):]
        return Unset

    def match_option(self, piece, /):
        """
        Match prefix + name + separator + value inside one piece.

        Returns
        - (name, value) when the piece is an allowed option.
        - Unset otherwise (including an empty name or an empty value).
        """
        if not self._options or (body := self._strip(piece)) is Unset:
            return Unset
        found = [(body.find(separator), -len(separator), separator) for separator in self._separators if separator in body]
        if not found:
            return Unset
        index, _, separator = min(found)
        name, value = body[:index], body[index + len(separator):]
        if not name or not value or name[0].isdigit():
            return Unset
        if not self._allowed(self._options, name):
            return Unset
        return name, value

    def match_flag(self, piece, /):
        """
        Match prefix + name (no separator) inside one piece.

        Returns
        - the flag name when the piece is an allowed flag, Unset otherwise.
        """
        if not self._flags or (body := self._strip(piece)) is Unset:
            return Unset
        if not body or body[0].isdigit() or any(separator in body for separator in self._separators):
            return Unset
        if not self._allowed(self._flags, body):
            return Unset
        return body

    def run(self, pieces, /):
        """
        Classify every piece into ParsedArguments.
        """
        positionals = []
        flags = set()
        options = {}

        for piece in pieces:
            if (option := self.match_option(piece)) is not Unset:
                name, value = option
                options.setdefault(name, []).append(value)
            elif (flag := self.match_flag(piece)) is not Unset:
                flags.add(flag)
            else:
                positionals.append(piece)

        logger.debug(
            "classified %d positional(s), flags=%s, options=%s",
            len(positionals), sorted(flags), sorted(options)
        )
        return ParsedArguments(positionals, flags, options)

    def __repr__(self):
        def show(allowance):
            return allowance if allowance is True else sorted(allowance)
        return "%s(flags=%r, options=%r, prefixes=%r, separators=%r)" % (
            type(self).__name__, show(self._flags), show(self._options), self._prefixes, self._separators
        )


__all__ = (
    "DEFAULT_PREFIXES",
    "DEFAULT_SEPARATORS",
    "ParsedArguments",
    "Strategy",
)
