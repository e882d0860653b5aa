"""
Parley token stream: a cursor over positionals with checkpoints.

Model
- positionals live in a fixed tuple (the arena); the cursor is an index into it.
- save() pushes the index, restore() pops it back, discard() pops without
  moving and commits: every checkpoint still on the stack is raised to the
  current index, so no later restore() can rewind past a discarded point.
- next()/peek() return the Unset miss indicator at the end of the stream.
- flags and options are classified once, up front; the cursor never affects them.

Why checkpoints
- The subcommand resolver speculatively consumes a token as a subcommand name
  and puts it back untouched when it does not match, without re-lexing.

Laws
- save(); <next/peek only>; restore()  → cursor back to the exact pre-save index.
- save(); next(); discard()            → no later restore() goes below that index.
"""
from .strategy import ParsedArguments
from .utils import *


class TokenStream:
    """
    Per-invocation cursor over ParsedArguments.

    Parameters
    - parsed: ParsedArguments (positionals, flags, options).
    """

    def __init__(self, parsed, /):
        if not isinstance(parsed, ParsedArguments):
            raise TypeError("TokenStream() argument must be a ParsedArguments")
        self._parsed = parsed
        self._positionals = parsed.positionals
        self._index = 0
        self._checkpoints = []

    # --- cursor -----------------------------------------------------------------

    @property
    def index(self):
        return self._index

    @property
    def finished(self):
        return self._index >= len(self._positionals)

    @property
    def remaining(self):
        return len(self._positionals) - self._index

    @property
    def positionals(self):
        return self._positionals

    @property
    def consumed(self):
        """
        Positionals already read, in order.
        """
        return self._positionals[:self._index]

    @property
    def depth(self):
        """
        Number of outstanding checkpoints.
        """
        return len(self._checkpoints)

    def peek(self):
        """
        Return the next positional without consuming it, or Unset at the end.
        """
        if self.finished:
            return Unset
        return self._positionals[self._index]

    def next(self):
        """
        Consume and return the next positional, or Unset at the end (cursor unchanged).
        """
        if self.finished:
            return Unset
        token = self._positionals[self._index]
        self._index += 1
        return token

    def rest(self):
        """
        Remaining positionals, without consuming them.
        """
        return self._positionals[self._index:]

    def advance(self, count=1, /):
        """
        Move the cursor forward by count positionals (clamped to the end).
        """
        if not isinstance(count, int) or count < 0:
            raise ValueError("advance() argument must be a non-negative integer")
        self._index = min(self._index + count, len(self._positionals))

    # --- checkpoints ------------------------------------------------------------

    def save(self):
        self._checkpoints.append(self._index)

    def restore(self):
        """
        Pop the latest checkpoint and reset the cursor to it.

        Raises
        - RuntimeError: no outstanding checkpoint (a programming error).
        """
        if not self._checkpoints:
            raise RuntimeError("restore() called without an outstanding checkpoint")
        self._index = self._checkpoints.pop()

    def discard(self):
        """
        Pop the latest checkpoint without moving the cursor, committing past it.

        Raises
        - RuntimeError: no outstanding checkpoint (a programming error).
        """
        if not self._checkpoints:
            raise RuntimeError("discard() called without an outstanding checkpoint")
        self._checkpoints.pop()
        # Older checkpoints may not rewind below the committed point.
        self._checkpoints = [max(checkpoint, self._index) for checkpoint in self._checkpoints]

    # --- flags and options ------------------------------------------------------

    @property
    def flags(self):
        return self._parsed.flags

    @property
    def options(self):
        return self._parsed.options

    def has_flags(self, *names):
        """
        True when any of the given flag names was provided.
        """
        return any(name in self._parsed.flags for name in names)

    def has_options(self, *names):
        """
        True when any of the given option names was provided.
        """
        return any(name in self._parsed.options for name in names)

    def get_option(self, *names):
        """
        Value of the first provided option among names (its last occurrence), or None.
        """
        for name in names:
            if values := self._parsed.options.get(name):
                return values[-1]
        return None

    def get_options(self, *names):
        """
        Every value given for the options among names (input order per name), or None.
        """
        values = ()
        for name in names:
            values += self._parsed.options.get(name, ())
        return values or None

    def __repr__(self):
        return "%s(index=%d, positionals=%r, checkpoints=%r)" % (
            type(self).__name__, self._index, list(self._positionals), self._checkpoints
        )


__all__ = (
    "TokenStream",
)
