"""
Parley lexer: split one raw invocation string into pieces.

Rules
- Pieces are delimited by whitespace (str.isspace, so unicode spaces count).
- A quote pair keeps its interior as a single span: quotes are stripped and the
  interior whitespace is preserved verbatim. Several pair styles are active at
  once (ASCII, typographic, CJK corner brackets and guillemets by default).
- A quoted span glued to unquoted text belongs to the same piece, the way a
  shell would read it: --reason="left server" → '--reason=left server'.
- The lexer never fails. An opening quote without a closing partner further
  in the text is just a literal character.

Piece
- A str subclass; `quoted` is True when the piece started with a quote pair.
  The strategy uses it to keep fully-quoted text out of flag/option matching.

Quick example
    >>> Lexer().run('say "hello  world"')
    ('say', 'hello  world')
"""
import logging

logger = logging.getLogger(__name__)

DEFAULT_QUOTES = (
    ('"', '"'),  # double quotes
    ("“", "”"),  # typographic quotes (mobile keyboards)
    ("「", "」"),  # corner brackets (CJK)
    ("«", "»"),  # guillemets
)


class Piece(str):
    """
    One lexer output unit (bare word or de-quoted phrase).

    Compares, hashes and slices like the plain string it wraps.
    """

    def __new__(cls, value, /, quoted=False):
        self = super().__new__(cls, value)
        self.quoted = bool(quoted)
        return self

    def __repr__(self):
        return "%s(%s%s)" % (type(self).__name__, str.__repr__(self), ", quoted=True" if self.quoted else "")


def _sanitize_quotes(quotes):
    """
    Validate quote pairs and index them by their opening character.

    Raises
    - TypeError: a pair is not made of two strings.
    - ValueError: a quote is not exactly one character, is whitespace, or an
      opening character is declared twice.
    """
    pairs = {}
    for pair in quotes:
        try:
            opening, closing = pair
        except (TypeError, ValueError):
            raise TypeError("lexer quotes must be (opening, closing) pairs") from None
        if not isinstance(opening, str) or not isinstance(closing, str):
            raise TypeError("lexer quotes must be strings")
        if len(opening) != 1 or len(closing) != 1:
            raise ValueError("lexer quotes must be single characters")
        if opening.isspace() or closing.isspace():
            raise ValueError("lexer quotes cannot be whitespace")
        if opening in pairs:
            raise ValueError("lexer opening quote %r is declared twice" % opening)
        pairs[opening] = closing
    return pairs


class Lexer:
    """
    Whitespace/quote aware splitter.

    Parameters
    - quotes: iterable of (opening, closing) single-character pairs.
    """

    def __init__(self, quotes=DEFAULT_QUOTES):
        self._pairs = _sanitize_quotes(quotes)

    @property
    def quotes(self):
        return tuple(self._pairs.items())

    def run(self, text, /):
        """
        Split text into a tuple of Piece objects (finite, ordered, restartable).
        """
        if not isinstance(text, str):
            raise TypeError("Lexer.run() argument must be a string")
        pieces = tuple(self._split(text))
        logger.debug("lexed %d piece(s) from %r", len(pieces), text)
        return pieces

    def _split(self, text):
        index, length = 0, len(text)

        while index < length:
            if text[index].isspace():
                index += 1
                continue

            start = index
            parts = []
            quoted = False

            while index < length and not text[index].isspace():
                char = text[index]
                closing = self._pairs.get(char)
                if closing is not None and (end := text.find(closing, index + 1)) != -1:
                    # Quoted span: keep everything up to the partner, whitespace included.
                    parts.append(text[index + 1:end])
                    quoted = quoted or index == start
                    index = end + 1
                    continue

                # Run of plain characters up to the next space or quote opener.
                pivot = index + 1
                while pivot < length and not text[pivot].isspace() and text[pivot] not in self._pairs:
                    pivot += 1
                parts.append(text[index:pivot])
                index = pivot

            yield Piece("".join(parts), quoted=quoted)

    def __repr__(self):
        return "%s(quotes=%r)" % (type(self).__name__, self.quotes)


__all__ = (
    "DEFAULT_QUOTES",
    "Piece",
    "Lexer",
)
