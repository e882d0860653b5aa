"""
Parley faults: user-facing error values and their rendering.

Scope
- Identifier: canonical, stable string identifiers for every user-facing issue
  (argument validation, missing arguments, gate rejections, routing). They are
  meant for localization and logs; normalize() lets a host relabel them.
- UserError: identifier + human message + optional context. Returned inside
  Err values by the engine; never raised by it. A command handler may raise one
  on purpose and the dispatcher turns it back into an Err.
- ArgumentError: a UserError produced by a resolver; carries the resolver and
  the parameter that failed.
- surface(): print a fault to a rich console (stderr by default).

Two error classes
- user-facing (this module): expected, shown to the end user, never retried.
- programmer/configuration errors: plain TypeError/ValueError/RuntimeError/KeyError
  raised immediately at registration or misuse; they are bugs, not input.

Styling
- Palette keys: prog-name, identifier, error-title, error-message, hint-arrow, hint.
- Override any of them with a __styles__ mapping in __main__; set __prog__ in
  __main__ to change the program label of the header.
"""
from collections import defaultdict
from enum import StrEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import *

console = Console(stderr=True)


class Identifier(StrEnum):
    """
    canonical fault identifiers (stable strings).

    grouping
    - Argument*       resolver validation failures (one family per resolver)
    - Args*           extraction failures of the Args facade
    - Preconditions.* gate rejections while walking the command tree
    - routing         SubcommandRequired, UnknownCommand
    """
    # --- string ---
    ARGUMENT_STRING_TOO_SHORT   = "ArgumentStringTooShort"
    ARGUMENT_STRING_TOO_LONG    = "ArgumentStringTooLong"

    # --- integer ---
    ARGUMENT_INTEGER_ERROR      = "ArgumentIntegerError"
    ARGUMENT_INTEGER_TOO_SMALL  = "ArgumentIntegerTooSmall"
    ARGUMENT_INTEGER_TOO_LARGE  = "ArgumentIntegerTooLarge"

    # --- float ---
    ARGUMENT_FLOAT_ERROR        = "ArgumentFloatError"
    ARGUMENT_FLOAT_TOO_SMALL    = "ArgumentFloatTooSmall"
    ARGUMENT_FLOAT_TOO_LARGE    = "ArgumentFloatTooLarge"

    # --- number ---
    ARGUMENT_NUMBER_ERROR       = "ArgumentNumberError"
    ARGUMENT_NUMBER_TOO_SMALL   = "ArgumentNumberTooSmall"
    ARGUMENT_NUMBER_TOO_LARGE   = "ArgumentNumberTooLarge"

    # --- boolean ---
    ARGUMENT_BOOLEAN_ERROR      = "ArgumentBooleanError"

    # --- date ---
    ARGUMENT_DATE_ERROR         = "ArgumentDateError"
    ARGUMENT_DATE_TOO_EARLY     = "ArgumentDateTooEarly"
    ARGUMENT_DATE_TOO_FAR       = "ArgumentDateTooFar"

    # --- enum ---
    ARGUMENT_ENUM_EMPTY_ERROR   = "ArgumentEnumEmptyError"
    ARGUMENT_ENUM_ERROR         = "ArgumentEnumError"

    # --- hyperlink ---
    ARGUMENT_HYPERLINK_ERROR    = "ArgumentHyperlinkError"

    # --- extraction ---
    ARGS_MISSING                = "ArgsMissing"

    # --- gates ---
    PRECONDITION_PERMISSION     = "Preconditions.PermissionLevel"
    PRECONDITION_CUSTOM         = "Preconditions.Custom"

    # --- routing ---
    SUBCOMMAND_REQUIRED         = "SubcommandRequired"
    UNKNOWN_COMMAND             = "UnknownCommand"

    def normalize(self):
        """
        return a host-normalized label for this identifier.

        the host application can provide a __codes__ mapping in __main__ to
        relabel identifiers; without it the identifier value is returned.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class UserError(Exception):
    """
    User-facing error value.

    Parameters
    - identifier: Identifier | str
      stable identifier, e.g. "ArgumentIntegerTooSmall" (custom ones are allowed).
    - message: str
      human message; defaults to the identifier when omitted.
    - context: Mapping | None
      extra payload (bounds, suggestions, the failing token, ...), read-only.
    - hint: str
      optional one-line next step, shown under the message.
    """

    def __init__(self, identifier, message=Unset, /, *, context=None, hint=Unset):
        if not isinstance(identifier, str) or not identifier:
            raise TypeError("UserError identifier must be a non-empty string")
        if not isinstance(message, str | Unset):
            raise TypeError("UserError message must be a string")
        super().__init__(coalesce(message, str(identifier)))
        self.identifier = identifier
        self.message = coalesce(message, str(identifier))
        self.context = MappingProxyType(dict(context or {}))
        self.hint = coalesce(hint)

    @property
    def title(self):
        # "ArgumentIntegerTooSmall" → "argument integer too small"
        label = str(self.identifier).rsplit(".", 1)[-1]
        words = []
        for char in label:
            if char.isupper() and words:
                words.append(" ")
            words.append(char.lower())
        return "".join(words)

    def __eq__(self, other):
        if not isinstance(other, UserError):
            return NotImplemented
        return (
            type(self) is type(other) and
            self.identifier == other.identifier and
            self.message == other.message
        )

    __hash__ = Exception.__hash__

    def __repr__(self):
        return "%s(%r, %r)" % (type(self).__name__, str(self.identifier), self.message)

    def __rich__(self):
        return render(self)


class ArgumentError(UserError):
    """
    UserError raised by a resolver.

    Extra attributes
    - argument: the resolver that failed.
    - parameter: the raw token it could not resolve.
    """

    def __init__(self, identifier, message=Unset, /, *, argument, parameter, context=None, hint=Unset):
        super().__init__(identifier, message, context=context, hint=hint)
        self.argument = argument
        self.parameter = parameter

    def __repr__(self):
        return "%s(%r, %r, parameter=%r)" % (type(self).__name__, str(self.identifier), self.message, self.parameter)


def render(fault, /, *, colorful=True, fancy=False):
    """
    Build a rich renderable for a fault.

    Layout
    - header: "[ prog — identifier | title ]"
    - body:   message, then " → hint" when a hint exists.
    - fancy:  header becomes the title of a Panel.
    """
    main = __import__("__main__")

    styles = defaultdict(str, {
        "prog-name": "bold #E6E6F0",  # near-white program name
        "identifier": "bold #00E5FF",  # neon cyan identifier
        "error-title": "bold #FF4DA6",  # pinky title

        "error-message": "#C8C8D0",  # soft light gray message
        "hint-arrow": "#9CE19C dim",  # gentle green arrow
        "hint": "italic #9CE19C",  # gentle green hint text
    } | getattr(main, "__styles__", {}))

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        return Text(str(fragment), styles[style])

    identifier = fault.identifier.normalize() if isinstance(fault.identifier, Identifier) else str(fault.identifier)

    header = Text.assemble(
        "[ ",
        text(getattr(main, "__prog__", "parley"), "prog-name"),
        " — ",
        text(identifier, "identifier"),
        " | ",
        text(fault.title.title(), "error-title"),
        " ]"
    )
    message = text(fault.message, "error-message")
    body = [message]
    if fault.hint:
        body.append(Text.assemble(text(" → ", "hint-arrow"), text(fault.hint, "hint")))

    if fancy:
        return Panel(Group(*body), title=header, title_align="left")
    return Group(header, *body)


def surface(fault, /, *, console=console, colorful=True, fancy=False):
    """
    Print a fault on a rich console (stderr by default).

    The caller owns delivery; this is the terminal-side convenience used by
    the demo and by hosts running parley in a shell.
    """
    if not isinstance(fault, UserError):
        raise TypeError("surface() argument must be a UserError")
    console.print(render(fault, colorful=colorful, fancy=fancy))


__all__ = (
    "Identifier",
    "UserError",
    "ArgumentError",
    "render",
    "surface",
)
