"""
Parley help: usage lines, descriptions and listings for any node of a tree.

Everything here is a pure function of (tree, path):
- usage(tree, path):    "usage: git remote add <name> [url] [options...]"
- describe(tree, path): usage, description, then either the child listing of
  a Group or the argument and switch listings of a Leaf (switches are options
  and flags merged and sorted alphabetically).
- chunk(lines, budget): pack lines into messages of at most budget characters
  for transports with a message-size limit.
- HelpView(tree, path): the same content as a rich renderable.

Palette keys (HelpView)
- usage-label, program-name, usage-section, description-section
- section-label, subcommand-name, default-marker, argument-name
- option-name, flag-name, metavar, alias, description

Customization
- Define a mapping named __styles__ in __main__ to override any palette entry.
- colorful=False renders plain text; fancy=True wraps the view in a Panel.
"""
import textwrap
from collections import defaultdict

from rich.console import Group as Stack
from rich.panel import Panel
from rich.text import Text

from .arguments import *
from .commands import *


def _prefix(tree, name):
    # Single-letter names read best with the shortest prefix ("-f"), others with the longest ("--force").
    prefixes = tree.strategy.prefixes
    if not prefixes:
        return name
    return (min(prefixes, key=len) if len(name) == 1 else prefixes[0]) + name


def _separator(tree):
    return next(iter(tree.strategy.separators), "=")


def _switches(tree, node):
    """
    Options and flags of node as (kind, names, metavar, descr), sorted by name.
    """
    rows = [("option", option.names, option.metavar, option.descr) for option in node.options]
    rows += [("flag", flag.names, None, flag.descr) for flag in node.flags]
    rows.sort(key=lambda row: row[1][0].casefold())
    return [(kind, [_prefix(tree, name) for name in names], metavar, descr) for kind, names, metavar, descr in rows]


def _usage(tree, path):
    nodes = tree.chain(path)
    node = nodes[-1]
    names = [entry.name for entry in nodes]
    match node:
        case Group():
            suffix = ["[subcommand]" if node.fallback is not None else "<subcommand>"]
        case Leaf():
            suffix = [argument.label for argument in node.arguments]
        case _:
            suffix = []
    if node.options or node.flags:
        suffix.append("[options...]")
    return names, suffix


def usage(tree, path=(), /):
    """
    One-line usage string for the node at path.

    Raises
    - ValueError: a path segment names no subcommand.
    """
    names, suffix = _usage(tree, path)
    return "usage: " + " ".join(names + suffix)


def _annotate(aliases):
    if not aliases:
        return ""
    return " (%s: %s)" % ("alias" if len(aliases) == 1 else "aliases", ", ".join(aliases))


def describe(tree, path=(), /):
    """
    Help lines for the node at path.

    Raises
    - ValueError: a path segment names no subcommand.
    """
    node = tree.find(path)
    lines = [usage(tree, path)]
    if node.descr:
        lines.append(str(node.descr))

    match node:
        case Group():
            lines.append("Subcommands:")
            for child in node.children:
                lines.append("  %s%s%s%s" % (
                    child.name,
                    _annotate(child.aliases),
                    " (default)" if child.default else "",
                    " - %s" % child.descr if child.descr else "",
                ))
        case Leaf():
            if node.arguments:
                lines.append("Arguments:")
                for argument in node.arguments:
                    lines.append("  %s%s" % (argument.label, " - %s" % argument.descr if argument.descr else ""))

    if switches := _switches(tree, node):
        lines.append("Options:")
        separator = _separator(tree)
        for kind, names, metavar, descr in switches:
            lines.append("  %s%s%s%s" % (
                names[0],
                separator + metavar if kind == "option" else "",
                _annotate(names[1:]),
                " - %s" % descr if descr else "",
            ))
    return lines


def _wrap(line, budget):
    if len(line) <= budget:
        return [line]
    return textwrap.wrap(line, budget, break_on_hyphens=False) or [line[:budget]]


def chunk(lines, budget, /):
    """
    Pack lines into newline-joined messages of at most budget characters.

    Lines are never reordered; a line longer than the budget is wrapped on its
    own (hard-split when a single word exceeds it).

    Raises
    - ValueError: budget is not a positive integer.
    """
    if not isinstance(budget, int) or isinstance(budget, bool) or budget <= 0:
        raise ValueError("chunk() budget must be a positive integer")

    messages, buffer, size = [], [], 0
    for line in lines:
        for piece in _wrap(str(line), budget):
            extra = len(piece) + (1 if buffer else 0)
            if buffer and size + extra > budget:
                messages.append("\n".join(buffer))
                buffer, size, extra = [], 0, len(piece)
            buffer.append(piece)
            size += extra
    if buffer:
        messages.append("\n".join(buffer))
    return messages


class HelpView:
    """
    Rich renderable help for the node at path.

    The path is validated on construction (ValueError for unknown segments).
    """

    def __init__(self, tree, path=(), /, *, colorful=True, fancy=False):
        self._tree = tree
        self._path = tuple(path)
        self._node = tree.find(self._path)
        self.colorful = colorful
        self.fancy = fancy

    def __rich__(self):
        styles = defaultdict(str, {
            "usage-label": "bold #00E6FF",  # cyan signature label
            "program-name": "bold #FF4D94",  # magenta-pink brand pop
            "usage-section": "bold #36C5F0",  # sky-blue signature
            "description-section": "italic #A3A3A3",

            "section-label": "bold #FFFFFF",
            "subcommand-name": "bold #36C5F0",
            "default-marker": "italic #22C55E",
            "argument-name": "bold #FFD600",

            "option-name": "bold #00E6FF",
            "flag-name": "bold #22C55E",
            "metavar": "bold #FFD600",
            "alias": "#737373",
            "description": "#9CA3AF",
        } | getattr(__import__("__main__"), "__styles__", {}))

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not self.colorful:
                return Text(str(fragment))
            return Text(str(fragment), styles[style])

        def described(descr):
            return Text.assemble(" - ", text(descr, "description")) if descr else Text("")

        names, suffix = _usage(self._tree, self._path)
        renders = [Text.assemble(
            text("usage:", "usage-label"),
            " ",
            text(names[0], "program-name"),
            *(Text.assemble(" ", text(part, "usage-section")) for part in names[1:] + suffix),
        )]
        if self._node.descr:
            renders.append(text(self._node.descr, "description-section"))

        match self._node:
            case Group():
                renders.append(text("Subcommands:", "section-label"))
                for child in self._node.children:
                    renders.append(Text.assemble(
                        "  ",
                        text(child.name, "subcommand-name"),
                        text(_annotate(child.aliases), "alias"),
                        text(" (default)" if child.default else "", "default-marker"),
                        described(child.descr),
                    ))
            case Leaf():
                if self._node.arguments:
                    renders.append(text("Arguments:", "section-label"))
                    for argument in self._node.arguments:
                        renders.append(Text.assemble("  ", text(argument.label, "argument-name"), described(argument.descr)))

        if switches := _switches(self._tree, self._node):
            renders.append(text("Options:", "section-label"))
            separator = _separator(self._tree)
            for kind, names, metavar, descr in switches:
                renders.append(Text.assemble(
                    "  ",
                    text(names[0], "option-name" if kind == "option" else "flag-name"),
                    text(separator + metavar if kind == "option" else "", "metavar"),
                    text(_annotate(names[1:]), "alias"),
                    described(descr),
                ))

        if self.fancy:
            return Panel(Stack(*renders[1:]), title=renders[0], title_align="left")
        return Stack(*renders)


__all__ = (
    "usage",
    "describe",
    "chunk",
    "HelpView",
)
