import asyncio
import logging
import sys

from rich.console import Console
from rich.logging import RichHandler
from rich.pretty import pprint

from parley import *

__prog__ = "git"

console = Console()


async def add(args, resolution):
    """
    Add a remote.
    """
    node = resolution.node
    name, url = node.arguments
    reason, = node.options
    force, = node.flags

    name = (await name.pick(args)).unwrap()
    url = (await url.pick(args)).unwrap_or(None)
    console.print(f"adding {name} at {url.geturl() if url else '<no url>'}", "(force)" if force.present(args) else "")
    for value in reason.values(args):
        console.print(f"reason: {value}")
    return reason.value(args, "none given")


def listing(args, resolution):
    return ["origin", "upstream"]


def frozen(args, subcommand):
    if args.has_flags("force", "f"):
        return Allow()
    return Deny("Pushing is frozen; pass --force to override.")


tree = CommandTree({
    "name": "git",
    "description": "A tiny git-like command",
    "children": [
        {
            "name": "remote",
            "description": "Manage remotes",
            "children": [
                {
                    "name": "add",
                    "description": "Add a remote",
                    "run": add,
                    "arguments": [Argument("name", descr="Remote name"), Argument("url", "hyperlink", False)],
                    "options": [Option("reason", metavar="TEXT")],
                    "flags": [Flag("force", "f", descr="Overwrite an existing remote")],
                },
                {"name": "list", "aliases": ["ls"], "description": "List remotes", "run": listing, "default": True},
            ],
        },
        {
            "name": "push",
            "description": "Push to a remote",
            "run": lambda args, resolution: "pushed",
            "canRun": frozen,
            "flags": [Flag("force", "f")],
            "permission": "moderator",
        },
    ],
})


async def main(lines):
    router = Router(("!", "?"))
    router.register(tree)
    for line in lines:
        console.rule(line)
        match await router.dispatch(line, caller="demo", level=PermissionLevel.MODERATOR):
            case None:
                console.print("(not a command)")
            case Err(error):
                surface(error)
            case Ok(value):
                if value is not None:
                    pprint(value)
    console.print(HelpView(tree, ("remote", "add"), fancy=True))


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO, handlers=[RichHandler(console=console)])
    asyncio.run(main(sys.argv[1:] or [
        "!git remote add origin https://example.com/repo.git --force --reason=demo",
        "!git remote",
        "!git remote rm origin",
        "!git push",
        "?git push -f",
        "!gti",
        "hello",
    ]))
