"""
Command tree tests (registration, validation, strategy derivation).

Scope
- Leaf/Group construction and fail-fast validation of sibling sets.
- build() over the recursive mapping form (canRun and can_run spellings).
- Strategy derivation from every declared flag/option name and alias.
- Path lookup and the @leaf decorator.
- Argument/Option/Flag spec sanitization.

Conventions
- Test method names follow CamelCase per project convention.
- Tests use the public API (Leaf, Group, CommandTree, build, leaf, specs).
"""
import unittest
from unittest import TestCase

from parley import *


def run(args, resolution):
    pass


class TestSubcommands(TestCase):

    def testLeafMetadata(self):
        node = Leaf("add", run, "Add a remote", aliases=["a"], arguments=["name", Argument("url", "hyperlink", False)])
        self.assertEqual(node.name, "add")
        self.assertEqual(node.names, ("add", "a"))
        self.assertEqual(node.descr, "Add a remote")
        self.assertEqual([argument.label for argument in node.arguments], ["<name>", "[url]"])
        self.assertTrue(node.matches("a"))
        self.assertIsNone(node.permission)

    def testPermissionAcceptsNamesAndIntegers(self):
        self.assertIs(Leaf("a", run, permission="moderator").permission, PermissionLevel.MODERATOR)
        self.assertIs(Leaf("a", run, permission=3).permission, PermissionLevel.ADMINISTRATOR)
        with self.assertRaises(ValueError):
            Leaf("a", run, permission="emperor")

    def testSubcommandIsAbstract(self):
        with self.assertRaises(TypeError):
            Subcommand("x")

    def testRunMustBeCallable(self):
        with self.assertRaises(TypeError):
            Leaf("add", "not callable")  # type: ignore[arg-type]

    def testCanRunMustBeCallable(self):
        with self.assertRaises(TypeError):
            Leaf("add", run, can_run=True)  # type: ignore[arg-type]

    def testMalformedNamesRejected(self):
        for name in ("", "two words", "-flag"):
            with self.subTest(name=name):
                with self.assertRaises(ValueError):
                    Leaf(name, run)
        with self.assertRaises(TypeError):
            Leaf(1, run)  # type: ignore[arg-type]

    def testAliasCannotRepeatName(self):
        with self.assertRaises(ValueError):
            Leaf("add", run, aliases=["add"])

    def testGroupNeedsChildren(self):
        with self.assertRaises(ValueError):
            Group("remote", [])

    def testDuplicateNameInSiblingSet(self):
        with self.assertRaises(ValueError):
            Group("remote", [Leaf("add", run), Leaf("add", run)])

    def testAliasCollidesWithSiblingName(self):
        with self.assertRaises(ValueError):
            Group("remote", [Leaf("add", run), Leaf("remove", run, aliases=["add"])])

    def testSameNameAllowedInDifferentSiblingSets(self):
        tree = CommandTree(Group("git", [
            Group("remote", [Leaf("list", run)]),
            Group("branch", [Leaf("list", run)]),
        ]))
        self.assertEqual(tree.find(("branch", "list")).name, "list")

    def testMoreThanOneDefaultRejected(self):
        with self.assertRaises(ValueError):
            Group("remote", [Leaf("a", run, default=True), Leaf("b", run, default=True)])

    def testFallbackIsTheDefaultChild(self):
        group = Group("remote", [Leaf("a", run), Leaf("b", run, default=True)])
        self.assertEqual(group.fallback.name, "b")
        self.assertIsNone(Group("x", [Leaf("a", run)]).fallback)

    def testChildLookupUsesAliases(self):
        group = Group("remote", [Leaf("remove", run, aliases=["rm"])])
        self.assertIs(group.child("rm"), group.child("remove"))
        self.assertIsNone(group.child("nope"))

    def testChildrenAreReadOnly(self):
        group = Group("remote", [Leaf("a", run)])
        self.assertIsInstance(group.children, tuple)


class TestBuild(TestCase):

    def testBuildRecursiveMapping(self):
        def gate(args, subcommand):
            return Allow()

        node = build({
            "name": "remote",
            "description": "Manage remotes",
            "children": [
                {"name": "add", "run": run, "arguments": ["name", "url"], "flags": ["force"], "canRun": gate},
                {"name": "list", "run": run, "default": True, "aliases": ["ls"], "permission": "moderator"},
            ],
        })
        self.assertIsInstance(node, Group)
        add, listing = node.children
        self.assertIsInstance(add, Leaf)
        self.assertIs(add.can_run, gate)
        self.assertEqual([flag.name for flag in add.flags], ["force"])
        self.assertTrue(listing.default)
        self.assertIs(listing.permission, PermissionLevel.MODERATOR)

    def testBuildAcceptsSnakeCaseCanRun(self):
        def gate(args, subcommand):
            return Allow()

        self.assertIs(build({"name": "x", "run": run, "can_run": gate}).can_run, gate)

    def testBuildNeedsExactlyOneOfRunOrChildren(self):
        with self.assertRaises(ValueError):
            build({"name": "x"})
        with self.assertRaises(ValueError):
            build({"name": "x", "run": run, "children": [{"name": "y", "run": run}]})

    def testBuildRejectsUnknownKeys(self):
        with self.assertRaises(ValueError):
            build({"name": "x", "run": run, "subcommands": []})

    def testBuildRejectsArgumentsOnGroups(self):
        with self.assertRaises(ValueError):
            build({"name": "x", "arguments": ["a"], "children": [{"name": "y", "run": run}]})

    def testBuildDetectsDuplicateAliases(self):
        with self.assertRaises(ValueError):
            build({"name": "x", "children": [
                {"name": "a", "run": run, "aliases": ["z"]},
                {"name": "b", "run": run, "aliases": ["z"]},
            ]})

    def testTreeAcceptsMapping(self):
        tree = CommandTree({"name": "ping", "run": run})
        self.assertIsInstance(tree.root, Leaf)
        self.assertEqual(tree.children, ())


class TestTree(TestCase):

    def setUp(self):
        self.tree = CommandTree(Group("git", [
            Group("remote", [
                Leaf("add", run, flags=[Flag("force", "f")], options=[Option("reason")]),
                Leaf("remove", run, aliases=["rm"], flags=["quiet"]),
            ], options=["verbosity"]),
        ], flags=["debug"]))

    def testStrategyAllowListsEveryDeclaredName(self):
        strategy = self.tree.strategy
        self.assertEqual(strategy.flags, frozenset({"force", "f", "quiet", "debug"}))
        self.assertEqual(strategy.options, frozenset({"reason", "verbosity"}))

    def testExplicitStrategyWins(self):
        strategy = Strategy(flags=True)
        self.assertIs(CommandTree(self.tree.root, strategy).strategy, strategy)

    def testFindAcceptsAliases(self):
        self.assertEqual(self.tree.find(("remote", "rm")).name, "remove")
        self.assertIs(self.tree.find(), self.tree.root)

    def testFindUnknownPathRaises(self):
        with self.assertRaises(ValueError):
            self.tree.find(("remote", "nope"))
        with self.assertRaises(ValueError):
            self.tree.find(("remote", "add", "deeper"))

    def testWalkVisitsEveryNode(self):
        paths = [path for path, _ in self.tree.walk()]
        self.assertEqual(paths, [(), ("remote",), ("remote", "add"), ("remote", "remove")])

    def testChainFromRoot(self):
        self.assertEqual([node.name for node in self.tree.chain(("remote", "add"))], ["git", "remote", "add"])


class TestLeafDecorator(TestCase):

    def testNameAndDescriptionFromHandler(self):
        @leaf(aliases=["ls"])
        def list_remotes(args, resolution):
            """
            List every remote.

            Longer text is ignored.
            """

        self.assertIsInstance(list_remotes, Leaf)
        self.assertEqual(list_remotes.name, "list-remotes")
        self.assertEqual(list_remotes.descr, "List every remote.")
        self.assertEqual(list_remotes.aliases, ("ls",))

    def testBareDecorator(self):
        @leaf
        def ping(args, resolution):
            return "pong"

        self.assertEqual(ping.name, "ping")
        self.assertIsNone(ping.descr)

    def testExplicitName(self):
        @leaf("add", "Add things")
        def handler(args, resolution):
            pass

        self.assertEqual((handler.name, handler.descr), ("add", "Add things"))


class TestSpecs(TestCase):

    def testFlagNamesHaveNoPrefix(self):
        with self.assertRaises(ValueError):
            Flag("--force")

    def testFlagDuplicatesRejected(self):
        with self.assertRaises(ValueError):
            Flag("force", "force")

    def testOptionMetavarDefault(self):
        self.assertEqual(Option("dry-run").metavar, "DRY_RUN")
        self.assertEqual(Option("mode", metavar="M").metavar, "M")

    def testDescrCannotBeEmpty(self):
        with self.assertRaises(ValueError):
            Flag("force", descr="  ")

    def testArgumentValidation(self):
        with self.assertRaises(ValueError):
            Argument("two words")
        with self.assertRaises(TypeError):
            Argument("count", "integer", "yes")  # type: ignore[arg-type]
        with self.assertRaises(TypeError):
            Argument("count", context=[1])  # type: ignore[arg-type]

    def testSpecRepr(self):
        self.assertEqual(repr(Flag("force", "f")), "flag(name='force', aliases=('f',), descr=None)")

    def testDuplicateSwitchNamesOnOneNode(self):
        with self.assertRaises(ValueError):
            Leaf("add", run, flags=[Flag("force", "f"), "f"])


if __name__ == "__main__":
    unittest.main()
