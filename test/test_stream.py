"""
Token stream tests (cursor, checkpoints, flag/option reads).

Scope
- next()/peek() and the Unset miss indicator at the end of the stream.
- Checkpoint law: save(); next/peek...; restore() returns to the exact index.
- Discard irreversibility: no restore() rewinds past a discarded point.
- Misuse (restore/discard without a checkpoint) raises RuntimeError.
- Flags and options are independent of the cursor.

Conventions
- Test method names follow CamelCase per project convention.
"""
import random
import unittest
from unittest import TestCase

from parley.strategy import ParsedArguments
from parley.stream import *
from parley.utils import Unset


def stream(*positionals, flags=(), options=None):
    return TokenStream(ParsedArguments(positionals, flags, options))


class TestCursor(TestCase):

    def testNextAndPeek(self):
        tokens = stream("a", "b")
        self.assertEqual(tokens.peek(), "a")
        self.assertEqual(tokens.next(), "a")
        self.assertEqual(tokens.peek(), "b")
        self.assertEqual(tokens.next(), "b")
        self.assertTrue(tokens.finished)

    def testMissIndicatorAtEnd(self):
        tokens = stream()
        self.assertIs(tokens.peek(), Unset)
        self.assertIs(tokens.next(), Unset)
        self.assertEqual(tokens.index, 0)

    def testRestAndConsumed(self):
        tokens = stream("a", "b", "c")
        tokens.next()
        self.assertEqual(tokens.rest(), ("b", "c"))
        self.assertEqual(tokens.consumed, ("a",))
        self.assertEqual(tokens.remaining, 2)
        self.assertEqual(tokens.index, 1)

    def testAdvanceClampsToEnd(self):
        tokens = stream("a", "b")
        tokens.advance(5)
        self.assertEqual(tokens.index, 2)
        with self.assertRaises(ValueError):
            tokens.advance(-1)

    def testRequiresParsedArguments(self):
        with self.assertRaises(TypeError):
            TokenStream(["a"])  # type: ignore[arg-type]


class TestCheckpoints(TestCase):

    def testRestoreReturnsToSavedIndex(self):
        tokens = stream("a", "b", "c")
        tokens.next()
        tokens.save()
        tokens.next()
        tokens.peek()
        tokens.next()
        tokens.restore()
        self.assertEqual(tokens.index, 1)
        self.assertEqual(tokens.depth, 0)

    def testCheckpointLawOverRandomOperations(self):
        rng = random.Random(7)
        for _ in range(50):
            tokens = stream(*"abcdefgh")
            for _ in range(rng.randrange(4)):
                tokens.next()
            before = tokens.index
            tokens.save()
            for _ in range(rng.randrange(12)):
                rng.choice((tokens.next, tokens.peek))()
            tokens.restore()
            self.assertEqual(tokens.index, before)

    def testNestedCheckpoints(self):
        tokens = stream("a", "b", "c")
        tokens.save()
        tokens.next()
        tokens.save()
        tokens.next()
        tokens.restore()
        self.assertEqual(tokens.index, 1)
        tokens.restore()
        self.assertEqual(tokens.index, 0)

    def testDiscardKeepsCursor(self):
        tokens = stream("a", "b")
        tokens.save()
        tokens.next()
        tokens.discard()
        self.assertEqual(tokens.index, 1)
        self.assertEqual(tokens.depth, 0)

    def testDiscardIsIrreversible(self):
        tokens = stream("a", "b", "c")
        tokens.save()
        tokens.save()
        tokens.next()
        tokens.discard()
        tokens.restore()
        self.assertEqual(tokens.index, 1)

    def testRestoreWithoutCheckpointRaises(self):
        with self.assertRaises(RuntimeError):
            stream("a").restore()

    def testDiscardWithoutCheckpointRaises(self):
        with self.assertRaises(RuntimeError):
            stream("a").discard()


class TestSwitches(TestCase):

    def setUp(self):
        self.tokens = stream("a", flags=["force"], options={"reason": ["x", "y"], "r": ["z"]})

    def testHasFlags(self):
        self.assertTrue(self.tokens.has_flags("f", "force"))
        self.assertFalse(self.tokens.has_flags("quiet"))
        self.assertFalse(self.tokens.has_flags())

    def testHasOptions(self):
        self.assertTrue(self.tokens.has_options("reason"))
        self.assertFalse(self.tokens.has_options("mode"))

    def testGetOptionReturnsLastValue(self):
        self.assertEqual(self.tokens.get_option("reason"), "y")
        self.assertEqual(self.tokens.get_option("missing", "r"), "z")
        self.assertIsNone(self.tokens.get_option("missing"))

    def testGetOptionsReturnsEveryValue(self):
        self.assertEqual(self.tokens.get_options("reason", "r"), ("x", "y", "z"))
        self.assertIsNone(self.tokens.get_options("missing"))

    def testSwitchesIgnoreCursor(self):
        self.tokens.next()
        self.assertTrue(self.tokens.has_flags("force"))
        self.assertEqual(self.tokens.get_option("reason"), "y")


if __name__ == "__main__":
    unittest.main()
