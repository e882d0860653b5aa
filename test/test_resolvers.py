"""
Resolver tests (pure resolve functions, built-in resolvers, registry).

Scope
- Each pure function returns Ok(value) or Err(identifier), never raises for input.
- Bounds are inclusive by default; inclusive=False makes them strict.
- Built-in resolvers wrap failures into ArgumentError with a human message.
- The registry enforces unique names/aliases and raises KeyError for unknown names.

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from datetime import UTC, datetime
from unittest import IsolatedAsyncioTestCase, TestCase

from parley.contexts import ArgumentContext
from parley.faults import ArgumentError, Identifier
from parley.resolvers import *
from parley.results import Err, Ok


class TestNumericResolvers(TestCase):

    def testIntegerBounds(self):
        bounds = {"minimum": 1, "maximum": 10}
        self.assertEqual(resolve_integer("5", **bounds), Ok(5))
        self.assertEqual(resolve_integer("0", **bounds), Err(Identifier.ARGUMENT_INTEGER_TOO_SMALL))
        self.assertEqual(resolve_integer("11", **bounds), Err(Identifier.ARGUMENT_INTEGER_TOO_LARGE))
        self.assertEqual(resolve_integer("abc", **bounds), Err(Identifier.ARGUMENT_INTEGER_ERROR))

    def testIntegerBoundsAreInclusiveByDefault(self):
        self.assertEqual(resolve_integer("1", minimum=1, maximum=1), Ok(1))
        self.assertEqual(
            resolve_integer("1", minimum=1, inclusive=False),
            Err(Identifier.ARGUMENT_INTEGER_TOO_SMALL)
        )
        self.assertEqual(
            resolve_integer("10", maximum=10, inclusive=False),
            Err(Identifier.ARGUMENT_INTEGER_TOO_LARGE)
        )

    def testIntegerAcceptsIntegralNotation(self):
        self.assertEqual(resolve_integer("-7"), Ok(-7))
        self.assertEqual(resolve_integer("1e3"), Ok(1000))
        self.assertEqual(resolve_integer("4.0"), Ok(4))
        self.assertEqual(resolve_integer("4.5"), Err(Identifier.ARGUMENT_INTEGER_ERROR))
        self.assertEqual(resolve_integer(""), Err(Identifier.ARGUMENT_INTEGER_ERROR))

    def testHugeDigitStringIsAnError(self):
        digits = "9" * 5000
        self.assertEqual(resolve_integer(digits, minimum=1, maximum=10), Err(Identifier.ARGUMENT_INTEGER_ERROR))
        self.assertEqual(resolve_number(digits), Err(Identifier.ARGUMENT_NUMBER_ERROR))
        self.assertEqual(resolve_integer("-" + digits), Err(Identifier.ARGUMENT_INTEGER_ERROR))

    def testFloatRejectsNonFinite(self):
        for text in ("nan", "inf", "-inf", "1e400", "infinity"):
            with self.subTest(text=text):
                self.assertEqual(resolve_float(text), Err(Identifier.ARGUMENT_FLOAT_ERROR))

    def testFloatBounds(self):
        self.assertEqual(resolve_float("2.5", minimum=0, maximum=5), Ok(2.5))
        self.assertEqual(resolve_float("-0.1", minimum=0), Err(Identifier.ARGUMENT_FLOAT_TOO_SMALL))
        self.assertEqual(resolve_float("5.5", maximum=5), Err(Identifier.ARGUMENT_FLOAT_TOO_LARGE))

    def testNumberIsIntWhenIntegral(self):
        result = resolve_number("4.0")
        self.assertEqual(result, Ok(4))
        self.assertIsInstance(result.unwrap(), int)
        self.assertEqual(resolve_number("4.5"), Ok(4.5))
        self.assertEqual(resolve_number("x"), Err(Identifier.ARGUMENT_NUMBER_ERROR))
        self.assertEqual(resolve_number("NaN"), Err(Identifier.ARGUMENT_NUMBER_ERROR))
        self.assertEqual(resolve_number("3", maximum=2), Err(Identifier.ARGUMENT_NUMBER_TOO_LARGE))
        self.assertEqual(resolve_number("1", minimum=2), Err(Identifier.ARGUMENT_NUMBER_TOO_SMALL))


class TestTextResolvers(TestCase):

    def testStringLength(self):
        self.assertEqual(resolve_string("abc", minimum=1, maximum=3), Ok("abc"))
        self.assertEqual(resolve_string("ab", minimum=3), Err(Identifier.ARGUMENT_STRING_TOO_SHORT))
        self.assertEqual(resolve_string("abcd", maximum=3), Err(Identifier.ARGUMENT_STRING_TOO_LONG))

    def testBooleanDefaultsAreCaseInsensitive(self):
        for text in ("1", "true", "+", "T", "YES", "y"):
            with self.subTest(text=text):
                self.assertEqual(resolve_boolean(text), Ok(True))
        for text in ("0", "False", "-", "f", "No", "n"):
            with self.subTest(text=text):
                self.assertEqual(resolve_boolean(text), Ok(False))
        self.assertEqual(resolve_boolean("maybe"), Err(Identifier.ARGUMENT_BOOLEAN_ERROR))

    def testBooleanExtraWordsMergeWithDefaults(self):
        self.assertEqual(resolve_boolean("Sure", truths=["sure"]), Ok(True))
        self.assertEqual(resolve_boolean("nope", falses=["nope"]), Ok(False))
        self.assertEqual(resolve_boolean("yes", truths=["sure"]), Ok(True))

    def testEnum(self):
        colors = ["red", "green"]
        self.assertEqual(resolve_enum("red", enum=colors), Ok("red"))
        self.assertEqual(resolve_enum("RED", enum=colors), Err(Identifier.ARGUMENT_ENUM_ERROR))
        self.assertEqual(resolve_enum("RED", enum=colors, case_insensitive=True), Ok("red"))
        self.assertEqual(resolve_enum("red", enum=[]), Err(Identifier.ARGUMENT_ENUM_EMPTY_ERROR))
        self.assertEqual(resolve_enum("red"), Err(Identifier.ARGUMENT_ENUM_EMPTY_ERROR))

    def testHyperlink(self):
        url = resolve_hyperlink("https://example.com/path?q=1").unwrap()
        self.assertEqual(url.scheme, "https")
        self.assertEqual(url.netloc, "example.com")
        self.assertEqual(url.path, "/path")
        for text in ("example.com", "", "http://a b", "://missing"):
            with self.subTest(text=text):
                self.assertEqual(resolve_hyperlink(text), Err(Identifier.ARGUMENT_HYPERLINK_ERROR))


class TestDateResolver(TestCase):

    def testIsoTextIsUtcWhenNaive(self):
        value = resolve_date("2024-01-02T03:04:05").unwrap()
        self.assertEqual(value, datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC))
        self.assertIsNotNone(value.tzinfo)

    def testRfc2822Text(self):
        value = resolve_date("Tue, 02 Jan 2024 03:04:05 +0000").unwrap()
        self.assertEqual(value, datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC))

    def testInvalidText(self):
        self.assertEqual(resolve_date("not a date"), Err(Identifier.ARGUMENT_DATE_ERROR))
        self.assertEqual(resolve_date(""), Err(Identifier.ARGUMENT_DATE_ERROR))

    def testBoundsAsDatetimeOrEpoch(self):
        self.assertEqual(
            resolve_date("2024-01-01", minimum=datetime(2025, 1, 1, tzinfo=UTC)),
            Err(Identifier.ARGUMENT_DATE_TOO_EARLY)
        )
        self.assertEqual(resolve_date("2024-01-01", maximum=0), Err(Identifier.ARGUMENT_DATE_TOO_FAR))
        self.assertTrue(resolve_date("2024-01-01", minimum=0, maximum=datetime(2030, 1, 1)).is_ok())


class TestBuiltinResolvers(TestCase):

    def testIntegerResolverBuildsArgumentError(self):
        resolver = IntegerResolver()
        result = resolver.run("0", ArgumentContext(minimum=1, maximum=10))
        self.assertTrue(result.is_err())
        error = result.unwrap_err()
        self.assertIsInstance(error, ArgumentError)
        self.assertEqual(error.identifier, Identifier.ARGUMENT_INTEGER_TOO_SMALL)
        self.assertEqual(error.message, "The given number must be at least 1.")
        self.assertEqual(error.parameter, "0")
        self.assertIs(error.argument, resolver)

    def testStrictBoundMessage(self):
        result = IntegerResolver().run("10", ArgumentContext(maximum=10, inclusive=False))
        self.assertEqual(result.unwrap_err().message, "The given number must be less than 10.")

    def testStringResolverMessagePluralizes(self):
        result = StringResolver().run("", ArgumentContext(minimum=1))
        self.assertEqual(result.unwrap_err().message, "The argument must be at least 1 character long.")

    def testEnumResolverListsValues(self):
        result = EnumResolver().run("blue", ArgumentContext(enum=("red", "green")))
        self.assertEqual(result.unwrap_err().message, "The argument must have one of the following values: red, green")

    def testResolverOkPassesThrough(self):
        self.assertEqual(BooleanResolver().run("yes", ArgumentContext()), Ok(True))

    def testResolverRequiresName(self):
        with self.assertRaises(TypeError):
            Resolver()
        with self.assertRaises(ValueError):
            Resolver("two words")


class Color(Resolver):
    name = "color"
    aliases = ("colour",)

    async def run(self, parameter, context):
        if parameter in ("red", "green", "blue"):
            return self.ok(parameter)
        return self.error("ArgumentColorError", "Not a color.", parameter=parameter, context=context)


class TestRegistry(IsolatedAsyncioTestCase):

    def testDefaultRegistryHoldsBuiltins(self):
        registry = ResolverRegistry.default()
        self.assertEqual(len(registry), 8)
        for name in ("string", "integer", "float", "number", "boolean", "date", "enum", "hyperlink", "url"):
            with self.subTest(name=name):
                self.assertIn(name, registry)
        self.assertIs(registry.get("url"), registry.get("hyperlink"))

    def testDuplicateNameOrAliasRejected(self):
        registry = ResolverRegistry.default()
        with self.assertRaises(ValueError):
            registry.register(IntegerResolver())
        with self.assertRaises(ValueError):
            registry.register(Resolver("url"))

    def testUnknownNameRaisesKeyError(self):
        with self.assertRaises(KeyError):
            ResolverRegistry().get("nope")

    def testUnregisterRemovesAliases(self):
        registry = ResolverRegistry.default()
        registry.unregister("url")
        self.assertNotIn("hyperlink", registry)
        self.assertNotIn("url", registry)
        self.assertEqual(len(registry), 7)

    def testRegisterRequiresResolver(self):
        with self.assertRaises(TypeError):
            ResolverRegistry().register(lambda parameter, context: None)  # type: ignore[arg-type]

    async def testAsyncResolverIsAwaited(self):
        registry = ResolverRegistry([Color()])
        self.assertEqual(await registry.run("colour", "red", ArgumentContext()), Ok("red"))
        result = await registry.run("color", "pink", ArgumentContext())
        self.assertEqual(result.unwrap_err().identifier, "ArgumentColorError")

    async def testResolverMustReturnResult(self):
        class Broken(Resolver):
            name = "broken"

            def run(self, parameter, context):
                return parameter

        with self.assertRaises(TypeError):
            await ResolverRegistry([Broken()]).run("broken", "x", ArgumentContext())


if __name__ == "__main__":
    unittest.main()
