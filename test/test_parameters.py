"""
Parameters module behavioral tests (specs, builder, registry lookup).

Scope
- Validate Parameter/AliasedParameter construction, matching and rendering.
- Validate the immutable fluent ParameterBuilder.
- Validate Registry lookup order, undefined-parameter faults and shadowing warnings.

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
import warnings
from unittest import TestCase, mock

from rich.console import Console

from argstack import (
    AliasedParameter,
    Arity,
    FaultCode,
    Parameter,
    ParameterBuilder,
    Registry,
    ShadowedParameterWarning,
    UndefinedParameterError,
)


class TestParameter(TestCase):

    def testDefaultArityIsAny(self):
        self.assertEqual(Parameter("--x").arity, Arity())

    def testArityCoercedFromInt(self):
        self.assertEqual(Parameter("--x", 2).arity, Arity(2))

    def testMatchesOnlyItsName(self):
        parameter = Parameter("--x")
        self.assertTrue(parameter.matches("--x"))
        self.assertFalse(parameter.matches("-x"))

    def testNameMustBeNonEmptyString(self):
        with self.assertRaises(TypeError):
            Parameter(1)
        with self.assertRaises(ValueError):
            Parameter("   ")
        with self.assertRaises(ValueError):
            Parameter("--a b")

    def testRendering(self):
        self.assertEqual(str(Parameter("--x", (1, 3))), 'parameter "--x" with [1..3] arguments')

    def testImmutable(self):
        parameter = Parameter("--x")
        with self.assertRaises(AttributeError):
            parameter.name = "--y"


class TestAliasedParameter(TestCase):

    def setUp(self):
        self.parameter = AliasedParameter("--param", Arity(1, 5), ["-O", "-P"])

    def testMatchesNameAndAliases(self):
        for token in ("--param", "-O", "-P"):
            with self.subTest(token=token):
                self.assertTrue(self.parameter.matches(token))

    def testMatchingIsExact(self):
        for token in ("--par", "--PARAM", "-o", "--param ", "param"):
            with self.subTest(token=token):
                self.assertFalse(self.parameter.matches(token))

    def testAliasOrderPreserved(self):
        self.assertEqual(self.parameter.aliases, ("-O", "-P"))
        self.assertEqual(self.parameter.names, ("--param", "-O", "-P"))

    def testDuplicateNamesRejected(self):
        with self.assertRaises(ValueError):
            AliasedParameter("--x", aliases=["-x", "-x"])
        with self.assertRaises(ValueError):
            AliasedParameter("--x", aliases=["--x"])

    def testAliasesMustNotBeAString(self):
        with self.assertRaises(TypeError):
            AliasedParameter("--x", aliases="-x")

    def testRenderingListsAliases(self):
        self.assertEqual(
            str(self.parameter),
            'parameter "--param" with [1..5] arguments, aliases: "-O", "-P"'
        )

    def testRenderingWithoutAliases(self):
        self.assertEqual(str(AliasedParameter("--x", 2)), 'parameter "--x" with 2 arguments')

    def testRepr(self):
        self.assertEqual(
            repr(AliasedParameter("--param", (1, 5), ["-O"])),
            "aliased-parameter(name='--param', arity=arity(min=1, max=5), aliases=('-O',))"
        )

    def testEqualityAndHash(self):
        twin = AliasedParameter("--param", (1, 5), ("-O", "-P"))
        self.assertEqual(self.parameter, twin)
        self.assertEqual(hash(self.parameter), hash(twin))
        self.assertNotEqual(self.parameter, AliasedParameter("--param", (1, 5), ("-P", "-O")))
        self.assertNotEqual(Parameter("--x"), AliasedParameter("--x"))


class TestParameterBuilder(TestCase):

    def testBuild(self):
        parameter = AliasedParameter.builder().name("--param").alias("-O").args(Arity(1, 5)).build()
        self.assertEqual(parameter, AliasedParameter("--param", Arity(1, 5), ["-O"]))

    def testStepsReturnNewBuilders(self):
        base = ParameterBuilder().name("--x")
        aliased = base.alias("-x")
        self.assertIsNot(base, aliased)
        self.assertEqual(base.build().aliases, ())
        self.assertEqual(aliased.build().aliases, ("-x",))

    def testAliasesAccumulate(self):
        parameter = ParameterBuilder().name("--x").alias("-x").alias("-X", "--ex").build()
        self.assertEqual(parameter.aliases, ("-x", "-X", "--ex"))

    def testArgsAcceptsArityLikes(self):
        self.assertEqual(ParameterBuilder().name("--x").args(2).build().arity, Arity(2))
        self.assertEqual(ParameterBuilder().name("--x").args((0, 3)).build().arity, Arity.at_most(3))

    def testDefaultArityIsAny(self):
        self.assertEqual(ParameterBuilder().name("--x").build().arity, Arity())

    def testNameRequired(self):
        with self.assertRaises(TypeError):
            ParameterBuilder().alias("-x").build()

    def testSingleValueSteps(self):
        with self.assertRaises(TypeError):
            ParameterBuilder().name("--x", "--y")


class TestRegistry(TestCase):

    def setUp(self):
        self.param = AliasedParameter("--param", (1, 5), ["-O"])
        self.verbose = AliasedParameter("--verbose", 0, ["-v"])
        self.registry = Registry([self.param, self.verbose])

    def testFindByNameOrAlias(self):
        self.assertIs(self.registry.find("--param"), self.param)
        self.assertIs(self.registry.find("-v"), self.verbose)

    def testAliasSymmetry(self):
        self.assertIs(self.registry.find("-O"), self.registry.find("--param"))

    def testUndefinedParameter(self):
        with self.assertRaises(UndefinedParameterError) as caught:
            self.registry.find("--nope")
        self.assertEqual(str(caught.exception), 'undefined parameter: "--nope"')
        self.assertEqual(caught.exception.options["token"], "--nope")
        self.assertIs(caught.exception.options["code"], FaultCode.UNDEFINED_PARAMETER)

    def testNoAbbreviationOrCaseFolding(self):
        for token in ("--par", "--Param", "-o"):
            with self.subTest(token=token):
                with self.assertRaises(UndefinedParameterError):
                    self.registry.find(token)

    def testEmptyRegistry(self):
        with self.assertRaises(UndefinedParameterError):
            Registry().find("-x")

    def testFirstMatchWinsAndWarns(self):
        first = AliasedParameter("--first", aliases=["-x"])
        second = AliasedParameter("--second", aliases=["-x"])
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            registry = Registry([first, second])
        self.assertIs(registry.find("-x"), first)
        self.assertTrue(any(issubclass(warning.category, ShadowedParameterWarning) for warning in caught))

    def testShadowingWarningPrintedInShell(self):
        console = Console(color_system=None, force_terminal=False, width=200)
        first = AliasedParameter("--first", aliases=["-x"])
        second = AliasedParameter("--second", aliases=["-x"])
        with mock.patch("argstack.faults.console", console):
            with warnings.catch_warnings(record=True) as caught:
                warnings.simplefilter("always")
                with console.capture() as capture:
                    Registry([first, second], shell=True)
        self.assertEqual(caught, [])
        self.assertEqual(capture.get(), 'Warning: "-x" of parameter "--second" is already claimed by parameter "--first"\n')

    def testDistinctNamesDoNotWarn(self):
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            Registry([self.param, self.verbose])
        self.assertFalse([warning for warning in caught if issubclass(warning.category, ShadowedParameterWarning)])

    def testSequenceProtocol(self):
        self.assertEqual(len(self.registry), 2)
        self.assertEqual(list(self.registry), [self.param, self.verbose])
        self.assertIs(self.registry[1], self.verbose)

    def testRejectsNonParameters(self):
        with self.assertRaises(TypeError):
            Registry(["--param"])


if __name__ == "__main__":
    unittest.main()
