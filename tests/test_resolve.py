#!/usr/bin/env python3
"""
Unit tests for provider resolution.
"""

import unittest
from typing import Annotated, Any

from reflectdi import (
    ClassProvider,
    Dependency,
    ExistingProvider,
    FactoryProvider,
    Inject,
    InjectionToken,
    InvalidProviderError,
    Key,
    KeyRegistry,
    MixingMultiProvidersError,
    NoAnnotationError,
    Optional,
    ReflectiveInjector,
    Self,
    SkipSelf,
    ValueProvider,
    Visibility,
    forward_ref,
)


class Engine:
    pass


class TurboEngine(Engine):
    pass


class Car:
    def __init__(self, engine: Engine):
        self.engine = engine


class CarWithTwoParts:
    def __init__(self, engine: Engine, part):
        self.engine = engine
        self.part = part


class CarWithForwardRef:
    def __init__(self, engine: "LateEngine"):
        self.engine = engine


class ManifestReflector:
    """Reflector that reads dependencies from an explicit table."""

    def __init__(self, table: dict[Any, list[list[Any] | None]]):
        self.table = table
        self.calls: list[Any] = []

    def parameters(self, type_or_func: Any) -> list[list[Any] | None]:
        self.calls.append(type_or_func)
        return self.table.get(type_or_func, [])


class TestResolve(unittest.TestCase):
    """Test ReflectiveInjector.resolve."""

    def test_flattens_nested_lists(self):
        """Test that nested lists and tuples are flattened in order."""
        providers = ReflectiveInjector.resolve([Engine, [[Car], (ValueProvider("a", 1),)]])

        self.assertEqual([str(p.key) for p in providers], ["Engine", "Car", "a"])

    def test_skips_none_and_empty_lists(self):
        """Test that None and empty nested lists contribute nothing."""
        providers = ReflectiveInjector.resolve([None, [], [None, Engine], ()])

        self.assertEqual(len(providers), 1)
        self.assertEqual(providers[0].key, Key.get(Engine))

    def test_nested_lists_are_equivalent_to_flat(self):
        """Test that nesting does not change the result."""
        flat = ReflectiveInjector.resolve([Engine, Car])
        nested = ReflectiveInjector.resolve([[Engine], [[Car]]])

        self.assertEqual([p.key for p in flat], [p.key for p in nested])
        self.assertEqual(
            [p.resolved_factory.dependencies for p in flat],
            [p.resolved_factory.dependencies for p in nested],
        )

    def test_class_shorthand(self):
        """Test that a bare class resolves like ClassProvider(cls, cls)."""
        provider = ReflectiveInjector.resolve([Car])[0]

        self.assertEqual(provider.key, Key.get(Car))
        self.assertFalse(provider.multi_provider)
        self.assertIs(provider.resolved_factory.factory, Car)
        self.assertEqual(provider.resolved_factory.dependencies, (Dependency(Key.get(Engine)),))

    def test_multi_providers(self):
        """Test that multi providers with the same key are merged in order."""
        providers = ReflectiveInjector.resolve(
            [
                ClassProvider(Engine, Engine, multi=True),
                ClassProvider(Engine, TurboEngine, multi=True),
            ]
        )

        self.assertEqual(len(providers), 1)
        self.assertTrue(providers[0].multi_provider)
        self.assertEqual(
            [f.factory for f in providers[0].resolved_factories], [Engine, TurboEngine]
        )

    def test_single_multi_provider(self):
        """Test that a lone multi declaration stays a multi provider."""
        provider = ReflectiveInjector.resolve([ValueProvider("plugins", "a", multi=True)])[0]

        self.assertTrue(provider.multi_provider)
        self.assertEqual(len(provider.resolved_factories), 1)
        self.assertEqual(str(provider), "ResolvedProvider[plugins (multi)]")

    def test_mixing_multi_and_regular(self):
        """Test that a key cannot mix multi and regular declarations."""
        with self.assertRaisesRegex(
            MixingMultiProvidersError, "Cannot mix multi providers and regular providers"
        ):
            ReflectiveInjector.resolve(
                [ClassProvider(Engine, Engine, multi=True), ClassProvider(Engine, TurboEngine)]
            )

    def test_mixing_regular_and_multi(self):
        """Test the mixing check in the other declaration order."""
        with self.assertRaises(MixingMultiProvidersError) as cm:
            ReflectiveInjector.resolve(
                [ClassProvider(Engine, TurboEngine), ClassProvider(Engine, Engine, multi=True)]
            )

        self.assertEqual(cm.exception.key, Key.get(Engine))

    def test_last_regular_declaration_wins(self):
        """Test that a later regular declaration replaces an earlier one in place."""
        providers = ReflectiveInjector.resolve(
            [Engine, Car, ClassProvider(Engine, TurboEngine)]
        )

        self.assertEqual([p.key for p in providers], [Key.get(Engine), Key.get(Car)])
        self.assertIs(providers[0].resolved_factory.factory, TurboEngine)

    def test_mapping_declarations(self):
        """Test every mapping form."""
        providers = ReflectiveInjector.resolve(
            [
                {"provide": Engine, "use_class": TurboEngine},
                {"provide": "value", "use_value": None},
                {"provide": "alias", "use_existing": Engine},
                {"provide": "factory", "use_factory": lambda e: e, "deps": [Engine]},
                {"provide": "many", "use_value": 1, "multi": True},
            ]
        )

        self.assertEqual(
            [str(p.key) for p in providers], ["Engine", "value", "alias", "factory", "many"]
        )
        self.assertIs(providers[0].resolved_factory.factory, TurboEngine)
        self.assertIsNone(providers[1].resolved_factory.factory())
        self.assertEqual(
            providers[2].resolved_factory.dependencies, (Dependency(Key.get(Engine)),)
        )
        self.assertTrue(providers[4].multi_provider)

    def test_value_and_alias_factories(self):
        """Test the factories built for value and alias providers."""
        value, alias = ReflectiveInjector.resolve(
            [ValueProvider("value", 42), ExistingProvider("alias", "value")]
        )

        self.assertEqual(value.resolved_factory.dependencies, ())
        self.assertEqual(value.resolved_factory.factory(), 42)
        self.assertEqual(alias.resolved_factory.dependencies, (Dependency(Key.get("value")),))
        self.assertEqual(alias.resolved_factory.factory("x"), "x")

    def test_factory_without_deps_uses_signature(self):
        """Test that a factory's dependencies are reflected when deps is omitted."""

        def make_car(engine: Annotated[Engine, Optional()]) -> Car:
            return Car(engine)

        provider = ReflectiveInjector.resolve([FactoryProvider(Car, make_car)])[0]

        self.assertEqual(
            provider.resolved_factory.dependencies, (Dependency(Key.get(Engine), optional=True),)
        )

    def test_factory_with_empty_deps(self):
        """Test that an explicit empty deps list means no dependencies."""
        provider = ReflectiveInjector.resolve(
            [FactoryProvider(Car, lambda engine: Car(engine), deps=[])]
        )[0]

        self.assertEqual(provider.resolved_factory.dependencies, ())


class TestDependencyMarkers(unittest.TestCase):
    """Test markers in deps lists."""

    def _deps(self, deps):
        provider = ReflectiveInjector.resolve(
            [FactoryProvider("target", lambda *args: args, deps=deps)]
        )[0]
        return provider.resolved_factory.dependencies

    def test_flat_and_nested_tokens(self):
        """Test that `Engine` and `[Engine]` are the same dependency."""
        self.assertEqual(self._deps([Engine]), self._deps([[Engine]]))

    def test_inject_marker(self):
        """Test Inject on its own and next to a type."""
        token = InjectionToken("engine")

        self.assertEqual(self._deps([Inject(token)]), (Dependency(Key.get(token)),))
        self.assertEqual(self._deps([[Engine, Inject(token)]]), (Dependency(Key.get(token)),))

    def test_optional_marker(self):
        """Test Optional as instance and as bare class."""
        expected = (Dependency(Key.get(Engine), optional=True),)

        self.assertEqual(self._deps([[Engine, Optional()]]), expected)
        self.assertEqual(self._deps([[Engine, Optional]]), expected)

    def test_visibility_markers(self):
        """Test Self and SkipSelf."""
        (self_dep,) = self._deps([[Engine, Self()]])
        (skip_dep,) = self._deps([[Engine, SkipSelf]])

        self.assertIs(self_dep.visibility, Visibility.SELF)
        self.assertIs(skip_dep.visibility, Visibility.SKIP_SELF)
        self.assertFalse(self_dep.optional)

    def test_combined_markers(self):
        """Test markers in any order."""
        (dep,) = self._deps([[Optional(), SkipSelf(), Engine]])

        self.assertEqual(dep, Dependency(Key.get(Engine), True, Visibility.SKIP_SELF))
        self.assertEqual(str(dep), "Engine [optional, skip_self]")

    def test_markers_without_token(self):
        """Test that a dependency consisting only of markers is rejected."""
        with self.assertRaises(NoAnnotationError):
            self._deps([[Optional(), Self()]])


class TestForwardRefs(unittest.TestCase):
    """Test forward references in declarations."""

    def test_forward_ref_declaration(self):
        """Test a forward reference to a class declaration."""
        injector = ReflectiveInjector.resolve_and_create([forward_ref(lambda: LateEngine)])

        self.assertIsInstance(injector.get(LateEngine), LateEngine)

    def test_forward_ref_fields(self):
        """Test forward references in provide, use_class, use_existing and deps."""
        injector = ReflectiveInjector.resolve_and_create(
            [
                ClassProvider(forward_ref(lambda: Engine), forward_ref(lambda: LateEngine)),
                ExistingProvider("alias", forward_ref(lambda: Engine)),
                FactoryProvider("car", lambda e: Car(e), deps=[forward_ref(lambda: Engine)]),
                FactoryProvider(
                    "optional", lambda e: e, deps=[[forward_ref(lambda: "missing"), Optional()]]
                ),
            ]
        )

        self.assertIsInstance(injector.get(Engine), LateEngine)
        self.assertIs(injector.get("alias"), injector.get(Engine))
        self.assertIs(injector.get("car").engine, injector.get(Engine))
        self.assertIsNone(injector.get("optional"))

    def test_forward_ref_inject(self):
        """Test a forward reference inside Inject."""
        injector = ReflectiveInjector.resolve_and_create(
            [
                LateEngine,
                FactoryProvider("car", lambda e: Car(e), deps=[Inject(forward_ref(lambda: LateEngine))]),
            ]
        )

        self.assertIsInstance(injector.get("car").engine, LateEngine)

    def test_forward_ref_get(self):
        """Test that get accepts forward references."""
        injector = ReflectiveInjector.resolve_and_create([LateEngine])

        self.assertIs(injector.get(forward_ref(lambda: LateEngine)), injector.get(LateEngine))

    def test_string_annotation_of_later_class(self):
        """Test a string annotation resolved from module globals."""
        injector = ReflectiveInjector.resolve_and_create([LateEngine, CarWithForwardRef])

        self.assertIsInstance(injector.get(CarWithForwardRef).engine, LateEngine)


class TestInvalidDeclarations(unittest.TestCase):
    """Test rejected declarations."""

    def test_invalid_values(self):
        """Test that non-provider values are rejected."""
        for declaration in ["blah", 42, object()]:
            with self.subTest(declaration=declaration):
                with self.assertRaises(InvalidProviderError) as cm:
                    ReflectiveInjector.resolve([declaration])
                self.assertIs(cm.exception.provider, declaration)

    def test_invalid_mappings(self):
        """Test mappings without provide or with zero or several use_* keys."""
        for declaration in [
            {"use_value": 1},
            {"provide": "a"},
            {"provide": "a", "use_value": 1, "use_class": Engine},
        ]:
            with self.subTest(declaration=declaration):
                with self.assertRaises(InvalidProviderError):
                    ReflectiveInjector.resolve([declaration])

    def test_non_callable_class_or_factory(self):
        """Test that use_class and use_factory must be callable."""
        with self.assertRaises(InvalidProviderError):
            ReflectiveInjector.resolve([ClassProvider(Engine, 42)])
        with self.assertRaises(InvalidProviderError):
            ReflectiveInjector.resolve([FactoryProvider(Engine, "not a function")])

    def test_partial_annotations(self):
        """Test the message listing known and unknown parameters."""
        with self.assertRaises(NoAnnotationError) as cm:
            ReflectiveInjector.resolve([CarWithTwoParts])

        self.assertEqual(
            str(cm.exception),
            "Cannot resolve all parameters for 'CarWithTwoParts'(Engine, ?). "
            "Make sure that all the parameters are decorated with Inject or have valid type "
            "annotations and that 'CarWithTwoParts' is decorated with Injectable.",
        )
        self.assertIs(cm.exception.type_or_func, CarWithTwoParts)


class TestCustomCollaborators(unittest.TestCase):
    """Test custom reflectors and key registries."""

    def test_manifest_reflector(self):
        """Test that a custom reflector replaces signature introspection."""
        reflector = ManifestReflector({CarWithTwoParts: [[Engine], ["part"]]})

        injector = ReflectiveInjector.resolve_and_create(
            [Engine, ValueProvider("part", "wheel"), CarWithTwoParts], reflector=reflector
        )
        car = injector.get(CarWithTwoParts)

        self.assertIsInstance(car.engine, Engine)
        self.assertEqual(car.part, "wheel")
        self.assertIn(CarWithTwoParts, reflector.calls)

    def test_child_inherits_reflector(self):
        """Test that children resolve with the parent's reflector."""
        reflector = ManifestReflector({CarWithTwoParts: [[Engine], ["part"]]})
        parent = ReflectiveInjector.resolve_and_create([Engine], reflector=reflector)

        child = parent.resolve_and_create_child([ValueProvider("part", "door"), CarWithTwoParts])

        self.assertEqual(child.get(CarWithTwoParts).part, "door")

    def test_manifest_reflector_missing_entry(self):
        """Test that a None entry from a reflector is reported."""
        reflector = ManifestReflector({CarWithTwoParts: [[Engine], None]})

        with self.assertRaisesRegex(NoAnnotationError, r"\(Engine, \?\)"):
            ReflectiveInjector.resolve([CarWithTwoParts], reflector=reflector)

    def test_custom_registry(self):
        """Test that an injector with its own registry resolves keys from it."""
        registry = KeyRegistry()
        injector = ReflectiveInjector.resolve_and_create([Engine, Car], registry=registry)

        self.assertEqual(registry.num_keys, 2)
        self.assertIs(injector.get(Car).engine, injector.get(Engine))

        child = injector.resolve_and_create_child([ClassProvider(Engine, TurboEngine)])
        self.assertIsInstance(child.get(Engine), TurboEngine)
        self.assertEqual(registry.num_keys, 2)


class LateEngine:
    pass


if __name__ == "__main__":
    unittest.main()
