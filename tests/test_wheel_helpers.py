from __future__ import annotations

import random
import unittest

from prizewheel.wheel import (
    DEFAULT_ALLOWED_ORDINALS,
    DEFAULT_CATALOG,
    DEFAULT_DRAW_REGISTRY,
    DrawRegistry,
    DrawStrategy,
    Prize,
    PrizeCatalog,
    PrizeKind,
    draw_uniform,
    draw_weighted,
)


class FixedRandom:
    """Random source that returns pre-selected ordinals."""

    def __init__(self, *ordinals: int) -> None:
        self._ordinals = list(ordinals)
        self.pools: list[tuple] = []

    def choice(self, seq):
        self.pools.append(tuple(seq))
        return self._ordinals.pop(0)

    def choices(self, population, weights=None, *, k=1):
        self.pools.append(tuple(population))
        return [self._ordinals.pop(0)]


class PrizeCatalogTests(unittest.TestCase):
    def test_default_catalog_layout(self) -> None:
        self.assertEqual(len(DEFAULT_CATALOG), 9)
        self.assertEqual(DEFAULT_CATALOG.find_kind(PrizeKind.RESPIN).ordinal, 7)
        self.assertEqual(DEFAULT_CATALOG.find_kind(PrizeKind.LOSS).ordinal, 9)
        self.assertTrue(DEFAULT_CATALOG.get(7).is_respin)
        self.assertTrue(DEFAULT_CATALOG.get(9).is_loss)
        self.assertEqual(DEFAULT_CATALOG.index_of(2), 1)

    def test_default_pool_skips_top_prizes(self) -> None:
        self.assertNotIn(3, DEFAULT_ALLOWED_ORDINALS)
        self.assertNotIn(8, DEFAULT_ALLOWED_ORDINALS)
        for ordinal in DEFAULT_ALLOWED_ORDINALS:
            self.assertIn(ordinal, DEFAULT_CATALOG)

    def test_ordinals_must_be_contiguous(self) -> None:
        with self.assertRaises(ValueError):
            PrizeCatalog([Prize(1, "A"), Prize(3, "C")])
        with self.assertRaises(ValueError):
            PrizeCatalog([])

    def test_catalog_sorts_by_ordinal(self) -> None:
        catalog = PrizeCatalog([Prize(2, "B"), Prize(1, "A")])
        self.assertEqual([p.label for p in catalog], ["A", "B"])

    def test_unknown_ordinal(self) -> None:
        with self.assertRaises(KeyError):
            DEFAULT_CATALOG.get(10)
        self.assertNotIn(0, DEFAULT_CATALOG)


class UniformDrawTests(unittest.TestCase):
    def test_draw_stays_within_allowed_subset(self) -> None:
        rng = random.Random(1234)
        allowed = (1, 2, 4)
        seen = {draw_uniform(DEFAULT_CATALOG, allowed, rng) for _ in range(300)}
        self.assertEqual(seen, set(allowed))

    def test_pool_is_sorted_and_deduplicated(self) -> None:
        rng = FixedRandom(4)
        self.assertEqual(draw_uniform(DEFAULT_CATALOG, [4, 1, 4], rng), 4)
        self.assertEqual(rng.pools, [(1, 4)])

    def test_invalid_pools(self) -> None:
        with self.assertRaises(ValueError):
            draw_uniform(DEFAULT_CATALOG, [], random.Random(0))
        with self.assertRaises(ValueError):
            draw_uniform(DEFAULT_CATALOG, [1, 12], random.Random(0))


class WeightedDrawTests(unittest.TestCase):
    def test_zero_weight_is_never_drawn(self) -> None:
        rng = random.Random(7)
        results = {
            draw_weighted(DEFAULT_CATALOG, (1, 2), rng, {1: 0.0}) for _ in range(200)
        }
        self.assertEqual(results, {2})

    def test_missing_weights_default_to_one(self) -> None:
        rng = random.Random(99)
        results = {draw_weighted(DEFAULT_CATALOG, (5, 6), rng) for _ in range(200)}
        self.assertEqual(results, {5, 6})

    def test_invalid_weights(self) -> None:
        rng = random.Random(0)
        with self.assertRaises(ValueError):
            draw_weighted(DEFAULT_CATALOG, (1, 2), rng, {3: 1.0})
        with self.assertRaises(ValueError):
            draw_weighted(DEFAULT_CATALOG, (1, 2), rng, {1: -1.0})
        with self.assertRaises(ValueError):
            draw_weighted(DEFAULT_CATALOG, (1, 2), rng, {1: 0.0, 2: 0.0})


class DrawRegistryTests(unittest.TestCase):
    def test_default_registry_strategies(self) -> None:
        available = DEFAULT_DRAW_REGISTRY.available_strategies()
        self.assertIn("uniform", available)
        self.assertIn("weighted", available)
        ordinal = DEFAULT_DRAW_REGISTRY.draw(
            "uniform", DEFAULT_CATALOG, (2,), FixedRandom(2)
        )
        self.assertEqual(ordinal, 2)

    def test_custom_registry_registration(self) -> None:
        registry = DrawRegistry()
        with self.assertRaises(KeyError):
            registry.get("missing")
        registry.register(DEFAULT_DRAW_REGISTRY.get("uniform"))
        with self.assertRaises(ValueError):
            registry.register(DEFAULT_DRAW_REGISTRY.get("uniform"))
        registry.register(DEFAULT_DRAW_REGISTRY.get("uniform"), replace=True)

    def test_strategy_output_is_checked(self) -> None:
        rogue = DrawStrategy(key="rogue", drawer=lambda catalog, allowed, rng, w: 3)
        with self.assertRaises(RuntimeError):
            rogue.draw(DEFAULT_CATALOG, (1, 2), random.Random(0))


if __name__ == "__main__":
    unittest.main()
