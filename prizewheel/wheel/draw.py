"""Prize draw functions and the registry that selects between them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Protocol, Sequence

from .catalog import PrizeCatalog


class RandomSource(Protocol):
    """Subset of :class:`random.Random` used by the draw functions."""

    def choice(self, seq: Sequence[Any]) -> Any: ...

    def choices(
        self,
        population: Sequence[Any],
        weights: Optional[Sequence[float]] = None,
        *,
        k: int = 1,
    ) -> list[Any]: ...


def _draw_pool(catalog: PrizeCatalog, allowed_ordinals: Iterable[int]) -> tuple[int, ...]:
    """Return the sorted, de-duplicated draw pool after checking it against ``catalog``."""
    pool = tuple(sorted(set(allowed_ordinals)))
    if not pool:
        raise ValueError("allowed_ordinals must contain at least one ordinal")
    unknown = [ordinal for ordinal in pool if ordinal not in catalog]
    if unknown:
        raise ValueError(f"allowed_ordinals not present in the catalog: {unknown}")
    return pool


def draw_uniform(
    catalog: PrizeCatalog,
    allowed_ordinals: Iterable[int],
    rng: RandomSource,
) -> int:
    """Draw an ordinal uniformly at random from the allowed subset.

    Parameters
    ----------
    catalog : PrizeCatalog
        Catalog the ordinals refer to.
    allowed_ordinals : Iterable[int]
        Ordinals eligible for the draw. Prizes outside this set stay on the
        wheel but are never selected.
    rng : RandomSource
        Random source, usually a :class:`random.Random` instance.

    Returns
    -------
    int
        The drawn ordinal.
    """
    pool = _draw_pool(catalog, allowed_ordinals)
    return int(rng.choice(pool))


def draw_weighted(
    catalog: PrizeCatalog,
    allowed_ordinals: Iterable[int],
    rng: RandomSource,
    weights: Optional[Mapping[int, float]] = None,
) -> int:
    """Draw an ordinal from the allowed subset with per-ordinal weights.

    Allowed ordinals missing from ``weights`` default to a weight of 1.0. A
    weight of zero keeps the ordinal in the pool but makes it unreachable.

    Raises
    ------
    ValueError
        If a weight is negative, names an ordinal outside the allowed subset,
        or all weights are zero.
    """
    pool = _draw_pool(catalog, allowed_ordinals)
    weights = dict(weights or {})

    stray = sorted(set(weights) - set(pool))
    if stray:
        raise ValueError(f"weights given for ordinals outside the draw pool: {stray}")

    resolved = [float(weights.get(ordinal, 1.0)) for ordinal in pool]
    if any(weight < 0 for weight in resolved):
        raise ValueError("weights must be non-negative")
    if sum(resolved) <= 0:
        raise ValueError("at least one allowed ordinal needs a positive weight")

    return int(rng.choices(pool, weights=resolved, k=1)[0])


Drawer = Callable[
    [PrizeCatalog, Sequence[int], RandomSource, Optional[Mapping[int, float]]], int
]


@dataclass(frozen=True)
class DrawStrategy:
    """Definition of a draw strategy.

    Attributes
    ----------
    key : str
        Registry key, referenced by the ``WHEEL_DRAW_STRATEGY`` setting.
    drawer : Drawer
        Callable receiving the catalog, the allowed ordinals, the random
        source and optional weights, and returning the drawn ordinal.
    description : Optional[str]
        Human-readable summary of the strategy.
    """

    key: str
    drawer: Drawer
    description: Optional[str] = None

    def draw(
        self,
        catalog: PrizeCatalog,
        allowed_ordinals: Sequence[int],
        rng: RandomSource,
        weights: Optional[Mapping[int, float]] = None,
    ) -> int:
        ordinal = self.drawer(catalog, allowed_ordinals, rng, weights)
        if ordinal not in allowed_ordinals:
            raise RuntimeError(
                f"Draw strategy '{self.key}' returned {ordinal}, outside the allowed ordinals"
            )
        return ordinal


class DrawRegistry:
    """Mutable registry mapping strategy keys to definitions."""

    def __init__(self) -> None:
        self._strategies: Dict[str, DrawStrategy] = {}

    def register(self, strategy: DrawStrategy, *, replace: bool = False) -> None:
        """Register a draw strategy under its key.

        Parameters
        ----------
        strategy : DrawStrategy
            Strategy to add to the registry.
        replace : bool, default: False
            When ``True`` an existing registration with the same key is
            overwritten. Otherwise a duplicate raises :class:`ValueError`.
        """
        if not replace and strategy.key in self._strategies:
            raise ValueError(f"Draw strategy '{strategy.key}' is already registered")
        self._strategies[strategy.key] = strategy

    def get(self, key: str) -> DrawStrategy:
        """Return the strategy registered under ``key``."""
        try:
            return self._strategies[key]
        except KeyError as exc:
            raise KeyError(f"Unknown draw strategy '{key}'") from exc

    def draw(
        self,
        key: str,
        catalog: PrizeCatalog,
        allowed_ordinals: Sequence[int],
        rng: RandomSource,
        *,
        weights: Optional[Mapping[int, float]] = None,
    ) -> int:
        """Draw an ordinal with the strategy referenced by ``key``."""
        return self.get(key).draw(catalog, allowed_ordinals, rng, weights)

    def available_strategies(self) -> Dict[str, DrawStrategy]:
        """Return a copy of the registered strategies keyed by identifier."""
        return dict(self._strategies)


DEFAULT_DRAW_REGISTRY = DrawRegistry()
DEFAULT_DRAW_REGISTRY.register(
    DrawStrategy(
        key="uniform",
        drawer=lambda catalog, allowed, rng, _weights: draw_uniform(catalog, allowed, rng),
        description="Every allowed ordinal is equally likely.",
    )
)
DEFAULT_DRAW_REGISTRY.register(
    DrawStrategy(
        key="weighted",
        drawer=draw_weighted,
        description="Allowed ordinals are drawn proportionally to configured weights.",
    )
)

__all__ = [
    "DEFAULT_DRAW_REGISTRY",
    "DrawRegistry",
    "DrawStrategy",
    "RandomSource",
    "draw_uniform",
    "draw_weighted",
]
