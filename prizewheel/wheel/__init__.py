"""Prize wheel building blocks: catalog, draw, countdown and visitor state."""

from .catalog import DEFAULT_ALLOWED_ORDINALS, DEFAULT_CATALOG, Prize, PrizeCatalog, PrizeKind
from .countdown import Countdown
from .draw import (
    DEFAULT_DRAW_REGISTRY,
    DrawRegistry,
    DrawStrategy,
    draw_uniform,
    draw_weighted,
)
from .state import Phase, Registration, VisitorState

__all__ = [
    "Countdown",
    "DEFAULT_ALLOWED_ORDINALS",
    "DEFAULT_CATALOG",
    "DEFAULT_DRAW_REGISTRY",
    "DrawRegistry",
    "DrawStrategy",
    "Phase",
    "Prize",
    "PrizeCatalog",
    "PrizeKind",
    "Registration",
    "VisitorState",
    "draw_uniform",
    "draw_weighted",
]
