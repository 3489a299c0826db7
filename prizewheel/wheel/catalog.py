"""Static prize catalog shown on the wheel."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Optional


class PrizeKind(str, Enum):
    """How the controller treats a slice of the wheel once it settles."""

    PRIZE = "prize"
    RESPIN = "respin"
    LOSS = "loss"


@dataclass(frozen=True)
class Prize:
    """One wheel slice.

    Attributes
    ----------
    ordinal : int
        1-based fixed position on the wheel.
    label : str
        Text displayed to the visitor and stored on awards.
    kind : PrizeKind
        Regular prize, or one of the respin/loss sentinels.
    """

    ordinal: int
    label: str
    kind: PrizeKind = PrizeKind.PRIZE

    @property
    def is_respin(self) -> bool:
        return self.kind is PrizeKind.RESPIN

    @property
    def is_loss(self) -> bool:
        return self.kind is PrizeKind.LOSS


class PrizeCatalog:
    """Ordered, immutable collection of prizes keyed by ordinal."""

    def __init__(self, prizes: Iterable[Prize]) -> None:
        ordered = sorted(prizes, key=lambda prize: prize.ordinal)
        if not ordered:
            raise ValueError("A prize catalog needs at least one prize")
        expected = list(range(1, len(ordered) + 1))
        if [prize.ordinal for prize in ordered] != expected:
            raise ValueError("Prize ordinals must run contiguously from 1")
        self._prizes: tuple[Prize, ...] = tuple(ordered)

    def __len__(self) -> int:
        return len(self._prizes)

    def __iter__(self) -> Iterator[Prize]:
        return iter(self._prizes)

    def __contains__(self, ordinal: object) -> bool:
        return isinstance(ordinal, int) and 1 <= ordinal <= len(self._prizes)

    def get(self, ordinal: int) -> Prize:
        """Return the prize at ``ordinal``."""
        if ordinal not in self:
            raise KeyError(f"Unknown prize ordinal {ordinal}")
        return self._prizes[ordinal - 1]

    def index_of(self, ordinal: int) -> int:
        """Return the 0-based wheel slice index for ``ordinal``."""
        return self.get(ordinal).ordinal - 1

    def ordinals(self) -> tuple[int, ...]:
        return tuple(prize.ordinal for prize in self._prizes)

    def find_kind(self, kind: PrizeKind) -> Optional[Prize]:
        """Return the first prize of ``kind``, if the catalog has one."""
        for prize in self._prizes:
            if prize.kind is kind:
                return prize
        return None


DEFAULT_CATALOG = PrizeCatalog(
    [
        Prize(1, "S/50.00 DE DESCT ADICIONAL"),
        Prize(2, "S/150.00 DESCT EN TU PROXIMO CURSO"),
        Prize(3, "UN CURSO DE REGALO CON CERTIFICADO DIGITAL"),
        Prize(4, "ENVIO DE CERTIFICADO GRATUITO CCD"),
        Prize(5, "S/30.00 DESCT EN TU CERTIFICADO ACREDITADO"),
        Prize(6, "ACCESO A UN AÑO AL AULA VIRTUAL"),
        Prize(7, "VUELVE A GIRAR", PrizeKind.RESPIN),
        Prize(8, "DOS CURSOS DE REGALO (NO INCLUYE CERTIFICADO)"),
        Prize(9, "PERDISTE", PrizeKind.LOSS),
    ]
)

# Ordinals 3 and 8 stay on the wheel but are never drawn.
DEFAULT_ALLOWED_ORDINALS: tuple[int, ...] = (1, 2, 4, 5, 6, 7, 9)


__all__ = [
    "DEFAULT_ALLOWED_ORDINALS",
    "DEFAULT_CATALOG",
    "Prize",
    "PrizeCatalog",
    "PrizeKind",
]
