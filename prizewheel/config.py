"""Campaign settings read from the environment (and ``.env``)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from dotenv import load_dotenv

from .contact import DEFAULT_CONTACT_MESSAGE_TEMPLATE, DEFAULT_CONTACT_URI_TEMPLATE
from .db.engine import DEFAULT_SQLITE_URL, ROOT_DIR
from .db.utils import resolve_sqlite_url
from .models.beneficiary import NATIONAL_ID_LENGTH, PHONE_NUMBER_LENGTH
from .wheel.catalog import DEFAULT_ALLOWED_ORDINALS
from .wheel.draw import DEFAULT_DRAW_REGISTRY

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _env_bool(environ: Mapping[str, str], key: str, default: bool) -> bool:
    raw = environ.get(key)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"Environment variable '{key}' must be a boolean, got {raw!r}")


def _env_int(environ: Mapping[str, str], key: str, default: int) -> int:
    raw = environ.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError as exc:
        raise ValueError(
            f"Environment variable '{key}' must be an integer, got {raw!r}"
        ) from exc


def parse_ordinals(raw: str) -> tuple[int, ...]:
    """Parse a comma separated list of ordinals such as ``"1,2,4"``."""
    try:
        ordinals = tuple(int(part) for part in raw.split(",") if part.strip())
    except ValueError as exc:
        raise ValueError(f"Invalid ordinal list {raw!r}") from exc
    if not ordinals:
        raise ValueError("Ordinal list must not be empty")
    return ordinals


def parse_weights(raw: str) -> dict[int, float]:
    """Parse ``"ordinal:weight"`` pairs such as ``"1:5,2:0.5"``."""
    weights: dict[int, float] = {}
    for part in raw.split(","):
        if not part.strip():
            continue
        ordinal, sep, weight = part.partition(":")
        if not sep:
            raise ValueError(f"Invalid weight entry {part!r}, expected 'ordinal:weight'")
        try:
            weights[int(ordinal)] = float(weight)
        except ValueError as exc:
            raise ValueError(f"Invalid weight entry {part!r}") from exc
    return weights


@dataclass(frozen=True)
class WheelSettings:
    """Tunable behaviour of one promotional campaign.

    Attributes
    ----------
    database_url : str
        SQLAlchemy URL of the record store.
    allowed_ordinals : tuple[int, ...]
        Ordinals the draw may select.
    draw_strategy : str
        Key of the draw strategy in the draw registry.
    prize_weights : dict[int, float]
        Per-ordinal weights for the ``weighted`` strategy.
    collect_phone : bool
        Require a phone number on the form.
    national_id_max_length : int
        Upper bound on national ID length.
    phone_max_length : int
        Upper bound on phone number length.
    redemption_enabled : bool
        Start a redemption countdown after a win.
    redemption_minutes : int
        Length of the redemption countdown.
    persist_losses : bool
        Persist the beneficiary when the wheel lands on the loss slice, which
        prevents the same national ID from playing again.
    contact_uri_template : str
        Deep-link template with a ``{text}`` placeholder.
    contact_message_template : str
        Message template with ``{name}``, ``{national_id}`` and ``{prize}``.
    """

    database_url: str = DEFAULT_SQLITE_URL
    allowed_ordinals: tuple[int, ...] = DEFAULT_ALLOWED_ORDINALS
    draw_strategy: str = "uniform"
    prize_weights: dict[int, float] = field(default_factory=dict)
    collect_phone: bool = False
    national_id_max_length: int = 8
    phone_max_length: int = 15
    redemption_enabled: bool = True
    redemption_minutes: int = 10
    persist_losses: bool = False
    contact_uri_template: str = DEFAULT_CONTACT_URI_TEMPLATE
    contact_message_template: str = DEFAULT_CONTACT_MESSAGE_TEMPLATE

    def __post_init__(self) -> None:
        if not self.allowed_ordinals:
            raise ValueError("allowed_ordinals must not be empty")
        if not 0 < self.national_id_max_length <= NATIONAL_ID_LENGTH:
            raise ValueError(
                f"national_id_max_length must be between 1 and {NATIONAL_ID_LENGTH}"
            )
        if not 0 < self.phone_max_length <= PHONE_NUMBER_LENGTH:
            raise ValueError(
                f"phone_max_length must be between 1 and {PHONE_NUMBER_LENGTH}"
            )
        self._check_weights()
        if self.redemption_enabled and self.redemption_minutes <= 0:
            raise ValueError("redemption_minutes must be positive")
        if "{text}" not in self.contact_uri_template:
            raise ValueError("contact_uri_template must contain a '{text}' placeholder")

    def _check_weights(self) -> None:
        # Mirrors draw_weighted: unlisted ordinals weigh 1.0.
        pool = set(self.allowed_ordinals)
        stray = sorted(set(self.prize_weights) - pool)
        if stray:
            raise ValueError(
                f"prize_weights given for ordinals outside allowed_ordinals: {stray}"
            )
        if any(weight < 0 for weight in self.prize_weights.values()):
            raise ValueError("prize_weights must be non-negative")
        if sum(float(self.prize_weights.get(ordinal, 1.0)) for ordinal in pool) <= 0:
            raise ValueError("at least one allowed ordinal needs a positive weight")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "WheelSettings":
        """Build settings from ``environ`` (defaults to ``os.environ`` after loading ``.env``)."""
        if environ is None:
            load_dotenv()
            environ = os.environ

        raw_url = environ.get("DB_URL")
        database_url = (
            resolve_sqlite_url(raw_url, ROOT_DIR) if raw_url else DEFAULT_SQLITE_URL
        )

        raw_ordinals = environ.get("WHEEL_ALLOWED_ORDINALS", "").strip()
        raw_weights = environ.get("WHEEL_PRIZE_WEIGHTS", "").strip()
        draw_strategy = environ.get("WHEEL_DRAW_STRATEGY", "uniform").strip() or "uniform"
        if draw_strategy not in DEFAULT_DRAW_REGISTRY.available_strategies():
            raise ValueError(
                f"Environment variable 'WHEEL_DRAW_STRATEGY' names an unknown draw "
                f"strategy {draw_strategy!r}"
            )

        return cls(
            database_url=database_url,
            allowed_ordinals=(
                parse_ordinals(raw_ordinals) if raw_ordinals else DEFAULT_ALLOWED_ORDINALS
            ),
            draw_strategy=draw_strategy,
            prize_weights=parse_weights(raw_weights) if raw_weights else {},
            collect_phone=_env_bool(environ, "WHEEL_COLLECT_PHONE", False),
            national_id_max_length=_env_int(environ, "WHEEL_NATIONAL_ID_MAX_LENGTH", 8),
            phone_max_length=_env_int(environ, "WHEEL_PHONE_MAX_LENGTH", 15),
            redemption_enabled=_env_bool(environ, "WHEEL_REDEMPTION_ENABLED", True),
            redemption_minutes=_env_int(environ, "WHEEL_REDEMPTION_MINUTES", 10),
            persist_losses=_env_bool(environ, "WHEEL_PERSIST_LOSSES", False),
            contact_uri_template=environ.get(
                "WHEEL_CONTACT_URI_TEMPLATE", DEFAULT_CONTACT_URI_TEMPLATE
            ),
            contact_message_template=environ.get(
                "WHEEL_CONTACT_MESSAGE_TEMPLATE", DEFAULT_CONTACT_MESSAGE_TEMPLATE
            ),
        )


__all__ = ["WheelSettings", "parse_ordinals", "parse_weights"]
