"""Per-visitor session state for the registration and spin flow."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from ..models import Award
    from .catalog import Prize
    from .countdown import Countdown


class Phase(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    SPINNING = "spinning"
    CONFIRMING = "confirming"
    EXPIRED = "expired"
    LOST = "lost"
    SAVE_FAILED = "save_failed"


@dataclass(frozen=True)
class Registration:
    """A validated, not yet persisted beneficiary.

    Attributes
    ----------
    name : str
        Trimmed full name.
    national_id : str
        Digits-only national ID.
    registration_date : date
        Date the registration was submitted.
    phone_number : Optional[str]
        Digits-only phone number, when provided.
    """

    name: str
    national_id: str
    registration_date: date
    phone_number: Optional[str] = None


@dataclass
class VisitorState:
    """Everything the controller knows about one visitor's interaction.

    The controller mutates this object in place; the host keeps one instance
    per visitor and passes it to every handler.
    """

    name: str = ""
    national_id: str = ""
    phone_number: str = ""

    phase: Phase = Phase.IDLE
    is_submitting: bool = False
    spin_in_progress: bool = False
    selected_ordinal: Optional[int] = None
    pending_beneficiary: Optional[Registration] = None
    last_award: Optional["Award"] = None
    respin_allowed: bool = False
    confirmation_pending: bool = False
    countdown: Optional["Countdown"] = None

    # Outcome waiting to be saved again after a persistence failure.
    unsaved_prize: Optional["Prize"] = field(default=None, repr=False)

    @property
    def selected_prize_index(self) -> Optional[int]:
        """0-based wheel slice index of the drawn prize, as the wheel widget expects."""
        if self.selected_ordinal is None:
            return None
        return self.selected_ordinal - 1

    @property
    def form_enabled(self) -> bool:
        """Whether the registration form accepts input."""
        return not self.is_submitting and not self.spin_in_progress

    @property
    def can_confirm(self) -> bool:
        return self.phase is Phase.CONFIRMING and self.confirmation_pending

    def clear_form(self) -> None:
        self.name = ""
        self.national_id = ""
        self.phone_number = ""

    def cancel_countdown(self) -> None:
        if self.countdown is not None:
            self.countdown.cancel()
            self.countdown = None


__all__ = ["Phase", "Registration", "VisitorState"]
