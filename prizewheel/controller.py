"""Registration and spin controller.

The controller owns every transition of a visitor's interaction with the
promotional form::

    IDLE -> SUBMITTING -> SPINNING -> IDLE (respin granted)
                                   -> LOST
                                   -> CONFIRMING -> IDLE (confirmed)
                                                 -> EXPIRED
                                   -> SAVE_FAILED -> CONFIRMING / LOST (retry_save)

It holds no per-visitor data itself. Each handler receives the visitor's
:class:`~prizewheel.wheel.state.VisitorState` and mutates it, so a single
controller can serve many visitors.
"""

from __future__ import annotations

import logging
import random
import re
import time
from datetime import date
from typing import Callable, NoReturn, Optional

from .config import WheelSettings
from .contact import ContactLink, build_contact_link
from .db.utils import mask_national_id
from .errors import (
    CountdownExpired,
    DuplicateRegistration,
    InvalidTransition,
    PersistenceError,
    PrizeWheelError,
    ValidationError,
)
from .models import Award
from .notifications import LoggingNotifier, NotificationKind, Notifier
from .store import RecordStore
from .wheel.catalog import DEFAULT_CATALOG, Prize, PrizeCatalog
from .wheel.countdown import Countdown
from .wheel.draw import DEFAULT_DRAW_REGISTRY, DrawRegistry, RandomSource
from .wheel.state import Phase, Registration, VisitorState

logger = logging.getLogger(__name__)

_DIGITS = re.compile(r"[0-9]+")


class SpinController:
    """Drive the register -> spin -> confirm flow for visitors.

    Parameters
    ----------
    store : RecordStore
        Persistence collaborator.
    notifier : Optional[Notifier], default: None
        Notification surface. Defaults to :class:`LoggingNotifier`.
    settings : Optional[WheelSettings], default: None
        Campaign settings. Defaults to ``WheelSettings()``.
    catalog : PrizeCatalog, default: DEFAULT_CATALOG
        Prizes on the wheel.
    registry : DrawRegistry, default: DEFAULT_DRAW_REGISTRY
        Registry holding the draw strategy named by ``settings.draw_strategy``.
    rng : Optional[RandomSource], default: None
        Random source for the draw. Defaults to :class:`random.SystemRandom`.
    today : Callable[[], date], default: date.today
        Source of the registration date.
    clock : Callable[[], float], default: time.monotonic
        Monotonic clock used by :meth:`poll` to advance countdowns.
    """

    def __init__(
        self,
        store: RecordStore,
        notifier: Optional[Notifier] = None,
        settings: Optional[WheelSettings] = None,
        *,
        catalog: PrizeCatalog = DEFAULT_CATALOG,
        registry: DrawRegistry = DEFAULT_DRAW_REGISTRY,
        rng: Optional[RandomSource] = None,
        today: Callable[[], date] = date.today,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._store = store
        self._notifier = notifier or LoggingNotifier()
        self.settings = settings or WheelSettings()
        self.catalog = catalog
        try:
            self._strategy = registry.get(self.settings.draw_strategy)
        except KeyError as exc:
            raise ValueError(
                f"Draw strategy '{self.settings.draw_strategy}' is not registered"
            ) from exc
        self._rng = rng or random.SystemRandom()
        self._today = today
        self._clock = clock

        for ordinal in self.settings.allowed_ordinals:
            if ordinal not in catalog:
                raise ValueError(f"Allowed ordinal {ordinal} is not in the prize catalog")

    # -------- helpers --------
    def _notify(self, kind: NotificationKind, title: str, message: str) -> None:
        self._notifier.notify(kind, title, message)

    def _fail(self, exc: PrizeWheelError, message: Optional[str] = None) -> NoReturn:
        self._notify(NotificationKind.ERROR, exc.title, message or str(exc))
        raise exc

    def _validate(
        self, name: str, national_id: str, phone_number: Optional[str]
    ) -> tuple[str, str, Optional[str]]:
        name = (name or "").strip()
        national_id = (national_id or "").strip()
        phone = (phone_number or "").strip() or None

        if not name or not national_id:
            raise ValidationError(
                "name" if not name else "national_id", "Please complete all fields"
            )
        if self.settings.collect_phone and phone is None:
            raise ValidationError("phone_number", "Please complete all fields")
        if not _DIGITS.fullmatch(national_id):
            raise ValidationError("national_id", "The national ID must contain digits only")
        if len(national_id) > self.settings.national_id_max_length:
            raise ValidationError(
                "national_id",
                f"The national ID must have at most "
                f"{self.settings.national_id_max_length} digits",
            )
        if phone is not None:
            if not _DIGITS.fullmatch(phone):
                raise ValidationError(
                    "phone_number", "The phone number must contain digits only"
                )
            if len(phone) > self.settings.phone_max_length:
                raise ValidationError(
                    "phone_number",
                    f"The phone number must have at most "
                    f"{self.settings.phone_max_length} digits",
                )
        return name, national_id, phone

    # -------- operations --------
    def submit(
        self,
        state: VisitorState,
        name: str,
        national_id: str,
        phone_number: Optional[str] = None,
    ) -> int:
        """Register the visitor and draw the prize the wheel will land on.

        Returns
        -------
        int
            The drawn prize ordinal. ``state.selected_prize_index`` holds the
            matching 0-based slice index for the wheel widget.

        Raises
        ------
        InvalidTransition
            If a submission is already running or the wheel is still spinning.
        ValidationError
            If a field is empty or malformed. The state is left untouched.
        DuplicateRegistration
            If the national ID is already on record and no respin was granted
            for it. No spin is started.
        PersistenceError
            If the duplicate check itself could not be performed.
        """
        if state.is_submitting:
            self._fail(InvalidTransition("A registration is already being processed"))
        if state.spin_in_progress:
            self._fail(InvalidTransition("The wheel is still spinning"))

        try:
            name, national_id, phone = self._validate(name, national_id, phone_number)
        except ValidationError as exc:
            logger.debug(f"Rejected submission: {exc.field} invalid")
            self._fail(exc)

        previous_phase = state.phase
        state.is_submitting = True
        state.phase = Phase.SUBMITTING
        try:
            pending = state.pending_beneficiary
            respin_grant = (
                state.respin_allowed
                and pending is not None
                and pending.national_id == national_id
            )
            if not respin_grant and self._store.find_by_national_id(national_id):
                logger.warning(
                    f"Duplicate registration for {mask_national_id(national_id)}"
                )
                raise DuplicateRegistration(national_id)

            registration = Registration(
                name=name,
                national_id=national_id,
                registration_date=self._today(),
                phone_number=phone,
            )
            ordinal = self._strategy.draw(
                self.catalog,
                self.settings.allowed_ordinals,
                self._rng,
                self.settings.prize_weights,
            )
        except DuplicateRegistration as exc:
            state.phase = previous_phase
            self._fail(exc)
        except PersistenceError as exc:
            state.phase = previous_phase
            self._fail(exc, "There was an error processing the registration")
        except Exception:
            state.phase = previous_phase
            raise
        finally:
            state.is_submitting = False

        # A new registration abandons any unconfirmed or expired win.
        state.cancel_countdown()
        state.name, state.national_id, state.phone_number = name, national_id, phone or ""
        state.pending_beneficiary = registration
        state.selected_ordinal = ordinal
        state.spin_in_progress = True
        state.confirmation_pending = False
        state.respin_allowed = False
        state.unsaved_prize = None
        state.phase = Phase.SPINNING
        logger.debug(
            f"{mask_national_id(national_id)} spinning towards ordinal {ordinal}"
            + (" (respin)" if respin_grant else "")
        )
        return ordinal

    def on_spin_settled(self, state: VisitorState) -> Prize:
        """Resolve the drawn prize once the wheel animation stops.

        Returns
        -------
        Prize
            The prize the wheel landed on.

        Raises
        ------
        InvalidTransition
            If no spin is in progress.
        PersistenceError
            If the outcome could not be saved. The visitor is left in
            ``SAVE_FAILED`` and may call :meth:`retry_save`.
        DuplicateRegistration
            If another submission stored the same national ID while the
            wheel was spinning.
        """
        if (
            not state.spin_in_progress
            or state.selected_ordinal is None
            or state.pending_beneficiary is None
        ):
            self._fail(InvalidTransition("There is no spin to settle"))

        prize = self.catalog.get(state.selected_ordinal)
        state.spin_in_progress = False

        if prize.is_respin:
            pending = state.pending_beneficiary
            state.respin_allowed = True
            state.name = pending.name
            state.national_id = pending.national_id
            state.phone_number = pending.phone_number or ""
            state.phase = Phase.IDLE
            logger.debug(f"Respin granted to {mask_national_id(pending.national_id)}")
            self._notify(
                NotificationKind.SUCCESS,
                "Spin again!",
                "You get another spin. Submit the form to spin the wheel again.",
            )
            return prize

        self._save_outcome(state, state.pending_beneficiary, prize)
        return prize

    def retry_save(self, state: VisitorState) -> Prize:
        """Attempt again to save an outcome whose first save failed."""
        if (
            state.phase is not Phase.SAVE_FAILED
            or state.unsaved_prize is None
            or state.pending_beneficiary is None
        ):
            self._fail(InvalidTransition("There is no unsaved outcome to retry"))
        prize = state.unsaved_prize
        self._save_outcome(state, state.pending_beneficiary, prize)
        return prize

    def _save_outcome(
        self, state: VisitorState, pending: Registration, prize: Prize
    ) -> None:
        try:
            if prize.is_loss:
                if self.settings.persist_losses:
                    self._store.insert_beneficiary(pending)
                award: Optional[Award] = None
            else:
                award = self._store.record_win(pending, prize)
        except DuplicateRegistration as exc:
            # Lost the race against a concurrent registration of the same ID.
            state.pending_beneficiary = None
            state.selected_ordinal = None
            state.unsaved_prize = None
            state.clear_form()
            state.phase = Phase.IDLE
            self._fail(exc)
        except PersistenceError as exc:
            state.unsaved_prize = prize
            state.phase = Phase.SAVE_FAILED
            self._fail(exc, "There was an error saving the beneficiary")

        state.unsaved_prize = None
        if award is None:
            state.pending_beneficiary = None
            state.selected_ordinal = None
            state.clear_form()
            state.phase = Phase.LOST
            self._notify(
                NotificationKind.SUCCESS,
                "So close!",
                "Better luck next time. Thank you for taking part.",
            )
            return

        state.last_award = award
        state.confirmation_pending = True
        state.phase = Phase.CONFIRMING
        self._notify(NotificationKind.SUCCESS, "Congratulations!", f"You won: {prize.label}")

        if self.settings.redemption_enabled:
            countdown = Countdown(
                self.settings.redemption_minutes,
                on_expire=lambda: self.on_countdown_expire(state),
            )
            countdown.start(self._clock())
            state.countdown = countdown

    def confirm_redemption(self, state: VisitorState) -> ContactLink:
        """Confirm the win and return the prefilled contact deep link.

        The visitor is reset to ``IDLE`` afterwards; ``last_award`` is kept
        for the "last winner" panel.

        Raises
        ------
        CountdownExpired
            If the redemption window already closed.
        InvalidTransition
            If there is no win awaiting confirmation.
        """
        if state.phase is Phase.EXPIRED or (
            state.countdown is not None and state.countdown.expired
        ):
            self._fail(
                CountdownExpired("The redemption window has closed"),
                "The redemption window has closed. Register again to take part.",
            )
        if (
            not state.can_confirm
            or state.last_award is None
            or state.pending_beneficiary is None
        ):
            self._fail(InvalidTransition("There is no win to confirm"))

        pending = state.pending_beneficiary
        link = build_contact_link(
            pending.name,
            pending.national_id,
            state.last_award.prize_label,
            uri_template=self.settings.contact_uri_template,
            message_template=self.settings.contact_message_template,
        )
        logger.info(f"Redemption confirmed by {mask_national_id(pending.national_id)}")

        state.cancel_countdown()
        state.clear_form()
        state.pending_beneficiary = None
        state.selected_ordinal = None
        state.confirmation_pending = False
        state.respin_allowed = False
        state.phase = Phase.IDLE
        return link

    def on_countdown_expire(self, state: VisitorState) -> None:
        """Close the redemption window of an unconfirmed win."""
        if state.phase is not Phase.CONFIRMING or not state.confirmation_pending:
            logger.debug(f"Ignoring countdown expiry in phase {state.phase.value}")
            return

        state.confirmation_pending = False
        state.phase = Phase.EXPIRED
        self._notify(
            NotificationKind.ERROR,
            CountdownExpired.title,
            "The redemption window has closed. Register again to take part.",
        )

    def tick(self, state: VisitorState, seconds: int = 1) -> bool:
        """Advance the visitor's countdown by ``seconds``; ``True`` if it expired now."""
        if state.countdown is None:
            return False
        return state.countdown.tick(seconds)

    def poll(self, state: VisitorState) -> bool:
        """Advance the visitor's countdown to the current clock reading."""
        if state.countdown is None:
            return False
        return state.countdown.sync(self._clock())

    def reset(self, state: VisitorState) -> None:
        """Return the visitor to a fresh ``IDLE`` state, cancelling any countdown."""
        state.cancel_countdown()
        state.clear_form()
        state.phase = Phase.IDLE
        state.is_submitting = False
        state.spin_in_progress = False
        state.selected_ordinal = None
        state.pending_beneficiary = None
        state.respin_allowed = False
        state.confirmation_pending = False
        state.unsaved_prize = None

    def load_last_winner(self, state: VisitorState) -> Optional[Award]:
        """Populate ``state.last_award`` from the record store."""
        try:
            state.last_award = self._store.latest_award()
        except PersistenceError as exc:
            self._fail(exc, "There was an error loading the beneficiaries")
        return state.last_award


__all__ = ["SpinController"]
