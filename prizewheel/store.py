"""Record store used by the spin controller."""

from __future__ import annotations

import logging
from datetime import date
from typing import NoReturn, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from .db.utils import mask_national_id
from .errors import DuplicateRegistration, PersistenceError
from .models import Award, Beneficiary
from .wheel.catalog import Prize
from .wheel.state import Registration
from . import workflows

logger = logging.getLogger(__name__)


def _is_national_id_conflict(exc: IntegrityError) -> bool:
    text = str(exc.orig).lower()
    return "national_id" in text or "beneficiaries_national_id_key" in text


class RecordStore:
    """Transactional facade over the persistence workflows.

    Each method opens its own session from ``session_factory`` and commits
    before returning, mirroring one request of the hosted backend. Database
    failures are translated into :class:`PersistenceError`; a unique
    violation on ``national_id`` becomes :class:`DuplicateRegistration`.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._Session = session_factory

    def find_by_national_id(self, national_id: str) -> bool:
        """Return whether a beneficiary or award already exists for ``national_id``."""
        try:
            with self._Session() as session:
                return workflows.national_id_registered(session, national_id)
        except SQLAlchemyError as exc:
            logger.exception(
                f"Duplicate check failed for national ID {mask_national_id(national_id)}"
            )
            raise PersistenceError("Could not check the national ID") from exc

    def insert_beneficiary(self, registration: Registration) -> Beneficiary:
        """Persist a beneficiary on its own, e.g. after a loss."""
        try:
            with self._Session.begin() as session:
                beneficiary = workflows.register_beneficiary(session, registration)
        except IntegrityError as exc:
            self._raise_integrity(exc, registration.national_id)
        except SQLAlchemyError as exc:
            logger.exception(
                f"Saving beneficiary {mask_national_id(registration.national_id)} failed"
            )
            raise PersistenceError("Could not save the beneficiary") from exc
        logger.info(f"Beneficiary {mask_national_id(registration.national_id)} saved")
        return beneficiary

    def insert_award(self, beneficiary: Beneficiary, prize: Prize) -> Award:
        """Persist an award for an already saved ``beneficiary``."""
        try:
            with self._Session.begin() as session:
                attached = session.merge(beneficiary, load=True)
                award = workflows.record_award(session, attached, prize)
        except SQLAlchemyError as exc:
            logger.exception(f"Saving award for beneficiary id={beneficiary.id} failed")
            raise PersistenceError("Could not save the award") from exc
        return award

    def record_win(self, registration: Registration, prize: Prize) -> Award:
        """Persist beneficiary and award in one transaction.

        Either both rows are committed or neither is, so a failed save can be
        retried without leaving a beneficiary that blocks its own retry.
        """
        try:
            with self._Session.begin() as session:
                award = workflows.record_win(session, registration, prize)
        except IntegrityError as exc:
            self._raise_integrity(exc, registration.national_id)
        except SQLAlchemyError as exc:
            logger.exception(
                f"Saving win for {mask_national_id(registration.national_id)} failed"
            )
            raise PersistenceError("Could not save the award") from exc
        logger.info(
            f"Award '{prize.label}' saved for {mask_national_id(registration.national_id)}"
        )
        return award

    def list_awards_ordered_by_recency(self, limit: Optional[int] = None) -> list[Award]:
        """Return awards newest first with beneficiaries loaded."""
        try:
            with self._Session() as session:
                return Award.ordered_by_recency(session, limit)
        except SQLAlchemyError as exc:
            logger.exception("Loading the winners list failed")
            raise PersistenceError("Could not load the winners list") from exc

    def search_winners(
        self,
        *,
        national_id_query: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> list[Award]:
        """Read-only winners listing. See :func:`workflows.search_winners`."""
        try:
            with self._Session() as session:
                return workflows.search_winners(
                    session,
                    national_id_query=national_id_query,
                    start_date=start_date,
                    end_date=end_date,
                    limit=limit,
                )
        except SQLAlchemyError as exc:
            logger.exception("Loading the winners list failed")
            raise PersistenceError("Could not load the winners list") from exc

    def latest_award(self) -> Optional[Award]:
        """Return the most recent award, for the "last winner" panel."""
        try:
            with self._Session() as session:
                return workflows.latest_award(session)
        except SQLAlchemyError as exc:
            logger.exception("Loading the latest award failed")
            raise PersistenceError("Could not load the latest winner") from exc

    @staticmethod
    def _raise_integrity(exc: IntegrityError, national_id: str) -> NoReturn:
        if _is_national_id_conflict(exc):
            logger.warning(
                f"National ID {mask_national_id(national_id)} was registered concurrently"
            )
            raise DuplicateRegistration(national_id) from exc
        logger.exception(f"Integrity error while saving {mask_national_id(national_id)}")
        raise PersistenceError("Could not save the record") from exc


__all__ = ["RecordStore"]
