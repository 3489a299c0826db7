from typing import Optional
from datetime import date, datetime, time, timedelta, timezone

from sqlalchemy import exists, select
from sqlalchemy.orm import Session, joinedload

from .models import Award, Beneficiary
from .wheel.catalog import Prize
from .wheel.state import Registration


def national_id_registered(session: Session, national_id: str) -> bool:
    """Return ``True`` when a beneficiary (and therefore any award) exists for ``national_id``.

    Awards always reference a beneficiary row, so checking the
    ``beneficiaries`` table also covers previously awarded national IDs.
    """

    stmt = select(exists().where(Beneficiary.national_id == national_id))
    return bool(session.scalar(stmt))


def register_beneficiary(session: Session, registration: Registration) -> Beneficiary:
    """Persist ``registration`` as a new :class:`Beneficiary`.

    Parameters
    ----------
    session : Session
        Active SQLAlchemy session.
    registration : Registration
        Validated form data.

    Returns
    -------
    Beneficiary
        The flushed row with its ``id`` populated.

    Raises
    ------
    sqlalchemy.exc.IntegrityError
        If the national ID is already stored. The unique constraint on
        ``beneficiaries.national_id`` is the final guard against two visitors
        passing the duplicate check at the same time.
    """

    beneficiary = Beneficiary(
        name=registration.name,
        national_id=registration.national_id,
        registration_date=registration.registration_date,
        phone_number=registration.phone_number,
    )
    session.add(beneficiary)
    session.flush()
    return beneficiary


def record_award(
    session: Session,
    beneficiary: Beneficiary,
    prize: Prize,
    awarded_at: Optional[datetime] = None,
) -> Award:
    """Persist the award of ``prize`` to an already persisted ``beneficiary``."""

    if beneficiary.id is None:
        raise ValueError("Beneficiary must be persisted before recording an award")
    if prize.is_respin:
        raise ValueError("The respin slice is never recorded as an award")

    award = Award(
        beneficiary=beneficiary,
        prize_ordinal=prize.ordinal,
        prize_label=prize.label,
        created_at=awarded_at or datetime.now(timezone.utc),
    )
    session.add(award)
    session.flush()
    return award


def record_win(
    session: Session,
    registration: Registration,
    prize: Prize,
    awarded_at: Optional[datetime] = None,
) -> Award:
    """Persist the beneficiary and their award in the caller's transaction.

    Both rows are flushed through ``session``; committing or rolling back the
    surrounding transaction applies to the pair.
    """

    beneficiary = register_beneficiary(session, registration)
    return record_award(session, beneficiary, prize, awarded_at=awarded_at)


def latest_award(session: Session) -> Optional[Award]:
    """Return the most recent award with its beneficiary loaded."""

    return Award.latest(session)


def _start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def search_winners(
    session: Session,
    *,
    national_id_query: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    limit: Optional[int] = None,
) -> list[Award]:
    """Return awards for the winners listing, newest first.

    Parameters
    ----------
    session : Session
        Active SQLAlchemy session used to issue the query.
    national_id_query : Optional[str], default: None
        Substring that the winner's national ID must contain. Blank values
        are ignored.
    start_date : Optional[date], default: None
        Earliest award date (inclusive, UTC).
    end_date : Optional[date], default: None
        Latest award date (inclusive, UTC).
    limit : Optional[int], default: None
        Maximum number of rows to return.

    Returns
    -------
    list[Award]
        Matching awards with their beneficiary eagerly loaded.

    Raises
    ------
    ValueError
        If ``limit`` is negative or the date range is inverted.
    """

    if limit is not None and limit < 0:
        raise ValueError("limit must be non-negative when provided")
    if start_date is not None and end_date is not None and start_date > end_date:
        raise ValueError("start_date must not be after end_date")

    stmt = (
        select(Award)
        .join(Award.beneficiary)
        .options(joinedload(Award.beneficiary))
    )

    query = (national_id_query or "").strip()
    if query:
        stmt = stmt.where(Beneficiary.national_id.contains(query, autoescape=True))
    if start_date is not None:
        stmt = stmt.where(Award.created_at >= _start_of_day(start_date))
    if end_date is not None:
        stmt = stmt.where(
            Award.created_at < _start_of_day(end_date + timedelta(days=1))
        )

    stmt = stmt.order_by(Award.created_at.desc(), Award.id.desc())
    if limit is not None:
        stmt = stmt.limit(limit)

    return list(session.scalars(stmt).unique().all())
