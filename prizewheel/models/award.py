"""Database model for recorded spin outcomes."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Optional

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, select
from sqlalchemy.orm import Mapped, Session, joinedload, mapped_column, relationship

from ..db.utils import dt_iso
from .base import ID_TYPE, Base

if TYPE_CHECKING:
    from .beneficiary import Beneficiary


class Award(Base):
    """The prize a beneficiary won on one spin of the wheel.

    The prize label is copied from the catalog at award time so that the
    winners listing keeps showing what was actually won even if the catalog
    is later reworded.
    """

    __tablename__ = "awards"

    id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    """Primary key."""

    beneficiary_id: Mapped[int] = mapped_column(
        ID_TYPE,
        ForeignKey("beneficiaries.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    """Foreign key referencing :class:`Beneficiary`."""

    prize_ordinal: Mapped[int] = mapped_column(Integer, nullable=False)
    """Wheel position of the prize (1-based)."""

    prize_label: Mapped[str] = mapped_column(String(255), nullable=False)
    """Display text of the prize at the time it was won."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    """Timestamp of the spin that produced this award."""

    beneficiary: Mapped["Beneficiary"] = relationship(back_populates="awards")
    """Relationship back to the winner."""

    __table_args__ = (Index("ix_awards_created_at", "created_at"),)

    def __init__(
        self,
        *,
        prize_ordinal: int,
        prize_label: str,
        beneficiary: Optional["Beneficiary"] = None,
        beneficiary_id: Optional[int] = None,
        created_at: Optional[datetime] = None,
    ) -> None:
        self.prize_ordinal = prize_ordinal
        self.prize_label = prize_label
        if beneficiary is not None:
            self.beneficiary = beneficiary
        if beneficiary_id is not None:
            self.beneficiary_id = beneficiary_id
        if created_at is not None:
            self.created_at = created_at

    def __repr__(self) -> str:  # pragma: no cover - repr is trivial
        return "<Award(id={id}, beneficiary_id={b}, prize_ordinal={p})>".format(
            id=self.id,
            b=self.beneficiary_id,
            p=self.prize_ordinal,
        )

    @classmethod
    def _recency_query(cls):
        return (
            select(cls)
            .options(joinedload(cls.beneficiary))
            .order_by(cls.created_at.desc(), cls.id.desc())
        )

    @classmethod
    def latest(cls, session: Session) -> Optional["Award"]:
        """Return the most recently created award with its beneficiary loaded."""

        return session.scalars(cls._recency_query()).first()

    @classmethod
    def ordered_by_recency(
        cls, session: Session, limit: Optional[int] = None
    ) -> list["Award"]:
        """Return awards newest first, optionally capped at ``limit`` rows."""

        if limit is not None and limit < 0:
            raise ValueError("limit must be non-negative when provided")

        stmt = cls._recency_query()
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(session.scalars(stmt).all())

    def to_json(self) -> dict[str, Any]:
        """Return a flat winners-list row for this award.

        Beneficiary fields are inlined so that callers can render or filter
        the row without touching the relationship again.
        """
        beneficiary = self.beneficiary
        return {
            "id": self.id,
            "name": beneficiary.name if beneficiary is not None else None,
            "national_id": beneficiary.national_id if beneficiary is not None else None,
            "registration_date": (
                beneficiary.registration_date.isoformat()
                if beneficiary is not None and beneficiary.registration_date
                else None
            ),
            "prize_ordinal": self.prize_ordinal,
            "prize": self.prize_label,
            "created_at": dt_iso(self.created_at),
        }
