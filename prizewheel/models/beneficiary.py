from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, Any, Optional

from sqlalchemy import Date, DateTime, String, select
from sqlalchemy.orm import Mapped, Session, mapped_column, relationship

from ..db.utils import dt_iso
from .base import ID_TYPE, Base

if TYPE_CHECKING:
    from .award import Award

# Column widths; form length limits must stay within these.
NATIONAL_ID_LENGTH = 20
PHONE_NUMBER_LENGTH = 20


class Beneficiary(Base):
    """A person who registered on the promotional form."""

    def __init__(
        self,
        name: str,
        national_id: str,
        registration_date: date,
        phone_number: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ):
        """Create a new :class:`Beneficiary` record.

        Parameters
        ----------
        name : str
            Full name as typed on the form.
        national_id : str
            Digits-only national identity number. Unique across all rows.
        registration_date : date
            Calendar date of the registration.
        phone_number : str, optional
            Digits-only contact number, when the campaign collects it.
        created_at : datetime, optional
            Explicit creation timestamp.
        """

        self.name = name
        self.national_id = national_id
        self.registration_date = registration_date
        self.phone_number = phone_number
        if created_at is not None:
            self.created_at = created_at

    __tablename__ = "beneficiaries"

    id: Mapped[int] = mapped_column(
        ID_TYPE, primary_key=True, index=True, autoincrement=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    national_id: Mapped[str] = mapped_column(
        String(NATIONAL_ID_LENGTH), unique=True, nullable=False
    )
    phone_number: Mapped[Optional[str]] = mapped_column(
        String(PHONE_NUMBER_LENGTH), nullable=True
    )
    registration_date: Mapped[date] = mapped_column(Date, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # relationships
    awards: Mapped[list["Award"]] = relationship(
        back_populates="beneficiary", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return (
            f"<Beneficiary(id={self.id}, name='{self.name}', "
            f"national_id='{self.national_id}', "
            f"registration_date='{self.registration_date}')>"
        )

    @classmethod
    def get_by_national_id(
        cls, session: Session, national_id: str
    ) -> Optional["Beneficiary"]:
        """Retrieve a beneficiary by national ID."""

        return session.scalar(select(cls).where(cls.national_id == national_id))

    def to_json(self) -> dict[str, Any]:
        """Return a JSON-serializable representation of this beneficiary."""
        return {
            "id": self.id,
            "name": self.name,
            "national_id": self.national_id,
            "phone_number": self.phone_number,
            "registration_date": (
                self.registration_date.isoformat() if self.registration_date else None
            ),
            "created_at": dt_iso(self.created_at),
        }
