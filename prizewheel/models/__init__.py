from .base import Base

# import models so Alembic/autoloaders can discover mappers
from .beneficiary import Beneficiary  # noqa: F401
from .award import Award  # noqa: F401

__all__ = [
    "Base",
    "Beneficiary",
    "Award",
]
