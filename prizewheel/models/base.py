"""Declarative base shared by the campaign tables."""

from sqlalchemy import BigInteger, Integer
from sqlalchemy.orm import DeclarativeBase

from prizewheel.db.metadata import metadata_obj

# Primary and foreign key column type. SQLite only autoincrements INTEGER keys.
ID_TYPE = BigInteger().with_variant(Integer, "sqlite")


class Base(DeclarativeBase):
    """Base class of ``beneficiaries`` and ``awards``.

    Binds the naming-convention metadata so Alembic sees stable constraint
    names such as ``beneficiaries_national_id_key``.
    """

    metadata = metadata_obj
