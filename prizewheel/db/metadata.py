from sqlalchemy import MetaData

# Deterministic constraint names keep Alembic autogenerate and batch mode stable.
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "%(table_name)s_%(column_0_name)s_key",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "%(table_name)s_%(column_0_name)s_fkey",
    "pk": "%(table_name)s_pkey",
}

metadata_obj = MetaData(naming_convention=NAMING_CONVENTION)
