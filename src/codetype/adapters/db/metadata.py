"""Shared SQLAlchemy `MetaData` object with a naming convention.

The tables themselves are created by the SQL migration scripts; the
`Table` objects attached to this metadata describe them for queries and
for `metadata.create_all()` in throwaway test databases. The naming
convention matches the names used in the scripts.

Naming convention:
    - Indexes:       ix_<table>_<col...>
    - Check:         ck_<table>_<constraint_name>
    - Primary key:   pk_<table>
"""

from sqlalchemy import MetaData

metadata = MetaData(
    naming_convention={
        "ix": "ix_%(table_name)s_%(column_0_N_name)s",
        "uq": "uq_%(table_name)s_%(column_0_N_name)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_N_name)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)
