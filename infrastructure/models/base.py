"""SQLAlchemy declarative base of the tagging tables.

The tagging tables live next to the tables of the application whose
entities are tagged, so every table name carries the ``tagging_`` prefix.

Usage:
    >>> from infrastructure.models.base import Base, TABLE_PREFIX
    >>>
    >>> class TagORM(Base):
    ...     __tablename__ = f"{TABLE_PREFIX}tags"
"""

from sqlalchemy.orm import declarative_base

TABLE_PREFIX = "tagging_"

Base = declarative_base()
