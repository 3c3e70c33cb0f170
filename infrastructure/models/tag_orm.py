"""SQLAlchemy ORM model for the tag catalog.

This module contains the TagORM class that defines the database schema
for catalog tags and their usage counts.

Classes:
    TagORM: SQLAlchemy model for distinct tags keyed by slug.

Architecture:
    This ORM model is part of the Infrastructure layer and should only be used by:
    - SqlAlchemyTagRepository and SqlAlchemyTaggedRepository
    - Database migration scripts

    Domain code should use TagEntity instead of this ORM model.
"""

from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Integer, String

from infrastructure.models.base import TABLE_PREFIX, Base


class TagORM(Base):
    """SQLAlchemy ORM model for catalog tags.

    Attributes:
        id (int): Surrogate primary key.
        slug (str): Normalized tag key, unique across all tags.
        name (str): Display name of the tag.
        count (int): Number of live links referencing the slug.
        suggest (bool): Whether the tag is offered as a suggestion.
        created_at (datetime): Timestamp when the tag was first used.

    Table Schema:
        - Table name: 'tagging_tags'
        - Primary key: id
        - Unique constraint: slug

    Example:
        >>> tag_orm = TagORM(slug="work", name="Work", count=1)
        >>> db.add(tag_orm)
        >>> db.flush()
    """

    __tablename__ = f"{TABLE_PREFIX}tags"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Tag slug with uniqueness constraint
    slug = Column(
        String(125),
        unique=True,
        nullable=False,
        index=True,
        comment="Normalized tag key, unique across all tags",
    )

    name = Column(String(125), nullable=False, comment="Display name of the tag")

    # Only ever changed through count = count +/- delta updates
    count = Column(
        Integer,
        default=0,
        nullable=False,
        comment="Number of live links referencing this slug",
    )

    suggest = Column(
        Boolean,
        default=False,
        nullable=False,
        comment="Whether the tag is offered as a suggestion",
    )

    created_at = Column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
        comment="Timestamp when tag was first used",
    )

    def __repr__(self) -> str:
        return f"<TagORM(slug='{self.slug}', name='{self.name}', count={self.count})>"

    def __str__(self) -> str:
        return self.name
