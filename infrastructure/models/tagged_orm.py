"""SQLAlchemy ORM model for subject-tag links.

This module contains the TaggedORM class. A single table serves every
subject type: the (subject_type, subject_id) pair identifies the tagged
entity, which lives outside this service.

Classes:
    TaggedORM: SQLAlchemy model for one tag applied to one subject.
"""

from datetime import datetime

from sqlalchemy import Column, DateTime, Index, Integer, String, UniqueConstraint

from infrastructure.models.base import TABLE_PREFIX, Base


class TaggedORM(Base):
    """SQLAlchemy ORM model for a link between a subject and a tag slug.

    Attributes:
        id (int): Surrogate primary key.
        subject_type (str): Subject type discriminator.
        subject_id (str): Subject identifier, stored as text.
        tag_slug (str): Slug of the linked tag.
        tag_name (str): Display name copied at link time.
        created_at (datetime): Timestamp when the link was created.

    Table Schema:
        - Table name: 'tagging_tagged'
        - Unique constraint: (subject_type, subject_id, tag_slug)
        - Index: (subject_type, tag_slug) for tag filters

    Note:
        There is no foreign key to tagging_tags. The catalog row may be
        purged independently when unused tags are deleted.
    """

    __tablename__ = f"{TABLE_PREFIX}tagged"
    __table_args__ = (
        UniqueConstraint(
            "subject_type", "subject_id", "tag_slug", name="uq_tagged_subject_slug"
        ),
        Index("ix_tagged_type_slug", "subject_type", "tag_slug"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)

    subject_type = Column(
        String(255), nullable=False, comment="Subject type discriminator"
    )

    subject_id = Column(
        String(255), nullable=False, comment="Subject identifier, stored as text"
    )

    tag_slug = Column(String(125), nullable=False, comment="Slug of the linked tag")

    tag_name = Column(
        String(125), nullable=False, comment="Display name copied at link time"
    )

    created_at = Column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
        comment="Timestamp when the link was created",
    )

    def __repr__(self) -> str:
        return (
            f"<TaggedORM(subject={self.subject_type}:{self.subject_id}, "
            f"tag_slug='{self.tag_slug}')>"
        )
