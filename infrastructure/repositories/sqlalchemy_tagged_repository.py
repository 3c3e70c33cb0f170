"""SQLAlchemy implementation of the tagged link repository.

This module contains the concrete implementation of TaggedRepositoryInterface
using SQLAlchemy for link storage and the tag membership lookups behind the
tag filters.
"""

import logging
from typing import Iterable, List, Set

from domain.entities.tag import SubjectRef, TaggedEntity
from domain.repositories.tagged_repository import TaggedRepositoryInterface
from sqlalchemy.orm import Session

from infrastructure.models.tagged_orm import TaggedORM

logger = logging.getLogger(__name__)


class SqlAlchemyTaggedRepository(TaggedRepositoryInterface):
    """SQLAlchemy implementation of the tagged link repository.

    NOTE: This repository does not store the session internally and never
    commits. Duplicate links are rejected by the unique constraint on
    (subject_type, subject_id, tag_slug).
    """

    async def exists(self, db_session: Session, subject: SubjectRef, slug: str) -> bool:
        """Check whether the subject already carries a link to the slug."""
        query = self._subject_query(db_session, subject).filter(
            TaggedORM.tag_slug == slug
        )
        return db_session.query(query.exists()).scalar()

    async def add(
        self, db_session: Session, subject: SubjectRef, slug: str, name: str
    ) -> TaggedEntity:
        """Insert a link and flush it.

        Args:
            db_session (Session): SQLAlchemy session of the calling service.
            subject (SubjectRef): Subject being tagged.
            slug (str): Tag slug.
            name (str): Display name copied onto the link.

        Returns:
            TaggedEntity: The stored link.

        Raises:
            IntegrityError: If the subject already carries the slug.
        """
        tagged_model = TaggedORM(
            subject_type=subject.subject_type,
            subject_id=subject.subject_id,
            tag_slug=slug,
            tag_name=name,
        )
        db_session.add(tagged_model)
        db_session.flush()
        return self._model_to_entity(tagged_model)

    async def remove(self, db_session: Session, subject: SubjectRef, slug: str) -> int:
        """Delete the subject's links to a slug.

        Returns:
            int: Number of links deleted.
        """
        return (
            self._subject_query(db_session, subject)
            .filter(TaggedORM.tag_slug == slug)
            .delete(synchronize_session="fetch")
        )

    async def remove_all(self, db_session: Session, subject: SubjectRef) -> int:
        """Delete every link of the subject.

        Returns:
            int: Number of links deleted.
        """
        deleted = self._subject_query(db_session, subject).delete(
            synchronize_session="fetch"
        )
        logger.info(f"Removed {deleted} links of deleted subject {subject}")
        return deleted

    async def list_for_subject(
        self, db_session: Session, subject: SubjectRef
    ) -> List[TaggedEntity]:
        """List the subject's links in creation order."""
        tagged_models = (
            self._subject_query(db_session, subject)
            .order_by(TaggedORM.created_at.asc(), TaggedORM.id.asc())
            .all()
        )
        return [self._model_to_entity(model) for model in tagged_models]

    async def subject_ids_with_tag(
        self, db_session: Session, subject_type: str, slug: str
    ) -> Set[str]:
        """Identifiers of subjects of a type linked to one slug."""
        rows = (
            db_session.query(TaggedORM.subject_id)
            .filter(
                TaggedORM.subject_type == subject_type,
                TaggedORM.tag_slug == slug,
            )
            .all()
        )
        return {row.subject_id for row in rows}

    async def subject_ids_with_any_tag(
        self, db_session: Session, subject_type: str, slugs: Iterable[str]
    ) -> Set[str]:
        """Identifiers of subjects of a type linked to at least one of the slugs."""
        slugs = list(slugs)
        if not slugs:
            return set()
        rows = (
            db_session.query(TaggedORM.subject_id)
            .filter(
                TaggedORM.subject_type == subject_type,
                TaggedORM.tag_slug.in_(slugs),
            )
            .distinct()
            .all()
        )
        return {row.subject_id for row in rows}

    def _subject_query(self, db_session: Session, subject: SubjectRef):
        return db_session.query(TaggedORM).filter(
            TaggedORM.subject_type == subject.subject_type,
            TaggedORM.subject_id == subject.subject_id,
        )

    def _model_to_entity(self, tagged_model: TaggedORM) -> TaggedEntity:
        """Convert SQLAlchemy model to domain entity."""
        return TaggedEntity(
            subject=SubjectRef(
                subject_type=tagged_model.subject_type,
                subject_id=tagged_model.subject_id,
            ),
            tag_slug=tagged_model.tag_slug,
            tag_name=tagged_model.tag_name,
            created_at=tagged_model.created_at,
        )
