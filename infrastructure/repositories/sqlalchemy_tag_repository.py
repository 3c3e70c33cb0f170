"""SQLAlchemy implementation of the tag catalog repository.

This module contains the concrete implementation of TagRepositoryInterface
using SQLAlchemy for database operations and entity mapping.
"""

import logging
from typing import Iterable, List, Optional

from domain.entities.tag import TagEntity
from domain.repositories.tag_repository import TagRepositoryInterface
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from infrastructure.models.tag_orm import TagORM
from infrastructure.models.tagged_orm import TaggedORM

logger = logging.getLogger(__name__)


class SqlAlchemyTagRepository(TagRepositoryInterface):
    """SQLAlchemy implementation of the tag catalog repository.

    Count changes are issued as ``UPDATE ... SET count = count + :delta``
    statements so the database applies them atomically.

    NOTE: This repository does not store the session internally and never
    commits. Each method receives the session of the calling service.

    Example:
        >>> repository = SqlAlchemyTagRepository()
        >>> await repository.increment_count(db, "work", "Work", 1)
        >>> (await repository.get_by_slug(db, "work")).count
        1
    """

    async def increment_count(
        self, db_session: Session, slug: str, display_name: str, delta: int
    ) -> None:
        """Add ``delta`` to a tag's count, creating the tag if needed.

        Args:
            db_session (Session): SQLAlchemy session of the calling service.
            slug (str): Normalized tag key.
            display_name (str): Display name to store on the tag.
            delta (int): Amount to add.
        """
        if delta <= 0:
            return

        if self._add_to_count(db_session, slug, delta, display_name):
            return

        # First use of this slug: insert inside a savepoint so a concurrent
        # insert of the same slug falls back to the atomic update
        try:
            with db_session.begin_nested():
                db_session.add(TagORM(slug=slug, name=display_name, count=delta))
            logger.info(f"Created tag '{slug}'")
        except IntegrityError:
            logger.debug(f"Tag '{slug}' created concurrently, updating count instead")
            self._add_to_count(db_session, slug, delta, display_name)

    async def decrement_count(self, db_session: Session, slug: str, delta: int) -> None:
        """Subtract ``delta`` from an existing tag's count.

        Args:
            db_session (Session): SQLAlchemy session of the calling service.
            slug (str): Normalized tag key.
            delta (int): Amount to subtract.
        """
        if delta <= 0:
            return

        updated = self._add_to_count(db_session, slug, -delta)
        if not updated:
            logger.debug(f"Tag '{slug}' not in catalog, nothing to decrement")

    async def get_by_slug(self, db_session: Session, slug: str) -> Optional[TagEntity]:
        """Retrieve a tag by its slug.

        Args:
            db_session (Session): SQLAlchemy session for this operation.
            slug (str): Normalized tag key.

        Returns:
            Optional[TagEntity]: The tag entity if found, None otherwise.
        """
        tag_model = db_session.query(TagORM).filter(TagORM.slug == slug).first()
        return self._model_to_entity(tag_model) if tag_model else None

    async def get_by_slugs(
        self, db_session: Session, slugs: Iterable[str]
    ) -> List[TagEntity]:
        slugs = list(slugs)
        if not slugs:
            return []
        tag_models = (
            db_session.query(TagORM)
            .filter(TagORM.slug.in_(slugs))
            .order_by(TagORM.slug.asc())
            .all()
        )
        return [self._model_to_entity(model) for model in tag_models]

    async def list_existing(
        self, db_session: Session, subject_type: str
    ) -> List[TagEntity]:
        """List distinct tags linked to subjects of a type.

        Args:
            db_session (Session): SQLAlchemy session for this operation.
            subject_type (str): Subject type discriminator.

        Returns:
            List[TagEntity]: Tags ordered by slug ascending.
        """
        linked_slugs = (
            db_session.query(TaggedORM.tag_slug)
            .filter(TaggedORM.subject_type == subject_type)
            .distinct()
        )
        tag_models = (
            db_session.query(TagORM)
            .filter(TagORM.slug.in_(linked_slugs))
            .order_by(TagORM.slug.asc())
            .all()
        )
        return [self._model_to_entity(model) for model in tag_models]

    async def delete_unused(self, db_session: Session) -> int:
        """Delete every tag whose count is zero or below.

        Returns:
            int: Number of tags deleted.
        """
        deleted = (
            db_session.query(TagORM)
            .filter(TagORM.count <= 0)
            .delete(synchronize_session="fetch")
        )
        if deleted:
            logger.info(f"Deleted {deleted} unused tags")
        return deleted

    async def set_suggested(
        self, db_session: Session, slug: str, suggest: bool
    ) -> Optional[TagEntity]:
        """Set the suggestion flag of a tag.

        Returns:
            Optional[TagEntity]: The updated tag, None if the slug is unknown.
        """
        tag_model = db_session.query(TagORM).filter(TagORM.slug == slug).first()
        if not tag_model:
            return None
        tag_model.suggest = suggest
        db_session.flush()
        return self._model_to_entity(tag_model)

    async def list_suggested(self, db_session: Session) -> List[TagEntity]:
        tag_models = (
            db_session.query(TagORM)
            .filter(TagORM.suggest.is_(True))
            .order_by(TagORM.slug.asc())
            .all()
        )
        return [self._model_to_entity(model) for model in tag_models]

    def _add_to_count(
        self,
        db_session: Session,
        slug: str,
        delta: int,
        display_name: Optional[str] = None,
    ) -> bool:
        """Apply ``count = count + delta`` to one tag in a single statement.

        Returns:
            bool: True if a tag row was updated.
        """
        values = {TagORM.count: TagORM.count + delta}
        if display_name is not None:
            values[TagORM.name] = display_name
        updated = (
            db_session.query(TagORM)
            .filter(TagORM.slug == slug)
            .update(values, synchronize_session="fetch")
        )
        return updated > 0

    def _model_to_entity(self, tag_model: TagORM) -> TagEntity:
        """Convert SQLAlchemy model to domain entity.

        Args:
            tag_model (TagORM): SQLAlchemy tag model instance.

        Returns:
            TagEntity: Corresponding domain entity.
        """
        return TagEntity(
            slug=tag_model.slug,
            name=tag_model.name,
            count=tag_model.count,
            suggest=bool(tag_model.suggest),
        )
