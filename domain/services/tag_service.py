"""Tag catalog domain service.

This module contains the TagCatalogService that implements the read and
maintenance operations of the tag catalog: existing tags per subject type,
single tag lookup, suggestions and the unused tag purge.
"""

import logging
from typing import List

from domain.entities.tag import TagEntity
from domain.exceptions import TagNotFoundError
from domain.repositories.tag_repository import TagRepositoryInterface
from domain.services.transaction import atomic_step, store_errors
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class TagCatalogService:
    """Domain service for tag catalog operations.

    Counts are never changed here: they only move through the
    TaggingService attach and detach paths.

    Attributes:
        _tag_repository (TagRepositoryInterface): Repository for tag data access.

    Example:
        >>> service = TagCatalogService(tag_repository)
        >>> tags = await service.get_existing_tags(db, "article")
        >>> print([tag.slug for tag in tags])
        ['news', 'sports']
    """

    def __init__(self, tag_repository: TagRepositoryInterface) -> None:
        """Initialize the catalog service with required dependencies.

        Args:
            tag_repository (TagRepositoryInterface): Repository implementation for tag data access.
        """
        self._tag_repository = tag_repository

    async def get_existing_tags(
        self, db_session: Session, subject_type: str
    ) -> List[TagEntity]:
        """Retrieve the tags in use by subjects of a type.

        Args:
            db_session (Session): Database session for this operation.
            subject_type (str): Subject type discriminator.

        Returns:
            List[TagEntity]: Distinct tags ordered by slug, with their global counts.
        """
        with store_errors(f"list existing tags of {subject_type}"):
            return await self._tag_repository.list_existing(db_session, subject_type)

    async def get_tag(self, db_session: Session, slug: str) -> TagEntity:
        """Retrieve a tag by its slug.

        Args:
            db_session (Session): Database session for this operation.
            slug (str): Normalized tag key.

        Returns:
            TagEntity: The requested tag entity.

        Raises:
            TagNotFoundError: If no tag has this slug.
        """
        with store_errors(f"load tag '{slug}'"):
            tag = await self._tag_repository.get_by_slug(db_session, slug)
        if not tag:
            raise TagNotFoundError(f"Tag '{slug}' not found")
        return tag

    async def set_suggested(
        self, db_session: Session, slug: str, suggest: bool
    ) -> TagEntity:
        """Flag or unflag a tag as a suggestion.

        Raises:
            TagNotFoundError: If no tag has this slug.
        """
        with atomic_step(db_session, f"set suggestion flag of '{slug}'"):
            tag = await self._tag_repository.set_suggested(db_session, slug, suggest)
            if not tag:
                raise TagNotFoundError(f"Tag '{slug}' not found")

        logger.info(f"Tag '{slug}' suggestion flag set to {suggest}")
        return tag

    async def get_suggested_tags(self, db_session: Session) -> List[TagEntity]:
        with store_errors("list suggested tags"):
            return await self._tag_repository.list_suggested(db_session)

    async def delete_unused_tags(self, db_session: Session) -> int:
        """Delete every tag no subject uses anymore.

        Returns:
            int: Number of tags deleted.
        """
        with atomic_step(db_session, "delete unused tags"):
            return await self._tag_repository.delete_unused(db_session)
