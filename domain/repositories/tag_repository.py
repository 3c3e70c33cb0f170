"""Tag catalog repository interface.

This module defines the abstract interface for the tag catalog: the store
of distinct tags and their global usage counts, following the Repository
pattern from DDD.
"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from ..entities.tag import TagEntity


class TagRepositoryInterface(ABC):
    """Abstract interface for tag catalog operations.

    Count changes must be applied atomically by the store (a single
    ``count = count + delta`` update), never as read-modify-write, so that
    concurrent taggers of the same slug do not lose updates.

    NOTE: All methods receive a database session. Implementations never
    commit; transaction boundaries belong to the calling service.
    """

    @abstractmethod
    async def increment_count(
        self, db_session: Session, slug: str, display_name: str, delta: int
    ) -> None:
        """Add ``delta`` to a tag's count, creating the tag if needed.

        The display name of the tag is overwritten with ``display_name``.
        A ``delta`` of zero or below is a no-op.

        Args:
            db_session (Session): Database session for this operation.
            slug (str): Normalized tag key.
            display_name (str): Display name to store on the tag.
            delta (int): Amount to add.

        Example:
            >>> await repository.increment_count(db, "work", "Work", 1)
        """
        pass

    @abstractmethod
    async def decrement_count(self, db_session: Session, slug: str, delta: int) -> None:
        """Subtract ``delta`` from an existing tag's count.

        A missing tag or a ``delta`` of zero or below is a no-op. The count is
        not clamped at zero here.

        Args:
            db_session (Session): Database session for this operation.
            slug (str): Normalized tag key.
            delta (int): Amount to subtract.
        """
        pass

    @abstractmethod
    async def get_by_slug(self, db_session: Session, slug: str) -> Optional[TagEntity]:
        """Retrieve a tag by its slug.

        Returns:
            Optional[TagEntity]: The tag if found, None otherwise.
        """
        pass

    @abstractmethod
    async def get_by_slugs(
        self, db_session: Session, slugs: Iterable[str]
    ) -> List[TagEntity]:
        """Retrieve the tags with the given slugs, ordered by slug."""
        pass

    @abstractmethod
    async def list_existing(
        self, db_session: Session, subject_type: str
    ) -> List[TagEntity]:
        """List distinct tags linked to subjects of a type.

        Args:
            db_session (Session): Database session for this operation.
            subject_type (str): Subject type discriminator.

        Returns:
            List[TagEntity]: Tags ordered by slug ascending.

        Example:
            >>> tags = await repository.list_existing(db, "article")
            >>> print([tag.slug for tag in tags])
            ['news', 'sports']
        """
        pass

    @abstractmethod
    async def delete_unused(self, db_session: Session) -> int:
        """Delete every tag whose count is zero or below.

        Returns:
            int: Number of tags deleted.
        """
        pass

    @abstractmethod
    async def set_suggested(
        self, db_session: Session, slug: str, suggest: bool
    ) -> Optional[TagEntity]:
        """Set the suggestion flag of a tag.

        Returns:
            Optional[TagEntity]: The updated tag, None if the slug is unknown.
        """
        pass

    @abstractmethod
    async def list_suggested(self, db_session: Session) -> List[TagEntity]:
        """List tags flagged as suggestions, ordered by slug."""
        pass
