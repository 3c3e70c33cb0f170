"""Tagged link repository interface.

This module defines the abstract interface for subject-tag links. One link
table serves every subject type through a subject type discriminator.
"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Set

from sqlalchemy.orm import Session

from ..entities.tag import SubjectRef, TaggedEntity


class TaggedRepositoryInterface(ABC):
    """Abstract interface for subject-tag link operations.

    The store enforces uniqueness of (subject type, subject id, tag slug);
    ``add`` surfaces a violation as the store's integrity error so callers can
    treat it as "already tagged".

    NOTE: Implementations never commit.
    """

    @abstractmethod
    async def exists(self, db_session: Session, subject: SubjectRef, slug: str) -> bool:
        """Check whether the subject already carries a link to the slug."""
        pass

    @abstractmethod
    async def add(
        self, db_session: Session, subject: SubjectRef, slug: str, name: str
    ) -> TaggedEntity:
        """Insert a link and flush it.

        Args:
            db_session (Session): Database session for this operation.
            subject (SubjectRef): Subject being tagged.
            slug (str): Tag slug.
            name (str): Display name copied onto the link.

        Returns:
            TaggedEntity: The stored link.

        Raises:
            sqlalchemy.exc.IntegrityError: If the link already exists.
        """
        pass

    @abstractmethod
    async def remove(self, db_session: Session, subject: SubjectRef, slug: str) -> int:
        """Delete the subject's links to a slug.

        Returns:
            int: Number of links deleted (0 when none existed).
        """
        pass

    @abstractmethod
    async def remove_all(self, db_session: Session, subject: SubjectRef) -> int:
        """Delete every link of the subject without touching tag counts.

        Returns:
            int: Number of links deleted.
        """
        pass

    @abstractmethod
    async def list_for_subject(
        self, db_session: Session, subject: SubjectRef
    ) -> List[TaggedEntity]:
        """List the subject's links in creation order."""
        pass

    @abstractmethod
    async def subject_ids_with_tag(
        self, db_session: Session, subject_type: str, slug: str
    ) -> Set[str]:
        """Identifiers of subjects of a type linked to one slug."""
        pass

    @abstractmethod
    async def subject_ids_with_any_tag(
        self, db_session: Session, subject_type: str, slugs: Iterable[str]
    ) -> Set[str]:
        """Identifiers of subjects of a type linked to at least one of the slugs."""
        pass
