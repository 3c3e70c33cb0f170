"""Tag domain entities.

This module contains the domain entities of the tagging core: the catalog
Tag, the subject-tag Link, and the reference to the external Subject
being tagged.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Tuple, Union


@dataclass(frozen=True)
class TagEntity:
    """Domain entity representing a catalog tag.

    Attributes:
        slug (str): Normalized unique key of the tag.
        name (str): Display name, last written by a tagging operation.
        count (int): Number of live links using this slug.
        suggest (bool): Whether the tag is offered as a suggestion.

    Example:
        >>> tag = TagEntity(slug="machine-learning", name="Machine Learning", count=3)
        >>> print(tag.is_unused())
        False

    Business Rules:
        - Slug must be non-empty
        - Count is only changed through attach/detach operations
    """

    slug: str
    name: str
    count: int = 0
    suggest: bool = False

    def __post_init__(self) -> None:
        """Validate tag entity after initialization.

        Raises:
            ValueError: If the slug is empty or contains only whitespace.
        """
        if not self.slug or not self.slug.strip():
            raise ValueError("Tag slug cannot be empty or whitespace")

    def is_unused(self) -> bool:
        """Check if no live link references this tag.

        Returns:
            bool: True if the count is zero or below.
        """
        return self.count <= 0


@dataclass(frozen=True)
class SubjectRef:
    """Reference to an external entity that can carry tags.

    Attributes:
        subject_type (str): Discriminator of the subject kind, e.g. "article".
        subject_id (str): Identifier of the subject within its kind.
    """

    subject_type: str
    subject_id: str

    def __post_init__(self) -> None:
        if not self.subject_type or not str(self.subject_type).strip():
            raise ValueError("Subject type cannot be empty")
        if self.subject_id is None or not str(self.subject_id).strip():
            raise ValueError("Subject id cannot be empty")
        # Identifiers of any kind (int, UUID) are stored as strings
        object.__setattr__(self, "subject_id", str(self.subject_id))

    def __str__(self) -> str:
        return f"{self.subject_type}:{self.subject_id}"


class Taggable(ABC):
    """Capability for domain entities that can be tagged.

    Any entity implements it by supplying its type discriminator and its
    identifier. The tagging services accept either a Taggable or a SubjectRef.

    Example:
        >>> class Article(Taggable):
        ...     taggable_type = "article"
        ...     def __init__(self, id):
        ...         self.id = id
        ...     @property
        ...     def taggable_id(self):
        ...         return self.id
        >>> Article(7).subject_ref()
        SubjectRef(subject_type='article', subject_id='7')
    """

    taggable_type: str

    @property
    @abstractmethod
    def taggable_id(self) -> Any:
        """Identifier of this entity within its type."""
        pass

    def subject_ref(self) -> SubjectRef:
        return SubjectRef(subject_type=self.taggable_type, subject_id=self.taggable_id)


SubjectLike = Union[SubjectRef, Taggable]


def as_subject_ref(subject: SubjectLike) -> SubjectRef:
    """Coerce a Taggable or SubjectRef into a SubjectRef.

    Raises:
        TypeError: If the object is neither.
    """
    if isinstance(subject, SubjectRef):
        return subject
    if isinstance(subject, Taggable):
        return subject.subject_ref()
    raise TypeError(f"Cannot tag object of type {type(subject).__name__}")


@dataclass(frozen=True)
class TaggedEntity:
    """Domain entity representing a link between a subject and a tag.

    Attributes:
        subject (SubjectRef): The tagged subject.
        tag_slug (str): Slug of the linked tag.
        tag_name (str): Display name copied at link time.
        created_at (Optional[datetime]): When the link was created.
    """

    subject: SubjectRef
    tag_slug: str
    tag_name: str
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class TagChanges:
    """Slugs added and removed by one tagging operation."""

    added: Tuple[str, ...] = ()
    removed: Tuple[str, ...] = ()

    def is_empty(self) -> bool:
        return not self.added and not self.removed
