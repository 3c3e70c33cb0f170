"""Tag filter domain entities.

This module contains the SubjectFilter produced by the TagQueryService:
the resolved set of subject identifiers matching a tag membership query,
ready to be applied to any SQLAlchemy query over the subject table.
"""

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Iterable, Optional


class TagMatchMode(Enum):
    """How multiple tag names combine in a filter."""

    ALL = "all"
    ANY = "any"


@dataclass(frozen=True)
class SubjectFilter:
    """Predicate over subjects of one type, resolved from tag links.

    Attributes:
        subject_type: Type discriminator the filter applies to
        subject_ids: Matching subject identifiers, or None when every subject matches
        mode: Whether the filter came from an "all tags" or "any tag" query

    Example:
        >>> f = SubjectFilter(subject_type="article", subject_ids=frozenset({"1", "3"}))
        >>> f.matches(3)
        True
        >>> query = f.apply(db.query(ArticleORM), ArticleORM.id)
    """

    subject_type: str
    subject_ids: Optional[FrozenSet[str]]
    mode: TagMatchMode = TagMatchMode.ALL

    @classmethod
    def unfiltered(cls, subject_type: str, mode: TagMatchMode = TagMatchMode.ALL) -> "SubjectFilter":
        return cls(subject_type=subject_type, subject_ids=None, mode=mode)

    @classmethod
    def of(
        cls, subject_type: str, subject_ids: Iterable, mode: TagMatchMode = TagMatchMode.ALL
    ) -> "SubjectFilter":
        return cls(
            subject_type=subject_type,
            subject_ids=frozenset(str(subject_id) for subject_id in subject_ids),
            mode=mode,
        )

    @property
    def is_unfiltered(self) -> bool:
        """Check if every subject of the type matches."""
        return self.subject_ids is None

    def is_empty(self) -> bool:
        """Check if no subject can match."""
        return self.subject_ids is not None and len(self.subject_ids) == 0

    def matches(self, subject_id) -> bool:
        """Check if a subject identifier satisfies the filter."""
        if self.subject_ids is None:
            return True
        return str(subject_id) in self.subject_ids

    def sorted_ids(self) -> list:
        """Matching identifiers in ascending order, empty when unfiltered."""
        return sorted(self.subject_ids) if self.subject_ids is not None else []

    def apply(self, query, id_column):
        """Restrict a SQLAlchemy query to the matching subjects.

        Args:
            query: SQLAlchemy query (or select) over the subject table
            id_column: Column holding the subject identifier

        Returns:
            The query with an ``IN`` clause added, or unchanged when unfiltered.
        """
        if self.subject_ids is None:
            return query
        return query.filter(id_column.in_(sorted(self.subject_ids)))
