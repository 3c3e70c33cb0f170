"""Tag query domain service.

This module contains the TagQueryService that resolves tag membership
queries ("subjects having all of these tags", "subjects having any of these
tags") into SubjectFilter predicates.
"""

import logging
from typing import TYPE_CHECKING, Callable, List

from domain.entities.tag_filter import SubjectFilter, TagMatchMode
from domain.exceptions import TaggingConfigurationError
from domain.services.tag_formatting import DEFAULT_DELIMITER, TagNames, make_tag_list, slugify
from domain.services.transaction import store_errors

if TYPE_CHECKING:
    from domain.repositories.tagged_repository import TaggedRepositoryInterface
    from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class TagQueryService:
    """Domain service for filtering subjects by tag membership.

    Empty input policy:
        - ``with_all_tags`` with no tag names matches every subject (vacuous AND)
        - ``with_any_tag`` with no tag names matches no subject (vacuous OR)

    Example:
        >>> query_service = TagQueryService(tagged_repository)
        >>> subject_filter = await query_service.with_all_tags(db, "article", "news, sports")
        >>> articles = subject_filter.apply(db.query(ArticleORM), ArticleORM.id).all()
    """

    def __init__(
        self,
        tagged_repository: "TaggedRepositoryInterface",
        normalizer: Callable[[str], str] = slugify,
        delimiter: str = DEFAULT_DELIMITER,
    ):
        """Initialize the query service.

        Args:
            tagged_repository: Store of subject-tag links
            normalizer: Must be the normalizer used when tagging
            delimiter: Separator used to split a single tag string
        """
        self._tagged_repository = tagged_repository
        self._normalizer = normalizer
        self._delimiter = delimiter

    async def with_all_tags(
        self, db_session: "Session", subject_type: str, tag_names: TagNames
    ) -> SubjectFilter:
        """Subjects of a type carrying every given tag.

        Each slug is looked up with its own query and the results are
        intersected. Lookups stop early once no subject is left.

        Args:
            db_session: Database session for this operation
            subject_type: Subject type discriminator
            tag_names: Delimited string or sequence of tag names

        Returns:
            SubjectFilter: Matching subjects, unfiltered for empty input
        """
        slugs = self._normalize_all(tag_names)
        if not slugs:
            return SubjectFilter.unfiltered(subject_type, TagMatchMode.ALL)

        subject_ids = None
        with store_errors(f"filter {subject_type} subjects by all of {slugs}"):
            for slug in slugs:
                tagged_ids = await self._tagged_repository.subject_ids_with_tag(
                    db_session, subject_type, slug
                )
                subject_ids = tagged_ids if subject_ids is None else subject_ids & tagged_ids
                if not subject_ids:
                    break

        logger.debug(
            f"{len(subject_ids)} {subject_type} subjects carry all of {slugs}"
        )
        return SubjectFilter.of(subject_type, subject_ids, TagMatchMode.ALL)

    async def with_any_tag(
        self, db_session: "Session", subject_type: str, tag_names: TagNames
    ) -> SubjectFilter:
        """Subjects of a type carrying at least one of the given tags.

        Args:
            db_session: Database session for this operation
            subject_type: Subject type discriminator
            tag_names: Delimited string or sequence of tag names

        Returns:
            SubjectFilter: Matching subjects, empty for empty input
        """
        slugs = self._normalize_all(tag_names)
        if not slugs:
            return SubjectFilter.of(subject_type, (), TagMatchMode.ANY)

        with store_errors(f"filter {subject_type} subjects by any of {slugs}"):
            subject_ids = await self._tagged_repository.subject_ids_with_any_tag(
                db_session, subject_type, slugs
            )

        logger.debug(
            f"{len(subject_ids)} {subject_type} subjects carry any of {slugs}"
        )
        return SubjectFilter.of(subject_type, subject_ids, TagMatchMode.ANY)

    def _normalize_all(self, tag_names: TagNames) -> List[str]:
        slugs = []
        for name in make_tag_list(tag_names, self._delimiter):
            try:
                slug = self._normalizer(name)
            except Exception as e:
                raise TaggingConfigurationError(
                    f"Tag normalizer failed on '{name}'", original_error=e
                ) from e
            if slug and slug not in slugs:
                slugs.append(slug)
        return slugs
