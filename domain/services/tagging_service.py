"""Tagging domain service.

This module contains the TaggingService that attaches, detaches and
replaces tags on subjects, keeping the tag catalog counts in step with the
links and emitting tagging events.
"""

from __future__ import annotations

import logging
from collections.abc import MutableMapping
from typing import TYPE_CHECKING, Any, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError

from domain.entities.events import TagAdded, TagRemoved
from domain.entities.options import TaggingOptions
from domain.entities.tag import (
    SubjectLike,
    SubjectRef,
    TagChanges,
    TagEntity,
    TaggedEntity,
    as_subject_ref,
)
from domain.exceptions import TaggingConfigurationError
from domain.services.tag_event_dispatcher import TagEventDispatcher
from domain.services.tag_formatting import TagNames, make_tag_list
from domain.services.transaction import atomic_step, store_errors

if TYPE_CHECKING:
    from domain.repositories.tag_repository import TagRepositoryInterface
    from domain.repositories.tagged_repository import TaggedRepositoryInterface
    from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class TaggingService:
    """Domain service for tagging subjects.

    Every single tag addition (link insert and count increment) and every
    single tag removal (link delete and count decrement) is committed as its
    own transaction. Events are dispatched after the commit.

    Event policy:
        - ``TagAdded`` once per link actually created.
        - ``TagRemoved`` once per ``detach`` call that named at least one tag,
          carrying the slugs actually removed (possibly none).

    Example:
        >>> service = TaggingService(tag_repository, tagged_repository)
        >>> article = SubjectRef("article", "42")
        >>> await service.attach(db, article, "News, Sports")
        TagChanges(added=('news', 'sports'), removed=())
        >>> await service.tag_names(db, article)
        ['News', 'Sports']
    """

    def __init__(
        self,
        tag_repository: "TagRepositoryInterface",
        tagged_repository: "TaggedRepositoryInterface",
        options: Optional[TaggingOptions] = None,
        dispatcher: Optional[TagEventDispatcher] = None,
    ):
        """Initialize the tagging service with its dependencies.

        Args:
            tag_repository: Catalog of tags and usage counts
            tagged_repository: Store of subject-tag links
            options: Strategies and policies, defaults to TaggingOptions()
            dispatcher: Event sink, defaults to a dispatcher without listeners
        """
        self._tag_repository = tag_repository
        self._tagged_repository = tagged_repository
        self._options = options or TaggingOptions()
        self._dispatcher = dispatcher or TagEventDispatcher()

    @property
    def options(self) -> TaggingOptions:
        return self._options

    @property
    def dispatcher(self) -> TagEventDispatcher:
        return self._dispatcher

    async def attach(
        self, db_session: "Session", subject: SubjectLike, tag_names: TagNames
    ) -> TagChanges:
        """Add tags to a subject.

        Tags the subject already carries are skipped without changing counts.

        Args:
            db_session: Database session for this operation
            subject: Subject to tag
            tag_names: Delimited string or sequence of tag names

        Returns:
            TagChanges: Slugs of the links actually created

        Raises:
            TaggingConfigurationError: If the normalizer or displayer fails
            TaggingStoreError: If the store fails; earlier tags stay applied
        """
        subject = as_subject_ref(subject)
        added = []
        for name, slug in self.parse_tag_names(tag_names):
            if await self._add_tag(db_session, subject, name, slug):
                added.append(slug)

        if added:
            logger.info(f"Tagged {subject} with {added}")
        return TagChanges(added=tuple(added))

    async def detach(
        self,
        db_session: "Session",
        subject: SubjectLike,
        tag_names: TagNames = None,
    ) -> TagChanges:
        """Remove tags from a subject.

        Args:
            db_session: Database session for this operation
            subject: Subject to untag
            tag_names: Tag names to remove, or None to remove every tag the
                subject carries when the call starts

        Returns:
            TagChanges: Slugs of the links actually removed
        """
        subject = as_subject_ref(subject)
        if tag_names is None:
            slugs = await self.tag_slugs(db_session, subject)
        else:
            slugs = [slug for _, slug in self.parse_tag_names(tag_names)]

        removed = await self._remove_slugs(db_session, subject, slugs)
        return TagChanges(removed=tuple(removed))

    async def replace(
        self, db_session: "Session", subject: SubjectLike, tag_names: TagNames
    ) -> TagChanges:
        """Make the subject carry exactly the given tags.

        Only the difference is applied: tags present now but absent from
        ``tag_names`` are detached first, then missing tags are attached.
        Tags kept on the subject produce no events and no count changes.

        Args:
            db_session: Database session for this operation
            subject: Subject to retag
            tag_names: Target tag names

        Returns:
            TagChanges: Slugs added and removed
        """
        subject = as_subject_ref(subject)
        target = self.parse_tag_names(tag_names)
        current = await self.tag_slugs(db_session, subject)

        target_slugs = {slug for _, slug in target}
        current_slugs = set(current)
        deletions = [slug for slug in current if slug not in target_slugs]
        additions = [(name, slug) for name, slug in target if slug not in current_slugs]

        removed = []
        if deletions:
            removed = await self._remove_slugs(db_session, subject, deletions)

        added = []
        for name, slug in additions:
            if await self._add_tag(db_session, subject, name, slug):
                added.append(slug)

        logger.info(f"Retagged {subject}: added {added}, removed {removed}")
        return TagChanges(added=tuple(added), removed=tuple(removed))

    def prepare_auto_tags(self, record: Any, subject_type: Optional[str] = None) -> Any:
        """Capture and clear the auto-tag property before a subject is saved.

        The auto-tag property is not part of the subject's stored schema, so
        it is removed from the record before the record is persisted.

        Args:
            record: Mapping or object about to be persisted
            subject_type: Type of the record, defaults to its ``taggable_type``

        Returns:
            The captured tag value, or None when auto-tagging is disabled
            for the subject type
        """
        if subject_type is None:
            subject_type = getattr(record, "taggable_type", None)
        prop = self._options.auto_tag_property_for(subject_type)
        if not prop:
            return None

        if isinstance(record, MutableMapping):
            return record.pop(prop, None)

        value = getattr(record, prop, None)
        if prop in getattr(record, "__dict__", {}):
            delattr(record, prop)
        return value

    async def apply_auto_tags(
        self, db_session: "Session", subject: SubjectLike, captured: Any
    ) -> TagChanges:
        """Apply the value captured by prepare_auto_tags after the subject is saved.

        A non-empty value replaces the subject's tags; an empty value removes
        every tag. Nothing happens when auto-tagging is disabled for the
        subject type.
        """
        subject = as_subject_ref(subject)
        if not self._options.auto_tag_property_for(subject.subject_type):
            return TagChanges()

        if make_tag_list(captured, self._options.delimiter):
            return await self.replace(db_session, subject, captured)
        return await self.detach(db_session, subject)

    async def on_subject_deleted(
        self, db_session: "Session", subject: SubjectLike
    ) -> TagChanges:
        """Drop the links of a deleted subject.

        With ``untag_on_delete`` (or its override for the subject type) the
        subject is fully untagged: counts are decremented, TagRemoved is
        emitted and unused tags are purged when enabled.
        Otherwise the links are deleted and the counts are left untouched.
        """
        subject = as_subject_ref(subject)
        if self._options.untag_on_delete_for(subject.subject_type):
            return await self.detach(db_session, subject)

        with atomic_step(db_session, f"remove links of deleted subject {subject}"):
            await self._tagged_repository.remove_all(db_session, subject)
        return TagChanges()

    async def links(self, db_session: "Session", subject: SubjectLike) -> List[TaggedEntity]:
        """Links of the subject in creation order."""
        subject = as_subject_ref(subject)
        with store_errors(f"list links of {subject}"):
            return await self._tagged_repository.list_for_subject(db_session, subject)

    async def tag_names(self, db_session: "Session", subject: SubjectLike) -> List[str]:
        """Display names stored on the subject's links."""
        return [link.tag_name for link in await self.links(db_session, subject)]

    async def tag_slugs(self, db_session: "Session", subject: SubjectLike) -> List[str]:
        return [link.tag_slug for link in await self.links(db_session, subject)]

    async def tag_names_string(
        self, db_session: "Session", subject: SubjectLike
    ) -> str:
        """Display names joined as ``"Foo, Bar"``."""
        return ", ".join(await self.tag_names(db_session, subject))

    async def tags(self, db_session: "Session", subject: SubjectLike) -> List[TagEntity]:
        """Catalog entries of the tags the subject carries, ordered by slug."""
        slugs = await self.tag_slugs(db_session, subject)
        with store_errors(f"load tags of {as_subject_ref(subject)}"):
            return await self._tag_repository.get_by_slugs(db_session, slugs)

    def parse_tag_names(self, tag_names: TagNames) -> List[Tuple[str, str]]:
        """Split input into ``(name, slug)`` pairs.

        Names with an empty slug are discarded; a slug given twice keeps its
        first name.

        Raises:
            TaggingConfigurationError: If the normalizer fails
        """
        pairs = []
        seen = set()
        for name in make_tag_list(tag_names, self._options.delimiter):
            slug = self.normalize(name)
            if not slug or slug in seen:
                continue
            seen.add(slug)
            pairs.append((name, slug))
        return pairs

    def normalize(self, name: str) -> str:
        """Slug of a tag name, using the configured normalizer."""
        try:
            return self._options.normalizer(name.strip())
        except Exception as e:
            raise TaggingConfigurationError(
                f"Tag normalizer failed on '{name}'", original_error=e
            ) from e

    def display(self, name: str) -> str:
        """Display name of a tag name, using the configured displayer."""
        try:
            return self._options.displayer(name.strip())
        except Exception as e:
            raise TaggingConfigurationError(
                f"Tag displayer failed on '{name}'", original_error=e
            ) from e

    async def _add_tag(
        self, db_session: "Session", subject: SubjectRef, name: str, slug: str
    ) -> bool:
        """Create one link and count it, then emit TagAdded.

        Returns:
            bool: False if the subject already carried the slug.
        """
        display_name = self.display(name)

        with atomic_step(db_session, f"tag {subject} with '{slug}'"):
            if await self._tagged_repository.exists(db_session, subject, slug):
                logger.debug(f"{subject} already tagged with '{slug}'")
                return False
            try:
                await self._tagged_repository.add(db_session, subject, slug, display_name)
            except IntegrityError:
                # Concurrent tagger created the same link first
                db_session.rollback()
                logger.debug(f"{subject} tagged with '{slug}' concurrently")
                return False
            await self._tag_repository.increment_count(
                db_session, slug, display_name, 1
            )

        self._dispatcher.dispatch(TagAdded(subject=subject, slug=slug, name=display_name))
        return True

    async def _remove_slugs(
        self, db_session: "Session", subject: SubjectRef, slugs: List[str]
    ) -> List[str]:
        removed = []
        for slug in slugs:
            with atomic_step(db_session, f"untag {subject} from '{slug}'"):
                deleted = await self._tagged_repository.remove(db_session, subject, slug)
                await self._tag_repository.decrement_count(db_session, slug, deleted)
            if deleted:
                removed.append(slug)

        if removed:
            logger.info(f"Untagged {subject} from {removed}")
        if slugs:
            self._dispatcher.dispatch(TagRemoved(subject=subject, slugs=tuple(removed)))

        if self._options.delete_unused_tags:
            with atomic_step(db_session, "delete unused tags"):
                await self._tag_repository.delete_unused(db_session)
        return removed
