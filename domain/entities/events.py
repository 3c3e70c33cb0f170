"""Tagging domain events.

Events are emitted by the TaggingService after a tagging step has been
committed and are delivered to listeners by the TagEventDispatcher.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Tuple

from domain.entities.tag import SubjectRef


@dataclass(frozen=True)
class TagEvent:
    """Base class of tagging events.

    Attributes:
        subject (SubjectRef): The subject whose tags changed.
        occurred_at (datetime): When the event was created.
    """

    subject: SubjectRef
    occurred_at: datetime = field(default_factory=datetime.utcnow, compare=False)

    event_name = "tag_event"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the event into a JSON-compatible dictionary."""
        return {
            "event": self.event_name,
            "subject_type": self.subject.subject_type,
            "subject_id": self.subject.subject_id,
            "occurred_at": self.occurred_at.isoformat(),
        }


@dataclass(frozen=True)
class TagAdded(TagEvent):
    """Emitted once per newly created link.

    Attributes:
        slug (str): Slug of the tag that was linked.
        name (str): Display name stored on the link.
    """

    slug: str = ""
    name: str = ""

    event_name = "tag_added"

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({"slug": self.slug, "name": self.name})
        return data


@dataclass(frozen=True)
class TagRemoved(TagEvent):
    """Emitted once per detach call that named at least one tag.

    A detach of tags the subject does not carry still emits the event,
    with empty ``slugs``.

    Attributes:
        slugs (Tuple[str, ...]): Slugs of the links actually removed by the call.
    """

    slugs: Tuple[str, ...] = ()

    event_name = "tag_removed"

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["slugs"] = list(self.slugs)
        return data
