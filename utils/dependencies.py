"""Database and service dependencies for the Tagging Service.

This module provides dependency injection functions for FastAPI,
including database session management and the construction of the
tagging services from configuration.

Functions:
    - get_db: Database session factory with automatic cleanup
    - get_tagging_options: Tagging strategies and policies, resolved once
    - get_event_dispatcher: Event sink with its configured listeners
    - get_tagging_service / get_tag_query_service / get_tag_catalog_service:
      Service factories

Architecture:
    Services are built explicitly by these factories and injected with
    ``Depends``. The normalizer and displayer are resolved from dotted paths
    once, when the options are first requested.
"""

import importlib
import logging
from functools import lru_cache
from typing import Callable, Generator, Mapping, Optional

from domain.entities.options import TaggingOptions
from domain.exceptions import TaggingConfigurationError
from domain.services.tag_event_dispatcher import TagEventDispatcher
from domain.services.tag_query_service import TagQueryService
from domain.services.tag_service import TagCatalogService
from domain.services.tagging_service import TaggingService
from infrastructure.events.redis_publisher import RedisTagEventPublisher
from infrastructure.repositories.sqlalchemy_tag_repository import (
    SqlAlchemyTagRepository,
)
from infrastructure.repositories.sqlalchemy_tagged_repository import (
    SqlAlchemyTaggedRepository,
)
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from . import config

# Configure logging
logging.basicConfig(level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO))
logger = logging.getLogger(__name__)

# Database setup
connect_args = (
    {"check_same_thread": False} if config.DATABASE_URL.startswith("sqlite") else {}
)
engine = create_engine(config.DATABASE_URL, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Get database session with automatic cleanup.

    Yields:
        Session: SQLAlchemy database session that automatically closes after use.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def resolve_callable(path: str) -> Callable[[str], str]:
    """Import a callable from a dotted path.

    Both ``"package.module:function"`` and ``"package.module.function"`` are
    accepted.

    Args:
        path (str): Dotted path of the callable.

    Returns:
        Callable[[str], str]: The imported callable.

    Raises:
        TaggingConfigurationError: If the path cannot be imported or is not callable.

    Example:
        >>> resolve_callable("domain.services.tag_formatting:slugify")("Foo Bar")
        'foo-bar'
    """
    module_name, _, attribute = path.replace(":", ".").rpartition(".")
    if not module_name or not attribute:
        raise TaggingConfigurationError(f"Invalid callable path: '{path}'")

    try:
        target = getattr(importlib.import_module(module_name), attribute)
    except (ImportError, AttributeError) as e:
        raise TaggingConfigurationError(
            f"Cannot import '{path}'", original_error=e
        ) from e

    if not callable(target):
        raise TaggingConfigurationError(f"'{path}' is not callable")
    return target


def build_tagging_options(
    normalizer: str = "",
    displayer: str = "",
    untag_on_delete: bool = True,
    delete_unused_tags: bool = False,
    auto_tag_property: str = "",
    delimiter: str = ",",
    untag_on_delete_by_type: Optional[Mapping[str, bool]] = None,
    auto_tag_property_by_type: Optional[Mapping[str, str]] = None,
) -> TaggingOptions:
    """Build TaggingOptions from raw configuration values.

    An empty auto-tag property in ``auto_tag_property_by_type`` disables
    auto-tagging for that subject type.
    """
    defaults = TaggingOptions()
    return TaggingOptions(
        normalizer=resolve_callable(normalizer) if normalizer else defaults.normalizer,
        displayer=resolve_callable(displayer) if displayer else defaults.displayer,
        untag_on_delete=untag_on_delete,
        delete_unused_tags=delete_unused_tags,
        auto_tag_property=auto_tag_property or None,
        delimiter=delimiter or defaults.delimiter,
        untag_on_delete_by_type=dict(untag_on_delete_by_type or {}),
        auto_tag_property_by_type={
            subject_type: prop or None
            for subject_type, prop in (auto_tag_property_by_type or {}).items()
        },
    )


@lru_cache()
def get_tagging_options() -> TaggingOptions:
    """Tagging options read from the environment configuration."""
    options = build_tagging_options(
        normalizer=config.TAGGING_NORMALIZER,
        displayer=config.TAGGING_DISPLAYER,
        untag_on_delete=config.TAGGING_UNTAG_ON_DELETE,
        delete_unused_tags=config.TAGGING_DELETE_UNUSED_TAGS,
        auto_tag_property=config.TAGGING_AUTO_TAG_PROPERTY,
        delimiter=config.TAGGING_DELIMITER,
        untag_on_delete_by_type=config.TAGGING_UNTAG_ON_DELETE_BY_TYPE,
        auto_tag_property_by_type=config.TAGGING_AUTO_TAG_PROPERTY_BY_TYPE,
    )
    logger.info(
        f"Tagging options: untag_on_delete={options.untag_on_delete}, "
        f"delete_unused_tags={options.delete_unused_tags}, "
        f"auto_tag_property={options.auto_tag_property!r}"
    )
    return options


def build_event_dispatcher(
    redis_url: Optional[str] = None, channel: str = "tagging.events"
) -> TagEventDispatcher:
    """Create a dispatcher, publishing to Redis when a URL is given."""
    dispatcher = TagEventDispatcher()
    if redis_url:
        dispatcher.subscribe(RedisTagEventPublisher.from_url(redis_url, channel))
        logger.info(f"Publishing tag events to Redis channel '{channel}'")
    return dispatcher


@lru_cache()
def get_event_dispatcher() -> TagEventDispatcher:
    """Event dispatcher shared by the services of this process."""
    return build_event_dispatcher(config.TAG_EVENTS_REDIS_URL, config.TAG_EVENTS_CHANNEL)


def get_tagging_service() -> TaggingService:
    """Create the tagging service with its repositories, options and dispatcher.

    Returns:
        TaggingService: Configured domain service ready for use.
    """
    return TaggingService(
        tag_repository=SqlAlchemyTagRepository(),
        tagged_repository=SqlAlchemyTaggedRepository(),
        options=get_tagging_options(),
        dispatcher=get_event_dispatcher(),
    )


def get_tag_query_service() -> TagQueryService:
    """Create the tag query service, sharing the tagging normalizer."""
    options = get_tagging_options()
    return TagQueryService(
        SqlAlchemyTaggedRepository(),
        normalizer=options.normalizer,
        delimiter=options.delimiter,
    )


def get_tag_catalog_service() -> TagCatalogService:
    """Create the tag catalog service with repository dependency."""
    return TagCatalogService(SqlAlchemyTagRepository())
