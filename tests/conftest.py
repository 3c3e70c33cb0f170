"""
Shared fixtures for tagging tests.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from unittest.mock import Mock
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from domain.entities.events import TagEvent
from domain.entities.options import TaggingOptions
from domain.entities.tag import SubjectRef
from domain.services.tag_event_dispatcher import TagEventDispatcher
from domain.services.tag_query_service import TagQueryService
from domain.services.tag_service import TagCatalogService
from domain.services.tagging_service import TaggingService
from infrastructure.models.base import Base
from infrastructure.models import tag_orm, tagged_orm  # noqa: F401
from infrastructure.repositories.sqlalchemy_tag_repository import SqlAlchemyTagRepository
from infrastructure.repositories.sqlalchemy_tagged_repository import SqlAlchemyTaggedRepository


@pytest.fixture
def engine():
    """In-memory SQLite engine shared across threads."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    """Database session with the tagging tables created."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def tag_repository():
    return SqlAlchemyTagRepository()


@pytest.fixture
def tagged_repository():
    return SqlAlchemyTaggedRepository()


@pytest.fixture
def listener():
    """Mock listener recording every dispatched event."""
    return Mock(spec=lambda event: None)


@pytest.fixture
def dispatcher(listener):
    dispatcher = TagEventDispatcher()
    dispatcher.subscribe(listener)
    return dispatcher


@pytest.fixture
def options():
    return TaggingOptions()


@pytest.fixture
def tagging_service(tag_repository, tagged_repository, options, dispatcher):
    return TaggingService(tag_repository, tagged_repository, options, dispatcher)


@pytest.fixture
def make_tagging_service(tag_repository, tagged_repository, dispatcher):
    """Build a TaggingService with custom options."""
    def factory(**option_values):
        return TaggingService(
            tag_repository, tagged_repository, TaggingOptions(**option_values), dispatcher
        )
    return factory


@pytest.fixture
def query_service(tagged_repository):
    return TagQueryService(tagged_repository)


@pytest.fixture
def catalog_service(tag_repository):
    return TagCatalogService(tag_repository)


@pytest.fixture
def article():
    return SubjectRef(subject_type="article", subject_id="1")


@pytest.fixture
def other_article():
    return SubjectRef(subject_type="article", subject_id="2")


@pytest.fixture
def received(listener):
    """Return the events of a type received by the mock listener, in order."""
    def events(event_type=TagEvent):
        return [
            call.args[0] for call in listener.call_args_list
            if isinstance(call.args[0], event_type)
        ]
    return events
