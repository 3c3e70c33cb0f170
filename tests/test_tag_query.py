"""
Tests for TagQueryService and SubjectFilter.
"""
import pytest
import pytest_asyncio
from sqlalchemy import Column, String
from sqlalchemy.orm import declarative_base

from domain.entities.tag import SubjectRef
from domain.entities.tag_filter import SubjectFilter, TagMatchMode
from domain.exceptions import TaggingConfigurationError
from domain.services.tag_query_service import TagQueryService

ArticleBase = declarative_base()


class ArticleORM(ArticleBase):
    __tablename__ = "articles"

    id = Column(String(36), primary_key=True)
    title = Column(String(255), nullable=False)


@pytest_asyncio.fixture
async def tagged_articles(db, tagging_service):
    """Four articles: 1 {x, y}, 2 {y}, 3 {z}, 4 untagged, plus photo 1 {x, y}."""
    await tagging_service.attach(db, SubjectRef("article", "1"), ["x", "y"])
    await tagging_service.attach(db, SubjectRef("article", "2"), ["y"])
    await tagging_service.attach(db, SubjectRef("article", "3"), ["z"])
    await tagging_service.attach(db, SubjectRef("photo", "1"), ["x", "y"])


@pytest.fixture
def articles_db(engine, db):
    ArticleBase.metadata.create_all(bind=engine)
    db.add_all([ArticleORM(id=str(i), title=f"Article {i}") for i in range(1, 5)])
    db.commit()
    return db


class TestWithAllTags:
    """Tests for the intersection query."""

    @pytest.mark.asyncio
    async def test_single_tag(self, db, query_service, tagged_articles):
        subject_filter = await query_service.with_all_tags(db, "article", ["y"])

        assert subject_filter.subject_ids == frozenset({"1", "2"})
        assert subject_filter.mode is TagMatchMode.ALL

    @pytest.mark.asyncio
    async def test_intersection(self, db, query_service, tagged_articles):
        subject_filter = await query_service.with_all_tags(db, "article", "x, y")

        assert subject_filter.subject_ids == frozenset({"1"})

    @pytest.mark.asyncio
    async def test_no_subject_has_every_tag(self, db, query_service, tagged_articles):
        subject_filter = await query_service.with_all_tags(db, "article", ["x", "z"])

        assert subject_filter.is_empty()
        assert not subject_filter.matches("1")

    @pytest.mark.asyncio
    async def test_names_are_normalized(self, db, query_service, tagged_articles):
        subject_filter = await query_service.with_all_tags(db, "article", [" X ", "Y"])

        assert subject_filter.subject_ids == frozenset({"1"})

    @pytest.mark.asyncio
    async def test_unknown_tag_matches_nothing(self, db, query_service, tagged_articles):
        subject_filter = await query_service.with_all_tags(db, "article", ["y", "missing"])

        assert subject_filter.is_empty()

    @pytest.mark.asyncio
    async def test_empty_input_is_unfiltered(self, db, query_service, tagged_articles):
        subject_filter = await query_service.with_all_tags(db, "article", [])

        assert subject_filter.is_unfiltered
        assert subject_filter.matches("4")

    @pytest.mark.asyncio
    async def test_subject_type_is_respected(self, db, query_service, tagged_articles):
        subject_filter = await query_service.with_all_tags(db, "photo", ["x", "y"])

        assert subject_filter.subject_type == "photo"
        assert subject_filter.subject_ids == frozenset({"1"})

    @pytest.mark.asyncio
    async def test_stops_after_empty_intersection(self, db, tagged_repository):
        calls = []
        original = tagged_repository.subject_ids_with_tag

        async def recording(db_session, subject_type, slug):
            calls.append(slug)
            return await original(db_session, subject_type, slug)

        tagged_repository.subject_ids_with_tag = recording
        query_service = TagQueryService(tagged_repository)

        await query_service.with_all_tags(db, "article", ["missing", "x", "y"])

        assert calls == ["missing"]


class TestWithAnyTag:
    """Tests for the union query."""

    @pytest.mark.asyncio
    async def test_union(self, db, query_service, tagged_articles):
        subject_filter = await query_service.with_any_tag(db, "article", "x, z")

        assert subject_filter.subject_ids == frozenset({"1", "3"})
        assert subject_filter.mode is TagMatchMode.ANY

    @pytest.mark.asyncio
    async def test_overlapping_tags_yield_each_subject_once(
        self, db, query_service, tagged_articles
    ):
        subject_filter = await query_service.with_any_tag(db, "article", ["x", "y"])

        assert subject_filter.sorted_ids() == ["1", "2"]

    @pytest.mark.asyncio
    async def test_empty_input_matches_nothing(self, db, query_service, tagged_articles):
        subject_filter = await query_service.with_any_tag(db, "article", "  ,  ")

        assert subject_filter.is_empty()
        assert not subject_filter.is_unfiltered

    @pytest.mark.asyncio
    async def test_failing_normalizer_is_configuration_error(self, db, tagged_repository):
        def broken(value):
            raise RuntimeError("boom")

        query_service = TagQueryService(tagged_repository, normalizer=broken)

        with pytest.raises(TaggingConfigurationError):
            await query_service.with_any_tag(db, "article", ["x"])


class TestSubjectFilterApply:
    """Tests for composing a filter with a query over the subject table."""

    @pytest.mark.asyncio
    async def test_all_tags_filter_restricts_query(
        self, articles_db, query_service, tagged_articles
    ):
        subject_filter = await query_service.with_all_tags(articles_db, "article", ["y"])

        query = subject_filter.apply(articles_db.query(ArticleORM), ArticleORM.id)

        assert sorted(article.id for article in query.all()) == ["1", "2"]

    @pytest.mark.asyncio
    async def test_unfiltered_returns_every_subject(
        self, articles_db, query_service, tagged_articles
    ):
        subject_filter = await query_service.with_all_tags(articles_db, "article", "")

        query = subject_filter.apply(articles_db.query(ArticleORM), ArticleORM.id)

        assert query.count() == 4

    @pytest.mark.asyncio
    async def test_empty_filter_returns_no_subject(
        self, articles_db, query_service, tagged_articles
    ):
        subject_filter = await query_service.with_any_tag(articles_db, "article", [])

        query = subject_filter.apply(articles_db.query(ArticleORM), ArticleORM.id)

        assert query.all() == []


class TestSubjectFilter:
    """Unit tests for SubjectFilter."""

    def test_of_coerces_ids_to_strings(self):
        subject_filter = SubjectFilter.of("article", [1, 2, 2])

        assert subject_filter.subject_ids == frozenset({"1", "2"})
        assert subject_filter.matches(1)
        assert not subject_filter.matches(3)

    def test_unfiltered_matches_everything(self):
        subject_filter = SubjectFilter.unfiltered("article")

        assert subject_filter.matches("anything")
        assert subject_filter.sorted_ids() == []
        assert not subject_filter.is_empty()
