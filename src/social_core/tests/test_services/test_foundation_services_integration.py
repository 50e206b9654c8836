"""
Services over a real database (in-memory SQLite unless TEST_DATABASE_URL is set),
wired with build_services(). Only the clock is faked.
"""

import logging
from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from social_core.brokers.datetime_broker import DateTimeBroker
from social_core.core.dependencies import build_services
from social_core.exceptions.base import (
    AlreadyExistsError,
    DependencyValidationError,
    InvalidStorageError,
    NotFoundError,
    ValidationError,
)
from social_core.validators.entity_validators import as_utc


@pytest.fixture
def clock(now):
    broker = MagicMock(spec=DateTimeBroker)
    broker.get_current_datetime.return_value = now
    return broker


@pytest.fixture
def services(db_session, clock):
    return build_services(db_session, datetime_broker=clock, recency_window=timedelta(minutes=1))


@pytest.mark.asyncio
class TestPostLifecycle:

    async def test_add_then_retrieve_returns_equal_post(self, services, session_maker, clock, make_post):
        """
        Behavior:
            - A post added through the service can be read back, field for field,
              from a different session.
        """
        # Arrange
        post = make_post()

        # Act
        await services.posts.add_post(post)
        async with session_maker() as other_session:
            stored = await build_services(other_session, datetime_broker=clock).posts.retrieve_post_by_id(post.id)

        # Assert
        assert stored.id == post.id
        assert stored.content == post.content
        assert stored.author == post.author
        assert as_utc(stored.created_date) == post.created_date
        assert as_utc(stored.updated_date) == post.updated_date

    async def test_modify_then_remove(self, services, make_post, now):
        # Arrange
        created = now - timedelta(days=2)
        post = await services.posts.add_post(make_post(created_date=created, updated_date=created))
        edited = make_post(id=post.id, content="edited", author=post.author,
                           created_date=created, updated_date=now)

        # Act
        modified = await services.posts.modify_post(edited)
        removed = await services.posts.remove_post_by_id(post.id)

        # Assert
        assert modified.content == "edited"
        assert removed.id == post.id
        assert await services.posts.retrieve_all_posts() == []

    async def test_modify_rejects_changed_created_date_on_fetched_post(
        self, services, session_maker, clock, make_post, now
    ):
        """
        Behavior:
            - A post fetched on the same session is the object the session holds,
              so editing its created_date must still be caught against the stored value.
            - The stored created_date is left untouched.
        """
        # Arrange
        created = now - timedelta(days=2)
        added = await services.posts.add_post(make_post(created_date=created, updated_date=created))
        fetched = await services.posts.retrieve_post_by_id(added.id)
        fetched.created_date = now - timedelta(days=30)
        fetched.updated_date = now

        # Act
        with pytest.raises(ValidationError) as exc_info:
            await services.posts.modify_post(fetched)

        # Assert
        assert exc_info.value.data == {"created_date": ["Date is not the same as created_date"]}
        async with session_maker() as other_session:
            stored = await build_services(other_session, datetime_broker=clock).posts.retrieve_post_by_id(added.id)
        assert as_utc(stored.created_date) == created

    async def test_modify_fetched_post_with_unchanged_created_date(self, services, make_post, now):
        # Arrange
        created = now - timedelta(days=2)
        added = await services.posts.add_post(make_post(created_date=created, updated_date=created))
        fetched = await services.posts.retrieve_post_by_id(added.id)
        fetched.content = "edited"
        fetched.updated_date = now

        # Act
        modified = await services.posts.modify_post(fetched)

        # Assert
        assert modified.content == "edited"

    async def test_modify_unknown_post(self, services, make_post, now):
        # Arrange
        post = make_post(created_date=now - timedelta(days=1), updated_date=now)

        # Act
        with pytest.raises(ValidationError) as exc_info:
            await services.posts.modify_post(post)

        # Assert
        assert isinstance(exc_info.value.inner, NotFoundError)


@pytest.mark.asyncio
class TestStorageRejections:

    async def test_duplicate_post_is_logged_once_at_error(self, services, session_maker, clock, make_post, caplog):
        """
        Behavior:
            - Inserting an existing id surfaces as DependencyValidationError(AlreadyExistsError).
            - Exactly one ERROR record is written by the logging broker.
        """
        # Arrange
        post = await services.posts.add_post(make_post())

        # Act
        async with session_maker() as other_session:
            other = build_services(other_session, datetime_broker=clock)
            with caplog.at_level(logging.ERROR, logger="social_core.services"):
                with pytest.raises(DependencyValidationError) as exc_info:
                    await other.posts.add_post(make_post(id=post.id))

        # Assert
        assert isinstance(exc_info.value.inner, AlreadyExistsError)
        failures = [r for r in caplog.records if r.name == "social_core.services"]
        assert len(failures) == 1
        assert failures[0].levelno == logging.ERROR
        assert failures[0].error_kind == "dependency_validation"

    async def test_report_for_unknown_post_is_invalid_reference(self, services, make_post_report):
        # Act
        with pytest.raises(DependencyValidationError) as exc_info:
            await services.post_reports.add_post_report(make_post_report())

        # Assert
        assert isinstance(exc_info.value.inner, InvalidStorageError)
        assert exc_info.value.inner.reason == "foreign_key"

    async def test_impression_round_trip(self, services, make_post, make_profile, make_post_impression):
        # Arrange
        post = await services.posts.add_post(make_post())
        profile = await services.profiles.add_profile(make_profile())

        # Act
        impression = await services.post_impressions.add_post_impression(
            make_post_impression(post_id=post.id, profile_id=profile.id)
        )
        found = await services.post_impressions.retrieve_post_impression_by_ids(post.id, profile.id)

        # Assert
        assert found is impression
