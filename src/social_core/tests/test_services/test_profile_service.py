import uuid
from datetime import timedelta

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from social_core.exceptions.base import (
    AlreadyExistsError,
    DependencyError,
    DependencyValidationError,
    InvalidEntityError,
    NullEntityError,
    ValidationError,
)
from social_core.models import Profile
from social_core.tests.test_fixtures.service_fixtures import assert_logged_once


@pytest.mark.asyncio
class TestAddProfile:

    async def test_add_null_profile(self, profile_service, storage_broker_mock, logging_broker_mock):
        """
        Behavior:
            - add_profile(None) raises ValidationError(NullEntityError), logged once at error level.
            - No storage call is made.
        """
        # Act
        with pytest.raises(ValidationError) as exc_info:
            await profile_service.add_profile(None)

        # Assert
        assert isinstance(exc_info.value.inner, NullEntityError)
        assert exc_info.value.inner.message == "Profile is null."
        assert_logged_once(logging_broker_mock, exc_info.value)
        storage_broker_mock.insert.assert_not_called()

    async def test_add_profile_requires_names_username_and_email(self, profile_service, make_profile):
        # Arrange: bio is optional and stays unset
        profile = make_profile(first_name="", last_name=None, username=" ", email=None, bio=None)

        # Act
        with pytest.raises(ValidationError) as exc_info:
            await profile_service.add_profile(profile)

        # Assert
        assert isinstance(exc_info.value.inner, InvalidEntityError)
        assert exc_info.value.data == {
            "first_name": ["Text is required"],
            "last_name": ["Text is required"],
            "username": ["Text is required"],
            "email": ["Text is required"],
        }

    async def test_add_profile_without_bio(self, profile_service, storage_broker_mock, make_profile):
        # Arrange
        profile = make_profile(bio=None)
        storage_broker_mock.insert.return_value = profile

        # Act
        result = await profile_service.add_profile(profile)

        # Assert
        assert result is profile

    async def test_add_profile_with_taken_email(self, profile_service, storage_broker_mock,
                                                logging_broker_mock, make_profile):
        """
        Behavior:
            - A unique violation on any column (not only the key) is reported as AlreadyExistsError;
              the offending column is kept on the inner error for logs.
        """
        # Arrange
        storage_broker_mock.insert.side_effect = IntegrityError(
            "INSERT INTO profiles", {}, Exception("UNIQUE constraint failed: profiles.email")
        )

        # Act
        with pytest.raises(DependencyValidationError) as exc_info:
            await profile_service.add_profile(make_profile())

        # Assert
        inner = exc_info.value.inner
        assert isinstance(inner, AlreadyExistsError)
        assert inner.fields == ["email"]
        assert inner.message == "Profile with the same id already exists."
        assert_logged_once(logging_broker_mock, exc_info.value)

    async def test_to_payload_hides_database_details(self, profile_service, storage_broker_mock, make_profile):
        # Arrange
        storage_broker_mock.insert.side_effect = IntegrityError(
            "INSERT INTO profiles", {}, Exception("UNIQUE constraint failed: profiles.username")
        )

        # Act
        with pytest.raises(DependencyValidationError) as exc_info:
            await profile_service.add_profile(make_profile())

        # Assert
        assert exc_info.value.to_payload() == {
            "detail": "Profile dependency validation occurred, please try again.",
            "kind": "dependency_validation",
            "entity": "Profile",
            "reason": "Profile with the same id already exists.",
        }


@pytest.mark.asyncio
class TestModifyAndRemoveProfile:

    async def test_modify_profile(self, profile_service, storage_broker_mock, make_profile, now):
        # Arrange
        created = now - timedelta(hours=5)
        profile = make_profile(created_date=created, updated_date=now - timedelta(seconds=10))
        storage_broker_mock.select_by_id.return_value = make_profile(id=profile.id, created_date=created)
        storage_broker_mock.update.return_value = profile

        # Act
        result = await profile_service.modify_profile(profile)

        # Assert
        assert result is profile
        storage_broker_mock.select_by_id.assert_awaited_once_with(Profile, profile.id)

    async def test_remove_profile_when_database_unreachable(self, profile_service, storage_broker_mock,
                                                            logging_broker_mock):
        # Arrange
        storage_broker_mock.select_by_id.side_effect = OperationalError("SELECT", {}, Exception("gone"))

        # Act
        with pytest.raises(DependencyError) as exc_info:
            await profile_service.remove_profile_by_id(uuid.uuid4())

        # Assert
        assert_logged_once(logging_broker_mock, exc_info.value, critical=True)
        storage_broker_mock.delete.assert_not_called()
