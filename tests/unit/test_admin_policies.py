"""Capability checks in the admin policies."""

from datetime import datetime, timezone

import pytest

from app.models.blog import Blog
from app.models.feature_flag import FeatureFlag
from app.models.user import CapabilityCategory, CapabilityName, User, UserCapability
from app.policies import Action, can
from app.policies.guards import authorise
from app.utils.exceptions import AuthorizationError

pytestmark = pytest.mark.unit


def make_user(user_id: int = 1, superuser: bool = False, confirmed: bool = True, capabilities=()) -> User:
    return User(
        id=user_id,
        username=f"user{user_id}",
        email=f"user{user_id}@example.com",
        is_active=True,
        is_superuser=superuser,
        confirmed_at=datetime.now(timezone.utc) if confirmed else None,
        capabilities=[
            UserCapability(category=category.value, name=name.value) for category, name in capabilities
        ],
    )


class TestAdminPolicy:
    def test_anonymous_is_denied(self):
        assert not can(None, Action.LIST, Blog)

    def test_unconfirmed_user_is_denied(self):
        user = make_user(superuser=True, confirmed=False)
        assert not can(user, Action.LIST, Blog)

    def test_capability_grants_only_its_action(self):
        user = make_user(capabilities=[(CapabilityCategory.BLOGS, CapabilityName.LIST)])

        assert can(user, Action.LIST, Blog)
        assert can(user, Action.READ, Blog)
        assert not can(user, Action.CREATE, Blog)
        assert not can(user, Action.DELETE, Blog)

    def test_capability_is_per_category(self):
        user = make_user(capabilities=[(CapabilityCategory.BLOGS, CapabilityName.DESTROY)])

        assert can(user, Action.DELETE, "blogs")
        assert not can(user, Action.DELETE, "blog_posts")

    def test_superuser_is_allowed(self):
        user = make_user(superuser=True)
        assert can(user, Action.DELETE, Blog)

    def test_authorise_raises_with_reason(self):
        user = make_user()

        with pytest.raises(AuthorizationError) as exc_info:
            authorise(Blog, Action.CREATE, user)

        assert "blogs:add" in exc_info.value.message
        assert exc_info.value.details == {"action": "create"}


class TestUserPolicy:
    def test_cannot_delete_self_even_as_superuser(self):
        user = make_user(user_id=7, superuser=True)
        assert not can(user, Action.DELETE, user)

    def test_can_delete_someone_else(self):
        user = make_user(user_id=7, superuser=True)
        other = make_user(user_id=8)
        assert can(user, Action.DELETE, other)

    def test_can_edit_self(self):
        user = make_user(user_id=7, capabilities=[(CapabilityCategory.USERS, CapabilityName.EDIT)])
        assert can(user, Action.UPDATE, user)


class TestFeatureFlagPolicy:
    def test_flags_cannot_be_created_or_deleted(self):
        user = make_user(superuser=True)

        assert can(user, Action.LIST, FeatureFlag)
        assert can(user, Action.UPDATE, FeatureFlag)
        assert not can(user, Action.CREATE, FeatureFlag)
        assert not can(user, Action.DELETE, FeatureFlag)
