"""
Pytest configuration for Django app tests.
"""

from django.test import Client as DjangoClient

import pytest

from apps.web.core.auth import Caller
from apps.web.core.models import Role
from apps.web.core.tests.factories import UserFactory, UserRoleFactory


@pytest.fixture
def plain_user(db):
    """An authenticated user without any role grant."""
    return UserFactory(username="diner")


@pytest.fixture
def admin_user(db):
    """A user holding the admin role."""
    user = UserFactory(username="owner")
    UserRoleFactory(user=user, role=Role.ADMIN)
    return user


@pytest.fixture
def anonymous() -> Caller:
    return Caller.anonymous()


@pytest.fixture
def user_caller(plain_user) -> Caller:
    return Caller.from_user(plain_user)


@pytest.fixture
def admin_caller(admin_user) -> Caller:
    return Caller.from_user(admin_user)


@pytest.fixture
def api_client() -> DjangoClient:
    """Django test client for API requests."""
    return DjangoClient()


@pytest.fixture
def admin_client_session(admin_user) -> DjangoClient:
    """Test client logged in as an admin."""
    http_client = DjangoClient()
    http_client.force_login(admin_user)
    return http_client


@pytest.fixture
def user_client_session(plain_user) -> DjangoClient:
    """Test client logged in as a user without roles."""
    http_client = DjangoClient()
    http_client.force_login(plain_user)
    return http_client
