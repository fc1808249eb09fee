import pytest
from django.test.client import Client
from ninja_jwt.tokens import RefreshToken

from accounts.models import Member
from events.models import Membership


def _client_for(user: Member) -> Client:
    refresh = RefreshToken.for_user(user)
    return Client(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")  # type: ignore[attr-defined]


@pytest.fixture
def owner_client(owner_user: Member) -> Client:
    return _client_for(owner_user)


@pytest.fixture
def manager_client(manager_user: Member, manager_membership: Membership) -> Client:
    return _client_for(manager_user)


@pytest.fixture
def member_client(member_user: Member, member_membership: Membership) -> Client:
    return _client_for(member_user)


@pytest.fixture
def nonmember_client(nonmember_user: Member) -> Client:
    return _client_for(nonmember_user)
