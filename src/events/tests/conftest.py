import typing as t
from datetime import datetime, timedelta

import pytest

from accounts.models import Member
from events.models import Category, Club, Event, Membership


@pytest.fixture
def owner_user(django_user_model: t.Type[Member]) -> Member:
    return django_user_model.objects.create_user(username="owner_user", email="owner@example.com", password="pass")


@pytest.fixture
def manager_user(django_user_model: t.Type[Member]) -> Member:
    return django_user_model.objects.create_user(
        username="manager_user", email="manager@example.com", password="pass"
    )


@pytest.fixture
def member_user(django_user_model: t.Type[Member]) -> Member:
    return django_user_model.objects.create_user(username="member_user", email="member@example.com", password="pass")


@pytest.fixture
def nonmember_user(django_user_model: t.Type[Member]) -> Member:
    return django_user_model.objects.create_user(username="nonmember_user", email="c@example.com", password="pass")


@pytest.fixture
def club(owner_user: Member) -> Club:
    club = Club.objects.create(name="Racket Club")
    Membership.objects.create(club=club, member=owner_user, role=Membership.Role.OWNER)
    return club


@pytest.fixture
def other_club(nonmember_user: Member) -> Club:
    """A second club, owned by someone with no role in ``club``."""
    club = Club.objects.create(name="Chess Club")
    Membership.objects.create(club=club, member=nonmember_user, role=Membership.Role.OWNER)
    return club


@pytest.fixture
def manager_membership(club: Club, manager_user: Member) -> Membership:
    return Membership.objects.create(club=club, member=manager_user, role=Membership.Role.MANAGER)


@pytest.fixture
def member_membership(club: Club, member_user: Member) -> Membership:
    return Membership.objects.create(club=club, member=member_user, role=Membership.Role.ORDINARY)


@pytest.fixture
def event(club: Club, next_week: datetime) -> Event:
    return Event.objects.create(
        club=club,
        name="Doubles Night",
        location="Court House",
        start=next_week,
        end=next_week + timedelta(hours=2),
    )


@pytest.fixture
def other_event(club: Club, next_week: datetime) -> Event:
    return Event.objects.create(
        club=club,
        name="Singles Morning",
        start=next_week + timedelta(days=1),
        end=next_week + timedelta(days=1, hours=3),
    )


@pytest.fixture
def category(event: Event) -> Category:
    return Category.objects.create(event=event, name="Court 1", capacity=2)


@pytest.fixture
def large_category(event: Event) -> Category:
    return Category.objects.create(event=event, name="Main Hall", capacity=50)
