import typing as t

import pytest

from accounts.models import Member
from events import schema
from events.exceptions import AccessDeniedError
from events.models import Club, Membership
from events.service import club_service
from events.service.booking import BookingConflictError, Reasons

pytestmark = pytest.mark.django_db


def test_create_club_makes_the_creator_owner(member_user: Member) -> None:
    club = club_service.create_club(member_user, schema.ClubCreateSchema(name="Tennis Society", description="Courts"))

    membership = Membership.objects.get(club=club)
    assert membership.member == member_user
    assert membership.role == Membership.Role.OWNER
    assert club.slug == "tennis-society"


class TestJoin:
    def test_join_as_ordinary(self, club: Club, member_user: Member) -> None:
        membership = club_service.join_club(member_user, club)

        assert membership.role == Membership.Role.ORDINARY
        assert club.members.filter(pk=member_user.pk).exists()

    def test_join_twice(self, club: Club, member_user: Member, member_membership: Membership) -> None:
        with pytest.raises(BookingConflictError) as exc_info:
            club_service.join_club(member_user, club)

        assert exc_info.value.verdict.reason == Reasons.ALREADY_MEMBER

    def test_inactive_club(self, club: Club, member_user: Member) -> None:
        club.is_active = False
        club.save()

        with pytest.raises(BookingConflictError) as exc_info:
            club_service.join_club(member_user, club)

        assert exc_info.value.verdict.reason == Reasons.CLUB_INACTIVE


class TestRoster:
    def test_managers_list_members(
        self, club: Club, manager_user: Member, manager_membership: Membership, member_membership: Membership
    ) -> None:
        memberships = club_service.list_memberships(manager_user, club)

        assert {m.role for m in memberships} == {"owner", "manager", "ordinary"}

    def test_ordinary_members_cannot(self, club: Club, member_user: Member, member_membership: Membership) -> None:
        with pytest.raises(AccessDeniedError):
            club_service.list_memberships(member_user, club)


class TestChangeRole:
    def test_owner_promotes(self, owner_user: Member, member_membership: Membership) -> None:
        membership = club_service.change_role(owner_user, member_membership, Membership.Role.MANAGER)

        assert membership.role == Membership.Role.MANAGER

    def test_manager_cannot_promote(
        self, manager_user: Member, manager_membership: Membership, member_membership: Membership
    ) -> None:
        with pytest.raises(AccessDeniedError):
            club_service.change_role(manager_user, member_membership, Membership.Role.MANAGER)

    def test_ownership_is_not_transferable(self, owner_user: Member, member_membership: Membership) -> None:
        with pytest.raises(BookingConflictError) as exc_info:
            club_service.change_role(owner_user, member_membership, Membership.Role.OWNER)

        assert exc_info.value.verdict.reason == Reasons.MEMBERSHIP_PROTECTED

    def test_owner_cannot_demote_self(self, club: Club, owner_user: Member) -> None:
        own = Membership.objects.get(club=club, member=owner_user)

        with pytest.raises(BookingConflictError):
            club_service.change_role(owner_user, own, Membership.Role.ORDINARY)

    def test_only_manager_cannot_be_demoted(self, owner_user: Member, manager_membership: Membership) -> None:
        with pytest.raises(BookingConflictError) as exc_info:
            club_service.change_role(owner_user, manager_membership, Membership.Role.ORDINARY)

        assert exc_info.value.verdict.reason == Reasons.MEMBERSHIP_PROTECTED
        manager_membership.refresh_from_db()
        assert manager_membership.role == Membership.Role.MANAGER

    def test_one_of_two_managers_can_be_demoted(
        self, club: Club, owner_user: Member, manager_membership: Membership, member_factory: t.Callable[..., Member]
    ) -> None:
        Membership.objects.create(club=club, member=member_factory(), role=Membership.Role.MANAGER)

        membership = club_service.change_role(owner_user, manager_membership, Membership.Role.ORDINARY)

        assert membership.role == Membership.Role.ORDINARY


class TestRemove:
    def test_member_leaves(self, club: Club, member_user: Member, member_membership: Membership) -> None:
        club_service.remove_membership(member_user, member_membership)

        assert not Membership.objects.filter(club=club, member=member_user).exists()

    def test_manager_removes_member(
        self, manager_user: Member, manager_membership: Membership, member_membership: Membership
    ) -> None:
        club_service.remove_membership(manager_user, member_membership)

        assert not Membership.objects.filter(pk=member_membership.pk).exists()

    def test_member_cannot_remove_others(
        self, club: Club, member_user: Member, member_membership: Membership, member_factory: t.Callable[..., Member]
    ) -> None:
        other = Membership.objects.create(club=club, member=member_factory())

        with pytest.raises(AccessDeniedError):
            club_service.remove_membership(member_user, other)

    def test_owner_cannot_be_removed(
        self, club: Club, owner_user: Member, manager_user: Member, manager_membership: Membership
    ) -> None:
        owner_membership = Membership.objects.get(club=club, member=owner_user)

        with pytest.raises(BookingConflictError) as exc_info:
            club_service.remove_membership(manager_user, owner_membership)

        assert exc_info.value.verdict.reason == Reasons.MEMBERSHIP_PROTECTED

    def test_only_manager_cannot_leave(self, manager_user: Member, manager_membership: Membership) -> None:
        with pytest.raises(BookingConflictError):
            club_service.remove_membership(manager_user, manager_membership)
