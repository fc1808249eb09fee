from datetime import timedelta

import pytest

from accounts.models import Member
from events.models import Category, Event, Rating, Reservation
from events.service.booking import EligibilityValidator, Reasons
from events.service.booking.eligibility import ensure_allowed
from events.service.booking.types import BookingConflictError

pytestmark = pytest.mark.django_db


class TestBooking:
    def test_allowed(self, member_user: Member, event: Event, category: Category) -> None:
        verdict = EligibilityValidator(member_user, event, category=category).check_booking()

        assert verdict.allowed is True
        assert verdict.reason is None
        assert verdict.category_id == category.pk

    def test_cancelled_event(self, member_user: Member, event: Event, category: Category) -> None:
        event.is_active = False

        verdict = EligibilityValidator(member_user, event, category=category).check_booking()

        assert verdict.allowed is False
        assert verdict.reason == Reasons.EVENT_NOT_BOOKABLE

    def test_started_event(self, member_user: Member, event: Event, category: Category) -> None:
        verdict = EligibilityValidator(member_user, event, category=category, now=event.start).check_booking()

        assert verdict.reason == Reasons.EVENT_NOT_BOOKABLE

    def test_category_of_another_event(
        self, member_user: Member, other_event: Event, category: Category
    ) -> None:
        verdict = EligibilityValidator(member_user, other_event, category=category).check_booking()

        assert verdict.reason == Reasons.CATEGORY_MISMATCH
        assert verdict.category_id == category.pk

    def test_limit_counts_only_held(self, member_user: Member, event: Event, large_category: Category) -> None:
        Reservation.objects.create(member=member_user, event=event, category=large_category)
        Reservation.objects.create(
            member=member_user, event=event, category=large_category, status=Reservation.Status.CANCELLED
        )
        Reservation.objects.create(
            member=member_user, event=event, category=large_category, status=Reservation.Status.CHECKED_IN
        )

        assert EligibilityValidator(member_user, event, category=large_category).check_booking().allowed is True

    def test_limit_reached(self, member_user: Member, event: Event, large_category: Category) -> None:
        Reservation.objects.create(member=member_user, event=event, category=large_category)
        Reservation.objects.create(member=member_user, event=event, category=large_category)

        verdict = EligibilityValidator(member_user, event, category=large_category).check_booking()

        assert verdict.reason == Reasons.LIMIT_REACHED
        assert verdict.limit == 2

    def test_limit_is_per_event(
        self, member_user: Member, event: Event, other_event: Event, large_category: Category
    ) -> None:
        Reservation.objects.create(member=member_user, event=event, category=large_category)
        Reservation.objects.create(member=member_user, event=event, category=large_category)
        other_category = Category.objects.create(event=other_event, name="Court 9", capacity=5)

        assert EligibilityValidator(member_user, other_event, category=other_category).check_booking().allowed

    def test_event_override_of_limit(self, member_user: Member, event: Event, large_category: Category) -> None:
        event.max_reservations_per_member = 1
        event.save()
        Reservation.objects.create(member=member_user, event=event, category=large_category)

        verdict = EligibilityValidator(member_user, event, category=large_category).check_booking()

        assert verdict.reason == Reasons.LIMIT_REACHED
        assert verdict.limit == 1

    def test_not_bookable_wins_over_limit(self, member_user: Member, event: Event, large_category: Category) -> None:
        Reservation.objects.create(member=member_user, event=event, category=large_category)
        Reservation.objects.create(member=member_user, event=event, category=large_category)
        event.is_active = False

        verdict = EligibilityValidator(member_user, event, category=large_category).check_booking()

        assert verdict.reason == Reasons.EVENT_NOT_BOOKABLE


class TestCancellation:
    @pytest.fixture
    def reservation(self, member_user: Member, event: Event, category: Category) -> Reservation:
        return Reservation.objects.create(member=member_user, event=event, category=category)

    def test_allowed_before_start(self, member_user: Member, event: Event, reservation: Reservation) -> None:
        verdict = EligibilityValidator(member_user, event, reservation=reservation).check_cancellation()

        assert verdict.allowed is True
        assert verdict.reservation_id == reservation.pk

    def test_refused_once_started(self, member_user: Member, event: Event, reservation: Reservation) -> None:
        now = event.start + timedelta(minutes=1)

        verdict = EligibilityValidator(member_user, event, reservation=reservation, now=now).check_cancellation()

        assert verdict.reason == Reasons.NOT_CANCELLABLE

    @pytest.mark.parametrize("status", [Reservation.Status.CANCELLED, Reservation.Status.CHECKED_IN])
    def test_refused_when_not_held(
        self, member_user: Member, event: Event, reservation: Reservation, status: Reservation.Status
    ) -> None:
        reservation.status = status

        verdict = EligibilityValidator(member_user, event, reservation=reservation).check_cancellation()

        assert verdict.reason == Reasons.NOT_CANCELLABLE


class TestCheckIn:
    @pytest.fixture
    def reservation(self, member_user: Member, event: Event, category: Category) -> Reservation:
        return Reservation.objects.create(member=member_user, event=event, category=category)

    @pytest.mark.parametrize(
        "offset,expected",
        [
            (timedelta(minutes=-61), False),
            (timedelta(minutes=-60), True),
            (timedelta(minutes=-55), True),
            (timedelta(hours=2), True),
            (timedelta(hours=2, minutes=1), False),
        ],
    )
    def test_window(
        self, manager_user: Member, event: Event, reservation: Reservation, offset: timedelta, expected: bool
    ) -> None:
        now = event.start + offset

        verdict = EligibilityValidator(manager_user, event, reservation=reservation, now=now).check_check_in()

        assert verdict.allowed is expected
        if not expected:
            assert verdict.reason == Reasons.OUTSIDE_CHECKIN_WINDOW
            assert verdict.opens_at == event.start - timedelta(hours=1)
            assert verdict.closes_at == event.end

    def test_cancelled_event_refuses_check_in(
        self, manager_user: Member, event: Event, reservation: Reservation
    ) -> None:
        event.is_active = False

        verdict = EligibilityValidator(manager_user, event, reservation=reservation, now=event.start).check_check_in()

        assert verdict.reason == Reasons.OUTSIDE_CHECKIN_WINDOW

    def test_already_checked_in(self, manager_user: Member, event: Event, reservation: Reservation) -> None:
        reservation.status = Reservation.Status.CHECKED_IN

        verdict = EligibilityValidator(manager_user, event, reservation=reservation, now=event.start).check_check_in()

        assert verdict.reason == Reasons.NOT_HELD


class TestRating:
    def test_requires_finished_event(self, member_user: Member, event: Event, category: Category) -> None:
        Reservation.objects.create(
            member=member_user, event=event, category=category, status=Reservation.Status.CHECKED_IN
        )

        verdict = EligibilityValidator(member_user, event, now=event.end).check_rating()

        assert verdict.reason == Reasons.NOT_RATABLE

    def test_requires_attendance(self, member_user: Member, event: Event, category: Category) -> None:
        Reservation.objects.create(member=member_user, event=event, category=category)

        verdict = EligibilityValidator(member_user, event, now=event.end + timedelta(minutes=1)).check_rating()

        assert verdict.reason == Reasons.NOT_RATABLE

    def test_only_once(self, member_user: Member, event: Event, category: Category) -> None:
        Reservation.objects.create(
            member=member_user, event=event, category=category, status=Reservation.Status.CHECKED_IN
        )
        Rating.objects.create(
            event=event, member=member_user, ambiance=4, cleanliness=4, organisation=4, fair_play=4, skill_level=4
        )

        verdict = EligibilityValidator(member_user, event, now=event.end + timedelta(minutes=1)).check_rating()

        assert verdict.reason == Reasons.ALREADY_RATED

    def test_allowed(self, member_user: Member, event: Event, category: Category) -> None:
        Reservation.objects.create(
            member=member_user, event=event, category=category, status=Reservation.Status.CHECKED_IN
        )

        verdict = EligibilityValidator(member_user, event, now=event.end + timedelta(minutes=1)).check_rating()

        assert verdict.allowed is True


def test_ensure_allowed_raises_with_verdict(member_user: Member, event: Event, category: Category) -> None:
    event.is_active = False
    verdict = EligibilityValidator(member_user, event, category=category).check_booking()

    with pytest.raises(BookingConflictError) as exc_info:
        ensure_allowed(verdict, "nope")

    assert exc_info.value.verdict is verdict
    assert str(exc_info.value) == "nope"
