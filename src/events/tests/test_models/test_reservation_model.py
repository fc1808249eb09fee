import pytest
from django.core.exceptions import ValidationError

from accounts.models import Member
from events.exceptions import IllegalTransitionError
from events.models import Category, Event, Reservation

pytestmark = pytest.mark.django_db


@pytest.fixture
def reservation(member_user: Member, event: Event, category: Category) -> Reservation:
    return Reservation.objects.create(member=member_user, event=event, category=category)


def test_new_reservation_is_held_with_a_token(reservation: Reservation) -> None:
    assert reservation.status == Reservation.Status.HELD
    assert reservation.token is not None
    assert reservation.cancelled_at is None
    assert reservation.checked_in_at is None


def test_tokens_are_unique(member_user: Member, event: Event, category: Category) -> None:
    first = Reservation.objects.create(member=member_user, event=event, category=category)
    second = Reservation.objects.create(member=member_user, event=event, category=category)
    assert first.token != second.token


def test_category_must_belong_to_event(member_user: Member, other_event: Event, category: Category) -> None:
    with pytest.raises(ValidationError) as exc_info:
        Reservation.objects.create(member=member_user, event=other_event, category=category)
    assert "category" in exc_info.value.message_dict


def test_held_to_cancelled_records_who_and_when(reservation: Reservation, manager_user: Member) -> None:
    reservation.transition_to(Reservation.Status.CANCELLED, by=manager_user)

    assert reservation.status == Reservation.Status.CANCELLED
    assert reservation.cancelled_by == manager_user
    assert reservation.cancelled_at is not None


def test_held_to_checked_in_records_who_and_when(reservation: Reservation, manager_user: Member) -> None:
    reservation.transition_to(Reservation.Status.CHECKED_IN, by=manager_user)

    assert reservation.status == Reservation.Status.CHECKED_IN
    assert reservation.checked_in_by == manager_user
    assert reservation.checked_in_at is not None


@pytest.mark.parametrize(
    "terminal,target",
    [
        (Reservation.Status.CANCELLED, Reservation.Status.CANCELLED),
        (Reservation.Status.CANCELLED, Reservation.Status.CHECKED_IN),
        (Reservation.Status.CANCELLED, Reservation.Status.HELD),
        (Reservation.Status.CHECKED_IN, Reservation.Status.CHECKED_IN),
        (Reservation.Status.CHECKED_IN, Reservation.Status.CANCELLED),
        (Reservation.Status.CHECKED_IN, Reservation.Status.HELD),
    ],
)
def test_terminal_statuses_reject_every_transition(
    reservation: Reservation, member_user: Member, terminal: Reservation.Status, target: Reservation.Status
) -> None:
    reservation.transition_to(terminal, by=member_user)

    with pytest.raises(IllegalTransitionError):
        reservation.transition_to(target, by=member_user)
    assert reservation.status == terminal


def test_held_cannot_move_to_held(reservation: Reservation, member_user: Member) -> None:
    with pytest.raises(IllegalTransitionError):
        reservation.transition_to(Reservation.Status.HELD, by=member_user)


def test_qr_payload_embeds_identifiers(reservation: Reservation) -> None:
    payload = reservation.qr_payload
    assert f"reservation:{reservation.token}" in payload
    assert f"event:{reservation.event_id}" in payload
    assert f"category:{reservation.category_id}" in payload
    assert f"member:{reservation.member_id}" in payload


def test_seat_holding_queryset(member_user: Member, event: Event, large_category: Category) -> None:
    held = Reservation.objects.create(member=member_user, event=event, category=large_category)
    checked_in = Reservation.objects.create(
        member=member_user, event=event, category=large_category, status=Reservation.Status.CHECKED_IN
    )
    Reservation.objects.create(
        member=member_user, event=event, category=large_category, status=Reservation.Status.CANCELLED
    )

    assert set(Reservation.objects.seat_holding()) == {held, checked_in}
