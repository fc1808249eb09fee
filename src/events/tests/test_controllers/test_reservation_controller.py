import typing as t
import uuid
from datetime import timedelta

import orjson
import pytest
from django.test.client import Client
from django.urls import reverse
from django.utils import timezone

from accounts.models import Member
from events.models import Category, Event, Reservation

pytestmark = pytest.mark.django_db


def _create(client: Client, event: Event, category: Category) -> t.Any:
    url = reverse("api:create_reservation")
    payload = {"event_id": str(event.pk), "category_id": str(category.pk)}
    return client.post(url, data=orjson.dumps(payload), content_type="application/json")


def test_create_reservation(member_client: Client, member_user: Member, event: Event, category: Category) -> None:
    response = _create(member_client, event, category)

    assert response.status_code == 201, response.content
    data = response.json()
    assert data["status"] == "held"
    assert data["event_id"] == str(event.pk)
    assert data["category_id"] == str(category.pk)
    assert data["member"]["id"] == str(member_user.pk)
    assert data["qr_payload"].startswith(f"reservation:{data['token']}|")


def test_create_requires_authentication(event: Event, category: Category) -> None:
    response = _create(Client(), event, category)

    assert response.status_code == 401


def test_create_for_non_member_is_forbidden(nonmember_client: Client, event: Event, category: Category) -> None:
    response = _create(nonmember_client, event, category)

    assert response.status_code == 403
    assert response.json() == {"detail": "You do not have permission to perform this action."}


def test_create_unknown_category_is_not_found(nonmember_client: Client, event: Event) -> None:
    url = reverse("api:create_reservation")
    payload = {"event_id": str(event.pk), "category_id": str(uuid.uuid4())}

    response = nonmember_client.post(url, data=orjson.dumps(payload), content_type="application/json")

    assert response.status_code == 404


def test_limit_reached_is_a_conflict(member_client: Client, event: Event, large_category: Category) -> None:
    assert _create(member_client, event, large_category).status_code == 201
    assert _create(member_client, event, large_category).status_code == 201

    response = _create(member_client, event, large_category)

    assert response.status_code == 409
    data = response.json()
    assert data["allowed"] is False
    assert data["reason"] == "limit-reached"
    assert data["limit"] == 2


def test_full_category_is_a_conflict(
    member_client: Client, manager_client: Client, owner_client: Client, event: Event, category: Category
) -> None:
    assert _create(manager_client, event, category).status_code == 201
    assert _create(owner_client, event, category).status_code == 201

    response = _create(member_client, event, category)

    assert response.status_code == 409
    assert response.json()["reason"] == "capacity-exhausted"


def test_cancel_reservation(member_client: Client, event: Event, category: Category) -> None:
    reservation_id = _create(member_client, event, category).json()["id"]
    url = reverse("api:cancel_reservation", kwargs={"reservation_id": reservation_id})

    response = member_client.post(url)

    assert response.status_code == 204
    assert Reservation.objects.get(pk=reservation_id).status == Reservation.Status.CANCELLED

    second = member_client.post(url)
    assert second.status_code == 409
    assert second.json()["reason"] == "not-cancellable"


def test_cancel_by_stranger_is_forbidden(
    member_client: Client, nonmember_client: Client, event: Event, category: Category
) -> None:
    reservation_id = _create(member_client, event, category).json()["id"]
    url = reverse("api:cancel_reservation", kwargs={"reservation_id": reservation_id})

    response = nonmember_client.post(url)

    assert response.status_code == 403


def test_check_in_flow(manager_client: Client, member_client: Client, event: Event, category: Category) -> None:
    token = _create(member_client, event, category).json()["token"]
    url = reverse("api:check_in_reservation", kwargs={"token": token})

    too_early = manager_client.post(url)
    assert too_early.status_code == 409
    assert too_early.json()["reason"] == "outside-checkin-window"
    assert "opens_at" in too_early.json()

    now = timezone.now()
    Event.objects.filter(pk=event.pk).update(start=now + timedelta(minutes=30), end=now + timedelta(hours=2))
    response = manager_client.post(url)

    assert response.status_code == 200, response.content
    assert response.json()["status"] == "checked_in"


def test_member_cannot_check_in(member_client: Client, event: Event, category: Category) -> None:
    token = _create(member_client, event, category).json()["token"]
    url = reverse("api:check_in_reservation", kwargs={"token": token})

    response = member_client.post(url)

    assert response.status_code == 403


def test_get_reservation(member_client: Client, manager_client: Client, event: Event, category: Category) -> None:
    reservation_id = _create(member_client, event, category).json()["id"]
    url = reverse("api:get_reservation", kwargs={"reservation_id": reservation_id})

    assert member_client.get(url).status_code == 200
    assert manager_client.get(url).json()["id"] == reservation_id


def test_list_my_reservations(member_client: Client, event: Event, large_category: Category) -> None:
    first = _create(member_client, event, large_category).json()["id"]
    second = _create(member_client, event, large_category).json()["id"]
    member_client.post(reverse("api:cancel_reservation", kwargs={"reservation_id": first}))

    response = member_client.get(reverse("api:list_my_reservations"))
    held = member_client.get(reverse("api:list_my_reservations"), {"status": "held"})

    assert response.status_code == 200
    assert response.json()["count"] == 2
    assert [r["id"] for r in held.json()["results"]] == [second]


def test_list_other_members_reservations_is_forbidden(
    manager_client: Client, member_user: Member, member_membership: object
) -> None:
    url = reverse("api:list_member_reservations", kwargs={"member_id": member_user.pk})

    assert manager_client.get(url).status_code == 403


def test_list_event_reservations_for_managers(
    manager_client: Client, member_client: Client, event: Event, category: Category
) -> None:
    _create(member_client, event, category)
    event_url = reverse("api:list_event_reservations", kwargs={"event_id": event.pk})
    category_url = reverse("api:list_category_reservations", kwargs={"category_id": category.pk})

    assert manager_client.get(event_url).json()["count"] == 1
    assert manager_client.get(category_url).json()["count"] == 1
    assert member_client.get(event_url).status_code == 403
