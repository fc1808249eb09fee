import typing as t

import pytest
from django.test.client import Client
from django.urls import reverse

pytestmark = pytest.mark.django_db


def test_request_id_is_generated(client: Client) -> None:
    response = client.get(reverse("api:healthcheck"))

    assert response["X-Request-ID"]


def test_request_id_is_propagated(client: Client) -> None:
    response = client.get(reverse("api:healthcheck"), HTTP_X_REQUEST_ID="req-1234")

    assert response["X-Request-ID"] == "req-1234"


def test_middleware_can_be_disabled(client: Client, settings: t.Any) -> None:
    settings.ENABLE_OBSERVABILITY = False

    response = client.get(reverse("api:healthcheck"))

    assert "X-Request-ID" not in response
