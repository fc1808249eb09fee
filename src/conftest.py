import secrets
import string
import typing as t
from datetime import datetime, time, timedelta

import faker
import pytest
from django.utils import timezone

from accounts.models import Member


class MemberFactory:
    """Factory for creating Member instances for testing."""

    fake = faker.Faker()

    def create_user(self, **kwargs: t.Any) -> Member:
        username = kwargs.pop(
            "username", "".join(secrets.choice(string.ascii_lowercase) for _ in range(8)) + "@member.test"
        )
        email = kwargs.pop("email", username if "@" in username else f"{username}@member.test")
        password = kwargs.pop("password", "password")
        first_name = kwargs.pop("first_name", self.fake.first_name())
        last_name = kwargs.pop("last_name", self.fake.last_name())
        return Member.objects.create_user(
            username=username,
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
            **kwargs,
        )

    def __call__(self, **kwargs: t.Any) -> Member:
        return self.create_user(**kwargs)


@pytest.fixture
def member_factory() -> MemberFactory:
    return MemberFactory()


@pytest.fixture
def next_week() -> datetime:
    today = timezone.now()
    same_time_next_week = today + timedelta(days=7)
    noon = time(hour=12, minute=0)
    return timezone.make_aware(
        datetime.combine(same_time_next_week.date(), noon),
        timezone.get_current_timezone(),
    )
