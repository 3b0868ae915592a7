from datetime import date, time
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model


@pytest.fixture
def owner(db):
    return get_user_model().objects.create_user(
        username="owner",
        email="owner@example.com",
        password="OwnerPass123",
        first_name="Priya",
        last_name="Owner",
    )


@pytest.fixture
def seeker(db):
    return get_user_model().objects.create_user(
        username="seeker",
        email="seeker@example.com",
        password="SeekerPass123",
        first_name="Ravi",
        last_name="Seeker",
    )


@pytest.fixture
def make_space(owner):
    from apps.spaces.models import ParkingSpace

    def factory(**overrides):
        fields = {
            "owner": owner,
            "title": "Covered parking near MG Road",
            "address": "12 MG Road, Bengaluru",
            "availability_date_from": date(2025, 1, 1),
            "availability_date_to": date(2025, 1, 31),
            "availability_time_from": time(8, 0),
            "availability_time_to": time(20, 0),
            "price_per_hour": Decimal("50.00"),
            "price_per_day": None,
            "capacity": 1,
        }
        fields.update(overrides)
        return ParkingSpace.objects.create(**fields)

    return factory


@pytest.fixture
def space(make_space):
    return make_space()
