"""Shared test fixtures."""

import pytest

from perfect_validator.core.examples import USER_PROFILE_MODEL, get_data_example


@pytest.fixture
def user_profile_model():
    """Fixture providing the example user profile model."""
    return USER_PROFILE_MODEL


@pytest.fixture
def user_profile_cases():
    """Fixture providing the example data sets keyed by name."""
    return {case["name"]: case["data"] for case in get_data_example()}


@pytest.fixture
def order_model():
    """Fixture providing a model with a cross-object dependency."""
    return {
        "order": {
            "type": "M",
            "fields": {
                "total": {"type": "N", "min": 0},
            },
        },
        "payment": {
            "type": "M",
            "fields": {
                "method": {
                    "type": "S",
                    "values": ["CARD", "CASH"],
                    "dependsOn": {
                        "field": "order.total",
                        "condition": lambda total: total > 1000,
                        "validate": lambda method: method != "CASH",
                        "message": "Orders over 1000 cannot be paid in cash",
                    },
                },
            },
        },
    }


@pytest.fixture
def range_model():
    """Fixture providing a model whose fields depend on each other."""
    return {
        "min": {
            "type": "N",
            "dependsOn": {
                "field": "max",
                "condition": lambda maximum: maximum is not None,
                "validate": lambda value, maximum: value <= maximum,
                "message": "min must not exceed max",
            },
        },
        "max": {
            "type": "N",
            "dependsOn": {
                "field": "min",
                "condition": lambda minimum: minimum is not None,
                "validate": lambda value, minimum: value >= minimum,
                "message": "max must not be below min",
            },
        },
    }
