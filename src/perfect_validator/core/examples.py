"""
Example model and data sets.

The user profile model exercises nested maps, enumerations, list items and
cross-object dependencies. The accompanying data sets cover two valid
profiles and two that violate a dependency.
"""

import copy
from typing import Any, Dict, List

USER_PROFILE_MODEL: Dict[str, Any] = {
    "user": {
        "type": "M",
        "fields": {
            "name": {"type": "S", "minLength": 2},
            "age": {"type": "N", "min": 13},
            "email": {"type": "EMAIL"},
            "subscription": {
                "type": "M",
                "fields": {
                    "plan": {
                        "type": "S",
                        "values": ["FREE", "BASIC", "PREMIUM"],
                        "dependsOn": {
                            "field": "user.age",
                            "condition": lambda age: age < 18,
                            "validate": lambda plan: plan != "PREMIUM",
                            "message": "Users under 18 cannot have PREMIUM plan",
                        },
                    },
                    "features": {
                        "type": "L",
                        "items": {"type": "S"},
                        "dependsOn": {
                            "field": "user.subscription.plan",
                            "condition": lambda plan: plan == "FREE",
                            "validate": lambda features: len(features) <= 3,
                            "message": "FREE plan can only have up to 3 features",
                        },
                    },
                    "paymentMethod": {
                        "type": "S",
                        "values": ["CREDIT_CARD", "DEBIT_CARD", "PAYPAL"],
                        "dependsOn": [
                            {
                                "field": "user.age",
                                "condition": lambda age: age < 18,
                                "validate": lambda method: method == "DEBIT_CARD",
                                "message": "Users under 18 can only use debit cards",
                            },
                            {
                                "field": "user.subscription.plan",
                                "condition": lambda plan: plan == "PREMIUM",
                                "validate": lambda method: method == "CREDIT_CARD",
                                "message": "PREMIUM plan requires credit card payment",
                            },
                        ],
                    },
                },
            },
        },
    },
}


def _profile(name: str, age: int, email: str, plan: str, features: List[str], payment_method: str) -> Dict[str, Any]:
    return {
        "user": {
            "name": name,
            "age": age,
            "email": email,
            "subscription": {"plan": plan, "features": features, "paymentMethod": payment_method},
        }
    }


USER_PROFILE_TEST_CASES: List[Dict[str, Any]] = [
    {
        "name": "Valid adult premium user",
        "data": _profile(
            "John Doe",
            25,
            "john@example.com",
            "PREMIUM",
            ["feature1", "feature2", "feature3", "feature4"],
            "CREDIT_CARD",
        ),
    },
    {
        "name": "Valid teen user with free plan",
        "data": _profile("Teen User", 15, "teen@example.com", "FREE", ["feature1", "feature2"], "DEBIT_CARD"),
    },
    {
        "name": "Invalid - Teen trying premium plan",
        "data": _profile(
            "Teen Premium", 16, "teen.premium@example.com", "PREMIUM", ["feature1", "feature2"], "DEBIT_CARD"
        ),
    },
    {
        "name": "Invalid - Free plan with too many features",
        "data": _profile(
            "Free User", 20, "free@example.com", "FREE", ["feature1", "feature2", "feature3", "feature4"], "PAYPAL"
        ),
    },
]


def get_model_example() -> Dict[str, Any]:
    """Return a fresh copy of the example user profile model."""
    return copy.deepcopy(USER_PROFILE_MODEL)


def get_data_example() -> List[Dict[str, Any]]:
    """Return a fresh copy of the example data sets, each with ``name`` and ``data``."""
    return copy.deepcopy(USER_PROFILE_TEST_CASES)
