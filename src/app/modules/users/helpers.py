"""
User helper functions.
"""

from typing import Any

PROFILE_FIELDS = (
    "full_name",
    "email",
    "country",
    "academic_level",
    "phone",
    "address",
    "date_of_birth",
)


def calculate_profile_completion(user: Any) -> int:
    """
    Percentage of profile fields filled in, rounded to the nearest integer.

    Accepts a User model or any object/dict exposing the profile fields.
    Empty strings count as missing.
    """

    def _value(name: str) -> Any:
        if isinstance(user, dict):
            return user.get(name)
        return getattr(user, name, None)

    completed = sum(1 for name in PROFILE_FIELDS if _value(name) not in (None, ""))
    return round(completed / len(PROFILE_FIELDS) * 100)
