import re
import string

from rest_framework import serializers

_USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_.]+$")
MIN_PHONE_DIGITS = 10


def validate_username(value: str) -> str:
    """Usernames: at least 3 characters of letters, digits, ``_`` or ``.``."""
    if value is None:
        raise serializers.ValidationError("Username is required.")
    trimmed = value.strip()
    if len(trimmed) < 3:
        raise serializers.ValidationError(
            "Username must be at least 3 characters long."
        )
    if not _USERNAME_PATTERN.match(trimmed):
        raise serializers.ValidationError(
            "Username may contain only letters, numbers, underscores and dots."
        )
    return trimmed


def validate_password(value: str) -> str:
    """
    Passwords need at least 8 characters, one letter, one digit and one
    punctuation character.
    """
    if value is None:
        raise serializers.ValidationError("Password is required.")
    if len(value) < 8:
        raise serializers.ValidationError(
            "Password must be at least 8 characters long."
        )
    if not any(ch.isalpha() for ch in value):
        raise serializers.ValidationError("Password must include at least one letter.")
    if not any(ch.isdigit() for ch in value):
        raise serializers.ValidationError("Password must include at least one number.")
    if not any(ch in string.punctuation for ch in value):
        raise serializers.ValidationError(
            "Password must include at least one special character."
        )
    return value


def validate_phone(value: str) -> str:
    """Phone numbers are free-form but must carry at least ten digits."""
    if value is None:
        raise serializers.ValidationError("Phone number is required.")
    trimmed = value.strip()
    digits = sum(1 for ch in trimmed if ch.isdigit())
    if digits < MIN_PHONE_DIGITS:
        raise serializers.ValidationError(
            f"Phone number must contain at least {MIN_PHONE_DIGITS} digits."
        )
    return trimmed
