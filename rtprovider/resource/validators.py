"""Field validators for declarative resource schemas.

A validator takes the attribute value and its key and returns a list of
error messages; an empty list means the value is valid.
"""

import re
from typing import Any, Callable, Iterable, List
from urllib.parse import urlparse

Validator = Callable[[Any, str], List[str]]


def all_of(*validators: Validator) -> Validator:
    """Run every validator and collect all of their errors."""

    def validate(value: Any, key: str) -> List[str]:
        errors: List[str] = []
        for validator in validators:
            errors.extend(validator(value, key))
        return errors

    return validate


def _expect_str(value: Any, key: str) -> List[str]:
    if not isinstance(value, str):
        return [f"expected type of {key} to be string"]
    return []


def string_does_not_match(pattern: "re.Pattern[str]", message: str) -> Validator:
    def validate(value: Any, key: str) -> List[str]:
        errors = _expect_str(value, key)
        if errors:
            return errors
        if pattern.match(value):
            return [f"invalid value for {key} ({message})"]
        return []

    return validate


def string_does_not_contain_any(chars: str) -> Validator:
    def validate(value: Any, key: str) -> List[str]:
        errors = _expect_str(value, key)
        if errors:
            return errors
        if any(c in chars for c in value):
            return [f"expected value of {key} to not contain any of {chars!r}, got {value!r}"]
        return []

    return validate


def string_in_slice(valid: Iterable[str], ignore_case: bool = False) -> Validator:
    options = list(valid)

    def validate(value: Any, key: str) -> List[str]:
        errors = _expect_str(value, key)
        if errors:
            return errors
        for option in options:
            if value == option or (ignore_case and value.lower() == option.lower()):
                return []
        return [f"expected {key} to be one of {options}, got {value}"]

    return validate


def int_at_least(minimum: int) -> Validator:
    def validate(value: Any, key: str) -> List[str]:
        if isinstance(value, bool) or not isinstance(value, int):
            return [f"expected type of {key} to be integer"]
        if value < minimum:
            return [f"expected {key} to be at least ({minimum}), got {value}"]
        return []

    return validate


def is_url_with_http_or_https(value: Any, key: str) -> List[str]:
    errors = _expect_str(value, key)
    if errors:
        return errors
    if value == "":
        return [f"expected {key} to not be empty"]
    parsed = urlparse(value)
    if not parsed.netloc:
        return [f"expected {key} to have a host, got {value}"]
    if parsed.scheme not in ("http", "https"):
        return [f"expected {key} to have a url with schema of: \"http,https\", got {value}"]
    return []
