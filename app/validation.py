"""Explicit, storage independent validation for startup and user input.

``validate_startup`` returns a list of ``(field, message)`` violations using
the camelCase field names clients send, so the messages can be echoed back
as-is. Nothing here touches the database.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional

from .errors import Violation
from .models import BusinessModel, ContactMethod, FundingStatus, Industry, Stage

# (python attribute, wire name)
STARTUP_FIELDS = (
    ("name", "name"),
    ("tagline", "tagline"),
    ("industry", "industry"),
    ("stage", "stage"),
    ("founded_date", "foundedDate"),
    ("business_model", "businessModel"),
    ("funding_status", "fundingStatus"),
    ("funding_amount", "fundingAmount"),
    ("revenue_model", "revenueModel"),
    ("years_in_op", "yearsInOp"),
    ("preferred_contact_method", "preferredContactMethod"),
    ("newsletter_subscription", "newsletterSubscription"),
)
WIRE_NAMES = dict(STARTUP_FIELDS)

_LENGTH_BOUNDS = {
    "name": (2, 20),
    "tagline": (5, 160),
    "revenue_model": (10, 1000),
}
_ENUMS = {
    "industry": Industry,
    "stage": Stage,
    "business_model": BusinessModel,
    "funding_status": FundingStatus,
}
_NUMERIC_BOUNDS = {
    "funding_amount": (0, None),
    "years_in_op": (0, 10000),
}
_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}

USERNAME_MIN_LENGTH = 2
PASSWORD_MIN_LENGTH = 6
_PASSWORD_CLASSES = (r"[a-z]", r"[A-Z]", r"\d", r"[^A-Za-z0-9]")


def _to_number(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return value
        return int(number) if number.is_integer() else number
    return value


def _to_bool(value: Any) -> Any:
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
    return value


def _to_date(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            return value
    return value


def split_contact_methods(value: Any) -> Any:
    """Split a comma-separated contact method string into a list."""
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return value


def coerce_startup_fields(raw: Mapping[str, Any]) -> Dict[str, Any]:
    """Turn multipart text values into typed values.

    Only keys present in ``raw`` are returned. Values that cannot be
    converted are passed through so validation can report them.
    """

    out: Dict[str, Any] = {}
    for key, value in raw.items():
        if key in _NUMERIC_BOUNDS:
            value = _to_number(value)
        elif key == "newsletter_subscription":
            value = _to_bool(value)
        elif key == "founded_date":
            value = _to_date(value)
        elif key == "preferred_contact_method":
            value = split_contact_methods(value)
        out[key] = value
    return out


def validate_startup(doc: Mapping[str, Any]) -> List[Violation]:
    """Return every constraint the merged startup document violates."""

    violations: List[Violation] = []

    def add(key: str, message: str) -> None:
        violations.append((WIRE_NAMES.get(key, key), message))

    for key, (low, high) in _LENGTH_BOUNDS.items():
        value = doc.get(key)
        if value is None or value == "":
            add(key, "is required")
        elif not isinstance(value, str):
            add(key, "must be text")
        elif not low <= len(value) <= high:
            add(key, f"must be between {low} and {high} characters")

    for key, enum_cls in _ENUMS.items():
        value = doc.get(key)
        allowed = [member.value for member in enum_cls]
        if value is None or value == "":
            add(key, "is required")
        elif value not in allowed:
            add(key, f"must be one of: {', '.join(allowed)}")

    founded = doc.get("founded_date")
    if founded is None or founded == "":
        add("founded_date", "is required")
    elif not isinstance(founded, date):
        add("founded_date", "must be a date (YYYY-MM-DD)")

    for key, (low, high) in _NUMERIC_BOUNDS.items():
        value = doc.get(key)
        if value is None or value == "":
            add(key, "is required")
        elif isinstance(value, bool) or not isinstance(value, (int, float)):
            add(key, "must be a number")
        elif not math.isfinite(value):
            # nan and inf slip past both bounds
            add(key, "must be a number")
        elif value < low:
            add(key, f"must be at least {low}")
        elif high is not None and value > high:
            add(key, f"must be at most {high}")

    methods = doc.get("preferred_contact_method")
    allowed_methods = [member.value for member in ContactMethod]
    if methods is not None:
        if not isinstance(methods, (list, tuple)):
            add("preferred_contact_method", "must be a list")
        else:
            for method in methods:
                if method not in allowed_methods:
                    add(
                        "preferred_contact_method",
                        f"'{method}' is not one of: {', '.join(allowed_methods)}",
                    )

    newsletter = doc.get("newsletter_subscription")
    if newsletter is not None and not isinstance(newsletter, bool):
        add("newsletter_subscription", "must be true or false")

    if doc.get("startup_owner") is None:
        violations.append(("startupOwner", "is required"))

    return violations


def validate_credentials(username: Optional[str], password: Optional[str]) -> List[Violation]:
    """Signup rules: username length and password strength."""

    violations: List[Violation] = []
    username = (username or "").strip()
    if not username:
        violations.append(("username", "Username is required"))
    elif len(username) < USERNAME_MIN_LENGTH:
        violations.append(
            ("username", f"Username must be at least {USERNAME_MIN_LENGTH} characters long")
        )

    password = password or ""
    if not password:
        violations.append(("password", "Password is required"))
    elif len(password) < PASSWORD_MIN_LENGTH:
        violations.append(
            ("password", f"Password must be at least {PASSWORD_MIN_LENGTH} characters long")
        )
    elif not all(re.search(pattern, password) for pattern in _PASSWORD_CLASSES):
        violations.append(
            (
                "password",
                "Password must include uppercase, lowercase, number, and special character",
            )
        )
    return violations
