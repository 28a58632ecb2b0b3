"""
Sentry configuration and data scrubbing.

Initialises the Sentry SDK for the POS backend and strips credentials and
customer contact details (phone numbers, e-mail addresses) from every event
before it leaves the process.
"""

import re
from typing import Any, Dict, Optional

import sentry_sdk
from sentry_sdk.integrations.django import DjangoIntegration
from sentry_sdk.integrations.logging import LoggingIntegration

# Key fragments whose values are always replaced
SENSITIVE_KEYS = {
    "password",
    "secret",
    "token",
    "api_key",
    "access",
    "refresh",
    "authorization",
    "cookie",
    "csrf",
    "session",
    "phone",
    "email",
    "address",
}

EMAIL_PATTERN = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
# Indonesian mobile numbers: 08xx or +628xx followed by 7-10 digits
PHONE_PATTERN = re.compile(r"(?:\+62|\b0)8\d{7,10}\b")


def scrub_sensitive_data(data: Any) -> Any:
    """Recursively mask sensitive values in dicts, lists and strings."""
    if isinstance(data, dict):
        return {
            key: "[REDACTED]" if _is_sensitive_key(key) else scrub_sensitive_data(value)
            for key, value in data.items()
        }
    if isinstance(data, list):
        return [scrub_sensitive_data(item) for item in data]
    if isinstance(data, str):
        return _scrub_string(data)
    return data


def _is_sensitive_key(key: Any) -> bool:
    key_lower = str(key).lower()
    return any(sensitive in key_lower for sensitive in SENSITIVE_KEYS)


def _scrub_string(text: str) -> str:
    text = EMAIL_PATTERN.sub(lambda m: _mask_email(m.group(0)), text)
    return PHONE_PATTERN.sub(lambda m: f"XXXX{m.group(0)[-4:]}", text)


def _mask_email(email: str) -> str:
    """
    Partially mask an email address.

    Returns:
        Masked email (e.g., an***@example.com)
    """
    local, _, domain = email.partition("@")
    if not local or not domain:
        return "REDACTED@EMAIL"
    return f"{local[:2]}***@{domain}"


def before_send(event: Dict[str, Any], hint: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Sentry before_send hook.

    Scrubs request data, extra context, user details, exception messages and
    breadcrumbs. Never drops an event.
    """
    request = event.get("request")
    if request:
        for field in ("headers", "query_string", "data"):
            if field in request:
                request[field] = scrub_sensitive_data(request[field])
        if "cookies" in request:
            request["cookies"] = {k: "[REDACTED]" for k in request["cookies"]}

    if "extra" in event:
        event["extra"] = scrub_sensitive_data(event["extra"])

    user = event.get("user")
    if user:
        if "email" in user:
            user["email"] = _mask_email(user["email"])
        if "ip_address" in user:
            user["ip_address"] = "XXX.XXX.XXX.XXX"

    for exception in event.get("exception", {}).get("values", []):
        if "value" in exception:
            exception["value"] = _scrub_string(exception["value"])

    for breadcrumb in event.get("breadcrumbs", {}).get("values", []):
        if "data" in breadcrumb:
            breadcrumb["data"] = scrub_sensitive_data(breadcrumb["data"])
        if "message" in breadcrumb:
            breadcrumb["message"] = _scrub_string(breadcrumb["message"])

    return event


def initialize_sentry(
    dsn: Optional[str],
    environment: str = "development",
    traces_sample_rate: float = 0.1,
    release: Optional[str] = None,
) -> None:
    """
    Initialize the Sentry SDK with the Django and logging integrations.

    Args:
        dsn: Sentry DSN. If empty, Sentry stays disabled.
        environment: Environment name (development, staging, production)
        traces_sample_rate: Share of requests to trace (0.0 to 1.0)
        release: Release version string
    """
    if not dsn:
        return

    sentry_sdk.init(
        dsn=dsn,
        environment=environment,
        release=release,
        traces_sample_rate=traces_sample_rate,
        integrations=[
            DjangoIntegration(transaction_style="url"),
            # Settlement failures are logged at ERROR; ship those as events
            LoggingIntegration(event_level="ERROR"),
        ],
        before_send=before_send,
        send_default_pii=False,
        attach_stacktrace=True,
        max_breadcrumbs=50,
    )
