"""Validation for inbound contact form submissions."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from orgcms.domain.errors import FieldError, ValidationError

MIN_NAME_LENGTH = 3
MIN_MESSAGE_LENGTH = 10

# local@domain.tld, no whitespace; deliberately not RFC 5322.
_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


@dataclass(slots=True)
class ContactSubmission:
	name: str
	email: str
	message: str
	subject: Optional[str] = None


def _text(payload: Mapping[str, Any], key: str) -> str:
	value = payload.get(key)
	return value.strip() if isinstance(value, str) else ""


def validate_contact(payload: Mapping[str, Any]) -> ContactSubmission:
	"""Check name, email and message; report every failing field at once."""

	name = _text(payload, "name")
	email = _text(payload, "email")
	message = _text(payload, "message")

	errors: list[FieldError] = []
	if len(name) < MIN_NAME_LENGTH:
		errors.append(FieldError("name", f"Name must be at least {MIN_NAME_LENGTH} characters"))
	if not _EMAIL_RE.match(email):
		errors.append(FieldError("email", "Email address is not valid"))
	if len(message) < MIN_MESSAGE_LENGTH:
		errors.append(FieldError("message", f"Message must be at least {MIN_MESSAGE_LENGTH} characters"))
	if errors:
		raise ValidationError(errors)

	subject = _text(payload, "subject") or None
	return ContactSubmission(name=name, email=email, message=message, subject=subject)
