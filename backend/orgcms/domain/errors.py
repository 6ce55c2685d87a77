"""Error taxonomy shared by the structure, content and contact services."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(slots=True)
class FieldError:
	field: str
	reason: str

	def as_dict(self) -> dict[str, str]:
		return {"field": self.field, "reason": self.reason}


class OrgCmsError(Exception):
	"""Base class for business outcomes surfaced to API callers."""

	code = "error"
	status_code = 400

	def __init__(self, message: str, *, code: Optional[str] = None) -> None:
		super().__init__(message)
		self.message = message
		if code is not None:
			self.code = code

	def __str__(self) -> str:  # pragma: no cover - debugging aid
		return self.message


class NotFoundError(OrgCmsError):
	code = "not_found"
	status_code = 404


class InvalidQueryError(OrgCmsError):
	code = "invalid_query"
	status_code = 400


class ValidationError(OrgCmsError):
	"""Carries every failing field, in the order they were checked."""

	code = "validation_error"
	status_code = 422

	def __init__(self, errors: list[FieldError]) -> None:
		message = "; ".join(f"{err.field}: {err.reason}" for err in errors) or "invalid input"
		super().__init__(message)
		self.errors = list(errors)

	@property
	def fields(self) -> list[str]:
		return [err.field for err in self.errors]


class StoreError(OrgCmsError):
	"""Wraps record store failures; never exposes its cause on the wire."""

	code = "internal_error"
	status_code = 500

	def __init__(self, operation: str, collection: str, cause: Optional[BaseException] = None) -> None:
		super().__init__(f"store {operation} failed for {collection}")
		self.operation = operation
		self.collection = collection
		self.cause = cause

