"""Persists validated contact submissions for administrators to follow up."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from orgcms.domain.contact.validation import validate_contact
from orgcms.domain.errors import ValidationError
from orgcms.infra.records import CONTACT_MESSAGES, Document, RecordStore
from orgcms.infra.store import get_store
from orgcms.obs import metrics as obs_metrics

logger = logging.getLogger(__name__)

THANK_YOU_MESSAGE = "Your message has been sent. Thank you!"


class ContactService:
	def __init__(self, store: Optional[RecordStore] = None) -> None:
		self._store = store

	@property
	def store(self) -> RecordStore:
		return self._store or get_store()

	async def submit(self, payload: Mapping[str, Any], *, ip_address: Optional[str] = None) -> Document:
		try:
			submission = validate_contact(payload)
		except ValidationError as exc:
			obs_metrics.inc_contact_submission("invalid")
			logger.info("contact_rejected", extra={"fields": exc.fields})
			raise
		doc = await self.store.create(
			CONTACT_MESSAGES,
			{
				"name": submission.name,
				"email": submission.email,
				"subject": submission.subject,
				"message": submission.message,
				"status": "new",
				"ipAddress": ip_address,
			},
		)
		obs_metrics.inc_contact_submission("accepted")
		logger.info("contact_submitted", extra={"contact_id": doc["id"]})
		return doc
