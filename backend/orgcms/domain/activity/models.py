"""Activity log entries written for administrative actions."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional


class ActivityAction(str, Enum):
	CREATE = "create"
	UPDATE = "update"
	DELETE = "delete"
	LOGIN = "login"
	LOGOUT = "logout"


@dataclass(slots=True)
class ActivityLogEntry:
	action: ActivityAction
	user_id: str
	collection: Optional[str] = None
	document_id: Optional[str] = None
	details: Optional[str] = None
	ip_address: Optional[str] = None
	created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

	def to_doc(self) -> dict[str, Any]:
		return {
			"action": self.action.value,
			"user": self.user_id,
			"collection": self.collection,
			"documentId": self.document_id,
			"details": self.details,
			"ipAddress": self.ip_address,
			"createdAt": self.created_at.isoformat(),
		}
