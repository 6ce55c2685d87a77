"""Contact form intake."""

from .service import THANK_YOU_MESSAGE, ContactService
from .validation import ContactSubmission, validate_contact

__all__ = [
	"THANK_YOU_MESSAGE",
	"ContactService",
	"ContactSubmission",
	"validate_contact",
]
