"""View counting and activity logging."""

from .models import ActivityAction, ActivityLogEntry
from .recorder import ActivityRecorder, recorder

__all__ = [
	"ActivityAction",
	"ActivityLogEntry",
	"ActivityRecorder",
	"recorder",
]
